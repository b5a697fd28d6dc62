"""Named scratch-buffer pool with a soft byte budget."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import asdict, dataclass

from .exceptions import PoolBudgetExceeded

logger = logging.getLogger(__name__)

DEFAULT_POOL_MAX_BYTES = 128 * 1024 * 1024


@dataclass(frozen=True)
class PoolStats:
    allocated: int
    free: int  # negative when the soft budget is exceeded
    total: int
    utilization: str  # e.g. "12.50%"

    def to_dict(self) -> dict:
        return asdict(self)


class BufferPool:
    """
    Tracks named blocks against a byte budget.

    The budget is soft by default: allocations past max_size succeed and show
    up as negative `free` in stats(). With strict=True they raise
    PoolBudgetExceeded instead.
    """

    def __init__(self, max_size: int = DEFAULT_POOL_MAX_BYTES, strict: bool = False):
        if max_size <= 0:
            raise ValueError(f"max_size must be positive, got {max_size}")
        self.max_size = max_size
        self.strict = strict
        self.allocations: dict[str, bytearray] = {}

    def allocate(self, block_id: str, size: int) -> bytearray:
        """Create or replace the block named block_id."""
        if size < 0:
            raise ValueError(f"size must be non-negative, got {size}")
        previous = len(self.allocations.get(block_id, b""))
        projected = self._allocated() - previous + size
        if projected > self.max_size:
            if self.strict:
                raise PoolBudgetExceeded(
                    "Allocation exceeds pool budget",
                    context=f"allocating {block_id!r}",
                    details={"size": size, "allocated": projected - size, "max_size": self.max_size},
                )
            logger.warning(f"Pool over budget after allocating {block_id!r}: {projected} of {self.max_size} bytes")
        block = bytearray(size)
        self.allocations[block_id] = block
        return block

    def free(self, block_id: str) -> bool:
        """Release block_id. True if it existed."""
        return self.allocations.pop(block_id, None) is not None

    def clear(self) -> None:
        self.allocations.clear()

    @contextmanager
    def block(self, block_id: str, size: int) -> Iterator[bytearray]:
        """Allocate for the duration of a with-block, then free."""
        buf = self.allocate(block_id, size)
        try:
            yield buf
        finally:
            self.free(block_id)

    def stats(self) -> PoolStats:
        allocated = self._allocated()
        total = self.max_size
        return PoolStats(
            allocated=allocated,
            free=total - allocated,
            total=total,
            utilization=f"{allocated / total * 100:.2f}%",
        )

    def _allocated(self) -> int:
        return sum(len(b) for b in self.allocations.values())
