"""Risk aggregation: growable double buffer with doubling growth."""

import math
from array import array
from itertools import islice
from typing import Iterable

from .models import NodeKind

DEFAULT_RISK_CAPACITY = 1024

# Bytes per extra risk point in size_score (1 MiB adds 1.0)
SIZE_RISK_UNIT = 1024 * 1024


class RiskAccumulator:
    """
    Collects risk scores emitted during a scan and reports their sum.

    Values live in a contiguous array of doubles. When the array is full its
    capacity doubles before the write; existing values are copied, never
    dropped. The first `count` slots always sum to total().
    """

    def __init__(self, capacity: int = DEFAULT_RISK_CAPACITY):
        if capacity <= 0:
            raise ValueError(f"capacity must be positive, got {capacity}")
        self._buffer = array("d", bytes(array("d").itemsize * capacity))
        self._count = 0

    @property
    def capacity(self) -> int:
        return len(self._buffer)

    @property
    def count(self) -> int:
        return self._count

    def __len__(self) -> int:
        return self._count

    def accumulate(self, value: float) -> None:
        if self._count >= len(self._buffer):
            self._grow()
        self._buffer[self._count] = value
        self._count += 1

    def extend(self, values: Iterable[float]) -> None:
        for v in values:
            self.accumulate(v)

    def total(self) -> float:
        """Sum of everything accumulated since creation or the last reset()."""
        try:
            return math.fsum(islice(self._buffer, self._count))
        except (OverflowError, ValueError):
            # fsum refuses inf - inf and overflowing partials; plain addition gives inf/nan
            return sum(islice(self._buffer, self._count))

    def reset(self) -> None:
        """Forget all values. The backing buffer is kept for reuse."""
        self._count = 0

    def _grow(self) -> None:
        grown = array("d", bytes(self._buffer.itemsize * len(self._buffer) * 2))
        grown[: self._count] = self._buffer[: self._count]
        self._buffer = grown


def size_score(path: str, kind: NodeKind, size: int) -> float:
    """Score hook for ScanOptions.score: 1.0 per entry plus 1.0 per MiB of file data."""
    if kind == NodeKind.DIRECTORY:
        return 1.0
    return 1.0 + size / SIZE_RISK_UNIT
