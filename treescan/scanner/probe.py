"""Lightweight filesystem probes: existence batches and file size."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Sequence

import aiofiles.os

logger = logging.getLogger(__name__)


async def path_exists(path: str) -> bool:
    """True if an entry exists at path. Any probe failure counts as absent."""
    try:
        return await aiofiles.os.path.exists(path)
    except (OSError, ValueError) as e:
        logger.debug(f"Existence probe failed for {path}: {e}")
        return False


async def check_all(paths: Sequence[str], concurrency: int | None = None) -> list[bool]:
    """
    Probe every path concurrently.

    Args:
        paths: Paths to probe
        concurrency: Optional cap on probes in flight

    Returns:
        One bool per path, in input order regardless of completion order.
    """
    if not paths:
        return []
    if concurrency is None or concurrency <= 0:
        return list(await asyncio.gather(*(path_exists(p) for p in paths)))

    limiter = asyncio.Semaphore(concurrency)

    async def _limited(p: str) -> bool:
        async with limiter:
            return await path_exists(p)

    return list(await asyncio.gather(*(_limited(p) for p in paths)))


async def probe_file(path: str) -> tuple[int, float]:
    """Return (size, mtime) for path. OSError propagates to the caller."""
    st = await aiofiles.os.stat(path)
    return st.st_size, st.st_mtime
