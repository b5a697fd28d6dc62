"""Tree scanner: lazy depth-first, pre-order walk that streams flat Nodes."""

from __future__ import annotations

import asyncio
import logging
import os
from collections.abc import AsyncIterator, Callable
from dataclasses import dataclass

import aiofiles.os

from ..exceptions import ScanAccessError
from ..models import Node, NodeKind, make_node
from .probe import probe_file

logger = logging.getLogger(__name__)

HIDDEN_PREFIX = "."

ScoreFn = Callable[[str, NodeKind, int], float]  # (path, kind, size) -> risk score


@dataclass
class ScanOptions:
    """Knobs for scan_tree. Defaults reproduce a plain unbounded walk."""

    yield_every_levels: int | None = None  # cooperative yield at positive multiples of N
    include_hidden: bool = False
    max_depth: int | None = None  # directories at this depth are emitted but not entered
    score: ScoreFn | None = None  # risk_score defaults to 1.0
    cancelled: Callable[[], bool] | None = None  # checked before each descent

    def is_cancelled(self) -> bool:
        return self.cancelled is not None and self.cancelled()


def _entry_name(path: str) -> str:
    return os.path.basename(os.path.normpath(path)) or path


def _make(path: str, name: str, kind: NodeKind, size: int, mtime: float, depth: int, options: ScanOptions) -> Node:
    risk = options.score(path, kind, size) if options.score else 1.0
    return make_node(path, name, kind, size, mtime, depth, risk)


async def _cooperative_yield() -> None:
    """Let other tasks run. Emitted data and order are unaffected."""
    await asyncio.sleep(0)


def _access_error(path: str, operation: str, exc: OSError) -> ScanAccessError:
    logger.warning(f"Cannot {operation} {path}: {exc}")
    return ScanAccessError(
        f"{operation} failed: {exc.strerror or exc}",
        path=path,
        operation=operation,
        context="scanning directory tree",
    )


async def _walk(path: str, depth: int, options: ScanOptions) -> AsyncIterator[Node]:
    if options.is_cancelled():
        return
    name = _entry_name(path)

    entries: list[str] | None = None
    try:
        entries = await aiofiles.os.listdir(path)
    except FileNotFoundError:
        return
    except NotADirectoryError:
        pass
    except OSError as e:
        raise _access_error(path, "listdir", e) from e

    if entries is None:
        # Not a directory: a single file record
        try:
            size, mtime = await probe_file(path)
        except FileNotFoundError:
            return
        except OSError as e:
            raise _access_error(path, "stat", e) from e
        yield _make(path, name, NodeKind.FILE, size, mtime, depth, options)
        return

    yield _make(path, name, NodeKind.DIRECTORY, 0, 0.0, depth, options)

    every = options.yield_every_levels
    if every and every > 0 and depth > 0 and depth % every == 0:
        await _cooperative_yield()

    if options.max_depth is not None and depth >= options.max_depth:
        return

    for entry in entries:
        if not options.include_hidden and entry.startswith(HIDDEN_PREFIX):
            continue
        if options.is_cancelled():
            logger.debug(f"Scan cancelled under {path}")
            return
        async for node in _walk(os.path.join(path, entry), depth + 1, options):
            yield node


async def scan_tree(
    root: str | os.PathLike[str],
    depth: int = 0,
    options: ScanOptions | None = None,
) -> AsyncIterator[Node]:
    """
    Walk root depth-first, yielding a Node per visible entry.

    A directory's own Node comes before any of its descendants; siblings are
    visited in listing order. A missing root yields nothing; a root that is a
    file yields one File Node at `depth`. Hidden entries (leading ".") are
    skipped with their whole subtree.

    Raises:
        ScanAccessError: a listing or size probe failed for a reason other
            than the path being absent or not a directory
    """
    options = options or ScanOptions()
    root_path = os.fspath(root)
    logger.debug(f"Scanning {root_path} from depth {depth}")
    count = 0
    async for node in _walk(root_path, depth, options):
        count += 1
        yield node
    logger.debug(f"Scan of {root_path} produced {count} nodes")


async def collect_tree(
    root: str | os.PathLike[str],
    depth: int = 0,
    options: ScanOptions | None = None,
) -> list[Node]:
    """Drain scan_tree into a list."""
    return [node async for node in scan_tree(root, depth, options)]
