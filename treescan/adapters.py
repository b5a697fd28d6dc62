"""
Content adapters consumers apply to files found by the scanner.

- CRC32 digests over bytes or streamed file content
- Streaming compressors keyed by algorithm name

The scanner itself never calls into this module.
"""

from __future__ import annotations

import bz2
import lzma
import os
import zlib
from collections.abc import AsyncIterator, Callable
from typing import Protocol

import aiofiles

from .exceptions import UnsupportedAlgorithm

DEFAULT_CHUNK = 1024 * 1024


class Compressor(Protocol):
    def compress(self, data: bytes) -> bytes: ...

    def flush(self) -> bytes: ...


# name -> factory; wbits picks the zlib container (31 gzip, 15 zlib, -15 raw)
COMPRESSORS: dict[str, Callable[[], Compressor]] = {
    "gzip": lambda: zlib.compressobj(wbits=31),
    "deflate": lambda: zlib.compressobj(wbits=15),
    "deflate-raw": lambda: zlib.compressobj(wbits=-15),
    "bz2": bz2.BZ2Compressor,
    "xz": lambda: lzma.LZMACompressor(format=lzma.FORMAT_XZ),
    "lzma": lambda: lzma.LZMACompressor(format=lzma.FORMAT_XZ),
}


def crc32(data: bytes, seed: int = 0) -> int:
    """Unsigned CRC32 of data, continuing from seed."""
    return zlib.crc32(data, seed) & 0xFFFFFFFF


async def crc32_file(
    path: str | os.PathLike[str],
    chunk_size: int = DEFAULT_CHUNK,
    buffer: bytearray | None = None,
) -> int:
    """
    CRC32 of a file's content, read in chunks.

    When buffer is given (e.g. a BufferPool block) reads go into it and
    chunk_size is ignored.
    """
    crc = 0
    async with aiofiles.open(path, "rb") as f:
        if buffer is not None and len(buffer) > 0:
            view = memoryview(buffer)
            while True:
                n = await f.readinto(view)
                if not n:
                    break
                crc = crc32(view[:n], crc)
            return crc
        while True:
            chunk = await f.read(chunk_size)
            if not chunk:
                break
            crc = crc32(chunk, crc)
    return crc


def compression_stream(algorithm: str) -> Compressor:
    """New streaming compressor for algorithm (case-insensitive)."""
    factory = COMPRESSORS.get(algorithm.lower())
    if factory is None:
        raise UnsupportedAlgorithm(
            f"Unknown compression algorithm: {algorithm}",
            details={"available": sorted(COMPRESSORS)},
        )
    return factory()


async def compress_file(
    path: str | os.PathLike[str],
    algorithm: str,
    chunk_size: int = DEFAULT_CHUNK,
) -> AsyncIterator[bytes]:
    """Yield compressed chunks of a file's content. Empty chunks are skipped."""
    compressor = compression_stream(algorithm)
    async with aiofiles.open(path, "rb") as f:
        while True:
            chunk = await f.read(chunk_size)
            if not chunk:
                break
            out = compressor.compress(chunk)
            if out:
                yield out
    tail = compressor.flush()
    if tail:
        yield tail
