"""Tests for checksum and compression adapters."""

import asyncio
import gzip
import lzma
import zlib

import pytest

from treescan.adapters import compress_file, compression_stream, crc32, crc32_file
from treescan.exceptions import UnsupportedAlgorithm

CONTENT = b"treescan " * 5000


async def _compressed(path, algorithm, chunk_size=4096):
    return b"".join([c async for c in compress_file(path, algorithm, chunk_size)])


def test_crc32_known_value():
    assert crc32(b"hello") == 0x3610A686
    assert crc32(b"hello") == crc32(b"hello")


def test_crc32_seed_chains():
    assert crc32(b"world", crc32(b"hello ")) == crc32(b"hello world")


def test_crc32_file_matches_bytes(tmp_path):
    f = tmp_path / "data.bin"
    f.write_bytes(CONTENT)
    assert asyncio.run(crc32_file(str(f), chunk_size=1000)) == zlib.crc32(CONTENT)


def test_crc32_file_with_pooled_buffer(tmp_path):
    f = tmp_path / "data.bin"
    f.write_bytes(CONTENT)
    buf = bytearray(333)
    assert asyncio.run(crc32_file(str(f), buffer=buf)) == zlib.crc32(CONTENT)


def test_crc32_file_empty(tmp_path):
    f = tmp_path / "empty"
    f.write_bytes(b"")
    assert asyncio.run(crc32_file(str(f))) == 0


def test_gzip_stream_round_trip(tmp_path):
    f = tmp_path / "data.txt"
    f.write_bytes(CONTENT)
    assert gzip.decompress(asyncio.run(_compressed(str(f), "gzip"))) == CONTENT


def test_xz_stream_round_trip(tmp_path):
    f = tmp_path / "data.txt"
    f.write_bytes(CONTENT)
    assert lzma.decompress(asyncio.run(_compressed(str(f), "XZ"))) == CONTENT


def test_compression_stream_incremental():
    c = compression_stream("deflate-raw")
    out = c.compress(b"abc") + c.compress(b"def") + c.flush()
    assert zlib.decompress(out, -15) == b"abcdef"


def test_unknown_algorithm():
    with pytest.raises(UnsupportedAlgorithm) as exc_info:
        compression_stream("zip9000")
    assert "zip9000" in str(exc_info.value)
