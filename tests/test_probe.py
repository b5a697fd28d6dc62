"""Tests for existence probes."""

import asyncio
from unittest.mock import patch

import aiofiles.os

from treescan.scanner import check_all, path_exists, probe_file


def test_check_all_real_paths(tmp_path):
    present = tmp_path / "here.txt"
    present.write_text("x")
    (tmp_path / "dir").mkdir()
    paths = [str(present), str(tmp_path / "missing"), str(tmp_path / "dir")]
    assert asyncio.run(check_all(paths)) == [True, False, True]


def test_check_all_keeps_input_order_regardless_of_completion():
    """The first path resolves last; results still follow input order."""
    delays = {"slow": 0.05, "fast": 0.0}

    async def fake_exists(path):
        await asyncio.sleep(delays[path])
        return path == "slow"

    with patch.object(aiofiles.os.path, "exists", fake_exists):
        assert asyncio.run(check_all(["slow", "fast"])) == [True, False]


def test_probe_failure_counts_as_missing():
    async def fake_exists(path):
        if path == "denied":
            raise PermissionError(13, "Permission denied", path)
        return True

    with patch.object(aiofiles.os.path, "exists", fake_exists):
        assert asyncio.run(check_all(["a", "denied", "b"])) == [True, False, True]


def test_check_all_concurrency_bound():
    in_flight = 0
    peak = 0

    async def fake_exists(path):
        nonlocal in_flight, peak
        in_flight += 1
        peak = max(peak, in_flight)
        await asyncio.sleep(0.01)
        in_flight -= 1
        return True

    with patch.object(aiofiles.os.path, "exists", fake_exists):
        results = asyncio.run(check_all([f"p{i}" for i in range(6)], concurrency=2))
    assert results == [True] * 6
    assert peak == 2


def test_check_all_empty():
    assert asyncio.run(check_all([])) == []


def test_path_exists_invalid_path():
    """Embedded NUL bytes are not an error, just absent."""
    assert asyncio.run(path_exists("bad\0path")) is False


def test_probe_file_size(tmp_path):
    f = tmp_path / "f.bin"
    f.write_bytes(b"abc")
    size, mtime = asyncio.run(probe_file(str(f)))
    assert size == 3
    assert mtime > 0
