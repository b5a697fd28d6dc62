"""Integration tests: scan, accumulate and checksum on real temp trees."""

import asyncio
import tempfile
import zlib
from pathlib import Path

import pytest

from treescan.adapters import crc32_file
from treescan.pool import BufferPool
from treescan.risk import RiskAccumulator, size_score
from treescan.scanner import ScanOptions, check_all, scan_tree


def test_full_pipeline_accumulates_every_node():
    with tempfile.TemporaryDirectory() as d:
        root = Path(d)
        for i in range(40):
            sub = root / f"dir{i % 4}"
            sub.mkdir(exist_ok=True)
            (sub / f"f{i}.txt").write_bytes(b"x" * i)

        async def run():
            acc = RiskAccumulator(8)
            count = 0
            async for node in scan_tree(d, options=ScanOptions(yield_every_levels=1)):
                acc.accumulate(node.risk_score)
                count += 1
            return acc, count

        acc, count = asyncio.run(run())
    assert count == 1 + 4 + 40
    assert acc.total() == pytest.approx(45.0)
    assert acc.capacity >= 45


def test_size_scores_and_pooled_checksums(tmp_path):
    (tmp_path / "a.bin").write_bytes(b"a" * 2048)
    (tmp_path / "b.bin").write_bytes(b"b" * 10)
    pool = BufferPool(4096)

    async def run():
        acc = RiskAccumulator()
        sums = {}
        with pool.block("io", 512) as buf:
            async for node in scan_tree(tmp_path, options=ScanOptions(score=size_score)):
                acc.accumulate(node.risk_score)
                if not node.is_dir:
                    sums[node.name] = await crc32_file(node.path, buffer=buf)
        return acc.total(), sums

    total, sums = asyncio.run(run())
    assert total == pytest.approx(3.0 + (2048 + 10) / (1024 * 1024))
    assert sums["a.bin"] == zlib.crc32(b"a" * 2048)
    assert sums["b.bin"] == zlib.crc32(b"b" * 10)
    assert pool.stats().allocated == 0


def test_scanned_paths_all_exist(tmp_path):
    (tmp_path / "x" / "y").mkdir(parents=True)
    (tmp_path / "x" / "y" / "z.txt").write_text("z")

    async def run():
        paths = [n.path async for n in scan_tree(tmp_path)]
        return paths, await check_all(paths + [str(tmp_path / "gone")])

    paths, found = asyncio.run(run())
    assert found == [True] * len(paths) + [False]
