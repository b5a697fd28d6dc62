"""CLI entry point — scan a tree, aggregate risk, print clearly."""

import asyncio
import json
import stat
import sys
from pathlib import Path
from typing import Optional

import aiofiles
import aiofiles.os
import click
import typer

from .adapters import COMPRESSORS, DEFAULT_CHUNK, compress_file, compression_stream, crc32_file
from .config import ScanConfig, load_config
from .exceptions import ConfigError, ScanAccessError, UnsupportedAlgorithm
from .format import ScanSummary, format_json, format_node, format_summary
from .logging_config import setup_logging
from .pool import BufferPool
from .risk import RiskAccumulator, size_score
from .scanner import check_all, scan_tree


def _err(msg: str) -> None:
    """Print a styled error and exit 2; used for all CLI errors."""
    typer.secho(f"Error: {msg}", fg="red", err=True)
    raise typer.Exit(2)


_SUBCOMMANDS = {"exists", "compress"}

# Options that take a value; the token after them is not a path
_VALUE_OPTIONS = ("--path", "-p", "--config", "-c", "--max-depth", "--yield-every")


def _preprocess_argv():
    """Fix argv so `treescan /some/dir --json` works via -p."""
    argv = sys.argv[1:]
    if not argv:
        return
    first = argv[0]
    if first in _SUBCOMMANDS or first.startswith("-"):
        return
    opt_tokens = ["-p", first]
    i = 1
    while i < len(argv):
        t = argv[i]
        if t.startswith("-"):
            opt_tokens.append(t)
            i += 1
            if "=" not in t and i < len(argv) and not argv[i].startswith("-") and t in _VALUE_OPTIONS:
                opt_tokens.append(argv[i])
                i += 1
        else:
            opt_tokens.extend(["-p", t])
            i += 1
    sys.argv[1:] = opt_tokens


app = typer.Typer(help="Stream a directory tree depth-first and total its risk scores.")


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    path: Path = typer.Option(Path("."), "--path", "-p", help="Root to scan (default: .)"),
    json_out: bool = typer.Option(False, "--json", "-j", help="Output as JSON"),
    hidden: bool = typer.Option(False, "--hidden", help="Include entries whose name starts with '.'"),
    max_depth: Optional[int] = typer.Option(None, "--max-depth", help="Do not descend below this depth"),
    yield_every: Optional[int] = typer.Option(None, "--yield-every", help="Cooperative yield every N levels"),
    crc: bool = typer.Option(False, "--crc", help="Add a CRC32 of each file"),
    by_size: bool = typer.Option(False, "--score-size", help="Score files by size instead of a flat 1.0"),
    config_file: Optional[Path] = typer.Option(None, "--config", "-c", help="YAML config file"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging to stderr"),
    log_json: bool = typer.Option(False, "--log-json", help="Log as JSON lines"),
) -> None:
    """Scan a directory tree and report nodes plus the risk total."""
    if ctx.invoked_subcommand is not None:
        return
    setup_logging(verbose=verbose, json_format=log_json)

    search_dir = path if path.is_dir() else path.parent
    try:
        config = load_config(config_file, search_dir=search_dir)
    except ConfigError as e:
        _err(str(e))

    overrides = {"score": size_score if by_size else None}
    if hidden:
        overrides["include_hidden"] = True
    if max_depth is not None:
        overrides["max_depth"] = max_depth
    if yield_every is not None:
        overrides["yield_every_levels"] = yield_every
    options = config.scan_options(**overrides)

    # Default instances live here, at the composition boundary
    accumulator = RiskAccumulator(config.accumulator_capacity)
    pool = BufferPool(config.pool_max_bytes)

    summary = asyncio.run(_run_scan(str(path), options, accumulator, pool, crc, json_out))
    if summary.error:
        raise typer.Exit(1)


async def _run_scan(root, options, accumulator, pool, crc, json_out) -> ScanSummary:
    """Consume the scan, echoing each node and feeding the accumulator."""
    summary = ScanSummary(root=root)
    nodes: list[dict] = []
    pool_stats = None
    buf = pool.allocate("crc32", DEFAULT_CHUNK) if crc else None
    try:
        async for node in scan_tree(root, 0, options):
            summary.add(node)
            accumulator.accumulate(node.risk_score)
            checksum = None
            if buf is not None and not node.is_dir:
                try:
                    # FIFOs and devices would block or never end
                    if stat.S_ISREG((await aiofiles.os.stat(node.path)).st_mode):
                        checksum = await crc32_file(node.path, buffer=buf)
                except OSError as e:
                    typer.echo(f"crc32 skipped for {node.path}: {e}", err=True)
            if json_out:
                item = node.to_dict()
                if checksum is not None:
                    item["crc32"] = checksum
                nodes.append(item)
            else:
                typer.echo(format_node(node, crc=checksum))
    except ScanAccessError as e:
        summary.error = str(e)
    finally:
        pool_stats = pool.stats()
        pool.free("crc32")

    summary.risk_total = accumulator.total()
    summary.risk_count = accumulator.count
    if json_out:
        typer.echo(format_json(nodes, summary, pool_stats if crc else None))
    else:
        typer.echo(format_summary(summary, pool_stats if crc else None))
    return summary


@app.command("exists")
def exists_cmd(
    paths: list[str] = typer.Argument(..., help="Paths to probe"),
    json_out: bool = typer.Option(False, "--json", "-j", help="JSON output"),
    concurrency: Optional[int] = typer.Option(None, "--concurrency", help="Max probes in flight"),
) -> None:
    """Check which paths exist; answers keep input order."""
    if concurrency is None:
        concurrency = ScanConfig().probe_concurrency
    results = asyncio.run(check_all(paths, concurrency=concurrency))
    if json_out:
        typer.echo(json.dumps([{"path": p, "exists": ok} for p, ok in zip(paths, results)], indent=2))
        return
    for p, ok in zip(paths, results):
        mark = click.style("yes", fg="green") if ok else click.style("no", fg="red")
        typer.echo(f"{mark}  {p}")


@app.command("compress")
def compress_cmd(
    source: Path = typer.Argument(..., exists=True, dir_okay=False, help="File to compress"),
    algorithm: str = typer.Option("gzip", "-a", "--algorithm", help=f"One of: {', '.join(sorted(COMPRESSORS))}"),
    output: Optional[Path] = typer.Option(None, "-o", help="Output file (default: SOURCE.<algorithm>)"),
) -> None:
    """Stream a file through a compressor."""
    try:
        compression_stream(algorithm)
    except UnsupportedAlgorithm as e:
        _err(str(e))
    target = output or source.with_name(f"{source.name}.{algorithm.lower()}")
    written = asyncio.run(_compress(source, target, algorithm))
    typer.echo(f"Wrote {target} ({written} bytes)", err=True)


async def _compress(source: Path, target: Path, algorithm: str) -> int:
    written = 0
    async with aiofiles.open(target, "wb") as out:
        async for chunk in compress_file(source, algorithm):
            await out.write(chunk)
            written += len(chunk)
    return written


def _main() -> None:
    """Entry point: preprocess argv (treescan DIR -> treescan -p DIR), then run app."""
    _preprocess_argv()
    app()


if __name__ == "__main__":
    _main()
