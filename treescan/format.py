"""Terminal output formatting: node lines, summary box, JSON document."""

import json
import shutil
from dataclasses import asdict, dataclass
from typing import List, Optional

import click

from .models import Node
from .pool import PoolStats


@dataclass
class ScanSummary:
    """Totals gathered by the CLI while consuming a scan."""

    root: str
    files: int = 0
    dirs: int = 0
    bytes_total: int = 0
    risk_total: float = 0.0
    risk_count: int = 0
    error: Optional[str] = None  # set when a branch failed and the scan stopped

    def add(self, node: Node) -> None:
        if node.is_dir:
            self.dirs += 1
        else:
            self.files += 1
            self.bytes_total += node.size


def _get_width() -> int:
    try:
        return min(72, shutil.get_terminal_size((72, 24)).columns)
    except OSError:
        return 72


def format_bytes(num: int) -> str:
    if num < 0:
        return str(num)
    units = ["B", "KB", "MB", "GB", "TB", "PB"]
    x = float(num)
    for u in units:
        if x < 1024.0 or u == units[-1]:
            return f"{x:.2f} {u}" if u != "B" else f"{int(x)} {u}"
        x /= 1024.0
    return f"{x:.2f} PB"


def format_node(node: Node, crc: Optional[int] = None) -> str:
    """One line per node, indented by depth."""
    indent = "  " * node.depth
    if node.is_dir:
        return click.style(f"{indent}{node.name}/", bold=True)
    text = f"{indent}{node.name}  {format_bytes(node.size)}"
    if crc is not None:
        text += click.style(f"  crc32={crc:08x}", dim=True)
    return text


def format_summary(summary: ScanSummary, pool: Optional[PoolStats] = None) -> str:
    """Summary box printed after the node listing."""
    width = _get_width()
    lines: List[str] = []
    lines.append("┌" + "─" * (width - 2) + "┐")
    lines.append(f" treescan · {summary.root}")
    lines.append("─" * width)
    lines.append(f" Entries  {summary.dirs} dir(s), {summary.files} file(s)")
    lines.append(f" Size     {format_bytes(summary.bytes_total)}")
    lines.append(f" Risk     {summary.risk_total:.2f} over {summary.risk_count} node(s)")
    if pool is not None:
        lines.append(click.style(f" Pool     {format_bytes(pool.allocated)} of {format_bytes(pool.total)} ({pool.utilization})", dim=True))
    if summary.error:
        lines.append("─" * width)
        lines.append(click.style(f" Stopped: {summary.error}", fg="red"))
    lines.append("└" + "─" * (width - 2) + "┘")
    return "\n".join(lines)


def format_json(nodes: List[dict], summary: ScanSummary, pool: Optional[PoolStats] = None) -> str:
    output = {
        "root": summary.root,
        "nodes": nodes,
        "summary": {k: v for k, v in asdict(summary).items() if k != "root"},
    }
    if pool is not None:
        output["pool"] = pool.to_dict()
    return json.dumps(output, indent=2)
