"""Filesystem scanner: lazy tree walk and existence probes."""

from .probe import check_all, path_exists, probe_file
from .tree import ScanOptions, collect_tree, scan_tree

__all__ = ["scan_tree", "collect_tree", "ScanOptions", "check_all", "path_exists", "probe_file"]
