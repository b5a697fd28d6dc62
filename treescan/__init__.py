"""treescan — lazy depth-first filesystem scanning with risk aggregation."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("treescan")
except PackageNotFoundError:
    __version__ = "0.0.0.dev0"
