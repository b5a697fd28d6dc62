"""Load scan settings from YAML (.treescan.yaml or treescan.yaml)."""

from __future__ import annotations

from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any

import yaml

from .exceptions import ConfigError
from .pool import DEFAULT_POOL_MAX_BYTES
from .risk import DEFAULT_RISK_CAPACITY
from .scanner.tree import ScanOptions

CONFIG_FILENAMES = (".treescan.yaml", "treescan.yaml")
DEFAULT_PROBE_CONCURRENCY = 64


@dataclass
class ScanConfig:
    """Settings for one scanning session."""

    yield_every_levels: int | None = None
    include_hidden: bool = False
    max_depth: int | None = None
    accumulator_capacity: int = DEFAULT_RISK_CAPACITY
    pool_max_bytes: int = DEFAULT_POOL_MAX_BYTES
    probe_concurrency: int = DEFAULT_PROBE_CONCURRENCY

    def scan_options(self, **overrides: Any) -> ScanOptions:
        """ScanOptions from these settings; keyword overrides win."""
        opts = {
            "yield_every_levels": self.yield_every_levels,
            "include_hidden": self.include_hidden,
            "max_depth": self.max_depth,
        }
        opts.update(overrides)
        return ScanOptions(**opts)


# Field name -> accepted types (bool is an int subclass, so checked first)
_TYPES: dict[str, tuple[type, ...]] = {
    "yield_every_levels": (int, type(None)),
    "include_hidden": (bool,),
    "max_depth": (int, type(None)),
    "accumulator_capacity": (int,),
    "pool_max_bytes": (int,),
    "probe_concurrency": (int,),
}


def _find_config(search_dir: Path) -> Path | None:
    for name in CONFIG_FILENAMES:
        p = search_dir / name
        if p.is_file():
            return p
    return None


def _coerce(data: dict, source: Path) -> ScanConfig:
    known = {f.name for f in fields(ScanConfig)}
    values: dict[str, Any] = {}
    for key, value in data.items():
        if key not in known:
            continue
        allowed = _TYPES[key]
        if isinstance(value, bool) and bool not in allowed:
            raise ConfigError(f"{key} must be an integer", details={"file": str(source), "value": value})
        if not isinstance(value, allowed):
            raise ConfigError(f"{key} has the wrong type", details={"file": str(source), "value": value})
        values[key] = value
    return ScanConfig(**values)


def load_config(path: Path | None = None, search_dir: Path | None = None) -> ScanConfig:
    """
    Load settings from an explicit file, or the first config file in search_dir.

    No file found means defaults. A top-level `treescan:` key may wrap the
    settings; unknown keys are ignored.
    """
    if path is None:
        path = _find_config(search_dir or Path("."))
        if path is None:
            return ScanConfig()
    try:
        data = yaml.safe_load(Path(path).read_text())
    except OSError as e:
        raise ConfigError("Cannot read config file", details={"file": str(path), "error": str(e)}) from e
    except yaml.YAMLError as e:
        raise ConfigError("Config file is not valid YAML", details={"file": str(path)}) from e
    if data is None:
        return ScanConfig()
    if isinstance(data, dict) and isinstance(data.get("treescan"), dict):
        data = data["treescan"]
    if not isinstance(data, dict):
        raise ConfigError("Config file must contain a mapping", details={"file": str(path)})
    return _coerce(data, Path(path))
