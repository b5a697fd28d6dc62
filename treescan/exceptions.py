"""
Exception hierarchy for treescan.

Hierarchy:
    TreeScanError (base)
    ├── ScanError
    │   └── ScanAccessError
    ├── PoolBudgetExceeded
    ├── UnsupportedAlgorithm
    └── ConfigError

"Not found" and "not a directory" during a scan are expected outcomes and
never surface as exceptions.
"""

from __future__ import annotations

from typing import Any


class TreeScanError(Exception):
    """
    Base exception for all treescan errors.

    Attributes:
        message: Human-readable error description
        context: What was being done when the error occurred
        details: Technical details (paths, sizes, names)
    """

    def __init__(
        self,
        message: str,
        context: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        self.message = message
        self.context = context
        self.details = details or {}
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        parts = [self.message]
        if self.context:
            parts.append(f"Context: {self.context}")
        if self.details:
            detail_str = ", ".join(f"{k}={v!r}" for k, v in self.details.items())
            parts.append(f"Details: {detail_str}")
        return ". ".join(parts)


class ScanError(TreeScanError):
    """A traversal failed."""


class ScanAccessError(ScanError):
    """Permission or I/O failure on one branch of a scan."""

    def __init__(self, message: str, path: str, operation: str, context: str | None = None):
        self.path = path
        self.operation = operation
        super().__init__(message, context=context, details={"path": path, "operation": operation})


class PoolBudgetExceeded(TreeScanError):
    """A strict buffer pool refused an allocation past its byte budget."""


class UnsupportedAlgorithm(TreeScanError):
    """No streaming compressor is registered under the requested name."""


class ConfigError(TreeScanError):
    """The configuration file could not be used."""
