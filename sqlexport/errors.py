"""Exception hierarchy for export runs."""

from __future__ import annotations

from typing import Optional


class ExportError(Exception):
    """Base exception for export operations."""


class ConfigError(ExportError):
    """Invalid or unreadable configuration, SQL or template input."""


class CompileError(ExportError):
    """A template could not be compiled."""

    def __init__(self, name: str, message: str, lineno: Optional[int] = None) -> None:
        self.name = name
        self.lineno = lineno
        where = f"{name}:{lineno}" if lineno is not None else name
        super().__init__(f"{where}: {message}")


class QueryError(ExportError):
    """Connecting, executing the query or advancing the cursor failed."""


class RowScanError(ExportError):
    """A single record could not be turned into a row mapping."""

    def __init__(self, ordinal: int, message: str) -> None:
        self.ordinal = ordinal
        super().__init__(f"row {ordinal}: {message}")


class RenderError(ExportError):
    """Evaluating a compiled template against a value failed."""

    def __init__(self, name: str, message: str) -> None:
        self.name = name
        super().__init__(f"{name}: {message}")


class HelperArgumentError(TypeError):
    """A template helper received a value of a kind it cannot handle."""
