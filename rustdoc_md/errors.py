"""Exception hierarchy for the rustdoc JSON to Markdown conversion.

Only structural problems are raised: a malformed or incompatible export, an
unreadable input file, an unwritable output path, or an invalid configuration.
Per-item problems (dangling links, unknown payloads, name clashes) are recorded
in the conversion report instead and never abort a run.
"""

from __future__ import annotations

__all__ = [
    "ConfigError",
    "ConversionError",
    "InputReadError",
    "OutputWriteError",
    "SchemaError",
]


class ConversionError(RuntimeError):
    """Base exception for fatal conversion failures."""


class SchemaError(ConversionError):
    """Raised when the export is malformed or declares an unsupported version."""

    def __init__(
        self,
        message: str,
        *,
        supported: int | None = None,
        found: object = None,
    ) -> None:
        super().__init__(message)
        self.supported = supported
        self.found = found


class InputReadError(ConversionError):
    """Raised when the export file cannot be read."""

    def __init__(self, path: object, reason: str) -> None:
        super().__init__(f"Failed to read file: {path} ({reason})")
        self.path = path


class OutputWriteError(ConversionError):
    """Raised when an output file or directory cannot be written."""

    def __init__(self, path: object, reason: str) -> None:
        super().__init__(f"Failed to write: {path} ({reason})")
        self.path = path


class ConfigError(ConversionError):
    """Raised when configuration values are invalid."""
