"""Exception hierarchy for settings, timestamp, range, and structure failures."""

from __future__ import annotations

__all__ = [
    "WorkTimeError",
    "SettingsError",
    "ParseError",
    "InvalidRangeError",
    "StructuralError",
]


class WorkTimeError(RuntimeError):
    """Base exception for the changelog preprocessing package."""


class SettingsError(WorkTimeError, ValueError):
    """Raised when preprocessor settings or a working-hours profile are invalid."""


class ParseError(WorkTimeError, ValueError):
    """Raised when a timestamp value cannot be parsed with the configured format."""

    def __init__(self, message: str, *, value: object = None, date_format: str | None = None) -> None:
        super().__init__(message)
        self.value = value
        self.date_format = date_format


class InvalidRangeError(WorkTimeError, ValueError):
    """Raised when a duration is requested for an end instant before its start."""


class StructuralError(WorkTimeError, ValueError):
    """Raised when a dotted-path write meets a non-mapping intermediate value."""
