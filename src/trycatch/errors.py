"""Exception hierarchy for trycatch."""

from __future__ import annotations


class TryCatchError(Exception):
    """Base exception for all trycatch errors."""

    def __init__(self, message: str, *, hint: str | None = None) -> None:
        super().__init__(message)
        self.hint = hint


class ConfigurationError(TryCatchError):
    """Configuration validation or resolution failed."""
