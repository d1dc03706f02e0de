"""
Exception types shared across the font tagger.
"""
from __future__ import annotations

from typing import Optional


class ParseError(ValueError):
    """Raised when a rule expression cannot be compiled."""

    def __init__(self, message: str, source: str = "", position: Optional[int] = None):
        self.source = source
        self.position = position
        if position is not None:
            message = f"{message} at column {position + 1}"
        super().__init__(message)


class UnknownReferenceError(LookupError):
    """A family, tag or axis name that is not registered."""


class LoadError(RuntimeError):
    """Reading a resource failed."""

    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Failed to load {path}: {reason}")


class SchemaError(LoadError):
    """A resource was read but its content does not match the expected shape."""
