"""Irclog exception hierarchy.

This module defines traceable domain errors with clear boundaries.
Each subsystem raises a specific error type for debuggability.
"""

from __future__ import annotations


class IrclogError(Exception):
    """Base exception for all Irclog failures."""


class IrclogConfigError(IrclogError):
    """Raised for invalid runtime configuration."""


class IrclogIngestError(IrclogError):
    """Raised when a transcript source cannot be read."""


class IrclogParseError(IrclogError):
    """Raised when a transcript line cannot be decoded."""


class MalformedTimestampError(IrclogParseError):
    """Raised when a timestamp field is not a fixed-width unsigned integer."""


class UnrecognizedLineFormatError(IrclogParseError):
    """Raised when no line grammar matches the lead marker or line body."""


class CorruptLineError(IrclogError):
    """Raised once per run for the first line that could not be parsed.

    Attributes:
        line_number: One-based position of the offending line.
        raw_line: Offending line text without its terminator.
        reason: Parse failure that made the line unreadable.
    """

    def __init__(self, line_number: int, raw_line: str, reason: str) -> None:
        super().__init__(f"Log file corrupt near line {line_number}: {raw_line}")
        self.line_number = line_number
        self.raw_line = raw_line
        self.reason = reason


class IrclogStorageError(IrclogError):
    """Raised for relational store failures."""
