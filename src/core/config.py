"""Runtime configuration model for Irclog.

This module owns all environment variable parsing and validation.
Other modules consume a typed config object instead of raw env reads.
"""

from __future__ import annotations

import codecs
from dataclasses import dataclass
import os

from core.constants import (
    DEFAULT_COMMIT_INTERVAL_SECONDS,
    DEFAULT_LOG_LEVEL,
    DEFAULT_TRANSCRIPT_ENCODING,
    SUPPORTED_LOG_LEVELS,
)
from core.errors import IrclogConfigError

_TRUE_VALUES = ("1", "true", "yes", "on")
_FALSE_VALUES = ("0", "false", "no", "off")


@dataclass(frozen=True)
class IrclogConfig:
    """Validated runtime configuration.

    Attributes:
        commit_interval_seconds: Wall-clock seconds between transaction boundaries.
        encoding: Text encoding used to read transcripts.
        show_progress: Whether to draw the in-place progress line.
        log_level: Minimum structured log level.
    """

    commit_interval_seconds: float
    encoding: str
    show_progress: bool
    log_level: str

    @classmethod
    def from_env(cls) -> "IrclogConfig":
        """Build config from process environment variables.

        Returns:
            A validated config object.

        Raises:
            IrclogConfigError: If environment values are invalid.
        """
        interval_value = os.getenv("IRCLOG_COMMIT_INTERVAL", str(DEFAULT_COMMIT_INTERVAL_SECONDS))
        encoding_value = os.getenv("IRCLOG_ENCODING", DEFAULT_TRANSCRIPT_ENCODING)
        progress_value = os.getenv("IRCLOG_SHOW_PROGRESS", "true")
        log_level_value = os.getenv("IRCLOG_LOG_LEVEL", DEFAULT_LOG_LEVEL)
        return cls(
            commit_interval_seconds=parse_commit_interval(interval_value),
            encoding=parse_encoding(encoding_value),
            show_progress=_parse_flag("IRCLOG_SHOW_PROGRESS", progress_value),
            log_level=_parse_log_level(log_level_value),
        )


def parse_commit_interval(raw_value: str) -> float:
    """Parse a commit interval value.

    Args:
        raw_value: Raw string from environment or CLI.

    Returns:
        Positive interval in seconds.

    Raises:
        IrclogConfigError: If value is not a positive number.
    """
    try:
        interval = float(raw_value)
    except ValueError as error:
        raise IrclogConfigError(
            "Invalid IRCLOG_COMMIT_INTERVAL value: "
            f"expected number of seconds, got '{raw_value}'. "
            "Set IRCLOG_COMMIT_INTERVAL to a positive number."
        ) from error
    if interval <= 0:
        raise IrclogConfigError(
            f"Invalid IRCLOG_COMMIT_INTERVAL value: {interval} must be greater than zero."
        )
    return interval


def parse_encoding(raw_value: str) -> str:
    """Validate a transcript encoding name.

    Raises:
        IrclogConfigError: If Python does not know the codec.
    """
    try:
        return codecs.lookup(raw_value).name
    except LookupError as error:
        raise IrclogConfigError(
            f"Invalid IRCLOG_ENCODING value: unknown codec '{raw_value}'."
        ) from error


def _parse_flag(name: str, raw_value: str) -> bool:
    normalized = raw_value.strip().lower()
    if normalized in _TRUE_VALUES:
        return True
    if normalized in _FALSE_VALUES:
        return False
    raise IrclogConfigError(
        f"Invalid {name} value: expected one of {_TRUE_VALUES + _FALSE_VALUES}, "
        f"got '{raw_value}'."
    )


def _parse_log_level(raw_value: str) -> str:
    normalized = raw_value.strip().upper()
    if normalized not in SUPPORTED_LOG_LEVELS:
        raise IrclogConfigError(
            f"Invalid IRCLOG_LOG_LEVEL value: expected one of {SUPPORTED_LOG_LEVELS}, "
            f"got '{raw_value}'."
        )
    return normalized
