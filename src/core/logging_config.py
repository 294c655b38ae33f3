"""Structured logging configuration.

This module initializes structlog with a stable JSON format.
Events are written to stderr so stdout stays free for progress output.
"""

from __future__ import annotations

import logging
import sys
from typing import Any

import structlog

from core.constants import DEFAULT_LOG_LEVEL


def configure_logging(level: str = DEFAULT_LOG_LEVEL) -> None:
    """Configure structlog processors and level filtering.

    Args:
        level: Minimum level name, e.g. ``INFO``.
    """
    structlog.configure(
        processors=[
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.add_log_level,
            structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(
            logging.getLevelName(level.upper())
        ),
        logger_factory=_stderr_logger,
        cache_logger_on_first_use=False,
    )


def _stderr_logger(*_args: Any) -> structlog.PrintLogger:
    """Build a print logger on the current ``sys.stderr``."""
    return structlog.PrintLogger(sys.stderr)


def get_logger(name: str) -> Any:
    """Return a module logger instance.

    Applies the default stderr JSON configuration when structlog has not
    been configured yet, so library callers never log to stdout.

    Args:
        name: Logger name, usually __name__.

    Returns:
        A structlog logger with structured output.
    """
    if not structlog.is_configured():
        configure_logging()
    return structlog.get_logger(name)
