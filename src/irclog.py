"""Public SDK surface for Irclog.

This module provides a stable import path for library users.
It re-exports the converter, the store, and typed models.
"""

from __future__ import annotations

from core.config import IrclogConfig
from core.errors import CorruptLineError, IrclogError, IrclogStorageError
from core.types import (
    Buffer,
    ConversionOptions,
    ConversionResult,
    Message,
    MessageType,
    Network,
    Sender,
)
from ingest.identity_cache import IdentityCache
from ingest.line_cursor import LineCursor
from ingest.line_parser import parse_line
from ingest.pipeline import ConversionRunner, convert_transcript
from store.sqlite_store import SqliteLogStore

__all__ = [
    "Buffer",
    "ConversionOptions",
    "ConversionResult",
    "ConversionRunner",
    "CorruptLineError",
    "IdentityCache",
    "IrclogConfig",
    "IrclogError",
    "IrclogStorageError",
    "LineCursor",
    "Message",
    "MessageType",
    "Network",
    "Sender",
    "SqliteLogStore",
    "convert_transcript",
    "parse_line",
]
