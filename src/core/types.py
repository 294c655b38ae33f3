"""Shared typed models.

This module defines immutable data models used by the parser,
identity cache, store, and driver to keep interfaces explicit and stable.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, IntEnum


class MessageType(IntEnum):
    """Transcript event type; the value is the stored ``log.type`` code."""

    PRIVMSG = 0
    NOTICE = 1
    ACTION = 2
    JOIN = 3
    PART = 4
    QUIT = 5
    KICK = 6
    NICK = 7
    MODE = 8
    TOPIC = 9


class EntityKind(str, Enum):
    """Dimension tables mirrored by the identity cache."""

    NETWORK = "network"
    BUFFER = "buffer"
    SENDER = "sender"


@dataclass(frozen=True)
class Network:
    """Named IRC network.

    Attributes:
        id: Store-assigned identifier.
        name: Case-sensitive network name.
    """

    id: int
    name: str

    @property
    def identity_key(self) -> str:
        return self.name


@dataclass(frozen=True)
class Buffer:
    """Channel or query target within a network.

    Attributes:
        id: Store-assigned identifier.
        network_id: Owning network id.
        name: Channel or query name.
    """

    id: int
    network_id: int
    name: str

    @property
    def identity_key(self) -> tuple[int, str]:
        return (self.network_id, self.name)


@dataclass(frozen=True)
class Sender:
    """Point-in-time ``nick!user@host`` snapshot.

    Attributes:
        id: Store-assigned identifier.
        nick: Nickname.
        user: Ident, empty when unknown.
        host: Hostname, empty when unknown.
    """

    id: int
    nick: str
    user: str = ""
    host: str = ""

    @property
    def identity_key(self) -> tuple[str, str, str]:
        return (self.nick, self.user, self.host)


@dataclass(frozen=True)
class Message:
    """One decoded transcript event.

    Attributes:
        timestamp: Seconds since the Unix epoch.
        type: Event type.
        buffer_id: Target buffer id.
        sender_id: Sender id; the victim for kicks, the old identity for nick changes.
        text: Type-dependent payload (body, reason, new nick, mode string, topic).
        id: Store-assigned identifier once inserted.
    """

    timestamp: int
    type: MessageType
    buffer_id: int
    sender_id: int
    text: str = ""
    id: int | None = None


@dataclass(frozen=True)
class ConversionOptions:
    """Converter command options.

    Attributes:
        source_path: Plain-text transcript path.
        store_path: SQLite database path.
        network_name: Network the transcript belongs to.
        buffer_name: Channel or query name the transcript belongs to.
    """

    source_path: str
    store_path: str
    network_name: str
    buffer_name: str


@dataclass(frozen=True)
class ConversionResult:
    """Summary of a completed conversion run.

    Attributes:
        converted_count: Number of stored log rows.
        total_lines: Number of lines counted in the transcript.
        elapsed_seconds: Wall-clock duration of the run.
    """

    converted_count: int
    total_lines: int
    elapsed_seconds: float
