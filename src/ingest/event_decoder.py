"""Per-event-type field extraction.

Generic lines (messages, notices, actions) have a positional grammar.
Special ``**`` lines do not: they are classified by scanning the line for
a fixed marker, checked in table order with the first match winning. A
reason or topic that happens to contain an earlier marker is classified
by that marker; the order is kept stable rather than made smarter.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, cast

from core.constants import (
    JOIN_MARKER,
    KICK_MARKER,
    MODE_MARKER,
    NICK_MARKER,
    PART_MARKER,
    QUIT_MARKER,
    TOPIC_MARKER,
)
from core.errors import UnrecognizedLineFormatError
from core.types import MessageType, Sender
from ingest.identity_cache import IdentityCache
from ingest.line_cursor import LineCursor


@dataclass(frozen=True)
class DecodedEvent:
    """Event fields decoded from the part of a line after its lead marker.

    Attributes:
        type: Event type.
        sender: Resolved sender the log row points at.
        text: Type-dependent payload.
    """

    type: MessageType
    sender: Sender
    text: str = ""


SpecialLineHandler = Callable[[LineCursor, IdentityCache], DecodedEvent]


def decode_generic(
    message_type: MessageType,
    cursor: LineCursor,
    cache: IdentityCache,
    delimiter: str,
    skip_count: int,
    delimiter_optional: bool = False,
) -> DecodedEvent:
    """Decode ``<Nick> text``, ``-Nick- text`` and ``* Nick text`` lines.

    Args:
        message_type: Type selected by the classifier.
        cursor: Cursor positioned on the first nick character.
        cache: Identity cache for nick-only resolution.
        delimiter: Character terminating the nick; it is consumed.
        skip_count: Separator characters to skip before the text.
        delimiter_optional: Whether the nick may end the line, as in an
            action with no text.

    Returns:
        Decoded event with the rest of the line as text.
    """
    if delimiter_optional:
        nick, _ = cursor.read_until_or_end(delimiter)
    else:
        nick = cursor.read_until(delimiter)
    sender = cache.resolve_nick(nick)
    cursor.skip(skip_count)
    return DecodedEvent(type=message_type, sender=sender, text=cursor.read_rest())


def decode_special(cursor: LineCursor, cache: IdentityCache) -> DecodedEvent:
    """Decode a ``**`` line by the first marker found in it.

    Raises:
        UnrecognizedLineFormatError: If no marker occurs in the line.
    """
    body = cursor.remaining()
    for marker, handler in SPECIAL_LINE_HANDLERS:
        if marker in body:
            return handler(cursor, cache)
    raise UnrecognizedLineFormatError(
        f"Line {cursor.line_number}: special line matches no known event: {body!r}."
    )


def read_full_sender(cursor: LineCursor, cache: IdentityCache) -> Sender:
    """Resolve ``Nick <nick!user@host>`` by exact triple, creating it if new."""
    cursor.read_until(" ")
    cursor.skip(1)
    nick = cursor.read_until("!")
    user = cursor.read_until("@")
    host = cursor.read_until(">")
    return cast(Sender, cache.get_sender(nick, user, host))


def read_nick_sender(cursor: LineCursor, cache: IdentityCache) -> Sender:
    """Resolve the leading space-terminated nick with the recency heuristic."""
    return cache.resolve_nick(cursor.read_until(" "))


def read_optional_reason(cursor: LineCursor) -> str:
    """Return the text after the next ``(``, minus one trailing ``)``.

    Returns an empty string when the line has no ``(``.
    """
    if not cursor.skip_past("("):
        return ""
    return _strip_suffix(cursor.read_rest(), ")")


def _decode_join(cursor: LineCursor, cache: IdentityCache) -> DecodedEvent:
    sender = read_full_sender(cursor, cache)
    cursor.read_rest()
    return DecodedEvent(type=MessageType.JOIN, sender=sender)


def _decode_part(cursor: LineCursor, cache: IdentityCache) -> DecodedEvent:
    sender = read_full_sender(cursor, cache)
    return DecodedEvent(type=MessageType.PART, sender=sender, text=read_optional_reason(cursor))


def _decode_kick(cursor: LineCursor, cache: IdentityCache) -> DecodedEvent:
    # The kicked user is the row's sender; the kicker goes into the text.
    victim = read_nick_sender(cursor, cache)
    cursor.skip_past(KICK_MARKER)
    text, stopped_at_space = cursor.read_until_or_end(" ")
    if stopped_at_space:
        reason = read_optional_reason(cursor)
        if reason:
            text = f"{text} {reason}"
    return DecodedEvent(type=MessageType.KICK, sender=victim, text=text)


def _decode_quit(cursor: LineCursor, cache: IdentityCache) -> DecodedEvent:
    sender = read_full_sender(cursor, cache)
    return DecodedEvent(type=MessageType.QUIT, sender=sender, text=read_optional_reason(cursor))


def _decode_mode(cursor: LineCursor, cache: IdentityCache) -> DecodedEvent:
    sender = read_nick_sender(cursor, cache)
    cursor.skip_past(":")
    cursor.skip(1)
    return DecodedEvent(type=MessageType.MODE, sender=sender, text=cursor.read_rest())


def _decode_nick(cursor: LineCursor, cache: IdentityCache) -> DecodedEvent:
    old_sender = read_nick_sender(cursor, cache)
    cursor.skip_past(NICK_MARKER.lstrip())
    new_nick = cursor.read_rest()
    # Register who they became; the row still points at who they were.
    cache.get_sender(new_nick, old_sender.user, old_sender.host)
    return DecodedEvent(type=MessageType.NICK, sender=old_sender, text=new_nick)


def _decode_topic(cursor: LineCursor, cache: IdentityCache) -> DecodedEvent:
    sender = read_nick_sender(cursor, cache)
    cursor.skip_past(TOPIC_MARKER.lstrip())
    return DecodedEvent(
        type=MessageType.TOPIC,
        sender=sender,
        text=_strip_suffix(cursor.read_rest(), '"'),
    )


def _strip_suffix(text: str, suffix: str) -> str:
    if text.endswith(suffix):
        return text[: -len(suffix)]
    return text


SPECIAL_LINE_HANDLERS: tuple[tuple[str, SpecialLineHandler], ...] = (
    (JOIN_MARKER, _decode_join),
    (PART_MARKER, _decode_part),
    (KICK_MARKER, _decode_kick),
    (QUIT_MARKER, _decode_quit),
    (MODE_MARKER, _decode_mode),
    (NICK_MARKER, _decode_nick),
    (TOPIC_MARKER, _decode_topic),
)
