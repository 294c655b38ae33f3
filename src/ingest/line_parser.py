"""Transcript line classification.

Every line starts with a timestamp and a two-character delimiter. The
character after that selects the grammar used for the rest of the line.
A digit there means a duplicated timestamp token, which is re-read until
a real lead marker appears.
"""

from __future__ import annotations

from core.constants import (
    ACTION_NICK_DELIMITER,
    NOTICE_LEAD,
    NOTICE_NICK_DELIMITER,
    PRIVMSG_LEAD,
    PRIVMSG_NICK_DELIMITER,
    STAR_LEAD,
    TIMESTAMP_DELIMITER_WIDTH,
)
from core.errors import CorruptLineError, IrclogParseError, UnrecognizedLineFormatError
from core.types import Message, MessageType
from ingest.event_decoder import DecodedEvent, decode_generic, decode_special
from ingest.identity_cache import IdentityCache
from ingest.line_cursor import LineCursor, TranscriptExhausted
from ingest.timestamp_reader import read_timestamp


def parse_line(cursor: LineCursor, cache: IdentityCache, buffer_id: int) -> Message | None:
    """Decode one transcript line into a message.

    Args:
        cursor: Cursor over the line, positioned at column zero.
        cache: Identity cache resolving senders.
        buffer_id: Buffer the transcript belongs to.

    Returns:
        The decoded message, or None when input ends inside the final
        unterminated line (clean end of stream).

    Raises:
        CorruptLineError: If the line matches no grammar.
    """
    try:
        timestamp, event = _decode_line(cursor, cache)
    except TranscriptExhausted:
        return None
    except IrclogParseError as error:
        raise CorruptLineError(cursor.line_number, cursor.text, str(error)) from error
    return Message(
        timestamp=timestamp,
        type=event.type,
        buffer_id=buffer_id,
        sender_id=event.sender.id,
        text=event.text,
    )


def _decode_line(cursor: LineCursor, cache: IdentityCache) -> tuple[int, DecodedEvent]:
    timestamp = read_timestamp(cursor)
    lead = _read_lead(cursor)
    while lead.isdigit():
        cursor.column -= 1
        timestamp = read_timestamp(cursor)
        lead = _read_lead(cursor)
    return timestamp, _classify(lead, cursor, cache)


def _read_lead(cursor: LineCursor) -> str:
    """Skip the timestamp delimiter and consume the lead character."""
    cursor.skip(TIMESTAMP_DELIMITER_WIDTH)
    return cursor.read_char()


def _classify(lead: str, cursor: LineCursor, cache: IdentityCache) -> DecodedEvent:
    if lead == PRIVMSG_LEAD:
        return decode_generic(MessageType.PRIVMSG, cursor, cache, PRIVMSG_NICK_DELIMITER, 1)
    if lead == NOTICE_LEAD:
        return decode_generic(MessageType.NOTICE, cursor, cache, NOTICE_NICK_DELIMITER, 1)
    if lead == STAR_LEAD:
        second = cursor.read_char()
        if second == " ":
            return decode_generic(
                MessageType.ACTION,
                cursor,
                cache,
                ACTION_NICK_DELIMITER,
                0,
                delimiter_optional=True,
            )
        if second == STAR_LEAD:
            _skip_special_prefix(cursor)
            return decode_special(cursor, cache)
    raise UnrecognizedLineFormatError(
        f"Line {cursor.line_number}, column {cursor.column}: "
        f"unrecognized lead marker {cursor.text[cursor.column - 1]!r}."
    )


def _skip_special_prefix(cursor: LineCursor) -> None:
    """Skip the rest of a ``** `` or ``*** `` prefix."""
    while cursor.peek() == STAR_LEAD:
        cursor.skip(1)
    cursor.skip(1)
