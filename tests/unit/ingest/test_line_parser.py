"""Unit tests for transcript line classification and decoding."""

from __future__ import annotations

from datetime import datetime

import pytest

from core.errors import CorruptLineError
from core.types import Message, MessageType
from ingest.identity_cache import IdentityCache
from ingest.line_cursor import LineCursor
from ingest.line_parser import parse_line
from store.sqlite_store import SqliteLogStore

_STAMP = "2023-06-15T12:00:00  "


@pytest.fixture
def cache() -> IdentityCache:
    return IdentityCache(SqliteLogStore(":memory:"))


def _parse(cache: IdentityCache, body: str, line_number: int = 1) -> Message:
    message = parse_line(LineCursor(_STAMP + body, line_number=line_number), cache, 1)
    assert message is not None
    return message


def test_privmsg_basic_layout_example(cache: IdentityCache) -> None:
    """A basic-layout chat line should decode into a PrivMsg row."""
    cursor = LineCursor("20230615T120000  <alice> hello world")

    message = parse_line(cursor, cache, buffer_id=3)

    assert message == Message(
        timestamp=int(datetime(2023, 6, 15, 12, 0, 0).timestamp()),
        type=MessageType.PRIVMSG,
        buffer_id=3,
        sender_id=cache.resolve_nick("alice").id,
        text="hello world",
    )


def test_privmsg_resolves_most_recent_sender_for_nick(cache: IdentityCache) -> None:
    """Chat lines should attribute to the latest sender using the nick."""
    cache.get_sender("alice", "a", "old")
    latest = cache.get_sender("alice", "a", "new")

    message = _parse(cache, "<alice> hi")

    assert message.sender_id == latest.id


def test_notice_and_action_text(cache: IdentityCache) -> None:
    """Notice and action lines should keep the text after the nick."""
    notice = _parse(cache, "-ChanServ- Welcome to #chat")
    action = _parse(cache, "* alice waves hello")

    assert (notice.type, notice.text) == (MessageType.NOTICE, "Welcome to #chat")
    assert (action.type, action.text) == (MessageType.ACTION, "waves hello")
    assert action.sender_id == cache.resolve_nick("alice").id


def test_join_registers_full_sender_triple(cache: IdentityCache) -> None:
    """Join lines should resolve the exact nick!user@host triple."""
    message = parse_line(
        LineCursor("20230615T120005  ** alice <alice!a@host> has joined #chat"), cache, 1
    )

    assert message is not None
    assert (message.type, message.text) == (MessageType.JOIN, "")
    assert message.sender_id == cache.get_sender("alice", "a", "host", create=False).id


def test_part_with_and_without_reason(cache: IdentityCache) -> None:
    """Part lines should capture an optional parenthesized reason."""
    with_reason = _parse(cache, "** alice <alice!a@host> has left #chat (lunch break)")
    without_reason = _parse(cache, "** alice <alice!a@host> has left #chat")

    assert (with_reason.type, with_reason.text) == (MessageType.PART, "lunch break")
    assert without_reason.text == ""
    assert with_reason.sender_id == without_reason.sender_id


def test_quit_strips_closing_parenthesis(cache: IdentityCache) -> None:
    """Quit text should be the parenthesized reason without the closer."""
    message = _parse(cache, "** bob <bob!b@10.0.0.1> has quit IRC (Quit: bye)")

    assert (message.type, message.text) == (MessageType.QUIT, "Quit: bye")
    assert message.sender_id == cache.resolve_nick("bob").id
    assert cache.get_sender("bob", "b", "10.0.0.1", create=False) is not None


def test_kick_sender_is_victim_and_text_holds_kicker_and_reason(cache: IdentityCache) -> None:
    """Kick rows should point at the kicked nick and carry the kicker."""
    victim = cache.get_sender("bob", "b", "10.0.0.1")

    with_reason = _parse(cache, "** bob was kicked by alice (spam)")
    without_reason = _parse(cache, "** bob was kicked by alice")

    assert with_reason.sender_id == victim.id
    assert (with_reason.type, with_reason.text) == (MessageType.KICK, "alice spam")
    assert without_reason.text == "alice"


def test_mode_change_text(cache: IdentityCache) -> None:
    """Mode lines should keep everything after the colon and space."""
    message = _parse(cache, "** ChanServ sets mode: +o alice")

    assert (message.type, message.text) == (MessageType.MODE, "+o alice")
    assert message.sender_id == cache.resolve_nick("ChanServ").id


def test_nick_change_keeps_old_sender_and_registers_new_identity(cache: IdentityCache) -> None:
    """Nick changes should point at the old identity and add the new one."""
    old = cache.get_sender("alice", "a", "host")

    message = _parse(cache, "** alice is now known as alice_away")
    repeated = _parse(cache, "** alice is now known as alice_away")

    new = cache.get_sender("alice_away", "a", "host", create=False)
    assert message.sender_id == old.id and repeated.sender_id == old.id
    assert (message.type, message.text) == (MessageType.NICK, "alice_away")
    assert new is not None and cache.sender_count == 2


def test_topic_change_strips_closing_quote(cache: IdentityCache) -> None:
    """Topic text should drop the closing quote."""
    message = _parse(cache, '** alice changes topic to "Release day"')

    assert (message.type, message.text) == (MessageType.TOPIC, "Release day")


def test_special_markers_are_checked_in_fixed_order(cache: IdentityCache) -> None:
    """The first marker in table order wins even inside free text."""
    part = _parse(cache, "** alice <alice!a@host> has left #chat (was kicked by nobody)")
    topic = _parse(cache, '** alice changes topic to "who sets mode: +m"')

    assert part.type == MessageType.PART
    assert topic.type == MessageType.MODE


def test_triple_star_prefix_is_accepted(cache: IdentityCache) -> None:
    """Both ``**`` and ``***`` special prefixes should decode."""
    message = _parse(cache, "*** bob <bob!b@host> has joined #chat")

    assert message.type == MessageType.JOIN


def test_duplicated_timestamp_uses_last_token(cache: IdentityCache) -> None:
    """A repeated timestamp token should be re-read before the lead marker."""
    message = _parse(cache, "2023-06-15T12:00:56  <bob> duplicated stamp")

    assert message.timestamp == int(datetime(2023, 6, 15, 12, 0, 56).timestamp())
    assert message.text == "duplicated stamp"


def test_unrecognized_lead_is_corrupt_with_context(cache: IdentityCache) -> None:
    """Unknown lead markers should raise with line number and raw text."""
    with pytest.raises(CorruptLineError) as error_info:
        _parse(cache, "[alice] hi", line_number=42)

    assert error_info.value.line_number == 42
    assert error_info.value.raw_line == _STAMP + "[alice] hi"


def test_special_line_without_marker_is_corrupt(cache: IdentityCache) -> None:
    """Special lines matching no marker should be corrupt."""
    with pytest.raises(CorruptLineError):
        _parse(cache, "** alice does something odd")


def test_bad_timestamp_is_corrupt(cache: IdentityCache) -> None:
    """Timestamp failures should surface as corrupt lines."""
    with pytest.raises(CorruptLineError):
        parse_line(LineCursor("2023-99-15T12:00:00  <alice> hi"), cache, 1)


def test_terminated_line_ending_after_timestamp_is_corrupt(cache: IdentityCache) -> None:
    """A complete line with nothing after the timestamp is corrupt."""
    with pytest.raises(CorruptLineError):
        parse_line(LineCursor("2023-06-15T12:00:00  "), cache, 1)


def test_truncated_final_line_after_timestamp_is_end_of_stream(cache: IdentityCache) -> None:
    """Input ending right after a timestamp should stop without error."""
    message = parse_line(LineCursor("2023-06-15T12:00:00  ", truncated=True), cache, 1)

    assert message is None


def test_action_without_text_has_empty_body(cache: IdentityCache) -> None:
    """An action line that ends after the nick should decode with empty text."""
    message = parse_line(LineCursor("2023-06-15T12:00:00  * alice", line_number=3), cache, 1)

    assert message is not None
    assert (message.type, message.text) == (MessageType.ACTION, "")
    assert message.sender_id == cache.resolve_nick("alice").id
