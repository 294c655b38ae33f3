"""Unit tests for the leading timestamp reader."""

from __future__ import annotations

from datetime import datetime

import pytest

from core.errors import MalformedTimestampError
from ingest.line_cursor import LineCursor, TranscriptExhausted
from ingest.timestamp_reader import read_timestamp


def _local_epoch(*fields: int) -> int:
    return int(datetime(*fields).timestamp())


def test_read_timestamp_parses_extended_layout() -> None:
    """Extended ISO layout should convert as local time."""
    cursor = LineCursor("2023-06-15T12:00:00  <alice> hi")

    timestamp = read_timestamp(cursor)

    assert timestamp == _local_epoch(2023, 6, 15, 12, 0, 0)
    assert cursor.column == 19


def test_read_timestamp_parses_basic_layout() -> None:
    """Basic ISO layout without date separators should convert the same way."""
    cursor = LineCursor("20230615T120005  <alice> hi")

    timestamp = read_timestamp(cursor)

    assert timestamp == _local_epoch(2023, 6, 15, 12, 0, 5)
    assert cursor.column == 15


def test_read_timestamp_does_not_check_separator_values() -> None:
    """Any single character should be accepted between fields."""
    cursor = LineCursor("2023/06/15 12.30.45")

    assert read_timestamp(cursor) == _local_epoch(2023, 6, 15, 12, 30, 45)


def test_read_timestamp_rejects_non_digit_field() -> None:
    """A field with a non-digit character should be malformed."""
    with pytest.raises(MalformedTimestampError):
        read_timestamp(LineCursor("2023-0x-15T12:00:00  <alice> hi"))


def test_read_timestamp_rejects_out_of_range_month() -> None:
    """Local time conversion should reject month 99."""
    with pytest.raises(MalformedTimestampError):
        read_timestamp(LineCursor("2023-99-15T12:00:00  <alice> hi"))


def test_read_timestamp_rejects_short_terminated_line() -> None:
    """A complete line that ends inside the token should be malformed."""
    with pytest.raises(MalformedTimestampError):
        read_timestamp(LineCursor("2023-06-1", truncated=False))


def test_read_timestamp_signals_end_of_transcript_on_truncated_line() -> None:
    """An unterminated final line ending mid-token is end of input."""
    with pytest.raises(TranscriptExhausted):
        read_timestamp(LineCursor("2023-06-1", truncated=True))
