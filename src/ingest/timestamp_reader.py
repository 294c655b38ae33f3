"""Fixed-width leading timestamp reader.

Transcripts start every line with an ISO 8601 combined date and time,
either extended (``2023-06-15T12:00:00``) or basic (``20230615T120000``).
Values are interpreted as local time with DST status left to the platform.
"""

from __future__ import annotations

from datetime import datetime

from core.constants import DATE_PART_WIDTH, YEAR_WIDTH
from core.errors import MalformedTimestampError
from ingest.line_cursor import LineCursor

_ASCII_DIGITS = frozenset("0123456789")


def read_timestamp(cursor: LineCursor) -> int:
    """Read one timestamp token and return Unix epoch seconds.

    Field ranges are not checked here; out-of-range values are rejected by
    the local time conversion and reported as malformed.

    Args:
        cursor: Cursor positioned on the first year digit.

    Returns:
        Seconds since the Unix epoch.

    Raises:
        MalformedTimestampError: If a field is not all digits or does not convert.
        TranscriptExhausted: If the unterminated final line ends mid-token.
    """
    year = _read_field(cursor, YEAR_WIDTH, "year")
    basic_layout = cursor.peek() in _ASCII_DIGITS
    if basic_layout:
        month = _read_field(cursor, DATE_PART_WIDTH, "month")
        day = _read_field(cursor, DATE_PART_WIDTH, "day")
        _skip_separator(cursor, "hour")
        hour = _read_field(cursor, DATE_PART_WIDTH, "hour")
        minute = _read_field(cursor, DATE_PART_WIDTH, "minute")
        second = _read_field(cursor, DATE_PART_WIDTH, "second")
    else:
        month = _read_separated_field(cursor, "month")
        day = _read_separated_field(cursor, "day")
        hour = _read_separated_field(cursor, "hour")
        minute = _read_separated_field(cursor, "minute")
        second = _read_separated_field(cursor, "second")
    return _to_epoch_seconds(cursor, (year, month, day, hour, minute, second))


def _read_separated_field(cursor: LineCursor, field_name: str) -> int:
    _skip_separator(cursor, field_name)
    return _read_field(cursor, DATE_PART_WIDTH, field_name)


def _skip_separator(cursor: LineCursor, field_name: str) -> None:
    _require_width(cursor, 1, f"separator before the {field_name} field")
    cursor.read_char()


def _read_field(cursor: LineCursor, width: int, field_name: str) -> int:
    """Read an unsigned integer of exactly ``width`` ASCII digits."""
    start_column = cursor.column
    _require_width(cursor, width, f"{field_name} field")
    chunk = cursor.read_exact(width)
    if not set(chunk) <= _ASCII_DIGITS:
        raise MalformedTimestampError(
            f"Line {cursor.line_number}, column {start_column + 1}: "
            f"{field_name} field {chunk!r} is not a {width}-digit number."
        )
    return int(chunk)


def _require_width(cursor: LineCursor, width: int, what: str) -> None:
    """Reject a terminated line that ends inside the timestamp."""
    if cursor.truncated or len(cursor.remaining()) >= width:
        return
    raise MalformedTimestampError(
        f"Line {cursor.line_number}, column {cursor.column + 1}: line ends inside the {what}."
    )


def _to_epoch_seconds(cursor: LineCursor, fields: tuple[int, ...]) -> int:
    try:
        moment = datetime(*fields)
        return int(moment.timestamp())
    except (ValueError, OverflowError, OSError) as error:
        raise MalformedTimestampError(
            f"Line {cursor.line_number}: timestamp fields {fields} do not form "
            f"a valid local time: {error}."
        ) from error
