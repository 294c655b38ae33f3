"""Explicit read cursor over one transcript line.

Decoders advance a ``LineCursor`` instead of sharing an implicit stream
position, so every failure can report the line and column it happened at.
"""

from __future__ import annotations

from core.errors import UnrecognizedLineFormatError


class TranscriptExhausted(Exception):
    """Signals that input ended inside the unterminated final line.

    This is a clean end of stream, not a corruption.
    """


class LineCursor:
    """Cursor over a single line's text, excluding its terminator.

    Attributes:
        text: Line content.
        line_number: One-based line position in the transcript.
        truncated: True when the line is the last one and had no newline.
        column: Zero-based read position.
    """

    def __init__(self, text: str, line_number: int = 1, truncated: bool = False) -> None:
        self.text = text
        self.line_number = line_number
        self.truncated = truncated
        self.column = 0

    def at_end(self) -> bool:
        return self.column >= len(self.text)

    def peek(self) -> str:
        """Return the next character without consuming it, or ``""`` at line end."""
        if self.at_end():
            return ""
        return self.text[self.column]

    def read_char(self) -> str:
        """Consume one character.

        Raises:
            TranscriptExhausted: At the end of an unterminated final line.
            UnrecognizedLineFormatError: At the end of any other line.
        """
        if self.at_end():
            self._fail_exhausted("expected more characters")
        char = self.text[self.column]
        self.column += 1
        return char

    def read_exact(self, width: int) -> str:
        """Consume exactly ``width`` characters."""
        if self.column + width > len(self.text):
            self._fail_exhausted(f"expected {width} more characters")
        chunk = self.text[self.column : self.column + width]
        self.column += width
        return chunk

    def skip(self, count: int) -> None:
        """Skip up to ``count`` characters, stopping at line end."""
        self.column = min(len(self.text), self.column + count)

    def read_until(self, delimiter: str) -> str:
        """Read up to a required delimiter and consume the delimiter.

        Raises:
            TranscriptExhausted: If the delimiter is missing on an unterminated final line.
            UnrecognizedLineFormatError: If the delimiter is missing on any other line.
        """
        index = self.text.find(delimiter, self.column)
        if index < 0:
            self._fail_exhausted(f"missing {delimiter!r}")
        token = self.text[self.column : index]
        self.column = index + len(delimiter)
        return token

    def read_until_or_end(self, delimiter: str) -> tuple[str, bool]:
        """Read up to a delimiter or line end.

        Returns:
            The token and whether the delimiter was found and consumed.
        """
        index = self.text.find(delimiter, self.column)
        if index < 0:
            return self.read_rest(), False
        token = self.text[self.column : index]
        self.column = index + len(delimiter)
        return token, True

    def skip_past(self, marker: str) -> bool:
        """Advance past the next occurrence of ``marker``.

        Returns:
            False, leaving the cursor at line end, when the marker is absent.
        """
        index = self.text.find(marker, self.column)
        if index < 0:
            self.column = len(self.text)
            return False
        self.column = index + len(marker)
        return True

    def remaining(self) -> str:
        """Return unread text without consuming it."""
        return self.text[self.column :]

    def read_rest(self) -> str:
        """Consume and return the rest of the line."""
        rest = self.text[self.column :]
        self.column = len(self.text)
        return rest

    def _fail_exhausted(self, detail: str) -> None:
        if self.truncated:
            raise TranscriptExhausted(detail)
        raise UnrecognizedLineFormatError(
            f"Line {self.line_number}, column {self.column + 1}: {detail}."
        )
