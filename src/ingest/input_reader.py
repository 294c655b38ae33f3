"""Transcript readers for ingestion.

This module opens plain-text transcripts and yields one read cursor per
line, recording whether the final line was cut off without a newline.
"""

from __future__ import annotations

from pathlib import Path
from typing import Iterator, TextIO

from core.errors import IrclogIngestError
from ingest.line_cursor import LineCursor


def open_transcript(source_path: str | Path, encoding: str) -> TextIO:
    """Open a transcript for reading.

    Args:
        source_path: Transcript file path.
        encoding: Text encoding name.

    Returns:
        Open text handle; line terminators are normalized to ``\n``.

    Raises:
        IrclogIngestError: If the path is missing or unreadable.
    """
    path = Path(source_path).expanduser()
    if not path.is_file():
        raise IrclogIngestError(
            f"Failed to read transcript at {path}: file does not exist. "
            "Provide an existing plain-text log file."
        )
    try:
        return path.open("r", encoding=encoding)
    except OSError as error:
        raise IrclogIngestError(f"Failed to open transcript at {path}: {error}.") from error


def iter_line_cursors(handle: TextIO) -> Iterator[LineCursor]:
    """Yield a cursor for each line of an open transcript.

    Args:
        handle: Open transcript handle.

    Yields:
        Cursors numbered from one, terminators stripped.
    """
    line_number = 0
    while True:
        try:
            raw_line = handle.readline()
        except UnicodeDecodeError as error:
            raise IrclogIngestError(
                f"Failed to decode transcript line {line_number + 1}: {error}. "
                "Set IRCLOG_ENCODING or --encoding to the file's encoding."
            ) from error
        if not raw_line:
            return
        line_number += 1
        terminated = raw_line.endswith("\n")
        text = raw_line[:-1] if terminated else raw_line
        yield LineCursor(text, line_number=line_number, truncated=not terminated)


def count_transcript_lines(source_path: str | Path, encoding: str) -> int:
    """Count lines in a transcript, including an unterminated last line."""
    with open_transcript(source_path, encoding) as handle:
        try:
            return sum(1 for _ in handle)
        except UnicodeDecodeError as error:
            raise IrclogIngestError(
                f"Failed to decode transcript at {source_path}: {error}. "
                "Set IRCLOG_ENCODING or --encoding to the file's encoding."
            ) from error
