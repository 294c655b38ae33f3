"""Transcript conversion orchestration.

This module drives line parsing against the identity cache and the
store, committing in time-based batches until the transcript ends or a
corrupt line stops the run.
"""

from __future__ import annotations

import time
from typing import Callable, TextIO, cast

from core.config import IrclogConfig
from core.errors import CorruptLineError
from core.logging_config import get_logger
from core.types import Buffer, ConversionOptions, ConversionResult
from ingest.identity_cache import IdentityCache
from ingest.input_reader import count_transcript_lines, iter_line_cursors, open_transcript
from ingest.line_parser import parse_line
from ingest.progress import ConversionProgressTracker
from store.protocols import LogStore
from store.sqlite_store import SqliteLogStore

_LOGGER = get_logger(__name__)


class ConversionRunner:
    """Stateful runner for one transcript conversion."""

    def __init__(
        self,
        options: ConversionOptions,
        config: IrclogConfig,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._options = options
        self._config = config
        self._clock = clock

    def run(self) -> ConversionResult:
        """Convert the transcript and return a run summary.

        Raises:
            CorruptLineError: If a line cannot be parsed; earlier rows stay committed.
            IrclogStorageError: If the store fails.
            IrclogIngestError: If the transcript cannot be read.
        """
        total_lines = count_transcript_lines(self._options.source_path, self._config.encoding)
        tracker = ConversionProgressTracker(
            source_path=self._options.source_path,
            total_lines=total_lines,
            show_progress=self._config.show_progress,
        )
        with SqliteLogStore(self._options.store_path) as store:
            cache = IdentityCache(store)
            buffer = self._resolve_buffer(cache)
            tracker.log_conversion_started(self._options.store_path, buffer.id)
            with open_transcript(self._options.source_path, self._config.encoding) as handle:
                converted_count = self._convert(handle, store, cache, buffer, tracker)
        tracker.log_conversion_completed(converted_count)
        return ConversionResult(
            converted_count=converted_count,
            total_lines=total_lines,
            elapsed_seconds=tracker.elapsed_seconds(),
        )

    def _resolve_buffer(self, cache: IdentityCache) -> Buffer:
        buffer = cache.get_buffer(self._options.network_name, self._options.buffer_name)
        return cast(Buffer, buffer)

    def _convert(
        self,
        handle: TextIO,
        store: LogStore,
        cache: IdentityCache,
        buffer: Buffer,
        tracker: ConversionProgressTracker,
    ) -> int:
        converted_count = 0
        store.begin_transaction()
        batch_started_at = self._clock()
        for cursor in iter_line_cursors(handle):
            if self._clock() - batch_started_at >= self._config.commit_interval_seconds:
                store.commit_transaction()
                tracker.report_batch(converted_count)
                store.begin_transaction()
                batch_started_at = self._clock()
            try:
                message = parse_line(cursor, cache, buffer.id)
            except CorruptLineError as error:
                store.commit_transaction()
                _log_corrupt_line(self._options, error, converted_count)
                raise
            if message is None:
                break
            store.insert(message)
            converted_count += 1
        store.commit_transaction()
        return converted_count


def convert_transcript(options: ConversionOptions, config: IrclogConfig) -> ConversionResult:
    """Convert a plain-text transcript into the relational store.

    Args:
        options: Source, store, network, and buffer selection.
        config: Runtime configuration.

    Returns:
        Summary of the completed run.

    Raises:
        CorruptLineError: If a line cannot be parsed.
        IrclogStorageError: If persistence fails.
        IrclogIngestError: If the transcript cannot be read.
    """
    return ConversionRunner(options, config).run()


def _log_corrupt_line(
    options: ConversionOptions,
    error: CorruptLineError,
    converted_count: int,
) -> None:
    _LOGGER.error(
        "conversion_corrupt_line",
        source_path=options.source_path,
        line_number=error.line_number,
        raw_line=error.raw_line,
        reason=error.reason,
        converted=converted_count,
    )
