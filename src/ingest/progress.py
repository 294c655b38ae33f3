"""Conversion progress reporting.

This module draws an in-place progress line on stdout at each batch
boundary and emits structured start, batch, and completion events.
"""

from __future__ import annotations

import sys
import time
from dataclasses import dataclass, field
from typing import TextIO

from core.logging_config import get_logger

_LOGGER = get_logger(__name__)


@dataclass
class ConversionProgressTracker:
    """Track and emit conversion progress for one transcript."""

    source_path: str
    total_lines: int
    show_progress: bool = True
    stream: TextIO = field(default_factory=lambda: sys.stdout)
    run_started_at: float = field(default_factory=time.monotonic)

    def log_conversion_started(self, store_path: str, buffer_id: int) -> None:
        """Log one event when a conversion run starts."""
        _LOGGER.info(
            "conversion_started",
            source_path=self.source_path,
            store_path=store_path,
            buffer_id=buffer_id,
            total_lines=self.total_lines,
        )
        if self.show_progress:
            self.stream.write(f"Converting {self.total_lines} entries...\n")
            self.stream.flush()

    def report_batch(self, converted_count: int) -> None:
        """Report progress after a batch transaction was committed."""
        elapsed_seconds = self.elapsed_seconds()
        rate = _rate_per_second(converted_count, elapsed_seconds)
        _LOGGER.debug(
            "conversion_batch_committed",
            source_path=self.source_path,
            converted=converted_count,
            total_lines=self.total_lines,
            rate_per_second=rate,
        )
        if not self.show_progress:
            return
        self.stream.write(
            f" Converted {converted_count}/{self.total_lines} entries. "
            f"{rate}/second        \r"
        )
        self.stream.flush()

    def log_conversion_completed(self, converted_count: int) -> None:
        """Log completion summary with elapsed time and throughput."""
        elapsed_seconds = self.elapsed_seconds()
        _LOGGER.info(
            "conversion_completed",
            source_path=self.source_path,
            converted=converted_count,
            total_lines=self.total_lines,
            elapsed_seconds=round(elapsed_seconds, 3),
            rate_per_second=_rate_per_second(converted_count, elapsed_seconds),
        )

    def elapsed_seconds(self) -> float:
        return max(0.0, time.monotonic() - self.run_started_at)


def _rate_per_second(count: int, elapsed_seconds: float) -> int:
    """Return whole entries per second, treating sub-second runs as one second."""
    return int(count / max(1.0, elapsed_seconds))
