"""Irclog CLI entry point.
This module converts one plain-text transcript into the SQLite store.
It maps argparse options onto the conversion pipeline.
"""

from __future__ import annotations

import argparse
import sys
from dataclasses import replace
from typing import Sequence

from core.config import IrclogConfig, parse_commit_interval, parse_encoding
from core.errors import (
    CorruptLineError,
    IrclogConfigError,
    IrclogIngestError,
    IrclogStorageError,
)
from core.logging_config import configure_logging
from core.types import ConversionOptions
from ingest.pipeline import convert_transcript


def build_parser() -> argparse.ArgumentParser:
    """Build the CLI parser.

    Returns:
        Configured argument parser.
    """
    parser = argparse.ArgumentParser(
        prog="irclog",
        description="Convert a plain-text IRC transcript into a SQLite log store",
    )
    parser.add_argument("text_log", help="Plain-text transcript to convert")
    parser.add_argument("database", help="SQLite database file, created if missing")
    parser.add_argument("network", help="Network the transcript was recorded on")
    parser.add_argument("buffer", help="Channel or query name of the transcript")
    parser.add_argument(
        "--commit-interval",
        help="Seconds between transaction commits (overrides IRCLOG_COMMIT_INTERVAL)",
    )
    parser.add_argument(
        "--encoding",
        help="Transcript text encoding (overrides IRCLOG_ENCODING)",
    )
    parser.add_argument(
        "--no-progress",
        action="store_true",
        help="Do not draw the in-place progress line",
    )
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Run the Irclog CLI.

    Args:
        argv: Optional argument vector.

    Returns:
        Process exit code.
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        config = _build_config(args)
    except IrclogConfigError as error:
        print(f"Invalid configuration: {error}", file=sys.stderr)
        return 1
    configure_logging(config.log_level)
    options = ConversionOptions(
        source_path=args.text_log,
        store_path=args.database,
        network_name=args.network,
        buffer_name=args.buffer,
    )
    return _run_conversion(options, config)


def _build_config(args: argparse.Namespace) -> IrclogConfig:
    """Build runtime config with CLI overrides applied.

    Args:
        args: Parsed CLI args.

    Returns:
        Validated config.
    """
    config = IrclogConfig.from_env()
    if args.commit_interval is not None:
        config = replace(
            config, commit_interval_seconds=parse_commit_interval(args.commit_interval)
        )
    if args.encoding is not None:
        config = replace(config, encoding=parse_encoding(args.encoding))
    if args.no_progress:
        config = replace(config, show_progress=False)
    return config


def _run_conversion(options: ConversionOptions, config: IrclogConfig) -> int:
    """Run conversion and translate fatal errors into exit codes.

    Args:
        options: Conversion options.
        config: Runtime config.

    Returns:
        Exit code.
    """
    print(f"Saving entries from {options.source_path} to {options.store_path}")
    try:
        result = convert_transcript(options, config)
    except CorruptLineError as error:
        print(f"\n{error}")
        return 1
    except IrclogIngestError as error:
        print(f"\nCannot read transcript: {error}", file=sys.stderr)
        return 1
    except IrclogStorageError as error:
        print(f"\nStorage failure: {error}", file=sys.stderr)
        return 1
    print(f"\nSuccessfully converted {result.converted_count} entries.")
    return 0
