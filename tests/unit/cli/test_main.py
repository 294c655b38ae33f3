"""Unit tests for CLI command handling."""

from __future__ import annotations

import sqlite3

import pytest

from cli.main import main
from tests.fixture_paths import fixture_path


def test_cli_converts_transcript_and_reports_count(tmp_path, capsys) -> None:
    """CLI should announce the run and print the converted count."""
    db_path = tmp_path / "logs.db"
    source_path = str(fixture_path("transcripts/mixed.log"))

    exit_code = main([source_path, str(db_path), "Libera", "#chat", "--no-progress"])
    output = capsys.readouterr().out

    assert exit_code == 0
    assert f"Saving entries from {source_path} to {db_path}" in output
    assert "Successfully converted 12 entries." in output


def test_cli_draws_progress_by_default(tmp_path, capsys) -> None:
    """Progress output should include the total entry count."""
    source_path = str(fixture_path("transcripts/mixed.log"))

    exit_code = main([source_path, str(tmp_path / "logs.db"), "Libera", "#chat"])

    assert exit_code == 0
    assert "Converting 12 entries..." in capsys.readouterr().out


def test_cli_reports_corrupt_line_and_fails(tmp_path, capsys) -> None:
    """A corrupt line should print its number and exit non-zero."""
    db_path = tmp_path / "logs.db"
    source_path = str(fixture_path("transcripts/corrupt_month.log"))

    exit_code = main([source_path, str(db_path), "Libera", "#chat", "--no-progress"])
    output = capsys.readouterr().out

    assert exit_code == 1
    assert "Log file corrupt near line 2: 2023-99-15T12:00:05  <alice> second" in output
    with sqlite3.connect(db_path) as conn:
        assert conn.execute("SELECT COUNT(*) FROM log").fetchone()[0] == 1


def test_cli_fails_for_missing_transcript(tmp_path, capsys) -> None:
    """A missing transcript should be reported on stderr."""
    exit_code = main(
        [str(tmp_path / "missing.log"), str(tmp_path / "logs.db"), "Libera", "#chat"]
    )

    assert exit_code == 1
    assert "Cannot read transcript" in capsys.readouterr().err


def test_cli_rejects_invalid_commit_interval(tmp_path, capsys) -> None:
    """Invalid interval overrides should fail before any work is done."""
    source_path = str(fixture_path("transcripts/mixed.log"))

    exit_code = main(
        [source_path, str(tmp_path / "logs.db"), "Libera", "#chat", "--commit-interval", "-1"]
    )

    assert exit_code == 1
    assert "Invalid configuration" in capsys.readouterr().err
    assert (tmp_path / "logs.db").exists() is False


def test_cli_requires_all_positionals(capsys) -> None:
    """Missing positional arguments should be a usage error."""
    with pytest.raises(SystemExit) as exit_info:
        main(["only-one.log"])

    assert exit_info.value.code == 2
    assert "usage: irclog" in capsys.readouterr().err
