"""
CLI checks through typer's test runner against a temporary sample database.
"""

from __future__ import annotations

from pathlib import Path

import pytest
from typer.testing import CliRunner

from transcript_desk.main import app

runner = CliRunner()


def test_info_shows_configured_paths(cli_env):
    result = runner.invoke(app, ["info"])

    assert result.exit_code == 0
    assert cli_env.database_path in result.output


def test_tables_marks_the_focal_table(cli_env):
    result = runner.invoke(app, ["tables"])

    assert result.exit_code == 0
    assert "podcasts (focal)" in result.output


def test_show_and_stats_render(cli_env):
    show = runner.invoke(app, ["show", "--year", "2024", "--sort", "month", "--page-size", "5"])
    stats = runner.invoke(app, ["stats"])

    assert show.exit_code == 0
    assert stats.exit_code == 0
    assert "Overview" in stats.output


def test_show_rejects_malformed_filter(cli_env):
    result = runner.invoke(app, ["show", "--filter", "category"])

    assert result.exit_code == 1
    assert "COLUMN=VALUE" in result.output


def test_edit_then_export(cli_env, tmp_path: Path):
    edit = runner.invoke(app, ["edit", "7", "--transcript", ""])
    assert edit.exit_code == 0
    assert "status: To do" in edit.output

    export = runner.invoke(app, ["export-csv"])
    assert export.exit_code == 0
    files = list(Path(cli_env.export_dir).glob("podcast_data_*.csv"))
    assert len(files) == 1

    snapshot = runner.invoke(app, ["snapshot", "--output-dir", str(tmp_path / "backups")])
    assert snapshot.exit_code == 0
    assert len(list((tmp_path / "backups").glob("flask_app_backup_*.db"))) == 1


def test_edit_unknown_record_fails(cli_env):
    result = runner.invoke(app, ["edit", "9999", "--transcript", "x"])

    assert result.exit_code == 1
    assert "not found" in result.output


def test_storage_write_failure_is_reported_inline(cli_env):
    Path(cli_env.storage_path).mkdir(parents=True)

    edit = runner.invoke(app, ["edit", "7", "--transcript", "x"])
    clear = runner.invoke(app, ["clear-changes", "--yes"])

    assert edit.exit_code == 1
    assert "Error saving transcript" in edit.output
    assert clear.exit_code == 1
    assert "Error clearing changes" in clear.output


def test_clear_changes_requires_confirmation(cli_env):
    runner.invoke(app, ["edit", "3", "--transcript", "temp"])

    aborted = runner.invoke(app, ["clear-changes"], input="n\n")
    confirmed = runner.invoke(app, ["clear-changes", "--yes"])

    assert aborted.exit_code != 0
    assert confirmed.exit_code == 0
    assert "cleared" in confirmed.output


def test_missing_database_blocks_commands(cli_env, monkeypatch: pytest.MonkeyPatch, tmp_path: Path):
    from transcript_desk.config import get_settings

    monkeypatch.setenv("DATABASE_PATH", str(tmp_path / "missing.db"))
    get_settings.cache_clear()

    result = runner.invoke(app, ["show"])

    assert result.exit_code == 1
    assert "Load failed" in result.output


def test_inspect_uses_the_provider_chain(cli_env, tmp_path: Path):
    path = tmp_path / "notes.json"
    path.write_text('[{"id": 1, "title": "hello"}]', encoding="utf-8")

    result = runner.invoke(app, ["inspect", str(path)])

    assert result.exit_code == 0
    assert "Tables: notes" in result.output
