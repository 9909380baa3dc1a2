from pathlib import Path

from transcript_desk import config
from transcript_desk.infrastructure.sqlite_engine import SqliteEngine
from scripts import generate_data


def test_settings_defaults(monkeypatch):
    for name in ("DATABASE_PATH", "FOCAL_TABLE", "STORAGE_PATH", "DEFAULT_PAGE_SIZE"):
        monkeypatch.delenv(name, raising=False)

    settings = config.Settings(_env_file=None)

    assert settings.database_path == "flask_app.db"
    assert settings.focal_table == "podcasts"
    assert settings.overlay_key == "podcastTranscriptChanges"
    assert settings.default_page_size == 10
    assert settings.load_retry_attempts > 0


def test_settings_read_environment(monkeypatch):
    monkeypatch.setenv("FOCAL_TABLE", "episodes")
    monkeypatch.setenv("JSON_LOGS", "true")

    settings = config.Settings(_env_file=None)

    assert settings.focal_table == "episodes"
    assert settings.json_logs is True


def test_get_settings_is_cached():
    config.get_settings.cache_clear()
    try:
        assert config.get_settings() is config.get_settings()
    finally:
        config.get_settings.cache_clear()


def test_generate_data_writes_sqlite_file(tmp_path: Path):
    path = tmp_path / "out" / "flask_app.db"

    size = generate_data._write_database(path, rows=5, seed=123, table="podcasts")

    assert path.exists()
    assert path.stat().st_size == size
    db = SqliteEngine().init().open(path.read_bytes())
    result = db.execute("SELECT id, category, month, year, report_name, status, transcript FROM podcasts")
    assert len(result.rows) == 5
    assert [row[0] for row in result.rows] == [1, 2, 3, 4, 5]
