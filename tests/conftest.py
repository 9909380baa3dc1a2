"""
Pytest configuration for the transcript desk.

Provides fixtures for:
- Hand-written podcast records for view/stats tests
- A generated SQLite sample database on disk
- Settings override pointing at temporary paths
- Storage backends for the change overlay
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, List

import pytest

from transcript_desk.config import Settings, get_settings
from transcript_desk.core.interpreter import MinimalQueryInterpreter
from transcript_desk.domain.models import FOCAL_COLUMNS
from transcript_desk.infrastructure.sqlite_engine import SqliteEngine
from transcript_desk.infrastructure.storage import MemoryStorage
from transcript_desk.sample import build_sample_bytes
from transcript_desk.session import Session

SAMPLE_ROWS = 60
SAMPLE_SEED = 7


def _podcast(record_id, category, month, year, report_name, status, transcript) -> Dict[str, Any]:
    return {
        "id": record_id,
        "category": category,
        "month": month,
        "year": year,
        "report_name": report_name,
        "status": status,
        "transcript": transcript,
    }


@pytest.fixture
def podcast_rows() -> List[Dict[str, Any]]:
    """
    Ten records covering every status bucket, blank and missing transcripts,
    and text that needs CSV quoting.
    """
    return [
        _podcast(1, "Technology", 1, 2024, "AI Weekly", "completed", "Intro to AI"),
        _podcast(2, "Health", 2, 2023, "Sleep Science", "pending", ""),
        _podcast(3, "Technology", 3, 2024, "Chips Roundup", "error: timeout", None),
        _podcast(4, "Finance", 4, 2022, "Market Recap", "To do", ""),
        _podcast(5, "Health", 5, 2024, "Nutrition Q&A", "Success", "Talk about food, diets"),
        _podcast(6, "Finance", 6, 2024, "Budget Basics", None, "  "),
        _podcast(7, "Technology", 7, 2023, "Cloud Costs", "processing", "Cloud transcript"),
        _podcast(8, "Culture", 8, 2024, "Film Review", "archived", 'Movies "quoted"'),
        _podcast(9, "Culture", 9, 2025, "Book Club", "todo", ""),
        _podcast(10, "Health", 10, 2024, "Fitness Tips", "completed", "Run daily"),
    ]


@pytest.fixture
def focal_columns() -> List[str]:
    return list(FOCAL_COLUMNS)


@pytest.fixture
def memory_storage() -> MemoryStorage:
    return MemoryStorage()


@pytest.fixture
def engine() -> SqliteEngine:
    """
    A fresh, initialized engine so tests never share the cached instance.
    """
    return SqliteEngine().init()


@pytest.fixture
def interpreter_session(podcast_rows, memory_storage) -> Session:
    """
    Session over the hand-written records, answered by the minimal interpreter.
    """
    executor = MinimalQueryInterpreter({"podcasts": podcast_rows})
    session = Session(executor, storage=memory_storage, page_size=5)
    session.reload()
    return session


@pytest.fixture
def sample_db_path(tmp_path: Path) -> Path:
    """
    Write a deterministic sample database to a temporary file.
    """
    path = tmp_path / "flask_app.db"
    path.write_bytes(build_sample_bytes(rows=SAMPLE_ROWS, seed=SAMPLE_SEED))
    return path


@pytest.fixture
def test_settings(tmp_path: Path, sample_db_path: Path) -> Settings:
    """
    Settings fixture pointing every path at the test's temporary directory.
    """
    return Settings(
        database_path=str(sample_db_path),
        storage_path=str(tmp_path / "state" / "storage.json"),
        export_dir=str(tmp_path / "exports"),
        log_level="DEBUG",
    )


@pytest.fixture
def cli_env(monkeypatch: pytest.MonkeyPatch, test_settings: Settings):
    """
    Expose the test settings to the CLI through environment variables.

    The cached settings instance is dropped before and after so other tests
    never see these paths.
    """
    monkeypatch.setenv("DATABASE_PATH", test_settings.database_path)
    monkeypatch.setenv("STORAGE_PATH", test_settings.storage_path)
    monkeypatch.setenv("EXPORT_DIR", test_settings.export_dir)
    monkeypatch.setenv("LOG_LEVEL", "WARNING")
    get_settings.cache_clear()
    yield test_settings
    get_settings.cache_clear()
