"""
Deterministic sample data for demos and tests.

Builds a SQLite database containing the focal `podcasts` table filled with
pseudo-random production records. Generation is seeded, so the same
arguments always produce the same rows.
"""

from __future__ import annotations

import random
import sqlite3
from typing import Any, Dict, List, Optional

from transcript_desk.infrastructure.sqlite_engine import SqliteDatabase, SqliteEngine, get_engine

CATEGORIES = ["Technology", "Health", "Finance", "Education", "Sports", "Culture"]
STATUSES = ["completed", "Success", "pending", "processing", "To do", "error: timeout", "archived", None]
TOPICS = ["interview", "roundup", "deep dive", "briefing", "q&a", "recap"]

SCHEMA = """
CREATE TABLE IF NOT EXISTS {table} (
    id INTEGER PRIMARY KEY,
    category TEXT,
    month INTEGER,
    year INTEGER,
    report_name TEXT,
    status TEXT,
    transcript TEXT,
    created_at TEXT
)
"""


def sample_rows(rows: int = 50, seed: int = 42) -> List[Dict[str, Any]]:
    rng = random.Random(seed)
    records: List[Dict[str, Any]] = []
    for i in range(1, rows + 1):
        category = rng.choice(CATEGORIES)
        month = rng.randint(1, 12)
        year = rng.choice([2022, 2023, 2024, 2025])
        status = rng.choice(STATUSES)
        topic = rng.choice(TOPICS)
        transcript = ""
        if status in ("completed", "Success") or rng.random() < 0.3:
            transcript = f"Host: Welcome to the {category.lower()} {topic}.\nGuest: Thanks, glad to be here."
        records.append(
            {
                "id": i,
                "category": category,
                "month": month,
                "year": year,
                "report_name": f"{category} {topic.title()} #{i}",
                "status": status,
                "transcript": transcript,
                "created_at": f"{year}-{month:02d}-01T00:00:00Z",
            }
        )
    return records


def build_sample_bytes(rows: int = 50, seed: int = 42, table: str = "podcasts") -> bytes:
    """Create the sample database in memory and return its file bytes."""
    conn = sqlite3.connect(":memory:")
    try:
        conn.execute(SCHEMA.format(table=table))
        conn.executemany(
            f"INSERT INTO {table} (id, category, month, year, report_name, status, transcript, created_at) "
            "VALUES (:id, :category, :month, :year, :report_name, :status, :transcript, :created_at)",
            sample_rows(rows, seed),
        )
        conn.commit()
        return bytes(conn.serialize())
    finally:
        conn.close()


def create_sample_database(
    rows: int = 50,
    seed: int = 42,
    table: str = "podcasts",
    engine: Optional[SqliteEngine] = None,
) -> SqliteDatabase:
    engine = (engine or get_engine()).init()
    return engine.open(build_sample_bytes(rows=rows, seed=seed, table=table))


__all__ = [
    "CATEGORIES",
    "STATUSES",
    "sample_rows",
    "build_sample_bytes",
    "create_sample_database",
]
