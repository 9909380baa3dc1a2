"""
SQLite provider: open the upload with the real engine.
"""

from __future__ import annotations

from typing import Optional

from transcript_desk.errors import UnrecognizedFile
from transcript_desk.infrastructure.sqlite_engine import (
    SQLITE_HEADER,
    SqliteDatabase,
    SqliteEngine,
    get_engine,
)
from transcript_desk.providers.abstract import AbstractLoadProvider, Upload


class SqliteFileProvider(AbstractLoadProvider):
    name: str = "sqlite"
    description: str = "SQLite database file opened by the real engine."

    def __init__(self, engine: Optional[SqliteEngine] = None) -> None:
        self._engine = engine

    def open(self, upload: Upload) -> SqliteDatabase:
        if not upload.data.startswith(SQLITE_HEADER):
            raise UnrecognizedFile(f"{upload.filename} is not a SQLite database")
        engine = (self._engine or get_engine()).init()
        return engine.open(upload.data)


__all__ = ["SqliteFileProvider"]
