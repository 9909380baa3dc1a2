"""
SQLite engine capability for the transcript desk.

Wraps the standard library sqlite3 module behind the QueryExecutor interface.
Databases are always opened in memory from a byte buffer so that the canonical
file on disk is never written to; the only way edits reach a file is an
explicit snapshot export.

Reading the database file retries transient I/O errors using tenacity.
"""

from __future__ import annotations

import sqlite3
import threading
from functools import lru_cache
from pathlib import Path
from typing import Any, Optional, Sequence

from tenacity import (
    Retrying,
    retry_if_exception_type,
    retry_if_not_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from transcript_desk.domain.models import ResultSet
from transcript_desk.errors import ExecutionError, LoadFailure
from transcript_desk.utils.logging import get_logger

log = get_logger(__name__)

SQLITE_HEADER = b"SQLite format 3\x00"


class SqliteDatabase:
    """
    In-memory SQLite database implementing the QueryExecutor capability.
    """

    def __init__(self, connection: sqlite3.Connection) -> None:
        self._conn = connection

    def execute(self, sql: str) -> ResultSet:
        try:
            cursor = self._conn.execute(sql)
            rows = cursor.fetchall()
        except sqlite3.Error as exc:
            raise ExecutionError(str(exc), sql=sql) from exc
        if cursor.description is None:
            return ResultSet.empty()
        columns = [col[0] for col in cursor.description]
        return ResultSet(columns=columns, rows=[tuple(row) for row in rows])

    def run(self, sql: str, params: Sequence[Any] = ()) -> None:
        try:
            self._conn.execute(sql, tuple(params))
            self._conn.commit()
        except sqlite3.Error as exc:
            raise ExecutionError(str(exc), sql=sql) from exc

    def export(self) -> bytes:
        return bytes(self._conn.serialize())

    def close(self) -> None:
        self._conn.close()


class SqliteEngine:
    """
    Process-wide handle on the SQL engine with an explicit init/is_ready lifecycle.
    """

    _lock = threading.Lock()

    def __init__(self) -> None:
        self._ready = False
        self.version: Optional[str] = None

    def init(self) -> "SqliteEngine":
        """Check the runtime supports in-memory (de)serialization; idempotent."""
        with self._lock:
            if self._ready:
                return self
            if not hasattr(sqlite3.Connection, "deserialize"):
                raise LoadFailure(
                    "sqlite3 lacks serialize/deserialize support (Python 3.11+ required)"
                )
            self.version = sqlite3.sqlite_version
            self._ready = True
            log.debug("SQLite engine initialized", extra={"sqlite_version": self.version})
            return self

    def is_ready(self) -> bool:
        return self._ready

    def open(self, data: Optional[bytes] = None) -> SqliteDatabase:
        """
        Open a database from raw file bytes, or an empty one when data is None.

        Raises
        ------
        LoadFailure
            If the engine is not initialized or the bytes are not a SQLite database.
        """
        if not self._ready:
            raise LoadFailure("SQLite engine used before init()")
        conn = sqlite3.connect(":memory:")
        if data:
            try:
                conn.deserialize(data)
                conn.execute("SELECT name FROM sqlite_master WHERE type='table'").fetchall()
            except sqlite3.Error as exc:
                conn.close()
                raise LoadFailure(f"Invalid SQLite database: {exc}") from exc
        return SqliteDatabase(conn)


@lru_cache(maxsize=1)
def get_engine() -> SqliteEngine:
    """
    Return the shared engine instance (not yet initialized).
    """
    return SqliteEngine()


def read_database_bytes(path: Path | str, attempts: int = 3) -> bytes:
    """
    Read a database file, retrying transient I/O errors with exponential backoff.

    Missing files and permission problems are not retried.

    Raises
    ------
    LoadFailure
        If the file cannot be read.
    """
    retrying = Retrying(
        stop=stop_after_attempt(max(1, attempts)),
        wait=wait_exponential(multiplier=0.2, min=0.2, max=2),
        retry=retry_if_exception_type(OSError)
        & retry_if_not_exception_type((FileNotFoundError, IsADirectoryError, PermissionError)),
        reraise=True,
    )
    try:
        return retrying(Path(path).read_bytes)
    except OSError as exc:
        raise LoadFailure(f"Failed to fetch database: {exc}") from exc


__all__ = [
    "SQLITE_HEADER",
    "SqliteDatabase",
    "SqliteEngine",
    "get_engine",
    "read_database_bytes",
]
