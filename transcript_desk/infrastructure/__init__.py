"""
Infrastructure package for the transcript desk.

Centralizes I/O capabilities (the SQLite engine, overlay storage) behind
small interfaces, decoupled from the record store and view logic.
"""

from transcript_desk.infrastructure.protocols import QueryExecutor, Storage
from transcript_desk.infrastructure.sqlite_engine import (
    SqliteDatabase,
    SqliteEngine,
    get_engine,
    read_database_bytes,
)
from transcript_desk.infrastructure.storage import JsonFileStorage, MemoryStorage

__all__ = [
    "QueryExecutor",
    "Storage",
    "SqliteDatabase",
    "SqliteEngine",
    "get_engine",
    "read_database_bytes",
    "JsonFileStorage",
    "MemoryStorage",
]
