"""
Loading: the canonical database file, uploaded files and the focal records.

Usage:
    from transcript_desk.loader import load_database_file, open_upload, fetch_records

    loaded = load_database_file("flask_app.db")
    fetched = fetch_records(loaded.executor, "podcasts")

Uploads go through an ordered provider chain (SQLite engine, delimited text,
structured text, diagnostic placeholder). Every declined attempt is kept on the
returned LoadOutcome so tests and the CLI can show which provider won.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Dict, Iterable, List, Optional

from transcript_desk.domain.models import FOCAL_COLUMNS, Record, ResultSet
from transcript_desk.errors import ExecutionError, LoadFailure
from transcript_desk.infrastructure.protocols import QueryExecutor
from transcript_desk.infrastructure.sqlite_engine import SqliteEngine, get_engine, read_database_bytes
from transcript_desk.providers.abstract import LoadProvider, ProviderAttempt, Upload
from transcript_desk.providers.placeholder import DiagnosticProvider
from transcript_desk.providers.sqlite_file import SqliteFileProvider
from transcript_desk.providers.tabular import DelimitedTextProvider, StructuredTextProvider
from transcript_desk.utils.logging import get_logger

log = get_logger(__name__)

LIST_TABLES_SQL = "SELECT name FROM sqlite_master WHERE type='table'"


def _provider_factories(engine: Optional[SqliteEngine] = None) -> Dict[str, Callable[[], LoadProvider]]:
    """Registry of providers, in the order they are tried."""
    return {
        "sqlite": lambda: SqliteFileProvider(engine),
        "delimited": lambda: DelimitedTextProvider(),
        "structured": lambda: StructuredTextProvider(),
        "diagnostic": lambda: DiagnosticProvider(),
    }


def available_providers() -> List[str]:
    """Provider names in trial order."""
    return list(_provider_factories().keys())


def _resolve_provider(name: str, engine: Optional[SqliteEngine] = None) -> LoadProvider:
    factories = _provider_factories(engine)
    if name not in factories:
        raise ValueError(f"Unknown provider '{name}'. Available: {', '.join(factories)}")
    return factories[name]()


@dataclass
class LoadOutcome:
    executor: QueryExecutor
    provider: str
    attempts: List[ProviderAttempt] = field(default_factory=list)


def open_upload(
    upload: Upload,
    provider_names: Optional[Iterable[str]] = None,
    engine: Optional[SqliteEngine] = None,
) -> LoadOutcome:
    """
    Offer the upload to each provider in turn and return the first executor built.

    Raises
    ------
    LoadFailure
        Only if every provider declined, which cannot happen while the
        diagnostic provider is part of the chain.
    """
    names = list(provider_names) if provider_names is not None else available_providers()
    attempts: List[ProviderAttempt] = []
    for name in names:
        provider = _resolve_provider(name, engine)
        try:
            executor = provider.open(upload)
        except Exception as exc:  # noqa: BLE001 - any provider failure falls through to the next
            log.info(
                f"[PROVIDER DECLINED] {name}",
                extra={"provider": name, "upload": upload.filename, "error": str(exc)},
            )
            attempts.append(
                ProviderAttempt(provider=name, succeeded=False, error_type=type(exc).__name__, error=str(exc))
            )
            continue
        attempts.append(ProviderAttempt(provider=name, succeeded=True, error_type=None, error=None))
        log.info(f"[PROVIDER SELECTED] {name}", extra={"provider": name, "upload": upload.filename})
        return LoadOutcome(executor=executor, provider=name, attempts=attempts)

    reasons = "; ".join(f"{a['provider']}: {a['error']}" for a in attempts)
    raise LoadFailure(f"No provider could open {upload.filename}: {reasons}")


def list_tables(executor: QueryExecutor) -> List[str]:
    result = executor.execute(LIST_TABLES_SQL)
    return [str(row[0]) for row in result.rows]


@dataclass
class LoadedDatabase:
    """
    A database opened from disk, with the table that will be shown.
    """

    executor: QueryExecutor
    all_tables: List[str]
    default_table: str
    has_focal_table: bool

    @property
    def tables(self) -> List[str]:
        return [self.default_table] if self.has_focal_table else list(self.all_tables)


def load_database_file(
    path: Path | str,
    focal_table: str = "podcasts",
    engine: Optional[SqliteEngine] = None,
    attempts: int = 3,
) -> LoadedDatabase:
    """
    Read and open the canonical database. A missing focal table is reported, not fatal.

    Raises
    ------
    LoadFailure
        If the file cannot be read or is not a SQLite database.
    """
    log.info("Loading database", extra={"path": str(path)})
    data = read_database_bytes(path, attempts=attempts)
    executor = (engine or get_engine()).init().open(data)
    try:
        all_tables = list_tables(executor)
    except ExecutionError as exc:
        raise LoadFailure(f"Invalid SQLite database: {exc}") from exc

    has_focal = focal_table in all_tables
    if not has_focal:
        log.warning(
            f"{focal_table} table not found",
            extra={"focal_table": focal_table, "available_tables": all_tables},
        )
    log.info("Database loaded", extra={"tables": all_tables, "focal_table": focal_table})
    return LoadedDatabase(
        executor=executor,
        all_tables=all_tables,
        default_table=focal_table,
        has_focal_table=has_focal,
    )


@dataclass
class FetchedRecords:
    table: Optional[str]
    columns: List[str]
    rows: List[Record]
    has_focal_table: bool


def _ensure_ids(columns: List[str], rows: List[Record]) -> List[str]:
    """Give rows 1-based sequential ids when the table has no id column."""
    if "id" in columns or not columns:
        return columns
    for position, row in enumerate(rows, start=1):
        row["id"] = position
    return ["id", *columns]


def _select_all(executor: QueryExecutor, table: str) -> ResultSet:
    return executor.execute(f'SELECT * FROM "{table}"')


def fetch_records(executor: QueryExecutor, focal_table: str = "podcasts") -> FetchedRecords:
    """
    Query the focal columns of the focal table, falling back to whatever table exists.

    Raises
    ------
    LoadFailure
        If the executor rejects the queries.
    """
    try:
        tables = list_tables(executor)
        has_focal = focal_table in tables
        if has_focal:
            try:
                result = executor.execute(f"SELECT {', '.join(FOCAL_COLUMNS)} FROM {focal_table}")
            except ExecutionError as exc:
                log.warning(
                    "Focal columns unavailable, selecting all columns",
                    extra={"table": focal_table, "error": str(exc)},
                )
                result = ResultSet.empty()
            if result.is_empty:
                result = _select_all(executor, focal_table)
            table: Optional[str] = focal_table
        elif tables:
            table = tables[0]
            log.warning(
                f"{focal_table} table not found, showing {table}",
                extra={"focal_table": focal_table, "available_tables": tables},
            )
            result = _select_all(executor, table)
        else:
            table = None
            result = ResultSet.empty()
    except ExecutionError as exc:
        raise LoadFailure(f"Failed to query records: {exc}") from exc

    rows = result.records()
    columns = _ensure_ids(list(result.columns), rows)
    return FetchedRecords(table=table, columns=columns, rows=rows, has_focal_table=has_focal)


__all__ = [
    "LIST_TABLES_SQL",
    "available_providers",
    "LoadOutcome",
    "open_upload",
    "list_tables",
    "LoadedDatabase",
    "load_database_file",
    "FetchedRecords",
    "fetch_records",
]
