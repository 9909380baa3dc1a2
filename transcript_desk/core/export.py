"""
CSV and database snapshot exports.

CSV export always covers the whole record store, independent of the current
search/filter/sort/page. The snapshot is the only path that writes overlay
edits into the database: every entry is replayed as an UPDATE first (a failing
entry is logged and skipped), then the engine serializes the database.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Iterable, List, Mapping, Optional, Sequence

from transcript_desk.core.values import month_name, stringify
from transcript_desk.domain.models import ChangeEntry, Record
from transcript_desk.errors import ExecutionError, OverlayReplayFailure
from transcript_desk.infrastructure.protocols import QueryExecutor
from transcript_desk.utils.logging import get_logger

log = get_logger(__name__)

CSV_PREFIX = "podcast_data"
SNAPSHOT_PREFIX = "flask_app_backup"


def timestamp_slug(now: Optional[datetime] = None) -> str:
    """
    UTC timestamp safe for file names: "2024-03-05T14-07-09".
    """
    now = (now or datetime.now(timezone.utc)).astimezone(timezone.utc)
    iso = now.isoformat(timespec="milliseconds").replace("+00:00", "Z")
    # drop the "-mmmZ" suffix left after replacing ":" and "."
    return iso.replace(":", "-").replace(".", "-")[:-5]


def csv_filename(now: Optional[datetime] = None) -> str:
    return f"{CSV_PREFIX}_{timestamp_slug(now)}.csv"


def snapshot_filename(now: Optional[datetime] = None) -> str:
    return f"{SNAPSHOT_PREFIX}_{timestamp_slug(now)}.db"


def _csv_field(column: str, value: Any) -> str:
    if column == "month" and value is not None:
        value = month_name(value)
    text = stringify(value).replace('"', '""')
    if any(ch in text for ch in (",", "\n", "\r", '"')):
        text = f'"{text}"'
    return text


def to_csv(records: Iterable[Mapping[str, Any]], column_order: Sequence[str]) -> bytes:
    """
    Serialize records to CSV bytes. The id column is never exported.
    """
    columns = [col for col in column_order if col != "id"]
    lines: List[str] = [",".join(columns)]
    for row in records:
        lines.append(",".join(_csv_field(col, row.get(col)) for col in columns))
    return "\n".join(lines).encode("utf-8")


class ExportEngine:
    """
    Exports bound to one focal table.
    """

    def __init__(self, table: str = "podcasts") -> None:
        self.table = table
        self.last_replay_failures: List[OverlayReplayFailure] = []

    def to_csv(self, records: Sequence[Record], column_order: Sequence[str]) -> bytes:
        data = to_csv(records, column_order)
        log.info("CSV exported", extra={"rows": len(records), "bytes": len(data)})
        return data

    def replay_overlay(self, db: QueryExecutor, overlay: Mapping[str, ChangeEntry]) -> int:
        """Write every overlay entry into the database; returns how many succeeded."""
        sql = f'UPDATE "{self.table}" SET transcript = ?, status = ? WHERE id = ?'
        failures: List[OverlayReplayFailure] = []
        applied = 0
        for record_id, change in overlay.items():
            try:
                key: Any = int(record_id)
            except ValueError:
                key = record_id
            try:
                db.run(sql, [change.transcript, change.status, key])
                applied += 1
            except ExecutionError as exc:
                failure = OverlayReplayFailure(record_id, exc)
                log.warning(str(failure), extra={"record_id": record_id})
                failures.append(failure)
        self.last_replay_failures = failures
        return applied

    def to_snapshot(self, db: QueryExecutor, overlay: Mapping[str, ChangeEntry]) -> bytes:
        applied = self.replay_overlay(db, overlay)
        data = db.export()
        log.info(
            "Database snapshot created",
            extra={"applied": applied, "failed": len(self.last_replay_failures), "bytes": len(data)},
        )
        return data


__all__ = [
    "CSV_PREFIX",
    "SNAPSHOT_PREFIX",
    "timestamp_slug",
    "csv_filename",
    "snapshot_filename",
    "to_csv",
    "ExportEngine",
]
