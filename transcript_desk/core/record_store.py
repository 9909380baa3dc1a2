"""
Record store and change overlay.

The store holds the materialized rows of the focal table. The overlay is a
durable mapping of record id -> pending edit kept in the storage capability
under a single key, serialized as JSON:

    {"7": {"transcript": "...", "status": "To do", "timestamp": "2024-05-01T10:00:00.000Z"}}

An overlay entry always wins over the value the executor returned for the same
id, which is how edits survive a reload without touching the database file.
"""

from __future__ import annotations

import json
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence

from pydantic import ValidationError

from transcript_desk.core.values import stringify
from transcript_desk.domain.models import ChangeEntry, Record
from transcript_desk.errors import LoadFailure, RecordNotFound, StorageError
from transcript_desk.infrastructure.protocols import Storage
from transcript_desk.utils.logging import get_logger

log = get_logger(__name__)

TODO_STATUS = "To do"


def utc_timestamp(now: Optional[datetime] = None) -> str:
    """ISO-8601 UTC timestamp with millisecond precision and a trailing Z."""
    now = now or datetime.now(timezone.utc)
    return now.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def _key(record_id: Any) -> str:
    return stringify(record_id)


class ChangeOverlay:
    """
    Pending edits keyed by record id, persisted through a Storage capability.
    """

    def __init__(self, storage: Storage, key: str = "podcastTranscriptChanges") -> None:
        self._storage = storage
        self.key = key
        self._entries: Dict[str, ChangeEntry] = {}
        self.reload()

    def reload(self) -> None:
        """Re-read the overlay from storage. Malformed entries are logged and dropped."""
        raw = self._storage.get(self.key)
        entries: Dict[str, ChangeEntry] = {}
        if raw:
            try:
                payload = json.loads(raw)
            except ValueError:
                log.warning("Stored overlay is not valid JSON, ignoring", extra={"key": self.key})
                payload = {}
            if not isinstance(payload, dict):
                payload = {}
            for record_id, data in payload.items():
                try:
                    entries[str(record_id)] = ChangeEntry.model_validate(data)
                except ValidationError:
                    log.warning("Dropping malformed overlay entry", extra={"record_id": record_id})
        self._entries = entries

    def _persist(self, entries: Mapping[str, ChangeEntry]) -> None:
        payload = {record_id: entry.model_dump() for record_id, entry in entries.items()}
        try:
            self._storage.set(self.key, json.dumps(payload))
        except OSError as exc:
            raise StorageError(f"Failed to save transcript changes: {exc}") from exc

    def save(self) -> None:
        self._persist(self._entries)

    def record(self, record_id: Any, transcript: str, status: Optional[str], timestamp: str) -> ChangeEntry:
        """
        Add or replace the entry for a record.

        Raises
        ------
        StorageError
            If storage rejects the write; the in-memory overlay is left as it was.
        """
        entry = ChangeEntry(transcript=transcript, status=status, timestamp=timestamp)
        entries = dict(self._entries)
        entries[_key(record_id)] = entry
        self._persist(entries)
        self._entries = entries
        return entry

    def clear(self) -> None:
        try:
            self._storage.remove(self.key)
        except OSError as exc:
            raise StorageError(f"Failed to clear transcript changes: {exc}") from exc
        self._entries = {}

    def get(self, record_id: Any) -> Optional[ChangeEntry]:
        return self._entries.get(_key(record_id))

    def entries(self) -> Dict[str, ChangeEntry]:
        return dict(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, record_id: object) -> bool:
        return _key(record_id) in self._entries


def apply_overlay(records: Iterable[Record], overlay: Mapping[str, ChangeEntry]) -> int:
    """
    Overwrite transcript/status on every record that has an overlay entry.

    Returns the number of records touched. Applying the same overlay again is a no-op.
    """
    touched = 0
    for row in records:
        entry = overlay.get(_key(row.get("id")))
        if entry is None:
            continue
        row["transcript"] = entry.transcript
        row["status"] = entry.status
        touched += 1
    return touched


class RecordStore:
    """
    Materialized records of the focal table plus their column order.
    """

    def __init__(self, overlay: ChangeOverlay) -> None:
        self.overlay = overlay
        self.columns: List[str] = []
        self.records: List[Record] = []
        self._index: Dict[str, int] = {}

    def load(self, columns: Sequence[str], rows: Iterable[Mapping[str, Any]]) -> None:
        """
        Replace every record and the column set.

        Raises
        ------
        LoadFailure
            If a row has no id or two rows share an id. The previous contents are kept.
        """
        records = [dict(row) for row in rows]
        index: Dict[str, int] = {}
        for position, row in enumerate(records):
            if row.get("id") is None:
                raise LoadFailure(f"Row {position} has no id")
            key = _key(row["id"])
            if key in index:
                raise LoadFailure(f"Duplicate record id {row['id']!r}")
            index[key] = position
        self.columns = list(columns)
        self.records = records
        self._index = index

    def apply_overlay(self, overlay: Optional[Mapping[str, ChangeEntry]] = None) -> int:
        entries = self.overlay.entries() if overlay is None else overlay
        return apply_overlay(self.records, entries)

    def materialize(self, columns: Sequence[str], rows: Iterable[Mapping[str, Any]]) -> None:
        """Load fresh executor output, then re-read and apply the stored overlay."""
        self.load(columns, rows)
        self.overlay.reload()
        touched = self.apply_overlay()
        log.info(
            "Records materialized",
            extra={"rows": len(self.records), "overlay_entries": len(self.overlay), "overridden": touched},
        )

    def get(self, record_id: Any) -> Record:
        position = self._index.get(_key(record_id))
        if position is None:
            raise RecordNotFound(record_id)
        return self.records[position]

    def commit_edit(self, record_id: Any, new_transcript: str, now: Optional[datetime] = None) -> Record:
        """
        Save a transcript edit.

        A blank transcript moves the record to "To do"; otherwise the status is
        left as it was. The overlay entry is written to storage before returning.

        Raises
        ------
        RecordNotFound
            If no record has the given id.
        StorageError
            If the overlay cannot be persisted; the record is left unchanged.
        """
        row = self.get(record_id)
        status = TODO_STATUS if not new_transcript.strip() else row.get("status")
        self.overlay.record(row["id"], new_transcript, status, utc_timestamp(now))
        row["transcript"] = new_transcript
        row["status"] = status
        log.info("Transcript saved", extra={"record_id": row["id"], "status": status})
        return row

    def __len__(self) -> int:
        return len(self.records)


__all__ = [
    "TODO_STATUS",
    "ChangeOverlay",
    "RecordStore",
    "apply_overlay",
    "utc_timestamp",
]
