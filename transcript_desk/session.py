"""
A single user's working session over one loaded database.

The session owns the executor, the record store with its change overlay, and
the current view state. View transitions follow the page rules of ViewState;
after every transition the page is clamped so that shrinking the result set
never leaves the user on an empty page past the end.

Usage:
    from transcript_desk.session import Session

    session = Session.from_settings()
    session.search("interview")
    page = session.current_page()
    session.edit(7, "")
    filename, data = session.export_csv()
"""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional, Tuple

from transcript_desk.config import Settings, get_settings
from transcript_desk.core.export import ExportEngine, csv_filename, snapshot_filename
from transcript_desk.core.record_store import ChangeOverlay, RecordStore
from transcript_desk.core.view import (
    filter_and_sort,
    filter_options,
    overview_stats,
    render_view,
    total_pages,
)
from transcript_desk.domain.models import (
    CurrentPage,
    FilterOptions,
    OverviewStats,
    Record,
    SortDirection,
    ViewState,
)
from transcript_desk.infrastructure.protocols import QueryExecutor, Storage
from transcript_desk.infrastructure.sqlite_engine import SqliteEngine
from transcript_desk.infrastructure.storage import JsonFileStorage
from transcript_desk.loader import fetch_records, load_database_file, open_upload
from transcript_desk.providers.abstract import Upload
from transcript_desk.utils.logging import get_logger

log = get_logger(__name__)


class Session:
    def __init__(
        self,
        executor: QueryExecutor,
        storage: Storage,
        focal_table: str = "podcasts",
        overlay_key: str = "podcastTranscriptChanges",
        page_size: int = 10,
    ) -> None:
        self.executor = executor
        self.focal_table = focal_table
        self.overlay = ChangeOverlay(storage, key=overlay_key)
        self.store = RecordStore(self.overlay)
        self.state = ViewState(page_size=page_size)
        self.table: Optional[str] = None
        self.has_focal_table = False
        self.provider: Optional[str] = None

    @classmethod
    def from_settings(
        cls,
        settings: Optional[Settings] = None,
        storage: Optional[Storage] = None,
        engine: Optional[SqliteEngine] = None,
    ) -> "Session":
        """
        Open the configured database file and materialize its records.

        Raises
        ------
        LoadFailure
            If the database cannot be loaded; nothing is shown in that case.
        """
        settings = settings or get_settings()
        loaded = load_database_file(
            settings.database_path,
            focal_table=settings.focal_table,
            engine=engine,
            attempts=settings.load_retry_attempts,
        )
        session = cls(
            loaded.executor,
            storage or JsonFileStorage(settings.storage_path),
            focal_table=settings.focal_table,
            overlay_key=settings.overlay_key,
            page_size=settings.default_page_size,
        )
        session.provider = "sqlite"
        session.reload()
        return session

    @classmethod
    def from_upload(
        cls,
        upload: Upload,
        storage: Storage,
        settings: Optional[Settings] = None,
        engine: Optional[SqliteEngine] = None,
    ) -> "Session":
        """Open an uploaded file through the provider chain and materialize its records."""
        settings = settings or get_settings()
        outcome = open_upload(upload, engine=engine)
        session = cls(
            outcome.executor,
            storage,
            focal_table=settings.focal_table,
            overlay_key=settings.overlay_key,
            page_size=settings.default_page_size,
        )
        session.provider = outcome.provider
        session.reload()
        return session

    # ------------------------------------------------------------------ data

    def reload(self) -> None:
        """
        Re-query the executor and re-apply the overlay.

        On failure the previous records are kept and the error propagates.
        """
        fetched = fetch_records(self.executor, self.focal_table)
        self.store.materialize(fetched.columns, fetched.rows)
        self.table = fetched.table
        self.has_focal_table = fetched.has_focal_table
        self._clamp()

    @property
    def columns(self) -> List[str]:
        return list(self.store.columns)

    @property
    def records(self) -> List[Record]:
        return self.store.records

    def edit(self, record_id: object, transcript: str, now: Optional[datetime] = None) -> Record:
        """Commit a transcript edit into the store and the persisted overlay."""
        row = self.store.commit_edit(record_id, transcript, now=now)
        self._clamp()
        return row

    def clear_changes(self) -> None:
        """Forget every saved edit and rebuild the store from the executor alone."""
        self.overlay.clear()
        log.info("Persisted changes cleared")
        self.reload()

    # ------------------------------------------------------------------ view

    def _clamp(self) -> None:
        pages = total_pages(len(filter_and_sort(self.store.records, self.state)), self.state.page_size)
        if pages and self.state.page > pages:
            self.state = self.state.with_page(pages)

    def _transition(self, state: ViewState) -> CurrentPage:
        self.state = state
        self._clamp()
        return self.current_page()

    def search(self, term: str) -> CurrentPage:
        return self._transition(self.state.with_search(term))

    def filter(self, column: str, value: Optional[str]) -> CurrentPage:
        return self._transition(self.state.with_filter(column, value))

    def sort_by(self, key: str) -> CurrentPage:
        return self._transition(self.state.toggle_sort(key))

    def set_sort(self, key: Optional[str], direction: SortDirection = SortDirection.ASC) -> CurrentPage:
        return self._transition(self.state.with_sort(key, direction))

    def set_page(self, page: int) -> CurrentPage:
        return self._transition(self.state.with_page(page))

    def set_page_size(self, page_size: int) -> CurrentPage:
        return self._transition(self.state.with_page_size(page_size))

    def clear_filters(self) -> CurrentPage:
        return self._transition(self.state.cleared())

    def current_page(self) -> CurrentPage:
        return render_view(self.store.records, self.state)

    def filter_options(self) -> FilterOptions:
        return filter_options(self.store.records)

    def stats(self) -> OverviewStats:
        return overview_stats(self.store.records)

    # ---------------------------------------------------------------- export

    def export_csv(self, now: Optional[datetime] = None) -> Tuple[str, bytes]:
        """The whole store as CSV, with a suggested file name."""
        exporter = ExportEngine(self.focal_table)
        return csv_filename(now), exporter.to_csv(self.store.records, self.store.columns)

    def snapshot(self, now: Optional[datetime] = None) -> Tuple[str, bytes, ExportEngine]:
        """
        Replay the overlay into the database and serialize it.

        Returns the suggested file name, the bytes and the exporter (whose
        `last_replay_failures` lists entries that could not be written).
        """
        exporter = ExportEngine(self.focal_table)
        data = exporter.to_snapshot(self.executor, self.overlay.entries())
        return snapshot_filename(now), data, exporter


__all__ = ["Session"]
