"""
Podcast Transcript Desk - browse, edit and export podcast production records.

This package loads the `podcasts` table of a SQLite database into an in-memory
record store and provides:

- A view pipeline (search, column filters, stable sort, pagination)
- Overview statistics and filter options over the whole store
- Transcript editing through a persisted change overlay
- CSV export and database snapshots with the overlay replayed
- A minimal query interpreter for CSV/JSON uploads when no engine applies
"""

from __future__ import annotations

__version__ = "0.1.0"
__license__ = "MIT"

# Public API exports
from transcript_desk.config import Settings, get_settings
from transcript_desk.core.export import ExportEngine, to_csv
from transcript_desk.core.interpreter import MinimalQueryInterpreter, classify_query
from transcript_desk.core.record_store import ChangeOverlay, RecordStore
from transcript_desk.core.view import classify_status, overview_stats, render_view
from transcript_desk.domain.models import ChangeEntry, ResultSet, ViewState
from transcript_desk.loader import available_providers, fetch_records, load_database_file, open_upload
from transcript_desk.session import Session
from transcript_desk.utils.logging import configure_logging, get_logger

__all__ = [
    # Version info
    "__version__",
    "__license__",
    # Configuration
    "Settings",
    "get_settings",
    # Session and loading
    "Session",
    "available_providers",
    "fetch_records",
    "load_database_file",
    "open_upload",
    # Engine components
    "ChangeEntry",
    "ChangeOverlay",
    "ExportEngine",
    "MinimalQueryInterpreter",
    "RecordStore",
    "ResultSet",
    "ViewState",
    "classify_query",
    "classify_status",
    "overview_stats",
    "render_view",
    "to_csv",
    # Logging
    "configure_logging",
    "get_logger",
]
