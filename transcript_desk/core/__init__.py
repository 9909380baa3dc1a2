"""
Core package for the transcript desk: the record store and change overlay, the
view pipeline, the minimal query interpreter and the exporters.
"""

from transcript_desk.core.export import ExportEngine, csv_filename, snapshot_filename, to_csv
from transcript_desk.core.interpreter import MinimalQueryInterpreter, classify_query
from transcript_desk.core.record_store import ChangeOverlay, RecordStore
from transcript_desk.core.view import (
    classify_status,
    filter_options,
    overview_stats,
    render_view,
    status_badge,
)

__all__ = [
    "ExportEngine",
    "csv_filename",
    "snapshot_filename",
    "to_csv",
    "MinimalQueryInterpreter",
    "classify_query",
    "ChangeOverlay",
    "RecordStore",
    "classify_status",
    "filter_options",
    "overview_stats",
    "render_view",
    "status_badge",
]
