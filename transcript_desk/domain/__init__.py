"""
Domain package for the transcript desk.

Exports the data definitions shared by the record store, the view pipeline,
the query interpreter and the exporters.
"""

from transcript_desk.domain.models import (
    FOCAL_COLUMNS,
    PAGE_SIZES,
    ChangeEntry,
    CurrentPage,
    FilterOptions,
    OverviewStats,
    Record,
    ResultSet,
    SortDirection,
    SortSpec,
    StatusBucket,
    ViewState,
)

__all__ = [
    "FOCAL_COLUMNS",
    "PAGE_SIZES",
    "ChangeEntry",
    "CurrentPage",
    "FilterOptions",
    "OverviewStats",
    "Record",
    "ResultSet",
    "SortDirection",
    "SortSpec",
    "StatusBucket",
    "ViewState",
]
