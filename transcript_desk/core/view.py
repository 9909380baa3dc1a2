"""
View pipeline: search -> column filters -> sort -> paginate.

Everything here is a pure function of the store's records and a ViewState and
is recomputed on every interaction. Filters prune before sorting and the sort
is stable, so equal keys keep their store order before the page is sliced.

Filter options and overview statistics are computed over the unfiltered
records so dropdowns and totals stay put while the user narrows the view.
"""

from __future__ import annotations

import math
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence

from transcript_desk.core.values import sort_key, stringify
from transcript_desk.domain.models import (
    CurrentPage,
    FilterOptions,
    OverviewStats,
    Record,
    SortDirection,
    SortSpec,
    StatusBucket,
    ViewState,
)

_BUCKET_KEYWORDS = {
    "completed": StatusBucket.COMPLETED,
    "success": StatusBucket.COMPLETED,
    "pending": StatusBucket.PENDING,
    "processing": StatusBucket.PENDING,
    "to do": StatusBucket.TODO,
    "todo": StatusBucket.TODO,
}

_BADGE_LABELS = {
    StatusBucket.ERROR: "Error",
    StatusBucket.COMPLETED: "Success",
    StatusBucket.PENDING: "Pending",
    StatusBucket.TODO: "To Do",
    StatusBucket.UNKNOWN: "Unknown",
}


def classify_status(status: Any) -> StatusBucket:
    """
    Bucket a free-text status. An "error" prefix wins over every other keyword.
    """
    if status is None or status == "":
        return StatusBucket.UNKNOWN
    lowered = stringify(status).lower()
    if lowered.startswith("error"):
        return StatusBucket.ERROR
    return _BUCKET_KEYWORDS.get(lowered, StatusBucket.OTHER)


def status_badge(status: Any) -> str:
    """Label shown for a status cell; unrecognized statuses are shown verbatim."""
    bucket = classify_status(status)
    return _BADGE_LABELS.get(bucket, stringify(status))


def matches_search(row: Mapping[str, Any], term: str) -> bool:
    if not term:
        return True
    needle = term.lower()
    return any(needle in stringify(value).lower() for value in row.values() if value is not None)


def matches_filters(row: Mapping[str, Any], filters: Mapping[str, str]) -> bool:
    for column, expected in filters.items():
        if expected == "":
            continue
        value = row.get(column)
        if value is None or stringify(value) != expected:
            return False
    return True


def sort_records(records: Sequence[Record], sort: Optional[SortSpec]) -> List[Record]:
    if sort is None or not sort.key:
        return list(records)
    # sorted() is stable for reverse=True as well
    return sorted(
        records,
        key=lambda row: sort_key(row.get(sort.key)),
        reverse=sort.direction is SortDirection.DESC,
    )


def total_pages(count: int, page_size: int) -> int:
    return math.ceil(count / page_size) if count else 0


def paginate(records: Sequence[Record], page: int, page_size: int) -> List[Record]:
    start = (page - 1) * page_size
    return list(records[start:start + page_size])


def filter_and_sort(records: Iterable[Record], state: ViewState) -> List[Record]:
    kept = [
        row
        for row in records
        if matches_search(row, state.search_term) and matches_filters(row, state.column_filters)
    ]
    return sort_records(kept, state.sort)


def render_view(records: Sequence[Record], state: ViewState) -> CurrentPage:
    """
    Run the full pipeline. A page past the last one yields an empty slice; the
    caller is responsible for clamping.
    """
    ordered = filter_and_sort(records, state)
    return CurrentPage(
        rows=paginate(ordered, state.page, state.page_size),
        page=state.page,
        page_size=state.page_size,
        total_pages=total_pages(len(ordered), state.page_size),
        total_matches=len(ordered),
    )


def _distinct(values: Iterable[Any]) -> List[Any]:
    return list(dict.fromkeys(v for v in values if v is not None and v != ""))


def filter_options(records: Sequence[Record]) -> FilterOptions:
    years = [row.get("year") for row in records if row.get("year")]
    return FilterOptions(
        categories=_distinct(row.get("category") for row in records),
        statuses=_distinct(row.get("status") for row in records),
        years=sorted(_distinct(years), key=sort_key),
    )


def overview_stats(records: Sequence[Record]) -> OverviewStats:
    total = len(records)
    counts: Dict[str, int] = {}
    for row in records:
        bucket = classify_status(row.get("status"))
        if bucket is StatusBucket.UNKNOWN:
            bucket = StatusBucket.OTHER
        counts[bucket.value] = counts.get(bucket.value, 0) + 1

    with_transcripts = sum(
        1 for row in records if row.get("transcript") and stringify(row["transcript"]).strip()
    )
    years = [row.get("year") for row in records if row.get("year")]
    completed = counts.get(StatusBucket.COMPLETED.value, 0)

    return OverviewStats(
        total=total,
        status_counts=counts,
        with_transcripts=with_transcripts,
        without_transcripts=total - with_transcripts,
        category_count=len(_distinct(row.get("category") for row in records)),
        min_year=min(years, key=sort_key) if years else None,
        max_year=max(years, key=sort_key) if years else None,
        completion_rate=math.floor(100 * completed / total + 0.5) if total else 0,
    )


__all__ = [
    "classify_status",
    "status_badge",
    "matches_search",
    "matches_filters",
    "sort_records",
    "total_pages",
    "paginate",
    "filter_and_sort",
    "render_view",
    "filter_options",
    "overview_stats",
]
