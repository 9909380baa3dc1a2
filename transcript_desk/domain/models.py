"""
Domain models for the transcript desk.

Records themselves stay plain dictionaries (column -> value) because their
shape is dictated by whatever query produced them. Everything with a fixed
shape (result sets, overlay entries, view state, derived pages and stats) is a
Pydantic model so it can be validated and serialized consistently.
"""
from __future__ import annotations

from enum import Enum
from typing import Any, Dict, List, Optional, Tuple, Union

from pydantic import BaseModel, Field, ValidationError, field_validator

from transcript_desk.errors import InvalidViewState

Value = Union[str, int, float, None]
Record = Dict[str, Any]

PAGE_SIZES: Tuple[int, ...] = (5, 10, 25, 50, 100)

FOCAL_COLUMNS: Tuple[str, ...] = (
    "id",
    "category",
    "month",
    "year",
    "report_name",
    "status",
    "transcript",
)


class ResultSet(BaseModel):
    """
    Columns plus row tuples, as returned by any query execution.
    """

    columns: List[str] = Field(default_factory=list, description="Ordered column names.")
    rows: List[Tuple[Any, ...]] = Field(default_factory=list, description="One tuple per row.")

    @classmethod
    def empty(cls) -> "ResultSet":
        return cls(columns=[], rows=[])

    @property
    def values(self) -> List[Tuple[Any, ...]]:
        return self.rows

    @property
    def is_empty(self) -> bool:
        return not self.columns

    def records(self) -> List[Record]:
        """Zip every row with the column names."""
        return [dict(zip(self.columns, row)) for row in self.rows]


class ChangeEntry(BaseModel):
    """
    A pending edit for one record, kept out-of-band until snapshot export.
    """

    transcript: str = Field(..., description="Overridden transcript text.")
    status: Optional[str] = Field(None, description="Overridden status.")
    timestamp: str = Field(..., description="ISO-8601 UTC time of the edit.")

    model_config = {"frozen": True}


class SortDirection(str, Enum):
    ASC = "asc"
    DESC = "desc"


class SortSpec(BaseModel):
    key: str
    direction: SortDirection = SortDirection.ASC

    model_config = {"frozen": True}


class ViewState(BaseModel):
    """
    Transient search/filter/sort/page selection.

    Transitions return a new state. Changing the search term, a column filter
    or the page size sends the user back to page 1; sorting keeps the page.
    """

    search_term: str = ""
    column_filters: Dict[str, str] = Field(default_factory=dict)
    sort: Optional[SortSpec] = None
    page: int = Field(1, ge=1)
    page_size: int = 10

    model_config = {"frozen": True}

    @field_validator("page_size")
    @classmethod
    def _check_page_size(cls, value: int) -> int:
        if value not in PAGE_SIZES:
            raise ValueError(f"page_size must be one of {PAGE_SIZES}, got {value}")
        return value

    def _evolve(self, **changes: Any) -> "ViewState":
        data = self.model_dump()
        data.update(changes)
        try:
            return type(self).model_validate(data)
        except ValidationError as exc:
            raise InvalidViewState(str(exc)) from exc

    def with_search(self, term: str) -> "ViewState":
        return self._evolve(search_term=term, page=1)

    def with_filter(self, column: str, value: Optional[str]) -> "ViewState":
        filters = dict(self.column_filters)
        if value is None or value == "":
            filters.pop(column, None)
        else:
            filters[column] = str(value)
        return self._evolve(column_filters=filters, page=1)

    def with_page_size(self, page_size: int) -> "ViewState":
        return self._evolve(page_size=page_size, page=1)

    def with_page(self, page: int) -> "ViewState":
        return self._evolve(page=page)

    def with_sort(self, key: Optional[str], direction: SortDirection = SortDirection.ASC) -> "ViewState":
        sort = SortSpec(key=key, direction=direction) if key else None
        return self._evolve(sort=sort)

    def toggle_sort(self, key: str) -> "ViewState":
        """Clicking the active ascending column flips it to descending; anything else sorts ascending."""
        direction = SortDirection.ASC
        if self.sort is not None and self.sort.key == key and self.sort.direction is SortDirection.ASC:
            direction = SortDirection.DESC
        return self.with_sort(key, direction)

    def cleared(self) -> "ViewState":
        """Drop search, filters and sort; keep the page size."""
        return self._evolve(search_term="", column_filters={}, sort=None, page=1)


class CurrentPage(BaseModel):
    rows: List[Record]
    page: int
    page_size: int
    total_pages: int
    total_matches: int


class FilterOptions(BaseModel):
    categories: List[Any] = Field(default_factory=list)
    statuses: List[Any] = Field(default_factory=list)
    years: List[Any] = Field(default_factory=list)


class StatusBucket(str, Enum):
    ERROR = "error"
    COMPLETED = "completed"
    PENDING = "pending"
    TODO = "todo"
    OTHER = "other"
    UNKNOWN = "unknown"


class OverviewStats(BaseModel):
    """
    Summary of the whole record store, independent of the current view.
    """

    total: int = 0
    status_counts: Dict[str, int] = Field(default_factory=dict)
    with_transcripts: int = 0
    without_transcripts: int = 0
    category_count: int = 0
    min_year: Optional[Any] = None
    max_year: Optional[Any] = None
    completion_rate: int = 0

    @property
    def years_range(self) -> str:
        if self.min_year and self.max_year:
            return f"{self.min_year}-{self.max_year}"
        return "N/A"


__all__ = [
    "Value",
    "Record",
    "PAGE_SIZES",
    "FOCAL_COLUMNS",
    "ResultSet",
    "ChangeEntry",
    "SortDirection",
    "SortSpec",
    "ViewState",
    "CurrentPage",
    "FilterOptions",
    "StatusBucket",
    "OverviewStats",
]
