from __future__ import annotations

import pytest

from transcript_desk.domain.models import SortDirection, ViewState
from transcript_desk.errors import InvalidViewState


def test_search_filter_and_page_size_reset_page():
    state = ViewState(page=4)

    assert state.with_search("ai").page == 1
    assert state.with_filter("year", "2024").page == 1
    assert state.with_page_size(25).page == 1


def test_sort_keeps_page():
    state = ViewState(page=3).with_sort("year", SortDirection.DESC)

    assert state.page == 3
    assert state.sort.key == "year"
    assert state.sort.direction is SortDirection.DESC


def test_toggle_sort_flips_only_the_active_ascending_column():
    state = ViewState().toggle_sort("year")
    assert state.sort.direction is SortDirection.ASC

    state = state.toggle_sort("year")
    assert state.sort.direction is SortDirection.DESC

    state = state.toggle_sort("year")
    assert state.sort.direction is SortDirection.ASC

    state = state.toggle_sort("category")
    assert state.sort.key == "category"
    assert state.sort.direction is SortDirection.ASC


def test_empty_filter_value_removes_the_filter():
    state = ViewState().with_filter("category", "Health").with_filter("year", 2024)
    assert state.column_filters == {"category": "Health", "year": "2024"}

    state = state.with_filter("category", "")
    assert state.column_filters == {"year": "2024"}

    state = state.with_filter("year", None)
    assert state.column_filters == {}


def test_transitions_do_not_mutate_the_original():
    original = ViewState()
    original.with_search("x").with_filter("status", "pending")

    assert original.search_term == ""
    assert original.column_filters == {}


def test_cleared_keeps_page_size():
    state = ViewState(page_size=25).with_search("x").with_filter("year", "2024").with_sort("year")

    cleared = state.cleared()

    assert cleared.page_size == 25
    assert cleared.search_term == ""
    assert cleared.column_filters == {}
    assert cleared.sort is None


@pytest.mark.parametrize("page_size", [0, 7, 1000])
def test_unsupported_page_size_is_rejected(page_size):
    with pytest.raises(InvalidViewState):
        ViewState().with_page_size(page_size)


def test_page_must_be_positive():
    with pytest.raises(InvalidViewState):
        ViewState().with_page(0)
