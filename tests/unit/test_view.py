from __future__ import annotations

import math

import pytest

from transcript_desk.core.view import (
    classify_status,
    filter_and_sort,
    filter_options,
    overview_stats,
    paginate,
    render_view,
    status_badge,
    total_pages,
)
from transcript_desk.domain.models import PAGE_SIZES, SortDirection, StatusBucket, ViewState


def _ids(rows):
    return [row["id"] for row in rows]


def test_search_is_case_insensitive_across_all_fields(podcast_rows):
    assert _ids(filter_and_sort(podcast_rows, ViewState(search_term="HEALTH"))) == [2, 5, 10]
    assert _ids(filter_and_sort(podcast_rows, ViewState(search_term="cloud"))) == [7]


def test_search_without_matches_yields_no_pages(podcast_rows):
    page = render_view(podcast_rows, ViewState(search_term="electronics"))

    assert page.rows == []
    assert page.total_matches == 0
    assert page.total_pages == 0


def test_search_ignores_missing_values(podcast_rows):
    # record 3 has transcript None; "none" must not match it
    assert filter_and_sort(podcast_rows, ViewState(search_term="none")) == []


def test_year_filter_compares_text_form(podcast_rows):
    state = ViewState(page_size=5).with_filter("year", "2024")

    first = render_view(podcast_rows, state)
    second = render_view(podcast_rows, state.with_page(2))

    assert first.total_matches == 6
    assert first.total_pages == 2
    assert _ids(first.rows) == [1, 3, 5, 6, 8]
    assert _ids(second.rows) == [10]


def test_year_filter_matches_years_stored_as_real(podcast_rows):
    for row in podcast_rows:
        row["year"] = float(row["year"])

    matched = filter_and_sort(podcast_rows, ViewState().with_filter("year", "2024"))

    assert len(matched) == 6


def test_filters_combine_with_search(podcast_rows):
    assert _ids(filter_and_sort(podcast_rows, ViewState(search_term="ai"))) == [1, 10]

    state = ViewState().with_filter("category", "Technology").with_search("ai")
    assert _ids(filter_and_sort(podcast_rows, state)) == [1]


def test_missing_column_value_never_matches_a_filter(podcast_rows):
    assert filter_and_sort(podcast_rows, ViewState().with_filter("status", "None")) == []


def test_sort_is_stable_in_both_directions(podcast_rows):
    asc = filter_and_sort(podcast_rows, ViewState().with_sort("year", SortDirection.ASC))
    desc = filter_and_sort(podcast_rows, ViewState().with_sort("year", SortDirection.DESC))

    assert _ids(asc) == [4, 2, 7, 1, 3, 5, 6, 8, 10, 9]
    assert _ids(desc) == [9, 1, 3, 5, 6, 8, 10, 2, 7, 4]


def test_sort_puts_missing_values_first(podcast_rows):
    ordered = filter_and_sort(podcast_rows, ViewState().with_sort("status"))

    assert ordered[0]["id"] == 6


def test_pipeline_does_not_mutate_input(podcast_rows):
    before = [dict(row) for row in podcast_rows]

    render_view(podcast_rows, ViewState(search_term="a", page_size=5).with_sort("year", SortDirection.DESC))

    assert podcast_rows == before


def test_page_past_the_end_is_empty_without_clamping(podcast_rows):
    page = render_view(podcast_rows, ViewState(page=9, page_size=5))

    assert page.rows == []
    assert page.total_pages == 2


@pytest.mark.parametrize("page_size", PAGE_SIZES)
def test_pagination_covers_every_record_exactly_once(page_size):
    for count in range(0, 23):
        records = [{"id": i} for i in range(count)]
        pages = total_pages(count, page_size)
        assert pages == math.ceil(count / page_size)

        seen = []
        for page in range(1, pages + 1):
            rows = paginate(records, page, page_size)
            assert len(rows) == min(page_size, count - (page - 1) * page_size)
            seen.extend(rows)
        assert seen == records


@pytest.mark.parametrize(
    "status, bucket, badge",
    [
        ("error: timeout", StatusBucket.ERROR, "Error"),
        ("Error", StatusBucket.ERROR, "Error"),
        ("Success", StatusBucket.COMPLETED, "Success"),
        ("completed", StatusBucket.COMPLETED, "Success"),
        ("pending", StatusBucket.PENDING, "Pending"),
        ("Processing", StatusBucket.PENDING, "Pending"),
        ("To do", StatusBucket.TODO, "To Do"),
        ("todo", StatusBucket.TODO, "To Do"),
        (None, StatusBucket.UNKNOWN, "Unknown"),
        ("", StatusBucket.UNKNOWN, "Unknown"),
        ("archived", StatusBucket.OTHER, "archived"),
        ("has error", StatusBucket.OTHER, "has error"),
    ],
)
def test_status_classification_and_badge(status, bucket, badge):
    assert classify_status(status) is bucket
    assert status_badge(status) == badge


@pytest.mark.parametrize("status", ["error: timeout", "Success", "pending", "To do", "archived", None])
def test_stats_agree_with_badge_classification(status):
    stats = overview_stats([{"id": 1, "status": status}])
    bucket = classify_status(status)
    expected = StatusBucket.OTHER if bucket is StatusBucket.UNKNOWN else bucket

    assert stats.status_counts == {expected.value: 1}


def test_overview_stats(podcast_rows):
    stats = overview_stats(podcast_rows)

    assert stats.total == 10
    assert stats.status_counts == {"completed": 3, "pending": 2, "error": 1, "todo": 2, "other": 2}
    assert stats.with_transcripts == 5
    assert stats.without_transcripts == 5
    assert stats.category_count == 4
    assert stats.years_range == "2022-2025"
    assert stats.completion_rate == 30


def test_completion_rate_rounds_half_up():
    records = [{"id": i, "status": "completed" if i == 0 else "pending"} for i in range(8)]

    # 1 of 8 is 12.5%
    assert overview_stats(records).completion_rate == 13


def test_overview_stats_on_empty_store():
    stats = overview_stats([])

    assert stats.total == 0
    assert stats.completion_rate == 0
    assert stats.years_range == "N/A"


def test_filter_options_are_distinct_and_ignore_blanks(podcast_rows):
    options = filter_options(podcast_rows)

    assert options.categories == ["Technology", "Health", "Finance", "Culture"]
    assert options.statuses == [
        "completed",
        "pending",
        "error: timeout",
        "To do",
        "Success",
        "processing",
        "archived",
        "todo",
    ]
    assert options.years == [2022, 2023, 2024, 2025]
