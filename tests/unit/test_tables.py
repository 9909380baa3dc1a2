from __future__ import annotations

from datetime import datetime, timezone

import pytest

from transcript_desk.core.tables import (
    decode_text,
    diagnostic_tables,
    parse_delimited,
    parse_structured,
    table_name_for,
)
from transcript_desk.errors import UnrecognizedFile


@pytest.mark.parametrize(
    "filename, table",
    [
        ("sales.csv", "sales"),
        ("My Data.csv", "My_Data"),
        ("podcast-data.v2.json", "podcast_data_v2"),
        ("README", "README"),
    ],
)
def test_table_name_for(filename, table):
    assert table_name_for(filename) == table


def test_parse_delimited_converts_numbers_and_pads_short_lines():
    text = 'id,name,"score"\n1,Alice,9.5\n\n2,"Bob",10\n3,Carol\n'

    tables = parse_delimited("My Data.csv", text)

    assert list(tables) == ["My_Data"]
    rows = tables["My_Data"]
    assert rows == [
        {"id": 1, "name": "Alice", "score": 9.5},
        {"id": 2, "name": "Bob", "score": 10},
        {"id": 3, "name": "Carol", "score": ""},
    ]


def test_parse_delimited_requires_a_data_line():
    with pytest.raises(UnrecognizedFile):
        parse_delimited("header.csv", "id,name\n\n")


def test_parse_structured_array_becomes_one_table():
    assert parse_structured("list.json", '[{"a": 1}, {"a": 2}]') == {"list": [{"a": 1}, {"a": 2}]}


def test_parse_structured_object_keeps_every_array():
    text = '{"sales": [{"id": 1}], "meta": {"x": 1}, "tags": [1, 2], "people": [], "mixed": [{"id": 2}, "x"]}'

    assert parse_structured("bundle.json", text) == {
        "sales": [{"id": 1}],
        "tags": [],
        "people": [],
        "mixed": [{"id": 2}],
    }


def test_parse_structured_array_of_scalars_is_an_empty_table():
    assert parse_structured("numbers.json", "[1, 2]") == {"numbers": []}


@pytest.mark.parametrize("text", ['{"a": 1}', "{", '"text"'])
def test_parse_structured_rejects_other_shapes(text):
    with pytest.raises(UnrecognizedFile):
        parse_structured("bad.json", text)


def test_decode_text_strips_bom_and_rejects_binary():
    assert decode_text("\ufeffid\n".encode("utf-8")) == "id\n"
    with pytest.raises(UnrecognizedFile):
        decode_text(b"\xff\xfe\x00\x81")


def test_diagnostic_tables_describe_the_upload():
    uploaded = datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc)

    tables = diagnostic_tables("weird.bin", 12, uploaded=uploaded)

    rows = tables["weird"]
    assert [row["id"] for row in rows] == [1, 2, 3]
    assert rows[0]["filename"] == "weird.bin"
    assert rows[0]["size"] == 12
    assert rows[0]["uploaded"] == uploaded.isoformat()
    assert "csv" in rows[2]["message"]
