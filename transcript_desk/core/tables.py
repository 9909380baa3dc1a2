"""
Builders that turn an uploaded non-database file into a table collection for
the minimal interpreter.

Delimited and structured text raise UnrecognizedFile when the content does not
have the expected shape; the diagnostic builder never fails and is the last
resort so callers always end up with a usable collection.
"""

from __future__ import annotations

import json
import mimetypes
import re
from datetime import datetime, timezone
from pathlib import PurePath
from typing import Any, Dict, List, Optional

from transcript_desk.core.interpreter import TableCollection
from transcript_desk.core.values import parse_number
from transcript_desk.errors import UnrecognizedFile


def table_name_for(filename: str) -> str:
    """File name without its last extension, non [A-Za-z0-9_] characters replaced by "_"."""
    stem = re.sub(r"\.[^/.]+$", "", PurePath(filename).name)
    return re.sub(r"[^a-zA-Z0-9_]", "_", stem)


def decode_text(data: bytes) -> str:
    try:
        return data.decode("utf-8-sig")
    except UnicodeDecodeError as exc:
        raise UnrecognizedFile(f"Not UTF-8 text: {exc}") from exc


def _split_fields(line: str) -> List[str]:
    return [field.strip().replace('"', "") for field in line.split(",")]


def parse_delimited(filename: str, text: str) -> TableCollection:
    """
    Comma-separated text: header line, then one record per non-blank line.

    This is deliberately naive (no quoted commas); it mirrors what a quick
    spreadsheet export looks like rather than full CSV.
    """
    lines = [line for line in text.split("\n") if line.strip()]
    if len(lines) < 2:
        raise UnrecognizedFile("Delimited text needs a header line and at least one row")

    headers = _split_fields(lines[0])
    rows: List[Dict[str, Any]] = []
    for line in lines[1:]:
        values = _split_fields(line)
        rows.append(
            {header: parse_number(values[i]) if i < len(values) else "" for i, header in enumerate(headers)}
        )
    return {table_name_for(filename): rows}


def _records(items: List[Any]) -> List[Dict[str, Any]]:
    """Array elements that are objects; anything else has no columns and is skipped."""
    return [item for item in items if isinstance(item, dict)]


def parse_structured(filename: str, text: str) -> TableCollection:
    """
    JSON text: an array becomes one table named after the file; an object
    becomes one table per key whose value is an array. Only object elements
    become rows.
    """
    try:
        data = json.loads(text)
    except ValueError as exc:
        raise UnrecognizedFile(f"Invalid JSON: {exc}") from exc

    tables: TableCollection = {}
    if isinstance(data, list):
        tables[table_name_for(filename)] = _records(data)
    elif isinstance(data, dict):
        for key, value in data.items():
            if isinstance(value, list):
                tables[str(key)] = _records(value)

    if not tables:
        raise UnrecognizedFile("JSON does not contain any array of records")
    return tables


def diagnostic_tables(
    filename: str,
    size: int,
    content_type: Optional[str] = None,
    uploaded: Optional[datetime] = None,
) -> TableCollection:
    """
    Placeholder collection explaining that the file could not be parsed.
    """
    uploaded = uploaded or datetime.now(timezone.utc)
    content_type = content_type or mimetypes.guess_type(filename)[0] or ""
    return {
        table_name_for(filename): [
            {
                "id": 1,
                "filename": filename,
                "size": size,
                "type": content_type,
                "uploaded": uploaded.isoformat(),
            },
            {
                "id": 2,
                "info": "This is a demonstration",
                "note": "Real SQLite parsing failed",
                "fallback": "mock data",
            },
            {
                "id": 3,
                "message": "Upload a .csv or .json file",
                "suggestion": "for better parsing",
                "alternative": "or use sample data",
            },
        ]
    }


__all__ = [
    "table_name_for",
    "decode_text",
    "parse_delimited",
    "parse_structured",
    "diagnostic_tables",
]
