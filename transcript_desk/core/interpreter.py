"""
Minimal query interpreter over an in-memory table collection.

Used when a file could not be opened by the SQLite engine. Queries are first
classified into a closed set of intents; only three shapes are answered and
everything else yields an empty result set rather than an error:

    SELECT name FROM sqlite_master ...   -> ListTables
    PRAGMA table_info(T)                 -> DescribeColumns(T)
    SELECT * FROM T                      -> SelectAll(T)
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional, Sequence, Union

from transcript_desk.core.values import is_number
from transcript_desk.domain.models import Record, ResultSet
from transcript_desk.errors import ExecutionError

TableCollection = Dict[str, List[Record]]

DESCRIBE_COLUMNS = ["cid", "name", "type", "notnull", "dflt_value", "pk"]

_IDENT = r"""(?:"(?P<dq>[^"]+)"|`(?P<bq>[^`]+)`|\[(?P<sq>[^\]]+)\]|(?P<bare>\w+))"""

_LIST_TABLES_RE = re.compile(r"^\s*select\s+name\s+from\s+sqlite_master\b", re.IGNORECASE)
_DESCRIBE_RE = re.compile(r"^\s*pragma\s+table_info\s*\(\s*" + _IDENT + r"\s*\)\s*;?\s*$", re.IGNORECASE)
_SELECT_ALL_RE = re.compile(r"^\s*select\s+\*\s+from\s+" + _IDENT + r"\s*;?\s*$", re.IGNORECASE)


@dataclass(frozen=True)
class ListTables:
    pass


@dataclass(frozen=True)
class DescribeColumns:
    table: str


@dataclass(frozen=True)
class SelectAll:
    table: str


@dataclass(frozen=True)
class Unrecognized:
    sql: str


QueryIntent = Union[ListTables, DescribeColumns, SelectAll, Unrecognized]


def _table_name(match: "re.Match[str]") -> str:
    return next(name for name in match.group("dq", "bq", "sq", "bare") if name is not None)


def classify_query(sql: str) -> QueryIntent:
    if _LIST_TABLES_RE.match(sql):
        return ListTables()
    match = _DESCRIBE_RE.match(sql)
    if match:
        return DescribeColumns(_table_name(match))
    match = _SELECT_ALL_RE.match(sql)
    if match:
        return SelectAll(_table_name(match))
    return Unrecognized(sql)


def _first_row_columns(rows: Sequence[Mapping[str, Any]]) -> List[str]:
    return list(rows[0].keys()) if rows else []


class MinimalQueryInterpreter:
    """
    Read-only QueryExecutor over a mapping of table name -> list of records.
    """

    def __init__(self, tables: Optional[Mapping[str, Sequence[Record]]] = None) -> None:
        self.tables: TableCollection = {name: list(rows) for name, rows in (tables or {}).items()}

    def add_table(self, name: str, rows: Sequence[Record]) -> None:
        self.tables[name] = list(rows)

    def execute(self, sql: str) -> ResultSet:
        intent = classify_query(sql)
        if isinstance(intent, ListTables):
            return ResultSet(columns=["name"], rows=[(name,) for name in self.tables])
        if isinstance(intent, DescribeColumns):
            return self._describe(intent.table)
        if isinstance(intent, SelectAll):
            return self._select_all(intent.table)
        return ResultSet.empty()

    def _describe(self, table: str) -> ResultSet:
        rows = self.tables.get(table)
        if not rows:
            return ResultSet.empty()
        first = rows[0]
        values = [
            (cid, name, "REAL" if is_number(first[name]) else "TEXT", 0, None, 1 if name == "id" else 0)
            for cid, name in enumerate(first.keys())
        ]
        return ResultSet(columns=list(DESCRIBE_COLUMNS), rows=values)

    def _select_all(self, table: str) -> ResultSet:
        rows = self.tables.get(table)
        if not rows:
            return ResultSet.empty()
        columns = _first_row_columns(rows)
        return ResultSet(columns=columns, rows=[tuple(row.get(col) for col in columns) for row in rows])

    def run(self, sql: str, params: Sequence[Any] = ()) -> None:
        raise ExecutionError("The minimal interpreter is read-only", sql=sql)

    def export(self) -> bytes:
        return b""


__all__ = [
    "TableCollection",
    "DESCRIBE_COLUMNS",
    "ListTables",
    "DescribeColumns",
    "SelectAll",
    "Unrecognized",
    "QueryIntent",
    "classify_query",
    "MinimalQueryInterpreter",
]
