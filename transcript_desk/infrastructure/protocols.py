"""
Capability interfaces consumed by the record store, the session and the exporters.

Anything that can answer queries (the real SQLite engine or the minimal
interpreter) implements QueryExecutor; anything that can persist the change
overlay implements Storage. Both are injected so tests can substitute fakes.
"""

from __future__ import annotations

from typing import Any, Optional, Protocol, Sequence, runtime_checkable

from transcript_desk.domain.models import ResultSet


@runtime_checkable
class QueryExecutor(Protocol):
    """
    A loaded database that can be queried, mutated and serialized.
    """

    def execute(self, sql: str) -> ResultSet:
        """Run a query and return its columns and rows."""
        ...

    def run(self, sql: str, params: Sequence[Any] = ()) -> None:
        """Run a mutating statement. Raises ExecutionError on malformed input."""
        ...

    def export(self) -> bytes:
        """Return the raw database file bytes."""
        ...


@runtime_checkable
class Storage(Protocol):
    """
    Key/value text storage with last-writer-wins semantics.
    """

    def get(self, key: str) -> Optional[str]:
        ...

    def set(self, key: str, value: str) -> None:
        ...

    def remove(self, key: str) -> None:
        ...


__all__ = ["QueryExecutor", "Storage"]
