"""
Exception hierarchy for the transcript desk.

Load failures propagate to the caller and block rendering; everything else is
handled at the operation boundary and leaves the previous state untouched.
"""

from __future__ import annotations

from typing import Any, Optional


class TranscriptDeskError(Exception):
    """Base class for all errors raised by this package."""


class LoadFailure(TranscriptDeskError):
    """The database could not be fetched, parsed or materialized."""


class RecordNotFound(TranscriptDeskError, KeyError):
    """An edit referenced a record id that is not in the store."""

    def __init__(self, record_id: Any) -> None:
        super().__init__(record_id)
        self.record_id = record_id

    def __str__(self) -> str:
        return f"Record {self.record_id!r} not found"


class ExecutionError(TranscriptDeskError):
    """A query or mutating statement was rejected by the executor."""

    def __init__(self, message: str, sql: Optional[str] = None) -> None:
        super().__init__(message)
        self.sql = sql


class OverlayReplayFailure(TranscriptDeskError):
    """One overlay entry could not be written back during a snapshot export."""

    def __init__(self, record_id: Any, cause: BaseException) -> None:
        super().__init__(f"Failed to apply change for ID {record_id}: {cause}")
        self.record_id = record_id
        self.cause = cause


class StorageError(TranscriptDeskError):
    """The change overlay could not be written to its storage backend."""


class UnrecognizedFile(TranscriptDeskError):
    """An uploaded file did not match the shape a provider expects."""


class InvalidViewState(TranscriptDeskError, ValueError):
    """A view transition was given an out-of-range value."""


__all__ = [
    "TranscriptDeskError",
    "LoadFailure",
    "RecordNotFound",
    "ExecutionError",
    "OverlayReplayFailure",
    "StorageError",
    "UnrecognizedFile",
    "InvalidViewState",
]
