"""
Abstract provider interfaces and attempt records for loading uploaded files.

A provider turns an Upload into a QueryExecutor or raises. Providers are tried
in a fixed order by the loader; every failure is recorded as a
ProviderAttempt so callers can see which provider won and why the others
declined.
"""

from __future__ import annotations

import abc
from dataclasses import dataclass
from pathlib import PurePath
from typing import Optional, Protocol, TypedDict, runtime_checkable

from transcript_desk.infrastructure.protocols import QueryExecutor


@dataclass(frozen=True)
class Upload:
    """
    A file handed to the application, already read into memory.
    """

    filename: str
    data: bytes
    content_type: Optional[str] = None

    @property
    def extension(self) -> str:
        return PurePath(self.filename).suffix.lower()

    @property
    def size(self) -> int:
        return len(self.data)


class ProviderAttempt(TypedDict, total=False):
    """
    Outcome of offering an upload to one provider.
    """

    provider: str
    succeeded: bool
    error_type: Optional[str]
    error: Optional[str]


@runtime_checkable
class LoadProvider(Protocol):
    """
    Common interface all load providers implement.

    Attributes
    ----------
    name : str
        A short machine-friendly identifier.
    description : str
        A human-friendly summary of what the provider accepts.
    """

    name: str
    description: str

    def open(self, upload: Upload) -> QueryExecutor:
        """
        Build an executor for the upload.

        Raises
        ------
        UnrecognizedFile
            If the upload does not have the shape this provider handles.
        LoadFailure
            If the upload looks right but cannot be opened.
        """
        ...


class AbstractLoadProvider(abc.ABC):
    """
    ABC helper for class-based providers.
    """

    name: str
    description: str

    @abc.abstractmethod
    def open(self, upload: Upload) -> QueryExecutor:  # pragma: no cover - interface only
        raise NotImplementedError


__all__ = [
    "Upload",
    "ProviderAttempt",
    "LoadProvider",
    "AbstractLoadProvider",
]
