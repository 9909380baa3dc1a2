"""
Providers package for the transcript desk.

Re-exports the provider interfaces and the concrete providers so downstream
code can import from `transcript_desk.providers` directly.
"""

from transcript_desk.providers.abstract import (
    AbstractLoadProvider,
    LoadProvider,
    ProviderAttempt,
    Upload,
)
from transcript_desk.providers.placeholder import DiagnosticProvider
from transcript_desk.providers.sqlite_file import SqliteFileProvider
from transcript_desk.providers.tabular import DelimitedTextProvider, StructuredTextProvider

__all__ = [
    # Abstracts
    "AbstractLoadProvider",
    "LoadProvider",
    "ProviderAttempt",
    "Upload",
    # Concrete providers
    "DelimitedTextProvider",
    "DiagnosticProvider",
    "SqliteFileProvider",
    "StructuredTextProvider",
]
