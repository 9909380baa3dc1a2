"""
Last-resort provider: a diagnostic table describing the file that could not be parsed.
"""

from __future__ import annotations

from transcript_desk.core.interpreter import MinimalQueryInterpreter
from transcript_desk.core.tables import diagnostic_tables
from transcript_desk.providers.abstract import AbstractLoadProvider, Upload


class DiagnosticProvider(AbstractLoadProvider):
    """
    Never fails, so an unrecognized upload degrades to a placeholder table
    instead of surfacing an error.
    """

    name: str = "diagnostic"
    description: str = "Placeholder table explaining that parsing failed."

    def open(self, upload: Upload) -> MinimalQueryInterpreter:
        return MinimalQueryInterpreter(
            diagnostic_tables(upload.filename, upload.size, upload.content_type)
        )


__all__ = ["DiagnosticProvider"]
