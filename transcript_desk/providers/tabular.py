"""
Text providers: delimited (.csv) and structured (.json) uploads answered by the
minimal query interpreter.
"""

from __future__ import annotations

from transcript_desk.core.interpreter import MinimalQueryInterpreter
from transcript_desk.core.tables import decode_text, parse_delimited, parse_structured
from transcript_desk.errors import UnrecognizedFile
from transcript_desk.providers.abstract import AbstractLoadProvider, Upload
from transcript_desk.utils.logging import get_logger

log = get_logger(__name__)


class DelimitedTextProvider(AbstractLoadProvider):
    name: str = "delimited"
    description: str = "Comma-separated text with a header line."

    def open(self, upload: Upload) -> MinimalQueryInterpreter:
        if upload.extension != ".csv":
            raise UnrecognizedFile(f"{upload.filename} is not a .csv file")
        tables = parse_delimited(upload.filename, decode_text(upload.data))
        for name, rows in tables.items():
            log.info("Table built from delimited text", extra={"table": name, "rows": len(rows)})
        return MinimalQueryInterpreter(tables)


class StructuredTextProvider(AbstractLoadProvider):
    name: str = "structured"
    description: str = "JSON array of objects, or object of arrays."

    def open(self, upload: Upload) -> MinimalQueryInterpreter:
        if upload.extension != ".json":
            raise UnrecognizedFile(f"{upload.filename} is not a .json file")
        tables = parse_structured(upload.filename, decode_text(upload.data))
        log.info("Tables built from structured text", extra={"tables": sorted(tables)})
        return MinimalQueryInterpreter(tables)


__all__ = ["DelimitedTextProvider", "StructuredTextProvider"]
