"""
Key/value storage backends for the change overlay.

JsonFileStorage keeps every key in one JSON document on disk and rewrites it
whole on each write (last writer wins). MemoryStorage is the in-process
equivalent used by tests and throwaway sessions.
"""

from __future__ import annotations

import json
import os
import tempfile
from pathlib import Path
from typing import Any, Dict, Optional

from transcript_desk.utils.logging import get_logger

log = get_logger(__name__)


class MemoryStorage:
    def __init__(self, initial: Optional[Dict[str, str]] = None) -> None:
        self._data: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def remove(self, key: str) -> None:
        self._data.pop(key, None)


class JsonFileStorage:
    """
    Storage backed by a single JSON object file.

    A missing file reads as empty. Reads tolerate an unreadable or corrupt
    file so a broken overlay never blocks loading data. Writes never discard
    it: a corrupt file is moved aside to `<name>.corrupt` before the new
    document is written, and any other read error propagates as OSError.
    """

    def __init__(self, path: Path | str) -> None:
        self.path = Path(path)

    @property
    def corrupt_path(self) -> Path:
        return self.path.with_name(self.path.name + ".corrupt")

    def _load(self) -> Dict[str, Any]:
        if not self.path.exists():
            return {}
        with self.path.open("r", encoding="utf-8") as f:
            data = json.load(f)
        if not isinstance(data, dict):
            raise ValueError("storage file is not a JSON object")
        return data

    def _read(self) -> Dict[str, Any]:
        try:
            return self._load()
        except (OSError, ValueError) as exc:
            log.warning("Storage file unreadable, ignoring", extra={"path": str(self.path), "error": str(exc)})
            return {}

    def _read_for_update(self) -> Dict[str, Any]:
        try:
            return self._load()
        except ValueError as exc:
            os.replace(self.path, self.corrupt_path)
            log.warning(
                "Storage file is corrupt, moved aside",
                extra={"path": str(self.path), "backup": str(self.corrupt_path), "error": str(exc)},
            )
            return {}

    def _write(self, data: Dict[str, Any]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(dir=self.path.parent, prefix=".storage-", suffix=".json")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2, sort_keys=True)
            os.replace(tmp_name, self.path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise

    def get(self, key: str) -> Optional[str]:
        value = self._read().get(key)
        return value if isinstance(value, str) else None

    def set(self, key: str, value: str) -> None:
        data = self._read_for_update()
        data[key] = value
        self._write(data)

    def remove(self, key: str) -> None:
        data = self._read_for_update()
        if data.pop(key, None) is not None:
            self._write(data)


__all__ = ["JsonFileStorage", "MemoryStorage"]
