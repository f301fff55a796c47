"""
LocalTable JSON File Store
==========================
Keeps the whole key space in a single JSON object on disk.

Safety guarantees:
  - Atomic writes: every set()/remove() rewrites the file through a temp
    file in the same directory followed by os.replace(). A crash mid-write
    leaves the previous version intact.
  - The file is read once on open; afterwards the in-memory copy is the
    source of truth for reads.
  - A set()/remove() whose write fails is undone in memory before the
    error propagates, so reads never return data the file lacks.

Not suitable for large data sets: each mutation rewrites everything.
"""

import json
import logging
import os
import tempfile
from typing import Dict, Optional

from localtable.errors import SerializationError

logger = logging.getLogger(__name__)

FILE_MAGIC = "LocalTable_Store"


class JSONFileStore:
    """
    File-backed store. Layout on disk:

        {"magic": "LocalTable_Store", "data": {"<key>": "<value>", ...}}
    """

    def __init__(self, path: str):
        self._path = os.path.abspath(path)
        self._data: Dict[str, str] = {}
        self.load()

    @property
    def path(self) -> str:
        return self._path

    # ─── Load / Save ────────────────────────────────────────────────

    def load(self) -> None:
        """(Re)load the store from disk. A missing file means an empty store."""
        if not os.path.exists(self._path):
            self._data = {}
            return

        with open(self._path, "r", encoding="utf-8") as f:
            try:
                parsed = json.load(f)
            except json.JSONDecodeError as e:
                raise SerializationError(f"Corrupted store file {self._path}: {e}") from e

        if not isinstance(parsed, dict) or parsed.get("magic") != FILE_MAGIC:
            raise SerializationError(f"Not a LocalTable store file: {self._path}")

        data = parsed.get("data", {})
        if not isinstance(data, dict):
            raise SerializationError(f"Corrupted store file {self._path}: 'data' is not an object")
        self._data = data
        logger.debug("Loaded %d key(s) from %s", len(self._data), self._path)

    def _save(self) -> None:
        directory = os.path.dirname(self._path)
        os.makedirs(directory, exist_ok=True)
        payload = {"magic": FILE_MAGIC, "data": self._data}

        tmp_fd, tmp_path = tempfile.mkstemp(dir=directory, prefix=".localtable_", suffix=".tmp")
        try:
            with os.fdopen(tmp_fd, "w", encoding="utf-8") as f:
                json.dump(payload, f, indent=2)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_path, self._path)
        except Exception:
            try:
                os.unlink(tmp_path)
            except OSError:
                pass
            raise

    # ─── Store protocol ─────────────────────────────────────────────

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        if not isinstance(value, str):
            raise TypeError(f"Store values must be str, got {type(value).__name__}")
        previous = self._data.get(key)
        self._data[key] = value
        try:
            self._save()
        except Exception:
            if previous is None:
                del self._data[key]
            else:
                self._data[key] = previous
            raise

    def remove(self, key: str) -> None:
        if key not in self._data:
            return
        previous = self._data.pop(key)
        try:
            self._save()
        except Exception:
            self._data[key] = previous
            raise

    def keys(self) -> list[str]:
        return sorted(self._data.keys())

    def __len__(self) -> int:
        return len(self._data)

    def __contains__(self, key: object) -> bool:
        return key in self._data

    def __repr__(self) -> str:
        return f"JSONFileStore(path='{self._path}', keys={len(self._data)})"
