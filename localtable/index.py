"""
LocalTable Row Index
====================
In-memory cache of a table's ordered row ids, mirrored to the store under
<table>_list.

States:
  UNLOADED   nothing read yet (or reset after drop()); the next read loads
  EMPTY      loaded, no ids
  POPULATED  loaded, at least one id

Write-through: every append/remove writes the full ordered id list back to
the store before returning. There is no batching.

Ids are matched by str(id), the same text that names their detail entry,
so 1 and 1.0 are distinct ids.
"""

import logging
from enum import Enum
from typing import Any, Optional

from localtable.storage.base import Store
from localtable.storage.serializer import decode_ids, encode_ids

logger = logging.getLogger(__name__)


class IndexState(Enum):
    UNLOADED = "UNLOADED"
    EMPTY = "EMPTY"
    POPULATED = "POPULATED"


class RowIndex:
    """
    Lazily loaded, write-through list of row ids for one table.
    """

    def __init__(self, store: Store, key: str):
        self._store = store
        self._key = key
        # None = unloaded; a list (possibly empty) = loaded
        self._ids: Optional[list] = None

    @property
    def key(self) -> str:
        return self._key

    @property
    def state(self) -> IndexState:
        if self._ids is None:
            return IndexState.UNLOADED
        if not self._ids:
            return IndexState.EMPTY
        return IndexState.POPULATED

    # ─── Persistence ────────────────────────────────────────────────

    def exists_in_store(self) -> bool:
        return self._store.get(self._key) is not None

    def ensure(self) -> None:
        """Persist an empty index if the store has none. Idempotent."""
        if self.exists_in_store():
            return
        self._ids = []
        self._save()
        logger.debug("Created index %s", self._key)

    def load(self) -> list:
        """Read the index from the store, creating it if absent."""
        raw = self._store.get(self._key)
        if raw is None:
            self.ensure()
        else:
            self._ids = decode_ids(raw)
            logger.debug("Loaded index %s (%d ids)", self._key, len(self._ids))
        return self._ids

    def _save(self) -> None:
        self._store.set(self._key, encode_ids(self._ids))

    def reset(self) -> None:
        """Forget the cached ids; the next read goes back to the store."""
        self._ids = None

    def remove_from_store(self) -> None:
        self._store.remove(self._key)
        self.reset()

    # ─── Access ─────────────────────────────────────────────────────

    def ids(self) -> list:
        """Current ids in insertion order (a copy)."""
        if self._ids is None:
            self.load()
        return list(self._ids)

    def append(self, row_id: Any) -> None:
        if self._ids is None:
            self.load()
        self._ids.append(row_id)
        self._save()

    def remove(self, row_id: Any) -> bool:
        """Drop every id sharing row_id's key. Returns True if anything was removed."""
        if self._ids is None:
            self.load()
        before = len(self._ids)
        key = str(row_id)
        self._ids = [i for i in self._ids if str(i) != key]
        self._save()
        return len(self._ids) != before

    def __len__(self) -> int:
        if self._ids is None:
            self.load()
        return len(self._ids)

    def __contains__(self, row_id: object) -> bool:
        if self._ids is None:
            self.load()
        key = str(row_id)
        return any(str(i) == key for i in self._ids)

    def __repr__(self) -> str:
        return f"RowIndex(key='{self._key}', state={self.state.value})"
