"""
LocalTable Table
================
A schema-validated table stored in a plain key-value store.

Key layout (per table):
  <name>_list            JSON array of row ids, insertion order
  <name>_detail_<id>     JSON object of one row's fields (id excluded)

Consistency:
  Every id in the index has a detail entry. Writes are ordered so that a
  failure between two store calls can only leave an orphaned detail entry,
  never an index entry without data:
    - insert/update: detail write, then index append
    - delete/drop:   index removal, then detail removal
  Full atomicity would need a transactional store.

Scan order:
  all() and filter() walk the index in stored order. No implicit sort.

Not safe for concurrent writers: each Table caches its index. Two Table
objects over the same name and store can diverge; call reload() to
re-read the index.
"""

import logging
from typing import Any, Iterable, Iterator, Mapping, Optional

from localtable.errors import AlreadyExists, NotFound, SerializationError, ValidationError
from localtable.index import RowIndex
from localtable.query.criteria import CriteriaLike, as_criteria
from localtable.storage.base import Store
from localtable.storage.schema import FieldLike, Schema
from localtable.storage.serializer import check_id, decode_row, encode_row

logger = logging.getLogger(__name__)

DEFAULT_ID_FIELD = "id"


class Table:
    """
    Schema-bound row container over a Store.

    Provides:
    - create() / drop(): table lifecycle
    - get() / exists(): fetch by id
    - insert() / update() / delete(): row CRUD (update is an upsert)
    - count() / all() / filter(): index-order scans
    - validate(): schema check without writing
    """

    def __init__(self, store: Store, table_name: str,
                 fields: Optional[Iterable[FieldLike]] = None,
                 *, id_field: str = DEFAULT_ID_FIELD):
        if not table_name:
            raise ValueError("Table name must be a non-empty string")
        self.store = store
        self.table_name = table_name
        self.id_field = id_field
        self.schema = Schema.from_fields(fields)
        self._index = RowIndex(store, self._list_key())

        # Ensure the table exists
        self.create()

    # ─── Key derivation ─────────────────────────────────────────────

    def _list_key(self) -> str:
        return f"{self.table_name}_list"

    def _detail_key(self, row_id: Any) -> str:
        return f"{self.table_name}_detail_{row_id}"

    @property
    def index(self) -> RowIndex:
        return self._index

    # ─── Lifecycle ──────────────────────────────────────────────────

    def create(self) -> None:
        """Persist an empty index if none exists. Idempotent."""
        self._index.ensure()

    def drop(self) -> None:
        """Remove every row and the index itself; the cache goes back to unloaded."""
        ids = self._index.ids()
        self._index.remove_from_store()

        for row_id in ids:
            self.store.remove(self._detail_key(row_id))

        logger.debug("Dropped table %s (%d rows)", self.table_name, len(ids))

    def reload(self) -> None:
        """Discard the cached index so the next operation re-reads the store."""
        self._index.reset()

    # ─── Reads ──────────────────────────────────────────────────────

    def get(self, row_id: Any) -> dict:
        """Fetch a row by id. Raises NotFound if it isn't stored."""
        raw = self.store.get(self._detail_key(row_id))
        if raw is None:
            raise NotFound(self.table_name, row_id)
        return decode_row(raw, row_id, self.id_field)

    def exists(self, row_id: Any) -> bool:
        try:
            self.get(row_id)
            return True
        except (NotFound, SerializationError):
            return False

    def count(self) -> int:
        return len(self._index)

    # ─── Validation ─────────────────────────────────────────────────

    def validate(self, data: Mapping[str, Any]) -> list[str]:
        """Return the schema errors for data without storing anything."""
        return self.schema.validate(self._strip_id(data))

    def _strip_id(self, data: Mapping[str, Any]) -> dict:
        return {k: v for k, v in data.items() if k != self.id_field}

    def _clean(self, data: Mapping[str, Any]) -> dict:
        cleaned, errors = self.schema.apply(self._strip_id(data))
        if errors:
            raise ValidationError(errors)
        return cleaned

    # ─── Writes ─────────────────────────────────────────────────────

    def insert(self, row_id: Any, data: Mapping[str, Any]) -> dict:
        """
        Insert a new row. Raises AlreadyExists or ValidationError; on
        failure nothing is written. Returns the stored row (defaults
        applied, id attached).
        """
        check_id(row_id)
        if self.exists(row_id):
            raise AlreadyExists(self.table_name, row_id)

        cleaned = self._clean(data)
        payload = encode_row(cleaned, self.id_field)

        self.store.set(self._detail_key(row_id), payload)
        if row_id not in self._index:
            self._index.append(row_id)
        logger.debug("Inserted %r into %s", row_id, self.table_name)

        cleaned[self.id_field] = row_id
        return cleaned

    def update(self, row_id: Any, data: Mapping[str, Any]) -> dict:
        """
        Merge data over the stored row (or an empty row if the id is new)
        and store the result. Raises ValidationError with nothing written.
        Returns the stored row.
        """
        check_id(row_id)
        try:
            current = self.get(row_id)
            found = True
        except NotFound:
            current = {}
            found = False

        current.update(data)
        cleaned = self._clean(current)
        payload = encode_row(cleaned, self.id_field)

        self.store.set(self._detail_key(row_id), payload)
        if not found and row_id not in self._index:
            self._index.append(row_id)
            logger.debug("Created %r in %s via update", row_id, self.table_name)
        else:
            logger.debug("Updated %r in %s", row_id, self.table_name)

        cleaned[self.id_field] = row_id
        return cleaned

    def delete(self, row_id: Any) -> None:
        """Remove a row. Deleting an id that isn't stored is a no-op."""
        self._index.remove(row_id)
        self.store.remove(self._detail_key(row_id))
        logger.debug("Deleted %r from %s", row_id, self.table_name)

    # ─── Scans ──────────────────────────────────────────────────────

    def filter(self, criteria: CriteriaLike = None) -> list[dict]:
        """
        Rows matching criteria, in index order.

        criteria may be a callable (row -> bool), a declarative mapping
        {field: {lookup: value}}, a Criteria object, or None for all rows.
        """
        matcher = as_criteria(criteria)
        return [row for row in self._scan() if matcher.matches(row)]

    def all(self) -> list[dict]:
        return self.filter()

    def _scan(self) -> Iterator[dict]:
        """Yield decoded rows in index order, skipping unreadable entries."""
        for row_id in self._index.ids():
            key = self._detail_key(row_id)
            raw = self.store.get(key)
            if raw is None:
                logger.warning("Couldn't find detail data for %s! Skipping...", key)
                continue
            try:
                yield decode_row(raw, row_id, self.id_field)
            except SerializationError as e:
                logger.warning("Couldn't decode detail data for %s (%s). Skipping...", key, e)

    # ─── Python protocol ────────────────────────────────────────────

    def __len__(self) -> int:
        return self.count()

    def __contains__(self, row_id: object) -> bool:
        return self.exists(row_id)

    def __iter__(self) -> Iterator[dict]:
        return iter(self.all())

    def __repr__(self) -> str:
        return (f"Table(name='{self.table_name}', "
                f"fields={self.schema.field_names()}, index={self._index.state.value})")
