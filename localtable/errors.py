"""
LocalTable Errors
=================
Exception taxonomy shared by every layer.

  TableError
    ├── NotFound            get() on an id with no detail entry
    ├── AlreadyExists       insert() on an id that is already stored
    ├── ValidationError     one or more fields failed schema checks
    ├── InvalidLookup       unknown operator in a declarative filter
    └── SerializationError  stored text could not be decoded
"""

from typing import Any, Iterable


class TableError(Exception):
    """Base class for all table-level errors."""
    pass


class NotFound(TableError, KeyError):
    def __init__(self, table_name: str, row_id: Any):
        self.table_name = table_name
        self.row_id = row_id
        super().__init__(f"Couldn't find data for {row_id!r} in table '{table_name}'.")

    def __str__(self) -> str:
        # KeyError would otherwise repr() the message
        return self.args[0]


class AlreadyExists(TableError):
    def __init__(self, table_name: str, row_id: Any):
        self.table_name = table_name
        self.row_id = row_id
        super().__init__(f"Data is already present for {row_id!r} in table '{table_name}'.")


class ValidationError(TableError, ValueError):
    """Carries the full list of per-field problems."""

    def __init__(self, errors: Iterable[str]):
        self.errors = list(errors)
        super().__init__(f"Invalid data! {'; '.join(self.errors)}")


class InvalidLookup(TableError, ValueError):
    def __init__(self, lookup: Any, field_name: str = ""):
        self.lookup = lookup
        self.field_name = field_name
        where = f" for field '{field_name}'" if field_name else ""
        super().__init__(f"Invalid lookup type {lookup!r} provided{where}!")


class SerializationError(TableError, ValueError):
    """Raised when a stored value is not valid JSON of the expected shape."""
    pass
