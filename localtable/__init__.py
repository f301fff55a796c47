"""
LocalTable
==========
A thin database-like table on top of any string key-value store.

Usage:
    from localtable import Table, MemoryStore

    users = Table(MemoryStore(), "users", fields=[
        {"name": "firstName", "type": "str"},
        {"name": "loginCount", "type": "int", "default": 0},
    ])
    users.insert(1, {"firstName": "John"})
    users.filter({"loginCount": {">=": 0}})
"""

__version__ = "1.0.0"

from localtable.errors import (
    TableError, NotFound, AlreadyExists, ValidationError, InvalidLookup, SerializationError,
)
from localtable.storage import Store, MemoryStore, JSONFileStore, FieldSpec, FieldType, Schema
from localtable.index import RowIndex, IndexState
from localtable.query import Predicate, Declarative
from localtable.table import Table

__all__ = [
    "__version__",
    "Table",
    "Store", "MemoryStore", "JSONFileStore",
    "FieldSpec", "FieldType", "Schema",
    "RowIndex", "IndexState",
    "Predicate", "Declarative",
    "TableError", "NotFound", "AlreadyExists", "ValidationError", "InvalidLookup",
    "SerializationError",
]
