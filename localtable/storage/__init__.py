"""
LocalTable Storage Layer
========================
Store backends, the field type system, schemas and record encoding.

Usage:
    from localtable.storage import MemoryStore, JSONFileStore, FieldSpec, Schema
"""

from localtable.storage.base import Store
from localtable.storage.memory import MemoryStore
from localtable.storage.filestore import JSONFileStore
from localtable.storage.types import (
    FieldType, validate, get_validator, register_validator, unregister_validator,
    known_types, is_string, is_integer, is_float, is_bool,
)
from localtable.storage.schema import FieldSpec, Schema, NO_DEFAULT
from localtable.storage.serializer import encode_row, decode_row, encode_ids, decode_ids

__all__ = [
    "Store", "MemoryStore", "JSONFileStore",
    "FieldType", "validate", "get_validator", "register_validator", "unregister_validator",
    "known_types", "is_string", "is_integer", "is_float", "is_bool",
    "FieldSpec", "Schema", "NO_DEFAULT",
    "encode_row", "decode_row", "encode_ids", "decode_ids",
]
