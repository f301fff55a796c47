"""
LocalTable Record Serializer
============================
Text encoding of the two kinds of stored values:

  <table>_list              JSON array of row ids, insertion order
  <table>_detail_<id>       JSON object of field values (id excluded)

Encoding is compact JSON with no versioning or compression. The row id
is never written into the detail payload: it is stripped on encode and
reattached on decode.
"""

import json
from typing import Any, Mapping

from localtable.errors import SerializationError

_SEPARATORS = (",", ":")


def _dumps(value: Any) -> str:
    try:
        return json.dumps(value, separators=_SEPARATORS, ensure_ascii=False, allow_nan=False)
    except (TypeError, ValueError) as e:
        raise SerializationError(f"Value is not JSON-serializable: {e}") from e


def _loads(text: str, what: str) -> Any:
    try:
        return json.loads(text)
    except (TypeError, ValueError) as e:
        raise SerializationError(f"Cannot decode {what}: {e}") from e


def encode_row(data: Mapping[str, Any], id_field: str = "id") -> str:
    """Serialize a row's field mapping, dropping the id field."""
    payload = {k: v for k, v in data.items() if k != id_field}
    return _dumps(payload)


def decode_row(text: str, row_id: Any, id_field: str = "id") -> dict:
    """Deserialize a detail payload and reattach the row id."""
    data = _loads(text, f"row {row_id!r}")
    if not isinstance(data, dict):
        raise SerializationError(
            f"Row {row_id!r} is not a JSON object (got {type(data).__name__})")
    data[id_field] = row_id
    return data


def encode_ids(ids: list) -> str:
    return _dumps(list(ids))


def decode_ids(text: str) -> list:
    ids = _loads(text, "row index")
    if not isinstance(ids, list):
        raise SerializationError(
            f"Row index is not a JSON array (got {type(ids).__name__})")
    return ids


def check_id(row_id: Any) -> None:
    """Row ids must be JSON scalars so they survive the index round trip."""
    if isinstance(row_id, bool) or not isinstance(row_id, (str, int, float)):
        raise TypeError(f"Row id must be a str or number, got {type(row_id).__name__}")
