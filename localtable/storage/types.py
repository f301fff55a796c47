"""
LocalTable Field Type System
============================
Defines the field types a schema may declare: str, int, float, timestamp,
bool, obj. Each type maps to a validator, a pure function returning True
when a Python value is acceptable for that type.

  str        -> str
  int        -> real number (not bool) whose value is unchanged by rounding
  float      -> any real number (not bool)
  timestamp  -> same rule as int (e.g. epoch milliseconds)
  bool       -> bool
  obj        -> anything (no validator)

Extra named types can be added with register_validator().
"""

import math
from enum import Enum
from numbers import Real
from typing import Any, Callable, Dict, Optional, Union

Validator = Callable[[Any], bool]


class FieldType(Enum):
    """Built-in field types."""
    STR = "str"
    INT = "int"
    FLOAT = "float"
    TIMESTAMP = "timestamp"
    BOOL = "bool"
    OBJ = "obj"


DEFAULT_TYPE = FieldType.STR


# ─── Validators ─────────────────────────────────────────────────────────────

def is_string(value: Any) -> bool:
    return isinstance(value, str)


def is_float(value: Any) -> bool:
    return isinstance(value, Real) and not isinstance(value, bool)


def is_integer(value: Any) -> bool:
    """Integral numeric: 5 and 5.0 pass, 5.5, NaN and infinity do not."""
    if not is_float(value):
        return False
    if isinstance(value, int):
        return True
    if not math.isfinite(value):
        return False
    return round(value) == value


def is_bool(value: Any) -> bool:
    return isinstance(value, bool)


# ─── Registry ───────────────────────────────────────────────────────────────

# None means "no check" (always valid)
_VALIDATORS: Dict[str, Optional[Validator]] = {
    FieldType.STR.value: is_string,
    FieldType.INT.value: is_integer,
    FieldType.FLOAT.value: is_float,
    FieldType.TIMESTAMP.value: is_integer,
    FieldType.BOOL.value: is_bool,
    FieldType.OBJ.value: None,
}

_BUILTIN_TYPES = frozenset(t.value for t in FieldType)


def type_name(field_type: Union[str, FieldType]) -> str:
    """Normalize a FieldType member or a string to the registry name."""
    if isinstance(field_type, FieldType):
        return field_type.value
    return field_type


def known_types() -> list[str]:
    return list(_VALIDATORS.keys())


def get_validator(field_type: Union[str, FieldType]) -> Optional[Validator]:
    """
    Return the validator for a type, or None for unconstrained types.
    Raises ValueError for unknown type names.
    """
    name = type_name(field_type)
    try:
        return _VALIDATORS[name]
    except (KeyError, TypeError):
        raise ValueError(f"Unknown field type: {name!r}. "
                         f"Valid types: {known_types()}")


def validate(value: Any, field_type: Union[str, FieldType]) -> bool:
    """Check a value against a type. Raises ValueError for unknown types."""
    validator = get_validator(field_type)
    if validator is None:
        return True
    return bool(validator(value))


def register_validator(name: str, validator: Optional[Validator]) -> None:
    """Add (or replace) a custom named type. Built-in types cannot be replaced."""
    if name in _BUILTIN_TYPES:
        raise ValueError(f"Cannot replace built-in field type {name!r}")
    if validator is not None and not callable(validator):
        raise TypeError(f"Validator for {name!r} must be callable or None")
    _VALIDATORS[name] = validator


def unregister_validator(name: str) -> None:
    """Remove a custom type. Unknown names are ignored."""
    if name in _BUILTIN_TYPES:
        raise ValueError(f"Cannot remove built-in field type {name!r}")
    _VALIDATORS.pop(name, None)
