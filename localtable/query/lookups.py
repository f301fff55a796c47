"""
LocalTable Lookup Operators
===========================
Comparison operators usable in a declarative filter.

Comparisons use native Python semantics for the stored value's type
(numeric ordering for numbers, lexical ordering for strings). Values that
cannot be ordered against each other, such as str vs int, simply do not
match; they never raise.
"""

import operator
from typing import Any, Callable, Dict

from localtable.errors import InvalidLookup

LOOKUPS: Dict[str, Callable[[Any, Any], Any]] = {
    "=": operator.eq,
    ">": operator.gt,
    ">=": operator.ge,
    "<": operator.lt,
    "<=": operator.le,
    "!=": operator.ne,
}


def lookup_types() -> list[str]:
    return list(LOOKUPS.keys())


def check_lookup(lookup: Any, field_name: str = "") -> Callable[[Any, Any], Any]:
    """Return the operator function for a lookup. Raises InvalidLookup."""
    try:
        return LOOKUPS[lookup]
    except (KeyError, TypeError):
        raise InvalidLookup(lookup, field_name) from None


def compare(lookup: str, current: Any, desired: Any) -> bool:
    op = check_lookup(lookup)
    # bool is an int subclass; keep True from equalling 1
    if lookup in ("=", "!=") and isinstance(current, bool) != isinstance(desired, bool):
        return lookup == "!="
    try:
        return bool(op(current, desired))
    except TypeError:
        return False
