"""
LocalTable Query
================
Filter criteria and lookup operators used by Table.filter().

Usage:
    from localtable.query import Declarative, Predicate

    table.filter(Declarative({"age": {">=": 18}}, strict=True))
    table.filter(Predicate(lambda row: row["name"].startswith("J")))
"""

from localtable.query.lookups import LOOKUPS, lookup_types, check_lookup, compare
from localtable.query.criteria import (
    Criteria, MatchAll, Predicate, Declarative, Clause, as_criteria,
)

__all__ = [
    "LOOKUPS", "lookup_types", "check_lookup", "compare",
    "Criteria", "MatchAll", "Predicate", "Declarative", "Clause", "as_criteria",
]
