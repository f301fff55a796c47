"""
LocalTable Filter Criteria
==========================
The two shapes a filter can take:

  Predicate(fn)          fn(row) -> truthy keeps the row
  Declarative(mapping)   {field: {lookup: value, ...}, ...}, AND-combined

as_criteria() picks the shape once, at the boundary, so the scan loop never
re-inspects what it was given.

Declarative filters check every lookup when constructed: an unknown
operator raises InvalidLookup before a single row is read.
"""

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Callable, Union

from localtable.errors import InvalidLookup
from localtable.query.lookups import check_lookup, compare

Row = dict


class Criteria:
    """Base class: decides whether a decoded row is kept."""

    def matches(self, row: Row) -> bool:
        raise NotImplementedError


class MatchAll(Criteria):
    """No criteria: every row matches."""

    def matches(self, row: Row) -> bool:
        return True

    def __repr__(self) -> str:
        return "MatchAll()"


class Predicate(Criteria):
    """Caller-supplied function over the decoded row (id attached)."""

    def __init__(self, func: Callable[[Row], Any]):
        if not callable(func):
            raise TypeError(f"Predicate needs a callable, got {type(func).__name__}")
        self.func = func

    def matches(self, row: Row) -> bool:
        return bool(self.func(row))

    def __repr__(self) -> str:
        name = getattr(self.func, "__name__", repr(self.func))
        return f"Predicate({name})"


@dataclass(frozen=True)
class Clause:
    field: str
    lookup: str
    value: Any

    def holds(self, row: Row) -> bool:
        return compare(self.lookup, row[self.field], self.value)


class Declarative(Criteria):
    """
    Field -> {lookup -> value} mapping.

    A row matches when every clause holds. A filtered field missing from
    the row skips its clauses; with strict=True such rows are excluded
    instead.
    """

    def __init__(self, mapping: Mapping[str, Mapping[str, Any]], strict: bool = False):
        self.strict = strict
        self.clauses: list[Clause] = []

        if not isinstance(mapping, Mapping):
            raise InvalidLookup(mapping)

        for field_name, lookups in mapping.items():
            if not isinstance(lookups, Mapping):
                raise InvalidLookup(lookups, field_name)
            for lookup, value in lookups.items():
                check_lookup(lookup, field_name)
                self.clauses.append(Clause(field_name, lookup, value))

    @property
    def fields(self) -> list[str]:
        seen: list[str] = []
        for c in self.clauses:
            if c.field not in seen:
                seen.append(c.field)
        return seen

    def matches(self, row: Row) -> bool:
        for clause in self.clauses:
            if clause.field not in row:
                if self.strict:
                    return False
                continue
            if not clause.holds(row):
                return False
        return True

    def __repr__(self) -> str:
        return f"Declarative(clauses={len(self.clauses)}, strict={self.strict})"


CriteriaLike = Union[None, Criteria, Callable[[Row], Any], Mapping[str, Mapping[str, Any]]]


def as_criteria(criteria: CriteriaLike = None) -> Criteria:
    """Resolve whatever the caller passed into a Criteria object."""
    if criteria is None:
        return MatchAll()
    if isinstance(criteria, Criteria):
        return criteria
    if isinstance(criteria, Mapping):
        return Declarative(criteria)
    if callable(criteria):
        return Predicate(criteria)
    raise TypeError(f"Unsupported filter criteria: {type(criteria).__name__}")
