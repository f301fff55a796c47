"""
LocalTable Store Protocol
=========================
The key-value surface a Table persists through.

Keys and values are both strings. A store is synchronous and owned by a
single process; it does no validation of its own. Anything that provides
these three methods can back a Table (a dict wrapper, a JSON file, a
browser-style localStorage shim, a Redis client adapter, ...).
"""

from typing import Optional, Protocol, runtime_checkable


@runtime_checkable
class Store(Protocol):
    """Minimal string-keyed, string-valued store."""

    def get(self, key: str) -> Optional[str]:
        """Return the value for key, or None if missing."""
        ...

    def set(self, key: str, value: str) -> None:
        """Insert or replace key with value."""
        ...

    def remove(self, key: str) -> None:
        """Remove key if present (no-op if absent)."""
        ...
