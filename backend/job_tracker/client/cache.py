"""Response cache for the client data hooks.

Keys are full request URLs, query string included, so two reads that
differ only in page or filters are cached separately. There is no TTL
and no background refresh: entries live until invalidated.
"""

from collections.abc import Callable
from typing import Any


def key_path(key: str) -> str:
    """The path part of a cache key (everything before "?")."""
    return key.split("?", 1)[0]


class ResponseCache:
    """In-memory map of request URL to decoded response body."""

    def __init__(self) -> None:
        self._entries: dict[str, Any] = {}

    def __contains__(self, key: str) -> bool:
        return key in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def keys(self) -> list[str]:
        """Cached keys, in insertion order."""
        return list(self._entries)

    def get(self, key: str) -> Any | None:
        """Cached body for ``key``, or None."""
        return self._entries.get(key)

    def set(self, key: str, value: Any) -> None:
        """Store a response body."""
        self._entries[key] = value

    def invalidate(self, predicate: Callable[[str], bool]) -> int:
        """Drop every key the predicate accepts.

        Args:
            predicate: Called with each cached key.

        Returns:
            Number of entries dropped.
        """
        stale = [key for key in self._entries if predicate(key)]
        for key in stale:
            del self._entries[key]
        return len(stale)

    def invalidate_prefix(self, prefix: str) -> int:
        """Drop every key whose path is ``prefix`` or lies under it.

        ``/api/v1/applications`` matches ``/api/v1/applications?page=2``
        and ``/api/v1/applications/<id>`` but not ``/api/v1/applications-x``.
        """
        root = prefix.rstrip("/")

        def under_prefix(key: str) -> bool:
            path = key_path(key)
            return path == root or path.startswith(f"{root}/")

        return self.invalidate(under_prefix)

    def clear(self) -> None:
        """Drop everything."""
        self._entries.clear()
