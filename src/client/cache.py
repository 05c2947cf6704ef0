"""Query cache shared by the API client and the actions."""

from __future__ import annotations

from typing import Any, Dict, Hashable, Iterator, Optional, Tuple

import structlog

logger = structlog.get_logger(__name__)

QueryKey = Tuple[Hashable, ...]


class QueryCache:
    """Cached query results keyed by tuples of URL parts.

    Entries never expire on their own; mutations call ``invalidate`` with a
    key prefix so every query below that prefix is fetched again.
    """

    def __init__(self) -> None:
        self._entries: Dict[QueryKey, Any] = {}

    def get(self, key: QueryKey, default: Optional[Any] = None) -> Any:
        return self._entries.get(tuple(key), default)

    def set(self, key: QueryKey, value: Any) -> None:
        self._entries[tuple(key)] = value

    def invalidate(self, prefix: QueryKey) -> int:
        """Drop every entry whose leading key parts equal *prefix*."""
        prefix = tuple(prefix)
        stale = [key for key in self._entries if key[: len(prefix)] == prefix]
        for key in stale:
            del self._entries[key]
        logger.debug("query_cache.invalidated", prefix=prefix, removed=len(stale))
        return len(stale)

    def clear(self) -> None:
        self._entries.clear()

    def __contains__(self, key: object) -> bool:
        return isinstance(key, tuple) and key in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[QueryKey]:
        return iter(list(self._entries))
