"""
TTL cache for upstream GitHub data.

A single instance is created at startup and handed to every service that
caches. Entries expire lazily: an expired entry is dropped on the next read
and is otherwise indistinguishable from a missing one.
"""

import time
from typing import Any, Awaitable, Callable, Dict, Optional, Tuple, TypeVar
import logging

logger = logging.getLogger(__name__)

T = TypeVar('T')

_MISSING = object()


class TTLCache:
    """Keyed in-memory store with per-entry expiry."""

    def __init__(self, clock: Callable[[], float] = time.time):
        self._clock = clock
        self._entries: Dict[str, Tuple[Any, float]] = {}  # key -> (value, expires_at)

    def _lookup(self, key: str) -> Any:
        entry = self._entries.get(key)
        if entry is None:
            return _MISSING
        value, expires_at = entry
        if self._clock() > expires_at:
            self._entries.pop(key, None)
            return _MISSING
        return value

    def get(self, key: str, default: Optional[Any] = None) -> Any:
        """Return the cached value, or ``default`` when missing or expired."""
        value = self._lookup(key)
        return default if value is _MISSING else value

    def __contains__(self, key: str) -> bool:
        return self._lookup(key) is not _MISSING

    def set(self, key: str, value: Any, ttl: float):
        """Store ``value`` for ``ttl`` seconds."""
        self._entries[key] = (value, self._clock() + ttl)

    async def get_or_set(self, key: str, ttl: float, producer: Callable[[], Awaitable[T]]) -> T:
        """Return the cached value or await ``producer`` once and cache its result.

        Concurrent callers on a cold key may each run the producer; the last
        write wins. Exceptions from the producer propagate and nothing is stored.
        """
        value = self._lookup(key)
        if value is not _MISSING:
            logger.debug(f"Cache hit for {key}")
            return value

        logger.debug(f"Cache miss for {key}")
        fresh = await producer()
        self.set(key, fresh, ttl)
        return fresh

    def invalidate(self, key: str):
        """Invalidate a single key."""
        self._entries.pop(key, None)

    def purge_expired(self) -> int:
        """Drop every expired entry and return how many were removed."""
        now = self._clock()
        expired_keys = [key for key, (_, expires_at) in self._entries.items() if now > expires_at]
        for key in expired_keys:
            self._entries.pop(key, None)
        if expired_keys:
            logger.debug(f"Purged {len(expired_keys)} expired cache entries")
        return len(expired_keys)

    def clear(self):
        """Clear entire cache."""
        logger.info("Clearing entire cache")
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)
