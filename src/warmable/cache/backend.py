"""In-memory cache backend implementation."""

from __future__ import annotations

import logging
from typing import Any

from warmable.clock import SystemClock
from warmable.protocols.clock import Clock

logger = logging.getLogger(__name__)


class InMemoryCacheBackend:
    """In-memory cache with optional TTL expiration.

    Expired entries are cleaned up lazily on access. Expiry is measured
    against the injected clock so that tests can move time forward.

    Implements the ``CacheBackend`` protocol.

    Parameters:
        max_size: Maximum number of entries. When exceeded, oldest entries
            are evicted. Default 1000.
        clock: Time source for expiry. Defaults to ``SystemClock``.
    """

    __slots__ = ("_clock", "_data", "_max_size", "_timestamps")

    def __init__(self, max_size: int = 1000, clock: Clock | None = None) -> None:
        self._max_size = max_size
        self._clock: Clock = clock if clock is not None else SystemClock()
        self._data: dict[str, Any] = {}
        self._timestamps: dict[str, tuple[float, float | None]] = {}

    def _now(self) -> float:
        return self._clock.now().timestamp()

    def get(self, key: str) -> Any | None:
        """Retrieve a cached value, or None if not found / expired.

        Parameters:
            key: The cache key.

        Returns:
            The cached value, or None.
        """
        if not self.has(key):
            return None
        return self._data[key]

    def set(self, key: str, value: Any, ttl: int | None = None) -> bool:
        """Store a value in the cache.

        A zero or negative ``ttl`` removes the key instead of storing it.

        Parameters:
            key: The cache key.
            value: The value to cache.
            ttl: Time-to-live in seconds. None means no expiration.

        Returns:
            Always True.
        """
        if ttl is not None and ttl <= 0:
            self._remove(key)
            return True

        now = self._now()
        expires_at = (now + ttl) if ttl is not None else None

        # If key already exists, update in place (no eviction needed)
        if key in self._data:
            self._data[key] = value
            self._timestamps[key] = (now, expires_at)
            return True

        # Evict oldest entries if at max capacity
        while self._data and len(self._data) >= self._max_size:
            self._evict_oldest()

        self._data[key] = value
        self._timestamps[key] = (now, expires_at)
        return True

    def has(self, key: str) -> bool:
        if key not in self._data:
            return False

        _created_at, expires_at = self._timestamps[key]
        if expires_at is not None and self._now() >= expires_at:
            # Lazy cleanup of expired entry
            self._remove(key)
            return False

        return True

    def delete(self, key: str) -> bool:
        """Remove a specific key from the cache.

        Deleting a key that does not exist still succeeds.

        Parameters:
            key: The cache key to remove.
        """
        self._remove(key)
        return True

    def clear(self) -> None:
        """Remove all entries from the cache."""
        self._data.clear()
        self._timestamps.clear()

    def _remove(self, key: str) -> None:
        """Remove a key from both data and timestamps dicts."""
        self._data.pop(key, None)
        self._timestamps.pop(key, None)

    def _evict_oldest(self) -> None:
        """Evict the oldest entry by creation time."""
        if not self._timestamps:
            return
        oldest_key = min(self._timestamps, key=lambda k: self._timestamps[k][0])
        logger.debug("Evicting oldest cache entry %r", oldest_key)
        self._remove(oldest_key)

    def __len__(self) -> int:
        return len(self._data)

    def __repr__(self) -> str:
        return f"InMemoryCacheBackend(max_size={self._max_size}, entries={len(self._data)})"
