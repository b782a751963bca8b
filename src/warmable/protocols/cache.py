"""Protocol definition for cache backends."""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class CacheBackend(Protocol):
    """Key-value store a Warmable reads from and writes to.

    Any object with these four methods can back a Warmable -- no
    inheritance required. Write operations report success as a boolean
    instead of raising.
    """

    def get(self, key: str) -> Any | None:
        """Retrieve a cached value, or None if not found / expired.

        Parameters:
            key: The cache key.

        Returns:
            The cached value, or None.
        """
        ...

    def set(self, key: str, value: Any, ttl: int | None = None) -> bool:
        """Store a value in the cache.

        Parameters:
            key: The cache key.
            value: The value to cache.
            ttl: Time-to-live in seconds. None means no expiration.

        Returns:
            True when the value was stored.
        """
        ...

    def has(self, key: str) -> bool:
        """Return True if a live entry exists for ``key``."""
        ...

    def delete(self, key: str) -> bool:
        """Remove a specific key from the cache.

        Parameters:
            key: The cache key to remove.

        Returns:
            True when the key no longer exists afterwards.
        """
        ...
