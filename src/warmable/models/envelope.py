"""Envelope pairing cached data with its freshness boundary."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict


class CacheEnvelope(BaseModel):
    """The value stored in the backend when both ttl and grace apply.

    ``expires_at`` is the epoch timestamp (whole seconds) after which the
    data is stale. The backend keeps the envelope for a further grace
    period, during which readers get the stale data while a refresh runs.
    """

    expires_at: int
    data: Any = None

    model_config = ConfigDict(frozen=True)

    def is_stale(self, now: int) -> bool:
        """Return True once ``now`` has reached the freshness boundary."""
        return now >= self.expires_at
