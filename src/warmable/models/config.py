"""Immutable configuration snapshot consumed by Warmable operations."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class WarmableConfig(BaseModel):
    """Resolved configuration for one read or warmup.

    Built from a Warmable's fluent overrides and class hooks at the start
    of an operation, with ttl and grace already resolved to seconds, so the
    operation works from one consistent view even if the instance is
    reconfigured later.
    """

    key: str
    ttl: int | None = None
    grace: int | None = None
    preheat: bool = True

    model_config = ConfigDict(frozen=True)

    @property
    def wraps_envelope(self) -> bool:
        """True when stored values carry an explicit freshness boundary."""
        return bool(self.ttl) and bool(self.grace)

    @property
    def backend_ttl(self) -> int | None:
        """The expiry handed to the backend: ttl plus grace when both apply."""
        if self.wraps_envelope:
            return self.ttl + self.grace  # type: ignore[operator]
        return self.ttl
