"""Protocol definition for time sources."""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import Protocol, runtime_checkable


@runtime_checkable
class Clock(Protocol):
    """Source of the current instant used for ttl and freshness math."""

    def now(self) -> datetime:
        """Return the current instant as a timezone-aware datetime."""
        ...

    def add(self, instant: datetime, delta: timedelta) -> datetime:
        """Return ``instant`` shifted by ``delta``."""
        ...
