"""Clock implementations used for ttl and freshness calculations."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

__all__ = ["FrozenClock", "SystemClock"]


def _aware(instant: datetime) -> datetime:
    # Naive datetimes are interpreted as UTC.
    if instant.tzinfo is None:
        return instant.replace(tzinfo=UTC)
    return instant


class SystemClock:
    """Wall clock returning timezone-aware UTC instants.

    Implements the ``Clock`` protocol.
    """

    __slots__ = ()

    def now(self) -> datetime:
        return datetime.now(UTC)

    def add(self, instant: datetime, delta: timedelta) -> datetime:
        return _aware(instant) + delta

    def __repr__(self) -> str:
        return "SystemClock()"


class FrozenClock:
    """A clock that only moves when told to.

    Useful in tests and for replaying a fixed point in time::

        clock = FrozenClock(datetime(2024, 1, 1, tzinfo=UTC))
        clock.advance(seconds=10)

    Parameters:
        instant: The starting instant. Defaults to the current UTC time.
    """

    __slots__ = ("_now",)

    def __init__(self, instant: datetime | None = None) -> None:
        self._now = _aware(instant) if instant is not None else datetime.now(UTC)

    def now(self) -> datetime:
        return self._now

    def add(self, instant: datetime, delta: timedelta) -> datetime:
        return _aware(instant) + delta

    def set(self, instant: datetime) -> None:
        """Move the clock to ``instant``."""
        self._now = _aware(instant)

    def advance(self, seconds: float = 0, **kwargs: float) -> datetime:
        """Move the clock forward and return the new instant.

        Parameters:
            seconds: Seconds to advance by.
            **kwargs: Any other ``timedelta`` keyword (``minutes``, ``hours``...).
        """
        self._now = self._now + timedelta(seconds=seconds, **kwargs)
        return self._now

    def __repr__(self) -> str:
        return f"FrozenClock({self._now.isoformat()})"
