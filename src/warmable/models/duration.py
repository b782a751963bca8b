"""Duration inputs accepted for ttl and grace periods.

A ttl or grace period may be given as a number of seconds, a relative
``timedelta`` or an absolute ``datetime``. Loose input is normalised into
one of three tagged models by :func:`as_duration` and turned into whole
seconds from "now" by :func:`resolve_seconds`. Resolution always reads the
clock at call time, so the same ``RelativeDuration`` or ``AbsoluteInstant``
resolves consistently only within a single operation.
"""

from __future__ import annotations

from datetime import UTC, datetime, timedelta
from typing import Annotated, Literal, TypeAlias

from pydantic import BaseModel, ConfigDict, Field

from warmable.protocols.clock import Clock


class Seconds(BaseModel):
    """A fixed number of seconds."""

    kind: Literal["seconds"] = "seconds"
    seconds: int

    model_config = ConfigDict(frozen=True)

    def to_seconds(self, clock: Clock) -> int:
        return self.seconds


class RelativeDuration(BaseModel):
    """A span of time measured from the moment of resolution."""

    kind: Literal["relative"] = "relative"
    delta: timedelta

    model_config = ConfigDict(frozen=True)

    def to_seconds(self, clock: Clock) -> int:
        now = clock.now()
        return _timestamp(clock.add(now, self.delta)) - _timestamp(now)


class AbsoluteInstant(BaseModel):
    """A fixed point in time; resolves to the seconds left until it."""

    kind: Literal["absolute"] = "absolute"
    instant: datetime

    model_config = ConfigDict(frozen=True)

    def to_seconds(self, clock: Clock) -> int:
        return _timestamp(self.instant) - _timestamp(clock.now())


Duration: TypeAlias = Annotated[
    Seconds | RelativeDuration | AbsoluteInstant, Field(discriminator="kind")
]
DurationLike: TypeAlias = int | timedelta | datetime | Seconds | RelativeDuration | AbsoluteInstant


def _timestamp(instant: datetime) -> int:
    if instant.tzinfo is None:
        instant = instant.replace(tzinfo=UTC)
    return int(instant.timestamp())


def as_duration(value: DurationLike | None) -> Duration | None:
    """Normalise a loose ttl/grace value into the tagged duration union.

    Raises:
        TypeError: If ``value`` is not ``None``, an ``int``, a ``timedelta``,
            a ``datetime`` or one of the duration models.
    """
    if value is None:
        return None
    if isinstance(value, Seconds | RelativeDuration | AbsoluteInstant):
        return value
    # bool is an int subclass; True seconds is never intended.
    if isinstance(value, bool):
        msg = "Duration must not be a bool"
        raise TypeError(msg)
    if isinstance(value, int):
        return Seconds(seconds=value)
    if isinstance(value, timedelta):
        return RelativeDuration(delta=value)
    if isinstance(value, datetime):
        return AbsoluteInstant(instant=value)
    msg = f"Unsupported duration type: {type(value).__name__}"
    raise TypeError(msg)


def resolve_seconds(value: DurationLike | None, clock: Clock) -> int | None:
    """Resolve a ttl/grace value to whole seconds from the clock's current instant."""
    duration = as_duration(value)
    if duration is None:
        return None
    return duration.to_seconds(clock)
