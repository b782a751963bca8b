"""Data models for warmable."""

from .config import WarmableConfig
from .duration import (
    AbsoluteInstant,
    Duration,
    DurationLike,
    RelativeDuration,
    Seconds,
    as_duration,
    resolve_seconds,
)
from .envelope import CacheEnvelope

__all__ = [
    "AbsoluteInstant",
    "CacheEnvelope",
    "Duration",
    "DurationLike",
    "RelativeDuration",
    "Seconds",
    "WarmableConfig",
    "as_duration",
    "resolve_seconds",
]
