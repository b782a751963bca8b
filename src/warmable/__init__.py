"""warmable: stale-while-revalidate caching for expensive computations.

Core:
    Warmable, hybridmethod

Collaborators:
    InMemoryCacheBackend, SystemClock, FrozenClock,
    DeferredTaskQueue, ImmediateRunner, deferred_scope

Protocols (extension points):
    CacheBackend, Clock, DeferredRunner

Models & Types:
    CacheEnvelope, WarmableConfig, Seconds, RelativeDuration,
    AbsoluteInstant, Duration, DurationLike, as_duration, resolve_seconds

Exceptions:
    WarmableError, UnknownOperationError
"""

from importlib.metadata import PackageNotFoundError, version

from warmable.cache import InMemoryCacheBackend
from warmable.clock import FrozenClock, SystemClock
from warmable.deferred import DeferredTaskQueue, ImmediateRunner, deferred_scope
from warmable.exceptions import UnknownOperationError, WarmableError
from warmable.models import (
    AbsoluteInstant,
    CacheEnvelope,
    Duration,
    DurationLike,
    RelativeDuration,
    Seconds,
    WarmableConfig,
    as_duration,
    resolve_seconds,
)
from warmable.protocols import CacheBackend, Clock, DeferredRunner
from warmable.warmable import Warmable, hybridmethod

try:
    __version__ = version("warmable")
except PackageNotFoundError:
    __version__ = "0.0.0-dev"

__all__ = [
    "AbsoluteInstant",
    "CacheBackend",
    "CacheEnvelope",
    "Clock",
    "DeferredRunner",
    "DeferredTaskQueue",
    "Duration",
    "DurationLike",
    "FrozenClock",
    "ImmediateRunner",
    "InMemoryCacheBackend",
    "RelativeDuration",
    "Seconds",
    "SystemClock",
    "UnknownOperationError",
    "Warmable",
    "WarmableConfig",
    "WarmableError",
    "as_duration",
    "deferred_scope",
    "hybridmethod",
    "resolve_seconds",
]
