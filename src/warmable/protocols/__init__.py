"""Protocol definitions for warmable's pluggable collaborators."""

from .cache import CacheBackend
from .clock import Clock
from .deferred import DeferredRunner

__all__ = [
    "CacheBackend",
    "Clock",
    "DeferredRunner",
]
