"""Cache backends for warmable."""

from .backend import InMemoryCacheBackend

__all__ = [
    "InMemoryCacheBackend",
]
