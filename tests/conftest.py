"""Shared fixtures for warmable tests."""

from __future__ import annotations

from collections.abc import Iterator
from datetime import UTC, datetime
from typing import Any

import pytest

from warmable.cache.backend import InMemoryCacheBackend
from warmable.clock import FrozenClock
from warmable.deferred import DeferredTaskQueue, ImmediateRunner
from warmable.protocols.cache import CacheBackend
from warmable.protocols.deferred import DeferredRunner
from warmable.warmable import Warmable

# 2024-01-01T00:00:00Z
EPOCH = datetime(2024, 1, 1, tzinfo=UTC)
EPOCH_TS = 1704067200


class RecordingBackend:
    """Cache backend wrapper that records every call made to it.

    Satisfies the CacheBackend protocol. Delegates storage to an
    ``InMemoryCacheBackend`` unless ``accept_writes`` / ``accept_deletes``
    are switched off, in which case writes/deletes are refused.
    """

    def __init__(self, clock: FrozenClock | None = None) -> None:
        self.inner = InMemoryCacheBackend(clock=clock)
        self.calls: list[tuple[Any, ...]] = []
        self.accept_writes = True
        self.accept_deletes = True

    def get(self, key: str) -> Any | None:
        self.calls.append(("get", key))
        return self.inner.get(key)

    def set(self, key: str, value: Any, ttl: int | None = None) -> bool:
        self.calls.append(("set", key, value, ttl))
        if not self.accept_writes:
            return False
        return self.inner.set(key, value, ttl)

    def has(self, key: str) -> bool:
        self.calls.append(("has", key))
        return self.inner.has(key)

    def delete(self, key: str) -> bool:
        self.calls.append(("delete", key))
        if not self.accept_deletes:
            return False
        return self.inner.delete(key)

    def calls_to(self, method: str) -> list[tuple[Any, ...]]:
        return [c for c in self.calls if c[0] == method]


class HeavyRequest(Warmable):
    """Warmable whose collaborators are swapped per test via class attributes."""

    test_cache: CacheBackend | None = None
    test_clock: FrozenClock | None = None
    test_queue: DeferredTaskQueue | None = None
    test_ttl: Any = None
    test_grace: Any = None
    test_key: str | None = None
    compute_calls = 0

    def cache(self) -> CacheBackend:
        assert self.test_cache is not None
        return self.test_cache

    def clock(self) -> FrozenClock:
        assert self.test_clock is not None
        return self.test_clock

    def deferred(self) -> DeferredTaskQueue:
        assert self.test_queue is not None
        return self.test_queue

    def key(self) -> str:
        return self.test_key if self.test_key is not None else super().key()

    def ttl(self) -> Any:
        return self.test_ttl

    def grace_period(self) -> Any:
        return self.test_grace

    def warmable(self, *args: Any, **kwargs: Any) -> Any:
        type(self).compute_calls += 1
        return "Hello World"


class GreetingRequest(Warmable):
    """Warmable that builds its value from the bound arguments."""

    def __init__(self, backend: CacheBackend | None = None) -> None:
        self.backend = backend

    def cache(self) -> CacheBackend:
        assert self.backend is not None
        return self.backend

    def deferred(self) -> DeferredRunner:
        return ImmediateRunner()

    def warmable(self, name: str, punctuation: str = "!") -> str:
        return f"Hello {name}{punctuation}"


@pytest.fixture
def clock() -> FrozenClock:
    return FrozenClock(EPOCH)


@pytest.fixture
def backend(clock: FrozenClock) -> RecordingBackend:
    return RecordingBackend(clock=clock)


@pytest.fixture
def queue() -> DeferredTaskQueue:
    return DeferredTaskQueue()


@pytest.fixture
def heavy(
    backend: RecordingBackend, clock: FrozenClock, queue: DeferredTaskQueue
) -> Iterator[type[HeavyRequest]]:
    """HeavyRequest wired to the test backend, clock and queue, reset afterwards."""
    HeavyRequest.test_cache = backend
    HeavyRequest.test_clock = clock
    HeavyRequest.test_queue = queue
    HeavyRequest.compute_calls = 0
    yield HeavyRequest
    HeavyRequest.test_cache = None
    HeavyRequest.test_clock = None
    HeavyRequest.test_queue = None
    HeavyRequest.test_ttl = None
    HeavyRequest.test_grace = None
    HeavyRequest.test_key = None
    HeavyRequest.compute_calls = 0


@pytest.fixture
def heavy_key() -> str:
    return f"warmable.{HeavyRequest.__module__}.HeavyRequest"
