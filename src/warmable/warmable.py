"""The Warmable base class: stale-while-revalidate caching for expensive logic.

Subclass :class:`Warmable`, implement :meth:`Warmable.warmable` (the
expensive computation), :meth:`Warmable.cache` (the backend) and
:meth:`Warmable.deferred` (where background refreshes go), and read
through the class::

    class MonthlyReport(Warmable):
        def cache(self) -> CacheBackend:
            return backend

        def deferred(self) -> DeferredRunner:
            return after_response_queue

        def ttl(self) -> int:
            return 300

        def grace_period(self) -> int:
            return 60

        def warmable(self, month: str) -> list[dict]:
            return build_report(month)

    MonthlyReport.with_arguments("2024-01").get()

Every operation can be called on an instance or directly on the class, in
which case a default instance is created first.
"""

from __future__ import annotations

import functools
import hashlib
import io
import logging
import pickle  # noqa: S403
from abc import ABCMeta, abstractmethod
from collections.abc import Callable, Mapping
from types import MappingProxyType, MethodType
from typing import Any, Generic, Self, TypeVar

from warmable.clock import SystemClock
from warmable.exceptions import UnknownOperationError, WarmableError
from warmable.models.config import WarmableConfig
from warmable.models.duration import DurationLike, resolve_seconds
from warmable.models.envelope import CacheEnvelope
from warmable.protocols.cache import CacheBackend
from warmable.protocols.clock import Clock
from warmable.protocols.deferred import DeferredRunner

logger = logging.getLogger(__name__)

__all__ = ["Warmable", "hybridmethod"]

_R = TypeVar("_R")

# Fixed so that digests do not change with the interpreter's default protocol.
_HASH_PICKLE_PROTOCOL = 4


class hybridmethod(Generic[_R]):  # noqa: N801
    """Method usable both on an instance and on its class.

    Accessed on an instance it behaves like a normal method. Accessed on
    the class it builds a default instance through the class's
    ``resolve_new_instance()`` and calls the method on that.
    """

    def __init__(self, func: Callable[..., _R]) -> None:
        self.__func__ = func
        functools.update_wrapper(self, func)

    def __get__(self, instance: Any, owner: type | None = None) -> Callable[..., _R]:
        if instance is not None:
            return MethodType(self.__func__, instance)

        func = self.__func__

        @functools.wraps(func)
        def on_default_instance(*args: Any, **kwargs: Any) -> _R:
            return func(owner.resolve_new_instance(), *args, **kwargs)  # type: ignore[union-attr]

        return on_default_instance


class WarmableMeta(ABCMeta):
    """Metaclass reporting undefined class-level operations clearly."""

    def __getattr__(cls, name: str) -> Any:
        if name.startswith("_"):
            raise AttributeError(name)
        raise UnknownOperationError(cls, name)


def _serialize(value: Any) -> bytes:
    """Pickle without the memo so equal values give equal bytes regardless of identity."""
    buffer = io.BytesIO()
    pickler = pickle.Pickler(buffer, protocol=_HASH_PICKLE_PROTOCOL)
    pickler.fast = True
    pickler.dump(value)
    return buffer.getvalue()


def _canonical(value: Any) -> Any:
    """Normalise containers whose pickled form depends on insertion or hash order."""
    if isinstance(value, Mapping):
        items = [(_canonical(k), _canonical(v)) for k, v in value.items()]
        return ("mapping", sorted(items, key=_serialize))
    if isinstance(value, set | frozenset):
        return ("set", sorted((_canonical(v) for v in value), key=_serialize))
    if isinstance(value, list | tuple):
        return (type(value).__name__, [_canonical(v) for v in value])
    return value


def _default_supplied(default: Any) -> bool:
    """Return True when a default counts as supplied, i.e. it is truthy.

    Objects whose truth value is ambiguous (array-likes raise ValueError)
    count as supplied.
    """
    if default is None:
        return False
    try:
        return bool(default)
    except ValueError:
        return True


class Warmable(metaclass=WarmableMeta):
    """Base class for cacheable units of expensive logic.

    On read, a cached value is returned as-is while fresh. When both a ttl
    and a grace period are configured the value is stored in a
    :class:`CacheEnvelope`; once the ttl passes, readers keep getting the
    stale data during the grace period while a refresh is handed to the
    deferred runner. On a miss the value is computed synchronously, unless
    the caller supplied a default, in which case the default is returned
    and the computation is deferred.

    Instances are cheap, single-use and not meant to be shared between
    concurrent callers. ``warmup()`` computes at most once per instance.

    Hooks for subclasses:
        warmable(*args, **kwargs): The expensive computation (required).
        cache(): The default backend (required).
        key(): Base cache key. Defaults to ``warmable.<module>.<qualname>``.
        ttl(): Freshness window. Defaults to None (never expires).
        grace_period(): Extra time stale data stays servable. Defaults to None.
        clock(): Time source. Defaults to ``SystemClock``.
        deferred(): Runner for background refreshes, run after the unit of work (required).
    """

    _key: str | None = None
    _ttl: DurationLike | None = None
    _grace: DurationLike | None = None
    _cache: CacheBackend | None = None
    _clock: Clock | None = None
    _runner: DeferredRunner | None = None
    _preheat: bool = True
    _preheated: bool = False
    _args: tuple[Any, ...] = ()
    _kwargs: Mapping[str, Any] = MappingProxyType({})

    # ------------------------------------------------------------------
    # Hooks
    # ------------------------------------------------------------------

    @abstractmethod
    def warmable(self, *args: Any, **kwargs: Any) -> Any:
        """Compute the value to cache from the bound call arguments."""

    @abstractmethod
    def cache(self) -> CacheBackend:
        """Return the backend used when no ``with_cache`` override is set."""

    def key(self) -> str:
        cls = type(self)
        return f"warmable.{cls.__module__}.{cls.__qualname__}"

    def ttl(self) -> DurationLike | None:
        return None

    def grace_period(self) -> DurationLike | None:
        return None

    def clock(self) -> Clock:
        return SystemClock()

    @abstractmethod
    def deferred(self) -> DeferredRunner:
        """Return the runner that receives refreshes when no ``with_runner`` override is set."""

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    @classmethod
    def resolve_new_instance(cls, *args: Any, **kwargs: Any) -> Self:
        """Build a new instance. Override to plug in a container or a test double."""
        return cls(*args, **kwargs)

    @classmethod
    def make(cls, *args: Any, **kwargs: Any) -> Self:
        """Create a fresh instance, forwarding arguments to the constructor.

        Also works on an instance, and always returns a new object.
        """
        return cls.resolve_new_instance(*args, **kwargs)

    # ------------------------------------------------------------------
    # Configuration
    # ------------------------------------------------------------------

    @hybridmethod
    def with_arguments(self, *args: Any, **kwargs: Any) -> Self:
        """Bind the arguments passed to ``warmable()``, replacing any bound before.

        Non-empty arguments are hashed into the cache key.
        """
        self._args = args
        self._kwargs = MappingProxyType(dict(kwargs))
        return self

    @hybridmethod
    def with_key(self, key: str | None) -> Self:
        self._key = key if key is not None else self._key
        return self

    @hybridmethod
    def with_ttl(self, ttl: DurationLike | None) -> Self:
        self._ttl = ttl if ttl is not None else self._ttl
        return self

    @hybridmethod
    def with_grace_period(self, grace_period: DurationLike | None) -> Self:
        self._grace = grace_period if grace_period is not None else self._grace
        return self

    @hybridmethod
    def with_cache(self, cache: CacheBackend | None) -> Self:
        self._cache = cache if cache is not None else self._cache
        return self

    @hybridmethod
    def with_clock(self, clock: Clock | None) -> Self:
        self._clock = clock if clock is not None else self._clock
        return self

    @hybridmethod
    def with_runner(self, runner: DeferredRunner | None) -> Self:
        self._runner = runner if runner is not None else self._runner
        return self

    @hybridmethod
    def with_preheating(self) -> Self:
        self._preheat = True
        return self

    @hybridmethod
    def without_preheating(self) -> Self:
        self._preheat = False
        return self

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    @hybridmethod
    def get_key(self) -> str:
        """Return the cache key, suffixed with the argument digest when arguments are bound."""
        base = self._key if self._key is not None else self.key()
        if self._args or self._kwargs:
            return f"{base}.{self._calculate_hash(self._args, self._kwargs)}"
        return base

    @hybridmethod
    def get(self, default: Any = None) -> Any:
        """Read the cached value, computing or refreshing it as configured.

        Parameters:
            default: Returned when no value is available. A callable is
                invoked lazily to produce it. A truthy default also means
                "don't block": a miss schedules the computation instead of
                running it.

        Returns:
            The cached (possibly stale) value, or the resolved default.
        """
        config = self._resolve_config()
        result = self._get_cache().get(config.key)

        if config.preheat:
            if isinstance(result, CacheEnvelope) and result.is_stale(self._timestamp()):
                logger.debug("Serving stale value for %r, refresh deferred", config.key)
                self._after_response(self._refresh)
            elif result is None:
                logger.debug("Cache miss for %r", config.key)
                result = self._get_preheated(config, _default_supplied(default))

        if isinstance(result, CacheEnvelope):
            result = result.data

        if result is None:
            return default() if callable(default) else default
        return result

    @hybridmethod
    def missing(self) -> bool:
        """Return True when the backend holds no entry for this key."""
        return not self._get_cache().has(self.get_key())

    @hybridmethod
    def should_preheat(self) -> bool:
        return self._preheat

    @hybridmethod
    def warmup(self) -> bool:
        """Compute and store the value. Runs the computation at most once per instance.

        Returns:
            True when the backend accepted the value (or an earlier call
            on this instance already stored it).
        """
        return self._warmup(self._resolve_config())

    @hybridmethod
    def is_preheated(self) -> bool:
        return self._preheated

    @hybridmethod
    def cooldown(self) -> bool:
        """Delete the cached entry regardless of its ttl or grace period."""
        key = self.get_key()
        deleted = bool(self._get_cache().delete(key))
        if not deleted:
            logger.warning("Cache backend refused to delete %r", key)
        return deleted

    # ------------------------------------------------------------------
    # Internals (overridable)
    # ------------------------------------------------------------------

    def _get_cache(self) -> CacheBackend:
        return self._cache if self._cache is not None else self.cache()

    def _get_clock(self) -> Clock:
        return self._clock if self._clock is not None else self.clock()

    def _get_runner(self) -> DeferredRunner:
        return self._runner if self._runner is not None else self.deferred()

    def _get_ttl(self) -> int | None:
        ttl = self._ttl if self._ttl is not None else self.ttl()
        return resolve_seconds(ttl, self._get_clock())

    def _get_grace_period(self) -> int | None:
        grace = self._grace if self._grace is not None else self.grace_period()
        return resolve_seconds(grace, self._get_clock())

    def _timestamp(self) -> int:
        return int(self._get_clock().now().timestamp())

    def _resolve_config(self) -> WarmableConfig:
        return WarmableConfig(
            key=self.get_key(),
            ttl=self._get_ttl(),
            grace=self._get_grace_period(),
            preheat=self._preheat,
        )

    def _calculate_hash(self, args: tuple[Any, ...], kwargs: Mapping[str, Any]) -> str:
        try:
            payload = _serialize(_canonical([args, dict(kwargs)]))
        except (pickle.PicklingError, TypeError, AttributeError, ValueError, RecursionError) as e:
            msg = f"Arguments for {type(self).__qualname__} cannot be serialized for hashing"
            raise WarmableError(msg) from e
        return hashlib.sha1(payload).hexdigest()  # noqa: S324

    def _execute_warmable(self) -> Any:
        return self.warmable(*self._args, **self._kwargs)

    def _wrap_envelope(self, expires_at: int, data: Any) -> CacheEnvelope:
        return CacheEnvelope(expires_at=expires_at, data=data)

    def _warmup(self, config: WarmableConfig) -> bool:
        if self._preheated:
            return True

        value = self._execute_warmable()
        if config.wraps_envelope:
            value = self._wrap_envelope(self._timestamp() + config.ttl, value)  # type: ignore[operator]

        self._preheated = bool(self._get_cache().set(config.key, value, config.backend_ttl))
        if self._preheated:
            logger.debug("Stored %r (ttl=%s)", config.key, config.backend_ttl)
        else:
            logger.warning("Cache backend refused to store %r", config.key)
        return self._preheated

    def _get_preheated(self, config: WarmableConfig, has_default: bool) -> Any:
        if has_default:
            self._after_response(self.warmup)
            return None

        if self._warmup(config):
            return self._get_cache().get(config.key)
        return None

    def _refresh(self) -> None:
        self.warmup()

    def _after_response(self, task: Callable[[], object]) -> None:
        self._get_runner().schedule(task)

    def __getattr__(self, name: str) -> Any:
        if name.startswith("_"):
            raise AttributeError(name)
        raise UnknownOperationError(type(self), name)

    def __repr__(self) -> str:
        return (
            f"{type(self).__qualname__}(key={self.get_key()!r}, "
            f"preheat={self._preheat}, preheated={self._preheated})"
        )
