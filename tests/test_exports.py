"""Tests for top-level package exports."""

from __future__ import annotations

import warmable


class TestTopLevelExports:
    """Verify all expected symbols are importable from the top-level package."""

    def test_core_exports(self) -> None:
        from warmable import Warmable, hybridmethod

        assert Warmable is not None
        assert hybridmethod is not None

    def test_collaborator_exports(self) -> None:
        from warmable import (
            DeferredTaskQueue,
            FrozenClock,
            ImmediateRunner,
            InMemoryCacheBackend,
            SystemClock,
            deferred_scope,
        )

        assert DeferredTaskQueue is not None
        assert FrozenClock is not None
        assert ImmediateRunner is not None
        assert InMemoryCacheBackend is not None
        assert SystemClock is not None
        assert deferred_scope is not None

    def test_model_and_exception_exports(self) -> None:
        from warmable import (
            CacheEnvelope,
            UnknownOperationError,
            WarmableConfig,
            WarmableError,
            as_duration,
            resolve_seconds,
        )

        assert CacheEnvelope is not None
        assert WarmableConfig is not None
        assert issubclass(UnknownOperationError, WarmableError)
        assert as_duration is not None
        assert resolve_seconds is not None

    def test_all_names_resolve(self) -> None:
        for name in warmable.__all__:
            assert hasattr(warmable, name), name

    def test_version(self) -> None:
        assert isinstance(warmable.__version__, str)
