"""Tests for deferred task runners."""

from __future__ import annotations

import logging

import pytest

from warmable.deferred import DeferredTaskQueue, ImmediateRunner, deferred_scope


def _boom() -> None:
    msg = "task failed"
    raise RuntimeError(msg)


class TestDeferredTaskQueue:
    def test_tasks_wait_until_drained(self) -> None:
        queue = DeferredTaskQueue()
        ran: list[int] = []

        queue.schedule(lambda: ran.append(1))
        queue.schedule(lambda: ran.append(2))

        assert ran == []
        assert queue.pending == len(queue) == 2
        assert queue.drain() == 2
        assert ran == [1, 2]
        assert queue.pending == 0

    def test_failing_task_does_not_stop_the_rest(self, caplog) -> None:
        queue = DeferredTaskQueue()
        ran: list[str] = []
        queue.schedule(_boom)
        queue.schedule(lambda: ran.append("after"))

        with caplog.at_level(logging.WARNING, logger="warmable.deferred"):
            assert queue.drain() == 2

        assert ran == ["after"]
        assert "task failed" in caplog.text

    def test_tasks_scheduled_while_draining_run_in_same_drain(self) -> None:
        queue = DeferredTaskQueue()
        ran: list[str] = []

        def outer() -> None:
            ran.append("outer")
            queue.schedule(lambda: ran.append("inner"))

        queue.schedule(outer)

        assert queue.drain() == 2
        assert ran == ["outer", "inner"]

    def test_large_backlog_drains_in_order(self) -> None:
        queue = DeferredTaskQueue()
        ran: list[int] = []
        for i in range(10_000):
            queue.schedule(lambda i=i: ran.append(i))

        assert queue.drain() == 10_000
        assert ran == list(range(10_000))

    def test_clear_discards_tasks(self) -> None:
        queue = DeferredTaskQueue()
        ran: list[int] = []
        queue.schedule(lambda: ran.append(1))

        queue.clear()

        assert queue.drain() == 0
        assert ran == []

    def test_repr(self) -> None:
        assert "pending=0" in repr(DeferredTaskQueue())


class TestImmediateRunner:
    def test_runs_inline(self) -> None:
        ran: list[int] = []
        ImmediateRunner().schedule(lambda: ran.append(1))
        assert ran == [1]

    def test_swallows_failures(self, caplog) -> None:
        with caplog.at_level(logging.WARNING, logger="warmable.deferred"):
            ImmediateRunner().schedule(_boom)

        assert "Deferred task" in caplog.text


class TestDeferredScope:
    def test_drains_on_exit(self) -> None:
        ran: list[int] = []

        with deferred_scope() as queue:
            queue.schedule(lambda: ran.append(1))
            assert ran == []

        assert ran == [1]

    def test_drains_even_when_body_raises(self) -> None:
        ran: list[int] = []

        with pytest.raises(ValueError, match="body"), deferred_scope() as queue:
            queue.schedule(lambda: ran.append(1))
            raise ValueError("body")

        assert ran == [1]

    def test_uses_given_queue(self) -> None:
        queue = DeferredTaskQueue()

        with deferred_scope(queue) as scoped:
            assert scoped is queue
