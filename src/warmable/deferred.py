"""Deferred task runners.

A Warmable never blocks a reader on a background refresh: it hands the
refresh to a ``DeferredRunner`` and returns. The host application decides
when deferred work runs, typically by draining a :class:`DeferredTaskQueue`
once the response has been produced::

    with deferred_scope() as queue:
        report = MonthlyReport.make().with_runner(queue).get(default=[])
        send(report)
    # queued refreshes run here
"""

from __future__ import annotations

import logging
import threading
from collections import deque
from collections.abc import Callable, Iterator
from contextlib import contextmanager

logger = logging.getLogger(__name__)

__all__ = [
    "DeferredTaskQueue",
    "ImmediateRunner",
    "deferred_scope",
]


def _run_task(task: Callable[[], object]) -> bool:
    """Run a task, logging and swallowing its failure. Returns True on success."""
    try:
        task()
    except Exception:
        logger.warning("Deferred task %r failed", task, exc_info=True)
        return False
    return True


class DeferredTaskQueue:
    """FIFO queue of tasks run when the owner calls :meth:`drain`.

    Implements the ``DeferredRunner`` protocol. Scheduling is thread-safe;
    tasks scheduled while a drain is in progress run in that same drain.
    """

    __slots__ = ("_lock", "_tasks")

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._tasks: deque[Callable[[], object]] = deque()

    def schedule(self, task: Callable[[], object]) -> None:
        with self._lock:
            self._tasks.append(task)

    def drain(self) -> int:
        """Run every pending task in order and return how many ran.

        A failing task is logged and does not stop the remaining ones.
        """
        count = 0
        while True:
            with self._lock:
                if not self._tasks:
                    return count
                task = self._tasks.popleft()
            _run_task(task)
            count += 1

    def clear(self) -> None:
        """Discard pending tasks without running them."""
        with self._lock:
            self._tasks.clear()

    @property
    def pending(self) -> int:
        """Number of tasks waiting to run."""
        with self._lock:
            return len(self._tasks)

    def __len__(self) -> int:
        return self.pending

    def __repr__(self) -> str:
        return f"DeferredTaskQueue(pending={self.pending})"


class ImmediateRunner:
    """Runs each task as soon as it is scheduled.

    Implements the ``DeferredRunner`` protocol. Failures are logged and
    swallowed exactly as a deferred run would, which makes this handy for
    scripts and tests that want refreshes to happen inline.
    """

    __slots__ = ()

    def schedule(self, task: Callable[[], object]) -> None:
        _run_task(task)

    def __repr__(self) -> str:
        return "ImmediateRunner()"


@contextmanager
def deferred_scope(queue: DeferredTaskQueue | None = None) -> Iterator[DeferredTaskQueue]:
    """Yield a queue and drain it when the block exits, even on error."""
    queue = queue if queue is not None else DeferredTaskQueue()
    try:
        yield queue
    finally:
        ran = queue.drain()
        if ran:
            logger.debug("Drained %d deferred task(s)", ran)
