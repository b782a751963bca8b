"""Protocol definition for deferred task runners."""

from __future__ import annotations

from collections.abc import Callable
from typing import Protocol, runtime_checkable


@runtime_checkable
class DeferredRunner(Protocol):
    """Schedules work to run after the current unit of work finishes.

    Scheduling is fire-and-forget: the caller never observes the task's
    outcome, tasks cannot be cancelled, and nothing guarantees they run
    if the process exits first.
    """

    def schedule(self, task: Callable[[], object]) -> None:
        """Queue a zero-argument task for later execution.

        Parameters:
            task: The callable to run. Its return value is discarded.
        """
        ...
