"""Example: caching an expensive report. Run with: python examples/report_cache.py

Shows the three read paths of a Warmable:

* a cold read computes synchronously,
* a read with a default returns immediately and warms the cache afterwards,
* a stale read serves the old value and refreshes in the background.

A FrozenClock stands in for wall-clock time so the example runs instantly.
"""

from __future__ import annotations

import logging
from datetime import UTC, datetime

from warmable import (
    DeferredTaskQueue,
    FrozenClock,
    ImmediateRunner,
    InMemoryCacheBackend,
    Warmable,
    deferred_scope,
)

logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")

clock = FrozenClock(datetime(2024, 1, 1, tzinfo=UTC))
backend = InMemoryCacheBackend(clock=clock)
builds = 0


class SalesReport(Warmable):
    """Aggregates sales for a region; pretend this takes seconds."""

    def cache(self) -> InMemoryCacheBackend:
        return backend

    def deferred(self) -> ImmediateRunner:
        return ImmediateRunner()

    def clock(self) -> FrozenClock:
        return clock

    def ttl(self) -> int:
        return 60

    def grace_period(self) -> int:
        return 300

    def warmable(self, region: str) -> dict[str, object]:
        global builds
        builds += 1
        return {"region": region, "total": 1000 + builds, "built_at": clock.now().isoformat()}


def main() -> None:
    # Cold read: computed inline.
    with deferred_scope() as queue:
        print("cold:", SalesReport.make().with_runner(queue).with_arguments("emea").get())

    # Cold read with a default: caller gets the placeholder, cache warms after.
    with deferred_scope() as queue:
        report = SalesReport.make().with_runner(queue).with_arguments("apac").get({"total": None})
        print("placeholder:", report)
    print("apac cached:", not SalesReport.with_arguments("apac").missing())

    # Past the ttl but inside the grace period: stale value now, refresh later.
    clock.advance(90)
    queue = DeferredTaskQueue()
    print("stale:", SalesReport.make().with_runner(queue).with_arguments("emea").get())
    queue.drain()
    print("refreshed:", SalesReport.with_arguments("emea").get())
    print("builds:", builds)


if __name__ == "__main__":
    main()
