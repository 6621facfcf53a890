r"""
Clocks for timing units of work.

    from microbench.runner.timing import MonotonicClock

    clock = MonotonicClock()
    start = clock.now()
    do_something()
    print(clock.elapsed(start, clock.now()))
"""

import time
from typing import Protocol, runtime_checkable

__all__ = ["Clock", "MonotonicClock"]


@runtime_checkable
class Clock(Protocol):
    """Source of time points."""

    def now(self) -> int:
        """Current time point."""
        ...

    def elapsed(self, start: int, end: int) -> float:
        """Seconds between two time points."""
        ...


class MonotonicClock:
    """Clock backed by ``time.perf_counter_ns``.

    Immune to system clock adjustments; time points are nanoseconds.
    """

    def now(self) -> int:
        return time.perf_counter_ns()

    def elapsed(self, start: int, end: int) -> float:
        return (end - start) / 1_000_000_000
