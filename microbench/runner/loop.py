r"""
Internal adaptive timing loop.

    from microbench.runner.loop import AdaptiveLoopRunner
    from microbench.types import UnitOfWork

    runner = AdaptiveLoopRunner()
    m = runner.measure(UnitOfWork("sort", lambda: sorted(data)), -1)
    print(m.call_count, m.elapsed_seconds)
"""

import logging
from collections.abc import Iterator

from microbench.config import DEFAULT_BUDGET_SECONDS
from microbench.registry import WorkRegistry
from microbench.runner.timing import Clock, MonotonicClock
from microbench.types import Measurement, UnitOfWork

__all__ = ["AdaptiveLoopRunner"]

logger = logging.getLogger(__name__)


class AdaptiveLoopRunner:
    """Runs a unit of work repeatedly and accumulates elapsed time.

    The iteration count ``n`` follows one rule set:

    - ``None``: call once; if that took at least ``default_budget``
      seconds the measurement is done, otherwise keep calling until
      ``default_budget`` seconds have elapsed in total.
    - ``n >= 0``: call exactly ``n`` times.
    - ``n < 0``: call until at least ``-n`` seconds have elapsed,
      checking after every call (so at least one call is made).

    Exceptions raised by the unit propagate unchanged.
    """

    def __init__(
        self,
        *,
        clock: Clock | None = None,
        default_budget: float = DEFAULT_BUDGET_SECONDS,
    ) -> None:
        self._clock = clock or MonotonicClock()
        self._default_budget = default_budget

    @property
    def default_budget(self) -> float:
        """Budget in seconds used when no iteration count is given."""
        return self._default_budget

    def measure(self, unit: UnitOfWork, n: int | None = None) -> Measurement:
        """Measure one unit of work.

        Args:
            unit: Unit of work to call.
            n: Iteration count (see class docstring).

        Returns:
            Measurement with the calls made and cumulative elapsed time.
        """
        clock = self._clock
        code = unit.code
        calls = 0
        start = clock.now()

        if n is None:
            code()
            calls = 1
            first = clock.elapsed(start, clock.now())
            if first >= self._default_budget:
                logger.debug("%s: first call took %.4fs, measuring once", unit.name, first)
                return Measurement(unit.name, calls, first)
            logger.debug(
                "%s: first call took %.4fs, running for %.1fs",
                unit.name,
                first,
                self._default_budget,
            )
            budget = self._default_budget
        elif n >= 0:
            for _ in range(n):
                code()
            calls = n
            return Measurement(unit.name, calls, clock.elapsed(start, clock.now()))
        else:
            budget = float(-n)

        while True:
            code()
            calls += 1
            elapsed = clock.elapsed(start, clock.now())
            if elapsed >= budget:
                return Measurement(unit.name, calls, elapsed)

    def run(self, registry: WorkRegistry, n: int | None = None) -> Iterator[Measurement]:
        """Measure every unit in registry order, yielding as each completes."""
        for unit in registry:
            yield self.measure(unit, n)
