r"""
Statistical benchmarking backend.

Times each unit of work call by call and keeps sampling until the
median run time is known to a target relative precision. Outliers
(further than ``outlier_threshold`` robust standard deviations from the
median) are rejected before the estimate is formed.

    from microbench.backends import StatisticalBackend

    backend = StatisticalBackend(target_rel_precision=0.01, initial_runs=50)
    backend.add("sort", lambda: sorted(data))
    backend.run()
    print(backend.report())
"""

from __future__ import annotations

import logging
import math
import statistics
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

from microbench.backends.base import BackendRegistry
from microbench.errors import ConfigurationError
from microbench.runner.timing import Clock, MonotonicClock

__all__ = ["InstanceResult", "StatisticalBackend"]

logger = logging.getLogger(__name__)

# Scales the median absolute deviation to a normal standard deviation.
MAD_TO_SIGMA = 1.4826

# Standard error of the median relative to that of the mean, for normal data.
MEDIAN_ERROR_FACTOR = math.sqrt(math.pi / 2)


@dataclass
class InstanceResult:
    """Timings collected for one registered unit of work.

    Attributes:
        name: Unit name.
        timings: Per-call run times in seconds, outliers included.
        outliers: Number of timings rejected as outliers.
        median: Median run time of the kept timings.
        error: Uncertainty of the median.
    """

    name: str
    timings: list[float] = field(default_factory=list)
    outliers: int = 0
    median: float = 0.0
    error: float = 0.0

    @property
    def rel_error(self) -> float:
        """Relative uncertainty of the median."""
        if self.median == 0:
            return 0.0
        return self.error / self.median


@BackendRegistry.register("statistical")
class StatisticalBackend:
    """Median-with-uncertainty backend with outlier rejection.

    Args:
        target_rel_precision: Stop once error / median drops below this.
        initial_runs: Timings taken before the first estimate.
        max_iterations: Upper bound on timings per unit of work.
        outlier_threshold: Rejection distance in robust standard deviations.
        clock: Time source (defaults to a monotonic clock).
    """

    name = "statistical"

    def __init__(
        self,
        *,
        target_rel_precision: float = 0.05,
        initial_runs: int = 20,
        max_iterations: int = 10_000,
        outlier_threshold: float = 3.0,
        clock: Clock | None = None,
    ) -> None:
        if target_rel_precision <= 0:
            msg = f"target_rel_precision must be positive, got {target_rel_precision}"
            raise ConfigurationError(msg)
        if initial_runs < 2:
            msg = f"initial_runs must be at least 2, got {initial_runs}"
            raise ConfigurationError(msg)
        if max_iterations < initial_runs:
            msg = f"max_iterations ({max_iterations}) must be >= initial_runs ({initial_runs})"
            raise ConfigurationError(msg)
        if outlier_threshold <= 0:
            msg = f"outlier_threshold must be positive, got {outlier_threshold}"
            raise ConfigurationError(msg)
        self._target = target_rel_precision
        self._initial_runs = initial_runs
        self._max_iterations = max_iterations
        self._outlier_threshold = outlier_threshold
        self._clock = clock or MonotonicClock()
        self._instances: dict[str, Callable[[], Any]] = {}
        self._results: list[InstanceResult] = []

    @property
    def results(self) -> list[InstanceResult]:
        """Results of the last run, in registration order."""
        return list(self._results)

    def add(self, name: str, code: Callable[[], Any]) -> None:
        """Register a named unit of work."""
        self._instances[name] = code

    def run(self) -> None:
        """Measure every registered unit of work."""
        self._results = []
        for name, code in self._instances.items():
            result = InstanceResult(name=name)
            self._sample(code, result, self._initial_runs)
            self._estimate(result)

            batch = max(1, self._initial_runs // 2)
            while result.rel_error > self._target and len(result.timings) < self._max_iterations:
                self._sample(code, result, min(batch, self._max_iterations - len(result.timings)))
                self._estimate(result)

            logger.debug(
                "%s: %d timings, median %.3es, rel. error %.2f%%",
                name,
                len(result.timings),
                result.median,
                result.rel_error * 100,
            )
            self._results.append(result)

    def report(self) -> str:
        """Human-readable report of the last run."""
        lines: list[str] = []
        multi = len(self._results) > 1
        for r in self._results:
            prefix = f"{r.name}: " if multi else ""
            lines.append(f"{prefix}Ran {len(r.timings)} iterations ({r.outliers} outliers).")
            lines.append(
                f"{prefix}Rounded run time per iteration: "
                f"{r.median:.3e} +/- {r.error:.1e} ({r.rel_error * 100:.1f}%)"
            )
        return "\n".join(lines)

    def _sample(self, code: Callable[[], Any], result: InstanceResult, count: int) -> None:
        clock = self._clock
        for _ in range(count):
            start = clock.now()
            code()
            result.timings.append(clock.elapsed(start, clock.now()))

    def _estimate(self, result: InstanceResult) -> None:
        timings = result.timings
        median = statistics.median(timings)
        sigma = MAD_TO_SIGMA * statistics.median(abs(t - median) for t in timings)

        if sigma == 0:
            # more than half the timings equal the median
            kept = [t for t in timings if t == median]
        else:
            limit = self._outlier_threshold * sigma
            kept = [t for t in timings if abs(t - median) <= limit]

        result.outliers = len(timings) - len(kept)
        result.median = statistics.median(kept)
        if len(kept) < 2:
            result.error = 0.0
            return
        kept_sigma = MAD_TO_SIGMA * statistics.median(abs(t - result.median) for t in kept)
        result.error = MEDIAN_ERROR_FACTOR * kept_sigma / math.sqrt(len(kept) - 1)
