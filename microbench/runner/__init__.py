r"""
Measurement engine.

Clocks, the adaptive internal timing loop and the choice between it
and an external backend.

    from microbench.runner import AdaptiveLoopRunner

    runner = AdaptiveLoopRunner()
    for measurement in runner.run(registry, n=100):
        print(measurement.rate)
"""

from microbench.runner.loop import AdaptiveLoopRunner
from microbench.runner.selector import BackendSelector, Dispatch
from microbench.runner.timing import Clock, MonotonicClock

__all__ = [
    "AdaptiveLoopRunner",
    "BackendSelector",
    "Clock",
    "Dispatch",
    "MonotonicClock",
]
