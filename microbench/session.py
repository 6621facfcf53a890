r"""
Benchmark sessions and the ``bench()`` entry points.

A session owns the process stopwatch (its start time and whether any
benchmark ran) and the optional external backend. A default session
is created when this module is imported.

    from microbench import bench, bench_print

    report = bench(lambda: sorted(data), 1000)
    bench_print({"subs": {"sorted": f1, "heapq": f2}, "n": -2})

    # time the whole program unless bench() is called
    import microbench
    microbench.install()
"""

import atexit
import logging
from collections.abc import Callable
from typing import Any, TextIO

from microbench.backends import BackendRegistry
from microbench.config import SECONDS_FORMAT, get_default_backend, get_default_budget, stopwatch_enabled
from microbench.errors import ConfigurationError
from microbench.protocols import BackendFactory, ExternalBackend
from microbench.registry import resolve_call
from microbench.reporting import ReportFormatter
from microbench.runner import AdaptiveLoopRunner, BackendSelector, Clock, Dispatch, MonotonicClock
from microbench.types import Measurement, Report, RunConfig

__all__ = [
    "BenchmarkSession",
    "bench",
    "bench_print",
    "get_session",
    "install",
    "set_session",
    "use_backend",
]

logger = logging.getLogger(__name__)


class BenchmarkSession:
    """Benchmarking state for one program run.

    Args:
        clock: Time source shared by the stopwatch and the internal loop.
        backend: Factory for an external backend; its presence makes the
            external backend available to AUTO-mode invocations.
        default_budget: Adaptive-mode budget in seconds (defaults to the
            MICROBENCH_BUDGET setting, 2.0).
        stream: Where printed reports go (defaults to stdout).
    """

    def __init__(
        self,
        *,
        clock: Clock | None = None,
        backend: BackendFactory | None = None,
        default_budget: float | None = None,
        stream: TextIO | None = None,
    ) -> None:
        self._clock = clock or MonotonicClock()
        self._start = self._clock.now()
        self._backend = backend
        self._default_budget = default_budget
        self._stream = stream
        self._invoked = False
        self._finished = False
        self._installed = False
        self.last_report: Report | None = None

    @property
    def backend(self) -> BackendFactory | None:
        """Factory of the available external backend, if any."""
        return self._backend

    @property
    def invoked(self) -> bool:
        """True once a benchmarking invocation has started timing."""
        return self._invoked

    def use_backend(self, backend: str | BackendFactory | None) -> None:
        """Make an external backend available, or remove it with None.

        Args:
            backend: Registered backend name or a factory.

        Raises:
            ConfigurationError: If ``backend`` names no registered backend.
        """
        if isinstance(backend, str):
            backend = BackendRegistry.resolve(backend)
        self._backend = backend
        logger.info("External backend %s", "disabled" if backend is None else "enabled")

    def elapsed(self) -> float:
        """Seconds since the session started."""
        return self._clock.elapsed(self._start, self._clock.now())

    def run(self, target: Any, options: Any = None) -> Report:
        """Benchmark and return the report."""
        return self._execute(target, options, emit=None)

    def run_and_print(self, target: Any, options: Any = None) -> None:
        """Benchmark and print the report.

        Internal-loop lines are printed as soon as each unit is measured.
        """
        self._execute(target, options, emit=self._print)

    def finish(self, *, report: bool = True) -> None:
        """Print the whole-program time unless a benchmark ran. Runs once.

        With ``report=False`` the session is closed silently, so an exit
        hook installed earlier prints nothing.
        """
        if self._finished:
            return
        self._finished = True
        if report and not self._invoked:
            self._print(SECONDS_FORMAT % self.elapsed())

    def install(self) -> "BenchmarkSession":
        """Register ``finish`` to run at interpreter exit."""
        if not self._installed:
            atexit.register(self.finish)
            self._installed = True
        return self

    def _print(self, text: str) -> None:
        print(text, file=self._stream)

    def _execute(self, target: Any, options: Any, *, emit: Callable[[str], None] | None) -> Report:
        config, registry = resolve_call(target, options)
        dispatch = BackendSelector(available=self._backend is not None).select(config.backend_mode)
        logger.debug("Dispatching %s to %s path", ", ".join(registry.names), dispatch.value)

        if dispatch is Dispatch.EXTERNAL:
            backend = self._create_backend(config)
            self._invoked = True
            for unit in registry:
                backend.add(unit.name, unit.code)
            backend.run()
            report = ReportFormatter.passthrough(backend.report(), backend=backend.name)
            self.last_report = report
            if emit is not None and report.lines:
                emit(str(report))
            return report

        budget = self._default_budget if self._default_budget is not None else get_default_budget()
        runner = AdaptiveLoopRunner(clock=self._clock, default_budget=budget)
        formatter = ReportFormatter(multi=len(registry) > 1)
        measurements: list[Measurement] = []
        self._invoked = True
        try:
            for m in runner.run(registry, config.iteration_count):
                measurements.append(m)
                if emit is not None:
                    emit(formatter.format_line(m))
        finally:
            self.last_report = formatter.build(measurements)
        return self.last_report

    def _create_backend(self, config: RunConfig) -> ExternalBackend:
        assert self._backend is not None
        try:
            return self._backend(**config.backend_options)
        except TypeError as e:
            msg = f"Invalid backend_options {config.backend_options!r}: {e}"
            raise ConfigurationError(msg) from e


def _create_default_session() -> BenchmarkSession:
    session = BenchmarkSession()
    name = get_default_backend()
    if name:
        factory = BackendRegistry.get(name)
        if factory is None:
            logger.warning("Ignoring unknown backend '%s'. Registered: %s", name, ", ".join(BackendRegistry.list()))
        else:
            session.use_backend(factory)
    if stopwatch_enabled():
        session.install()
    return session


_session = _create_default_session()


def get_session() -> BenchmarkSession:
    """Return the default session."""
    return _session


def set_session(session: BenchmarkSession) -> BenchmarkSession:
    """Replace the default session, returning the previous one."""
    global _session
    previous, _session = _session, session
    return previous


def install() -> BenchmarkSession:
    """Time the whole program with the default session."""
    return _session.install()


def use_backend(backend: str | BackendFactory | None) -> None:
    """Make an external backend available to the default session."""
    _session.use_backend(backend)


def bench(target: Any, options: Any = None, *, session: BenchmarkSession | None = None) -> Report:
    """Benchmark one or more units of work and return the report.

    Args:
        target: A zero-argument callable, or an options mapping with ``subs``.
        options: Iteration count or options mapping (callable form only).
        session: Session to use instead of the default one.

    Returns:
        Report with one line per unit, or the external backend's report.

    Raises:
        ConfigurationError: If the call form or options are invalid.
    """
    return (session or _session).run(target, options)


def bench_print(target: Any, options: Any = None, *, session: BenchmarkSession | None = None) -> None:
    """Benchmark one or more units of work and print the report."""
    (session or _session).run_and_print(target, options)
