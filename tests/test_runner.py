r"""
Tests for microbench.runner module.
"""

import pytest

from microbench.errors import ConfigurationError
from microbench.registry import WorkRegistry
from microbench.runner import AdaptiveLoopRunner, BackendSelector, Clock, Dispatch, MonotonicClock
from microbench.types import BackendMode, UnitOfWork


class TestMonotonicClock:
    def test_satisfies_clock_protocol(self):
        assert isinstance(MonotonicClock(), Clock)

    def test_elapsed_non_negative(self):
        clock = MonotonicClock()
        start = clock.now()
        sum(range(1000))
        assert clock.elapsed(start, clock.now()) >= 0

    def test_elapsed_converts_nanoseconds(self):
        assert MonotonicClock().elapsed(0, 1_500_000_000) == 1.5


class TestFixedCount:
    @pytest.mark.parametrize("n", [1, 5, 100])
    def test_exact_call_count(self, clock, n):
        work = clock.work(0.001)
        m = AdaptiveLoopRunner(clock=clock).measure(UnitOfWork("w", work), n)

        assert m.call_count == n
        assert work.calls == n
        assert m.elapsed_seconds == pytest.approx(n * 0.001)

    def test_zero_calls(self, clock):
        work = clock.work(1.0)
        m = AdaptiveLoopRunner(clock=clock).measure(UnitOfWork("w", work), 0)

        assert m.call_count == 0
        assert work.calls == 0
        assert m.per_call == 0.0

    def test_noop_unit_with_real_clock(self):
        m = AdaptiveLoopRunner().measure(UnitOfWork("noop", lambda: None), 50)
        assert m.call_count == 50
        assert m.elapsed_seconds >= 0


class TestTimeBudget:
    def test_runs_until_budget_reached(self, clock):
        work = clock.work(0.3)
        m = AdaptiveLoopRunner(clock=clock).measure(UnitOfWork("w", work), -1)

        assert m.call_count == 4
        assert m.elapsed_seconds == pytest.approx(1.2)
        assert m.elapsed_seconds >= 1.0

    def test_at_least_one_call(self, clock):
        work = clock.work(5.0)
        m = AdaptiveLoopRunner(clock=clock).measure(UnitOfWork("w", work), -1)

        assert m.call_count == 1
        assert m.elapsed_seconds == pytest.approx(5.0)

    def test_stops_exactly_at_budget(self, clock):
        work = clock.work(0.5)
        m = AdaptiveLoopRunner(clock=clock).measure(UnitOfWork("w", work), -2)

        assert m.call_count == 4
        assert m.elapsed_seconds == pytest.approx(2.0)


class TestAdaptive:
    def test_slow_first_call_measured_once(self, clock):
        work = clock.work(2.5)
        m = AdaptiveLoopRunner(clock=clock).measure(UnitOfWork("w", work))

        assert m.call_count == 1
        assert work.calls == 1
        assert m.elapsed_seconds == pytest.approx(2.5)

    def test_first_call_at_threshold_measured_once(self, clock):
        work = clock.work(2.0)
        m = AdaptiveLoopRunner(clock=clock).measure(UnitOfWork("w", work))

        assert m.call_count == 1

    def test_fast_first_call_switches_to_budget(self, clock):
        work = clock.work(0.5)
        m = AdaptiveLoopRunner(clock=clock).measure(UnitOfWork("w", work))

        # budget is cumulative, first call included
        assert m.call_count == 4
        assert m.elapsed_seconds == pytest.approx(2.0)

    def test_fast_work_makes_additional_call(self, clock):
        work = clock.work(1.99)
        m = AdaptiveLoopRunner(clock=clock).measure(UnitOfWork("w", work))

        assert m.call_count == 2

    def test_custom_default_budget(self, clock):
        work = clock.work(0.1)
        runner = AdaptiveLoopRunner(clock=clock, default_budget=0.5)
        m = runner.measure(UnitOfWork("w", work))

        assert runner.default_budget == 0.5
        assert m.call_count == 5


class TestFailures:
    def test_unit_error_propagates(self, clock):
        def boom():
            raise KeyError("boom")

        with pytest.raises(KeyError, match="boom"):
            AdaptiveLoopRunner(clock=clock).measure(UnitOfWork("w", boom), 3)

    def test_no_retry_after_error(self, clock):
        calls = []

        def flaky():
            calls.append(1)
            raise RuntimeError("flaky")

        with pytest.raises(RuntimeError):
            AdaptiveLoopRunner(clock=clock).measure(UnitOfWork("w", flaky), -10)
        assert len(calls) == 1


class TestRunRegistry:
    def test_measures_in_registry_order(self, clock):
        registry = WorkRegistry({"b": clock.work(0.1), "a": clock.work(0.2)})
        results = list(AdaptiveLoopRunner(clock=clock).run(registry, 2))

        assert [m.unit_name for m in results] == ["b", "a"]
        assert [m.call_count for m in results] == [2, 2]
        assert results[1].elapsed_seconds == pytest.approx(0.4)


class TestBackendSelector:
    @pytest.mark.parametrize(
        ("mode", "available", "expected"),
        [
            (BackendMode.FORCE_EXTERNAL, True, Dispatch.EXTERNAL),
            (BackendMode.FORCE_INTERNAL, True, Dispatch.INTERNAL),
            (BackendMode.FORCE_INTERNAL, False, Dispatch.INTERNAL),
            (BackendMode.AUTO, True, Dispatch.EXTERNAL),
            (BackendMode.AUTO, False, Dispatch.INTERNAL),
        ],
    )
    def test_decision_table(self, mode, available, expected):
        assert BackendSelector(available=available).select(mode) is expected

    def test_forced_external_unavailable(self):
        with pytest.raises(ConfigurationError, match="External backend"):
            BackendSelector(available=False).select(BackendMode.FORCE_EXTERNAL)
