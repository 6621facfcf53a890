r"""
Shared pytest fixtures for microbench tests.
"""

import io

import pytest

from microbench.session import BenchmarkSession


class FakeClock:
    """Clock that only moves when told to; time points are nanoseconds."""

    def __init__(self) -> None:
        self.t = 0

    def now(self) -> int:
        return self.t

    def elapsed(self, start: int, end: int) -> float:
        return (end - start) / 1_000_000_000

    def advance(self, seconds: float) -> None:
        self.t += round(seconds * 1_000_000_000)

    def work(self, seconds: float):
        """Unit of work that takes ``seconds`` per call and counts its calls."""

        def unit() -> None:
            unit.calls += 1
            self.advance(seconds)

        unit.calls = 0
        return unit


class FakeBackend:
    """Minimal external backend recording what it was asked to do."""

    name = "fake"
    instances: list["FakeBackend"] = []

    def __init__(self, **options) -> None:
        self.options = options
        self.added: list[str] = []
        self.ran = False
        FakeBackend.instances.append(self)

    def add(self, name, code) -> None:
        self.added.append(name)
        code()

    def run(self) -> None:
        self.ran = True

    def report(self) -> str:
        return f"fake report for {', '.join(self.added)}"


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def stream() -> io.StringIO:
    return io.StringIO()


@pytest.fixture
def session(clock, stream) -> BenchmarkSession:
    """Session driven by the fake clock, printing to a buffer."""
    return BenchmarkSession(clock=clock, stream=stream)


@pytest.fixture
def fake_backend():
    FakeBackend.instances.clear()
    yield FakeBackend
    FakeBackend.instances.clear()


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    for key in ("MICROBENCH_BACKEND", "MICROBENCH_STOPWATCH", "MICROBENCH_BUDGET"):
        monkeypatch.delenv(key, raising=False)
