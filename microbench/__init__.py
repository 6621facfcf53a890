r"""
microbench: Low-ceremony micro-benchmarking.

Times one or more callables and reports calls, throughput and time
per call. Runs an adaptive internal loop by default, or delegates to
a statistical backend when one is enabled.

    from microbench import bench, bench_print

    bench_print(lambda: sorted(data))                  # adaptive
    report = bench(lambda: sorted(data), 1000)         # exactly 1000 calls
    bench_print({"subs": {"a": f, "b": g}, "n": -3})   # 3 seconds each
"""

from microbench.errors import ConfigurationError, MicrobenchError
from microbench.registry import BenchOptions, WorkRegistry
from microbench.session import BenchmarkSession, bench, bench_print, get_session, install, set_session, use_backend
from microbench.types import BackendMode, Measurement, Report, RunConfig, UnitOfWork

__all__ = [
    "BackendMode",
    "BenchOptions",
    "BenchmarkSession",
    "ConfigurationError",
    "Measurement",
    "MicrobenchError",
    "Report",
    "RunConfig",
    "UnitOfWork",
    "WorkRegistry",
    "bench",
    "bench_print",
    "get_session",
    "install",
    "set_session",
    "use_backend",
]

__version__ = "0.1.0"
