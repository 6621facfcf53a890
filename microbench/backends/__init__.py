r"""
External benchmarking backends.

Each backend implements the ExternalBackend protocol and registers
itself with BackendRegistry under a short name.

    from microbench.backends import BackendRegistry

    backend = BackendRegistry.create("statistical", initial_runs=50)
"""

from microbench.backends.base import BackendRegistry
from microbench.backends.statistical import InstanceResult, StatisticalBackend

__all__ = [
    "BackendRegistry",
    "InstanceResult",
    "StatisticalBackend",
]
