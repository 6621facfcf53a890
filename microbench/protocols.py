r"""
Protocol definitions for external benchmarking backends.

An external backend is a black box: units of work are registered by
name, measured with ``run()``, and summarised by ``report()``.

    from microbench.protocols import ExternalBackend

    class MyBackend:
        def add(self, name, code): ...
        def run(self): ...
        def report(self) -> str: ...
"""

from collections.abc import Callable
from typing import Any, Protocol, runtime_checkable

__all__ = ["BackendFactory", "ExternalBackend"]


@runtime_checkable
class ExternalBackend(Protocol):
    """Protocol for statistically rigorous benchmarking engines."""

    @property
    def name(self) -> str:
        """Backend name used in reports."""
        ...

    def add(self, name: str, code: Callable[[], Any]) -> None:
        """Register a named unit of work."""
        ...

    def run(self) -> None:
        """Measure every registered unit of work."""
        ...

    def report(self) -> str:
        """Human-readable report of the last run."""
        ...


# Called with the invocation's backend_options as keyword arguments.
BackendFactory = Callable[..., ExternalBackend]
