r"""
Core types for microbench.

    from microbench.types import Measurement, Report

    m = Measurement(unit_name="CODE", call_count=10, elapsed_seconds=0.5)
    print(f"{m.rate:.0f}/s, {m.per_call:.4f}s/call")
"""

from collections.abc import Callable
from dataclasses import dataclass, field
from enum import IntEnum, auto
from typing import Any

from microbench.errors import ConfigurationError

__all__ = [
    "SINGLE_UNIT_NAME",
    "BackendMode",
    "UnitOfWork",
    "RunConfig",
    "Measurement",
    "Report",
]

# Registry key for a single anonymous callable; never shown in reports.
SINGLE_UNIT_NAME = "CODE"


class BackendMode(IntEnum):
    """Which engine measures an invocation."""

    AUTO = auto()
    FORCE_INTERNAL = auto()
    FORCE_EXTERNAL = auto()

    @classmethod
    def from_flag(cls, flag: bool | None) -> "BackendMode":
        """Map the tri-state ``backend`` option to a mode.

        Args:
            flag: True forces the external backend, False forces the
                internal loop, None lets the session decide.

        Returns:
            The matching BackendMode.

        Raises:
            ConfigurationError: If flag is not True, False or None.
        """
        if flag is None:
            return cls.AUTO
        if flag is True:
            return cls.FORCE_EXTERNAL
        if flag is False:
            return cls.FORCE_INTERNAL
        msg = f"backend must be True, False or None, got {flag!r}"
        raise ConfigurationError(msg)


@dataclass(frozen=True, slots=True)
class UnitOfWork:
    """A named, zero-argument callable whose execution time is measured."""

    name: str
    code: Callable[[], Any]


@dataclass(frozen=True, slots=True)
class RunConfig:
    """Canonical configuration of one benchmarking invocation.

    Attributes:
        iteration_count: Exact repeat count when >= 0, time budget in
            seconds (magnitude) when negative, adaptive when None.
        backend_mode: Engine selection policy.
        backend_options: Keyword arguments for the external backend factory.
    """

    iteration_count: int | None = None
    backend_mode: BackendMode = BackendMode.AUTO
    backend_options: dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        n = self.iteration_count
        if n is not None and (isinstance(n, bool) or not isinstance(n, int)):
            msg = f"n must be an integer, got {n!r}"
            raise ConfigurationError(msg)


@dataclass(frozen=True, slots=True)
class Measurement:
    """Raw result of timing one unit of work.

    Attributes:
        unit_name: Name of the measured unit.
        call_count: Number of calls actually made.
        elapsed_seconds: Cumulative time from the start of measurement
            to the end of the last call.
    """

    unit_name: str
    call_count: int
    elapsed_seconds: float

    @property
    def rate(self) -> float:
        """Calls per second."""
        if self.elapsed_seconds == 0:
            return 0.0
        return self.call_count / self.elapsed_seconds

    @property
    def per_call(self) -> float:
        """Seconds per call, 0 when no call was made."""
        if self.call_count == 0:
            return 0.0
        return self.elapsed_seconds / self.call_count


@dataclass(frozen=True, slots=True)
class Report:
    """Rendered summary of one benchmarking invocation.

    ``lines`` holds one line per measured unit on the internal path, or
    the external backend's report text as a single entry.
    """

    lines: tuple[str, ...] = ()
    measurements: tuple[Measurement, ...] = ()
    backend: str | None = None

    def __str__(self) -> str:
        return "\n".join(self.lines)

    def to_dict(self) -> dict[str, Any]:
        """Convert to a JSON-serialisable dictionary."""
        return {
            "backend": self.backend or "internal",
            "measurements": [
                {
                    "name": m.unit_name,
                    "calls": m.call_count,
                    "elapsed_seconds": m.elapsed_seconds,
                    "rate": m.rate,
                    "per_call_seconds": m.per_call,
                }
                for m in self.measurements
            ],
            "report": str(self),
        }
