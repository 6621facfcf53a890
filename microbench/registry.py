r"""
Units of work and call-form resolution.

``bench()`` accepts several call forms; ``resolve_call`` turns each of
them into one canonical ``RunConfig`` plus a ``WorkRegistry``:

    bench(func)                               # adaptive
    bench(func, 100)                          # exactly 100 calls
    bench(func, {"n": -5, "backend": True})   # full options
    bench({"subs": {"a": fa, "b": fb}, "n": -2})

    from microbench.registry import resolve_call

    config, registry = resolve_call(func, 100)
"""

from collections.abc import Callable, Iterator, Mapping
from dataclasses import dataclass, field
from typing import Any

from microbench.errors import ConfigurationError
from microbench.types import SINGLE_UNIT_NAME, BackendMode, RunConfig, UnitOfWork

__all__ = ["BenchOptions", "WorkRegistry", "resolve_call"]

_USAGE = "Usage: bench(callable, options) or bench(options)"


@dataclass
class BenchOptions:
    """Options accepted by ``bench()``.

    Attributes:
        n: Iteration count; negative means a time budget in seconds.
        subs: Named units of work, measured in insertion order.
        backend: True forces the external backend, False forbids it,
            None uses it when the session has one.
        backend_options: Keyword arguments for the backend factory.
    """

    n: int | None = None
    subs: Mapping[str, Callable[[], Any]] | None = None
    backend: bool | None = None
    backend_options: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_mapping(cls, options: Mapping[str, Any]) -> "BenchOptions":
        """Build options from a plain mapping, rejecting unknown keys."""
        known = {"n", "subs", "backend", "backend_options"}
        unknown = sorted(set(options) - known)
        if unknown:
            valid = ", ".join(sorted(known))
            msg = f"Unknown option(s): {', '.join(unknown)}. Valid options: {valid}"
            raise ConfigurationError(msg)
        return cls(
            n=options.get("n"),
            subs=options.get("subs"),
            backend=options.get("backend"),
            backend_options=options.get("backend_options") or {},
        )

    def to_config(self) -> RunConfig:
        """Canonical run configuration for these options."""
        if not isinstance(self.backend_options, Mapping):
            msg = f"backend_options must be a mapping, got {type(self.backend_options).__name__}"
            raise ConfigurationError(msg)
        return RunConfig(
            iteration_count=self.n,
            backend_mode=BackendMode.from_flag(self.backend),
            backend_options=dict(self.backend_options),
        )


class WorkRegistry:
    """Ordered mapping from unit name to callable."""

    def __init__(self, units: Mapping[str, Callable[[], Any]]) -> None:
        if not isinstance(units, Mapping):
            msg = f"subs must be a mapping of names to callables, got {type(units).__name__}"
            raise ConfigurationError(msg)
        if not units:
            msg = "Please specify one or more subs"
            raise ConfigurationError(msg)
        for name, code in units.items():
            if not callable(code):
                msg = f"Unit of work '{name}' is not callable: {code!r}"
                raise ConfigurationError(msg)
        self._units = {str(name): code for name, code in units.items()}

    @classmethod
    def single(cls, code: Callable[[], Any]) -> "WorkRegistry":
        """Registry holding one anonymous callable."""
        return cls({SINGLE_UNIT_NAME: code})

    @property
    def names(self) -> list[str]:
        return list(self._units)

    def __len__(self) -> int:
        return len(self._units)

    def __iter__(self) -> Iterator[UnitOfWork]:
        for name, code in self._units.items():
            yield UnitOfWork(name=name, code=code)


def _coerce_options(options: Any) -> BenchOptions:
    if options is None:
        return BenchOptions()
    if isinstance(options, BenchOptions):
        return options
    if isinstance(options, Mapping):
        return BenchOptions.from_mapping(options)
    if isinstance(options, int) and not isinstance(options, bool):
        return BenchOptions(n=options)
    msg = f"Options must be an int, a mapping or BenchOptions, got {type(options).__name__}"
    raise ConfigurationError(msg)


def resolve_call(target: Any, options: Any = None) -> tuple[RunConfig, WorkRegistry]:
    """Resolve a ``bench()`` call form.

    Args:
        target: A callable, or the options record for the multi-unit form.
        options: Iteration count, mapping or BenchOptions (callable form only).

    Returns:
        Tuple of (RunConfig, WorkRegistry).

    Raises:
        ConfigurationError: If the call form is invalid.
    """
    if callable(target):
        opts = _coerce_options(options)
        if opts.subs is not None:
            msg = "Pass either a callable or 'subs', not both"
            raise ConfigurationError(msg)
        return opts.to_config(), WorkRegistry.single(target)

    if isinstance(target, (Mapping, BenchOptions)):
        if options is not None:
            raise ConfigurationError(_USAGE)
        opts = _coerce_options(target)
        if opts.subs is None:
            msg = "Please specify one or more subs"
            raise ConfigurationError(msg)
        config = opts.to_config()
        return config, WorkRegistry(opts.subs)

    raise ConfigurationError(_USAGE)
