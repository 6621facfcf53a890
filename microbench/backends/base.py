r"""
Registry of external backends.

    from microbench.backends.base import BackendRegistry

    @BackendRegistry.register("mybackend")
    class MyBackend:
        ...

    backend = BackendRegistry.create("mybackend", initial_runs=50)
"""

from typing import Any

from microbench.errors import ConfigurationError
from microbench.protocols import BackendFactory, ExternalBackend

__all__ = ["BackendRegistry"]


class BackendRegistry:
    """Registry for external backend factories."""

    _backends: dict[str, BackendFactory] = {}

    @classmethod
    def register(cls, name: str) -> Any:
        """Decorator to register a backend class."""

        def decorator(backend_cls: BackendFactory) -> BackendFactory:
            cls._backends[name] = backend_cls
            return backend_cls

        return decorator

    @classmethod
    def get(cls, name: str) -> BackendFactory | None:
        """Get backend factory by name."""
        return cls._backends.get(name)

    @classmethod
    def list(cls) -> list[str]:
        """List registered backend names."""
        return list(cls._backends.keys())

    @classmethod
    def resolve(cls, name: str) -> BackendFactory:
        """Get backend factory by name, failing if it is unknown.

        Raises:
            ConfigurationError: If no backend is registered under ``name``.
        """
        factory = cls.get(name)
        if factory is None:
            valid = ", ".join(cls.list()) or "none"
            msg = f"Unknown backend '{name}'. Registered: {valid}"
            raise ConfigurationError(msg)
        return factory

    @classmethod
    def create(cls, name: str, **options: Any) -> ExternalBackend:
        """Create backend instance by name."""
        return cls.resolve(name)(**options)
