r"""
Choice between the internal loop and an external backend.

    from microbench.runner.selector import BackendSelector, Dispatch

    selector = BackendSelector(available=session.backend is not None)
    if selector.select(config.backend_mode) is Dispatch.EXTERNAL:
        ...
"""

from enum import Enum

from microbench.errors import ConfigurationError
from microbench.types import BackendMode

__all__ = ["BackendSelector", "Dispatch"]


class Dispatch(Enum):
    """Engine chosen for an invocation."""

    INTERNAL = "internal"
    EXTERNAL = "external"


class BackendSelector:
    """Decides, once per invocation, which engine runs the measurement.

    The external backend is used when forced, or in AUTO mode when one
    is available. Forcing it while none is available is an error.
    """

    def __init__(self, *, available: bool) -> None:
        self._available = available

    def select(self, mode: BackendMode) -> Dispatch:
        """Select the dispatch path for ``mode``.

        Raises:
            ConfigurationError: If the external backend is forced but unavailable.
        """
        if mode is BackendMode.FORCE_INTERNAL:
            return Dispatch.INTERNAL
        if mode is BackendMode.FORCE_EXTERNAL:
            if not self._available:
                msg = "External backend requested but none is available; call use_backend() first"
                raise ConfigurationError(msg)
            return Dispatch.EXTERNAL
        return Dispatch.EXTERNAL if self._available else Dispatch.INTERNAL
