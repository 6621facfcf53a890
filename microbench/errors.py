r"""
Exceptions raised by microbench.

Errors raised by a unit of work are never wrapped: they reach the
caller exactly as the unit raised them.

    from microbench.errors import ConfigurationError
"""

__all__ = ["MicrobenchError", "ConfigurationError"]


class MicrobenchError(Exception):
    """Base class for microbench errors."""


class ConfigurationError(MicrobenchError, ValueError):
    """Invalid call form or options, detected before any timing begins."""
