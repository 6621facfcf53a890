r"""
Settings and defaults for microbench.

Settings are read from ``MICROBENCH_``-prefixed environment variables,
optionally loaded from a ``.env`` file:

    - MICROBENCH_BACKEND: registered backend made available to the
      default session (e.g. "statistical")
    - MICROBENCH_STOPWATCH: time the whole program when truthy
    - MICROBENCH_BUDGET: default time budget in seconds (2.0)

    from microbench.config import get_default_budget

    budget = get_default_budget()
"""

import os
from pathlib import Path

# Load .env file if it exists
try:
    from dotenv import load_dotenv

    env_file = Path(".env")
    if env_file.exists():
        load_dotenv(env_file)
except ImportError:
    pass  # python-dotenv not installed, skip

from microbench.errors import ConfigurationError

__all__ = [
    "DEFAULT_BUDGET_SECONDS",
    "ENV_PREFIX",
    "SECONDS_FORMAT",
    "get_default_backend",
    "get_default_budget",
    "get_env",
    "stopwatch_enabled",
]

ENV_PREFIX = "MICROBENCH_"

# Adaptive mode: a first call at least this long is a one-shot measurement,
# anything faster is repeated until this many seconds have elapsed.
DEFAULT_BUDGET_SECONDS = 2.0

SECONDS_FORMAT = "%.4fs"

_TRUTHY = {"1", "true", "yes", "on"}


def get_env(key: str, *, default: str | None = None) -> str | None:
    """Get environment variable with MICROBENCH_ prefix.

    Args:
        key: Variable name without prefix (e.g., "BACKEND").
        default: Default value if not set.

    Returns:
        Environment variable value or default.
    """
    return os.environ.get(f"{ENV_PREFIX}{key}", default)


def get_default_budget() -> float:
    """Default time budget for adaptive runs.

    Raises:
        ConfigurationError: If MICROBENCH_BUDGET is not a positive number.
    """
    raw = get_env("BUDGET")
    if raw is None or raw == "":
        return DEFAULT_BUDGET_SECONDS
    try:
        budget = float(raw)
    except ValueError:
        msg = f"{ENV_PREFIX}BUDGET must be a number of seconds, got '{raw}'"
        raise ConfigurationError(msg) from None
    if budget <= 0:
        msg = f"{ENV_PREFIX}BUDGET must be positive, got {budget}"
        raise ConfigurationError(msg)
    return budget


def get_default_backend() -> str | None:
    """Name of the backend the default session should make available."""
    name = get_env("BACKEND")
    if name is None or not name.strip():
        return None
    return name.strip()


def stopwatch_enabled() -> bool:
    """True if the whole-program stopwatch should install itself on import."""
    return (get_env("STOPWATCH", default="") or "").strip().lower() in _TRUTHY
