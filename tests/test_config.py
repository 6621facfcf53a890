r"""
Tests for microbench.config module.
"""

import pytest

from microbench.config import (
    DEFAULT_BUDGET_SECONDS,
    ENV_PREFIX,
    SECONDS_FORMAT,
    get_default_backend,
    get_default_budget,
    get_env,
    stopwatch_enabled,
)
from microbench.errors import ConfigurationError


class TestConstants:
    def test_defaults(self):
        assert DEFAULT_BUDGET_SECONDS == 2.0
        assert SECONDS_FORMAT % 1.23456 == "1.2346s"

    def test_env_prefix(self):
        assert ENV_PREFIX == "MICROBENCH_"


class TestGetEnv:
    def test_get_env_not_set(self):
        assert get_env("TEST_NOT_SET") is None

    def test_get_env_with_default(self):
        assert get_env("TEST_NOT_SET", default="default_value") == "default_value"

    def test_get_env_set(self, monkeypatch):
        monkeypatch.setenv(f"{ENV_PREFIX}TEST_VAR", "test_value")
        assert get_env("TEST_VAR") == "test_value"


class TestDefaultBudget:
    def test_unset(self):
        assert get_default_budget() == DEFAULT_BUDGET_SECONDS

    def test_empty(self, monkeypatch):
        monkeypatch.setenv("MICROBENCH_BUDGET", "")
        assert get_default_budget() == DEFAULT_BUDGET_SECONDS

    def test_set(self, monkeypatch):
        monkeypatch.setenv("MICROBENCH_BUDGET", "0.25")
        assert get_default_budget() == 0.25

    @pytest.mark.parametrize("raw", ["abc", "0", "-1"])
    def test_invalid(self, monkeypatch, raw):
        monkeypatch.setenv("MICROBENCH_BUDGET", raw)
        with pytest.raises(ConfigurationError, match="BUDGET"):
            get_default_budget()


class TestDefaultBackend:
    def test_unset(self):
        assert get_default_backend() is None

    def test_blank(self, monkeypatch):
        monkeypatch.setenv("MICROBENCH_BACKEND", "  ")
        assert get_default_backend() is None

    def test_set(self, monkeypatch):
        monkeypatch.setenv("MICROBENCH_BACKEND", " statistical ")
        assert get_default_backend() == "statistical"


class TestStopwatchEnabled:
    def test_unset(self):
        assert stopwatch_enabled() is False

    @pytest.mark.parametrize("raw", ["1", "true", "YES", "on"])
    def test_truthy(self, monkeypatch, raw):
        monkeypatch.setenv("MICROBENCH_STOPWATCH", raw)
        assert stopwatch_enabled() is True

    def test_falsy(self, monkeypatch):
        monkeypatch.setenv("MICROBENCH_STOPWATCH", "0")
        assert stopwatch_enabled() is False
