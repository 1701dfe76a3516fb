"""Typed tests for the settings loader.

These tests verify three guarantees:
1) `load_settings()` yields a cached `Settings` instance.
2) Environment variables override defaults after clearing the loader cache.
3) `get_logger()` respects the configured LOG_LEVEL when constructing loggers.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from pathlib import Path
from typing import Any

import pytest

from debugbar.core.settings import (
    DEFAULT_COLLECTORS,
    Settings,
    get_logger,
    load_settings,
)


@pytest.fixture(autouse=True)  # type: ignore[misc]
def fresh_settings() -> Iterator[None]:
    """Rebuild cached settings around each test so env tweaks do not leak."""
    load_settings.cache_clear()
    yield
    load_settings.cache_clear()


def test_load_settings_is_cached() -> None:
    """`load_settings()` builds one typed `Settings` and reuses it."""
    s = load_settings()
    assert isinstance(s, Settings)
    assert load_settings() is s


def test_defaults() -> None:
    s = Settings(_env_file=None)
    assert s.enabled is True
    assert s.store_backend == "file"
    assert s.store_dir == Path("writable") / "debugbar"
    assert s.collectors == list(DEFAULT_COLLECTORS)
    assert s.inject is True


def test_env_overrides_with_cache_clear(monkeypatch: Any) -> None:
    """Changing env vars should take effect after `load_settings.cache_clear()`."""
    monkeypatch.setenv("DEBUGBAR_ENV", "prod")
    monkeypatch.setenv("LOG_LEVEL", "DEBUG")
    monkeypatch.setenv("DEBUGBAR_STORE", "memory")
    monkeypatch.setenv("DEBUGBAR_COLLECTORS", '["timers", "logs"]')
    monkeypatch.setenv("DEBUGBAR_ENABLED", "false")

    load_settings.cache_clear()
    s = load_settings()

    assert s.environment == "prod"
    assert s.is_prod
    assert s.log_level == "DEBUG"
    assert s.store_backend == "memory"
    assert s.collectors == ["timers", "logs"]
    assert s.enabled is False


def test_get_logger_respects_level(monkeypatch: Any) -> None:
    """`get_logger()` should apply the numeric level derived from `LOG_LEVEL`.

    A unique logger name avoids side effects between tests.
    """
    monkeypatch.setenv("LOG_LEVEL", "ERROR")
    load_settings.cache_clear()

    logger = get_logger("debugbar.tests.settings")

    assert logger.level == logging.ERROR
    assert logger.propagate is False
    assert logger.handlers, "Expected at least one StreamHandler to be attached."
