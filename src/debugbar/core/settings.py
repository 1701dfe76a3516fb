"""Centralized toolbar configuration using Pydantic Settings (v2).

This module exposes a single, cached `settings` instance that reads from:
- Real environment variables (highest precedence)
- `.env` files at the repository root: .env, .env.local, .env.dev/.env.test/.env.prod

List-valued fields such as `DEBUGBAR_COLLECTORS` are given as JSON arrays,
e.g. ``DEBUGBAR_COLLECTORS='["timers", "logs"]'``.
"""

from __future__ import annotations

import logging
import os
from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

EnvName = Literal["dev", "test", "prod"]
LogLevelName = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
StoreBackend = Literal["file", "memory"]

DEFAULT_COLLECTORS: tuple[str, ...] = ("timers", "routes", "logs", "config")


class Settings(BaseSettings):
    """Typed toolbar configuration loaded from env and `.env` files.

    Attributes
    ----------
    environment : EnvName
        Runtime environment flag; maps from `DEBUGBAR_ENV`.
    log_level : LogLevelName
        Global log level string; maps from `LOG_LEVEL`.
    enabled : bool
        Master switch for the middleware; maps from `DEBUGBAR_ENABLED`.
    store_backend : StoreBackend
        Where snapshots are kept (`file` or `memory`); maps from `DEBUGBAR_STORE`.
    store_dir : Path
        Directory used by the file store; maps from `DEBUGBAR_STORE_DIR`.
    collectors : list[str]
        Ordered collector identifiers; maps from `DEBUGBAR_COLLECTORS`.
    trace_memory : bool
        Start `tracemalloc` if it is not already tracing; maps from
        `DEBUGBAR_TRACE_MEMORY`.
    inject : bool
        Inject the loader script into HTML responses; maps from `DEBUGBAR_INJECT`.
    """

    environment: EnvName = Field(default="dev", alias="DEBUGBAR_ENV")
    log_level: LogLevelName = Field(default="INFO", alias="LOG_LEVEL")
    enabled: bool = Field(default=True, alias="DEBUGBAR_ENABLED")
    store_backend: StoreBackend = Field(default="file", alias="DEBUGBAR_STORE")
    store_dir: Path = Field(default=Path("writable") / "debugbar", alias="DEBUGBAR_STORE_DIR")
    collectors: list[str] = Field(
        default_factory=lambda: list(DEFAULT_COLLECTORS), alias="DEBUGBAR_COLLECTORS"
    )
    trace_memory: bool = Field(default=True, alias="DEBUGBAR_TRACE_MEMORY")
    inject: bool = Field(default=True, alias="DEBUGBAR_INJECT")

    model_config = SettingsConfigDict(
        env_file=(".env", ".env.local", ".env.dev", ".env.test", ".env.prod"),
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    @property
    def is_prod(self) -> bool:
        """Return True if running in the production environment."""
        return self.environment == "prod"

    def log_level_numeric(self) -> int:
        """Return the numeric logging level corresponding to `self.log_level`."""
        return getattr(logging, self.log_level, logging.INFO)


@lru_cache(maxsize=1)
def load_settings() -> Settings:
    """Create and cache a `Settings` instance.

    We keep this behind an LRU cache so tests can force a rebuild via
    `load_settings.cache_clear()` after mutating `os.environ`.
    """
    os.environ.setdefault("DEBUGBAR_ENV", "dev")
    return Settings()


def get_logger(name: str = "debugbar") -> logging.Logger:
    """Return a process-global logger configured to the current `LOG_LEVEL`."""
    logger = logging.getLogger(name)
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(
            logging.Formatter("%(asctime)s | %(levelname)s | %(name)s | %(message)s")
        )
        logger.addHandler(handler)
    logger.setLevel(load_settings().log_level_numeric())
    logger.propagate = False
    return logger
