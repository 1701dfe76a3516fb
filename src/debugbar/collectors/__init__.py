"""Pluggable toolbar collectors and the registry that builds them."""

from __future__ import annotations

from .base import BaseCollector, Collector
from .config import ConfigCollector
from .logs import LogsCollector
from .registry import CollectorRegistry, get_registry, resolve_collectors
from .routes import RoutesCollector
from .timers import TimersCollector

__all__ = [
    "BaseCollector",
    "Collector",
    "CollectorRegistry",
    "ConfigCollector",
    "LogsCollector",
    "RoutesCollector",
    "TimersCollector",
    "get_registry",
    "resolve_collectors",
]
