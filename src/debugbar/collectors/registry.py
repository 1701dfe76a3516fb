"""Collector registry: identifiers from configuration -> collector instances.

The toolbar is configured with an ordered list of identifiers
(``settings.collectors``). Each identifier is either

- a registered name (``"timers"``, ``"logs"`` ...), or
- an import path ``"package.module:Factory"`` whose target is called with
  the request scope (a collector class works as its own factory).

Resolution is tolerant: an identifier that cannot be resolved or whose
factory fails to construct is logged and skipped, so one bad entry never
prevents the snapshot from being built for the others.
"""

from __future__ import annotations

import importlib
from collections.abc import Callable, Iterable
from typing import ClassVar

from debugbar.collectors.base import Collector
from debugbar.collectors.config import ConfigCollector
from debugbar.collectors.logs import LogsCollector
from debugbar.collectors.routes import RoutesCollector
from debugbar.collectors.timers import TimersCollector
from debugbar.core.errors import CollectorResolutionError
from debugbar.core.scope import RequestScope
from debugbar.core.settings import get_logger

CollectorFactory = Callable[[RequestScope], Collector]

logger = get_logger("debugbar.collectors")


class CollectorRegistry:
    """Name -> factory mapping with import-path fallback."""

    _instance: ClassVar[CollectorRegistry | None] = None

    def __init__(self) -> None:
        self._factories: dict[str, CollectorFactory] = {}

    @classmethod
    def get_instance(cls) -> CollectorRegistry:
        """Accessor for the process-wide registry with built-ins registered."""
        if cls._instance is None:
            registry = cls()
            registry.register("timers", TimersCollector)
            registry.register("routes", RoutesCollector)
            registry.register("logs", LogsCollector)
            registry.register("config", ConfigCollector)
            cls._instance = registry
        return cls._instance

    def register(self, name: str, factory: CollectorFactory) -> None:
        """Register (or replace) the factory for ``name``."""
        self._factories[name] = factory

    def names(self) -> tuple[str, ...]:
        return tuple(self._factories)

    def get(self, identifier: str) -> CollectorFactory:
        """Return the factory for ``identifier`` or raise `CollectorResolutionError`."""
        if identifier in self._factories:
            return self._factories[identifier]
        if ":" not in identifier:
            raise CollectorResolutionError(identifier, "unknown collector name")

        module_name, _, attr = identifier.partition(":")
        try:
            module = importlib.import_module(module_name)
        except ImportError as exc:
            raise CollectorResolutionError(identifier, f"cannot import {module_name!r}") from exc
        factory = getattr(module, attr, None)
        if factory is None or not callable(factory):
            raise CollectorResolutionError(identifier, f"{attr!r} is not a callable in {module_name!r}")
        return factory

    def resolve(self, identifiers: Iterable[str], scope: RequestScope) -> list[Collector]:
        """Instantiate collectors in order, skipping the ones that fail."""
        collectors: list[Collector] = []
        for identifier in identifiers:
            try:
                factory = self.get(identifier)
                collector = factory(scope)
            except CollectorResolutionError as exc:
                logger.warning("Skipping collector: %s", exc)
                continue
            except Exception as exc:
                logger.warning("Skipping collector %r: construction failed: %s", identifier, exc)
                continue
            if not isinstance(collector, Collector):
                logger.warning("Skipping collector %r: factory returned %r", identifier, collector)
                continue
            collectors.append(collector)
        return collectors


def get_registry() -> CollectorRegistry:
    return CollectorRegistry.get_instance()


def resolve_collectors(identifiers: Iterable[str], scope: RequestScope) -> list[Collector]:
    """Resolve ``identifiers`` against the process-wide registry."""
    return get_registry().resolve(identifiers, scope)


__all__ = [
    "CollectorFactory",
    "CollectorRegistry",
    "get_registry",
    "resolve_collectors",
]
