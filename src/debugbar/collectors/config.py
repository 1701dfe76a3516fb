"""Config collector: the toolbar's view of its own configuration.

`config_display` is also called once by the snapshot builder; its return
value is embedded verbatim as the snapshot's ``config_display``.
"""

from __future__ import annotations

import platform
import sys
from typing import Any

from debugbar import __version__
from debugbar.collectors.base import BaseCollector
from debugbar.core.settings import Settings


def config_display(settings: Settings) -> dict[str, Any]:
    """Return a JSON-safe summary of the runtime and toolbar settings."""
    return {
        "debugbarVersion": __version__,
        "pythonVersion": platform.python_version(),
        "implementation": sys.implementation.name,
        "platform": platform.platform(terse=True),
        "environment": settings.environment,
        "logLevel": settings.log_level,
        "storeBackend": settings.store_backend,
        "collectors": list(settings.collectors),
    }


class ConfigCollector(BaseCollector):
    title = "Config"
    has_tabs = True

    def display(self) -> Any:
        return config_display(self.scope.settings)

    def icon(self) -> str:
        return "gear"
