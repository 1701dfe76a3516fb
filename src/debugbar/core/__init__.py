"""Core package initializer for debugbar.

Holds settings, errors, the ``Result`` container and the snapshot contracts:
    from debugbar.core.settings import load_settings, Settings, get_logger
"""

from __future__ import annotations

__all__ = ["__doc__"]
