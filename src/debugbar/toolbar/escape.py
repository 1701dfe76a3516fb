"""Escaping applied to every harvested key and value.

All variable data shown in the toolbar goes through `make_safe` exactly
once, at harvest time. Templates then mark these strings safe instead of
escaping them a second time.
"""

from __future__ import annotations

from pprint import pformat
from typing import Any

from markupsafe import escape


def printable(value: Any) -> str:
    """Return a readable debug representation of a non-string value."""
    if isinstance(value, str):
        return value
    return pformat(value, width=80, sort_dicts=False)


def make_safe(value: Any) -> str:
    """HTML-escape ``value``, converting non-strings with `printable` first."""
    return str(escape(printable(value)))


def make_safe_mapping(items: Any) -> dict[str, str]:
    """Escape every key and value of a mapping; anything else yields ``{}``."""
    if not hasattr(items, "items"):
        return {}
    return {make_safe(key): make_safe(value) for key, value in items.items()}


__all__ = ["make_safe", "make_safe_mapping", "printable"]
