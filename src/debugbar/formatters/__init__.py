"""Output formats for stored snapshots."""

from __future__ import annotations

from .dispatch import MEDIA_TYPES, format_snapshot
from .html import render_html
from .xml import to_xml

__all__ = ["MEDIA_TYPES", "format_snapshot", "render_html", "to_xml"]
