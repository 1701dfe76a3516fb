"""Format dispatch: stored snapshot bytes -> output body.

======  ==========================================================
json    the stored bytes, unchanged (they are already canonical JSON)
html    decoded snapshot rendered through the toolbar template
xml     decoded snapshot converted to an XML document
======  ==========================================================

Anything else raises `UnsupportedFormatError`; content negotiation only
ever produces the three names above.
"""

from __future__ import annotations

import json

from debugbar.core.contracts.snapshot import Snapshot
from debugbar.core.errors import UnsupportedFormatError
from debugbar.formatters.html import render_html
from debugbar.formatters.xml import to_xml

MEDIA_TYPES: dict[str, str] = {
    "html": "text/html",
    "json": "application/json",
    "xml": "application/xml",
}


def format_snapshot(data: bytes, fmt: str) -> bytes:
    """Turn stored snapshot bytes into the body for format ``fmt``."""
    if fmt == "json":
        return data
    if fmt == "html":
        return render_html(Snapshot.from_bytes(data)).encode("utf-8")
    if fmt == "xml":
        return to_xml(json.loads(data))
    raise UnsupportedFormatError(fmt)


__all__ = ["MEDIA_TYPES", "format_snapshot"]
