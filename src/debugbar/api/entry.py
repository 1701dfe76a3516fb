"""Request entry point: decide what, if anything, the toolbar answers.

Branches, first match wins:

1. ``?debugbar`` present: return the loader script
   (``application/javascript``).
2. ``?debugbar_time=<id>`` non-empty: negotiate html/json/xml from the
   ``Accept`` header, sanitize the id, load the stored snapshot and format
   it. A missing snapshot yields a small error body in the negotiated
   format (JSON string, ``<error>`` element, or a console-logging script).
3. Otherwise: ``None``. The request proceeds and is profiled.

The first two branches return a `ToolbarResponse`, which the caller sends
as the final response; nothing else runs for that request.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from dataclasses import dataclass
from functools import lru_cache
from importlib.resources import files
from typing import Any

from markupsafe import escape

from debugbar.core.result import Err
from debugbar.core.settings import get_logger
from debugbar.formatters.dispatch import MEDIA_TYPES, format_snapshot
from debugbar.http.negotiation import negotiate_media
from debugbar.store.snapshot_store import FILE_PREFIX, SnapshotStore, get_store, sanitize_id

BOOTSTRAP_MARKER = "debugbar"
TIME_MARKER = "debugbar_time"
# html first: it is the fallback when nothing in Accept matches
SUPPORTED_MEDIA: tuple[str, ...] = tuple(MEDIA_TYPES.values())
FORMAT_FOR_MEDIA: dict[str, str] = {media: fmt for fmt, media in MEDIA_TYPES.items()}
LOADER_MEDIA = "application/javascript"

logger = get_logger("debugbar.entry")


@dataclass(frozen=True, slots=True)
class ToolbarResponse:
    """A final response produced by the toolbar itself."""

    body: bytes
    media_type: str
    status_code: int = 200


@lru_cache(maxsize=1)
def loader_script() -> bytes:
    """Return the client-side loader, read once from the package."""
    return files("debugbar").joinpath("static/toolbarloader.js").read_bytes()


def not_found_body(snapshot_id: str, fmt: str) -> bytes:
    """Error body naming the missing snapshot, shaped for ``fmt``."""
    message = f'debugbar: snapshot "{FILE_PREFIX}{snapshot_id}" not found.'
    if fmt == "json":
        return json.dumps(message).encode("utf-8")
    if fmt == "xml":
        return f'<?xml version="1.0" encoding="UTF-8"?><error>{escape(message)}</error>'.encode()
    script = json.dumps(message).replace("</", "<\\/")
    return f'<script id="debugbar_js">console.log({script})</script>'.encode()


def handle_request(
    query: Mapping[str, Any],
    accept: str | None = None,
    store: SnapshotStore | None = None,
) -> ToolbarResponse | None:
    """Run the entry-point state machine for one request."""
    if BOOTSTRAP_MARKER in query:
        return ToolbarResponse(body=loader_script(), media_type=LOADER_MEDIA)

    token = query.get(TIME_MARKER)
    if not token:
        return None

    media = negotiate_media(accept, SUPPORTED_MEDIA)
    fmt = FORMAT_FOR_MEDIA[media]

    try:
        snapshot_id = sanitize_id(str(token))
    except ValueError:
        snapshot_id = ""

    loaded = (store or get_store()).load(snapshot_id) if snapshot_id else None
    if loaded is None or isinstance(loaded, Err):
        logger.info("Toolbar snapshot %r not found", snapshot_id)
        return ToolbarResponse(
            body=not_found_body(snapshot_id, fmt),
            media_type=media,
            status_code=404,
        )

    return ToolbarResponse(body=format_snapshot(loaded.unwrap(), fmt), media_type=media)


__all__ = [
    "BOOTSTRAP_MARKER",
    "FORMAT_FOR_MEDIA",
    "SUPPORTED_MEDIA",
    "TIME_MARKER",
    "ToolbarResponse",
    "handle_request",
    "loader_script",
    "not_found_body",
]
