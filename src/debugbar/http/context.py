"""Read-only request/response facades consumed by the snapshot builder.

The builder never touches framework objects directly. Starlette requests
and responses are projected into these small value types first, which keeps
harvesting testable with plain dictionaries and removes any reliance on
ambient request globals.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from http import HTTPStatus
from typing import Any
from urllib.parse import parse_qsl

from starlette.requests import Request
from starlette.responses import Response

FORM_URLENCODED = "application/x-www-form-urlencoded"


def _multi_to_mapping(pairs: list[tuple[str, str]]) -> dict[str, str | list[str]]:
    """Collapse repeated keys into lists, keeping first-seen key order."""
    out: dict[str, str | list[str]] = {}
    for key, value in pairs:
        if key not in out:
            out[key] = value
            continue
        current = out[key]
        if isinstance(current, list):
            current.append(value)
        else:
            out[key] = [current, value]
    return out


@dataclass(frozen=True)
class RequestContext:
    """What the harvester may read from the inbound request."""

    method: str = "GET"
    path: str = "/"
    query: Mapping[str, Any] = field(default_factory=dict)
    post: Mapping[str, Any] = field(default_factory=dict)
    headers: list[tuple[str, str]] = field(default_factory=list)
    cookies: Mapping[str, str] = field(default_factory=dict)
    session: Mapping[str, Any] | None = None
    is_secure: bool = False
    protocol_version: str = "1.1"

    def header_values(self) -> dict[str, list[str]]:
        """Group header values by name, preserving arrival order."""
        grouped: dict[str, list[str]] = {}
        for name, value in self.headers:
            grouped.setdefault(name, []).append(value)
        return grouped

    @classmethod
    async def from_starlette(cls, request: Request) -> RequestContext:
        """Project a Starlette request.

        Only url-encoded bodies are parsed; reading them here is safe because
        Starlette replays a consumed body to the downstream app. Multipart
        bodies are left for the application and show up as an empty group.
        """
        post: dict[str, str | list[str]] = {}
        content_type = request.headers.get("content-type", "")
        if content_type.split(";")[0].strip() == FORM_URLENCODED:
            body = await request.body()
            post = _multi_to_mapping(
                parse_qsl(body.decode("utf-8", "replace"), keep_blank_values=True)
            )

        return cls(
            method=request.method,
            path=request.url.path,
            query=_multi_to_mapping(list(request.query_params.multi_items())),
            post=post,
            headers=list(request.headers.items()),
            cookies=dict(request.cookies),
            session=request.scope.get("session"),
            is_secure=request.url.scheme in ("https", "wss"),
            protocol_version=str(request.scope.get("http_version", "1.1")),
        )


@dataclass(frozen=True)
class ResponseContext:
    """Status line of the outgoing response."""

    status_code: int = 200
    reason: str = ""

    @classmethod
    def from_status(cls, status_code: int) -> ResponseContext:
        """Build from a numeric status, looking up the standard reason phrase."""
        try:
            reason = HTTPStatus(status_code).phrase
        except ValueError:
            reason = ""
        return cls(status_code=status_code, reason=reason)

    @classmethod
    def from_starlette(cls, response: Response) -> ResponseContext:
        return cls.from_status(response.status_code)


__all__ = ["RequestContext", "ResponseContext"]
