"""
Starlette middleware wiring the toolbar into an ASGI application.

For each HTTP request the middleware:

1. Runs the entry point. A toolbar request (``?debugbar`` or
   ``?debugbar_time=...``) is answered directly and the app never sees it.
2. Otherwise profiles the request: wall-clock timing, ``tracemalloc`` peak
   memory, log capture and the app's own benchmark timers (reachable as
   ``request.state.debugbar.benchmark``).
3. Builds the snapshot from the configured collectors, stores it, and tags
   the response with a ``Debugbar-Time`` header. HTML responses also get the
   loader ``<script>`` injected before ``</body>``.

Example
-------
    app = FastAPI()
    app.add_middleware(DebugbarMiddleware)
"""

from __future__ import annotations

import time
import tracemalloc
from collections.abc import MutableMapping
from typing import Any

from markupsafe import escape
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp

from debugbar.api.entry import BOOTSTRAP_MARKER, handle_request
from debugbar.core.benchmark import Benchmark
from debugbar.core.memory import MemoryWatch, memory_watch
from debugbar.core.scope import RequestScope, RouteInfo, activate, install_log_capture
from debugbar.core.settings import Settings, get_logger, load_settings
from debugbar.http.context import RequestContext, ResponseContext
from debugbar.store.snapshot_store import SnapshotStore, get_store
from debugbar.toolbar.builder import Toolbar

TIME_HEADER = "Debugbar-Time"
TOTAL_TIMER = "total_execution"

logger = get_logger("debugbar.middleware")


def time_token(start_time: float) -> str:
    """Snapshot id derived from the request's start time (microseconds)."""
    return str(int(start_time * 1_000_000))


def route_info(scope: MutableMapping[str, Any]) -> RouteInfo | None:
    """Describe the route the router matched, if any."""
    route = scope.get("route")
    endpoint = scope.get("endpoint")
    if route is None and endpoint is None:
        return None
    name = getattr(endpoint, "__qualname__", None) or getattr(endpoint, "__name__", "")
    return RouteInfo(
        path=getattr(route, "path", None) or scope.get("path", ""),
        endpoint=name or repr(endpoint),
        methods=tuple(sorted(getattr(route, "methods", None) or ())),
        path_params={k: str(v) for k, v in scope.get("path_params", {}).items()},
    )


def request_benchmark(request: Request) -> Benchmark:
    """Return the request's benchmark, or a detached one when not profiling."""
    scope = getattr(request.state, "debugbar", None)
    if isinstance(scope, RequestScope):
        return scope.benchmark
    return Benchmark()


def loader_tag(snapshot_id: str, path: str) -> bytes:
    """Script tag that boots the toolbar for ``snapshot_id``."""
    src = escape(f"{path}?{BOOTSTRAP_MARKER}")
    return (
        f'<script id="debugbar_loader" data-time="{escape(snapshot_id)}" '
        f'src="{src}" type="text/javascript"></script>'
    ).encode()


def inject_before_body_end(body: bytes, tag: bytes) -> bytes:
    """Insert ``tag`` before the last ``</body>``, or append it."""
    idx = body.lower().rfind(b"</body>")
    if idx == -1:
        return body + tag
    return body[:idx] + tag + body[idx:]


class DebugbarMiddleware(BaseHTTPMiddleware):
    """Profile every request and serve stored toolbars."""

    def __init__(
        self,
        app: ASGIApp,
        settings: Settings | None = None,
        store: SnapshotStore | None = None,
        memory: MemoryWatch | None = None,
    ) -> None:
        super().__init__(app)
        self.settings = settings or load_settings()
        self.store = store or get_store(self.settings)
        self.memory = memory or memory_watch
        if self.settings.enabled and self.settings.is_prod:
            logger.warning("Toolbar enabled in production; snapshots expose request data")
        install_log_capture()

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        if not self.settings.enabled:
            logger.debug("Toolbar disabled; passing %s through", request.url.path)
            return await call_next(request)

        terminal = handle_request(
            request.query_params, request.headers.get("accept"), self.store
        )
        if terminal is not None:
            return Response(
                content=terminal.body,
                status_code=terminal.status_code,
                media_type=terminal.media_type,
            )

        if self.settings.trace_memory and not tracemalloc.is_tracing():
            tracemalloc.start()

        start_time = time.time()
        start_perf = time.perf_counter()

        scope = RequestScope(
            request=await RequestContext.from_starlette(request),
            settings=self.settings,
        )
        scope.benchmark.start(TOTAL_TIMER, at=start_time)
        request.state.debugbar = scope

        with self.memory.watch() as memory, activate(scope):
            response = await call_next(request)

        elapsed = time.perf_counter() - start_perf
        scope.benchmark.stop(TOTAL_TIMER, at=start_time + elapsed)
        scope.route = route_info(request.scope)

        snapshot = Toolbar(scope).run(
            start_time,
            elapsed,
            memory.start,
            ResponseContext.from_starlette(response),
            peak_memory=memory.peak if memory.peak is not None else memory.start,
        )
        snapshot_id = time_token(start_time)
        self.store.save(snapshot_id, snapshot.to_bytes())
        logger.debug("Stored toolbar snapshot %s for %s", snapshot_id, request.url.path)

        response.headers[TIME_HEADER] = snapshot_id
        if not self.settings.inject or not self._is_html(response):
            return response
        if "content-encoding" in response.headers:
            logger.debug("Loader not injected into encoded response for %s", request.url.path)
            return response
        return await self._inject_loader(response, snapshot_id, request.url.path)

    @staticmethod
    def _is_html(response: Response) -> bool:
        return response.headers.get("content-type", "").startswith("text/html")

    @staticmethod
    async def _inject_loader(response: Response, snapshot_id: str, path: str) -> Response:
        """Buffer the body, add the loader tag and fix ``Content-Length``."""
        chunks = [chunk async for chunk in response.body_iterator]  # type: ignore[attr-defined]
        body = b"".join(c if isinstance(c, bytes) else c.encode() for c in chunks)
        body = inject_before_body_end(body, loader_tag(snapshot_id, path))

        injected = Response(content=body, status_code=response.status_code)
        injected.raw_headers = [
            (k, v) for k, v in response.raw_headers if k.lower() != b"content-length"
        ] + [(b"content-length", str(len(body)).encode())]
        injected.background = response.background
        return injected


__all__ = [
    "DebugbarMiddleware",
    "TIME_HEADER",
    "inject_before_body_end",
    "loader_tag",
    "request_benchmark",
    "route_info",
    "time_token",
]
