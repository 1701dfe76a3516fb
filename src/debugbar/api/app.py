"""
Demo FastAPI application with the toolbar installed.

This module builds a small application used for local development and for
the integration tests. It is responsible for:
1.  **Middleware Setup**: installs :class:`DebugbarMiddleware`.
2.  **Exception Handling**: global handlers so errors return structured JSON.
3.  **Routing**: a sample HTML page, a JSON endpoint with a path parameter,
    a form endpoint and the health probe.
4.  **Lifecycle**: resolves the snapshot store on startup.

Design Pattern
--------------
An **Application Factory** (`create_app`) lets tests build isolated app
instances with their own settings and store.
"""

from __future__ import annotations

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Form, Request
from fastapi.responses import HTMLResponse, JSONResponse
from markupsafe import escape

from debugbar import __version__
from debugbar.api.middleware import DebugbarMiddleware, request_benchmark
from debugbar.core.settings import Settings, get_logger, load_settings
from debugbar.store.snapshot_store import SnapshotStore, get_store

logger = get_logger("debugbar.api")
app_logger = logging.getLogger("demo.app")

DEMO_PAGE = """<!doctype html>
<html>
  <head><title>debugbar demo</title></head>
  <body>
    <h1>Hello, {name}</h1>
  </body>
</html>
"""


def create_app(settings: Settings | None = None, store: SnapshotStore | None = None) -> FastAPI:
    """
    Construct the demo application.

    Parameters
    ----------
    settings:
        Toolbar settings; defaults to the cached environment settings.
    store:
        Snapshot store; defaults to the process-wide store for ``settings``.
    """
    cfg = settings or load_settings()
    snapshot_store = store or get_store(cfg)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        logger.info("Toolbar store ready (%s)", type(snapshot_store).__name__)
        yield
        logger.info("Shutting down")

    app = FastAPI(
        title="debugbar demo",
        description="Sample application profiled by the request toolbar",
        version=__version__,
        lifespan=lifespan,
    )

    # -----------------------------------------------------------------------
    # Middleware
    # -----------------------------------------------------------------------
    app.add_middleware(DebugbarMiddleware, settings=cfg, store=snapshot_store)

    # -----------------------------------------------------------------------
    # Global Exception Handlers
    # -----------------------------------------------------------------------
    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        """Return unhandled exceptions as structured JSON."""
        logger.exception("Unhandled error on %s", request.url.path)
        return JSONResponse(
            status_code=500,
            content={
                "error": "Internal Server Error",
                "detail": str(exc),
                "path": request.url.path,
            },
        )

    @app.exception_handler(ValueError)
    async def value_error_handler(request: Request, exc: ValueError) -> JSONResponse:
        """Map Python ValueErrors to HTTP 400 Bad Request."""
        return JSONResponse(
            status_code=400,
            content={"error": "Bad Request", "detail": str(exc)},
        )

    # -----------------------------------------------------------------------
    # Routes
    # -----------------------------------------------------------------------
    @app.get("/", response_class=HTMLResponse, tags=["Demo"])
    async def index(request: Request, name: str = "world") -> HTMLResponse:
        with request_benchmark(request).measure("render_page"):
            page = DEMO_PAGE.format(name=escape(name))
        app_logger.warning("Rendered demo page for %s", name)
        return HTMLResponse(page)

    @app.get("/items/{item_id}", tags=["Demo"])
    async def read_item(request: Request, item_id: int) -> dict[str, int | str]:
        with request_benchmark(request).measure("load_item"):
            item = {"id": item_id, "name": f"item-{item_id}"}
        return item

    @app.post("/echo", tags=["Demo"])
    async def echo(message: str = Form(...)) -> dict[str, str]:
        return {"message": message}

    @app.get("/health", tags=["System"])
    async def health_check() -> dict[str, str]:
        """Simple liveness probe."""
        return {"status": "ok", "environment": cfg.environment, "version": __version__}

    return app


__all__ = ["create_app"]
