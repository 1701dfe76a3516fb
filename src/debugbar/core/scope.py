"""Per-request scope threaded into collectors.

A `RequestScope` replaces the ambient globals a collector might otherwise
reach for: the request facade, the request's benchmark, the log records
emitted while it ran, and the matched route. It lives exactly as long as
the request and is handed to every collector factory.

Log capture
-----------
`ScopeLogHandler` is installed once on the root logger. It routes each
record to the scope stored in the `current_scope` context variable, so
records from concurrently handled requests do not mix.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass, field

from debugbar.core.benchmark import Benchmark
from debugbar.core.settings import Settings, load_settings
from debugbar.http.context import RequestContext


@dataclass(frozen=True, slots=True)
class LogEntry:
    """A captured log record, reduced to what the toolbar shows."""

    created: float
    level: str
    logger: str
    message: str


@dataclass(frozen=True, slots=True)
class RouteInfo:
    """Routing outcome of the request."""

    path: str
    endpoint: str
    methods: tuple[str, ...] = ()
    path_params: dict[str, str] = field(default_factory=dict)


@dataclass
class RequestScope:
    """Everything collectors may read about the current request."""

    request: RequestContext
    settings: Settings = field(default_factory=load_settings)
    benchmark: Benchmark = field(default_factory=Benchmark)
    logs: list[LogEntry] = field(default_factory=list)
    route: RouteInfo | None = None


current_scope: ContextVar[RequestScope | None] = ContextVar("debugbar_scope", default=None)


class ScopeLogHandler(logging.Handler):
    """Append log records to the active request scope, if any."""

    def emit(self, record: logging.LogRecord) -> None:
        scope = current_scope.get()
        if scope is None:
            return
        try:
            message = record.getMessage()
        except (TypeError, ValueError):
            message = str(record.msg)
        scope.logs.append(
            LogEntry(
                created=record.created,
                level=record.levelname.lower(),
                logger=record.name,
                message=message,
            )
        )


_handler: ScopeLogHandler | None = None


def install_log_capture() -> ScopeLogHandler:
    """Attach the scope handler to the root logger once per process."""
    global _handler
    if _handler is None:
        _handler = ScopeLogHandler()
        logging.getLogger().addHandler(_handler)
    return _handler


@contextmanager
def activate(scope: RequestScope) -> Iterator[RequestScope]:
    """Make ``scope`` the current scope for the enclosed block."""
    token = current_scope.set(scope)
    try:
        yield scope
    finally:
        current_scope.reset(token)


__all__ = [
    "LogEntry",
    "RequestScope",
    "RouteInfo",
    "ScopeLogHandler",
    "activate",
    "current_scope",
    "install_log_capture",
]
