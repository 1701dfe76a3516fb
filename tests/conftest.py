"""Shared fixtures: stub collectors, request facades and a ready snapshot."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

import pytest

from debugbar.collectors.base import Collector
from debugbar.core.contracts.snapshot import Snapshot
from debugbar.core.contracts.timeline import TimelineEntry
from debugbar.core.scope import RequestScope
from debugbar.core.settings import Settings
from debugbar.http.context import RequestContext, ResponseContext
from debugbar.toolbar.builder import build_snapshot


class StubCollector(Collector):
    """Collector whose answers are fixed at construction time."""

    def __init__(
        self,
        title: str,
        *,
        timeline: list[TimelineEntry] | None = None,
        declares_timeline: bool | None = None,
        var_data: Mapping[str, Mapping[str, Any]] | None = None,
        display: Any = "",
        badge: int | None = None,
    ) -> None:
        self.title = title
        self._timeline = timeline or []
        self._declares_timeline = (
            declares_timeline if declares_timeline is not None else bool(timeline)
        )
        self._var_data = var_data
        self._display = display
        self._badge = badge

    def get_title(self, safe: bool = False) -> str:
        return self.title.lower() if safe else self.title

    def get_title_details(self) -> str:
        return f"{self.title} details"

    def display(self) -> Any:
        return self._display

    def get_badge_value(self) -> int | None:
        return self._badge

    def is_empty(self) -> bool:
        return not self._display

    def has_tab_content(self) -> bool:
        return True

    def has_label(self) -> bool:
        return False

    def icon(self) -> str:
        return "stub"

    def has_timeline_data(self) -> bool:
        return self._declares_timeline

    def timeline_data(self) -> list[TimelineEntry]:
        return [e.model_copy(update={"component": self.title}) for e in self._timeline]

    def has_var_data(self) -> bool:
        return self._var_data is not None

    def get_var_data(self) -> Mapping[str, Mapping[str, Any]]:
        return self._var_data or {}


def span(name: str, start: float, duration: float) -> TimelineEntry:
    return TimelineEntry(name=name, start=start, duration=duration)


@pytest.fixture  # type: ignore[misc]
def test_settings(tmp_path: Any) -> Settings:
    """Settings isolated from the developer's environment."""
    return Settings(
        environment="test",
        store_backend="memory",
        store_dir=tmp_path / "debugbar",
        trace_memory=False,
    )


@pytest.fixture  # type: ignore[misc]
def request_ctx() -> RequestContext:
    return RequestContext(
        method="GET",
        path="/search",
        query={"q": "<b>tea</b>"},
        headers=[("host", "example.test"), ("accept", "text/html")],
        cookies={"sid": "abc"},
        is_secure=True,
        protocol_version="2",
    )


@pytest.fixture  # type: ignore[misc]
def request_scope(request_ctx: RequestContext, test_settings: Settings) -> RequestScope:
    return RequestScope(request=request_ctx, settings=test_settings)


@pytest.fixture  # type: ignore[misc]
def snapshot(request_ctx: RequestContext) -> Snapshot:
    """A snapshot with two timeline collectors and a var-data collector."""
    collectors = [
        StubCollector(
            "Timers",
            timeline=[span("boot", 100.0, 0.002), span("render", 100.004, 0.003)],
            display=[{"name": "boot", "duration_ms": 2.0}],
            badge=2,
        ),
        StubCollector("Database", timeline=[span("query", 100.001, 0.001)], display="<p>1 query</p>"),
        StubCollector("Route", var_data={"Route": {"path": "/search"}}, display={"path": "/search"}),
    ]
    return build_snapshot(
        100.0,
        0.0123,
        1_000,
        request_ctx,
        ResponseContext.from_status(200),
        collectors,
        peak_memory=1_000 + 2 * 1_048_576,
        config={"environment": "test"},
    )
