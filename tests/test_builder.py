"""Unit tests for the snapshot builder.

Covers the ruler layout math, memory formatting, collector summaries and
how the builder treats misbehaving collectors.
"""

from __future__ import annotations

import math
from typing import Any

import pytest
from pydantic import ValidationError

from conftest import StubCollector, span
from debugbar import __version__
from debugbar.core.contracts.snapshot import Snapshot
from debugbar.core.scope import RequestScope
from debugbar.http.context import RequestContext, ResponseContext
from debugbar.toolbar import builder
from debugbar.toolbar.builder import Toolbar, build_snapshot, round_to, segment_layout, summarize


@pytest.mark.parametrize(  # type: ignore[misc]
    ("total_ms", "expected_duration", "expected_count"),
    [
        (7.0, 1.0, 7),
        (35.0, 5.0, 7),
        (123.4, 17.8, 7),
        (1000.0, 143.0, 7),
    ],
)
def test_segment_layout(total_ms: float, expected_duration: float, expected_count: int) -> None:
    """Segment width is total/7 rounded up to 1/5 ms; count covers the total."""
    duration, count = segment_layout(total_ms)
    assert duration == pytest.approx(expected_duration)
    assert duration == pytest.approx(math.ceil((total_ms / 7) * 5) / 5)
    assert count == expected_count == math.ceil(total_ms / duration)
    assert duration * count >= total_ms


def test_segment_layout_zero_duration() -> None:
    """A zero-length request still gets a one-cell ruler."""
    assert segment_layout(0.0) == (0.2, 1)


def test_round_to_rounds_up() -> None:
    assert round_to(1.01) == pytest.approx(1.2)
    assert round_to(1.2) == pytest.approx(1.2)


def test_build_snapshot_totals(snapshot: Snapshot) -> None:
    """Duration, memory delta and version are derived from the inputs."""
    assert snapshot.request_start_time == 100.0
    assert snapshot.total_duration_ms == pytest.approx(12.3)
    assert snapshot.segment_duration_ms == pytest.approx(1.8)
    assert snapshot.segment_count == 7
    assert snapshot.peak_memory_delta_mb == "2.000"
    assert snapshot.framework_version == __version__
    assert snapshot.config_display == {"environment": "test"}


def test_summaries_keep_collector_order(snapshot: Snapshot) -> None:
    assert [c.title for c in snapshot.collectors] == ["Timers", "Database", "Route"]
    timers = snapshot.collectors[0]
    assert timers.title_safe == "timers"
    assert timers.title_details == "Timers details"
    assert timers.badge_value == 2
    assert timers.has_timeline_data is True
    assert [e.name for e in timers.timeline_data] == ["boot", "render"]
    assert all(e.component == "Timers" for e in timers.timeline_data)


def test_summarize_asks_every_question() -> None:
    summary = summarize(StubCollector("Files", display={"a": 1}, badge=4))
    assert summary.model_dump(exclude={"timeline_data"}) == {
        "title": "Files",
        "title_safe": "files",
        "title_details": "Files details",
        "display": {"a": 1},
        "badge_value": 4,
        "is_empty": False,
        "has_tab_content": True,
        "has_label": False,
        "icon": "stub",
        "has_timeline_data": False,
    }


def test_memory_without_tracing_is_zero(request_ctx: RequestContext, monkeypatch: Any) -> None:
    """With no peak available the delta is reported as zero."""
    monkeypatch.setattr(builder, "peak_memory_usage", lambda: None)
    snap = build_snapshot(
        1.0, 0.01, 500, request_ctx, ResponseContext.from_status(204), [], config={}
    )
    assert snap.peak_memory_delta_mb == "0.000"
    assert snap.vars.response.status_code == 204


def test_collector_error_propagates(request_ctx: RequestContext) -> None:
    """A collector that raises while answering aborts the build."""

    class Broken(StubCollector):
        def display(self) -> str:
            raise RuntimeError("boom")

    with pytest.raises(RuntimeError, match="boom"):
        build_snapshot(
            0.0, 0.001, 0, request_ctx, ResponseContext.from_status(200), [Broken("X")], config={}
        )


def test_toolbar_skips_unresolvable_collectors(request_scope: RequestScope) -> None:
    """Unknown identifiers are dropped; the others still produce a snapshot."""
    toolbar = Toolbar(request_scope, ["timers", "no-such-collector", "missing.module:Thing", "config"])
    assert [c.get_title() for c in toolbar.collectors] == ["Timers", "Config"]

    request_scope.benchmark.start("work", at=10.0).stop("work", at=10.5)
    snap = toolbar.run(10.0, 0.6, 0, ResponseContext.from_status(200), peak_memory=0)
    assert [c.title for c in snap.collectors] == ["Timers", "Config"]
    assert snap.collectors[0].timeline_data[0].name == "work"
    assert snap.collectors[0].timeline_data[0].duration == pytest.approx(0.5)
    assert snap.config_display["environment"] == "test"


def test_snapshot_is_frozen(snapshot: Snapshot) -> None:
    with pytest.raises(ValidationError):
        snapshot.segment_count = 3  # type: ignore[misc]


def test_timeline_entry_rejects_negative_duration() -> None:
    with pytest.raises(ValueError):
        span("bad", 1.0, -0.1)
