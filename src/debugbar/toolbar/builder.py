"""Snapshot builder: collectors + request/response -> one immutable `Snapshot`.

Ruler layout
------------
The request's total duration is split into 7 nominal segments. The segment
width is rounded *up* to the next multiple of 1/5 ms, so the ruler always
covers the measured duration::

    segment_duration_ms = ceil(total_ms / 7 * 5) / 5
    segment_count       = ceil(total_ms / segment_duration_ms)

Non-positive durations floor the width to one increment and the count to 1.

Memory
------
The reported delta is ``peak - start`` in MB, never below zero. Callers
profiling concurrent requests pass a per-request ``peak_memory`` sampled
with :class:`~debugbar.core.memory.MemoryWatch`.

Collector queries
-----------------
Each collector is asked every question once, in list order; the summaries
keep that order. An exception raised by a collector is not caught here and
reaches the caller.
"""

from __future__ import annotations

import math
import tracemalloc
from collections.abc import Iterable, Sequence
from typing import Any

from debugbar import __version__
from debugbar.collectors.base import Collector
from debugbar.collectors.config import config_display
from debugbar.collectors.registry import resolve_collectors
from debugbar.core.contracts.snapshot import CollectorSummary, Snapshot
from debugbar.core.scope import RequestScope
from debugbar.core.settings import load_settings
from debugbar.http.context import RequestContext, ResponseContext
from debugbar.toolbar.harvest import harvest_vars

NOMINAL_SEGMENTS = 7
SEGMENT_INCREMENTS = 5
BYTES_PER_MB = 1_048_576


def round_to(number: float, increments: int = SEGMENT_INCREMENTS) -> float:
    """Round ``number`` up to the nearest multiple of ``1 / increments``."""
    return math.ceil(number * increments) / increments


def segment_layout(total_duration_ms: float) -> tuple[float, int]:
    """Return ``(segment_duration_ms, segment_count)`` for a request duration."""
    if total_duration_ms <= 0:
        return 1 / SEGMENT_INCREMENTS, 1
    segment_duration = round_to(total_duration_ms / NOMINAL_SEGMENTS)
    return segment_duration, math.ceil(total_duration_ms / segment_duration)


def peak_memory_usage() -> int | None:
    """Peak traced bytes since the last reset, or None when not tracing."""
    if not tracemalloc.is_tracing():
        return None
    return tracemalloc.get_traced_memory()[1]


def summarize(collector: Collector) -> CollectorSummary:
    """Ask ``collector`` every question of the contract."""
    return CollectorSummary(
        title=collector.get_title(),
        title_safe=collector.get_title(True),
        title_details=collector.get_title_details(),
        display=collector.display(),
        badge_value=collector.get_badge_value(),
        is_empty=collector.is_empty(),
        has_tab_content=collector.has_tab_content(),
        has_label=collector.has_label(),
        icon=collector.icon(),
        has_timeline_data=collector.has_timeline_data(),
        timeline_data=collector.timeline_data(),
    )


def build_snapshot(
    start_time: float,
    total_elapsed: float,
    start_memory: int,
    request: RequestContext,
    response: ResponseContext,
    collectors: Sequence[Collector],
    *,
    peak_memory: int | None = None,
    config: Any = None,
) -> Snapshot:
    """Assemble the snapshot of one request.

    Parameters
    ----------
    start_time:
        Wall-clock start of the request, in seconds.
    total_elapsed:
        Request duration in seconds.
    start_memory:
        Traced bytes at request start.
    peak_memory:
        Peak traced bytes; defaults to the current ``tracemalloc`` peak.
    config:
        Pre-computed config display; defaults to `config_display`.
    """
    total_ms = total_elapsed * 1000
    segment_duration, segment_count = segment_layout(total_ms)

    peak = peak_memory if peak_memory is not None else peak_memory_usage()
    delta_bytes = max(0, peak - start_memory) if peak is not None else 0

    return Snapshot(
        request_start_time=start_time,
        total_duration_ms=total_ms,
        peak_memory_delta_mb=f"{delta_bytes / BYTES_PER_MB:.3f}",
        segment_duration_ms=segment_duration,
        segment_count=segment_count,
        framework_version=__version__,
        collectors=[summarize(c) for c in collectors],
        vars=harvest_vars(collectors, request, response),
        config_display=config if config is not None else config_display(load_settings()),
    )


class Toolbar:
    """Collectors of one request, resolved from configured identifiers."""

    def __init__(self, scope: RequestScope, identifiers: Iterable[str] | None = None) -> None:
        self.scope = scope
        names = identifiers if identifiers is not None else scope.settings.collectors
        self.collectors: list[Collector] = resolve_collectors(names, scope)

    def run(
        self,
        start_time: float,
        total_elapsed: float,
        start_memory: int,
        response: ResponseContext,
        *,
        peak_memory: int | None = None,
    ) -> Snapshot:
        """Build the request's snapshot."""
        return build_snapshot(
            start_time,
            total_elapsed,
            start_memory,
            self.scope.request,
            response,
            self.collectors,
            peak_memory=peak_memory,
            config=config_display(self.scope.settings),
        )


__all__ = [
    "Toolbar",
    "build_snapshot",
    "peak_memory_usage",
    "round_to",
    "segment_layout",
    "summarize",
]
