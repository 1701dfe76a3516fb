"""Timeline merge and ruler placement.

Two steps turn collector spans into bars on the toolbar's ruler:

1. `merge_timelines` flattens the spans of every summary that declares
   timeline data. Order is collector order, then each collector's own
   order; no de-duplication. ``chronological=True`` applies a stable sort
   by start time on top of that.
2. `render_timeline` positions each span on a ruler of ``segment_count``
   cells, each ``segment_duration_ms`` wide::

       window  = segment_count * segment_duration_ms
       offset% = (start - request_start) * 1000 / window * 100
       length% = duration * 1000 / window * 100

   Percentages are not clamped. A span that starts before the request or
   runs past the window yields values outside [0, 100]; the markup clips
   them with ``overflow: hidden``.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from debugbar.core.contracts.snapshot import CollectorSummary
from debugbar.core.contracts.timeline import TimelineEntry


@dataclass(frozen=True, slots=True)
class TimelineRow:
    """A span placed on the ruler."""

    name: str
    component: str
    duration_ms: float
    offset_percent: float
    length_percent: float


def merge_timelines(
    summaries: Iterable[CollectorSummary], *, chronological: bool = False
) -> list[TimelineEntry]:
    """Concatenate the timeline spans of all summaries that declare them."""
    merged: list[TimelineEntry] = []
    for summary in summaries:
        if not summary.has_timeline_data:
            continue
        merged.extend(summary.timeline_data)
    if chronological:
        merged.sort(key=lambda entry: entry.start)
    return merged


def render_timeline(
    summaries: Iterable[CollectorSummary],
    request_start: float,
    segment_count: int,
    segment_duration_ms: float,
    *,
    chronological: bool = False,
) -> list[TimelineRow]:
    """Place every merged span on the ruler."""
    display_ms = segment_count * segment_duration_ms
    rows: list[TimelineRow] = []
    for entry in merge_timelines(summaries, chronological=chronological):
        if display_ms > 0:
            offset = ((entry.start - request_start) * 1000 / display_ms) * 100
            length = (entry.duration * 1000 / display_ms) * 100
        else:
            offset = length = 0.0
        rows.append(
            TimelineRow(
                name=entry.name,
                component=entry.component,
                duration_ms=entry.duration * 1000,
                offset_percent=offset,
                length_percent=length,
            )
        )
    return rows


__all__ = ["TimelineRow", "merge_timelines", "render_timeline"]
