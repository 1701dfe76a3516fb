"""Timers collector: the request's benchmark as timeline spans."""

from __future__ import annotations

from typing import Any

from debugbar.collectors.base import BaseCollector
from debugbar.core.contracts.timeline import TimelineEntry


class TimersCollector(BaseCollector):
    """Expose every benchmark timer of the request."""

    title = "Timers"
    has_timeline = True
    has_tabs = False
    has_labels = True

    def format_timeline_data(self) -> list[TimelineEntry]:
        return [
            TimelineEntry(name=name, start=timer["start"], duration=timer["duration"])
            for name, timer in self.scope.benchmark.get_timers().items()
        ]

    def display(self) -> Any:
        return [
            {"name": name, "duration_ms": round(timer["duration"] * 1000, 3)}
            for name, timer in self.scope.benchmark.get_timers().items()
        ]

    def get_badge_value(self) -> int | None:
        return len(self.scope.benchmark)

    def is_empty(self) -> bool:
        return len(self.scope.benchmark) == 0

    def icon(self) -> str:
        return "clock"
