"""Named wall-clock timers for one request.

Application code reaches the request's benchmark through
``request.state.debugbar.benchmark`` and marks spans either manually or with
the ``measure`` context manager::

    bench = request.state.debugbar.benchmark
    with bench.measure("render"):
        ...

The timers collector turns every timer into a timeline entry.
"""

from __future__ import annotations

import time
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass


@dataclass(slots=True)
class TimerSpan:
    """Start/end pair in wall-clock seconds. ``end`` is None while running."""

    start: float
    end: float | None = None


class Benchmark:
    """Collection of named timers, kept in start order."""

    def __init__(self) -> None:
        self._timers: dict[str, TimerSpan] = {}

    def start(self, name: str, at: float | None = None) -> Benchmark:
        """Start (or restart) timer ``name``; ``at`` overrides the clock."""
        self._timers[name] = TimerSpan(start=time.time() if at is None else at)
        return self

    def stop(self, name: str, at: float | None = None) -> Benchmark:
        """Stop timer ``name``. Raises ``KeyError`` if it was never started."""
        span = self._timers[name]
        span.end = time.time() if at is None else at
        return self

    @contextmanager
    def measure(self, name: str) -> Iterator[Benchmark]:
        """Time the enclosed block under ``name``."""
        self.start(name)
        try:
            yield self
        finally:
            self.stop(name)

    def get_timers(self) -> dict[str, dict[str, float]]:
        """Return ``{name: {start, end, duration}}``; running timers end now."""
        now = time.time()
        out: dict[str, dict[str, float]] = {}
        for name, span in self._timers.items():
            end = span.end if span.end is not None else now
            out[name] = {"start": span.start, "end": end, "duration": max(0.0, end - span.start)}
        return out

    def __contains__(self, name: object) -> bool:
        return name in self._timers

    def __len__(self) -> int:
        return len(self._timers)


__all__ = ["Benchmark", "TimerSpan"]
