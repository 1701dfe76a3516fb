"""Peak-memory sampling shared by concurrently profiled requests.

``tracemalloc`` keeps a single process-wide peak counter. Resetting it at
the start of every request would erase the peak of any request already in
flight, so `MemoryWatch` resets it only when no other watched request is
running. Each request then reads the peak when it finishes.

Overlapping requests therefore share one high-water mark: a request's
reported peak covers every allocation made while it ran, including those
of requests that overlapped it. It never under-reports its own peak.
"""

from __future__ import annotations

import threading
import tracemalloc
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass


@dataclass(slots=True)
class MemorySample:
    """Traced bytes at request start and the peak seen by request end.

    ``peak`` stays None when ``tracemalloc`` was not tracing at the start.
    """

    start: int = 0
    peak: int | None = None

    @property
    def delta(self) -> int:
        if self.peak is None:
            return 0
        return max(0, self.peak - self.start)


class MemoryWatch:
    """Reference-counted owner of the ``tracemalloc`` peak counter."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._active = 0

    @property
    def active(self) -> int:
        return self._active

    def enter(self) -> MemorySample:
        """Register a request; reset the peak only if it is the only one."""
        with self._lock:
            if not tracemalloc.is_tracing():
                return MemorySample()
            if self._active == 0:
                tracemalloc.reset_peak()
            self._active += 1
            return MemorySample(start=tracemalloc.get_traced_memory()[0], peak=0)

    def leave(self, sample: MemorySample) -> MemorySample:
        """Record the peak for ``sample`` and unregister its request."""
        if sample.peak is None:
            return sample
        with self._lock:
            self._active -= 1
            if tracemalloc.is_tracing():
                sample.peak = max(sample.start, tracemalloc.get_traced_memory()[1])
            else:
                sample.peak = sample.start
        return sample

    @contextmanager
    def watch(self) -> Iterator[MemorySample]:
        """Sample memory around the enclosed block."""
        sample = self.enter()
        try:
            yield sample
        finally:
            self.leave(sample)


memory_watch = MemoryWatch()


__all__ = ["MemorySample", "MemoryWatch", "memory_watch"]
