"""Pydantic contracts for toolbar snapshots."""

from __future__ import annotations

from .snapshot import CollectorSummary, ResponseVars, Snapshot, SnapshotVars
from .timeline import TimelineEntry

__all__ = [
    "CollectorSummary",
    "ResponseVars",
    "Snapshot",
    "SnapshotVars",
    "TimelineEntry",
]
