"""Snapshot storage backends."""

from __future__ import annotations

from .snapshot_store import (
    FileSnapshotStore,
    MemorySnapshotStore,
    SnapshotStore,
    StoreHolder,
    get_store,
    sanitize_id,
)

__all__ = [
    "FileSnapshotStore",
    "MemorySnapshotStore",
    "SnapshotStore",
    "StoreHolder",
    "get_store",
    "sanitize_id",
]
