"""Exception types raised (or carried) by the toolbar core.

Kinds
-----
- :class:`CollectorResolutionError`: a configured collector identifier could
  not be turned into a collector. The tolerant resolver logs and skips it.
- :class:`SnapshotNotFound`: no stored snapshot exists for an id. Returned as
  the error payload of a :class:`~debugbar.core.result.Result`, not raised.
- :class:`UnsupportedFormatError`: a format outside html/json/xml reached
  the dispatcher. This is a caller bug.

Errors thrown by a collector while it answers a query are not wrapped; they
propagate to whoever asked for the snapshot.
"""

from __future__ import annotations


class DebugbarError(Exception):
    """Base class for all toolbar errors."""


class CollectorResolutionError(DebugbarError):
    """A collector identifier does not resolve to a constructible collector."""

    def __init__(self, identifier: str, reason: str) -> None:
        super().__init__(f"Cannot resolve collector {identifier!r}: {reason}")
        self.identifier = identifier
        self.reason = reason


class SnapshotNotFound(DebugbarError):
    """No snapshot is stored under the requested id."""

    def __init__(self, snapshot_id: str) -> None:
        super().__init__(f"Snapshot {snapshot_id!r} not found")
        self.snapshot_id = snapshot_id


class UnsupportedFormatError(DebugbarError, ValueError):
    """Requested output format is not one of html, json or xml."""

    def __init__(self, fmt: str) -> None:
        super().__init__(f"Unsupported toolbar format: {fmt!r}")
        self.format = fmt


__all__ = [
    "DebugbarError",
    "CollectorResolutionError",
    "SnapshotNotFound",
    "UnsupportedFormatError",
]
