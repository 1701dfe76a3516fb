"""Snapshot contracts: the immutable diagnostic record of one profiled request.

This module defines the Pydantic v2 models persisted by the snapshot store
and consumed by every output format:

- `CollectorSummary`: flattened answers of one collector at build time.
- `ResponseVars`    : status code and escaped reason phrase.
- `SnapshotVars`    : harvested variable groups plus the derived request line.
- `Snapshot`        : the whole record.

Persisted encoding
------------------
One UTF-8 JSON document per snapshot (`Snapshot.to_bytes()`), keyed by the
field names below. The `json` output format serves these bytes unchanged.

Notes
-----
- All models are frozen; a snapshot is never edited after the builder
  returns it.
- Strings inside `SnapshotVars` are already HTML-escaped by the harvester.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from .timeline import TimelineEntry

VarGroup = dict[str, str]


class CollectorSummary(BaseModel):
    """Serialization-ready projection of one collector."""

    model_config = ConfigDict(frozen=True)

    title: str
    title_safe: str
    title_details: str = ""
    display: Any = Field(default=None, description="Rendered tab body (markup or JSON-safe data)")
    badge_value: int | None = None
    is_empty: bool = False
    has_tab_content: bool = True
    has_label: bool = False
    icon: str = ""
    has_timeline_data: bool = False
    timeline_data: list[TimelineEntry] = Field(default_factory=list)


class ResponseVars(BaseModel):
    """Status line of the profiled response."""

    model_config = ConfigDict(frozen=True)

    status_code: int
    reason: str


class SnapshotVars(BaseModel):
    """Harvested variable groups.

    Collector-declared groups live under `var_data`; the request groups are
    separate fields, so a collector heading named ``get`` never shadows the
    query-string group.
    """

    model_config = ConfigDict(frozen=True)

    var_data: dict[str, VarGroup] = Field(default_factory=dict)
    session: VarGroup | None = None
    get: VarGroup = Field(default_factory=dict)
    post: VarGroup = Field(default_factory=dict)
    headers: VarGroup = Field(default_factory=dict)
    cookies: VarGroup = Field(default_factory=dict)
    request: str = Field(description='Transport and protocol, e.g. "HTTPS/1.1"')
    response: ResponseVars

    def groups(self) -> dict[str, VarGroup]:
        """Return request groups in display order, skipping an absent session."""
        out: dict[str, VarGroup] = {}
        if self.session:
            out["session"] = self.session
        out["get"] = self.get
        out["post"] = self.post
        out["headers"] = self.headers
        out["cookies"] = self.cookies
        return out


class Snapshot(BaseModel):
    """Complete diagnostic record for one profiled request."""

    model_config = ConfigDict(frozen=True)

    request_start_time: float = Field(description="Wall-clock start of the request (seconds)")
    total_duration_ms: float
    peak_memory_delta_mb: str = Field(description="Peak memory growth, 3 decimals")
    segment_duration_ms: float
    segment_count: int
    framework_version: str
    collectors: list[CollectorSummary] = Field(default_factory=list)
    vars: SnapshotVars
    config_display: Any = None

    def to_bytes(self) -> bytes:
        """Encode to the persisted JSON form."""
        return self.model_dump_json().encode("utf-8")

    @classmethod
    def from_bytes(cls, data: bytes) -> Snapshot:
        """Decode the persisted JSON form."""
        return cls.model_validate_json(data)


__all__ = ["CollectorSummary", "ResponseVars", "Snapshot", "SnapshotVars", "VarGroup"]
