"""TimelineEntry: one named, timed span drawn as a bar on the toolbar ruler."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class TimelineEntry(BaseModel):
    """A span attributed to a component.

    ``start`` is expressed on the same clock as the snapshot's
    ``request_start_time`` (wall-clock seconds); renderers subtract the
    request start to get the offset.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    component: str = Field(default="", description="Title of the owning collector")
    start: float = Field(ge=0.0, description="Start time in seconds")
    duration: float = Field(ge=0.0, description="Span length in seconds")


__all__ = ["TimelineEntry"]
