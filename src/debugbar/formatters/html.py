"""HTML rendering of a snapshot through Jinja2 templates shipped in the package."""

from __future__ import annotations

from functools import lru_cache
from typing import Any

from jinja2 import Environment, PackageLoader, StrictUndefined

from debugbar.core.contracts.snapshot import Snapshot
from debugbar.toolbar.timeline import render_timeline

TOOLBAR_TEMPLATE = "toolbar.html.j2"


def _is_mapping(value: Any) -> bool:
    return isinstance(value, dict)


def _is_rows(value: Any) -> bool:
    return isinstance(value, list) and bool(value) and all(isinstance(v, dict) for v in value)


@lru_cache(maxsize=1)
def get_environment() -> Environment:
    """Return the cached template environment."""
    env = Environment(
        loader=PackageLoader("debugbar", "templates"),
        autoescape=True,
        undefined=StrictUndefined,
        trim_blocks=True,
        lstrip_blocks=True,
    )
    env.tests["mapping_value"] = _is_mapping
    env.tests["rows"] = _is_rows
    return env


def template_bindings(snapshot: Snapshot) -> dict[str, Any]:
    """Expose every snapshot field, plus the placed timeline rows."""
    bindings: dict[str, Any] = {name: getattr(snapshot, name) for name in Snapshot.model_fields}
    bindings["timeline_rows"] = render_timeline(
        snapshot.collectors,
        snapshot.request_start_time,
        snapshot.segment_count,
        snapshot.segment_duration_ms,
    )
    return bindings


def render_html(snapshot: Snapshot, template: str = TOOLBAR_TEMPLATE) -> str:
    """Render the toolbar markup for ``snapshot``."""
    return get_environment().get_template(template).render(**template_bindings(snapshot))


__all__ = ["TOOLBAR_TEMPLATE", "get_environment", "render_html", "template_bindings"]
