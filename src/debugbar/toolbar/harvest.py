"""Variable harvesting for the toolbar's Vars tab.

Groups are filled in a fixed order: collector-declared headings, then the
session (only when present and non-empty), query string, form body,
headers and cookies. Every key and value passes through
:func:`~debugbar.toolbar.escape.make_safe` exactly once.

Collector headings are merged key by key: when two collectors declare the
same heading, the first one to provide a key keeps it.
"""

from __future__ import annotations

from collections.abc import Iterable

from debugbar.collectors.base import Collector
from debugbar.core.contracts.snapshot import ResponseVars, SnapshotVars, VarGroup
from debugbar.http.context import RequestContext, ResponseContext
from debugbar.toolbar.escape import make_safe, make_safe_mapping


def collect_var_data(collectors: Iterable[Collector]) -> dict[str, VarGroup]:
    """Merge the var data of every collector that declares some."""
    data: dict[str, VarGroup] = {}
    for collector in collectors:
        if not collector.has_var_data():
            continue
        for heading, items in collector.get_var_data().items():
            group = data.setdefault(make_safe(heading), {})
            for key, value in make_safe_mapping(items).items():
                group.setdefault(key, value)
    return data


def harvest_headers(request: RequestContext) -> VarGroup:
    """One entry per header name; repeated values are escaped then joined."""
    out: VarGroup = {}
    for name, values in request.header_values().items():
        present = [v for v in values if v]
        if not present:
            continue
        out[make_safe(name)] = ", ".join(make_safe(v) for v in present)
    return out


def request_line(request: RequestContext) -> str:
    """Return e.g. ``"HTTPS/2"`` or ``"HTTP/1.1"``."""
    scheme = "HTTPS" if request.is_secure else "HTTP"
    return f"{scheme}/{request.protocol_version}"


def harvest_vars(
    collectors: Iterable[Collector],
    request: RequestContext,
    response: ResponseContext,
) -> SnapshotVars:
    """Build the escaped variable groups of a snapshot."""
    session = make_safe_mapping(request.session) if request.session else None
    return SnapshotVars(
        var_data=collect_var_data(collectors),
        session=session or None,
        get=make_safe_mapping(request.query),
        post=make_safe_mapping(request.post),
        headers=harvest_headers(request),
        cookies=make_safe_mapping(request.cookies),
        request=request_line(request),
        response=ResponseVars(
            status_code=response.status_code,
            reason=make_safe(response.reason),
        ),
    )


__all__ = ["collect_var_data", "harvest_headers", "harvest_vars", "request_line"]
