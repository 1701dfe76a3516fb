"""
Integration tests for the toolbar middleware.

We drive the demo application through Starlette's TestClient and then fetch
the stored snapshot back through the toolbar's own query-string entry point.
"""

from __future__ import annotations

import logging
import xml.etree.ElementTree as ET
from pathlib import Path
from typing import Any

import pytest
from fastapi.testclient import TestClient

from debugbar.api import middleware
from debugbar.api.app import create_app
from debugbar.api.middleware import TIME_HEADER, inject_before_body_end, loader_tag, time_token
from debugbar.core.contracts.snapshot import Snapshot
from debugbar.core.settings import Settings
from debugbar.store.snapshot_store import MemorySnapshotStore


@pytest.fixture  # type: ignore[misc]
def store() -> MemorySnapshotStore:
    return MemorySnapshotStore()


@pytest.fixture  # type: ignore[misc]
def client(test_settings: Settings, store: MemorySnapshotStore) -> TestClient:
    return TestClient(create_app(settings=test_settings, store=store))


def fetch_snapshot(client: TestClient, snapshot_id: str) -> Snapshot:
    """Helper: load a stored snapshot as JSON through the entry point."""
    res = client.get(f"/?debugbar_time={snapshot_id}", headers={"accept": "application/json"})
    assert res.status_code == 200
    assert res.headers["content-type"].startswith("application/json")
    return Snapshot.from_bytes(res.content)


def by_title(snapshot: Snapshot) -> dict[str, object]:
    return {c.title: c for c in snapshot.collectors}


def test_html_response_gets_header_and_loader(client: TestClient, store: MemorySnapshotStore) -> None:
    res = client.get("/?name=Ada")

    assert res.status_code == 200
    snapshot_id = res.headers[TIME_HEADER]
    assert snapshot_id.isdigit()
    assert store.exists(snapshot_id)

    body = res.text
    tag = f'<script id="debugbar_loader" data-time="{snapshot_id}"'
    assert tag in body
    assert body.index(tag) < body.index("</body>")
    assert int(res.headers["content-length"]) == len(res.content)


def test_snapshot_holds_builtin_collectors(client: TestClient) -> None:
    res = client.get("/?name=<Ada>")
    assert "Hello, &lt;Ada&gt;" in res.text

    snapshot = fetch_snapshot(client, res.headers[TIME_HEADER])

    assert [c.title for c in snapshot.collectors] == ["Timers", "Routes", "Logs", "Config"]
    timers = by_title(snapshot)["Timers"]
    names = [e.name for e in timers.timeline_data]  # type: ignore[attr-defined]
    assert names[0] == "total_execution"
    assert "render_page" in names

    logs = by_title(snapshot)["Logs"]
    messages = [row["message"] for row in logs.display]  # type: ignore[attr-defined]
    assert "Rendered demo page for <Ada>" in messages

    assert snapshot.vars.get == {"name": "&lt;Ada&gt;"}
    assert snapshot.vars.response.status_code == 200
    assert snapshot.vars.request == "HTTP/1.1"
    assert snapshot.config_display["environment"] == "test"
    assert snapshot.total_duration_ms >= 0
    assert snapshot.segment_count >= 1


def test_route_and_path_params_recorded(client: TestClient) -> None:
    res = client.get("/items/3")
    assert res.json() == {"id": 3, "name": "item-3"}
    # JSON responses are tagged but never rewritten
    assert "debugbar_loader" not in res.text

    snapshot = fetch_snapshot(client, res.headers[TIME_HEADER])
    route = snapshot.vars.var_data["Route"]
    assert route["path"] == "/items/{item_id}"
    assert route["param:item_id"] == "3"
    assert route["method"] == "GET"


def test_form_body_is_harvested_and_still_reaches_the_app(client: TestClient) -> None:
    res = client.post("/echo", data={"message": "<hi>"})
    assert res.json() == {"message": "<hi>"}

    snapshot = fetch_snapshot(client, res.headers[TIME_HEADER])
    assert snapshot.vars.post == {"message": "&lt;hi&gt;"}


def test_toolbar_requests_are_not_profiled(client: TestClient, store: MemorySnapshotStore) -> None:
    res = client.get("/?debugbar")
    assert res.status_code == 200
    assert res.headers["content-type"].startswith("application/javascript")
    assert TIME_HEADER not in res.headers
    assert store.list_ids() == []


def test_missing_snapshot_is_404_in_negotiated_format(client: TestClient) -> None:
    res = client.get("/?debugbar_time=1", headers={"accept": "application/xml"})
    assert res.status_code == 404
    assert res.headers["content-type"].startswith("application/xml")
    assert b"debugbar_1" in res.content


def test_html_toolbar_fetch(client: TestClient) -> None:
    snapshot_id = client.get("/").headers[TIME_HEADER]
    res = client.get(f"/?debugbar_time={snapshot_id}", headers={"accept": "text/html"})
    assert res.status_code == 200
    assert 'id="debugbar-tab-logs"' in res.text


def test_xml_toolbar_fetch_survives_control_characters(client: TestClient) -> None:
    snapshot_id = client.get("/?x=a%01b").headers[TIME_HEADER]
    res = client.get(f"/?debugbar_time={snapshot_id}", headers={"accept": "application/xml"})

    assert res.status_code == 200
    root = ET.fromstring(res.content)
    assert root.findtext("./vars/get/x") == "a\ufffdb"


def test_enabled_in_production_warns(
    tmp_path: Path, store: MemorySnapshotStore, monkeypatch: Any, caplog: Any
) -> None:
    """Turning the toolbar on in prod is allowed but logged."""
    monkeypatch.setattr(middleware, "logger", logging.getLogger("tests.middleware"))
    settings = Settings(
        environment="prod", store_backend="memory", store_dir=tmp_path, trace_memory=False
    )
    with caplog.at_level(logging.WARNING):
        res = TestClient(create_app(settings=settings, store=store)).get("/health")

    assert TIME_HEADER in res.headers
    assert "Toolbar enabled in production" in caplog.text


def test_disabled_toolbar_is_transparent(tmp_path: Path, store: MemorySnapshotStore) -> None:
    settings = Settings(
        enabled=False, store_backend="memory", store_dir=tmp_path, trace_memory=False
    )
    client = TestClient(create_app(settings=settings, store=store))

    res = client.get("/")
    assert TIME_HEADER not in res.headers
    assert "debugbar_loader" not in res.text
    assert store.list_ids() == []


def test_injection_can_be_turned_off(tmp_path: Path, store: MemorySnapshotStore) -> None:
    settings = Settings(inject=False, store_backend="memory", store_dir=tmp_path, trace_memory=False)
    res = TestClient(create_app(settings=settings, store=store)).get("/")
    assert TIME_HEADER in res.headers
    assert "debugbar_loader" not in res.text


def test_health_check(client: TestClient) -> None:
    res = client.get("/health")
    assert res.status_code == 200
    assert res.json()["status"] == "ok"
    assert res.json()["environment"] == "test"


def test_injection_helpers() -> None:
    tag = loader_tag("12", "/a")
    assert b'data-time="12"' in tag
    assert b'src="/a?debugbar"' in tag
    assert inject_before_body_end(b"<body>x</BODY>", b"<t>") == b"<body>x<t></BODY>"
    assert inject_before_body_end(b"plain", b"<t>") == b"plain<t>"
    assert time_token(1.5) == "1500000"
