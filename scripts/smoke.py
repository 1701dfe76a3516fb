# scripts/smoke.py
"""
Smoke Test Script for the debugbar middleware.

Drives the demo application in-process, then fetches the toolbar snapshot
of that request back through the query-string entry point.

Usage
-----
1. Profile the demo page and print the JSON snapshot summary:
    $ uv run python scripts/smoke.py

2. Profile another path and dump the toolbar as XML:
    $ uv run python scripts/smoke.py --path /items/7 --format xml

Dependencies
------------
TestClient needs httpx (installed with the `test` extra):
    $ uv pip install -e ".[test]"
"""

import argparse
import logging
import sys
from pathlib import Path

from dotenv import load_dotenv
from fastapi.testclient import TestClient

from debugbar.api.app import create_app
from debugbar.api.middleware import TIME_HEADER
from debugbar.core.contracts.snapshot import Snapshot
from debugbar.core.settings import Settings
from debugbar.store.snapshot_store import MemorySnapshotStore

# --------------------------------------------------------------------------- #
# Environment Setup
# --------------------------------------------------------------------------- #
env_path = Path(".env")
if env_path.exists():
    load_dotenv(env_path)
    print("✅ Loaded .env file")

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    handlers=[logging.StreamHandler(sys.stdout)],
)

ACCEPT = {"json": "application/json", "html": "text/html", "xml": "application/xml"}


def main() -> None:
    """Execute the smoke test workflow."""
    parser = argparse.ArgumentParser(description="Run debugbar Smoke Test")
    parser.add_argument("--path", "-p", default="/", help="Demo path to profile")
    parser.add_argument("--format", "-f", choices=sorted(ACCEPT), default="json")
    args = parser.parse_args()

    settings = Settings(store_backend="memory", trace_memory=True)
    client = TestClient(create_app(settings=settings, store=MemorySnapshotStore()))

    # 1. Profiled request
    res = client.get(args.path)
    snapshot_id = res.headers.get(TIME_HEADER)
    if not snapshot_id:
        print(f"❌ No {TIME_HEADER} header on {args.path} (status {res.status_code})")
        return
    print(f"\n📨 {args.path} -> {res.status_code}, snapshot {snapshot_id}")

    # 2. Toolbar fetch
    toolbar = client.get(
        "/", params={"debugbar_time": snapshot_id}, headers={"accept": ACCEPT[args.format]}
    )
    if toolbar.status_code != 200:
        print(f"❌ Toolbar fetch failed: {toolbar.status_code} {toolbar.text}")
        return

    if args.format != "json":
        print(toolbar.text)
        return

    # 3. Inspection Phase
    snap = Snapshot.from_bytes(toolbar.content)
    print("\n" + "=" * 60)
    print(f"✅ {snap.total_duration_ms:.2f} ms, peak +{snap.peak_memory_delta_mb} MB")
    print(f"   ruler: {snap.segment_count} x {snap.segment_duration_ms} ms")
    print("=" * 60)
    for collector in snap.collectors:
        badge = "" if collector.badge_value is None else f" ({collector.badge_value})"
        print(f"  - {collector.title}{badge}: {len(collector.timeline_data)} timeline spans")
    print(f"\n🌐 {snap.vars.request} {snap.vars.response.status_code} {snap.vars.response.reason}")


if __name__ == "__main__":
    main()
