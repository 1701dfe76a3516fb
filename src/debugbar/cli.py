# src/debugbar/cli.py
"""
debugbar command line interface.

Inspect stored toolbar snapshots from the terminal using `typer` and `rich`.

Usage
-----
    # List stored snapshots, newest first
    $ debugbar list

    # Print one snapshot as JSON (default), HTML or XML
    $ debugbar show 1700000000123456 --format xml

    # Remove every stored snapshot
    $ debugbar clear --yes
"""

from __future__ import annotations

import json
from datetime import datetime
from pathlib import Path
from typing import Annotated

import typer
from dotenv import load_dotenv
from rich.console import Console
from rich.json import JSON
from rich.prompt import Confirm
from rich.table import Table

from debugbar.core.contracts.snapshot import Snapshot
from debugbar.core.result import Err
from debugbar.formatters.dispatch import MEDIA_TYPES, format_snapshot
from debugbar.store.snapshot_store import FileSnapshotStore, SnapshotStore, get_store

load_dotenv()

app = typer.Typer(
    help="debugbar: inspect stored request toolbar snapshots.",
    rich_markup_mode="markdown",
)
console = Console()

StoreDirOption = Annotated[
    Path | None,
    typer.Option(
        "--store-dir",
        "-d",
        help="Snapshot directory (defaults to DEBUGBAR_STORE_DIR).",
    ),
]


def _open_store(store_dir: Path | None) -> SnapshotStore:
    """Helper: use an explicit directory, else the configured store."""
    if store_dir is not None:
        return FileSnapshotStore(store_dir)
    return get_store()


def _describe_id(snapshot_id: str) -> str:
    """Helper: render a microsecond time token as a local timestamp."""
    try:
        return datetime.fromtimestamp(int(snapshot_id) / 1_000_000).isoformat(sep=" ")
    except (ValueError, OverflowError, OSError):
        return "-"


@app.command("list")  # type: ignore[misc]
def list_snapshots(store_dir: StoreDirOption = None) -> None:
    """List stored snapshots, newest first."""
    store = _open_store(store_dir)
    ids = store.list_ids()
    if not ids:
        console.print("[dim]No snapshots stored.[/dim]")
        return

    table = Table(title="Stored snapshots")
    table.add_column("Id", style="cyan")
    table.add_column("Captured")
    table.add_column("Duration", justify="right")
    table.add_column("Status", justify="right")

    for snapshot_id in ids:
        loaded = store.load(snapshot_id)
        if isinstance(loaded, Err):
            continue
        snap = Snapshot.from_bytes(loaded.unwrap())
        table.add_row(
            snapshot_id,
            _describe_id(snapshot_id),
            f"{snap.total_duration_ms:.2f} ms",
            str(snap.vars.response.status_code),
        )
    console.print(table)


@app.command()  # type: ignore[misc]
def show(
    snapshot_id: Annotated[str, typer.Argument(help="Snapshot id (the Debugbar-Time header).")],
    fmt: Annotated[
        str,
        typer.Option("--format", "-f", help="Output format: json, html or xml."),
    ] = "json",
    store_dir: StoreDirOption = None,
) -> None:
    """Print one stored snapshot in the requested format."""
    if fmt not in MEDIA_TYPES:
        console.print(f"[bold red]Unknown format:[/bold red] {fmt}")
        raise typer.Exit(code=2)

    loaded = _open_store(store_dir).load(snapshot_id)
    if isinstance(loaded, Err):
        console.print(f"[bold red]❌ {loaded.unwrap_err()}[/bold red]")
        raise typer.Exit(code=1)

    body = format_snapshot(loaded.unwrap(), fmt)
    if fmt == "json":
        console.print(JSON(json.dumps(json.loads(body))), soft_wrap=True)
    else:
        typer.echo(body.decode("utf-8"))


@app.command()  # type: ignore[misc]
def clear(
    yes: Annotated[bool, typer.Option("--yes", "-y", help="Do not ask for confirmation.")] = False,
    store_dir: StoreDirOption = None,
) -> None:
    """Delete every stored snapshot."""
    store = _open_store(store_dir)
    ids = store.list_ids()
    if not ids:
        console.print("[dim]Nothing to clear.[/dim]")
        return
    if not yes and not Confirm.ask(f"Delete {len(ids)} snapshot(s)?", default=False):
        raise typer.Exit(code=0)

    removed = sum(1 for snapshot_id in ids if store.delete(snapshot_id))
    console.print(f"[green]Removed {removed} snapshot(s).[/green]")


if __name__ == "__main__":
    app()
