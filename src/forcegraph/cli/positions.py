"""Saved position commands: ls, reset."""

from __future__ import annotations

from typing import Annotated

import typer

from forcegraph.cli._format import format_coord, print_json, print_lines, print_table
from forcegraph.cli._store import open_layout_store

app = typer.Typer(help="Inspect and reset saved node positions.")


@app.command("ls")
def positions_ls(
    db: Annotated[str | None, typer.Option("--db", help="Layout store path (.json or SQLite)")] = None,
    pinned_only: Annotated[bool, typer.Option("--pinned", help="Only pinned nodes")] = False,
    as_json: Annotated[bool, typer.Option("--json", help="Output as JSON")] = False,
    output: Annotated[str | None, typer.Option("--output", help="Write JSON to file")] = None,
):
    """List saved node positions."""
    store = open_layout_store(db)
    try:
        positions = store.load_positions()
        pinned_count = store.load_pinned_count()
    finally:
        store.close()

    if pinned_only:
        positions = {k: v for k, v in positions.items() if v.pinned}

    if as_json:
        data = {
            "positions": {node_id: p.to_dict() for node_id, p in sorted(positions.items())},
            "count": len(positions),
            "pinned_count": pinned_count,
        }
        print_json("positions.ls", data, output)
        return

    if not positions:
        print("\n  No saved positions.")
        return

    headers = ["Node", "X", "Y", "Pinned"]
    rows = [
        [node_id, format_coord(p.x), format_coord(p.y), "yes" if p.pinned else ""]
        for node_id, p in sorted(positions.items())
    ]
    print(f"\n  Saved positions ({len(positions)}, {pinned_count} pinned):\n")
    print_lines(print_table(headers, rows))


@app.command("reset")
def positions_reset(
    db: Annotated[str | None, typer.Option("--db", help="Layout store path (.json or SQLite)")] = None,
    yes: Annotated[bool, typer.Option("--yes", "-y", help="Do not ask for confirmation")] = False,
):
    """Forget saved positions so the next load uses the default layout."""
    store = open_layout_store(db)
    try:
        count = len(store.load_positions())
        if count and not yes:
            typer.confirm(f"Forget {count} saved position(s)?", abort=True)
        store.clear_positions()
    finally:
        store.close()
    print(f"Cleared {count} saved position(s).")
