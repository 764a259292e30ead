"""Saved viewport commands: show."""

from __future__ import annotations

from typing import Annotated

import typer

from forcegraph.cli._format import print_json
from forcegraph.cli._store import open_layout_store
from forcegraph.viewport import ZOOM_RANGES

app = typer.Typer(help="Inspect saved viewports.")


@app.command("show")
def viewport_show(
    db: Annotated[str | None, typer.Option("--db", help="Layout store path (.json or SQLite)")] = None,
    view: Annotated[str, typer.Option("--view", help="View type: graph or board")] = "graph",
    as_json: Annotated[bool, typer.Option("--json", help="Output as JSON")] = False,
    output: Annotated[str | None, typer.Option("--output", help="Write JSON to file")] = None,
):
    """Show the saved pan and zoom for a view type."""
    if view not in ZOOM_RANGES:
        print(f"Error: Unknown view '{view}'. Use one of: {', '.join(ZOOM_RANGES)}")
        raise typer.Exit(1)

    store = open_layout_store(db)
    try:
        viewport = store.load_viewport(view)
    finally:
        store.close()

    if as_json:
        print_json("viewport.show", {"view": view, "viewport": viewport.to_dict() if viewport else None}, output)
        return

    if viewport is None:
        print(f"\n  No saved {view} viewport (defaults: pan 0,0 zoom 1).")
        return

    zoom_range = ZOOM_RANGES[view]
    print(f"\n  {view} viewport")
    print(f"    Pan:  {viewport.pan_x:.1f}, {viewport.pan_y:.1f}")
    print(f"    Zoom: {viewport.zoom:.2f}  (range {zoom_range.min}-{zoom_range.max})")
