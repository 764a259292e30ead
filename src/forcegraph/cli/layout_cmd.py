"""CLI command for headless layout.

Provides `forcegraph layout` as a top-level command.
"""

from __future__ import annotations

import random
import sys
from pathlib import Path
from typing import TYPE_CHECKING, Annotated, Any

import typer

from forcegraph.cli._format import format_coord, print_json, print_lines, print_table
from forcegraph.config import load_config
from forcegraph.engine import GraphEngine
from forcegraph.exceptions import MalformedInputError
from forcegraph.graph import load_graph_file
from forcegraph.loop import ManualScheduler
from forcegraph.persistence import LayoutStore, open_store
from forcegraph.physics import kinetic_energy

if TYPE_CHECKING:
    from forcegraph.persistence import RecordStore


def _is_tty() -> bool:
    """Check if stdout is a TTY."""
    try:
        return sys.stdout.isatty()
    except (AttributeError, ValueError):
        return False


def _run_ticks(engine: GraphEngine, ticks: int, show_progress: bool) -> None:
    """Simulate, with a rich progress bar on a terminal."""
    if not show_progress:
        engine.settle(ticks)
        return

    from rich.progress import BarColumn, MofNCompleteColumn, Progress, SpinnerColumn, TextColumn, TimeElapsedColumn

    with Progress(
        SpinnerColumn(),
        TextColumn("{task.description}"),
        BarColumn(),
        MofNCompleteColumn(),
        TimeElapsedColumn(),
        transient=True,
    ) as progress:
        task = progress.add_task("Simulating", total=ticks)
        for _ in range(ticks):
            engine.settle(1)
            progress.advance(task, 1)


def _summary(engine: GraphEngine, restored: int, ticks: int) -> dict[str, Any]:
    model = engine.model
    return {
        "nodes": len(model),
        "edges": len(model.edges),
        "dangling_edges": len(model.dangling_edges()),
        "components": model.component_count(),
        "pinned": model.pinned_count(),
        "visible": len(engine.visible_node_ids()),
        "restored": restored,
        "ticks": ticks,
        "kinetic_energy": round(kinetic_energy(model.nodes), 4),
        "viewport": engine.viewport.to_dict(),
    }


def register_commands(app: typer.Typer) -> None:
    """Register `layout` as a top-level command on the app."""

    @app.command("layout")
    def layout_cmd(
        graph_file: Annotated[Path, typer.Argument(help='JSON file: {"concepts": [...], "relationships": [...]}')],
        db: Annotated[str | None, typer.Option("--db", help="Layout store path (.json or SQLite)")] = None,
        ticks: Annotated[int, typer.Option("--ticks", min=0, help="Simulation ticks to run")] = 300,
        width: Annotated[float, typer.Option("--width", min=1, help="Surface width")] = 600,
        height: Annotated[float, typer.Option("--height", min=1, help="Surface height")] = 400,
        seed: Annotated[int | None, typer.Option("--seed", help="Seed for default-layout jitter")] = None,
        fit: Annotated[bool, typer.Option("--fit", help="Zoom to fit after simulating")] = False,
        svg: Annotated[Path | None, typer.Option("--svg", help="Write an SVG rendering")] = None,
        limit: Annotated[int, typer.Option("--limit", help="Max node rows to print")] = 20,
        as_json: Annotated[bool, typer.Option("--json", help="Output as JSON")] = False,
        output: Annotated[str | None, typer.Option("--output", help="Write JSON to file")] = None,
    ):
        """Lay out a concept graph and save the positions."""
        config = load_config()
        db = db or config.db

        try:
            concepts, relationships = load_graph_file(graph_file)
        except OSError as e:
            print(f"Error: Could not read '{graph_file}': {e}")
            raise typer.Exit(1) from e
        except MalformedInputError as e:
            print(f"Error: '{graph_file}' is not a graph payload: {e.message}")
            raise typer.Exit(1) from e

        backend: RecordStore | None = open_store(db) if db else None
        engine = GraphEngine(
            config=config,
            store=LayoutStore(backend) if backend is not None else None,
            scheduler=ManualScheduler(),
            rng=random.Random(seed),
        )
        try:
            engine.resize(width, height)
            restored = engine.load(concepts, relationships)
            _run_ticks(engine, ticks, show_progress=_is_tty() and not as_json)
            if fit:
                engine.zoom_to_fit()
            engine.save_positions()
            if svg is not None:
                svg.write_text(engine.to_svg(), encoding="utf-8")
            summary = _summary(engine, restored, ticks)
            snapshot = engine.snapshot()
        finally:
            engine.close()

        if as_json:
            print_json("layout", {**summary, "positions": snapshot, "db": db}, output)
            return

        print(
            f"\nLayout: {summary['nodes']} nodes | {summary['edges']} edges"
            f" | {summary['components']} components | {ticks} ticks\n"
        )
        headers = ["Node", "X", "Y", "Pinned"]
        rows = [
            [node_id, format_coord(p["x"]), format_coord(p["y"]), "yes" if p["pinned"] else ""]
            for node_id, p in list(snapshot.items())[:limit]
        ]
        print_lines(print_table(headers, rows))
        if len(snapshot) > limit:
            print(f"\n  # ... {len(snapshot) - limit} more nodes (use --limit to control)")

        if summary["restored"]:
            print(f"\n  Restored {summary['restored']} saved position(s).")
        if summary["dangling_edges"]:
            print(f"  Skipped {summary['dangling_edges']} edge(s) with unknown endpoints.")
        if summary["visible"] < summary["nodes"]:
            print(f"  {summary['nodes'] - summary['visible']} node(s) off screen (use --fit).")
        if db:
            print(f"  Saved {summary['nodes']} positions, {summary['pinned']} pinned to {db}")
        if svg is not None:
            print(f"  Wrote SVG to {svg}")
