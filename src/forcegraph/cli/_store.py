"""Layout store access for CLI commands.

Resolves the --db path (falling back to [tool.forcegraph] db) and opens
a LayoutStore on it.
"""

from __future__ import annotations

import typer

from forcegraph.config import load_config
from forcegraph.persistence import LayoutStore, open_store


def resolve_db(db: str | None) -> str:
    """Explicit --db, else the configured one, else exit with a hint."""
    if db is None:
        db = load_config().db
    if db is None:
        print("Error: No layout database given.")
        print("Hint: pass --db PATH or set it in pyproject.toml:")
        print('  [tool.forcegraph]\n  db = "./layout.db"')
        raise typer.Exit(1)
    return db


def open_layout_store(db: str | None) -> LayoutStore:
    return LayoutStore(open_store(resolve_db(db)))
