"""forcegraph CLI: lay out concept graphs and inspect saved layouts.

Entry point for the `forcegraph` command.

Commands:
    layout          Run the simulation headless and save the resulting layout
    positions ls    List saved node positions
    positions reset Forget saved positions
    viewport show   Show the saved viewport for a view type
"""

from __future__ import annotations


def _require_typer():
    """Check that typer is available."""
    try:
        import typer  # noqa: F401
    except ImportError:
        import sys

        print("Error: typer is required for the CLI. Install with: pip install forcegraph", file=sys.stderr)
        raise SystemExit(1) from None


def create_app():
    """Create the Typer app with all subcommands."""
    _require_typer()

    import typer

    from forcegraph.cli.layout_cmd import register_commands
    from forcegraph.cli.positions import app as positions_app
    from forcegraph.cli.viewport_cmd import app as viewport_app

    app = typer.Typer(
        name="forcegraph",
        help="Force-directed concept graph layout CLI.",
        no_args_is_help=True,
    )

    @app.callback()
    def _root(
        verbose: bool = typer.Option(False, "--verbose", "-v", help="Log engine activity to stderr"),
    ):
        if verbose:
            import logging

            logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    app.add_typer(positions_app, name="positions")
    app.add_typer(viewport_app, name="viewport")
    register_commands(app)

    return app


def main():
    """CLI entry point."""
    app = create_app()
    app()
