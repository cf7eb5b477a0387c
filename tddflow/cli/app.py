"""Main Typer application: imports and registers all CLI commands.

Entry point: ``tdd`` (configured via pyproject.toml console_scripts).
"""

from __future__ import annotations

import logging
from pathlib import Path

import typer

from tddflow import __description__, __version__
from tddflow.cli.commands.change import (
    archive_cmd,
    list_cmd,
    new_cmd,
    show_cmd,
    status_cmd,
    validate_cmd,
)
from tddflow.cli.commands.init_cmd import init_cmd
from tddflow.cli.commands.schema_cmd import schema_app
from tddflow.cli.commands.view import view_cmd
from tddflow.cli.state import CliState
from tddflow.config import Settings
from tddflow.core.paths import find_project_root
from tddflow.telemetry import track_command

app = typer.Typer(
    name="tdd",
    help=__description__,
    no_args_is_help=True,
    rich_markup_mode="rich",
    add_completion=False,
)


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(__version__)
        raise typer.Exit()


@app.callback()
def main_callback(
    ctx: typer.Context,
    project_root: Path = typer.Option(
        None,
        "--project-root",
        "-C",
        help="Project directory (default: nearest ancestor containing tdd/).",
    ),
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show the version and exit.",
    ),
) -> None:
    settings = Settings()
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(levelname)s %(name)s: %(message)s",
    )
    state = CliState(
        project_root=project_root.resolve() if project_root else find_project_root(),
        settings=settings,
        telemetry=settings.telemetry_active,
    )
    ctx.obj = state
    if ctx.invoked_subcommand:
        track_command(ctx.invoked_subcommand, __version__, enabled=state.telemetry)


# Register subcommands
app.command(name="init", help="Initialise the tdd/ directory in a project.")(init_cmd)
app.command(name="new", help="Create a new TDD change.")(new_cmd)
app.command(name="list", help="List active TDD changes.")(list_cmd)
app.command(name="show", help="Show details of a TDD change.")(show_cmd)
app.command(name="status", help="Show overall TDD status.")(status_cmd)
app.command(name="validate", help="Validate a TDD change.")(validate_cmd)
app.command(name="archive", help="Archive a completed TDD change.")(archive_cmd)
app.command(name="view", help="Dashboard of project status.")(view_cmd)
app.add_typer(schema_app, name="schema", help="Manage TDD schemas.")


def main() -> None:
    """CLI entry point."""
    app()


if __name__ == "__main__":
    main()
