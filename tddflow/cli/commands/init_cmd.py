"""``tdd init``: create the tdd/ directory structure in a project."""

from __future__ import annotations

import typer
from rich.console import Console
from rich.markup import escape

from tddflow.cli.state import get_state
from tddflow.core.project import init_project
from tddflow.models.config import DEFAULT_SCHEMA

console = Console()


def init_cmd(
    ctx: typer.Context,
    schema: str = typer.Option(
        DEFAULT_SCHEMA,
        "--schema",
        "-s",
        help="Default schema for new changes.",
    ),
) -> None:
    """Create tdd/, tdd/changes/, tdd/coverage/ and tdd/config.yaml."""
    state = get_state(ctx)
    result = init_project(state.project_root, schema_name=schema)

    if result.already_exists:
        console.print("[yellow]tdd/ already exists; missing pieces were added.[/yellow]")
    else:
        console.print(
            f"[bold green]Initialised TDD project in "
            f"{escape(str(state.project_root))}[/bold green]"
        )
    for path in result.created:
        console.print(f"  [dim]{escape(str(path))}[/dim]")
