"""``tdd schema``: list, create, fork and validate schemas."""

from __future__ import annotations

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape

from tddflow.cli.format import print_issues
from tddflow.cli.state import get_state
from tddflow.core.artifact_graph import validate_schema
from tddflow.core.errors import NotFoundError
from tddflow.core.project import fork_schema, init_schema, list_schemas, load_schema

console = Console()

schema_app = typer.Typer(no_args_is_help=True, add_completion=False)


def _fail(message: str) -> typer.Exit:
    console.print(f"[bold red]{escape(message)}[/bold red]")
    return typer.Exit(code=1)


@schema_app.command(name="list", help="List available schemas.")
def schema_list_cmd(ctx: typer.Context) -> None:
    project_root = get_state(ctx).project_root
    console.print("[bold]Available schemas:[/bold]\n")
    for name, source in list_schemas(project_root):
        schema = load_schema(project_root, name)
        console.print(f"  [bold]{escape(name)}[/bold] ({source})")
        if schema.description:
            console.print(f"    {escape(schema.description)}")
        console.print(f"    Artifacts: {escape(' -> '.join(schema.artifact_ids))}\n")


@schema_app.command(name="init", help="Create a new custom schema.")
def schema_init_cmd(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="Schema name."),
    description: str = typer.Option(None, "--description", help="Schema description."),
    artifacts: str = typer.Option(
        None, "--artifacts", help="Comma-separated artifact ids, in pipeline order."
    ),
) -> None:
    ids = [a.strip() for a in artifacts.split(",") if a.strip()] if artifacts else None
    try:
        schema_dir = init_schema(get_state(ctx).project_root, name, ids, description)
    except FileExistsError as exc:
        raise _fail(str(exc))
    console.print(f"[bold green]Created schema: {escape(name)}[/bold green]")
    console.print(f"  Path: {escape(str(schema_dir))}")


@schema_app.command(name="fork", help="Fork an existing schema into the project.")
def schema_fork_cmd(
    ctx: typer.Context,
    source: str = typer.Argument(..., help="Schema to copy."),
    name: str = typer.Argument(..., help="Name of the new schema."),
) -> None:
    try:
        target = fork_schema(get_state(ctx).project_root, source, name)
    except (NotFoundError, FileExistsError) as exc:
        raise _fail(str(exc))
    console.print(f"[bold green]Forked {escape(source)} -> {escape(name)}[/bold green]")
    console.print(f"  Path: {escape(str(target))}")
    console.print("[dim]Edit schema.yaml and templates/ to customize.[/dim]")


@schema_app.command(name="validate", help="Validate a schema definition.")
def schema_validate_cmd(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="Schema name."),
) -> None:
    try:
        schema = load_schema(get_state(ctx).project_root, name)
    except (NotFoundError, ValidationError) as exc:
        raise _fail(str(exc))

    issues = validate_schema(schema)
    if issues:
        print_issues(console, issues)
        raise _fail(f'Schema "{name}" is invalid.')
    console.print(f'[bold green]Schema "{escape(name)}" is valid.[/bold green]')
    console.print(f"  Artifacts: {escape(' -> '.join(schema.artifact_ids))}")
