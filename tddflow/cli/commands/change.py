"""Change commands: ``new``, ``list``, ``show``, ``status``, ``validate``, ``archive``."""

from __future__ import annotations

import typer
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel

from tddflow.cli.format import artifact_table, change_table, print_issues
from tddflow.cli.state import get_state
from tddflow.core.archive import archive_by_name
from tddflow.core.artifact_graph import (
    ArtifactGraph,
    CyclicDependencyError,
    first_ready,
)
from tddflow.core.changes import create_change, get_change, list_changes
from tddflow.core.errors import NotFoundError
from tddflow.core.project import load_schema
from tddflow.core.validation import validate_change

console = Console()


def _fail(message: str) -> typer.Exit:
    console.print(f"[bold red]{escape(message)}[/bold red]")
    return typer.Exit(code=1)


def new_cmd(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="Name of the change (directory name)."),
    schema: str = typer.Option(
        None,
        "--schema",
        "-s",
        help="Schema to use (default: the project's configured schema).",
    ),
) -> None:
    """Create a new TDD change and show its artifact status."""
    state = get_state(ctx)
    try:
        meta = create_change(state.project_root, name, schema)
        graph = ArtifactGraph(load_schema(state.project_root, meta.schema_name))
    except (ValueError, FileExistsError, NotFoundError) as exc:
        raise _fail(str(exc))

    states = graph.states_for(get_change(state.project_root, name).path)
    console.print(f"[bold green]Created change: {escape(name)}[/bold green]")
    console.print(f"  Schema: {escape(meta.schema_name)}")
    console.print()
    console.print(artifact_table(states))

    ready = first_ready(states)
    if ready is not None:
        console.print(f"\n[dim]Next artifact: {escape(ready.id)} ({escape(ready.generates)})[/dim]")


def list_cmd(ctx: typer.Context) -> None:
    """List active changes, oldest first."""
    changes = list_changes(get_state(ctx).project_root)
    if not changes:
        console.print("[dim]No active changes.[/dim]")
        return
    console.print(change_table(changes))


def show_cmd(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="Change name."),
) -> None:
    """Show a change's metadata, task progress and artifact states."""
    state = get_state(ctx)
    try:
        change = get_change(state.project_root, name)
        graph = ArtifactGraph(load_schema(state.project_root, change.schema_name))
    except (NotFoundError, CyclicDependencyError) as exc:
        raise _fail(str(exc))

    lines = [
        f"[bold]Schema:[/bold]  {escape(change.schema_name)}",
        f"[bold]Created:[/bold] {escape(change.created)}",
    ]
    if change.task_progress:
        lines.append(
            f"[bold]Tasks:[/bold]   {change.task_progress.completed}/{change.task_progress.total}"
        )
    console.print(Panel("\n".join(lines), title=f"[bold]Change: {escape(name)}[/bold]"))

    dependents = {a.id: graph.get_dependents(a.id) for a in graph.schema.artifacts}
    console.print(artifact_table(graph.states_for(change.path), dependents))


def status_cmd(ctx: typer.Context) -> None:
    """Show the number of active changes and their summary."""
    changes = list_changes(get_state(ctx).project_root)
    console.print("[bold]TDD Status[/bold]\n")
    console.print(f"Active changes: {len(changes)}\n")
    if changes:
        console.print(change_table(changes))
    else:
        console.print("[dim]No active changes. Run `tdd new <name>` to start one.[/dim]")


def validate_cmd(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="Change name."),
) -> None:
    """Check the structure of a change's artifact documents."""
    result = validate_change(get_state(ctx).project_root, name)

    console.print(f"[bold]Validation: {escape(name)}[/bold]\n")
    print_issues(console, result.issues)
    console.print()
    if not result.valid:
        raise _fail("Change has errors.")
    console.print("[bold green]Change is valid.[/bold green]")


def archive_cmd(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="Change name."),
    sync: bool = typer.Option(
        True,
        "--sync/--no-sync",
        help="Merge the change's delta coverage into tdd/coverage/ first.",
    ),
) -> None:
    """Archive a change into tdd/changes/archive/<date>-<name>."""
    try:
        result = archive_by_name(get_state(ctx).project_root, name, sync)
    except (NotFoundError, FileExistsError) as exc:
        raise _fail(str(exc))

    for warning in result.warnings:
        console.print(f"[yellow]Warning:[/yellow] {escape(warning)}")
    if result.synced_coverage:
        console.print("[bold green]Synced coverage:[/bold green]")
        for path in result.synced_coverage:
            console.print(f"  [cyan]{escape(str(path))}[/cyan]")
    console.print(f"[bold green]Archived to {escape(str(result.archive_path))}[/bold green]")
