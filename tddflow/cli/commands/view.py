"""``tdd view``: dashboard of configuration, active and archived changes."""

from __future__ import annotations

import typer
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.text import Text

from tddflow.cli.format import progress_bar, task_phase
from tddflow.cli.state import get_state
from tddflow.core.artifact_graph import ArtifactGraph, CyclicDependencyError
from tddflow.core.changes import list_archived, list_changes
from tddflow.core.errors import NotFoundError
from tddflow.core.project import load_project_config, load_schema
from tddflow.models.schema import ArtifactStatus

console = Console()

RECENT_ARCHIVED = 5


def view_cmd(ctx: typer.Context) -> None:
    """Show project configuration, change progress and recent archives."""
    project_root = get_state(ctx).project_root
    config = load_project_config(project_root)

    console.print(Panel("[bold]TDD Project Dashboard[/bold]", expand=False))
    console.print("[bold]Configuration[/bold]")
    console.print(f"  Schema: {escape(config.schema_name)}")
    if config.context:
        console.print(f"  Context: [dim]{escape(config.context.splitlines()[0])}...[/dim]")
    console.print()

    changes = list_changes(project_root)
    console.print(f"[bold]Active Changes ({len(changes)})[/bold]\n")
    if not changes:
        console.print("[dim]  No active changes. Run `tdd new <name>` to start one.[/dim]\n")

    for change in changes:
        console.print(f"  [bold]{escape(change.name)}[/bold]")
        try:
            states = ArtifactGraph(load_schema(project_root, change.schema_name)).states_for(
                change.path
            )
        except (NotFoundError, CyclicDependencyError) as exc:
            console.print(f"    [red]{escape(str(exc))}[/red]\n")
            continue

        done = sum(1 for s in states if s.status == ArtifactStatus.DONE)
        line = Text("    Artifacts: ")
        line.append(progress_bar(done, len(states)))
        line.append(f" {done}/{len(states)}")
        console.print(line)

        progress = change.task_progress
        if progress:
            line = Text("    Tasks:     ")
            line.append(progress_bar(progress.completed, progress.total))
            line.append(f" {progress.completed}/{progress.total}")
            console.print(line)
            console.print(f"    Phase:     {task_phase(progress)}")
        console.print()

    archived = list_archived(project_root)
    if archived:
        console.print(f"[bold]Archived ({len(archived)})[/bold]")
        for change in archived[-RECENT_ARCHIVED:]:
            console.print(
                f"  [dim]{escape(change.name)} ({escape(change.created.split('T')[0])})[/dim]"
            )
        if len(archived) > RECENT_ARCHIVED:
            console.print(f"[dim]  ... and {len(archived) - RECENT_ARCHIVED} more[/dim]")
        console.print()
