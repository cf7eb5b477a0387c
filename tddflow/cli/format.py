"""Rich renderables for artifact states, change lists and validation issues.

Color scheme
------------
- green   : done / completed
- yellow  : ready / warning
- red     : blocked / error
- cyan    : suggestion
"""

from __future__ import annotations

from rich.console import Console
from rich.markup import escape
from rich.table import Table
from rich.text import Text

from tddflow.models.reports import ChangeInfo, Severity, TaskProgress, ValidationIssue
from tddflow.models.schema import ArtifactState, ArtifactStatus

_STATUS_ICONS: dict[ArtifactStatus, str] = {
    ArtifactStatus.DONE: "[green]DONE[/green]",
    ArtifactStatus.READY: "[yellow]READY[/yellow]",
    ArtifactStatus.BLOCKED: "[bold red]BLOCKED[/bold red]",
}

_SEVERITY_STYLES: dict[Severity, str] = {
    Severity.ERROR: "bold red",
    Severity.WARNING: "yellow",
    Severity.SUGGESTION: "cyan",
}

PROGRESS_WIDTH = 20


def progress_bar(done: int, total: int, width: int = PROGRESS_WIDTH) -> Text:
    filled = round(done / total * width) if total > 0 else 0
    bar = Text("█" * filled, style="green")
    bar.append("░" * (width - filled), style="dim")
    return bar


def task_phase(progress: TaskProgress) -> str:
    """Rough RED/GREEN/REFACTOR phase from the share of completed tasks."""
    if progress.completed == 0:
        return "[dim]Not started[/dim]"
    if progress.completed == progress.total:
        return "[green]Complete[/green]"
    ratio = progress.completed / progress.total
    if ratio < 0.33:
        return "[red]RED - Writing tests[/red]"
    if ratio < 0.66:
        return "[green]GREEN - Implementing[/green]"
    return "[blue]REFACTOR - Cleaning up[/blue]"


def artifact_table(
    states: list[ArtifactState], dependents: dict[str, list[str]] | None = None
) -> Table:
    table = Table(show_header=True, header_style="bold cyan", expand=False)
    table.add_column("Artifact", style="bold")
    table.add_column("File")
    table.add_column("Status", justify="center")
    table.add_column("Blocked by")
    if dependents is not None:
        table.add_column("Unlocks", style="dim")

    for state in states:
        row = [
            escape(state.artifact.id),
            escape(state.artifact.generates),
            _STATUS_ICONS[state.status],
            escape(", ".join(state.blocked_by)) if state.blocked_by else "[dim]-[/dim]",
        ]
        if dependents is not None:
            row.append(escape(", ".join(dependents.get(state.artifact.id, []))) or "-")
        table.add_row(*row)
    return table


def change_table(changes: list[ChangeInfo]) -> Table:
    table = Table(show_header=True, header_style="bold cyan")
    table.add_column("Change", style="bold")
    table.add_column("Schema")
    table.add_column("Created")
    table.add_column("Artifacts")
    table.add_column("Tasks", justify="right")

    for change in changes:
        tasks = (
            f"{change.task_progress.completed}/{change.task_progress.total}"
            if change.task_progress
            else "[dim]-[/dim]"
        )
        table.add_row(
            escape(change.name),
            escape(change.schema_name),
            change.created.split("T")[0],
            escape(", ".join(change.artifacts)) or "[dim]none[/dim]",
            tasks,
        )
    return table


def print_issues(console: Console, issues: list[ValidationIssue]) -> None:
    if not issues:
        console.print("[green]No issues found.[/green]")
        return
    for issue in issues:
        style = _SEVERITY_STYLES[issue.severity]
        location = f" [dim]({escape(issue.file)})[/dim]" if issue.file else ""
        console.print(
            f"[{style}]{issue.severity.value.upper()}[/{style}] {escape(issue.message)}{location}"
        )
