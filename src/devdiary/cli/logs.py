"""
devdiary CLI - Log commands.

Record tasks and manage the log collection: log, list, done, edit, delete.
"""

import json
from typing import Any

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from devdiary.core.errors import ValidationError
from devdiary.core.logs.models import LogEntry
from devdiary.core.logs.query import query_logs
from devdiary.core.suggestions.models import Priority

from .common import get_repository, run_async, settle
from .errors import ExitCode, fail, print_error

console = Console()

PRIORITY_STYLES = {
    Priority.HIGH: "red bold",
    Priority.MEDIUM: "yellow",
    Priority.LOW: "dim",
}


def _split_tags(tags: list[str] | None) -> list[str]:
    if not tags:
        return []
    return [part.strip() for tag in tags for part in tag.split(",") if part.strip()]


def _format_priority(priority: Priority) -> str:
    style = PRIORITY_STYLES[priority]
    return f"[{style}]{priority.value.capitalize()}[/{style}]"


def _format_when(entry: LogEntry) -> str:
    return entry.timestamp.astimezone().strftime("%Y-%m-%d %H:%M")


def render_entry(entry: LogEntry) -> None:
    """Print one entry with its suggestions."""
    status = "[green]✓ done[/green]" if entry.completed else "[yellow]pending[/yellow]"
    details = [
        f"[bold]{entry.task}[/bold]",
        f"[dim]#{entry.id} · {_format_when(entry)}[/dim]",
        f"{entry.category.value} · {_format_priority(entry.priority)} · {status}",
    ]
    if entry.time_spent:
        details.append(f"[dim]Time spent:[/dim] {entry.time_spent} min")
    if entry.tags:
        details.append(f"[dim]Tags:[/dim] {', '.join(entry.tags)}")

    console.print(Panel("\n".join(details), border_style="cyan"))

    if not entry.suggestions:
        return

    table = Table(show_header=True, show_lines=True, expand=True)
    table.add_column("Suggestion", style="bold")
    table.add_column("Priority", justify="center", width=10)
    for suggestion in entry.suggestions:
        table.add_row(
            f"{suggestion.formatted_title}\n[dim]{suggestion.content}[/dim]",
            _format_priority(suggestion.priority),
        )
    console.print(table)


def log(
    ctx: typer.Context,
    task: str = typer.Argument(..., help="What you worked on"),
    category: str = typer.Option(
        "development",
        "--category",
        "-c",
        help="Work category (development, debugging, testing, planning, ...)",
    ),
    priority: str = typer.Option(
        "medium",
        "--priority",
        "-p",
        help="Priority (low, medium, high)",
    ),
    minutes: int | None = typer.Option(
        None,
        "--minutes",
        "-m",
        help="Time spent in minutes",
    ),
    tags: list[str] | None = typer.Option(
        None,
        "--tag",
        "-t",
        help="Tag (repeatable, or comma-separated)",
    ),
    json_output: bool = typer.Option(
        False,
        "--json",
        help="Output the new entry as JSON",
    ),
) -> None:
    """
    Log a task and get suggestions for it.

    Examples:
        devdiary log "Fixed bug in login" -c debugging -p high
        devdiary log "Wrote API tests" -c testing -m 45 -t api,backend
    """
    repository = get_repository(ctx)
    draft: dict[str, Any] = {
        "task": task,
        "category": category.lower(),
        "priority": priority.lower(),
        "timeSpent": minutes,
        "tags": _split_tags(tags),
    }

    try:
        entry = settle(run_async(repository.submit_log, draft))
    except ValidationError as e:
        fail(e)

    if json_output:
        typer.echo(json.dumps(entry.to_wire(), indent=2, ensure_ascii=False))
        return

    render_entry(entry)


def list_logs(
    ctx: typer.Context,
    view: str = typer.Option(
        "all",
        "--view",
        "-v",
        help="all, pending, completed, or a category",
    ),
    search: str = typer.Option(
        "",
        "--search",
        "-s",
        help="Search task text, category and tags",
    ),
    sort: str = typer.Option(
        "newest",
        "--sort",
        help="newest, oldest, priority, or category",
    ),
    json_output: bool = typer.Option(
        False,
        "--json",
        help="Output as JSON",
    ),
) -> None:
    """
    List logged tasks.

    Examples:
        devdiary list                       # Everything, newest first
        devdiary list --view pending        # Open tasks only
        devdiary list --view debugging      # One category
        devdiary list -s api --sort priority
    """
    repository = get_repository(ctx)
    logs = settle(run_async(repository.list_logs))

    try:
        logs = query_logs(logs, view=view, search=search, sort=sort)
    except ValidationError as e:
        fail(e)

    if json_output:
        typer.echo(json.dumps([entry.to_wire() for entry in logs], indent=2, ensure_ascii=False))
        return

    if not logs:
        if search or view != "all":
            console.print("[yellow]No logs match your filters[/yellow]")
        else:
            console.print("[yellow]No logs yet. Record one with: devdiary log \"...\"[/yellow]")
        return

    table = Table(show_header=True, expand=True)
    table.add_column("ID", style="dim", no_wrap=True)
    table.add_column("When", style="dim", no_wrap=True)
    table.add_column("Task", style="bold")
    table.add_column("Category")
    table.add_column("Priority", justify="center")
    table.add_column("Min", justify="right")
    table.add_column("Status", justify="center")

    for entry in logs:
        table.add_row(
            str(entry.id),
            _format_when(entry),
            entry.task,
            entry.category.value,
            _format_priority(entry.priority),
            str(entry.time_spent) if entry.time_spent else "",
            "[green]✓[/green]" if entry.completed else "",
        )

    console.print(table)
    console.print(f"[dim]{len(logs)} log(s)[/dim]")


def done(
    ctx: typer.Context,
    log_id: int = typer.Argument(..., help="ID of the log to mark"),
    undo: bool = typer.Option(
        False,
        "--undo",
        help="Mark the log as pending again",
    ),
) -> None:
    """
    Mark a logged task as completed.

    Examples:
        devdiary done 1760882400000
        devdiary done 1760882400000 --undo
    """
    repository = get_repository(ctx)
    entry = settle(run_async(repository.update_log, log_id, {"completed": not undo}))

    if entry.completed:
        console.print(f"[green]✓[/green] Completed: {entry.task}")
    else:
        console.print(f"[yellow]↺[/yellow] Reopened: {entry.task}")


def edit(
    ctx: typer.Context,
    log_id: int = typer.Argument(..., help="ID of the log to edit"),
    task: str | None = typer.Option(None, "--task", help="New task text"),
    category: str | None = typer.Option(None, "--category", "-c", help="New category"),
    priority: str | None = typer.Option(None, "--priority", "-p", help="New priority"),
    minutes: int | None = typer.Option(
        None,
        "--minutes",
        "-m",
        help="Time spent in minutes (0 clears it)",
    ),
    tags: list[str] | None = typer.Option(
        None,
        "--tag",
        "-t",
        help="Replace tags (repeatable, or comma-separated)",
    ),
) -> None:
    """
    Edit a logged task.

    Suggestions are fixed when a task is logged and are not regenerated.

    Examples:
        devdiary edit 1760882400000 --priority high
        devdiary edit 1760882400000 --task "Fixed login redirect bug" -m 30
    """
    changes: dict[str, Any] = {}
    if task is not None:
        changes["task"] = task
    if category is not None:
        changes["category"] = category.lower()
    if priority is not None:
        changes["priority"] = priority.lower()
    if minutes is not None:
        changes["timeSpent"] = minutes
    if tags is not None:
        changes["tags"] = _split_tags(tags)

    if not changes:
        print_error(
            "Nothing to change",
            solution="devdiary edit ID --task/--category/--priority/--minutes/--tag",
        )
        raise typer.Exit(ExitCode.USER_ERROR)

    repository = get_repository(ctx)
    try:
        entry = settle(run_async(repository.update_log, log_id, changes))
    except ValidationError as e:
        fail(e)

    console.print(f"[green]✓[/green] Updated log {entry.id}")
    render_entry(entry)


def delete(
    ctx: typer.Context,
    log_id: int = typer.Argument(..., help="ID of the log to delete"),
    yes: bool = typer.Option(
        False,
        "--yes",
        "-y",
        help="Skip confirmation",
    ),
) -> None:
    """
    Delete a logged task.

    Examples:
        devdiary delete 1760882400000
        devdiary delete 1760882400000 --yes
    """
    if not yes:
        confirm = typer.confirm(f"Delete log {log_id}?")
        if not confirm:
            console.print("[dim]Cancelled[/dim]")
            raise typer.Exit(0)

    repository = get_repository(ctx)
    remaining = settle(run_async(repository.delete_log, log_id))
    console.print(f"[green]✓[/green] Deleted log {log_id} ({len(remaining)} remaining)")
