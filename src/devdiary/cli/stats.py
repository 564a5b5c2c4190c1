"""
devdiary CLI - Stats command.

Show productivity analytics for the log collection.
"""

import json

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from devdiary.core.analytics.models import AnalyticsReport, InsightKind

from .common import get_repository, run_async, settle

console = Console()

# Days of the productivity trend shown in the human-readable view
TREND_DAYS_SHOWN = 7


def _distribution_table(title: str, counts: dict[str, int], total: int) -> Table:
    table = Table(title=title, show_header=True, title_justify="left")
    table.add_column("Name")
    table.add_column("Tasks", justify="right")
    table.add_column("Share", justify="right", style="dim")
    for name, count in sorted(counts.items(), key=lambda item: item[1], reverse=True):
        table.add_row(name, str(count), f"{count / total * 100:.0f}%")
    return table


def render_report(report: AnalyticsReport) -> None:
    """Print a human-readable analytics report."""
    console.print(
        Panel(
            f"[bold cyan]Productivity[/bold cyan]\n"
            f"Total tasks: [bold]{report.total_tasks}[/bold]   "
            f"Completed: [bold]{report.completed_tasks}[/bold] "
            f"({report.completion_rate:.0f}%)\n"
            f"Last 30 days: [bold]{report.recent_activity}[/bold] "
            f"({report.average_tasks_per_day:.2f}/day)",
            border_style="cyan",
        )
    )

    console.print(
        _distribution_table("By category", report.category_distribution, report.total_tasks)
    )
    console.print(
        _distribution_table("By priority", report.priority_distribution, report.total_tasks)
    )

    for insight in report.insights:
        style = "green" if insight.type == InsightKind.SUCCESS else "yellow"
        console.print(f"[{style}]{insight.title}:[/{style}] {insight.content}")

    if report.productivity_trend:
        trend = Table(title="Recent days", show_header=True, title_justify="left")
        trend.add_column("Date", style="dim")
        trend.add_column("Tasks", justify="right")
        for day in report.productivity_trend[-TREND_DAYS_SHOWN:]:
            trend.add_row(day.date.isoformat(), "█" * day.tasks + f" {day.tasks}")
        console.print(trend)


def stats(
    ctx: typer.Context,
    json_output: bool = typer.Option(
        False,
        "--json",
        help="Output analytics as JSON",
    ),
) -> None:
    """
    Show productivity analytics.

    Totals, completion rate, category and priority breakdowns, a 30-day
    activity average and a per-day trend.

    Examples:
        devdiary stats
        devdiary stats --json
    """
    repository = get_repository(ctx)
    report = settle(run_async(repository.analytics))

    if json_output:
        typer.echo(
            json.dumps(report.model_dump(by_alias=True, mode="json"), indent=2, ensure_ascii=False)
        )
        return

    if report.total_tasks == 0:
        console.print("[yellow]No logs yet. Record one with: devdiary log \"...\"[/yellow]")
        return

    render_report(report)
