"""
devdiary CLI - Export and import commands.

Move the log collection in and out as a JSON file.
"""

from pathlib import Path

import typer
from rich.console import Console

from .common import get_repository, run_async, settle
from .errors import ExitCode, print_error

console = Console()


def export(
    ctx: typer.Context,
    output: Path | None = typer.Option(
        None,
        "--output",
        "-o",
        help="Destination file, or '-' for stdout (default: ./devdiary-export-<date>.json)",
    ),
) -> None:
    """
    Export all logs to a JSON file.

    Examples:
        devdiary export
        devdiary export -o backup.json
        devdiary export -o - | jq '.logs | length'
    """
    repository = get_repository(ctx)
    artifact = settle(run_async(repository.export_snapshot))
    content = artifact.to_json()

    if output is not None and str(output) == "-":
        typer.echo(content)
        return

    destination = output or Path.cwd() / artifact.filename
    try:
        destination.parent.mkdir(parents=True, exist_ok=True)
        destination.write_text(content + "\n", encoding="utf-8")
    except OSError as e:
        print_error(f"Cannot write {destination}", reason=str(e))
        raise typer.Exit(ExitCode.GENERAL_ERROR)

    console.print(f"[green]✓[/green] Exported {len(artifact.logs)} log(s) to {destination}")


def import_logs(
    ctx: typer.Context,
    file: Path = typer.Argument(..., help="Export file to import"),
) -> None:
    """
    Import logs from an export file.

    Replaces the whole collection with the file's contents.

    Examples:
        devdiary import devdiary-export-2026-10-19.json
    """
    try:
        raw = file.read_bytes()
    except OSError as e:
        print_error(f"Cannot read {file}", reason=str(e))
        raise typer.Exit(ExitCode.USER_ERROR)

    repository = get_repository(ctx)
    logs = settle(run_async(repository.import_snapshot, raw))
    console.print(f"[green]✓[/green] Imported {len(logs)} log(s) from {file}")
