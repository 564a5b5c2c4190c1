"""
Standardized error handling and exit codes for the devdiary CLI.

This module provides consistent error messaging with actionable guidance
and standardized exit codes across all CLI commands.
"""

from enum import IntEnum
from typing import NoReturn

import typer
from rich.console import Console

from devdiary.core.errors import (
    DiaryError,
    FormatError,
    NotFoundError,
    PersistenceError,
    ValidationError,
)

console = Console(stderr=True)


class ExitCode(IntEnum):
    """Standard exit codes for devdiary CLI operations."""

    SUCCESS = 0
    """Operation completed successfully."""

    GENERAL_ERROR = 1
    """Storage failure or other unexpected error."""

    USER_ERROR = 2
    """Invalid input, unknown log id or unreadable import file (actionable by user)."""

    SIGINT = 130
    """Terminated by SIGINT (Ctrl+C) - Unix standard."""


def print_error(
    problem: str,
    *,
    reason: str | None = None,
    solution: str | None = None,
) -> None:
    """
    Print a standardized error message with actionable guidance.

    Args:
        problem: Brief description of what went wrong
        reason: Optional explanation of why it happened
        solution: Optional command or action to fix it

    Example:
        >>> print_error(
        ...     "Log not found: 1760882400000",
        ...     solution="devdiary list",
        ... )
    """
    console.print(f"[red]Error:[/red] {problem}")

    if reason:
        console.print(f"[dim]{reason}[/dim]")

    if solution:
        console.print(f"[cyan]→ Try:[/cyan] {solution}")


def exit_code_for(error: DiaryError) -> ExitCode:
    """Map a devdiary error onto the exit code the CLI reports."""
    if isinstance(error, (ValidationError, NotFoundError, FormatError)):
        return ExitCode.USER_ERROR
    return ExitCode.GENERAL_ERROR


def fail(error: DiaryError) -> NoReturn:
    """
    Report a devdiary error and exit.

    Raises:
        typer.Exit: Always, with the mapped exit code
    """
    if isinstance(error, NotFoundError):
        print_error(str(error), solution="devdiary list")
    elif isinstance(error, FormatError):
        print_error(
            "Import file rejected",
            reason=str(error),
            solution="devdiary export --output backup.json  # to see the expected shape",
        )
    elif isinstance(error, PersistenceError):
        print_error(
            "Log storage is unavailable",
            reason=str(error),
            solution="check DEVDIARY_STORAGE_PATH or storage.path in .devdiary.json",
        )
    else:
        print_error(str(error))
    raise typer.Exit(exit_code_for(error))
