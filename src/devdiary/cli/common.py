"""
Shared helpers for devdiary CLI commands.
"""

import asyncio
import logging
import sys
from collections.abc import Awaitable, Callable
from typing import Any, TypeVar

import typer

from devdiary.core.config import load_config
from devdiary.core.errors import ValidationError
from devdiary.core.services import LogRepository, OperationResult

from .errors import ExitCode, fail, print_error

T = TypeVar("T")


def setup_logging(debug: bool = False) -> None:
    """
    Configure logging for CLI commands.

    Args:
        debug: If True, enable DEBUG level logging
    """
    level = logging.DEBUG if debug else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )


def run_async(func: Callable[..., Awaitable[T]], *args: Any) -> T:
    """
    Run an async function from a sync context.

    Uses asyncio.run() to execute repository coroutines from Typer's sync
    CLI context.

    Example:
        result = run_async(repository.delete_log, 1760882400000)
    """
    return asyncio.run(func(*args))  # type: ignore[arg-type]


def get_repository(ctx: typer.Context) -> LogRepository:
    """
    Get the repository for this invocation.

    Built from the layered configuration on first use and cached on the
    context object so every command in one run shares it.

    Raises:
        typer.Exit: If the configuration is invalid
    """
    obj = ctx.ensure_object(dict)
    repository = obj.get("repository")
    if repository is None:
        try:
            config = load_config()
        except ValidationError as e:
            print_error(
                "Configuration is invalid",
                reason=str(e),
                solution="fix .devdiary.json or ~/.config/devdiary/config.json",
            )
            raise typer.Exit(ExitCode.USER_ERROR) from e
        repository = LogRepository.from_config(config)
        obj["repository"] = repository
    return repository


def settle(result: OperationResult[T]) -> T:
    """
    Return the result value, or report its error and exit.

    Raises:
        typer.Exit: If the operation failed
    """
    if result.error is not None:
        fail(result.error)
    return result.value  # type: ignore[return-value]
