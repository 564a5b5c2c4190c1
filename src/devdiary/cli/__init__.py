"""
devdiary CLI - Main application entry point.

This module sets up the Typer CLI application with all subcommands.
"""

import typer
from rich.console import Console

from devdiary import __version__
from devdiary.cli import logs, stats, transfer
from devdiary.cli.common import setup_logging
from devdiary.core.config.env import load_layered_env

# Help panel names for command grouping
PANEL_LOGS = "Record and Manage Tasks"
PANEL_INSIGHTS = "Review Your Work"
PANEL_DATA = "Move Your Data"

# Create the main Typer app
app = typer.Typer(
    name="devdiary",
    help="Developer work log with smart suggestions",
    no_args_is_help=True,
    add_completion=False,
    context_settings={"help_option_names": ["--help", "-h"]},
)

console = Console()


@app.callback()
def main(
    ctx: typer.Context,
    debug: bool = typer.Option(
        False,
        "--debug",
        help="Enable debug output with detailed logging",
    ),
) -> None:
    """
    devdiary - log what you work on and get suggestions for it.

    Every task you log gets up to four suggestions (tools, tips and
    insights) based on its wording, category, priority, the time of day,
    and what you have logged before.

    Quick Start:
        devdiary log "Fixed bug in login" -c debugging -p high
        devdiary list --view pending
        devdiary done <id>
        devdiary stats

    Configuration:
        ~/.config/devdiary/config.json   # User settings
        .devdiary.json                   # Project settings
        DEVDIARY_STORAGE_PATH=...        # Where logs are kept
    """
    setup_logging(debug)

    # Precedence: OS env > project .env > user .env
    load_layered_env()

    # Store debug flag in context for subcommands
    ctx.obj = {"debug": debug}


# =============================================================================
# Record and Manage Tasks
# =============================================================================

app.command(name="log", rich_help_panel=PANEL_LOGS)(logs.log)
app.command(name="list", rich_help_panel=PANEL_LOGS)(logs.list_logs)
app.command(name="done", rich_help_panel=PANEL_LOGS)(logs.done)
app.command(name="edit", rich_help_panel=PANEL_LOGS)(logs.edit)
app.command(name="delete", rich_help_panel=PANEL_LOGS)(logs.delete)


# =============================================================================
# Review Your Work
# =============================================================================

app.command(name="stats", rich_help_panel=PANEL_INSIGHTS)(stats.stats)


# =============================================================================
# Move Your Data
# =============================================================================

app.command(name="export", rich_help_panel=PANEL_DATA)(transfer.export)
app.command(name="import", rich_help_panel=PANEL_DATA)(transfer.import_logs)


@app.command()
def version() -> None:
    """Show devdiary version and exit."""
    console.print(f"devdiary version {__version__}")
    raise typer.Exit(0)


def cli_main() -> None:
    """Main CLI entry point."""
    app()


__all__ = ["app", "cli_main"]
