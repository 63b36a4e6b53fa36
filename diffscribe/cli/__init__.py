"""CLI entry point for diffscribe.

This module provides the main CLI application that combines all commands
and subcommands into a single unified interface.
"""

import typer

from diffscribe.cli.commit import commit_command
from diffscribe.cli.config import config_app
from diffscribe.cli.main import main_command, suggest_command
from diffscribe.cli.status import status_command

# Main application
app = typer.Typer(
    name="diffscribe",
    help="diffscribe: commit message suggestions from your git diff",
    add_completion=False,
)

# Add subcommand groups
app.add_typer(config_app, name="config")

# Add individual commands
app.command("suggest")(suggest_command)
app.command("status")(status_command)
app.command("commit")(commit_command)

# Set the main callback for default behavior
app.callback(invoke_without_command=True)(main_command)


__all__ = [
    "app",
    "config_app",
    "commit_command",
    "main_command",
    "status_command",
    "suggest_command",
]
