"""CLI command for committing with a chosen message."""

import typer

from diffscribe.cli.utils import build_service, echo_block, prepare
from diffscribe.models import CommitExecutionRequest


def commit_command(
    message: str = typer.Argument(
        ...,
        help="The commit message to use (e.g. one of the suggestions)",
    ),
    yes: bool = typer.Option(
        False,
        "--yes",
        "-y",
        help="Bypass confirmation prompt and commit immediately",
    ),
) -> None:
    """Commit the staged changes with the given message."""
    prepare()

    if not message.strip():
        typer.echo("A commit message is required.", err=True)
        raise typer.Exit(1)

    echo_block([message])

    # Ask for confirmation unless --yes flag is used
    if not yes:
        confirm = typer.prompt(
            "Commit with this message? [Y/n]",
            default="y",
            show_default=False,
        )
        if confirm.lower() not in ("y", "yes", ""):
            typer.echo("Commit cancelled.", err=True)
            raise typer.Exit(0)

    typer.echo("Committing...", err=True)
    result = build_service().commit_with_message(CommitExecutionRequest(message=message))
    if result.startswith("Success"):
        typer.echo(result)
    else:
        typer.echo(result, err=True)
        raise typer.Exit(1)
