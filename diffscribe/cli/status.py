"""CLI command for checking the LLM connection."""

import typer

from diffscribe.cli.utils import build_service, prepare


def status_command(
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Show debug logging on stderr",
    ),
) -> None:
    """Check that the configured LLM answers a trivial prompt."""
    prepare(verbose)

    status = build_service().check_connection()

    typer.echo(f"Provider: {status.provider}")
    typer.echo(f"Model: {status.model}")
    if status.ok:
        typer.echo("✓ LLM connection OK")
        typer.echo(f"Test reply: {status.reply}")
        return

    typer.echo("✗ LLM connection failed", err=True)
    typer.echo(f"Error: {status.error}", err=True)
    if status.diagnosis:
        typer.echo(status.diagnosis, err=True)
    raise typer.Exit(1)
