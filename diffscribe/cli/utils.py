"""Shared helpers for the diffscribe CLI commands."""

import logging
from typing import Optional

import typer

from diffscribe.git import GitRunner, resolve_work_dir
from diffscribe.logging_config import configure_logging
from diffscribe.service import CommitMessageService


def prepare(verbose: bool = False) -> None:
    """Load global configuration and set up logging for a command."""
    from diffscribe.config import load_config

    configure_logging(logging.DEBUG if verbose else logging.WARNING)
    load_config()


def build_service() -> CommitMessageService:
    """Create a CommitMessageService bound to the resolved repository."""
    work_dir = resolve_work_dir()
    logging.getLogger(__name__).debug("Using working directory %s", work_dir)
    return CommitMessageService(GitRunner(work_dir))


def echo_block(lines: list[str], title: Optional[str] = None) -> None:
    """Print lines between separator rules, with an optional title."""
    if title:
        typer.echo(title)
    typer.echo("=" * 60)
    for line in lines:
        typer.echo(line)
    typer.echo("=" * 60)
