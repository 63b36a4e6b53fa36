"""Main CLI command for suggesting commit messages."""

import typer

from diffscribe.analysis.synthesizer import MAX_MESSAGES
from diffscribe.cli.utils import build_service, echo_block, prepare
from diffscribe.config import DEFAULT_MAX_SUGGESTIONS
from diffscribe.llm.prompts import render_numbered
from diffscribe.models import CommitSuggestionRequest
from diffscribe.service import NO_CHANGES_MESSAGE


def suggest(
    max_suggestions: int,
    staged_first: bool,
    show_json: bool,
    heuristic: bool,
    verbose: bool,
) -> None:
    """Generate and print commit message suggestions."""
    prepare(verbose)

    if max_suggestions < 1:
        typer.echo("--max must be at least 1.", err=True)
        raise typer.Exit(1)

    request = CommitSuggestionRequest(
        max_suggestions=max_suggestions,
        staged_first=staged_first,
        heuristic_only=heuristic,
    )
    response = build_service().generate_commit_message(request)

    if show_json:
        typer.echo(response.model_dump_json(indent=2))
    elif response.suggestions:
        echo_block([render_numbered(response.suggestions)])
        typer.echo(response.message, err=True)
    else:
        typer.echo(response.message, err=True)

    if not response.suggestions and response.message != NO_CHANGES_MESSAGE:
        raise typer.Exit(1)


MAX_OPTION = typer.Option(
    DEFAULT_MAX_SUGGESTIONS,
    "--max",
    "-n",
    help=f"Number of suggestions to request from the LLM (heuristics return at most {MAX_MESSAGES})",
)
STAGED_FIRST_OPTION = typer.Option(
    True,
    "--staged-first/--unstaged-first",
    help="Describe staged changes first, falling back to unstaged ones (or the reverse)",
)
JSON_OPTION = typer.Option(
    False,
    "--json",
    "-j",
    help="Print the response as JSON",
)
HEURISTIC_OPTION = typer.Option(
    False,
    "--heuristic",
    help="Skip the LLM and use heuristic suggestions only",
)
VERBOSE_OPTION = typer.Option(
    False,
    "--verbose",
    "-v",
    help="Show debug logging on stderr",
)


def main_command(
    ctx: typer.Context,
    max_suggestions: int = MAX_OPTION,
    staged_first: bool = STAGED_FIRST_OPTION,
    show_json: bool = JSON_OPTION,
    heuristic: bool = HEURISTIC_OPTION,
    verbose: bool = VERBOSE_OPTION,
) -> None:
    """Suggest commit messages for the pending git changes."""
    # If a subcommand is invoked, don't run the default behavior
    if ctx.invoked_subcommand is not None:
        return

    suggest(max_suggestions, staged_first, show_json, heuristic, verbose)


def suggest_command(
    max_suggestions: int = MAX_OPTION,
    staged_first: bool = STAGED_FIRST_OPTION,
    show_json: bool = JSON_OPTION,
    heuristic: bool = HEURISTIC_OPTION,
    verbose: bool = VERBOSE_OPTION,
) -> None:
    """Suggest commit messages for the pending git changes."""
    suggest(max_suggestions, staged_first, show_json, heuristic, verbose)
