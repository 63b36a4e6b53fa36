"""Diff and changed-file collection.

Contains:
- collect_diff: Staged or unstaged diff text, whichever is found first
- collect_changed_files: Matching list of changed paths
- require_diff: Like collect_diff, but raises NoChangesError when empty

Collection failures are logged and reported as "no changes".
"""

import logging

from diffscribe.git.exceptions import GitError, NoChangesError
from diffscribe.git.runner import GitRunner

logger = logging.getLogger(__name__)

STAGED_DIFF = ["diff", "--cached"]
UNSTAGED_DIFF = ["diff"]


def _ordered(staged_first: bool) -> list[list[str]]:
    if staged_first:
        return [STAGED_DIFF, UNSTAGED_DIFF]
    return [UNSTAGED_DIFF, STAGED_DIFF]


def collect_diff(runner: GitRunner, staged_first: bool = True) -> str:
    """Collect the pending diff.

    Args:
        runner: The git runner.
        staged_first: Try 'git diff --cached' before 'git diff' (or the reverse).

    Returns:
        The first non-blank diff, or "" when there is none or git fails.
    """
    try:
        for args in _ordered(staged_first):
            diff = runner.run_capture(args)
            if diff.strip():
                return diff
    except GitError as e:
        logger.warning("Failed to collect diff: %s", e)
    return ""


def collect_changed_files(runner: GitRunner, staged_first: bool = True) -> list[str]:
    """Collect the paths of changed files, in the same order as collect_diff.

    Args:
        runner: The git runner.
        staged_first: Check staged files before unstaged ones (or the reverse).

    Returns:
        Non-blank trimmed paths, or an empty list when there are none or git fails.
    """
    try:
        for args in _ordered(staged_first):
            output = runner.run_capture([args[0], "--name-only", *args[1:]])
            files = [line.strip() for line in output.splitlines() if line.strip()]
            if files:
                return files
    except GitError as e:
        logger.warning("Failed to collect changed files: %s", e)
    return []


def require_diff(runner: GitRunner, staged_first: bool = True) -> str:
    """Collect the pending diff.

    Raises:
        NoChangesError: If there are no staged or unstaged changes.
    """
    diff = collect_diff(runner, staged_first)
    if not diff:
        raise NoChangesError("No changes found. Stage or modify files first.")
    return diff
