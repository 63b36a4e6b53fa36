"""Working directory resolution.

Contains:
- resolve_work_dir: Pick the git repository root to run commands in
- find_git_root: Walk up from a directory to the nearest '.git'
"""

import os
from pathlib import Path
from typing import Optional

WORK_DIR_ENV_VARS = ("DIFFSCRIBE_WORK_DIR", "GIT_WORK_DIR")


def find_git_root(start: Path) -> Optional[Path]:
    """Walk upward from start until a '.git' directory or file is found.

    A '.git' file (worktrees, submodules) counts as well.

    Returns:
        The resolved directory containing '.git', or None.
    """
    try:
        current = start.resolve()
    except OSError:
        return None

    for directory in (current, *current.parents):
        if (directory / ".git").exists():
            return directory
    return None


def _candidates() -> list[Path]:
    candidates = []
    for name in WORK_DIR_ENV_VARS:
        value = os.environ.get(name, "").strip()
        if value:
            candidates.append(Path(value))

    try:
        candidates.append(Path.cwd())
    except OSError:
        # The current directory was deleted under us
        pass

    candidates.append(Path(__file__).resolve().parent)

    pwd = os.environ.get("PWD", "").strip()
    if pwd:
        candidates.append(Path(pwd))
    return candidates


def resolve_work_dir() -> Path:
    """Resolve the directory git commands should run in.

    Candidates, in order: $DIFFSCRIBE_WORK_DIR, $GIT_WORK_DIR, the current
    directory, the installed package location, $PWD. The first candidate
    inside a git repository wins and its repository root is returned.

    Returns:
        The repository root, else the first candidate, else '.' (absolute).
    """
    candidates = _candidates()
    for candidate in candidates:
        root = find_git_root(candidate)
        if root is not None:
            return root

    if candidates:
        return candidates[0].absolute()
    return Path(".").absolute()
