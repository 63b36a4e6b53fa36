"""Git access for diffscribe.

This package provides:
- exceptions: GitError, NoChangesError, GitTimeoutError
- runner: GitRunner
- diff: collect_diff, collect_changed_files, require_diff
- workdir: resolve_work_dir, find_git_root
"""

# Exceptions
from diffscribe.git.exceptions import (
    GitError,
    GitTimeoutError,
    NoChangesError,
)

# Runner
from diffscribe.git.runner import GitRunner

# Diff collection
from diffscribe.git.diff import (
    collect_changed_files,
    collect_diff,
    require_diff,
)

# Working directory
from diffscribe.git.workdir import (
    find_git_root,
    resolve_work_dir,
)


__all__ = [
    # Exceptions
    "GitError",
    "GitTimeoutError",
    "NoChangesError",
    # Runner
    "GitRunner",
    # Diff
    "collect_changed_files",
    "collect_diff",
    "require_diff",
    # Working directory
    "find_git_root",
    "resolve_work_dir",
]
