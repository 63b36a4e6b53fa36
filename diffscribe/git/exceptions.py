"""Git-related exception classes.

Contains all exception classes for Git operations:
- GitError: Base exception for git-related errors
- NoChangesError: Raised when there is nothing to describe
- GitTimeoutError: Raised when a git command exceeds its time limit
"""


class GitError(Exception):
    """Custom exception for git-related errors."""

    pass


class NoChangesError(GitError):
    """Raised when there are no staged or unstaged changes."""

    pass


class GitTimeoutError(GitError):
    """Raised when a git command runs past its timeout and is killed."""

    pass
