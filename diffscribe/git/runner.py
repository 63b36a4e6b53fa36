"""Git command runner.

Contains:
- GitRunner: Run git in a fixed working directory with wall-clock timeouts
- CAPTURE_TIMEOUT / EXEC_TIMEOUT: Time limits for reading and mutating commands
"""

import logging
import subprocess
from pathlib import Path
from typing import Sequence, Union

from diffscribe.git.exceptions import GitError, GitTimeoutError

logger = logging.getLogger(__name__)

# Seconds allowed for read-only commands whose output is captured
CAPTURE_TIMEOUT = 30
# Seconds allowed for mutating commands such as commit
EXEC_TIMEOUT = 60


class GitRunner:
    """Runs git commands in one working directory.

    stdout and stderr are merged. A command that outlives its timeout is
    killed and reported as GitTimeoutError.
    """

    def __init__(self, work_dir: Union[str, Path]):
        self.work_dir = Path(work_dir)

    def _run(self, args: Sequence[str], timeout: int) -> subprocess.CompletedProcess:
        command = ["git", *args]
        logger.debug("Running %s in %s", " ".join(command), self.work_dir)
        try:
            return subprocess.run(
                command,
                cwd=self.work_dir,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                text=True,
                encoding="utf-8",
                errors="replace",
                timeout=timeout,
            )
        except subprocess.TimeoutExpired as e:
            raise GitTimeoutError(
                f"Git command timed out after {timeout}s: git {' '.join(args)}"
            ) from e
        except FileNotFoundError as e:
            raise GitError("Git is not installed or not in PATH.") from e

    def run_capture(self, args: Sequence[str]) -> str:
        """Run a git command and return its output.

        Args:
            args: Arguments to pass to git.

        Returns:
            Combined stdout and stderr, stripped. The exit code is ignored.

        Raises:
            GitTimeoutError: If the command takes longer than CAPTURE_TIMEOUT.
            GitError: If git cannot be started.
        """
        return (self._run(args, CAPTURE_TIMEOUT).stdout or "").strip()

    def run(self, args: Sequence[str]) -> int:
        """Run a git command and return its exit code.

        Args:
            args: Arguments to pass to git.

        Returns:
            The exit code; output of failed commands is logged.

        Raises:
            GitTimeoutError: If the command takes longer than EXEC_TIMEOUT.
            GitError: If git cannot be started.
        """
        result = self._run(args, EXEC_TIMEOUT)
        if result.returncode != 0:
            logger.warning(
                "git %s exited with %d:\n%s",
                " ".join(args),
                result.returncode,
                (result.stdout or "").strip(),
            )
        return result.returncode
