"""Git operations used outside the async artifact store."""

import subprocess
from pathlib import Path

from ..constants import GIT_TIMEOUT
from ..errors import TracevaultError


class GitError(TracevaultError):
    """Git command failed."""


def run_git(*args: str, cwd: Path | None = None, check: bool = True) -> str:
    """Run a git command and return its stripped stdout.

    Args:
        *args: Arguments passed to git
        cwd: Working directory
        check: Raise GitError on a non-zero exit code

    Returns:
        Command stdout with surrounding whitespace removed

    Raises:
        GitError: If git is missing, times out, or fails with check=True
    """
    try:
        result = subprocess.run(
            ["git", *args],
            cwd=cwd,
            capture_output=True,
            text=True,
            timeout=GIT_TIMEOUT,
        )
    except FileNotFoundError:
        raise GitError("git executable not found") from None
    except subprocess.TimeoutExpired:
        raise GitError(f"git {args[0]} timed out after {GIT_TIMEOUT}s") from None

    if check and result.returncode != 0:
        raise GitError(f"git {' '.join(args)} failed: {result.stderr.strip()}")
    return result.stdout.strip()


def get_repo_root(cwd: Path | None = None) -> Path:
    """Get the root of the git repository containing cwd.

    Raises:
        GitError: If cwd is not inside a git repository
    """
    try:
        return Path(run_git("rev-parse", "--show-toplevel", cwd=cwd))
    except GitError:
        raise GitError("Not a git repository") from None
