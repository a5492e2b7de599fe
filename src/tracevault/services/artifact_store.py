"""Commit-log-backed artifact file store.

The engine talks to artifact storage only through the ArtifactFileStore
protocol. GitArtifactStore implements it on top of a git working tree,
running git asynchronously so history reads never block the event loop.
"""

import asyncio
import logging
from pathlib import Path
from typing import Protocol

from ..constants import GIT_TIMEOUT, HISTORY_DEPTH
from ..errors import CommitError, HistoryFetchError, StoreUnavailableError
from ..models import ArtifactKind, CommitInfo, artifact_path
from .git import GitError

logger = logging.getLogger(__name__)

# Unit and record separators for git log output
_FIELD_SEP = "\x1f"
_RECORD_SEP = "\x1e"
_LOG_FORMAT = f"%H{_FIELD_SEP}%an{_FIELD_SEP}%at{_FIELD_SEP}%s{_RECORD_SEP}"

# git show stderr fragments meaning "no such file at that commit"
_MISSING_MARKERS = (
    "does not exist in",
    "exists on disk, but not in",
    "invalid object name",
    "bad revision",
)


class ArtifactFileStore(Protocol):
    """Store contract the engine depends on."""

    # Granularity of commit timestamps reported by get_history
    timestamp_resolution_ms: int

    @property
    def is_ready(self) -> bool: ...

    async def commit_artifact(self, kind: ArtifactKind, artifact_id: str, message: str) -> None:
        """Commit the current content of one artifact file."""
        ...

    async def get_history(self, file_path: str) -> list[CommitInfo]:
        """Commits touching file_path, newest first."""
        ...

    async def read_file_at_commit(self, file_path: str, commit_hash: str) -> str | None:
        """File content at a commit, or None if the file is missing there."""
        ...


def parse_log_output(output: str) -> list[CommitInfo]:
    """Parse `git log` output produced with the store's log format.

    Returns:
        Commits in the order git reported them (newest first)
    """
    commits = []
    for record in output.split(_RECORD_SEP):
        record = record.strip("\n")
        if not record:
            continue
        parts = record.split(_FIELD_SEP)
        if len(parts) != 4:
            logger.warning("Skipping malformed git log record: %r", record[:80])
            continue
        sha, author, seconds, subject = parts
        commits.append(
            CommitInfo(
                hash=sha,
                author=author,
                timestamp_ms=int(seconds) * 1000,
                message=subject,
            )
        )
    return commits


class GitArtifactStore:
    """ArtifactFileStore backed by a git working tree.

    Reads on an uninitialized store return empty results; commits raise
    StoreUnavailableError.
    """

    timestamp_resolution_ms = 1000

    def __init__(
        self,
        repo_root: Path,
        author_name: str = "Tracevault User",
        author_email: str = "user@tracevault.local",
        depth: int = HISTORY_DEPTH,
        timeout: float = GIT_TIMEOUT,
    ) -> None:
        self.repo_root = repo_root
        self.author_name = author_name
        self.author_email = author_email
        self.depth = depth
        self.timeout = timeout
        self._ready = False

    @property
    def is_ready(self) -> bool:
        return self._ready

    async def initialize(self) -> None:
        """Verify the working tree is a git repository and mark the store ready.

        Raises:
            StoreUnavailableError: If repo_root is not inside a git repository
        """
        code, _, stderr = await self._git("rev-parse", "--is-inside-work-tree")
        if code != 0:
            raise StoreUnavailableError(f"Not a git repository: {self.repo_root} ({stderr})")
        self._ready = True
        logger.debug("Artifact store ready at %s", self.repo_root)

    def require_ready(self) -> None:
        if not self._ready:
            raise StoreUnavailableError("Artifact store is not initialized")

    async def _git(self, *args: str) -> tuple[int, str, str]:
        """Run git in the repository, returning (returncode, stdout, stderr)."""
        try:
            proc = await asyncio.create_subprocess_exec(
                "git",
                *args,
                cwd=self.repo_root,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except FileNotFoundError:
            raise GitError("git executable not found") from None

        try:
            stdout, stderr = await asyncio.wait_for(proc.communicate(), timeout=self.timeout)
        except TimeoutError:
            proc.kill()
            await proc.wait()
            raise GitError(f"git {args[0]} timed out after {self.timeout}s") from None

        assert proc.returncode is not None
        return (
            proc.returncode,
            stdout.decode("utf-8", errors="replace"),
            stderr.decode("utf-8", errors="replace").strip(),
        )

    async def commit_artifact(self, kind: ArtifactKind, artifact_id: str, message: str) -> None:
        """Stage and commit a single artifact file.

        Raises:
            StoreUnavailableError: If the store is not initialized
            CommitError: If staging or committing fails (including nothing to commit)
        """
        self.require_ready()
        path = artifact_path(kind, artifact_id)
        if not (self.repo_root / path).exists():
            raise CommitError(f"Artifact file not found: {path}")

        try:
            code, _, stderr = await self._git("add", "--", path)
            if code != 0:
                raise CommitError(f"Failed to stage {path}: {stderr}")

            code, stdout, stderr = await self._git(
                "-c",
                f"user.name={self.author_name}",
                "-c",
                f"user.email={self.author_email}",
                "commit",
                "-m",
                message,
                "--",
                path,
            )
        except GitError as e:
            raise CommitError(str(e)) from e

        if code != 0:
            raise CommitError(f"Failed to commit {path}: {stderr or stdout.strip()}")
        logger.info("Committed %s: %s", path, message)

    async def get_history(self, file_path: str) -> list[CommitInfo]:
        """Get commits touching file_path, newest first.

        Raises:
            HistoryFetchError: If git log fails for a reason other than an empty repository
        """
        if not self._ready:
            return []

        try:
            code, stdout, stderr = await self._git(
                "log", f"--max-count={self.depth}", f"--format={_LOG_FORMAT}", "--", file_path
            )
        except GitError as e:
            raise HistoryFetchError(f"{file_path}: {e}") from e

        if code != 0:
            if "does not have any commits" in stderr:
                return []
            raise HistoryFetchError(f"git log failed for {file_path}: {stderr}")
        return parse_log_output(stdout)

    async def read_file_at_commit(self, file_path: str, commit_hash: str) -> str | None:
        """Read file content at a commit.

        Returns:
            File content, or None if the file does not exist at that commit

        Raises:
            GitError: On unexpected git failures
        """
        if not self._ready:
            return None

        code, stdout, stderr = await self._git("show", f"{commit_hash}:{file_path}")
        if code != 0:
            if any(marker in stderr for marker in _MISSING_MARKERS):
                return None
            raise GitError(f"git show {commit_hash}:{file_path} failed: {stderr}")
        return stdout
