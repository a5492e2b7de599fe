"""Shared test fixtures for tracevault tests."""

import asyncio
import os
import subprocess
from collections.abc import Callable, Generator
from pathlib import Path

import pytest
from typer.testing import CliRunner

from tracevault.core import session as session_module
from tracevault.core import write_queue
from tracevault.errors import HistoryFetchError, StoreUnavailableError
from tracevault.models import ArtifactKind, CommitInfo, artifact_path
from tracevault.services.git import GitError


class FakeArtifactStore:
    """In-memory ArtifactFileStore.

    Histories are kept newest first, like git log. Failures can be injected
    per file path (history) or per commit hash (reads).
    """

    def __init__(self) -> None:
        self.ready = True
        self.timestamp_resolution_ms = 1
        self.histories: dict[str, list[CommitInfo]] = {}
        self.contents: dict[tuple[str, str], str] = {}
        self.failing_histories: set[str] = set()
        self.failing_reads: set[str] = set()
        self.commit_delay = 0.0
        self.clock_ms = 0
        self.active_commits = 0
        self.max_concurrent_commits = 0
        self.history_calls: list[str] = []
        self._counter = 0

    @property
    def is_ready(self) -> bool:
        return self.ready

    def add_commit(
        self,
        kind: ArtifactKind,
        artifact_id: str,
        timestamp_ms: int,
        message: str = "",
        content: str | None = None,
        author: str = "Test User",
    ) -> CommitInfo:
        """Record a commit of an artifact at timestamp_ms."""
        path = artifact_path(kind, artifact_id)
        self._counter += 1
        commit = CommitInfo(
            hash=f"{self._counter:040x}",
            message=message or f"Update {artifact_id}",
            author=author,
            timestamp_ms=timestamp_ms,
        )
        history = self.histories.setdefault(path, [])
        history.insert(0, commit)
        history.sort(key=lambda c: c.timestamp_ms, reverse=True)
        if content is not None:
            self.contents[(path, commit.hash)] = content
        return commit

    async def commit_artifact(self, kind: ArtifactKind, artifact_id: str, message: str) -> None:
        if not self.ready:
            raise StoreUnavailableError("Artifact store is not initialized")
        self.active_commits += 1
        self.max_concurrent_commits = max(self.max_concurrent_commits, self.active_commits)
        try:
            await asyncio.sleep(self.commit_delay)
            self.clock_ms += 1
            self.add_commit(kind, artifact_id, self.clock_ms, message)
        finally:
            self.active_commits -= 1

    async def get_history(self, file_path: str) -> list[CommitInfo]:
        self.history_calls.append(file_path)
        if file_path in self.failing_histories:
            raise HistoryFetchError(f"git log failed for {file_path}")
        return list(self.histories.get(file_path, []))

    async def read_file_at_commit(self, file_path: str, commit_hash: str) -> str | None:
        if commit_hash in self.failing_reads:
            raise GitError(f"git show {commit_hash}:{file_path} failed")
        return self.contents.get((file_path, commit_hash))


def artifact_content(title: str, revision: str | None = "01") -> str:
    """Markdown artifact body with YAML frontmatter."""
    lines = ["---", f"title: {title}"]
    if revision is not None:
        lines.append(f'revision: "{revision}"')
    lines += ["---", "", f"# {title}", ""]
    return "\n".join(lines)


@pytest.fixture(autouse=True)
def clear_engine_registries() -> Generator[None, None, None]:
    """Clear the write queue registry and active session around each test."""
    write_queue._queues.clear()
    session_module._active = None
    yield
    write_queue._queues.clear()
    session_module._active = None


@pytest.fixture
def runner() -> CliRunner:
    """Create CLI test runner."""
    return CliRunner()


@pytest.fixture
def fake_store() -> FakeArtifactStore:
    """Empty in-memory artifact store."""
    return FakeArtifactStore()


@pytest.fixture
def temp_git_repo(tmp_path: Path) -> Generator[Path, None, None]:
    """Create a temporary git repository.

    Initializes a git repo with user config and an initial commit.
    Changes cwd to the repo directory for the duration of the test.
    """
    subprocess.run(
        ["git", "init"],
        cwd=tmp_path,
        check=True,
        capture_output=True,
    )
    subprocess.run(
        ["git", "config", "user.email", "test@test.com"],
        cwd=tmp_path,
        check=True,
        capture_output=True,
    )
    subprocess.run(
        ["git", "config", "user.name", "Test User"],
        cwd=tmp_path,
        check=True,
        capture_output=True,
    )

    # Create initial commit
    (tmp_path / "README.md").write_text("# Test\n")
    subprocess.run(
        ["git", "add", "."],
        cwd=tmp_path,
        check=True,
        capture_output=True,
    )
    subprocess.run(
        ["git", "commit", "-m", "Initial commit"],
        cwd=tmp_path,
        check=True,
        capture_output=True,
    )

    original_cwd = os.getcwd()
    os.chdir(tmp_path)
    try:
        yield tmp_path
    finally:
        os.chdir(original_cwd)


@pytest.fixture
def write_artifact(temp_git_repo: Path) -> Callable[..., Path]:
    """Write an artifact file into the temporary repository."""

    def write(
        kind: ArtifactKind,
        artifact_id: str,
        title: str = "Artifact",
        revision: str | None = "01",
    ) -> Path:
        path = temp_git_repo / artifact_path(kind, artifact_id)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(artifact_content(title, revision))
        return path

    return write


@pytest.fixture
def initialized_project(temp_git_repo: Path) -> Path:
    """Create an initialized .tracevault directory with minimal config.

    Returns the repo root path.
    """
    state_dir = temp_git_repo / ".tracevault"
    state_dir.mkdir()
    (state_dir / "baselines").mkdir()
    (state_dir / "versions").mkdir()
    (state_dir / "config.toml").write_text(
        """[project]
id = "test-project"
name = "Test Project"

[git]
author_name = "Tracevault Test"
author_email = "tracevault@test.com"
"""
    )
    for kind in ArtifactKind:
        (temp_git_repo / kind.folder).mkdir()
    return temp_git_repo
