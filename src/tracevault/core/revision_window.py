"""Revision windows: the commits of an artifact after a point in time.

Used by the revision history table (one artifact) and by exporters (a sweep
over every artifact of a project).
"""

import logging
from collections.abc import Iterable

from pydantic import BaseModel

from ..models import ArtifactKind, CommitInfo, TrackedArtifact, artifact_path
from ..services.artifact_store import ArtifactFileStore
from .labels import RevisionLabelResolver

logger = logging.getLogger(__name__)


def select_window(
    history: Iterable[CommitInfo],
    since_ms: int | None,
    until_ms: int | None = None,
) -> list[CommitInfo]:
    """Filter history to since_ms < timestamp <= until_ms, ascending by time.

    Either bound may be None for an open end. The input may be in any order;
    commits sharing a timestamp keep the relative order of an ascending log.
    """
    # Stores report newest first; reverse before the stable sort
    ordered = sorted(reversed(list(history)), key=lambda c: c.timestamp_ms)
    return [
        c
        for c in ordered
        if (since_ms is None or c.timestamp_ms > since_ms)
        and (until_ms is None or c.timestamp_ms <= until_ms)
    ]


class RevisionWindowResolver:
    """Computes revision windows from the artifact store."""

    def __init__(self, store: ArtifactFileStore) -> None:
        self.store = store

    async def commits_since(
        self,
        kind: ArtifactKind,
        artifact_id: str,
        since_ms: int | None,
    ) -> list[CommitInfo]:
        """Commits of one artifact strictly after since_ms (all when None).

        Returns:
            Commits in ascending time order

        Raises:
            HistoryFetchError: If the store cannot read the history
        """
        history = await self.store.get_history(artifact_path(kind, artifact_id))
        return select_window(history, since_ms)

    async def sweep_since(
        self,
        artifacts: Iterable[TrackedArtifact],
        since_ms: int | None,
    ) -> dict[str, list[CommitInfo]]:
        """Revision windows for many artifacts, fetched one after another.

        An artifact whose history cannot be fetched gets an empty list.
        """
        windows: dict[str, list[CommitInfo]] = {}
        for artifact in artifacts:
            try:
                windows[artifact.id] = await self.commits_since(artifact.kind, artifact.id, since_ms)
            except Exception as e:
                logger.warning("History unavailable for %s: %s", artifact.id, e)
                windows[artifact.id] = []
        return windows


class RevisionRow(BaseModel):
    """One row of an artifact's revision history table."""

    commit: CommitInfo
    revision: str


async def load_revision_rows(
    windows: RevisionWindowResolver,
    labels: RevisionLabelResolver,
    kind: ArtifactKind,
    artifact_id: str,
    since_ms: int | None,
) -> list[RevisionRow]:
    """Commits in the window paired with their revision labels, newest first."""
    commits = await windows.commits_since(kind, artifact_id, since_ms)
    path = artifact_path(kind, artifact_id)
    rows = []
    for commit in reversed(commits):
        revision = await labels.label_at_commit(kind, path, commit.hash)
        rows.append(RevisionRow(commit=commit, revision=revision))
    return rows
