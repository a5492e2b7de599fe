"""Project sessions.

A ProjectSession bundles everything the engine needs for one open project:
the artifact store, the baseline manager, the revision resolvers and the
snapshot manager. Sessions have an explicit open/close lifecycle and at most
one session is active at a time.

The debounced auto-save only fires while a session stays open. One-shot CLI
commands close their session before the timer expires and take snapshots
explicitly instead.
"""

import asyncio
import logging
from collections.abc import Callable
from pathlib import Path

from ..config import TracevaultConfig
from ..constants import AUTO_SAVE_DEBOUNCE_MS, MAX_SNAPSHOTS
from ..errors import CommitError
from ..models import (
    ArtifactCollections,
    ArtifactKind,
    ProjectBaseline,
    SnapshotKind,
    TrackedArtifact,
    artifact_path,
)
from ..services.artifact_store import ArtifactFileStore, GitArtifactStore
from ..services.workspace import discover_artifacts, load_collections
from .baseline_manager import ArtifactSource, BaselineManager
from .export_history import RevisionHistorySection, build_revision_history
from .labels import RevisionLabelResolver, increment_revision, parse_revision, set_revision
from .persistence import BaselineRepository, SnapshotRepository
from .revision_window import RevisionRow, RevisionWindowResolver, load_revision_rows
from .scheduler import AsyncioScheduler, Scheduler
from .snapshot_manager import VersionSnapshotManager
from .write_queue import write_queue_for

logger = logging.getLogger(__name__)


class ProjectSession:
    """Engine state for one open project."""

    def __init__(
        self,
        project_id: str,
        project_name: str,
        store: ArtifactFileStore,
        artifact_source: ArtifactSource,
        scheduler: Scheduler | None = None,
        state_dir: Path | None = None,
        working_root: Path | None = None,
        collections: ArtifactCollections | None = None,
        max_snapshots: int = MAX_SNAPSHOTS,
        debounce_ms: int = AUTO_SAVE_DEBOUNCE_MS,
    ) -> None:
        self.project_id = project_id
        self.project_name = project_name
        self.store = store
        self.artifact_source = artifact_source
        self.working_root = working_root
        self.scheduler = scheduler or AsyncioScheduler()
        self.write_queue = write_queue_for(project_id)
        self.windows = RevisionWindowResolver(store)
        self.labels = RevisionLabelResolver(store)
        self.baselines = BaselineManager(
            project_id,
            store,
            artifact_source,
            self.scheduler,
            self.write_queue,
            repository=BaselineRepository(state_dir) if state_dir else None,
            timestamp_resolution_ms=store.timestamp_resolution_ms,
        )
        self.snapshots = VersionSnapshotManager(
            project_id,
            project_name,
            self.scheduler,
            collections=collections,
            repository=SnapshotRepository(state_dir) if state_dir else None,
            max_entries=max_snapshots,
            debounce_ms=debounce_ms,
        )
        self._open = False

    @classmethod
    def for_repository(
        cls,
        repo_root: Path,
        state_dir: Path,
        config: TracevaultConfig,
        scheduler: Scheduler | None = None,
        collections_loader: Callable[[Path], ArtifactCollections] | None = None,
    ) -> "ProjectSession":
        """Build a session over a git working tree using its configuration."""
        store = GitArtifactStore(
            repo_root,
            author_name=config.git.author_name,
            author_email=config.git.author_email,
            depth=config.history.depth,
        )
        return cls(
            project_id=config.project.id,
            project_name=config.project.name,
            store=store,
            artifact_source=lambda: discover_artifacts(repo_root),
            scheduler=scheduler,
            state_dir=state_dir,
            working_root=repo_root,
            collections=collections_loader(repo_root) if collections_loader else None,
            max_snapshots=config.snapshots.max_entries,
            debounce_ms=config.snapshots.debounce_ms,
        )

    @property
    def is_open(self) -> bool:
        return self._open

    async def open(self) -> None:
        """Initialize the store and load persisted baselines and snapshots."""
        if self._open:
            return
        if isinstance(self.store, GitArtifactStore) and not self.store.is_ready:
            await self.store.initialize()
        await self.baselines.load()
        await self.snapshots.load()
        self._open = True
        logger.debug("Opened session for %s", self.project_id)

    async def close(self) -> None:
        """Cancel a pending auto-save and mark the session closed."""
        self.snapshots.cancel_pending()
        self._open = False
        logger.debug("Closed session for %s", self.project_id)

    def tracked_artifacts(self) -> list[TrackedArtifact]:
        return list(self.artifact_source())

    async def commit_artifact(
        self,
        kind: ArtifactKind,
        artifact_id: str,
        message: str,
        bump_revision: bool = False,
    ) -> str | None:
        """Commit one artifact through the project's write queue.

        A successful commit refreshes the live collections, which restarts the
        auto-save timer.

        Args:
            kind: Artifact kind
            artifact_id: Artifact identifier
            message: Commit message
            bump_revision: Increment the revision in the working file first

        Returns:
            The revision written when bump_revision is set, else None

        Raises:
            CommitError: If the store fails to commit or the file is missing
            LabelParseError: If bump_revision is set and the file has no frontmatter
        """
        revision: str | None = None

        async def commit() -> None:
            nonlocal revision
            if bump_revision:
                revision = await asyncio.to_thread(self._bump_revision, kind, artifact_id)
            await self.store.commit_artifact(kind, artifact_id, message)

        await self.write_queue.run(commit, label=f"commit {artifact_id}")
        await self._refresh_collections()
        return revision

    async def _refresh_collections(self) -> None:
        if self.working_root is None:
            self.snapshots.notify_mutation()
            return
        collections = await asyncio.to_thread(load_collections, self.working_root)
        self.snapshots.replace_collections(collections)

    def _bump_revision(self, kind: ArtifactKind, artifact_id: str) -> str:
        if self.working_root is None:
            raise CommitError("Revision bump needs a working tree")
        path = self.working_root / artifact_path(kind, artifact_id)
        if not path.exists():
            raise CommitError(f"Artifact file not found: {path.name}")
        content = path.read_text(encoding="utf-8")
        revision = increment_revision(parse_revision(kind, content) or "")
        path.write_text(set_revision(content, revision), encoding="utf-8")
        logger.debug("Bumped %s to revision %s", artifact_id, revision)
        return revision

    async def create_baseline(
        self,
        name: str,
        description: str | None = None,
        version: str | None = None,
    ) -> ProjectBaseline:
        """Create a baseline and record a matching "baseline" version snapshot."""
        baseline = await self.baselines.create_baseline(name, description, version)
        await self.snapshots.record_snapshot(
            SnapshotKind.BASELINE,
            f"Baseline {baseline.version}: {baseline.name}",
            tag=baseline.name,
        )
        return baseline

    def window_start(self, baseline_id: str | None) -> int | None:
        """Start of the revision window for a view of baseline_id (None = current state)."""
        previous = self.baselines.get_previous_baseline(baseline_id)
        return previous.timestamp_ms if previous else None

    async def revision_rows(
        self,
        kind: ArtifactKind,
        artifact_id: str,
        since_ms: int | None,
    ) -> list[RevisionRow]:
        """Revision history table rows of one artifact, newest first."""
        return await load_revision_rows(self.windows, self.labels, kind, artifact_id, since_ms)

    async def export_revision_history(
        self,
        baseline_id: str | None = None,
    ) -> RevisionHistorySection | None:
        """Revision history section for exporting baseline_id (None = current state)."""
        return await build_revision_history(
            self.windows,
            self.baselines.list_baselines(),
            self.tracked_artifacts(),
            baseline_id,
        )


# The single active session
_active: ProjectSession | None = None


def get_active_session() -> ProjectSession | None:
    return _active


async def activate_session(session: ProjectSession) -> ProjectSession:
    """Make session the active one, closing the previously active session first.

    Closing cancels the old session's pending auto-save so it can never write
    into the history of the newly opened project.
    """
    global _active
    if _active is not None and _active is not session:
        await _active.close()
    await session.open()
    _active = session
    return session


async def deactivate_session() -> None:
    """Close and clear the active session, if any."""
    global _active
    if _active is not None:
        await _active.close()
    _active = None
