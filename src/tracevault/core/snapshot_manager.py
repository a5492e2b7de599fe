"""Version snapshot history for auto-save and manual restore.

Keeps a bounded, newest-first list of whole-state snapshots of a project's
artifact collections. This log is independent of git history: it is a
lightweight undo log, not a record of commits.
"""

import logging
import uuid

from ..constants import AUTO_SAVE_DEBOUNCE_MS, AUTO_SAVE_MESSAGE, MAX_SNAPSHOTS
from ..errors import SnapshotNotFoundError
from ..models import ArtifactCollections, Record, SnapshotKind, VersionSnapshot
from .persistence import SnapshotRepository
from .scheduler import Debouncer, Scheduler

logger = logging.getLogger(__name__)


class VersionSnapshotManager:
    """Owns the live artifact collections and the snapshot log of one project.

    Every mutation of the live collections (re)starts a single debounce timer;
    when it expires without further mutations one auto-save snapshot is taken.
    """

    def __init__(
        self,
        project_id: str,
        project_name: str,
        scheduler: Scheduler,
        collections: ArtifactCollections | None = None,
        repository: SnapshotRepository | None = None,
        max_entries: int = MAX_SNAPSHOTS,
        debounce_ms: int = AUTO_SAVE_DEBOUNCE_MS,
    ) -> None:
        self.project_id = project_id
        self.project_name = project_name
        self.scheduler = scheduler
        self.repository = repository
        self.max_entries = max_entries
        self._collections = collections.deep_copy() if collections else ArtifactCollections()
        self._snapshots: list[VersionSnapshot] = []
        self._auto_save = Debouncer(scheduler, debounce_ms, self._auto_save_now)

    async def load(self) -> None:
        """Load persisted snapshots, keeping at most max_entries."""
        if self.repository is None:
            return
        self._snapshots = (await self.repository.load(self.project_id))[: self.max_entries]

    @property
    def collections(self) -> ArtifactCollections:
        """Live artifact collections."""
        return self._collections

    @property
    def snapshots(self) -> list[VersionSnapshot]:
        """Recorded snapshots, newest first."""
        return list(self._snapshots)

    @property
    def auto_save_pending(self) -> bool:
        return self._auto_save.is_pending

    def get_snapshot(self, version_id: str) -> VersionSnapshot:
        """Look up a snapshot by id.

        Raises:
            SnapshotNotFoundError: If no snapshot has that id
        """
        for snapshot in self._snapshots:
            if snapshot.id == version_id:
                return snapshot
        raise SnapshotNotFoundError(f"Version not found: {version_id}")

    def notify_mutation(self) -> None:
        """Record that the live collections changed; restarts the auto-save timer."""
        self._auto_save.trigger()

    def set_collection(self, field: str, records: list[Record]) -> None:
        """Replace one collection (e.g. "requirements") and schedule an auto-save.

        Raises:
            ValueError: If field is not an artifact collection
        """
        if field not in ArtifactCollections.model_fields:
            raise ValueError(f"Unknown collection: {field}")
        setattr(self._collections, field, list(records))
        self.notify_mutation()

    def replace_collections(self, collections: ArtifactCollections) -> None:
        """Replace all live collections and schedule an auto-save."""
        self._collections = collections.deep_copy()
        self.notify_mutation()

    def cancel_pending(self) -> bool:
        """Cancel a pending auto-save. Returns True if one was pending."""
        cancelled = self._auto_save.cancel()
        if cancelled:
            logger.debug("Cancelled pending auto-save for %s", self.project_id)
        return cancelled

    async def _auto_save_now(self) -> None:
        await self.record_snapshot(SnapshotKind.AUTO_SAVE, AUTO_SAVE_MESSAGE)

    async def record_snapshot(
        self,
        kind: SnapshotKind,
        message: str,
        collections: ArtifactCollections | None = None,
        tag: str | None = None,
    ) -> VersionSnapshot:
        """Capture a deep copy of the collections as the newest snapshot.

        Args:
            kind: Why the snapshot is taken
            message: Snapshot description
            collections: State to capture; defaults to the live collections
            tag: Optional tag such as a baseline name

        Returns:
            The recorded snapshot
        """
        timestamp_ms = self.scheduler.now_ms()
        snapshot = VersionSnapshot(
            id=f"v-{timestamp_ms}-{uuid.uuid4().hex[:6]}",
            project_id=self.project_id,
            project_name=self.project_name,
            message=message,
            kind=kind,
            timestamp_ms=timestamp_ms,
            tag=tag,
            data=(collections or self._collections).deep_copy(),
        )
        self._snapshots = [snapshot, *self._snapshots][: self.max_entries]
        if self.repository is not None:
            await self.repository.save(self.project_id, self._snapshots)
        logger.debug("Recorded %s snapshot %s", kind.value, snapshot.id)
        return snapshot

    async def restore_version(self, version_id: str) -> VersionSnapshot:
        """Overwrite the live collections with a snapshot's data.

        The restore itself is recorded as a new "restore" snapshot. A pending
        auto-save is cancelled since the restore snapshot captures the same state.

        Returns:
            The new restore snapshot

        Raises:
            SnapshotNotFoundError: If version_id is unknown
        """
        source = self.get_snapshot(version_id)
        self.cancel_pending()
        self._collections = source.data.deep_copy()
        logger.info("Restored %s to version %s", self.project_id, source.id)
        return await self.record_snapshot(
            SnapshotKind.RESTORE,
            f"Restored version {source.id} ({source.message})",
            tag=source.tag,
        )
