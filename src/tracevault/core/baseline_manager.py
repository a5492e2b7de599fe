"""Baseline creation and lookup.

A baseline pins every artifact currently in the project to its head commit.
Baselines are append-only: once created they are never modified, and the
list is kept ordered by creation time.
"""

import asyncio
import logging
import uuid
from collections.abc import Callable, Iterable, Sequence

from ..errors import BaselineNotFoundError
from ..models import ArtifactPin, ProjectBaseline, TrackedArtifact
from ..services.artifact_store import ArtifactFileStore
from .persistence import BaselineRepository
from .scheduler import Clock
from .write_queue import WriteQueue

logger = logging.getLogger(__name__)

ArtifactSource = Callable[[], Iterable[TrackedArtifact]]


def find_previous_baseline(
    baselines: Sequence[ProjectBaseline],
    target: ProjectBaseline | None,
) -> ProjectBaseline | None:
    """Find the baseline a revision window should start from.

    Args:
        baselines: All baselines of the project, in any order
        target: Baseline being viewed, or None for the current state

    Returns:
        For None, the most recent baseline. Otherwise the most recent baseline
        strictly older than target; baselines sharing target's timestamp never
        count as previous. None when there is no such baseline.
    """
    ordered = sorted(baselines, key=lambda b: b.timestamp_ms, reverse=True)
    if target is None:
        return ordered[0] if ordered else None
    for baseline in ordered:
        if baseline.id != target.id and baseline.timestamp_ms < target.timestamp_ms:
            return baseline
    return None


def next_version_label(existing: int) -> str:
    """Two-digit version label for the baseline after `existing` ones."""
    return f"{existing + 1:02d}"


class BaselineManager:
    """Creates and looks up the baselines of one project."""

    def __init__(
        self,
        project_id: str,
        store: ArtifactFileStore,
        artifact_source: ArtifactSource,
        clock: Clock,
        write_queue: WriteQueue,
        repository: BaselineRepository | None = None,
        timestamp_resolution_ms: int = 1,
    ) -> None:
        self.project_id = project_id
        self.store = store
        self.artifact_source = artifact_source
        self.clock = clock
        self.write_queue = write_queue
        self.repository = repository
        self.timestamp_resolution_ms = timestamp_resolution_ms
        self._baselines: list[ProjectBaseline] = []

    async def load(self) -> None:
        """Load persisted baselines, replacing the in-memory list."""
        if self.repository is None:
            return
        self._baselines = await self.repository.load(self.project_id)
        logger.debug("Loaded %d baselines for %s", len(self._baselines), self.project_id)

    def list_baselines(self) -> list[ProjectBaseline]:
        """All baselines, oldest first."""
        return list(self._baselines)

    def get_baseline(self, baseline_id: str) -> ProjectBaseline:
        """Look up a baseline by id.

        Raises:
            BaselineNotFoundError: If no baseline has that id
        """
        for baseline in self._baselines:
            if baseline.id == baseline_id:
                return baseline
        raise BaselineNotFoundError(f"Baseline not found: {baseline_id}")

    def get_previous_baseline(self, target_id: str | None) -> ProjectBaseline | None:
        """Previous baseline relative to target_id (None means the current state).

        Raises:
            BaselineNotFoundError: If target_id is given but unknown
        """
        target = self.get_baseline(target_id) if target_id is not None else None
        return find_previous_baseline(self._baselines, target)

    def _enumerate_artifacts(self) -> list[TrackedArtifact]:
        try:
            return list(self.artifact_source())
        except Exception as e:
            logger.warning("Could not enumerate artifacts of %s: %s", self.project_id, e)
            return []

    async def _capture_pins(self, artifacts: Iterable[TrackedArtifact]) -> dict[str, ArtifactPin]:
        pins: dict[str, ArtifactPin] = {}
        for artifact in artifacts:
            try:
                history = await self.store.get_history(artifact.file_path)
            except Exception as e:
                logger.warning("Skipping %s in baseline: %s", artifact.id, e)
                continue
            if history:
                # Store history is newest first
                pins[artifact.id] = ArtifactPin(commit_hash=history[0].hash, kind=artifact.kind)
        return pins

    async def _wait_past_timestamp(self, timestamp_ms: int) -> None:
        """Sleep until store timestamps can no longer equal or precede timestamp_ms."""
        resolution = self.timestamp_resolution_ms
        if resolution <= 1:
            return
        boundary = (timestamp_ms // resolution + 1) * resolution
        delay_ms = boundary - self.clock.now_ms()
        if delay_ms > 0:
            logger.debug("Holding write queue %d ms past baseline time", delay_ms)
            await asyncio.sleep(delay_ms / 1000)

    async def create_baseline(
        self,
        name: str,
        description: str | None = None,
        version: str | None = None,
    ) -> ProjectBaseline:
        """Pin the head commit of every artifact in the project.

        Runs through the project's write queue so no commit is in flight while
        heads are captured. Artifacts without history are left out, as are
        artifacts whose history cannot be read. When the store reports coarse
        commit times, the queue stays held until the next tick so a later
        commit can never carry a timestamp at or before the baseline's.

        Args:
            name: Baseline name
            description: Optional description
            version: Version label; defaults to the next two-digit number

        Returns:
            The new baseline
        """

        async def create() -> ProjectBaseline:
            artifacts = self._enumerate_artifacts()
            pins = await self._capture_pins(artifacts)
            timestamp_ms = self.clock.now_ms()
            baseline = ProjectBaseline(
                id=f"bl-{timestamp_ms}-{uuid.uuid4().hex[:6]}",
                project_id=self.project_id,
                version=version or next_version_label(len(self._baselines)),
                name=name,
                description=description or "",
                timestamp_ms=timestamp_ms,
                artifact_commits=pins,
            )
            if self.repository is not None:
                await self.repository.save(baseline)
            self._baselines.append(baseline)
            logger.info(
                "Created baseline %s (%s) pinning %d of %d artifacts",
                baseline.name,
                baseline.version,
                len(pins),
                len(artifacts),
            )
            await self._wait_past_timestamp(timestamp_ms)
            return baseline

        return await self.write_queue.run(create, label=f"baseline {name}")
