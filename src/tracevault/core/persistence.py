"""JSON persistence for baselines and version snapshots.

Layout under the .tracevault directory:
- baselines/baseline-<id>.json: one file per baseline, written once
- versions/<project_id>.json: the capped snapshot list of a project, newest first

Blocking file I/O runs in a worker thread.
"""

import asyncio
import logging
import os
from pathlib import Path

from pydantic import TypeAdapter, ValidationError

from ..models import ProjectBaseline, VersionSnapshot

logger = logging.getLogger(__name__)

BASELINES_DIR = "baselines"
VERSIONS_DIR = "versions"

_snapshot_list = TypeAdapter(list[VersionSnapshot])


def _write_atomic(path: Path, text: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp = path.with_name(f".{path.name}.tmp")
    tmp.write_text(text, encoding="utf-8")
    os.replace(tmp, path)


class BaselineRepository:
    """Stores baselines as individual JSON files."""

    def __init__(self, state_dir: Path) -> None:
        self.directory = state_dir / BASELINES_DIR

    def path_for(self, baseline_id: str) -> Path:
        return self.directory / f"baseline-{baseline_id}.json"

    def _load_sync(self, project_id: str) -> list[ProjectBaseline]:
        if not self.directory.exists():
            return []
        baselines = []
        for path in self.directory.glob("baseline-*.json"):
            try:
                baseline = ProjectBaseline.model_validate_json(path.read_text(encoding="utf-8"))
            except (ValidationError, OSError) as e:
                logger.warning("Skipping corrupt baseline %s: %s", path.name, e)
                continue
            if baseline.project_id == project_id:
                baselines.append(baseline)
        return sorted(baselines, key=lambda b: b.timestamp_ms)

    async def load(self, project_id: str) -> list[ProjectBaseline]:
        """Load a project's baselines, oldest first. Corrupt files are skipped."""
        return await asyncio.to_thread(self._load_sync, project_id)

    def _save_sync(self, baseline: ProjectBaseline) -> None:
        path = self.path_for(baseline.id)
        if path.exists():
            raise FileExistsError(f"Baseline already persisted: {baseline.id}")
        _write_atomic(path, baseline.model_dump_json(indent=2))

    async def save(self, baseline: ProjectBaseline) -> None:
        """Persist a new baseline.

        Raises:
            FileExistsError: If a baseline with the same id was already written
        """
        await asyncio.to_thread(self._save_sync, baseline)


class SnapshotRepository:
    """Stores each project's snapshot list as one JSON file."""

    def __init__(self, state_dir: Path) -> None:
        self.directory = state_dir / VERSIONS_DIR

    def path_for(self, project_id: str) -> Path:
        return self.directory / f"{project_id}.json"

    def _load_sync(self, project_id: str) -> list[VersionSnapshot]:
        path = self.path_for(project_id)
        if not path.exists():
            return []
        try:
            return _snapshot_list.validate_json(path.read_text(encoding="utf-8"))
        except (ValidationError, OSError) as e:
            logger.warning("Ignoring unreadable snapshot history %s: %s", path, e)
            return []

    async def load(self, project_id: str) -> list[VersionSnapshot]:
        """Load a project's snapshots, newest first."""
        return await asyncio.to_thread(self._load_sync, project_id)

    def _save_sync(self, project_id: str, snapshots: list[VersionSnapshot]) -> None:
        _write_atomic(self.path_for(project_id), _snapshot_list.dump_json(snapshots, indent=2).decode())

    async def save(self, project_id: str, snapshots: list[VersionSnapshot]) -> None:
        await asyncio.to_thread(self._save_sync, project_id, list(snapshots))
