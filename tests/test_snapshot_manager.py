"""Tests for the version snapshot log."""

import asyncio
from pathlib import Path

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from tracevault.core.persistence import SnapshotRepository
from tracevault.core.scheduler import ManualScheduler
from tracevault.core.snapshot_manager import VersionSnapshotManager
from tracevault.errors import SnapshotNotFoundError
from tracevault.models import ArtifactCollections, SnapshotKind


def _manager(
    scheduler: ManualScheduler | None = None,
    repository: SnapshotRepository | None = None,
    collections: ArtifactCollections | None = None,
    max_entries: int = 50,
) -> VersionSnapshotManager:
    return VersionSnapshotManager(
        "p",
        "Project",
        scheduler or ManualScheduler(start_ms=1_000),
        collections=collections,
        repository=repository,
        max_entries=max_entries,
    )


@pytest.mark.asyncio
@pytest.mark.unit
class TestRecordSnapshot:
    """Tests for record_snapshot."""

    async def test_prepends_deep_copy(self) -> None:
        manager = _manager(collections=ArtifactCollections(requirements=[{"id": "REQ-1"}]))

        first = await manager.record_snapshot(SnapshotKind.AUTO_SAVE, "one")
        manager.collections.requirements[0]["id"] = "changed"
        second = await manager.record_snapshot(SnapshotKind.BASELINE, "two", tag="R1")

        assert manager.snapshots == [second, first]
        assert first.data.requirements == [{"id": "REQ-1"}]
        assert second.data.requirements == [{"id": "changed"}]
        assert second.tag == "R1"
        assert first.project_name == "Project"

    async def test_cap_drops_oldest(self) -> None:
        manager = _manager()
        recorded = [await manager.record_snapshot(SnapshotKind.AUTO_SAVE, str(i)) for i in range(55)]

        assert len(manager.snapshots) == 50
        assert manager.snapshots[0] == recorded[-1]
        assert manager.snapshots[-1] == recorded[5]

    async def test_explicit_collections(self) -> None:
        manager = _manager()
        given_state = ArtifactCollections(links=[{"id": "L1"}])
        snapshot = await manager.record_snapshot(SnapshotKind.BASELINE, "b", given_state)
        given_state.links.clear()
        assert snapshot.data.links == [{"id": "L1"}]

    async def test_persists_each_record(self, tmp_path: Path) -> None:
        repository = SnapshotRepository(tmp_path)
        manager = _manager(repository=repository)
        await manager.record_snapshot(SnapshotKind.AUTO_SAVE, "saved")

        reloaded = _manager(repository=repository)
        await reloaded.load()

        assert [s.message for s in reloaded.snapshots] == ["saved"]


@pytest.mark.unit
class TestSnapshotCap:
    """Property tests for the snapshot cap."""

    @given(count=st.integers(min_value=0, max_value=80), cap=st.integers(min_value=1, max_value=60))
    @settings(max_examples=40, deadline=None)
    def test_keeps_newest_entries(self, count: int, cap: int) -> None:
        async def run() -> list[str]:
            manager = _manager(max_entries=cap)
            for i in range(count):
                await manager.record_snapshot(SnapshotKind.AUTO_SAVE, str(i))
            return [s.message for s in manager.snapshots]

        messages = asyncio.run(run())
        assert messages == [str(i) for i in reversed(range(count))][:cap]


@pytest.mark.asyncio
@pytest.mark.unit
class TestAutoSave:
    """Tests for the debounced auto-save."""

    async def test_burst_collapses_to_one_snapshot(self) -> None:
        scheduler = ManualScheduler()
        manager = _manager(scheduler)

        for i in range(10):
            manager.set_collection("requirements", [{"id": f"REQ-{i}"}])
            await scheduler.advance(500)
        assert manager.snapshots == []

        await scheduler.advance(2_000)

        assert len(manager.snapshots) == 1
        snapshot = manager.snapshots[0]
        assert snapshot.kind is SnapshotKind.AUTO_SAVE
        assert snapshot.message == "Auto-save"
        assert snapshot.data.requirements == [{"id": "REQ-9"}]

    async def test_spaced_mutations_each_save(self) -> None:
        scheduler = ManualScheduler()
        manager = _manager(scheduler)

        for i in range(3):
            manager.set_collection("use_cases", [{"id": f"UC-{i}"}])
            await scheduler.advance(2_001)

        assert len(manager.snapshots) == 3
        assert scheduler.pending == 0

    async def test_single_timer_slot(self) -> None:
        scheduler = ManualScheduler()
        manager = _manager(scheduler)
        for _ in range(5):
            manager.notify_mutation()
        assert scheduler.pending == 1
        assert manager.auto_save_pending

    async def test_cancel_pending(self) -> None:
        scheduler = ManualScheduler()
        manager = _manager(scheduler)
        manager.notify_mutation()

        assert manager.cancel_pending() is True
        await scheduler.advance(5_000)

        assert manager.snapshots == []
        assert manager.cancel_pending() is False

    async def test_unknown_collection_rejected(self) -> None:
        with pytest.raises(ValueError, match="Unknown collection"):
            _manager().set_collection("epics", [])


@pytest.mark.asyncio
@pytest.mark.unit
class TestRestoreVersion:
    """Tests for restore_version."""

    async def test_restore_sets_live_state_and_records_restore(self) -> None:
        manager = _manager(
            collections=ArtifactCollections(
                requirements=[{"id": "REQ-1", "title": "Old"}],
                links=[{"id": "L1", "from": "REQ-1", "to": "UC-1"}],
            )
        )
        saved = await manager.record_snapshot(SnapshotKind.BASELINE, "before", tag="R1")
        manager.replace_collections(ArtifactCollections())
        count_before = len(manager.snapshots)

        restore = await manager.restore_version(saved.id)

        assert manager.collections == saved.data
        assert len(manager.snapshots) == count_before + 1
        assert manager.snapshots[0] == restore
        assert restore.kind is SnapshotKind.RESTORE
        assert restore.tag == "R1"
        assert saved.id in restore.message

    async def test_restore_does_not_alias_snapshot(self) -> None:
        manager = _manager(collections=ArtifactCollections(requirements=[{"id": "REQ-1"}]))
        saved = await manager.record_snapshot(SnapshotKind.AUTO_SAVE, "s")
        await manager.restore_version(saved.id)

        manager.collections.requirements[0]["id"] = "mutated"

        assert saved.data.requirements == [{"id": "REQ-1"}]

    async def test_restore_cancels_pending_auto_save(self) -> None:
        scheduler = ManualScheduler()
        manager = _manager(scheduler)
        saved = await manager.record_snapshot(SnapshotKind.AUTO_SAVE, "s")
        manager.notify_mutation()

        await manager.restore_version(saved.id)
        await scheduler.advance(5_000)

        assert [s.kind for s in manager.snapshots] == [SnapshotKind.RESTORE, SnapshotKind.AUTO_SAVE]

    async def test_restore_unknown_raises(self) -> None:
        with pytest.raises(SnapshotNotFoundError):
            await _manager().restore_version("v-missing")
