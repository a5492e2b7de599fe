"""Tests for working-tree artifact discovery and collections."""

from pathlib import Path

import pytest

from tracevault.models import ArtifactCollections, ArtifactKind, TrackedArtifact
from tracevault.services.workspace import discover_artifacts, load_collections, write_collections


@pytest.fixture
def workspace(tmp_path: Path) -> Path:
    """Working tree with a few artifacts."""
    (tmp_path / "requirements").mkdir()
    (tmp_path / "requirements" / "REQ-002.md").write_text("req 2")
    (tmp_path / "requirements" / "REQ-001.md").write_text("req 1")
    (tmp_path / "usecases").mkdir()
    (tmp_path / "usecases" / "UC-001.md").write_text("uc 1")
    (tmp_path / "usecases" / "notes.txt").write_text("ignored")
    (tmp_path / "links").mkdir()
    (tmp_path / "links" / "L-1.json").write_text('{"from": "REQ-001"}')
    return tmp_path


@pytest.mark.unit
class TestDiscoverArtifacts:
    """Tests for discover_artifacts."""

    def test_sorted_by_kind_then_id(self, workspace: Path) -> None:
        assert discover_artifacts(workspace) == [
            TrackedArtifact.of(ArtifactKind.REQUIREMENT, "REQ-001"),
            TrackedArtifact.of(ArtifactKind.REQUIREMENT, "REQ-002"),
            TrackedArtifact.of(ArtifactKind.USE_CASE, "UC-001"),
        ]

    def test_empty_tree(self, tmp_path: Path) -> None:
        assert discover_artifacts(tmp_path) == []


@pytest.mark.unit
class TestCollections:
    """Tests for load_collections and write_collections."""

    def test_load(self, workspace: Path) -> None:
        collections = load_collections(workspace)
        assert [r["id"] for r in collections.requirements] == ["REQ-001", "REQ-002"]
        assert collections.use_cases == [
            {"id": "UC-001", "path": "usecases/UC-001.md", "content": "uc 1"}
        ]
        assert collections.links[0]["content"] == '{"from": "REQ-001"}'
        assert collections.test_cases == []

    def test_write_makes_tree_match(self, workspace: Path) -> None:
        saved = load_collections(workspace)
        (workspace / "requirements" / "REQ-003.md").write_text("new")
        (workspace / "requirements" / "REQ-001.md").write_text("edited")
        (workspace / "usecases" / "UC-001.md").unlink()

        write_collections(workspace, saved)

        assert load_collections(workspace) == saved
        assert (workspace / "usecases" / "notes.txt").exists()

    def test_write_creates_missing_folders(self, tmp_path: Path) -> None:
        collections = ArtifactCollections(
            test_cases=[{"id": "TC-1", "path": "testcases/TC-1.md", "content": "tc"}]
        )
        write_collections(tmp_path, collections)
        assert (tmp_path / "testcases" / "TC-1.md").read_text() == "tc"

    def test_write_skips_incomplete_records(self, tmp_path: Path) -> None:
        write_collections(tmp_path, ArtifactCollections(requirements=[{"id": "REQ-1"}]))
        assert not (tmp_path / "requirements").exists()
