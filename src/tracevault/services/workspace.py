"""Artifact files in the working tree.

Project membership is the set of artifact files present in the kind folders.
Snapshot collections are captured from, and restored to, the same folders.
"""

import logging
from pathlib import Path

from ..models import ArtifactCollections, ArtifactKind, Record, TrackedArtifact

logger = logging.getLogger(__name__)

# Collection field -> (folder, file glob)
COLLECTION_FOLDERS: dict[str, tuple[str, str]] = {
    "requirements": (ArtifactKind.REQUIREMENT.folder, "*.md"),
    "use_cases": (ArtifactKind.USE_CASE.folder, "*.md"),
    "test_cases": (ArtifactKind.TEST_CASE.folder, "*.md"),
    "information": (ArtifactKind.INFORMATION.folder, "*.md"),
    "links": ("links", "*.json"),
}


def discover_artifacts(root: Path) -> list[TrackedArtifact]:
    """List tracked artifacts from the kind folders, sorted by kind then id."""
    artifacts = []
    for kind in ArtifactKind:
        folder = root / kind.folder
        if not folder.is_dir():
            continue
        for path in sorted(folder.glob("*.md")):
            artifacts.append(TrackedArtifact.of(kind, path.stem))
    return artifacts


def load_collections(root: Path) -> ArtifactCollections:
    """Read artifact files into collections of {id, path, content} records."""
    data: dict[str, list[Record]] = {}
    for field, (folder, pattern) in COLLECTION_FOLDERS.items():
        records: list[Record] = []
        directory = root / folder
        if directory.is_dir():
            for path in sorted(directory.glob(pattern)):
                records.append(
                    {
                        "id": path.stem,
                        "path": f"{folder}/{path.name}",
                        "content": path.read_text(encoding="utf-8"),
                    }
                )
        data[field] = records
    return ArtifactCollections.model_validate(data)


def write_collections(root: Path, collections: ArtifactCollections) -> None:
    """Make the kind folders match collections exactly.

    Files absent from a collection are deleted; records without a path or
    content are skipped.
    """
    for field, (folder, pattern) in COLLECTION_FOLDERS.items():
        directory = root / folder
        records: list[Record] = getattr(collections, field)

        wanted: dict[str, str] = {}
        for record in records:
            path = record.get("path")
            content = record.get("content")
            if not isinstance(path, str) or not isinstance(content, str):
                logger.warning("Skipping %s record without path/content: %s", field, record.get("id"))
                continue
            wanted[Path(path).name] = content

        if directory.is_dir():
            for existing in directory.glob(pattern):
                if existing.name not in wanted:
                    existing.unlink()
        elif wanted:
            directory.mkdir(parents=True)

        for name, content in wanted.items():
            (directory / name).write_text(content, encoding="utf-8")
