"""Pydantic data models for tracevault.

This package defines the data structures shared by the engine:
- Tracked artifacts and their commits (ArtifactKind, TrackedArtifact, CommitInfo)
- Baselines pinning artifacts to commits (ProjectBaseline, ArtifactPin)
- Whole-state version snapshots (VersionSnapshot, ArtifactCollections)

Example:
    >>> from tracevault.models import ArtifactKind, TrackedArtifact
    >>> TrackedArtifact.of(ArtifactKind.REQUIREMENT, "REQ-001").file_path
    'requirements/REQ-001.md'
"""

from .artifact import ArtifactKind, CommitInfo, TrackedArtifact, artifact_path
from .baseline import ArtifactPin, ProjectBaseline
from .snapshot import ArtifactCollections, Record, SnapshotKind, VersionSnapshot

__all__ = [
    "ArtifactCollections",
    "ArtifactKind",
    "ArtifactPin",
    "CommitInfo",
    "ProjectBaseline",
    "Record",
    "SnapshotKind",
    "TrackedArtifact",
    "VersionSnapshot",
    "artifact_path",
]
