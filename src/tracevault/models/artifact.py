"""Tracked artifact and commit models."""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class ArtifactKind(str, Enum):
    """The five kinds of versioned engineering artifacts."""

    REQUIREMENT = "requirement"
    USE_CASE = "useCase"
    TEST_CASE = "testCase"
    INFORMATION = "information"
    RISK = "risk"

    @property
    def folder(self) -> str:
        """Working-tree folder holding artifacts of this kind."""
        return _FOLDERS[self]

    @property
    def label(self) -> str:
        """Human-readable kind name."""
        return _LABELS[self]

    @classmethod
    def parse(cls, value: str) -> "ArtifactKind":
        """Resolve a kind from its value or its folder name.

        Raises:
            ValueError: If value names no kind
        """
        for kind in cls:
            if value in (kind.value, kind.folder) or value.lower() == kind.value.lower():
                return kind
        raise ValueError(f"Unknown artifact kind: {value}")


_FOLDERS = {
    ArtifactKind.REQUIREMENT: "requirements",
    ArtifactKind.USE_CASE: "usecases",
    ArtifactKind.TEST_CASE: "testcases",
    ArtifactKind.INFORMATION: "information",
    ArtifactKind.RISK: "risks",
}

_LABELS = {
    ArtifactKind.REQUIREMENT: "Requirement",
    ArtifactKind.USE_CASE: "Use case",
    ArtifactKind.TEST_CASE: "Test case",
    ArtifactKind.INFORMATION: "Information",
    ArtifactKind.RISK: "Risk",
}


def artifact_path(kind: ArtifactKind, artifact_id: str) -> str:
    """Repository-relative path of an artifact file."""
    return f"{kind.folder}/{artifact_id}.md"


class TrackedArtifact(BaseModel):
    """An artifact that belongs to the current project.

    Attributes:
        id: Artifact identifier (e.g. REQ-001)
        kind: Artifact kind
        file_path: Repository-relative path, derived from kind and id
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(min_length=1, description="Artifact identifier")
    kind: ArtifactKind
    file_path: str = Field(description="Path of the artifact file")

    @classmethod
    def of(cls, kind: ArtifactKind, artifact_id: str) -> "TrackedArtifact":
        """Build a tracked artifact with its derived file path."""
        return cls(id=artifact_id, kind=kind, file_path=artifact_path(kind, artifact_id))


class CommitInfo(BaseModel):
    """One commit in an artifact file's history.

    Attributes:
        hash: Full commit hash
        message: Commit subject
        author: Author name
        timestamp_ms: Author time in milliseconds since the epoch
    """

    model_config = ConfigDict(frozen=True)

    hash: str
    message: str = ""
    author: str = ""
    timestamp_ms: int = Field(ge=0)
