"""Version snapshot models for the whole-state undo log."""

import copy
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field


class SnapshotKind(str, Enum):
    """Why a version snapshot was recorded."""

    AUTO_SAVE = "auto-save"
    BASELINE = "baseline"
    RESTORE = "restore"


Record = dict[str, Any]


class ArtifactCollections(BaseModel):
    """All artifact collections of a project.

    Records are opaque JSON-like dicts; their business fields are not
    interpreted here.
    """

    requirements: list[Record] = Field(default_factory=list)
    use_cases: list[Record] = Field(default_factory=list)
    test_cases: list[Record] = Field(default_factory=list)
    information: list[Record] = Field(default_factory=list)
    links: list[Record] = Field(default_factory=list)

    def deep_copy(self) -> "ArtifactCollections":
        """Return a copy sharing no mutable state with this one."""
        return ArtifactCollections.model_validate(copy.deepcopy(self.model_dump()))


class VersionSnapshot(BaseModel):
    """Full-state capture used for auto-save and manual restore.

    Attributes:
        id: Snapshot identifier
        project_id: Owning project
        project_name: Project name at capture time
        message: Description of the snapshot
        kind: Why the snapshot was recorded
        timestamp_ms: Capture time in milliseconds since the epoch
        tag: Optional tag (e.g. baseline name)
        data: Deep copy of the artifact collections
    """

    id: str
    project_id: str
    project_name: str
    message: str
    kind: SnapshotKind
    timestamp_ms: int = Field(ge=0)
    tag: str | None = None
    data: ArtifactCollections = Field(default_factory=ArtifactCollections)
