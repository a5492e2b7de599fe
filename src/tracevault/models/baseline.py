"""Project baseline model.

A baseline pins each tracked artifact to the commit it was at when the
baseline was taken. Baselines never change once created.
"""

from collections.abc import Mapping
from types import MappingProxyType
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator

from .artifact import ArtifactKind


class ArtifactPin(BaseModel):
    """Commit an artifact was pinned to by a baseline."""

    model_config = ConfigDict(frozen=True)

    commit_hash: str
    kind: ArtifactKind


class ProjectBaseline(BaseModel):
    """Named, immutable snapshot of artifact commit hashes.

    Attributes:
        id: Baseline identifier
        project_id: Owning project
        version: Version label (e.g. "01", "02")
        name: User-supplied name
        description: Optional description
        timestamp_ms: Creation time in milliseconds since the epoch
        artifact_commits: Artifact id -> pinned commit. Artifacts without any
            history when the baseline was taken are absent.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    project_id: str
    version: str
    name: str
    description: str = ""
    timestamp_ms: int = Field(ge=0)
    artifact_commits: Mapping[str, ArtifactPin] = Field(default_factory=dict)

    @field_validator("artifact_commits", mode="after")
    @classmethod
    def _freeze_commits(cls, value: Mapping[str, ArtifactPin]) -> Mapping[str, ArtifactPin]:
        return MappingProxyType(dict(value))

    @field_serializer("artifact_commits")
    def _serialize_commits(self, value: Mapping[str, ArtifactPin]) -> dict[str, Any]:
        return {artifact_id: pin.model_dump(mode="json") for artifact_id, pin in value.items()}
