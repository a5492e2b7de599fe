"""Revision history section of document exports.

An export targets either the current state or a baseline. Its revision
history lists the commits made since the previous baseline, up to the
exported baseline when there is one. The section is omitted when nothing
changed in that window.
"""

from collections.abc import Sequence

from pydantic import BaseModel, Field

from ..errors import BaselineNotFoundError
from ..models import ArtifactKind, CommitInfo, ProjectBaseline, TrackedArtifact
from .baseline_manager import find_previous_baseline
from .revision_window import RevisionWindowResolver, select_window


class ArtifactChanges(BaseModel):
    """Changes of one artifact inside the export window."""

    artifact_id: str
    kind: ArtifactKind
    commits: list[CommitInfo] = Field(default_factory=list)  # ascending by time
    is_new: bool = False


class RemovedArtifact(BaseModel):
    """Artifact pinned by the previous baseline that is no longer in the project."""

    artifact_id: str
    kind: ArtifactKind


class RevisionHistorySection(BaseModel):
    """Data of the "Revision History" section of an export."""

    baseline_id: str | None = None  # None for the current state
    previous_baseline_id: str | None = None
    since_ms: int | None = None
    until_ms: int | None = None
    changes: list[ArtifactChanges] = Field(default_factory=list)
    removed: list[RemovedArtifact] = Field(default_factory=list)

    @property
    def commit_count(self) -> int:
        return sum(len(c.commits) for c in self.changes)


def summarize_changes(changes: ArtifactChanges) -> str:
    """Text of the "Changes" cell for one artifact row."""
    if changes.is_new:
        return f"{changes.kind.label} added"
    if len(changes.commits) == 1:
        return changes.commits[0].message
    newest_first = sorted(changes.commits, key=lambda c: c.timestamp_ms, reverse=True)
    return "\n".join(f"• {c.message}" for c in newest_first)


async def build_revision_history(
    windows: RevisionWindowResolver,
    baselines: Sequence[ProjectBaseline],
    artifacts: Sequence[TrackedArtifact],
    baseline_id: str | None = None,
) -> RevisionHistorySection | None:
    """Build the revision history section for an export.

    Args:
        windows: Resolver used to sweep artifact histories
        baselines: All baselines of the project
        artifacts: Artifacts currently in the project. A baseline export
            also sweeps every artifact the baseline pinned.
        baseline_id: Exported baseline, or None for the current state

    Returns:
        The section, or None when the window has no commits and no artifact
        was removed

    Raises:
        BaselineNotFoundError: If baseline_id is not among baselines
    """
    selected: ProjectBaseline | None = None
    if baseline_id is not None:
        selected = next((b for b in baselines if b.id == baseline_id), None)
        if selected is None:
            raise BaselineNotFoundError(f"Baseline not found: {baseline_id}")

    previous = find_previous_baseline(baselines, selected)
    since_ms = previous.timestamp_ms if previous else None
    until_ms = selected.timestamp_ms if selected else None

    scope = list(artifacts)
    if selected is not None:
        known = {a.id for a in scope}
        scope.extend(
            TrackedArtifact.of(pin.kind, artifact_id)
            for artifact_id, pin in sorted(selected.artifact_commits.items())
            if artifact_id not in known
        )

    swept = await windows.sweep_since(scope, since_ms)

    changes = []
    for artifact in scope:
        commits = select_window(swept.get(artifact.id, []), since_ms, until_ms)
        if not commits:
            continue
        is_new = previous is not None and artifact.id not in previous.artifact_commits
        changes.append(
            ArtifactChanges(
                artifact_id=artifact.id,
                kind=artifact.kind,
                commits=commits,
                is_new=is_new,
            )
        )

    removed: list[RemovedArtifact] = []
    if previous is not None:
        present = set(selected.artifact_commits) if selected else {a.id for a in artifacts}
        removed = [
            RemovedArtifact(artifact_id=artifact_id, kind=pin.kind)
            for artifact_id, pin in sorted(previous.artifact_commits.items())
            if artifact_id not in present
        ]

    if not changes and not removed:
        return None

    return RevisionHistorySection(
        baseline_id=selected.id if selected else None,
        previous_baseline_id=previous.id if previous else None,
        since_ms=since_ms,
        until_ms=until_ms,
        changes=changes,
        removed=removed,
    )
