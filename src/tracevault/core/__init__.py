"""Core engine for tracevault.

- baseline_manager: append-only baselines pinning artifacts to commits
- revision_window: commits of an artifact after a point in time
- labels: revision labels from artifact frontmatter
- snapshot_manager: whole-state version snapshots with debounced auto-save
- export_history: revision history section of document exports
- session: explicit per-project engine state
"""

from .baseline_manager import BaselineManager, find_previous_baseline, next_version_label
from .export_history import (
    ArtifactChanges,
    RemovedArtifact,
    RevisionHistorySection,
    build_revision_history,
    summarize_changes,
)
from .labels import (
    RevisionLabelResolver,
    increment_revision,
    parse_frontmatter,
    parse_revision,
    set_revision,
)
from .persistence import BaselineRepository, SnapshotRepository
from .revision_window import RevisionRow, RevisionWindowResolver, load_revision_rows, select_window
from .scheduler import AsyncioScheduler, Debouncer, ManualScheduler, Scheduler
from .session import ProjectSession, activate_session, deactivate_session, get_active_session
from .snapshot_manager import VersionSnapshotManager
from .write_queue import WriteQueue, write_queue_for

__all__ = [
    "ArtifactChanges",
    "AsyncioScheduler",
    "BaselineManager",
    "BaselineRepository",
    "Debouncer",
    "ManualScheduler",
    "ProjectSession",
    "RemovedArtifact",
    "RevisionHistorySection",
    "RevisionLabelResolver",
    "RevisionRow",
    "RevisionWindowResolver",
    "Scheduler",
    "SnapshotRepository",
    "VersionSnapshotManager",
    "WriteQueue",
    "activate_session",
    "build_revision_history",
    "deactivate_session",
    "find_previous_baseline",
    "get_active_session",
    "increment_revision",
    "load_revision_rows",
    "next_version_label",
    "parse_frontmatter",
    "parse_revision",
    "select_window",
    "set_revision",
    "summarize_changes",
    "write_queue_for",
]
