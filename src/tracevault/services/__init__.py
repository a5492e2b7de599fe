"""External service integrations for tracevault.

- git: synchronous git helpers (repository discovery)
- artifact_store: the ArtifactFileStore protocol and its git implementation
- workspace: artifact files of the working tree (membership and collections)
"""

from .artifact_store import ArtifactFileStore, GitArtifactStore, parse_log_output
from .git import GitError, get_repo_root, run_git
from .workspace import discover_artifacts, load_collections, write_collections

__all__ = [
    "ArtifactFileStore",
    "GitArtifactStore",
    "GitError",
    "discover_artifacts",
    "get_repo_root",
    "load_collections",
    "parse_log_output",
    "run_git",
    "write_collections",
]
