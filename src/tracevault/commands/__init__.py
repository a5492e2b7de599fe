"""CLI command implementations for tracevault.

This package contains the implementation of each CLI command,
separated from the CLI framework setup in cli.py.
"""

from .baseline import baseline_app, baseline_create, baseline_list, baseline_show
from .commit import commit
from .export import export_history
from .history import history
from .init import init
from .snapshot import snapshot_app, snapshot_list, snapshot_restore, snapshot_save

__all__ = [
    "baseline_app",
    "baseline_create",
    "baseline_list",
    "baseline_show",
    "commit",
    "export_history",
    "history",
    "init",
    "snapshot_app",
    "snapshot_list",
    "snapshot_restore",
    "snapshot_save",
]
