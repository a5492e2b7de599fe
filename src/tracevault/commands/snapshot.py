"""Snapshot commands: save, list and restore version snapshots."""

import asyncio

import typer
from rich.table import Table

from ..constants import MANUAL_SNAPSHOT_TAG
from ..core.session import ProjectSession
from ..models import SnapshotKind, VersionSnapshot
from ..output import get_output_context
from ..services import write_collections
from .project import format_timestamp, require_project, run_in_session

snapshot_app = typer.Typer(help="Version snapshot commands")


@snapshot_app.command("save")
def snapshot_save(
    message: str = typer.Option(..., "-m", "--message", help="Snapshot message"),
) -> None:
    """Record the working tree's artifacts as a snapshot now."""
    ctx = get_output_context()
    project = require_project()

    async def run(session: ProjectSession) -> VersionSnapshot:
        return await session.snapshots.record_snapshot(
            SnapshotKind.AUTO_SAVE, message, tag=MANUAL_SNAPSHOT_TAG
        )

    snapshot = run_in_session(project, run)
    ctx.success(f"Saved snapshot {snapshot.id}", {"snapshot": _summary(snapshot)})


@snapshot_app.command("list")
def snapshot_list() -> None:
    """List version snapshots, newest first."""
    ctx = get_output_context()
    project = require_project()

    async def run(session: ProjectSession) -> list[VersionSnapshot]:
        return session.snapshots.snapshots

    snapshots = run_in_session(project, run)
    data = [_summary(s) for s in snapshots]

    if not snapshots:
        ctx.result(data, "[yellow]No snapshots found[/yellow]")
        return

    table = Table(title="Snapshots")
    table.add_column("ID", style="cyan")
    table.add_column("Kind")
    table.add_column("Date")
    table.add_column("Message")
    table.add_column("Tag")
    for s in snapshots:
        table.add_row(s.id, s.kind.value, format_timestamp(s.timestamp_ms), s.message, s.tag or "")
    ctx.table(table, data)


@snapshot_app.command("restore")
def snapshot_restore(
    version_id: str = typer.Argument(..., metavar="ID", help="Snapshot ID"),
) -> None:
    """Restore the working tree's artifacts from a snapshot."""
    ctx = get_output_context()
    project = require_project()

    async def run(session: ProjectSession) -> VersionSnapshot:
        restored = await session.snapshots.restore_version(version_id)
        await asyncio.to_thread(write_collections, project.repo_root, session.snapshots.collections)
        return restored

    snapshot = run_in_session(project, run)
    ctx.success(f"Restored version {version_id}", {"snapshot": _summary(snapshot)})


def _summary(snapshot: VersionSnapshot) -> dict[str, object]:
    return snapshot.model_dump(mode="json", exclude={"data"})
