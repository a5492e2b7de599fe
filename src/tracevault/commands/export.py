"""Export-history command: the revision history section of an export."""

import typer
from rich.table import Table

from ..core.export_history import RevisionHistorySection, summarize_changes
from ..core.session import ProjectSession
from ..output import get_output_context
from .project import format_timestamp, require_project, run_in_session

NO_CHANGES_MESSAGE = "No changes since last baseline."


def export_history(
    baseline_id: str | None = typer.Option(
        None,
        "--baseline",
        "-b",
        help="Export this baseline instead of the current state",
    ),
) -> None:
    """Show the revision history section an export would contain."""
    ctx = get_output_context()
    project = require_project()

    async def run(session: ProjectSession) -> RevisionHistorySection | None:
        return await session.export_revision_history(baseline_id)

    section = run_in_session(project, run)

    if section is None:
        ctx.result({"section": None}, f"[yellow]{NO_CHANGES_MESSAGE}[/yellow]")
        return

    if ctx.json_mode:
        ctx.print_json({"section": section.model_dump(mode="json")})
        return

    window = "all commits"
    if section.since_ms is not None:
        window = f"since {format_timestamp(section.since_ms)}"
    if section.until_ms is not None:
        window += f" until {format_timestamp(section.until_ms)}"

    table = Table(title=f"Revision History ({window})")
    table.add_column("Artifact", style="cyan")
    table.add_column("Kind")
    table.add_column("Changes")
    for changes in section.changes:
        table.add_row(changes.artifact_id, changes.kind.label, summarize_changes(changes))
    for removed in section.removed:
        table.add_row(removed.artifact_id, removed.kind.label, "[red]Removed[/red]")
    ctx.console.print(table)
    ctx.console.print(f"{section.commit_count} commit(s), {len(section.removed)} removed")
