"""History command: an artifact's revision history table."""

import typer
from rich.table import Table

from ..core.revision_window import RevisionRow
from ..core.session import ProjectSession
from ..output import get_output_context
from .project import format_timestamp, parse_kind, require_project, run_in_session


def history(
    kind: str = typer.Argument(..., help="Artifact kind (requirement, useCase, ...)"),
    artifact_id: str = typer.Argument(..., metavar="ID", help="Artifact ID"),
    since_baseline: str | None = typer.Option(
        None,
        "--since-baseline",
        "-b",
        help="Show commits made after this baseline (defaults to the latest)",
    ),
    all_commits: bool = typer.Option(False, "--all", "-a", help="Show the full history"),
) -> None:
    """Show the revision history of one artifact."""
    ctx = get_output_context()
    artifact_kind = parse_kind(kind)
    if since_baseline and all_commits:
        ctx.error("--since-baseline and --all are mutually exclusive")
        raise typer.Exit(1)

    project = require_project()

    async def run(session: ProjectSession) -> list[RevisionRow]:
        if all_commits:
            since_ms = None
        elif since_baseline:
            since_ms = session.baselines.get_baseline(since_baseline).timestamp_ms
        else:
            since_ms = session.window_start(None)
        return await session.revision_rows(artifact_kind, artifact_id, since_ms)

    rows = run_in_session(project, run)

    data = [
        {
            "revision": row.revision,
            "hash": row.commit.hash,
            "timestamp_ms": row.commit.timestamp_ms,
            "author": row.commit.author,
            "message": row.commit.message,
        }
        for row in rows
    ]

    if not rows:
        ctx.result(data, f"[yellow]No revisions of {artifact_id} in this window[/yellow]")
        return

    table = Table(title=f"{artifact_kind.label} {artifact_id}")
    table.add_column("Rev", style="cyan")
    table.add_column("Date")
    table.add_column("Author")
    table.add_column("Message")
    for row in rows:
        table.add_row(
            row.revision,
            format_timestamp(row.commit.timestamp_ms),
            row.commit.author,
            row.commit.message,
        )
    ctx.table(table, data)
