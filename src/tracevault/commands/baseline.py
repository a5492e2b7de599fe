"""Baseline commands: create, list and show project baselines."""

import typer
from rich.table import Table

from ..core.session import ProjectSession
from ..models import ProjectBaseline
from ..output import get_output_context
from .project import format_timestamp, require_project, run_in_session

baseline_app = typer.Typer(help="Baseline management commands")


@baseline_app.command("create")
def baseline_create(
    name: str = typer.Argument(..., help="Baseline name"),
    description: str | None = typer.Option(None, "--description", "-d", help="Description"),
    version: str | None = typer.Option(
        None,
        "--version",
        help="Version label (defaults to the next two-digit number)",
    ),
) -> None:
    """Pin every artifact of the project to its latest commit."""
    ctx = get_output_context()
    if not name.strip():
        ctx.error("Baseline name cannot be empty")
        raise typer.Exit(1)

    project = require_project()

    async def run(session: ProjectSession) -> ProjectBaseline:
        return await session.create_baseline(name, description, version)

    baseline = run_in_session(project, run)
    ctx.success(
        f"Created baseline {baseline.version} '{baseline.name}' "
        f"({len(baseline.artifact_commits)} artifacts pinned)",
        {"baseline": baseline.model_dump(mode="json")},
    )
    ctx.print(f"  ID: {baseline.id}")


@baseline_app.command("list")
def baseline_list() -> None:
    """List baselines, oldest first."""
    ctx = get_output_context()
    project = require_project()

    async def run(session: ProjectSession) -> list[ProjectBaseline]:
        return session.baselines.list_baselines()

    baselines = run_in_session(project, run)
    data = [b.model_dump(mode="json") for b in baselines]

    if not baselines:
        ctx.result(data, "[yellow]No baselines found[/yellow]")
        return

    table = Table(title="Baselines")
    table.add_column("Version", style="cyan")
    table.add_column("Name")
    table.add_column("Created")
    table.add_column("Artifacts", justify="right")
    table.add_column("ID", style="dim")
    for b in baselines:
        table.add_row(
            b.version,
            b.name,
            format_timestamp(b.timestamp_ms),
            str(len(b.artifact_commits)),
            b.id,
        )
    ctx.table(table, data)


@baseline_app.command("show")
def baseline_show(
    baseline_id: str = typer.Argument(..., metavar="ID", help="Baseline ID"),
) -> None:
    """Show the artifact commits pinned by a baseline."""
    ctx = get_output_context()
    project = require_project()

    async def run(session: ProjectSession) -> ProjectBaseline:
        return session.baselines.get_baseline(baseline_id)

    baseline = run_in_session(project, run)
    if ctx.json_mode:
        ctx.print_json(baseline.model_dump(mode="json"))
        return

    ctx.console.print(f"\n[bold]Baseline:[/bold] {baseline.version} {baseline.name}")
    ctx.console.print(f"[bold]Created:[/bold] {format_timestamp(baseline.timestamp_ms)}")
    if baseline.description:
        ctx.console.print(f"[bold]Description:[/bold] {baseline.description}")

    table = Table()
    table.add_column("Artifact", style="cyan")
    table.add_column("Kind")
    table.add_column("Commit")
    for artifact_id, pin in sorted(baseline.artifact_commits.items()):
        table.add_row(artifact_id, pin.kind.label, pin.commit_hash[:8])
    ctx.console.print(table)
