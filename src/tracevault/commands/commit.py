"""Commit command implementation."""

import typer

from ..core.session import ProjectSession
from ..output import get_output_context
from .project import parse_kind, require_project, run_in_session


def commit(
    kind: str = typer.Argument(..., help="Artifact kind (requirement, useCase, ...)"),
    artifact_id: str = typer.Argument(..., metavar="ID", help="Artifact ID"),
    message: str = typer.Option(..., "-m", "--message", help="Commit message"),
    bump_revision: bool = typer.Option(
        False,
        "--bump-revision",
        help="Increment the artifact's revision before committing",
    ),
) -> None:
    """Commit the current content of one artifact."""
    ctx = get_output_context()
    artifact_kind = parse_kind(kind)
    if not message.strip():
        ctx.error("Commit message cannot be empty")
        raise typer.Exit(1)

    project = require_project()

    async def run(session: ProjectSession) -> str | None:
        return await session.commit_artifact(
            artifact_kind, artifact_id, message, bump_revision=bump_revision
        )

    revision = run_in_session(project, run)

    suffix = f" (revision {revision})" if revision else ""
    ctx.success(
        f"Committed {artifact_id}{suffix}",
        {"artifact_id": artifact_id, "kind": artifact_kind.value, "revision": revision},
    )
