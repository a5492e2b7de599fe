"""Shared project resolution for CLI commands."""

import asyncio
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import TypeVar

import typer

from ..config import TracevaultConfig, load_config
from ..constants import TRACEVAULT_DIR
from ..core.session import ProjectSession, activate_session, deactivate_session
from ..errors import ConfigError, TracevaultError
from ..models import ArtifactKind
from ..output import get_output_context
from ..services import GitError, get_repo_root, load_collections

T = TypeVar("T")


@dataclass
class Project:
    """An initialized tracevault project on disk."""

    repo_root: Path
    state_dir: Path
    config: TracevaultConfig


def require_project() -> Project:
    """Resolve the project of the current directory or exit.

    Exits with 3 outside a git repository and 1 when tracevault is not
    initialized or its config is invalid.
    """
    ctx = get_output_context()

    try:
        repo_root = get_repo_root()
    except GitError:
        ctx.error("Not a git repository")
        raise typer.Exit(3) from None

    state_dir = repo_root / TRACEVAULT_DIR
    if not state_dir.exists():
        ctx.error("Tracevault not initialized. Run 'tracevault init' first.")
        raise typer.Exit(1)

    try:
        config = load_config(state_dir)
    except ConfigError as e:
        ctx.error(str(e))
        raise typer.Exit(1) from None

    return Project(repo_root=repo_root, state_dir=state_dir, config=config)


def parse_kind(value: str) -> ArtifactKind:
    """Parse an artifact kind argument or exit with 1."""
    try:
        return ArtifactKind.parse(value)
    except ValueError:
        choices = ", ".join(k.value for k in ArtifactKind)
        get_output_context().error(f"Unknown artifact kind: {value} (expected one of {choices})")
        raise typer.Exit(1) from None


def run_in_session(project: Project, operation: Callable[[ProjectSession], Awaitable[T]]) -> T:
    """Open the project's session, run operation in it and close it again.

    Engine errors are reported and turned into exit code 1.
    """

    async def run() -> T:
        session = ProjectSession.for_repository(
            project.repo_root,
            project.state_dir,
            project.config,
            collections_loader=load_collections,
        )
        await activate_session(session)
        try:
            return await operation(session)
        finally:
            await deactivate_session()

    try:
        return asyncio.run(run())
    except TracevaultError as e:
        get_output_context().error(str(e))
        raise typer.Exit(1) from None


def format_timestamp(timestamp_ms: int) -> str:
    return datetime.fromtimestamp(timestamp_ms / 1000).strftime("%Y-%m-%d %H:%M")
