"""Init command implementation."""

import typer

from ..config import CONFIG_FILE, write_config_template
from ..constants import TRACEVAULT_DIR
from ..core.persistence import BASELINES_DIR, VERSIONS_DIR
from ..models import ArtifactKind
from ..output import get_output_context
from ..services import GitError, get_repo_root


def init() -> None:
    """Initialize tracevault in the current repository."""
    ctx = get_output_context()

    try:
        repo_root = get_repo_root()
    except GitError:
        ctx.error("Not a git repository")
        raise typer.Exit(3) from None

    state_dir = repo_root / TRACEVAULT_DIR
    config_path = state_dir / CONFIG_FILE

    # Create directories
    state_dir.mkdir(exist_ok=True)
    (state_dir / BASELINES_DIR).mkdir(exist_ok=True)
    (state_dir / VERSIONS_DIR).mkdir(exist_ok=True)
    for kind in ArtifactKind:
        (repo_root / kind.folder).mkdir(exist_ok=True)

    # Create config if missing
    created = not config_path.exists()
    if created:
        write_config_template(state_dir, project_name=repo_root.name)
        ctx.print(f"[green]Created config template:[/green] {config_path}")
    else:
        ctx.print(f"[yellow]Config already exists:[/yellow] {config_path}")

    ctx.result(
        {"state_dir": str(state_dir), "config": str(config_path), "created": created},
    )
    ctx.print("\n[bold green]Tracevault initialized successfully![/bold green]")
