"""Configuration management for tracevault."""

import tomllib
from pathlib import Path

import tomli_w
from pydantic import BaseModel, Field, ValidationError

from .constants import AUTO_SAVE_DEBOUNCE_MS, HISTORY_DEPTH, MAX_SNAPSHOTS
from .errors import ConfigError

CONFIG_FILE = "config.toml"


class ProjectConfig(BaseModel):
    """Project identity used to key baselines and snapshots."""

    id: str = "default"
    name: str = "unnamed-project"


class HistoryConfig(BaseModel):
    """Configuration for commit history reads."""

    depth: int = Field(default=HISTORY_DEPTH, ge=1, description="Max commits read per file")


class SnapshotConfig(BaseModel):
    """Configuration for the version snapshot log."""

    max_entries: int = Field(default=MAX_SNAPSHOTS, ge=1, description="Snapshots retained")
    debounce_ms: int = Field(
        default=AUTO_SAVE_DEBOUNCE_MS, ge=0, description="Quiet period before auto-save"
    )


class GitConfig(BaseModel):
    """Author identity for artifact commits."""

    author_name: str = "Tracevault User"
    author_email: str = "user@tracevault.local"


class TracevaultConfig(BaseModel):
    """Root configuration for tracevault."""

    project: ProjectConfig = Field(default_factory=ProjectConfig)
    history: HistoryConfig = Field(default_factory=HistoryConfig)
    snapshots: SnapshotConfig = Field(default_factory=SnapshotConfig)
    git: GitConfig = Field(default_factory=GitConfig)


def load_config(state_dir: Path) -> TracevaultConfig:
    """Load config from .tracevault/config.toml.

    Args:
        state_dir: Path to .tracevault directory

    Returns:
        Loaded configuration, or defaults if config.toml doesn't exist

    Raises:
        ConfigError: If the file is not valid TOML or fails validation
    """
    config_path = state_dir / CONFIG_FILE
    if not config_path.exists():
        return TracevaultConfig()
    try:
        with open(config_path, "rb") as f:
            data = tomllib.load(f)
        return TracevaultConfig.model_validate(data)
    except (tomllib.TOMLDecodeError, ValidationError) as e:
        raise ConfigError(f"Invalid config at {config_path}: {e}") from e


def write_config_template(state_dir: Path, project_name: str = "your-project") -> Path:
    """Write default config.toml template.

    Args:
        state_dir: Path to .tracevault directory
        project_name: Name recorded in the [project] table

    Returns:
        Path to the written config file
    """
    config_path = state_dir / CONFIG_FILE
    template = {
        "project": {"id": "default", "name": project_name},
        "history": {"depth": HISTORY_DEPTH},
        "snapshots": {"max_entries": MAX_SNAPSHOTS, "debounce_ms": AUTO_SAVE_DEBOUNCE_MS},
        "git": {"author_name": "Tracevault User", "author_email": "user@tracevault.local"},
    }
    with open(config_path, "wb") as f:
        tomli_w.dump(template, f)
    return config_path
