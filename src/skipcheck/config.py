"""Configuration management for SkipCheck."""

import json
import os
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field

from . import CONFIG_FILE, SKIPCHECK_DIR

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR"]


class SkipCheckConfig(BaseModel):
    """Configuration for SkipCheck."""

    version: int = 1
    extensions: list[str] = Field(
        default=[".py", ".js", ".ts", ".tsx", ".go", ".rs", ".java", ".c", ".cpp", ".h", ".hpp"]
    )
    exclude_patterns: list[str] = Field(
        default=[
            "node_modules",
            ".git",
            "__pycache__",
            "venv",
            ".venv",
            ".skipcheck",
            "dist",
            "build",
            ".egg-info",
        ]
    )
    # Files matching these are never marked as unchanged by the scanner
    always_analyze: list[str] = Field(default_factory=list)
    pull_request: bool = False
    log_level: LogLevel = "WARNING"


def get_skipcheck_dir(project_root: Path) -> Path:
    """Get the .skipcheck directory path."""
    return project_root / SKIPCHECK_DIR


def get_config_path(project_root: Path) -> Path:
    """Get the config file path."""
    return get_skipcheck_dir(project_root) / CONFIG_FILE


def load_config(project_root: Path) -> SkipCheckConfig:
    """Load configuration from the project's config file.

    Falls back to defaults if file doesn't exist.
    Environment variables can override config values.
    """
    config_path = get_config_path(project_root)

    if config_path.exists():
        with open(config_path) as f:
            data = json.load(f)
        config = SkipCheckConfig.model_validate(data)
    else:
        config = SkipCheckConfig()

    return _apply_env_overrides(config)


def save_config(config: SkipCheckConfig, project_root: Path) -> None:
    """Save configuration to the project's config file."""
    config_path = get_config_path(project_root)
    config_path.parent.mkdir(parents=True, exist_ok=True)

    with open(config_path, "w") as f:
        json.dump(config.model_dump(), f, indent=2)


def _apply_env_overrides(config: SkipCheckConfig) -> SkipCheckConfig:
    """Apply environment variable overrides to config."""
    data = config.model_dump()

    # SKIPCHECK_PULL_REQUEST
    if (pull_request := os.environ.get("SKIPCHECK_PULL_REQUEST")) is not None:
        data["pull_request"] = pull_request.strip().lower() in ("1", "true", "yes")

    # SKIPCHECK_LOG_LEVEL
    if level := os.environ.get("SKIPCHECK_LOG_LEVEL"):
        data["log_level"] = level.strip().upper()

    return SkipCheckConfig.model_validate(data)
