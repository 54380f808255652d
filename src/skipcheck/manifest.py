"""Manifest file management for SkipCheck.

The manifest is the record of the previous analysis: one FileHashes entry
per analyzed file, keyed by relative path.
"""

import json
import uuid
from datetime import UTC, datetime
from pathlib import Path

from pydantic import BaseModel, Field

from . import MANIFEST_FILE, SKIPCHECK_DIR
from .component import Component


class FileHashes(BaseModel):
    """Stored hash record of a file from a previous analysis."""

    uuid: str
    path: str
    src_hash: str
    size: int = 0
    mtime: float = 0.0


class ManifestStats(BaseModel):
    """Statistics about the analyzed project."""

    total_files: int = 0
    data_unchanged_files: int = 0


class Manifest(BaseModel):
    """Manifest containing the file hashes of the last analysis."""

    version: int = 1
    analysis_uuid: str | None = None  # None until a first analysis is saved
    created_at: datetime
    updated_at: datetime
    files: dict[str, FileHashes] = Field(default_factory=dict)
    stats: ManifestStats = Field(default_factory=ManifestStats)


def get_manifest_path(project_root: Path) -> Path:
    """Get the manifest file path."""
    return project_root / SKIPCHECK_DIR / MANIFEST_FILE


def load_manifest(project_root: Path) -> Manifest | None:
    """Load manifest from the project's manifest file.

    Returns None if file doesn't exist.
    """
    manifest_path = get_manifest_path(project_root)

    if not manifest_path.exists():
        return None

    with open(manifest_path) as f:
        data = json.load(f)

    return Manifest.model_validate(data)


def save_manifest(manifest: Manifest, project_root: Path) -> None:
    """Save manifest to the project's manifest file."""
    manifest_path = get_manifest_path(project_root)
    manifest_path.parent.mkdir(parents=True, exist_ok=True)

    manifest.updated_at = datetime.now(UTC)

    with open(manifest_path, "w") as f:
        json.dump(manifest.model_dump(mode="json"), f, indent=2, default=str)


def create_empty_manifest() -> Manifest:
    """Create a new empty manifest."""
    now = datetime.now(UTC)
    return Manifest(
        created_at=now,
        updated_at=now,
        analysis_uuid=None,
        files={},
        stats=ManifestStats(),
    )


def new_analysis_uuid() -> str:
    return str(uuid.uuid4())


class PreviousSourceHashRepository:
    """Serves the hash records of the previous analysis, keyed by file UUID."""

    def __init__(self, manifest: Manifest | None):
        self._by_uuid: dict[str, FileHashes] = {}
        if manifest is not None:
            self._by_uuid = {record.uuid: record for record in manifest.files.values()}

    def get_db_file(self, component: Component) -> FileHashes | None:
        """Return the previous record of the component, or None if it has no history."""
        return self._by_uuid.get(component.uuid)
