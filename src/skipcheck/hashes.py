"""Current source hashes for SkipCheck."""

import hashlib
import logging
from pathlib import Path

from .component import Component

logger = logging.getLogger(__name__)


def compute_file_hash(filepath: Path) -> str:
    """Compute SHA256 hash of file contents."""
    h = hashlib.sha256()
    with open(filepath, "rb") as f:
        for chunk in iter(lambda: f.read(8192), b""):
            h.update(chunk)
    return h.hexdigest()


class SourceHashRepository:
    """Computes the raw source hash of file components, once per run."""

    def __init__(self, project_root: Path):
        self.project_root = project_root
        self._cache: dict[str, str] = {}

    def get_raw_source_hash(self, component: Component) -> str:
        """
        Get the hash of the file's current raw content.

        OSError is not handled here: a file that cannot be read leaves the
        analysis without a reliable basis.
        """
        if not component.is_file:
            raise ValueError(f"Component {component.key!r} is not a file")

        cached = self._cache.get(component.uuid)
        if cached is not None:
            return cached

        file_hash = compute_file_hash(self.project_root / component.key)
        logger.debug("Hashed %s: %s", component.key, file_hash)
        self._cache[component.uuid] = file_hash
        return file_hash

    @property
    def hashed_count(self) -> int:
        return len(self._cache)
