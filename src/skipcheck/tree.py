"""Component tree construction from the filesystem for SkipCheck."""

from __future__ import annotations

import fnmatch
import logging
import os
import uuid
from collections.abc import Collection
from dataclasses import dataclass, field
from pathlib import Path

from .component import Component, ComponentType, FileAttributes, Status, iter_files
from .manifest import FileHashes, Manifest

logger = logging.getLogger(__name__)

ROOT_KEY = "."

LANGUAGES = {
    ".py": "python",
    ".js": "javascript",
    ".ts": "typescript",
    ".tsx": "typescript",
    ".go": "go",
    ".rs": "rust",
    ".java": "java",
    ".c": "c",
    ".h": "c",
    ".cpp": "cpp",
    ".hpp": "cpp",
}


@dataclass
class TreeBuildStats:
    """Statistics from building a component tree."""

    files: int = 0
    directories: int = 0
    files_marked_unchanged: int = 0
    files_by_status: dict[Status, int] = field(default_factory=dict)


def is_binary_file(filepath: Path) -> bool:
    """Detect binary files by checking for null bytes in first 8KB."""
    try:
        with open(filepath, "rb") as f:
            chunk = f.read(8192)
            return b"\x00" in chunk
    except OSError:
        return True  # Treat unreadable files as binary


def should_exclude(path: Path, exclude_patterns: list[str]) -> bool:
    """Check if path matches any exclusion pattern."""
    name = path.name
    for pattern in exclude_patterns:
        if fnmatch.fnmatch(name, pattern):
            return True
    return False


def matches_any(key: str, patterns: list[str]) -> bool:
    return any(fnmatch.fnmatch(key, pattern) for pattern in patterns)


class TreeBuilder:
    """Builds the component tree of a project, diffed against a previous manifest."""

    def __init__(
        self,
        project_root: Path,
        extensions: list[str],
        exclude_patterns: list[str],
        previous: Manifest | None = None,
        changed_paths: Collection[str] = (),
        always_analyze: list[str] | None = None,
    ):
        self.project_root = project_root
        self.extensions = extensions
        self.exclude_patterns = exclude_patterns
        self.changed_paths = {self._changed_key(p) for p in changed_paths}
        self.always_analyze = always_analyze or []
        self.stats = TreeBuildStats()

        self._previous_files: dict[str, FileHashes] = previous.files if previous else {}
        self._seen_changed: set[str] = set()

    def build(self) -> Component:
        """
        Build the tree from the filesystem.

        Returns:
            The project component. It has no children when no file matched.
        """
        root = self._build_node(self.project_root)
        if root is None:
            root = self._directory(self.project_root, children=())

        for key in sorted(self.changed_paths - self._seen_changed):
            logger.warning("Changed path matches no analyzed file: %s", key)
        return root

    def _changed_key(self, changed_path: str) -> str:
        """Turn a caller-supplied path into a key relative to the project root."""
        path = Path(changed_path)
        if path.is_absolute():
            try:
                return path.resolve().relative_to(self.project_root.resolve()).as_posix()
            except ValueError:
                return path.as_posix()  # Outside the project, reported by build()
        return Path(os.path.normpath(path)).as_posix()

    def _build_node(self, path: Path) -> Component | None:
        """Recursively build a component for a file or directory."""
        if path != self.project_root:
            if should_exclude(path, self.exclude_patterns) or path.is_symlink():
                return None

        if path.is_file():
            if self.extensions and path.suffix not in self.extensions:
                return None
            if is_binary_file(path):
                return None
            try:
                return self._file(path)
            except OSError:
                return None

        if path.is_dir():
            children: list[Component] = []
            try:
                for child in sorted(path.iterdir()):
                    child_node = self._build_node(child)
                    if child_node is not None:
                        children.append(child_node)
            except PermissionError:
                return None

            if not children and path != self.project_root:
                return None  # Skip empty directories

            return self._directory(path, tuple(children))

        return None

    def _file(self, path: Path) -> Component:
        key = self._key(path)
        stat = path.stat()
        previous = self._previous_files.get(key)

        if previous is None:
            status = Status.ADDED
        elif previous.size == stat.st_size and previous.mtime == stat.st_mtime:
            status = Status.SAME
        else:
            status = Status.CHANGED

        if key in self.changed_paths:
            self._seen_changed.add(key)
        marked_as_unchanged = key not in self.changed_paths and not matches_any(
            key, self.always_analyze
        )

        self.stats.files += 1
        self.stats.files_by_status[status] = self.stats.files_by_status.get(status, 0) + 1
        if marked_as_unchanged:
            self.stats.files_marked_unchanged += 1

        return Component(
            uuid=previous.uuid if previous else str(uuid.uuid4()),
            key=key,
            name=path.name,
            type=ComponentType.FILE,
            status=status,
            file_attributes=FileAttributes(
                marked_as_unchanged=marked_as_unchanged,
                size=stat.st_size,
                mtime=stat.st_mtime,
                language=LANGUAGES.get(path.suffix),
            ),
        )

    def _directory(self, path: Path, children: tuple[Component, ...]) -> Component:
        key = self._key(path)
        is_root = path == self.project_root
        prefix = "" if is_root else f"{key}/"

        previous_below = {p for p in self._previous_files if p.startswith(prefix)}
        current_below = {f.key for child in children for f in iter_files(child)}

        if not previous_below:
            status = Status.ADDED
        elif not previous_below <= current_below or any(
            child.status != Status.SAME for child in children
        ):
            status = Status.CHANGED
        else:
            status = Status.SAME

        if is_root:
            component_type = ComponentType.PROJECT
        else:
            component_type = ComponentType.DIRECTORY
            self.stats.directories += 1

        return Component(
            uuid=str(uuid.uuid5(uuid.NAMESPACE_URL, f"skipcheck:{key}")),
            key=key,
            name=self.project_root.name if is_root else path.name,
            type=component_type,
            status=status,
            children=children,
        )

    def _key(self, path: Path) -> str:
        if path == self.project_root:
            return ROOT_KEY
        return path.relative_to(self.project_root).as_posix()


def build_tree(
    project_root: Path,
    extensions: list[str],
    exclude_patterns: list[str],
    previous: Manifest | None = None,
    changed_paths: Collection[str] = (),
    always_analyze: list[str] | None = None,
) -> tuple[Component, TreeBuildStats]:
    """Build the component tree of a project and return it with build statistics."""
    builder = TreeBuilder(
        project_root,
        extensions,
        exclude_patterns,
        previous=previous,
        changed_paths=changed_paths,
        always_analyze=always_analyze,
    )
    root = builder.build()
    return root, builder.stats
