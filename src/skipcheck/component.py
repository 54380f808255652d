"""Component tree model and traversal for SkipCheck."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
from enum import Enum, IntEnum
from typing import Literal

from .errors import AlreadyInitializedError, NotInitializedError

VisitOrder = Literal["pre", "post"]

PRE_ORDER: VisitOrder = "pre"
POST_ORDER: VisitOrder = "post"


class Status(Enum):
    """Structural status of a component relative to the previous analysis."""

    SAME = "same"
    CHANGED = "changed"
    ADDED = "added"


class ComponentType(IntEnum):
    """Component kinds, ordered from the root down to the leaves."""

    PROJECT = 0
    DIRECTORY = 1
    FILE = 2


@dataclass(frozen=True)
class FileAttributes:
    """Attributes reported by the scanner for a file component."""

    marked_as_unchanged: bool = False
    size: int = 0
    mtime: float = 0.0
    language: str | None = None


@dataclass(frozen=True)
class Component:
    """A node in the project tree: the project, a directory or a file."""

    uuid: str
    key: str  # Relative path from project root
    name: str
    type: ComponentType
    status: Status
    file_attributes: FileAttributes | None = None
    children: tuple[Component, ...] = field(default=())

    def __post_init__(self) -> None:
        if self.type == ComponentType.FILE:
            if self.file_attributes is None:
                raise ValueError(f"File component {self.key!r} has no file attributes")
            if self.children:
                raise ValueError(f"File component {self.key!r} cannot have children")

    @property
    def is_file(self) -> bool:
        return self.type == ComponentType.FILE


def iter_components(
    root: Component,
    depth_limit: ComponentType = ComponentType.FILE,
    order: VisitOrder = PRE_ORDER,
) -> Iterator[Component]:
    """
    Walk the tree, yielding components no deeper than depth_limit.

    Children are visited in the order they are stored on their parent, so
    the same tree always yields the same sequence.

    Args:
        root: Component to start from
        depth_limit: Deepest component type to yield and descend into
        order: PRE_ORDER yields a parent before its children, POST_ORDER after

    Returns:
        Iterator over the visited components
    """
    if root.type > depth_limit:
        return

    if order == PRE_ORDER:
        yield root

    for child in root.children:
        yield from iter_components(child, depth_limit, order)

    if order == POST_ORDER:
        yield root


def iter_files(root: Component) -> Iterator[Component]:
    """Yield every file component in pre-order."""
    for component in iter_components(root, ComponentType.FILE, PRE_ORDER):
        if component.is_file:
            yield component


class TreeRootHolder:
    """Holds the root of the component tree for the current analysis."""

    def __init__(self) -> None:
        self._root: Component | None = None
        self._by_uuid: dict[str, Component] | None = None
        self._by_key: dict[str, Component] | None = None

    @property
    def is_empty(self) -> bool:
        return self._root is None

    def set_root(self, root: Component) -> None:
        if self._root is not None:
            raise AlreadyInitializedError("Tree root is already set")
        self._root = root

    def get_root(self) -> Component:
        if self._root is None:
            raise NotInitializedError("Tree root has not been set")
        return self._root

    def get_component_by_uuid(self, uuid: str) -> Component:
        """Look up a component by UUID, raising KeyError if it is not in the tree."""
        if self._by_uuid is None:
            self._build_lookups()
        return self._by_uuid[uuid]

    def get_component_by_key(self, key: str) -> Component:
        """Look up a component by its relative path, raising KeyError if absent."""
        if self._by_key is None:
            self._build_lookups()
        return self._by_key[key]

    def _build_lookups(self) -> None:
        root = self.get_root()
        self._by_uuid = {}
        self._by_key = {}
        for component in iter_components(root):
            self._by_uuid[component.uuid] = component
            self._by_key[component.key] = component
