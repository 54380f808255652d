"""Unchanged-file detection for SkipCheck.

FileStatuses answers, for every later stage of an analysis, whether a file
can be treated as unchanged since the previous analysis. It is initialized
once per job by walking the component tree in pre-order. A single trust
flag is carried across the whole walk: the first file whose structural
status is SAME but whose content hash differs from the stored one breaks
trust, and from then on no file of the run is reported as data-unchanged,
including files accepted before the break.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Protocol

from .component import Component, Status, TreeRootHolder, iter_files
from .errors import AlreadyInitializedError, NotInitializedError
from .manifest import FileHashes
from .metadata import AnalysisMetadataHolder

logger = logging.getLogger(__name__)


class PreviousHashes(Protocol):
    def get_db_file(self, component: Component) -> FileHashes | None: ...


class CurrentHashes(Protocol):
    def get_raw_source_hash(self, component: Component) -> str: ...


@dataclass
class TrustScan:
    """Accumulator threaded through one traversal."""

    trusted: bool = True
    unchanged: set[str] = field(default_factory=set)
    not_marked: int = 0
    broken_at: str | None = None  # Name of the file that broke trust


class FileStatuses:
    """Status queries about files, backed by a single trust-aware traversal."""

    def __init__(
        self,
        metadata: AnalysisMetadataHolder,
        tree_root_holder: TreeRootHolder,
        previous_hashes: PreviousHashes,
        current_hashes: CurrentHashes,
    ):
        self.metadata = metadata
        self.tree_root_holder = tree_root_holder
        self.previous_hashes = previous_hashes
        self.current_hashes = current_hashes

        self._unchanged: frozenset[str] | None = None
        self._scan: TrustScan | None = None

    def initialize(self) -> None:
        """
        Classify the files of the tree, once per analysis.

        Pull request and first analyses skip the walk and leave every file
        changed. Either way the instance counts as initialized afterwards.
        """
        if self._unchanged is not None:
            raise AlreadyInitializedError("File statuses are already initialized")

        scan = TrustScan()
        if not self.metadata.is_pull_request() and not self.metadata.is_first_analysis():
            scan = self._scan_files(iter_files(self.tree_root_holder.get_root()))

        self._scan = scan
        self._unchanged = frozenset(scan.unchanged)

        logger.warning("FILES MARKED AS UNCHANGED: %d", len(self._unchanged))
        logger.warning("FILES NOT MARKED AS UNCHANGED: %d", scan.not_marked)

    def _scan_files(self, files: Iterable[Component]) -> TrustScan:
        scan = TrustScan()
        for file in files:
            self._visit_file(file, scan)
        return scan

    def _visit_file(self, file: Component, scan: TrustScan) -> None:
        if file.status != Status.SAME or not scan.trusted:
            return

        scan.trusted = self.hash_equals(file)
        if scan.trusted:
            if file.file_attributes.marked_as_unchanged:
                scan.unchanged.add(file.uuid)
            else:
                scan.not_marked += 1
        else:
            logger.error("FILE HAS DIFFERENT HASH: %s", file.name)
            scan.broken_at = file.name
            scan.unchanged.clear()

    def is_unchanged(self, component: Component) -> bool:
        """Whether the component is SAME and its content hash still matches."""
        self._fail_if_not_initialized()
        return component.status == Status.SAME and self.hash_equals(component)

    def is_data_unchanged(self, component: Component) -> bool:
        """Whether the traversal confirmed the component's data as unchanged."""
        self._fail_if_not_initialized()
        return component.uuid in self._unchanged

    def hash_equals(self, component: Component) -> bool:
        db_file = self.previous_hashes.get_db_file(component)
        if db_file is None:
            return False
        return db_file.src_hash == self.current_hashes.get_raw_source_hash(component)

    @property
    def initialized(self) -> bool:
        return self._unchanged is not None

    @property
    def unchanged_file_uuids(self) -> frozenset[str]:
        self._fail_if_not_initialized()
        return self._unchanged

    @property
    def not_marked_as_unchanged(self) -> int:
        self._fail_if_not_initialized()
        return self._scan.not_marked

    @property
    def trust_broken_at(self) -> str | None:
        """Name of the file whose hash broke trust, if any."""
        self._fail_if_not_initialized()
        return self._scan.broken_at

    def _fail_if_not_initialized(self) -> None:
        if self._unchanged is None:
            raise NotInitializedError()
