"""Analysis run orchestration for SkipCheck."""

import logging
from collections.abc import Collection
from dataclasses import dataclass, field
from pathlib import Path

from rich.console import Console

from .component import Component, Status, TreeRootHolder, iter_files
from .config import SkipCheckConfig, load_config
from .errors import NotInitializedError
from .hashes import SourceHashRepository
from .manifest import (
    FileHashes,
    Manifest,
    ManifestStats,
    PreviousSourceHashRepository,
    create_empty_manifest,
    load_manifest,
    new_analysis_uuid,
    save_manifest,
)
from .metadata import AnalysisMetadataHolder
from .statuses import FileStatuses
from .tree import build_tree

logger = logging.getLogger(__name__)


@dataclass
class FileReport:
    """Outcome of one file in an analysis run."""

    path: str
    status: Status
    unchanged: bool
    data_unchanged: bool


@dataclass
class AnalysisStats:
    """Statistics from an analysis run."""

    files_scanned: int = 0
    files_added: int = 0
    files_changed: int = 0
    files_same: int = 0
    files_same_hash_differs: int = 0
    files_data_unchanged: int = 0
    files_not_marked_unchanged: int = 0
    trust_broken_at: str | None = None
    pull_request: bool = False
    first_analysis: bool = False
    files: list[FileReport] = field(default_factory=list)

    @property
    def trust_broken(self) -> bool:
        return self.trust_broken_at is not None


class Analyzer:
    """Runs one analysis job over a project."""

    def __init__(
        self,
        project_root: Path,
        config: SkipCheckConfig | None = None,
        verbose: bool = False,
        console: Console | None = None,
    ):
        self.project_root = project_root
        self.config = config or load_config(project_root)
        self.verbose = verbose
        self.console = console or Console()

        self.metadata = AnalysisMetadataHolder()
        self.tree_root_holder = TreeRootHolder()
        self.source_hashes = SourceHashRepository(project_root)
        self._file_statuses: FileStatuses | None = None

    @property
    def file_statuses(self) -> FileStatuses:
        """File statuses of this job, available once analyze() has started."""
        if self._file_statuses is None:
            raise NotInitializedError("Analysis not started. Call analyze() first.")
        return self._file_statuses

    def analyze(
        self,
        pull_request: bool | None = None,
        changed_paths: Collection[str] = (),
    ) -> AnalysisStats:
        """
        Run the analysis.

        Args:
            pull_request: Run as a provisional analysis; None uses the config value
            changed_paths: Relative paths the caller knows to be changed

        Returns:
            AnalysisStats with per-file outcomes and counts
        """
        if pull_request is None:
            pull_request = self.config.pull_request

        previous = load_manifest(self.project_root)
        base_analysis = previous.analysis_uuid if previous is not None else None

        self.metadata.set_pull_request(pull_request)
        self.metadata.set_base_analysis(base_analysis)

        root, build_stats = build_tree(
            self.project_root,
            self.config.extensions,
            self.config.exclude_patterns,
            previous=previous,
            changed_paths=changed_paths,
            always_analyze=self.config.always_analyze,
        )
        self.tree_root_holder.set_root(root)

        if self.verbose:
            self.console.print(
                f"[dim]Tree build: {build_stats.files} files, "
                f"{build_stats.directories} directories, "
                f"{build_stats.files_marked_unchanged} marked unchanged[/dim]"
            )

        self._file_statuses = FileStatuses(
            self.metadata,
            self.tree_root_holder,
            PreviousSourceHashRepository(previous),
            self.source_hashes,
        )
        self._file_statuses.initialize()

        stats = self._collect_stats(root)

        if pull_request:
            logger.info("Pull request analysis, manifest left untouched")
        else:
            self._update_manifest(root, previous, stats)

        return stats

    def _collect_stats(self, root: Component) -> AnalysisStats:
        statuses = self.file_statuses
        stats = AnalysisStats(
            pull_request=self.metadata.is_pull_request(),
            first_analysis=self.metadata.is_first_analysis(),
            files_not_marked_unchanged=statuses.not_marked_as_unchanged,
            trust_broken_at=statuses.trust_broken_at,
        )

        for file in iter_files(root):
            unchanged = statuses.is_unchanged(file)
            report = FileReport(
                path=file.key,
                status=file.status,
                unchanged=unchanged,
                data_unchanged=statuses.is_data_unchanged(file),
            )
            stats.files.append(report)
            stats.files_scanned += 1

            if file.status == Status.ADDED:
                stats.files_added += 1
            elif file.status == Status.CHANGED:
                stats.files_changed += 1
            else:
                stats.files_same += 1
                if not unchanged:
                    stats.files_same_hash_differs += 1
            if report.data_unchanged:
                stats.files_data_unchanged += 1

        return stats

    def _update_manifest(
        self, root: Component, previous: Manifest | None, stats: AnalysisStats
    ) -> None:
        """Save the hashes of this analysis as the basis of the next one."""
        manifest = previous or create_empty_manifest()
        manifest.analysis_uuid = new_analysis_uuid()
        manifest.files = {
            file.key: FileHashes(
                uuid=file.uuid,
                path=file.key,
                src_hash=self.source_hashes.get_raw_source_hash(file),
                size=file.file_attributes.size,
                mtime=file.file_attributes.mtime,
            )
            for file in iter_files(root)
        }
        manifest.stats = ManifestStats(
            total_files=stats.files_scanned,
            data_unchanged_files=stats.files_data_unchanged,
        )
        save_manifest(manifest, self.project_root)


def run_analysis(
    project_root: Path,
    pull_request: bool | None = None,
    changed_paths: Collection[str] = (),
    verbose: bool = False,
    console: Console | None = None,
) -> AnalysisStats:
    """
    Run one analysis job.

    This is the main entry point called by the CLI.

    Args:
        project_root: Path to the project root
        pull_request: Run as a provisional analysis; None uses the config value
        changed_paths: Relative paths the caller knows to be changed
        verbose: If True, show tree build details
        console: Rich console for output
    """
    analyzer = Analyzer(project_root, verbose=verbose, console=console)
    return analyzer.analyze(pull_request=pull_request, changed_paths=changed_paths)
