"""CLI for SkipCheck."""

import shutil
import sys
from pathlib import Path

import click
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from . import SKIPCHECK_DIR, __version__
from .analysis import AnalysisStats, run_analysis
from .component import Status
from .config import SkipCheckConfig, get_skipcheck_dir, load_config, save_config
from .logs import configure_logging
from .manifest import create_empty_manifest, load_manifest, save_manifest

console = Console()
error_console = Console(stderr=True)

STATUS_STYLES = {
    Status.SAME: "green",
    Status.CHANGED: "yellow",
    Status.ADDED: "cyan",
}


def get_project_root() -> Path:
    """Get the project root directory (current working directory)."""
    return Path.cwd()


def is_initialized(project_root: Path) -> bool:
    """Check if skipcheck is initialized in the project."""
    return get_skipcheck_dir(project_root).exists()


def require_initialized(project_root: Path) -> None:
    """Exit with an error if skipcheck is not initialized."""
    if not is_initialized(project_root):
        error_console.print(
            "[red]Error:[/red] Not initialized. Run [bold]skipcheck init[/bold] first."
        )
        sys.exit(1)


@click.group()
@click.version_option(version=__version__, prog_name="skipcheck")
def main() -> None:
    """SkipCheck - Incremental change detection for analysis runs."""
    pass


@main.command()
@click.option(
    "--force",
    is_flag=True,
    help="Overwrite existing configuration",
)
def init(force: bool) -> None:
    """Initialize skipcheck in the current project."""
    project_root = get_project_root()
    skipcheck_dir = get_skipcheck_dir(project_root)

    if skipcheck_dir.exists() and not force:
        error_console.print(
            f"[yellow]Warning:[/yellow] {SKIPCHECK_DIR}/ already exists. Use --force to reinitialize."
        )
        sys.exit(1)

    skipcheck_dir.mkdir(parents=True, exist_ok=True)

    save_config(SkipCheckConfig(), project_root)
    save_manifest(create_empty_manifest(), project_root)

    _update_gitignore(project_root)

    console.print(
        Panel(
            f"[green]Initialized SkipCheck[/green]\n\n"
            f"Config directory: [dim]{skipcheck_dir}[/dim]\n\n"
            f"Next step:\n"
            f"  Run [bold]skipcheck analyze[/bold] to record a first analysis",
            title="skipcheck init",
        )
    )


@main.command()
@click.option(
    "--pull-request/--no-pull-request",
    default=None,
    help="Run as a provisional analysis that leaves the manifest untouched",
)
@click.option(
    "--changed",
    "changed_paths",
    multiple=True,
    help="Relative path of a file known to be changed (repeatable)",
)
@click.option("--verbose", "-v", is_flag=True, help="Verbose output")
def analyze(pull_request: bool | None, changed_paths: tuple[str, ...], verbose: bool) -> None:
    """Detect which files are unchanged since the previous analysis."""
    project_root = get_project_root()
    require_initialized(project_root)

    config = load_config(project_root)
    configure_logging("DEBUG" if verbose else config.log_level, error_console)

    console.print("[bold]Analyzing project...[/bold]")

    stats = run_analysis(
        project_root,
        pull_request=pull_request,
        changed_paths=changed_paths,
        verbose=verbose,
        console=console,
    )

    _print_summary(stats)
    if verbose:
        _print_files(stats)

    if stats.trust_broken:
        console.print(
            f"[yellow]Hash mismatch on {stats.trust_broken_at}: "
            f"no file is treated as unchanged in this run.[/yellow]"
        )
    elif stats.pull_request:
        console.print("[dim]Pull request analysis: all files will be analyzed.[/dim]")
    elif stats.first_analysis:
        console.print("[green]First analysis recorded.[/green]")
    else:
        console.print("[green]Analysis complete![/green]")


@main.command()
def status() -> None:
    """Show the stored analysis status."""
    project_root = get_project_root()
    require_initialized(project_root)

    config = load_config(project_root)
    manifest = load_manifest(project_root)

    table = Table(title="SkipCheck Status")
    table.add_column("Property", style="cyan")
    table.add_column("Value")

    table.add_row("Project root", str(project_root))
    table.add_row("Extensions", ", ".join(config.extensions))
    table.add_row("Pull request mode", "yes" if config.pull_request else "no")

    if manifest:
        table.add_row("Tracked files", str(manifest.stats.total_files))
        table.add_row("Data unchanged files", str(manifest.stats.data_unchanged_files))
        table.add_row("Last updated", manifest.updated_at.isoformat())
        if manifest.analysis_uuid:
            table.add_row("Last analysis", manifest.analysis_uuid)
            table.add_row("Analysis status", "[green]Ready[/green]")
        else:
            table.add_row("Analysis status", "[yellow]Empty - run 'skipcheck analyze'[/yellow]")
    else:
        table.add_row("Analysis status", "[red]No manifest found[/red]")

    console.print(table)


@main.command()
@click.option("--force", "-f", is_flag=True, help="Skip confirmation prompt")
def clean(force: bool) -> None:
    """Remove the .skipcheck directory."""
    project_root = get_project_root()
    skipcheck_dir = get_skipcheck_dir(project_root)

    if not skipcheck_dir.exists():
        console.print(f"[dim]Nothing to clean - {SKIPCHECK_DIR}/ does not exist.[/dim]")
        return

    if not force:
        if not click.confirm(f"Remove {skipcheck_dir}?"):
            console.print("[dim]Cancelled.[/dim]")
            return

    shutil.rmtree(skipcheck_dir)
    console.print(f"[green]Removed {SKIPCHECK_DIR}/[/green]")


def _print_summary(stats: AnalysisStats) -> None:
    table = Table(title="Analysis Complete")
    table.add_column("Metric", style="cyan")
    table.add_column("Count", justify="right")

    table.add_row("Files scanned", str(stats.files_scanned))
    table.add_row("Added files", str(stats.files_added))
    table.add_row("Changed files", str(stats.files_changed))
    table.add_row("Same files", str(stats.files_same))
    table.add_row("Same files with different hash", str(stats.files_same_hash_differs))
    table.add_row("Data unchanged files", str(stats.files_data_unchanged))
    table.add_row("Not marked as unchanged", str(stats.files_not_marked_unchanged))

    console.print(table)


def _print_files(stats: AnalysisStats) -> None:
    table = Table(title="Files")
    table.add_column("Path")
    table.add_column("Status")
    table.add_column("Unchanged", justify="center")
    table.add_column("Data unchanged", justify="center")

    for report in stats.files:
        style = STATUS_STYLES[report.status]
        table.add_row(
            report.path,
            f"[{style}]{report.status.value}[/{style}]",
            "yes" if report.unchanged else "no",
            "yes" if report.data_unchanged else "no",
        )

    console.print(table)


def _update_gitignore(project_root: Path) -> None:
    """Add .skipcheck/ to .gitignore if not already present."""
    gitignore_path = project_root / ".gitignore"
    entry = f"{SKIPCHECK_DIR}/"

    if gitignore_path.exists():
        content = gitignore_path.read_text()
        if entry in content or SKIPCHECK_DIR in content:
            return  # Already present
        with open(gitignore_path, "a") as f:
            f.write(f"\n# SkipCheck\n{entry}\n")
    else:
        gitignore_path.write_text(f"# SkipCheck\n{entry}\n")


if __name__ == "__main__":
    main()
