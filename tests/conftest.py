"""Shared test fixtures for skipcheck."""

import os
import shutil
from pathlib import Path

import pytest
from click.testing import CliRunner

from skipcheck import SKIPCHECK_DIR
from skipcheck.config import SkipCheckConfig, save_config
from skipcheck.manifest import create_empty_manifest, save_manifest


@pytest.fixture
def cli_runner():
    """Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def sample_project():
    """Path to the fixture sample project."""
    return Path(__file__).parent / "fixtures" / "sample_project"


def setup_skipcheck_project(
    project_root: Path, config: SkipCheckConfig | None = None
) -> SkipCheckConfig:
    """Initialize skipcheck at the given path without going through the CLI."""
    if config is None:
        config = SkipCheckConfig()

    (project_root / SKIPCHECK_DIR).mkdir(parents=True, exist_ok=True)
    save_config(config, project_root)
    save_manifest(create_empty_manifest(), project_root)

    return config


def rewrite_keeping_stat(path: Path, content: str) -> None:
    """Replace a file's content while keeping its size and mtime.

    The scanner then reports the file as SAME although its hash differs.
    """
    before = path.stat()
    assert len(content.encode()) == before.st_size, "content must keep the file size"
    path.write_text(content)
    os.utime(path, ns=(before.st_atime_ns, before.st_mtime_ns))


@pytest.fixture
def project(tmp_path: Path, sample_project: Path) -> Path:
    """A copy of the sample project with skipcheck initialized (no analysis yet)."""
    root = tmp_path / "project"
    shutil.copytree(sample_project, root)
    setup_skipcheck_project(root)
    return root


@pytest.fixture
def analyzed_project(project: Path) -> Path:
    """A copy of the sample project with a first analysis recorded."""
    from skipcheck.analysis import run_analysis

    run_analysis(project, pull_request=False)
    return project


@pytest.fixture(autouse=True)
def _clear_skipcheck_env(monkeypatch):
    """Keep environment overrides from leaking into tests."""
    monkeypatch.delenv("SKIPCHECK_PULL_REQUEST", raising=False)
    monkeypatch.delenv("SKIPCHECK_LOG_LEVEL", raising=False)
