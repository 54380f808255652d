"""Integration tests for the skipcheck CLI."""

from pathlib import Path

import pytest

from skipcheck import SKIPCHECK_DIR
from skipcheck.cli import main
from skipcheck.manifest import load_manifest
from tests.conftest import rewrite_keeping_stat


@pytest.fixture
def in_project(project: Path, monkeypatch) -> Path:
    """Run CLI commands from inside the initialized sample project."""
    monkeypatch.chdir(project)
    return project


class TestCLIEntry:
    """Tests for the CLI entry point."""

    def test_version_flag(self, cli_runner):
        """--version shows version info."""
        result = cli_runner.invoke(main, ["--version"])
        assert result.exit_code == 0
        assert "skipcheck" in result.output
        assert "0.1.0" in result.output

    def test_help_flag(self, cli_runner):
        """--help lists the commands."""
        result = cli_runner.invoke(main, ["--help"])
        assert result.exit_code == 0
        assert "SkipCheck" in result.output
        for command in ("init", "analyze", "status", "clean"):
            assert command in result.output


class TestInit:
    def test_init_creates_directory(self, cli_runner, tmp_path: Path, monkeypatch):
        monkeypatch.chdir(tmp_path)

        result = cli_runner.invoke(main, ["init"])

        assert result.exit_code == 0
        assert (tmp_path / SKIPCHECK_DIR / "config.json").exists()
        assert load_manifest(tmp_path).analysis_uuid is None
        assert f"{SKIPCHECK_DIR}/" in (tmp_path / ".gitignore").read_text()

    def test_init_twice_requires_force(self, cli_runner, in_project: Path):
        result = cli_runner.invoke(main, ["init"])
        assert result.exit_code == 1

        result = cli_runner.invoke(main, ["init", "--force"])
        assert result.exit_code == 0

    def test_gitignore_entry_added_once(self, cli_runner, tmp_path: Path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        (tmp_path / ".gitignore").write_text("*.pyc\n")

        cli_runner.invoke(main, ["init"])
        cli_runner.invoke(main, ["init", "--force"])

        content = (tmp_path / ".gitignore").read_text()
        assert content.count(f"{SKIPCHECK_DIR}/") == 1
        assert content.startswith("*.pyc\n")


class TestAnalyze:
    def test_requires_init(self, cli_runner, tmp_path: Path, monkeypatch):
        monkeypatch.chdir(tmp_path)

        result = cli_runner.invoke(main, ["analyze"])

        assert result.exit_code == 1

    def test_first_analysis(self, cli_runner, in_project: Path):
        result = cli_runner.invoke(main, ["analyze"])

        assert result.exit_code == 0
        assert "Files scanned" in result.output
        assert "First analysis recorded" in result.output

    def test_second_analysis(self, cli_runner, in_project: Path):
        cli_runner.invoke(main, ["analyze"])

        result = cli_runner.invoke(main, ["analyze", "--verbose"])

        assert result.exit_code == 0
        assert "Analysis complete" in result.output
        assert "inventory/stock.py" in result.output

    def test_pull_request(self, cli_runner, in_project: Path):
        cli_runner.invoke(main, ["analyze"])
        before = load_manifest(in_project).analysis_uuid

        result = cli_runner.invoke(main, ["analyze", "--pull-request"])

        assert result.exit_code == 0
        assert "Pull request analysis" in result.output
        assert load_manifest(in_project).analysis_uuid == before

    def test_trust_break_is_reported(self, cli_runner, in_project: Path):
        cli_runner.invoke(main, ["analyze"])
        stock = in_project / "inventory" / "stock.py"
        rewrite_keeping_stat(stock, stock.read_text().replace("= 5", "= 7"))

        result = cli_runner.invoke(main, ["analyze"])

        assert result.exit_code == 0
        assert "Hash mismatch on stock.py" in result.output

    def test_changed_option(self, cli_runner, in_project: Path):
        cli_runner.invoke(main, ["analyze"])

        result = cli_runner.invoke(
            main, ["analyze", "--changed", "inventory/stock.py", "--verbose"]
        )

        assert result.exit_code == 0
        assert "Not marked as unchanged" in result.output


class TestStatusAndClean:
    def test_status_before_analysis(self, cli_runner, in_project: Path):
        result = cli_runner.invoke(main, ["status"])

        assert result.exit_code == 0
        assert "Empty" in result.output

    def test_status_after_analysis(self, cli_runner, in_project: Path):
        cli_runner.invoke(main, ["analyze"])

        result = cli_runner.invoke(main, ["status"])

        assert result.exit_code == 0
        assert "Ready" in result.output

    def test_clean(self, cli_runner, in_project: Path):
        result = cli_runner.invoke(main, ["clean", "--force"])

        assert result.exit_code == 0
        assert not (in_project / SKIPCHECK_DIR).exists()

    def test_clean_nothing(self, cli_runner, tmp_path: Path, monkeypatch):
        monkeypatch.chdir(tmp_path)

        result = cli_runner.invoke(main, ["clean", "--force"])

        assert result.exit_code == 0
        assert "Nothing to clean" in result.output
