"""
Tests for ember_addon_migrator.cli
==================================

Tests use Typer's CliRunner. Git root discovery is faked through the
``fake_git_root`` fixture so no git binary is needed.

Test Organization
-----------------
- TestVersionCommand: --version flag
- TestHelpOutput: help text
- TestMigrateCommand: the migrate command end to end
- TestAmbiguousPackageManager: prompting for a package manager
"""

from pathlib import Path
from unittest.mock import patch

import pytest
from typer.testing import CliRunner

from ember_addon_migrator import __version__
from ember_addon_migrator.cli import app
from ember_addon_migrator.models import PackageManagerKind


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture
def runner() -> CliRunner:
    """Create a CLI test runner."""
    return CliRunner()


@pytest.fixture
def addon(repo: Path, write_package, v1_manifest, fake_git_root) -> Path:
    """A v1 addon managed by pnpm at the repository root."""
    return write_package(repo, v1_manifest, lockfile=PackageManagerKind.PNPM)


# =============================================================================
# Version / Help
# =============================================================================

class TestVersionCommand:
    """Tests for the --version flag."""

    def test_version_flag(self, runner: CliRunner) -> None:
        result = runner.invoke(app, ["--version"])

        assert result.exit_code == 0
        assert __version__ in result.output

    def test_version_short_flag(self, runner: CliRunner) -> None:
        result = runner.invoke(app, ["-V"])

        assert result.exit_code == 0
        assert __version__ in result.output


class TestHelpOutput:
    """Tests for help text."""

    def test_main_help(self, runner: CliRunner) -> None:
        result = runner.invoke(app, ["--help"])

        assert result.exit_code == 0
        assert "migrate" in result.output

    def test_migrate_help(self, runner: CliRunner) -> None:
        result = runner.invoke(app, ["migrate", "--help"])

        assert result.exit_code == 0
        assert "--analysis-only" in result.output
        assert "--package-manager" in result.output


# =============================================================================
# Migrate Command
# =============================================================================

class TestMigrateCommand:
    """Tests for the migrate command."""

    def test_analysis_only(self, runner: CliRunner, addon: Path) -> None:
        result = runner.invoke(
            app, ["migrate", "--directory", str(addon), "--analysis-only"]
        )

        assert result.exit_code == 0, result.output
        assert "Addon Analysis" in result.output
        assert "pnpm" in result.output
        assert "Migration Plan" not in result.output

    def test_prints_plan(self, runner: CliRunner, addon: Path) -> None:
        result = runner.invoke(app, ["migrate", "--directory", str(addon)])

        assert result.exit_code == 0, result.output
        assert "Addon Analysis" in result.output
        assert "Migration Plan" in result.output

    def test_analysis_only_from_environment(self, runner: CliRunner, addon: Path) -> None:
        result = runner.invoke(
            app,
            ["migrate", "--directory", str(addon)],
            env={"EMBER_ADDON_MIGRATOR_ANALYSIS_ONLY": "1"},
        )

        assert result.exit_code == 0, result.output
        assert "Migration Plan" not in result.output

    def test_reports_undeclared_imports(
        self, runner: CliRunner, addon: Path
    ) -> None:
        (addon / "addon").mkdir()
        (addon / "addon" / "index.js").write_text("import { task } from 'ember-concurrency';\n")

        result = runner.invoke(app, ["migrate", "--directory", str(addon), "--analysis-only"])

        assert result.exit_code == 0, result.output
        assert "Undeclared Imports" in result.output
        assert "ember-concurrency" in result.output

    def test_scratch_directory_removed(
        self, runner: CliRunner, addon: Path, tmp_path: Path
    ) -> None:
        scratch = tmp_path / "scratch"
        scratch.mkdir()

        with patch("ember_addon_migrator.info.create_tmp", return_value=scratch):
            result = runner.invoke(app, ["migrate", "--directory", str(addon)])

        assert result.exit_code == 0, result.output
        assert not scratch.exists()

    def test_v2_addon_exits_cleanly(
        self, runner: CliRunner, repo: Path, write_package, fake_git_root
    ) -> None:
        write_package(
            repo,
            {"name": "done", "keywords": ["ember-addon"], "ember-addon": {"version": 2}},
            lockfile=PackageManagerKind.NPM,
        )

        result = runner.invoke(app, ["migrate", "--directory", str(repo)])

        assert result.exit_code == 0, result.output
        assert "Nothing To Do" in result.output

    def test_missing_manifest(self, runner: CliRunner, repo: Path, fake_git_root) -> None:
        result = runner.invoke(app, ["migrate", "--directory", str(repo)])

        assert result.exit_code == 1
        assert "Error" in result.output

    def test_not_an_addon(
        self, runner: CliRunner, repo: Path, write_package, fake_git_root
    ) -> None:
        write_package(repo, {"name": "left-pad"}, lockfile=PackageManagerKind.NPM)

        result = runner.invoke(app, ["migrate", "--directory", str(repo)])

        assert result.exit_code == 1
        assert "Error" in result.output
        assert "Migration Plan" not in result.output

    def test_conflicting_locations(self, runner: CliRunner, addon: Path) -> None:
        result = runner.invoke(
            app,
            [
                "migrate",
                "--directory", str(addon),
                "--addon-location", "pkg",
                "--test-app-location", "pkg",
            ],
        )

        assert result.exit_code == 1
        assert "Error" in result.output


# =============================================================================
# Ambiguous Package Manager
# =============================================================================

class TestAmbiguousPackageManager:
    """Tests for choosing between several lockfiles."""

    @pytest.fixture
    def ambiguous(self, repo: Path, write_package, v1_manifest, fake_git_root) -> Path:
        write_package(repo, v1_manifest, lockfile=PackageManagerKind.NPM)
        (repo / "yarn.lock").touch()
        return repo

    def test_prompts_for_choice(self, runner: CliRunner, ambiguous: Path) -> None:
        with patch(
            "ember_addon_migrator.cli.prompt_package_manager",
            return_value=PackageManagerKind.YARN,
        ) as prompt:
            result = runner.invoke(
                app, ["migrate", "--directory", str(ambiguous), "--analysis-only"]
            )

        assert result.exit_code == 0, result.output
        prompt.assert_called_once_with(("npm", "yarn"))
        assert "yarn" in result.output

    def test_yes_never_prompts(self, runner: CliRunner, ambiguous: Path) -> None:
        with patch("ember_addon_migrator.cli.prompt_package_manager") as prompt:
            result = runner.invoke(
                app, ["migrate", "--directory", str(ambiguous), "--yes"]
            )

        assert result.exit_code == 1
        prompt.assert_not_called()

    def test_flag_resolves_ambiguity(self, runner: CliRunner, ambiguous: Path) -> None:
        result = runner.invoke(
            app,
            [
                "migrate",
                "--directory", str(ambiguous),
                "--package-manager", "npm",
                "--analysis-only",
            ],
        )

        assert result.exit_code == 0, result.output
