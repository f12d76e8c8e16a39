"""
pytest configuration and shared fixtures for ember-addon-migrator tests.

Fixtures
--------
repo : Path
    A temporary directory standing in for a git repository root.

write_package : Callable
    Writes a package.json (and optionally a lockfile and sources) into a
    directory.

v1_manifest : dict
    package.json content of a typical v1 addon.

fake_git_root : Path
    Patches git root discovery to return ``repo`` so tests do not need git.
"""

from __future__ import annotations

import json
from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest

from ember_addon_migrator.models import PackageManagerKind


@pytest.fixture
def repo(tmp_path: Path) -> Path:
    """Resolved temporary directory used as the repository root."""
    root = tmp_path.resolve() / "repo"
    root.mkdir()
    return root


@pytest.fixture
def v1_manifest() -> dict[str, Any]:
    """package.json of a plain v1 addon."""
    return {
        "name": "@scope/my-addon",
        "version": "1.2.3",
        "keywords": ["ember-addon"],
        "dependencies": {
            "ember-cli-babel": "^7.26.11",
            "ember-cli-htmlbars": "^6.1.1",
        },
        "devDependencies": {
            "ember-source": "~4.8.0",
            "ember-qunit": "^6.0.0",
        },
        "ember": {"edition": "octane"},
        "ember-addon": {"configPath": "tests/dummy/config"},
    }


@pytest.fixture
def write_package() -> Callable[..., Path]:
    """
    Return a helper that lays out a package on disk.

    The helper takes the directory, the manifest dict, an optional lockfile
    kind, and a mapping of relative source paths to file contents.
    """

    def _write(
        directory: Path,
        manifest: dict[str, Any],
        lockfile: PackageManagerKind | None = None,
        sources: dict[str, str] | None = None,
    ) -> Path:
        directory.mkdir(parents=True, exist_ok=True)
        (directory / "package.json").write_text(json.dumps(manifest, indent=2))
        if lockfile is not None:
            (directory / lockfile.lockfile).write_text("")
        for relative, content in (sources or {}).items():
            path = directory / relative
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(content)
        return directory

    return _write


@pytest.fixture
def fake_git_root(monkeypatch: pytest.MonkeyPatch, repo: Path) -> Path:
    """Make git root discovery report ``repo``."""
    monkeypatch.setattr(
        "ember_addon_migrator.info.find_root", lambda directory: repo
    )
    return repo


# =============================================================================
# pytest Configuration
# =============================================================================

def pytest_configure(config: pytest.Config) -> None:
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "integration: marks tests requiring external tools such as git"
    )
