"""Reading package.json manifests."""

from __future__ import annotations

import logging
from pathlib import Path

from ember_addon_migrator.models import PackageManifest


logger = logging.getLogger(__name__)


def read_manifest(directory: Path) -> PackageManifest:
    """
    Read and validate ``<directory>/package.json``.

    Parameters
    ----------
    directory : Path
        Package directory.

    Returns
    -------
    PackageManifest
        The parsed manifest.

    Raises
    ------
    FileNotFoundError
        If there is no package.json in ``directory``.
    UnicodeDecodeError
        If package.json is not UTF-8.
    pydantic.ValidationError
        If the file is not JSON or lacks a package name.
    """
    path = directory / "package.json"
    logger.debug("Reading %s", path)

    content = path.read_text(encoding="utf-8")
    return PackageManifest.model_validate_json(content)
