"""Scratch directories and path-safe package names."""

from __future__ import annotations

import logging
import shutil
import tempfile
from pathlib import Path


logger = logging.getLogger(__name__)

TMP_PREFIX = "ember-addon-migrator-"


def create_tmp() -> Path:
    """Create a fresh, uniquely named scratch directory."""
    path = Path(tempfile.mkdtemp(prefix=TMP_PREFIX))
    logger.debug("Created scratch directory %s", path)
    return path


def remove_tmp(path: Path) -> None:
    """Remove a scratch directory created by :func:`create_tmp`."""
    if path.exists():
        shutil.rmtree(path)
        logger.debug("Removed scratch directory %s", path)


def pathify_npm_name(name: str) -> str:
    """
    Turn an npm package name into something usable as a path segment.

    Examples
    --------
    >>> pathify_npm_name("@limber/ui")
    'limber__ui'
    >>> pathify_npm_name("ember-resources")
    'ember-resources'
    """
    return name.replace("@", "", 1).replace("/", "__", 1)
