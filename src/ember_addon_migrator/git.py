"""Locating the enclosing git repository."""

from __future__ import annotations

import logging
import subprocess
from pathlib import Path


logger = logging.getLogger(__name__)


def find_root(directory: Path) -> Path:
    """
    Return the top-level directory of the git repository containing ``directory``.

    Raises
    ------
    subprocess.CalledProcessError
        If ``directory`` is not inside a git work tree.
    FileNotFoundError
        If git is not installed, or ``directory`` does not exist.
    """
    result = subprocess.run(
        ["git", "rev-parse", "--show-toplevel"],
        cwd=directory,
        check=True,
        capture_output=True,
        text=True,
    )
    root = Path(result.stdout.strip()).resolve()
    logger.debug("Git root for %s is %s", directory, root)
    return root
