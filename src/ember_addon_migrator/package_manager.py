"""
ember_addon_migrator.package_manager - Package Manager Detection
================================================================

Works out which package manager owns an addon, and where its root is.

Detection Strategy
------------------
Starting at the package directory and walking up to the repository root
(inclusive), the first directory that holds any lockfile is the package
manager root:

1. Exactly one lockfile there: that package manager wins.
2. Several lockfiles: the ``--package-manager`` hint decides, then the
   ``packageManager`` field of that directory's package.json. If neither
   names one of the candidates, detection fails instead of guessing.

No lockfile anywhere between the package and the repository root is a
failure too.

    Lockfile             Package manager
    -------------------  ---------------
    package-lock.json    npm
    yarn.lock            yarn
    pnpm-lock.yaml       pnpm
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from pathlib import Path

from pydantic import ValidationError

from ember_addon_migrator.errors import AmbiguousLockfileError, LockfileNotFoundError
from ember_addon_migrator.manifest import read_manifest
from ember_addon_migrator.models import (
    MigrationOptions,
    PackageManagerInfo,
    PackageManagerKind,
)


logger = logging.getLogger(__name__)


def detect_lockfiles(path: Path) -> list[PackageManagerKind]:
    """Return the package managers whose lockfile exists directly in ``path``."""
    return [kind for kind in PackageManagerKind if (path / kind.lockfile).is_file()]


def _walk_up(start: Path, stop: Path) -> Iterator[Path]:
    """Yield ``start`` and each parent up to and including ``stop``."""
    current = start
    yield current
    while current != stop:
        current = current.parent
        yield current


def _declared_package_manager(path: Path) -> PackageManagerKind | None:
    """The corepack ``packageManager`` field of ``path``'s package.json, if readable."""
    try:
        return read_manifest(path).declared_package_manager
    except (OSError, UnicodeDecodeError, ValidationError):
        return None


def guess_package_manager(
    repo_root: Path,
    options: MigrationOptions,
) -> PackageManagerInfo:
    """
    Detect the package manager that owns the package being migrated.

    Parameters
    ----------
    repo_root : Path
        Top-level directory of the git repository.

    options : MigrationOptions
        ``directory`` selects the package; ``package_manager`` disambiguates
        directories with several lockfiles.

    Returns
    -------
    PackageManagerInfo
        The package manager and the directory holding its lockfile.

    Raises
    ------
    LockfileNotFoundError
        If no lockfile exists between the package and ``repo_root``, or the
        package is not inside ``repo_root``.
    AmbiguousLockfileError
        If the nearest lockfile directory holds several lockfiles and nothing
        says which one is authoritative.
    """
    start = (options.directory or Path.cwd()).resolve()
    stop = repo_root.resolve()

    if not start.is_relative_to(stop):
        msg = f"{start} is not inside the repository at {stop}"
        raise LockfileNotFoundError(msg)

    for candidate in _walk_up(start, stop):
        found = detect_lockfiles(candidate)
        if not found:
            continue

        logger.debug(
            "Found lockfiles for %s in %s",
            ", ".join(kind.value for kind in found),
            candidate,
        )

        if len(found) == 1:
            return PackageManagerInfo(manager=found[0], root=candidate)

        for hint in (options.package_manager, _declared_package_manager(candidate)):
            if hint in found:
                logger.debug("Using %s to resolve multiple lockfiles", hint.value)
                return PackageManagerInfo(manager=hint, root=candidate)

        raise AmbiguousLockfileError(
            tuple(kind.value for kind in found),
            candidate,
        )

    msg = f"No lockfile found between {start} and {stop}"
    raise LockfileNotFoundError(msg)
