"""
ember_addon_migrator.errors - Error Taxonomy
============================================

Every failure the resolution engine can surface is one of the classes below.
Gatherers raise the low-level errors (or whatever their underlying library
raises); ``AddonInfo.create`` wraps those into the user-facing taxonomy with
an actionable message.

Hierarchy
---------
::

    MigratorError
    ├── ManifestReadError
    ├── RepoDiscoveryError
    └── PackageManagerError

    NothingToDoError          (not a failure, maps to a successful exit)

    LockfileNotFoundError     (raised by the package-manager detector)
    AmbiguousLockfileError    (raised by the package-manager detector)
"""

from __future__ import annotations

from pathlib import Path


class MigratorError(Exception):
    """Base class for failures that stop a migration run."""


class ManifestReadError(MigratorError):
    """The package.json is missing, unreadable, or malformed."""


class RepoDiscoveryError(MigratorError):
    """No git repository encloses the package."""


class PackageManagerError(MigratorError):
    """
    The owning package manager could not be determined.

    Attributes
    ----------
    candidates : tuple[str, ...]
        Package managers that were plausible when the failure was caused by
        several lockfiles sitting side by side. Empty when nothing was found.
    """

    def __init__(self, message: str, candidates: tuple[str, ...] = ()) -> None:
        super().__init__(message)
        self.candidates = candidates


class NothingToDoError(Exception):
    """
    The package is already a v2 addon.

    A terminal "no migration needed" condition rather than a failure. It does
    not derive from ``MigratorError`` and the CLI exits successfully on it.
    """

    def __init__(self, package_name: str) -> None:
        super().__init__(
            f"{package_name} is already a V2 addon. Migration will stop."
        )
        self.package_name = package_name


class LockfileNotFoundError(Exception):
    """No npm, yarn, or pnpm lockfile was found between a package and its repo root."""


class AmbiguousLockfileError(Exception):
    """Several lockfiles live in the same directory and no hint picks one."""

    def __init__(self, candidates: tuple[str, ...], directory: Path) -> None:
        super().__init__(
            f"Found lockfiles for {', '.join(candidates)} in {directory}"
        )
        self.candidates = candidates
        self.directory = directory
