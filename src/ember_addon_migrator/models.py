"""
ember_addon_migrator.models - Pydantic Models
=============================================

Data models shared by the gatherers, the resolution engine, and the CLI.

    PackageManifest      parsed package.json (read-only input)
    MigrationOptions     user-supplied overrides
    PackageManagerKind   npm / yarn / pnpm
    PackageManagerInfo   detected package manager and the directory owning its lockfile

Usage Example
-------------
>>> from ember_addon_migrator.models import MigrationOptions, PackageManifest
>>> manifest = PackageManifest.model_validate({"name": "@scope/my-addon"})
>>> manifest.dev_dependencies
{}
>>> MigrationOptions(addon_location="  ").addon_location is None
True
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path, PurePosixPath
from typing import Any

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationInfo,
    field_validator,
    model_validator,
)


# =============================================================================
# Enumerations
# =============================================================================

class PackageManagerKind(str, Enum):
    """
    Package managers the migrator knows how to work with.

    Examples
    --------
    >>> PackageManagerKind.PNPM.lockfile
    'pnpm-lock.yaml'
    """

    NPM = "npm"
    YARN = "yarn"
    PNPM = "pnpm"

    @property
    def lockfile(self) -> str:
        """Name of the lockfile this package manager writes at its root."""
        lockfiles = {
            PackageManagerKind.NPM: "package-lock.json",
            PackageManagerKind.YARN: "yarn.lock",
            PackageManagerKind.PNPM: "pnpm-lock.yaml",
        }
        return lockfiles[self]

    @property
    def install_command(self) -> str:
        """Command that installs dependencies from the lockfile root."""
        return f"{self.value} install"


# =============================================================================
# Package Manifest
# =============================================================================

class PackageManifest(BaseModel):
    """
    A parsed package.json.

    Only the keys the engine reasons about are modelled; everything else is
    kept as extra data so nothing in the file is lost on load. Field names use
    snake_case with the npm spelling as alias.

    Attributes
    ----------
    name : str
        Package name, possibly scoped (``@scope/name``).

    dependencies, dev_dependencies, peer_dependencies : dict[str, Any]
        Declared dependency maps, keyed by package name.

    keywords : list[Any]
        npm keywords. Ember addons carry ``"ember-addon"``. A single string
        is read as a one-element list.

    ember_addon : Any
        The ``"ember-addon"`` metadata block. v2 addons declare
        ``{"version": 2}`` here.

    ember : Any
        The ``"ember"`` block (edition and similar settings).

    package_manager : str | None
        The corepack ``packageManager`` field, e.g. ``"pnpm@8.6.0"``.
    """

    model_config = ConfigDict(frozen=True, extra="allow", populate_by_name=True)

    name: str = Field(min_length=1, description="Package name")
    version: str | None = Field(default=None, description="Package version")
    # Only the dependency names matter; version ranges are kept as written.
    dependencies: dict[str, Any] = Field(default_factory=dict)
    dev_dependencies: dict[str, Any] = Field(
        default_factory=dict, alias="devDependencies"
    )
    peer_dependencies: dict[str, Any] = Field(
        default_factory=dict, alias="peerDependencies"
    )
    keywords: list[Any] = Field(default_factory=list)
    ember_addon: Any = Field(default=None, alias="ember-addon")
    ember: Any = Field(default=None)
    package_manager: str | None = Field(default=None, alias="packageManager")

    @field_validator(
        "dependencies", "dev_dependencies", "peer_dependencies", "keywords",
        mode="before",
    )
    @classmethod
    def null_to_empty(cls, v: Any, info: ValidationInfo) -> Any:
        """Treat ``null`` collections the same as absent ones, and a lone keyword as a list."""
        if v is None:
            return [] if info.field_name == "keywords" else {}
        if info.field_name == "keywords" and isinstance(v, str):
            return [v]
        return v

    @property
    def declared_package_manager(self) -> PackageManagerKind | None:
        """
        The package manager named by the ``packageManager`` field, if any.

        Returns
        -------
        PackageManagerKind | None
            ``None`` when the field is absent or names an unsupported tool.
        """
        if not self.package_manager:
            return None
        kind = self.package_manager.split("@", 1)[0].strip()
        try:
            return PackageManagerKind(kind)
        except ValueError:
            return None


# =============================================================================
# Migration Options
# =============================================================================

class MigrationOptions(BaseModel):
    """
    User-supplied overrides for a migration run.

    Every field is optional. The three ``reuse``/``ignore`` flags and
    ``analysis_only`` default to False; the location and name overrides fall
    back to policy defaults computed by ``AddonInfo``.

    Attributes
    ----------
    reuse_existing_versions : bool
        Keep the versions already declared instead of taking the latest ones.

    ignore_new_dependencies : bool
        Do not declare dependencies the migration discovers.

    reuse_existing_configs : bool
        Keep existing lint/format configuration files.

    analysis_only : bool
        Stop after reporting the resolved analysis.

    addon_location, test_app_location : str | None
        Relative destinations for the addon and the test app.

    test_app_name : str | None
        Package name of the generated test app.

    directory : Path | None
        Package directory to migrate. Defaults to the working directory.

    package_manager : PackageManagerKind | None
        Hint used when several lockfiles could own the package.
    """

    model_config = ConfigDict(frozen=True)

    reuse_existing_versions: bool = False
    ignore_new_dependencies: bool = False
    reuse_existing_configs: bool = False
    analysis_only: bool = False
    addon_location: str | None = Field(
        default=None,
        description="Where the v2 addon ends up, relative to the directory",
    )
    test_app_location: str | None = Field(
        default=None,
        description="Where the test app ends up, relative to the directory",
    )
    test_app_name: str | None = Field(
        default=None,
        description="Package name for the generated test app",
    )
    directory: Path | None = Field(
        default=None,
        description="Package directory to migrate",
    )
    package_manager: PackageManagerKind | None = Field(
        default=None,
        description="Package manager to prefer when several lockfiles apply",
    )

    @field_validator("addon_location", "test_app_location", "test_app_name", mode="before")
    @classmethod
    def blank_to_none(cls, v: Any) -> Any:
        """Blank strings mean "use the default"."""
        if isinstance(v, str):
            v = v.strip()
            return v or None
        return v

    @field_validator("addon_location", "test_app_location")
    @classmethod
    def validate_relative(cls, v: str | None) -> str | None:
        """Locations are relative to the migrated directory."""
        if v is not None and PurePosixPath(v).is_absolute():
            msg = f"Location '{v}' must be relative to the package directory."
            raise ValueError(msg)
        return v

    @model_validator(mode="after")
    def validate_distinct_locations(self) -> MigrationOptions:
        """The addon and the test app cannot share a directory."""
        if (
            self.addon_location is not None
            and self.addon_location == self.test_app_location
        ):
            msg = (
                f"The addon and the test app cannot both be placed at "
                f"'{self.addon_location}'."
            )
            raise ValueError(msg)
        return self


# =============================================================================
# Detection Results
# =============================================================================

@dataclass(frozen=True)
class PackageManagerInfo:
    """
    Result of package-manager detection.

    Attributes
    ----------
    manager : PackageManagerKind
        The package manager that owns the package.

    root : Path
        Directory holding that package manager's lockfile.
    """

    manager: PackageManagerKind
    root: Path
