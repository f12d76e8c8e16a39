"""
ember_addon_migrator.info - Addon Resolution Engine
===================================================

``AddonInfo`` gathers facts about the package being migrated and combines
them into a single, validated, immutable snapshot. Everything the planner
and the CLI need to know is answered by querying that snapshot.

Construction
------------
``AddonInfo.create`` runs the fact gatherers in order and stops at the first
failure, wrapping it in an actionable error:

1. read package.json                    -> ManifestReadError
2. find the git root                    -> RepoDiscoveryError
3. detect the package manager           -> PackageManagerError
4. analyze imports                      (never fails)
5. create the scratch directory
6. assemble the snapshot
7. refuse v2 addons                     -> NothingToDoError

If anything goes wrong after step 5 (including Ctrl-C), the scratch
directory is removed before the exception propagates. Once ``create``
returns, the caller owns the scratch directory. Using the result as a
context manager removes it on exit:

>>> with AddonInfo.create(MigrationOptions()) as info:  # doctest: +SKIP
...     print(info.addon_location)

Queries
-------
All properties are pure functions of the stored facts. None of them touch
the filesystem or the process environment.
"""

from __future__ import annotations

import logging
import subprocess
from dataclasses import dataclass, field
from pathlib import Path
from types import TracebackType

from pydantic import ValidationError

from ember_addon_migrator.errors import (
    AmbiguousLockfileError,
    LockfileNotFoundError,
    ManifestReadError,
    NothingToDoError,
    PackageManagerError,
    RepoDiscoveryError,
)
from ember_addon_migrator.git import find_root
from ember_addon_migrator.imports import analyze_imports
from ember_addon_migrator.manifest import read_manifest
from ember_addon_migrator.models import (
    MigrationOptions,
    PackageManagerKind,
    PackageManifest,
)
from ember_addon_migrator.package_manager import guess_package_manager
from ember_addon_migrator.paths import create_tmp, pathify_npm_name, remove_tmp


logger = logging.getLogger(__name__)

ADDON_KEYWORD = "ember-addon"

# Default addon location inside a bigger monorepo, where the package
# directory is usually already named after the addon.
MONOREPO_ADDON_LOCATION = "package"

DEFAULT_TEST_APP_LOCATION = "test-app"
DEFAULT_TEST_APP_NAME = "test-app"

# Modules resolved by ember-source rather than installed as packages
EMBER_PROVIDED_MODULES = frozenset({
    "ember",
    "@ember/application",
    "@ember/array",
    "@ember/component",
    "@ember/controller",
    "@ember/debug",
    "@ember/destroyable",
    "@ember/engine",
    "@ember/enumerable",
    "@ember/error",
    "@ember/helper",
    "@ember/instrumentation",
    "@ember/modifier",
    "@ember/object",
    "@ember/owner",
    "@ember/polyfills",
    "@ember/renderer",
    "@ember/routing",
    "@ember/runloop",
    "@ember/service",
    "@ember/template",
    "@ember/template-compilation",
    "@ember/template-factory",
    "@ember/test",
    "@ember/utils",
    "@ember/version",
    "@glimmer/tracking",
})


def _first_problem(error: ValidationError) -> str:
    """Describe the first validation failure, naming the package.json key."""
    problem = error.errors()[0]
    location = ".".join(str(part) for part in problem["loc"])
    if location:
        return f"'{location}': {problem['msg']}"
    return problem["msg"]


def _is_set(value: object) -> bool:
    """Whether a package.json value counts as present. Objects and arrays always do."""
    if isinstance(value, (dict, list)):
        return True
    return bool(value)


@dataclass(frozen=True)
class AddonInfo:
    """
    Resolved facts about the addon being migrated.

    Instances are produced by :meth:`create`; constructing one directly is
    meant for tests and callers that gathered the facts themselves.

    Attributes
    ----------
    manifest : PackageManifest
        The package's package.json.

    options : MigrationOptions
        User-supplied overrides.

    package_manager : PackageManagerKind
        Package manager that owns the package.

    package_manager_root : Path
        Directory holding the package manager's lockfile.

    git_root : Path
        Top-level directory of the git repository.

    tmp_directory : Path
        Scratch directory where the original addon files are moved while
        the new addon is generated.

    imported_dependencies : frozenset[str]
        Package names imported by the addon's source code.

    working_directory : Path
        Process working directory at construction time.
    """

    manifest: PackageManifest
    options: MigrationOptions
    package_manager: PackageManagerKind
    package_manager_root: Path
    git_root: Path
    tmp_directory: Path = field(repr=False)
    imported_dependencies: frozenset[str] = frozenset()
    working_directory: Path = field(default_factory=Path.cwd, repr=False)

    # -------------------------------------------------------------------------
    # Construction
    # -------------------------------------------------------------------------

    @classmethod
    def create(cls, options: MigrationOptions | None = None) -> AddonInfo:
        """
        Gather every fact about the package and return the validated snapshot.

        Parameters
        ----------
        options : MigrationOptions | None
            User overrides. Defaults to ``MigrationOptions()``.

        Returns
        -------
        AddonInfo
            The resolved snapshot. The caller owns ``tmp_location``.

        Raises
        ------
        ManifestReadError
            If package.json cannot be read.
        RepoDiscoveryError
            If the package is not inside a git repository.
        PackageManagerError
            If npm, yarn, or pnpm cannot be identified as the owner.
        NothingToDoError
            If the package is already a v2 addon.
        """
        options = options or MigrationOptions()
        working_directory = Path.cwd()
        directory = (options.directory or working_directory).resolve()

        try:
            manifest = read_manifest(directory)
        except (OSError, UnicodeDecodeError, ValidationError) as e:
            msg = (
                "Could not read the package.json. "
                "Please either run ember-addon-migrator from a package directory, "
                "or specify a path to a package directory via --directory"
            )
            if isinstance(e, ValidationError):
                msg += f" ({_first_problem(e)})"
            raise ManifestReadError(msg) from e

        options = options.model_copy(update={"directory": directory})

        try:
            repo_root = find_root(directory)
        except (OSError, subprocess.CalledProcessError) as e:
            msg = "Could not find git root. Only git is supported at this time."
            raise RepoDiscoveryError(msg) from e

        try:
            detected = guess_package_manager(repo_root, options)
        except (LockfileNotFoundError, AmbiguousLockfileError) as e:
            msg = (
                "Could not determine package manager. "
                "Only npm, yarn, and pnpm are supported at this time."
            )
            candidates: tuple[str, ...] = ()
            if isinstance(e, AmbiguousLockfileError):
                msg += f" {e}; pass --package-manager to choose one."
                candidates = e.candidates
            raise PackageManagerError(msg, candidates=candidates) from e

        # From here on the directory is known to be a package.
        imported_dependencies = analyze_imports(directory)

        tmp_directory = create_tmp()
        try:
            info = cls(
                manifest=manifest,
                options=options,
                package_manager=detected.manager,
                package_manager_root=detected.root,
                git_root=repo_root,
                tmp_directory=tmp_directory,
                imported_dependencies=imported_dependencies,
                working_directory=working_directory,
            )

            if info.is_v2_addon:
                raise NothingToDoError(info.name)
        except BaseException:
            remove_tmp(tmp_directory)
            raise

        logger.debug("Resolved %r", info)
        return info

    def __enter__(self) -> AddonInfo:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        remove_tmp(self.tmp_directory)

    # -------------------------------------------------------------------------
    # Package identity
    # -------------------------------------------------------------------------

    @property
    def _local_dependency_names(self) -> set[str]:
        # v1 addons are loose about where they declare things
        return set(self.manifest.dependencies) | set(self.manifest.dev_dependencies)

    @property
    def name(self) -> str:
        return self.manifest.name

    @property
    def is_ts(self) -> bool:
        """Whether the addon uses TypeScript."""
        return "typescript" in self._local_dependency_names

    @property
    def is_npm(self) -> bool:
        return self.package_manager is PackageManagerKind.NPM

    @property
    def is_yarn(self) -> bool:
        return self.package_manager is PackageManagerKind.YARN

    @property
    def is_pnpm(self) -> bool:
        return self.package_manager is PackageManagerKind.PNPM

    @property
    def is_ember(self) -> bool:
        """Whether package.json carries either Ember metadata block."""
        return _is_set(self.manifest.ember_addon) or _is_set(self.manifest.ember)

    @property
    def is_addon(self) -> bool:
        return self.is_ember and ADDON_KEYWORD in self.manifest.keywords

    @property
    def is_v1_addon(self) -> bool:
        return self.is_addon and not self.is_v2_addon

    @property
    def is_v2_addon(self) -> bool:
        """Whether the ``ember-addon`` block declares ``"version": 2``."""
        if not self.is_addon:
            return False

        ember_addon = self.manifest.ember_addon
        if isinstance(ember_addon, dict) and "version" in ember_addon:
            version = ember_addon["version"]
            return not isinstance(version, bool) and version == 2

        return False

    @property
    def is_bigger_monorepo(self) -> bool:
        """
        Whether the package lives in a workspace rooted below the git root.

        When true, the migrator leaves the existing workspace alone instead of
        creating a top-level / workspaces package.json.
        """
        return self.package_manager_root != self.git_root

    # -------------------------------------------------------------------------
    # Migration layout
    # -------------------------------------------------------------------------

    @property
    def directory(self) -> Path:
        """
        Directory to run the migration in. Defaults to the working directory.

        ``create`` stores the resolved absolute path in ``options.directory``.
        """
        return self.options.directory or self.working_directory

    @property
    def tmp_location(self) -> Path:
        """Where the original addon files are parked while the new addon is generated."""
        return self.tmp_directory

    @property
    def addon_location(self) -> str:
        """
        Relative path the addon ends up in.

        In a solo repo this defaults to the unscoped addon name; in a bigger
        monorepo it defaults to ``package``, because the directory is usually
        already named after the addon.
        """
        if self.is_bigger_monorepo:
            return self.options.addon_location or MONOREPO_ADDON_LOCATION

        if self.options.addon_location:
            return self.options.addon_location

        scope, _, unscoped = self.name.partition("/")
        return unscoped or scope

    @property
    def test_app_location(self) -> str:
        return self.options.test_app_location or DEFAULT_TEST_APP_LOCATION

    @property
    def test_app_name(self) -> str:
        """
        Package name of the test app.

        Solo repos can keep ``test-app``. A bigger monorepo may hold several
        test apps, so the default there is derived from the addon name: for
        ``@limber/ui`` it is ``test-app-for-limber__ui``.
        """
        if self.options.test_app_name:
            return self.options.test_app_name

        if self.is_bigger_monorepo:
            return f"test-app-for-{pathify_npm_name(self.name)}"

        return DEFAULT_TEST_APP_NAME

    # -------------------------------------------------------------------------
    # Dependencies
    # -------------------------------------------------------------------------

    def has_dependency(self, dep: str) -> bool:
        """Whether the original package.json lists ``dep`` in dependencies."""
        return dep in self.manifest.dependencies

    def has_dev_dependency(self, dep: str) -> bool:
        """Whether the original package.json lists ``dep`` in devDependencies."""
        return dep in self.manifest.dev_dependencies

    def has_peer_dependency(self, dep: str) -> bool:
        return dep in self.manifest.peer_dependencies

    @property
    def phantom_dependencies(self) -> list[str]:
        """
        Packages imported by the source but not declared in package.json.

        The addon's own name and modules provided by ember-source are not
        counted. Sorted for stable output.
        """
        declared = self._local_dependency_names | set(self.manifest.peer_dependencies)
        return sorted(
            name
            for name in self.imported_dependencies
            if name not in declared
            and name != self.name
            and name not in EMBER_PROVIDED_MODULES
        )
