"""
ember_addon_migrator.planner - Migration Planning
=================================================

Turns a resolved :class:`~ember_addon_migrator.info.AddonInfo` into the
ordered list of steps a v1 -> v2 migration performs. The planner decides
*what* happens and where; carrying the steps out is left to the executor.

Plan Shape
----------
1. Park the original addon in the scratch directory
2. Create the workspace root (solo repos only)
3. Generate the v2 addon
4. Generate the test app
5. Resolve dependency versions
6. Declare phantom dependencies (unless ignored)
7. Reuse or regenerate lint/format configs
8. Install with the detected package manager

Usage
-----
>>> from ember_addon_migrator import AddonInfo, create_migration_plan
>>> with AddonInfo.create() as info:  # doctest: +SKIP
...     for step in create_migration_plan(info):
...         print(step.description)
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from ember_addon_migrator.info import AddonInfo
from ember_addon_migrator.models import PackageManagerKind


class MigrationType(str, Enum):
    """
    Categories of migration steps.
    """

    WORKSPACE = "workspace"
    ADDON = "addon"
    TEST_APP = "test_app"
    DEPENDENCIES = "dependencies"
    CONFIG = "config"
    INSTALL = "install"


@dataclass
class MigrationStep:
    """
    A single migration step.

    Attributes
    ----------
    migration_type : MigrationType
        Category of this step.

    description : str
        Human-readable description.

    source : str
        What the step starts from.

    target : str
        What the step produces.

    files_affected : list[Path]
        Files and directories the step creates or rewrites.
    """

    migration_type: MigrationType
    description: str
    source: str
    target: str
    files_affected: list[Path] = field(default_factory=list)


# Lint/format configuration files carried over by --reuse-existing-configs
CONFIG_FILES = (
    ".eslintrc.js",
    ".eslintrc.cjs",
    ".eslintignore",
    ".prettierrc.js",
    ".prettierrc.cjs",
    ".prettierignore",
    ".template-lintrc.js",
)


def _workspace_step(info: AddonInfo) -> MigrationStep:
    root = info.directory
    packages = [info.addon_location, info.test_app_location]

    if info.package_manager is PackageManagerKind.PNPM:
        description = f"Create pnpm-workspace.yaml listing {', '.join(packages)}"
        files = [root / "package.json", root / "pnpm-workspace.yaml"]
    else:
        description = (
            f"Create a top-level package.json with workspaces for "
            f"{', '.join(packages)}"
        )
        files = [root / "package.json"]

    return MigrationStep(
        migration_type=MigrationType.WORKSPACE,
        description=description,
        source="single package",
        target=f"{info.package_manager.value} workspace",
        files_affected=files,
    )


def create_migration_plan(info: AddonInfo) -> list[MigrationStep]:
    """
    Create the migration plan for a resolved addon.

    Parameters
    ----------
    info : AddonInfo
        The resolved addon.

    Returns
    -------
    list[MigrationStep]
        Ordered list of steps to perform.
    """
    root = info.directory
    addon_path = root / info.addon_location
    test_app_path = root / info.test_app_location
    language = "TypeScript" if info.is_ts else "JavaScript"

    steps = [
        MigrationStep(
            migration_type=MigrationType.ADDON,
            description="Move the original addon files out of the way",
            source=str(root),
            target=str(info.tmp_location),
            files_affected=[info.tmp_location],
        ),
    ]

    # A bigger monorepo already has a workspace root.
    if not info.is_bigger_monorepo:
        steps.append(_workspace_step(info))

    steps.append(
        MigrationStep(
            migration_type=MigrationType.ADDON,
            description=f"Generate the v2 addon {info.name} ({language})",
            source="v1 addon",
            target=info.addon_location,
            files_affected=[addon_path / "package.json", addon_path / "src"],
        )
    )

    steps.append(
        MigrationStep(
            migration_type=MigrationType.TEST_APP,
            description=f"Generate the test app {info.test_app_name} from the addon's tests",
            source="tests",
            target=info.test_app_location,
            files_affected=[test_app_path / "package.json", test_app_path / "tests"],
        )
    )

    if info.options.reuse_existing_versions:
        steps.append(
            MigrationStep(
                migration_type=MigrationType.DEPENDENCIES,
                description="Keep the dependency versions already declared",
                source="package.json",
                target=info.addon_location,
                files_affected=[addon_path / "package.json"],
            )
        )
    else:
        steps.append(
            MigrationStep(
                migration_type=MigrationType.DEPENDENCIES,
                description="Upgrade dependencies to their latest versions",
                source="package.json",
                target="latest",
                files_affected=[addon_path / "package.json"],
            )
        )

    phantoms = info.phantom_dependencies
    if phantoms and not info.options.ignore_new_dependencies:
        steps.append(
            MigrationStep(
                migration_type=MigrationType.DEPENDENCIES,
                description=f"Declare undeclared imports: {', '.join(phantoms)}",
                source="imports",
                target="dependencies",
                files_affected=[addon_path / "package.json"],
            )
        )

    if info.options.reuse_existing_configs:
        steps.append(
            MigrationStep(
                migration_type=MigrationType.CONFIG,
                description="Carry over existing lint and format configs",
                source="v1 addon",
                target=info.addon_location,
                files_affected=[addon_path / name for name in CONFIG_FILES],
            )
        )
    else:
        steps.append(
            MigrationStep(
                migration_type=MigrationType.CONFIG,
                description="Generate fresh lint and format configs",
                source="blueprint",
                target=info.addon_location,
                files_affected=[addon_path / name for name in CONFIG_FILES],
            )
        )

    steps.append(
        MigrationStep(
            migration_type=MigrationType.INSTALL,
            description=f"Run '{info.package_manager.install_command}'",
            source=info.package_manager.value,
            target=str(info.package_manager_root),
            files_affected=[info.package_manager_root / info.package_manager.lockfile],
        )
    )

    return steps
