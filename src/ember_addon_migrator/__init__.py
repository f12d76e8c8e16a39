"""
ember_addon_migrator - Ember v1 to v2 Addon Migrator
====================================================

A CLI tool that inspects a legacy ("v1") Ember addon and works out how it
moves to the v2 addon format: where the addon goes, whether a test app is
split out, which package manager owns it, and which imports it never
declared.

Quick Start
-----------
```bash
# Inspect an addon without planning anything
ember-addon-migrator migrate --analysis-only

# Inspect and plan, from anywhere inside the repository
ember-addon-migrator migrate --directory packages/my-addon
```

Example
-------
>>> from ember_addon_migrator import AddonInfo, MigrationOptions
>>> with AddonInfo.create(MigrationOptions()) as info:  # doctest: +SKIP
...     info.addon_location
'my-addon'

Architecture
------------
- ``models``: Pydantic models for manifests and options
- ``errors``: Error taxonomy
- ``manifest``, ``git``, ``package_manager``, ``imports``, ``paths``: fact gatherers
- ``info``: ``AddonInfo``, the resolution engine
- ``planner``: Migration plan built from a resolved ``AddonInfo``
- ``cli``: Typer-based command line interface
"""

# =============================================================================
# Package Metadata
# =============================================================================
__version__ = "0.1.0"
__license__ = "MIT"

# =============================================================================
# Public API Exports
# =============================================================================

from ember_addon_migrator.errors import (
    ManifestReadError,
    MigratorError,
    NothingToDoError,
    PackageManagerError,
    RepoDiscoveryError,
)
from ember_addon_migrator.info import AddonInfo
from ember_addon_migrator.models import (
    MigrationOptions,
    PackageManagerKind,
    PackageManifest,
)
from ember_addon_migrator.planner import create_migration_plan


__all__ = [
    "AddonInfo",
    "ManifestReadError",
    "MigrationOptions",
    "MigratorError",
    "NothingToDoError",
    "PackageManagerError",
    "PackageManagerKind",
    "PackageManifest",
    "RepoDiscoveryError",
    "__version__",
    "create_migration_plan",
]
