"""
ember_addon_migrator.cli - Command Line Interface
=================================================

Command-line interface for ember-addon-migrator, built with Typer and rich.

Architecture
------------
::

    app (main entry point, --version / --verbose)
    └── migrate  - Analyze a v1 addon and plan its move to the v2 format

Every option can also be set through an ``EMBER_ADDON_MIGRATOR_*``
environment variable, which is handy in CI.

Exit Codes
----------
- 0: analysis / plan printed, or the addon is already a v2 addon
- 1: the addon could not be resolved (see the printed error)

Usage Examples
--------------
    $ ember-addon-migrator migrate
    $ ember-addon-migrator migrate --analysis-only
    $ ember-addon-migrator migrate -d packages/ui --test-app-name ui-tests

See Also
--------
- info.py: Resolution engine queried for the analysis
- planner.py: Plan printed after the analysis
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Annotated

import questionary
import typer
from rich import print as rprint
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.table import Table

from ember_addon_migrator import __version__
from ember_addon_migrator.errors import (
    MigratorError,
    NothingToDoError,
    PackageManagerError,
)
from ember_addon_migrator.info import AddonInfo
from ember_addon_migrator.models import MigrationOptions, PackageManagerKind
from ember_addon_migrator.planner import create_migration_plan


# =============================================================================
# CLI Application Setup
# =============================================================================

app = typer.Typer(
    name="ember-addon-migrator",
    help="Migrate a v1 Ember addon to the v2 addon format.",
    no_args_is_help=True,
    rich_markup_mode="rich",
    add_completion=False,
)

console = Console()

ENV_PREFIX = "EMBER_ADDON_MIGRATOR_"


# =============================================================================
# Callbacks
# =============================================================================

def version_callback(value: bool) -> None:
    """Display version information and exit."""
    if value:
        console.print(Panel(
            f"[bold green]ember-addon-migrator[/] version [cyan]{__version__}[/]\n\n"
            f"[dim]Ember v1 addon to v2 addon migrator[/]",
            border_style="green",
        ))
        raise typer.Exit()


def setup_logging(verbose: bool) -> None:
    """
    Route the package's log records through rich.

    Only warnings are shown unless ``verbose`` is set.
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


# =============================================================================
# Interactive Prompts
# =============================================================================

def prompt_package_manager(candidates: tuple[str, ...]) -> PackageManagerKind:
    """
    Ask which package manager owns the addon when several lockfiles apply.

    Parameters
    ----------
    candidates : tuple[str, ...]
        Package managers whose lockfiles were found side by side.

    Returns
    -------
    PackageManagerKind
        The selected package manager.
    """
    choices = [
        questionary.Choice(title=kind, value=PackageManagerKind(kind))
        for kind in candidates
    ]

    result = questionary.select(
        "Several lockfiles were found. Which package manager owns this addon?",
        choices=choices,
    ).ask()

    if result is None:
        raise typer.Abort()

    return result


# =============================================================================
# Output
# =============================================================================

def _addon_kind(info: AddonInfo) -> str:
    if info.is_v1_addon:
        return "v1 addon"
    if info.is_ember:
        return "[yellow]Ember package, not an addon[/]"
    return "[yellow]not an Ember package[/]"


def show_analysis(info: AddonInfo) -> None:
    """Print what was resolved about the addon."""
    table = Table(title="Addon Analysis", show_header=False)
    table.add_column("Setting", style="cyan")
    table.add_column("Value", style="green")

    table.add_row("Name", info.name)
    table.add_row("Kind", _addon_kind(info))
    table.add_row("Language", "TypeScript" if info.is_ts else "JavaScript")
    table.add_row("Package manager", info.package_manager.value)
    table.add_row("Package manager root", str(info.package_manager_root))
    table.add_row("Git root", str(info.git_root))
    table.add_row(
        "Repository layout",
        "bigger monorepo" if info.is_bigger_monorepo else "single addon",
    )
    table.add_row("Directory", str(info.directory))
    table.add_row("Addon location", info.addon_location)
    table.add_row("Test app location", info.test_app_location)
    table.add_row("Test app name", info.test_app_name)

    console.print(table)
    console.print()

    phantoms = info.phantom_dependencies
    if phantoms:
        if info.options.ignore_new_dependencies:
            hint = "They will [bold]not[/] be added (--ignore-new-dependencies)."
        else:
            hint = "They will be added to the addon's dependencies."
        console.print(Panel(
            "\n".join(f"• {name}" for name in phantoms) + f"\n\n{hint}",
            title="[bold]Undeclared Imports[/]",
            border_style="yellow",
        ))
        console.print()


def show_plan(info: AddonInfo) -> None:
    """Print the migration plan."""
    steps = create_migration_plan(info)

    plan_table = Table(title="Migration Plan", show_header=True)
    plan_table.add_column("#", style="dim", width=3)
    plan_table.add_column("Type", style="cyan", width=12)
    plan_table.add_column("Step")
    plan_table.add_column("From → To", style="green")

    for i, step in enumerate(steps, 1):
        plan_table.add_row(
            str(i),
            step.migration_type.value.replace("_", " "),
            step.description,
            f"{step.source} → {step.target}",
        )

    console.print(plan_table)
    console.print()


# =============================================================================
# Resolution
# =============================================================================

def resolve_addon(options: MigrationOptions, *, yes: bool) -> AddonInfo:
    """
    Resolve the addon, asking for a package manager if that is ambiguous.

    The engine never guesses between lockfiles; when it reports candidates
    and prompting is allowed, the user's choice is passed back as a hint.
    """
    try:
        return AddonInfo.create(options)
    except PackageManagerError as e:
        if yes or not e.candidates or options.package_manager is not None:
            raise
        rprint(f"[yellow]Warning:[/] {e}")
        choice = prompt_package_manager(e.candidates)

    return AddonInfo.create(options.model_copy(update={"package_manager": choice}))


# =============================================================================
# Main Application Callback
# =============================================================================

@app.callback()
def main(
    version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            "-V",
            help="Show version and exit.",
            callback=version_callback,
            is_eager=True,
        ),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option(
            "--verbose",
            "-v",
            help="Show debug logging.",
            envvar=f"{ENV_PREFIX}VERBOSE",
        ),
    ] = False,
) -> None:
    """
    [bold]ember-addon-migrator[/] - move a v1 Ember addon to the v2 format.

    [bold]Quick Start:[/]

        ember-addon-migrator migrate --analysis-only
    """
    setup_logging(verbose)


# =============================================================================
# Migrate Command
# =============================================================================

@app.command()
def migrate(
    directory: Annotated[
        Path | None,
        typer.Option(
            "--directory", "-d",
            help="Package directory to migrate (defaults to the current directory)",
            file_okay=False,
            dir_okay=True,
            envvar=f"{ENV_PREFIX}DIRECTORY",
        ),
    ] = None,
    addon_location: Annotated[
        str | None,
        typer.Option(
            "--addon-location",
            help="Where the v2 addon goes, relative to the directory",
            envvar=f"{ENV_PREFIX}ADDON_LOCATION",
        ),
    ] = None,
    test_app_location: Annotated[
        str | None,
        typer.Option(
            "--test-app-location",
            help="Where the test app goes, relative to the directory",
            envvar=f"{ENV_PREFIX}TEST_APP_LOCATION",
        ),
    ] = None,
    test_app_name: Annotated[
        str | None,
        typer.Option(
            "--test-app-name",
            help="Package name for the test app",
            envvar=f"{ENV_PREFIX}TEST_APP_NAME",
        ),
    ] = None,
    reuse_existing_versions: Annotated[
        bool,
        typer.Option(
            "--reuse-existing-versions",
            help="Keep the dependency versions already declared",
            envvar=f"{ENV_PREFIX}REUSE_EXISTING_VERSIONS",
        ),
    ] = False,
    ignore_new_dependencies: Annotated[
        bool,
        typer.Option(
            "--ignore-new-dependencies",
            help="Do not declare dependencies discovered during migration",
            envvar=f"{ENV_PREFIX}IGNORE_NEW_DEPENDENCIES",
        ),
    ] = False,
    reuse_existing_configs: Annotated[
        bool,
        typer.Option(
            "--reuse-existing-configs",
            help="Keep the existing lint and format configs",
            envvar=f"{ENV_PREFIX}REUSE_EXISTING_CONFIGS",
        ),
    ] = False,
    analysis_only: Annotated[
        bool,
        typer.Option(
            "--analysis-only",
            help="Only print the analysis, skip the migration plan",
            envvar=f"{ENV_PREFIX}ANALYSIS_ONLY",
        ),
    ] = False,
    package_manager: Annotated[
        PackageManagerKind | None,
        typer.Option(
            "--package-manager",
            help="Package manager to use when several lockfiles are found",
            case_sensitive=False,
            envvar=f"{ENV_PREFIX}PACKAGE_MANAGER",
        ),
    ] = None,
    yes: Annotated[
        bool,
        typer.Option(
            "--yes", "-y",
            help="Never prompt",
        ),
    ] = False,
) -> None:
    """
    Analyze a v1 addon and plan its migration to the v2 format.

    [bold]Examples:[/]

        ember-addon-migrator migrate
        ember-addon-migrator migrate --analysis-only
        ember-addon-migrator migrate -d packages/ui --test-app-name ui-tests
    """
    try:
        options = MigrationOptions(
            reuse_existing_versions=reuse_existing_versions,
            ignore_new_dependencies=ignore_new_dependencies,
            reuse_existing_configs=reuse_existing_configs,
            analysis_only=analysis_only,
            addon_location=addon_location,
            test_app_location=test_app_location,
            test_app_name=test_app_name,
            directory=directory,
            package_manager=package_manager,
        )
    except ValueError as e:
        rprint(f"[red]Error:[/] {e}")
        raise typer.Exit(1)

    try:
        info = resolve_addon(options, yes=yes)
    except NothingToDoError as e:
        console.print(Panel(
            f"[green]{e}[/]",
            title="[bold]Nothing To Do[/]",
            border_style="green",
        ))
        return
    except MigratorError as e:
        rprint(f"[red]Error:[/] {e}")
        raise typer.Exit(1)

    with info:
        console.print()
        show_analysis(info)

        if not info.is_v1_addon:
            rprint(
                f"[red]Error:[/] {info.name} is not a v1 Ember addon "
                f"(expected 'ember-addon' in keywords and Ember metadata)."
            )
            raise typer.Exit(1)

        if options.analysis_only:
            console.print("[dim]Run without --analysis-only to see the migration plan[/]")
            return

        show_plan(info)
