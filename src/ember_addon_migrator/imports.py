"""
ember_addon_migrator.imports - Static Import Analysis
=====================================================

Collects the packages an addon's source code imports, so dependencies that
are used but never declared (phantom dependencies) can be reported before
the addon moves to the stricter v2 layout.

The analysis is textual. It recognises:

- ``import x from 'pkg'``, ``import { a, b } from 'pkg'`` (also multi-line)
- ``import type { T } from 'pkg'``
- ``import 'pkg'`` (side-effect imports)
- ``export { a } from 'pkg'`` and ``export * from 'pkg'``
- ``import('pkg')`` (dynamic imports)

Relative specifiers (``./x``, ``../x``), absolute paths, and protocol
specifiers (``node:fs``) are ignored. Every other specifier is reduced to
its package name: ``@scope/pkg/sub/path`` becomes ``@scope/pkg`` and
``pkg/sub`` becomes ``pkg``.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path


logger = logging.getLogger(__name__)

# v1 addon source directories
SOURCE_DIRECTORIES = ("addon", "addon-test-support", "app", "src")

SOURCE_SUFFIXES = {".js", ".mjs", ".ts", ".gjs", ".gts"}

EXCLUDED_DIRECTORIES = {"node_modules", "dist", "declarations", "tmp"}

_IMPORT_PATTERNS = (
    re.compile(
        r"""^\s*import\s+(?:[\w*{}\s,$]+?\s+from\s+)?["']([^"'\n]+)["']""",
        re.MULTILINE,
    ),
    re.compile(
        r"""^\s*export\s+(?:type\s+)?(?:\*(?:\s+as\s+\w+)?|\{[^}]*\})\s*from\s+["']([^"'\n]+)["']""",
        re.MULTILINE,
    ),
    re.compile(r"""\bimport\(\s*["']([^"'\n]+)["']\s*\)"""),
)


def package_name_of(specifier: str) -> str | None:
    """
    Reduce an import specifier to the name of the package providing it.

    Returns
    -------
    str | None
        The package name, or None for relative, absolute, and protocol
        specifiers.

    Examples
    --------
    >>> package_name_of("@ember/test-helpers/setup")
    '@ember/test-helpers'
    >>> package_name_of("lodash-es/debounce")
    'lodash-es'
    >>> package_name_of("./utils") is None
    True
    """
    if not specifier or specifier.startswith((".", "/")) or ":" in specifier:
        return None

    parts = specifier.split("/")
    if specifier.startswith("@"):
        if len(parts) < 2 or not parts[1]:
            return None
        return "/".join(parts[:2])
    return parts[0]


def find_specifiers(source: str) -> set[str]:
    """Return every import specifier found in a JavaScript/TypeScript source."""
    specifiers: set[str] = set()
    for pattern in _IMPORT_PATTERNS:
        specifiers.update(match.group(1) for match in pattern.finditer(source))
    return specifiers


def _source_files(directory: Path) -> list[Path]:
    files = []
    for name in SOURCE_DIRECTORIES:
        root = directory / name
        if not root.is_dir():
            continue
        for path in root.rglob("*"):
            if path.suffix not in SOURCE_SUFFIXES or not path.is_file():
                continue
            relative_parts = path.relative_to(directory).parts
            if any(part in EXCLUDED_DIRECTORIES for part in relative_parts):
                continue
            files.append(path)
    return sorted(files)


def analyze_imports(directory: Path) -> frozenset[str]:
    """
    Collect the distinct package names imported by a package's source files.

    Parameters
    ----------
    directory : Path
        Package directory containing ``addon/``, ``app/`` and friends.

    Returns
    -------
    frozenset[str]
        Imported package names. Empty if there are no sources or no imports.
    """
    names: set[str] = set()

    for path in _source_files(directory):
        try:
            source = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError):
            logger.debug("Skipping unreadable file %s", path)
            continue

        for specifier in find_specifiers(source):
            name = package_name_of(specifier)
            if name is not None:
                names.add(name)

    logger.debug("Found %d imported packages under %s", len(names), directory)
    return frozenset(names)
