"""Line-oriented import scanning for JavaScript/TypeScript sources.

This is deliberately not a parser: only static ``import ... from "<path>"``
statements are recognised, and only relative specifiers are resolved.
"""

from __future__ import annotations

import posixpath
import re
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Container

IMPORT_FROM_RE = re.compile(r"""\bimport\s+.*?\s+from\s+(['"])(.*?)\1""")

RESOLUTION_SUFFIXES = ("", ".ts", ".tsx", ".js", ".jsx", "/index.ts", "/index.tsx")


def extract_import_specifiers(text: str) -> list[str]:
    """Return import specifiers in order of appearance.

    Examples:
        >>> extract_import_specifiers('import { a } from "./a";\\nimport b from \\'b\\';')
        ['./a', 'b']
    """
    specifiers: list[str] = []
    for line in text.splitlines():
        specifiers.extend(match.group(2) for match in IMPORT_FROM_RE.finditer(line))
    return specifiers


def is_relative_specifier(specifier: str) -> bool:
    return specifier.startswith(".")


def resolve_import(
    source_path: str,
    specifier: str,
    known_files: Container[str],
) -> str | None:
    """Resolve a relative import specifier against the known file set.

    Args:
        source_path: Relative path of the importing file (e.g., "src/app/page.tsx")
        specifier: Import specifier as written (e.g., "../lib/git")
        known_files: Relative paths of all enumerated source files

    Returns:
        The first candidate in ``RESOLUTION_SUFFIXES`` order that is a known
        file, or None when the specifier is not relative, escapes the
        repository root, or cannot be resolved.

    Examples:
        >>> resolve_import("src/app/page.tsx", "../lib/git", {"src/lib/git.ts"})
        'src/lib/git.ts'
        >>> resolve_import("src/app/page.tsx", "react", {"react.ts"}) is None
        True
    """
    if not is_relative_specifier(specifier):
        return None

    base_dir = posixpath.dirname(source_path)
    joined = posixpath.join(base_dir, specifier) if base_dir else specifier
    candidate = posixpath.normpath(joined)
    if candidate == ".." or candidate.startswith("../"):
        return None
    if candidate == ".":
        candidate = ""

    for suffix in RESOLUTION_SUFFIXES:
        target = (candidate + suffix).lstrip("/")
        if target and target in known_files:
            return target
    return None


__all__ = [
    "IMPORT_FROM_RE",
    "RESOLUTION_SUFFIXES",
    "extract_import_specifiers",
    "is_relative_specifier",
    "resolve_import",
]
