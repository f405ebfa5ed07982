"""Shared path utilities for repograph."""

from __future__ import annotations

from pathlib import PurePath


def to_posix(path: str | PurePath) -> str:
    """Normalize a relative path to forward-slash form.

    Examples:
        >>> to_posix("src\\\\app\\\\page.tsx")
        'src/app/page.tsx'
        >>> to_posix("./src//lib/")
        'src/lib'
    """
    path_str = path.as_posix() if isinstance(path, PurePath) else str(path)
    parts = [part for part in path_str.replace("\\", "/").split("/") if part]
    if parts and parts[0] == ".":
        parts = parts[1:]
    return "/".join(parts)


def parent_path(path: str) -> str | None:
    """Return the parent path of a relative path, or None for a root entry.

    Examples:
        >>> parent_path("src/lib/git.ts")
        'src/lib'
        >>> parent_path("README.md") is None
        True
    """
    head, sep, _ = path.rpartition("/")
    return head if sep else None


def is_descendant(path: str, ancestor: str) -> bool:
    """Return True when path lies strictly below ancestor."""
    return path.startswith(ancestor + "/")


def edge_id(source: str, target: str) -> str:
    """Build the canonical edge identifier."""
    return f"{source}->{target}"
