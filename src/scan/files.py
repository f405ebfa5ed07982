"""File scanning utilities for repograph."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, cast

from gitignore_parser import parse_gitignore  # type: ignore[import-untyped]

from tree.models import FileNode
from utils import to_posix

if TYPE_CHECKING:
    from collections.abc import Callable, Collection, Iterable
    from pathlib import Path

    from rules.config import ScanConfig

logger = logging.getLogger(__name__)

DEFAULT_IGNORE_NAMES = frozenset({"node_modules", "dist", "build"})
DEFAULT_SOURCE_EXTENSIONS = (".ts", ".tsx", ".js", ".jsx")


def _is_within_root(path: Path, root: Path) -> bool:
    """Return True when the resolved path stays within the resolved root."""
    try:
        root_resolved = root.resolve()
        path_resolved = path.resolve()
    except OSError:
        return False

    try:
        path_resolved.relative_to(root_resolved)
    except ValueError:
        return False

    return True


def _is_ignored_name(name: str, ignore_names: Collection[str]) -> bool:
    return name.startswith(".") or name in ignore_names


def _build_gitignore_matcher(
    root: Path,
    *,
    respect_gitignore: bool,
) -> Callable[[str], bool] | None:
    if not respect_gitignore:
        return None

    gitignore_path = root / ".gitignore"
    if not gitignore_path.is_file() or gitignore_path.is_symlink():
        return None

    return cast("Callable[[str], bool]", parse_gitignore(gitignore_path))


def _check_root(root: Path) -> None:
    if not root.exists():
        msg = f"Repository root does not exist: {root}"
        raise FileNotFoundError(msg)
    if not root.is_dir():
        msg = f"Repository root is not a directory: {root}"
        raise NotADirectoryError(msg)


def _sort_key(node: FileNode) -> tuple[int, str, str]:
    return (0 if node.type == "dir" else 1, node.name.lower(), node.name)


def _list_entries(
    directory: Path,
    root: Path,
    ignore_names: Collection[str],
    gitignore_matches: Callable[[str], bool] | None,
) -> list[Path]:
    try:
        entries = list(directory.iterdir())
    except OSError as exc:
        logger.debug("Skipping unreadable directory %s: %s", directory, exc)
        return []

    kept: list[Path] = []
    for entry in entries:
        if _is_ignored_name(entry.name, ignore_names):
            continue
        if entry.is_symlink() or not _is_within_root(entry, root):
            continue
        if gitignore_matches is not None and gitignore_matches(str(entry)):
            continue
        kept.append(entry)
    return kept


def scan_file_tree(
    root: Path,
    *,
    config: ScanConfig | None = None,
) -> list[FileNode]:
    """Scan a local repository checkout into an ordered file tree.

    Hidden entries, ignored names (``node_modules``, ``dist``, ``build`` by
    default), symlinks and ``.gitignore`` matches are skipped. At every level
    directories come before files, alphabetical within each type.

    Args:
        root: Local repository root
        config: Optional scan settings

    Returns:
        Root-level FileNode entries with nested children.

    Raises:
        FileNotFoundError: If root does not exist.
        NotADirectoryError: If root is not a directory.
    """
    _check_root(root)

    ignore_names = (
        frozenset(config.ignore_names) if config is not None else DEFAULT_IGNORE_NAMES
    )
    respect_gitignore = config.respect_gitignore if config is not None else True
    gitignore_matches = _build_gitignore_matcher(
        root, respect_gitignore=respect_gitignore
    )

    # Children are attached after the walk; nodes are rebuilt bottom-up so that
    # each FileNode is constructed once with its final children.
    children_of: dict[str, list[Path]] = {}
    order: list[tuple[Path, str]] = []
    worklist: list[tuple[Path, str]] = [(root, "")]
    while worklist:
        directory, rel_dir = worklist.pop()
        entries = _list_entries(directory, root, ignore_names, gitignore_matches)
        children_of[rel_dir] = entries
        order.append((directory, rel_dir))
        for entry in entries:
            if entry.is_dir():
                worklist.append((entry, to_posix(entry.relative_to(root))))

    built: dict[str, list[FileNode]] = {}
    for _directory, rel_dir in reversed(order):
        nodes: list[FileNode] = []
        for entry in children_of[rel_dir]:
            rel_path = to_posix(entry.relative_to(root))
            if entry.is_dir():
                nodes.append(
                    FileNode(
                        name=entry.name,
                        path=rel_path,
                        type="dir",
                        children=built.pop(rel_path, []),
                    )
                )
            else:
                nodes.append(FileNode(name=entry.name, path=rel_path, type="file"))
        nodes.sort(key=_sort_key)
        built[rel_dir] = nodes

    return built.get("", [])


def find_source_files(
    root: Path,
    *,
    extensions: Iterable[str] = DEFAULT_SOURCE_EXTENSIONS,
    ignore_names: Collection[str] = DEFAULT_IGNORE_NAMES,
) -> list[str]:
    """Enumerate source files under root as sorted relative POSIX paths.

    Hidden dot-directories, ``node_modules`` and build output directories are
    skipped; only files whose suffix is in ``extensions`` are returned.
    """
    _check_root(root)
    suffixes = tuple(extensions)

    found: list[str] = []
    worklist = [root]
    while worklist:
        directory = worklist.pop()
        try:
            entries = list(directory.iterdir())
        except OSError as exc:
            logger.debug("Skipping unreadable directory %s: %s", directory, exc)
            continue
        for entry in entries:
            if _is_ignored_name(entry.name, ignore_names) or entry.is_symlink():
                continue
            if entry.is_dir():
                worklist.append(entry)
            elif entry.name.endswith(suffixes):
                found.append(to_posix(entry.relative_to(root)))

    found.sort()
    return found


__all__ = [
    "DEFAULT_IGNORE_NAMES",
    "DEFAULT_SOURCE_EXTENSIONS",
    "find_source_files",
    "scan_file_tree",
]
