"""Import dependency graph from relative imports in source files."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING

import anyio

from graph.algos import drop_dangling_edges
from graph.models import GraphData, GraphEdge, GraphNode
from parse.imports import extract_import_specifiers, resolve_import
from scan.files import (
    DEFAULT_IGNORE_NAMES,
    DEFAULT_SOURCE_EXTENSIONS,
    find_source_files,
)
from tree.models import iter_tree
from utils import edge_id, parent_path

if TYPE_CHECKING:
    from collections.abc import Collection, Iterable, Sequence

    from tree.models import FileNode

logger = logging.getLogger(__name__)

DEFAULT_MAX_CONCURRENT_READS = 32


async def _read_text(path: Path) -> str | None:
    try:
        return await anyio.Path(path).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        logger.debug("Skipping imports of unreadable file %s: %s", path, exc)
        return None


async def _read_all(
    root: Path,
    files: Sequence[str],
    max_concurrent_reads: int,
) -> dict[str, str | None]:
    contents: dict[str, str | None] = {}
    limiter = anyio.CapacityLimiter(max_concurrent_reads)

    async def _read_one(rel_path: str) -> None:
        async with limiter:
            contents[rel_path] = await _read_text(root / rel_path)

    async with anyio.create_task_group() as tg:
        for rel_path in files:
            tg.start_soon(_read_one, rel_path)

    return contents


def _edges_for_file(
    source_id: str,
    text: str,
    known_files: Collection[str],
) -> list[GraphEdge]:
    edges: list[GraphEdge] = []
    for specifier in extract_import_specifiers(text):
        target_id = resolve_import(source_id, specifier, known_files)
        if target_id is None:
            logger.debug("Unresolved import %r in %s", specifier, source_id)
            continue
        if target_id == source_id:
            continue
        edges.append(
            GraphEdge(
                id=edge_id(source_id, target_id),
                source=source_id,
                target=target_id,
            )
        )
    return edges


async def resolve_dependencies(
    root_dir: Path | str,
    tree: Sequence[FileNode] | None = None,
    *,
    extensions: Iterable[str] = DEFAULT_SOURCE_EXTENSIONS,
    ignore_names: Collection[str] = DEFAULT_IGNORE_NAMES,
    max_concurrent_reads: int = DEFAULT_MAX_CONCURRENT_READS,
) -> GraphData:
    """Build a file-to-file graph from relative import statements.

    Every enumerated source file becomes a node. Each relative import that
    resolves to another enumerated file becomes an edge; unresolved imports
    are dropped without error. Edges are keyed by id, so repeated imports of
    the same target produce a single edge.

    When a tree is supplied, node parents are taken from it and edges whose
    endpoints are not files of that tree are dropped.
    """
    root = Path(root_dir)
    files = find_source_files(root, extensions=extensions, ignore_names=ignore_names)
    known_files = set(files)

    tree_ids: set[str] | None = None
    if tree is not None:
        tree_ids = {node.path for node, _parent in iter_tree(tree)}

    nodes = [
        GraphNode(
            id=rel_path,
            label=rel_path.rpartition("/")[2],
            type="file",
            parent_id=_tree_parent(rel_path, tree_ids),
        )
        for rel_path in files
    ]

    contents = await _read_all(root, files, max_concurrent_reads)

    edges_by_id: dict[str, GraphEdge] = {}
    for rel_path in files:
        text = contents.get(rel_path)
        if text is None:
            continue
        for edge in _edges_for_file(rel_path, text, known_files):
            edges_by_id[edge.id] = edge

    edges = list(edges_by_id.values())
    if tree_ids is not None:
        edges = drop_dangling_edges(edges, tree_ids)

    return GraphData(nodes=nodes, edges=edges)


def _tree_parent(rel_path: str, tree_ids: set[str] | None) -> str | None:
    parent = parent_path(rel_path)
    if parent is None or tree_ids is None or parent not in tree_ids:
        return None
    return parent


__all__ = ["resolve_dependencies"]
