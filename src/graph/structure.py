"""Structure graph construction from a scanned file tree."""

from __future__ import annotations

from typing import TYPE_CHECKING

from graph.models import GraphData, GraphEdge, GraphNode
from tree.models import TreeError, iter_tree
from utils import edge_id

if TYPE_CHECKING:
    from collections.abc import Sequence

    from tree.models import FileNode


def build_graph(tree: Sequence[FileNode]) -> GraphData:
    """Flatten a file tree into containment nodes and edges.

    Nodes are emitted depth-first in the scanner's order, one per FileNode.
    Every non-root node gets one edge from its parent directory.

    Args:
        tree: Root-level FileNode entries

    Returns:
        GraphData with one node per tree entry and one containment edge per
        non-root entry.

    Raises:
        TreeError: If tree is None.
    """
    if tree is None:
        msg = "file tree is required"
        raise TreeError(msg)

    nodes: list[GraphNode] = []
    edges: list[GraphEdge] = []

    for node, parent in iter_tree(tree):
        nodes.append(
            GraphNode(
                id=node.path,
                label=node.name,
                type="dir" if node.type == "dir" else "file",
                parent_id=parent,
            )
        )
        if parent is not None:
            edges.append(
                GraphEdge(
                    id=edge_id(parent, node.path),
                    source=parent,
                    target=node.path,
                )
            )

    return GraphData(nodes=nodes, edges=edges)


__all__ = ["build_graph"]
