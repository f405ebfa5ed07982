"""Text rendering of graphs and file trees for chat-model context.

The rendered text is lossy: once ``max_nodes`` node lines have been written
the output ends with a truncation marker and the remaining nodes are gone.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from tree.models import iter_tree

if TYPE_CHECKING:
    from collections.abc import Sequence

    from graph.models import GraphData, GraphNode, MetricData
    from tree.models import FileNode

DEFAULT_MAX_NODES = 300
TRUNCATION_MARKER = "... (TRUNCATED)"
INDENT = "  "


def format_metric_tags(metrics: MetricData) -> str:
    return (
        f"[Complexity: {metrics.complexity:.2f}]"
        f"[Coupling: {metrics.coupling:.2f}]"
        f"[Size: {metrics.size:.2f}]"
    )


def _depths(nodes: Sequence[GraphNode]) -> dict[str, int]:
    parents = {node.id: node.parent_id for node in nodes}
    depths: dict[str, int] = {}
    for node in nodes:
        chain: list[str] = []
        current: str | None = node.id
        while current is not None and current not in depths:
            chain.append(current)
            parent = parents.get(current)
            # Parents outside the node set (filtered views) start a new root.
            current = parent if parent in parents and parent not in chain else None
        base = depths[current] + 1 if current is not None else 0
        for offset, node_id in enumerate(reversed(chain)):
            depths[node_id] = base + offset
    return depths


def serialize_graph(graph: GraphData, *, max_nodes: int = DEFAULT_MAX_NODES) -> str:
    """Render a graph as an indented tree with metric tags.

    One line per node in graph order, indented by parent depth. Violating
    edges between known nodes are listed after the tree. Output is cut
    after ``max_nodes`` node lines with a truncation marker.
    """
    depths = _depths(graph.nodes)
    lines: list[str] = []
    for count, node in enumerate(graph.nodes):
        if count >= max_nodes:
            lines.append(TRUNCATION_MARKER)
            return "\n".join(lines) + "\n"
        line = f"{INDENT * depths[node.id]}- {node.label} ({node.type})"
        if node.metrics is not None:
            line = f"{line} {format_metric_tags(node.metrics)}"
        lines.append(line)

    node_ids = graph.node_ids()
    for edge in graph.edges:
        if not edge.is_violation or edge.data is None:
            continue
        if edge.source not in node_ids or edge.target not in node_ids:
            continue
        lines.append(
            f"! {edge.source} -> {edge.target}: {edge.data.rule_description or ''}"
        )

    return "\n".join(lines) + "\n" if lines else ""


def flatten_tree(tree: Sequence[FileNode]) -> str:
    """Render a bare file tree as ``- <name> (<type>)`` lines."""
    depth: dict[str, int] = {}
    lines: list[str] = []
    for node, parent in iter_tree(tree):
        level = depth[parent] + 1 if parent is not None else 0
        depth[node.path] = level
        lines.append(f"{INDENT * level}- {node.name} ({node.type})")
    return "\n".join(lines) + "\n" if lines else ""


__all__ = [
    "DEFAULT_MAX_NODES",
    "TRUNCATION_MARKER",
    "flatten_tree",
    "format_metric_tags",
    "serialize_graph",
]
