"""Graph algorithms for repograph."""

from __future__ import annotations

from typing import TYPE_CHECKING

from graph.models import GraphData, GraphEdge

if TYPE_CHECKING:
    from collections.abc import Collection, Iterable


def drop_dangling_edges(
    edges: Iterable[GraphEdge],
    node_ids: Collection[str],
) -> list[GraphEdge]:
    """Keep only edges whose source and target are both known node ids."""
    return [
        edge for edge in edges if edge.source in node_ids and edge.target in node_ids
    ]


def dedupe_edges(edges: Iterable[GraphEdge]) -> list[GraphEdge]:
    """Drop repeated edge ids, keeping the first occurrence and its position."""
    seen: set[str] = set()
    unique: list[GraphEdge] = []
    for edge in edges:
        if edge.id in seen:
            continue
        seen.add(edge.id)
        unique.append(edge)
    return unique


def merge_graphs(base: GraphData, extra: GraphData) -> GraphData:
    """Append the edges of ``extra`` to ``base`` over base's node set.

    Node order and edge order of ``base`` are preserved; extra edges follow,
    de-duplicated by id and restricted to base's node ids.
    """
    node_ids = base.node_ids()
    edges = dedupe_edges(
        [*base.edges, *drop_dangling_edges(extra.edges, node_ids)]
    )
    return GraphData(nodes=list(base.nodes), edges=edges)


def build_adjacency(edges: Iterable[GraphEdge]) -> dict[str, set[str]]:
    """Build a source -> targets adjacency map from edges."""
    graph: dict[str, set[str]] = {}
    for edge in edges:
        graph.setdefault(edge.source, set()).add(edge.target)
        graph.setdefault(edge.target, set())
    return graph


class _TarjanState:
    """Mutable state container for Tarjan's SCC algorithm."""

    def __init__(self) -> None:
        self.index = 0
        self.indices: dict[str, int] = {}
        self.low_link: dict[str, int] = {}
        self.on_stack: set[str] = set()
        self.stack: list[str] = []
        self.sccs: list[list[str]] = []

    def visit(self, node: str) -> None:
        self.indices[node] = self.index
        self.low_link[node] = self.index
        self.index += 1
        self.stack.append(node)
        self.on_stack.add(node)


def _extract_scc(state: _TarjanState, root: str) -> list[str]:
    """Extract a strongly connected component from the stack."""
    scc: list[str] = []
    while state.stack:
        w = state.stack.pop()
        state.on_stack.remove(w)
        scc.append(w)
        if w == root:
            break
    if root not in scc:
        msg = (
            f"Tarjan algorithm invariant violated: root node {root!r} "
            "not found in stack during SCC extraction."
        )
        raise RuntimeError(msg)
    return scc


def _strongconnect(start: str, graph: dict[str, set[str]], state: _TarjanState) -> None:
    """Process a node in Tarjan's algorithm without native recursion."""
    state.visit(start)
    work: list[tuple[str, list[str]]] = [(start, sorted(graph.get(start, set())))]

    while work:
        node, pending = work[-1]
        if pending:
            neighbor = pending.pop(0)
            if neighbor not in state.indices:
                state.visit(neighbor)
                work.append((neighbor, sorted(graph.get(neighbor, set()))))
            elif neighbor in state.on_stack:
                state.low_link[node] = min(
                    state.low_link[node], state.indices[neighbor]
                )
            continue

        work.pop()
        if work:
            parent = work[-1][0]
            state.low_link[parent] = min(state.low_link[parent], state.low_link[node])

        if state.low_link[node] == state.indices[node]:
            scc = _extract_scc(state, node)
            if len(scc) > 1 or node in graph.get(node, set()):
                state.sccs.append(scc)


def find_cycles(graph: dict[str, set[str]]) -> list[list[str]]:
    """Find cycles in a directed graph using Tarjan's algorithm.

    Args:
        graph: Adjacency map of node id -> target node ids

    Returns:
        List of cycles, each sorted, ordered lexicographically.
    """
    state = _TarjanState()

    for node in sorted(graph):
        if node not in state.indices:
            _strongconnect(node, graph, state)

    return sorted(sorted(scc) for scc in state.sccs)


__all__ = [
    "build_adjacency",
    "dedupe_edges",
    "drop_dangling_edges",
    "find_cycles",
    "merge_graphs",
]
