from __future__ import annotations

from graph.algos import (
    build_adjacency,
    dedupe_edges,
    drop_dangling_edges,
    find_cycles,
    merge_graphs,
)
from graph.models import GraphData, GraphEdge, GraphNode


def _edge(source: str, target: str) -> GraphEdge:
    return GraphEdge(id=f"{source}->{target}", source=source, target=target)


def _node(node_id: str) -> GraphNode:
    return GraphNode(id=node_id, label=node_id, type="file")


def test_drop_dangling_edges_requires_both_endpoints() -> None:
    edges = [_edge("a", "b"), _edge("a", "x"), _edge("x", "b")]

    assert drop_dangling_edges(edges, {"a", "b"}) == [edges[0]]


def test_dedupe_edges_keeps_first_occurrence() -> None:
    first = _edge("a", "b")
    edges = [first, _edge("b", "c"), _edge("a", "b")]

    deduped = dedupe_edges(edges)

    assert [edge.id for edge in deduped] == ["a->b", "b->c"]
    assert deduped[0] is first


def test_merge_graphs_appends_known_unique_edges() -> None:
    base = GraphData(nodes=[_node("a"), _node("b")], edges=[_edge("a", "b")])
    extra = GraphData(
        nodes=[_node("a"), _node("b"), _node("c")],
        edges=[_edge("a", "b"), _edge("b", "a"), _edge("b", "c")],
    )

    merged = merge_graphs(base, extra)

    assert [node.id for node in merged.nodes] == ["a", "b"]
    assert [edge.id for edge in merged.edges] == ["a->b", "b->a"]


def test_find_cycles_reports_sorted_components_and_self_loops() -> None:
    graph = build_adjacency(
        [
            _edge("c", "a"),
            _edge("a", "b"),
            _edge("b", "c"),
            _edge("d", "d"),
            _edge("d", "e"),
        ]
    )

    assert find_cycles(graph) == [["a", "b", "c"], ["d"]]


def test_find_cycles_acyclic_graph() -> None:
    assert find_cycles(build_adjacency([_edge("a", "b"), _edge("b", "c")])) == []


def test_find_cycles_long_chain_does_not_recurse() -> None:
    count = 5000
    edges = [_edge(f"n{i:05d}", f"n{i + 1:05d}") for i in range(count)]
    edges.append(_edge(f"n{count:05d}", "n00000"))

    cycles = find_cycles(build_adjacency(edges))

    assert len(cycles) == 1
    assert len(cycles[0]) == count + 1
