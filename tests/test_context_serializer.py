from __future__ import annotations

from context.serializer import (
    TRUNCATION_MARKER,
    flatten_tree,
    format_metric_tags,
    serialize_graph,
)
from graph.models import GraphData, GraphEdge, GraphNode, MetricData
from tree.models import FileNode


def _graph() -> GraphData:
    return GraphData(
        nodes=[
            GraphNode(
                id="src",
                label="src",
                type="dir",
                metrics=MetricData(complexity=1.0, coupling=1.0, size=1.0),
            ),
            GraphNode(
                id="src/lib",
                label="lib",
                type="dir",
                parent_id="src",
                metrics=MetricData(complexity=0.5, coupling=0.333, size=0.25),
            ),
            GraphNode(
                id="src/lib/git.ts",
                label="git.ts",
                type="file",
                parent_id="src/lib",
            ),
            GraphNode(id="README.md", label="README.md", type="file"),
        ],
        edges=[
            GraphEdge(id="src->src/lib", source="src", target="src/lib"),
            GraphEdge.model_validate(
                {
                    "id": "src/lib->src/lib/git.ts",
                    "source": "src/lib",
                    "target": "src/lib/git.ts",
                    "data": {"isViolation": True, "ruleDescription": "no git"},
                }
            ),
            GraphEdge.model_validate(
                {
                    "id": "src->gone.ts",
                    "source": "src",
                    "target": "gone.ts",
                    "data": {"isViolation": True, "ruleDescription": "dangling"},
                }
            ),
        ],
    )


def test_format_metric_tags_uses_two_decimals() -> None:
    tags = format_metric_tags(MetricData(complexity=0.126, coupling=0, size=1))

    assert tags == "[Complexity: 0.13][Coupling: 0.00][Size: 1.00]"


def test_serialize_graph_indents_by_depth_and_lists_violations() -> None:
    text = serialize_graph(_graph())

    assert text.splitlines() == [
        "- src (dir) [Complexity: 1.00][Coupling: 1.00][Size: 1.00]",
        "  - lib (dir) [Complexity: 0.50][Coupling: 0.33][Size: 0.25]",
        "    - git.ts (file)",
        "- README.md (file)",
        "! src/lib -> src/lib/git.ts: no git",
    ]


def test_serialize_graph_truncates_after_max_nodes() -> None:
    text = serialize_graph(_graph(), max_nodes=2)

    assert text.splitlines() == [
        "- src (dir) [Complexity: 1.00][Coupling: 1.00][Size: 1.00]",
        "  - lib (dir) [Complexity: 0.50][Coupling: 0.33][Size: 0.25]",
        TRUNCATION_MARKER,
    ]


def test_serialize_graph_exact_limit_is_not_truncated() -> None:
    text = serialize_graph(_graph(), max_nodes=4)

    assert TRUNCATION_MARKER not in text


def test_serialize_graph_default_limit_is_300_nodes() -> None:
    nodes = [GraphNode(id=f"f{i}.ts", label=f"f{i}.ts", type="file") for i in range(301)]

    lines = serialize_graph(GraphData(nodes=nodes)).splitlines()

    assert len(lines) == 301
    assert lines[-1] == "... (TRUNCATED)"
    assert lines[-2] == "- f299.ts (file)"


def test_serialize_graph_treats_missing_parent_as_root() -> None:
    graph = GraphData(
        nodes=[
            GraphNode(id="src/a.ts", label="a.ts", type="file", parent_id="src"),
        ]
    )

    assert serialize_graph(graph) == "- a.ts (file)\n"


def test_serialize_empty_graph() -> None:
    assert serialize_graph(GraphData()) == ""


def test_flatten_tree_renders_names_and_types() -> None:
    tree = [
        FileNode(
            name="src",
            path="src",
            type="dir",
            children=[FileNode(name="a.ts", path="src/a.ts", type="file")],
        ),
        FileNode(name="README.md", path="README.md", type="file"),
    ]

    assert flatten_tree(tree) == "- src (dir)\n  - a.ts (file)\n- README.md (file)\n"
