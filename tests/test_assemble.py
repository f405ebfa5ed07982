from __future__ import annotations

import shutil
from pathlib import Path

import pytest

from graph.assemble import assemble, assemble_sync, summarize
from graph.models import GraphData, GraphEdge, GraphNode, MetricData
from graph.structure import build_graph
from rules.config import load_config
from rules.models import ArchitectureRule
from scan.files import scan_file_tree
from tree.models import FileNode, TreeError

FIXTURE_REPO = Path(__file__).parent / "fixtures" / "mini_repo"


@pytest.fixture
def mini_repo(tmp_path: Path) -> Path:
    root = tmp_path / "repo"
    shutil.copytree(FIXTURE_REPO, root)
    return root


def _deny(source: str, target: str, description: str = "") -> ArchitectureRule:
    return ArchitectureRule(
        source_pattern=source,
        target_pattern=target,
        rule_type="deny",
        description=description,
    )


@pytest.mark.anyio
async def test_assemble_attaches_metrics_and_keeps_base_order(mini_repo: Path) -> None:
    tree = scan_file_tree(mini_repo)
    base = build_graph(tree)

    graph = await assemble(mini_repo, tree)

    assert [node.id for node in graph.nodes] == [node.id for node in base.nodes]
    assert [edge.id for edge in graph.edges] == [edge.id for edge in base.edges]
    assert all(node.metrics is not None for node in graph.nodes)
    assert all(edge.data is None for edge in graph.edges)


@pytest.mark.anyio
async def test_assemble_flags_containment_edges_matching_deny_rules(
    mini_repo: Path,
) -> None:
    tree = scan_file_tree(mini_repo)
    rules = [_deny("src", "src/ui", "no ui under src")]

    graph = await assemble(mini_repo, tree, rules)

    flagged = [edge for edge in graph.edges if edge.is_violation]
    assert [edge.id for edge in flagged] == ["src->src/ui"]
    assert flagged[0].data is not None
    assert flagged[0].data.rule_description == "no ui under src"
    assert sum(1 for edge in graph.edges if edge.data is not None) == 1


@pytest.mark.anyio
async def test_assemble_merges_dependency_edges_after_containment(
    mini_repo: Path,
) -> None:
    tree = scan_file_tree(mini_repo)
    base = build_graph(tree)

    graph = await assemble(
        mini_repo,
        tree,
        [_deny("src/ui/*", "src/lib/*")],
        include_dependencies=True,
    )

    edge_ids = [edge.id for edge in graph.edges]
    assert edge_ids[: len(base.edges)] == [edge.id for edge in base.edges]
    assert edge_ids[len(base.edges) :] == [
        "src/app/page.tsx->src/ui/index.tsx",
        "src/lib/files.ts->src/lib/git.ts",
        "src/ui/index.tsx->src/lib/files.ts",
    ]
    violation = next(edge for edge in graph.edges if edge.is_violation)
    assert violation.id == "src/ui/index.tsx->src/lib/files.ts"
    assert violation.data is not None
    assert violation.data.rule_description == "Violation: src/ui/* -> src/lib/*"


@pytest.mark.anyio
async def test_assemble_directory_metrics_aggregate_files(mini_repo: Path) -> None:
    graph = await assemble(mini_repo, scan_file_tree(mini_repo))

    metrics = {node.id: node.metrics for node in graph.nodes}
    lib = metrics["src/lib"]
    git = metrics["src/lib/git.ts"]
    files = metrics["src/lib/files.ts"]
    assert lib is not None and git is not None and files is not None
    assert lib.raw_loc == git.raw_loc + files.raw_loc
    assert lib.raw_size == git.raw_size + files.raw_size


@pytest.mark.anyio
async def test_assemble_rejects_missing_tree(tmp_path: Path) -> None:
    with pytest.raises(TreeError):
        await assemble(tmp_path, None)  # type: ignore[arg-type]


@pytest.mark.anyio
async def test_assemble_rejects_child_outside_parent_path(tmp_path: Path) -> None:
    tree = [
        FileNode(
            name="src",
            path="src",
            type="dir",
            children=[FileNode(name="a.ts", path="lib/a.ts", type="file")],
        )
    ]

    with pytest.raises(TreeError):
        await assemble(tmp_path, tree)


@pytest.mark.anyio
async def test_assemble_empty_tree_is_valid(tmp_path: Path) -> None:
    graph = await assemble(tmp_path, [])

    assert graph == GraphData()


def test_assemble_sync_uses_config_rules(mini_repo: Path) -> None:
    config = load_config(mini_repo)
    tree = scan_file_tree(mini_repo, config=config.scan)

    graph = assemble_sync(
        mini_repo,
        tree,
        config.guardrails,
        include_dependencies=config.include_dependencies,
        config=config,
    )

    flagged = [edge.id for edge in graph.edges if edge.is_violation]
    assert flagged == ["src/ui/index.tsx->src/lib/files.ts"]


def test_summarize_counts_violations_cycles_and_coupling() -> None:
    nodes = [
        GraphNode(
            id="src",
            label="src",
            type="dir",
            metrics=MetricData(coupling=1.0),
        ),
        GraphNode(
            id="src/a.ts",
            label="a.ts",
            type="file",
            parent_id="src",
            metrics=MetricData(coupling=0.75),
        ),
        GraphNode(
            id="src/b.ts",
            label="b.ts",
            type="file",
            parent_id="src",
            metrics=MetricData(coupling=0.75),
        ),
    ]
    edges = [
        GraphEdge(id="src->src/a.ts", source="src", target="src/a.ts"),
        GraphEdge(id="src->src/b.ts", source="src", target="src/b.ts"),
        GraphEdge(id="src/a.ts->src/b.ts", source="src/a.ts", target="src/b.ts"),
        GraphEdge.model_validate(
            {
                "id": "src/b.ts->src/a.ts",
                "source": "src/b.ts",
                "target": "src/a.ts",
                "data": {"isViolation": True, "ruleDescription": "cycle"},
            }
        ),
    ]

    summary = summarize(GraphData(nodes=nodes, edges=edges))

    assert (summary.node_count, summary.file_count, summary.dir_count) == (3, 2, 1)
    assert summary.edge_count == 4
    assert summary.violation_count == 1
    assert summary.violations[0].description == "cycle"
    assert summary.cycles == [["src/a.ts", "src/b.ts"]]
    assert summary.top_coupled == ["src", "src/a.ts", "src/b.ts"]


def test_assemble_sync_never_reads_outside_root(tmp_path: Path) -> None:
    secret = tmp_path / "secret.txt"
    secret.write_text("a\nb\nc\n", encoding="utf-8")
    root = tmp_path / "repo"
    root.mkdir()

    with pytest.raises(TreeError):
        assemble_sync(
            root, [FileNode(name="secret.txt", path=str(secret), type="file")]
        )
