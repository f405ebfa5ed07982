"""Graph assembly: structure, optional dependencies, guardrails and metrics."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING

import anyio
from pydantic import BaseModel, Field

from graph.algos import build_adjacency, find_cycles, merge_graphs
from graph.dependencies import resolve_dependencies
from graph.models import GraphData, GraphEdge
from graph.structure import build_graph
from metrics.engine import DEFAULT_MAX_CONCURRENT_READS, compute_metrics
from rules.guardrails import annotate_edges
from scan.files import DEFAULT_IGNORE_NAMES, DEFAULT_SOURCE_EXTENSIONS
from tree.models import validate_tree

if TYPE_CHECKING:
    from collections.abc import Sequence

    from rules.config import RepoGraphConfig
    from rules.models import ArchitectureRule
    from tree.models import FileNode

logger = logging.getLogger(__name__)

TOP_COUPLED_COUNT = 10


class ViolationRecord(BaseModel):
    source: str
    target: str
    description: str


class GraphSummary(BaseModel):
    """Summary of an assembled graph."""

    node_count: int
    file_count: int
    dir_count: int
    edge_count: int
    violation_count: int
    violations: list[ViolationRecord] = Field(default_factory=list)
    cycles: list[list[str]] = Field(default_factory=list)
    top_coupled: list[str] = Field(default_factory=list)


async def assemble(
    root_dir: Path | str,
    tree: Sequence[FileNode],
    rules: Sequence[ArchitectureRule] | None = None,
    *,
    include_dependencies: bool = False,
    config: RepoGraphConfig | None = None,
) -> GraphData:
    """Assemble the enriched graph for one repository checkout.

    Builds the containment graph from ``tree``, optionally merges resolved
    relative-import edges, flags edges violating ``rules`` and attaches
    metrics to every node. Node and edge order follow the base graph.

    Args:
        root_dir: Local repository root the tree paths are relative to
        tree: Root-level FileNode entries
        rules: Architecture rules in priority order; None or empty skips
            guardrail evaluation
        include_dependencies: Merge import-dependency edges into the graph
        config: Optional configuration for import and metrics settings

    Returns:
        A new GraphData with metrics on every node.

    Raises:
        TreeError: If tree is None or breaks the path contract.
    """
    validate_tree(tree)

    root = Path(root_dir)
    max_reads = (
        config.metrics.max_concurrent_reads if config else DEFAULT_MAX_CONCURRENT_READS
    )

    graph = build_graph(tree)

    if include_dependencies:
        dependency_graph = await resolve_dependencies(
            root,
            tree,
            extensions=config.imports.extensions if config else DEFAULT_SOURCE_EXTENSIONS,
            ignore_names=config.scan.ignore_names if config else DEFAULT_IGNORE_NAMES,
            max_concurrent_reads=max_reads,
        )
        graph = merge_graphs(graph, dependency_graph)

    edges = annotate_edges(graph.edges, rules)

    results = await compute_metrics(
        root, graph.nodes, edges, max_concurrent_reads=max_reads
    )
    metrics_by_id = {result.node_id: result.metrics for result in results}
    nodes = [
        node.model_copy(update={"metrics": metrics_by_id[node.id]})
        for node in graph.nodes
    ]

    assembled = GraphData(nodes=nodes, edges=edges)
    logger.info(
        "Assembled graph for %s: %d nodes, %d edges, %d violations",
        root,
        len(nodes),
        len(edges),
        sum(1 for edge in edges if edge.is_violation),
    )
    return assembled


def assemble_sync(
    root_dir: Path | str,
    tree: Sequence[FileNode],
    rules: Sequence[ArchitectureRule] | None = None,
    *,
    include_dependencies: bool = False,
    config: RepoGraphConfig | None = None,
) -> GraphData:
    """Blocking wrapper around :func:`assemble`."""

    async def _run() -> GraphData:
        return await assemble(
            root_dir,
            tree,
            rules,
            include_dependencies=include_dependencies,
            config=config,
        )

    return anyio.run(_run)


def _dependency_edges(graph: GraphData) -> list[GraphEdge]:
    # Containment edges always point from a node to one of its children.
    parents = {node.id: node.parent_id for node in graph.nodes}
    return [edge for edge in graph.edges if parents.get(edge.target) != edge.source]


def summarize(graph: GraphData, *, top_n: int = TOP_COUPLED_COUNT) -> GraphSummary:
    """Summarize counts, violations, import cycles and most coupled nodes."""
    violations = [
        ViolationRecord(
            source=edge.source,
            target=edge.target,
            description=edge.data.rule_description or "",
        )
        for edge in graph.edges
        if edge.is_violation and edge.data is not None
    ]

    cycles = find_cycles(build_adjacency(_dependency_edges(graph)))

    coupled = [node for node in graph.nodes if node.metrics and node.metrics.coupling]
    coupled.sort(key=lambda n: (-(n.metrics.coupling if n.metrics else 0.0), n.id))

    file_count = sum(1 for node in graph.nodes if node.type == "file")
    return GraphSummary(
        node_count=len(graph.nodes),
        file_count=file_count,
        dir_count=len(graph.nodes) - file_count,
        edge_count=len(graph.edges),
        violation_count=len(violations),
        violations=violations,
        cycles=cycles,
        top_coupled=[node.id for node in coupled[:top_n]],
    )


__all__ = [
    "GraphSummary",
    "ViolationRecord",
    "assemble",
    "assemble_sync",
    "summarize",
]
