"""Per-node complexity, coupling and size metrics.

Complexity and size are line and byte counts normalized against the largest
file in the graph. Directories aggregate all descendant files and are scored
on the same file-level scale, so a large directory can reach 1.0 well before
any single file does (scores are clamped to 1.0). Coupling is the number of
edges touching a node normalized against the most connected node.
"""

from __future__ import annotations

import bisect
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

import anyio
from pydantic import BaseModel

from graph.algos import dedupe_edges, drop_dangling_edges
from graph.models import MetricData
from utils import is_descendant

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping, Sequence

    from graph.models import GraphEdge, GraphNode

logger = logging.getLogger(__name__)

DEFAULT_MAX_CONCURRENT_READS = 32


@dataclass(frozen=True)
class FileStats:
    loc: int
    size: int


ZERO_STATS = FileStats(loc=0, size=0)


@dataclass(frozen=True)
class Normalization:
    """Denominators for one metrics pass; each is floored at 1."""

    max_loc: int = 1
    max_size: int = 1
    max_coupling: int = 1

    @classmethod
    def from_raw(
        cls,
        file_stats: Iterable[FileStats],
        coupling_counts: Iterable[int],
    ) -> Normalization:
        max_loc = 1
        max_size = 1
        for stats in file_stats:
            max_loc = max(max_loc, stats.loc)
            max_size = max(max_size, stats.size)
        return cls(
            max_loc=max_loc,
            max_size=max_size,
            max_coupling=max(coupling_counts, default=0) or 1,
        )

    def metrics(self, stats: FileStats, coupling: int) -> MetricData:
        return MetricData(
            complexity=_ratio(stats.loc, self.max_loc),
            coupling=_ratio(coupling, self.max_coupling),
            size=_ratio(stats.size, self.max_size),
            raw_loc=stats.loc,
            raw_size=stats.size,
        )


class NodeMetrics(BaseModel):
    node_id: str
    metrics: MetricData


def _ratio(value: int, denominator: int) -> float:
    return min(value / denominator, 1.0)


def count_lines(text: str) -> int:
    """Count ``\\n``-delimited segments; a trailing newline adds a line."""
    return text.count("\n") + 1


def compute_coupling(
    nodes: Sequence[GraphNode],
    edges: Iterable[GraphEdge],
) -> dict[str, int]:
    """Count inbound plus outbound edges per node.

    Edges are counted once per id; edges with an endpoint outside ``nodes``
    are dropped.
    """
    counts = {node.id: 0 for node in nodes}
    for edge in drop_dangling_edges(dedupe_edges(edges), counts.keys()):
        counts[edge.source] += 1
        counts[edge.target] += 1
    return counts


async def read_file_stats(path: Path) -> FileStats:
    """Read line count and byte size; unreadable files score zero."""
    try:
        apath = anyio.Path(path)
        size = (await apath.stat()).st_size
        content = await apath.read_bytes()
    except OSError as exc:
        logger.debug("Scoring unreadable file %s as empty: %s", path, exc)
        return ZERO_STATS
    return FileStats(
        loc=count_lines(content.decode("utf-8", errors="replace")),
        size=size,
    )


async def collect_file_stats(
    root_dir: Path,
    file_ids: Sequence[str],
    *,
    max_concurrent_reads: int = DEFAULT_MAX_CONCURRENT_READS,
) -> dict[str, FileStats]:
    """Read stats for every file id concurrently."""
    stats: dict[str, FileStats] = {}
    limiter = anyio.CapacityLimiter(max_concurrent_reads)

    async def _collect(file_id: str) -> None:
        async with limiter:
            stats[file_id] = await read_file_stats(root_dir / file_id)

    async with anyio.create_task_group() as tg:
        for file_id in file_ids:
            tg.start_soon(_collect, file_id)

    return stats


def aggregate_directory(
    dir_id: str,
    sorted_file_ids: Sequence[str],
    file_stats: Mapping[str, FileStats],
) -> FileStats:
    """Sum stats of every file below ``dir_id`` (transitively).

    ``sorted_file_ids`` must be sorted; descendants share the ``dir_id + "/"``
    prefix and therefore form one contiguous run.
    """
    prefix = dir_id + "/"
    start = bisect.bisect_left(sorted_file_ids, prefix)
    loc = 0
    size = 0
    for file_id in sorted_file_ids[start:]:
        if not is_descendant(file_id, dir_id):
            break
        stats = file_stats[file_id]
        loc += stats.loc
        size += stats.size
    return FileStats(loc=loc, size=size)


async def compute_metrics(
    root_dir: Path | str,
    nodes: Sequence[GraphNode],
    edges: Sequence[GraphEdge],
    *,
    max_concurrent_reads: int = DEFAULT_MAX_CONCURRENT_READS,
) -> list[NodeMetrics]:
    """Compute metrics for every node, in input order.

    Args:
        root_dir: Local repository root the node ids are relative to
        nodes: Graph nodes to score
        edges: Graph edges used for coupling
        max_concurrent_reads: Upper bound on concurrent file reads

    Returns:
        One NodeMetrics per input node.
    """
    root = Path(root_dir)
    coupling = compute_coupling(nodes, edges)

    file_ids = [node.id for node in nodes if node.type == "file"]
    file_stats = await collect_file_stats(
        root, file_ids, max_concurrent_reads=max_concurrent_reads
    )
    norm = Normalization.from_raw(file_stats.values(), coupling.values())
    sorted_file_ids = sorted(file_stats)

    results: list[NodeMetrics] = []
    for node in nodes:
        if node.type == "file":
            stats = file_stats.get(node.id, ZERO_STATS)
        else:
            stats = aggregate_directory(node.id, sorted_file_ids, file_stats)
        results.append(
            NodeMetrics(node_id=node.id, metrics=norm.metrics(stats, coupling[node.id]))
        )
    return results


def compute_metrics_sync(
    root_dir: Path | str,
    nodes: Sequence[GraphNode],
    edges: Sequence[GraphEdge],
    *,
    max_concurrent_reads: int = DEFAULT_MAX_CONCURRENT_READS,
) -> list[NodeMetrics]:
    """Blocking wrapper around :func:`compute_metrics`."""

    async def _run() -> list[NodeMetrics]:
        return await compute_metrics(
            root_dir, nodes, edges, max_concurrent_reads=max_concurrent_reads
        )

    return anyio.run(_run)


__all__ = [
    "FileStats",
    "NodeMetrics",
    "Normalization",
    "aggregate_directory",
    "collect_file_stats",
    "compute_coupling",
    "compute_metrics",
    "compute_metrics_sync",
    "count_lines",
    "read_file_stats",
]
