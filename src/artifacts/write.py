"""Artifact generation for a repository checkout."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from artifacts.utils import _get_output_dir_name, _write_json
from context.serializer import serialize_graph
from contract.artifacts import CONTEXT_TXT, GRAPH_JSON, GRAPH_SUMMARY_JSON
from graph.assemble import assemble_sync, summarize
from rules.config import ScanConfig, load_config, resolve_output_dir
from scan.files import scan_file_tree

if TYPE_CHECKING:
    from pathlib import Path

    from rules.config import RepoGraphConfig

logger = logging.getLogger(__name__)


def scan_config_for(
    root: Path,
    config: RepoGraphConfig,
    out_dir: Path | None = None,
) -> ScanConfig:
    """Return the scan settings with artifact directories ignored.

    The configured output directory is always ignored, whichever directory
    artifacts are actually written to, so that a checkout scans the same
    whether or not it holds generated artifacts. ``out_dir`` is ignored too
    when it lies inside ``root``.
    """
    resolved_root = root.resolve()
    candidates = [resolve_output_dir(resolved_root, config.output_dir)]
    if out_dir is not None:
        candidates.append(out_dir.resolve())

    ignore_names = list(config.scan.ignore_names)
    for candidate in candidates:
        name = _get_output_dir_name(candidate, resolved_root)
        if name and name not in ignore_names:
            ignore_names.append(name)

    return ScanConfig(
        ignore_names=ignore_names,
        respect_gitignore=config.scan.respect_gitignore,
    )


def generate_all_artifacts(
    *,
    root: Path,
    out_dir: Path | None = None,
    config: RepoGraphConfig | None = None,
) -> dict[str, object]:
    """Generate graph artifacts for a repository checkout.

    Args:
        root: Root directory of the repository to analyze
        out_dir: Optional output directory for generated artifacts
        config: Optional configuration for guardrails and other settings

    Returns:
        Dictionary with counts and list of generated artifact paths.
    """
    if config is None:
        config = load_config(root)

    if out_dir is None:
        out_dir = resolve_output_dir(root, config.output_dir)

    tree = scan_file_tree(root, config=scan_config_for(root, config, out_dir))
    graph = assemble_sync(
        root,
        tree,
        config.guardrails,
        include_dependencies=config.include_dependencies,
        config=config,
    )
    summary = summarize(graph)

    out_dir.mkdir(parents=True, exist_ok=True)
    _write_json(out_dir / GRAPH_JSON, graph)
    _write_json(out_dir / GRAPH_SUMMARY_JSON, summary)
    (out_dir / CONTEXT_TXT).write_text(
        serialize_graph(graph, max_nodes=config.context.max_nodes),
        encoding="utf-8",
    )
    logger.info("Wrote artifacts to %s", out_dir)

    artifacts_list = [GRAPH_JSON, GRAPH_SUMMARY_JSON, CONTEXT_TXT]
    return {
        "node_count": summary.node_count,
        "edge_count": summary.edge_count,
        "violation_count": summary.violation_count,
        "cycle_count": len(summary.cycles),
        "artifacts": [str(out_dir / name) for name in artifacts_list],
    }
