"""Artifact contract definitions.

Filenames and formats of the files written by ``repograph generate``.
"""

from __future__ import annotations

from dataclasses import dataclass

GRAPH_JSON = "graph.json"
GRAPH_SUMMARY_JSON = "graph_summary.json"
CONTEXT_TXT = "context.txt"


@dataclass(frozen=True)
class ArtifactSpec:
    filename: str
    format: str
    required_fields_note: str


ARTIFACT_SPECS: dict[str, ArtifactSpec] = {
    "graph": ArtifactSpec(
        filename=GRAPH_JSON,
        format="json",
        required_fields_note="GraphData nodes and edges with wire field names.",
    ),
    "graph_summary": ArtifactSpec(
        filename=GRAPH_SUMMARY_JSON,
        format="json",
        required_fields_note="GraphSummary fields.",
    ),
    "context": ArtifactSpec(
        filename=CONTEXT_TXT,
        format="text",
        required_fields_note="Indented node tree with metric tags.",
    ),
}

__all__ = [
    "ARTIFACT_SPECS",
    "CONTEXT_TXT",
    "GRAPH_JSON",
    "GRAPH_SUMMARY_JSON",
    "ArtifactSpec",
]
