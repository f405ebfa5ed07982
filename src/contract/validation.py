"""Validation helpers for generated graph artifacts."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

import orjson
from pydantic import ValidationError

from contract.artifacts import ARTIFACT_SPECS, GRAPH_JSON, GRAPH_SUMMARY_JSON
from graph.assemble import GraphSummary
from graph.models import GraphData

if TYPE_CHECKING:
    from pathlib import Path


@dataclass(frozen=True)
class ValidationMessage:
    artifact: str
    path: Path
    message: str
    line: int | None = None

    def location(self) -> str:
        if self.line is None:
            return str(self.path)
        return f"{self.path}:{self.line}"

    def to_dict(self) -> dict[str, object]:
        return {
            "artifact": self.artifact,
            "path": str(self.path),
            "line": self.line,
            "message": self.message,
        }


@dataclass
class ValidationResult:
    errors: list[ValidationMessage] = field(default_factory=list)
    warnings: list[ValidationMessage] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors


def _load_json(
    artifact: str, path: Path, result: ValidationResult
) -> Any | None:
    try:
        return orjson.loads(path.read_bytes())
    except (OSError, orjson.JSONDecodeError) as exc:
        result.errors.append(
            ValidationMessage(
                artifact=artifact,
                path=path,
                message=f"Unreadable JSON: {exc}",
            )
        )
        return None


def _check_graph_invariants(
    artifact: str, path: Path, graph: GraphData, result: ValidationResult
) -> None:
    seen: set[str] = set()
    for node in graph.nodes:
        if node.id in seen:
            result.errors.append(
                ValidationMessage(
                    artifact=artifact,
                    path=path,
                    message=f"Duplicate node id {node.id!r}.",
                )
            )
        seen.add(node.id)
        if node.metrics is None:
            result.warnings.append(
                ValidationMessage(
                    artifact=artifact,
                    path=path,
                    message=f"Node {node.id!r} has no metrics.",
                )
            )

    for edge in graph.edges:
        if edge.source not in seen or edge.target not in seen:
            result.errors.append(
                ValidationMessage(
                    artifact=artifact,
                    path=path,
                    message=f"Edge {edge.id!r} references a missing node.",
                )
            )
        if edge.data is not None and edge.data.is_violation is not True:
            result.errors.append(
                ValidationMessage(
                    artifact=artifact,
                    path=path,
                    message=f"Edge {edge.id!r} carries data without a violation.",
                )
            )


def _validate_graph(
    artifact: str, path: Path, result: ValidationResult
) -> GraphData | None:
    payload = _load_json(artifact, path, result)
    if payload is None:
        return None
    try:
        graph = GraphData.model_validate(payload)
    except ValidationError as exc:
        result.errors.append(
            ValidationMessage(
                artifact=artifact,
                path=path,
                message=f"Schema validation failed: {exc.errors()[0]['msg']}",
            )
        )
        return None
    _check_graph_invariants(artifact, path, graph, result)
    return graph


def _validate_summary(
    artifact: str,
    path: Path,
    graph: GraphData | None,
    result: ValidationResult,
) -> None:
    payload = _load_json(artifact, path, result)
    if payload is None:
        return
    try:
        summary = GraphSummary.model_validate(payload)
    except ValidationError as exc:
        result.errors.append(
            ValidationMessage(
                artifact=artifact,
                path=path,
                message=f"Schema validation failed: {exc.errors()[0]['msg']}",
            )
        )
        return

    if summary.violation_count != len(summary.violations):
        result.errors.append(
            ValidationMessage(
                artifact=artifact,
                path=path,
                message="violation_count does not match violations.",
            )
        )
    if graph is not None and (
        summary.node_count != len(graph.nodes)
        or summary.edge_count != len(graph.edges)
    ):
        result.errors.append(
            ValidationMessage(
                artifact=artifact,
                path=path,
                message=f"Counts disagree with {GRAPH_JSON}.",
            )
        )


def validate_artifacts(artifacts_dir: Path) -> ValidationResult:
    result = ValidationResult()

    if not artifacts_dir.exists():
        result.errors.append(
            ValidationMessage(
                artifact="artifacts_dir",
                path=artifacts_dir,
                message="Artifacts directory does not exist.",
            )
        )
        return result

    if not artifacts_dir.is_dir():
        result.errors.append(
            ValidationMessage(
                artifact="artifacts_dir",
                path=artifacts_dir,
                message="Artifacts path is not a directory.",
            )
        )
        return result

    missing = False
    for artifact_name, spec in ARTIFACT_SPECS.items():
        path = artifacts_dir / spec.filename
        if not path.exists():
            missing = True
            result.errors.append(
                ValidationMessage(
                    artifact=artifact_name,
                    path=path,
                    message="Required artifact file is missing.",
                )
            )
    if missing:
        return result

    graph = _validate_graph("graph", artifacts_dir / GRAPH_JSON, result)
    _validate_summary(
        "graph_summary", artifacts_dir / GRAPH_SUMMARY_JSON, graph, result
    )
    return result


__all__ = ["ValidationMessage", "ValidationResult", "validate_artifacts"]
