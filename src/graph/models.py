"""Graph models shared by the builder, resolver, metrics engine and serializer.

Python attributes are snake_case; serialised payloads use the camelCase
names consumed by the visualization layer (``parentId``, ``isViolation``,
``ruleDescription``, ``rawLOC``, ``rawSize``).
"""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

NodeKind = Literal["dir", "file"]


class MetricData(BaseModel):
    """Normalized and raw metrics for one node."""

    model_config = ConfigDict(populate_by_name=True)

    complexity: float = Field(default=0.0, ge=0.0, le=1.0)
    coupling: float = Field(default=0.0, ge=0.0, le=1.0)
    size: float = Field(default=0.0, ge=0.0, le=1.0)
    raw_loc: int = Field(default=0, ge=0, alias="rawLOC")
    raw_size: int = Field(default=0, ge=0, alias="rawSize", description="Bytes")


class GraphNode(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    label: str
    type: NodeKind
    parent_id: str | None = Field(default=None, alias="parentId")
    metrics: MetricData | None = None


class EdgeData(BaseModel):
    """Guardrail annotation carried by violating edges."""

    model_config = ConfigDict(populate_by_name=True)

    is_violation: bool | None = Field(default=None, alias="isViolation")
    rule_description: str | None = Field(default=None, alias="ruleDescription")


class GraphEdge(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    source: str
    target: str
    data: EdgeData | None = None

    @property
    def is_violation(self) -> bool:
        return bool(self.data and self.data.is_violation)


class GraphData(BaseModel):
    """Nodes and edges of a repository graph."""

    nodes: list[GraphNode] = Field(default_factory=list)
    edges: list[GraphEdge] = Field(default_factory=list)

    def node_ids(self) -> set[str]:
        return {node.id for node in self.nodes}

    def to_payload(self) -> dict[str, Any]:
        """Serialise with wire names, omitting absent optional fields."""
        return self.model_dump(by_alias=True, exclude_none=True)


__all__ = [
    "EdgeData",
    "GraphData",
    "GraphEdge",
    "GraphNode",
    "MetricData",
    "NodeKind",
]
