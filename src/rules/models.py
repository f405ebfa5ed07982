"""Architecture rule models."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

RuleType = Literal["allow", "deny"]
Severity = Literal["info", "warning", "error"]


class ArchitectureRule(BaseModel):
    """A path-pattern guardrail between a dependency source and target.

    Patterns are anchored globs where ``*`` matches any sequence of
    characters, including ``/``.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    id: str | None = None
    source_pattern: str = Field(description="Glob over edge source paths")
    target_pattern: str = Field(description="Glob over edge target paths")
    rule_type: RuleType = "deny"
    severity: Severity = "error"
    description: str = ""


__all__ = ["ArchitectureRule", "RuleType", "Severity"]
