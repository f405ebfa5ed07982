"""Architecture rules and configuration for repograph."""

from rules.config import (
    ConfigError,
    RepoGraphConfig,
    ScanConfig,
    load_config,
)
from rules.guardrails import (
    RuleError,
    annotate_edges,
    check_violation,
    violation_description,
)
from rules.models import ArchitectureRule

__all__ = [
    "ArchitectureRule",
    "ConfigError",
    "RepoGraphConfig",
    "RuleError",
    "ScanConfig",
    "annotate_edges",
    "check_violation",
    "load_config",
    "violation_description",
]
