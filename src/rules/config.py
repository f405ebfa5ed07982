from __future__ import annotations

import tomllib
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, field_validator

from rules.guardrails import RuleError, validate_rule_patterns
from rules.models import ArchitectureRule
from scan.files import DEFAULT_IGNORE_NAMES, DEFAULT_SOURCE_EXTENSIONS

CONFIG_FILENAME = "repograph.toml"


class ScanConfig(BaseModel):
    """Settings for the file tree scanner."""

    model_config = ConfigDict(extra="forbid")

    ignore_names: list[str] = Field(
        default_factory=lambda: sorted(DEFAULT_IGNORE_NAMES),
        description="Entry names skipped at every level (dot-entries always are)",
    )
    respect_gitignore: bool = Field(
        default=True,
        description="Skip entries matched by the root .gitignore",
    )


class ImportsConfig(BaseModel):
    """Settings for relative import resolution."""

    model_config = ConfigDict(extra="forbid")

    extensions: list[str] = Field(
        default_factory=lambda: list(DEFAULT_SOURCE_EXTENSIONS),
        description="Source file extensions scanned for import statements",
    )

    @field_validator("extensions")
    @classmethod
    def validate_extensions(cls, v: list[str]) -> list[str]:
        for ext in v:
            if not ext.startswith("."):
                msg = f"extension {ext!r} must start with '.'"
                raise ValueError(msg)
        return v


class MetricsConfig(BaseModel):
    """Settings for the metrics engine."""

    model_config = ConfigDict(extra="forbid")

    max_concurrent_reads: int = Field(
        default=32,
        ge=1,
        description="Upper bound on concurrent file reads",
    )


class ContextConfig(BaseModel):
    """Settings for the chat-context text serializer."""

    model_config = ConfigDict(extra="forbid")

    max_nodes: int = Field(
        default=300,
        ge=1,
        description="Node lines emitted before the output is truncated",
    )


class RepoGraphConfig(BaseModel):
    """Configuration for repograph graph generation."""

    model_config = ConfigDict(extra="forbid")

    output_dir: str = Field(
        default=".repograph",
        description="Output directory for generated artifacts",
    )
    include_dependencies: bool = Field(
        default=False,
        description="Merge resolved relative-import edges into the graph",
    )
    scan: ScanConfig = Field(default_factory=ScanConfig)
    imports: ImportsConfig = Field(default_factory=ImportsConfig)
    metrics: MetricsConfig = Field(default_factory=MetricsConfig)
    context: ContextConfig = Field(default_factory=ContextConfig)
    guardrails: list[ArchitectureRule] = Field(
        default_factory=list,
        description="Architecture rules, evaluated in order",
    )

    @field_validator("guardrails", mode="before")
    @classmethod
    def assign_rule_ids(cls, v: object) -> object:
        """Give positional ids to rules declared without one."""
        if not isinstance(v, list):
            return v
        assigned = []
        for index, raw in enumerate(v, start=1):
            if isinstance(raw, dict) and not raw.get("id"):
                raw = {**raw, "id": f"rule-{index}"}
            assigned.append(raw)
        return assigned


class ConfigError(Exception):
    """Raised when config file exists but cannot be parsed."""


def resolve_output_dir(root: Path, output_dir: str) -> Path:
    """Resolve a config-provided output_dir safely within the repo root.

    The config output_dir must be a non-empty relative path that remains
    within the repository root after resolution. Absolute paths and paths
    that escape the root are rejected.
    """
    if not output_dir:
        msg = "output_dir must be a non-empty relative path"
        raise ConfigError(msg)

    if output_dir.startswith("~"):
        msg = "output_dir must be a relative path within the repo root"
        raise ConfigError(msg)

    output_path = Path(output_dir)
    if output_path.is_absolute():
        msg = "output_dir must be a relative path within the repo root"
        raise ConfigError(msg)

    try:
        resolved_root = root.resolve()
        resolved_output = (resolved_root / output_path).resolve()
    except OSError as exc:
        msg = f"Failed to resolve output_dir '{output_dir}': {exc}"
        raise ConfigError(msg) from exc

    try:
        resolved_output.relative_to(resolved_root)
    except ValueError as exc:
        msg = f"output_dir '{output_dir}' escapes the repository root"
        raise ConfigError(msg) from exc

    return resolved_output


def load_config(root: Path) -> RepoGraphConfig:
    """Load configuration from repograph.toml if it exists."""
    config_path = Path(root) / CONFIG_FILENAME

    if not config_path.is_file():
        return RepoGraphConfig()

    try:
        with config_path.open("rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        msg = f"Invalid TOML in {config_path}: {e}"
        raise ConfigError(msg) from e

    try:
        config = RepoGraphConfig.model_validate(data)
    except Exception as e:
        msg = f"Invalid config in {config_path}: {e}"
        raise ConfigError(msg) from e

    try:
        validate_rule_patterns(config.guardrails)
    except RuleError as e:
        msg = f"Invalid guardrail in {config_path}: {e}"
        raise ConfigError(msg) from e

    return config
