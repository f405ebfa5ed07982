"""Stable artifact contract surface for repograph.

Consumers of generated artifacts should depend on these exports only.
"""

from contract.artifacts import (
    ARTIFACT_SPECS,
    CONTEXT_TXT,
    GRAPH_JSON,
    GRAPH_SUMMARY_JSON,
    ArtifactSpec,
)


def __getattr__(name: str) -> object:
    if name in {"ValidationMessage", "ValidationResult", "validate_artifacts"}:
        from contract.validation import (
            ValidationMessage,
            ValidationResult,
            validate_artifacts,
        )

        return {
            "ValidationMessage": ValidationMessage,
            "ValidationResult": ValidationResult,
            "validate_artifacts": validate_artifacts,
        }[name]

    msg = f"module 'contract' has no attribute {name!r}"
    raise AttributeError(msg)


__all__ = [
    "ARTIFACT_SPECS",
    "CONTEXT_TXT",
    "GRAPH_JSON",
    "GRAPH_SUMMARY_JSON",
    "ArtifactSpec",
    "ValidationMessage",
    "ValidationResult",
    "validate_artifacts",
]
