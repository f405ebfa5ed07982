"""Guardrail evaluation over graph edges.

Rule patterns are anchored globs: ``*`` matches any run of characters
(including ``/`` and the empty string), every other character matches
itself. Patterns are compiled once into a token sequence and rendered to a
regular expression with each literal escaped, so characters such as ``[``,
``.`` or ``+`` carry no special meaning.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from functools import lru_cache
from typing import TYPE_CHECKING

from graph.models import EdgeData, GraphEdge

if TYPE_CHECKING:
    from collections.abc import Sequence

    from rules.models import ArchitectureRule

WILDCARD = "*"


class RuleError(ValueError):
    """Raised when a rule pattern cannot be used."""


@dataclass(frozen=True)
class LiteralToken:
    text: str


@dataclass(frozen=True)
class WildcardToken:
    pass


Token = LiteralToken | WildcardToken


def tokenize_glob(pattern: str) -> tuple[Token, ...]:
    """Split a glob into literal runs and wildcards.

    Consecutive wildcards collapse into one.

    Examples:
        >>> tokenize_glob("src/*.ts")
        (LiteralToken(text='src/'), WildcardToken(), LiteralToken(text='.ts'))
    """
    tokens: list[Token] = []
    buffer: list[str] = []
    for char in pattern:
        if char == WILDCARD:
            if buffer:
                tokens.append(LiteralToken("".join(buffer)))
                buffer = []
            if not tokens or not isinstance(tokens[-1], WildcardToken):
                tokens.append(WildcardToken())
        else:
            buffer.append(char)
    if buffer:
        tokens.append(LiteralToken("".join(buffer)))
    return tuple(tokens)


def _render(tokens: Sequence[Token]) -> str:
    parts = [
        ".*" if isinstance(token, WildcardToken) else re.escape(token.text)
        for token in tokens
    ]
    return r"\A" + "".join(parts) + r"\Z"


@lru_cache(maxsize=1024)
def compile_glob(pattern: str) -> re.Pattern[str]:
    """Compile an anchored glob into a full-string regular expression."""
    return re.compile(_render(tokenize_glob(pattern)), re.DOTALL)


def matches(pattern: str, path: str) -> bool:
    """Return True when the whole path matches the glob."""
    return compile_glob(pattern).match(path) is not None


def validate_rule_patterns(rules: Sequence[ArchitectureRule]) -> None:
    """Reject rules whose patterns cannot match anything meaningful.

    Intended for rule creation/load time; evaluation does not re-validate.
    """
    for rule in rules:
        for field_name in ("source_pattern", "target_pattern"):
            if not getattr(rule, field_name).strip():
                label = rule.id or rule.description or "<unnamed>"
                msg = f"rule {label!r} has an empty {field_name}"
                raise RuleError(msg)


def check_violation(
    source: str,
    target: str,
    rules: Sequence[ArchitectureRule],
) -> ArchitectureRule | None:
    """Return the first deny rule matching the edge, or None.

    Rules are consulted in the order supplied. Allow rules are accepted but
    currently have no effect.
    """
    for rule in rules:
        if rule.rule_type != "deny":
            continue
        if matches(rule.source_pattern, source) and matches(
            rule.target_pattern, target
        ):
            return rule
    return None


def violation_description(rule: ArchitectureRule) -> str:
    """Human-readable description attached to a violating edge."""
    if rule.description:
        return rule.description
    return f"Violation: {rule.source_pattern} -> {rule.target_pattern}"


def annotate_edges(
    edges: Sequence[GraphEdge],
    rules: Sequence[ArchitectureRule] | None,
) -> list[GraphEdge]:
    """Flag edges that violate a deny rule.

    Returns a new list in the same order. Violating edges are replaced by
    copies carrying ``is_violation`` and ``rule_description``; all other edges
    are passed through as the same objects.
    """
    if not rules:
        return list(edges)

    annotated: list[GraphEdge] = []
    for edge in edges:
        rule = check_violation(edge.source, edge.target, rules)
        if rule is None:
            annotated.append(edge)
            continue
        annotated.append(
            edge.model_copy(
                update={
                    "data": EdgeData(
                        is_violation=True,
                        rule_description=violation_description(rule),
                    )
                }
            )
        )
    return annotated


__all__ = [
    "LiteralToken",
    "RuleError",
    "Token",
    "WildcardToken",
    "annotate_edges",
    "check_violation",
    "compile_glob",
    "matches",
    "tokenize_glob",
    "validate_rule_patterns",
    "violation_description",
]
