"""Heatmap helpers mapping normalized metrics to colors and severity bands."""

from __future__ import annotations

from typing import Literal

SeverityBand = Literal["low", "medium", "high"]

LOW_UPPER_BOUND = 0.33
MEDIUM_UPPER_BOUND = 0.66


def _clamp(value: float) -> float:
    return max(0.0, min(1.0, value))


def metric_to_hsl(value: float) -> str:
    """Map a metric in [0, 1] to an HSL color, green (0) through red (1).

    Examples:
        >>> metric_to_hsl(0)
        'hsl(120, 75%, 45%)'
        >>> metric_to_hsl(1.5)
        'hsl(0, 75%, 45%)'
    """
    hue = 120 - _clamp(value) * 120
    return f"hsl({hue:g}, 75%, 45%)"


def metric_to_severity(value: float) -> SeverityBand:
    if value < LOW_UPPER_BOUND:
        return "low"
    if value < MEDIUM_UPPER_BOUND:
        return "medium"
    return "high"


__all__ = ["SeverityBand", "metric_to_hsl", "metric_to_severity"]
