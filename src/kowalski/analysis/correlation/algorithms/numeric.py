"""Pure numeric correlation algorithms.

Computes Pearson correlation on plain sequences.
No logging, no settings - just math.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

import numpy as np

from kowalski.analysis.statistics.models import CorrelationStrength
from kowalski.core.models.dataset import is_number


def get_correlation_strength(value: float) -> CorrelationStrength:
    """Classify correlation strength by absolute value."""
    abs_r = abs(value)
    if abs_r >= 0.7:
        return "strong"
    elif abs_r >= 0.4:
        return "moderate"
    elif abs_r >= 0.2:
        return "weak"
    return "none"


def calculate_correlation(x: Sequence[float], y: Sequence[float]) -> float:
    """Pearson correlation coefficient.

    Returns 0 for mismatched lengths, fewer than two points or a constant
    series. The result is clamped to [-1, 1] and is never NaN.
    """
    if len(x) != len(y) or len(x) < 2:
        return 0.0

    xs = np.asarray(x, dtype=float)
    ys = np.asarray(y, dtype=float)
    if np.ptp(xs) == 0 or np.ptp(ys) == 0:
        return 0.0

    dx = xs - xs.mean()
    dy = ys - ys.mean()
    denominator = float(np.sqrt(np.sum(dx * dx) * np.sum(dy * dy)))
    if denominator == 0 or not np.isfinite(denominator):
        return 0.0

    r = float(np.sum(dx * dy)) / denominator
    return max(-1.0, min(1.0, r))


def aligned_numeric_pairs(
    cells_a: Sequence[Any],
    cells_b: Sequence[Any],
) -> tuple[list[float], list[float]]:
    """Row-aligned pairs where both cells hold a number."""
    xs: list[float] = []
    ys: list[float] = []
    for a, b in zip(cells_a, cells_b, strict=False):
        if is_number(a) and is_number(b):
            xs.append(float(a))
            ys.append(float(b))
    return xs, ys
