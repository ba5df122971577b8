"""Outlier detection: z-scores and the IQR fence."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any

from kowalski.analysis.statistics.descriptive import calculate_stats
from kowalski.analysis.statistics.models import NumericColumnStats, Outlier
from kowalski.core.models.dataset import is_number


@dataclass
class ZScoreOutliers:
    """Positions and z-scores of values beyond a z threshold."""

    indices: list[int] = field(default_factory=list)
    zscores: list[float] = field(default_factory=list)


def calculate_zscore(value: float, mean: float, std: float) -> float:
    """Standard score of ``value``; 0 when the spread is 0."""
    if std == 0:
        return 0.0
    return (value - mean) / std


def detect_outliers_zscore(values: Sequence[float], threshold: float = 3.0) -> ZScoreOutliers:
    """Flag values with |z| above ``threshold``.

    Needs at least three values and a non-zero standard deviation.
    """
    result = ZScoreOutliers()
    if len(values) < 3:
        return result

    stats = calculate_stats(values)
    if stats.std == 0:
        return result

    for i, value in enumerate(values):
        z = calculate_zscore(value, stats.mean, stats.std)
        if abs(z) > threshold:
            result.indices.append(i)
            result.zscores.append(z)
    return result


def iqr_fence(q1: float, q3: float) -> tuple[float, float]:
    """Tukey fence ``[Q1 - 1.5*IQR, Q3 + 1.5*IQR]``."""
    iqr = q3 - q1
    return q1 - 1.5 * iqr, q3 + 1.5 * iqr


def find_iqr_outliers(
    column: str,
    cells: Sequence[Any],
    stats: NumericColumnStats,
) -> list[Outlier]:
    """Numeric cells of one column that fall outside the IQR fence.

    ``cells`` is the raw column in row order, so ``row_index`` points back
    into the dataset. Non-numeric cells are skipped.
    """
    lower, upper = iqr_fence(stats.q1, stats.q3)
    outliers = []
    for row_index, value in enumerate(cells):
        if not is_number(value):
            continue
        if value < lower or value > upper:
            outliers.append(
                Outlier(
                    column=column,
                    row_index=row_index,
                    value=float(value),
                    expected_min=lower,
                    expected_max=upper,
                    zscore=calculate_zscore(value, stats.mean, stats.std),
                )
            )
    return outliers
