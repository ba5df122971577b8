"""Mean-shift change point detection.

Every admissible split of the series is scored with a pooled-variance
two-sample statistic; the strongest splits are kept greedily so that no two
reported change points sit closer than the minimum segment size.
"""

from __future__ import annotations

import math
from collections.abc import Sequence

import numpy as np

from kowalski.analysis.temporal.models import ChangePoint

# Relative to the largest |value| in the series
_SE_FLOOR = 1e-9
_MEAN_EPSILON = 1e-12


def _split_significance(
    before: np.ndarray, after: np.ndarray, scale: float
) -> tuple[float, float, float]:
    """(significance, before_mean, after_mean) for one split."""
    n1, n2 = len(before), len(after)
    mean_before = float(before.mean())
    mean_after = float(after.mean())
    diff = abs(mean_after - mean_before)
    if diff <= _MEAN_EPSILON * scale:
        return 0.0, mean_before, mean_after

    pooled = ((n1 - 1) * before.var(ddof=1) + (n2 - 1) * after.var(ddof=1)) / (n1 + n2 - 2)
    se = math.sqrt(pooled * (1 / n1 + 1 / n2))
    # Two flat segments at different levels: score against a tiny floor
    se = max(se, _SE_FLOOR * scale)
    return diff / se, mean_before, mean_after


def detect_change_points(
    values: Sequence[float],
    min_segment_size: int = 5,
    threshold: float = 2.0,
) -> list[ChangePoint]:
    """Find indices where the mean of the series shifts.

    Args:
        values: Series in order
        min_segment_size: Smallest segment on either side of a split, and the
            minimum distance between two reported change points
        threshold: Minimum significance for a split to be reported

    Returns:
        Change points sorted by index
    """
    n = len(values)
    if min_segment_size < 1 or n < 2 * min_segment_size:
        return []

    series = np.asarray(values, dtype=float)
    scale = max(1.0, float(np.max(np.abs(series))))

    candidates: list[ChangePoint] = []
    for i in range(min_segment_size, n - min_segment_size):
        significance, before_mean, after_mean = _split_significance(
            series[:i], series[i:], scale
        )
        if significance > threshold:
            candidates.append(
                ChangePoint(
                    index=i,
                    before_mean=before_mean,
                    after_mean=after_mean,
                    significance=significance,
                    direction="increase" if after_mean > before_mean else "decrease",
                )
            )

    kept: list[ChangePoint] = []
    for candidate in sorted(candidates, key=lambda c: c.significance, reverse=True):
        if all(abs(candidate.index - k.index) >= min_segment_size for k in kept):
            kept.append(candidate)

    return sorted(kept, key=lambda c: c.index)
