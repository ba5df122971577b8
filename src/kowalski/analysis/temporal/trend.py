"""Linear trend detection over row order."""

from __future__ import annotations

import math
from collections.abc import Sequence

import numpy as np
from scipy import stats

from kowalski.analysis.temporal.models import TrendResult

# Slope must exceed this share of |mean| (spread over the series) to count
TREND_THRESHOLD_RATIO = 0.05


def detect_trend(values: Sequence[float]) -> TrendResult:
    """Classify a series as trending up, down or stable.

    The slope is an ordinary least squares fit of value against index. The
    reported change compares the mean of the first quarter of points with
    the mean of the last quarter.
    """
    n = len(values)
    if n < 2:
        return TrendResult()

    y = np.asarray(values, dtype=float)
    x = np.arange(n, dtype=float)
    slope = float(stats.linregress(x, y).slope) if np.ptp(y) > 0 else 0.0

    quarter = math.ceil(n / 4)
    first = float(np.mean(y[:quarter]))
    last = float(np.mean(y[-quarter:]))
    mean = float(np.mean(y))

    change_percent = 0.0
    if first == 0 and last != 0:
        base = abs(mean) if mean != 0 else 1.0
        change_percent = (last - first) / base * 100
    elif first != 0:
        change_percent = (last - first) / abs(first) * 100

    threshold = abs(mean) * TREND_THRESHOLD_RATIO
    direction = "stable"
    if slope > threshold / n:
        direction = "up"
    elif slope < -threshold / n:
        direction = "down"

    return TrendResult(direction=direction, change_percent=change_percent, slope=slope)


def describe_trend(column: str, trend: TrendResult) -> str:
    """One-line human description of a trend."""
    change = f"{abs(trend.change_percent):.1f}"
    if trend.direction == "up":
        return f"{column} shows upward trend (+{change}%)"
    if trend.direction == "down":
        return f"{column} shows downward trend (-{change}%)"
    return f"{column} remains stable"
