"""Autocorrelation-based seasonality detection."""

from __future__ import annotations

from collections.abc import Sequence

import numpy as np

from kowalski.analysis.temporal.models import SeasonalityResult

MIN_POINTS = 8
PEAK_THRESHOLD = 0.3


def calculate_autocorrelation(values: Sequence[float], lag: int) -> float:
    """Sample autocorrelation at ``lag`` (0 for a flat series or an out-of-range lag)."""
    series = np.asarray(values, dtype=float)
    n = len(series)
    if lag < 0 or lag >= n:
        return 0.0

    centered = series - series.mean()
    denominator = float(np.sum(centered * centered))
    if denominator == 0:
        return 0.0
    return float(np.sum(centered[: n - lag] * centered[lag:])) / denominator


def _period_to_name(period: int) -> str | None:
    mapping = {
        7: "weekly pattern",
        12: "monthly pattern in yearly data",
        4: "quarterly pattern",
        24: "hourly pattern in daily data",
    }
    return mapping.get(period)


def _describe(period: int, strength: float, confirmation: float | None) -> str:
    name = _period_to_name(period)
    text = f"Detected {name}" if name else f"Detected pattern repeating every {period} periods"
    text += f" (autocorrelation {strength:.2f})"
    if confirmation is not None and confirmation > PEAK_THRESHOLD:
        text += f", confirmed at lag {period * 2} ({confirmation:.2f})"
    return text


def detect_seasonality(
    values: Sequence[float],
    max_period: int | None = None,
) -> SeasonalityResult:
    """Detect a repeating cycle in a series.

    Lags from 2 to ``max_period`` (default half the series) are scanned; local
    maxima of the autocorrelation above 0.3 are candidate periods and the
    strongest one wins. The autocorrelation at twice the period, when it fits
    in the series, is reported as corroboration.
    """
    n = len(values)
    if n < MIN_POINTS:
        return SeasonalityResult(
            detected=False,
            description=f"Insufficient data for seasonality detection (need {MIN_POINTS} points)",
        )

    series = np.asarray(values, dtype=float)
    if float(np.var(series)) == 0:
        return SeasonalityResult(detected=False, description="No variance in data")

    if max_period is None:
        max_period = n // 2
    max_period = min(max_period, n - 1)

    # acf[lag] for lag in [1, max_period + 1], neighbours included
    last_lag = min(max_period + 1, n - 1)
    acf = {lag: calculate_autocorrelation(series, lag) for lag in range(1, last_lag + 1)}

    best_period: int | None = None
    best_strength = PEAK_THRESHOLD
    for lag in range(2, max_period + 1):
        value = acf[lag]
        if value <= PEAK_THRESHOLD:
            continue
        left = acf[lag - 1]
        right = acf.get(lag + 1)
        if value > left and (right is None or value > right) and value > best_strength:
            best_period = lag
            best_strength = value

    if best_period is None:
        return SeasonalityResult(detected=False, description="No significant periodic pattern")

    confirmation = None
    if best_period * 2 < n:
        confirmation = calculate_autocorrelation(series, best_period * 2)

    return SeasonalityResult(
        detected=True,
        period=best_period,
        strength=best_strength,
        description=_describe(best_period, best_strength, confirmation),
    )
