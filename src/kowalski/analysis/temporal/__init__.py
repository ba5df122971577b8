"""Temporal pattern detection over row-ordered numeric series.

- Trends (least-squares slope, first vs last quarter)
- Change points (pooled-variance mean shifts)
- Seasonality (autocorrelation peaks)
"""

from kowalski.analysis.temporal.change_points import detect_change_points
from kowalski.analysis.temporal.models import (
    ChangePoint,
    SeasonalityResult,
    TimeSeriesAnalysis,
    TrendResult,
)
from kowalski.analysis.temporal.processor import analyze_time_series
from kowalski.analysis.temporal.seasonality import calculate_autocorrelation, detect_seasonality
from kowalski.analysis.temporal.trend import describe_trend, detect_trend

__all__ = [
    "ChangePoint",
    "SeasonalityResult",
    "TimeSeriesAnalysis",
    "TrendResult",
    "analyze_time_series",
    "calculate_autocorrelation",
    "describe_trend",
    "detect_change_points",
    "detect_seasonality",
    "detect_trend",
]
