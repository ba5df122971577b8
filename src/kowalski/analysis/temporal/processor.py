"""Time-series pass over every numeric column of a dataset."""

from __future__ import annotations

from kowalski.analysis.temporal.change_points import detect_change_points
from kowalski.analysis.temporal.models import TimeSeriesAnalysis
from kowalski.analysis.temporal.seasonality import detect_seasonality
from kowalski.core.logging import get_logger
from kowalski.core.models.base import ColumnType
from kowalski.core.models.dataset import DataSet

logger = get_logger(__name__)


def analyze_time_series(dataset: DataSet, min_points: int = 20) -> TimeSeriesAnalysis:
    """Change points and seasonality for numeric columns with enough values.

    Row order is treated as time order. Only columns with at least one
    finding appear in the result.
    """
    analysis = TimeSeriesAnalysis()

    for index, (column, column_type) in enumerate(
        zip(dataset.columns, dataset.column_types, strict=True)
    ):
        if column_type != ColumnType.NUMBER:
            continue
        values = dataset.numeric_column_values(index)
        if len(values) < min_points:
            continue

        change_points = detect_change_points(values)
        if change_points:
            analysis.change_points[column] = change_points

        seasonality = detect_seasonality(values)
        if seasonality.detected:
            analysis.seasonality[column] = seasonality

    logger.debug(
        "time_series_analyzed",
        dataset=dataset.name,
        columns_with_change_points=len(analysis.change_points),
        columns_with_seasonality=len(analysis.seasonality),
    )
    return analysis
