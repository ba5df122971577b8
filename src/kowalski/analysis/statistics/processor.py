"""Dataset-level statistics pass.

``analyze_dataset`` profiles every column, counts nulls, uniques and
duplicate rows, correlates every pair of numeric columns, measures
categorical associations, detects trends and flags IQR outliers.
"""

from __future__ import annotations

import math
from typing import Any

from scipy import stats as scipy_stats

from kowalski.analysis.correlation.algorithms.categorical import calculate_cramers_v
from kowalski.analysis.correlation.algorithms.mixed import calculate_point_biserial
from kowalski.analysis.correlation.algorithms.numeric import (
    aligned_numeric_pairs,
    calculate_correlation,
    get_correlation_strength,
)
from kowalski.analysis.statistics.descriptive import calculate_categorical_stats, calculate_stats
from kowalski.analysis.statistics.models import (
    AnalysisResult,
    Association,
    CategoricalColumnStats,
    ColumnStats,
    Correlation,
    DataSummary,
    NumericColumnStats,
    Trend,
)
from kowalski.analysis.statistics.outliers import find_iqr_outliers
from kowalski.analysis.temporal.trend import describe_trend, detect_trend
from kowalski.core.logging import get_logger
from kowalski.core.models.base import ColumnType
from kowalski.core.models.dataset import DataSet, is_number

logger = get_logger(__name__)

MIN_CORRELATION_PAIRS = 3
# Categorical columns outside this range are ignored for associations
MIN_ASSOCIATION_CATEGORIES = 2
MAX_ASSOCIATION_CATEGORIES = 20
MIN_TREND_POINTS = 5
# Stable trends are still reported past this absolute change
TREND_CHANGE_FLOOR = 5.0


def _cell_key(value: Any) -> tuple[str, Any]:
    """Type-tagged identity of a cell for duplicate-row detection."""
    if value is None:
        return ("null", None)
    if is_number(value):
        return ("number", float(value))
    if isinstance(value, float) and math.isnan(value):
        return ("nan", None)
    return ("string", value)


def count_duplicate_rows(rows: list[list[Any]]) -> int:
    """Rows minus distinct row contents."""
    distinct = {tuple(_cell_key(v) for v in row) for row in rows}
    return len(rows) - len(distinct)


def _skewness(numbers: list[float], std: float) -> float:
    if len(numbers) < 3 or std == 0:
        return 0.0
    value = float(scipy_stats.skew(numbers, bias=True))
    return value if math.isfinite(value) else 0.0


def _column_stats(
    values: list[Any], numbers: list[float], null_count: int, numeric: bool
) -> ColumnStats:
    if numeric:
        stats = calculate_stats(numbers)
        return NumericColumnStats(
            count=stats.count,
            null_count=null_count,
            mean=stats.mean,
            median=stats.median,
            min=stats.min,
            max=stats.max,
            std=stats.std,
            q1=stats.percentiles.p25,
            q3=stats.percentiles.p75,
            percentiles=stats.percentiles,
            skewness=_skewness(numbers, stats.std),
        )
    cat = calculate_categorical_stats(values)
    return CategoricalColumnStats(
        count=cat.count,
        null_count=cat.null_count,
        unique_count=cat.unique_count,
        top_values=cat.top_values,
    )


def analyze_dataset(dataset: DataSet) -> AnalysisResult:
    """Profile a dataset.

    Columns tagged as number get numeric statistics; everything else is
    profiled categorically. Correlations use only rows where both cells are
    numbers and need at least three such rows.
    """
    columns = dataset.columns
    column_types = dataset.column_types
    total_cells = len(dataset.rows) * len(columns)

    summary = DataSummary(total_rows=dataset.row_count, total_columns=len(columns))
    statistics: dict[str, ColumnStats] = {}
    numeric_indices: list[int] = []
    total_nulls = 0

    for index, column in enumerate(columns):
        values = dataset.column_values(index)
        null_count = sum(1 for v in values if v is None)
        total_nulls += null_count
        summary.null_counts[column] = null_count
        summary.unique_counts[column] = len({_cell_key(v) for v in values if v is not None})

        numeric = column_types[index] == ColumnType.NUMBER
        if numeric:
            numeric_indices.append(index)
        numbers = dataset.numeric_column_values(index) if numeric else []
        statistics[column] = _column_stats(values, numbers, null_count, numeric)

    summary.numeric_columns = len(numeric_indices)
    summary.categorical_columns = len(columns) - len(numeric_indices)
    summary.missing_percent = total_nulls / total_cells if total_cells > 0 else 0.0
    summary.duplicate_rows = count_duplicate_rows(dataset.rows)

    correlations = _pairwise_correlations(dataset, numeric_indices)
    associations = _associations(dataset, numeric_indices, statistics)
    trends = _trends(dataset, numeric_indices)

    outliers = []
    for index in numeric_indices:
        column_stats = statistics[columns[index]]
        if isinstance(column_stats, NumericColumnStats):
            cells = dataset.column_values(index)
            outliers.extend(find_iqr_outliers(columns[index], cells, column_stats))
    outliers.sort(key=lambda o: abs(o.zscore), reverse=True)

    logger.debug(
        "dataset_analyzed",
        dataset=dataset.name,
        rows=dataset.row_count,
        numeric_columns=summary.numeric_columns,
        correlations=len(correlations),
        associations=len(associations),
        trends=len(trends),
        outliers=len(outliers),
    )

    return AnalysisResult(
        summary=summary,
        statistics=statistics,
        correlations=correlations,
        associations=associations,
        trends=trends,
        outliers=outliers,
    )


def _pairwise_correlations(dataset: DataSet, numeric_indices: list[int]) -> list[Correlation]:
    correlations = []
    for pos, i in enumerate(numeric_indices):
        for j in numeric_indices[pos + 1 :]:
            xs, ys = aligned_numeric_pairs(dataset.column_values(i), dataset.column_values(j))
            if len(xs) < MIN_CORRELATION_PAIRS:
                continue
            value = calculate_correlation(xs, ys)
            correlations.append(
                Correlation(
                    column1=dataset.columns[i],
                    column2=dataset.columns[j],
                    value=value,
                    strength=get_correlation_strength(value),
                )
            )
    correlations.sort(key=lambda c: abs(c.value), reverse=True)
    return correlations


def _association_columns(
    dataset: DataSet, numeric_indices: list[int], statistics: dict[str, ColumnStats]
) -> list[int]:
    """Categorical columns with a usable number of categories that are not all-unique."""
    selected = []
    for index, column in enumerate(dataset.columns):
        if index in numeric_indices:
            continue
        stats = statistics[column]
        if not isinstance(stats, CategoricalColumnStats):
            continue
        non_null = stats.count - stats.null_count
        if not MIN_ASSOCIATION_CATEGORIES <= stats.unique_count <= MAX_ASSOCIATION_CATEGORIES:
            continue
        if stats.unique_count == non_null:
            continue
        selected.append(index)
    return selected


def _associations(
    dataset: DataSet, numeric_indices: list[int], statistics: dict[str, ColumnStats]
) -> list[Association]:
    """Cramér's V between categorical pairs, point-biserial for numeric x categorical."""
    categorical_indices = _association_columns(dataset, numeric_indices, statistics)
    associations = []

    for pos, i in enumerate(categorical_indices):
        for j in categorical_indices[pos + 1 :]:
            value = calculate_cramers_v(dataset.column_values(i), dataset.column_values(j))
            associations.append(
                Association(
                    column1=dataset.columns[i],
                    column2=dataset.columns[j],
                    value=value,
                    method="cramers_v",
                    strength=get_correlation_strength(value),
                )
            )

    for i in numeric_indices:
        for j in categorical_indices:
            value = calculate_point_biserial(dataset.column_values(i), dataset.column_values(j))
            associations.append(
                Association(
                    column1=dataset.columns[i],
                    column2=dataset.columns[j],
                    value=value,
                    method="point_biserial",
                    strength=get_correlation_strength(value),
                )
            )

    associations.sort(key=lambda a: abs(a.value), reverse=True)
    return associations


def _trends(dataset: DataSet, numeric_indices: list[int]) -> list[Trend]:
    trends = []
    for index in numeric_indices:
        values = dataset.numeric_column_values(index)
        if len(values) < MIN_TREND_POINTS:
            continue
        trend = detect_trend(values)
        if trend.direction != "stable" or abs(trend.change_percent) > TREND_CHANGE_FLOOR:
            column = dataset.columns[index]
            trends.append(
                Trend(
                    column=column,
                    direction=trend.direction,
                    change_percent=trend.change_percent,
                    description=describe_trend(column, trend),
                )
            )
    return trends
