"""Insight detectors.

Each detector reads a dataset and its ``AnalysisResult`` and returns
``DeepInsight`` objects: distribution anomalies, row-level anomalies,
repeated patterns, correlation readings, trends and segments.
"""

from __future__ import annotations

import re

import numpy as np

from kowalski.analysis.insights.models import (
    DeepInsight,
    Evidence,
    InsightSeverity,
    InsightType,
    Segment,
)
from kowalski.analysis.statistics.descriptive import value_label
from kowalski.analysis.statistics.models import (
    AnalysisResult,
    CategoricalColumnStats,
    NumericColumnStats,
)
from kowalski.core.models.dataset import DataSet, is_number

SKEW_THRESHOLD = 2.0
# Mean position (0 = min, 1 = max) outside this band means values bunch at one end
CONCENTRATION_BAND = (0.2, 0.8)
ROW_ZSCORE_THRESHOLD = 2.5
MAX_LISTED_ROWS = 10
DOMINANCE_RATIO = 0.7
STRONG_CORRELATION = 0.7
WEAK_CORRELATION = 0.1
STRONG_TREND_PERCENT = 20.0
SEGMENT_MIN_ROWS = 10
SEGMENT_MAX_CATEGORIES = 10
SEGMENT_MIN_DIFF_PERCENT = 10.0
MAX_SEGMENTS = 5

_NAME_SPLIT = re.compile(r"[_\s]")
RELATED_NAME_PAIRS = (
    ("price", "cost"),
    ("revenue", "sales"),
    ("qty", "quantity"),
    ("date", "time"),
    ("start", "end"),
    ("min", "max"),
)


def _numeric_stats(analysis: AnalysisResult) -> list[tuple[str, NumericColumnStats]]:
    return [
        (column, stats)
        for column, stats in analysis.statistics.items()
        if isinstance(stats, NumericColumnStats)
    ]


def names_related(name1: str, name2: str) -> bool:
    """Whether two column names suggest the columns should move together."""
    n1, n2 = name1.lower(), name2.lower()
    prefix1 = _NAME_SPLIT.split(n1)[0]
    prefix2 = _NAME_SPLIT.split(n2)[0]
    if len(prefix1) > 3 and prefix1 == prefix2:
        return True
    return any(
        (a in n1 and b in n2) or (b in n1 and a in n2) for a, b in RELATED_NAME_PAIRS
    )


def detect_row_anomalies(dataset: DataSet, analysis: AnalysisResult) -> list[int]:
    """Rows whose mean absolute z-score across numeric columns exceeds 2.5.

    Needs at least two numeric columns with spread, and a row only counts
    when it has numbers in at least two of them.
    """
    columns = []
    for column, stats in _numeric_stats(analysis):
        index = dataset.column_index(column)
        if index is not None and stats.std > 0:
            columns.append((index, stats.mean, stats.std))
    if len(columns) < 2:
        return []

    anomalous = []
    for row_index, row in enumerate(dataset.rows):
        scores = [abs((row[i] - mean) / std) for i, mean, std in columns if is_number(row[i])]
        if len(scores) >= 2 and sum(scores) / len(scores) > ROW_ZSCORE_THRESHOLD:
            anomalous.append(row_index)
    return anomalous


def detect_anomalies(dataset: DataSet, analysis: AnalysisResult) -> list[DeepInsight]:
    insights = []

    for column, stats in _numeric_stats(analysis):
        skew = stats.skewness
        if abs(skew) > SKEW_THRESHOLD:
            if skew > 0:
                shape = "right-skewed"
                detail = "most values are low with some very high outliers"
            else:
                shape = "left-skewed"
                detail = "most values are high with some very low outliers"
            insights.append(
                DeepInsight(
                    id=f"anomaly-skew-{column}",
                    type=InsightType.ANOMALY,
                    severity=InsightSeverity.INFO,
                    confidence=85,
                    title=f'Highly skewed distribution in "{column}"',
                    description=f'"{column}" is heavily {shape} ({skew:.2f}) - {detail}',
                    details=[
                        f"Mean ({stats.mean:.2f}) differs significantly from "
                        f"median ({stats.median:.2f})",
                        "Consider log transformation for analysis or using median instead of mean",
                    ],
                    evidence=[
                        Evidence(label="Skewness", value=f"{skew:.2f}"),
                        Evidence(label="Mean", value=f"{stats.mean:.2f}"),
                        Evidence(label="Median", value=f"{stats.median:.2f}"),
                    ],
                    recommendation=(
                        "Use median for central tendency and consider log transformation"
                    ),
                    affected_columns=[column],
                )
            )

        spread = stats.max - stats.min
        if spread > 0:
            position = (stats.mean - stats.min) / spread
            low, high = CONCENTRATION_BAND
            if position < low or position > high:
                end = "lower" if position < 0.5 else "upper"
                extreme = "minimum" if position < 0.5 else "maximum"
                insights.append(
                    DeepInsight(
                        id=f"anomaly-concentration-{column}",
                        type=InsightType.ANOMALY,
                        severity=InsightSeverity.INFO,
                        confidence=70,
                        title=f'Values concentrated at {end} end of "{column}"',
                        description=f'Most values in "{column}" are clustered near the {extreme}',
                        details=[
                            f"Range: {stats.min:.2f} to {stats.max:.2f}",
                            f"Mean at {position * 100:.0f}% of range",
                        ],
                        evidence=[
                            Evidence(label="Min", value=f"{stats.min:.2f}"),
                            Evidence(label="Max", value=f"{stats.max:.2f}"),
                            Evidence(label="Mean position", value=f"{position * 100:.0f}%"),
                        ],
                        affected_columns=[column],
                    )
                )

    rows = detect_row_anomalies(dataset, analysis)
    if rows:
        listed = ", ".join(str(r) for r in rows[:MAX_LISTED_ROWS])
        if len(rows) > MAX_LISTED_ROWS:
            listed += "..."
        share = len(rows) / dataset.row_count
        insights.append(
            DeepInsight(
                id="anomaly-rows",
                type=InsightType.ANOMALY,
                severity=InsightSeverity.WARNING if share > 0.05 else InsightSeverity.INFO,
                confidence=80,
                title=f"{len(rows)} anomalous rows detected",
                description=(
                    "These rows have unusual combinations of values across multiple columns"
                ),
                details=[
                    f"Row indices: {listed}",
                    "Review these rows for data entry errors or genuinely unusual cases",
                ],
                evidence=[
                    Evidence(label="Anomalous rows", value=len(rows)),
                    Evidence(label="Percentage", value=f"{share * 100:.1f}%"),
                ],
                recommendation="Investigate these rows - they may reveal edge cases or errors",
                affected_rows=rows,
            )
        )

    return insights


def discover_patterns(dataset: DataSet, analysis: AnalysisResult) -> list[DeepInsight]:
    insights = []
    numeric = _numeric_stats(analysis)

    for pos, (col1, stats1) in enumerate(numeric):
        for col2, stats2 in numeric[pos + 1 :]:
            if not (stats1.mean and stats2.mean and stats1.std and stats2.std):
                continue
            mean_ratio = stats1.mean / stats2.mean
            std_ratio = stats1.std / stats2.std
            if abs(mean_ratio - 1) < 0.1 and abs(std_ratio - 1) < 0.2:
                insights.append(
                    DeepInsight(
                        id=f"pattern-similar-{col1}-{col2}",
                        type=InsightType.PATTERN,
                        severity=InsightSeverity.INFO,
                        confidence=75,
                        title=f'"{col1}" and "{col2}" have similar distributions',
                        description="These columns have very similar means and standard deviations",
                        details=[
                            f"{col1}: mean={stats1.mean:.2f}, std={stats1.std:.2f}",
                            f"{col2}: mean={stats2.mean:.2f}, std={stats2.std:.2f}",
                        ],
                        evidence=[
                            Evidence(
                                type="comparison", label="Mean ratio", value=f"{mean_ratio:.2f}"
                            ),
                            Evidence(
                                type="comparison", label="Std ratio", value=f"{std_ratio:.2f}"
                            ),
                        ],
                        recommendation=(
                            "Check if these columns are measuring the same thing "
                            "or are derived from each other"
                        ),
                        affected_columns=[col1, col2],
                    )
                )

    rows = dataset.row_count
    for column, stats in analysis.statistics.items():
        if not isinstance(stats, CategoricalColumnStats) or not stats.top_values or rows == 0:
            continue
        top = stats.top_values[0]
        dominance = top.count / rows
        if dominance <= DOMINANCE_RATIO:
            continue
        overwhelming = dominance > 0.9
        details = [f'"{top.value}": {top.count} rows ({dominance * 100:.1f}%)']
        if overwhelming:
            details.append("This column provides very little discriminating information")
        insights.append(
            DeepInsight(
                id=f"pattern-dominant-{column}",
                type=InsightType.PATTERN,
                severity=InsightSeverity.WARNING if overwhelming else InsightSeverity.INFO,
                confidence=90,
                title=f'"{column}" is dominated by "{top.value}"',
                description=f"{dominance * 100:.0f}% of rows have the same value",
                details=details,
                evidence=[
                    Evidence(label="Dominant value", value=top.value),
                    Evidence(label="Frequency", value=f"{dominance * 100:.0f}%"),
                ],
                recommendation=(
                    "Consider dropping this column - it doesn't differentiate records"
                    if overwhelming
                    else "Focus analysis on the minority values - they may be more interesting"
                ),
                affected_columns=[column],
            )
        )

    return insights


def correlation_insights(analysis: AnalysisResult) -> list[DeepInsight]:
    """Strong correlations, plus weak ones between columns whose names suggest a link."""
    insights = []

    for corr in analysis.correlations:
        if abs(corr.value) <= STRONG_CORRELATION:
            continue
        positive = corr.value > 0
        explained = f"{corr.value**2 * 100:.0f}%"
        insights.append(
            DeepInsight(
                id=f"corr-strong-{corr.column1}-{corr.column2}",
                type=InsightType.CORRELATION,
                severity=InsightSeverity.SUCCESS,
                confidence=90,
                title=(
                    f"Strong {'positive' if positive else 'negative'} correlation: "
                    f'"{corr.column1}" ↔ "{corr.column2}"'
                ),
                description=(
                    f'As "{corr.column1}" increases, "{corr.column2}" tends to '
                    f"{'increase' if positive else 'decrease'}"
                ),
                details=[
                    f"Correlation coefficient: {corr.value:.3f}",
                    f"This explains {explained} of the variance",
                ],
                evidence=[
                    Evidence(label="Correlation", value=f"{corr.value:.3f}"),
                    Evidence(label="R²", value=explained),
                ],
                recommendation=(
                    "Investigate causality - does one drive the other, or is there a common cause?"
                ),
                affected_columns=[corr.column1, corr.column2],
            )
        )

    for corr in analysis.correlations:
        if abs(corr.value) >= WEAK_CORRELATION or not names_related(corr.column1, corr.column2):
            continue
        insights.append(
            DeepInsight(
                id=f"corr-surprise-{corr.column1}-{corr.column2}",
                type=InsightType.ANOMALY,
                severity=InsightSeverity.INFO,
                confidence=60,
                title=f'Surprisingly weak correlation: "{corr.column1}" ↔ "{corr.column2}"',
                description="These columns might be expected to correlate but don't",
                details=[
                    f"Correlation: {corr.value:.3f} (essentially no relationship)",
                    "This could indicate independent factors or data issues",
                ],
                evidence=[Evidence(label="Correlation", value=f"{corr.value:.3f}")],
                affected_columns=[corr.column1, corr.column2],
            )
        )

    return insights


def trend_insights(analysis: AnalysisResult) -> list[DeepInsight]:
    insights = []
    for trend in analysis.trends:
        strong = abs(trend.change_percent) > STRONG_TREND_PERCENT
        upward = trend.direction == "up"
        sign = "+" if trend.change_percent > 0 else ""
        insights.append(
            DeepInsight(
                id=f"trend-{trend.column}",
                type=InsightType.TREND,
                severity=InsightSeverity.WARNING if strong else InsightSeverity.INFO,
                confidence=75,
                title=f'{"Upward" if upward else "Downward"} trend in "{trend.column}"',
                description=trend.description
                or f"Values {'increasing' if upward else 'decreasing'} over time",
                details=[f"Change: {sign}{trend.change_percent:.1f}%"],
                evidence=[
                    Evidence(label="Direction", value=trend.direction),
                    Evidence(label="Change", value=f"{trend.change_percent:.1f}%"),
                ],
                recommendation=(
                    "Investigate what's driving this significant change"
                    if strong
                    else "Monitor this trend over time"
                ),
                affected_columns=[trend.column],
            )
        )
    return insights


def find_segments(dataset: DataSet, analysis: AnalysisResult) -> list[Segment]:
    """Category values whose rows sit more than 10% off the column mean.

    Only categorical columns with 2 to 10 categories are split, each segment
    needs at least ten rows, and the first three numeric columns are compared.
    """
    segments = []
    numeric = _numeric_stats(analysis)[:3]
    rows = dataset.row_count

    for column, stats in analysis.statistics.items():
        if not isinstance(stats, CategoricalColumnStats) or not stats.top_values:
            continue
        if not 2 <= stats.unique_count <= SEGMENT_MAX_CATEGORIES:
            continue
        index = dataset.column_index(column)
        if index is None:
            continue

        for top in stats.top_values[:5]:
            members = [
                row for row in dataset.rows
                if row[index] is not None and value_label(row[index]) == top.value
            ]
            if len(members) < SEGMENT_MIN_ROWS:
                continue

            characteristics = []
            for numeric_column, numeric_stats in numeric:
                numeric_index = dataset.column_index(numeric_column)
                if numeric_index is None or numeric_stats.mean == 0:
                    continue
                values = [row[numeric_index] for row in members if is_number(row[numeric_index])]
                if not values:
                    continue
                diff = (float(np.mean(values)) - numeric_stats.mean) / numeric_stats.mean * 100
                if abs(diff) > SEGMENT_MIN_DIFF_PERCENT:
                    direction = "Higher" if diff > 0 else "Lower"
                    sign = "+" if diff > 0 else ""
                    characteristics.append(
                        f"{direction} {numeric_column} ({sign}{diff:.0f}% vs average)"
                    )

            if characteristics:
                segments.append(
                    Segment(
                        name=f"{column}: {top.value}",
                        description=(
                            f"{top.count} rows ({top.count / rows * 100:.1f}%) "
                            f'where {column} = "{top.value}"'
                        ),
                        size=top.count,
                        characteristics=characteristics,
                        distinctive_features=characteristics[:2],
                    )
                )

    return segments[:MAX_SEGMENTS]


def segment_to_insight(segment: Segment) -> DeepInsight:
    return DeepInsight(
        id=f"segment-{segment.name}",
        type=InsightType.SEGMENT,
        severity=InsightSeverity.INFO,
        confidence=70,
        title=f"Segment: {segment.name}",
        description=segment.description,
        details=segment.characteristics,
        evidence=[Evidence(label="Size", value=segment.size)],
    )
