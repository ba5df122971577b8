"""Plain-text findings derived from an analysis result."""

from __future__ import annotations

from kowalski.analysis.statistics.models import (
    AnalysisResult,
    CategoricalColumnStats,
    NumericColumnStats,
)
from kowalski.analysis.statistics.outliers import iqr_fence
from kowalski.core.models.dataset import DataSet

MAX_INSIGHTS = 5


def generate_insights(dataset: DataSet, analysis: AnalysisResult) -> list[str]:
    """Up to five short findings, most actionable first."""
    insights: list[str] = []
    summary = analysis.summary

    missing = sorted(
        ((column, count) for column, count in summary.null_counts.items() if count > 0),
        key=lambda item: item[1],
        reverse=True,
    )
    if missing and summary.total_rows > 0:
        column, count = missing[0]
        percent = count / summary.total_rows * 100
        insights.append(f'"{column}" has {percent:.1f}% missing values - consider data cleaning')

    strong = next((c for c in analysis.correlations if c.strength == "strong"), None)
    if strong is not None:
        sign = "positive" if strong.value > 0 else "negative"
        insights.append(
            f'Strong {sign} correlation ({strong.value:.2f}) between '
            f'"{strong.column1}" and "{strong.column2}"'
        )

    significant = [t for t in analysis.trends if abs(t.change_percent) > 10]
    insights.extend(t.description for t in significant[:2])

    for column, stats in analysis.statistics.items():
        if isinstance(stats, NumericColumnStats) and stats.count > 0:
            lower, upper = iqr_fence(stats.percentiles.p25, stats.percentiles.p75)
            if stats.min < lower or stats.max > upper:
                insights.append(
                    f'"{column}" may contain outliers (range: {stats.min:.0f} - {stats.max:.0f})'
                )
                break

    for column, stats in analysis.statistics.items():
        if isinstance(stats, CategoricalColumnStats) and stats.top_values and stats.count > 0:
            top = stats.top_values[0]
            percent = top.count / stats.count * 100
            if percent > 50:
                insights.append(f'"{column}" is dominated by "{top.value}" ({percent:.1f}%)')
                break

    return insights[:MAX_INSIGHTS]
