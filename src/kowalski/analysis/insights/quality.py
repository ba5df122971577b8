"""Data quality scan.

Starts every dataset at 100 and deducts for missing values (up to 20 points
per column), inconsistent spellings of a category (5 points per column) and
duplicate rows (up to 15 points). Round-number and outlier findings are
reported but cost nothing.
"""

from __future__ import annotations

import math
from collections.abc import Sequence

from kowalski.analysis.insights.models import (
    DataQualityReport,
    DeepInsight,
    Evidence,
    InsightSeverity,
    InsightType,
    QualityIssue,
    QualityIssueType,
)
from kowalski.analysis.statistics.models import (
    AnalysisResult,
    CategoricalColumnStats,
    NumericColumnStats,
)
from kowalski.analysis.statistics.processor import count_duplicate_rows
from kowalski.core.models.dataset import DataSet

MAX_MISSING_PENALTY = 20.0
INCONSISTENT_VALUES_PENALTY = 5.0
MAX_DUPLICATE_PENALTY = 15.0
ROUND_NUMBER_RATIO = 0.8
# Categorical columns this close to all-unique look like identifiers
NEAR_UNIQUE_RATIO = 0.9
NEAR_UNIQUE_MIN_ROWS = 100


def _column_rows(stats: NumericColumnStats | CategoricalColumnStats) -> int:
    if isinstance(stats, NumericColumnStats):
        return stats.count + stats.null_count
    return stats.count


def round_number_ratio(values: Sequence[float]) -> float:
    """Share of values that are multiples of 5."""
    if not values:
        return 0.0
    return sum(1 for v in values if v % 5 == 0) / len(values)


def find_near_duplicates(values: Sequence[str]) -> list[tuple[str, str]]:
    """Pairs of distinct values that only differ in case or surrounding whitespace."""
    pairs = []
    for i, first in enumerate(values):
        for second in values[i + 1 :]:
            if first != second and first.strip().lower() == second.strip().lower():
                pairs.append((first, second))
    return pairs


def _quality_summary(score: int) -> str:
    if score >= 90:
        return "Excellent data quality - ready for analysis"
    if score >= 70:
        return "Good data quality with minor issues to address"
    if score >= 50:
        return "Moderate data quality - address issues before drawing conclusions"
    return "Significant data quality issues - clean data before analysis"


def analyze_data_quality(dataset: DataSet, analysis: AnalysisResult) -> DataQualityReport:
    """Score a dataset from 0 to 100 and list what cost it points."""
    issues: list[QualityIssue] = []
    score = 100.0
    total_rows = dataset.row_count

    outliers_by_column: dict[str, int] = {}
    for outlier in analysis.outliers:
        outliers_by_column[outlier.column] = outliers_by_column.get(outlier.column, 0) + 1

    for column, stats in analysis.statistics.items():
        rows = _column_rows(stats)

        if stats.null_count > 0 and rows > 0:
            missing_pct = stats.null_count / rows * 100
            if missing_pct > 20:
                severity = InsightSeverity.CRITICAL
            elif missing_pct > 5:
                severity = InsightSeverity.WARNING
            else:
                severity = InsightSeverity.INFO
            suggestion = (
                f'Consider dropping "{column}" or investigating why data is missing'
                if missing_pct > 50
                else f'Impute missing values or filter rows with missing "{column}"'
            )
            issues.append(
                QualityIssue(
                    type=QualityIssueType.MISSING,
                    column=column,
                    severity=severity,
                    description=f'{missing_pct:.1f}% missing values in "{column}"',
                    affected_count=stats.null_count,
                    suggestion=suggestion,
                )
            )
            score -= min(missing_pct, MAX_MISSING_PENALTY)

        if isinstance(stats, NumericColumnStats):
            index = dataset.column_index(column)
            values = dataset.numeric_column_values(index) if index is not None else []
            ratio = round_number_ratio(values)
            if ratio > ROUND_NUMBER_RATIO:
                issues.append(
                    QualityIssue(
                        type=QualityIssueType.SUSPICIOUS,
                        column=column,
                        severity=InsightSeverity.INFO,
                        description=f'{ratio * 100:.0f}% of "{column}" values are round numbers',
                        affected_count=math.floor(total_rows * ratio),
                        suggestion="This might indicate estimated or placeholder values",
                    )
                )

            outlier_count = outliers_by_column.get(column, 0)
            outlier_rows = analysis.summary.total_rows or total_rows
            if outlier_count > 0 and outlier_rows > 0:
                outlier_pct = outlier_count / outlier_rows * 100
                issues.append(
                    QualityIssue(
                        type=QualityIssueType.OUTLIER,
                        column=column,
                        severity=(
                            InsightSeverity.WARNING if outlier_pct > 5 else InsightSeverity.INFO
                        ),
                        description=(
                            f'{outlier_count} outliers detected in "{column}" '
                            f"({outlier_pct:.1f}%)"
                        ),
                        affected_count=outlier_count,
                        suggestion=(
                            "Review outliers - they may be errors or "
                            "genuinely unusual observations"
                        ),
                    )
                )

        elif stats.top_values:
            if rows > NEAR_UNIQUE_MIN_ROWS and stats.unique_count / rows > NEAR_UNIQUE_RATIO:
                issues.append(
                    QualityIssue(
                        type=QualityIssueType.INCONSISTENT,
                        column=column,
                        severity=InsightSeverity.WARNING,
                        description=(
                            f'"{column}" has {stats.unique_count} unique values for {rows} rows '
                            "- might be an ID column or have data issues"
                        ),
                        affected_count=stats.unique_count,
                        suggestion=(
                            "Check if this should be categorical or if there are "
                            "typos/variations"
                        ),
                    )
                )

            near = find_near_duplicates([v.value for v in stats.top_values])
            if near:
                shown = ", ".join(f'"{a}" vs "{b}"' for a, b in near[:3])
                issues.append(
                    QualityIssue(
                        type=QualityIssueType.INCONSISTENT,
                        column=column,
                        severity=InsightSeverity.WARNING,
                        description=f'Possible inconsistent values in "{column}": {shown}',
                        affected_count=len(near) * 2,
                        suggestion="Standardize these values for accurate analysis",
                    )
                )
                score -= INCONSISTENT_VALUES_PENALTY

    duplicates = count_duplicate_rows(dataset.rows)
    if duplicates > 0:
        dupe_pct = duplicates / total_rows * 100
        issues.append(
            QualityIssue(
                type=QualityIssueType.DUPLICATE,
                severity=InsightSeverity.CRITICAL if dupe_pct > 10 else InsightSeverity.WARNING,
                description=f"{duplicates} duplicate rows detected ({dupe_pct:.1f}%)",
                affected_count=duplicates,
                suggestion="Remove duplicates unless they represent valid repeated measurements",
            )
        )
        score -= min(dupe_pct, MAX_DUPLICATE_PENALTY)

    final = max(0, math.floor(score + 0.5))
    return DataQualityReport(score=final, issues=issues, summary=_quality_summary(final))


def issue_to_insight(issue: QualityIssue) -> DeepInsight:
    unit = "values" if issue.column else "rows"
    return DeepInsight(
        id=f"quality-{issue.type.value}-{issue.column or 'general'}",
        type=InsightType.QUALITY,
        severity=issue.severity,
        confidence=95,
        title=issue.description,
        description=issue.suggestion,
        details=[f"Affected: {issue.affected_count} {unit}"],
        evidence=[Evidence(label="Affected count", value=issue.affected_count)],
        recommendation=issue.suggestion,
        affected_columns=[issue.column] if issue.column else [],
    )
