"""EDA report: per-variable summaries, findings and a synthetic-data verdict.

``generate_eda_report`` reads an ``AnalysisResult`` together with the
dataset it came from and produces a narrative ``EDAReport``. Generated
practice data is flagged when at least two independent checks agree
(no missing values at scale, flat correlations, perfectly uniform
percentages, identical group means, random-looking text).
"""

from __future__ import annotations

import re
from collections import defaultdict

import numpy as np

from kowalski.analysis.statistics.descriptive import value_label
from kowalski.analysis.statistics.models import (
    AnalysisResult,
    CategoricalColumnStats,
    EDAReport,
    NumericColumnStats,
    ReportFinding,
    ReportOverview,
    VariableSummary,
)
from kowalski.core.logging import get_logger
from kowalski.core.models.base import ColumnType
from kowalski.core.models.dataset import DataSet, is_number

logger = get_logger(__name__)

# Datasets above this many rows are expected to have some mess in them
LARGE_DATASET_ROWS = 1000
# Per-variable notes about spread or uniqueness need at least this many rows
MIN_ROWS_FOR_NOTES = 100
MIN_SYNTHETIC_REASONS = 2
_GARBAGE_TEXT = re.compile(r"^[A-Za-z0-9]+$")
GARBAGE_MIN_LENGTH = 20
GARBAGE_NOTE = "Looks like random/garbage data"
UNIFORM_BUCKETS = 5
UNIFORM_TOLERANCE = 0.05


def _is_percentage_range(stats: NumericColumnStats) -> bool:
    return stats.min == 0 and stats.max == 100


def summarize_variable(
    name: str,
    column_type: ColumnType,
    stats: NumericColumnStats | CategoricalColumnStats | None,
    unique_count: int,
    row_count: int,
) -> VariableSummary:
    """Describe one column and attach a note when something stands out."""
    if column_type == ColumnType.NUMBER:
        description, notable = "", None
        if isinstance(stats, NumericColumnStats):
            cv = stats.std / abs(stats.mean) if stats.mean else 0.0
            description = (
                f"μ={stats.mean:.2f}, σ={stats.std:.2f}, "
                f"range=[{value_label(stats.min)}-{value_label(stats.max)}]"
            )
            if _is_percentage_range(stats):
                notable = "Looks like a percentage/rate column"
            elif cv < 0.1 and row_count > MIN_ROWS_FOR_NOTES:
                notable = "Very low variance - values are tightly clustered"
            elif cv > 2:
                notable = "High variance - widely spread values"
        return VariableSummary(
            name=name,
            type="numeric",
            unique_count=unique_count,
            description=description,
            notable=notable,
        )

    notable = None
    if isinstance(stats, CategoricalColumnStats) and stats.top_values:
        top = stats.top_values[0].value
        if len(top) > GARBAGE_MIN_LENGTH and _GARBAGE_TEXT.match(top):
            notable = GARBAGE_NOTE
    if unique_count == row_count and row_count > MIN_ROWS_FOR_NOTES:
        notable = "All unique values - possibly an ID column or garbage"
    return VariableSummary(
        name=name,
        type="categorical",
        unique_count=unique_count,
        description=f"{unique_count} unique values",
        notable=notable,
    )


def _garbage_columns(variables: list[VariableSummary]) -> list[str]:
    return [v.name for v in variables if v.notable == GARBAGE_NOTE]


def _uniform_deviation(values: list[float]) -> float:
    """Largest relative gap between a 20%-wide bucket count and the mean count."""
    buckets = np.zeros(UNIFORM_BUCKETS)
    for v in values:
        buckets[min(UNIFORM_BUCKETS - 1, int(v // 20))] += 1
    expected = len(values) / UNIFORM_BUCKETS
    return float(np.max(np.abs(buckets - expected)) / expected)


def _group_means(dataset: DataSet, category_index: int, numeric_index: int) -> list[float]:
    groups: dict[str, list[float]] = defaultdict(list)
    for row in dataset.rows:
        number = row[numeric_index]
        if is_number(number):
            label = "null" if row[category_index] is None else value_label(row[category_index])
            groups[label].append(float(number))
    return [float(np.mean(values)) for values in groups.values()]


def detect_synthetic_data(
    dataset: DataSet,
    analysis: AnalysisResult,
    variables: list[VariableSummary],
) -> list[str]:
    """Reasons to believe the data was generated rather than collected.

    Two or more reasons make the dataset synthetic.
    """
    reasons: list[str] = []
    rows = dataset.row_count
    large = rows > LARGE_DATASET_ROWS

    if analysis.summary.missing_percent == 0 and large:
        reasons.append(
            "Zero missing values in a large dataset "
            "(real data almost always has some missing values)"
        )

    if len(analysis.correlations) >= 3:
        max_corr = max(abs(c.value) for c in analysis.correlations)
        if max_corr < 0.1:
            reasons.append(
                f"Near-zero correlations across all variables (max: {max_corr:.3f}) "
                "- real data usually has some relationships"
            )

    numeric = [
        (column, stats)
        for column, stats in analysis.statistics.items()
        if isinstance(stats, NumericColumnStats)
    ]
    categorical = [
        column
        for column, stats in analysis.statistics.items()
        if isinstance(stats, CategoricalColumnStats)
    ]

    if large:
        for column, stats in numeric:
            index = dataset.column_index(column)
            if not _is_percentage_range(stats) or index is None:
                continue
            values = dataset.numeric_column_values(index)
            if values and _uniform_deviation(values) < UNIFORM_TOLERANCE:
                reasons.append(
                    f"{column} has suspiciously perfect uniform distribution "
                    "(each 20% bucket has ~equal counts)"
                )

        # Group means should move with the category in collected data
        for category in categorical[:2]:
            for column, stats in numeric[:1]:
                category_index = dataset.column_index(category)
                numeric_index = dataset.column_index(column)
                if category_index is None or numeric_index is None:
                    continue
                means = _group_means(dataset, category_index, numeric_index)
                if len(means) < 3:
                    continue
                overall = float(np.mean(means))
                max_diff = max(abs(m - overall) for m in means)
                if max_diff < 1 and stats.std > 10:
                    reasons.append(
                        f"{column} has virtually identical means across all {category} groups "
                        f"({max_diff:.2f} max difference) - real data shows variation"
                    )

    garbage = _garbage_columns(variables)
    if garbage:
        reasons.append(f"{', '.join(garbage)} contain random characters, not real data")

    return reasons


def _findings(
    analysis: AnalysisResult,
    variables: list[VariableSummary],
    is_synthetic: bool,
) -> list[ReportFinding]:
    findings: list[ReportFinding] = []
    missing = analysis.summary.missing_percent

    if missing == 0:
        findings.append(
            ReportFinding(
                category="warning" if is_synthetic else "quality",
                title="Perfect Data Completeness",
                description="No missing values at all"
                + (" - suspiciously perfect for real-world data" if is_synthetic else ""),
                severity="warning" if is_synthetic else "success",
            )
        )
    elif missing > 0.1:
        findings.append(
            ReportFinding(
                category="warning",
                title="Missing Data Alert",
                description=f"{missing * 100:.1f}% of values are missing - may need imputation",
                severity="warning",
            )
        )

    correlations = analysis.correlations
    if correlations:
        strong = [c for c in correlations if abs(c.value) > 0.5]
        top = correlations[0]
        if strong:
            findings.append(
                ReportFinding(
                    category="finding",
                    title="Strong Correlations Found",
                    description=(
                        f"{len(strong)} variable pairs have correlation > 0.5. "
                        f"Strongest: {top.column1} ↔ {top.column2} ({top.value:.2f})"
                    ),
                    severity="success",
                    evidence=[f"{c.column1} ↔ {c.column2}: {c.value:.2f}" for c in strong[:3]],
                )
            )
        elif is_synthetic:
            findings.append(
                ReportFinding(
                    category="anomaly",
                    title="Zero Meaningful Correlations",
                    description=(
                        f"All correlations are near zero (max: {abs(top.value):.3f}). "
                        "Nothing predicts anything - classic sign of random data."
                    ),
                    severity="warning",
                )
            )

    significant = [t for t in analysis.trends if abs(t.change_percent) > 5]
    if significant:
        findings.append(
            ReportFinding(
                category="finding",
                title="Significant Trends Detected",
                description=", ".join(
                    f"{t.column}: {'↑' if t.direction == 'up' else '↓'} "
                    f"{abs(t.change_percent):.1f}%"
                    for t in significant
                ),
                severity="info",
            )
        )

    if analysis.outliers:
        count = len(analysis.outliers)
        findings.append(
            ReportFinding(
                category="anomaly",
                title="Outliers Detected",
                description=f"Found {count} outlier values that fall outside expected ranges",
                severity="warning" if count > 10 else "info",
            )
        )

    for column, stats in analysis.statistics.items():
        if not isinstance(stats, CategoricalColumnStats) or not stats.top_values:
            continue
        total = sum(v.count for v in stats.top_values)
        top_percent = stats.top_values[0].count / total * 100
        if top_percent > 60:
            findings.append(
                ReportFinding(
                    category="pattern",
                    title=f"Imbalanced: {column}",
                    description=(
                        f'"{stats.top_values[0].value}" dominates with '
                        f"{top_percent:.0f}% of values"
                    ),
                    severity="info",
                )
            )

    garbage = _garbage_columns(variables)
    if garbage:
        findings.append(
            ReportFinding(
                category="warning",
                title="Garbage Data Detected",
                description=f"{', '.join(garbage)} contain random characters, not usable data",
                severity="warning",
            )
        )

    return findings


def _interpretation(analysis: AnalysisResult, is_synthetic: bool, reasons: list[str]) -> str:
    if is_synthetic:
        numbered = "\n".join(f"{i}. {reason}" for i, reason in enumerate(reasons, start=1))
        return (
            "This looks like **synthetically generated data**, probably for practice "
            f"or testing purposes. Here's why:\n\n{numbered}\n\n"
            "Collected data shows natural variation between groups and over time. "
            "Here every metric is flat."
        )

    parts = []
    missing = analysis.summary.missing_percent
    if missing > 0.05:
        parts.append(f"The data has {missing * 100:.1f}% missing values that may need handling.")
    if analysis.correlations and abs(analysis.correlations[0].value) > 0.5:
        top = analysis.correlations[0]
        parts.append(
            f"There's a strong relationship between {top.column1} and {top.column2} "
            f"({top.value:.2f}) worth investigating."
        )
    if not parts:
        parts.append("The data looks reasonably clean and ready for analysis.")
    return " ".join(parts)


def _bottom_line(is_synthetic: bool, findings: list[ReportFinding]) -> str:
    if is_synthetic:
        return (
            "Data is clean but likely synthetic. Fine for practice, "
            "but don't draw real conclusions from it."
        )
    warnings = [f for f in findings if f.severity in ("warning", "critical")]
    if len(warnings) > 2:
        return (
            "Several data quality issues need attention before analysis. "
            f"Address the {len(warnings)} warnings first."
        )
    if any(f.severity == "success" for f in findings):
        return "Data quality looks good. Ready for deeper analysis."
    return "Data loaded successfully. Select an analysis type to dig deeper."


def generate_eda_report(dataset: DataSet, analysis: AnalysisResult) -> EDAReport:
    """Build the narrative report for a dataset and its statistics pass."""
    column_types = dataset.column_types
    rows = dataset.row_count

    variables = [
        summarize_variable(
            column,
            column_types[index],
            analysis.statistics.get(column),
            analysis.summary.unique_counts.get(column, 0),
            rows,
        )
        for index, column in enumerate(dataset.columns)
    ]

    reasons = detect_synthetic_data(dataset, analysis, variables)
    is_synthetic = len(reasons) >= MIN_SYNTHETIC_REASONS
    findings = _findings(analysis, variables, is_synthetic)

    overview = ReportOverview(
        rows=rows,
        columns=len(dataset.columns),
        numeric_columns=sum(1 for t in column_types if t == ColumnType.NUMBER),
        categorical_columns=sum(1 for t in column_types if t == ColumnType.STRING),
        suspiciously_clean=analysis.summary.missing_percent == 0 and rows > LARGE_DATASET_ROWS,
    )

    logger.debug(
        "eda_report_generated",
        dataset=dataset.name,
        findings=len(findings),
        synthetic=is_synthetic,
    )

    return EDAReport(
        overview=overview,
        variables=variables,
        findings=findings,
        interpretation=_interpretation(analysis, is_synthetic, reasons),
        bottom_line=_bottom_line(is_synthetic, findings),
        is_synthetic=is_synthetic,
        synthetic_reasons=reasons,
    )


_SEVERITY_ICONS = {"warning": "⚠️", "critical": "⚠️", "success": "✓"}


def format_eda_report(report: EDAReport) -> str:
    """Markdown-flavoured text of an EDA report."""
    overview = report.overview
    clean_note = (
        " No missing values at all, which is nice... suspiciously nice, actually."
        if overview.suspiciously_clean
        else ""
    )
    lines = [
        "## EDA Summary",
        "",
        "**The Basics**",
        "",
        f"You've got {overview.rows:,} rows across {overview.columns} columns.{clean_note}",
        "",
        "**Key Variables:**",
    ]
    for v in report.variables:
        notable = f" ← {v.notable}" if v.notable else ""
        lines.append(f"- **{v.name}** ({v.type}): {v.description}{notable}")
    lines.append("")

    if report.findings:
        lines += ['**The "Interesting" Findings**', ""]
        for f in report.findings:
            icon = _SEVERITY_ICONS.get(f.severity, "•")
            lines.append(f"{icon} **{f.title}**: {f.description}")
            lines += [f"   - {e}" for e in f.evidence]
        lines.append("")

    lines += [
        "**What This Tells Me**",
        "",
        report.interpretation,
        "",
        "**Bottom Line**",
        "",
        report.bottom_line,
    ]
    return "\n".join(lines)
