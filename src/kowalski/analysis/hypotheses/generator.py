"""Hypothesis generation.

Four independent detectors run over a finished ``AnalysisResult``:
correlations, group differences, trends and anomalies. Their hypotheses
are merged, ranked by confidence and truncated.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator
from itertools import count

from kowalski.analysis.hypotheses.groups import comparable_groups, group_by_category
from kowalski.analysis.hypotheses.models import (
    CausalInterpretation,
    Hypothesis,
    HypothesisEvidence,
    HypothesisType,
)
from kowalski.analysis.hypotheses.significance import approximate_t_test, format_p_value
from kowalski.analysis.statistics.models import (
    AnalysisResult,
    CategoricalColumnStats,
    Correlation,
    Outlier,
)
from kowalski.core.logging import get_logger
from kowalski.core.models.base import ColumnType
from kowalski.core.models.dataset import DataSet

logger = get_logger(__name__)

MAX_HYPOTHESES = 10
MAX_CORRELATION_HYPOTHESES = 5
MAX_TREND_HYPOTHESES = 5
MIN_CORRELATION = 0.4
MAX_GROUP_CATEGORIES = 10
MIN_GROUP_DIFFERENCE_PERCENT = 10.0
MIN_TREND_CHANGE = 5.0
MAX_CONFOUNDERS = 5

CAUSE_KEYWORDS = ("input", "spend", "investment", "effort", "time", "cost")
EFFECT_KEYWORDS = ("output", "revenue", "result", "return", "outcome", "sales")
TIME_KEYWORDS = ("date", "time", "year", "month", "day", "period")
CONFOUNDER_KEYWORDS = ("time", "date", "size", "scale", "population", "region")

TREND_CONFOUNDERS = [
    "Time-related factors (seasonality, business cycles)",
    "External events not captured in data",
    "Changes in data collection methodology",
]

IdFactory = Callable[[], str]


def _has_any(name: str, keywords: tuple[str, ...]) -> bool:
    lowered = name.lower()
    return any(k in lowered for k in keywords)


def determine_interpretation(column1: str, column2: str) -> CausalInterpretation:
    """Guess a causal direction from column names; correlational by default."""
    if _has_any(column1, CAUSE_KEYWORDS) and _has_any(column2, EFFECT_KEYWORDS):
        return CausalInterpretation.CAUSAL
    if _has_any(column2, CAUSE_KEYWORDS) and _has_any(column1, EFFECT_KEYWORDS):
        return CausalInterpretation.REVERSE_CAUSAL
    # Time-like columns come first causally
    if _has_any(column1, TIME_KEYWORDS):
        return CausalInterpretation.CAUSAL
    if _has_any(column2, TIME_KEYWORDS):
        return CausalInterpretation.REVERSE_CAUSAL
    return CausalInterpretation.CORRELATIONAL


def _shared_correlates(column1: str, column2: str, correlations: list[Correlation]) -> list[str]:
    """Columns correlated above 0.3 with both ``column1`` and ``column2``."""
    with1: dict[str, float] = {}
    with2: dict[str, float] = {}
    for corr in correlations:
        if column1 in (corr.column1, corr.column2):
            other = corr.column2 if corr.column1 == column1 else corr.column1
            if other != column2:
                with1[other] = abs(corr.value)
        if column2 in (corr.column1, corr.column2):
            other = corr.column2 if corr.column1 == column2 else corr.column1
            if other != column1:
                with2[other] = abs(corr.value)

    return [v for v, r1 in with1.items() if r1 > 0.3 and with2.get(v, 0.0) > 0.3]


def find_confounders(
    column1: str,
    column2: str,
    correlations: list[Correlation],
    columns: list[str],
) -> list[str]:
    """Shared correlates plus columns whose names are typical confounders."""
    confounders = _shared_correlates(column1, column2, correlations)
    for column in columns:
        if (
            column not in (column1, column2)
            and _has_any(column, CONFOUNDER_KEYWORDS)
            and column not in confounders
        ):
            confounders.append(column)
    return confounders[:MAX_CONFOUNDERS]


def _correlation_recommendations(
    column1: str,
    column2: str,
    value: float,
    interpretation: CausalInterpretation,
    confounders: list[str],
) -> list[str]:
    recommendations = []
    if interpretation == CausalInterpretation.CORRELATIONAL:
        recommendations += [
            "Run controlled experiment to test causality",
            "Consider instrumental variable analysis",
        ]
    if confounders:
        recommendations.append(
            f"Control for potential confounders: {', '.join(confounders[:3])}"
        )
    if abs(value) > 0.7:
        recommendations.append("Strong relationship - investigate underlying mechanism")
    if abs(value) < 0.5:
        recommendations.append("Moderate relationship - other factors likely involved")
    recommendations.append(f"Build regression model with {column1} predicting {column2}")
    return recommendations


def _correlation_hypotheses(
    dataset: DataSet, analysis: AnalysisResult, next_id: IdFactory
) -> Iterator[Hypothesis]:
    significant = [c for c in analysis.correlations if abs(c.value) >= MIN_CORRELATION]
    sample_size = dataset.row_count

    for corr in significant[:MAX_CORRELATION_HYPOTHESES]:
        c1, c2, value = corr.column1, corr.column2, corr.value
        direction = "positive" if value > 0 else "negative"

        interpretation = determine_interpretation(c1, c2)
        confounders = find_confounders(c1, c2, analysis.correlations, dataset.columns)
        if interpretation == CausalInterpretation.CORRELATIONAL and _shared_correlates(
            c1, c2, analysis.correlations
        ):
            interpretation = CausalInterpretation.CONFOUNDED

        confidence = round(abs(value) * 80)
        if sample_size > 1000:
            confidence += 10
        elif sample_size < 100:
            confidence -= 10
        if len(confounders) > 2:
            confidence -= 10
        confidence = max(30, min(95, confidence))

        evidence = [
            HypothesisEvidence(
                type="statistic",
                description=f"Pearson correlation coefficient: {value:.3f}",
                value=value,
                interpretation=(
                    f"This indicates a {corr.strength} {direction} relationship "
                    "between the variables."
                ),
            ),
            HypothesisEvidence(
                type="pattern",
                description=(
                    f"As {c1} increases, {c2} "
                    f"{'tends to increase' if value > 0 else 'tends to decrease'}."
                ),
                interpretation="This pattern is consistent across the dataset.",
            ),
        ]
        if interpretation in (CausalInterpretation.CORRELATIONAL, CausalInterpretation.CONFOUNDED):
            evidence.append(
                HypothesisEvidence(
                    type="pattern",
                    description="Correlation does not imply causation",
                    interpretation=(
                        f"Potential confounders ({', '.join(confounders)}) "
                        "may explain this relationship."
                        if confounders
                        else "Consider experimental design or instrumental variables "
                        "to establish causality."
                    ),
                )
            )

        verb = "drive" if interpretation == CausalInterpretation.CAUSAL else "relate to"
        relation = "increases with" if value > 0 else "decreases as"
        yield Hypothesis(
            id=next_id(),
            type=HypothesisType.CORRELATION,
            title=f"{c1} may {verb} {c2}",
            description=(
                f"{c1} {relation} {c2} (r={value:.2f}, {corr.strength} {direction} correlation)"
            ),
            confidence=confidence,
            evidence=evidence,
            interpretation=interpretation,
            confounders=confounders,
            recommendations=_correlation_recommendations(
                c1, c2, value, interpretation, confounders
            ),
            variables=[c1, c2],
            test_method="Linear regression with significance testing",
        )


def _group_difference_hypotheses(
    dataset: DataSet, analysis: AnalysisResult, next_id: IdFactory
) -> Iterator[Hypothesis]:
    column_types = dataset.column_types
    categorical = []
    numeric = []
    for index, column in enumerate(dataset.columns):
        if column_types[index] == ColumnType.NUMBER:
            numeric.append(index)
            continue
        stats = analysis.statistics.get(column)
        if (
            isinstance(stats, CategoricalColumnStats)
            and stats.unique_count <= MAX_GROUP_CATEGORIES
            and len(stats.top_values) >= 2
        ):
            categorical.append(index)

    for cat_index in categorical:
        cat_column = dataset.columns[cat_index]
        for num_index in numeric:
            num_column = dataset.columns[num_index]
            groups = group_by_category(dataset, cat_index, num_index)
            if len(groups) < 2:
                continue
            ranked = comparable_groups(groups)
            if len(ranked) < 2:
                continue

            top, bottom = ranked[0], ranked[-1]
            midpoint = (top.mean + bottom.mean) / 2
            diff_percent = abs(top.mean - bottom.mean) / abs(midpoint) * 100 if midpoint else 0.0
            if diff_percent < MIN_GROUP_DIFFERENCE_PERCENT:
                continue

            test = approximate_t_test(top.values, bottom.values)
            confidence = 70 + (1 - test.p_value) * 20 if test.significant else 40
            confidence = min(90, max(40, confidence))

            recommendations = [
                f"Investigate what drives {top.name}'s higher {num_column}",
                "Consider controlling for other variables that may explain the difference",
            ]
            if len(ranked) > 2:
                recommendations.append(f"Review all {len(ranked)} groups for patterns")

            yield Hypothesis(
                id=next_id(),
                type=HypothesisType.GROUP_DIFFERENCE,
                title=f"{cat_column} affects {num_column}",
                description=(
                    f"{top.name} has {diff_percent:.0f}% higher {num_column} than {bottom.name}"
                ),
                confidence=round(confidence),
                evidence=[
                    HypothesisEvidence(
                        type="comparison",
                        description=f"{top.name}: mean={top.mean:.2f}, n={len(top.values)}",
                        value=top.mean,
                        interpretation=f"Highest {num_column} among {cat_column} groups",
                    ),
                    HypothesisEvidence(
                        type="comparison",
                        description=(
                            f"{bottom.name}: mean={bottom.mean:.2f}, n={len(bottom.values)}"
                        ),
                        value=bottom.mean,
                        interpretation=f"Lowest {num_column} among {cat_column} groups",
                    ),
                    HypothesisEvidence(
                        type="test",
                        description=(
                            f"t-test: t={test.t_statistic:.2f}, {format_p_value(test.p_value)}"
                        ),
                        p_value=test.p_value,
                        interpretation=(
                            "Statistically significant difference"
                            if test.significant
                            else "Difference may not be statistically significant"
                        ),
                    ),
                ],
                interpretation=CausalInterpretation.CORRELATIONAL,
                recommendations=recommendations,
                variables=[cat_column, num_column],
                test_method="Independent samples t-test or ANOVA",
            )


def _trend_hypotheses(
    dataset: DataSet, analysis: AnalysisResult, next_id: IdFactory
) -> Iterator[Hypothesis]:
    for trend in analysis.trends[:MAX_TREND_HYPOTHESES]:
        change = trend.change_percent
        if trend.direction == "stable" or abs(change) < MIN_TREND_CHANGE:
            continue

        confidence = 50
        if abs(change) > 50:
            confidence += 25
        elif abs(change) > 20:
            confidence += 15
        if dataset.row_count > 100:
            confidence += 10
        confidence = min(85, confidence)

        rising = trend.direction == "up"
        word = "increasing" if rising else "decreasing"
        implication = "growth or improvement" if rising else "decline or degradation"

        yield Hypothesis(
            id=next_id(),
            type=HypothesisType.TREND,
            title=f"{trend.column} is {word}",
            description=f"{trend.column} shows a {abs(change):.1f}% {word} trend over the dataset",
            confidence=confidence,
            evidence=[
                HypothesisEvidence(
                    type="statistic",
                    description=f"Change: {change:+.1f}%",
                    value=change,
                    interpretation=trend.description,
                ),
                HypothesisEvidence(
                    type="pattern",
                    description=f"Trend direction: {trend.direction}",
                    interpretation=f"This suggests {implication} in {trend.column}.",
                ),
            ],
            interpretation=CausalInterpretation.CORRELATIONAL,
            confounders=list(TREND_CONFOUNDERS),
            recommendations=[
                "Investigate root cause of the trend",
                "Check for seasonality or cyclical patterns",
                "Consider if trend is expected or concerning",
                "Significant trend - may require action"
                if abs(change) > 10
                else "Monitor for continued trend",
            ],
            variables=[trend.column],
            test_method="Linear regression with time as predictor",
        )


def _severity(max_zscore: float) -> str:
    if max_zscore > 4:
        return "extreme"
    if max_zscore > 3:
        return "severe"
    return "moderate"


def _anomaly_hypotheses(
    dataset: DataSet, analysis: AnalysisResult, next_id: IdFactory
) -> Iterator[Hypothesis]:
    by_column: dict[str, list[Outlier]] = {}
    for outlier in analysis.outliers:
        by_column.setdefault(outlier.column, []).append(outlier)

    total_rows = dataset.row_count
    for column, outliers in by_column.items():
        if column not in analysis.statistics or total_rows == 0:
            continue

        outlier_count = len(outliers)
        outlier_percent = outlier_count / total_rows * 100
        max_zscore = max(abs(o.zscore) for o in outliers)
        severity = _severity(max_zscore)

        if outlier_percent > 5:
            confidence = 70
        elif outlier_percent > 2:
            confidence = 60
        else:
            confidence = 50
        if max_zscore > 5:
            confidence += 10

        recommendations = [
            "Investigate outlier records for data entry errors",
            "Determine if outliers represent valid edge cases",
        ]
        if outlier_percent > 3:
            recommendations.append("Consider robust statistics if outliers are valid")
        if max_zscore > 4:
            recommendations.append("Extreme outliers may significantly skew analysis")

        first = outliers[0]
        yield Hypothesis(
            id=next_id(),
            type=HypothesisType.ANOMALY,
            title=f"{column} contains {severity} outliers",
            description=(
                f"{outlier_count} values ({outlier_percent:.1f}%) are outside expected range"
            ),
            confidence=min(85, confidence),
            evidence=[
                HypothesisEvidence(
                    type="statistic",
                    description=f"{outlier_count} outliers detected using IQR method",
                    value=outlier_count,
                    interpretation=(
                        f"Values outside [{first.expected_min:.2f}, {first.expected_max:.2f}]"
                    ),
                ),
                HypothesisEvidence(
                    type="pattern",
                    description=f"Max z-score: {max_zscore:.2f}",
                    value=max_zscore,
                    interpretation=f"{severity.capitalize()}ly unusual values present",
                ),
            ],
            interpretation=CausalInterpretation.CORRELATIONAL,
            recommendations=recommendations,
            variables=[column],
            test_method="Investigate individual records; consider Grubbs' test",
        )


def generate_hypotheses(
    dataset: DataSet,
    analysis: AnalysisResult,
    max_hypotheses: int = MAX_HYPOTHESES,
) -> list[Hypothesis]:
    """Generate ranked, testable hypotheses from an analysis result.

    Ids ("H1", "H2", ...) are assigned in detector order before ranking and
    are unique within one call.
    """
    counter = count(1)

    def next_id() -> str:
        return f"H{next(counter)}"

    hypotheses: list[Hypothesis] = []
    for detector in (
        _correlation_hypotheses,
        _group_difference_hypotheses,
        _trend_hypotheses,
        _anomaly_hypotheses,
    ):
        hypotheses.extend(detector(dataset, analysis, next_id))

    hypotheses.sort(key=lambda h: h.confidence, reverse=True)
    ranked = hypotheses[:max_hypotheses]

    logger.debug(
        "hypotheses_generated",
        dataset=dataset.name,
        generated=len(hypotheses),
        kept=len(ranked),
    )
    return ranked
