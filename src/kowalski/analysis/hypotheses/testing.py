"""Hypothesis testing against raw data.

Each test recomputes its statistic from the dataset, never from the
analysis the hypothesis was generated from. Missing columns and thin data
are reported in the result, not raised.
"""

from __future__ import annotations

from kowalski.analysis.correlation.algorithms.numeric import (
    aligned_numeric_pairs,
    calculate_correlation,
)
from kowalski.analysis.hypotheses.groups import comparable_groups, group_by_category
from kowalski.analysis.hypotheses.models import (
    Hypothesis,
    HypothesisStatus,
    HypothesisTestResult,
    HypothesisType,
)
from kowalski.analysis.hypotheses.significance import (
    SIGNIFICANCE_LEVEL,
    approximate_p_value,
    approximate_t_test,
    correlation_t_statistic,
    format_p_value,
)
from kowalski.analysis.statistics.descriptive import calculate_stats
from kowalski.analysis.statistics.outliers import iqr_fence
from kowalski.core.logging import get_logger
from kowalski.core.models.dataset import DataSet

logger = get_logger(__name__)

MIN_CORRELATION_PAIRS = 10
MIN_TREND_POINTS = 10
SUPPORTED_CORRELATION = 0.4
SUPPORTED_TREND_CORRELATION = 0.2


def _missing_columns(hypothesis: Hypothesis, several: bool) -> HypothesisTestResult:
    if several:
        interpretation, caveat = "Could not find required columns", "Column names may have changed"
    else:
        interpretation, caveat = "Could not find required column", "Column name may have changed"
    return HypothesisTestResult(
        hypothesis_id=hypothesis.id,
        supported=False,
        confidence=0,
        interpretation=interpretation,
        caveats=[caveat],
    )


def _insufficient(hypothesis: Hypothesis, interpretation: str, caveat: str) -> HypothesisTestResult:
    return HypothesisTestResult(
        hypothesis_id=hypothesis.id,
        supported=False,
        confidence=0,
        interpretation=interpretation,
        caveats=[caveat],
    )


def _indices(dataset: DataSet, hypothesis: Hypothesis, needed: int) -> list[int] | None:
    if len(hypothesis.variables) < needed:
        return None
    indices = [dataset.column_index(v) for v in hypothesis.variables[:needed]]
    if any(i is None for i in indices):
        return None
    return [i for i in indices if i is not None]


def _test_correlation(dataset: DataSet, hypothesis: Hypothesis) -> HypothesisTestResult:
    indices = _indices(dataset, hypothesis, 2)
    if indices is None:
        return _missing_columns(hypothesis, several=True)

    xs, ys = aligned_numeric_pairs(
        dataset.column_values(indices[0]), dataset.column_values(indices[1])
    )
    if len(xs) < MIN_CORRELATION_PAIRS:
        return _insufficient(
            hypothesis,
            "Insufficient paired data points",
            f"Need at least {MIN_CORRELATION_PAIRS} paired observations",
        )

    r = calculate_correlation(xs, ys)
    n = len(xs)
    p_value = approximate_p_value(correlation_t_statistic(r, n), n - 2)
    supported = abs(r) >= SUPPORTED_CORRELATION and p_value < SIGNIFICANCE_LEVEL

    if supported:
        interpretation = f"Hypothesis supported: r={r:.3f}, {format_p_value(p_value)}"
    else:
        interpretation = f"Hypothesis not supported: r={r:.3f}, p={p_value:.3f}"

    caveats = ["Correlation does not imply causation"]
    if hypothesis.confounders:
        caveats.append(f"Consider controlling for: {', '.join(hypothesis.confounders)}")

    return HypothesisTestResult(
        hypothesis_id=hypothesis.id,
        supported=supported,
        confidence=round(abs(r) * 100),
        test_statistic=r,
        p_value=p_value,
        effect_size=r,
        interpretation=interpretation,
        caveats=caveats,
    )


def _test_group_difference(dataset: DataSet, hypothesis: Hypothesis) -> HypothesisTestResult:
    indices = _indices(dataset, hypothesis, 2)
    if indices is None:
        return _missing_columns(hypothesis, several=True)

    ranked = comparable_groups(group_by_category(dataset, indices[0], indices[1]))
    if len(ranked) < 2:
        return _insufficient(
            hypothesis,
            "Insufficient groups for comparison",
            "Need at least 2 groups with 5+ observations each",
        )

    top, bottom = ranked[0], ranked[-1]
    test = approximate_t_test(top.values, bottom.values)
    effect_size = (top.mean - bottom.mean) / bottom.mean if bottom.mean != 0 else 0.0

    if test.significant:
        interpretation = (
            f"Hypothesis supported: {top.name} significantly differs from {bottom.name} "
            f"(p={test.p_value:.3f})"
        )
    else:
        interpretation = (
            "Hypothesis not supported: Difference not statistically significant "
            f"(p={test.p_value:.3f})"
        )

    return HypothesisTestResult(
        hypothesis_id=hypothesis.id,
        supported=test.significant,
        confidence=75 if test.significant else 40,
        test_statistic=test.t_statistic,
        p_value=test.p_value,
        effect_size=effect_size,
        interpretation=interpretation,
        caveats=[
            "Comparison is between highest and lowest groups only",
            "Other variables may explain the difference",
        ],
    )


def _test_trend(dataset: DataSet, hypothesis: Hypothesis) -> HypothesisTestResult:
    indices = _indices(dataset, hypothesis, 1)
    if indices is None:
        return _missing_columns(hypothesis, several=False)

    values = dataset.numeric_column_values(indices[0])
    if len(values) < MIN_TREND_POINTS:
        return _insufficient(
            hypothesis,
            "Insufficient data points for trend analysis",
            f"Need at least {MIN_TREND_POINTS} observations",
        )

    n = len(values)
    r = calculate_correlation(list(range(n)), values)
    p_value = approximate_p_value(correlation_t_statistic(r, n), n - 2)
    supported = abs(r) >= SUPPORTED_TREND_CORRELATION and p_value < SIGNIFICANCE_LEVEL
    direction = "upward" if r > 0 else "downward"

    if supported:
        interpretation = (
            f"Hypothesis supported: Significant {direction} trend (r={r:.3f}, p={p_value:.3f})"
        )
    else:
        interpretation = (
            f"Hypothesis not supported: No significant trend detected (r={r:.3f}, p={p_value:.3f})"
        )

    return HypothesisTestResult(
        hypothesis_id=hypothesis.id,
        supported=supported,
        confidence=round(abs(r) * 100),
        test_statistic=r,
        p_value=p_value,
        interpretation=interpretation,
        caveats=[
            "Assumes linear trend",
            "Seasonality or cycles may not be captured",
            "Data order assumed to be chronological",
        ],
    )


def _test_anomaly(dataset: DataSet, hypothesis: Hypothesis) -> HypothesisTestResult:
    indices = _indices(dataset, hypothesis, 1)
    if indices is None:
        return _missing_columns(hypothesis, several=False)

    values = dataset.numeric_column_values(indices[0])
    stats = calculate_stats(values)
    lower, upper = iqr_fence(stats.percentiles.p25, stats.percentiles.p75)
    outlier_count = sum(1 for v in values if v < lower or v > upper)
    outlier_percent = outlier_count / len(values) * 100 if values else 0.0
    supported = outlier_count > 0

    return HypothesisTestResult(
        hypothesis_id=hypothesis.id,
        supported=supported,
        confidence=round(min(90, 50 + outlier_percent * 5)) if supported else 30,
        test_statistic=outlier_count,
        interpretation=(
            f"Hypothesis supported: {outlier_count} outliers ({outlier_percent:.1f}%) detected"
            if supported
            else "Hypothesis not supported: No outliers detected with IQR method"
        ),
        caveats=[
            "IQR method may miss outliers in skewed distributions",
            "Consider Grubbs' test for formal outlier detection",
        ],
    )


_TESTS = {
    HypothesisType.CORRELATION: _test_correlation,
    HypothesisType.GROUP_DIFFERENCE: _test_group_difference,
    HypothesisType.TREND: _test_trend,
    HypothesisType.ANOMALY: _test_anomaly,
}


def evaluate_hypothesis(dataset: DataSet, hypothesis: Hypothesis) -> HypothesisTestResult:
    """Re-test a hypothesis against the dataset's raw values.

    Deterministic: the same hypothesis against unchanged data always yields
    the same result.
    """
    result = _TESTS[hypothesis.type](dataset, hypothesis)
    logger.debug(
        "hypothesis_tested",
        hypothesis_id=hypothesis.id,
        type=hypothesis.type.value,
        supported=result.supported,
        p_value=result.p_value,
    )
    return result



def apply_test_result(hypothesis: Hypothesis, result: HypothesisTestResult) -> Hypothesis:
    """Copy of ``hypothesis`` moved to its tested status.

    A hypothesis that has already been tested keeps its status.
    """
    if result.hypothesis_id != hypothesis.id:
        raise ValueError(
            f"test result for {result.hypothesis_id} applied to hypothesis {hypothesis.id}"
        )
    if hypothesis.status != HypothesisStatus.UNVERIFIED:
        return hypothesis
    status = HypothesisStatus.SUPPORTED if result.supported else HypothesisStatus.UNSUPPORTED
    return hypothesis.model_copy(update={"status": status})
