"""Approximate significance tests.

P-values come from a normal approximation to the t distribution, with the
standard normal CDF evaluated through the Abramowitz & Stegun polynomial.
This is adequate for ranking hypotheses; it is not an exact t-test.
"""

from __future__ import annotations

import math
from collections.abc import Sequence
from dataclasses import dataclass

from kowalski.analysis.statistics.descriptive import calculate_stats

SIGNIFICANCE_LEVEL = 0.05

# Abramowitz & Stegun 7.1.26 coefficients
_A1 = 0.254829592
_A2 = -0.284496736
_A3 = 1.421413741
_A4 = -1.453152027
_A5 = 1.061405429
_P = 0.3275911


@dataclass
class TTestResult:
    t_statistic: float
    p_value: float
    significant: bool


def normal_cdf(z: float) -> float:
    """Approximate standard normal CDF."""
    sign = -1.0 if z < 0 else 1.0
    abs_z = abs(z)
    t = 1.0 / (1.0 + _P * abs_z)
    poly = ((((_A5 * t + _A4) * t + _A3) * t + _A2) * t + _A1) * t
    y = 1.0 - poly * math.exp(-abs_z * abs_z / 2)
    return 0.5 * (1.0 + sign * y)


def approximate_p_value(t_statistic: float, df: int) -> float:
    """Two-tailed p-value for a t statistic.

    ``df`` is accepted for the t-test signature but the normal approximation
    does not use it. An infinite statistic yields 0.
    """
    if math.isinf(t_statistic):
        return 0.0
    return 2 * (1 - normal_cdf(abs(t_statistic)))


def correlation_t_statistic(r: float, n: int) -> float:
    """t statistic of a Pearson correlation over ``n`` pairs (inf when |r| = 1)."""
    remaining = 1 - r * r
    if remaining <= 0:
        return math.inf
    return r * math.sqrt((n - 2) / remaining)


def approximate_t_test(group1: Sequence[float], group2: Sequence[float]) -> TTestResult:
    """Welch t statistic with ``min(n1, n2) - 1`` degrees of freedom."""
    n1, n2 = len(group1), len(group2)
    if n1 < 2 or n2 < 2:
        return TTestResult(t_statistic=0.0, p_value=1.0, significant=False)

    stats1 = calculate_stats(group1)
    stats2 = calculate_stats(group2)
    se = math.sqrt(stats1.std**2 / n1 + stats2.std**2 / n2)
    if se == 0:
        return TTestResult(t_statistic=0.0, p_value=1.0, significant=False)

    t_statistic = (stats1.mean - stats2.mean) / se
    p_value = approximate_p_value(abs(t_statistic), min(n1, n2) - 1)
    return TTestResult(
        t_statistic=t_statistic,
        p_value=p_value,
        significant=p_value < SIGNIFICANCE_LEVEL,
    )


def format_p_value(p_value: float) -> str:
    """``p<0.001`` or ``p=0.123``."""
    return "p<0.001" if p_value < 0.001 else f"p={p_value:.3f}"
