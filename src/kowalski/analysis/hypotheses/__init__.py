"""Hypothesis generation and testing.

Hypotheses are generated from a finished statistics pass and can be
re-tested against raw data on demand.
"""

from kowalski.analysis.hypotheses.formatting import format_hypothesis
from kowalski.analysis.hypotheses.generator import (
    determine_interpretation,
    find_confounders,
    generate_hypotheses,
)
from kowalski.analysis.hypotheses.models import (
    CausalInterpretation,
    Hypothesis,
    HypothesisEvidence,
    HypothesisStatus,
    HypothesisTestResult,
    HypothesisType,
)
from kowalski.analysis.hypotheses.significance import (
    TTestResult,
    approximate_p_value,
    approximate_t_test,
    normal_cdf,
)
from kowalski.analysis.hypotheses.testing import apply_test_result, evaluate_hypothesis

__all__ = [
    "CausalInterpretation",
    "Hypothesis",
    "HypothesisEvidence",
    "HypothesisStatus",
    "HypothesisTestResult",
    "HypothesisType",
    "TTestResult",
    "apply_test_result",
    "approximate_p_value",
    "approximate_t_test",
    "determine_interpretation",
    "evaluate_hypothesis",
    "find_confounders",
    "format_hypothesis",
    "generate_hypotheses",
    "normal_cdf",
]
