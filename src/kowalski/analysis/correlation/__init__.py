"""Correlation analysis.

- Numeric correlations (Pearson)
- Categorical associations (Cramér's V)
- Numeric vs categorical (point-biserial)
"""

from kowalski.analysis.correlation.algorithms import (
    aligned_numeric_pairs,
    build_contingency_table,
    calculate_correlation,
    calculate_cramers_v,
    calculate_point_biserial,
    get_correlation_strength,
)

__all__ = [
    "aligned_numeric_pairs",
    "build_contingency_table",
    "calculate_correlation",
    "calculate_cramers_v",
    "calculate_point_biserial",
    "get_correlation_strength",
]
