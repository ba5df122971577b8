"""Pure correlation algorithms.

These functions operate on plain sequences and return floats.
No logging, no settings - just math.
"""

from kowalski.analysis.correlation.algorithms.categorical import (
    build_contingency_table,
    calculate_cramers_v,
)
from kowalski.analysis.correlation.algorithms.mixed import calculate_point_biserial
from kowalski.analysis.correlation.algorithms.numeric import (
    aligned_numeric_pairs,
    calculate_correlation,
    get_correlation_strength,
)

__all__ = [
    # Numeric
    "aligned_numeric_pairs",
    "calculate_correlation",
    "get_correlation_strength",
    # Categorical
    "build_contingency_table",
    "calculate_cramers_v",
    # Mixed
    "calculate_point_biserial",
]
