"""Pure categorical association algorithms (Cramér's V).

Computes Cramér's V from contingency tables.
No logging, no settings - just math.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

import numpy as np
from scipy import stats

from kowalski.analysis.statistics.descriptive import value_label


def build_contingency_table(
    col1_values: Sequence[Any],
    col2_values: Sequence[Any],
) -> np.ndarray:
    """Build a contingency table from two equally long columns.

    Categories are keyed by their string label so ``1`` and ``"1"`` fall
    into the same cell.
    """
    labels1 = [value_label(v) for v in col1_values]
    labels2 = [value_label(v) for v in col2_values]

    idx1 = {v: i for i, v in enumerate(dict.fromkeys(labels1))}
    idx2 = {v: i for i, v in enumerate(dict.fromkeys(labels2))}

    table = np.zeros((len(idx1), len(idx2)))
    for v1, v2 in zip(labels1, labels2, strict=True):
        table[idx1[v1], idx2[v2]] += 1
    return table


def calculate_cramers_v(x: Sequence[Any], y: Sequence[Any]) -> float:
    """Cramér's V association between two categorical columns, in [0, 1].

    Rows where either side is null are dropped. Returns 0 for mismatched
    lengths, fewer than two usable rows, or a single category on either side.
    """
    if len(x) != len(y):
        return 0.0

    pairs = [(a, b) for a, b in zip(x, y, strict=True) if a is not None and b is not None]
    if len(pairs) < 2:
        return 0.0

    table = build_contingency_table([a for a, _ in pairs], [b for _, b in pairs])
    rows, cols = table.shape
    if rows < 2 or cols < 2:
        return 0.0

    # Observed marginals are all positive, so expected counts are never zero
    chi2, _, _, _ = stats.chi2_contingency(table, correction=False)
    n = table.sum()
    min_dim = min(rows, cols) - 1

    v = float(np.sqrt(chi2 / (n * min_dim)))
    if not np.isfinite(v):
        return 0.0
    return max(0.0, min(1.0, v))
