"""Numeric-vs-categorical association (point-biserial correlation)."""

from __future__ import annotations

import math
from collections import Counter
from collections.abc import Sequence
from typing import Any

from kowalski.analysis.correlation.algorithms.numeric import calculate_correlation
from kowalski.analysis.statistics.descriptive import value_label
from kowalski.core.models.dataset import is_number


def calculate_point_biserial(numeric: Sequence[Any], categorical: Sequence[Any]) -> float:
    """Point-biserial correlation of a number against a category.

    The category is collapsed to "most frequent value vs the rest" (ties go
    to the value seen first). Pairs with a null category or a missing or
    non-finite number are skipped.
    """
    if len(numeric) != len(categorical):
        return 0.0

    pairs = [
        (float(n), value_label(c))
        for n, c in zip(numeric, categorical, strict=True)
        if c is not None and is_number(n) and math.isfinite(n)
    ]
    counts = Counter(label for _, label in pairs)
    if len(counts) < 2 or len(pairs) < 2:
        return 0.0

    dominant = counts.most_common(1)[0][0]
    values = [n for n, _ in pairs]
    indicator = [1.0 if label == dominant else 0.0 for _, label in pairs]
    return calculate_correlation(values, indicator)
