"""Pure descriptive statistics.

Operates on plain lists and returns models. No logging, no settings.
"""

from __future__ import annotations

import math
from collections import Counter
from collections.abc import Sequence
from typing import Any

import numpy as np

from kowalski.analysis.statistics.models import (
    CategoricalStats,
    DescriptiveStats,
    Percentiles,
    ValueCount,
)

TOP_VALUES_LIMIT = 10


def calculate_stats(values: Sequence[float]) -> DescriptiveStats:
    """Count, mean, median, extremes, population std, sum and quartiles.

    Quartiles are taken by position in the sorted data
    (``sorted[floor(n * 0.25)]`` and ``sorted[floor(n * 0.75)]``); the
    median averages the two middle values for even counts.
    """
    if len(values) == 0:
        return DescriptiveStats()

    data = np.sort(np.asarray(values, dtype=float))
    n = len(data)
    median = float(np.median(data))

    return DescriptiveStats(
        count=n,
        mean=float(np.mean(data)),
        median=median,
        min=float(data[0]),
        max=float(data[-1]),
        std=float(np.std(data)),
        sum=float(np.sum(data)),
        percentiles=Percentiles(
            p25=float(data[math.floor(n * 0.25)]),
            p50=median,
            p75=float(data[math.floor(n * 0.75)]),
        ),
    )


def value_label(value: Any) -> str:
    """String form of a cell used for grouping and display (``2.0`` -> ``"2"``)."""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def calculate_categorical_stats(values: Sequence[Any]) -> CategoricalStats:
    """Frequency profile of a column; nulls are counted but never ranked."""
    counts = Counter(value_label(v) for v in values if v is not None)
    null_count = sum(1 for v in values if v is None)

    # most_common keeps first-encountered order among equal counts
    top = [
        ValueCount(value=value, count=count)
        for value, count in counts.most_common(TOP_VALUES_LIMIT)
    ]

    return CategoricalStats(
        count=len(values),
        null_count=null_count,
        unique_count=len(counts),
        top_values=top,
    )
