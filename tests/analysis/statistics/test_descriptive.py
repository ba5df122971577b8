"""Tests for descriptive statistics."""

import pytest

from kowalski.analysis.statistics import (
    calculate_categorical_stats,
    calculate_stats,
    value_label,
)


class TestCalculateStats:
    """Numeric summaries."""

    def test_known_values(self):
        stats = calculate_stats([10, 20, 30, 40, 50])
        assert stats.count == 5
        assert stats.mean == pytest.approx(30.0)
        assert stats.median == pytest.approx(30.0)
        assert stats.std == pytest.approx(14.142, abs=1e-3)
        assert stats.sum == pytest.approx(150.0)
        assert stats.min == 10
        assert stats.max == 50

    def test_quartiles_by_position(self):
        """Quartiles index the sorted data at floor(n * q)."""
        stats = calculate_stats([50, 10, 40, 20, 30])
        assert stats.percentiles.p25 == 20
        assert stats.percentiles.p75 == 40
        assert stats.percentiles.p50 == 30

    def test_even_count_median(self):
        assert calculate_stats([1, 2, 3, 4]).median == pytest.approx(2.5)

    def test_empty_is_all_zero(self):
        stats = calculate_stats([])
        assert stats.count == 0
        assert stats.mean == stats.median == stats.std == stats.sum == 0
        assert stats.min == stats.max == 0
        assert stats.percentiles.p25 == stats.percentiles.p75 == 0

    def test_std_never_negative(self):
        for values in ([5], [1, 1, 1], [-3, 7, 2.5], [1e9, -1e9]):
            assert calculate_stats(values).std >= 0


class TestCategoricalStats:
    """Frequency profiles."""

    def test_top_values_by_frequency(self):
        stats = calculate_categorical_stats(["b", "a", "b", None, "c", "b", "a"])
        assert stats.count == 7
        assert stats.null_count == 1
        assert stats.unique_count == 3
        assert [(v.value, v.count) for v in stats.top_values] == [("b", 3), ("a", 2), ("c", 1)]

    def test_ties_keep_first_seen_order(self):
        stats = calculate_categorical_stats(["z", "y", "x"])
        assert [v.value for v in stats.top_values] == ["z", "y", "x"]

    def test_at_most_ten_values(self):
        stats = calculate_categorical_stats([f"v{i}" for i in range(25)])
        assert stats.unique_count == 25
        assert len(stats.top_values) == 10

    def test_value_label(self):
        assert value_label(2.0) == "2"
        assert value_label(2.5) == "2.5"
        assert value_label(7) == "7"
        assert value_label("x") == "x"
