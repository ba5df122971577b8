"""Tests for z-score and IQR outlier detection."""

import pytest

from kowalski.analysis.statistics import (
    NumericColumnStats,
    Percentiles,
    calculate_zscore,
    detect_outliers_zscore,
    find_iqr_outliers,
    iqr_fence,
)


class TestZScore:
    def test_known_value(self):
        assert calculate_zscore(60, 50, 10) == 1

    def test_zero_spread(self):
        assert calculate_zscore(42, 42, 0) == 0
        assert calculate_zscore(7, 7, 3) == 0

    def test_detects_single_spike(self):
        values = [10.0] * 20 + [100.0]
        result = detect_outliers_zscore(values)
        assert result.indices == [20]
        assert result.zscores[0] > 3

    def test_needs_three_values(self):
        assert detect_outliers_zscore([1, 1000]).indices == []

    def test_constant_series_has_none(self):
        assert detect_outliers_zscore([5, 5, 5, 5]).indices == []


class TestIQR:
    def test_fence(self):
        assert iqr_fence(10, 20) == (-5, 35)

    def test_find_iqr_outliers_keeps_row_index(self):
        stats = NumericColumnStats(
            count=5,
            null_count=1,
            mean=10,
            median=10,
            min=0,
            max=100,
            std=5,
            q1=8,
            q3=12,
            percentiles=Percentiles(p25=8, p50=10, p75=12),
        )
        cells = [9, None, "n/a", 100, 10]
        outliers = find_iqr_outliers("score", cells, stats)

        assert len(outliers) == 1
        outlier = outliers[0]
        assert outlier.column == "score"
        assert outlier.row_index == 3
        assert outlier.value == 100
        assert outlier.expected_min == pytest.approx(2)
        assert outlier.expected_max == pytest.approx(18)
        assert outlier.zscore == pytest.approx(18)
