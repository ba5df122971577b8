"""Tests for numeric, categorical and mixed association measures."""

import math

import pytest

from kowalski.analysis.correlation import (
    aligned_numeric_pairs,
    build_contingency_table,
    calculate_correlation,
    calculate_cramers_v,
    calculate_point_biserial,
    get_correlation_strength,
)


class TestPearson:
    def test_perfect_positive_and_negative(self):
        assert calculate_correlation([1, 2, 3], [2, 4, 6]) == pytest.approx(1.0)
        assert calculate_correlation([1, 2, 3], [6, 4, 2]) == pytest.approx(-1.0)

    def test_symmetric(self):
        x, y = [1, 4, 2, 8, 5], [3, 1, 4, 1, 5]
        assert calculate_correlation(x, y) == pytest.approx(calculate_correlation(y, x))

    def test_degenerate_inputs_return_zero(self):
        assert calculate_correlation([], []) == 0
        assert calculate_correlation([1], [1]) == 0
        assert calculate_correlation([1, 2], [1, 2, 3]) == 0
        assert calculate_correlation([5, 5, 5], [1, 2, 3]) == 0

    def test_bounded(self):
        r = calculate_correlation([1e-300, 2e-300, 3e-300], [1, 2, 3.0000001])
        assert -1 <= r <= 1
        assert not math.isnan(r)

    @pytest.mark.parametrize(
        ("value", "strength"),
        [(0.7, "strong"), (-0.85, "strong"), (0.4, "moderate"), (0.2, "weak"), (0.19, "none")],
    )
    def test_strength(self, value, strength):
        assert get_correlation_strength(value) == strength

    def test_aligned_pairs_skip_non_numbers(self):
        xs, ys = aligned_numeric_pairs([1, None, 3, "x", 5], [2, 4, None, 8, 10])
        assert xs == [1, 5]
        assert ys == [2, 10]


class TestCramersV:
    def test_perfect_association(self):
        assert calculate_cramers_v(["a", "a", "b", "b"], ["x", "x", "y", "y"]) == pytest.approx(1.0)

    def test_independence(self):
        assert calculate_cramers_v(["a", "a", "b", "b"], ["x", "y", "x", "y"]) == pytest.approx(0.0)

    def test_single_category_is_zero(self):
        assert calculate_cramers_v(["a", "a", "a"], ["x", "y", "z"]) == 0

    def test_nulls_dropped(self):
        value = calculate_cramers_v(["a", None, "a", "b", "b"], ["x", "z", "x", "y", "y"])
        assert value == pytest.approx(1.0)

    def test_contingency_table_merges_labels(self):
        table = build_contingency_table([1, "1", 2], ["x", "x", "y"])
        assert table.tolist() == [[2.0, 0.0], [0.0, 1.0]]


class TestPointBiserial:
    def test_dominant_category_indicator(self):
        """Ties go to the first-seen category, here "a"."""
        r = calculate_point_biserial([1, 2, 10, 11], ["a", "a", "b", "b"])
        assert r == pytest.approx(-0.9939, abs=1e-4)

    def test_needs_two_categories(self):
        assert calculate_point_biserial([1, 2, 3], ["a", "a", "a"]) == 0

    def test_length_mismatch(self):
        assert calculate_point_biserial([1, 2], ["a"]) == 0
