"""Tests for Result and confidence scoring."""

import pytest

from kowalski.core.models.base import (
    ConfidenceLevel,
    ConfidenceScore,
    Result,
    get_confidence_level,
)


class TestResult:
    def test_ok_and_unwrap(self):
        result = Result.ok(5, warnings=["careful"])
        assert result.success
        assert result.unwrap() == 5
        assert result.warnings == ["careful"]

    def test_fail_unwrap_raises(self):
        result = Result.fail("broken")
        assert not result.success
        assert result.error == "broken"
        with pytest.raises(ValueError, match="broken"):
            result.unwrap()

    def test_map(self):
        assert Result.ok(2).map(lambda v: v * 3).unwrap() == 6
        failed = Result.fail("nope")
        assert failed.map(lambda v: v * 3) is failed


class TestConfidence:
    """Confidence bands and score construction."""

    @pytest.mark.parametrize(
        ("value", "level"),
        [
            (100, ConfidenceLevel.HIGH),
            (90, ConfidenceLevel.HIGH),
            (89, ConfidenceLevel.MEDIUM),
            (70, ConfidenceLevel.MEDIUM),
            (69, ConfidenceLevel.LOW),
            (50, ConfidenceLevel.LOW),
            (49, ConfidenceLevel.VERY_LOW),
            (0, ConfidenceLevel.VERY_LOW),
        ],
    )
    def test_bands(self, value, level):
        assert get_confidence_level(value) == level

    def test_create_clamps_and_rounds(self):
        assert ConfidenceScore.create(120).value == 100
        assert ConfidenceScore.create(-5).value == 0
        score = ConfidenceScore.create(69.6, ["close call"])
        assert score.value == 70
        assert score.level == ConfidenceLevel.MEDIUM
        assert score.reasons == ["close call"]
