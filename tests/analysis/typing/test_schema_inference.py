"""Tests for basic and semantic type inference."""

import pytest

from kowalski.analysis.typing import (
    SCORERS,
    BasicType,
    ScoringContext,
    SemanticType,
    confidence_message,
    format_semantic_type,
    generate_clarifying_question,
    get_pattern_config,
    infer_basic_type,
    infer_column,
    infer_schema,
    score_all,
    verbalize_confidence,
)
from kowalski.core.models.base import ConfidenceLevel, ConfidenceScore
from kowalski.core.models.dataset import DataSet

EMAILS = ["ana@example.com", "bo@example.org", "cy@test.io", "di@mail.net", "ed@corp.com"]


@pytest.fixture
def patterns():
    return get_pattern_config()


class TestBasicType:
    """Majority-vote basic types."""

    def test_all_null(self, patterns):
        basic, confidence = infer_basic_type([None, None], patterns)
        assert basic == BasicType.NULL
        assert confidence.value == 100

    def test_boolean(self, patterns):
        basic, confidence = infer_basic_type(["yes", "no", "Yes", None], patterns)
        assert basic == BasicType.BOOLEAN
        assert confidence.value == 100

    def test_date(self, patterns):
        basic, _ = infer_basic_type(["2024-01-01", "2024-02-01", "3/1/2024"], patterns)
        assert basic == BasicType.DATE

    def test_number(self, patterns):
        basic, confidence = infer_basic_type([10, 20.5, 30, 40, 50], patterns)
        assert basic == BasicType.NUMBER
        assert confidence.value == 100
        assert confidence.level == ConfidenceLevel.HIGH

    def test_number_with_some_strings(self, patterns):
        basic, confidence = infer_basic_type([10, 20, 30, 40, 50, "n/a"], patterns)
        assert basic == BasicType.NUMBER
        assert confidence.value == 83
        assert "17% are strings (possibly mixed data)" in confidence.reasons

    def test_mixed(self, patterns):
        basic, confidence = infer_basic_type([10, "a", 20, "b"], patterns)
        assert basic == BasicType.STRING
        assert confidence.value == 50
        assert confidence.reasons[0] == "Mixed data types detected"


class TestSemanticType:
    """Scorer registry and column inference."""

    def test_registry_order(self):
        assert [t for t, _ in SCORERS] == [
            SemanticType.ID,
            SemanticType.BOOLEAN,
            SemanticType.PERCENTAGE,
            SemanticType.CURRENCY,
            SemanticType.COUNT,
            SemanticType.RATE,
            SemanticType.DATE,
            SemanticType.TIMESTAMP,
            SemanticType.EMAIL,
            SemanticType.PHONE,
            SemanticType.URL,
            SemanticType.CATEGORICAL,
            SemanticType.TEXT,
        ]

    def test_email_column(self):
        inference = infer_column("email", EMAILS)
        assert inference.semantic_type == SemanticType.EMAIL
        assert inference.semantic_type_confidence.value >= 80
        assert inference.basic_type == BasicType.STRING

    def test_identifier_column(self):
        inference = infer_column("customer_id", list(range(1, 21)))
        assert inference.semantic_type == SemanticType.ID
        assert inference.semantic_type_confidence.value == 100
        assert "Column name suggests identifier" in inference.semantic_type_confidence.reasons
        assert [a.type for a in inference.alternatives] == [
            SemanticType.PERCENTAGE,
            SemanticType.COUNT,
            SemanticType.CURRENCY,
        ]

    def test_categorical_column(self):
        inference = infer_column("status", ["open", "closed", "pending"] * 20)
        assert inference.semantic_type == SemanticType.CATEGORICAL
        assert inference.semantic_type_confidence.value == 85
        assert inference.statistics.unique_count == 3
        assert inference.statistics.total_count == 60
        assert len(inference.sample_values) == 10

    def test_uuid_column(self):
        values = [f"550e8400-e29b-41d4-a716-44665544000{i}" for i in range(5)]
        assert infer_column("ref", values).semantic_type == SemanticType.ID

    def test_unknown_when_nothing_scores(self):
        inference = infer_column("x", [-5.5, 3.25, 1000000000.5])
        assert inference.semantic_type == SemanticType.UNKNOWN
        assert inference.semantic_type_confidence.value == 30
        assert inference.alternatives == []

    def test_all_null_column(self):
        inference = infer_column("empty", [None, None])
        assert inference.basic_type == BasicType.NULL
        assert inference.semantic_type == SemanticType.UNKNOWN
        assert inference.statistics.null_count == 2

    def test_score_all_sorted_and_positive(self, patterns):
        ctx = ScoringContext(
            column="mystery",
            values=["a1", "b2", "c3"],
            basic_type=BasicType.STRING,
            unique_count=3,
            non_null_count=3,
            patterns=patterns,
        )
        assert score_all(ctx) == [(SemanticType.CATEGORICAL, 50), (SemanticType.TEXT, 30)]


class TestClarifyingQuestions:
    def test_low_confidence_with_alternatives(self):
        question = generate_clarifying_question(infer_column("mystery", ["a1", "b2", "c3"]))
        assert question is not None
        assert question.question == (
            "Column 'mystery' has values like \"a1\", \"b2\", \"c3\". What type of data is this?"
        )
        assert question.options == ["Category/Label", "Free-form Text"]
        assert question.reason == "Detected as categorical but with 50% confidence"
        assert question.confidence == 50

    def test_unique_values_question(self):
        question = generate_clarifying_question(infer_column("x", [-5.5, 3.25, 1000000000.5]))
        assert question is not None
        assert "Is this an identifier or unique data?" in question.question
        assert question.options == ["ID/Primary Key", "Unique text values", "Something else"]
        assert question.confidence == 30

    def test_unique_question_regardless_of_confidence(self):
        question = generate_clarifying_question(infer_column("email", EMAILS))
        assert question is not None
        assert question.confidence >= 80

    def test_confident_repeated_values_have_no_question(self):
        inference = infer_column("status", ["open", "closed", "pending"] * 20)
        assert generate_clarifying_question(inference) is None


class TestInferSchema:
    def test_overall_confidence_is_mean(self):
        dataset = DataSet(
            name="people",
            columns=["email", "mystery"],
            rows=[[e, m] for e, m in zip(EMAILS, ["a", "b", "a", "b", "a"], strict=True)],
        )
        schema = infer_schema(dataset)
        values = [c.semantic_type_confidence.value for c in schema.columns]
        assert schema.overall_confidence.value == round(sum(values) / len(values))
        assert schema.get_column("email").semantic_type == SemanticType.EMAIL
        assert schema.get_column("missing") is None

    def test_empty_dataset(self):
        schema = infer_schema(DataSet(name="empty", columns=[]))
        assert schema.columns == []
        assert schema.overall_confidence.value == 0
        assert schema.suggested_questions == []


class TestFormatting:
    def test_labels(self):
        assert format_semantic_type(SemanticType.EMAIL) == "Email Address"
        assert format_semantic_type(SemanticType.UNKNOWN) == "Unknown/Other"

    @pytest.mark.parametrize(
        ("value", "text"),
        [
            (95, "highly confident"),
            (75, "75% confident"),
            (55, "only 55% confident"),
            (30, "uncertain (30% confidence)"),
        ],
    )
    def test_verbalize(self, value, text):
        assert verbalize_confidence(ConfidenceScore.create(value)) == text

    def test_confidence_message(self):
        message = confidence_message(infer_column("email", EMAILS))
        assert message == 'Highly confident that "email" is Email Address.'
