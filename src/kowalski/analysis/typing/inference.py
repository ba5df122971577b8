"""Schema and semantic type inference.

Two stages per column: a basic type (string, number, date, boolean, null)
chosen by value ratios, then a semantic type chosen by the scorer registry.
Low-confidence columns produce clarifying questions.
"""

from __future__ import annotations

from typing import Any

from kowalski.analysis.statistics.descriptive import value_label
from kowalski.analysis.typing.formatting import format_semantic_type
from kowalski.analysis.typing.models import (
    BasicType,
    ClarifyingQuestion,
    ColumnTypeInference,
    ColumnValueCounts,
    SchemaInference,
    SemanticAlternative,
    SemanticType,
)
from kowalski.analysis.typing.patterns import PatternConfig, get_pattern_config
from kowalski.analysis.typing.scorers import ScoringContext, score_all
from kowalski.core.logging import get_logger
from kowalski.core.models.base import ConfidenceLevel, ConfidenceScore
from kowalski.core.models.dataset import DataSet, is_number

logger = get_logger(__name__)

MAX_SAMPLE_VALUES = 10
MAX_ALTERNATIVES = 3
MAX_QUESTION_OPTIONS = 4
UNKNOWN_CONFIDENCE = 30

_UNCERTAIN = (ConfidenceLevel.LOW, ConfidenceLevel.VERY_LOW)


def infer_basic_type(
    values: list[Any],
    patterns: PatternConfig,
) -> tuple[BasicType, ConfidenceScore]:
    """Pick a basic type by the share of values that fit each candidate."""
    non_null = [v for v in values if v is not None]
    if not non_null:
        return BasicType.NULL, ConfidenceScore.create(100, ["All values are null"])

    total = len(non_null)
    numeric_ratio = sum(1 for v in non_null if is_number(v)) / total
    string_ratio = sum(1 for v in non_null if isinstance(v, str)) / total

    labels = [value_label(v) for v in non_null]
    boolean_ratio = sum(1 for s in labels if s.lower() in patterns.boolean_values) / total
    if boolean_ratio > 0.9:
        pct = round(boolean_ratio * 100)
        return BasicType.BOOLEAN, ConfidenceScore.create(
            pct, [f"{pct}% of values are boolean-like"]
        )

    date_ratio = sum(1 for s in labels if patterns.is_date_like(s)) / total
    if date_ratio > 0.8:
        pct = round(date_ratio * 100)
        return BasicType.DATE, ConfidenceScore.create(
            pct, [f"{pct}% of values match date patterns"]
        )

    numeric_pct = round(numeric_ratio * 100)
    string_pct = round(string_ratio * 100)
    if numeric_ratio > 0.8:
        reasons = [f"{numeric_pct}% of values are numeric"]
        if string_ratio > 0:
            reasons.append(f"{string_pct}% are strings (possibly mixed data)")
        return BasicType.NUMBER, ConfidenceScore.create(numeric_pct, reasons)

    if string_ratio > 0.8:
        return BasicType.STRING, ConfidenceScore.create(
            string_pct, [f"{string_pct}% of values are strings"]
        )

    return BasicType.STRING, ConfidenceScore.create(
        50,
        ["Mixed data types detected", f"{numeric_pct}% numeric, {string_pct}% string"],
    )


def _semantic_reasons(semantic_type: SemanticType, name_lower: str, unique_count: int) -> list[str]:
    if semantic_type == SemanticType.ID:
        reasons = ["All values are unique"]
        if "id" in name_lower:
            reasons.append("Column name suggests identifier")
        return reasons
    if semantic_type == SemanticType.PERCENTAGE:
        reasons = ["Values are in 0-100 or 0-1 range"]
        if "rate" in name_lower or "percent" in name_lower:
            reasons.append("Column name suggests percentage")
        return reasons
    if semantic_type == SemanticType.CURRENCY:
        return ["Values match currency patterns"]
    if semantic_type == SemanticType.BOOLEAN:
        return ["Values are boolean-like (true/false, yes/no, 1/0)"]
    if semantic_type == SemanticType.CATEGORICAL:
        return [f"Limited unique values ({unique_count}) relative to row count"]
    return []


def infer_column(
    column: str,
    values: list[Any],
    patterns: PatternConfig | None = None,
) -> ColumnTypeInference:
    """Infer the basic and semantic type of a single column."""
    patterns = patterns or get_pattern_config()

    non_null = [v for v in values if v is not None]
    unique_count = len({value_label(v) for v in non_null})
    counts = ColumnValueCounts(
        total_count=len(values),
        null_count=len(values) - len(non_null),
        unique_count=unique_count,
        numeric_count=sum(1 for v in non_null if is_number(v)),
        string_count=sum(1 for v in non_null if not is_number(v)),
    )

    basic_type, basic_confidence = infer_basic_type(values, patterns)

    ctx = ScoringContext(
        column=column,
        values=non_null,
        basic_type=basic_type,
        unique_count=unique_count,
        non_null_count=len(non_null),
        patterns=patterns,
    )
    scores = score_all(ctx)

    if scores:
        best_type, best_score = scores[0]
        semantic_type = best_type
        semantic_confidence = ConfidenceScore.create(
            best_score, _semantic_reasons(best_type, ctx.name_lower, unique_count)
        )
        alternatives = [
            SemanticAlternative(type=t, confidence=s)
            for t, s in scores[1 : 1 + MAX_ALTERNATIVES]
        ]
    else:
        semantic_type = SemanticType.UNKNOWN
        semantic_confidence = ConfidenceScore.create(
            UNKNOWN_CONFIDENCE, ["Could not determine semantic type"]
        )
        alternatives = []

    return ColumnTypeInference(
        column=column,
        basic_type=basic_type,
        basic_type_confidence=basic_confidence,
        semantic_type=semantic_type,
        semantic_type_confidence=semantic_confidence,
        alternatives=alternatives,
        sample_values=non_null[:MAX_SAMPLE_VALUES],
        statistics=counts,
    )


def generate_clarifying_question(inference: ColumnTypeInference) -> ClarifyingQuestion | None:
    """Question for an uncertain or all-unique column, if one is warranted.

    Uncertain columns with runner-up types get a multiple-choice question.
    Any column whose values are all distinct gets the identifier question,
    whatever its confidence.
    """
    confidence = inference.semantic_type_confidence
    counts = inference.statistics

    if confidence.level in _UNCERTAIN and inference.alternatives:
        options = [inference.semantic_type, *(a.type for a in inference.alternatives)]
        samples = ", ".join(f'"{value_label(v)}"' for v in inference.sample_values[:3])
        return ClarifyingQuestion(
            column=inference.column,
            question=(
                f"Column '{inference.column}' has values like {samples}. "
                "What type of data is this?"
            ),
            options=[format_semantic_type(t) for t in options[:MAX_QUESTION_OPTIONS]],
            reason=(
                f"Detected as {inference.semantic_type.value} "
                f"but with {confidence.value}% confidence"
            ),
            confidence=confidence.value,
        )

    non_null = counts.total_count - counts.null_count
    if non_null > 1 and counts.unique_count == non_null:
        return ClarifyingQuestion(
            column=inference.column,
            question=(
                f"Column '{inference.column}' has all unique values. "
                "Is this an identifier or unique data?"
            ),
            options=["ID/Primary Key", "Unique text values", "Something else"],
            reason="All values are unique, could be ID or just diverse data",
            confidence=confidence.value,
        )

    return None


def infer_schema(dataset: DataSet, patterns: PatternConfig | None = None) -> SchemaInference:
    """Infer types for every column of a dataset."""
    patterns = patterns or get_pattern_config()

    columns: list[ColumnTypeInference] = []
    questions: list[ClarifyingQuestion] = []
    for index, column in enumerate(dataset.columns):
        inference = infer_column(column, dataset.column_values(index), patterns)
        columns.append(inference)
        question = generate_clarifying_question(inference)
        if question is not None:
            questions.append(question)

    uncertain = [c for c in columns if c.semantic_type_confidence.level in _UNCERTAIN]
    if uncertain:
        reasons = [f"{len(uncertain)} column(s) have low confidence"]
    else:
        reasons = ["All columns have high or medium confidence inference"]

    average = (
        sum(c.semantic_type_confidence.value for c in columns) / len(columns) if columns else 0.0
    )

    logger.debug(
        "schema_inferred",
        dataset=dataset.name,
        columns=len(columns),
        uncertain_columns=len(uncertain),
        questions=len(questions),
    )

    return SchemaInference(
        columns=columns,
        overall_confidence=ConfidenceScore.create(average, reasons),
        suggested_questions=questions,
    )
