"""Display helpers for inferred types and confidence."""

from __future__ import annotations

from typing import TYPE_CHECKING

from kowalski.analysis.typing.models import SemanticType
from kowalski.core.models.base import ConfidenceLevel, ConfidenceScore

if TYPE_CHECKING:
    from kowalski.analysis.typing.models import ColumnTypeInference

_LABELS = {
    SemanticType.PERCENTAGE: "Percentage (0-100%)",
    SemanticType.CURRENCY: "Currency/Money",
    SemanticType.COUNT: "Count/Quantity",
    SemanticType.RATE: "Rate/Probability (0-1)",
    SemanticType.ID: "ID/Identifier",
    SemanticType.BOOLEAN: "Yes/No (Boolean)",
    SemanticType.CATEGORICAL: "Category/Label",
    SemanticType.TEXT: "Free-form Text",
    SemanticType.DATE: "Date/Time",
    SemanticType.TIMESTAMP: "Unix Timestamp",
    SemanticType.EMAIL: "Email Address",
    SemanticType.PHONE: "Phone Number",
    SemanticType.URL: "URL/Link",
    SemanticType.UNKNOWN: "Unknown/Other",
}


def format_semantic_type(semantic_type: SemanticType) -> str:
    """Human label for a semantic type."""
    return _LABELS.get(semantic_type, semantic_type.value)


def verbalize_confidence(confidence: ConfidenceScore) -> str:
    if confidence.level == ConfidenceLevel.HIGH:
        return "highly confident"
    if confidence.level == ConfidenceLevel.MEDIUM:
        return f"{confidence.value}% confident"
    if confidence.level == ConfidenceLevel.LOW:
        return f"only {confidence.value}% confident"
    return f"uncertain ({confidence.value}% confidence)"


def confidence_message(inference: ColumnTypeInference) -> str:
    """One sentence stating what a column is and how sure the inference is."""
    confidence = inference.semantic_type_confidence
    label = format_semantic_type(inference.semantic_type)
    column = inference.column

    if confidence.level == ConfidenceLevel.HIGH:
        return f'{verbalize_confidence(confidence).capitalize()} that "{column}" is {label}.'
    if confidence.level == ConfidenceLevel.MEDIUM:
        return (
            f'"{column}" appears to be {label}. '
            f"{verbalize_confidence(confidence).capitalize()}, proceeding with caution."
        )
    return (
        f'{verbalize_confidence(confidence).capitalize()} about "{column}". '
        f"It might be {label}; clarification would help."
    )
