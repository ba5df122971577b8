"""Schema inference models."""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, Field

from kowalski.core.models.base import ConfidenceScore


class BasicType(str, Enum):
    """Storage-level type of a column's values."""

    STRING = "string"
    NUMBER = "number"
    DATE = "date"
    BOOLEAN = "boolean"
    NULL = "null"


class SemanticType(str, Enum):
    """What a column's values represent."""

    PERCENTAGE = "percentage"  # 0-100 or 0-1, possibly with a % suffix
    CURRENCY = "currency"
    COUNT = "count"  # non-negative whole numbers
    RATE = "rate"  # 0-1 decimals (conversion, probability)
    ID = "id"  # sequential, UUID or hash identifiers
    BOOLEAN = "boolean"
    CATEGORICAL = "categorical"
    TEXT = "text"
    DATE = "date"
    TIMESTAMP = "timestamp"  # unix seconds or milliseconds
    EMAIL = "email"
    PHONE = "phone"
    URL = "url"
    UNKNOWN = "unknown"


class SemanticAlternative(BaseModel):
    """A runner-up semantic type and its score."""

    type: SemanticType
    confidence: int


class ColumnValueCounts(BaseModel):
    """Value counts gathered while inferring a column."""

    total_count: int
    null_count: int
    unique_count: int
    numeric_count: int
    string_count: int


class ColumnTypeInference(BaseModel):
    """Basic and semantic type of one column, with confidence."""

    column: str
    basic_type: BasicType
    basic_type_confidence: ConfidenceScore
    semantic_type: SemanticType
    semantic_type_confidence: ConfidenceScore
    alternatives: list[SemanticAlternative] = Field(default_factory=list)
    sample_values: list[Any] = Field(default_factory=list)
    statistics: ColumnValueCounts


class ClarifyingQuestion(BaseModel):
    """A question to put to the user about an uncertain column."""

    column: str
    question: str
    options: list[str]
    reason: str
    confidence: int


class SchemaInference(BaseModel):
    """Inferred schema of a dataset."""

    columns: list[ColumnTypeInference] = Field(default_factory=list)
    overall_confidence: ConfidenceScore
    suggested_questions: list[ClarifyingQuestion] = Field(default_factory=list)

    def get_column(self, name: str) -> ColumnTypeInference | None:
        return next((c for c in self.columns if c.column == name), None)
