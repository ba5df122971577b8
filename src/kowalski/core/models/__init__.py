"""Core models."""

from kowalski.core.models.base import (
    ColumnType,
    ConfidenceLevel,
    ConfidenceScore,
    Result,
    get_confidence_level,
)
from kowalski.core.models.dataset import Cell, DataSet, infer_column_type, is_number

__all__ = [
    "Cell",
    "ColumnType",
    "ConfidenceLevel",
    "ConfidenceScore",
    "DataSet",
    "Result",
    "get_confidence_level",
    "infer_column_type",
    "is_number",
]
