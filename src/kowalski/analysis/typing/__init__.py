"""Schema and semantic type inference."""

from kowalski.analysis.typing.formatting import (
    confidence_message,
    format_semantic_type,
    verbalize_confidence,
)
from kowalski.analysis.typing.inference import (
    generate_clarifying_question,
    infer_basic_type,
    infer_column,
    infer_schema,
)
from kowalski.analysis.typing.models import (
    BasicType,
    ClarifyingQuestion,
    ColumnTypeInference,
    ColumnValueCounts,
    SchemaInference,
    SemanticAlternative,
    SemanticType,
)
from kowalski.analysis.typing.patterns import (
    Pattern,
    PatternConfig,
    get_pattern_config,
    load_pattern_config,
)
from kowalski.analysis.typing.scorers import SCORERS, ScoringContext, register, score_all

__all__ = [
    "SCORERS",
    "BasicType",
    "ClarifyingQuestion",
    "ColumnTypeInference",
    "ColumnValueCounts",
    "Pattern",
    "PatternConfig",
    "SchemaInference",
    "ScoringContext",
    "SemanticAlternative",
    "SemanticType",
    "confidence_message",
    "format_semantic_type",
    "generate_clarifying_question",
    "get_pattern_config",
    "infer_basic_type",
    "infer_column",
    "infer_schema",
    "load_pattern_config",
    "register",
    "score_all",
    "verbalize_confidence",
]
