"""Kowalski: exploratory data analysis engine.

Turns an in-memory table into descriptive statistics, typed and
confidence-scored column semantics, testable hypotheses, cross-dataset
join relationships, an EDA report and a ranked deep analysis.
"""

__version__ = "0.1.0"

from kowalski.analysis.hypotheses import evaluate_hypothesis, generate_hypotheses
from kowalski.analysis.insights import run_deep_analysis
from kowalski.analysis.relationships import find_relationships
from kowalski.analysis.sizing import AnalysisCache, get_processing_strategy, prepare_for_analysis
from kowalski.analysis.statistics import analyze_dataset, format_eda_report, generate_eda_report
from kowalski.analysis.typing import infer_schema
from kowalski.core.models.base import Result
from kowalski.core.models.dataset import DataSet
from kowalski.engine import (
    AnalysisEngine,
    EngineOptions,
    EngineResult,
    create_cache,
    fast_analysis,
    quick_analysis,
)

__all__ = [
    "AnalysisCache",
    "AnalysisEngine",
    "DataSet",
    "EngineOptions",
    "EngineResult",
    "Result",
    "__version__",
    "analyze_dataset",
    "create_cache",
    "evaluate_hypothesis",
    "fast_analysis",
    "find_relationships",
    "format_eda_report",
    "generate_eda_report",
    "generate_hypotheses",
    "get_processing_strategy",
    "infer_schema",
    "prepare_for_analysis",
    "quick_analysis",
    "run_deep_analysis",
]
