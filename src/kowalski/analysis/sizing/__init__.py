"""Dataset sizing: tiers, sampling, chunking, result caching and timing."""

from kowalski.analysis.sizing.cache import AnalysisCache, CacheStats, generate_fingerprint
from kowalski.analysis.sizing.chunking import merge_analysis_results, process_in_chunks
from kowalski.analysis.sizing.models import (
    DatasetTier,
    PerformanceReport,
    PreparedDataset,
    ProcessingStrategy,
    TargetCheck,
)
from kowalski.analysis.sizing.strategy import (
    get_dataset_tier,
    get_processing_strategy,
    large_dataset_warning,
    prepare_for_analysis,
    sample_dataset,
)
from kowalski.analysis.sizing.timing import (
    PERFORMANCE_TARGETS,
    PerformanceTimer,
    check_performance_targets,
)

__all__ = [
    "PERFORMANCE_TARGETS",
    "AnalysisCache",
    "CacheStats",
    "DatasetTier",
    "PerformanceReport",
    "PerformanceTimer",
    "PreparedDataset",
    "ProcessingStrategy",
    "TargetCheck",
    "check_performance_targets",
    "generate_fingerprint",
    "get_dataset_tier",
    "get_processing_strategy",
    "large_dataset_warning",
    "merge_analysis_results",
    "prepare_for_analysis",
    "process_in_chunks",
    "sample_dataset",
]
