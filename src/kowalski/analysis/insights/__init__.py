"""Deep analysis: data quality score, ranked insights, segments and the data story."""

from kowalski.analysis.insights.detectors import (
    correlation_insights,
    detect_anomalies,
    detect_row_anomalies,
    discover_patterns,
    find_segments,
    names_related,
    trend_insights,
)
from kowalski.analysis.insights.models import (
    DataQualityReport,
    DataStory,
    DeepAnalysisResult,
    DeepInsight,
    Evidence,
    InsightSeverity,
    InsightType,
    QualityIssue,
    QualityIssueType,
    Recommendation,
    Segment,
)
from kowalski.analysis.insights.processor import rank_insights, run_deep_analysis
from kowalski.analysis.insights.quality import (
    analyze_data_quality,
    find_near_duplicates,
    round_number_ratio,
)
from kowalski.analysis.insights.story import (
    answer_question,
    generate_data_story,
    generate_recommendations,
)

__all__ = [
    "DataQualityReport",
    "DataStory",
    "DeepAnalysisResult",
    "DeepInsight",
    "Evidence",
    "InsightSeverity",
    "InsightType",
    "QualityIssue",
    "QualityIssueType",
    "Recommendation",
    "Segment",
    "analyze_data_quality",
    "answer_question",
    "correlation_insights",
    "detect_anomalies",
    "detect_row_anomalies",
    "discover_patterns",
    "find_near_duplicates",
    "find_segments",
    "generate_data_story",
    "generate_recommendations",
    "names_related",
    "rank_insights",
    "round_number_ratio",
    "run_deep_analysis",
    "trend_insights",
]
