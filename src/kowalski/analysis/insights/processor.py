"""Deep analysis pass.

Runs the quality scan and every insight detector over a dataset and its
statistics, ranks the insights (critical, warning, success, info; then by
confidence) and derives the story and recommendations from that ranking.
"""

from __future__ import annotations

from kowalski.analysis.insights.detectors import (
    correlation_insights,
    detect_anomalies,
    discover_patterns,
    find_segments,
    segment_to_insight,
    trend_insights,
)
from kowalski.analysis.insights.models import SEVERITY_RANK, DeepAnalysisResult, DeepInsight
from kowalski.analysis.insights.quality import analyze_data_quality, issue_to_insight
from kowalski.analysis.insights.story import generate_data_story, generate_recommendations
from kowalski.analysis.statistics.models import AnalysisResult
from kowalski.core.logging import get_logger
from kowalski.core.models.dataset import DataSet

logger = get_logger(__name__)


def rank_insights(insights: list[DeepInsight]) -> list[DeepInsight]:
    """Most severe first, then most confident; ties keep detection order."""
    return sorted(insights, key=lambda i: (SEVERITY_RANK[i.severity], -i.confidence))


def run_deep_analysis(dataset: DataSet, analysis: AnalysisResult) -> DeepAnalysisResult:
    """Quality report, ranked insights, segments, story and recommendations."""
    quality = analyze_data_quality(dataset, analysis)
    segments = find_segments(dataset, analysis)

    insights = [issue_to_insight(issue) for issue in quality.issues]
    insights += detect_anomalies(dataset, analysis)
    insights += discover_patterns(dataset, analysis)
    insights += correlation_insights(analysis)
    insights += trend_insights(analysis)
    insights += [segment_to_insight(segment) for segment in segments]

    # The story reads detection order; the result carries the ranked list
    story = generate_data_story(dataset, analysis, insights)
    recommendations = generate_recommendations(insights, quality)
    ranked = rank_insights(insights)

    logger.debug(
        "deep_analysis_completed",
        dataset=dataset.name,
        insights=len(ranked),
        quality_score=quality.score,
        segments=len(segments),
    )

    return DeepAnalysisResult(
        insights=ranked,
        story=story,
        recommendations=recommendations,
        data_quality=quality,
        segments=segments,
    )
