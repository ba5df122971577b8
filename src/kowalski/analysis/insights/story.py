"""Narrative output built from ranked insights."""

from __future__ import annotations

from kowalski.analysis.insights.models import (
    DataQualityReport,
    DataStory,
    DeepAnalysisResult,
    DeepInsight,
    InsightSeverity,
    InsightType,
    Recommendation,
)
from kowalski.analysis.statistics.models import AnalysisResult
from kowalski.core.models.dataset import DataSet

MIN_KEY_FINDING_CONFIDENCE = 70
LOW_QUALITY_SCORE = 70


def _by_severity(insights: list[DeepInsight], severity: InsightSeverity) -> list[DeepInsight]:
    return [i for i in insights if i.severity == severity]


def generate_data_story(
    dataset: DataSet, analysis: AnalysisResult, insights: list[DeepInsight]
) -> DataStory:
    """Headline, summary, key findings, surprises, questions and next steps.

    ``insights`` is expected in ranked order.
    """
    critical = _by_severity(insights, InsightSeverity.CRITICAL)
    warnings = _by_severity(insights, InsightSeverity.WARNING)
    positives = _by_severity(insights, InsightSeverity.SUCCESS)
    rows, columns = dataset.row_count, len(dataset.columns)

    if critical:
        headline = f"Critical issues found: {critical[0].title}"
    elif positives:
        headline = positives[0].title
    elif warnings:
        headline = f"Attention needed: {warnings[0].title}"
    else:
        headline = f"Analysis of {rows:,} records across {columns} variables"

    summary = analysis.summary
    parts = [
        f"Dataset contains {rows:,} rows and {columns} columns.",
        f"{summary.numeric_columns} numeric and {summary.categorical_columns} "
        "categorical variables.",
    ]
    significant = [c for c in analysis.correlations if abs(c.value) > 0.5]
    if significant:
        plural = "s" if len(significant) > 1 else ""
        parts.append(f"Found {len(significant)} significant correlation{plural}.")

    key_findings = [
        i.title for i in insights if i.confidence >= MIN_KEY_FINDING_CONFIDENCE
    ][:5]
    surprises = [i.description for i in insights if i.type == InsightType.ANOMALY][:3]

    questions = []
    for insight in insights[:5]:
        first = insight.affected_columns[0] if insight.affected_columns else "the data"
        if insight.type == InsightType.CORRELATION:
            joined = " and ".join(insight.affected_columns)
            questions.append(f"What causes the relationship between {joined}?")
        elif insight.type == InsightType.ANOMALY:
            questions.append(f"Why are there anomalies in {first}?")
        elif insight.type == InsightType.TREND:
            questions.append(f"What's driving the trend in {first}?")

    next_steps = []
    if critical:
        next_steps.append("Address critical data quality issues first")
    if positives:
        next_steps.append("Investigate strong correlations for causal relationships")
    if warnings:
        next_steps.append("Review warnings and decide how to handle them")
    next_steps.append("Ask follow-up questions about specific findings")

    return DataStory(
        headline=headline,
        summary=" ".join(parts),
        key_findings=key_findings or ["No significant findings at high confidence"],
        surprises=surprises or ["No major surprises - data behaves as expected"],
        questions=questions or ["What specific aspect would you like to explore?"],
        next_steps=next_steps,
    )


def generate_recommendations(
    insights: list[DeepInsight], quality: DataQualityReport
) -> list[Recommendation]:
    """High priority for poor quality and critical insights, medium for the rest."""
    recommendations = []

    if quality.score < LOW_QUALITY_SCORE:
        recommendations.append(
            Recommendation(
                priority="high",
                action="Clean your data before analysis",
                reason=f"Data quality score is {quality.score}/100",
                impact="Analysis results may be unreliable with current data quality",
            )
        )

    for insight in _by_severity(insights, InsightSeverity.CRITICAL):
        if insight.recommendation:
            recommendations.append(
                Recommendation(
                    priority="high",
                    action=insight.recommendation,
                    reason=insight.title,
                    impact="Critical issue affecting analysis validity",
                )
            )

    for insight in _by_severity(insights, InsightSeverity.WARNING)[:3]:
        if insight.recommendation:
            recommendations.append(
                Recommendation(
                    priority="medium",
                    action=insight.recommendation,
                    reason=insight.title,
                    impact="May affect specific analyses",
                )
            )

    strong = [
        i for i in insights
        if i.type == InsightType.CORRELATION and i.severity == InsightSeverity.SUCCESS
    ]
    for insight in strong[:2]:
        recommendations.append(
            Recommendation(
                priority="medium",
                action=f"Investigate the {'-'.join(insight.affected_columns)} relationship",
                reason=insight.title,
                impact="Potential for actionable insights",
            )
        )

    return recommendations


def answer_question(
    question: str,
    dataset: DataSet,
    analysis: AnalysisResult,
    deep: DeepAnalysisResult,
) -> str:
    """Keyword-matched answer to a plain-language question about the data."""
    q = question.lower()

    if ("what" in q and "correlation" in q) or "relationship" in q:
        if not analysis.correlations:
            return "No significant correlations found in this dataset."
        lines = [
            f"• {c.column1} ↔ {c.column2}: {c.value:.3f} ({c.strength})"
            for c in analysis.correlations[:3]
        ]
        return "The strongest correlations are:\n" + "\n".join(lines)

    if "what" in q and any(word in q for word in ("issue", "problem", "quality")):
        issues = deep.data_quality.issues
        if not issues:
            return "No significant data quality issues found."
        return "Data quality issues found:\n" + "\n".join(
            f"• {i.description}" for i in issues[:5]
        )

    if "why" in q:
        return (
            "To understand causality, specific statistical tests are needed. "
            "Based on the correlations found, here are possible explanations:\n"
            + "\n".join(f"• {item}" for item in deep.story.questions[:3])
        )

    if "how many" in q or "count" in q:
        summary = analysis.summary
        return (
            "The dataset has:\n"
            f"• {dataset.row_count:,} rows\n"
            f"• {len(dataset.columns)} columns\n"
            f"• {summary.numeric_columns} numeric columns\n"
            f"• {summary.categorical_columns} categorical columns"
        )

    if any(word in q for word in ("summary", "overview", "tell me about")):
        return (
            deep.story.summary
            + "\n\nKey findings:\n"
            + "\n".join(f"• {f}" for f in deep.story.key_findings)
        )

    return (
        f"Found {len(deep.insights)} insights in this data. The main story is:\n\n"
        f"{deep.story.headline}\n\n{deep.story.summary}\n\n"
        "Ask about correlations, quality issues, trends, or specific columns."
    )
