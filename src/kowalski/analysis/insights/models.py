"""Deep analysis models.

- DeepInsight: one ranked finding with evidence and a recommendation
- DataQualityReport / QualityIssue: 0-100 quality score and its deductions
- Segment: a category value whose rows differ on numeric columns
- DataStory, Recommendation: narrative output
- DeepAnalysisResult: everything ``run_deep_analysis`` produces
"""

from __future__ import annotations

from enum import Enum
from typing import Literal

from pydantic import BaseModel, Field


class InsightType(str, Enum):
    """What kind of observation an insight is."""

    ANOMALY = "anomaly"
    PATTERN = "pattern"
    CORRELATION = "correlation"
    TREND = "trend"
    SEGMENT = "segment"
    QUALITY = "quality"
    OPPORTUNITY = "opportunity"
    RISK = "risk"
    STORY = "story"


class InsightSeverity(str, Enum):
    CRITICAL = "critical"
    WARNING = "warning"
    INFO = "info"
    SUCCESS = "success"


# Ranking order: critical first, then warnings, then positives, then notes
SEVERITY_RANK = {
    InsightSeverity.CRITICAL: 0,
    InsightSeverity.WARNING: 1,
    InsightSeverity.SUCCESS: 2,
    InsightSeverity.INFO: 3,
}


class Evidence(BaseModel):
    """A labelled value backing an insight."""

    type: Literal["statistic", "example", "comparison"] = "statistic"
    label: str
    value: str | int | float
    context: str | None = None


class DeepInsight(BaseModel):
    id: str
    type: InsightType
    severity: InsightSeverity
    confidence: int = Field(ge=0, le=100)
    title: str
    description: str
    details: list[str] = Field(default_factory=list)
    evidence: list[Evidence] = Field(default_factory=list)
    recommendation: str | None = None
    affected_rows: list[int] = Field(default_factory=list)
    affected_columns: list[str] = Field(default_factory=list)


class QualityIssueType(str, Enum):
    MISSING = "missing"
    INCONSISTENT = "inconsistent"
    OUTLIER = "outlier"
    DUPLICATE = "duplicate"
    SUSPICIOUS = "suspicious"


class QualityIssue(BaseModel):
    """One problem found by the quality scan."""

    type: QualityIssueType
    column: str | None = None
    severity: InsightSeverity
    description: str
    affected_count: int
    suggestion: str


class DataQualityReport(BaseModel):
    score: int = Field(ge=0, le=100)
    issues: list[QualityIssue] = Field(default_factory=list)
    summary: str


class Segment(BaseModel):
    """Rows sharing one category value whose numeric means stand apart."""

    name: str
    description: str
    size: int
    characteristics: list[str] = Field(default_factory=list)
    distinctive_features: list[str] = Field(default_factory=list)


class DataStory(BaseModel):
    headline: str
    summary: str
    key_findings: list[str] = Field(default_factory=list)
    surprises: list[str] = Field(default_factory=list)
    questions: list[str] = Field(default_factory=list)
    next_steps: list[str] = Field(default_factory=list)


class Recommendation(BaseModel):
    priority: Literal["high", "medium", "low"]
    action: str
    reason: str
    impact: str


class DeepAnalysisResult(BaseModel):
    """Ranked insights plus the quality report, story and recommendations."""

    insights: list[DeepInsight] = Field(default_factory=list)
    story: DataStory
    recommendations: list[Recommendation] = Field(default_factory=list)
    data_quality: DataQualityReport
    segments: list[Segment] = Field(default_factory=list)
