"""Hypothesis models."""

from __future__ import annotations

from enum import Enum
from typing import Literal

from pydantic import BaseModel, Field


class HypothesisType(str, Enum):
    CORRELATION = "correlation"  # X may drive Y
    GROUP_DIFFERENCE = "group_difference"  # segment A differs from B
    TREND = "trend"  # metric is rising or falling
    ANOMALY = "anomaly"  # outliers may indicate an issue


class CausalInterpretation(str, Enum):
    CAUSAL = "causal"
    CORRELATIONAL = "correlational"
    REVERSE_CAUSAL = "reverse_causal"
    CONFOUNDED = "confounded"


class HypothesisStatus(str, Enum):
    """Lifecycle of a hypothesis: unverified until tested, then terminal."""

    UNVERIFIED = "unverified"
    SUPPORTED = "supported"
    UNSUPPORTED = "unsupported"


class HypothesisEvidence(BaseModel):
    """One piece of evidence behind a hypothesis."""

    type: Literal["statistic", "pattern", "comparison", "test"]
    description: str
    value: float | None = None
    p_value: float | None = None
    interpretation: str


class Hypothesis(BaseModel):
    """A testable statement generated from data patterns."""

    id: str
    type: HypothesisType
    title: str
    description: str
    confidence: int  # 0-100
    evidence: list[HypothesisEvidence] = Field(default_factory=list)
    interpretation: CausalInterpretation = CausalInterpretation.CORRELATIONAL
    confounders: list[str] = Field(default_factory=list)
    recommendations: list[str] = Field(default_factory=list)
    variables: list[str] = Field(default_factory=list)
    testable: bool = True
    test_method: str | None = None
    status: HypothesisStatus = HypothesisStatus.UNVERIFIED


class HypothesisTestResult(BaseModel):
    """Outcome of re-testing a hypothesis against raw data."""

    hypothesis_id: str
    supported: bool
    confidence: int
    test_statistic: float | None = None
    p_value: float | None = None
    effect_size: float | None = None
    interpretation: str
    caveats: list[str] = Field(default_factory=list)
