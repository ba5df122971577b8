"""Temporal pattern models."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field

from kowalski.analysis.statistics.models import TrendDirection


class TrendResult(BaseModel):
    """Raw output of ``detect_trend``."""

    direction: TrendDirection = "stable"
    change_percent: float = 0.0
    slope: float = 0.0


class ChangePoint(BaseModel):
    """A split index where the series mean shifts."""

    index: int
    before_mean: float
    after_mean: float
    significance: float
    direction: Literal["increase", "decrease"]


class SeasonalityResult(BaseModel):
    """Outcome of autocorrelation-based seasonality detection."""

    detected: bool
    period: int | None = None
    strength: float | None = None
    description: str


class TimeSeriesAnalysis(BaseModel):
    """Per-column time-series findings for a dataset."""

    change_points: dict[str, list[ChangePoint]] = Field(default_factory=dict)
    seasonality: dict[str, SeasonalityResult] = Field(default_factory=dict)

    @property
    def is_empty(self) -> bool:
        return not self.change_points and not self.seasonality
