"""Sizing models."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict

from kowalski.core.models.dataset import DataSet


class DatasetTier(str, Enum):
    SMALL = "small"  # full analysis
    MEDIUM = "medium"  # sampled
    LARGE = "large"  # sampled, chunked, warned
    MASSIVE = "massive"


class ProcessingStrategy(BaseModel):
    """How a dataset of a given size should be processed.

    ``sample_size`` and ``chunk_size`` are ``None`` when the tier applies
    no limit.
    """

    tier: DatasetTier
    row_count: int
    should_sample: bool
    sample_size: int | None
    should_warn: bool
    should_chunk: bool
    chunk_size: int | None
    estimated_time: str


class PreparedDataset(BaseModel):
    """A dataset ready for analysis, plus the strategy that produced it."""

    model_config = ConfigDict(frozen=True)

    processed_data: DataSet
    strategy: ProcessingStrategy
    warning: str | None = None


class TargetCheck(BaseModel):
    target: str
    actual_ms: float
    limit_ms: float
    passed: bool


class PerformanceReport(BaseModel):
    passed: bool
    results: list[TargetCheck]
