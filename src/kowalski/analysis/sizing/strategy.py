"""Size tiers, processing strategy and deterministic sampling.

Large inputs are reduced by systematic sampling before analysis runs.
Tiers that chunk still profile every input row, one block at a time.
"""

from __future__ import annotations

import math

from kowalski.analysis.sizing.models import DatasetTier, PreparedDataset, ProcessingStrategy
from kowalski.core.logging import get_logger
from kowalski.core.models.dataset import DataSet

logger = get_logger(__name__)

# Upper row bound per tier; anything above LARGE is MASSIVE
TIER_THRESHOLDS = {
    DatasetTier.SMALL: 10_000,
    DatasetTier.MEDIUM: 100_000,
    DatasetTier.LARGE: 500_000,
}

SAMPLE_SIZES: dict[DatasetTier, int | None] = {
    DatasetTier.SMALL: None,
    DatasetTier.MEDIUM: 10_000,
    DatasetTier.LARGE: 5_000,
    DatasetTier.MASSIVE: 5_000,
}

CHUNK_SIZES: dict[DatasetTier, int | None] = {
    DatasetTier.SMALL: None,
    DatasetTier.MEDIUM: 50_000,
    DatasetTier.LARGE: 25_000,
    DatasetTier.MASSIVE: 10_000,
}

ESTIMATED_TIMES = {
    DatasetTier.SMALL: "< 2 seconds",
    DatasetTier.MEDIUM: "2-5 seconds",
    DatasetTier.LARGE: "5-15 seconds",
    DatasetTier.MASSIVE: "15+ seconds",
}

_WARNED_TIERS = (DatasetTier.LARGE, DatasetTier.MASSIVE)


def get_dataset_tier(row_count: int) -> DatasetTier:
    for tier, limit in TIER_THRESHOLDS.items():
        if row_count <= limit:
            return tier
    return DatasetTier.MASSIVE


def get_processing_strategy(dataset: DataSet) -> ProcessingStrategy:
    row_count = dataset.row_count
    tier = get_dataset_tier(row_count)
    return ProcessingStrategy(
        tier=tier,
        row_count=row_count,
        should_sample=tier != DatasetTier.SMALL,
        sample_size=SAMPLE_SIZES[tier],
        should_warn=tier in _WARNED_TIERS,
        should_chunk=tier in _WARNED_TIERS,
        chunk_size=CHUNK_SIZES[tier],
        estimated_time=ESTIMATED_TIMES[tier],
    )


def large_dataset_warning(strategy: ProcessingStrategy) -> str | None:
    """User-facing note for tiers that warn, else None."""
    if not strategy.should_warn:
        return None
    rows, sample = f"{strategy.row_count:,}", f"{strategy.sample_size:,}"
    if strategy.tier == DatasetTier.MASSIVE:
        return (
            f"This dataset has {rows} rows. A systematic sample of {sample} rows "
            f"will be analyzed; full analysis would take {strategy.estimated_time}."
        )
    return (
        f"This is a substantial dataset with {rows} rows. Sampling {sample} rows "
        f"for performance. Estimated time: {strategy.estimated_time}."
    )


def sample_dataset(dataset: DataSet, target: int) -> DataSet:
    """Keep every ceil(n/target)-th row, truncated to ``target`` rows.

    Deterministic: the same dataset always yields the same sample.
    """
    n = dataset.row_count
    if target <= 0:
        return dataset.with_rows([])
    if n <= target:
        return dataset
    stride = math.ceil(n / target)
    return dataset.with_rows(dataset.rows[::stride][:target])


def prepare_for_analysis(dataset: DataSet) -> PreparedDataset:
    """Classify the dataset and sample it when its tier calls for it."""
    strategy = get_processing_strategy(dataset)
    processed = dataset
    if (
        strategy.should_sample
        and strategy.sample_size is not None
        and strategy.sample_size < dataset.row_count
    ):
        processed = sample_dataset(dataset, strategy.sample_size)
        logger.debug(
            "dataset_sampled",
            dataset=dataset.name,
            tier=strategy.tier.value,
            rows=dataset.row_count,
            sampled_rows=processed.row_count,
        )
    return PreparedDataset(
        processed_data=processed,
        strategy=strategy,
        warning=large_dataset_warning(strategy),
    )
