"""Sequential chunk processing and merging of partial results."""

from __future__ import annotations

import math
from collections.abc import Awaitable, Callable

from kowalski.analysis.statistics.models import (
    AnalysisResult,
    Association,
    Correlation,
    DataSummary,
)
from kowalski.core.logging import get_logger
from kowalski.core.models.dataset import DataSet

logger = get_logger(__name__)

MAX_MERGED_OUTLIERS = 100

ChunkProcessor = Callable[[DataSet, int, int], Awaitable[AnalysisResult]]
ProgressCallback = Callable[[float, str], None]


async def process_in_chunks(
    dataset: DataSet,
    chunk_size: int,
    processor: ChunkProcessor,
    on_progress: ProgressCallback | None = None,
) -> list[AnalysisResult]:
    """Run ``processor`` over contiguous row blocks, one at a time.

    Each chunk is awaited before the next starts. ``on_progress`` receives
    the completed fraction in (0, 1] and a message after every chunk.
    """
    if chunk_size <= 0:
        raise ValueError(f"chunk_size must be positive, got {chunk_size}")

    total_rows = dataset.row_count
    total_chunks = math.ceil(total_rows / chunk_size)
    results = []

    for i in range(total_chunks):
        start = i * chunk_size
        end = min(start + chunk_size, total_rows)
        chunk = dataset.with_rows(dataset.rows[start:end])
        results.append(await processor(chunk, i, total_chunks))
        if on_progress is not None:
            on_progress(
                (i + 1) / total_chunks,
                f"Processed chunk {i + 1}/{total_chunks} (rows {start + 1}-{end})",
            )

    logger.debug("chunks_processed", dataset=dataset.name, chunks=total_chunks)
    return results


def merge_analysis_results(results: list[AnalysisResult]) -> AnalysisResult:
    """Combine per-chunk results.

    Row counts are summed. Column statistics, trends and the remaining
    summary fields come from the first chunk. Correlations are unioned by
    column pair and associations by column pair and method (first
    occurrence wins). Outliers are capped.
    """
    if not results:
        return AnalysisResult(summary=DataSummary(total_rows=0, total_columns=0))
    if len(results) == 1:
        return results[0]

    first = results[0]
    correlations: dict[tuple[str, str], Correlation] = {}
    for result in results:
        for corr in result.correlations:
            correlations.setdefault((corr.column1, corr.column2), corr)

    associations: dict[tuple[str, str, str], Association] = {}
    for result in results:
        for assoc in result.associations:
            associations.setdefault((assoc.column1, assoc.column2, assoc.method), assoc)

    outliers = [o for result in results for o in result.outliers]

    return AnalysisResult(
        summary=first.summary.model_copy(
            update={"total_rows": sum(r.summary.total_rows for r in results)}
        ),
        statistics=dict(first.statistics),
        correlations=list(correlations.values()),
        associations=list(associations.values()),
        trends=list(first.trends),
        outliers=outliers[:MAX_MERGED_OUTLIERS],
    )
