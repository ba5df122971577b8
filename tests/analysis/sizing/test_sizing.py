"""Tests for size tiers, sampling, chunking, caching and timing."""

import pytest

from kowalski.analysis.sizing import (
    AnalysisCache,
    DatasetTier,
    PerformanceTimer,
    ProcessingStrategy,
    check_performance_targets,
    generate_fingerprint,
    get_dataset_tier,
    get_processing_strategy,
    large_dataset_warning,
    merge_analysis_results,
    prepare_for_analysis,
    process_in_chunks,
    sample_dataset,
)
from kowalski.analysis.statistics import analyze_dataset
from kowalski.analysis.statistics.models import (
    AnalysisResult,
    Correlation,
    DataSummary,
    Outlier,
)
from kowalski.core.models.dataset import DataSet


class FakeClock:
    """Manually advanced clock."""

    def __init__(self, now: float = 0.0):
        self.now = now

    def __call__(self) -> float:
        return self.now


def _rows(n: int) -> DataSet:
    return DataSet(name="numbers", columns=["n"], rows=[[i] for i in range(n)])


def _strategy(tier: DatasetTier, rows: int, sample: int, time: str) -> ProcessingStrategy:
    return ProcessingStrategy(
        tier=tier,
        row_count=rows,
        should_sample=True,
        sample_size=sample,
        should_warn=True,
        should_chunk=True,
        chunk_size=10_000,
        estimated_time=time,
    )


class TestTiers:
    @pytest.mark.parametrize(
        "rows,tier",
        [
            (0, DatasetTier.SMALL),
            (10_000, DatasetTier.SMALL),
            (10_001, DatasetTier.MEDIUM),
            (100_000, DatasetTier.MEDIUM),
            (100_001, DatasetTier.LARGE),
            (500_000, DatasetTier.LARGE),
            (500_001, DatasetTier.MASSIVE),
        ],
    )
    def test_boundaries(self, rows, tier):
        assert get_dataset_tier(rows) == tier

    def test_small_strategy(self, sales_dataset):
        strategy = get_processing_strategy(sales_dataset)
        assert strategy.tier == DatasetTier.SMALL
        assert strategy.row_count == 10
        assert not strategy.should_sample
        assert strategy.sample_size is None
        assert not strategy.should_warn
        assert not strategy.should_chunk
        assert strategy.estimated_time == "< 2 seconds"

    def test_warnings(self):
        massive = large_dataset_warning(
            _strategy(DatasetTier.MASSIVE, 1_200_000, 5_000, "15+ seconds")
        )
        assert massive == (
            "This dataset has 1,200,000 rows. A systematic sample of 5,000 rows "
            "will be analyzed; full analysis would take 15+ seconds."
        )
        large = large_dataset_warning(_strategy(DatasetTier.LARGE, 250_000, 5_000, "5-15 seconds"))
        assert large.startswith("This is a substantial dataset with 250,000 rows.")

    def test_no_warning_for_small(self, sales_dataset):
        assert large_dataset_warning(get_processing_strategy(sales_dataset)) is None


class TestSampling:
    def test_systematic_stride(self):
        sample = sample_dataset(_rows(100), 30)
        # stride ceil(100 / 30) = 4
        assert [row[0] for row in sample.rows] == list(range(0, 100, 4))
        assert sample.columns == ["n"]
        assert sample.name == "numbers"

    def test_truncated_to_target(self):
        sample = sample_dataset(_rows(10), 4)
        # stride 3 gives rows 0, 3, 6, 9
        assert sample.row_count == 4

    def test_small_dataset_is_untouched(self):
        dataset = _rows(5)
        assert sample_dataset(dataset, 10) is dataset

    def test_zero_target(self):
        assert sample_dataset(_rows(5), 0).row_count == 0

    def test_deterministic(self):
        dataset = _rows(1000)
        assert sample_dataset(dataset, 70).rows == sample_dataset(dataset, 70).rows

    def test_prepare_medium_dataset(self):
        dataset = _rows(25_000)
        prepared = prepare_for_analysis(dataset)
        assert prepared.strategy.tier == DatasetTier.MEDIUM
        assert prepared.strategy.should_sample
        # stride ceil(25000 / 10000) = 3
        assert prepared.processed_data.row_count == 8_334
        assert prepared.warning is None

    def test_prepare_small_dataset(self, sales_dataset):
        prepared = prepare_for_analysis(sales_dataset)
        assert prepared.processed_data is sales_dataset
        assert prepared.strategy.tier == DatasetTier.SMALL


class TestChunking:
    @pytest.mark.asyncio
    async def test_chunks_in_order_with_progress(self):
        dataset = _rows(25)
        seen = []
        progress = []

        async def processor(chunk, index, total):
            seen.append((index, total, [row[0] for row in chunk.rows]))
            return analyze_dataset(chunk)

        results = await process_in_chunks(
            dataset, 10, processor, on_progress=lambda f, m: progress.append((f, m))
        )

        assert len(results) == 3
        assert [s[0] for s in seen] == [0, 1, 2]
        assert all(s[1] == 3 for s in seen)
        assert seen[2][2] == list(range(20, 25))
        assert [f for f, _ in progress] == pytest.approx([1 / 3, 2 / 3, 1.0])
        assert progress[-1][1] == "Processed chunk 3/3 (rows 21-25)"

    @pytest.mark.asyncio
    async def test_empty_dataset(self):
        async def processor(chunk, index, total):
            raise AssertionError("no chunk expected")

        assert await process_in_chunks(_rows(0), 10, processor) == []

    @pytest.mark.asyncio
    async def test_rejects_non_positive_chunk_size(self):
        async def processor(chunk, index, total):
            return analyze_dataset(chunk)

        with pytest.raises(ValueError):
            await process_in_chunks(_rows(5), 0, processor)


class TestMerge:
    def _result(self, rows: int, correlations=(), outliers=()) -> AnalysisResult:
        return AnalysisResult(
            summary=DataSummary(total_rows=rows, total_columns=2, numeric_columns=2),
            correlations=list(correlations),
            outliers=list(outliers),
        )

    def test_empty(self):
        merged = merge_analysis_results([])
        assert merged.summary.total_rows == 0
        assert merged.summary.total_columns == 0

    def test_single_is_returned_as_is(self):
        result = self._result(5)
        assert merge_analysis_results([result]) is result

    def test_rows_summed_and_correlations_deduplicated(self):
        first_corr = Correlation(column1="a", column2="b", value=0.9, strength="strong")
        later_corr = Correlation(column1="a", column2="b", value=0.1, strength="none")
        other_corr = Correlation(column1="a", column2="c", value=0.5, strength="moderate")

        merged = merge_analysis_results(
            [
                self._result(10, [first_corr]),
                self._result(7, [later_corr, other_corr]),
            ]
        )

        assert merged.summary.total_rows == 17
        assert merged.summary.numeric_columns == 2
        assert merged.correlations == [first_corr, other_corr]

    def test_outliers_capped(self):
        outlier = Outlier(column="a", row_index=0, value=1.0, expected_min=0.0, expected_max=0.5)
        chunks = [self._result(1, outliers=[outlier] * 60) for _ in range(3)]
        assert len(merge_analysis_results(chunks).outliers) == 100


class TestAnalysisCache:
    def test_fingerprint(self):
        dataset = DataSet(name="d", columns=["a", "b"], rows=[[1, None], [7, "x"]])
        assert generate_fingerprint(dataset) == "d|a,b|2|1,|7,x"

    def test_fingerprint_of_empty_dataset(self):
        assert generate_fingerprint(DataSet(name="e", columns=["a"])) == "e|a|0||"

    def test_hit_and_expiry(self, sales_dataset):
        clock = FakeClock()
        cache = AnalysisCache(ttl_seconds=300, clock=clock)
        result = analyze_dataset(sales_dataset)

        assert cache.get(sales_dataset) is None
        cache.set(sales_dataset, result)
        clock.now = 300.0
        assert cache.get(sales_dataset) is result

        clock.now = 300.5
        assert cache.get(sales_dataset) is None
        assert len(cache) == 0

    def test_equal_content_shares_entry(self, sales_dataset):
        cache = AnalysisCache(clock=FakeClock())
        result = analyze_dataset(sales_dataset)
        cache.set(sales_dataset, result)
        copy = DataSet(name="sales", columns=sales_dataset.columns, rows=list(sales_dataset.rows))
        assert cache.get(copy) is result

    def test_stats_and_clear(self, sales_dataset, customers_dataset):
        clock = FakeClock(100.0)
        cache = AnalysisCache(clock=clock)
        cache.set(sales_dataset, analyze_dataset(sales_dataset))
        clock.now = 110.0
        cache.set(customers_dataset, analyze_dataset(customers_dataset))
        clock.now = 115.0

        stats = cache.stats()
        assert stats.size == 2
        assert [e.age_seconds for e in stats.entries] == [15.0, 5.0]
        assert stats.entries[0].fingerprint == generate_fingerprint(sales_dataset)

        cache.clear()
        assert cache.stats().size == 0


class TestTiming:
    def test_marks_and_summary(self):
        clock = FakeClock()
        timer = PerformanceTimer(clock=clock)
        clock.now = 0.25
        assert timer.mark("scan") == pytest.approx(250.0)
        clock.now = 1.0
        timer.mark("report")

        assert timer.marks == pytest.approx({"scan": 250.0, "report": 1000.0})
        assert timer.summary() == "Total: 1000ms | scan: 250ms, report: 1000ms"
        assert timer.meets_target(1000.0)
        assert not timer.meets_target(999.0)

    def test_targets(self):
        report = check_performance_targets(
            {"initial_scan": 1500.0, "filter_apply": 800.0, "unknown": 1.0}
        )
        assert not report.passed
        assert [(r.target, r.passed) for r in report.results] == [
            ("initial_scan", True),
            ("filter_apply", False),
        ]
        assert report.results[1].limit_ms == 500.0

    def test_no_known_timings_pass(self):
        assert check_performance_targets({}).passed
