"""Tests for the analysis engine."""

import pytest

from kowalski import (
    AnalysisCache,
    AnalysisEngine,
    DataSet,
    EngineOptions,
    create_cache,
    fast_analysis,
    quick_analysis,
)
from kowalski.analysis.hypotheses import HypothesisType
from kowalski.analysis.sizing import DatasetTier, ProcessingStrategy
from kowalski.analysis.sizing.strategy import CHUNK_SIZES, SAMPLE_SIZES, TIER_THRESHOLDS
from kowalski.analysis.statistics import analyze_dataset, generate_insights
from kowalski.analysis.typing import infer_schema
from kowalski.core import logging as kowalski_logging
from kowalski.core.config import Settings


@pytest.fixture
def engine() -> AnalysisEngine:
    return AnalysisEngine(EngineOptions())


@pytest.fixture
def level_dataset(step_series) -> DataSet:
    return DataSet(name="levels", columns=["level"], rows=[[v] for v in step_series])


class TestEngineOptions:
    def test_from_settings(self):
        options = EngineOptions.from_settings(
            Settings(max_hypotheses=3, question_threshold=50), skip_time_series=True
        )
        assert options.max_hypotheses == 3
        assert options.question_threshold == 50
        assert options.skip_time_series
        assert not options.skip_hypotheses

    def test_create_cache_uses_configured_ttl(self):
        assert create_cache(Settings(cache_ttl_seconds=30)).ttl_seconds == 30


class TestAnalyze:
    @pytest.mark.asyncio
    async def test_full_run(self, engine, sales_dataset):
        result = await engine.analyze(sales_dataset)

        assert result.dataset == "sales"
        assert result.strategy.tier == DatasetTier.SMALL
        assert result.analysis.summary.total_rows == 10
        assert [c.column for c in result.schema_inference.columns] == [
            "region",
            "units",
            "revenue",
        ]
        assert 0 < len(result.hypotheses) <= 10
        assert len({h.id for h in result.hypotheses}) == len(result.hypotheses)
        assert any(
            h.type == HypothesisType.CORRELATION and h.variables == ["units", "revenue"]
            for h in result.hypotheses
        )
        # ten rows are below the time-series minimum
        assert result.time_series is not None
        assert result.time_series.is_empty
        assert result.warnings == []
        assert not result.from_cache

    @pytest.mark.asyncio
    async def test_max_hypotheses(self, sales_dataset):
        result = await AnalysisEngine(EngineOptions(max_hypotheses=1)).analyze(sales_dataset)
        assert len(result.hypotheses) == 1

    @pytest.mark.asyncio
    async def test_time_series_findings(self, engine, level_dataset):
        result = await engine.analyze(level_dataset)
        assert "level" in result.time_series.change_points

    @pytest.mark.asyncio
    async def test_cache_hit_on_second_run(self, sales_dataset):
        cache = AnalysisCache()
        engine = AnalysisEngine(EngineOptions(), cache=cache)

        first = await engine.analyze(sales_dataset)
        second = await engine.analyze(sales_dataset)

        assert not first.from_cache
        assert second.from_cache
        assert second.analysis == first.analysis
        assert len(cache) == 1

    @pytest.mark.asyncio
    async def test_failed_stage_becomes_warning(self, engine, sales_dataset, monkeypatch):
        def broken(*args, **kwargs):
            raise RuntimeError("boom")

        monkeypatch.setattr("kowalski.engine.generate_hypotheses", broken)

        result = await engine.analyze(sales_dataset)

        assert result.hypotheses == []
        assert result.warnings == ["hypotheses failed: boom"]
        assert result.analysis.summary.total_rows == 10

    @pytest.mark.asyncio
    async def test_chunked_statistics(self, engine, sales_dataset):
        strategy = ProcessingStrategy(
            tier=DatasetTier.LARGE,
            row_count=10,
            should_sample=False,
            sample_size=None,
            should_warn=False,
            should_chunk=True,
            chunk_size=4,
            estimated_time="",
        )
        analysis = await engine._statistics(sales_dataset, sales_dataset, strategy)
        assert analysis.summary.total_rows == 10
        assert analysis.summary.total_columns == 3

    @pytest.mark.asyncio
    async def test_chunked_tier_profiles_every_row(self, engine, monkeypatch):
        monkeypatch.setitem(TIER_THRESHOLDS, DatasetTier.SMALL, 10)
        monkeypatch.setitem(TIER_THRESHOLDS, DatasetTier.MEDIUM, 20)
        monkeypatch.setitem(TIER_THRESHOLDS, DatasetTier.LARGE, 40)
        monkeypatch.setitem(SAMPLE_SIZES, DatasetTier.MASSIVE, 20)
        monkeypatch.setitem(CHUNK_SIZES, DatasetTier.MASSIVE, 25)
        rows = [[i, 10 + i % 3] for i in range(60)]
        rows[55][1] = 500
        dataset = DataSet(name="readings", columns=["id", "value"], rows=rows)

        result = await engine.analyze(dataset)

        assert result.strategy.tier == DatasetTier.MASSIVE
        assert result.strategy.should_chunk
        # row 55 is not in the 20-row systematic sample
        assert result.analysis.summary.total_rows == 60
        assert [(o.column, o.row_index) for o in result.analysis.outliers] == [("value", 55)]
        assert len(result.warnings) == 1
        assert result.warnings[0].startswith("This dataset has 60 rows.")

    @pytest.mark.asyncio
    async def test_stage_errors_and_warnings_reach_run_metrics(
        self, engine, sales_dataset, monkeypatch
    ):
        def broken(*args, **kwargs):
            raise RuntimeError("boom")

        runs = []

        def capture_run_metrics():
            metrics = kowalski_logging.end_run_metrics()
            runs.append(metrics)
            return metrics

        monkeypatch.setattr("kowalski.engine.generate_hypotheses", broken)
        monkeypatch.setattr("kowalski.engine.end_run_metrics", capture_run_metrics)
        monkeypatch.setitem(TIER_THRESHOLDS, DatasetTier.SMALL, 5)

        await engine.analyze(sales_dataset)

        stages = {stage.stage_name: stage for stage in runs[0].stages}
        assert stages["hypotheses"].errors == ["boom"]
        assert stages["sizing"].warnings == []
        assert stages["statistics"].errors == []

        monkeypatch.setitem(TIER_THRESHOLDS, DatasetTier.MEDIUM, 8)
        result = await engine.analyze(sales_dataset)
        sizing = next(stage for stage in runs[1].stages if stage.stage_name == "sizing")
        assert result.strategy.tier == DatasetTier.LARGE
        assert sizing.warnings == [result.warnings[0]]

    @pytest.mark.asyncio
    async def test_report_and_deep_analysis(self, engine, sales_dataset):
        result = await engine.analyze(sales_dataset)

        assert result.report is not None
        assert result.report.bottom_line == "Data quality looks good. Ready for deeper analysis."
        assert result.deep_analysis is not None
        assert result.deep_analysis.data_quality.score == 100
        assert result.deep_analysis.story.headline == (
            'Strong positive correlation: "units" ↔ "revenue"'
        )
        assert {"initial_scan", "eda_report"} <= set(result.timings)

    @pytest.mark.asyncio
    async def test_failed_report_becomes_warning(self, engine, sales_dataset, monkeypatch):
        def broken(*args, **kwargs):
            raise ValueError("no report")

        monkeypatch.setattr("kowalski.engine.generate_eda_report", broken)

        result = await engine.analyze(sales_dataset)

        assert result.report is None
        assert result.deep_analysis is not None
        assert result.warnings == ["eda_report failed: no report"]


class TestHelpers:
    @pytest.mark.asyncio
    async def test_fast_analysis_skips_optional_stages(self, sales_dataset):
        result = await fast_analysis(sales_dataset)
        assert result.hypotheses == []
        assert result.time_series is None
        assert result.report is None
        assert result.deep_analysis is None
        assert result.insights == generate_insights(sales_dataset, analyze_dataset(sales_dataset))

    @pytest.mark.asyncio
    async def test_quick_analysis_with_cache(self, sales_dataset):
        cache = AnalysisCache()
        await quick_analysis(sales_dataset, cache=cache)
        assert (await quick_analysis(sales_dataset, cache=cache)).from_cache


class TestEngineOperations:
    def test_clarifying_questions_below_threshold(self, engine):
        dataset = DataSet(
            name="contacts",
            columns=["mystery", "email"],
            rows=[[f"{c}{i}", f"user{i}@example.com"] for i, c in enumerate("abcde")],
        )
        schema = infer_schema(dataset)

        questions = engine.get_clarifying_questions(schema)
        assert [q.column for q in questions] == ["mystery"]

        lenient = AnalysisEngine(EngineOptions(question_threshold=100))
        assert {q.column for q in lenient.get_clarifying_questions(schema)} == {
            "mystery",
            "email",
        }

    @pytest.mark.asyncio
    async def test_test_and_format_hypothesis(self, engine, sales_dataset):
        result = await engine.analyze(sales_dataset)
        correlation = next(
            h for h in result.hypotheses if h.variables == ["units", "revenue"]
        )

        tested = engine.evaluate_hypothesis(sales_dataset, correlation)
        assert tested.supported
        assert engine.format_hypothesis(correlation).startswith(f"**{correlation.id}: ")

    def test_find_relationships(self, engine, customers_dataset, orders_dataset):
        result = engine.find_relationships([customers_dataset, orders_dataset])
        assert len(result.relationships) == 1

    @pytest.mark.asyncio
    async def test_summarize(self, engine, sales_dataset):
        text = engine.summarize(await engine.analyze(sales_dataset))
        lines = text.splitlines()

        assert "  ANALYSIS COMPLETE" in lines
        assert "   • 10 records across 3 columns" in lines
        assert "   • 2 numeric, 1 categorical" in lines
        assert any(line.startswith("   • Schema confidence: ") for line in lines)
        assert "TOP HYPOTHESES:" in lines
        assert "WARNINGS:" not in lines
        assert "   • Data quality: 100/100 (Excellent data quality - ready for analysis)" in lines

    @pytest.mark.asyncio
    async def test_format_report(self, engine, sales_dataset):
        text = engine.format_report(await engine.analyze(sales_dataset))
        assert text.startswith("## EDA Summary")

        skipped = await fast_analysis(sales_dataset)
        assert engine.format_report(skipped) is None

    @pytest.mark.asyncio
    async def test_answer_question(self, engine, sales_dataset):
        expected = "The strongest correlations are:\n• units ↔ revenue: 1.000 (strong)"

        result = await engine.analyze(sales_dataset)
        assert engine.answer_question("Any relationship?", sales_dataset, result) == expected

        # deep analysis is run on demand when the run skipped it
        skipped = await fast_analysis(sales_dataset)
        assert engine.answer_question("Any relationship?", sales_dataset, skipped) == expected
