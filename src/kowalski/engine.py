"""Analysis engine: runs every analysis stage over one dataset.

Stages run in order: sizing, cache lookup, schema inference, statistics,
hypotheses, time series, insights, EDA report and deep analysis. Every
stage after statistics is optional. A failure in one is recorded as a
warning on the result instead of aborting the run.

Usage:
    engine = AnalysisEngine(cache=AnalysisCache())
    result = await engine.analyze(dataset)
    print(engine.summarize(result))
"""

from __future__ import annotations

import time
from collections.abc import Callable
from typing import Any, TypeVar
from uuid import uuid4

from pydantic import BaseModel, Field

from kowalski.analysis.hypotheses import (
    Hypothesis,
    HypothesisTestResult,
    evaluate_hypothesis,
    format_hypothesis,
    generate_hypotheses,
)
from kowalski.analysis.insights import DeepAnalysisResult, answer_question, run_deep_analysis
from kowalski.analysis.relationships import RelationshipDiscoveryResult, find_relationships
from kowalski.analysis.sizing import (
    AnalysisCache,
    PerformanceTimer,
    ProcessingStrategy,
    check_performance_targets,
    merge_analysis_results,
    prepare_for_analysis,
    process_in_chunks,
)
from kowalski.analysis.statistics import (
    AnalysisResult,
    EDAReport,
    analyze_dataset,
    format_eda_report,
    generate_eda_report,
    generate_insights,
)
from kowalski.analysis.temporal import TimeSeriesAnalysis, analyze_time_series
from kowalski.analysis.typing import ClarifyingQuestion, SchemaInference, infer_schema
from kowalski.core.config import Settings, get_settings
from kowalski.core.logging import (
    end_run_metrics,
    end_stage_metrics,
    get_logger,
    log_context,
    record_columns_processed,
    record_operation_timing,
    record_rows_processed,
    record_stage_error,
    record_stage_warning,
    start_run_metrics,
    start_stage_metrics,
)
from kowalski.core.models.base import Result
from kowalski.core.models.dataset import DataSet

logger = get_logger(__name__)

_RULE = "═" * 43


class EngineOptions(BaseModel):
    """Per-engine switches. Defaults come from ``Settings``."""

    skip_hypotheses: bool = False
    skip_time_series: bool = False
    skip_deep_analysis: bool = False
    max_hypotheses: int = 10
    question_threshold: int = 70
    time_series_min_points: int = 20

    @classmethod
    def from_settings(cls, settings: Settings | None = None, **overrides: Any) -> EngineOptions:
        settings = settings or get_settings()
        values: dict[str, Any] = {
            "max_hypotheses": settings.max_hypotheses,
            "question_threshold": settings.question_threshold,
            "time_series_min_points": settings.time_series_min_points,
        }
        values.update(overrides)
        return cls(**values)


class EngineResult(BaseModel):
    """Everything one engine run produced."""

    dataset: str
    strategy: ProcessingStrategy
    analysis: AnalysisResult
    schema_inference: SchemaInference
    hypotheses: list[Hypothesis] = Field(default_factory=list)
    time_series: TimeSeriesAnalysis | None = None
    insights: list[str] = Field(default_factory=list)
    report: EDAReport | None = None
    deep_analysis: DeepAnalysisResult | None = None
    timings: dict[str, float] = Field(default_factory=dict)  # ms since run start
    warnings: list[str] = Field(default_factory=list)
    from_cache: bool = False


T = TypeVar("T")


def _run_stage(name: str, fn: Callable[[], T]) -> Result[T]:
    """Run one optional stage, turning an unexpected failure into a failed Result."""
    start_stage_metrics(name)
    started = time.perf_counter()
    try:
        return Result.ok(fn())
    except Exception as e:
        logger.error("stage_failed", stage=name, error=str(e))
        record_stage_error(str(e))
        return Result.fail(f"{name} failed: {e}")
    finally:
        record_operation_timing(name, time.perf_counter() - started)
        end_stage_metrics()


def create_cache(settings: Settings | None = None) -> AnalysisCache:
    """An ``AnalysisCache`` using the configured entry lifetime."""
    settings = settings or get_settings()
    return AnalysisCache(ttl_seconds=settings.cache_ttl_seconds)


class AnalysisEngine:
    """Coordinates sizing, caching and all analysis modules for a dataset."""

    def __init__(
        self,
        options: EngineOptions | None = None,
        cache: AnalysisCache | None = None,
    ) -> None:
        self.options = options or EngineOptions.from_settings()
        self.cache = cache

    async def analyze(self, dataset: DataSet) -> EngineResult:
        run_id = uuid4().hex[:12]
        with log_context(run_id=run_id, dataset=dataset.name):
            start_run_metrics(run_id, dataset.name)
            try:
                return await self._analyze(dataset)
            finally:
                metrics = end_run_metrics()
                if metrics is not None:
                    logger.info(
                        "analysis_completed",
                        duration_seconds=round(metrics.duration_seconds, 3),
                        slowest_stages=metrics.get_slowest_stages(3),
                    )

    async def _analyze(self, dataset: DataSet) -> EngineResult:
        warnings: list[str] = []
        timer = PerformanceTimer()

        start_stage_metrics("sizing")
        prepared = prepare_for_analysis(dataset)
        data, strategy = prepared.processed_data, prepared.strategy
        record_rows_processed(data.row_count)
        if prepared.warning:
            warnings.append(prepared.warning)
            record_stage_warning(prepared.warning)
            logger.warning("large_dataset", tier=strategy.tier.value, rows=strategy.row_count)
        end_stage_metrics()

        analysis = self.cache.get(dataset) if self.cache is not None else None
        from_cache = analysis is not None

        start_stage_metrics("schema")
        schema = infer_schema(data)
        record_columns_processed(len(data.columns))
        end_stage_metrics()

        if analysis is None:
            start_stage_metrics("statistics")
            analysis = await self._statistics(dataset, data, strategy)
            record_rows_processed(analysis.summary.total_rows)
            end_stage_metrics()
            if self.cache is not None:
                self.cache.set(dataset, analysis)
        else:
            logger.debug("cache_hit")
        timer.mark("initial_scan")

        hypotheses: list[Hypothesis] = []
        if not self.options.skip_hypotheses:
            generated = _run_stage(
                "hypotheses",
                lambda: generate_hypotheses(data, analysis, self.options.max_hypotheses),
            )
            if generated.success:
                hypotheses = generated.unwrap()
            elif generated.error:
                warnings.append(generated.error)

        time_series: TimeSeriesAnalysis | None = None
        if not self.options.skip_time_series:
            series = _run_stage(
                "time_series",
                lambda: analyze_time_series(data, self.options.time_series_min_points),
            )
            if series.success:
                time_series = series.value
            elif series.error:
                warnings.append(series.error)

        insights = generate_insights(data, analysis)

        report: EDAReport | None = None
        deep: DeepAnalysisResult | None = None
        if not self.options.skip_deep_analysis:
            generated_report = _run_stage("eda_report", lambda: generate_eda_report(data, analysis))
            timer.mark("eda_report")
            if generated_report.success:
                report = generated_report.value
            elif generated_report.error:
                warnings.append(generated_report.error)

            deep_result = _run_stage("deep_analysis", lambda: run_deep_analysis(data, analysis))
            if deep_result.success:
                deep = deep_result.value
            elif deep_result.error:
                warnings.append(deep_result.error)

        performance = check_performance_targets(timer.marks)
        for check in performance.results:
            if not check.passed:
                logger.warning(
                    "performance_target_missed",
                    target=check.target,
                    actual_ms=round(check.actual_ms, 1),
                    limit_ms=check.limit_ms,
                )

        logger.info(
            "dataset_analyzed",
            tier=strategy.tier.value,
            rows=data.row_count,
            hypotheses=len(hypotheses),
            from_cache=from_cache,
        )

        return EngineResult(
            dataset=dataset.name,
            strategy=strategy,
            analysis=analysis,
            schema_inference=schema,
            hypotheses=hypotheses,
            time_series=time_series,
            insights=insights,
            report=report,
            deep_analysis=deep,
            timings=timer.marks,
            warnings=warnings,
            from_cache=from_cache,
        )

    async def _statistics(
        self, dataset: DataSet, sample: DataSet, strategy: ProcessingStrategy
    ) -> AnalysisResult:
        """Statistics for the run.

        Tiers that chunk are profiled block by block over every input row;
        everything else is profiled in one pass over the (possibly sampled)
        data.
        """
        chunk_size = strategy.chunk_size
        if not strategy.should_chunk or chunk_size is None or dataset.row_count <= chunk_size:
            return analyze_dataset(sample)

        async def analyze_chunk(chunk: DataSet, index: int, total: int) -> AnalysisResult:
            result = analyze_dataset(chunk)
            # Outlier rows are reported against the full input
            offset = index * chunk_size
            outliers = [
                o.model_copy(update={"row_index": o.row_index + offset}) for o in result.outliers
            ]
            return result.model_copy(update={"outliers": outliers})

        def on_progress(progress: float, message: str) -> None:
            logger.debug("chunk_progress", progress=round(progress, 3), message=message)

        results = await process_in_chunks(dataset, chunk_size, analyze_chunk, on_progress)
        return merge_analysis_results(results)

    def get_clarifying_questions(self, schema: SchemaInference) -> list[ClarifyingQuestion]:
        """Questions for columns below the configured confidence threshold."""
        threshold = self.options.question_threshold
        return [q for q in schema.suggested_questions if q.confidence < threshold]

    def evaluate_hypothesis(self, dataset: DataSet, hypothesis: Hypothesis) -> HypothesisTestResult:
        return evaluate_hypothesis(dataset, hypothesis)

    def find_relationships(self, datasets: list[DataSet]) -> RelationshipDiscoveryResult:
        return find_relationships(datasets)

    def format_hypothesis(self, hypothesis: Hypothesis) -> str:
        return format_hypothesis(hypothesis)

    def format_report(self, result: EngineResult) -> str | None:
        """EDA report text of a run, or None when the report was skipped or failed."""
        if result.report is None:
            return None
        return format_eda_report(result.report)

    def answer_question(self, question: str, dataset: DataSet, result: EngineResult) -> str:
        """Answer a plain-language question from a finished run.

        Runs the deep analysis on demand when the run skipped it.
        """
        deep = result.deep_analysis or run_deep_analysis(dataset, result.analysis)
        return answer_question(question, dataset, result.analysis, deep)

    def summarize(self, result: EngineResult) -> str:
        """Short plain-text briefing of an engine run."""
        summary = result.analysis.summary
        schema = result.schema_inference
        lines = [
            _RULE,
            "  ANALYSIS COMPLETE",
            _RULE,
            "",
            "DATA OVERVIEW:",
            f"   • {summary.total_rows:,} records across {summary.total_columns} columns",
            f"   • {summary.numeric_columns} numeric, {summary.categorical_columns} categorical",
            f"   • Schema confidence: {round(schema.overall_confidence.value)}%",
        ]

        if result.deep_analysis is not None:
            quality = result.deep_analysis.data_quality
            lines.append(f"   • Data quality: {quality.score}/100 ({quality.summary})")

        if result.warnings:
            lines += ["", "WARNINGS:"]
            lines += [f"   • {w}" for w in result.warnings]

        if result.insights:
            lines += ["", "KEY INSIGHTS:"]
            lines += [f"   • {i}" for i in result.insights[:3]]

        if result.hypotheses:
            lines += ["", "TOP HYPOTHESES:"]
            for h in result.hypotheses[:3]:
                lines.append(f"   • {h.title} ({h.confidence}% confidence)")

        series = result.time_series
        if series is not None:
            change_points = sum(len(points) for points in series.change_points.values())
            seasonal = len(series.seasonality)
            if change_points or seasonal:
                lines += ["", "TIME SERIES PATTERNS:"]
                if change_points:
                    lines.append(f"   • {change_points} significant change point(s) detected")
                if seasonal:
                    lines.append(f"   • Seasonality detected in {seasonal} column(s)")

        questions = self.get_clarifying_questions(schema)
        if questions:
            lines += ["", "CLARIFICATION NEEDED:"]
            lines += [f"   • {q.question}" for q in questions[:2]]

        lines += ["", _RULE]
        return "\n".join(lines)


async def quick_analysis(dataset: DataSet, cache: AnalysisCache | None = None) -> EngineResult:
    """Full pipeline with default options."""
    return await AnalysisEngine(cache=cache).analyze(dataset)


async def fast_analysis(dataset: DataSet) -> EngineResult:
    """Statistics, schema and insights only; every later stage is skipped."""
    options = EngineOptions.from_settings(
        skip_hypotheses=True, skip_time_series=True, skip_deep_analysis=True
    )
    return await AnalysisEngine(options).analyze(dataset)
