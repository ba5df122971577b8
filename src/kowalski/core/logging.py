"""Structured logging for analysis runs.

Console output for interactive use, JSON lines for anything that ships logs
somewhere else. Each analysis run can collect per-stage metrics (rows,
columns, sub-operation timings) that are attached to log events while the
stage is active.

Usage:
    from kowalski.core.logging import get_logger, configure_logging

    configure_logging(log_level="DEBUG", log_format="json")

    logger = get_logger(__name__)
    logger.info("analysis_started", dataset="sales", rows=1200)

    with log_context(dataset="sales"):
        logger.info("stage_finished", stage="schema")
"""

from __future__ import annotations

import logging
import sys
from collections.abc import MutableMapping
from contextvars import ContextVar
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any, cast

import structlog
from structlog.typing import FilteringBoundLogger

from kowalski.core.config import Settings, get_settings

_run_context: ContextVar[dict[str, Any] | None] = ContextVar("run_context", default=None)


@dataclass
class StageMetrics:
    """Metrics collected while one engine stage runs."""

    stage_name: str
    start_time: datetime = field(default_factory=lambda: datetime.now(UTC))
    end_time: datetime | None = None

    columns_processed: int = 0
    rows_processed: int = 0

    # Sub-operation timings (seconds)
    timings: dict[str, float] = field(default_factory=dict)

    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    @property
    def duration_seconds(self) -> float:
        if self.end_time:
            return (self.end_time - self.start_time).total_seconds()
        return (datetime.now(UTC) - self.start_time).total_seconds()

    def record_timing(self, operation: str, seconds: float) -> None:
        self.timings[operation] = self.timings.get(operation, 0.0) + seconds

    def to_dict(self) -> dict[str, Any]:
        return {
            "stage_name": self.stage_name,
            "duration_seconds": self.duration_seconds,
            "columns_processed": self.columns_processed,
            "rows_processed": self.rows_processed,
            "timings": self.timings,
            "error_count": len(self.errors),
            "warning_count": len(self.warnings),
        }


@dataclass
class RunMetrics:
    """Aggregate metrics for one analysis run."""

    run_id: str
    dataset: str
    start_time: datetime = field(default_factory=lambda: datetime.now(UTC))
    end_time: datetime | None = None
    stages: list[StageMetrics] = field(default_factory=list)

    @property
    def duration_seconds(self) -> float:
        if self.end_time:
            return (self.end_time - self.start_time).total_seconds()
        return (datetime.now(UTC) - self.start_time).total_seconds()

    def add_stage(self, metrics: StageMetrics) -> None:
        self.stages.append(metrics)

    def to_dict(self) -> dict[str, Any]:
        return {
            "run_id": self.run_id,
            "dataset": self.dataset,
            "duration_seconds": self.duration_seconds,
            "stage_count": len(self.stages),
            "total_rows_processed": sum(s.rows_processed for s in self.stages),
            "stages": [s.to_dict() for s in self.stages],
        }

    def get_slowest_stages(self, n: int = 5) -> list[tuple[str, float]]:
        """Get the N slowest stages."""
        ordered = sorted(self.stages, key=lambda s: s.duration_seconds, reverse=True)
        return [(s.stage_name, s.duration_seconds) for s in ordered[:n]]


_current_metrics: ContextVar[RunMetrics | None] = ContextVar("current_metrics", default=None)
_current_stage_metrics: ContextVar[StageMetrics | None] = ContextVar(
    "current_stage_metrics", default=None
)


def start_run_metrics(run_id: str, dataset: str) -> RunMetrics:
    """Start collecting metrics for an analysis run."""
    metrics = RunMetrics(run_id=run_id, dataset=dataset)
    _current_metrics.set(metrics)
    return metrics


def get_run_metrics() -> RunMetrics | None:
    return _current_metrics.get()


def start_stage_metrics(stage_name: str) -> StageMetrics:
    """Start collecting metrics for a stage."""
    metrics = StageMetrics(stage_name=stage_name)
    _current_stage_metrics.set(metrics)
    return metrics


def get_stage_metrics() -> StageMetrics | None:
    return _current_stage_metrics.get()


def end_stage_metrics() -> StageMetrics | None:
    """End the current stage and attach it to the run."""
    stage_metrics = _current_stage_metrics.get()
    if stage_metrics:
        stage_metrics.end_time = datetime.now(UTC)
        run_metrics = _current_metrics.get()
        if run_metrics:
            run_metrics.add_stage(stage_metrics)
        _current_stage_metrics.set(None)
    return stage_metrics


def end_run_metrics() -> RunMetrics | None:
    """End run metrics collection."""
    metrics = _current_metrics.get()
    if metrics:
        metrics.end_time = datetime.now(UTC)
        _current_metrics.set(None)
    return metrics


def _add_run_context(
    logger: Any, method_name: str, event_dict: MutableMapping[str, Any]
) -> MutableMapping[str, Any]:
    context = _run_context.get()
    if context:
        event_dict.update(context)
    return event_dict


def _add_metrics_context(
    logger: Any, method_name: str, event_dict: MutableMapping[str, Any]
) -> MutableMapping[str, Any]:
    stage_metrics = _current_stage_metrics.get()
    if stage_metrics:
        event_dict["_stage"] = stage_metrics.stage_name
    run_metrics = _current_metrics.get()
    if run_metrics:
        event_dict["_run_id"] = run_metrics.run_id
    return event_dict


def configure_logging(
    log_level: str = "INFO",
    log_format: str = "console",
    show_timestamps: bool = True,
    color: bool = True,
) -> None:
    """Configure structured logging.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR)
        log_format: "console" for humans, "json" for log shipping
        show_timestamps: Whether to prefix events with an ISO timestamp
        color: Whether to use colors in console mode
    """
    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        _add_run_context,
        _add_metrics_context,
        structlog.processors.add_log_level,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]

    if show_timestamps:
        shared_processors.insert(0, structlog.processors.TimeStamper(fmt="iso", utc=True))

    if log_format == "json":
        processors = shared_processors + [
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]
    else:
        processors = shared_processors + [
            structlog.dev.ConsoleRenderer(
                colors=color,
                exception_formatter=structlog.dev.plain_traceback,
            ),
        ]

    level = getattr(logging, log_level.upper())
    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        format="%(message)s",
        level=level,
        handlers=[logging.StreamHandler(sys.stderr)],
        force=True,
    )


def get_logger(name: str | None = None) -> FilteringBoundLogger:
    """Get a structured logger (typically ``get_logger(__name__)``)."""
    return cast(FilteringBoundLogger, structlog.get_logger(name))


class LogContext:
    """Context manager for adding context to logs within a scope."""

    def __init__(self, **context: Any):
        self.context = context
        self.token: Any = None

    def __enter__(self) -> LogContext:
        current = _run_context.get() or {}
        self.token = _run_context.set({**current, **self.context})
        return self

    def __exit__(self, *args: Any) -> None:
        if self.token:
            _run_context.reset(self.token)


def log_context(**context: Any) -> LogContext:
    """Create a context manager for scoped logging context.

    Usage:
        with log_context(dataset="sales", stage="schema"):
            logger.info("processing")  # includes dataset and stage
    """
    return LogContext(**context)


def record_columns_processed(count: int) -> None:
    metrics = _current_stage_metrics.get()
    if metrics:
        metrics.columns_processed += count


def record_rows_processed(count: int) -> None:
    metrics = _current_stage_metrics.get()
    if metrics:
        metrics.rows_processed += count


def record_stage_error(message: str) -> None:
    metrics = _current_stage_metrics.get()
    if metrics:
        metrics.errors.append(message)


def record_stage_warning(message: str) -> None:
    metrics = _current_stage_metrics.get()
    if metrics:
        metrics.warnings.append(message)


def record_operation_timing(operation: str, seconds: float) -> None:
    """Record timing for a sub-operation in the current stage."""
    metrics = _current_stage_metrics.get()
    if metrics:
        metrics.record_timing(operation, seconds)


def setup_logging(settings: Settings | None = None) -> None:
    """Configure logging from ``KOWALSKI_LOG_LEVEL`` and ``KOWALSKI_LOG_FORMAT``."""
    settings = settings or get_settings()
    configure_logging(
        log_level=settings.log_level,
        log_format=settings.log_format,
        color=settings.log_format == "console",
    )


setup_logging()
