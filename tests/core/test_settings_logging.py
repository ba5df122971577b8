"""Tests for settings and run/stage metrics."""

import structlog
from structlog.dev import ConsoleRenderer
from structlog.processors import JSONRenderer

from kowalski.core.config import Settings, get_settings
from kowalski.core.logging import (
    end_run_metrics,
    end_stage_metrics,
    get_logger,
    get_run_metrics,
    get_stage_metrics,
    log_context,
    record_columns_processed,
    record_operation_timing,
    record_rows_processed,
    record_stage_error,
    record_stage_warning,
    setup_logging,
    start_run_metrics,
    start_stage_metrics,
)


class TestSettings:
    def test_defaults(self):
        settings = Settings()
        assert settings.max_hypotheses == 10
        assert settings.question_threshold == 70
        assert settings.cache_ttl_seconds == 300.0
        assert settings.patterns_path.name == "patterns.yaml"
        assert settings.patterns_path.exists()

    def test_env_override(self, monkeypatch):
        monkeypatch.setenv("KOWALSKI_MAX_HYPOTHESES", "4")
        monkeypatch.setenv("KOWALSKI_LOG_FORMAT", "json")
        settings = Settings()
        assert settings.max_hypotheses == 4
        assert settings.log_format == "json"

    def test_get_settings_is_cached(self):
        assert get_settings() is get_settings()


class TestMetrics:
    """Run and stage metrics collection."""

    def test_stage_attached_to_run(self):
        run = start_run_metrics("run-1", "sales")
        start_stage_metrics("statistics")
        record_rows_processed(100)
        record_columns_processed(3)
        record_operation_timing("correlations", 0.5)
        record_operation_timing("correlations", 0.25)
        stage = end_stage_metrics()

        assert get_stage_metrics() is None
        assert stage is not None
        assert stage.rows_processed == 100
        assert stage.columns_processed == 3
        assert stage.timings["correlations"] == 0.75
        assert run.stages == [stage]

        finished = end_run_metrics()
        assert finished is run
        assert get_run_metrics() is None
        assert finished.to_dict()["total_rows_processed"] == 100

    def test_stage_errors_and_warnings(self):
        start_stage_metrics("hypotheses")
        record_stage_error("hypotheses failed: boom")
        record_stage_warning("sampled 5,000 rows")
        stage = end_stage_metrics()

        assert stage.errors == ["hypotheses failed: boom"]
        assert stage.warnings == ["sampled 5,000 rows"]
        assert stage.to_dict()["error_count"] == 1
        assert stage.to_dict()["warning_count"] == 1

    def test_recording_without_stage_is_noop(self):
        record_rows_processed(5)
        record_stage_error("lost")
        assert get_stage_metrics() is None
        assert end_stage_metrics() is None

    def test_log_context_nests(self):
        logger = get_logger(__name__)
        with log_context(dataset="sales"):
            with log_context(stage="schema") as ctx:
                assert ctx.context == {"stage": "schema"}
                logger.info("inside_context")


class TestSetupLogging:
    def test_format_from_settings(self):
        setup_logging(Settings(log_level="WARNING", log_format="json"))
        try:
            assert isinstance(structlog.get_config()["processors"][-1], JSONRenderer)
        finally:
            setup_logging(Settings())
        assert isinstance(structlog.get_config()["processors"][-1], ConsoleRenderer)
