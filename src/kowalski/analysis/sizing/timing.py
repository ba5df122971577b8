"""Wall-clock instrumentation. Nothing here ever aborts work."""

from __future__ import annotations

import time
from collections.abc import Callable

from kowalski.analysis.sizing.models import PerformanceReport, TargetCheck

# Milliseconds
PERFORMANCE_TARGETS = {
    "initial_scan": 2000.0,
    "eda_report": 5000.0,
    "chart_render": 1000.0,
    "filter_apply": 500.0,
}


class PerformanceTimer:
    """Elapsed time since construction, with named marks (all in ms)."""

    def __init__(self, clock: Callable[[], float] = time.perf_counter) -> None:
        self._clock = clock
        self._start = clock()
        self._marks: dict[str, float] = {}

    def mark(self, name: str) -> float:
        elapsed = self.elapsed()
        self._marks[name] = elapsed
        return elapsed

    def elapsed(self) -> float:
        return (self._clock() - self._start) * 1000

    @property
    def marks(self) -> dict[str, float]:
        return dict(self._marks)

    def summary(self) -> str:
        marks = ", ".join(f"{name}: {ms:.0f}ms" for name, ms in self._marks.items())
        return f"Total: {self.elapsed():.0f}ms | {marks}"

    def meets_target(self, target_ms: float) -> bool:
        return self.elapsed() <= target_ms


def check_performance_targets(timings: dict[str, float]) -> PerformanceReport:
    """Compare measured timings (ms) with the known targets; unknown keys are ignored."""
    results = [
        TargetCheck(target=name, actual_ms=timings[name], limit_ms=limit,
                    passed=timings[name] <= limit)
        for name, limit in PERFORMANCE_TARGETS.items()
        if name in timings
    ]
    return PerformanceReport(passed=all(r.passed for r in results), results=results)
