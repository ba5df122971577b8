"""Base models and types shared by every analysis module."""

from __future__ import annotations

from collections.abc import Callable
from enum import Enum
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, Field

T = TypeVar("T")


class Result(BaseModel, Generic[T]):
    """Result type for operations that can fail.

    Use this instead of exceptions for expected failures.
    Exceptions are reserved for unexpected/programming errors.
    """

    success: bool
    value: T | None = None
    error: str | None = None
    warnings: list[str] = Field(default_factory=list)

    @classmethod
    def ok(cls, value: T, warnings: list[str] | None = None) -> Result[T]:
        """Create a successful result."""
        return cls(success=True, value=value, warnings=warnings or [])

    @classmethod
    def fail(cls, error: str) -> Result[T]:
        """Create a failed result."""
        return cls(success=False, error=error)

    def unwrap(self) -> T:
        """Get the value or raise if failed."""
        if not self.success:
            raise ValueError(f"Result failed: {self.error}")
        assert self.value is not None
        return self.value

    def map(self, fn: Callable[[T], Any]) -> Result[Any]:
        """Transform the value if successful."""
        if self.success and self.value is not None:
            return Result.ok(fn(self.value), self.warnings)
        return self


# === Enums ===


class ColumnType(str, Enum):
    """Column type tag carried by a dataset."""

    STRING = "string"
    NUMBER = "number"
    DATE = "date"


class ConfidenceLevel(str, Enum):
    """Confidence band shared by typing, hypotheses and relationships."""

    HIGH = "high"  # >= 90, proceed automatically
    MEDIUM = "medium"  # 70-89, note uncertainty
    LOW = "low"  # 50-69, ask a clarifying question
    VERY_LOW = "very_low"  # < 50, require input


def get_confidence_level(value: float) -> ConfidenceLevel:
    """Map a 0-100 score onto its confidence band."""
    if value >= 90:
        return ConfidenceLevel.HIGH
    if value >= 70:
        return ConfidenceLevel.MEDIUM
    if value >= 50:
        return ConfidenceLevel.LOW
    return ConfidenceLevel.VERY_LOW


class ConfidenceScore(BaseModel):
    """A 0-100 confidence value with its band and supporting reasons."""

    value: int
    level: ConfidenceLevel
    reasons: list[str] = Field(default_factory=list)

    @classmethod
    def create(cls, value: float, reasons: list[str] | None = None) -> ConfidenceScore:
        """Build a score, rounding and clamping the value into [0, 100]."""
        clamped = int(round(min(100.0, max(0.0, value))))
        return cls(value=clamped, level=get_confidence_level(clamped), reasons=reasons or [])
