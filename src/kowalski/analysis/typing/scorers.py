"""Semantic type scorers.

Each scorer is a pure function of a ``ScoringContext`` returning a 0-100
score. Scorers combine three kinds of evidence: keywords in the column
name, value patterns, and numeric ranges. They are registered in a fixed
order, which also breaks ties between equal scores.
"""

from __future__ import annotations

import re
from collections.abc import Callable
from dataclasses import dataclass, field
from functools import cached_property
from typing import Any

from kowalski.analysis.statistics.descriptive import value_label
from kowalski.analysis.typing.models import BasicType, SemanticType
from kowalski.analysis.typing.patterns import PatternConfig
from kowalski.core.models.dataset import is_number

# Upper bound of a plausible unix timestamp in milliseconds (year 2100)
MAX_UNIX_TIMESTAMP_MS = 4_102_444_800_000
_NON_DIGITS = re.compile(r"\D")


def _share(count: int, total: int) -> float:
    return count / total if total else 0.0


@dataclass
class ScoringContext:
    """Everything a scorer may look at for one column."""

    column: str
    values: list[Any]  # non-null values only
    basic_type: BasicType
    unique_count: int
    non_null_count: int
    patterns: PatternConfig = field(repr=False)

    @cached_property
    def name_lower(self) -> str:
        return self.column.lower()

    @cached_property
    def labels(self) -> list[str]:
        return [value_label(v) for v in self.values]

    @cached_property
    def strings(self) -> list[str]:
        return [v for v in self.values if isinstance(v, str)]

    @cached_property
    def numbers(self) -> list[float]:
        return [v for v in self.values if is_number(v)]

    def name_has(self, group: str) -> bool:
        return self.patterns.name_has_keyword(self.name_lower, group)

    def label_share(self, predicate: Callable[[str], bool]) -> float:
        """Share of values whose string form satisfies ``predicate``."""
        return _share(sum(1 for label in self.labels if predicate(label)), len(self.values))

    def string_share(self, pattern: str) -> float:
        """Share of values that are strings matching the named pattern."""
        matched = sum(1 for s in self.strings if self.patterns.matches(pattern, s))
        return _share(matched, len(self.values))


Scorer = Callable[[ScoringContext], int]

SCORERS: list[tuple[SemanticType, Scorer]] = []


def register(semantic_type: SemanticType) -> Callable[[Scorer], Scorer]:
    """Add a scorer to the registry."""

    def decorator(fn: Scorer) -> Scorer:
        SCORERS.append((semantic_type, fn))
        return fn

    return decorator


@register(SemanticType.ID)
def score_id(ctx: ScoringContext) -> int:
    if ctx.label_share(lambda s: ctx.patterns.matches("uuid", s)) > 0.8:
        return 95

    score = 0
    if ctx.unique_count == ctx.non_null_count and ctx.non_null_count > 10:
        score += 40

    name = ctx.name_lower
    if ctx.name_has("id"):
        score += 35
    elif name == "id" or name.endswith("id"):
        score += 30
    elif ctx.name_has("id_weak"):
        score += 15

    # Distinct non-negative integers only count for much when the name agrees
    numbers = ctx.numbers
    if len(numbers) == len(ctx.values) and len(numbers) > 10:
        ordered = sorted(numbers)
        distinct = all(b > a for a, b in zip(ordered, ordered[1:], strict=False))
        if distinct and ordered[0] >= 0:
            score += 25 if "id" in name else 10

    return min(100, score)


@register(SemanticType.BOOLEAN)
def score_boolean(ctx: ScoringContext) -> int:
    lowered = [label.lower() for label in ctx.labels]
    ratio = _share(sum(1 for v in lowered if v in ctx.patterns.boolean_values), len(lowered))
    if len(set(lowered)) == 2:
        return round(ratio * 100)
    return round(ratio * 95) if ratio > 0.9 else 0


@register(SemanticType.PERCENTAGE)
def score_percentage(ctx: ScoringContext) -> int:
    if ctx.string_share("percentage") > 0.8:
        return 95

    score = 0
    named = ctx.name_has("percentage")
    if named:
        score += 35

    if ctx.basic_type == BasicType.NUMBER and ctx.numbers:
        low, high = min(ctx.numbers), max(ctx.numbers)
        if low >= 0 and high <= 100 and high > 1:
            score += 30
            if high > 90 or low < 10:
                score += 15
        if low >= 0 and high <= 1:
            # Unnamed 0-1 values lean towards rate
            score += 30 if named else 15

    return min(100, score)


def _decimal_places(value: float) -> int:
    text = value_label(value)
    if "." not in text or "e" in text:
        return 0
    return len(text.split(".", 1)[1])


@register(SemanticType.CURRENCY)
def score_currency(ctx: ScoringContext) -> int:
    if ctx.string_share("currency") > 0.8:
        return 90

    score = 0
    if ctx.name_has("currency"):
        score += 50
    elif ctx.name_has("currency_weak"):
        score += 25

    numbers = ctx.numbers
    if numbers:
        if min(numbers) >= 0 and max(numbers) < 10_000_000:
            score += 15
        two_decimals = sum(1 for v in numbers if _decimal_places(v) == 2)
        if _share(two_decimals, len(numbers)) > 0.5:
            score += 20

    return min(100, score)


@register(SemanticType.COUNT)
def score_count(ctx: ScoringContext) -> int:
    if ctx.basic_type != BasicType.NUMBER:
        return 0

    score = 25 if ctx.name_has("count") else 0

    numbers = ctx.numbers
    whole = _share(sum(1 for v in numbers if float(v).is_integer() and v >= 0), len(numbers))
    if whole > 0.95:
        score += 40
    elif whole > 0.8:
        score += 25

    return min(100, score)


@register(SemanticType.RATE)
def score_rate(ctx: ScoringContext) -> int:
    if ctx.basic_type != BasicType.NUMBER:
        return 0

    strong = ctx.name_has("rate")
    score = 0
    if strong:
        score += 45
    elif ctx.name_has("rate_weak"):
        score += 25

    numbers = ctx.numbers
    if numbers and min(numbers) >= 0 and max(numbers) <= 1:
        score += 50 if strong else 40
        fractional = sum(1 for v in numbers if not float(v).is_integer())
        if _share(fractional, len(numbers)) > 0.5:
            score += 10

    return min(100, score)


@register(SemanticType.DATE)
def score_date(ctx: ScoringContext) -> int:
    score = 25 if ctx.name_has("date") else 0

    ratio = ctx.label_share(ctx.patterns.is_date_like)
    if ratio > 0.8:
        score += 60
    elif ratio > 0.5:
        score += 35

    return min(100, score)


def _is_unix_timestamp(ctx: ScoringContext, label: str) -> bool:
    return ctx.patterns.matches("timestamp", label) and int(label) <= MAX_UNIX_TIMESTAMP_MS


@register(SemanticType.TIMESTAMP)
def score_timestamp(ctx: ScoringContext) -> int:
    score = 40 if ctx.name_has("timestamp") else 0
    if ctx.label_share(lambda s: _is_unix_timestamp(ctx, s)) > 0.8:
        score += 50
    return min(100, score)


@register(SemanticType.EMAIL)
def score_email(ctx: ScoringContext) -> int:
    score = 40 if ctx.name_has("email") else 0
    ratio = ctx.string_share("email")
    if ratio > 0.8:
        score += 55
    elif ratio > 0.5:
        score += 30
    return min(100, score)


def _looks_like_phone(ctx: ScoringContext, label: str) -> bool:
    return ctx.patterns.matches("phone", label) and len(_NON_DIGITS.sub("", label)) >= 7


@register(SemanticType.PHONE)
def score_phone(ctx: ScoringContext) -> int:
    score = 40 if ctx.name_has("phone") else 0
    if ctx.label_share(lambda s: _looks_like_phone(ctx, s)) > 0.8:
        score += 50
    return min(100, score)


@register(SemanticType.URL)
def score_url(ctx: ScoringContext) -> int:
    score = 40 if ctx.name_has("url") else 0
    if ctx.string_share("url") > 0.8:
        score += 55
    return min(100, score)


@register(SemanticType.CATEGORICAL)
def score_categorical(ctx: ScoringContext) -> int:
    unique, total = ctx.unique_count, ctx.non_null_count
    ratio = _share(unique, total)

    if unique <= 10 and total > 50:
        return 85
    if total > 100 and ratio < 0.05:
        return 75
    if total > 50 and ratio < 0.1:
        return 60
    if unique <= 20 and ctx.basic_type == BasicType.STRING:
        return 50
    return 0


@register(SemanticType.TEXT)
def score_text(ctx: ScoringContext) -> int:
    if ctx.basic_type != BasicType.STRING or not ctx.values:
        return 0

    average_length = sum(len(label) for label in ctx.labels) / len(ctx.labels)
    if average_length > 50:
        return 80
    if average_length > 20:
        return 60
    return 30


def score_all(ctx: ScoringContext) -> list[tuple[SemanticType, int]]:
    """Positive scores from every registered scorer, best first.

    Equal scores keep registry order.
    """
    scores = [(semantic_type, scorer(ctx)) for semantic_type, scorer in SCORERS]
    positive = [(t, s) for t, s in scores if s > 0]
    return sorted(positive, key=lambda item: item[1], reverse=True)
