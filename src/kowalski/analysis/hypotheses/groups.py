"""Grouping of a numeric column by a categorical one."""

from __future__ import annotations

from dataclasses import dataclass

from kowalski.analysis.statistics.descriptive import value_label
from kowalski.core.models.dataset import DataSet, is_number

MIN_GROUP_SIZE = 5


@dataclass
class Group:
    name: str
    values: list[float]

    @property
    def mean(self) -> float:
        return sum(self.values) / len(self.values)


def group_by_category(dataset: DataSet, category_index: int, numeric_index: int) -> list[Group]:
    """Numeric values per category label, in first-seen category order.

    Rows with a null or empty category, or a non-numeric value, are skipped.
    """
    groups: dict[str, list[float]] = {}
    for row in dataset.rows:
        category, number = row[category_index], row[numeric_index]
        if category is None or not is_number(number):
            continue
        label = value_label(category)
        if label == "":
            continue
        groups.setdefault(label, []).append(float(number))
    return [Group(name=name, values=values) for name, values in groups.items()]


def comparable_groups(groups: list[Group], min_size: int = MIN_GROUP_SIZE) -> list[Group]:
    """Groups large enough to compare, highest mean first."""
    large = [g for g in groups if len(g.values) >= min_size]
    return sorted(large, key=lambda g: g.mean, reverse=True)
