"""Cross-dataset relationship models.

- Relationship: a join between one column in each of two datasets
- OrphanAnalysis: unmatched key values on one side of a relationship
- RelationshipDiscoveryResult: everything found across a set of datasets
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field


class Cardinality(str, Enum):
    ONE_TO_ONE = "one_to_one"
    ONE_TO_MANY = "one_to_many"
    MANY_TO_ONE = "many_to_one"
    MANY_TO_MANY = "many_to_many"


class MatchType(str, Enum):
    EXACT = "exact"  # normalized names are equal
    FUZZY = "fuzzy"  # same stem or same synonym group
    VALUE_OVERLAP = "value_overlap"  # shared id-like suffix only


class RelationshipStatistics(BaseModel):
    """Distinct-value overlap between the two sides of a relationship."""

    source_unique_count: int
    target_unique_count: int
    matched_count: int
    source_orphan_count: int
    target_orphan_count: int
    match_percentage: float  # matched / min(source_unique, target_unique) * 100


class Relationship(BaseModel):
    """A candidate join between two columns in different datasets."""

    source_dataset: str
    source_column: str
    target_dataset: str
    target_column: str
    cardinality: Cardinality
    match_type: MatchType
    confidence: int  # 0-100
    statistics: RelationshipStatistics


class OrphanAnalysis(BaseModel):
    dataset: str
    column: str
    orphan_count: int
    sample_orphans: list[str] = Field(default_factory=list)
    possible_reasons: list[str] = Field(default_factory=list)


class RelationshipDiscoveryResult(BaseModel):
    """Result of relationship discovery over two or more datasets."""

    datasets: list[str] = Field(default_factory=list)
    relationships: list[Relationship] = Field(default_factory=list)
    orphan_analysis: list[OrphanAnalysis] = Field(default_factory=list)
    diagram: str = ""
    summary: str = ""
