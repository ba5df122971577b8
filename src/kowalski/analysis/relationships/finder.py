"""Find join relationships across datasets.

Every column that looks like a key (by name or by uniqueness) becomes a
candidate. Candidate pairs from different datasets are matched by name
first; value overlap then decides cardinality and confidence.
"""

from __future__ import annotations

from dataclasses import dataclass
from itertools import combinations

from kowalski.analysis.relationships.matching import get_match_type, is_key_name
from kowalski.analysis.relationships.models import (
    Cardinality,
    MatchType,
    OrphanAnalysis,
    Relationship,
    RelationshipDiscoveryResult,
    RelationshipStatistics,
)
from kowalski.analysis.statistics.descriptive import value_label
from kowalski.core.logging import get_logger
from kowalski.core.models.dataset import DataSet

logger = get_logger(__name__)

MIN_CONFIDENCE = 30
CANDIDATE_UNIQUE_RATIO = 0.5
# A side whose values are this unique is treated as the "one" side of a join
KEY_UNIQUE_RATIO = 0.95
MAX_SAMPLE_ORPHANS = 5
MAX_SUMMARY_RELATIONSHIPS = 5

_BASE_CONFIDENCE = {
    MatchType.EXACT: 70,
    MatchType.FUZZY: 50,
    MatchType.VALUE_OVERLAP: 30,
}

_ARROWS = {
    Cardinality.ONE_TO_ONE: "──────",
    Cardinality.ONE_TO_MANY: "──────<",
    Cardinality.MANY_TO_ONE: ">──────",
    Cardinality.MANY_TO_MANY: ">────<",
}


@dataclass
class KeyCandidate:
    """A column that might take part in a join."""

    dataset: str
    column: str
    values: dict[str, None]  # distinct values as strings, in first-seen order
    total_count: int  # non-null cells

    @property
    def unique_count(self) -> int:
        return len(self.values)

    @property
    def unique_ratio(self) -> float:
        return self.unique_count / self.total_count if self.total_count else 0.0


@dataclass
class _Match:
    relationship: Relationship
    source_orphans: list[str]
    target_orphans: list[str]


def extract_candidates(datasets: list[DataSet]) -> list[KeyCandidate]:
    """Columns named like keys, or more than half unique."""
    candidates = []
    for dataset in datasets:
        for i, column in enumerate(dataset.columns):
            present = [v for v in dataset.column_values(i) if v is not None]
            candidate = KeyCandidate(
                dataset=dataset.name,
                column=column,
                values=dict.fromkeys(value_label(v) for v in present),
                total_count=len(present),
            )
            if is_key_name(column) or candidate.unique_ratio > CANDIDATE_UNIQUE_RATIO:
                candidates.append(candidate)
    return candidates


def determine_cardinality(source: KeyCandidate, target: KeyCandidate) -> Cardinality:
    source_is_key = source.unique_ratio > KEY_UNIQUE_RATIO
    target_is_key = target.unique_ratio > KEY_UNIQUE_RATIO
    if source_is_key and target_is_key:
        return Cardinality.ONE_TO_ONE
    if source_is_key:
        return Cardinality.ONE_TO_MANY
    if target_is_key:
        return Cardinality.MANY_TO_ONE
    return Cardinality.MANY_TO_MANY


def calculate_confidence(match_type: MatchType, match_percentage: float, matched: int) -> int:
    """Base confidence by match type, adjusted by overlap strength and volume."""
    confidence = _BASE_CONFIDENCE[match_type]

    if match_percentage > 80:
        confidence += 20
    elif match_percentage > 50:
        confidence += 10
    elif match_percentage < 20:
        confidence -= 20

    if matched > 100:
        confidence += 10
    elif matched < 10:
        confidence -= 10

    return max(0, min(100, confidence))


def _match(source: KeyCandidate, target: KeyCandidate) -> _Match | None:
    match_type = get_match_type(source.column, target.column)
    if match_type is None:
        return None

    matched = sum(1 for v in source.values if v in target.values)
    if matched == 0:
        return None

    match_percentage = matched / min(source.unique_count, target.unique_count) * 100
    confidence = calculate_confidence(match_type, match_percentage, matched)
    if confidence < MIN_CONFIDENCE:
        return None

    relationship = Relationship(
        source_dataset=source.dataset,
        source_column=source.column,
        target_dataset=target.dataset,
        target_column=target.column,
        cardinality=determine_cardinality(source, target),
        match_type=match_type,
        confidence=confidence,
        statistics=RelationshipStatistics(
            source_unique_count=source.unique_count,
            target_unique_count=target.unique_count,
            matched_count=matched,
            source_orphan_count=source.unique_count - matched,
            target_orphan_count=target.unique_count - matched,
            match_percentage=match_percentage,
        ),
    )
    return _Match(
        relationship=relationship,
        source_orphans=[v for v in source.values if v not in target.values],
        target_orphans=[v for v in target.values if v not in source.values],
    )


def match_candidates(candidates: list[KeyCandidate]) -> list[_Match]:
    """Match every cross-dataset candidate pair, highest confidence first.

    Each unordered pair is considered once; the earlier candidate is the source.
    """
    matches = []
    for source, target in combinations(candidates, 2):
        if source.dataset == target.dataset:
            continue
        found = _match(source, target)
        if found is not None:
            matches.append(found)
    matches.sort(key=lambda m: m.relationship.confidence, reverse=True)
    return matches


def orphan_reasons(orphan_count: int, unique_count: int) -> list[str]:
    """Likely explanations for unmatched keys, by orphan share."""
    orphan_percent = orphan_count / unique_count * 100 if unique_count else 0.0
    if orphan_percent > 50:
        return ["Data export timing mismatch", "Different data periods or filters applied"]
    if orphan_percent > 10:
        return ["Records deleted from related table", "Data entry errors or inconsistencies"]
    return ["Recent records not yet synced", "Test/demo data mixed with production"]


def analyze_orphans(matches: list[_Match]) -> list[OrphanAnalysis]:
    analyses = []
    for match in matches:
        rel, stats = match.relationship, match.relationship.statistics
        sides = (
            (rel.source_dataset, rel.source_column, match.source_orphans,
             stats.source_unique_count),
            (rel.target_dataset, rel.target_column, match.target_orphans,
             stats.target_unique_count),
        )
        for dataset, column, orphans, unique_count in sides:
            if not orphans:
                continue
            analyses.append(
                OrphanAnalysis(
                    dataset=dataset,
                    column=column,
                    orphan_count=len(orphans),
                    sample_orphans=orphans[:MAX_SAMPLE_ORPHANS],
                    possible_reasons=orphan_reasons(len(orphans), unique_count),
                )
            )
    return analyses


def generate_diagram(relationships: list[Relationship]) -> str:
    """Box diagram with one block per dataset pair, drawn from its best relationship."""
    if not relationships:
        return "No relationships detected between datasets."

    lines = [
        "┌" + "─" * 61 + "┐",
        "│" + "RELATIONSHIP DIAGRAM".center(61) + "│",
        "└" + "─" * 61 + "┘",
        "",
    ]

    # relationships arrive sorted, so the first per pair is the strongest
    best: dict[tuple[str, str], Relationship] = {}
    for rel in relationships:
        best.setdefault((rel.source_dataset, rel.target_dataset), rel)

    for (source, target), rel in best.items():
        box = "─" * 16
        lines.extend(
            [
                f"  ┌{box}┐           ┌{box}┐",
                f"  │ {source:<14} │           │ {target:<14} │",
                f"  └{'─' * 7}┬{'─' * 8}┘           └{'─' * 7}┬{'─' * 8}┘",
                "          │                           │",
                f"   {rel.source_column:<14}  {_ARROWS[rel.cardinality]}  {rel.target_column:<14}",
                f"          │    ({rel.statistics.match_percentage:.0f}% match)     │",
                "",
            ]
        )
    return "\n".join(lines)


def generate_summary(
    dataset_count: int,
    relationships: list[Relationship],
    orphans: list[OrphanAnalysis],
) -> str:
    lines = [f"Analyzed {dataset_count} datasets for relationships."]
    if not relationships:
        lines += [
            "No relationships detected between the datasets.",
            "",
            "Possible reasons:",
            "  • No common column names or patterns",
            "  • Completely different value ranges",
            "  • Datasets are not related",
        ]
        return "\n".join(lines)

    lines += [f"Found {len(relationships)} potential relationship(s):", ""]
    for rel in relationships[:MAX_SUMMARY_RELATIONSHIPS]:
        kind = rel.cardinality.value.replace("_", "-")
        lines.append(
            f"  • {rel.source_dataset}.{rel.source_column} → "
            f"{rel.target_dataset}.{rel.target_column}"
        )
        lines.append(
            f"    Type: {kind}, Confidence: {rel.confidence}%, "
            f"Match: {rel.statistics.match_percentage:.1f}%"
        )
    if orphans:
        total = sum(o.orphan_count for o in orphans)
        lines += ["", f"⚠️ Found {total} orphan records across {len(orphans)} column(s)."]
    return "\n".join(lines)


def find_relationships(datasets: list[DataSet]) -> RelationshipDiscoveryResult:
    """Discover join keys, cardinalities and orphaned keys across datasets.

    Needs at least two datasets; fewer yields an empty result explaining why.
    """
    names = [d.name for d in datasets]
    if len(datasets) < 2:
        return RelationshipDiscoveryResult(
            datasets=names,
            diagram="Need at least 2 datasets for relationship discovery",
            summary="No relationships to discover with a single dataset.",
        )

    candidates = extract_candidates(datasets)
    matches = match_candidates(candidates)
    relationships = [m.relationship for m in matches]
    orphans = analyze_orphans(matches)

    logger.info(
        "relationships_discovered",
        datasets=len(datasets),
        candidates=len(candidates),
        relationships=len(relationships),
    )

    return RelationshipDiscoveryResult(
        datasets=names,
        relationships=relationships,
        orphan_analysis=orphans,
        diagram=generate_diagram(relationships),
        summary=generate_summary(len(datasets), relationships, orphans),
    )
