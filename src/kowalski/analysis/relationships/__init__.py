"""Cross-dataset relationship discovery."""

from kowalski.analysis.relationships.finder import (
    KeyCandidate,
    calculate_confidence,
    determine_cardinality,
    extract_candidates,
    find_relationships,
    orphan_reasons,
)
from kowalski.analysis.relationships.formatting import format_relationships
from kowalski.analysis.relationships.matching import (
    get_match_type,
    is_key_name,
    normalize_column_name,
)
from kowalski.analysis.relationships.models import (
    Cardinality,
    MatchType,
    OrphanAnalysis,
    Relationship,
    RelationshipDiscoveryResult,
    RelationshipStatistics,
)

__all__ = [
    "Cardinality",
    "KeyCandidate",
    "MatchType",
    "OrphanAnalysis",
    "Relationship",
    "RelationshipDiscoveryResult",
    "RelationshipStatistics",
    "calculate_confidence",
    "determine_cardinality",
    "extract_candidates",
    "find_relationships",
    "format_relationships",
    "get_match_type",
    "is_key_name",
    "normalize_column_name",
    "orphan_reasons",
]
