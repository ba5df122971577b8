"""Plain-text report of a relationship discovery run."""

from __future__ import annotations

from kowalski.analysis.relationships.models import Cardinality, RelationshipDiscoveryResult

_RULE = "═" * 59


def _confidence_band(confidence: int) -> str:
    if confidence >= 80:
        return "HIGH"
    if confidence >= 50:
        return "MEDIUM"
    return "LOW"


def format_relationships(result: RelationshipDiscoveryResult, max_orphans: int = 3) -> str:
    """Report every relationship, note orphaned keys and suggest a join."""
    lines = [_RULE, "  RELATIONSHIP REPORT", _RULE, ""]

    if not result.relationships:
        lines += [
            "No detectable relationships between these datasets.",
            "They appear to be independent.",
            "",
            "Recommendations:",
            "  1. Verify these are the correct datasets",
            "  2. Check if a join column exists with different naming",
            "  3. Consider if data was filtered differently",
        ]
    else:
        lines += [f"Mapped {len(result.relationships)} relationship(s):", ""]
        for rel in result.relationships:
            stats = rel.statistics
            orphans = stats.source_orphan_count + stats.target_orphan_count
            lines += [
                f"{rel.source_dataset}.{rel.source_column} ↔ "
                f"{rel.target_dataset}.{rel.target_column}",
                f"   Type: {rel.cardinality.value.replace('_', ' ')} | "
                f"Confidence: {_confidence_band(rel.confidence)} ({rel.confidence}%)",
                f"   Match: {stats.match_percentage:.1f}% | Orphans: {orphans}",
                "",
            ]

        if result.orphan_analysis:
            lines.append("DATA INTEGRITY NOTE:")
            for orphan in result.orphan_analysis[:max_orphans]:
                lines.append(
                    f"   {orphan.dataset}.{orphan.column}: {orphan.orphan_count} orphan records"
                )
            lines.append("")

        best = result.relationships[0]
        join = "LEFT" if best.cardinality == Cardinality.ONE_TO_MANY else "INNER"
        lines += [
            "RECOMMENDED JOIN:",
            f"   SELECT * FROM {best.source_dataset}",
            f"   {join} JOIN {best.target_dataset}",
            f"   ON {best.source_dataset}.{best.source_column} = "
            f"{best.target_dataset}.{best.target_column}",
        ]

    lines += ["", _RULE]
    return "\n".join(lines)
