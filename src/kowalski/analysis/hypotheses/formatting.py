"""Plain-text rendering of hypotheses."""

from __future__ import annotations

from kowalski.analysis.hypotheses.models import CausalInterpretation, Hypothesis, HypothesisStatus

_INTERPRETATION_NOTES = {
    CausalInterpretation.CAUSAL: "This appears to be a causal relationship.",
    CausalInterpretation.CORRELATIONAL: "Note: Correlation does not imply causation.",
    CausalInterpretation.CONFOUNDED: (
        "Warning: Potential confounders may explain this relationship."
    ),
}


def _confidence_word(confidence: int) -> str:
    if confidence >= 80:
        return "highly confident"
    if confidence >= 60:
        return "reasonably confident"
    return "tentatively suggesting"


def format_hypothesis(hypothesis: Hypothesis, max_recommendations: int = 3) -> str:
    """Multi-line summary: title, evidence, confidence and top recommendations."""
    lines = [
        f"**{hypothesis.id}: {hypothesis.title}**",
        f"Evidence: {hypothesis.description}",
        f"Confidence: {hypothesis.confidence}% ({_confidence_word(hypothesis.confidence)})",
    ]
    note = _INTERPRETATION_NOTES.get(hypothesis.interpretation)
    if note:
        lines.append(note)
    if hypothesis.status != HypothesisStatus.UNVERIFIED:
        lines.append(f"Status: {hypothesis.status.value}")
    lines.append("Recommendations:")
    lines.extend(f"  - {r}" for r in hypothesis.recommendations[:max_recommendations])
    return "\n".join(lines)
