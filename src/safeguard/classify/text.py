"""Text classification: contextual overrides first, lexical tables otherwise."""

from __future__ import annotations

from safeguard.classify.contextual import evaluate_context
from safeguard.classify.lexical import (
    HARMFUL_CONFIDENCE,
    SUSPICIOUS_CONFIDENCE,
    classify_lexical,
    harmful_report,
    suspicious_report,
)
from safeguard.content.models import Classification, Tier


def classify_text(text: str) -> Classification:
    """Classify a piece of text.

    A harmful contextual verdict always wins.  A suspicious one only
    replaces a lexical result that is not already harmful.
    """
    verdict = evaluate_context(text)
    if verdict is None:
        return classify_lexical(text)

    if verdict.tier is Tier.HARMFUL:
        return Classification(
            tier=Tier.HARMFUL,
            confidence=HARMFUL_CONFIDENCE,
            report=harmful_report(verdict.description),
            source="context",
        )

    lexical = classify_lexical(text)
    if lexical.tier is Tier.HARMFUL:
        return lexical
    return Classification(
        tier=Tier.SUSPICIOUS,
        confidence=SUSPICIOUS_CONFIDENCE,
        report=suspicious_report(verdict.description),
        source="context",
    )
