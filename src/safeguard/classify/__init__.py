"""Classification engine: lexical rules, contextual overrides, media fallback."""

from safeguard.classify.contextual import CONTEXT_RULES, ContextRule, ContextVerdict, evaluate_context
from safeguard.classify.lexical import classify_lexical
from safeguard.classify.media import (
    FALLBACK_RESULT,
    FilenameHeuristicAnalyzer,
    MediaAnalyzer,
    MediaFile,
    analyze_media,
    default_analyzers,
)
from safeguard.classify.text import classify_text

__all__ = [
    "CONTEXT_RULES",
    "FALLBACK_RESULT",
    "ContextRule",
    "ContextVerdict",
    "FilenameHeuristicAnalyzer",
    "MediaAnalyzer",
    "MediaFile",
    "analyze_media",
    "classify_lexical",
    "classify_text",
    "default_analyzers",
    "evaluate_context",
]
