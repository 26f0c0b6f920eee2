"""Content domain: records, moderation log, store.

The lifecycle lives in ``safeguard.content.lifecycle`` and is imported
from there; it depends on ``safeguard.classify``, which in turn depends
on the models here.
"""

from safeguard.content.log import ModerationLog
from safeguard.content.models import (
    AnalysisResult,
    Classification,
    Content,
    ContentStatus,
    ContentType,
    ModerationAction,
    ModerationDecision,
    Tier,
)
from safeguard.content.store import ContentStorage, ContentStore, JsonFileStorage, MemoryStorage

__all__ = [
    "AnalysisResult",
    "Classification",
    "Content",
    "ContentStatus",
    "ContentStorage",
    "ContentStore",
    "ContentType",
    "JsonFileStorage",
    "MemoryStorage",
    "ModerationAction",
    "ModerationDecision",
    "ModerationLog",
    "Tier",
]
