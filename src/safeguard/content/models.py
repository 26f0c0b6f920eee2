"""Content domain models: pure Pydantic v2 data types.

A Content record is created once by submission, classified exactly once,
and may then be moderated any number of times.  Every moderator decision
is captured as an immutable ModerationAction in the moderation log.
"""

from __future__ import annotations

from datetime import datetime
from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field


class ContentType(StrEnum):
    """Kind of submitted content."""

    TEXT = "text"
    IMAGE = "image"
    VIDEO = "video"
    AUDIO = "audio"

    @property
    def is_media(self) -> bool:
        return self is not ContentType.TEXT


class Tier(StrEnum):
    """Terminal safety classification."""

    SAFE = "safe"
    SUSPICIOUS = "suspicious"
    HARMFUL = "harmful"


class ContentStatus(StrEnum):
    """Lifecycle status of a content record."""

    ANALYZING = "analyzing"
    SAFE = "safe"
    SUSPICIOUS = "suspicious"
    HARMFUL = "harmful"

    @classmethod
    def from_tier(cls, tier: Tier) -> ContentStatus:
        return cls(tier.value)


class ModerationDecision(StrEnum):
    """Action a moderator can take on a record."""

    APPROVE = "approve"
    EDIT = "edit"
    BLOCK = "block"

    @property
    def resulting_status(self) -> ContentStatus:
        """Status a record lands in after this decision."""
        return _DECISION_STATUS[self]


_DECISION_STATUS: dict[ModerationDecision, ContentStatus] = {
    ModerationDecision.APPROVE: ContentStatus.SAFE,
    ModerationDecision.EDIT: ContentStatus.SUSPICIOUS,
    ModerationDecision.BLOCK: ContentStatus.HARMFUL,
}


class Classification(BaseModel):
    """Outcome of automatic classification.

    ``source`` names what resolved the tier: ``context``, ``lexical``,
    ``length``, ``default``, ``media`` or ``fallback``.
    """

    model_config = ConfigDict(frozen=True)

    tier: Tier
    confidence: float = Field(ge=0.0, le=1.0)
    report: str
    source: str = "default"


class AnalysisResult(BaseModel):
    """Result returned by a media analyzer."""

    model_config = ConfigDict(frozen=True)

    tier: Tier
    confidence: float = Field(ge=0.0, le=1.0)
    details: str


class Content(BaseModel):
    """A submitted piece of content and its moderation state.

    For media, ``payload`` holds the original filename; the binary data
    itself is never part of the durable record.
    """

    id: str
    content_type: ContentType
    payload: str
    status: ContentStatus = ContentStatus.ANALYZING
    submitted_at: datetime
    report: str | None = None
    confidence: float = Field(default=0.0, ge=0.0, le=1.0)
    moderation_notes: str | None = None
    moderated_by: str | None = None
    moderated_at: datetime | None = None

    @property
    def is_reviewed(self) -> bool:
        """True once any moderator has acted on the record."""
        return self.moderated_by is not None


class ModerationAction(BaseModel):
    """Immutable audit entry for one moderator decision."""

    model_config = ConfigDict(frozen=True)

    content_id: str
    action: ModerationDecision
    notes: str | None = None
    moderator: str
    timestamp: datetime
