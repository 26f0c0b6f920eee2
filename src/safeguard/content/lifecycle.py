"""Content lifecycle: submission, automatic classification, moderation.

States::

    analyzing ──classify──▶ safe | suspicious | harmful ──moderate──▶ (any tier, repeatable)

Every mutation of a record is a read-modify-write of the whole record,
performed under that record's own lock.  Records with different ids
never contend.
"""

from __future__ import annotations

import logging
import threading
import uuid
from collections import Counter
from collections.abc import Mapping
from datetime import UTC, datetime
from enum import StrEnum

from safeguard.classify.media import DEFAULT_TIMEOUT, MediaAnalyzer, MediaFile, analyze_media
from safeguard.classify.text import classify_text
from safeguard.content.log import ModerationLog
from safeguard.content.models import (
    Classification,
    Content,
    ContentStatus,
    ContentType,
    ModerationAction,
    ModerationDecision,
)
from safeguard.content.store import ContentStore
from safeguard.errors import InvariantViolation, ValidationError

logger = logging.getLogger(__name__)

DEFAULT_MODERATOR = "Moderator"

# Alias to avoid shadowing by ContentLifecycle.list method
_list = list


class ModerationOutcome(StrEnum):
    """Result of a moderate() call."""

    APPLIED = "applied"
    NOT_FOUND = "not_found"


class ContentLifecycle:
    """Owns every Content record's status from submission onward.

    Args:
        store: Keyed record collection plus moderation log.
        analyzers: Media analyzer per media content type.  Submitting a
            media type with no analyzer is a configuration error.
        media_timeout: Seconds to wait on an analyzer before falling back.
        default_moderator: Identity recorded when ``moderate`` is called
            without one.
    """

    def __init__(
        self,
        store: ContentStore,
        analyzers: Mapping[ContentType, MediaAnalyzer] | None = None,
        *,
        media_timeout: float = DEFAULT_TIMEOUT,
        default_moderator: str = DEFAULT_MODERATOR,
    ) -> None:
        self._store = store
        self._analyzers = dict(analyzers or {})
        self._media_timeout = media_timeout
        self._default_moderator = default_moderator
        self._locks: dict[str, threading.Lock] = {}
        self._locks_guard = threading.Lock()

    # ── Private helpers ──────────────────────────────────────────

    def _record_lock(self, content_id: str) -> threading.Lock:
        with self._locks_guard:
            lock = self._locks.get(content_id)
            if lock is None:
                lock = self._locks[content_id] = threading.Lock()
            return lock

    def _new_id(self) -> str:
        while True:
            content_id = uuid.uuid4().hex[:12]
            if not self._store.exists(content_id):
                return content_id

    def _validate(self, content_type: ContentType, payload: str, media: MediaFile | None) -> None:
        if content_type is ContentType.TEXT:
            if not payload or not payload.strip():
                raise ValidationError("Text content must not be empty")
            return

        if media is None:
            raise ValidationError(f"A file is required for {content_type} content")
        if content_type not in self._analyzers:
            raise InvariantViolation(f"No media analyzer registered for {content_type} content")

    def _apply_classification(self, content_id: str, result: Classification) -> None:
        with self._record_lock(content_id):
            record = self._store.get(content_id)
            if record is None:
                raise InvariantViolation(f"Record {content_id} vanished during analysis")
            update: dict[str, object] = {
                "report": result.report,
                "confidence": result.confidence,
            }
            # A moderator who acted while analysis was running keeps the last word.
            if not record.is_reviewed:
                update["status"] = ContentStatus.from_tier(result.tier)
            self._store.put(record.model_copy(update=update))

    # ── Transitions ──────────────────────────────────────────────

    async def submit(
        self,
        content_type: ContentType | str,
        payload: str = "",
        media: MediaFile | None = None,
    ) -> str:
        """Create a record, classify it, and return its id.

        Text is classified synchronously.  Media is handed to the
        registered analyzer and awaited for at most ``media_timeout``
        seconds; analyzer failures become a suspicious fallback.

        Raises:
            ValidationError: Unknown content type, empty text, or media
                without a file.
            InvariantViolation: No analyzer registered for the media type.
        """
        try:
            content_type = ContentType(content_type)
        except ValueError as exc:
            raise ValidationError(f"Unknown content type: {content_type!r}") from exc
        self._validate(content_type, payload, media)

        content_id = self._new_id()
        record = Content(
            id=content_id,
            content_type=content_type,
            payload=media.filename if content_type.is_media and media else payload,
            status=ContentStatus.ANALYZING,
            submitted_at=datetime.now(tz=UTC),
        )
        self._store.put(record)

        try:
            if content_type.is_media and media is not None:
                result = await analyze_media(
                    self._analyzers[content_type], media, timeout=self._media_timeout
                )
            else:
                result = classify_text(payload)
            self._apply_classification(content_id, result)
        except BaseException:
            self._store.discard(content_id)
            raise

        logger.info(
            "Classified %s %s as %s (confidence %.2f, via %s)",
            content_type,
            content_id,
            result.tier,
            result.confidence,
            result.source,
        )
        return content_id

    def get(self, content_id: str) -> Content | None:
        """Return a snapshot of the record, or None if not found."""
        return self._store.get(content_id)

    def moderate(
        self,
        content_id: str,
        decision: ModerationDecision | str,
        notes: str | None = None,
        moderator: str | None = None,
    ) -> ModerationOutcome:
        """Apply a moderator decision to a record in any status.

        Overwrites status and all audit fields together and appends one
        ModerationAction.  Unknown ids change nothing.

        Raises:
            ValidationError: Unknown decision.
        """
        try:
            decision = ModerationDecision(decision)
        except ValueError as exc:
            raise ValidationError(f"Unknown moderation decision: {decision!r}") from exc
        moderator = moderator or self._default_moderator

        with self._record_lock(content_id):
            record = self._store.get(content_id)
            if record is None:
                logger.info("Moderation %s on unknown content %s ignored", decision, content_id)
                return ModerationOutcome.NOT_FOUND

            now = datetime.now(tz=UTC)
            self._store.apply_moderation(
                record.model_copy(
                    update={
                        "status": decision.resulting_status,
                        "moderation_notes": notes,
                        "moderated_by": moderator,
                        "moderated_at": now,
                    }
                ),
                ModerationAction(
                    content_id=content_id,
                    action=decision,
                    notes=notes,
                    moderator=moderator,
                    timestamp=now,
                ),
            )

        logger.info(
            "%s %s content %s -> %s", moderator, decision, content_id, decision.resulting_status
        )
        return ModerationOutcome.APPLIED

    # ── Views ────────────────────────────────────────────────────

    @property
    def moderation_log(self) -> ModerationLog:
        return self._store.log

    def list(
        self,
        content_type: ContentType | None = None,
        status: ContentStatus | None = None,
        query: str | None = None,
    ) -> _list[Content]:
        return self._store.list(content_type=content_type, status=status, query=query)

    def review_queue(self, query: str | None = None) -> _list[Content]:
        """Suspicious records waiting on a moderator, oldest first."""
        return self._store.list(status=ContentStatus.SUSPICIOUS, query=query)

    def reviewed(self, query: str | None = None) -> _list[Content]:
        """Records a moderator settled as safe or harmful."""
        return [
            r
            for r in self._store.list(query=query)
            if r.is_reviewed and r.status in (ContentStatus.SAFE, ContentStatus.HARMFUL)
        ]

    def stats(self) -> dict[ContentStatus, int]:
        """Number of records in each status."""
        counts = Counter(r.status for r in self._store.list())
        return {status: counts.get(status, 0) for status in ContentStatus}
