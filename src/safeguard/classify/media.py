"""Media analysis adapters and the fallback policy around them.

The lifecycle never decodes media itself.  It hands a ``MediaFile`` to a
``MediaAnalyzer`` and waits a bounded time for the result.  Whatever
goes wrong (an exception, a stall past the timeout, a malformed result)
is absorbed into ``FALLBACK_RESULT`` so every submission still reaches a
terminal tier.
"""

from __future__ import annotations

import asyncio
import logging
import mimetypes
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path

from safeguard.content.models import AnalysisResult, Classification, ContentType, Tier
from safeguard.errors import AnalysisFailure

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 10.0

FALLBACK_RESULT = AnalysisResult(
    tier=Tier.SUSPICIOUS,
    confidence=0.5,
    details="unable to analyze content; manual review required",
)


@dataclass(frozen=True)
class MediaFile:
    """Binary media handed to an analyzer.

    ``width``/``height`` (images) and ``duration`` in seconds (video and
    audio) are optional probe metadata supplied by the caller.
    """

    filename: str
    data: bytes = b""
    mime_type: str = ""
    width: int | None = None
    height: int | None = None
    duration: float | None = None

    @property
    def size_mb(self) -> float:
        return len(self.data) / (1024 * 1024)

    @classmethod
    def from_path(cls, path: Path, **metadata: float | int | None) -> MediaFile:
        """Read a file from disk, guessing its MIME type from the name."""
        mime_type, _ = mimetypes.guess_type(path.name)
        return cls(
            filename=path.name,
            data=path.read_bytes(),
            mime_type=mime_type or "",
            **metadata,  # type: ignore[arg-type]
        )


class MediaAnalyzer(ABC):
    """Capability that classifies non-text media."""

    @abstractmethod
    async def analyze(self, media: MediaFile) -> AnalysisResult:
        """Classify the media.  May raise; callers apply the fallback."""


async def _run_analyzer(analyzer: MediaAnalyzer, media: MediaFile, timeout: float) -> AnalysisResult:
    try:
        result = await asyncio.wait_for(analyzer.analyze(media), timeout=timeout)
    except AnalysisFailure:
        raise
    except TimeoutError as exc:
        raise AnalysisFailure(f"analysis of {media.filename} timed out after {timeout}s") from exc
    except Exception as exc:
        raise AnalysisFailure(f"analysis of {media.filename} failed: {exc}") from exc

    if not isinstance(result, AnalysisResult):
        raise AnalysisFailure(
            f"analyzer returned {type(result).__name__} for {media.filename}, expected AnalysisResult"
        )
    return result


async def analyze_media(
    analyzer: MediaAnalyzer,
    media: MediaFile,
    *,
    timeout: float = DEFAULT_TIMEOUT,
) -> Classification:
    """Invoke the analyzer once and convert its result to a Classification.

    Never raises for analyzer problems; those yield the fallback result.
    """
    try:
        result = await _run_analyzer(analyzer, media, timeout)
    except AnalysisFailure as exc:
        logger.warning("Media analysis failed, using fallback: %s", exc)
        return Classification(
            tier=FALLBACK_RESULT.tier,
            confidence=FALLBACK_RESULT.confidence,
            report=FALLBACK_RESULT.details,
            source="fallback",
        )

    return Classification(
        tier=result.tier,
        confidence=result.confidence,
        report=result.details,
        source="media",
    )


# ---------------------------------------------------------------------------
# Filename heuristic analyzer
# ---------------------------------------------------------------------------

_EXPLICIT_TERMS = ("nude", "explicit", "xxx", "adult", "nsfw", "porn")
_AUDIO_EXPLICIT_TERMS = ("explicit", "xxx", "adult", "nsfw", "porn", "obscene")


@dataclass(frozen=True)
class _Thresholds:
    harmful: float
    suspicious: float


_THRESHOLDS: dict[ContentType, _Thresholds] = {
    ContentType.IMAGE: _Thresholds(harmful=0.7, suspicious=0.4),
    ContentType.VIDEO: _Thresholds(harmful=0.6, suspicious=0.3),
    ContentType.AUDIO: _Thresholds(harmful=0.6, suspicious=0.3),
}


class FilenameHeuristicAnalyzer(MediaAnalyzer):
    """Deterministic stand-in analyzer that never inspects pixels or samples.

    Scores a file from its name (explicit keywords plus a character-sum
    hash) and from probe metadata: portrait-ish aspect ratios for images,
    duration and suspiciously small size-for-duration for video and audio.
    Video and audio without a duration cannot be probed and fail.
    """

    def __init__(self, kind: ContentType) -> None:
        if kind not in _THRESHOLDS:
            raise ValueError(f"No heuristic for content type {kind!r}")
        self.kind = kind

    async def analyze(self, media: MediaFile) -> AnalysisResult:
        score = self.score(media)
        thresholds = _THRESHOLDS[self.kind]
        noun = self.kind.value

        if score > thresholds.harmful:
            return AnalysisResult(
                tier=Tier.HARMFUL,
                confidence=min(score, 1.0),
                details=(
                    f"Potential explicit content detected. The {noun} appears to contain "
                    "elements that violate content guidelines."
                ),
            )
        if score > thresholds.suspicious:
            return AnalysisResult(
                tier=Tier.SUSPICIOUS,
                confidence=score,
                details=(
                    f"Some concerning elements detected. This {noun} requires human review "
                    "to determine appropriateness."
                ),
            )
        return AnalysisResult(
            tier=Tier.SAFE,
            confidence=1 - score,
            details=(
                f"No explicit content detected. The {noun} appears to comply with "
                "content guidelines."
            ),
        )

    def score(self, media: MediaFile) -> float:
        """Raw risk score for the file; higher is riskier."""
        name = media.filename.lower()
        name_factor = (sum(ord(c) for c in name) % 10) / 10

        if self.kind is ContentType.IMAGE:
            score = name_factor * 0.7
            if media.width and media.height and abs(media.width / media.height - 0.75) < 0.2:
                score += 0.3
            if any(term in name for term in _EXPLICIT_TERMS):
                score += 0.4
            return score

        if media.duration is None:
            raise AnalysisFailure(f"no duration metadata for {media.filename}")

        if self.kind is ContentType.VIDEO:
            window, min_size, long_after, terms = 60, 1.0, 30, _EXPLICIT_TERMS
        else:
            window, min_size, long_after, terms = 120, 0.5, 60, _AUDIO_EXPLICIT_TERMS

        score = name_factor * 0.5 + min(media.duration / window, 1) * 0.2
        if any(term in name for term in terms):
            score += 0.4
        if media.size_mb < min_size and media.duration > long_after:
            score += 0.2
        return score


def default_analyzers() -> dict[ContentType, MediaAnalyzer]:
    """One heuristic analyzer per media type."""
    return {kind: FilenameHeuristicAnalyzer(kind) for kind in _THRESHOLDS}
