"""Wiring: build a ready-to-use lifecycle from configuration."""

from __future__ import annotations

import logging

from safeguard.classify.media import default_analyzers
from safeguard.config import SafeguardConfig
from safeguard.content.lifecycle import ContentLifecycle
from safeguard.content.store import ContentStore, JsonFileStorage

logger = logging.getLogger(__name__)


def open_lifecycle(config: SafeguardConfig) -> ContentLifecycle:
    """Open the JSON store under the configured directory.

    Media analyzers are only registered when ``analysis.heuristic_media``
    is enabled; without them media submissions are rejected.
    """
    storage = JsonFileStorage(config.storage_dir)
    logger.debug("Opening content store at %s", storage.path)
    analyzers = default_analyzers() if config.analysis.heuristic_media else {}
    return ContentLifecycle(
        ContentStore(storage),
        analyzers,
        media_timeout=config.analysis.media_timeout,
        default_moderator=config.moderation.default_moderator,
    )
