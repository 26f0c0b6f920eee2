"""Content store and its pluggable durable storage.

``ContentStore`` holds the live collection of Content records plus the
moderation log.  It loads everything from a ``ContentStorage`` once at
construction and writes back after every mutation.  Records still in
the ``analyzing`` state are kept in memory only and never persisted.
"""

from __future__ import annotations

import json
import logging
import os
import threading
from abc import ABC, abstractmethod
from pathlib import Path

from pydantic import BaseModel, Field

from safeguard.content.log import ModerationLog
from safeguard.content.models import (
    Content,
    ContentStatus,
    ContentType,
    ModerationAction,
)

logger = logging.getLogger(__name__)

STORE_FILENAME = ".safeguard-store.json"

# Alias to avoid shadowing by ContentStore.list method
_list = list


class _StoreData(BaseModel):
    """Internal wrapper for JSON serialization."""

    contents: list[Content] = Field(default_factory=list)
    actions: list[ModerationAction] = Field(default_factory=list)


class ContentStorage(ABC):
    """Durable home for content records and moderation actions."""

    @abstractmethod
    def load(self) -> tuple[_list[Content], _list[ModerationAction]]:
        """Return every persisted record and action."""

    @abstractmethod
    def save_contents(self, contents: _list[Content]) -> None:
        """Replace the persisted record collection."""

    @abstractmethod
    def save_actions(self, actions: _list[ModerationAction]) -> None:
        """Replace the persisted action sequence."""

    def save(self, contents: _list[Content], actions: _list[ModerationAction]) -> None:
        """Replace records and actions together.

        Backends that can write both in one step should override this.
        """
        self.save_contents(contents)
        self.save_actions(actions)


class MemoryStorage(ContentStorage):
    """Storage that lives only as long as the process."""

    def __init__(
        self,
        contents: _list[Content] | None = None,
        actions: _list[ModerationAction] | None = None,
    ) -> None:
        self._data = _StoreData(contents=contents or [], actions=actions or [])

    def load(self) -> tuple[_list[Content], _list[ModerationAction]]:
        copy = self._data.model_copy(deep=True)
        return copy.contents, copy.actions

    def save_contents(self, contents: _list[Content]) -> None:
        self._data.contents = [c.model_copy(deep=True) for c in contents]

    def save_actions(self, actions: _list[ModerationAction]) -> None:
        self._data.actions = _list(actions)


class JsonFileStorage(ContentStorage):
    """Single JSON file holding records and actions.

    A corrupt file is logged and treated as empty; the next save
    overwrites it.  Saves go through a temporary file so a failed write
    leaves the previous file intact.
    """

    def __init__(self, directory: Path) -> None:
        self._path = directory / STORE_FILENAME
        self._data = self._read()

    @property
    def path(self) -> Path:
        return self._path

    def _read(self) -> _StoreData:
        if not self._path.exists():
            return _StoreData()
        try:
            raw = json.loads(self._path.read_text(encoding="utf-8"))
            return _StoreData.model_validate(raw)
        except (json.JSONDecodeError, ValueError, KeyError):
            logger.warning("Corrupt content store at %s, starting fresh", self._path)
            return _StoreData()

    def _write(self, data: _StoreData) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self._path.with_suffix(".tmp")
        tmp.write_text(data.model_dump_json(indent=2), encoding="utf-8")
        os.replace(tmp, self._path)
        self._data = data

    def load(self) -> tuple[_list[Content], _list[ModerationAction]]:
        return _list(self._data.contents), _list(self._data.actions)

    def save_contents(self, contents: _list[Content]) -> None:
        self._write(_StoreData(contents=_list(contents), actions=self._data.actions))

    def save_actions(self, actions: _list[ModerationAction]) -> None:
        self._write(_StoreData(contents=self._data.contents, actions=_list(actions)))

    def save(self, contents: _list[Content], actions: _list[ModerationAction]) -> None:
        self._write(_StoreData(contents=_list(contents), actions=_list(actions)))


class ContentStore:
    """Keyed collection of Content records plus the moderation log.

    Reads hand out deep copies; writes replace whole records.  A single
    store-wide lock serializes the in-memory maps and persistence.  Every
    write reaches storage before memory changes, so a failed save leaves
    the store as it was.
    """

    def __init__(self, storage: ContentStorage) -> None:
        self._storage = storage
        self._lock = threading.Lock()
        contents, actions = storage.load()
        self._records: dict[str, Content] = {}
        for record in contents:
            if record.status is ContentStatus.ANALYZING:
                logger.warning("Dropping unclassified record %s from storage", record.id)
                continue
            self._records[record.id] = record
        self._log = ModerationLog(actions)
        logger.debug("Loaded %d records and %d actions", len(self._records), len(self._log))

    # ── Private helpers ──────────────────────────────────────────

    def _durable(self, records: dict[str, Content]) -> _list[Content]:
        return [r for r in records.values() if r.status is not ContentStatus.ANALYZING]

    def _with(self, record: Content) -> dict[str, Content]:
        records = dict(self._records)
        records[record.id] = record.model_copy(deep=True)
        return records

    # ── Write operations ─────────────────────────────────────────

    def put(self, record: Content) -> None:
        """Insert or replace a record by id."""
        with self._lock:
            records = self._with(record)
            if record.status is not ContentStatus.ANALYZING:
                self._storage.save_contents(self._durable(records))
            self._records = records

    def apply_moderation(self, record: Content, action: ModerationAction) -> None:
        """Replace a record and log the action that changed it, as one write."""
        with self._lock:
            records = self._with(record)
            self._storage.save(self._durable(records), [*self._log.snapshot(), action])
            self._records = records
            self._log.append(action)

    def discard(self, content_id: str) -> None:
        """Forget a record that never finished classification."""
        with self._lock:
            record = self._records.get(content_id)
            if record is not None and record.status is ContentStatus.ANALYZING:
                del self._records[content_id]

    def append_action(self, action: ModerationAction) -> None:
        with self._lock:
            self._storage.save_actions([*self._log.snapshot(), action])
            self._log.append(action)


    # ── Read operations ──────────────────────────────────────────

    @property
    def log(self) -> ModerationLog:
        return self._log

    def get(self, content_id: str) -> Content | None:
        """Return a copy of the record, or None if not found."""
        with self._lock:
            record = self._records.get(content_id)
            return record.model_copy(deep=True) if record is not None else None

    def exists(self, content_id: str) -> bool:
        with self._lock:
            return content_id in self._records

    def list(
        self,
        content_type: ContentType | None = None,
        status: ContentStatus | None = None,
        query: str | None = None,
    ) -> _list[Content]:
        """Return records in submission order, optionally filtered.

        ``query`` is a case-insensitive substring match on the payload.
        """
        with self._lock:
            results = [r.model_copy(deep=True) for r in self._records.values()]
        if content_type is not None:
            results = [r for r in results if r.content_type == content_type]
        if status is not None:
            results = [r for r in results if r.status == status]
        if query and query.strip():
            needle = query.strip().lower()
            results = [r for r in results if needle in r.payload.lower()]
        return sorted(results, key=lambda r: r.submitted_at)

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)
