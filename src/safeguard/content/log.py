"""Append-only moderation log."""

from __future__ import annotations

from collections.abc import Iterable, Iterator

from safeguard.content.models import ModerationAction


class ModerationLog:
    """Ordered record of moderator decisions.

    Entries are frozen models and there is no API to edit or remove one.
    """

    def __init__(self, actions: Iterable[ModerationAction] = ()) -> None:
        self._actions: list[ModerationAction] = list(actions)

    def append(self, action: ModerationAction) -> None:
        self._actions.append(action)

    def for_content(self, content_id: str) -> list[ModerationAction]:
        """Actions taken on one record, oldest first."""
        return [a for a in self._actions if a.content_id == content_id]

    def recent(self, limit: int = 5) -> list[ModerationAction]:
        """The ``limit`` most recent actions, newest first."""
        if limit <= 0:
            return []
        return list(reversed(self._actions[-limit:]))

    def snapshot(self) -> list[ModerationAction]:
        return list(self._actions)

    def __len__(self) -> int:
        return len(self._actions)

    def __iter__(self) -> Iterator[ModerationAction]:
        return iter(list(self._actions))
