"""Tests for the append-only moderation log."""

from datetime import UTC, datetime, timedelta

from safeguard.content.log import ModerationLog
from safeguard.content.models import ModerationAction, ModerationDecision

_T0 = datetime(2026, 1, 1, tzinfo=UTC)


def _action(content_id: str, minutes: int, action=ModerationDecision.APPROVE) -> ModerationAction:
    return ModerationAction(
        content_id=content_id,
        action=action,
        moderator="alice",
        timestamp=_T0 + timedelta(minutes=minutes),
    )


class TestModerationLog:
    def test_append_and_len(self):
        log = ModerationLog()
        log.append(_action("a", 0))
        log.append(_action("b", 1))
        assert len(log) == 2

    def test_for_content_oldest_first(self):
        log = ModerationLog([_action("a", 0), _action("b", 1), _action("a", 2)])
        entries = log.for_content("a")
        assert [e.timestamp.minute for e in entries] == [0, 2]

    def test_recent_newest_first(self):
        log = ModerationLog([_action(str(i), i) for i in range(8)])
        assert [e.content_id for e in log.recent(3)] == ["7", "6", "5"]

    def test_recent_bounds(self):
        log = ModerationLog([_action("a", 0)])
        assert log.recent(0) == []
        assert len(log.recent(10)) == 1

    def test_iteration_is_a_snapshot(self):
        log = ModerationLog([_action("a", 0)])
        it = iter(log)
        log.append(_action("b", 1))
        assert [e.content_id for e in it] == ["a"]

    def test_snapshot_is_detached(self):
        log = ModerationLog([_action("a", 0)])
        snap = log.snapshot()
        snap.clear()
        assert len(log) == 1
