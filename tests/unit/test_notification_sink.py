"""Unit tests for NotificationSink channel routing and failure isolation."""

import json
from unittest.mock import AsyncMock

import pytest

from src.lt_common.enums import NotificationAudience
from src.lt_notify.events import DRAW_SETTLED, WINNING_TICKET, NotificationEvent
from src.lt_notify.sink import NotificationSink


def _sink(redis: AsyncMock) -> NotificationSink:
    async def factory():
        return redis

    return NotificationSink(redis_factory=factory, channel_prefix="lotto")


class TestChannels:
    def test_account_channel(self) -> None:
        sink = _sink(AsyncMock())
        assert sink.channel_for(NotificationAudience.ACCOUNT, "agent-1") == "lotto:account:agent-1"

    def test_broadcast_channel(self) -> None:
        assert _sink(AsyncMock()).channel_for(NotificationAudience.BROADCAST) == "lotto:broadcast"

    def test_account_channel_needs_id(self) -> None:
        with pytest.raises(ValueError):
            _sink(AsyncMock()).channel_for(NotificationAudience.ACCOUNT)


class TestEmit:
    async def test_publishes_json_envelope(self) -> None:
        redis = AsyncMock()
        redis.publish.return_value = 1

        count = await _sink(redis).emit(
            WINNING_TICKET, {"ticket_number": "900001"}, NotificationAudience.ACCOUNT, "agent-1"
        )

        assert count == 1
        channel, message = redis.publish.await_args.args
        assert channel == "lotto:account:agent-1"
        assert json.loads(message) == {
            "event": "winning_ticket",
            "data": {"ticket_number": "900001"},
        }


class TestDispatch:
    async def test_failure_does_not_stop_remaining_events(self) -> None:
        redis = AsyncMock()
        redis.publish.side_effect = [ConnectionError("redis down"), 0, 3]
        events = [
            NotificationEvent(WINNING_TICKET, NotificationAudience.ACCOUNT, {}, "agent-1"),
            NotificationEvent(WINNING_TICKET, NotificationAudience.ACCOUNT, {}, "agent-2"),
            NotificationEvent(DRAW_SETTLED, NotificationAudience.BROADCAST, {}),
        ]

        delivered = await _sink(redis).dispatch(events)

        assert delivered == 2
        assert redis.publish.await_count == 3

    async def test_empty(self) -> None:
        assert await _sink(AsyncMock()).dispatch([]) == 0
