"""NotificationSink — Redis pub/sub fan-out of settlement events.

Channels:
    {prefix}:account:{account_id}   one terminal/account
    {prefix}:broadcast              every connected client
"""

import json
import logging
from collections.abc import Awaitable, Callable, Iterable
from typing import Any

import redis.asyncio as aioredis

from config.settings import settings
from src.lt_common.enums import NotificationAudience
from src.lt_common.redis_client import get_redis
from src.lt_notify.events import NotificationEvent

logger = logging.getLogger(__name__)


class NotificationSink:
    def __init__(
        self,
        redis_factory: Callable[[], Awaitable[aioredis.Redis]] = get_redis,
        channel_prefix: str | None = None,
    ) -> None:
        self._redis_factory = redis_factory
        self._prefix = channel_prefix or settings.NOTIFY_CHANNEL_PREFIX

    def channel_for(self, audience: NotificationAudience, account_id: str | None = None) -> str:
        if audience is NotificationAudience.BROADCAST:
            return f"{self._prefix}:broadcast"
        if not account_id:
            raise ValueError("account_id is required for ACCOUNT notifications")
        return f"{self._prefix}:account:{account_id}"

    async def emit(
        self,
        event_name: str,
        payload: dict[str, Any],
        audience: NotificationAudience,
        account_id: str | None = None,
    ) -> int:
        """Publish one event. Returns the subscriber count Redis reports."""
        channel = self.channel_for(audience, account_id)
        message = json.dumps({"event": event_name, "data": payload}, default=str)
        redis = await self._redis_factory()
        return int(await redis.publish(channel, message))

    async def dispatch(self, events: Iterable[NotificationEvent]) -> int:
        """Emit every event; failures are logged and skipped. Returns delivered count."""
        delivered = 0
        for event in events:
            try:
                await self.emit(event.event_name, event.payload, event.audience, event.account_id)
                delivered += 1
            except Exception:
                logger.exception(
                    "Notification %s to %s failed",
                    event.event_name,
                    event.account_id or event.audience.value,
                )
        return delivered
