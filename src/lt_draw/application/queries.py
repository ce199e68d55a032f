"""DrawQueryService — read side of lt_draw.

Draw rows are always read from PostgreSQL. Only per-draw statistics are
cached (Redis, STATS_CACHE_TTL_SECONDS) because the betting UI polls them.
"""

import json
import logging
from collections.abc import Awaitable, Callable
from datetime import date, datetime
from decimal import Decimal

import redis.asyncio as aioredis
from sqlalchemy.ext.asyncio import AsyncSession

from config.settings import settings
from src.lt_common.datetime_utils import Clock, utc_now
from src.lt_common.enums import DrawSlot
from src.lt_common.errors import DrawNotFoundError
from src.lt_common.redis_client import get_redis, redis_key
from src.lt_draw.domain.calendar import DrawCalendar
from src.lt_draw.domain.models import Draw, DrawStatistics, NumberStat
from src.lt_draw.domain.repository import DrawRepositoryProtocol
from src.lt_draw.infrastructure.persistence import DrawRepository

logger = logging.getLogger(__name__)


def _stats_to_json(stats: DrawStatistics) -> str:
    return json.dumps(
        {
            "draw_id": stats.draw_id,
            "total_tickets": stats.total_tickets,
            "total_stake": str(stats.total_stake),
            "by_number": [
                {
                    "wager_type": n.wager_type,
                    "combination": n.combination,
                    "ticket_count": n.ticket_count,
                    "total_stake": str(n.total_stake),
                }
                for n in stats.by_number
            ],
        }
    )


def _stats_from_json(raw: str) -> DrawStatistics:
    data = json.loads(raw)
    return DrawStatistics(
        draw_id=data["draw_id"],
        total_tickets=data["total_tickets"],
        total_stake=Decimal(data["total_stake"]),
        by_number=[
            NumberStat(
                wager_type=n["wager_type"],
                combination=n["combination"],
                ticket_count=n["ticket_count"],
                total_stake=Decimal(n["total_stake"]),
            )
            for n in data["by_number"]
        ],
    )


class DrawQueryService:
    def __init__(
        self,
        repo: DrawRepositoryProtocol | None = None,
        calendar: DrawCalendar | None = None,
        clock: Clock = utc_now,
        redis_factory: Callable[[], Awaitable[aioredis.Redis]] = get_redis,
        stats_ttl_seconds: int = settings.STATS_CACHE_TTL_SECONDS,
    ) -> None:
        self._repo: DrawRepositoryProtocol = repo or DrawRepository()
        self._calendar = calendar or DrawCalendar(settings.DRAW_TIMEZONE)
        self._clock = clock
        self._redis_factory = redis_factory
        self._stats_ttl = stats_ttl_seconds

    async def list_draws(
        self,
        db: AsyncSession,
        date_from: date | None = None,
        date_to: date | None = None,
        status: str | None = None,
        limit: int = 50,
    ) -> list[Draw]:
        return await self._repo.list_draws(db, date_from, date_to, status, limit)

    async def get_draw(self, db: AsyncSession, draw_id: int) -> Draw:
        draw = await self._repo.get_by_id(db, draw_id)
        if draw is None:
            raise DrawNotFoundError(draw_id)
        return draw

    async def available_draws(self, db: AsyncSession, now: datetime | None = None) -> list[Draw]:
        """OPEN draws whose betting window contains ``now``."""
        open_pairs = set(self._calendar.open_slots(now or self._clock()))
        if not open_pairs:
            return []
        dates = sorted({day for day, _ in open_pairs})
        draws = await self._repo.list_open_for_dates(db, dates)
        return [d for d in draws if (d.draw_date, DrawSlot(d.slot)) in open_pairs]

    async def get_statistics(self, db: AsyncSession, draw_id: int) -> DrawStatistics:
        key = redis_key("stats", draw_id)
        redis = await self._redis_factory()
        cached = await redis.get(key)
        if cached is not None:
            return _stats_from_json(cached)

        await self.get_draw(db, draw_id)
        stats = await self._repo.get_statistics(db, draw_id)
        await redis.set(key, _stats_to_json(stats), ex=self._stats_ttl)
        return stats
