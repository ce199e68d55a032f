"""ExposureLedger — per-draw, per-number staked totals against a ceiling.

``check_and_reserve`` never commits: it runs inside the caller's ticket
transaction, so a later failure in the same submission releases the
reservation through the rollback. Admin limit writes commit on their own.
"""

import logging
from decimal import Decimal

from sqlalchemy.ext.asyncio import AsyncSession

from src.lt_common.errors import (
    ExposureLimitNotConfiguredError,
    InvalidStakeError,
    LimitExceededError,
    SoldOutError,
)
from src.lt_common.money import ZERO, to_money
from src.lt_exposure.domain.models import ExposureTotal, NumberExposure
from src.lt_exposure.domain.repository import ExposureRepositoryProtocol
from src.lt_exposure.infrastructure.persistence import ExposureRepository
from src.lt_wager.domain.rules import validate_combination

logger = logging.getLogger(__name__)


class ExposureLedger:
    def __init__(self, repo: ExposureRepositoryProtocol | None = None) -> None:
        self._repo: ExposureRepositoryProtocol = repo or ExposureRepository()

    async def resolve_ceiling(
        self, db: AsyncSession, draw_id: int, wager_type: str, combination: str
    ) -> Decimal:
        """Per-number override first, then the active global limit for the type."""
        override = await self._repo.get_number_limit(db, draw_id, wager_type, combination)
        if override is not None:
            return override
        global_limit = await self._repo.get_global_limit(db, wager_type)
        if global_limit is None:
            raise ExposureLimitNotConfiguredError(wager_type)
        return global_limit

    async def check_and_reserve(
        self,
        db: AsyncSession,
        draw_id: int,
        wager_type: str,
        combination: str,
        stake: Decimal,
        ceiling: Decimal,
    ) -> ExposureTotal:
        """Add ``stake`` to the running total or raise without changing it.

        Raises:
            SoldOutError: the key already reached its ceiling.
            LimitExceededError: current + stake would pass the ceiling.
        """
        if stake <= ceiling:
            reserved = await self._repo.try_reserve(
                db, draw_id, wager_type, combination, stake, ceiling
            )
            if reserved is not None:
                if reserved.sold_out:
                    logger.info(
                        "Sold out: draw=%s %s %s at %s",
                        draw_id, wager_type, combination, reserved.cumulative,
                    )
                return reserved

        # A set sold-out flag takes precedence over the limit arithmetic
        existing = await self._repo.get_total(db, draw_id, wager_type, combination)
        if existing is not None and existing.sold_out:
            raise SoldOutError(combination, wager_type)
        current = existing.cumulative if existing else ZERO
        raise LimitExceededError(combination, wager_type, current, ceiling)

    async def get_number_status(
        self, db: AsyncSession, draw_id: int, wager_type: str, combination: str
    ) -> NumberExposure:
        validate_combination(wager_type, combination)
        ceiling = await self.resolve_ceiling(db, draw_id, wager_type, combination)
        total = await self._repo.get_total(db, draw_id, wager_type, combination)
        return NumberExposure(
            draw_id=draw_id,
            wager_type=wager_type,
            combination=combination,
            current=total.cumulative if total else ZERO,
            ceiling=ceiling,
            sold_out=total.sold_out if total else False,
        )

    async def list_sold_out(self, db: AsyncSession, draw_id: int) -> list[ExposureTotal]:
        return await self._repo.list_sold_out(db, draw_id)

    async def set_global_limit(
        self, db: AsyncSession, wager_type: str, amount: Decimal, actor_id: str
    ) -> Decimal:
        amount = _positive_limit(amount)
        try:
            await self._repo.upsert_global_limit(db, wager_type, amount, actor_id)
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        logger.info("Global %s limit set to %s by %s", wager_type, amount, actor_id)
        return amount

    async def set_number_limit(
        self,
        db: AsyncSession,
        draw_id: int,
        wager_type: str,
        combination: str,
        amount: Decimal,
        actor_id: str,
    ) -> Decimal:
        validate_combination(wager_type, combination)
        amount = _positive_limit(amount)
        try:
            await self._repo.upsert_number_limit(
                db, draw_id, wager_type, combination, amount, actor_id
            )
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        logger.info(
            "Draw %s %s %s limit set to %s by %s",
            draw_id, wager_type, combination, amount, actor_id,
        )
        return amount


def _positive_limit(amount: Decimal) -> Decimal:
    value = to_money(amount)
    if value <= 0:
        raise InvalidStakeError(f"limit {amount} must be positive")
    return value
