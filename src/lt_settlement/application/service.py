"""SettlementService — persistence around the pure SettlementProcessor.

``settle_draw`` runs inside the caller's transaction (DrawLifecycle.post_result
owns it). Everything else here is read-only except the payout config write,
which commits on its own.
"""

import logging
from datetime import timedelta
from decimal import Decimal

from sqlalchemy.ext.asyncio import AsyncSession

from src.lt_common.datetime_utils import Clock, utc_now
from src.lt_common.enums import DrawStatus, WagerType
from src.lt_common.errors import DrawNotFoundError, InvalidDrawStateError, InvalidMultiplierError
from src.lt_common.money import to_money
from src.lt_draw.domain.models import Draw
from src.lt_draw.domain.repository import DrawRepositoryProtocol
from src.lt_draw.infrastructure.persistence import DrawRepository
from src.lt_settlement.domain.models import (
    ResultsDashboard,
    SettlementOutcome,
    SettlementSummary,
    WinnerRecord,
)
from src.lt_settlement.domain.processor import (
    SCANNABLE_STATUSES,
    SETTLEABLE_STATUSES,
    SettlementProcessor,
)
from src.lt_settlement.domain.repository import SettlementRepositoryProtocol
from src.lt_settlement.infrastructure.persistence import SettlementRepository
from src.lt_wager.domain.payout import PayoutConfig

logger = logging.getLogger(__name__)


class SettlementService:
    def __init__(
        self,
        repo: SettlementRepositoryProtocol | None = None,
        draw_repo: DrawRepositoryProtocol | None = None,
        processor: SettlementProcessor | None = None,
        clock: Clock = utc_now,
    ) -> None:
        self._repo: SettlementRepositoryProtocol = repo or SettlementRepository()
        self._draw_repo: DrawRepositoryProtocol = draw_repo or DrawRepository()
        self._processor = processor or SettlementProcessor()
        self._clock = clock

    async def settle_draw(self, db: AsyncSession, draw: Draw) -> SettlementOutcome:
        """Score and persist every pending ticket of a draw that was just marked SETTLED.

        Does not commit. Does not deliver the returned events.
        """
        payout_config = await self._repo.load_payout_config(db)
        tickets = await self._repo.load_tickets_for_draw(db, draw.id, SETTLEABLE_STATUSES)
        outcome = self._processor.settle(draw, tickets, payout_config)
        written = await self._repo.apply(db, draw.id, outcome.winners)
        if written != len(outcome.winners):
            logger.warning(
                "Draw %s: %d winners scored but %d winning records written",
                draw.id, len(outcome.winners), written,
            )
        return outcome

    async def scan(self, db: AsyncSession, draw_id: int) -> SettlementSummary:
        """Re-score a settled draw without writing anything."""
        draw = await self._draw_repo.get_by_id(db, draw_id)
        if draw is None:
            raise DrawNotFoundError(draw_id)
        if draw.status != DrawStatus.SETTLED or draw.winning_number is None:
            raise InvalidDrawStateError(
                draw_id, draw.status, f"Draw {draw_id} has no posted result to scan"
            )
        payout_config = await self._repo.load_payout_config(db)
        tickets = await self._repo.load_tickets_for_draw(db, draw_id, SCANNABLE_STATUSES)
        outcome = self._processor.settle(draw, tickets, payout_config, SCANNABLE_STATUSES)
        return outcome.summary

    async def list_winners(self, db: AsyncSession, draw_id: int) -> list[WinnerRecord]:
        draw = await self._draw_repo.get_by_id(db, draw_id)
        if draw is None:
            raise DrawNotFoundError(draw_id)
        return await self._repo.list_winners(db, draw_id)

    async def results_dashboard(self, db: AsyncSession, days: int) -> ResultsDashboard:
        since = self._clock() - timedelta(days=days)
        draws_settled, winning_tickets, total_payout = await self._repo.winners_since(db, since)
        awaiting = await self._repo.list_awaiting_results(db)
        return ResultsDashboard(
            period_days=days,
            draws_settled=draws_settled,
            winning_tickets=winning_tickets,
            total_payout=total_payout,
            awaiting_results=awaiting,
        )

    async def get_payout_config(self, db: AsyncSession) -> PayoutConfig:
        return await self._repo.load_payout_config(db)

    async def set_payout_config(
        self,
        db: AsyncSession,
        wager_type: WagerType,
        multiplier: Decimal,
        double_multiplier: Decimal | None,
        actor_id: str,
    ) -> PayoutConfig:
        """Replace one wager type's multipliers. ``double_multiplier`` applies to POOLED only."""
        if wager_type is WagerType.STRAIGHT:
            double_multiplier = None
        for value in (multiplier, double_multiplier):
            if value is not None and (value <= 0 or value != value.to_integral_value()):
                raise InvalidMultiplierError(value)
        try:
            await self._repo.upsert_payout_config(
                db,
                wager_type.value,
                to_money(multiplier),
                to_money(double_multiplier) if double_multiplier is not None else None,
                actor_id,
            )
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        logger.info("Payout config for %s updated by %s", wager_type.value, actor_id)
        return await self._repo.load_payout_config(db)
