"""TicketIntake — validate a multi-wager ticket and buy it in one transaction.

Order inside the transaction:
  1. lock the draw row FOR SHARE (the status sweep waits for us)
  2. validate each wager, then reject duplicates
  3. reserve exposure for every wager, in (wager_type, combination) order
  4. debit the balance and write ticket + wagers + ledger row
  5. re-check the betting window against the clock, then commit

Any failure rolls back everything, including exposure reserved in step 3.
Numbers that sell out during the submission are announced after commit.
"""

import logging
from collections.abc import Callable, Sequence
from datetime import datetime
from decimal import Decimal

from sqlalchemy.ext.asyncio import AsyncSession

from config.settings import settings
from src.lt_common.datetime_utils import Clock, utc_now
from src.lt_common.enums import DrawSlot, DrawStatus, NotificationAudience, TicketStatus
from src.lt_common.errors import (
    AppError,
    BettingWindowClosedError,
    DrawNotFoundError,
    DrawNotOpenError,
    DuplicateWagerError,
    TicketNotFoundError,
    TicketNotRefundableError,
    TooManyWagersError,
)
from src.lt_common.id_generator import generate_ticket_number
from src.lt_draw.domain.calendar import DrawCalendar
from src.lt_draw.domain.models import Draw
from src.lt_draw.domain.repository import DrawRepositoryProtocol
from src.lt_draw.infrastructure.persistence import DrawRepository
from src.lt_exposure.application.service import ExposureLedger
from src.lt_exposure.domain.models import ExposureTotal
from src.lt_notify.events import NUMBER_SOLD_OUT, NotificationEvent
from src.lt_notify.sink import NotificationSink
from src.lt_ticket.domain.models import BalanceEntry, Ticket, Wager
from src.lt_ticket.domain.repository import LedgerProtocol, TicketRepositoryProtocol
from src.lt_ticket.infrastructure.ledger import LedgerService
from src.lt_ticket.infrastructure.persistence import TicketRepository
from src.lt_wager.domain.rules import validate_combination, validate_stake

logger = logging.getLogger(__name__)


class TicketIntake:
    def __init__(
        self,
        draw_repo: DrawRepositoryProtocol | None = None,
        ticket_repo: TicketRepositoryProtocol | None = None,
        ledger: LedgerProtocol | None = None,
        exposure: ExposureLedger | None = None,
        notifier: NotificationSink | None = None,
        calendar: DrawCalendar | None = None,
        clock: Clock = utc_now,
        ticket_number_factory: Callable[[], str] = generate_ticket_number,
        max_wagers: int = settings.MAX_WAGERS_PER_TICKET,
        min_stake: Decimal = settings.MIN_STAKE,
    ) -> None:
        self._draw_repo: DrawRepositoryProtocol = draw_repo or DrawRepository()
        self._ticket_repo: TicketRepositoryProtocol = ticket_repo or TicketRepository()
        self._ledger: LedgerProtocol = ledger or LedgerService()
        self._exposure = exposure or ExposureLedger()
        self._notifier = notifier or NotificationSink()
        self._calendar = calendar or DrawCalendar(settings.DRAW_TIMEZONE)
        self._clock = clock
        self._next_ticket_number = ticket_number_factory
        self._max_wagers = max_wagers
        self._min_stake = min_stake

    # ------------------------------------------------------------------
    # Submission
    # ------------------------------------------------------------------

    async def submit(
        self, db: AsyncSession, owner_id: str, draw_id: int, wagers: Sequence[Wager]
    ) -> Ticket:
        try:
            draw = self._require_accepting(
                draw_id, await self._draw_repo.lock_for_betting(db, draw_id), self._clock()
            )
            self.validate_wagers(wagers)

            sold_out: list[NotificationEvent] = []
            # Fixed lock order on exposure rows so two tickets cannot deadlock
            for wager in sorted(wagers, key=lambda w: (w.wager_type, w.combination)):
                ceiling = await self._exposure.resolve_ceiling(
                    db, draw_id, wager.wager_type, wager.combination
                )
                total = await self._exposure.check_and_reserve(
                    db, draw_id, wager.wager_type, wager.combination, wager.stake, ceiling
                )
                if total.sold_out:
                    sold_out.append(_sold_out_event(draw, total, ceiling))

            ticket, _ = await self._ledger.deduct_and_create_ticket(
                db, owner_id, draw_id, wagers, self._next_ticket_number()
            )

            # Status can lag the clock by one sweep interval
            if not self._window_open(draw, self._clock()):
                raise BettingWindowClosedError(draw_id)
            await db.commit()
        except Exception:
            await db.rollback()
            raise

        logger.info(
            "Ticket %s: owner=%s draw=%s wagers=%d total=%s",
            ticket.ticket_number, owner_id, draw_id, len(ticket.wagers), ticket.total_stake,
        )
        await self._notifier.dispatch(sold_out)
        return ticket

    def validate_wagers(self, wagers: Sequence[Wager]) -> None:
        """Structural and rule checks, no I/O. First failure wins and names the wager."""
        if not 1 <= len(wagers) <= self._max_wagers:
            raise TooManyWagersError(len(wagers), self._max_wagers)

        for index, wager in enumerate(wagers, start=1):
            try:
                validate_combination(wager.wager_type, wager.combination)
                validate_stake(wager.stake, self._min_stake)
            except AppError as exc:
                exc.message = f"Wager #{index}: {exc.message}"
                exc.args = (exc.message,)
                raise

        seen: set[tuple[str, str]] = set()
        for wager in wagers:
            if wager.key in seen:
                raise DuplicateWagerError(wager.combination, wager.wager_type)
            seen.add(wager.key)

    def _require_accepting(self, draw_id: int, draw: Draw | None, now: datetime) -> Draw:
        if draw is None:
            raise DrawNotFoundError(draw_id)
        if draw.status != DrawStatus.OPEN:
            raise DrawNotOpenError(draw_id, draw.status)
        if not self._window_open(draw, now):
            raise BettingWindowClosedError(draw_id)
        return draw

    def _window_open(self, draw: Draw, now: datetime) -> bool:
        return self._calendar.is_open_for_betting(DrawSlot(draw.slot), draw.draw_date, now)

    # ------------------------------------------------------------------
    # Lookup and refund
    # ------------------------------------------------------------------

    async def get_ticket(self, db: AsyncSession, ticket_number: str) -> Ticket:
        ticket = await self._ticket_repo.get_by_number(db, ticket_number)
        if ticket is None:
            raise TicketNotFoundError(ticket_number)
        return ticket

    async def refund_ticket(
        self, db: AsyncSession, ticket_number: str, actor_id: str, reason: str | None = None
    ) -> tuple[Ticket, BalanceEntry]:
        """PENDING -> CANCELLED and credit the stake back.

        Only tickets on a draw without a posted result are refundable; a PENDING
        ticket on a SETTLED draw is a losing ticket. Exposure is not released.
        """
        try:
            ticket = await self._ticket_repo.lock_by_number(db, ticket_number)
            if ticket is None:
                raise TicketNotFoundError(ticket_number)
            if ticket.status != TicketStatus.PENDING:
                raise TicketNotRefundableError(ticket_number, ticket.status)
            draw = await self._draw_repo.get_by_id(db, ticket.draw_id)
            if draw is None or draw.status == DrawStatus.SETTLED:
                raise TicketNotRefundableError(ticket_number, ticket.status)
            if not await self._ticket_repo.mark_cancelled(db, ticket.id):
                raise TicketNotRefundableError(ticket_number, ticket.status)
            entry = await self._ledger.credit_refund(db, ticket, actor_id, reason)
            await db.commit()
        except Exception:
            await db.rollback()
            raise

        ticket.status = TicketStatus.CANCELLED.value
        logger.info(
            "Ticket %s refunded by %s: %s back to %s",
            ticket_number, actor_id, ticket.total_stake, ticket.owner_id,
        )
        return ticket, entry


def _sold_out_event(draw: Draw, total: ExposureTotal, ceiling: Decimal) -> NotificationEvent:
    return NotificationEvent(
        event_name=NUMBER_SOLD_OUT,
        audience=NotificationAudience.BROADCAST,
        payload={
            "draw_id": draw.id,
            "draw_date": draw.draw_date.isoformat(),
            "slot": draw.slot,
            "wager_type": total.wager_type,
            "combination": total.combination,
            "ceiling": str(ceiling),
        },
    )
