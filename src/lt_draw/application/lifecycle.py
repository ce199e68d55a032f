"""DrawLifecycle — draw materialization, status sweep and result posting.

State machine: OPEN -> CLOSED -> SETTLED. Every transition is a conditional
UPDATE whose WHERE clause names the source state, so a transition can never
skip a state or run twice, even with several workers.

Background work (APScheduler, AsyncIOScheduler in the draw timezone):
  ensure_draws   daily at 00:00       keep DRAW_HORIZON_DAYS of draws materialized
  status_sweep   every N seconds      close draws whose cutoff has passed
Both run once at start(). Each run opens its own session; a failing run is
logged and the next run repairs whatever it missed.
"""

import calendar as month_calendar
import logging
from collections.abc import Callable
from datetime import date, datetime

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from sqlalchemy.ext.asyncio import AsyncSession

from config.settings import settings
from src.lt_common.database import async_session_factory
from src.lt_common.datetime_utils import Clock, utc_now
from src.lt_common.enums import DrawSlot, DrawStatus
from src.lt_common.errors import (
    AppError,
    DrawAlreadySettledError,
    DrawNotClosedError,
    DrawNotFoundError,
    MalformedCombinationError,
    SettlementFailureError,
)
from src.lt_draw.domain.calendar import DrawCalendar
from src.lt_draw.domain.models import Draw, DrawCreationSummary
from src.lt_draw.domain.repository import DrawRepositoryProtocol
from src.lt_draw.infrastructure.persistence import DrawRepository
from src.lt_notify.sink import NotificationSink
from src.lt_settlement.application.service import SettlementService
from src.lt_settlement.domain.models import SettlementSummary
from src.lt_wager.domain.rules import is_well_formed

logger = logging.getLogger(__name__)

ENSURE_JOB_ID = "ensure_draws"
SWEEP_JOB_ID = "status_sweep"


class DrawLifecycle:
    def __init__(
        self,
        repo: DrawRepositoryProtocol | None = None,
        settlement: SettlementService | None = None,
        notifier: NotificationSink | None = None,
        calendar: DrawCalendar | None = None,
        clock: Clock = utc_now,
        session_factory: Callable[[], AsyncSession] = async_session_factory,
        horizon_days: int = settings.DRAW_HORIZON_DAYS,
        sweep_interval_seconds: int = settings.STATUS_SWEEP_INTERVAL_SECONDS,
    ) -> None:
        self._repo: DrawRepositoryProtocol = repo or DrawRepository()
        self._settlement = settlement or SettlementService(draw_repo=self._repo, clock=clock)
        self._notifier = notifier or NotificationSink()
        self._calendar = calendar or DrawCalendar(settings.DRAW_TIMEZONE)
        self._clock = clock
        self._session_factory = session_factory
        self._horizon_days = horizon_days
        self._sweep_interval = sweep_interval_seconds
        self._scheduler: AsyncIOScheduler | None = None

    # ------------------------------------------------------------------
    # Materialization
    # ------------------------------------------------------------------

    async def ensure_draws_exist(
        self, db: AsyncSession, from_date: date, horizon_days: int
    ) -> DrawCreationSummary:
        """Create every missing (date, slot) draw in the horizon. Idempotent.

        Each date runs in its own savepoint: a failing date is recorded in
        ``failed_dates`` and the remaining dates still commit.
        """
        summary = DrawCreationSummary()
        for day in self._calendar.dates_in_horizon(from_date, horizon_days):
            created = skipped = 0
            try:
                async with db.begin_nested():
                    for slot in DrawSlot:
                        cutoff = self._calendar.cutoff_for(slot, day)
                        if await self._repo.insert_if_missing(db, day, slot.value, cutoff):
                            created += 1
                        else:
                            skipped += 1
            except Exception:
                logger.exception("Draw creation failed for %s", day.isoformat())
                summary.failed_dates.append(day)
                continue
            summary.created += created
            summary.skipped += skipped
        await db.commit()

        logger.info(
            "Draws ensured from %s (+%d days): created=%d skipped=%d failed=%d",
            from_date.isoformat(), horizon_days,
            summary.created, summary.skipped, len(summary.failed_dates),
        )
        return summary

    async def ensure_horizon(
        self, db: AsyncSession, horizon_days: int | None = None
    ) -> DrawCreationSummary:
        """Materialize the rolling horizon starting today in the draw timezone."""
        today = self._calendar.local_today(self._clock())
        return await self.ensure_draws_exist(db, today, horizon_days or self._horizon_days)

    async def create_draws_for_month(
        self, db: AsyncSession, year: int, month: int
    ) -> DrawCreationSummary:
        days = month_calendar.monthrange(year, month)[1]
        return await self.ensure_draws_exist(db, date(year, month, 1), days)

    async def create_draws_for_current_and_next_month(
        self, db: AsyncSession
    ) -> DrawCreationSummary:
        today = self._calendar.local_today(self._clock())
        next_year, next_month = (
            (today.year + 1, 1) if today.month == 12 else (today.year, today.month + 1)
        )
        current = await self.create_draws_for_month(db, today.year, today.month)
        following = await self.create_draws_for_month(db, next_year, next_month)
        return DrawCreationSummary(
            created=current.created + following.created,
            skipped=current.skipped + following.skipped,
            failed_dates=current.failed_dates + following.failed_dates,
        )

    # ------------------------------------------------------------------
    # OPEN -> CLOSED
    # ------------------------------------------------------------------

    async def sweep_statuses(self, db: AsyncSession, now: datetime | None = None) -> list[Draw]:
        """Close every OPEN draw whose cutoff is at or before ``now``."""
        now = now or self._clock()
        try:
            closed = await self._repo.close_due_draws(db, now)
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        if closed:
            logger.info(
                "Closed %d draw(s): %s",
                len(closed),
                ", ".join(f"{d.draw_date.isoformat()} {d.slot}" for d in closed),
            )
        return closed

    # ------------------------------------------------------------------
    # CLOSED -> SETTLED
    # ------------------------------------------------------------------

    async def post_result(
        self, db: AsyncSession, draw_id: int, winning_number: str, actor_id: str
    ) -> SettlementSummary:
        """Record the winning number and settle the draw in one transaction.

        Notifications go out only after the commit; their failure never
        affects the settlement.

        Raises:
            MalformedCombinationError: ``winning_number`` is not 3 digits.
            DrawNotFoundError, DrawNotClosedError, DrawAlreadySettledError.
            SettlementFailureError: anything unexpected; nothing was applied.
        """
        if not is_well_formed(winning_number):
            raise MalformedCombinationError(winning_number)

        try:
            draw = await self._repo.mark_settled(db, draw_id, winning_number, self._clock())
            if draw is None:
                raise await self._transition_error(db, draw_id)
            await self._repo.insert_result_record(db, draw_id, winning_number, actor_id)
            outcome = await self._settlement.settle_draw(db, draw)
            await db.commit()
        except AppError:
            await db.rollback()
            raise
        except Exception as exc:
            await db.rollback()
            logger.exception("Settlement of draw %s failed", draw_id)
            raise SettlementFailureError(draw_id) from exc

        summary = outcome.summary
        logger.info(
            "Draw %s settled with %s by %s: scanned=%d winners=%d payout=%s",
            draw_id, winning_number, actor_id,
            summary.tickets_scanned, summary.winner_count, summary.total_payout,
        )
        await self._notifier.dispatch(outcome.events)
        return summary

    async def _transition_error(self, db: AsyncSession, draw_id: int) -> AppError:
        current = await self._repo.get_by_id(db, draw_id)
        if current is None:
            return DrawNotFoundError(draw_id)
        if current.status == DrawStatus.SETTLED:
            return DrawAlreadySettledError(draw_id)
        return DrawNotClosedError(draw_id, current.status)

    # ------------------------------------------------------------------
    # Scheduler
    # ------------------------------------------------------------------

    async def run_maintenance(self) -> DrawCreationSummary | None:
        async with self._session_factory() as db:
            try:
                return await self.ensure_horizon(db)
            except Exception:
                logger.exception("Draw maintenance run failed")
                return None

    async def run_sweep(self) -> list[Draw]:
        async with self._session_factory() as db:
            try:
                return await self.sweep_statuses(db)
            except Exception:
                logger.exception("Status sweep failed")
                return []

    async def start(self) -> None:
        if self._scheduler is not None:
            return
        await self.run_maintenance()
        await self.run_sweep()

        scheduler = AsyncIOScheduler(timezone=self._calendar.tz)
        scheduler.add_job(
            self.run_maintenance, "cron", hour=0, minute=0,
            id=ENSURE_JOB_ID, coalesce=True, max_instances=1,
        )
        scheduler.add_job(
            self.run_sweep, "interval", seconds=self._sweep_interval,
            id=SWEEP_JOB_ID, coalesce=True, max_instances=1,
        )
        scheduler.start()
        self._scheduler = scheduler
        logger.info(
            "Draw scheduler started (tz=%s, horizon=%d days, sweep every %ds)",
            self._calendar.tz.key, self._horizon_days, self._sweep_interval,
        )

    async def stop(self) -> None:
        if self._scheduler is None:
            return
        self._scheduler.shutdown(wait=False)
        self._scheduler = None
        logger.info("Draw scheduler stopped")
