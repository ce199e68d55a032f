"""SettlementRepository — concrete implementation of SettlementRepositoryProtocol.

Transaction ownership: the CALLER owns the transaction. ``apply`` runs in the
same transaction that flipped the draw to SETTLED, so a failure here leaves
the draw CLOSED and every ticket untouched.
"""

from collections.abc import Sequence
from datetime import datetime
from decimal import Decimal
from typing import Any

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.lt_settlement.domain.models import (
    PendingDraw,
    TicketSettlement,
    WinnerRecord,
)
from src.lt_ticket.domain.models import Ticket, Wager
from src.lt_wager.domain.payout import PayoutConfig

# ---------------------------------------------------------------------------
# SQL
# ---------------------------------------------------------------------------

_LOAD_TICKETS_SQL = text("""
    SELECT t.id, t.ticket_number, t.owner_id, t.draw_id, t.total_stake,
           t.status, t.created_at, a.upline_id
    FROM tickets t
    LEFT JOIN accounts a ON a.id = t.owner_id
    WHERE t.draw_id = :draw_id AND t.status = ANY(:statuses)
    ORDER BY t.id
""")

_LOAD_WAGERS_SQL = text("""
    SELECT id, ticket_id, combination, wager_type, stake
    FROM wagers
    WHERE ticket_id = ANY(:ticket_ids)
    ORDER BY ticket_id, id
""")

_MARK_VALIDATED_SQL = text("""
    UPDATE tickets
    SET status = 'VALIDATED', updated_at = NOW()
    WHERE id = ANY(:ticket_ids) AND status = 'PENDING'
""")

_INSERT_WINNING_RECORD_SQL = text("""
    INSERT INTO winning_records (ticket_id, draw_id, prize_amount)
    VALUES (:ticket_id, :draw_id, :prize_amount)
    ON CONFLICT (ticket_id, draw_id) DO NOTHING
    RETURNING id
""")

_LOAD_PAYOUT_SQL = text("""
    SELECT wager_type, multiplier, double_multiplier, is_active
    FROM payout_configurations
""")

_UPSERT_PAYOUT_SQL = text("""
    INSERT INTO payout_configurations
        (wager_type, multiplier, double_multiplier, is_active, updated_by)
    VALUES (:wager_type, :multiplier, :double_multiplier, TRUE, :updated_by)
    ON CONFLICT (wager_type) DO UPDATE
    SET multiplier = EXCLUDED.multiplier,
        double_multiplier = EXCLUDED.double_multiplier,
        is_active = TRUE,
        updated_by = EXCLUDED.updated_by,
        updated_at = NOW()
""")

_LIST_WINNERS_SQL = text("""
    SELECT w.ticket_id, t.ticket_number, w.draw_id, t.owner_id,
           o.username AS owner_username, o.upline_id,
           u.username AS upline_username, w.prize_amount, w.created_at
    FROM winning_records w
    JOIN tickets t ON t.id = w.ticket_id
    LEFT JOIN accounts o ON o.id = t.owner_id
    LEFT JOIN accounts u ON u.id = o.upline_id
    WHERE w.draw_id = :draw_id
    ORDER BY w.prize_amount DESC, w.ticket_id
""")

_WINNERS_SINCE_SQL = text("""
    SELECT
        (SELECT COUNT(*) FROM draws
          WHERE status = 'SETTLED' AND settled_at >= :since)         AS draws_settled,
        COUNT(w.id)                                                  AS winning_tickets,
        COALESCE(SUM(w.prize_amount), 0)                             AS total_payout
    FROM winning_records w
    WHERE w.created_at >= :since
""")

_AWAITING_RESULTS_SQL = text("""
    SELECT id, draw_date, slot, cutoff_at
    FROM draws
    WHERE status = 'CLOSED'
    ORDER BY draw_date, cutoff_at
""")


def _row_to_wager(row: Any) -> Wager:
    return Wager(
        id=row.id,
        ticket_id=row.ticket_id,
        combination=row.combination,
        wager_type=row.wager_type,
        stake=Decimal(row.stake),
    )


class SettlementRepository:
    async def load_tickets_for_draw(
        self, db: AsyncSession, draw_id: int, statuses: Sequence[str]
    ) -> list[Ticket]:
        ticket_rows = (
            await db.execute(
                _LOAD_TICKETS_SQL, {"draw_id": draw_id, "statuses": list(statuses)}
            )
        ).fetchall()
        if not ticket_rows:
            return []

        tickets = {
            r.id: Ticket(
                id=r.id,
                ticket_number=r.ticket_number,
                owner_id=r.owner_id,
                draw_id=r.draw_id,
                total_stake=Decimal(r.total_stake),
                status=r.status,
                upline_id=r.upline_id,
                created_at=r.created_at,
            )
            for r in ticket_rows
        }
        wager_rows = (
            await db.execute(_LOAD_WAGERS_SQL, {"ticket_ids": list(tickets)})
        ).fetchall()
        for row in wager_rows:
            tickets[row.ticket_id].wagers.append(_row_to_wager(row))
        return list(tickets.values())

    async def apply(
        self, db: AsyncSession, draw_id: int, winners: Sequence[TicketSettlement]
    ) -> int:
        if not winners:
            return 0
        await db.execute(
            _MARK_VALIDATED_SQL, {"ticket_ids": [w.ticket.id for w in winners]}
        )
        written = 0
        for win in winners:
            row = (
                await db.execute(
                    _INSERT_WINNING_RECORD_SQL,
                    {
                        "ticket_id": win.ticket.id,
                        "draw_id": draw_id,
                        "prize_amount": win.prize_total,
                    },
                )
            ).fetchone()
            if row is not None:
                written += 1
        return written

    async def load_payout_config(self, db: AsyncSession) -> PayoutConfig:
        rows = (await db.execute(_LOAD_PAYOUT_SQL)).fetchall()
        return PayoutConfig.from_rows(rows)

    async def upsert_payout_config(
        self,
        db: AsyncSession,
        wager_type: str,
        multiplier: Decimal,
        double_multiplier: Decimal | None,
        updated_by: str,
    ) -> None:
        await db.execute(
            _UPSERT_PAYOUT_SQL,
            {
                "wager_type": wager_type,
                "multiplier": multiplier,
                "double_multiplier": double_multiplier,
                "updated_by": updated_by,
            },
        )

    async def list_winners(self, db: AsyncSession, draw_id: int) -> list[WinnerRecord]:
        rows = (await db.execute(_LIST_WINNERS_SQL, {"draw_id": draw_id})).fetchall()
        return [
            WinnerRecord(
                ticket_id=r.ticket_id,
                ticket_number=r.ticket_number,
                draw_id=r.draw_id,
                owner_id=r.owner_id,
                owner_username=r.owner_username,
                upline_id=r.upline_id,
                upline_username=r.upline_username,
                prize_amount=Decimal(r.prize_amount),
                created_at=r.created_at,
            )
            for r in rows
        ]

    async def winners_since(
        self, db: AsyncSession, since: datetime
    ) -> tuple[int, int, Decimal]:
        row = (await db.execute(_WINNERS_SINCE_SQL, {"since": since})).one()
        return int(row.draws_settled), int(row.winning_tickets), Decimal(row.total_payout)

    async def list_awaiting_results(self, db: AsyncSession) -> list[PendingDraw]:
        rows = (await db.execute(_AWAITING_RESULTS_SQL)).fetchall()
        return [
            PendingDraw(draw_id=r.id, draw_date=r.draw_date, slot=r.slot, cutoff_at=r.cutoff_at)
            for r in rows
        ]

