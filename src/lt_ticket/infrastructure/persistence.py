"""TicketRepository — reads and status transitions on tickets.

Transaction ownership: the CALLER owns the transaction.
"""

from decimal import Decimal
from typing import Any

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.lt_ticket.domain.models import Ticket, Wager

_GET_BY_NUMBER_SQL = text("""
    SELECT id, ticket_number, owner_id, draw_id, total_stake, status, created_at
    FROM tickets
    WHERE ticket_number = :ticket_number
""")

_LOCK_BY_NUMBER_SQL = text("""
    SELECT id, ticket_number, owner_id, draw_id, total_stake, status, created_at
    FROM tickets
    WHERE ticket_number = :ticket_number
    FOR UPDATE
""")

_GET_WAGERS_SQL = text("""
    SELECT id, ticket_id, combination, wager_type, stake
    FROM wagers
    WHERE ticket_id = :ticket_id
    ORDER BY id
""")

_MARK_CANCELLED_SQL = text("""
    UPDATE tickets
    SET status = 'CANCELLED', updated_at = NOW()
    WHERE id = :ticket_id AND status = 'PENDING'
    RETURNING id
""")


def row_to_ticket(row: Any) -> Ticket:
    return Ticket(
        id=row.id,
        ticket_number=row.ticket_number,
        owner_id=row.owner_id,
        draw_id=row.draw_id,
        total_stake=Decimal(row.total_stake),
        status=row.status,
        created_at=row.created_at,
    )


class TicketRepository:
    async def get_by_number(self, db: AsyncSession, ticket_number: str) -> Ticket | None:
        row = (
            await db.execute(_GET_BY_NUMBER_SQL, {"ticket_number": ticket_number})
        ).fetchone()
        if row is None:
            return None
        ticket = row_to_ticket(row)
        wager_rows = (await db.execute(_GET_WAGERS_SQL, {"ticket_id": ticket.id})).fetchall()
        ticket.wagers = [
            Wager(
                id=w.id,
                ticket_id=w.ticket_id,
                combination=w.combination,
                wager_type=w.wager_type,
                stake=Decimal(w.stake),
            )
            for w in wager_rows
        ]
        return ticket

    async def lock_by_number(self, db: AsyncSession, ticket_number: str) -> Ticket | None:
        row = (
            await db.execute(_LOCK_BY_NUMBER_SQL, {"ticket_number": ticket_number})
        ).fetchone()
        return row_to_ticket(row) if row else None

    async def mark_cancelled(self, db: AsyncSession, ticket_id: int) -> bool:
        row = (await db.execute(_MARK_CANCELLED_SQL, {"ticket_id": ticket_id})).fetchone()
        return row is not None
