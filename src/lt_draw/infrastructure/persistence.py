"""DrawRepository — concrete implementation of DrawRepositoryProtocol.

All queries use raw text() SQL (no ORM).
Status transitions are conditional UPDATEs: the WHERE clause carries the
expected current status, so two writers racing on the same draw cannot both
succeed. A result of 0 rows means the precondition no longer holds.

asyncpg NULL parameter pattern: CAST(:param AS TYPE) IS NULL required for None values.
"""

from datetime import date, datetime
from decimal import Decimal
from typing import Any

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.lt_draw.domain.models import Draw, DrawStatistics, NumberStat

# ---------------------------------------------------------------------------
# SQL
# ---------------------------------------------------------------------------

_DRAW_COLUMNS = """
    id, draw_date, slot, cutoff_at, status, winning_number, settled_at,
    created_at, updated_at
"""

_INSERT_IF_MISSING_SQL = text("""
    INSERT INTO draws (draw_date, slot, cutoff_at, status)
    VALUES (:draw_date, :slot, :cutoff_at, 'OPEN')
    ON CONFLICT (draw_date, slot) DO NOTHING
    RETURNING id
""")

_CLOSE_DUE_SQL = text(f"""
    UPDATE draws
    SET status = 'CLOSED'
    WHERE status = 'OPEN' AND cutoff_at <= :now
    RETURNING {_DRAW_COLUMNS}
""")

_GET_DRAW_SQL = text(f"SELECT {_DRAW_COLUMNS} FROM draws WHERE id = :draw_id")

# FOR SHARE: the status sweep's UPDATE waits until the betting transaction ends
_LOCK_FOR_BETTING_SQL = text(f"""
    SELECT {_DRAW_COLUMNS} FROM draws WHERE id = :draw_id FOR SHARE
""")

_MARK_SETTLED_SQL = text(f"""
    UPDATE draws
    SET status = 'SETTLED', winning_number = :winning_number, settled_at = :settled_at
    WHERE id = :draw_id AND status = 'CLOSED' AND winning_number IS NULL
    RETURNING {_DRAW_COLUMNS}
""")

_INSERT_RESULT_SQL = text("""
    INSERT INTO draw_results (draw_id, winning_number, input_by)
    VALUES (:draw_id, :winning_number, :input_by)
""")

_LIST_DRAWS_SQL = text(f"""
    SELECT {_DRAW_COLUMNS}
    FROM draws
    WHERE
        (CAST(:date_from AS DATE) IS NULL OR draw_date >= CAST(:date_from AS DATE))
        AND (CAST(:date_to AS DATE) IS NULL OR draw_date <= CAST(:date_to AS DATE))
        AND (CAST(:status AS TEXT) IS NULL OR status = CAST(:status AS TEXT))
    ORDER BY draw_date ASC, cutoff_at ASC
    LIMIT :limit
""")

_LIST_OPEN_FOR_DATES_SQL = text(f"""
    SELECT {_DRAW_COLUMNS}
    FROM draws
    WHERE status = 'OPEN' AND draw_date = ANY(:dates)
    ORDER BY cutoff_at ASC
""")

_STATS_TOTALS_SQL = text("""
    SELECT COUNT(*) AS total_tickets, COALESCE(SUM(total_stake), 0) AS total_stake
    FROM tickets
    WHERE draw_id = :draw_id AND status <> 'CANCELLED'
""")

_STATS_BY_NUMBER_SQL = text("""
    SELECT w.wager_type, w.combination,
           COUNT(DISTINCT w.ticket_id) AS ticket_count,
           COALESCE(SUM(w.stake), 0) AS total_stake
    FROM wagers w
    JOIN tickets t ON t.id = w.ticket_id
    WHERE t.draw_id = :draw_id AND t.status <> 'CANCELLED'
    GROUP BY w.wager_type, w.combination
    ORDER BY total_stake DESC, w.combination ASC
""")

# ---------------------------------------------------------------------------
# Row mappers
# ---------------------------------------------------------------------------


def _row_to_draw(row: Any) -> Draw:
    return Draw(
        id=row.id,
        draw_date=row.draw_date,
        slot=row.slot,
        cutoff_at=row.cutoff_at,
        status=row.status,
        winning_number=row.winning_number,
        settled_at=row.settled_at,
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


# ---------------------------------------------------------------------------
# Repository
# ---------------------------------------------------------------------------


class DrawRepository:
    async def insert_if_missing(
        self, db: AsyncSession, draw_date: date, slot: str, cutoff_at: datetime
    ) -> bool:
        result = await db.execute(
            _INSERT_IF_MISSING_SQL,
            {"draw_date": draw_date, "slot": slot, "cutoff_at": cutoff_at},
        )
        return result.fetchone() is not None

    async def close_due_draws(self, db: AsyncSession, now: datetime) -> list[Draw]:
        result = await db.execute(_CLOSE_DUE_SQL, {"now": now})
        return [_row_to_draw(r) for r in result.fetchall()]

    async def get_by_id(self, db: AsyncSession, draw_id: int) -> Draw | None:
        row = (await db.execute(_GET_DRAW_SQL, {"draw_id": draw_id})).fetchone()
        return _row_to_draw(row) if row else None

    async def lock_for_betting(self, db: AsyncSession, draw_id: int) -> Draw | None:
        row = (await db.execute(_LOCK_FOR_BETTING_SQL, {"draw_id": draw_id})).fetchone()
        return _row_to_draw(row) if row else None

    async def mark_settled(
        self, db: AsyncSession, draw_id: int, winning_number: str, settled_at: datetime
    ) -> Draw | None:
        row = (
            await db.execute(
                _MARK_SETTLED_SQL,
                {
                    "draw_id": draw_id,
                    "winning_number": winning_number,
                    "settled_at": settled_at,
                },
            )
        ).fetchone()
        return _row_to_draw(row) if row else None

    async def insert_result_record(
        self, db: AsyncSession, draw_id: int, winning_number: str, input_by: str
    ) -> None:
        await db.execute(
            _INSERT_RESULT_SQL,
            {"draw_id": draw_id, "winning_number": winning_number, "input_by": input_by},
        )

    async def list_draws(
        self,
        db: AsyncSession,
        date_from: date | None,
        date_to: date | None,
        status: str | None,
        limit: int,
    ) -> list[Draw]:
        result = await db.execute(
            _LIST_DRAWS_SQL,
            {"date_from": date_from, "date_to": date_to, "status": status, "limit": limit},
        )
        return [_row_to_draw(r) for r in result.fetchall()]

    async def list_open_for_dates(self, db: AsyncSession, dates: list[date]) -> list[Draw]:
        result = await db.execute(_LIST_OPEN_FOR_DATES_SQL, {"dates": dates})
        return [_row_to_draw(r) for r in result.fetchall()]

    async def get_statistics(self, db: AsyncSession, draw_id: int) -> DrawStatistics:
        totals = (await db.execute(_STATS_TOTALS_SQL, {"draw_id": draw_id})).fetchone()
        rows = (await db.execute(_STATS_BY_NUMBER_SQL, {"draw_id": draw_id})).fetchall()
        return DrawStatistics(
            draw_id=draw_id,
            total_tickets=int(totals.total_tickets) if totals else 0,
            total_stake=Decimal(totals.total_stake) if totals else Decimal("0.00"),
            by_number=[
                NumberStat(
                    wager_type=r.wager_type,
                    combination=r.combination,
                    ticket_count=int(r.ticket_count),
                    total_stake=Decimal(r.total_stake),
                )
                for r in rows
            ],
        )
