"""ExposureRepository — concrete implementation of ExposureRepositoryProtocol.

The reservation is ONE conditional upsert. Postgres takes the row lock on
conflict, so two concurrent reservations on the same (draw, wager_type,
combination) are serialized and the second one evaluates its WHERE clause
against the first one's committed total. No read-then-write window exists.

Transaction ownership: the CALLER owns the transaction. A reservation made
inside a ticket submission is rolled back with it.
"""

from decimal import Decimal
from typing import Any

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.lt_exposure.domain.models import ExposureTotal

# ---------------------------------------------------------------------------
# SQL
# ---------------------------------------------------------------------------

_TRY_RESERVE_SQL = text("""
    INSERT INTO exposure_totals (draw_id, wager_type, combination, cumulative, sold_out)
    VALUES (
        :draw_id, :wager_type, :combination,
        CAST(:stake AS NUMERIC),
        CAST(:stake AS NUMERIC) >= CAST(:ceiling AS NUMERIC)
    )
    ON CONFLICT (draw_id, wager_type, combination) DO UPDATE
    SET cumulative = exposure_totals.cumulative + EXCLUDED.cumulative,
        sold_out   = (exposure_totals.cumulative + EXCLUDED.cumulative)
                     >= CAST(:ceiling AS NUMERIC),
        updated_at = NOW()
    WHERE NOT exposure_totals.sold_out
      AND exposure_totals.cumulative + EXCLUDED.cumulative <= CAST(:ceiling AS NUMERIC)
    RETURNING draw_id, wager_type, combination, cumulative, sold_out
""")

_GET_TOTAL_SQL = text("""
    SELECT draw_id, wager_type, combination, cumulative, sold_out
    FROM exposure_totals
    WHERE draw_id = :draw_id AND wager_type = :wager_type AND combination = :combination
""")

_LIST_SOLD_OUT_SQL = text("""
    SELECT draw_id, wager_type, combination, cumulative, sold_out
    FROM exposure_totals
    WHERE draw_id = :draw_id AND sold_out
    ORDER BY wager_type, combination
""")

_GET_NUMBER_LIMIT_SQL = text("""
    SELECT limit_amount FROM bet_limits_per_draw
    WHERE draw_id = :draw_id AND wager_type = :wager_type AND combination = :combination
""")

_GET_GLOBAL_LIMIT_SQL = text("""
    SELECT limit_amount FROM bet_limits
    WHERE wager_type = :wager_type AND is_active
""")

_UPSERT_GLOBAL_LIMIT_SQL = text("""
    INSERT INTO bet_limits (wager_type, limit_amount, is_active, updated_by)
    VALUES (:wager_type, :amount, TRUE, :updated_by)
    ON CONFLICT (wager_type) DO UPDATE
    SET limit_amount = EXCLUDED.limit_amount, is_active = TRUE,
        updated_by = EXCLUDED.updated_by, updated_at = NOW()
""")

_UPSERT_NUMBER_LIMIT_SQL = text("""
    INSERT INTO bet_limits_per_draw (draw_id, wager_type, combination, limit_amount, updated_by)
    VALUES (:draw_id, :wager_type, :combination, :amount, :updated_by)
    ON CONFLICT (draw_id, wager_type, combination) DO UPDATE
    SET limit_amount = EXCLUDED.limit_amount,
        updated_by = EXCLUDED.updated_by, updated_at = NOW()
""")


def _row_to_total(row: Any) -> ExposureTotal:
    return ExposureTotal(
        draw_id=row.draw_id,
        wager_type=row.wager_type,
        combination=row.combination,
        cumulative=Decimal(row.cumulative),
        sold_out=bool(row.sold_out),
    )


class ExposureRepository:
    async def try_reserve(
        self,
        db: AsyncSession,
        draw_id: int,
        wager_type: str,
        combination: str,
        stake: Decimal,
        ceiling: Decimal,
    ) -> ExposureTotal | None:
        row = (
            await db.execute(
                _TRY_RESERVE_SQL,
                {
                    "draw_id": draw_id,
                    "wager_type": wager_type,
                    "combination": combination,
                    "stake": stake,
                    "ceiling": ceiling,
                },
            )
        ).fetchone()
        return _row_to_total(row) if row else None

    async def get_total(
        self, db: AsyncSession, draw_id: int, wager_type: str, combination: str
    ) -> ExposureTotal | None:
        row = (
            await db.execute(
                _GET_TOTAL_SQL,
                {"draw_id": draw_id, "wager_type": wager_type, "combination": combination},
            )
        ).fetchone()
        return _row_to_total(row) if row else None

    async def list_sold_out(self, db: AsyncSession, draw_id: int) -> list[ExposureTotal]:
        result = await db.execute(_LIST_SOLD_OUT_SQL, {"draw_id": draw_id})
        return [_row_to_total(r) for r in result.fetchall()]

    async def get_number_limit(
        self, db: AsyncSession, draw_id: int, wager_type: str, combination: str
    ) -> Decimal | None:
        value = (
            await db.execute(
                _GET_NUMBER_LIMIT_SQL,
                {"draw_id": draw_id, "wager_type": wager_type, "combination": combination},
            )
        ).scalar_one_or_none()
        return Decimal(value) if value is not None else None

    async def get_global_limit(self, db: AsyncSession, wager_type: str) -> Decimal | None:
        value = (
            await db.execute(_GET_GLOBAL_LIMIT_SQL, {"wager_type": wager_type})
        ).scalar_one_or_none()
        return Decimal(value) if value is not None else None

    async def upsert_global_limit(
        self, db: AsyncSession, wager_type: str, amount: Decimal, updated_by: str
    ) -> None:
        await db.execute(
            _UPSERT_GLOBAL_LIMIT_SQL,
            {"wager_type": wager_type, "amount": amount, "updated_by": updated_by},
        )

    async def upsert_number_limit(
        self,
        db: AsyncSession,
        draw_id: int,
        wager_type: str,
        combination: str,
        amount: Decimal,
        updated_by: str,
    ) -> None:
        await db.execute(
            _UPSERT_NUMBER_LIMIT_SQL,
            {
                "draw_id": draw_id,
                "wager_type": wager_type,
                "combination": combination,
                "amount": amount,
                "updated_by": updated_by,
            },
        )
