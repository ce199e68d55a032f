"""Unit tests for ExposureRepository using MagicMock AsyncSession."""

from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock

import pytest

from src.lt_exposure.infrastructure.persistence import ExposureRepository


def _total_row(cumulative: str = "40.00", sold_out: bool = False) -> MagicMock:
    row = MagicMock()
    row.draw_id = 1
    row.wager_type = "STRAIGHT"
    row.combination = "123"
    row.cumulative = Decimal(cumulative)
    row.sold_out = sold_out
    return row


@pytest.fixture
def db() -> MagicMock:
    return MagicMock()


class TestTryReserve:
    async def test_returns_total_when_row_applied(self, db) -> None:
        result = MagicMock()
        result.fetchone.return_value = _total_row("100.00", True)
        db.execute = AsyncMock(return_value=result)

        total = await ExposureRepository().try_reserve(
            db, 1, "STRAIGHT", "123", Decimal("10"), Decimal("100")
        )

        assert total is not None
        assert total.cumulative == Decimal("100.00")
        assert total.sold_out is True

    async def test_returns_none_when_condition_fails(self, db) -> None:
        result = MagicMock()
        result.fetchone.return_value = None
        db.execute = AsyncMock(return_value=result)

        total = await ExposureRepository().try_reserve(
            db, 1, "STRAIGHT", "123", Decimal("10"), Decimal("100")
        )

        assert total is None

    async def test_single_statement_with_ceiling_in_where(self, db) -> None:
        result = MagicMock()
        result.fetchone.return_value = None
        db.execute = AsyncMock(return_value=result)

        await ExposureRepository().try_reserve(
            db, 1, "POOLED", "456", Decimal("5"), Decimal("50")
        )

        db.execute.assert_awaited_once()
        stmt, params = db.execute.await_args.args
        sql = str(stmt)
        assert "ON CONFLICT" in sql
        assert "NOT exposure_totals.sold_out" in sql
        assert params == {
            "draw_id": 1,
            "wager_type": "POOLED",
            "combination": "456",
            "stake": Decimal("5"),
            "ceiling": Decimal("50"),
        }


class TestLimits:
    async def test_number_limit_none_when_absent(self, db) -> None:
        result = MagicMock()
        result.scalar_one_or_none.return_value = None
        db.execute = AsyncMock(return_value=result)

        assert await ExposureRepository().get_number_limit(db, 1, "STRAIGHT", "123") is None

    async def test_global_limit_decimal(self, db) -> None:
        result = MagicMock()
        result.scalar_one_or_none.return_value = Decimal("1000.00")
        db.execute = AsyncMock(return_value=result)

        assert await ExposureRepository().get_global_limit(db, "POOLED") == Decimal("1000.00")

    async def test_list_sold_out(self, db) -> None:
        result = MagicMock()
        result.fetchall.return_value = [_total_row("100.00", True)]
        db.execute = AsyncMock(return_value=result)

        totals = await ExposureRepository().list_sold_out(db, 1)

        assert len(totals) == 1
        assert totals[0].sold_out
