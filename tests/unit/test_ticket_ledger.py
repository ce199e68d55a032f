"""Unit tests for LedgerService using MagicMock AsyncSession."""

from datetime import datetime, timezone
from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock

import pytest

from src.lt_common.errors import AccountNotFoundError, InsufficientBalanceError
from src.lt_ticket.domain.models import Ticket, Wager
from src.lt_ticket.infrastructure.ledger import LedgerService

CREATED = datetime(2026, 3, 10, 5, 0, tzinfo=timezone.utc)


def _scalar(value) -> MagicMock:
    result = MagicMock()
    result.scalar_one_or_none.return_value = value
    result.scalar_one.return_value = value
    return result


def _row(**fields) -> MagicMock:
    result = MagicMock()
    row = MagicMock()
    for name, value in fields.items():
        setattr(row, name, value)
    result.one.return_value = row
    return result


def _wagers() -> list[Wager]:
    return [
        Wager(combination="123", wager_type="STRAIGHT", stake=Decimal("10.00")),
        Wager(combination="456", wager_type="POOLED", stake=Decimal("5.50")),
    ]


class TestDeductAndCreateTicket:
    async def test_writes_ticket_wagers_and_entry(self) -> None:
        db = MagicMock()
        db.execute = AsyncMock(
            side_effect=[
                _scalar(Decimal("84.50")),           # debit
                _row(id=11, created_at=CREATED),     # ticket
                _scalar(101),                         # wager 1
                _scalar(102),                         # wager 2
                _row(id=7, created_at=CREATED),      # balance tx
            ]
        )

        ticket, entry = await LedgerService().deduct_and_create_ticket(
            db, "agent-1", 3, _wagers(), "900001"
        )

        assert ticket.id == 11
        assert ticket.total_stake == Decimal("15.50")
        assert ticket.status == "PENDING"
        assert [w.id for w in ticket.wagers] == [101, 102]
        assert entry.amount == Decimal("-15.50")
        assert entry.balance_after == Decimal("84.50")
        assert entry.entry_type == "TICKET_PURCHASE"
        assert entry.reference_id == "900001"

    async def test_insufficient_balance(self) -> None:
        db = MagicMock()
        db.execute = AsyncMock(side_effect=[_scalar(None), _scalar(Decimal("5.00"))])

        with pytest.raises(InsufficientBalanceError) as exc_info:
            await LedgerService().deduct_and_create_ticket(db, "agent-1", 3, _wagers(), "900001")

        assert "15.50" in exc_info.value.message
        assert db.execute.await_count == 2

    async def test_unknown_account(self) -> None:
        db = MagicMock()
        db.execute = AsyncMock(side_effect=[_scalar(None), _scalar(None)])

        with pytest.raises(AccountNotFoundError):
            await LedgerService().deduct_and_create_ticket(db, "ghost", 3, _wagers(), "900001")


class TestCreditRefund:
    def _ticket(self) -> Ticket:
        return Ticket(
            id=11,
            ticket_number="900001",
            owner_id="agent-1",
            draw_id=3,
            total_stake=Decimal("15.50"),
            status="PENDING",
        )

    async def test_credits_total_stake(self) -> None:
        db = MagicMock()
        db.execute = AsyncMock(
            side_effect=[_scalar(Decimal("100.00")), _row(id=8, created_at=CREATED)]
        )

        entry = await LedgerService().credit_refund(db, self._ticket(), "admin-1", "void")

        assert entry.amount == Decimal("15.50")
        assert entry.entry_type == "TICKET_REFUND"
        params = db.execute.await_args_list[1].args[1]
        assert params["processed_by"] == "admin-1"
        assert params["description"] == "Ticket refund: 900001 - void"

    async def test_missing_account(self) -> None:
        db = MagicMock()
        db.execute = AsyncMock(return_value=_scalar(None))

        with pytest.raises(AccountNotFoundError):
            await LedgerService().credit_refund(db, self._ticket(), "admin-1", None)
