"""LedgerService — balance movements that accompany ticket purchase and refund.

The debit is one conditional UPDATE: 0 rows means the account is missing or
short of funds, so two concurrent submissions can never overdraw it. The
ticket, its wagers and the ledger row are written in the same transaction.
"""

from collections.abc import Sequence
from decimal import Decimal
from typing import Any

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.lt_common.enums import BalanceEntryType, TicketStatus
from src.lt_common.errors import AccountNotFoundError, InsufficientBalanceError
from src.lt_common.money import ZERO, to_money
from src.lt_ticket.domain.models import BalanceEntry, Ticket, Wager

_DEBIT_SQL = text("""
    UPDATE accounts
    SET available_balance = available_balance - :amount,
        updated_at = NOW()
    WHERE id = :account_id AND available_balance >= :amount
    RETURNING available_balance
""")

_CREDIT_SQL = text("""
    UPDATE accounts
    SET available_balance = available_balance + :amount,
        updated_at = NOW()
    WHERE id = :account_id
    RETURNING available_balance
""")

_GET_BALANCE_SQL = text("""
    SELECT available_balance FROM accounts WHERE id = :account_id
""")

_INSERT_TICKET_SQL = text("""
    INSERT INTO tickets (ticket_number, owner_id, draw_id, total_stake, status)
    VALUES (:ticket_number, :owner_id, :draw_id, :total_stake, 'PENDING')
    RETURNING id, created_at
""")

_INSERT_WAGER_SQL = text("""
    INSERT INTO wagers (ticket_id, combination, wager_type, stake)
    VALUES (:ticket_id, :combination, :wager_type, :stake)
    RETURNING id
""")

_INSERT_BALANCE_TX_SQL = text("""
    INSERT INTO balance_transactions
        (account_id, entry_type, amount, balance_after, reference_id, processed_by, description)
    VALUES
        (:account_id, :entry_type, :amount, :balance_after, :reference_id, :processed_by, :description)
    RETURNING id, created_at
""")


class LedgerService:
    async def get_available_balance(self, db: AsyncSession, account_id: str) -> Decimal | None:
        value = (
            await db.execute(_GET_BALANCE_SQL, {"account_id": account_id})
        ).scalar_one_or_none()
        return Decimal(value) if value is not None else None

    async def deduct_and_create_ticket(
        self,
        db: AsyncSession,
        owner_id: str,
        draw_id: int,
        wagers: Sequence[Wager],
        ticket_number: str,
    ) -> tuple[Ticket, BalanceEntry]:
        """Debit the total stake and write ticket + wagers + TICKET_PURCHASE row.

        Raises:
            AccountNotFoundError: no account row for ``owner_id``.
            InsufficientBalanceError: available balance below the total stake.
        """
        total = to_money(sum((w.stake for w in wagers), ZERO))
        balance_after = await self._debit(db, owner_id, total)

        row = (
            await db.execute(
                _INSERT_TICKET_SQL,
                {
                    "ticket_number": ticket_number,
                    "owner_id": owner_id,
                    "draw_id": draw_id,
                    "total_stake": total,
                },
            )
        ).one()
        ticket = Ticket(
            id=row.id,
            ticket_number=ticket_number,
            owner_id=owner_id,
            draw_id=draw_id,
            total_stake=total,
            status=TicketStatus.PENDING.value,
            created_at=row.created_at,
        )
        for wager in wagers:
            wager_id = (
                await db.execute(
                    _INSERT_WAGER_SQL,
                    {
                        "ticket_id": ticket.id,
                        "combination": wager.combination,
                        "wager_type": wager.wager_type,
                        "stake": wager.stake,
                    },
                )
            ).scalar_one()
            ticket.wagers.append(
                Wager(
                    id=wager_id,
                    ticket_id=ticket.id,
                    combination=wager.combination,
                    wager_type=wager.wager_type,
                    stake=wager.stake,
                )
            )

        entry = await self._write_entry(
            db,
            account_id=owner_id,
            entry_type=BalanceEntryType.TICKET_PURCHASE,
            amount=-total,
            balance_after=balance_after,
            reference_id=ticket_number,
            processed_by=owner_id,
            description=f"Ticket purchase: {ticket_number}",
        )
        return ticket, entry

    async def credit_refund(
        self, db: AsyncSession, ticket: Ticket, processed_by: str, reason: str | None
    ) -> BalanceEntry:
        balance = (
            await db.execute(
                _CREDIT_SQL, {"account_id": ticket.owner_id, "amount": ticket.total_stake}
            )
        ).scalar_one_or_none()
        if balance is None:
            raise AccountNotFoundError(ticket.owner_id)
        description = f"Ticket refund: {ticket.ticket_number}"
        if reason:
            description = f"{description} - {reason}"
        return await self._write_entry(
            db,
            account_id=ticket.owner_id,
            entry_type=BalanceEntryType.TICKET_REFUND,
            amount=ticket.total_stake,
            balance_after=Decimal(balance),
            reference_id=ticket.ticket_number,
            processed_by=processed_by,
            description=description,
        )

    async def _debit(self, db: AsyncSession, account_id: str, amount: Decimal) -> Decimal:
        balance = (
            await db.execute(_DEBIT_SQL, {"account_id": account_id, "amount": amount})
        ).scalar_one_or_none()
        if balance is not None:
            return Decimal(balance)
        available = await self.get_available_balance(db, account_id)
        if available is None:
            raise AccountNotFoundError(account_id)
        raise InsufficientBalanceError(required=amount, available=available)

    async def _write_entry(
        self,
        db: AsyncSession,
        *,
        account_id: str,
        entry_type: BalanceEntryType,
        amount: Decimal,
        balance_after: Decimal,
        reference_id: str,
        processed_by: str,
        description: str,
    ) -> BalanceEntry:
        row: Any = (
            await db.execute(
                _INSERT_BALANCE_TX_SQL,
                {
                    "account_id": account_id,
                    "entry_type": entry_type.value,
                    "amount": amount,
                    "balance_after": balance_after,
                    "reference_id": reference_id,
                    "processed_by": processed_by,
                    "description": description,
                },
            )
        ).one()
        return BalanceEntry(
            id=row.id,
            account_id=account_id,
            entry_type=entry_type.value,
            amount=amount,
            balance_after=balance_after,
            reference_id=reference_id,
            created_at=row.created_at,
        )
