"""Repository Protocols — dependency inversion for testability."""

from collections.abc import Sequence
from decimal import Decimal
from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.lt_ticket.domain.models import BalanceEntry, Ticket, Wager


class TicketRepositoryProtocol(Protocol):
    async def get_by_number(self, db: AsyncSession, ticket_number: str) -> Ticket | None: ...

    async def lock_by_number(self, db: AsyncSession, ticket_number: str) -> Ticket | None:
        """SELECT ... FOR UPDATE, wagers not loaded."""
        ...

    async def mark_cancelled(self, db: AsyncSession, ticket_id: int) -> bool:
        """PENDING -> CANCELLED. False when the ticket was no longer PENDING."""
        ...


class LedgerProtocol(Protocol):
    async def deduct_and_create_ticket(
        self,
        db: AsyncSession,
        owner_id: str,
        draw_id: int,
        wagers: Sequence[Wager],
        ticket_number: str,
    ) -> tuple[Ticket, BalanceEntry]: ...

    async def credit_refund(
        self, db: AsyncSession, ticket: Ticket, processed_by: str, reason: str | None
    ) -> BalanceEntry: ...

    async def get_available_balance(self, db: AsyncSession, account_id: str) -> Decimal | None: ...
