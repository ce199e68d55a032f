"""Repository Protocol — dependency inversion for testability."""

from collections.abc import Sequence
from datetime import datetime
from decimal import Decimal
from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.lt_settlement.domain.models import (
    PendingDraw,
    TicketSettlement,
    WinnerRecord,
)
from src.lt_ticket.domain.models import Ticket
from src.lt_wager.domain.payout import PayoutConfig


class SettlementRepositoryProtocol(Protocol):
    async def load_tickets_for_draw(
        self, db: AsyncSession, draw_id: int, statuses: Sequence[str]
    ) -> list[Ticket]:
        """Tickets with their wagers and the owner's upline id."""
        ...

    async def apply(
        self, db: AsyncSession, draw_id: int, winners: Sequence[TicketSettlement]
    ) -> int:
        """Mark winners VALIDATED and write one winning record each. Returns records written."""
        ...

    async def load_payout_config(self, db: AsyncSession) -> PayoutConfig: ...

    async def upsert_payout_config(
        self,
        db: AsyncSession,
        wager_type: str,
        multiplier: Decimal,
        double_multiplier: Decimal | None,
        updated_by: str,
    ) -> None: ...

    async def list_winners(self, db: AsyncSession, draw_id: int) -> list[WinnerRecord]: ...

    async def winners_since(
        self, db: AsyncSession, since: datetime
    ) -> tuple[int, int, Decimal]:
        """(draws settled, winning tickets, total payout) since ``since``."""
        ...

    async def list_awaiting_results(self, db: AsyncSession) -> list[PendingDraw]: ...
