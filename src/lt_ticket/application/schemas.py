"""Pydantic schemas for lt_ticket API.

Combination and stake rules are enforced by the domain, not here, so the
error codes a terminal sees are the same whether it calls the API or the
service directly. The schema only guarantees types.
"""

from decimal import Decimal

from pydantic import BaseModel, Field

from src.lt_common.enums import WagerType
from src.lt_common.money import money_to_display
from src.lt_ticket.domain.models import BalanceEntry, Ticket, Wager

# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------


class WagerRequest(BaseModel):
    combination: str = Field(..., description='Exactly 3 digits, e.g. "007"')
    wager_type: WagerType
    stake: Decimal

    def to_domain(self) -> Wager:
        return Wager(
            combination=self.combination,
            wager_type=self.wager_type.value,
            stake=self.stake,
        )


class SubmitTicketRequest(BaseModel):
    draw_id: int = Field(..., gt=0)
    wagers: list[WagerRequest]


class RefundRequest(BaseModel):
    reason: str | None = Field(None, max_length=200)


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------


class WagerItem(BaseModel):
    combination: str
    wager_type: str
    stake: str


class TicketResponse(BaseModel):
    ticket_number: str
    owner_id: str
    draw_id: int
    status: str
    total_stake: str
    total_stake_display: str
    wagers: list[WagerItem]
    created_at: str | None

    @classmethod
    def from_domain(cls, ticket: Ticket) -> "TicketResponse":
        return cls(
            ticket_number=ticket.ticket_number,
            owner_id=ticket.owner_id,
            draw_id=ticket.draw_id,
            status=ticket.status,
            total_stake=str(ticket.total_stake),
            total_stake_display=money_to_display(ticket.total_stake),
            wagers=[
                WagerItem(combination=w.combination, wager_type=w.wager_type, stake=str(w.stake))
                for w in ticket.wagers
            ],
            created_at=ticket.created_at.isoformat() if ticket.created_at else None,
        )


class RefundResponse(BaseModel):
    ticket_number: str
    status: str
    refund_amount: str
    balance_after: str

    @classmethod
    def from_domain(cls, ticket: Ticket, entry: BalanceEntry) -> "RefundResponse":
        return cls(
            ticket_number=ticket.ticket_number,
            status=ticket.status,
            refund_amount=str(entry.amount),
            balance_after=str(entry.balance_after),
        )
