"""Domain models for lt_settlement — pure dataclasses, no SQLAlchemy dependency."""

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal

from src.lt_notify.events import NotificationEvent
from src.lt_ticket.domain.models import Ticket, Wager


@dataclass(frozen=True)
class WinningWager:
    wager: Wager
    prize: Decimal


@dataclass
class TicketSettlement:
    """A winning ticket and the wagers that won on it."""

    ticket: Ticket
    winning_wagers: list[WinningWager]
    prize_total: Decimal


@dataclass(frozen=True)
class SettlementSummary:
    draw_id: int
    winning_number: str
    tickets_scanned: int
    winner_count: int
    total_payout: Decimal


@dataclass
class SettlementOutcome:
    summary: SettlementSummary
    winners: list[TicketSettlement] = field(default_factory=list)
    events: list[NotificationEvent] = field(default_factory=list)


@dataclass
class WinnerRecord:
    """Persisted winning_records row joined with owner and upline names."""

    ticket_id: int
    ticket_number: str
    draw_id: int
    owner_id: str
    owner_username: str | None
    upline_id: str | None
    upline_username: str | None
    prize_amount: Decimal
    created_at: datetime | None = None


@dataclass
class PendingDraw:
    draw_id: int
    draw_date: date
    slot: str
    cutoff_at: datetime


@dataclass
class ResultsDashboard:
    period_days: int
    draws_settled: int
    winning_tickets: int
    total_payout: Decimal
    awaiting_results: list[PendingDraw] = field(default_factory=list)
