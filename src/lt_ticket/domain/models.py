"""Domain models for lt_ticket — pure dataclasses, no SQLAlchemy dependency."""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal


@dataclass
class Wager:
    """One (combination, wager_type, stake) unit inside a ticket."""

    combination: str
    wager_type: str
    stake: Decimal
    id: int | None = None
    ticket_id: int | None = None

    @property
    def key(self) -> tuple[str, str]:
        return (self.combination, self.wager_type)


@dataclass
class Ticket:
    id: int
    ticket_number: str
    owner_id: str
    draw_id: int
    total_stake: Decimal
    status: str
    wagers: list[Wager] = field(default_factory=list)
    upline_id: str | None = None
    created_at: datetime | None = None


@dataclass
class BalanceEntry:
    """One row of the balance ledger: a purchase debit or refund credit."""

    id: int
    account_id: str
    entry_type: str
    amount: Decimal
    balance_after: Decimal
    reference_id: str
    created_at: datetime | None = None
