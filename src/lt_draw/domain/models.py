"""Domain models for lt_draw — pure dataclasses, no business logic."""

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal


@dataclass
class Draw:
    id: int
    draw_date: date
    slot: str
    cutoff_at: datetime
    status: str
    winning_number: str | None = None
    settled_at: datetime | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @property
    def is_open(self) -> bool:
        return self.status == "OPEN"


@dataclass
class DrawCreationSummary:
    created: int = 0
    skipped: int = 0
    failed_dates: list[date] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failed_dates


@dataclass
class NumberStat:
    wager_type: str
    combination: str
    ticket_count: int
    total_stake: Decimal


@dataclass
class DrawStatistics:
    draw_id: int
    total_tickets: int
    total_stake: Decimal
    by_number: list[NumberStat]
