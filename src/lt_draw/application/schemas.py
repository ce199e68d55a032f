"""Pydantic schemas for lt_draw API."""

from pydantic import BaseModel, Field

from src.lt_common.money import money_to_display
from src.lt_draw.domain.models import Draw, DrawCreationSummary, DrawStatistics

# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------


class PostResultRequest(BaseModel):
    winning_number: str = Field(..., description='Exactly 3 digits, e.g. "042"')


class MonthlyDrawsRequest(BaseModel):
    """Omit both fields to create the current and next month."""

    year: int | None = Field(None, ge=2000, le=2100)
    month: int | None = Field(None, ge=1, le=12)


class EnsureDrawsRequest(BaseModel):
    horizon_days: int | None = Field(None, ge=1, le=92)


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------


class DrawResponse(BaseModel):
    id: int
    draw_date: str
    slot: str
    cutoff_at: str
    status: str
    winning_number: str | None
    settled_at: str | None

    @classmethod
    def from_domain(cls, draw: Draw) -> "DrawResponse":
        return cls(
            id=draw.id,
            draw_date=draw.draw_date.isoformat(),
            slot=draw.slot,
            cutoff_at=draw.cutoff_at.isoformat(),
            status=draw.status,
            winning_number=draw.winning_number,
            settled_at=draw.settled_at.isoformat() if draw.settled_at else None,
        )


class DrawListResponse(BaseModel):
    items: list[DrawResponse]


class NumberStatItem(BaseModel):
    wager_type: str
    combination: str
    ticket_count: int
    total_stake: str


class DrawStatisticsResponse(BaseModel):
    draw_id: int
    total_tickets: int
    total_stake: str
    total_stake_display: str
    by_number: list[NumberStatItem]

    @classmethod
    def from_domain(cls, stats: DrawStatistics) -> "DrawStatisticsResponse":
        return cls(
            draw_id=stats.draw_id,
            total_tickets=stats.total_tickets,
            total_stake=str(stats.total_stake),
            total_stake_display=money_to_display(stats.total_stake),
            by_number=[
                NumberStatItem(
                    wager_type=n.wager_type,
                    combination=n.combination,
                    ticket_count=n.ticket_count,
                    total_stake=str(n.total_stake),
                )
                for n in stats.by_number
            ],
        )


class DrawCreationResponse(BaseModel):
    created: int
    skipped: int
    failed_dates: list[str]

    @classmethod
    def from_domain(cls, summary: DrawCreationSummary) -> "DrawCreationResponse":
        return cls(
            created=summary.created,
            skipped=summary.skipped,
            failed_dates=[d.isoformat() for d in summary.failed_dates],
        )

