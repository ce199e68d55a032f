"""Pydantic schemas for lt_settlement API."""

from decimal import Decimal

from pydantic import BaseModel, Field

from src.lt_common.enums import WagerType
from src.lt_common.money import money_to_display
from src.lt_settlement.domain.models import (
    ResultsDashboard,
    SettlementSummary,
    WinnerRecord,
)
from src.lt_wager.domain.payout import PayoutConfig


class PayoutConfigRequest(BaseModel):
    wager_type: WagerType
    multiplier: Decimal = Field(..., gt=0, description="STRAIGHT, or POOLED with 3 distinct digits")
    double_multiplier: Decimal | None = Field(
        None, gt=0, description="POOLED with exactly 2 distinct digits"
    )


class PayoutConfigResponse(BaseModel):
    straight_multiplier: str
    pooled_double_multiplier: str
    pooled_distinct_multiplier: str

    @classmethod
    def from_domain(cls, config: PayoutConfig) -> "PayoutConfigResponse":
        return cls(**config.as_dict())


class SettlementSummaryResponse(BaseModel):
    draw_id: int
    winning_number: str
    tickets_scanned: int
    winner_count: int
    total_payout: str
    total_payout_display: str

    @classmethod
    def from_domain(cls, summary: SettlementSummary) -> "SettlementSummaryResponse":
        return cls(
            draw_id=summary.draw_id,
            winning_number=summary.winning_number,
            tickets_scanned=summary.tickets_scanned,
            winner_count=summary.winner_count,
            total_payout=str(summary.total_payout),
            total_payout_display=money_to_display(summary.total_payout),
        )


class WinnerItem(BaseModel):
    ticket_number: str
    owner_id: str
    owner_username: str | None
    upline_id: str | None
    upline_username: str | None
    prize_amount: str
    prize_display: str

    @classmethod
    def from_domain(cls, record: WinnerRecord) -> "WinnerItem":
        return cls(
            ticket_number=record.ticket_number,
            owner_id=record.owner_id,
            owner_username=record.owner_username,
            upline_id=record.upline_id,
            upline_username=record.upline_username,
            prize_amount=str(record.prize_amount),
            prize_display=money_to_display(record.prize_amount),
        )


class WinnersResponse(BaseModel):
    draw_id: int
    items: list[WinnerItem]


class AwaitingDrawItem(BaseModel):
    draw_id: int
    draw_date: str
    slot: str
    cutoff_at: str


class DashboardResponse(BaseModel):
    period_days: int
    draws_settled: int
    winning_tickets: int
    total_payout: str
    total_payout_display: str
    awaiting_results: list[AwaitingDrawItem]

    @classmethod
    def from_domain(cls, dashboard: ResultsDashboard) -> "DashboardResponse":
        return cls(
            period_days=dashboard.period_days,
            draws_settled=dashboard.draws_settled,
            winning_tickets=dashboard.winning_tickets,
            total_payout=str(dashboard.total_payout),
            total_payout_display=money_to_display(dashboard.total_payout),
            awaiting_results=[
                AwaitingDrawItem(
                    draw_id=d.draw_id,
                    draw_date=d.draw_date.isoformat(),
                    slot=d.slot,
                    cutoff_at=d.cutoff_at.isoformat(),
                )
                for d in dashboard.awaiting_results
            ],
        )
