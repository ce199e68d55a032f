"""Pydantic schemas for lt_exposure API."""

from decimal import Decimal

from pydantic import BaseModel, Field

from src.lt_common.enums import WagerType
from src.lt_common.money import money_to_display
from src.lt_exposure.domain.models import ExposureTotal, NumberExposure

# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------


class GlobalLimitRequest(BaseModel):
    wager_type: WagerType
    limit_amount: Decimal = Field(..., gt=0, decimal_places=2)


class NumberLimitRequest(BaseModel):
    draw_id: int = Field(..., gt=0)
    wager_type: WagerType
    combination: str = Field(..., min_length=3, max_length=3)
    limit_amount: Decimal = Field(..., gt=0, decimal_places=2)


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------


class NumberExposureResponse(BaseModel):
    draw_id: int
    wager_type: str
    combination: str
    current: str
    limit: str
    remaining: str
    remaining_display: str
    sold_out: bool

    @classmethod
    def from_domain(cls, status: NumberExposure) -> "NumberExposureResponse":
        return cls(
            draw_id=status.draw_id,
            wager_type=status.wager_type,
            combination=status.combination,
            current=str(status.current),
            limit=str(status.ceiling),
            remaining=str(status.remaining),
            remaining_display=money_to_display(status.remaining),
            sold_out=status.sold_out,
        )


class SoldOutItem(BaseModel):
    wager_type: str
    combination: str
    cumulative: str

    @classmethod
    def from_domain(cls, total: ExposureTotal) -> "SoldOutItem":
        return cls(
            wager_type=total.wager_type,
            combination=total.combination,
            cumulative=str(total.cumulative),
        )


class SoldOutResponse(BaseModel):
    draw_id: int
    items: list[SoldOutItem]


class LimitResponse(BaseModel):
    wager_type: str
    limit_amount: str
    draw_id: int | None = None
    combination: str | None = None
