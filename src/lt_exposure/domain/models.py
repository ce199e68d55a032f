"""Domain models for lt_exposure — pure dataclasses, no SQLAlchemy dependency."""

from dataclasses import dataclass
from decimal import Decimal


@dataclass
class ExposureTotal:
    """Running staked total for one (draw, wager_type, combination)."""

    draw_id: int
    wager_type: str
    combination: str
    cumulative: Decimal
    sold_out: bool


@dataclass
class NumberExposure:
    draw_id: int
    wager_type: str
    combination: str
    current: Decimal
    ceiling: Decimal
    sold_out: bool

    @property
    def remaining(self) -> Decimal:
        return max(Decimal("0.00"), self.ceiling - self.current)
