"""PayoutConfig — the multiplier schedule for prize computation.

An immutable value object: loaded once per settlement call from the
``payout_configurations`` table, never mutated in place. Any wager type
whose row is missing or inactive falls back to the documented default:

  STRAIGHT                      450x   (10 staked -> 4,500)
  POOLED, 2 distinct ("double") 150x   (10 staked -> 1,500)
  POOLED, 3 distinct             75x   (10 staked ->   750)
"""

from collections.abc import Iterable
from dataclasses import dataclass
from decimal import Decimal
from typing import Any

from src.lt_common.enums import WagerType

DEFAULT_STRAIGHT_MULTIPLIER = Decimal("450")
DEFAULT_POOLED_DOUBLE_MULTIPLIER = Decimal("150")
DEFAULT_POOLED_DISTINCT_MULTIPLIER = Decimal("75")


@dataclass(frozen=True)
class PayoutConfig:
    straight_multiplier: Decimal = DEFAULT_STRAIGHT_MULTIPLIER
    pooled_double_multiplier: Decimal = DEFAULT_POOLED_DOUBLE_MULTIPLIER
    pooled_distinct_multiplier: Decimal = DEFAULT_POOLED_DISTINCT_MULTIPLIER

    @classmethod
    def default(cls) -> "PayoutConfig":
        return cls()

    @classmethod
    def from_rows(cls, rows: Iterable[Any]) -> "PayoutConfig":
        """Build from payout_configurations rows.

        Each row exposes ``wager_type``, ``multiplier``, ``double_multiplier``
        (POOLED only) and ``is_active``.
        """
        straight = DEFAULT_STRAIGHT_MULTIPLIER
        pooled_double = DEFAULT_POOLED_DOUBLE_MULTIPLIER
        pooled_distinct = DEFAULT_POOLED_DISTINCT_MULTIPLIER
        for row in rows:
            if not row.is_active:
                continue
            if row.wager_type == WagerType.STRAIGHT.value:
                straight = Decimal(row.multiplier)
            elif row.wager_type == WagerType.POOLED.value:
                pooled_distinct = Decimal(row.multiplier)
                if row.double_multiplier is not None:
                    pooled_double = Decimal(row.double_multiplier)
        return cls(
            straight_multiplier=straight,
            pooled_double_multiplier=pooled_double,
            pooled_distinct_multiplier=pooled_distinct,
        )

    def as_dict(self) -> dict[str, str]:
        return {
            "straight_multiplier": str(self.straight_multiplier),
            "pooled_double_multiplier": str(self.pooled_double_multiplier),
            "pooled_distinct_multiplier": str(self.pooled_distinct_multiplier),
        }
