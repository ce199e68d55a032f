"""Tests for lt_wager.domain.payout.PayoutConfig."""

from dataclasses import FrozenInstanceError
from decimal import Decimal
from types import SimpleNamespace

import pytest

from src.lt_wager.domain.payout import PayoutConfig


def _row(wager_type: str, multiplier: str, double: str | None = None, active: bool = True):
    return SimpleNamespace(
        wager_type=wager_type,
        multiplier=Decimal(multiplier),
        double_multiplier=Decimal(double) if double is not None else None,
        is_active=active,
    )


class TestPayoutConfig:
    def test_defaults(self) -> None:
        config = PayoutConfig.default()
        assert config.straight_multiplier == Decimal("450")
        assert config.pooled_double_multiplier == Decimal("150")
        assert config.pooled_distinct_multiplier == Decimal("75")

    def test_from_rows_reads_both_types(self) -> None:
        config = PayoutConfig.from_rows(
            [_row("STRAIGHT", "500"), _row("POOLED", "80", "160")]
        )
        assert config.straight_multiplier == Decimal("500")
        assert config.pooled_distinct_multiplier == Decimal("80")
        assert config.pooled_double_multiplier == Decimal("160")

    def test_missing_rows_fall_back(self) -> None:
        assert PayoutConfig.from_rows([]) == PayoutConfig.default()

    def test_inactive_row_falls_back(self) -> None:
        config = PayoutConfig.from_rows([_row("STRAIGHT", "999", active=False)])
        assert config.straight_multiplier == Decimal("450")

    def test_pooled_without_double_keeps_default_double(self) -> None:
        config = PayoutConfig.from_rows([_row("POOLED", "70")])
        assert config.pooled_distinct_multiplier == Decimal("70")
        assert config.pooled_double_multiplier == Decimal("150")

    def test_immutable(self) -> None:
        config = PayoutConfig.default()
        with pytest.raises(FrozenInstanceError):
            config.straight_multiplier = Decimal("1")  # type: ignore[misc]

    def test_as_dict(self) -> None:
        assert PayoutConfig.default().as_dict() == {
            "straight_multiplier": "450",
            "pooled_double_multiplier": "150",
            "pooled_distinct_multiplier": "75",
        }
