"""Tests for lt_wager.domain.rules — validation, permutations, wins and prizes."""

from decimal import Decimal

import pytest

from src.lt_common.enums import WagerType
from src.lt_common.errors import (
    InvalidStakeError,
    InvalidWagerTypeError,
    MalformedCombinationError,
    TripleNotAllowedError,
)
from src.lt_wager.domain.payout import PayoutConfig
from src.lt_wager.domain.rules import (
    compute_prize,
    enumerate_pooled_outcomes,
    is_well_formed,
    is_winner,
    validate_combination,
    validate_stake,
)

DEFAULT = PayoutConfig.default()


class TestValidateCombination:
    @pytest.mark.parametrize("combo", ["000", "007", "123", "999"])
    def test_straight_accepts_three_digits(self, combo: str) -> None:
        validate_combination(WagerType.STRAIGHT, combo)

    def test_straight_accepts_triple(self) -> None:
        validate_combination("STRAIGHT", "555")

    @pytest.mark.parametrize("combo", ["", "12", "1234", "12a", " 12", "１２３", "123\n", None, 123])
    def test_malformed_rejected_for_both_types(self, combo: object) -> None:
        for wager_type in WagerType:
            with pytest.raises(MalformedCombinationError):
                validate_combination(wager_type, combo)

    def test_pooled_triple_rejected(self) -> None:
        with pytest.raises(TripleNotAllowedError):
            validate_combination(WagerType.POOLED, "555")

    def test_pooled_double_accepted(self) -> None:
        validate_combination(WagerType.POOLED, "112")

    def test_unknown_wager_type(self) -> None:
        with pytest.raises(InvalidWagerTypeError):
            validate_combination("BOXED", "123")

    def test_leading_zero_is_significant(self) -> None:
        assert is_well_formed("007")
        assert not is_well_formed("7")


class TestValidateStake:
    def test_minimum_accepted(self) -> None:
        validate_stake(Decimal("1.00"), Decimal("1.00"))

    @pytest.mark.parametrize("stake", ["0", "-5", "0.99"])
    def test_too_small_rejected(self, stake: str) -> None:
        with pytest.raises(InvalidStakeError):
            validate_stake(Decimal(stake), Decimal("1.00"))

    def test_sub_centavo_rejected(self) -> None:
        with pytest.raises(InvalidStakeError):
            validate_stake(Decimal("10.005"), Decimal("1.00"))

    def test_nan_rejected(self) -> None:
        with pytest.raises(InvalidStakeError):
            validate_stake(Decimal("NaN"), Decimal("1.00"))


class TestEnumeratePooledOutcomes:
    def test_three_distinct_digits_give_six(self) -> None:
        assert enumerate_pooled_outcomes("123") == {"123", "132", "213", "231", "312", "321"}

    def test_double_gives_three(self) -> None:
        assert enumerate_pooled_outcomes("112") == {"112", "121", "211"}

    def test_triple_gives_one(self) -> None:
        assert enumerate_pooled_outcomes("555") == {"555"}

    def test_order_independent(self) -> None:
        assert enumerate_pooled_outcomes("321") == enumerate_pooled_outcomes("213")

    def test_malformed_raises(self) -> None:
        with pytest.raises(MalformedCombinationError):
            enumerate_pooled_outcomes("12")


class TestIsWinner:
    def test_straight_exact_match_only(self) -> None:
        assert is_winner(WagerType.STRAIGHT, "123", "123")
        assert not is_winner(WagerType.STRAIGHT, "123", "321")

    def test_pooled_any_permutation(self) -> None:
        for result in ("123", "132", "213", "231", "312", "321"):
            assert is_winner(WagerType.POOLED, "123", result)
        assert not is_winner(WagerType.POOLED, "123", "124")

    def test_pooled_double_needs_same_multiset(self) -> None:
        assert is_winner(WagerType.POOLED, "112", "211")
        assert not is_winner(WagerType.POOLED, "112", "122")


class TestComputePrize:
    def test_straight_default(self) -> None:
        assert compute_prize(WagerType.STRAIGHT, "123", Decimal("10"), DEFAULT) == Decimal("4500.00")

    def test_pooled_double_default(self) -> None:
        assert compute_prize(WagerType.POOLED, "112", Decimal("10"), DEFAULT) == Decimal("1500.00")

    def test_pooled_distinct_default(self) -> None:
        assert compute_prize(WagerType.POOLED, "123", Decimal("10"), DEFAULT) == Decimal("750.00")

    def test_pooled_triple_pays_zero(self) -> None:
        assert compute_prize(WagerType.POOLED, "555", Decimal("10"), DEFAULT) == Decimal("0.00")

    def test_linear_in_stake(self) -> None:
        one = compute_prize(WagerType.POOLED, "123", Decimal("1.25"), DEFAULT)
        four = compute_prize(WagerType.POOLED, "123", Decimal("5.00"), DEFAULT)
        assert four == one * 4

    def test_decimal_exact_no_float_drift(self) -> None:
        prize = compute_prize(WagerType.STRAIGHT, "123", Decimal("0.10"), DEFAULT)
        assert prize == Decimal("45.00")
        assert isinstance(prize, Decimal)

    def test_custom_config(self) -> None:
        config = PayoutConfig(straight_multiplier=Decimal("500"))
        assert compute_prize(WagerType.STRAIGHT, "123", Decimal("2"), config) == Decimal("1000.00")

    @pytest.mark.parametrize("stakes", [("0.01", "0.02"), ("0.33", "0.67"), ("1.99", "7.01")])
    def test_split_stakes_sum_to_whole_prize(self, stakes: tuple[str, str]) -> None:
        config = PayoutConfig(pooled_distinct_multiplier=Decimal("77"))
        a, b = (Decimal(s) for s in stakes)
        parts = sum(compute_prize(WagerType.POOLED, "123", s, config) for s in (a, b))
        assert parts == compute_prize(WagerType.POOLED, "123", a + b, config)


class TestScenarios:
    """Worked examples for the three wager outcomes and the triple rule."""

    def test_straight_win(self) -> None:
        assert is_winner(WagerType.STRAIGHT, "123", "123")
        assert compute_prize(WagerType.STRAIGHT, "123", Decimal("10"), DEFAULT) == Decimal("4500")

    def test_pooled_distinct_win(self) -> None:
        assert is_winner(WagerType.POOLED, "123", "321")
        assert compute_prize(WagerType.POOLED, "123", Decimal("10"), DEFAULT) == Decimal("750")

    def test_pooled_double_win(self) -> None:
        assert is_winner(WagerType.POOLED, "112", "211")
        assert compute_prize(WagerType.POOLED, "112", Decimal("10"), DEFAULT) == Decimal("1500")

    def test_pooled_triple_rejected(self) -> None:
        with pytest.raises(TripleNotAllowedError):
            validate_combination(WagerType.POOLED, "555")
