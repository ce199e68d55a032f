"""Wager rules — pure functions, no I/O.

Combination validity, pooled permutation enumeration, win determination and
prize computation for the two wager types.
"""

import re
from decimal import Decimal
from itertools import permutations

from src.lt_common.enums import WagerType
from src.lt_common.errors import (
    InvalidStakeError,
    InvalidWagerTypeError,
    MalformedCombinationError,
    TripleNotAllowedError,
)
from src.lt_common.money import ZERO, has_subcentavo, to_money
from src.lt_wager.domain.payout import PayoutConfig

COMBINATION_RE = re.compile(r"^[0-9]{3}$")


def _parse_wager_type(wager_type: object) -> WagerType:
    try:
        return WagerType(wager_type)
    except ValueError:
        raise InvalidWagerTypeError(wager_type) from None


def is_well_formed(combination: object) -> bool:
    # fullmatch rejects the trailing newline that "$" would accept
    return isinstance(combination, str) and COMBINATION_RE.fullmatch(combination) is not None


def distinct_digit_count(combination: str) -> int:
    return len(set(combination))


def validate_combination(wager_type: object, combination: object) -> None:
    """Raise unless ``combination`` is a legal wager for ``wager_type``.

    Leading zeros are significant ("007" is valid, 7 is not). Pooled wagers
    on a triple ("555") are rejected: a single permutation breaks pooled
    payout economics.
    """
    wtype = _parse_wager_type(wager_type)
    if not is_well_formed(combination):
        raise MalformedCombinationError(combination)
    combo = str(combination)
    if wtype is WagerType.POOLED and distinct_digit_count(combo) == 1:
        raise TripleNotAllowedError(combo)


def validate_stake(stake: Decimal, min_stake: Decimal) -> None:
    if not stake.is_finite() or stake <= 0:
        raise InvalidStakeError(f"{stake} must be positive")
    if has_subcentavo(stake):
        raise InvalidStakeError(f"{stake} has more than 2 decimal places")
    if stake < min_stake:
        raise InvalidStakeError(f"{stake} is below the minimum of {min_stake}")


def enumerate_pooled_outcomes(combination: str) -> frozenset[str]:
    """Distinct digit permutations: 6 when all digits differ, 3 for a double, 1 for a triple."""
    if not is_well_formed(combination):
        raise MalformedCombinationError(combination)
    return frozenset("".join(p) for p in permutations(combination))


def is_winner(wager_type: object, combination: str, posted_result: str) -> bool:
    wtype = _parse_wager_type(wager_type)
    if wtype is WagerType.STRAIGHT:
        return combination == posted_result
    return posted_result in enumerate_pooled_outcomes(combination)


def multiplier_for(wager_type: object, combination: str, config: PayoutConfig) -> Decimal:
    wtype = _parse_wager_type(wager_type)
    if wtype is WagerType.STRAIGHT:
        return config.straight_multiplier
    distinct = distinct_digit_count(combination)
    if distinct == 2:
        return config.pooled_double_multiplier
    if distinct == 3:
        return config.pooled_distinct_multiplier
    return ZERO  # triple: rejected at validation, never pays


def compute_prize(
    wager_type: object, combination: str, stake: Decimal, config: PayoutConfig
) -> Decimal:
    """Prize for one winning wager. Linear in ``stake`` for whole-number multipliers."""
    return to_money(to_money(stake) * multiplier_for(wager_type, combination, config))
