"""Decimal money utilities.

All stakes, balances and prizes are ``Decimal`` quantized to centavos and
stored as NUMERIC(14,2). No float ever touches an amount.
"""

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

CENTAVO = Decimal("0.01")
ZERO = Decimal("0.00")


def to_money(value: object) -> Decimal:
    """Convert int/str/Decimal to a 2-place Decimal. Floats are rejected."""
    if isinstance(value, float):
        raise TypeError("float amounts are not allowed; pass str or Decimal")
    try:
        amount = Decimal(str(value)) if not isinstance(value, Decimal) else value
    except InvalidOperation as exc:
        raise ValueError(f"Not a monetary amount: {value!r}") from exc
    if not amount.is_finite():
        raise ValueError(f"Not a monetary amount: {value!r}")
    return amount.quantize(CENTAVO, rounding=ROUND_HALF_UP)


def has_subcentavo(value: Decimal) -> bool:
    """True if ``value`` carries precision below one centavo (e.g. 1.005)."""
    return value != value.quantize(CENTAVO)


def money_to_display(amount: Decimal) -> str:
    """Display string: Decimal('4500') -> '₱4,500.00', Decimal('-12.5') -> '-₱12.50'."""
    q = to_money(amount)
    if q < 0:
        return f"-₱{-q:,.2f}"
    return f"₱{q:,.2f}"
