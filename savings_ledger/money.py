"""
Money helpers.

DESIGN DECISION: Amounts are Decimal, never float. Every addition or
subtraction is followed by rounding to the cent (ROUND_HALF_UP), so a
long run of periods cannot accumulate drift and results are reproducible.
"""

from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, Union

CENT = Decimal("0.01")
ZERO = Decimal("0.00")

MoneyLike = Union[Decimal, int, float, str]


def to_money(value: MoneyLike) -> Decimal:
    """Convert to Decimal and round to the cent."""
    if isinstance(value, float):
        # str() keeps the shortest repr, so 0.1 stays 0.1
        value = str(value)
    return Decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


def money_sum(values: Iterable[MoneyLike]) -> Decimal:
    """Sum amounts, rounding after each addition."""
    total = ZERO
    for value in values:
        total = to_money(total + to_money(value))
    return total


def percentage(part: Decimal, whole: Decimal) -> float:
    """part / whole * 100, or 0 when whole is zero."""
    if whole <= 0:
        return 0.0
    return float(part / whole * 100)
