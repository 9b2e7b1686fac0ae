"""Price and cash impact calculations.

Every function here is deterministic and side-effect free, so replaying the
same inputs always yields the same prices.
"""

from decimal import ROUND_HALF_UP, Decimal
from typing import Sequence

SEVERITY_LOW = "low"
SEVERITY_MEDIUM = "medium"
SEVERITY_HIGH = "high"
SEVERITY_EXTREME = "extreme"

CENT = Decimal("0.01")


def round_currency(value: float) -> float:
    """Round a money value to 2 decimal places, halves away from zero."""
    return float(Decimal(str(value)).quantize(CENT, rounding=ROUND_HALF_UP))


def apply_price_impact(price: float, impact: float, floor: float = 0.0) -> float:
    """Apply a fixed-dollar impact to a price.

    Args:
        price (float): Current price
        impact (float): Dollar delta, positive or negative
        floor (float, optional): Minimum resulting price. Defaults to 0.

    Returns:
        float: New price, clamped to the floor and rounded to 2 decimals
    """
    return round_currency(max(floor, price + impact))


def apply_multiple_price_impacts(
    price: float, impacts: Sequence[float], floor: float = 0.0
) -> float:
    """Fold a sequence of impacts onto a price, clamping after each step.

    Args:
        price (float): Current price
        impacts (Sequence[float]): Dollar deltas in application order
        floor (float, optional): Minimum price at every step. Defaults to 0.

    Returns:
        float: Final price
    """
    new_price = price
    for impact in impacts:
        new_price = apply_price_impact(new_price, impact, floor)
    return round_currency(new_price)


def apply_cash_impact(cash: float, percent: float, floor: float = 0.0) -> float:
    """Apply an inflation/deflation percentage to a cash balance.

    Args:
        cash (float): Current cash
        percent (float): Percent change, e.g. -5 for 5% inflation loss
        floor (float, optional): Minimum resulting cash. Defaults to 0.

    Returns:
        float: New cash, clamped and rounded to 2 decimals
    """
    return max(floor, round_currency(cash * (1 + percent / 100)))


def calculate_price_change_percentage(old_price: float, new_price: float) -> float:
    if old_price == 0:
        return 0.0
    return round_currency((new_price - old_price) / old_price * 100)


def classify_severity(impact: float) -> str:
    """Band an impact magnitude into a severity.

    <10 low, [10, 20) medium, [20, 30) high, >=30 extreme.
    """
    magnitude = abs(impact)
    if magnitude < 10:
        return SEVERITY_LOW
    if magnitude < 20:
        return SEVERITY_MEDIUM
    if magnitude < 30:
        return SEVERITY_HIGH
    return SEVERITY_EXTREME
