# pricewatch/filters/price_trend.py

"""Classify the direction of a product's recent price history."""

from collections.abc import Sequence
from decimal import ROUND_HALF_UP, Decimal

INSUFFICIENT_DATA = "insufficient_data"
DECREASING = "decreasing"
STABLE = "stable"
INCREASING = "increasing"

_WINDOW = 5


def calculate_trend(prices: Sequence[float | None]) -> str:
    """Compare the newest five prices against the oldest five.

    ``prices`` is ordered newest first, as returned by
    ``PriceTracker.get_price_history``.  A change of -10% or less is
    decreasing, more than +10% is increasing, anything between (+10%
    included) is stable.
    """
    if len(prices) < 3:
        return INSUFFICIENT_DATA

    recent = [Decimal(str(p)) for p in prices[:_WINDOW] if p is not None]
    older = [Decimal(str(p)) for p in prices[-_WINDOW:] if p is not None]
    if not recent or not older:
        return INSUFFICIENT_DATA

    recent_avg = sum(recent) / len(recent)
    older_avg = sum(older) / len(older)
    if older_avg == 0:
        return INSUFFICIENT_DATA

    change = ((recent_avg - older_avg) / older_avg * 100).quantize(
        Decimal("0.1"), rounding=ROUND_HALF_UP
    )
    if change <= -10:
        return DECREASING
    if change <= 10:
        return STABLE
    return INCREASING
