# pricewatch/filters/confidence.py

"""Confidence score for a scraped price."""

from decimal import Decimal

from pricewatch.config.settings import Settings


def score_confidence(
    title: str | None,
    price: Decimal | None,
    candidate_count: int,
) -> int:
    """Score extraction quality on a 0-95 scale.

    Starts at 50, rewards a meaningful title and a price in the typical
    e-commerce range, and penalises pages that produced more than 20
    candidates.  Capped at 95 so a user-confirmed price always ranks
    at least as high.
    """
    confidence = 50
    if title and len(title) > 10:
        confidence += 20
    if price is not None and Decimal(10) <= price <= Decimal(5000):
        confidence += 15
    if candidate_count > Settings.NOISY_PAGE_CANDIDATES:
        confidence -= 10
    return max(0, min(confidence, Settings.MAX_CONFIDENCE))
