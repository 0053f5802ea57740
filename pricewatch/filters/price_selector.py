# pricewatch/filters/price_selector.py

"""Pick the single most plausible price out of a candidate list."""

import logging
from collections import Counter
from collections.abc import Callable, Sequence
from decimal import Decimal

from pricewatch.config.settings import Settings
from pricewatch.models.retailer import Retailer

logger = logging.getLogger("pricewatch.select")


def reasonable_prices(prices: Sequence[Decimal]) -> list[Decimal]:
    """Drop shipping fees and other obvious non-prices."""
    low = Decimal(str(Settings.REASONABLE_MIN_PRICE))
    high = Decimal(str(Settings.REASONABLE_MAX_PRICE))
    return [p for p in prices if low <= p <= high]


def most_common(prices: Sequence[Decimal]) -> tuple[Decimal, int] | None:
    """Return ``(value, count)`` for the most frequent price.

    Equally frequent values resolve to the lowest one.
    """
    if not prices:
        return None
    counts = Counter(prices)
    value, count = min(counts.items(), key=lambda item: (-item[1], item[0]))
    return value, count


def median(prices: Sequence[Decimal]) -> Decimal:
    """Upper median: ``sorted[len // 2]``, always a member of the input."""
    ordered = sorted(prices)
    return ordered[len(ordered) // 2]


def has_cents(price: Decimal) -> bool:
    """True when the value was written with exactly two decimals."""
    exponent = price.as_tuple().exponent
    return isinstance(exponent, int) and exponent == -2


def _repeated(prices: Sequence[Decimal]) -> Decimal | None:
    """Most frequent value, but only when it appears more than once."""
    top = most_common(prices)
    if top and top[1] > 1:
        return top[0]
    return None


def select_highest_unless_repeated(prices: Sequence[Decimal]) -> Decimal:
    """eBay / Best Buy strategy.

    Financing figures ("$37.52/mo") sit next to the real price and are
    smaller, so without a repeated value the highest one wins.
    """
    repeated = _repeated(prices)
    if repeated is not None:
        logger.info("Selected most common price: %s", repeated)
        return repeated
    highest = max(prices)
    logger.info("Selected highest price: %s (main product price)", highest)
    return highest


def select_amazon_price(prices: Sequence[Decimal]) -> Decimal:
    """Prefer complete ``xx.yy`` prices; Amazon markup often splits them."""
    with_cents = [p for p in prices if has_cents(p)]
    repeated = _repeated(with_cents)
    if repeated is not None:
        logger.info("Selected most common complete price: %s", repeated)
        return repeated

    repeated = _repeated(prices)
    if repeated is not None:
        logger.info("Selected most common price: %s", repeated)
        return repeated

    chosen = median(prices)
    logger.info("Selected median price: %s", chosen)
    return chosen


_STRATEGIES: dict[Retailer, Callable[[Sequence[Decimal]], Decimal]] = {
    Retailer.EBAY: select_highest_unless_repeated,
    Retailer.BESTBUY: select_highest_unless_repeated,
    Retailer.AMAZON: select_amazon_price,
}


def select_price(
    prices: Sequence[Decimal], retailer: Retailer,
) -> Decimal | None:
    """Choose one price from ``prices`` using the retailer's strategy.

    The result is always an element of ``prices`` (or ``None`` when the
    list is empty).  If no candidate falls in the reasonable range, the
    first raw candidate is returned unfiltered.
    """
    if not prices:
        return None

    reasonable = reasonable_prices(prices)
    if not reasonable:
        logger.info(
            "No reasonable prices among %d candidates; using %s",
            len(prices),
            prices[0],
        )
        return prices[0]

    logger.debug(
        "Reasonable prices found: %s", [str(p) for p in sorted(reasonable)]
    )
    strategy = _STRATEGIES.get(retailer, median)
    return strategy(reasonable)
