# pricewatch/filters/price_validator.py

"""Reconcile a scraped price with a user-reported one."""

import logging
import re
from decimal import ROUND_HALF_UP, Decimal, DecimalException, localcontext
from urllib.parse import urlparse

from pricewatch.config.logging_config import StepLog
from pricewatch.models.outcome import PriceSource, ScrapeOutcome, ValidatedOutcome

logger = logging.getLogger("pricewatch.validate")

_ONE_DECIMAL = Decimal("0.1")
_CENTS = Decimal("0.01")
_DIGITS_ONLY = re.compile(r"^\d+$")


def title_from_url(url: str) -> str:
    """Guess a product name from the URL path.

    ``/Sony-WH1000XM5-Headphones/dp/B09X`` becomes
    ``Sony WH1000XM5 Headphones``; with no usable segment the host is
    used instead.
    """
    parsed = urlparse(url)
    for part in parsed.path.split("/"):
        if len(part) > 3 and not _DIGITS_ONLY.match(part):
            words = re.sub(r"[-_]", " ", part)
            return re.sub(r"\b\w", lambda m: m.group(0).upper(), words)
    return f"Product from {parsed.hostname or url}"


def price_difference_percent(scraped: Decimal, user: Decimal) -> Decimal:
    """``|scraped - user| / user * 100`` rounded half-up to one decimal.

    Precision is widened to fit the integer digits of the ratio, so a
    tiny ``user`` still quantizes instead of raising.
    """
    diff = abs(scraped - user) / user * 100
    with localcontext() as ctx:
        ctx.prec = max(ctx.prec, diff.adjusted() + 3)
        return diff.quantize(_ONE_DECIMAL, rounding=ROUND_HALF_UP)


class PriceValidator:
    """Blend a scrape outcome with a user-reported price.

    Validation is total: every input yields an outcome with a source.
    """

    def __init__(self, step_log: StepLog | None = None) -> None:
        self.step_log = step_log or StepLog()

    def _log(self, message: str, *args: object) -> None:
        self.step_log.emit(logger, message, *args)

    def validate(
        self,
        outcome: ScrapeOutcome,
        user_price: Decimal | None,
        url: str,
    ) -> ValidatedOutcome:
        """Return the final outcome for ``outcome`` and ``user_price``.

        A missing or non-positive user price leaves the scrape outcome
        untouched.
        """
        if user_price is None or user_price <= 0:
            return ValidatedOutcome.from_scrape(outcome)

        self._log("[VALIDATE] Comparing scraped vs user reported prices")
        scraped = outcome.price

        if scraped is None:
            self._log("[VALIDATE] Using user price (scraping failed)")
            return ValidatedOutcome(
                price=user_price,
                source=PriceSource.USER_REPORTED,
                confidence=70,
                title=outcome.title or title_from_url(url),
            )

        try:
            diff = price_difference_percent(scraped, user_price)
        except DecimalException as exc:
            logger.warning(
                "Price difference for %s vs %s not computable: %r",
                scraped, user_price, exc,
            )
            return self._override(outcome, scraped, user_price)

        self._log(
            "[VALIDATE] Scraped: $%s, User: $%s, Diff: %s%%",
            scraped,
            user_price,
            diff,
        )

        if diff <= 5:
            self._log("[VALIDATE] Prices match closely, using scraped price")
            return ValidatedOutcome(
                price=scraped,
                source=outcome.source,
                confidence=95,
                title=outcome.title,
                user_validation="confirmed",
            )

        if diff <= 20:
            self._log("[VALIDATE] Moderate difference, using average")
            average = ((scraped + user_price) / 2).quantize(
                _CENTS, rounding=ROUND_HALF_UP
            )
            return ValidatedOutcome(
                price=average,
                source=PriceSource.HYBRID_AVERAGE,
                confidence=75,
                title=outcome.title,
                suggestion=(
                    f"Scraped ${scraped:.2f}, you reported "
                    f"${user_price:.2f}. Using average."
                ),
            )

        if diff <= 50:
            self._log("[VALIDATE] Large difference, favoring user price")
            return ValidatedOutcome(
                price=user_price,
                source=PriceSource.USER_CORRECTED,
                confidence=65,
                title=outcome.title,
                suggestion=(
                    f"Scraped price (${scraped:.2f}) seems off. "
                    f"Using your price (${user_price:.2f})."
                ),
            )

        return self._override(outcome, scraped, user_price)

    def _override(
        self,
        outcome: ScrapeOutcome,
        scraped: Decimal,
        user_price: Decimal,
    ) -> ValidatedOutcome:
        self._log("[VALIDATE] Huge difference, using user price only")
        return ValidatedOutcome(
            price=user_price,
            source=PriceSource.USER_OVERRIDE,
            confidence=60,
            title=outcome.title,
            suggestion=(
                f"Scraped price (${scraped:.2f}) is very different from "
                f"yours (${user_price:.2f}). Using your price."
            ),
        )
