# pricewatch/services/tracker.py

"""Orchestrates fetch, parse, selection and validation for one product URL."""

import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime, timedelta
from decimal import Decimal, InvalidOperation

from pricewatch.config.logging_config import StepLog
from pricewatch.filters.confidence import score_confidence
from pricewatch.filters.price_selector import select_price
from pricewatch.filters.price_trend import calculate_trend
from pricewatch.filters.price_validator import PriceValidator
from pricewatch.models.outcome import (
    PriceResult,
    PriceSource,
    ScrapeOutcome,
    ValidatedOutcome,
)
from pricewatch.models.price_record import RECORDED_AT_FORMAT, PriceRecord
from pricewatch.models.retailer import classify_store
from pricewatch.scrapers.fetcher import PageFetcher
from pricewatch.scrapers.product_scraper import ProductPageScraper
from pricewatch.storage.record_store import RecordStore
from pricewatch.storage.result_cache import ResultCache

logger = logging.getLogger("pricewatch.tracker")

FETCH_FAILED_MESSAGE = "Could not fetch page - may be blocked or URL invalid"
SCRAPE_FAILED_MESSAGE = "Could not extract price or title from page"

_MIN_USER_PRICE = Decimal("0.01")


@dataclass
class DeleteResult:
    """Outcome of ``PriceTracker.delete_product``."""

    success: bool
    deleted_count: int
    message: str


def to_price(value: Decimal | float | int | str | None) -> Decimal | None:
    """Normalise a user-supplied price.

    Blank, unparsable, non-finite and sub-cent values are ``None``.
    """
    if value is None or value == "":
        return None
    try:
        price = Decimal(str(value))
    except InvalidOperation:
        price = None
    if price is None or not price.is_finite():
        logger.warning("Ignoring unparsable user price: %r", value)
        return None
    if price < _MIN_USER_PRICE:
        logger.warning("Ignoring user price below one cent: %r", value)
        return None
    return price


class PriceTracker:
    """Price lookups plus history operations over the record log.

    Each tracker owns its cache, record store and log sink; nothing is
    shared through module globals.
    """

    def __init__(
        self,
        store: RecordStore | None = None,
        cache: ResultCache | None = None,
        fetcher: PageFetcher | None = None,
        log_sink: Callable[[str], None] | None = None,
    ) -> None:
        self.step_log = StepLog(log_sink)
        self.store = store or RecordStore()
        self.cache = cache or ResultCache()
        self.fetcher = fetcher or PageFetcher()
        self.fetcher.step_log = self.step_log
        self.validator = PriceValidator(step_log=self.step_log)
        logger.info("Price tracker initialised, database: %s", self.store.path)

    def set_log_sink(self, sink: Callable[[str], None] | None) -> None:
        """Attach (or detach with ``None``) the step message sink."""
        self.step_log.sink = sink

    def close(self) -> None:
        """Release the fetcher's HTTP session."""
        self.fetcher.close()

    def _log(self, message: str, *args: object, level: int = logging.INFO) -> None:
        self.step_log.emit(logger, message, *args, level=level)

    # ── Price lookup ─────────────────────────────────────

    def get_current_price(
        self,
        url: str,
        user_price: Decimal | float | int | str | None = None,
    ) -> PriceResult:
        """Scrape ``url``, reconcile with ``user_price`` and record it.

        Results are cached per ``(url, user_price)`` for the cache TTL;
        a hit skips the whole fetch/parse/validate pipeline.
        """
        user = to_price(user_price)
        self._log("[HYBRID] Getting price for: %s", url)

        cached = self.cache.get(url, user)
        if cached is not None:
            self._log("[CACHE] Using cached result for: %s", url)
            return cached

        scraped = self.attempt_scraping(url)
        validated = self.validator.validate(scraped, user, url)

        result = PriceResult(
            price=validated.price,
            source=validated.source,
            confidence=validated.confidence,
            title=validated.title,
            last_updated=datetime.now().strftime(RECORDED_AT_FORMAT),
            suggestion=validated.suggestion,
            error=validated.error,
            user_validation=validated.user_validation,
        )

        if validated.price is not None:
            self._save_record(url, validated, validated.price)

        self.cache.put(url, user, result)
        return result

    def attempt_scraping(self, url: str) -> ScrapeOutcome:
        """Fetch and parse ``url``; every failure becomes an outcome."""
        self._log("[SCRAPE] Attempting to scrape: %s", url)
        try:
            retailer = classify_store(url)
            self._log("[STORE] Detected store: %s", retailer.value)

            html = self.fetcher.fetch(url, retailer)
            if html is None:
                self._log(
                    "[SCRAPE] Failed: Could not fetch page",
                    level=logging.WARNING,
                )
                return ScrapeOutcome(
                    price=None,
                    source=PriceSource.FETCH_FAILED,
                    error=FETCH_FAILED_MESSAGE,
                )
            self._log("[SCRAPE] Successfully fetched HTML content")

            scraper = ProductPageScraper(retailer, step_log=self.step_log)
            soup = scraper.parse(html)
            title = scraper.extract_title(soup)
            self._log("[PARSE] Found title: %s", title)
            prices = scraper.extract_prices(soup)
            price = select_price(prices, retailer)
            self._log("[PARSE] Selected price: %s", price)
        except Exception as exc:
            logger.error(
                "Scrape of %s failed: %s", url, exc, exc_info=True
            )
            self._log("[SCRAPE] Error: %s", exc, level=logging.ERROR)
            return ScrapeOutcome(
                price=None,
                source=PriceSource.SCRAPE_ERROR,
                error=str(exc),
            )

        if price is None or not title:
            self._log(
                "[SCRAPE] Failed: Could not extract price or title",
                level=logging.WARNING,
            )
            return ScrapeOutcome(
                price=None,
                source=PriceSource.SCRAPE_FAILED,
                title=title or None,
                error=SCRAPE_FAILED_MESSAGE,
                candidates=tuple(prices),
            )

        self._log("[SCRAPE] Success: %s - $%s", title, price)
        return ScrapeOutcome(
            price=price,
            source=PriceSource.SCRAPED,
            confidence=score_confidence(title, price, len(prices)),
            title=title,
            candidates=tuple(prices),
        )

    def _save_record(
        self, url: str, validated: ValidatedOutcome, price: Decimal,
    ) -> None:
        record = PriceRecord(
            url=url,
            title=validated.title,
            price=float(price),
            source=validated.source.value,
            confidence=validated.confidence,
            recorded_at=datetime.now().strftime(RECORDED_AT_FORMAT),
        )
        self.store.append(record)
        self._log(
            "[DB] Saved price record: $%s (%s)",
            validated.price,
            validated.source.value,
        )

    # ── History ──────────────────────────────────────────

    def get_price_history(
        self, url: str, days: int = 30,
    ) -> list[PriceRecord]:
        """Records for ``url`` from the last ``days`` days, newest first.

        Records whose timestamp cannot be parsed are skipped.
        """
        cutoff = datetime.now() - timedelta(days=days)
        recent: list[tuple[datetime, PriceRecord]] = []
        for record in self.store.load():
            if record.url != url:
                continue
            try:
                recorded = record.recorded_time
            except ValueError:
                logger.debug(
                    "Skipping record with bad timestamp: %r",
                    record.recorded_at,
                )
                continue
            if recorded > cutoff:
                recent.append((recorded, record))

        recent.sort(key=lambda pair: pair[0], reverse=True)
        return [record for _, record in recent]

    def get_price_trend(self, url: str, days: int = 30) -> str:
        """Trend label for the recent history of ``url``."""
        history = self.get_price_history(url, days)
        return calculate_trend([r.price for r in history])

    def get_all_products(self) -> list[PriceRecord]:
        """Latest record for every tracked URL, one entry per URL.

        On equal timestamps the record written first is kept.
        """
        latest: dict[str, PriceRecord] = {}
        for record in self.store.load():
            current = latest.get(record.url)
            if current is None or record.recorded_at > current.recorded_at:
                latest[record.url] = record
        return list(latest.values())

    def delete_product(self, url: str) -> DeleteResult:
        """Remove every record for ``url`` in a single rewrite."""
        deleted = self.store.delete_url(url)
        if deleted:
            self._log(
                "[DELETE] Deleted %d price records for: %s", deleted, url
            )
            return DeleteResult(
                success=True,
                deleted_count=deleted,
                message=f"Deleted {deleted} price records",
            )
        self._log("[DELETE] No records found for: %s", url)
        return DeleteResult(
            success=False,
            deleted_count=0,
            message="No records found for this URL",
        )
