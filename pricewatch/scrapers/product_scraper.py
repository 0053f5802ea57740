# pricewatch/scrapers/product_scraper.py

"""Product page parsing: title and price-candidate extraction."""

import json
import logging
import re
from decimal import Decimal, InvalidOperation
from typing import Any

from bs4 import BeautifulSoup

from pricewatch.config.logging_config import StepLog
from pricewatch.config.settings import Settings
from pricewatch.models.outcome import PriceCandidate
from pricewatch.models.retailer import Retailer

logger = logging.getLogger("pricewatch.parse")

_NON_PRICE_CHARS = re.compile(r"[^\d,.]")
_PRICE_RE = re.compile(r"(\d{1,3}(?:,\d{3})*(?:\.\d{2})?)")
_WHITESPACE_RE = re.compile(r"\s+")
_BRAND_SUFFIX_RE = re.compile(
    r"\s*\|\s*(eBay|Amazon|Best Buy).*$", re.IGNORECASE
)
_DETAILS_PREFIX_RE = re.compile(r"Details about\s*", re.IGNORECASE)


def load_selectors(retailer: Retailer) -> dict[str, Any]:
    """Load the title/price selector lists for one retailer."""
    with open(Settings.SELECTORS_PATH, encoding="utf-8") as f:
        all_selectors: dict[str, Any] = json.load(f)
    result: dict[str, Any] = all_selectors.get(
        retailer.value, all_selectors["unknown"]
    )
    return result


def clean_title(text: str) -> str:
    """Collapse whitespace and strip store branding from a title."""
    cleaned = _WHITESPACE_RE.sub(" ", text)
    cleaned = _BRAND_SUFFIX_RE.sub("", cleaned)
    cleaned = _DETAILS_PREFIX_RE.sub("", cleaned)
    return cleaned.strip()


class ProductPageScraper:
    """Parse one retailer's product page into a title and price candidates.

    Selector lists come from ``selectors.json`` and are tried in file
    order; the order is part of the heuristic and must not be shuffled.
    """

    def __init__(
        self, retailer: Retailer, step_log: StepLog | None = None,
    ) -> None:
        self.retailer = retailer
        self.settings = Settings()
        self.selectors: dict[str, Any] = load_selectors(retailer)
        self.step_log = step_log or StepLog()

    def _log(self, message: str, *args: object, level: int = logging.INFO) -> None:
        self.step_log.emit(logger, message, *args, level=level)

    # ── Parsing ──────────────────────────────────────────

    def parse(self, html: str) -> BeautifulSoup:
        """Build a DOM, truncating oversized pages before parsing."""
        self._log("[PARSE] Parsing %s page", self.retailer.value)
        self._log("[PARSE] HTML document size: %d characters", len(html))
        if len(html) > self.settings.MAX_HTML_LENGTH:
            self._log(
                "[PARSE] Large page detected, parsing first %d characters",
                self.settings.TRUNCATED_HTML_LENGTH,
            )
            html = html[: self.settings.TRUNCATED_HTML_LENGTH]
        return BeautifulSoup(html, "lxml")

    # ── Title ────────────────────────────────────────────

    def extract_title(self, soup: BeautifulSoup) -> str:
        """Return the first usable title, or ``"Unknown Product"``."""
        min_len = self.settings.MIN_TITLE_LENGTH
        for selector in self.selectors.get("title", []):
            element = soup.select_one(selector)
            if element is None:
                continue
            text = element.get_text().strip()
            if len(text) < min_len:
                continue
            cleaned = clean_title(text)
            if len(cleaned) > min_len:
                return cleaned
        return self.settings.UNKNOWN_TITLE

    # ── Prices ───────────────────────────────────────────

    @staticmethod
    def extract_price_number(text: str | None) -> Decimal | None:
        """Extract a price like ``$1,299.99`` from noisy element text.

        Values outside the open interval (0, 50000) are rejected as
        garbage such as SKU numbers or years.
        """
        if not text:
            return None
        cleaned = _NON_PRICE_CHARS.sub(" ", text).strip()
        match = _PRICE_RE.search(cleaned)
        if not match:
            return None
        try:
            value = Decimal(match.group(1).replace(",", ""))
        except InvalidOperation:
            return None
        lower = Decimal(str(Settings.MIN_CANDIDATE_PRICE))
        upper = Decimal(str(Settings.MAX_CANDIDATE_PRICE))
        if lower < value < upper:
            return value
        return None

    def extract_candidates(
        self, soup: BeautifulSoup,
    ) -> list[PriceCandidate]:
        """Collect every price candidate, sale selectors before regular."""
        price_groups: dict[str, list[str]] = self.selectors.get("price", {})
        if not price_groups:
            return []

        self._log("[PARSE] Looking for %s prices...", self.retailer.label)
        candidates: list[PriceCandidate] = []
        for kind in ("sale", "regular"):
            for selector in price_groups.get(kind, []):
                for element in soup.select(selector):
                    text = element.get_text().strip()
                    value = self.extract_price_number(text)
                    if value is None:
                        logger.debug(
                            "Could not extract price from: %r", text
                        )
                        continue
                    logger.debug(
                        "Found %s price %s via %s", kind, value, selector
                    )
                    candidates.append(
                        PriceCandidate(
                            value=value, kind=kind, selector=selector
                        )
                    )

        if not candidates:
            self._log(
                "[PARSE] No %s prices found with standard selectors",
                self.retailer.label,
            )
        return candidates

    def extract_prices(self, soup: BeautifulSoup) -> list[Decimal]:
        """Return the distinct candidate values in ascending order."""
        unique: dict[Decimal, None] = {}
        for candidate in self.extract_candidates(soup):
            unique.setdefault(candidate.value, None)
        prices = sorted(unique)
        self._log(
            "[PARSE] All found prices: %s", [str(p) for p in prices]
        )
        return prices
