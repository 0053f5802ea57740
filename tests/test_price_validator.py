# tests/test_price_validator.py

"""Tests for reconciling scraped and user-reported prices."""

import unittest
from decimal import Decimal

from pricewatch.filters.price_validator import (
    PriceValidator,
    price_difference_percent,
    title_from_url,
)
from pricewatch.models.outcome import PriceSource, ScrapeOutcome

URL = "https://www.bestbuy.com/site/sony-wh1000xm5-headphones/6505727.p"


def _scraped(price: str | None, title: str | None = "Sony WH-1000XM5") -> ScrapeOutcome:
    if price is None:
        return ScrapeOutcome(
            price=None,
            source=PriceSource.FETCH_FAILED,
            title=title,
            error="Could not fetch page",
        )
    return ScrapeOutcome(
        price=Decimal(price),
        source=PriceSource.SCRAPED,
        confidence=85,
        title=title,
    )


class TestPriceValidator(unittest.TestCase):
    """Bucketed reconciliation by percentage difference."""

    def setUp(self) -> None:
        self.validator = PriceValidator()

    def test_identical_prices_confirmed(self) -> None:
        """Equal prices give a 0% diff and a confirmed scrape."""
        result = self.validator.validate(_scraped("59.99"), Decimal("59.99"), URL)
        self.assertEqual(result.source, PriceSource.SCRAPED)
        self.assertEqual(result.user_validation, "confirmed")
        self.assertEqual(result.confidence, 95)
        self.assertEqual(result.price, Decimal("59.99"))
        self.assertIsNone(result.suggestion)

    def test_small_difference_confirmed(self) -> None:
        """100 vs 104 is 3.8%: keep the scraped price."""
        result = self.validator.validate(_scraped("100.00"), Decimal("104.00"), URL)
        self.assertEqual(result.user_validation, "confirmed")
        self.assertEqual(result.confidence, 95)
        self.assertEqual(result.price, Decimal("100.00"))

    def test_five_percent_boundary_is_confirmed(self) -> None:
        """Exactly 5.0% still counts as confirmed."""
        result = self.validator.validate(_scraped("105"), Decimal("100"), URL)
        self.assertEqual(result.user_validation, "confirmed")

    def test_moderate_difference_averages(self) -> None:
        """(5, 20]: average of both, rounded to cents."""
        result = self.validator.validate(_scraped("110.00"), Decimal("100.00"), URL)
        self.assertEqual(result.source, PriceSource.HYBRID_AVERAGE)
        self.assertEqual(result.confidence, 75)
        self.assertEqual(result.price, Decimal("105.00"))
        assert result.suggestion is not None
        self.assertIn("$110.00", result.suggestion)
        self.assertIn("$100.00", result.suggestion)

    def test_twenty_percent_boundary_is_moderate(self) -> None:
        """Exactly 20.0% averages."""
        result = self.validator.validate(_scraped("120"), Decimal("100"), URL)
        self.assertEqual(result.source, PriceSource.HYBRID_AVERAGE)
        self.assertEqual(result.price, Decimal("110.00"))

    def test_average_rounds_half_up(self) -> None:
        """Half-cent averages round up."""
        result = self.validator.validate(_scraped("10.01"), Decimal("11.00"), URL)
        self.assertEqual(result.price, Decimal("10.51"))

    def test_large_difference_uses_user_price(self) -> None:
        """100 vs 130 is 23.1%: user price, confidence 65."""
        result = self.validator.validate(_scraped("100.00"), Decimal("130.00"), URL)
        self.assertEqual(result.source, PriceSource.USER_CORRECTED)
        self.assertEqual(result.confidence, 65)
        self.assertEqual(result.price, Decimal("130.00"))
        assert result.suggestion is not None
        self.assertIn("$100.00", result.suggestion)
        self.assertIn("$130.00", result.suggestion)

    def test_fifty_percent_boundary_is_corrected(self) -> None:
        """Exactly 50.0% is still user_corrected."""
        result = self.validator.validate(_scraped("150"), Decimal("100"), URL)
        self.assertEqual(result.source, PriceSource.USER_CORRECTED)

    def test_huge_difference_overrides(self) -> None:
        """Above 50%: user_override with confidence 60."""
        result = self.validator.validate(_scraped("15.83"), Decimal("189.99"), URL)
        self.assertEqual(result.source, PriceSource.USER_OVERRIDE)
        self.assertEqual(result.confidence, 60)
        self.assertEqual(result.price, Decimal("189.99"))
        self.assertIsNotNone(result.suggestion)

    def test_scrape_failure_uses_user_price(self) -> None:
        """No scraped price: user_reported with confidence 70."""
        result = self.validator.validate(_scraped(None, title=None), Decimal("299"), URL)
        self.assertEqual(result.source, PriceSource.USER_REPORTED)
        self.assertEqual(result.confidence, 70)
        self.assertEqual(result.price, Decimal("299"))
        self.assertEqual(result.title, "Site")
        self.assertIsNone(result.suggestion)

    def test_scrape_failure_keeps_scraped_title(self) -> None:
        """A title from the page wins over the URL guess."""
        result = self.validator.validate(
            _scraped(None, title="Real Title"), Decimal("10"), URL
        )
        self.assertEqual(result.title, "Real Title")

    def test_without_user_price_passes_through(self) -> None:
        """No user price: the scrape outcome is returned as is."""
        outcome = _scraped("348")
        result = self.validator.validate(outcome, None, URL)
        self.assertEqual(result.source, PriceSource.SCRAPED)
        self.assertEqual(result.confidence, 85)
        self.assertEqual(result.price, Decimal("348"))
        self.assertIsNone(result.user_validation)

    def test_non_positive_user_price_ignored(self) -> None:
        """A zero user price cannot be used as a divisor."""
        result = self.validator.validate(_scraped("348"), Decimal("0"), URL)
        self.assertEqual(result.source, PriceSource.SCRAPED)
        self.assertEqual(result.confidence, 85)

    def test_tiny_user_price_overrides(self) -> None:
        """A ratio too wide for default precision still validates."""
        result = self.validator.validate(_scraped("100.00"), Decimal("1E-25"), URL)
        self.assertEqual(result.source, PriceSource.USER_OVERRIDE)
        self.assertEqual(result.confidence, 60)
        self.assertEqual(result.price, Decimal("1E-25"))

    def test_overflowing_ratio_overrides(self) -> None:
        """A ratio beyond the decimal exponent range falls back to override."""
        result = self.validator.validate(
            _scraped("100.00"), Decimal("1E-999999"), URL
        )
        self.assertEqual(result.source, PriceSource.USER_OVERRIDE)
        self.assertEqual(result.confidence, 60)

    def test_every_outcome_has_source_and_bounded_confidence(self) -> None:
        """Validation is total over a spread of inputs."""
        for scraped in (None, "1", "50", "100", "1000"):
            for user in ("0.01", "50", "100", "49999"):
                with self.subTest(scraped=scraped, user=user):
                    result = self.validator.validate(
                        _scraped(scraped), Decimal(user), URL
                    )
                    self.assertIsNotNone(result.source)
                    self.assertGreaterEqual(result.confidence, 0)
                    self.assertLessEqual(result.confidence, 95)


class TestHelpers(unittest.TestCase):
    """Difference percentage and URL titles."""

    def test_difference_percent_rounding(self) -> None:
        """Rounded to one decimal place."""
        self.assertEqual(
            price_difference_percent(Decimal("100"), Decimal("104")), Decimal("3.8")
        )
        self.assertEqual(
            price_difference_percent(Decimal("100"), Decimal("130")), Decimal("23.1")
        )
        self.assertEqual(
            price_difference_percent(Decimal("42"), Decimal("42")), Decimal("0.0")
        )

    def test_difference_percent_with_tiny_user_price(self) -> None:
        """Precision widens instead of raising on a huge ratio."""
        diff = price_difference_percent(Decimal("100"), Decimal("1E-25"))
        self.assertGreater(diff, Decimal("9.99E+28"))
        self.assertEqual(diff.as_tuple().exponent, -1)

    def test_title_from_url_uses_first_long_segment(self) -> None:
        """Slug segments become capitalised words."""
        self.assertEqual(
            title_from_url("https://www.amazon.com/Sony-WH1000XM5-Headphones/dp/B09XS7JWHH"),
            "Sony WH1000XM5 Headphones",
        )
        self.assertEqual(
            title_from_url("https://shop.example.com/garden_hose_50ft"),
            "Garden Hose 50ft",
        )

    def test_title_from_url_skips_numeric_segments(self) -> None:
        """All-digit segments are skipped; no segment falls back to host."""
        self.assertEqual(
            title_from_url("https://www.ebay.com/itm/1234567890"),
            "Product from www.ebay.com",
        )
