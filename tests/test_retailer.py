# tests/test_retailer.py

"""Tests for URL-based store classification."""

import unittest

from pricewatch.models.retailer import Retailer, classify_store


class TestClassifyStore(unittest.TestCase):
    """classify_store maps hosts to retailer profiles."""

    def test_amazon_domains(self) -> None:
        """Any amazon.* host is Amazon."""
        for url in (
            "https://www.amazon.com/dp/B09XS7JWHH",
            "https://amazon.co.uk/Some-Product/dp/B001",
            "https://smile.amazon.de/gp/product/B002",
        ):
            with self.subTest(url=url):
                self.assertEqual(classify_store(url), Retailer.AMAZON)

    def test_ebay_and_bestbuy(self) -> None:
        """eBay and Best Buy hosts map to their profiles."""
        self.assertEqual(
            classify_store("https://www.ebay.com/itm/1234567890"),
            Retailer.EBAY,
        )
        self.assertEqual(
            classify_store("https://www.bestbuy.com/site/tv/6501.p"),
            Retailer.BESTBUY,
        )

    def test_host_is_case_insensitive(self) -> None:
        """Upper-case hosts classify the same way."""
        self.assertEqual(
            classify_store("https://WWW.EBAY.CO.UK/itm/1"), Retailer.EBAY
        )

    def test_unlisted_store_is_unknown(self) -> None:
        """Hosts outside the registry are UNKNOWN."""
        self.assertEqual(
            classify_store("https://www.walmart.com/ip/123"),
            Retailer.UNKNOWN,
        )

    def test_path_does_not_influence_store(self) -> None:
        """Only the host is inspected, not the path."""
        self.assertEqual(
            classify_store("https://example.com/amazon.com/ebay.com"),
            Retailer.UNKNOWN,
        )

    def test_malformed_urls_do_not_raise(self) -> None:
        """Unparsable or host-less URLs are UNKNOWN."""
        for url in ("not a url", "", "https://[::1", "/relative/path"):
            with self.subTest(url=url):
                self.assertEqual(classify_store(url), Retailer.UNKNOWN)

    def test_labels(self) -> None:
        """Retailer labels come from the settings registry."""
        self.assertEqual(Retailer.BESTBUY.label, "Best Buy")
        self.assertEqual(Retailer.EBAY.label, "eBay")
        self.assertEqual(Retailer.UNKNOWN.label, "Unknown")
