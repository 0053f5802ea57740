# tests/test_confidence.py

"""Tests for the scrape confidence score."""

import unittest
from decimal import Decimal

from pricewatch.filters.confidence import score_confidence


class TestScoreConfidence(unittest.TestCase):
    """score_confidence signal weights and clamping."""

    def test_base_score(self) -> None:
        """Short title, out-of-range price, few candidates: 50."""
        self.assertEqual(score_confidence("Mug", Decimal("7"), 2), 50)

    def test_title_bonus_needs_more_than_ten_chars(self) -> None:
        """Exactly 10 characters earns nothing; 11 earns 20."""
        self.assertEqual(score_confidence("a" * 10, None, 1), 50)
        self.assertEqual(score_confidence("a" * 11, None, 1), 70)

    def test_price_range_bonus_is_inclusive(self) -> None:
        """10 and 5000 are inside the typical range."""
        for price in ("10", "5000", "249.99"):
            with self.subTest(price=price):
                self.assertEqual(score_confidence(None, Decimal(price), 1), 65)
        self.assertEqual(score_confidence(None, Decimal("5000.01"), 1), 50)

    def test_noisy_page_penalty(self) -> None:
        """More than 20 candidates costs 10 points."""
        title = "Sony WH-1000XM5 Headphones"
        self.assertEqual(score_confidence(title, Decimal("348"), 20), 85)
        self.assertEqual(score_confidence(title, Decimal("348"), 21), 75)

    def test_always_within_bounds(self) -> None:
        """Every combination stays in [0, 95]."""
        for title in (None, "", "x" * 50):
            for price in (None, Decimal("1"), Decimal("100")):
                for count in (0, 5, 100):
                    with self.subTest(title=title, price=price, count=count):
                        score = score_confidence(title, price, count)
                        self.assertGreaterEqual(score, 0)
                        self.assertLessEqual(score, 95)
