# pricewatch/models/retailer.py

"""Retailer profiles and URL-based store classification."""

import logging
from enum import Enum
from urllib.parse import urlparse

from pricewatch.config.settings import Settings

logger = logging.getLogger("pricewatch.store")


class Retailer(str, Enum):
    """Known retailer profiles; everything else is ``UNKNOWN``."""

    AMAZON = "amazon"
    EBAY = "ebay"
    BESTBUY = "bestbuy"
    UNKNOWN = "unknown"

    @property
    def label(self) -> str:
        """Human-readable store name (e.g. ``Best Buy``)."""
        for entry in Settings.RETAILERS:
            if entry["id"] == self.value:
                return entry["label"]
        return "Unknown"


def classify_store(url: str) -> Retailer:
    """Map a product URL to its retailer by host substring.

    The first registered domain fragment contained in the lower-cased
    host wins.  Malformed URLs classify as ``UNKNOWN`` instead of
    raising.
    """
    try:
        host = (urlparse(url).hostname or "").lower()
    except ValueError:
        host = ""

    store = Retailer.UNKNOWN
    for entry in Settings.RETAILERS:
        if entry["domain"] in host:
            store = Retailer(entry["id"])
            break

    logger.debug(
        "Detected store: %s from domain: %s", store.value, host or "<none>"
    )
    return store
