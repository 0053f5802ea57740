# pricewatch/config/settings.py

"""Central configuration for the pricewatch tracker."""

import os
from pathlib import Path

from curl_cffi.requests import BrowserTypeLiteral
from dotenv import load_dotenv

load_dotenv()


def _env_flag(name: str, default: bool) -> bool:
    """Read a boolean flag such as ``PRICEWATCH_VERIFY_TLS=0``."""
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() not in ("0", "false", "no", "off", "")


class Settings:
    """Central configuration for the pricewatch tracker."""

    # --- Fetching ---
    REQUEST_TIMEOUT: int = 10           # Seconds before a request times out
    MAX_RETRIES: int = 2                # Retries after the first attempt
    TIMEOUT_RETRY_DELAY: float = 1.0    # Sleep after a transport timeout
    RATE_LIMIT_RETRY_DELAY: float = 2.0  # Sleep after an HTTP 429
    VERIFY_TLS: bool = _env_flag("PRICEWATCH_VERIFY_TLS", True)
    TLS_VERSION: int = 6                # CURL_SSLVERSION_TLSv1_2

    # --- Browser Impersonation ---
    IMPERSONATE_BROWSER: BrowserTypeLiteral = "chrome120"
    AMAZON_HEADERS: dict[str, str] = {
        "User-Agent": (
            "Mozilla/5.0 (Windows NT 10.0; Win64; x64) "
            "AppleWebKit/537.36 (KHTML, like Gecko) "
            "Chrome/120.0.0.0 Safari/537.36"
        ),
        "Accept": (
            "text/html,application/xhtml+xml,"
            "application/xml;q=0.9,image/avif,"
            "image/webp,image/apng,*/*;q=0.8"
        ),
        "Accept-Language": "en-US,en;q=0.9",
        "Accept-Encoding": "gzip, deflate, br",
        "Connection": "keep-alive",
        "Upgrade-Insecure-Requests": "1",
        "Sec-Fetch-Dest": "document",
        "Sec-Fetch-Mode": "navigate",
        "Sec-Fetch-Site": "none",
        "Sec-Fetch-User": "?1",
        "Cache-Control": "max-age=0",
        "DNT": "1",
    }
    DEFAULT_HEADERS: dict[str, str] = {
        "User-Agent": (
            "Mozilla/5.0 (Windows NT 10.0; Win64; x64) "
            "AppleWebKit/537.36 (KHTML, like Gecko) "
            "Chrome/119.0.0.0 Safari/537.36"
        ),
        "Accept": (
            "text/html,application/xhtml+xml,"
            "application/xml;q=0.9,image/avif,"
            "image/webp,*/*;q=0.8"
        ),
        "Accept-Language": "en-US,en;q=0.5",
        "Accept-Encoding": "gzip, deflate, br",
        "Connection": "keep-alive",
        "Upgrade-Insecure-Requests": "1",
        "Sec-Fetch-Dest": "document",
        "Sec-Fetch-Mode": "navigate",
        "Sec-Fetch-Site": "none",
    }

    # --- Parsing ---
    MAX_HTML_LENGTH: int = 500_000       # Pages above this are truncated
    TRUNCATED_HTML_LENGTH: int = 200_000  # Characters kept when truncating
    MIN_TITLE_LENGTH: int = 5
    UNKNOWN_TITLE: str = "Unknown Product"

    # --- Price heuristics ---
    MIN_CANDIDATE_PRICE: float = 0.0     # Exclusive
    MAX_CANDIDATE_PRICE: float = 50_000.0  # Exclusive
    REASONABLE_MIN_PRICE: float = 5.0
    REASONABLE_MAX_PRICE: float = 10_000.0
    NOISY_PAGE_CANDIDATES: int = 20
    MAX_CONFIDENCE: int = 95

    # --- Caching ---
    RESULT_CACHE_TTL: float = 300.0      # Seconds a computed result stays valid
    RESULT_CACHE_MAX_ENTRIES: int = 256

    # --- Paths ---
    BASE_DIR: Path = Path(__file__).resolve().parent.parent.parent
    SELECTORS_PATH: Path = Path(__file__).resolve().parent / "selectors.json"
    DATA_DIR: Path = BASE_DIR / "database"
    PRICE_DB_PATH: Path = Path(
        os.getenv(
            "PRICEWATCH_DB_PATH",
            str(DATA_DIR / "price_tracker.json"),
        )
    )
    LOGS_DIR: Path = BASE_DIR / "logs"

    # --- Retailers (registry keyed by Retailer value) ---
    RETAILERS: list[dict[str, str]] = [
        {
            "id": "amazon",
            "label": "Amazon",
            "domain": "amazon.",
        },
        {
            "id": "ebay",
            "label": "eBay",
            "domain": "ebay.",
        },
        {
            "id": "bestbuy",
            "label": "Best Buy",
            "domain": "bestbuy.",
        },
    ]
