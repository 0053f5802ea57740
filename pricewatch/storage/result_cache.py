# pricewatch/storage/result_cache.py

"""Bounded in-memory cache of final price results."""

import logging
import threading
import time
from collections import OrderedDict
from dataclasses import dataclass
from decimal import Decimal

from pricewatch.config.settings import Settings
from pricewatch.models.outcome import PriceResult

logger = logging.getLogger("pricewatch.cache")

CacheKey = tuple[str, Decimal | None]


@dataclass
class CacheEntry:
    """A computed result and the moment it stops being valid."""

    result: PriceResult
    expires_at: float


class ResultCache:
    """Memoise ``get_current_price`` per ``(url, user_price)``.

    Entries live for ``RESULT_CACHE_TTL`` seconds and are dropped lazily
    when looked up after expiry.  The map is capped at
    ``RESULT_CACHE_MAX_ENTRIES``; once full, expired entries are swept
    and then the oldest insertions are evicted.
    """

    def __init__(
        self,
        ttl: float | None = None,
        max_entries: int | None = None,
    ) -> None:
        self._ttl: float = (
            Settings.RESULT_CACHE_TTL if ttl is None else ttl
        )
        self._max_entries: int = (
            Settings.RESULT_CACHE_MAX_ENTRIES
            if max_entries is None
            else max_entries
        )
        self._entries: OrderedDict[CacheKey, CacheEntry] = OrderedDict()
        self._lock = threading.Lock()

    def __len__(self) -> int:
        return len(self._entries)

    def get(
        self, url: str, user_price: Decimal | None,
    ) -> PriceResult | None:
        """Return the cached result, or ``None`` on miss or expiry."""
        key: CacheKey = (url, user_price)
        now = time.time()
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            if now > entry.expires_at:
                del self._entries[key]
                logger.debug("Expired cache entry for %s", url)
                return None
        logger.info("Cache hit for %s (user price=%s)", url, user_price)
        return entry.result

    def put(
        self,
        url: str,
        user_price: Decimal | None,
        result: PriceResult,
    ) -> None:
        """Store ``result``, replacing any entry for the same key."""
        key: CacheKey = (url, user_price)
        with self._lock:
            self._entries.pop(key, None)
            self._entries[key] = CacheEntry(
                result=result, expires_at=time.time() + self._ttl,
            )
            if len(self._entries) > self._max_entries:
                self._evict(time.time())

    def clear(self) -> int:
        """Purge all cached entries.

        Returns the number of entries that were removed.
        """
        with self._lock:
            count = len(self._entries)
            self._entries.clear()
        logger.info("Cache manually purged (%d entries removed)", count)
        return count

    def _evict(self, now: float) -> None:
        """Sweep expired entries, then drop the oldest over the cap."""
        expired = [
            k for k, e in self._entries.items() if now > e.expires_at
        ]
        for key in expired:
            del self._entries[key]
        evicted = len(expired)
        while len(self._entries) > self._max_entries:
            self._entries.popitem(last=False)
            evicted += 1
        if evicted:
            logger.debug("Evicted %d cache entries", evicted)
