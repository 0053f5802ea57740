# pricewatch/scrapers/fetcher.py

"""HTTP page retrieval with retailer headers and bounded retries."""

import logging
import time
from enum import Enum

from curl_cffi import CurlOpt
from curl_cffi import requests as curl_requests
from curl_cffi.requests.exceptions import RequestException, Timeout

from pricewatch.config.logging_config import StepLog
from pricewatch.config.settings import Settings
from pricewatch.models.retailer import Retailer

logger = logging.getLogger("pricewatch.fetch")


class RetryDecision(Enum):
    """What the fetch loop does after one attempt."""

    SUCCESS = "success"
    RETRY_TIMEOUT = "retry_timeout"
    RETRY_RATE_LIMITED = "retry_rate_limited"
    GIVE_UP = "give_up"

    @property
    def delay(self) -> float:
        """Seconds to sleep before the next attempt."""
        if self is RetryDecision.RETRY_TIMEOUT:
            return Settings.TIMEOUT_RETRY_DELAY
        if self is RetryDecision.RETRY_RATE_LIMITED:
            return Settings.RATE_LIMIT_RETRY_DELAY
        return 0.0


def headers_for(retailer: Retailer) -> dict[str, str]:
    """Return the browser-like header block for a retailer.

    Amazon gets the extended Sec-Fetch/DNT block; every other store
    gets the reduced default set.
    """
    if retailer is Retailer.AMAZON:
        return dict(Settings.AMAZON_HEADERS)
    return dict(Settings.DEFAULT_HEADERS)


class PageFetcher:
    """GET product pages, retrying timeouts and rate limits.

    ``fetch`` never raises for network or HTTP problems; it returns
    ``None`` and the caller reports the page as ``fetch_failed``.
    """

    def __init__(
        self,
        verify_tls: bool | None = None,
        step_log: StepLog | None = None,
    ) -> None:
        self.settings = Settings()
        self.verify_tls: bool = (
            self.settings.VERIFY_TLS if verify_tls is None else verify_tls
        )
        self.step_log = step_log or StepLog()
        self.max_retries: int = self.settings.MAX_RETRIES
        self._request_timeout: int = self.settings.REQUEST_TIMEOUT
        self.session = curl_requests.Session(
            impersonate=self.settings.IMPERSONATE_BROWSER,
            curl_options={CurlOpt.SSLVERSION: self.settings.TLS_VERSION},
        )
        if not self.verify_tls:
            logger.warning(
                "TLS certificate verification is disabled for page fetches"
            )

    def close(self) -> None:
        """Close the underlying curl session."""
        self.session.close()
        logger.debug("Fetch session closed")

    def _log(self, message: str, *args: object, level: int = logging.INFO) -> None:
        self.step_log.emit(logger, message, *args, level=level)

    def _attempt(
        self, url: str, headers: dict[str, str],
    ) -> tuple[RetryDecision, str | None]:
        """Run one GET and classify the outcome."""
        try:
            resp = self.session.get(
                url,
                headers=headers,
                timeout=self._request_timeout,
                allow_redirects=True,
                verify=self.verify_tls,
            )
        except Timeout as exc:
            self._log("[FETCH] Timeout: %s", exc, level=logging.WARNING)
            return RetryDecision.RETRY_TIMEOUT, None
        except RequestException as exc:
            self._log("[FETCH] Error: %s", exc, level=logging.ERROR)
            return RetryDecision.GIVE_UP, None

        self._log("[FETCH] Response code: %d", resp.status_code)
        if resp.status_code == 200:
            body: str = resp.text
            self._log(
                "[FETCH] Successfully fetched page (%d characters)",
                len(body),
            )
            return RetryDecision.SUCCESS, body
        if resp.status_code == 429:
            return RetryDecision.RETRY_RATE_LIMITED, None

        self._log(
            "[FETCH] HTTP Error: %d", resp.status_code, level=logging.WARNING,
        )
        return RetryDecision.GIVE_UP, None

    def fetch(self, url: str, retailer: Retailer) -> str | None:
        """Return the page body on HTTP 200, otherwise ``None``.

        Timeouts and HTTP 429 responses share one retry budget of
        ``MAX_RETRIES`` (three attempts in total).
        """
        headers = headers_for(retailer)
        retries = 0

        while True:
            self._log("[FETCH] Attempt %d for: %s", retries + 1, url)
            decision, body = self._attempt(url, headers)

            if decision is RetryDecision.SUCCESS:
                return body
            if decision is RetryDecision.GIVE_UP:
                return None

            if retries >= self.max_retries:
                self._log(
                    "[FETCH] Giving up after %d attempts (%s)",
                    retries + 1,
                    decision.value,
                    level=logging.WARNING,
                )
                return None

            retries += 1
            if decision is RetryDecision.RETRY_RATE_LIMITED:
                self._log(
                    "[FETCH] Rate limited, retrying in %.0f seconds...",
                    decision.delay,
                )
            else:
                self._log(
                    "[FETCH] Timeout, retrying in %.0f second(s)...",
                    decision.delay,
                )
            time.sleep(decision.delay)
