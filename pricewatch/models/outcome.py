# pricewatch/models/outcome.py

"""Pipeline data models: candidates, scrape outcomes and final results."""

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum


class PriceSource(str, Enum):
    """Where a price (or the lack of one) came from."""

    SCRAPED = "scraped"
    SCRAPE_FAILED = "scrape_failed"
    FETCH_FAILED = "fetch_failed"
    SCRAPE_ERROR = "scrape_error"
    HYBRID_AVERAGE = "hybrid_average"
    USER_CORRECTED = "user_corrected"
    USER_OVERRIDE = "user_override"
    USER_REPORTED = "user_reported"


@dataclass(frozen=True)
class PriceCandidate:
    """A numeric value pulled from one matched element."""

    value: Decimal
    kind: str = "regular"  # "sale" or "regular"
    selector: str = ""


@dataclass(frozen=True)
class ScrapeOutcome:
    """Result of one fetch-and-parse attempt."""

    price: Decimal | None
    source: PriceSource
    confidence: int = 0
    title: str | None = None
    error: str | None = None
    candidates: tuple[Decimal, ...] = ()


@dataclass(frozen=True)
class ValidatedOutcome:
    """A scrape outcome reconciled with a user-reported price."""

    price: Decimal | None
    source: PriceSource
    confidence: int
    title: str | None = None
    suggestion: str | None = None
    user_validation: str | None = None
    error: str | None = None

    @classmethod
    def from_scrape(cls, outcome: ScrapeOutcome) -> "ValidatedOutcome":
        """Pass a scrape outcome through without user input."""
        return cls(
            price=outcome.price,
            source=outcome.source,
            confidence=outcome.confidence,
            title=outcome.title,
            error=outcome.error,
        )


@dataclass(frozen=True)
class PriceResult:
    """Final answer returned by ``PriceTracker.get_current_price``.

    Cache hits return this same instance to every caller.
    """

    price: Decimal | None
    source: PriceSource
    confidence: int
    title: str | None
    last_updated: str
    needs_user_input: bool = False
    suggestion: str | None = None
    error: str | None = None
    user_validation: str | None = None

    def to_dict(self) -> dict[str, object]:
        """Serialise to plain JSON-compatible values."""
        return {
            "price": float(self.price) if self.price is not None else None,
            "confidence": self.confidence,
            "source": self.source.value,
            "title": self.title,
            "last_updated": self.last_updated,
            "needs_user_input": self.needs_user_input,
            "suggestion": self.suggestion,
            "error": self.error,
            "user_validation": self.user_validation,
        }
