# pricewatch/models/price_record.py

"""Persisted price observation for a tracked product URL."""

from dataclasses import dataclass
from datetime import datetime

RECORDED_AT_FORMAT = "%Y-%m-%d %H:%M:%S"


@dataclass(frozen=True)
class PriceRecord:
    """A single price observation for a product at a point in time."""

    url: str
    title: str | None
    price: float
    source: str
    confidence: int
    recorded_at: str

    @property
    def recorded_time(self) -> datetime:
        """Parse ``recorded_at``; raises ``ValueError`` when malformed."""
        return datetime.strptime(self.recorded_at, RECORDED_AT_FORMAT)

    def to_dict(self) -> dict[str, object]:
        """Serialise to the on-disk JSON shape."""
        return {
            "url": self.url,
            "title": self.title,
            "price": self.price,
            "source": self.source,
            "confidence": self.confidence,
            "recorded_at": self.recorded_at,
        }

    @classmethod
    def from_dict(cls, row: dict[str, object]) -> "PriceRecord":
        """Build a record from one JSON object of the log."""
        title = row.get("title")
        return cls(
            url=str(row.get("url", "")),
            title=str(title) if title is not None else None,
            price=float(str(row.get("price", 0))),
            source=str(row.get("source", "")),
            confidence=int(str(row.get("confidence", 0))),
            recorded_at=str(row.get("recorded_at", "")),
        )
