# pricewatch/storage/record_store.py

"""Append-only JSON log of price records."""

import json
import logging
import os
import threading
from datetime import datetime
from pathlib import Path
from typing import cast

from pricewatch.config.settings import Settings
from pricewatch.models.price_record import PriceRecord

logger = logging.getLogger("pricewatch.storage")


class RecordStore:
    """JSON-array file holding every recorded price, oldest first.

    Every mutation is a full load, in-memory change and full rewrite,
    so all of them run under one lock owned by the store.  The file is
    kept readable and writable by its owner only.
    """

    def __init__(self, db_path: Path | None = None) -> None:
        self.path: Path = db_path or Settings.PRICE_DB_PATH
        self._lock = threading.Lock()
        self.path.parent.mkdir(parents=True, exist_ok=True)
        if not self.path.exists():
            self._write([])
        logger.debug("RecordStore opened at %s", self.path)

    # ── Reading ──────────────────────────────────────────

    def load(self) -> list[PriceRecord]:
        """Return all records; a missing or corrupt file reads as empty."""
        records = self._read()
        return [] if records is None else records

    def _read(self) -> list[PriceRecord] | None:
        """Parse the log; ``None`` means the file exists but is unreadable."""
        try:
            with open(self.path, encoding="utf-8") as f:
                data = json.load(f)
        except FileNotFoundError:
            return []
        except (json.JSONDecodeError, OSError) as exc:
            logger.error(
                "Failed to read %s: %s", self.path.name, exc,
            )
            return None

        if not isinstance(data, list):
            logger.error(
                "%s does not hold a JSON array", self.path.name,
            )
            return None

        items: list[object] = cast(list[object], data)
        records: list[PriceRecord] = []
        for row in items:
            if not isinstance(row, dict):
                continue
            try:
                records.append(
                    PriceRecord.from_dict(cast(dict[str, object], row))
                )
            except (TypeError, ValueError) as exc:
                logger.warning("Skipping malformed record %r: %s", row, exc)
        return records

    # ── Writing ──────────────────────────────────────────

    def _load_for_update(self) -> list[PriceRecord]:
        """Load before a rewrite, moving an unreadable file out of the way.

        The old file is kept as ``<name>.corrupt-<timestamp>`` and the
        rewrite starts from an empty log.
        """
        records = self._read()
        if records is not None:
            return records
        stamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        backup = self.path.with_name(f"{self.path.name}.corrupt-{stamp}")
        os.replace(self.path, backup)
        logger.error(
            "Unreadable price log moved to %s; starting a new log", backup,
        )
        return []

    def append(self, record: PriceRecord) -> None:
        """Add one record to the end of the log."""
        with self._lock:
            records = self._load_for_update()
            records.append(record)
            self._write(records)
        logger.info(
            "Saved price record: $%.2f (%s) for %s",
            record.price,
            record.source,
            record.url,
        )

    def replace(self, records: list[PriceRecord]) -> None:
        """Overwrite the whole log with ``records``."""
        with self._lock:
            self._write(records)

    def delete_url(self, url: str) -> int:
        """Remove every record for ``url``; return how many went."""
        with self._lock:
            records = self._read()
            if records is None:
                return 0
            kept = [r for r in records if r.url != url]
            deleted = len(records) - len(kept)
            if deleted:
                self._write(kept)
        return deleted

    def _write(self, records: list[PriceRecord]) -> None:
        with open(self.path, "w", encoding="utf-8") as f:
            json.dump(
                [r.to_dict() for r in records],
                f,
                ensure_ascii=False,
                indent=2,
            )
        os.chmod(self.path, 0o600)
