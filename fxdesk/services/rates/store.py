from __future__ import annotations

"""File-backed exchange rate table.

Purpose:
    Own the authoritative mapping of currency code -> units per 1 base
    currency (USD), loaded from a flat JSON object on disk and rewritten in
    full after every mutation.

Design:
    - One RateStore per application (attached to app.state by create_app).
    - All reads and writes go through a single RLock so a mutation and the
      save that follows it are never interleaved with another request.
    - Saves write a temp file in the target directory then os.replace() it
      over the real file, so a crash mid-write leaves the old table intact.
    - A failed load leaves an empty table but records LoadState.FAILED and
      the reason, so "no rates configured" and "rates unreadable" differ.
    - The mutate-and-persist helpers (update_rate / add_rate / remove_rate)
      roll the in-memory change back when the save fails.
"""

import enum
import json
import logging
import math
import os
import tempfile
import threading
from pathlib import Path
from typing import Dict, List, Optional

from fxdesk.core.errors import (
    CurrencyNotFoundError,
    DuplicateCurrencyError,
    ProtectedCurrencyError,
    RatePersistenceError,
)

logger = logging.getLogger("fxdesk.rates.store")


class LoadState(str, enum.Enum):
    NOT_LOADED = "not_loaded"
    LOADED = "loaded"
    FAILED = "failed"


class RateFileError(ValueError):
    """Backing file content is not a flat mapping of code -> positive number."""


def parse_rate_document(data: object) -> Dict[str, float]:
    if not isinstance(data, dict):
        raise RateFileError("rate file must contain a JSON object")
    rates: Dict[str, float] = {}
    for code, value in data.items():
        # bool is an int subclass; true/false are not rates
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise RateFileError(f"rate for {code!r} is not a number")
        if not math.isfinite(value) or value <= 0:
            raise RateFileError(f"rate for {code!r} must be a positive number")
        rates[code] = float(value)
    return rates


class RateStore:
    """In-memory rate table persisted to a single JSON file."""

    def __init__(self, path: Path | str, base_currency: str = "USD"):
        self.path = Path(path)
        self.base_currency = base_currency
        self._rates: Dict[str, float] = {}
        self._lock = threading.RLock()
        self.state = LoadState.NOT_LOADED
        self.load_error: Optional[str] = None
        self.save_error: Optional[str] = None

    # Read API -------------------------------------------------
    def __contains__(self, code: object) -> bool:
        with self._lock:
            return code in self._rates

    def __len__(self) -> int:
        with self._lock:
            return len(self._rates)

    def get(self, code: str) -> Optional[float]:
        with self._lock:
            return self._rates.get(code)

    def codes(self) -> List[str]:
        with self._lock:
            return list(self._rates)

    def as_dict(self) -> Dict[str, float]:
        with self._lock:
            return dict(self._rates)

    @property
    def load_failed(self) -> bool:
        return self.state is LoadState.FAILED

    # Persistence ----------------------------------------------
    def load(self) -> bool:
        """Replace the table with the file contents.

        Any failure empties the table and marks the store FAILED instead of
        raising; the caller decides whether that is acceptable.
        """
        with self._lock:
            try:
                with self.path.open("r", encoding="utf-8") as f:
                    rates = parse_rate_document(json.load(f))
            except (OSError, ValueError) as e:  # JSONDecodeError is a ValueError
                logger.error("failed to load exchange rates from %s: %s", self.path, e)
                self._rates = {}
                self.state = LoadState.FAILED
                self.load_error = str(e)
                return False
            self._rates = rates
            self.state = LoadState.LOADED
            self.load_error = None
            logger.info("exchange rates loaded: %d currencies", len(rates))
            return True

    def _write(self, payload: str) -> None:
        fd, tmp_path = tempfile.mkstemp(
            prefix=f".{self.path.name}.", suffix=".tmp", dir=str(self.path.parent)
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(payload)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_path, self.path)
        except BaseException:
            try:
                os.unlink(tmp_path)
            except OSError:
                pass
            raise

    def save(self) -> bool:
        with self._lock:
            payload = json.dumps(self._rates, indent=2, ensure_ascii=False)
            try:
                self._write(payload)
            except OSError as e:
                logger.error("failed to save exchange rates to %s: %s", self.path, e)
                self.save_error = str(e)
                return False
            self.save_error = None
            logger.info("exchange rates saved: %d currencies", len(self._rates))
            return True

    # Raw mutations (no persistence) ---------------------------
    def set(self, code: str, rate: float) -> None:
        with self._lock:
            self._rates[code] = rate

    def delete(self, code: str) -> float:
        with self._lock:
            if code == self.base_currency:
                raise ProtectedCurrencyError(code)
            if code not in self._rates:
                raise CurrencyNotFoundError(code)
            return self._rates.pop(code)

    # Mutate-and-persist ---------------------------------------
    def update_rate(self, code: str, rate: float) -> None:
        """Insert or overwrite a rate and save; rolls back if the save fails."""
        with self._lock:
            snapshot = dict(self._rates)
            self.set(code, rate)
            self._persist_or_rollback(code, snapshot)

    def add_rate(self, code: str, rate: float) -> None:
        with self._lock:
            if code in self._rates:
                raise DuplicateCurrencyError(code)
            snapshot = dict(self._rates)
            self.set(code, rate)
            self._persist_or_rollback(code, snapshot)

    def remove_rate(self, code: str) -> float:
        with self._lock:
            snapshot = dict(self._rates)
            removed = self.delete(code)
            self._persist_or_rollback(code, snapshot)
            return removed

    def _persist_or_rollback(self, code: str, snapshot: Dict[str, float]) -> None:
        if self.save():
            return
        # Restoring the copy also restores the previous key order.
        self._rates = snapshot
        logger.warning("rolled back in-memory change to %s after failed save", code)
        raise RatePersistenceError(code, self.save_error)
