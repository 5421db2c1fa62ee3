"""Portfolio record and persistence helpers."""

from __future__ import annotations

import datetime as dt
import json
import logging
import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

import pandas as pd

from .errors import DecodeError, StoreError

logger = logging.getLogger(__name__)

# Date first, then an optional time part: "2024-03-01", "2024-03-01T10:15:30.123456789Z".
ISO_TIMESTAMP = re.compile(r"\d{4}-\d{2}-\d{2}([T ]\d{2}:\d{2}.*)?$")


@dataclass
class Coin:
    """A tracked symbol; price is whatever was last stored, advisory only."""

    symbol: str
    price: float = 0.0

    def to_dict(self) -> dict:
        return {"symbol": self.symbol, "price": self.price}

    @classmethod
    def from_dict(cls, raw) -> "Coin":
        if not isinstance(raw, dict):
            raise ValueError(f"coin entry must be an object, got {type(raw).__name__}")
        symbol = raw.get("symbol")
        if not isinstance(symbol, str) or not symbol:
            raise ValueError(f"coin entry has no symbol: {raw!r}")
        return cls(symbol=symbol, price=_as_number(raw.get("price", 0.0), f"price of {symbol}"))


@dataclass
class Portfolio:
    """Coins in insertion order, alarm thresholds by symbol, last-save time."""

    coins: list = field(default_factory=list)
    timestamp: Optional[dt.datetime] = None
    alarms: Optional[dict] = field(default_factory=dict)

    def symbols(self) -> list[str]:
        return [c.symbol for c in self.coins]

    def to_dict(self) -> dict:
        return {
            "coins": [c.to_dict() for c in self.coins],
            "timestamp": self.timestamp.isoformat() if self.timestamp else None,
            "alarms": dict(self.alarms or {}),
        }

    @classmethod
    def from_dict(cls, raw) -> "Portfolio":
        """
        Build a Portfolio from its JSON form.
        Missing keys fall back to empty values; wrong shapes raise ValueError.
        """
        if not isinstance(raw, dict):
            raise ValueError(f"expected a JSON object, got {type(raw).__name__}")

        coins_raw = raw.get("coins") or []
        if not isinstance(coins_raw, list):
            raise ValueError("'coins' must be a list")
        coins = [Coin.from_dict(c) for c in coins_raw]

        seen = set()
        for coin in coins:
            if coin.symbol in seen:
                raise ValueError(f"duplicate coin symbol: {coin.symbol}")
            seen.add(coin.symbol)

        alarms_raw = raw.get("alarms") or {}
        if not isinstance(alarms_raw, dict):
            raise ValueError("'alarms' must be an object")
        alarms = {
            str(symbol): _as_number(threshold, f"alarm for {symbol}")
            for symbol, threshold in alarms_raw.items()
        }

        return cls(coins=coins, timestamp=_parse_timestamp(raw.get("timestamp")), alarms=alarms)


def _as_number(value, what: str) -> float:
    # JSON booleans are ints in Python; they are not prices.
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"{what} must be a number, got {value!r}")
    return float(value)


def _parse_timestamp(raw) -> dt.datetime | None:
    """Parse an ISO-8601 instant; accepts 'Z' suffixes and nanosecond fractions."""
    if raw is None:
        return None
    if not isinstance(raw, str):
        raise ValueError(f"'timestamp' must be a string, got {raw!r}")
    if not ISO_TIMESTAMP.match(raw):
        raise ValueError(f"'timestamp' is not an ISO-8601 instant: {raw!r}")
    return pd.Timestamp(raw).floor("us").to_pydatetime()


def load_portfolio(path) -> Portfolio:
    """Load the portfolio JSON, or return an empty portfolio if the file does not exist."""
    path = Path(path)
    try:
        raw = path.read_bytes()
    except FileNotFoundError:
        logger.info("Portfolio file not found, starting fresh: %s", path)
        return Portfolio()
    except OSError as e:
        raise StoreError(path, e.strerror or str(e)) from e

    logger.info("Loading portfolio: %s", path)
    try:
        return Portfolio.from_dict(json.loads(raw))
    except (ValueError, TypeError) as e:
        # JSONDecodeError, UnicodeDecodeError and OutOfBoundsDatetime are all ValueErrors.
        raise DecodeError(path, str(e)) from e


def save_portfolio(path, portfolio: Portfolio) -> None:
    """Stamp the save time and overwrite the portfolio file, creating the folder if needed."""
    path = Path(path)
    portfolio.timestamp = dt.datetime.now(dt.timezone.utc)
    payload = json.dumps(portfolio.to_dict(), indent=2)

    # Write a sibling file and rename it over the target.
    tmp = path.with_name(path.name + ".tmp")
    logger.info("Saving portfolio: %s", path)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with tmp.open("w", encoding="utf-8") as f:
            f.write(payload)
            f.write("\n")
        os.replace(tmp, path)
    except OSError as e:
        if tmp.exists():
            tmp.unlink()
        raise StoreError(path, e.strerror or str(e)) from e
