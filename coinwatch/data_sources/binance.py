"""Binance ticker price source."""

import logging
import math

import requests

from ..config import Config
from ..errors import NetworkError, ParseError

logger = logging.getLogger(__name__)


def parse_price(symbol: str, payload) -> float:
    """Pull the float price out of a ticker response like {"symbol": ..., "price": "123.45"}."""
    if not isinstance(payload, dict) or "price" not in payload:
        raise ParseError(symbol, f"no price in response: {payload!r}")
    raw = payload["price"]
    if not isinstance(raw, str):
        raise ParseError(symbol, f"price is not a numeric string: {raw!r}")
    try:
        price = float(raw)
    except ValueError as e:
        raise ParseError(symbol, f"invalid price {raw!r}") from e
    if not math.isfinite(price):
        raise ParseError(symbol, f"invalid price {raw!r}")
    return price


def fetch_price(symbol: str, cfg: Config) -> float:
    """Fetch the current price for a symbol. One request per call, no retry."""
    logger.debug("Fetching price for %s from %s", symbol, cfg.price_api_url)
    try:
        r = requests.get(cfg.price_api_url, params={"symbol": symbol})
        r.raise_for_status()
    except requests.RequestException as e:
        raise NetworkError(symbol, str(e)) from e

    try:
        payload = r.json()
    except ValueError as e:
        raise ParseError(symbol, f"response is not JSON: {e}") from e
    price = parse_price(symbol, payload)
    logger.debug("%s: %s", symbol, price)
    return price
