"""Portfolio operations: coin/alarm mutations and live price checks."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Optional

from .errors import PriceError, ValidationError
from .portfolio import Coin, Portfolio

logger = logging.getLogger(__name__)

PriceFetcher = Callable[[str], float]


@dataclass
class PriceQuote:
    """Live price for one coin, or the reason it could not be fetched."""

    symbol: str
    price: Optional[float] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass
class AlarmCheck:
    """Outcome of comparing one alarm threshold with the live price."""

    symbol: str
    threshold: float
    current_price: Optional[float] = None
    error: Optional[str] = None

    @property
    def triggered(self) -> bool:
        return self.current_price is not None and self.current_price >= self.threshold


def add_coin(portfolio: Portfolio, symbol: str) -> bool:
    """Append a coin with no price. False if the symbol is already tracked."""
    if not symbol.strip():
        raise ValidationError("symbol must not be blank")
    if symbol in portfolio.symbols():
        logger.info("%s: already in portfolio", symbol)
        return False
    portfolio.coins.append(Coin(symbol=symbol))
    logger.info("%s: added", symbol)
    return True


def remove_coin(portfolio: Portfolio, symbol: str) -> bool:
    """Remove the coin with this symbol. False if it is not tracked."""
    for i, coin in enumerate(portfolio.coins):
        if coin.symbol == symbol:
            del portfolio.coins[i]
            logger.info("%s: removed", symbol)
            return True
    logger.info("%s: not in portfolio", symbol)
    return False


def set_alarm(portfolio: Portfolio, symbol: str, price: float) -> None:
    """Set or overwrite the alarm threshold for a symbol."""
    if portfolio.alarms is None:
        portfolio.alarms = {}
    portfolio.alarms[symbol] = float(price)
    logger.info("%s: alarm set at %s", symbol, price)


def list_coins(portfolio: Portfolio, fetch: PriceFetcher) -> list[PriceQuote]:
    """
    Fetch a live price for every coin, in portfolio order.
    A failed fetch yields a quote with an error and the listing carries on.
    Prices are not written back to the coins.
    """
    quotes = []
    for coin in portfolio.coins:
        try:
            quotes.append(PriceQuote(coin.symbol, price=fetch(coin.symbol)))
        except PriceError as e:
            logger.info("%s: price fetch failed: %s", coin.symbol, e)
            quotes.append(PriceQuote(coin.symbol, error=str(e)))
    return quotes


def check_alarms(portfolio: Portfolio, fetch: PriceFetcher) -> list[AlarmCheck]:
    """
    Compare each alarm with the live price, in symbol order.
    An alarm triggers when the current price is at or above its threshold.
    """
    results = []
    for symbol, threshold in sorted((portfolio.alarms or {}).items()):
        try:
            current = fetch(symbol)
        except PriceError as e:
            logger.info("%s: price fetch failed: %s", symbol, e)
            results.append(AlarmCheck(symbol, threshold, error=str(e)))
            continue
        check = AlarmCheck(symbol, threshold, current_price=current)
        if check.triggered:
            logger.info("%s: alarm triggered (%s >= %s)", symbol, current, threshold)
        results.append(check)
    return results
