"""Exceptions raised by coinwatch."""


class CoinwatchError(Exception):
    """Base class for all coinwatch errors."""


class PortfolioFileError(CoinwatchError):
    """The portfolio file could not be read or written."""

    def __init__(self, path, message: str):
        super().__init__(f"{path}: {message}")
        self.path = path


class StoreError(PortfolioFileError):
    """Read or write failure other than a missing file."""


class DecodeError(PortfolioFileError):
    """The portfolio file exists but does not hold a valid record."""


class PriceError(CoinwatchError):
    """A price lookup for a single symbol failed."""

    def __init__(self, symbol: str, message: str):
        super().__init__(message)
        self.symbol = symbol


class NetworkError(PriceError):
    """Transport failure or HTTP error status from the price API."""


class ParseError(PriceError):
    """The price API answered, but without a usable price."""


class UsageError(CoinwatchError):
    """A command was given the wrong number of arguments."""

    def __init__(self, usage: str):
        super().__init__(f"Usage: {usage}")
        self.usage = usage


class ValidationError(CoinwatchError):
    """A command argument has the right count but an invalid value."""
