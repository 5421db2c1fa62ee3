"""Configuration helpers for coinwatch (env/.env + defaults)."""

import logging
import os
from dataclasses import dataclass

from dotenv import load_dotenv


DEFAULT_PORTFOLIO_FILE = "portfolio.json"
DEFAULT_PRICE_API_URL = "https://api.binance.com/api/v3/ticker/price"
DEFAULT_LOG_LEVEL = "WARNING"


@dataclass
class Config:
    """Runtime settings used across the app."""

    portfolio_file: str = DEFAULT_PORTFOLIO_FILE
    price_api_url: str = DEFAULT_PRICE_API_URL

    @classmethod
    def from_env(cls) -> "Config":
        """Load config from .env/environment and fall back to defaults."""
        load_dotenv()

        return cls(
            portfolio_file=os.getenv("PORTFOLIO_FILE") or DEFAULT_PORTFOLIO_FILE,
            price_api_url=os.getenv("PRICE_API_URL") or DEFAULT_PRICE_API_URL,
        )


def setup_logging() -> None:
    """Configure console logging; results go to stdout, so keep it quiet by default."""
    level_name = os.getenv("LOG_LEVEL", DEFAULT_LOG_LEVEL).upper()
    level = getattr(logging, level_name, logging.WARNING)
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
