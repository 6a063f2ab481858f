"""Client for the exchangeratesapi.io family of currency rate APIs."""

from .client import ExchangeRatesClient, get_client
from .config import ExchangeRatesSettings, get_settings
from .currencies import CURRENCIES
from .errors import (
    BadResponseError,
    ExchangeRatesError,
    FetchFailedError,
    InvalidArgumentError,
    InvalidCurrencyError,
    InvalidDateOrderError,
    InvalidDateRangeError,
    UnsupportedHistoricalYearError,
)
from .query import RateQuery

__all__ = [
    "CURRENCIES",
    "ExchangeRatesClient",
    "ExchangeRatesSettings",
    "RateQuery",
    "get_client",
    "get_settings",
    "ExchangeRatesError",
    "InvalidCurrencyError",
    "InvalidArgumentError",
    "InvalidDateRangeError",
    "InvalidDateOrderError",
    "UnsupportedHistoricalYearError",
    "FetchFailedError",
    "BadResponseError",
]
