"""Error types raised by the exchange rates client."""

from __future__ import annotations

import json
from typing import Any


class ExchangeRatesError(RuntimeError):
    """Base class for every error raised by this package."""


class InvalidCurrencyError(ExchangeRatesError):
    """Raised when a currency code is not in the known currency table."""

    def __init__(self, currency: str) -> None:
        self.currency = currency
        super().__init__(f"{currency} is not a valid currency")


class InvalidArgumentError(ExchangeRatesError):
    """Raised when an argument has the wrong type or an out-of-range value."""


class InvalidDateRangeError(ExchangeRatesError):
    """Raised when a date range is requested without a concrete start date."""


class InvalidDateOrderError(ExchangeRatesError):
    """Raised when the start of a date range falls after its end."""


class UnsupportedHistoricalYearError(ExchangeRatesError):
    """Raised for dates earlier than the first year the API has data for."""


class FetchFailedError(ExchangeRatesError):
    """Raised when the rates could not be fetched or understood."""

    def __init__(self, detail: str) -> None:
        self.detail = detail
        super().__init__(f"Couldn't fetch the exchange rate, {detail}")


class BadResponseError(FetchFailedError):
    """Raised when the API answers with an HTTP status other than 200."""

    def __init__(self, status_code: int, error: Any = None) -> None:
        self.status_code = status_code
        self.error = error
        if error is None:
            detail = f"API returned a bad response (HTTP {status_code})"
        else:
            detail = json.dumps(error)
        super().__init__(detail)


__all__ = [
    "ExchangeRatesError",
    "InvalidCurrencyError",
    "InvalidArgumentError",
    "InvalidDateRangeError",
    "InvalidDateOrderError",
    "UnsupportedHistoricalYearError",
    "FetchFailedError",
    "BadResponseError",
]
