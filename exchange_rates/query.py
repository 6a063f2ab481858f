"""Immutable request configuration for the exchange rates API."""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import date
from typing import Iterable, Optional, Tuple, Union
from urllib.parse import quote

from .currencies import is_valid_currency
from .dates import EARLIEST_YEAR, DateInput, format_date, is_after, parse_date
from .errors import (
    InvalidArgumentError,
    InvalidCurrencyError,
    InvalidDateOrderError,
    InvalidDateRangeError,
    UnsupportedHistoricalYearError,
)


def normalize_currency(currency: object, *, what: str = "Currency") -> str:
    """Upper-case ``currency`` and make sure it is a known code."""

    if not isinstance(currency, str):
        raise InvalidArgumentError(f"{what} has to be a string")
    code = currency.upper()
    if not is_valid_currency(code):
        raise InvalidCurrencyError(code)
    return code


@dataclass(frozen=True)
class RateQuery:
    """What to ask the API for.

    Each builder method returns a new query, so a query can be shared and
    extended without affecting other call chains::

        query = RateQuery().with_base("usd").with_symbols(["EUR", "GBP"])
        history = query.from_date("2021-01-01").to_date("2021-01-31")

    ``start`` of ``None`` stands for the latest rates. Setting ``end`` turns
    the query into a history request.
    """

    base_currency: Optional[str] = None
    symbols: Optional[Tuple[str, ...]] = None
    start: Optional[date] = None
    end: Optional[date] = None

    # Builders

    def with_base(self, currency: str) -> "RateQuery":
        return replace(self, base_currency=normalize_currency(currency, what="Base currency"))

    def with_symbols(self, currencies: Union[str, Iterable[str]]) -> "RateQuery":
        """Limit the response to ``currencies`` (a single code or several)."""

        if isinstance(currencies, str):
            items = [currencies]
        else:
            try:
                items = list(currencies)
            except TypeError as exc:
                raise InvalidArgumentError("Symbol currencies have to be strings") from exc
        codes = tuple(normalize_currency(item, what="Symbol currencies") for item in items)
        return replace(self, symbols=codes)

    def latest(self) -> "RateQuery":
        return replace(self, start=None, end=None)

    def at(self, day: DateInput) -> "RateQuery":
        """Request the rates published on a single ``day``."""

        return replace(self, start=parse_date(day), end=None)

    def from_date(self, day: DateInput) -> "RateQuery":
        return replace(self, start=parse_date(day))

    def to_date(self, day: DateInput) -> "RateQuery":
        return replace(self, end=parse_date(day))

    # Inspection

    @property
    def is_history(self) -> bool:
        return self.end is not None

    def validate(self) -> None:
        """Raise the first broken rule, if any."""

        for day in (self.start, self.end):
            if day is not None and day.year < EARLIEST_YEAR:
                raise UnsupportedHistoricalYearError(
                    f"Cannot get historical rates before {EARLIEST_YEAR}"
                )

        if self.is_history:
            if self.start is None:
                raise InvalidDateRangeError(
                    "Cannot set the 'from' date to 'latest' when fetching a date range"
                )
            if is_after(self.start, self.end):
                raise InvalidDateOrderError("The 'from' date cannot be after the 'to' date")

    def build_url(self, base_url: str, access_key: str | None = None) -> str:
        """Validate the query and return the URL to request."""

        self.validate()
        params: list[str] = []

        if self.is_history:
            path = "history"
            params.append(f"start_at={format_date(self.start)}")
            params.append(f"end_at={format_date(self.end)}")
        elif self.start is None:
            path = "latest"
        else:
            path = format_date(self.start)

        if self.base_currency:
            params.append(f"base={quote(self.base_currency, safe='')}")
        if self.symbols:
            # The API expects a literal comma between symbols.
            params.append(f"symbols={','.join(self.symbols)}")
        if access_key:
            params.append(f"access_key={quote(access_key, safe='')}")

        url = f"{base_url.rstrip('/')}/{path}"
        if params:
            url += "?" + "&".join(params)
        return url


__all__ = ["RateQuery", "normalize_currency"]
