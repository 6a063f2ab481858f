"""Async client for the exchange rates API."""

from __future__ import annotations

import json
import logging
from decimal import ROUND_HALF_UP, Decimal, localcontext
from numbers import Real
from typing import Any, Dict, List, Mapping, Optional, Union
from urllib.parse import quote

import httpx
from opentelemetry import trace

from .config import ExchangeRatesSettings, get_settings
from .dates import DateInput
from .errors import BadResponseError, FetchFailedError, InvalidArgumentError
from .query import RateQuery

logger = logging.getLogger(__name__)
tracer = trace.get_tracer(__name__)

Rates = Dict[str, Any]
RateResponse = Union[float, Dict[str, float], Dict[str, Union[float, Dict[str, float]]]]


def collapse(rates: Mapping[str, Any]) -> Any:
    """Unwrap a single-entry mapping to its value; return anything else as-is."""

    if len(rates) == 1:
        return next(iter(rates.values()))
    return dict(rates)


def round_half_away(value: float, decimal_places: int) -> float:
    exact = Decimal(repr(value))
    with localcontext() as ctx:
        # quantize needs room for every integer digit plus the requested places
        ctx.prec = max(ctx.prec, exact.adjusted() + decimal_places + 2)
        exponent = Decimal(1).scaleb(-decimal_places)
        return float(exact.quantize(exponent, rounding=ROUND_HALF_UP))


def average_rates(history: Mapping[str, Any], decimal_places: Optional[int] = None) -> Dict[str, float]:
    """Average each currency over the dates of a history payload.

    A currency missing from some dates is averaged over the dates it appears
    on. Entries that are not mappings are ignored.
    """

    merged: Dict[str, List[float]] = {}
    for day_rates in history.values():
        if not isinstance(day_rates, Mapping):
            continue
        for currency, rate in day_rates.items():
            merged.setdefault(currency, []).append(float(rate))

    averaged: Dict[str, float] = {}
    for currency, values in merged.items():
        mean = sum(values) / len(values)
        averaged[currency] = mean if decimal_places is None else round_half_away(mean, decimal_places)
    return averaged


def _mask_access_key(url: str, access_key: str | None) -> str:
    if not access_key:
        return url
    return url.replace(f"access_key={quote(access_key, safe='')}", "access_key=***")


class ExchangeRatesClient:
    """Fetch, average and convert exchange rates.

    ``client`` may be any object with an async ``get(url)`` returning an
    httpx-like response. When omitted, a fresh ``httpx.AsyncClient`` is opened
    for every request. An injected client is never closed here.
    """

    def __init__(
        self,
        api_url: str,
        access_key: str | None = None,
        *,
        timeout_seconds: float | None = None,
        client: Any | None = None,
    ) -> None:
        self.api_url = api_url.rstrip("/")
        self.access_key = access_key
        self.timeout_seconds = timeout_seconds
        self._client = client

    def url(self, query: RateQuery) -> str:
        """Return the URL ``query`` would be fetched from."""

        return query.build_url(self.api_url, self.access_key)

    async def fetch(self, query: RateQuery) -> RateResponse:
        """Fetch the rates for ``query``.

        A response holding a single rate is returned as a bare number.
        """

        rates = await self._fetch_rates(query)
        return collapse(rates)

    async def average(self, query: RateQuery, decimal_places: int | None = None) -> RateResponse:
        """Return the average of each rate over the selected date range.

        Queries that are not history requests are returned exactly as
        :meth:`fetch` would return them.
        """

        if decimal_places is not None:
            if isinstance(decimal_places, float) and decimal_places.is_integer():
                decimal_places = int(decimal_places)
            if isinstance(decimal_places, bool) or not isinstance(decimal_places, int):
                raise InvalidArgumentError("The decimal places parameter has to be an integer")
            if decimal_places < 0:
                raise InvalidArgumentError("Decimal places cannot be negative")

        rates = await self._fetch_rates(query)
        if not query.is_history:
            return collapse(rates)
        return collapse(average_rates(rates, decimal_places))

    async def convert(
        self,
        amount: float,
        from_currency: str,
        to_currency: str,
        day: DateInput | None = None,
    ) -> float:
        """Convert ``amount`` using the rate of ``day`` (latest when omitted)."""

        if isinstance(amount, bool) or not isinstance(amount, Real):
            raise InvalidArgumentError("The amount has to be a number")
        if not isinstance(to_currency, str):
            raise InvalidArgumentError("Cannot convert to multiple currencies at the same time")

        query = RateQuery().with_base(from_currency).with_symbols(to_currency)
        query = query.latest() if day is None else query.at(day)

        rate = await self.fetch(query)
        if isinstance(rate, Mapping):
            raise FetchFailedError(f"API did not return a single {to_currency.upper()} rate")
        return float(rate) * float(amount)

    async def _fetch_rates(self, query: RateQuery) -> Rates:
        url = self.url(query)
        with tracer.start_as_current_span("exchange_rates.fetch") as span:
            span.set_attribute("exchange_rates.history", query.is_history)
            logger.debug("Requesting %s", _mask_access_key(url, self.access_key))
            response = await self._get(url)
            span.set_attribute("http.status_code", response.status_code)

        if response.status_code != 200:
            raise BadResponseError(response.status_code, _error_field(response))

        try:
            payload = response.json()
        except ValueError as exc:
            raise FetchFailedError("API returned invalid JSON payload") from exc

        if not isinstance(payload, dict):
            raise FetchFailedError("API response is not a JSON object")
        if "error" in payload:
            raise FetchFailedError(json.dumps(payload["error"]))

        rates = payload.get("rates")
        if not isinstance(rates, dict):
            raise FetchFailedError("API response missing 'rates' field")
        return rates

    async def _get(self, url: str) -> Any:
        try:
            if self._client is not None:
                return await self._client.get(url)
            async with httpx.AsyncClient(**self._client_options()) as client:
                return await client.get(url)
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            raise FetchFailedError(str(exc) or exc.__class__.__name__) from exc

    def _client_options(self) -> dict[str, Any]:
        if self.timeout_seconds is None:
            return {}
        return {"timeout": self.timeout_seconds}


def _error_field(response: Any) -> Any:
    try:
        payload = response.json()
    except ValueError:
        return None
    if isinstance(payload, dict):
        return payload.get("error")
    return None


def get_client(settings: ExchangeRatesSettings | None = None, **kwargs: Any) -> ExchangeRatesClient:
    """Build a client from application settings."""

    settings = settings or get_settings()
    return ExchangeRatesClient(
        settings.api_url,
        settings.access_key,
        timeout_seconds=settings.http_timeout_seconds,
        **kwargs,
    )


__all__ = [
    "ExchangeRatesClient",
    "RateResponse",
    "average_rates",
    "collapse",
    "get_client",
    "round_half_away",
]
