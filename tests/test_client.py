"""Exchange rates client tests."""

from __future__ import annotations

import httpx
import pytest

from exchange_rates import (
    BadResponseError,
    ExchangeRatesClient,
    FetchFailedError,
    InvalidArgumentError,
    InvalidDateOrderError,
    RateQuery,
)
from exchange_rates.client import average_rates, collapse, round_half_away

API = "https://api.example.test"

HISTORY = {
    "2021-01-01": {"USD": 1.0, "GBP": 0.8},
    "2021-01-02": {"USD": 1.2},
}


class StubResponse:
    def __init__(self, payload: object, status_code: int = 200) -> None:
        self._payload = payload
        self.status_code = status_code

    def json(self) -> object:
        if isinstance(self._payload, Exception):
            raise self._payload
        return self._payload


class StubClient:
    def __init__(self, payload: object = None, status_code: int = 200) -> None:
        self.payload = {"rates": {}} if payload is None else payload
        self.status_code = status_code
        self.calls: list[str] = []

    async def get(self, url: str) -> StubResponse:
        self.calls.append(url)
        return StubResponse(self.payload, self.status_code)


class FailingClient(StubClient):
    async def get(self, url: str) -> StubResponse:
        self.calls.append(url)
        raise httpx.ConnectError("connection refused")


class InvalidURLClient(StubClient):
    async def get(self, url: str) -> StubResponse:
        self.calls.append(url)
        raise httpx.InvalidURL("Invalid non-printable ASCII character in URL")


def make_client(stub: StubClient, access_key: str | None = None) -> ExchangeRatesClient:
    return ExchangeRatesClient(API, access_key, client=stub)


@pytest.mark.asyncio
async def test_single_rate_collapses_to_number():
    stub = StubClient({"rates": {"USD": 1.1}, "base": "EUR"})
    rate = await make_client(stub).fetch(RateQuery().with_symbols("USD"))
    assert rate == 1.1


@pytest.mark.asyncio
async def test_several_rates_return_mapping():
    stub = StubClient({"rates": {"USD": 1.1, "GBP": 0.9}})
    rates = await make_client(stub).fetch(RateQuery())
    assert rates == {"USD": 1.1, "GBP": 0.9}


@pytest.mark.asyncio
async def test_fetch_requests_built_url():
    stub = StubClient({"rates": {"USD": 1.1}})
    client = make_client(stub, access_key="key")
    query = RateQuery().with_base("EUR").with_symbols("USD").at("2020-01-02")
    await client.fetch(query)
    assert stub.calls == [f"{API}/2020-01-02?base=EUR&symbols=USD&access_key=key"]
    assert client.url(query) == stub.calls[0]


@pytest.mark.asyncio
async def test_invalid_query_never_reaches_network():
    stub = StubClient()
    with pytest.raises(InvalidDateOrderError):
        await make_client(stub).fetch(RateQuery().from_date("2020-02-01").to_date("2020-01-01"))
    assert stub.calls == []


@pytest.mark.asyncio
async def test_not_found_raises_bad_response():
    stub = StubClient({"detail": "missing"}, status_code=404)
    with pytest.raises(BadResponseError) as excinfo:
        await make_client(stub).fetch(RateQuery())
    assert excinfo.value.status_code == 404
    assert "HTTP 404" in str(excinfo.value)
    assert isinstance(excinfo.value, FetchFailedError)


@pytest.mark.asyncio
async def test_error_payload_is_embedded_in_message():
    stub = StubClient({"error": {"code": 101, "type": "missing_access_key"}}, status_code=401)
    with pytest.raises(FetchFailedError, match="missing_access_key"):
        await make_client(stub).fetch(RateQuery())


@pytest.mark.asyncio
async def test_error_payload_with_ok_status_fails():
    stub = StubClient({"error": "base 'XXX' is not supported."})
    with pytest.raises(FetchFailedError, match="not supported"):
        await make_client(stub).fetch(RateQuery())


@pytest.mark.asyncio
async def test_transport_failure_is_wrapped_without_retry():
    stub = FailingClient()
    with pytest.raises(FetchFailedError, match="connection refused"):
        await make_client(stub).fetch(RateQuery())
    assert len(stub.calls) == 1


@pytest.mark.asyncio
async def test_malformed_url_is_wrapped():
    with pytest.raises(FetchFailedError, match="non-printable"):
        await make_client(InvalidURLClient()).fetch(RateQuery())


@pytest.mark.asyncio
async def test_invalid_json_fails():
    stub = StubClient(ValueError("Expecting value"))
    with pytest.raises(FetchFailedError, match="invalid JSON"):
        await make_client(stub).fetch(RateQuery())


@pytest.mark.asyncio
async def test_missing_rates_field_fails():
    stub = StubClient({"base": "EUR"})
    with pytest.raises(FetchFailedError, match="rates"):
        await make_client(stub).fetch(RateQuery())


@pytest.mark.asyncio
async def test_average_over_history():
    stub = StubClient({"rates": HISTORY})
    query = RateQuery().from_date("2021-01-01").to_date("2021-01-02")
    result = await make_client(stub).average(query)
    assert list(result) == ["USD", "GBP"]
    assert result["USD"] == pytest.approx(1.1)
    assert result["GBP"] == pytest.approx(0.8)


@pytest.mark.asyncio
async def test_average_rounds_to_decimal_places():
    stub = StubClient({"rates": HISTORY})
    query = RateQuery().from_date("2021-01-01").to_date("2021-01-02")
    assert await make_client(stub).average(query, 0) == {"USD": 1, "GBP": 1}


@pytest.mark.asyncio
async def test_average_of_single_symbol_collapses():
    stub = StubClient({"rates": {"2021-01-01": {"USD": 1.0}, "2021-01-02": {"USD": 1.5}}})
    query = RateQuery().with_symbols("USD").from_date("2021-01-01").to_date("2021-01-02")
    assert await make_client(stub).average(query, 2) == 1.25


@pytest.mark.asyncio
async def test_average_of_one_day_range():
    stub = StubClient({"rates": {"2021-01-04": {"USD": 1.2, "GBP": 0.9}}})
    query = RateQuery().from_date("2021-01-04").to_date("2021-01-04")
    assert await make_client(stub).average(query) == {"USD": 1.2, "GBP": 0.9}


@pytest.mark.asyncio
async def test_average_without_range_returns_fetch_result():
    stub = StubClient({"rates": {"USD": 1.1}})
    assert await make_client(stub).average(RateQuery().with_symbols("USD"), 3) == 1.1


@pytest.mark.asyncio
@pytest.mark.parametrize("decimal_places", [-1, 1.5, "2", True])
async def test_average_rejects_bad_decimal_places(decimal_places):
    stub = StubClient()
    with pytest.raises(InvalidArgumentError):
        await make_client(stub).average(RateQuery(), decimal_places)
    assert stub.calls == []


@pytest.mark.asyncio
async def test_average_accepts_many_decimal_places():
    stub = StubClient({"rates": HISTORY})
    query = RateQuery().from_date("2021-01-01").to_date("2021-01-02")
    result = await make_client(stub).average(query, 30)
    assert result["USD"] == pytest.approx(1.1)
    assert result["GBP"] == pytest.approx(0.8)


@pytest.mark.asyncio
async def test_average_accepts_whole_float_decimal_places():
    stub = StubClient({"rates": {"2021-01-01": {"USD": 1.0}, "2021-01-02": {"USD": 1.25}}})
    query = RateQuery().from_date("2021-01-01").to_date("2021-01-02")
    assert await make_client(stub).average(query, 2.0) == 1.13


@pytest.mark.asyncio
async def test_convert_multiplies_single_rate():
    stub = StubClient({"rates": {"GBP": 0.5}})
    result = await make_client(stub).convert(10, "usd", "gbp", "2020-01-02")
    assert result == pytest.approx(5.0)
    assert stub.calls == [f"{API}/2020-01-02?base=USD&symbols=GBP"]


@pytest.mark.asyncio
async def test_convert_uses_latest_by_default():
    stub = StubClient({"rates": {"GBP": 0.5}})
    await make_client(stub).convert(1.5, "USD", "GBP")
    assert stub.calls == [f"{API}/latest?base=USD&symbols=GBP"]


@pytest.mark.asyncio
async def test_convert_rejects_multiple_targets_and_bad_amounts():
    client = make_client(StubClient())
    with pytest.raises(InvalidArgumentError):
        await client.convert(1, "USD", ["GBP", "EUR"])
    with pytest.raises(InvalidArgumentError):
        await client.convert("10", "USD", "GBP")


def test_collapse_rule():
    assert collapse({"USD": 1.1}) == 1.1
    assert collapse({"USD": 1.1, "GBP": 0.9}) == {"USD": 1.1, "GBP": 0.9}
    assert collapse({}) == {}


def test_partial_coverage_averages_over_present_dates():
    history = {
        "2021-01-01": {"USD": 1.0, "JPY": 120.0},
        "2021-01-02": {"USD": 2.0},
        "2021-01-03": {"USD": 3.0, "JPY": 130.0},
    }
    assert average_rates(history) == {"USD": 2.0, "JPY": 125.0}


def test_round_half_away_from_zero():
    assert round_half_away(0.5, 0) == 1.0
    assert round_half_away(2.5, 0) == 3.0
    assert round_half_away(-2.5, 0) == -3.0
    assert round_half_away(1.005, 2) == 1.01
    assert round_half_away(1.1, 30) == 1.1
    assert round_half_away(123456.5, 40) == 123456.5
