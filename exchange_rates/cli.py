"""Command line interface for the exchange rates client."""

from __future__ import annotations

import argparse
import asyncio
import json
import sys
from typing import Any, Sequence

from exchange_rates.client import ExchangeRatesClient, get_client
from exchange_rates.config import get_settings
from exchange_rates.core.logging import setup_logging
from exchange_rates.core.telemetry import setup_telemetry
from exchange_rates.currencies import CURRENCIES
from exchange_rates.errors import ExchangeRatesError
from exchange_rates.query import RateQuery


def _split_symbols(raw: str) -> list[str]:
    return [item.strip() for item in raw.split(",") if item.strip()]


def _build_query(args: argparse.Namespace) -> RateQuery:
    query = RateQuery()
    if args.base:
        query = query.with_base(args.base)
    if args.symbols:
        query = query.with_symbols(_split_symbols(args.symbols))
    if getattr(args, "at", None):
        query = query.at(args.at)
    if args.date_from:
        query = query.from_date(args.date_from)
    if args.date_to:
        query = query.to_date(args.date_to)
    return query


def _add_query_arguments(parser: argparse.ArgumentParser, *, single_date: bool = True) -> None:
    parser.add_argument("--base", help="Base currency, e.g. EUR")
    parser.add_argument("--symbols", help="Comma separated currencies, e.g. USD,GBP")
    if single_date:
        parser.add_argument("--at", help="Historical date (YYYY-MM-DD)")
    parser.add_argument("--from", dest="date_from", help="Start of a date range (YYYY-MM-DD)")
    parser.add_argument("--to", dest="date_to", help="End of a date range (YYYY-MM-DD)")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="exchange-rates", description="Query the exchange rates API")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    subparsers = parser.add_subparsers(dest="command", required=True)

    rates = subparsers.add_parser("rates", help="Fetch latest, historical or ranged rates")
    _add_query_arguments(rates)
    rates.add_argument("--url", action="store_true", help="Print the request URL instead of fetching")

    average = subparsers.add_parser("average", help="Average rates over a date range")
    _add_query_arguments(average, single_date=False)
    average.add_argument("--decimal-places", type=int, default=None)

    convert = subparsers.add_parser("convert", help="Convert an amount between two currencies")
    convert.add_argument("amount", type=float)
    convert.add_argument("from_currency")
    convert.add_argument("to_currency")
    convert.add_argument("--at", help="Use the rate of this date instead of the latest")

    subparsers.add_parser("currencies", help="List supported currency codes")
    return parser


async def _run(args: argparse.Namespace, client: ExchangeRatesClient) -> Any:
    if args.command == "currencies":
        return dict(CURRENCIES)
    if args.command == "convert":
        return await client.convert(args.amount, args.from_currency, args.to_currency, args.at)

    query = _build_query(args)
    if args.command == "average":
        return await client.average(query, args.decimal_places)
    if args.url:
        return client.url(query)
    return await client.fetch(query)


def main(argv: Sequence[str] | None = None, client: ExchangeRatesClient | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    settings = get_settings()
    # stdout carries the JSON result
    setup_logging("DEBUG" if args.verbose else settings.log_level, stream=sys.stderr)
    setup_telemetry(settings)

    client = client or get_client(settings)
    try:
        result = asyncio.run(_run(args, client))
    except ExchangeRatesError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1

    if isinstance(result, str):
        print(result)
    else:
        print(json.dumps(result, indent=2, ensure_ascii=False))
    return 0


if __name__ == "__main__":
    sys.exit(main())
