"""Date helpers used when building rate queries."""

from __future__ import annotations

from datetime import date, datetime
from typing import Union

from .errors import InvalidArgumentError

# The API has no reference rates before this year.
EARLIEST_YEAR = 1999

DateInput = Union[date, datetime, str]


def parse_date(value: DateInput) -> date:
    """Normalize ``value`` to a calendar date.

    Accepts ``date``/``datetime`` instances (the time part is dropped) and ISO
    formatted strings such as ``"2021-01-31"`` or ``"2021-01-31T10:00:00"``.
    """

    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        raw = value.strip()
        try:
            return date.fromisoformat(raw)
        except ValueError:
            pass
        try:
            return datetime.fromisoformat(raw).date()
        except ValueError as exc:
            raise InvalidArgumentError(f"'{value}' is not a valid ISO date") from exc
    raise InvalidArgumentError(f"Expected a date or an ISO date string, got {type(value).__name__}")


def format_date(value: date) -> str:
    """Return ``value`` as ``YYYY-MM-DD``."""

    return value.isoformat()


def is_after(first: date, second: date) -> bool:
    return first > second


__all__ = ["EARLIEST_YEAR", "DateInput", "parse_date", "format_date", "is_after"]
