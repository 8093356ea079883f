"""Bank exchange rate API interactions."""

import math
from datetime import datetime
from typing import Any

import requests

from tourbook.domain.currency import build_rate_table
from tourbook.domain.models import Currency, RateTable

DEFAULT_TIMEOUT = 10.0


class RateParseError(ValueError):
    """Raised when a rate response does not have the expected shape."""


def fetch_rate_records(url: str, timeout: float = DEFAULT_TIMEOUT) -> list[dict[str, Any]]:
    """Fetch raw exchange rate records from the bank endpoint.

    Args:
        url: Endpoint returning a JSON list of {currency, buy, ...} records.
        timeout: Request timeout in seconds.

    Returns:
        List of record dictionaries.

    Raises:
        requests.RequestException: If API request fails.
        RateParseError: If the body is not a list of records.
    """
    headers = {"Accept": "application/json"}
    response = requests.get(url, headers=headers, timeout=timeout)
    response.raise_for_status()

    try:
        body = response.json()
    except ValueError as e:
        raise RateParseError(f"Response is not JSON: {e}") from e

    # Some mirrors wrap the list
    if isinstance(body, dict):
        body = body.get("data", body.get("rates"))
    if not isinstance(body, list):
        raise RateParseError("Expected a list of rate records")
    return [record for record in body if isinstance(record, dict)]


def find_buy_rate(records: list[dict[str, Any]], currency: str) -> float:
    """Find the buy rate for a currency by linear scan.

    Args:
        records: Raw rate records.
        currency: Currency code to look for.

    Returns:
        Positive finite buy rate.

    Raises:
        RateParseError: If the currency is missing or its buy rate is unusable.
    """
    for record in records:
        if str(record.get("currency", "")).strip().upper() != currency:
            continue
        raw = record.get("buy")
        if isinstance(raw, bool):
            raise RateParseError(f"Buy rate for {currency} is not numeric: {raw!r}")
        try:
            rate = float(raw)
        except (TypeError, ValueError) as e:
            raise RateParseError(f"Buy rate for {currency} is not numeric: {raw!r}") from e
        if not math.isfinite(rate) or rate <= 0:
            raise RateParseError(f"Buy rate for {currency} is out of range: {raw!r}")
        return rate

    raise RateParseError(f"No rate record for {currency}")


def parse_rate_records(records: list[dict[str, Any]], updated_at: datetime) -> RateTable:
    """Build a rate table from bank records.

    The bank quotes JPY per TWD, so the JPY multiplier is its inverse. USD
    is quoted as TWD per USD and used directly. TWD is pinned at 1.0.

    Args:
        records: Raw rate records.
        updated_at: Timestamp for the new table.

    Returns:
        Complete rate table.

    Raises:
        RateParseError: If any required currency is missing or invalid.
    """
    jpy_quote = find_buy_rate(records, Currency.JPY.value)
    usd_quote = find_buy_rate(records, Currency.USD.value)

    return build_rate_table(
        {
            Currency.JPY.value: 1 / jpy_quote,
            Currency.USD.value: usd_quote,
        },
        updated_at,
    )
