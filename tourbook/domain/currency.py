"""Pure functions for currency normalization.

This module contains the functional core for currency handling:
- No I/O operations (no network, no console, no files)
- No side effects
- Pure data transformations
- Easy to test

Every converted amount is in the home currency (TWD). No rounding happens
here; formatting is a presentation concern.
"""

import math
from collections.abc import Mapping
from datetime import datetime

from tourbook.domain.models import HOME_CURRENCY, Currency, ExchangeRate, Money, RateTable

DEFAULT_RATES: dict[str, float] = {
    Currency.TWD.value: 1.0,
    Currency.JPY.value: 0.21,
    Currency.USD.value: 31.5,
}


def currency_code(currency: Currency | str) -> str:
    """Return the plain currency code for an enum member or string."""
    if isinstance(currency, Currency):
        return currency.value
    return str(currency).upper()


def to_home_currency(amount: float, currency: Currency | str, table: Mapping[str, ExchangeRate]) -> Money:
    """Convert an amount in a source currency to the home currency.

    Args:
        amount: Amount in the source currency.
        currency: Source currency code.
        table: Current rate table.

    Returns:
        Amount in TWD. A currency missing from the table is not converted.
    """
    rate = table.get(currency_code(currency))
    multiplier = rate.rate if rate is not None else 1.0
    return Money(amount * multiplier)


def build_rate_table(rates: Mapping[str, float], updated_at: datetime) -> RateTable:
    """Build a rate table, pinning the home currency at 1.0.

    Args:
        rates: Mapping of currency code to multiplier into TWD.
        updated_at: Timestamp recorded on every rate.

    Returns:
        New rate table.

    Raises:
        ValueError: If any rate is not a positive finite number.
    """
    table: RateTable = {}
    for code, value in rates.items():
        rate = float(value)
        if not math.isfinite(rate) or rate <= 0:
            raise ValueError(f"Invalid rate for {code}: {value!r}")
        table[currency_code(code)] = ExchangeRate(currency=currency_code(code), rate=rate, last_updated=updated_at)

    home = HOME_CURRENCY.value
    table[home] = ExchangeRate(currency=home, rate=1.0, last_updated=updated_at)
    return table


def default_rate_table(updated_at: datetime, overrides: Mapping[str, float] | None = None) -> RateTable:
    """Build the fallback rate table used before any successful refresh."""
    rates = dict(DEFAULT_RATES)
    if overrides:
        rates.update({currency_code(code): value for code, value in overrides.items()})
    return build_rate_table(rates, updated_at)
