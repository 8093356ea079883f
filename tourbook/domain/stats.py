"""Pure functions for tour aggregation.

This module contains the functional core for reporting totals:
- No I/O operations
- No side effects
- Re-derived on every query from the live rate table

All amounts are in the home currency (Money type). Preparation items count
as expense whatever their status: they are budgeted cost, not cash spent.
"""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass

from tourbook.domain.currency import to_home_currency
from tourbook.domain.models import EntryType, ExchangeRate, Money, PrepStatus, Tour


@dataclass(frozen=True)
class TourStats:
    """Immutable income/expense/profit totals for a tour."""

    income: Money
    expense: Money
    profit: Money


@dataclass(frozen=True)
class PrepProgress:
    """Immutable completion counts for preparation items."""

    completed: int
    total: int

    @property
    def pending(self) -> int:
        return self.total - self.completed


def compute_tour_stats(tour: Tour, table: Mapping[str, ExchangeRate]) -> TourStats:
    """Compute income, expense and profit for a tour.

    Args:
        tour: Tour to summarise.
        table: Current rate table.

    Returns:
        TourStats in the home currency. The cached amount_home on entries is
        ignored so totals always follow the latest rates.
    """
    income = 0.0
    raw_expense = 0.0
    for entry in tour.entries:
        converted = to_home_currency(entry.amount, entry.currency, table)
        if entry.type is EntryType.INCOME:
            income += converted
        else:
            raw_expense += converted

    prep_cost = sum(to_home_currency(item.cost, item.currency, table) for item in tour.prep_items)
    expense = raw_expense + prep_cost

    return TourStats(
        income=Money(income),
        expense=Money(expense),
        profit=Money(income - expense),
    )


def compute_prep_progress(tour: Tour) -> PrepProgress:
    """Count completed preparation items."""
    completed = sum(1 for item in tour.prep_items if item.status is PrepStatus.COMPLETED)
    return PrepProgress(completed=completed, total=len(tour.prep_items))


def compute_totals(tours: Iterable[Tour], table: Mapping[str, ExchangeRate]) -> TourStats:
    """Sum the stats of several tours."""
    income = 0.0
    expense = 0.0
    for tour in tours:
        stats = compute_tour_stats(tour, table)
        income += stats.income
        expense += stats.expense

    return TourStats(income=Money(income), expense=Money(expense), profit=Money(income - expense))
