"""Tests for tourbook.domain.stats pure functions."""

from datetime import datetime

import pytest

from tourbook.domain.currency import build_rate_table
from tourbook.domain.models import (
    Currency,
    Entry,
    EntryType,
    PrepCategory,
    PrepItem,
    PrepStatus,
    RateTable,
    Tour,
)
from tourbook.domain.stats import compute_prep_progress, compute_totals, compute_tour_stats


def make_entry(entry_id: int, entry_type: EntryType, amount: float, currency: Currency = Currency.TWD) -> Entry:
    return Entry(
        id=entry_id,
        description=f"entry {entry_id}",
        type=entry_type,
        amount=amount,
        currency=currency,
        date="2024-05-01",
    )


def make_prep(
    item_id: int,
    cost: float,
    currency: Currency = Currency.TWD,
    status: PrepStatus = PrepStatus.PENDING,
) -> PrepItem:
    return PrepItem(
        id=item_id,
        category=PrepCategory.HOTEL,
        name=f"item {item_id}",
        status=status,
        cost=cost,
        currency=currency,
        due_date="2024-04-01",
    )


class TestComputeTourStats:
    """Tests for compute_tour_stats."""

    def test_empty_tour(self, rates: RateTable) -> None:
        """Should return zeros for a tour without records."""
        stats = compute_tour_stats(Tour(id=1, name="Empty", start_date="2024-05-01"), rates)
        assert (stats.income, stats.expense, stats.profit) == (0, 0, 0)

    def test_home_currency_entries(self, rates: RateTable) -> None:
        """Should sum TWD income and expense directly."""
        tour = Tour(
            id=1,
            name="Taipei",
            start_date="2024-05-01",
            entries=[make_entry(1, EntryType.INCOME, 1000), make_entry(2, EntryType.EXPENSE, 400)],
        )

        stats = compute_tour_stats(tour, rates)

        assert stats.income == 1000
        assert stats.expense == 400
        assert stats.profit == 600

    def test_prep_items_count_as_expense(self, rates: RateTable) -> None:
        """Should add pending preparation costs to expense after conversion."""
        tour = Tour(
            id=1,
            name="New York",
            start_date="2024-05-01",
            entries=[make_entry(1, EntryType.EXPENSE, 100, Currency.USD)],
            prep_items=[make_prep(1, 50, Currency.USD)],
        )

        stats = compute_tour_stats(tour, rates)

        assert stats.income == 0
        assert stats.expense == pytest.approx(4725.0)
        assert stats.profit == pytest.approx(-4725.0)

    def test_completed_prep_items_still_expense(self, rates: RateTable) -> None:
        """Should count preparation items whatever their status."""
        tour = Tour(
            id=1,
            name="Osaka",
            start_date="2024-05-01",
            prep_items=[
                make_prep(1, 1000, Currency.JPY, PrepStatus.COMPLETED),
                make_prep(2, 1000, Currency.JPY, PrepStatus.PENDING),
            ],
        )

        assert compute_tour_stats(tour, rates).expense == pytest.approx(400.0)

    def test_ignores_cached_home_amount(self, rates: RateTable) -> None:
        """Should convert with the live table, not the cached amount."""
        stale = Entry(
            id=1,
            description="Stale",
            type=EntryType.INCOME,
            amount=10,
            currency=Currency.USD,
            date="2024-05-01",
            amount_home=999.0,
        )
        tour = Tour(id=1, name="Stale", start_date="2024-05-01", entries=[stale])

        assert compute_tour_stats(tour, rates).income == pytest.approx(315.0)

    def test_follows_rate_changes(self, rates: RateTable) -> None:
        """Should reflect a new rate table immediately."""
        tour = Tour(
            id=1,
            name="Rates",
            start_date="2024-05-01",
            entries=[make_entry(1, EntryType.INCOME, 10, Currency.USD)],
        )
        newer = build_rate_table({"USD": 30.0}, datetime(2024, 5, 2))

        assert compute_tour_stats(tour, rates).income == pytest.approx(315.0)
        assert compute_tour_stats(tour, newer).income == pytest.approx(300.0)

    def test_idempotent(self, rates: RateTable) -> None:
        """Should return the same result for repeated calls."""
        tour = Tour(
            id=1,
            name="Repeat",
            start_date="2024-05-01",
            entries=[make_entry(1, EntryType.INCOME, 3, Currency.JPY)],
            prep_items=[make_prep(1, 7, Currency.USD)],
        )

        assert compute_tour_stats(tour, rates) == compute_tour_stats(tour, rates)

    def test_profit_is_income_minus_expense(self, rates: RateTable) -> None:
        tour = Tour(
            id=1,
            name="Mixed",
            start_date="2024-05-01",
            entries=[
                make_entry(1, EntryType.INCOME, 250, Currency.USD),
                make_entry(2, EntryType.EXPENSE, 12000, Currency.JPY),
            ],
            prep_items=[make_prep(1, 3000)],
        )

        stats = compute_tour_stats(tour, rates)

        assert stats.profit == pytest.approx(stats.income - stats.expense)


class TestComputePrepProgress:
    """Tests for compute_prep_progress."""

    def test_counts_completed(self) -> None:
        tour = Tour(
            id=1,
            name="Progress",
            start_date="2024-05-01",
            prep_items=[
                make_prep(1, 0, status=PrepStatus.COMPLETED),
                make_prep(2, 0),
                make_prep(3, 0),
            ],
        )

        progress = compute_prep_progress(tour)

        assert progress.completed == 1
        assert progress.total == 3
        assert progress.pending == 2


class TestComputeTotals:
    """Tests for compute_totals."""

    def test_sums_tours(self, rates: RateTable) -> None:
        """Should add income and expense across tours."""
        first = Tour(id=1, name="A", start_date="2024-05-01", entries=[make_entry(1, EntryType.INCOME, 1000)])
        second = Tour(id=2, name="B", start_date="2024-06-01", entries=[make_entry(1, EntryType.EXPENSE, 300)])

        totals = compute_totals([first, second], rates)

        assert totals.income == 1000
        assert totals.expense == 300
        assert totals.profit == 700

    def test_no_tours(self, rates: RateTable) -> None:
        totals = compute_totals([], rates)
        assert (totals.income, totals.expense, totals.profit) == (0, 0, 0)
