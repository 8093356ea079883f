"""Tests for tourbook.store.ledger_store.LedgerStore."""

from datetime import datetime
from pathlib import Path

import pytest

from tourbook.domain.currency import build_rate_table
from tourbook.domain.errors import RecordNotFoundError, TourNotFoundError
from tourbook.domain.models import (
    Currency,
    EntryDraft,
    EntryType,
    PrepCategory,
    PrepDraft,
    PrepStatus,
    RateTable,
)
from tourbook.store.ledger_store import LedgerStore


def expense(description: str, amount: float, currency: Currency = Currency.TWD) -> EntryDraft:
    return EntryDraft(
        description=description,
        type=EntryType.EXPENSE,
        amount=amount,
        currency=currency,
        date="2024-05-02",
    )


def hotel(name: str = "Hotel", cost: float = 10000.0) -> PrepDraft:
    return PrepDraft(
        category=PrepCategory.HOTEL,
        name=name,
        cost=cost,
        currency=Currency.JPY,
        due_date="2024-04-15",
    )


@pytest.fixture
def data_dir(tmp_path: Path) -> Path:
    return tmp_path / "ledger"


@pytest.fixture
def store(data_dir: Path, rates: RateTable) -> LedgerStore:
    return LedgerStore.open("tours", data_dir, rates)


class TestLifecycle:
    """Tests for load and save."""

    def test_starts_empty(self, store: LedgerStore) -> None:
        assert store.tours == []
        assert store.current_tour is None

    def test_persists_across_sessions(self, store: LedgerStore, data_dir: Path, rates: RateTable) -> None:
        """Should reload tours, records and the current tour from the slot."""
        tour = store.create_tour("Tokyo", "2024-05-01")
        store.add_or_update_entry(tour.id, expense("Taxi", 3000, Currency.JPY))

        reopened = LedgerStore.open("tours", data_dir, rates)

        assert reopened.tours == store.tours
        assert reopened.current_tour is not None
        assert reopened.current_tour.id == tour.id

    def test_write_failure_keeps_memory_state(self, tmp_path: Path, rates: RateTable) -> None:
        """Should keep in-memory changes when the snapshot cannot be written."""
        blocker = tmp_path / "blocker"
        blocker.write_text("not a directory")
        store = LedgerStore("tours", blocker, rates)

        tour = store.create_tour("Offline", "2024-05-01")

        assert store.save() is False
        assert store.get_tour(tour.id).name == "Offline"


class TestTours:
    """Tests for tour operations."""

    def test_create_assigns_unique_ids(self, store: LedgerStore) -> None:
        first = store.create_tour("A", "2024-05-01")
        second = store.create_tour("B", "2024-06-01")

        assert (first.id, second.id) == (1, 2)
        assert store.current_tour == second

    def test_tour_ids_not_reused(self, store: LedgerStore, data_dir: Path, rates: RateTable) -> None:
        """Should keep counting after a delete, even across reloads."""
        store.create_tour("A", "2024-05-01")
        second = store.create_tour("B", "2024-06-01")
        store.delete_tour(second.id)

        reopened = LedgerStore.open("tours", data_dir, rates)
        third = reopened.create_tour("C", "2024-07-01")

        assert third.id == 3

    def test_select_tour(self, store: LedgerStore) -> None:
        first = store.create_tour("A", "2024-05-01")
        store.create_tour("B", "2024-06-01")

        store.select_tour(first.id)

        assert store.current_tour == first

    def test_select_unknown_tour_raises(self, store: LedgerStore) -> None:
        with pytest.raises(TourNotFoundError):
            store.select_tour(9)

    def test_rename_keeps_records(self, store: LedgerStore) -> None:
        tour = store.create_tour("Old", "2024-05-01")
        store.add_or_update_entry(tour.id, expense("Taxi", 500))

        renamed = store.rename_tour(tour.id, "New")

        assert renamed.name == "New"
        assert renamed.start_date == "2024-05-01"
        assert len(renamed.entries) == 1

    def test_delete_tour_clears_current(self, store: LedgerStore) -> None:
        tour = store.create_tour("Gone", "2024-05-01")

        store.delete_tour(tour.id)

        assert store.tours == []
        assert store.current_tour is None

    def test_delete_unknown_tour_raises(self, store: LedgerStore) -> None:
        with pytest.raises(TourNotFoundError):
            store.delete_tour(1)

    def test_clear(self, store: LedgerStore) -> None:
        store.create_tour("A", "2024-05-01")
        store.create_tour("B", "2024-06-01")

        store.clear()

        assert store.tours == []
        assert store.create_tour("C", "2024-07-01").id == 3


class TestEntries:
    """Tests for entry operations."""

    def test_add_caches_home_amount(self, store: LedgerStore) -> None:
        tour = store.create_tour("Trip", "2024-05-01")

        updated = store.add_or_update_entry(tour.id, expense("Souvenir", 20, Currency.USD))

        assert updated.entries[0].amount_home == pytest.approx(630.0)

    def test_edit_only_touches_target(self, store: LedgerStore) -> None:
        """Should update one entry in place and leave siblings untouched."""
        tour = store.create_tour("Trip", "2024-05-01")
        store.add_or_update_entry(tour.id, expense("A", 1))
        store.add_or_update_entry(tour.id, expense("B", 2))
        tour = store.add_or_update_entry(tour.id, expense("C", 3))
        siblings = (tour.entries[0], tour.entries[2])

        tour = store.add_or_update_entry(tour.id, expense("B2", 20), editing_id=2)

        assert [e.description for e in tour.entries] == ["A", "B2", "C"]
        assert (tour.entries[0], tour.entries[2]) == siblings

    def test_edit_unknown_entry_raises(self, store: LedgerStore) -> None:
        tour = store.create_tour("Trip", "2024-05-01")
        with pytest.raises(RecordNotFoundError):
            store.add_or_update_entry(tour.id, expense("X", 1), editing_id=4)

    def test_delete_unknown_entry_is_noop(self, store: LedgerStore) -> None:
        """Should leave the entry list unchanged without raising."""
        tour = store.create_tour("Trip", "2024-05-01")
        tour = store.add_or_update_entry(tour.id, expense("A", 1))

        after = store.delete_entry(tour.id, 99)

        assert after.entries == tour.entries

    def test_add_to_unknown_tour_raises(self, store: LedgerStore) -> None:
        with pytest.raises(TourNotFoundError):
            store.add_or_update_entry(5, expense("A", 1))

    def test_entry_ids_are_per_tour(self, store: LedgerStore) -> None:
        first = store.create_tour("A", "2024-05-01")
        second = store.create_tour("B", "2024-06-01")

        first = store.add_or_update_entry(first.id, expense("x", 1))
        second = store.add_or_update_entry(second.id, expense("y", 1))

        assert first.entries[0].id == second.entries[0].id == 1


class TestPrepItems:
    """Tests for preparation item operations."""

    def test_add_and_status(self, store: LedgerStore) -> None:
        tour = store.create_tour("Trip", "2024-05-01")
        tour = store.add_or_update_prep_item(tour.id, hotel())

        tour = store.update_prep_item_status(tour.id, tour.prep_items[0].id, PrepStatus.COMPLETED)

        assert tour.prep_items[0].status is PrepStatus.COMPLETED

    def test_delete_prep_item(self, store: LedgerStore) -> None:
        tour = store.create_tour("Trip", "2024-05-01")
        store.add_or_update_prep_item(tour.id, hotel("First"))
        tour = store.add_or_update_prep_item(tour.id, hotel("Second"))

        tour = store.delete_prep_item(tour.id, 1)

        assert [i.name for i in tour.prep_items] == ["Second"]

    def test_status_unknown_item_raises(self, store: LedgerStore) -> None:
        tour = store.create_tour("Trip", "2024-05-01")
        with pytest.raises(RecordNotFoundError):
            store.update_prep_item_status(tour.id, 1, PrepStatus.COMPLETED)


class TestReprice:
    """Tests for reprice."""

    def test_reprices_cached_amounts(self, store: LedgerStore, data_dir: Path, rates: RateTable) -> None:
        """Should adopt the new table and persist refreshed cached amounts."""
        tour = store.create_tour("Trip", "2024-05-01")
        store.add_or_update_entry(tour.id, expense("Ticket", 10, Currency.USD))
        newer = build_rate_table({"USD": 30.0, "JPY": 0.2}, datetime(2024, 5, 2))

        count = store.reprice(newer)

        assert count == 1
        assert store.rates is newer
        reopened = LedgerStore.open("tours", data_dir, newer)
        assert reopened.get_tour(tour.id).entries[0].amount_home == pytest.approx(300.0)
