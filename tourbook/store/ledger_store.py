"""Ledger store - the in-memory source of truth for tours.

A LedgerStore is constructed once per session, loaded explicitly and handed
to whatever presents it. Every mutation runs a pure function from
tourbook.domain.ledger and then snapshots the whole store to its slot.
Mutations cannot fail halfway; a failed snapshot write is logged and
otherwise ignored.
"""

from dataclasses import replace
from datetime import datetime
from pathlib import Path

from tourbook.domain.currency import default_rate_table
from tourbook.domain.errors import TourNotFoundError
from tourbook.domain.ledger import (
    apply_entry,
    apply_prep_item,
    new_tour,
    remove_entry,
    remove_prep_item,
    replace_tour,
    reprice_entries,
    set_prep_status,
)
from tourbook.domain.models import EntryDraft, PrepDraft, PrepStatus, RateTable, Tour
from tourbook.logging_utils import get_logger
from tourbook.store.persistence import LedgerSnapshot, load_snapshot, save_snapshot

logger = get_logger(__name__)

DEFAULT_STORAGE_KEY = "tours"


class LedgerStore:
    """Authoritative list of tours with create/update/delete operations."""

    def __init__(
        self,
        key: str = DEFAULT_STORAGE_KEY,
        data_dir: Path | None = None,
        rates: RateTable | None = None,
    ) -> None:
        self.key = key
        self.data_dir = data_dir
        self.rates: RateTable = rates if rates is not None else default_rate_table(datetime.now())
        self._tours: list[Tour] = []
        self._next_tour_id = 1
        self._current_tour_id: int | None = None

    @classmethod
    def open(
        cls,
        key: str = DEFAULT_STORAGE_KEY,
        data_dir: Path | None = None,
        rates: RateTable | None = None,
    ) -> "LedgerStore":
        """Construct a store and load its slot."""
        store = cls(key, data_dir, rates)
        store.load()
        return store

    # ---------- Lifecycle ----------

    def load(self) -> None:
        """Replace in-memory state with the stored snapshot, or start empty."""
        snapshot = load_snapshot(self.key, self.data_dir) or LedgerSnapshot()
        self._tours = list(snapshot.tours)
        self._next_tour_id = max(snapshot.next_tour_id, max((t.id for t in self._tours), default=0) + 1)
        known_ids = {t.id for t in self._tours}
        self._current_tour_id = snapshot.current_tour_id if snapshot.current_tour_id in known_ids else None
        logger.debug("Loaded %d tours from slot '%s'", len(self._tours), self.key)

    def save(self) -> bool:
        """Snapshot the whole store. Returns False if the write failed."""
        snapshot = LedgerSnapshot(
            tours=list(self._tours),
            next_tour_id=self._next_tour_id,
            current_tour_id=self._current_tour_id,
        )
        return save_snapshot(self.key, snapshot, self.data_dir)

    # ---------- Queries ----------

    @property
    def tours(self) -> list[Tour]:
        return list(self._tours)

    @property
    def current_tour(self) -> Tour | None:
        if self._current_tour_id is None:
            return None
        return self.find_tour(self._current_tour_id)

    def find_tour(self, tour_id: int) -> Tour | None:
        for tour in self._tours:
            if tour.id == tour_id:
                return tour
        return None

    def get_tour(self, tour_id: int) -> Tour:
        """Get a tour by id.

        Raises:
            TourNotFoundError: If no tour has that id.
        """
        tour = self.find_tour(tour_id)
        if tour is None:
            raise TourNotFoundError(tour_id)
        return tour

    # ---------- Tours ----------

    def create_tour(self, name: str, start_date: str) -> Tour:
        """Create a tour, persist, and make it the current tour."""
        tour = new_tour(self._next_tour_id, name, start_date)
        self._next_tour_id += 1
        self._tours = [*self._tours, tour]
        self._current_tour_id = tour.id
        logger.info("Created tour %d '%s'", tour.id, name)
        self.save()
        return tour

    def select_tour(self, tour_id: int) -> Tour:
        """Make a tour current."""
        tour = self.get_tour(tour_id)
        self._current_tour_id = tour.id
        self.save()
        return tour

    def rename_tour(self, tour_id: int, name: str, start_date: str | None = None) -> Tour:
        """Change a tour's name and optionally its start date."""
        tour = self.get_tour(tour_id)
        updated = replace(tour, name=name, start_date=start_date if start_date is not None else tour.start_date)
        return self._commit(updated)

    def delete_tour(self, tour_id: int) -> Tour:
        """Remove a tour with everything it owns. Its id is never reused."""
        tour = self.get_tour(tour_id)
        self._tours = [t for t in self._tours if t.id != tour_id]
        if self._current_tour_id == tour_id:
            self._current_tour_id = None
        logger.info("Deleted tour %d '%s'", tour.id, tour.name)
        self.save()
        return tour

    def clear(self) -> None:
        """Remove every tour. The tour id counter keeps counting."""
        self._tours = []
        self._current_tour_id = None
        logger.info("Cleared all tours")
        self.save()

    # ---------- Entries ----------

    def add_or_update_entry(self, tour_id: int, draft: EntryDraft, editing_id: int | None = None) -> Tour:
        """Append a new entry, or merge the draft into entry editing_id.

        Raises:
            TourNotFoundError: If no tour has that id.
            RecordNotFoundError: If editing_id does not match an entry.
        """
        tour, entry = apply_entry(self.get_tour(tour_id), draft, self.rates, editing_id)
        logger.debug("%s entry %d in tour %d", "Updated" if editing_id else "Added", entry.id, tour_id)
        return self._commit(tour)

    def delete_entry(self, tour_id: int, entry_id: int) -> Tour:
        """Remove an entry. Unknown entry ids are a no-op."""
        return self._commit(remove_entry(self.get_tour(tour_id), entry_id))

    # ---------- Preparation items ----------

    def add_or_update_prep_item(self, tour_id: int, draft: PrepDraft, editing_id: int | None = None) -> Tour:
        """Append a new preparation item, or merge the draft into item editing_id.

        Raises:
            TourNotFoundError: If no tour has that id.
            RecordNotFoundError: If editing_id does not match an item.
        """
        tour, item = apply_prep_item(self.get_tour(tour_id), draft, editing_id)
        logger.debug("%s prep item %d in tour %d", "Updated" if editing_id else "Added", item.id, tour_id)
        return self._commit(tour)

    def delete_prep_item(self, tour_id: int, item_id: int) -> Tour:
        """Remove a preparation item. Unknown item ids are a no-op."""
        return self._commit(remove_prep_item(self.get_tour(tour_id), item_id))

    def update_prep_item_status(self, tour_id: int, item_id: int, status: PrepStatus) -> Tour:
        """Mark a preparation item pending or completed."""
        return self._commit(set_prep_status(self.get_tour(tour_id), item_id, status))

    # ---------- Rates ----------

    def reprice(self, rates: RateTable) -> int:
        """Adopt a new rate table and refresh every cached entry amount.

        Returns:
            Number of entries repriced.
        """
        self.rates = rates
        self._tours = [reprice_entries(tour, rates) for tour in self._tours]
        count = sum(len(tour.entries) for tour in self._tours)
        logger.info("Repriced %d entries", count)
        self.save()
        return count

    def _commit(self, tour: Tour) -> Tour:
        """Swap the mutated tour in, make it current, and persist."""
        self._tours = replace_tour(self._tours, tour)
        self._current_tour_id = tour.id
        self.save()
        return tour
