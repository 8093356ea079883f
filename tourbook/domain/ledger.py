"""Pure functions for tour ledger mutations.

This module contains the functional core for ledger operations:
- No I/O operations (no storage, no console, no network)
- No side effects: every function returns a new Tour
- Easy to test

Record ids come from the per-tour counters on Tour, never from the current
list length, so a deleted id is never reused.
"""

from collections.abc import Mapping
from dataclasses import replace

from tourbook.domain.currency import to_home_currency
from tourbook.domain.errors import RecordNotFoundError
from tourbook.domain.models import (
    Entry,
    EntryDraft,
    ExchangeRate,
    PrepDraft,
    PrepItem,
    PrepStatus,
    RecordKind,
    Tour,
)


def new_tour(tour_id: int, name: str, start_date: str) -> Tour:
    """Create an empty tour.

    Args:
        tour_id: Identifier assigned by the store.
        name: Tour name.
        start_date: Start date (YYYY-MM-DD).

    Returns:
        Tour with no entries or preparation items.
    """
    return Tour(id=tour_id, name=name, start_date=start_date)


def find_entry(tour: Tour, entry_id: int) -> Entry | None:
    """Find an entry of the tour by id."""
    for entry in tour.entries:
        if entry.id == entry_id:
            return entry
    return None


def find_prep_item(tour: Tour, item_id: int) -> PrepItem | None:
    """Find a preparation item of the tour by id."""
    for item in tour.prep_items:
        if item.id == item_id:
            return item
    return None


def apply_entry(
    tour: Tour,
    draft: EntryDraft,
    table: Mapping[str, ExchangeRate],
    editing_id: int | None = None,
) -> tuple[Tour, Entry]:
    """Insert a new entry or merge a draft into an existing one.

    Args:
        tour: Tour to mutate.
        draft: Validated entry fields.
        table: Rate table used for the cached home amount.
        editing_id: Id of the entry to update, or None to append a new one.

    Returns:
        Tuple of (new_tour, written_entry).

    Raises:
        RecordNotFoundError: If editing_id does not match any entry.
    """
    amount_home = float(to_home_currency(draft.amount, draft.currency, table))

    if editing_id is None:
        entry = Entry(
            id=tour.next_entry_id,
            description=draft.description,
            type=draft.type,
            amount=draft.amount,
            currency=draft.currency,
            date=draft.date,
            amount_home=amount_home,
        )
        return replace(tour, entries=[*tour.entries, entry], next_entry_id=tour.next_entry_id + 1), entry

    existing = find_entry(tour, editing_id)
    if existing is None:
        raise RecordNotFoundError(RecordKind.ENTRY.value, tour.id, editing_id)

    updated = replace(
        existing,
        description=draft.description,
        type=draft.type,
        amount=draft.amount,
        currency=draft.currency,
        date=draft.date,
        amount_home=amount_home,
    )
    entries = [updated if entry.id == editing_id else entry for entry in tour.entries]
    return replace(tour, entries=entries), updated


def remove_entry(tour: Tour, entry_id: int) -> Tour:
    """Remove an entry by id. Unknown ids leave the tour unchanged."""
    return replace(tour, entries=[entry for entry in tour.entries if entry.id != entry_id])


def apply_prep_item(tour: Tour, draft: PrepDraft, editing_id: int | None = None) -> tuple[Tour, PrepItem]:
    """Insert a new preparation item or merge a draft into an existing one.

    Args:
        tour: Tour to mutate.
        draft: Validated preparation item fields.
        editing_id: Id of the item to update, or None to append a new one.

    Returns:
        Tuple of (new_tour, written_item).

    Raises:
        RecordNotFoundError: If editing_id does not match any item.
    """
    if editing_id is None:
        item = PrepItem(
            id=tour.next_prep_id,
            category=draft.category,
            name=draft.name,
            status=draft.status,
            cost=draft.cost,
            currency=draft.currency,
            due_date=draft.due_date,
            notes=draft.notes,
        )
        return replace(tour, prep_items=[*tour.prep_items, item], next_prep_id=tour.next_prep_id + 1), item

    existing = find_prep_item(tour, editing_id)
    if existing is None:
        raise RecordNotFoundError(RecordKind.PREP.value, tour.id, editing_id)

    updated = replace(
        existing,
        category=draft.category,
        name=draft.name,
        status=draft.status,
        cost=draft.cost,
        currency=draft.currency,
        due_date=draft.due_date,
        notes=draft.notes,
    )
    items = [updated if item.id == editing_id else item for item in tour.prep_items]
    return replace(tour, prep_items=items), updated


def remove_prep_item(tour: Tour, item_id: int) -> Tour:
    """Remove a preparation item by id. Unknown ids leave the tour unchanged."""
    return replace(tour, prep_items=[item for item in tour.prep_items if item.id != item_id])


def set_prep_status(tour: Tour, item_id: int, status: PrepStatus) -> Tour:
    """Change the status of one preparation item.

    Raises:
        RecordNotFoundError: If item_id does not match any item.
    """
    if find_prep_item(tour, item_id) is None:
        raise RecordNotFoundError(RecordKind.PREP.value, tour.id, item_id)

    items = [replace(item, status=status) if item.id == item_id else item for item in tour.prep_items]
    return replace(tour, prep_items=items)


def reprice_entries(tour: Tour, table: Mapping[str, ExchangeRate]) -> Tour:
    """Recompute the cached home amount of every entry from the given table."""
    entries = [
        replace(entry, amount_home=float(to_home_currency(entry.amount, entry.currency, table)))
        for entry in tour.entries
    ]
    return replace(tour, entries=entries)


def sort_entries_by_date(entries: list[Entry], newest_first: bool = False) -> list[Entry]:
    """Sort entries for display. Stored order is left untouched."""
    return sorted(entries, key=lambda entry: (entry.date, entry.id), reverse=newest_first)


def sort_prep_items_by_due_date(items: list[PrepItem]) -> list[PrepItem]:
    """Sort preparation items by due date for display."""
    return sorted(items, key=lambda item: (item.due_date, item.id))


def replace_tour(tours: list[Tour], tour: Tour) -> list[Tour]:
    """Return a new tour list with the tour of the same id swapped in place."""
    return [tour if existing.id == tour.id else existing for existing in tours]
