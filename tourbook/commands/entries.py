"""Entry commands (add, edit, delete, list)."""

import sys

from rich.table import Table

from tourbook.commands.common import (
    confirm_destructive,
    console,
    format_source,
    format_twd,
    open_store,
    resolve_tour,
)
from tourbook.dates import today_str
from tourbook.domain.currency import to_home_currency
from tourbook.domain.errors import RecordNotFoundError, TourNotFoundError
from tourbook.domain.ledger import find_entry, sort_entries_by_date
from tourbook.domain.models import EntryDraft, EntryType, RecordKind, Tour
from tourbook.domain.validation import EditState, validate_entry_draft
from tourbook.store.ledger_store import LedgerStore


def submit_entry_form(store: LedgerStore, tour_id: int, draft: EntryDraft, edit_state: EditState) -> Tour:
    """Send a validated entry form to the store and close the form.

    Args:
        store: Ledger store.
        tour_id: Tour the form belongs to.
        draft: Validated entry fields.
        edit_state: Create/update state of the form.

    Returns:
        Mutated tour.
    """
    tour = store.add_or_update_entry(tour_id, draft, edit_state.editing_id_for(RecordKind.ENTRY))
    edit_state.reset()
    return tour


def add_command(
    description: str,
    entry_type: str,
    amount: str,
    currency: str = "TWD",
    entry_date: str | None = None,
    tour_id: int | None = None,
) -> None:
    """Add an income or expense entry to a tour."""
    draft, error = validate_entry_draft(description, entry_type, amount, currency, entry_date or today_str())
    if error or draft is None:
        console.print(f"[red]{error}[/red]", style="bold")
        sys.exit(1)

    store = open_store()
    tour = resolve_tour(store, tour_id)

    edit_state = EditState()
    edit_state.begin_create(RecordKind.ENTRY)
    updated = submit_entry_form(store, tour.id, draft, edit_state)

    entry = updated.entries[-1]
    console.print(f"[green]✓[/green] Entry #{entry.id} added to {updated.name}:")
    console.print(f"  Date: {entry.date}")
    console.print(f"  Description: {entry.description}")
    console.print(f"  Type: {entry.type.value}")
    console.print(f"  Amount: {format_source(entry.amount, entry.currency.value)}")
    if entry.amount_home is not None:
        console.print(f"  [dim]≈ {format_twd(entry.amount_home)}[/dim]")


def edit_command(
    entry_id: int,
    description: str | None = None,
    entry_type: str | None = None,
    amount: str | None = None,
    currency: str | None = None,
    entry_date: str | None = None,
    tour_id: int | None = None,
) -> None:
    """Edit an entry; fields not given keep their current value."""
    store = open_store()
    tour = resolve_tour(store, tour_id)

    existing = find_entry(tour, entry_id)
    if existing is None:
        console.print(f"[red]No entry {entry_id} in tour {tour.name}[/red]", style="bold")
        sys.exit(1)

    edit_state = EditState()
    edit_state.begin_edit(RecordKind.ENTRY, existing.id)

    draft, error = validate_entry_draft(
        description if description is not None else existing.description,
        entry_type if entry_type is not None else existing.type,
        amount if amount is not None else existing.amount,
        currency if currency is not None else existing.currency,
        entry_date if entry_date is not None else existing.date,
    )
    if error or draft is None:
        console.print(f"[red]{error}[/red]", style="bold")
        sys.exit(1)

    try:
        updated = submit_entry_form(store, tour.id, draft, edit_state)
    except (TourNotFoundError, RecordNotFoundError) as e:
        console.print(f"[red]{e}[/red]", style="bold")
        sys.exit(1)

    entry = find_entry(updated, entry_id)
    if entry is not None:
        amount_display = format_source(entry.amount, entry.currency.value)
        console.print(f"[green]✓[/green] Entry #{entry.id} updated: {entry.description} {amount_display}")


def delete_command(entry_id: int, tour_id: int | None = None, yes: bool = False) -> None:
    """Delete an entry after confirmation."""
    store = open_store()
    tour = resolve_tour(store, tour_id)

    existing = find_entry(tour, entry_id)
    if existing is None:
        console.print(f"[yellow]No entry {entry_id} in tour {tour.name}, nothing to delete[/yellow]")
        return

    confirm_destructive(f"Delete entry #{existing.id} '{existing.description}'?", yes)

    store.delete_entry(tour.id, entry_id)
    console.print(f"[green]✓[/green] Deleted entry #{entry_id}")


def list_command(tour_id: int | None = None, oldest_first: bool = False) -> None:
    """List a tour's entries by date."""
    store = open_store()
    tour = resolve_tour(store, tour_id)

    if not tour.entries:
        console.print(f"[yellow]No entries in {tour.name}[/yellow]")
        return

    table = Table(title=f"{tour.name} - entries ({len(tour.entries)})")
    table.add_column("#", style="dim", justify="right")
    table.add_column("Date", style="cyan")
    table.add_column("Description", style="white")
    table.add_column("Amount", justify="right")
    table.add_column("TWD (live)", justify="right")

    income = 0.0
    expense = 0.0
    for entry in sort_entries_by_date(tour.entries, newest_first=not oldest_first):
        converted = to_home_currency(entry.amount, entry.currency, store.rates)
        if entry.type is EntryType.INCOME:
            income += converted
            amount_display = f"[green]+{format_source(entry.amount, entry.currency.value)}[/green]"
        else:
            expense += converted
            amount_display = f"[red]-{format_source(entry.amount, entry.currency.value)}[/red]"
        table.add_row(str(entry.id), entry.date, entry.description, amount_display, format_twd(converted))

    console.print(table)
    console.print(f"\n[bold]Income:[/bold] {format_twd(income)}  [bold]Expense:[/bold] {format_twd(expense)}")
    console.print("[dim]Preparation costs are added to expense in 'tourbook report'[/dim]")
