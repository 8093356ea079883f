"""Preparation item commands (add, edit, delete, status, list)."""

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
from tourbook.domain.ledger import find_prep_item, sort_prep_items_by_due_date
from tourbook.domain.models import PrepDraft, PrepStatus, RecordKind, Tour
from tourbook.domain.stats import compute_prep_progress
from tourbook.domain.validation import EditState, parse_choice, validate_prep_draft
from tourbook.store.ledger_store import LedgerStore


def submit_prep_form(store: LedgerStore, tour_id: int, draft: PrepDraft, edit_state: EditState) -> Tour:
    """Send a validated preparation item form to the store and close the form."""
    tour = store.add_or_update_prep_item(tour_id, draft, edit_state.editing_id_for(RecordKind.PREP))
    edit_state.reset()
    return tour


def add_command(
    category: str,
    name: str,
    cost: str,
    currency: str = "TWD",
    due_date: str | None = None,
    status: str = "pending",
    notes: str | None = None,
    tour_id: int | None = None,
) -> None:
    """Add a preparation item to a tour."""
    draft, error = validate_prep_draft(category, name, cost, currency, due_date or today_str(), status, notes)
    if error or draft is None:
        console.print(f"[red]{error}[/red]", style="bold")
        sys.exit(1)

    store = open_store()
    tour = resolve_tour(store, tour_id)

    edit_state = EditState()
    edit_state.begin_create(RecordKind.PREP)
    updated = submit_prep_form(store, tour.id, draft, edit_state)

    item = updated.prep_items[-1]
    console.print(f"[green]✓[/green] Preparation item #{item.id} added to {updated.name}:")
    console.print(f"  {item.category.value}: {item.name}")
    console.print(f"  Cost: {format_source(item.cost, item.currency.value)}")
    console.print(f"  Due: {item.due_date} ({item.status.value})")


def edit_command(
    item_id: int,
    category: str | None = None,
    name: str | None = None,
    cost: str | None = None,
    currency: str | None = None,
    due_date: str | None = None,
    status: str | None = None,
    notes: str | None = None,
    tour_id: int | None = None,
) -> None:
    """Edit a preparation item; fields not given keep their current value."""
    store = open_store()
    tour = resolve_tour(store, tour_id)

    existing = find_prep_item(tour, item_id)
    if existing is None:
        console.print(f"[red]No preparation item {item_id} in tour {tour.name}[/red]", style="bold")
        sys.exit(1)

    edit_state = EditState()
    edit_state.begin_edit(RecordKind.PREP, existing.id)

    draft, error = validate_prep_draft(
        category if category is not None else existing.category,
        name if name is not None else existing.name,
        cost if cost is not None else existing.cost,
        currency if currency is not None else existing.currency,
        due_date if due_date is not None else existing.due_date,
        status if status is not None else existing.status,
        notes if notes is not None else existing.notes,
    )
    if error or draft is None:
        console.print(f"[red]{error}[/red]", style="bold")
        sys.exit(1)

    try:
        submit_prep_form(store, tour.id, draft, edit_state)
    except (TourNotFoundError, RecordNotFoundError) as e:
        console.print(f"[red]{e}[/red]", style="bold")
        sys.exit(1)

    console.print(f"[green]✓[/green] Preparation item #{item_id} updated: {draft.name}")


def status_command(item_id: int, status: str, tour_id: int | None = None) -> None:
    """Mark a preparation item pending or completed."""
    parsed = parse_choice(PrepStatus, status)
    if parsed is None:
        console.print(f"[red]Status must be one of: {', '.join(s.value for s in PrepStatus)}[/red]", style="bold")
        sys.exit(1)

    store = open_store()
    tour = resolve_tour(store, tour_id)

    try:
        updated = store.update_prep_item_status(tour.id, item_id, parsed)
    except RecordNotFoundError as e:
        console.print(f"[red]{e}[/red]", style="bold")
        sys.exit(1)

    progress = compute_prep_progress(updated)
    console.print(f"[green]✓[/green] Item #{item_id} is now {parsed.value}")
    console.print(f"[dim]{progress.completed}/{progress.total} preparation items completed[/dim]")


def delete_command(item_id: int, tour_id: int | None = None, yes: bool = False) -> None:
    """Delete a preparation item after confirmation."""
    store = open_store()
    tour = resolve_tour(store, tour_id)

    existing = find_prep_item(tour, item_id)
    if existing is None:
        console.print(f"[yellow]No preparation item {item_id} in tour {tour.name}, nothing to delete[/yellow]")
        return

    confirm_destructive(f"Delete preparation item #{existing.id} '{existing.name}'?", yes)

    store.delete_prep_item(tour.id, item_id)
    console.print(f"[green]✓[/green] Deleted preparation item #{item_id}")


def list_command(tour_id: int | None = None, pending_only: bool = False) -> None:
    """List a tour's preparation items by due date."""
    store = open_store()
    tour = resolve_tour(store, tour_id)

    items = sort_prep_items_by_due_date(tour.prep_items)
    if pending_only:
        items = [item for item in items if item.status is PrepStatus.PENDING]

    if not items:
        console.print(f"[yellow]No preparation items in {tour.name}[/yellow]")
        return

    progress = compute_prep_progress(tour)
    table = Table(title=f"{tour.name} - preparation ({progress.completed}/{progress.total} completed)")
    table.add_column("#", style="dim", justify="right")
    table.add_column("Due", style="cyan")
    table.add_column("Category", style="magenta")
    table.add_column("Name", style="white")
    table.add_column("Cost", justify="right")
    table.add_column("TWD", justify="right")
    table.add_column("Status", justify="center")
    table.add_column("Notes", style="dim")

    total = 0.0
    for item in items:
        converted = to_home_currency(item.cost, item.currency, store.rates)
        total += converted
        status = "[green]✓[/green]" if item.status is PrepStatus.COMPLETED else "○"
        table.add_row(
            str(item.id),
            item.due_date,
            item.category.value,
            item.name,
            format_source(item.cost, item.currency.value),
            format_twd(converted),
            status,
            item.notes or "-",
        )

    console.print(table)
    console.print(f"\n[bold]Budgeted:[/bold] {format_twd(total)}")
