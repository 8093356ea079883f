"""Tour commands (create, list, show, select, rename, delete)."""

import sys

from rich.table import Table

from tourbook.commands.common import (
    confirm_destructive,
    console,
    format_signed_twd,
    format_source,
    format_twd,
    open_store,
    resolve_tour,
)
from tourbook.dates import format_date_display, normalize_date, today_str
from tourbook.domain.currency import to_home_currency
from tourbook.domain.ledger import sort_entries_by_date, sort_prep_items_by_due_date
from tourbook.domain.models import EntryType, PrepStatus
from tourbook.domain.stats import compute_prep_progress, compute_tour_stats


def create_command(name: str, start_date: str | None = None) -> None:
    """Create a tour and make it current."""
    name = name.strip()
    if not name:
        console.print("[red]Tour name is required[/red]", style="bold")
        sys.exit(1)

    try:
        normalized_date = normalize_date(start_date) if start_date else today_str()
    except ValueError as e:
        console.print(f"[red]{e}[/red]", style="bold")
        sys.exit(1)

    store = open_store()
    tour = store.create_tour(name, normalized_date)

    console.print(f"[green]✓[/green] Created tour #{tour.id}: {tour.name}")
    console.print(f"[dim]Starts {format_date_display(tour.start_date)} - now the current tour[/dim]")


def list_command() -> None:
    """List tours with their totals."""
    store = open_store()
    tours = store.tours

    if not tours:
        console.print("[yellow]No tours yet. Create one with 'tourbook tour create'.[/yellow]")
        return

    current = store.current_tour
    table = Table(title=f"Tours ({len(tours)})")
    table.add_column("", justify="center")
    table.add_column("#", style="dim", justify="right")
    table.add_column("Name", style="white")
    table.add_column("Start", style="cyan")
    table.add_column("Entries", justify="right")
    table.add_column("Prep", justify="right")
    table.add_column("Income", justify="right")
    table.add_column("Expense", justify="right")
    table.add_column("Profit", justify="right")

    for tour in tours:
        stats = compute_tour_stats(tour, store.rates)
        progress = compute_prep_progress(tour)
        marker = "●" if current is not None and current.id == tour.id else ""
        table.add_row(
            marker,
            str(tour.id),
            tour.name,
            tour.start_date,
            str(len(tour.entries)),
            f"{progress.completed}/{progress.total}",
            format_twd(stats.income),
            format_twd(stats.expense),
            format_signed_twd(stats.profit),
        )

    console.print(table)


def show_command(tour_id: int | None = None) -> None:
    """Show a tour's entries, preparation items and totals."""
    store = open_store()
    tour = resolve_tour(store, tour_id)
    stats = compute_tour_stats(tour, store.rates)
    progress = compute_prep_progress(tour)

    start = format_date_display(tour.start_date)
    console.print(f"[bold cyan]#{tour.id} {tour.name}[/bold cyan] [dim]({start})[/dim]\n")

    if tour.prep_items:
        prep_table = Table(title=f"Preparation ({progress.completed}/{progress.total} completed)")
        prep_table.add_column("#", style="dim", justify="right")
        prep_table.add_column("Due", style="cyan")
        prep_table.add_column("Category", style="magenta")
        prep_table.add_column("Name", style="white")
        prep_table.add_column("Cost", justify="right")
        prep_table.add_column("Status", justify="center")
        for item in sort_prep_items_by_due_date(tour.prep_items):
            status = "✓" if item.status is PrepStatus.COMPLETED else "○"
            prep_table.add_row(
                str(item.id),
                item.due_date,
                item.category.value,
                item.name,
                format_source(item.cost, item.currency.value),
                status,
            )
        console.print(prep_table)
    else:
        console.print("[dim]No preparation items[/dim]")

    if tour.entries:
        entry_table = Table(title=f"Entries ({len(tour.entries)})")
        entry_table.add_column("#", style="dim", justify="right")
        entry_table.add_column("Date", style="cyan")
        entry_table.add_column("Description", style="white")
        entry_table.add_column("Amount", justify="right")
        entry_table.add_column("TWD", justify="right")
        for entry in sort_entries_by_date(tour.entries, newest_first=True):
            sign = "+" if entry.type is EntryType.INCOME else "-"
            color = "green" if entry.type is EntryType.INCOME else "red"
            home = to_home_currency(entry.amount, entry.currency, store.rates)
            entry_table.add_row(
                str(entry.id),
                entry.date,
                entry.description,
                f"[{color}]{sign}{format_source(entry.amount, entry.currency.value)}[/{color}]",
                f"[dim]{format_twd(home)}[/dim]",
            )
        console.print(entry_table)
    else:
        console.print("[dim]No entries[/dim]")

    console.print(f"\n[bold]Income:[/bold]  {format_twd(stats.income)}")
    console.print(f"[bold]Expense:[/bold] {format_twd(stats.expense)}")
    console.print(f"[bold]Profit:[/bold]  {format_signed_twd(stats.profit)}")


def select_command(tour_id: int) -> None:
    """Make a tour current."""
    store = open_store()
    tour = resolve_tour(store, tour_id)
    store.select_tour(tour.id)
    console.print(f"[green]✓[/green] Current tour: #{tour.id} {tour.name}")


def rename_command(tour_id: int, name: str, start_date: str | None = None) -> None:
    """Rename a tour and optionally move its start date."""
    name = name.strip()
    if not name:
        console.print("[red]Tour name is required[/red]", style="bold")
        sys.exit(1)

    try:
        normalized_date = normalize_date(start_date) if start_date else None
    except ValueError as e:
        console.print(f"[red]{e}[/red]", style="bold")
        sys.exit(1)

    store = open_store()
    tour = resolve_tour(store, tour_id)
    updated = store.rename_tour(tour.id, name, normalized_date)
    console.print(f"[green]✓[/green] Tour #{updated.id} is now '{updated.name}' ({updated.start_date})")


def delete_command(tour_id: int, yes: bool = False) -> None:
    """Delete a tour with all its entries and preparation items."""
    store = open_store()
    tour = resolve_tour(store, tour_id)

    confirm_destructive(
        f"Delete tour #{tour.id} '{tour.name}' with {len(tour.entries)} entries "
        f"and {len(tour.prep_items)} preparation items?",
        yes,
    )

    store.delete_tour(tour.id)
    console.print(f"[green]✓[/green] Deleted tour #{tour.id} {tour.name}")
