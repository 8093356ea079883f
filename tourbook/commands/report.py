"""Report and export commands for viewing tour totals."""

import sys
from pathlib import Path

from rich.table import Table

from tourbook.commands.common import console, format_signed_twd, format_twd, open_store, resolve_tour
from tourbook.domain.models import Tour
from tourbook.domain.stats import TourStats, compute_prep_progress, compute_totals, compute_tour_stats
from tourbook.export import export_tour_report


def calculate_bar_length(amount: float, max_amount: float, bar_width: int) -> int:
    """Calculate histogram bar length.

    Args:
        amount: Amount to display.
        max_amount: Maximum amount in dataset.
        bar_width: Maximum bar width in characters.

    Returns:
        Bar length in characters.
    """
    if max_amount <= 0:
        return 0
    return int((abs(amount) / max_amount) * bar_width)


def render_tour_stats(tour: Tour, stats: TourStats, histogram: bool, bar_width: int = 30) -> None:
    """Render the income/expense/profit block for one tour."""
    progress = compute_prep_progress(tour)
    console.print(f"[bold cyan]#{tour.id} {tour.name}[/bold cyan] [dim]{tour.start_date}[/dim]")

    max_amount = max(stats.income, stats.expense)
    for label, amount, color in (("Income", stats.income, "green"), ("Expense", stats.expense, "red")):
        line = f"  {label:8} {format_twd(amount):>16}"
        if histogram:
            line += f" [{color}]{'█' * calculate_bar_length(amount, max_amount, bar_width)}[/{color}]"
        console.print(line)

    console.print(f"  {'Profit':8} {format_signed_twd(stats.profit)}")
    if progress.total:
        console.print(
            f"  [dim]Includes {progress.total} preparation items ({progress.pending} pending) as budgeted expense[/dim]"
        )
    console.print()


def report_command(tour_id: int | None = None, all_tours: bool = False, histogram: bool = True) -> None:
    """Show income, expense and profit in TWD."""
    store = open_store()

    if all_tours:
        tours = store.tours
        if not tours:
            console.print("[dim]No tours yet[/dim]")
            return

        for tour in tours:
            render_tour_stats(tour, compute_tour_stats(tour, store.rates), histogram)

        totals = compute_totals(tours, store.rates)
        summary = Table(title="All tours")
        summary.add_column("Income", justify="right")
        summary.add_column("Expense", justify="right")
        summary.add_column("Profit", justify="right")
        summary.add_row(format_twd(totals.income), format_twd(totals.expense), format_signed_twd(totals.profit))
        console.print(summary)
        return

    tour = resolve_tour(store, tour_id)
    render_tour_stats(tour, compute_tour_stats(tour, store.rates), histogram)


def export_command(tour_id: int | None = None, output_dir: str | None = None) -> None:
    """Export a tour report to an Excel workbook."""
    store = open_store()
    tour = resolve_tour(store, tour_id)

    target_dir = Path(output_dir).expanduser() if output_dir else Path.cwd()

    try:
        path = export_tour_report(tour, store.rates, target_dir)
    except OSError as e:
        console.print(f"[red]Export failed: {e}[/red]", style="bold")
        sys.exit(1)

    console.print(f"[green]✓[/green] Report written to: {path}")
    console.print("[dim]Sheets: Preparation, Entries, Summary[/dim]")
