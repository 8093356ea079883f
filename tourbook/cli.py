"""CLI entry point for tourbook."""

import logging

import typer

from tourbook.commands import entries, prep, rates, tours
from tourbook.commands.admin import backup_command, clear_command, init_command
from tourbook.commands.report import export_command, report_command
from tourbook.logging_utils import configure_logging

app = typer.Typer(
    name="tourbook",
    help="Tour bookkeeping - track tour income, expenses and preparation costs in TWD",
    add_completion=False,
)
tour_app = typer.Typer(help="Create and manage tours.", no_args_is_help=True)
entry_app = typer.Typer(help="Record income and expense entries.", no_args_is_help=True)
prep_app = typer.Typer(help="Track preparation items (hotels, flights, ...).", no_args_is_help=True)
rates_app = typer.Typer(help="Show and refresh exchange rates.", no_args_is_help=True)

app.add_typer(tour_app, name="tour")
app.add_typer(entry_app, name="entry")
app.add_typer(prep_app, name="prep")
app.add_typer(rates_app, name="rates")

TOUR_OPTION_HELP = "Tour id (default: current tour)"


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logging"),
) -> None:
    """Tour bookkeeping - track tour income, expenses and preparation costs in TWD."""
    configure_logging(logging.DEBUG if verbose else logging.WARNING)


@app.command(name="init")
def init(
    force: bool = typer.Option(False, "--force", "-f", help="Overwrite existing config"),
) -> None:
    """Initialize tourbook configuration and ledger."""
    init_command(force)


@app.command(name="backup")
def backup(
    output_dir: str = typer.Option(None, "--output", "-o", help="Backup directory (default: data dir/backups)"),
) -> None:
    """Backup your ledger, rate cache and configuration."""
    backup_command(output_dir)


@app.command(name="clear")
def clear(
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
) -> None:
    """Delete all tours."""
    clear_command(yes)


@app.command(name="report")
def report(
    tour_id: int = typer.Option(None, "--tour", "-t", help=TOUR_OPTION_HELP),
    all_tours: bool = typer.Option(False, "--all", "-a", help="Report every tour"),
    histogram: bool = typer.Option(True, help="Show income/expense bars"),
) -> None:
    """Show income, expense and profit in TWD."""
    report_command(tour_id, all_tours, histogram)


@app.command(name="export")
def export(
    tour_id: int = typer.Option(None, "--tour", "-t", help=TOUR_OPTION_HELP),
    output_dir: str = typer.Option(None, "--output", "-o", help="Output directory (default: current directory)"),
) -> None:
    """Export a tour report to an Excel workbook."""
    export_command(tour_id, output_dir)


# ---------- tour ----------


@tour_app.command(name="create")
def tour_create(
    name: str,
    start_date: str = typer.Option(None, "--date", "-d", help="Start date (default: today)"),
) -> None:
    """Create a tour and make it current."""
    tours.create_command(name, start_date)


@tour_app.command(name="list")
def tour_list() -> None:
    """List tours with their totals."""
    tours.list_command()


@tour_app.command(name="show")
def tour_show(
    tour_id: int = typer.Argument(None, help=TOUR_OPTION_HELP),
) -> None:
    """Show a tour's entries, preparation items and totals."""
    tours.show_command(tour_id)


@tour_app.command(name="select")
def tour_select(tour_id: int) -> None:
    """Make a tour current."""
    tours.select_command(tour_id)


@tour_app.command(name="rename")
def tour_rename(
    tour_id: int,
    name: str,
    start_date: str = typer.Option(None, "--date", "-d", help="New start date"),
) -> None:
    """Rename a tour."""
    tours.rename_command(tour_id, name, start_date)


@tour_app.command(name="delete")
def tour_delete(
    tour_id: int,
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
) -> None:
    """Delete a tour with its entries and preparation items."""
    tours.delete_command(tour_id, yes)


# ---------- entry ----------


@entry_app.command(name="add")
def entry_add(
    description: str,
    amount: str,
    entry_type: str = typer.Option("expense", "--type", help="income or expense"),
    currency: str = typer.Option("TWD", "--currency", "-c", help="TWD, JPY or USD"),
    entry_date: str = typer.Option(None, "--date", "-d", help="Entry date (default: today)"),
    tour_id: int = typer.Option(None, "--tour", "-t", help=TOUR_OPTION_HELP),
) -> None:
    """Add an income or expense entry."""
    entries.add_command(description, entry_type, amount, currency, entry_date, tour_id)


@entry_app.command(name="edit")
def entry_edit(
    entry_id: int,
    description: str = typer.Option(None, "--description", help="New description"),
    amount: str = typer.Option(None, "--amount", help="New amount"),
    entry_type: str = typer.Option(None, "--type", help="income or expense"),
    currency: str = typer.Option(None, "--currency", "-c", help="TWD, JPY or USD"),
    entry_date: str = typer.Option(None, "--date", "-d", help="New date"),
    tour_id: int = typer.Option(None, "--tour", "-t", help=TOUR_OPTION_HELP),
) -> None:
    """Edit an entry in place."""
    entries.edit_command(entry_id, description, entry_type, amount, currency, entry_date, tour_id)


@entry_app.command(name="delete")
def entry_delete(
    entry_id: int,
    tour_id: int = typer.Option(None, "--tour", "-t", help=TOUR_OPTION_HELP),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
) -> None:
    """Delete an entry."""
    entries.delete_command(entry_id, tour_id, yes)


@entry_app.command(name="list")
def entry_list(
    tour_id: int = typer.Option(None, "--tour", "-t", help=TOUR_OPTION_HELP),
    oldest_first: bool = typer.Option(False, "--oldest-first", help="Show oldest entries first"),
) -> None:
    """List entries by date."""
    entries.list_command(tour_id, oldest_first)


# ---------- prep ----------


@prep_app.command(name="add")
def prep_add(
    category: str,
    name: str,
    cost: str,
    currency: str = typer.Option("TWD", "--currency", "-c", help="TWD, JPY or USD"),
    due_date: str = typer.Option(None, "--due", help="Due date (default: today)"),
    status: str = typer.Option("pending", "--status", help="pending or completed"),
    notes: str = typer.Option(None, "--notes", help="Free text notes"),
    tour_id: int = typer.Option(None, "--tour", "-t", help=TOUR_OPTION_HELP),
) -> None:
    """Add a preparation item (hotel, flight, transport or other)."""
    prep.add_command(category, name, cost, currency, due_date, status, notes, tour_id)


@prep_app.command(name="edit")
def prep_edit(
    item_id: int,
    category: str = typer.Option(None, "--category", help="hotel, flight, transport or other"),
    name: str = typer.Option(None, "--name", help="New name"),
    cost: str = typer.Option(None, "--cost", help="New cost"),
    currency: str = typer.Option(None, "--currency", "-c", help="TWD, JPY or USD"),
    due_date: str = typer.Option(None, "--due", help="New due date"),
    status: str = typer.Option(None, "--status", help="pending or completed"),
    notes: str = typer.Option(None, "--notes", help="New notes"),
    tour_id: int = typer.Option(None, "--tour", "-t", help=TOUR_OPTION_HELP),
) -> None:
    """Edit a preparation item in place."""
    prep.edit_command(item_id, category, name, cost, currency, due_date, status, notes, tour_id)


@prep_app.command(name="status")
def prep_status(
    item_id: int,
    status: str,
    tour_id: int = typer.Option(None, "--tour", "-t", help=TOUR_OPTION_HELP),
) -> None:
    """Mark a preparation item pending or completed."""
    prep.status_command(item_id, status, tour_id)


@prep_app.command(name="delete")
def prep_delete(
    item_id: int,
    tour_id: int = typer.Option(None, "--tour", "-t", help=TOUR_OPTION_HELP),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
) -> None:
    """Delete a preparation item."""
    prep.delete_command(item_id, tour_id, yes)


@prep_app.command(name="list")
def prep_list(
    tour_id: int = typer.Option(None, "--tour", "-t", help=TOUR_OPTION_HELP),
    pending: bool = typer.Option(False, "--pending", help="Only show pending items"),
) -> None:
    """List preparation items by due date."""
    prep.list_command(tour_id, pending)


# ---------- rates ----------


@rates_app.command(name="show")
def rates_show() -> None:
    """Show the last known good exchange rates."""
    rates.show_command()


@rates_app.command(name="refresh")
def rates_refresh() -> None:
    """Fetch exchange rates and reprice cached entry amounts."""
    rates.refresh_command()


@rates_app.command(name="watch")
def rates_watch(
    minutes: float = typer.Option(None, "--minutes", "-m", help="Refresh interval (default: from config)"),
) -> None:
    """Keep exchange rates fresh until interrupted."""
    rates.watch_command(minutes)


@rates_app.command(name="source")
def rates_source(url: str) -> None:
    """Set the endpoint used by 'rates refresh' and 'rates watch'."""
    rates.source_command(url)


if __name__ == "__main__":
    app()
