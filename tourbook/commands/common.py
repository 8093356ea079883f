"""Helpers shared by the command modules."""

import sys
import tomllib
from datetime import datetime

import typer
from rich.console import Console

from tourbook.config import Settings, get_config_path, load_settings
from tourbook.domain.currency import default_rate_table
from tourbook.domain.models import RateTable, Tour
from tourbook.exchange import ExchangeRateProvider
from tourbook.store.ledger_store import LedgerStore
from tourbook.store.persistence import load_rates, save_rates

console = Console()


def get_settings() -> Settings:
    """Load settings, exiting with a message if the config file is broken."""
    try:
        return load_settings()
    except (tomllib.TOMLDecodeError, ValueError, TypeError) as e:
        console.print(f"[red]Invalid config file {get_config_path()}: {e}[/red]", style="bold")
        sys.exit(1)


def current_rates(settings: Settings) -> RateTable:
    """Last known good rates, or the configured defaults."""
    cached = load_rates(settings.data_dir)
    if cached is not None:
        return cached
    return default_rate_table(datetime.now(), settings.default_rates)


def open_store(settings: Settings | None = None) -> LedgerStore:
    """Construct and load the ledger store for this session."""
    if settings is None:
        settings = get_settings()
    return LedgerStore.open(settings.storage_key, settings.data_dir, current_rates(settings))


def build_provider(settings: Settings, store: LedgerStore | None = None) -> ExchangeRateProvider:
    """Build a rate provider seeded with the last known good rates.

    Successful refreshes are cached to disk and, when a store is given,
    reprice its entries.
    """
    initial = store.rates if store is not None else current_rates(settings)
    provider = ExchangeRateProvider(
        settings.rates_url,
        initial,
        interval_seconds=settings.refresh_seconds,
        timeout=settings.rates_timeout,
    )
    provider.subscribe(lambda table: save_rates(table, settings.data_dir))
    if store is not None:
        provider.subscribe(store.reprice)
    return provider


def resolve_tour(store: LedgerStore, tour_id: int | None) -> Tour:
    """Pick the requested tour or the current one, exiting if neither exists."""
    if tour_id is not None:
        tour = store.find_tour(tour_id)
        if tour is None:
            console.print(f"[red]Tour {tour_id} not found[/red]", style="bold")
            sys.exit(1)
        return tour

    tour = store.current_tour
    if tour is None:
        console.print("[red]No tour selected. Use --tour or 'tourbook tour select'.[/red]", style="bold")
        sys.exit(1)
    return tour


def confirm_destructive(message: str, yes: bool) -> None:
    """Ask for confirmation unless --yes was given; abort on refusal."""
    if yes:
        return
    if not typer.confirm(message, default=False):
        console.print("[yellow]Cancelled[/yellow]")
        raise typer.Exit(0)


def format_twd(amount: float) -> str:
    """Format a home currency amount for display."""
    if amount < 0:
        return f"-NT${abs(amount):,.2f}"
    return f"NT${amount:,.2f}"


def format_signed_twd(amount: float) -> str:
    """Format a home currency amount colored by sign."""
    if amount < 0:
        return f"[red]{format_twd(amount)}[/red]"
    return f"[green]{format_twd(amount)}[/green]"


def format_source(amount: float, currency: str) -> str:
    """Format an amount in its source currency."""
    if currency == "JPY":
        return f"¥{amount:,.0f}"
    if currency == "USD":
        return f"US${amount:,.2f}"
    return f"NT${amount:,.2f}"
