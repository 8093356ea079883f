"""Exchange rate commands (show, refresh, watch, source)."""

import sys

from rich.table import Table

from tourbook.commands.common import build_provider, console, get_settings, open_store
from tourbook.config import get_config_path, set_config_value
from tourbook.domain.models import HOME_CURRENCY, RateTable


def render_rates(table: RateTable, title: str = "Exchange rates") -> None:
    """Print a rate table."""
    rates_table = Table(title=title)
    rates_table.add_column("Currency", style="cyan")
    rates_table.add_column(f"1 unit in {HOME_CURRENCY.value}", justify="right")
    rates_table.add_column("Updated", style="dim")

    for code in sorted(table):
        rate = table[code]
        rates_table.add_row(code, f"{rate.rate:,.4f}", rate.last_updated.strftime("%Y-%m-%d %H:%M"))

    console.print(rates_table)


def show_command() -> None:
    """Show the last known good rates."""
    settings = get_settings()
    store = open_store(settings)
    render_rates(store.rates)
    console.print(f"[dim]Source: {settings.rates_url}[/dim]")


def refresh_command() -> None:
    """Fetch rates once and reprice cached entry amounts."""
    settings = get_settings()
    store = open_store(settings)
    provider = build_provider(settings, store)

    console.print(f"[cyan]Fetching rates from {settings.rates_url}...[/cyan]")
    if not provider.refresh():
        console.print("[yellow]Rate refresh failed, keeping previous rates[/yellow]")
        render_rates(provider.table, title="Exchange rates (unchanged)")
        return

    console.print("[green]✓[/green] Rates updated")
    render_rates(provider.table)


def watch_command(minutes: float | None = None) -> None:
    """Keep rates fresh until interrupted."""
    settings = get_settings()
    store = open_store(settings)
    provider = build_provider(settings, store)
    if minutes is not None:
        provider.interval_seconds = minutes * 60

    provider.subscribe(lambda table: render_rates(table, title="Exchange rates (updated)"))

    console.print(
        f"[cyan]Refreshing rates every {provider.interval_seconds / 60:g} minutes. Press Ctrl+C to stop.[/cyan]"
    )
    try:
        with provider:
            provider.wait()
    except KeyboardInterrupt:
        console.print("\n[dim]Stopped watching rates[/dim]")


def source_command(url: str) -> None:
    """Point rate refreshes at a different endpoint."""
    if not url.startswith(("http://", "https://")):
        console.print(f"[red]Not an http(s) URL: {url}[/red]", style="bold")
        sys.exit(1)

    try:
        set_config_value("rates", "url", url)
    except OSError as e:
        console.print(f"[red]Could not write config: {e}[/red]", style="bold")
        sys.exit(1)

    console.print(f"[green]✓[/green] Rate source set to {url}")
    console.print(f"[dim]Config: {get_config_path()}[/dim]")
