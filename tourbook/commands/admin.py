"""Admin commands for init, backup, and clearing data."""

import shutil
import sys
from datetime import datetime
from pathlib import Path

from tourbook.commands.common import confirm_destructive, console, get_settings, open_store
from tourbook.config import create_default_config, get_config_path
from tourbook.store.persistence import RATES_KEY, get_data_dir, slot_path


def init_command(force: bool = False) -> None:
    """Create the config file and an empty ledger."""
    config_path = get_config_path()

    if config_path.exists() and not force:
        console.print("[red]Initialization failed:[/red]", style="bold")
        console.print(f"  Config already exists: {config_path}")
        console.print("\n[yellow]Use 'tourbook init --force' to overwrite[/yellow]")
        sys.exit(1)

    try:
        console.print(f"[cyan]Creating config file at {config_path}...[/cyan]")
        create_default_config(config_path)
        console.print("[green]✓[/green] Config file created (permissions: 600)")

        settings = get_settings()
        store = open_store(settings)
        if not store.save():
            console.print("[red]Could not write the ledger file[/red]", style="bold")
            sys.exit(1)
        ledger_path = slot_path(settings.storage_key, settings.data_dir)
        console.print(f"[green]✓[/green] Ledger ready ({len(store.tours)} tours)")

    except OSError as e:
        console.print(f"[red]Filesystem error: {e}[/red]", style="bold")
        sys.exit(1)

    console.print("\n[green]Initialization complete![/green]", style="bold")
    console.print(f"[dim]Ledger: {ledger_path}[/dim]")
    console.print(f"[dim]Config: {config_path}[/dim]")
    console.print("[dim]Set [rates] url in the config to enable 'tourbook rates refresh'[/dim]")


def backup_command(output_dir: str | None = None) -> None:
    """Backup the ledger, rate cache and configuration files."""
    settings = get_settings()
    ledger_path = slot_path(settings.storage_key, settings.data_dir)
    rates_path = slot_path(RATES_KEY, settings.data_dir)
    config_path = get_config_path()

    if not ledger_path.exists():
        console.print("[red]Ledger not found. Run 'tourbook init' first.[/red]", style="bold")
        sys.exit(1)

    if output_dir:
        backup_dir = Path(output_dir).expanduser()
    else:
        backup_dir = (settings.data_dir or get_data_dir()) / "backups"

    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")

    try:
        backup_dir.mkdir(parents=True, exist_ok=True)

        ledger_backup = backup_dir / f"{settings.storage_key}_{timestamp}.json"
        shutil.copy2(ledger_path, ledger_backup)
        console.print(f"[green]✓[/green] Ledger backed up to: {ledger_backup}")

        if rates_path.exists():
            rates_backup = backup_dir / f"{RATES_KEY}_{timestamp}.json"
            shutil.copy2(rates_path, rates_backup)
            console.print(f"[green]✓[/green] Rates backed up to: {rates_backup}")

        if config_path.exists():
            config_backup = backup_dir / f"config_{timestamp}.toml"
            shutil.copy2(config_path, config_backup)
            console.print(f"[green]✓[/green] Config backed up to: {config_backup}")

    except OSError as e:
        console.print(f"[red]Backup failed: {e}[/red]", style="bold")
        sys.exit(1)

    console.print("\n[green]Backup complete![/green]", style="bold")
    console.print(f"[dim]Backup directory: {backup_dir}[/dim]")


def clear_command(yes: bool = False) -> None:
    """Delete every tour after confirmation."""
    store = open_store()
    count = len(store.tours)

    if count == 0:
        console.print("[yellow]Nothing to clear[/yellow]")
        return

    confirm_destructive(f"Delete all {count} tours with their entries and preparation items?", yes)

    store.clear()
    console.print(f"[green]✓[/green] Cleared {count} tours")
