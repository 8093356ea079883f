"""Store layer - provides persistence for the application.

This module re-exports the public store API for easy importing.
"""

from tourbook.store.ledger_store import DEFAULT_STORAGE_KEY, LedgerStore
from tourbook.store.persistence import (
    SCHEMA_VERSION,
    LedgerSnapshot,
    get_data_dir,
    load,
    load_rates,
    load_snapshot,
    save,
    save_rates,
    save_snapshot,
    slot_path,
)

__all__ = [
    # Ledger store
    "DEFAULT_STORAGE_KEY",
    "LedgerStore",
    # Persistence
    "SCHEMA_VERSION",
    "LedgerSnapshot",
    "get_data_dir",
    "load",
    "load_rates",
    "load_snapshot",
    "save",
    "save_rates",
    "save_snapshot",
    "slot_path",
]
