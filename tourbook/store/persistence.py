"""Durable key-value slot for the tour ledger.

Each slot is one JSON file under the XDG data directory. Reads and writes
are best-effort: failures are logged, ``save`` reports False and ``load``
returns the caller's fallback. Nothing here raises for I/O or decode errors.
"""

import json
import os
import tempfile
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any, TypeVar

from tourbook.domain.currency import build_rate_table
from tourbook.domain.models import (
    Currency,
    Entry,
    EntryType,
    PrepCategory,
    PrepItem,
    PrepStatus,
    RateTable,
    Tour,
)
from tourbook.logging_utils import get_logger

logger = get_logger(__name__)

SCHEMA_VERSION = 2
RATES_KEY = "rates"

T = TypeVar("T")


@dataclass
class LedgerSnapshot:
    """Everything persisted for the ledger store."""

    tours: list[Tour] = field(default_factory=list)
    next_tour_id: int = 1
    current_tour_id: int | None = None


def get_xdg_data_home() -> Path:
    """Get XDG data directory, with fallback to ~/.local/share."""
    xdg_data = os.environ.get("XDG_DATA_HOME")
    if xdg_data:
        return Path(xdg_data)
    return Path.home() / ".local" / "share"


def get_data_dir() -> Path:
    """Get the default data directory (XDG compliant)."""
    return get_xdg_data_home() / "tourbook"


def slot_path(key: str, data_dir: Path | None = None) -> Path:
    """Get the file backing a storage slot.

    Args:
        key: Slot name.
        data_dir: Directory holding the slots. If None, uses default location.

    Returns:
        Path to the slot file.
    """
    if data_dir is None:
        data_dir = get_data_dir()
    return data_dir / f"{key}.json"


def _pick(data: dict[str, Any], *names: str, default: Any = None) -> Any:
    """Return the first present key, accepting legacy camelCase names."""
    for name in names:
        if name in data:
            return data[name]
    return default


def _require_dict(value: Any, what: str) -> dict[str, Any]:
    if not isinstance(value, dict):
        raise ValueError(f"Expected {what} to be an object, got {type(value).__name__}")
    return value


def _require_list(value: Any, what: str) -> list[Any]:
    if not isinstance(value, list):
        raise ValueError(f"Expected {what} to be a list, got {type(value).__name__}")
    return value


def entry_to_dict(entry: Entry) -> dict[str, Any]:
    return {
        "id": entry.id,
        "description": entry.description,
        "type": entry.type.value,
        "amount": entry.amount,
        "currency": entry.currency.value,
        "date": entry.date,
        "amount_home": entry.amount_home,
    }


def dict_to_entry(d: Any) -> Entry:
    d = _require_dict(d, "entry")
    amount_home = _pick(d, "amount_home", "amountTWD")
    return Entry(
        id=int(d["id"]),
        description=str(d["description"]),
        type=EntryType(d["type"]),
        amount=float(d["amount"]),
        currency=Currency(d.get("currency", Currency.TWD.value)),
        date=str(d["date"]),
        amount_home=float(amount_home) if amount_home is not None else None,
    )


def prep_item_to_dict(item: PrepItem) -> dict[str, Any]:
    return {
        "id": item.id,
        "category": item.category.value,
        "name": item.name,
        "status": item.status.value,
        "cost": item.cost,
        "currency": item.currency.value,
        "due_date": item.due_date,
        "notes": item.notes,
    }


def dict_to_prep_item(d: Any) -> PrepItem:
    d = _require_dict(d, "preparation item")
    return PrepItem(
        id=int(d["id"]),
        category=PrepCategory(d["category"]),
        name=str(d["name"]),
        status=PrepStatus(d.get("status", PrepStatus.PENDING.value)),
        cost=float(d["cost"]),
        currency=Currency(d.get("currency", Currency.TWD.value)),
        due_date=str(_pick(d, "due_date", "dueDate", default="")),
        notes=str(d.get("notes") or ""),
    )


def tour_to_dict(tour: Tour) -> dict[str, Any]:
    """Convert a Tour to a dictionary for JSON serialization."""
    return {
        "id": tour.id,
        "name": tour.name,
        "start_date": tour.start_date,
        "next_entry_id": tour.next_entry_id,
        "next_prep_id": tour.next_prep_id,
        "entries": [entry_to_dict(e) for e in tour.entries],
        "prep_items": [prep_item_to_dict(p) for p in tour.prep_items],
    }


def dict_to_tour(d: Any) -> Tour:
    """Convert a dictionary from JSON to a Tour.

    Payloads written before the per-tour counters existed get counters
    derived from the highest stored id.
    """
    d = _require_dict(d, "tour")
    entries = [dict_to_entry(e) for e in _require_list(d.get("entries", []), "entries")]
    raw_prep_items = _pick(d, "prep_items", "prepItems", default=[])
    prep_items = [dict_to_prep_item(p) for p in _require_list(raw_prep_items, "preparation items")]

    next_entry_id = _pick(d, "next_entry_id", "nextEntryId")
    if next_entry_id is None:
        next_entry_id = max((e.id for e in entries), default=0) + 1
    next_prep_id = _pick(d, "next_prep_id", "nextPrepId")
    if next_prep_id is None:
        next_prep_id = max((p.id for p in prep_items), default=0) + 1

    return Tour(
        id=int(d["id"]),
        name=str(d["name"]),
        start_date=str(_pick(d, "start_date", "startDate", "date", default="")),
        entries=entries,
        prep_items=prep_items,
        next_entry_id=int(next_entry_id),
        next_prep_id=int(next_prep_id),
    )


def snapshot_to_dict(snapshot: LedgerSnapshot) -> dict[str, Any]:
    return {
        "version": SCHEMA_VERSION,
        "next_tour_id": snapshot.next_tour_id,
        "current_tour_id": snapshot.current_tour_id,
        "tours": [tour_to_dict(t) for t in snapshot.tours],
    }


def dict_to_snapshot(data: Any) -> LedgerSnapshot:
    """Decode a stored payload.

    Accepts the versioned document as well as the legacy bare list of tours.

    Raises:
        ValueError: If the payload has an unsupported shape or newer version.
        KeyError: If a required field is missing.
    """
    if isinstance(data, list):
        data = {"version": 1, "tours": data}
    if not isinstance(data, dict):
        raise ValueError(f"Unexpected payload type: {type(data).__name__}")

    version = int(data.get("version", 1))
    if version > SCHEMA_VERSION:
        raise ValueError(f"Stored schema version {version} is newer than supported version {SCHEMA_VERSION}")

    tours = [dict_to_tour(t) for t in _require_list(data.get("tours", []), "tours")]
    next_tour_id = data.get("next_tour_id")
    if next_tour_id is None:
        next_tour_id = max((t.id for t in tours), default=0) + 1

    current_tour_id = data.get("current_tour_id")
    return LedgerSnapshot(
        tours=tours,
        next_tour_id=int(next_tour_id),
        current_tour_id=int(current_tour_id) if current_tour_id is not None else None,
    )


def _write_json(path: Path, payload: dict[str, Any]) -> None:
    """Write JSON next to the target and rename it into place."""
    path.parent.mkdir(parents=True, exist_ok=True)
    text = json.dumps(payload, ensure_ascii=False, indent=2)
    fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.stem}-", suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(text)
        os.replace(tmp_name, path)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise


def _read_json(path: Path) -> Any | None:
    """Read JSON from a slot file, returning None if absent or empty."""
    if not path.exists():
        return None
    text = path.read_text(encoding="utf-8")
    if not text.strip():
        return None
    return json.loads(text)


def save_snapshot(key: str, snapshot: LedgerSnapshot, data_dir: Path | None = None) -> bool:
    """Write the full ledger snapshot to a slot.

    Args:
        key: Slot name.
        snapshot: Snapshot to write.
        data_dir: Directory holding the slots. If None, uses default location.

    Returns:
        True if written, False if the write failed (the failure is logged).
    """
    path = slot_path(key, data_dir)
    try:
        _write_json(path, snapshot_to_dict(snapshot))
    except (OSError, TypeError, ValueError) as e:
        logger.warning("Could not save ledger to %s: %s", path, e)
        return False
    logger.debug("Saved %d tours to %s", len(snapshot.tours), path)
    return True


def load_snapshot(key: str, data_dir: Path | None = None) -> LedgerSnapshot | None:
    """Read the full ledger snapshot from a slot.

    Args:
        key: Slot name.
        data_dir: Directory holding the slots. If None, uses default location.

    Returns:
        Decoded snapshot, or None if the slot is absent, empty or unreadable.
    """
    path = slot_path(key, data_dir)
    try:
        data = _read_json(path)
        if data is None:
            return None
        return dict_to_snapshot(data)
    except (OSError, ValueError, KeyError, TypeError) as e:
        logger.warning("Could not load ledger from %s: %s", path, e)
        return None


def save(key: str, tours: list[Tour], data_dir: Path | None = None) -> bool:
    """Write a tour list to a slot.

    Returns:
        True if written, False if the write failed.
    """
    snapshot = LedgerSnapshot(
        tours=list(tours),
        next_tour_id=max((t.id for t in tours), default=0) + 1,
    )
    return save_snapshot(key, snapshot, data_dir)


def load(key: str, fallback: T, data_dir: Path | None = None) -> list[Tour] | T:
    """Read a tour list from a slot.

    Returns:
        The stored tours, or fallback if the slot is absent, empty or corrupt.
    """
    snapshot = load_snapshot(key, data_dir)
    if snapshot is None:
        return fallback
    return snapshot.tours


def save_rates(table: RateTable, data_dir: Path | None = None) -> bool:
    """Cache the last known good rate table.

    Returns:
        True if written, False if the write failed.
    """
    path = slot_path(RATES_KEY, data_dir)
    payload = {
        "version": SCHEMA_VERSION,
        "rates": [
            {"currency": r.currency, "rate": r.rate, "last_updated": r.last_updated.isoformat()}
            for r in table.values()
        ],
    }
    try:
        _write_json(path, payload)
    except (OSError, TypeError, ValueError) as e:
        logger.warning("Could not save rates to %s: %s", path, e)
        return False
    return True


def load_rates(data_dir: Path | None = None) -> RateTable | None:
    """Read the cached rate table.

    Returns:
        Rate table, or None if absent or unreadable.
    """
    path = slot_path(RATES_KEY, data_dir)
    try:
        data = _read_json(path)
        if data is None:
            return None
        raw_records = _require_list(_require_dict(data, "rate cache")["rates"], "rates")
        records = [_require_dict(r, "rate") for r in raw_records]
        if not records:
            return None
        # Tables are replaced wholesale, so every record shares one timestamp
        updated = max(datetime.fromisoformat(r["last_updated"]) for r in records)
        return build_rate_table({r["currency"]: r["rate"] for r in records}, updated)
    except (OSError, ValueError, KeyError, TypeError) as e:
        logger.warning("Could not load rates from %s: %s", path, e)
        return None
