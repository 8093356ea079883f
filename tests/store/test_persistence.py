"""Tests for tourbook.store.persistence."""

import json
from datetime import datetime
from pathlib import Path

import pytest

from tourbook.domain.currency import build_rate_table
from tourbook.domain.models import (
    Currency,
    Entry,
    EntryType,
    PrepCategory,
    PrepItem,
    PrepStatus,
    Tour,
)
from tourbook.store.persistence import (
    RATES_KEY,
    SCHEMA_VERSION,
    LedgerSnapshot,
    dict_to_snapshot,
    get_data_dir,
    load,
    load_rates,
    load_snapshot,
    save,
    save_rates,
    save_snapshot,
    slot_path,
)


@pytest.fixture
def data_dir(tmp_path: Path) -> Path:
    return tmp_path / "slots"


@pytest.fixture
def tour() -> Tour:
    return Tour(
        id=3,
        name="Hokkaido",
        start_date="2024-12-20",
        entries=[
            Entry(1, "Tour fee", EntryType.INCOME, 2000, Currency.USD, "2024-12-20", amount_home=63000.0),
            Entry(4, "Crab dinner", EntryType.EXPENSE, 18000, Currency.JPY, "2024-12-21", amount_home=3600.0),
        ],
        prep_items=[
            PrepItem(2, PrepCategory.HOTEL, "Sapporo Grand", PrepStatus.COMPLETED, 60000, Currency.JPY, "2024-11-01"),
        ],
        next_entry_id=5,
        next_prep_id=3,
    )


class TestPaths:
    """Tests for slot path helpers."""

    def test_default_data_dir_uses_xdg(self, isolated_xdg: Path) -> None:
        """Should place data under XDG_DATA_HOME/tourbook."""
        assert get_data_dir() == isolated_xdg / "data" / "tourbook"

    def test_slot_path(self, data_dir: Path) -> None:
        assert slot_path("tours", data_dir) == data_dir / "tours.json"


class TestSaveLoad:
    """Tests for save and load of tour lists."""

    def test_round_trip(self, data_dir: Path, tour: Tour) -> None:
        """Should load back exactly what was saved."""
        assert save("tours", [tour], data_dir)
        assert load("tours", [], data_dir) == [tour]

    def test_missing_slot_returns_fallback(self, data_dir: Path) -> None:
        sentinel: list[Tour] = []
        assert load("nothing-here", sentinel, data_dir) is sentinel

    def test_empty_file_returns_fallback(self, data_dir: Path) -> None:
        data_dir.mkdir(parents=True)
        (data_dir / "tours.json").write_text("")
        assert load("tours", None, data_dir) is None

    def test_corrupt_file_returns_fallback(self, data_dir: Path) -> None:
        """Should not raise when the slot holds invalid JSON."""
        data_dir.mkdir(parents=True)
        (data_dir / "tours.json").write_text("{not json")
        assert load("tours", "fallback", data_dir) == "fallback"

    def test_newer_version_returns_fallback(self, data_dir: Path) -> None:
        data_dir.mkdir(parents=True)
        (data_dir / "tours.json").write_text(json.dumps({"version": SCHEMA_VERSION + 1, "tours": []}))
        assert load("tours", "fallback", data_dir) == "fallback"

    @pytest.mark.parametrize(
        "payload",
        [
            [1, 2],
            {"tours": ["oops"]},
            {"tours": {"a": 1}},
            {"tours": [{"id": 1, "name": "A", "entries": [3]}]},
            {"tours": [{"id": 1, "name": "A", "prep_items": "none"}]},
            "just a string",
        ],
    )
    def test_malformed_shape_returns_fallback(self, data_dir: Path, payload: object) -> None:
        """Should return the fallback when tours or records are not objects."""
        data_dir.mkdir(parents=True)
        (data_dir / "tours.json").write_text(json.dumps(payload))
        assert load("tours", "fallback", data_dir) == "fallback"

    def test_write_failure_returns_false(self, tmp_path: Path, tour: Tour) -> None:
        """Should report False instead of raising when the slot is unwritable."""
        blocker = tmp_path / "blocker"
        blocker.write_text("a file, not a directory")
        assert save("tours", [tour], blocker) is False

    def test_no_temp_files_left(self, data_dir: Path, tour: Tour) -> None:
        save("tours", [tour], data_dir)
        assert [p.name for p in data_dir.iterdir()] == ["tours.json"]


class TestSnapshot:
    """Tests for full snapshots."""

    def test_round_trip_keeps_counters(self, data_dir: Path, tour: Tour) -> None:
        """Should persist the tour id counter and current tour."""
        snapshot = LedgerSnapshot(tours=[tour], next_tour_id=7, current_tour_id=3)

        assert save_snapshot("tours", snapshot, data_dir)
        loaded = load_snapshot("tours", data_dir)

        assert loaded == snapshot

    def test_written_document_is_versioned(self, data_dir: Path, tour: Tour) -> None:
        save_snapshot("tours", LedgerSnapshot(tours=[tour]), data_dir)
        data = json.loads((data_dir / "tours.json").read_text())

        assert data["version"] == SCHEMA_VERSION
        assert data["tours"][0]["next_entry_id"] == 5


class TestLegacyPayloads:
    """Tests for decoding payloads written by earlier versions."""

    def test_bare_list_with_camel_case(self) -> None:
        """Should accept a bare list with camelCase keys and derive counters."""
        payload = [
            {
                "id": 2,
                "name": "Legacy",
                "startDate": "2023-10-01",
                "entries": [
                    {
                        "id": 3,
                        "description": "Guide fee",
                        "type": "income",
                        "amount": 500,
                        "currency": "USD",
                        "date": "2023-10-02",
                        "amountTWD": 15750,
                    }
                ],
                "prepItems": [
                    {
                        "id": 1,
                        "category": "flight",
                        "name": "BR12",
                        "status": "pending",
                        "cost": 20000,
                        "currency": "TWD",
                        "dueDate": "2023-09-01",
                    }
                ],
            }
        ]

        snapshot = dict_to_snapshot(payload)
        tour = snapshot.tours[0]

        assert tour.start_date == "2023-10-01"
        assert tour.entries[0].amount_home == 15750.0
        assert tour.prep_items[0].due_date == "2023-09-01"
        assert tour.prep_items[0].notes == ""
        assert tour.next_entry_id == 4
        assert tour.next_prep_id == 2
        assert snapshot.next_tour_id == 3
        assert snapshot.current_tour_id is None

    def test_rejects_unexpected_shape(self) -> None:
        with pytest.raises(ValueError):
            dict_to_snapshot("tours")


class TestRateCache:
    """Tests for save_rates and load_rates."""

    def test_round_trip(self, data_dir: Path) -> None:
        """Should restore rates and their timestamp."""
        updated = datetime(2024, 5, 1, 8, 30)
        table = build_rate_table({"USD": 32.1, "JPY": 0.205}, updated)

        assert save_rates(table, data_dir)
        loaded = load_rates(data_dir)

        assert loaded == table
        assert (data_dir / f"{RATES_KEY}.json").exists()

    def test_missing_cache(self, data_dir: Path) -> None:
        assert load_rates(data_dir) is None

    @pytest.mark.parametrize("payload", [[1], {"rates": [1]}, {"rates": {"USD": 30}}])
    def test_malformed_cache_shape(self, data_dir: Path, payload: object) -> None:
        data_dir.mkdir(parents=True)
        (data_dir / f"{RATES_KEY}.json").write_text(json.dumps(payload))
        assert load_rates(data_dir) is None

    def test_corrupt_cache(self, data_dir: Path) -> None:
        """Should ignore a cache holding invalid rates."""
        data_dir.mkdir(parents=True)
        (data_dir / f"{RATES_KEY}.json").write_text(
            json.dumps({"rates": [{"currency": "USD", "rate": -1, "last_updated": "2024-05-01T00:00:00"}]})
        )
        assert load_rates(data_dir) is None
