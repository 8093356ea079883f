"""Tests for tourbook.domain.report pure functions."""

import pytest

from tourbook.domain.models import (
    Currency,
    Entry,
    EntryType,
    Money,
    PrepCategory,
    PrepItem,
    PrepStatus,
    RateTable,
    Tour,
)
from tourbook.domain.report import (
    ENTRY_COLUMNS,
    PREP_COLUMNS,
    entry_rows,
    prep_item_rows,
    report_filename,
    summary_rows,
)
from tourbook.domain.stats import TourStats


@pytest.fixture
def tour() -> Tour:
    return Tour(
        id=1,
        name="Kyoto",
        start_date="2024-05-01",
        entries=[
            Entry(1, "Late dinner", EntryType.EXPENSE, 5000, Currency.JPY, "2024-05-03"),
            Entry(2, "Deposit", EntryType.INCOME, 100, Currency.USD, "2024-05-01"),
        ],
        prep_items=[
            PrepItem(1, PrepCategory.FLIGHT, "CI150", PrepStatus.COMPLETED, 12000, Currency.TWD, "2024-04-10"),
            PrepItem(2, PrepCategory.HOTEL, "Ryokan", PrepStatus.PENDING, 30000, Currency.JPY, "2024-04-01", "onsen"),
        ],
    )


class TestEntryRows:
    """Tests for entry_rows."""

    def test_sorted_by_date_with_conversion(self, tour: Tour, rates: RateTable) -> None:
        """Should order rows by date and add the converted amount."""
        rows = entry_rows(tour, rates)

        assert [row["ID"] for row in rows] == [2, 1]
        assert rows[0]["Amount (TWD)"] == pytest.approx(3150.0)
        assert rows[1]["Amount (TWD)"] == pytest.approx(1000.0)
        assert rows[0]["Type"] == "income"
        assert list(rows[0]) == ENTRY_COLUMNS


class TestPrepItemRows:
    """Tests for prep_item_rows."""

    def test_sorted_by_due_date(self, tour: Tour, rates: RateTable) -> None:
        rows = prep_item_rows(tour, rates)

        assert [row["Name"] for row in rows] == ["Ryokan", "CI150"]
        assert rows[0]["Cost (TWD)"] == pytest.approx(6000.0)
        assert rows[0]["Notes"] == "onsen"
        assert list(rows[0]) == PREP_COLUMNS


class TestSummaryRows:
    """Tests for summary_rows."""

    def test_three_rows(self) -> None:
        rows = summary_rows(TourStats(income=Money(100.0), expense=Money(40.0), profit=Money(60.0)))

        assert [row["Item"] for row in rows] == ["Income", "Expense", "Profit"]
        assert [row["Amount (TWD)"] for row in rows] == [100.0, 40.0, 60.0]


class TestReportFilename:
    """Tests for report_filename."""

    def test_plain_name(self) -> None:
        assert report_filename("Kyoto") == "Kyoto-report.xlsx"

    def test_unsafe_characters_replaced(self) -> None:
        """Should make the file name safe for every filesystem."""
        assert report_filename('Tokyo/Osaka: "Spring"') == "Tokyo_Osaka_ _Spring_-report.xlsx"

    def test_empty_name(self) -> None:
        assert report_filename("   ") == "tour-report.xlsx"
