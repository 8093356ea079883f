"""Pure functions building flat report records.

This module contains the functional core for exports:
- No I/O operations (no files, no console)
- No side effects
- Flat dict records, one per spreadsheet row

All "(TWD)" columns are converted with the rate table passed in.
"""

from collections.abc import Mapping
from typing import Any

from tourbook.domain.currency import to_home_currency
from tourbook.domain.ledger import sort_entries_by_date, sort_prep_items_by_due_date
from tourbook.domain.models import ExchangeRate, Tour
from tourbook.domain.stats import TourStats

PREP_COLUMNS = ["ID", "Category", "Name", "Status", "Cost", "Currency", "Cost (TWD)", "Due date", "Notes"]
ENTRY_COLUMNS = ["ID", "Date", "Description", "Type", "Amount", "Currency", "Amount (TWD)"]
SUMMARY_COLUMNS = ["Item", "Amount (TWD)"]


def prep_item_rows(tour: Tour, table: Mapping[str, ExchangeRate]) -> list[dict[str, Any]]:
    """Build one row per preparation item, ordered by due date.

    Args:
        tour: Tour to export.
        table: Current rate table.

    Returns:
        List of row dictionaries keyed by PREP_COLUMNS.
    """
    return [
        {
            "ID": item.id,
            "Category": item.category.value,
            "Name": item.name,
            "Status": item.status.value,
            "Cost": item.cost,
            "Currency": item.currency.value,
            "Cost (TWD)": float(to_home_currency(item.cost, item.currency, table)),
            "Due date": item.due_date,
            "Notes": item.notes,
        }
        for item in sort_prep_items_by_due_date(tour.prep_items)
    ]


def entry_rows(tour: Tour, table: Mapping[str, ExchangeRate]) -> list[dict[str, Any]]:
    """Build one row per entry, ordered by date.

    Args:
        tour: Tour to export.
        table: Current rate table.

    Returns:
        List of row dictionaries keyed by ENTRY_COLUMNS.
    """
    return [
        {
            "ID": entry.id,
            "Date": entry.date,
            "Description": entry.description,
            "Type": entry.type.value,
            "Amount": entry.amount,
            "Currency": entry.currency.value,
            "Amount (TWD)": float(to_home_currency(entry.amount, entry.currency, table)),
        }
        for entry in sort_entries_by_date(tour.entries)
    ]


def summary_rows(stats: TourStats) -> list[dict[str, Any]]:
    """Build the three-row income/expense/profit summary."""
    return [
        {"Item": "Income", "Amount (TWD)": float(stats.income)},
        {"Item": "Expense", "Amount (TWD)": float(stats.expense)},
        {"Item": "Profit", "Amount (TWD)": float(stats.profit)},
    ]


def report_filename(tour_name: str, suffix: str = ".xlsx") -> str:
    """Build the export file name "{tourName}-report", made filesystem safe."""
    unsafe = '<>:"/\\|?*'
    cleaned = "".join("_" if ch in unsafe or ord(ch) < 32 else ch for ch in tour_name).strip().strip(".")
    return f"{cleaned or 'tour'}-report{suffix}"
