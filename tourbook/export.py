"""Excel export of a tour report."""

from collections.abc import Mapping
from pathlib import Path

import pandas as pd
from openpyxl.styles import Alignment, Border, Font, PatternFill, Side
from openpyxl.utils import get_column_letter
from openpyxl.worksheet.worksheet import Worksheet

from tourbook.domain.models import ExchangeRate, Tour
from tourbook.domain.report import (
    ENTRY_COLUMNS,
    PREP_COLUMNS,
    SUMMARY_COLUMNS,
    entry_rows,
    prep_item_rows,
    report_filename,
    summary_rows,
)
from tourbook.domain.stats import compute_tour_stats
from tourbook.logging_utils import get_logger

logger = get_logger(__name__)

PREP_SHEET = "Preparation"
ENTRIES_SHEET = "Entries"
SUMMARY_SHEET = "Summary"

MONEY_COLUMNS = {"Cost", "Cost (TWD)", "Amount", "Amount (TWD)"}


def _style_header(ws: Worksheet, row: int = 1) -> None:
    """Apply header styling to a worksheet row."""
    header_font = Font(bold=True, color="FFFFFF")
    fill = PatternFill("solid", fgColor="4F81BD")
    align = Alignment(horizontal="center", vertical="center")
    thin = Side(style="thin", color="A0A0A0")
    border = Border(left=thin, right=thin, top=thin, bottom=thin)
    for cell in ws[row]:
        cell.font = header_font
        cell.fill = fill
        cell.alignment = align
        cell.border = border


def _format_sheet(ws: Worksheet, columns: list[str], min_width: int = 10, max_width: int = 45) -> None:
    """Freeze the header, format money columns and size columns to content."""
    _style_header(ws)
    ws.freeze_panes = "A2"

    for idx, name in enumerate(columns, 1):
        letter = get_column_letter(idx)
        max_len = 0
        for cell in ws[letter]:
            if cell.value is None:
                continue
            max_len = max(max_len, len(str(cell.value)))
            if name in MONEY_COLUMNS and cell.row > 1:
                cell.number_format = "#,##0.00"
        ws.column_dimensions[letter].width = max(min_width, min(max_width, max_len + 2))


def export_tour_report(tour: Tour, table: Mapping[str, ExchangeRate], output_dir: Path) -> Path:
    """Write a tour report workbook.

    Three sheets are written:
    - Preparation: one row per preparation item
    - Entries: one row per income/expense entry
    - Summary: income, expense and profit in TWD

    Args:
        tour: Tour to export.
        table: Rate table used for every TWD column.
        output_dir: Directory for the file. Created if missing.

    Returns:
        Path of the written "{tourName}-report.xlsx" file.

    Raises:
        OSError: If the file cannot be written.
    """
    output_dir.mkdir(parents=True, exist_ok=True)
    path = output_dir / report_filename(tour.name)

    sheets = [
        (PREP_SHEET, PREP_COLUMNS, prep_item_rows(tour, table)),
        (ENTRIES_SHEET, ENTRY_COLUMNS, entry_rows(tour, table)),
        (SUMMARY_SHEET, SUMMARY_COLUMNS, summary_rows(compute_tour_stats(tour, table))),
    ]

    with pd.ExcelWriter(path, engine="openpyxl") as writer:
        for sheet_name, columns, rows in sheets:
            frame = pd.DataFrame(rows, columns=columns)
            frame.to_excel(writer, sheet_name=sheet_name, index=False)
            _format_sheet(writer.sheets[sheet_name], columns)

    logger.info("Exported tour %d to %s", tour.id, path)
    return path
