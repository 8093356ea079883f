"""Date utilities for tourbook.

Pure functions for date parsing and formatting.
"""

from datetime import date

import pandas as pd


def today_str() -> str:
    """Get today's date as YYYY-MM-DD."""
    return date.today().isoformat()


def normalize_date(raw_date: str) -> str:
    """Normalize a user supplied date string to ISO format (YYYY-MM-DD).

    ISO dates are taken as-is. Anything else goes through pandas.to_datetime,
    which handles "2024/5/3", "3 May 2024", "May 3, 2024" and friends.

    Args:
        raw_date: Raw date string.

    Returns:
        Normalized date in YYYY-MM-DD format.

    Raises:
        ValueError: If date cannot be parsed.
    """
    text = raw_date.strip()
    if not text:
        raise ValueError("Date is required")

    try:
        return date.fromisoformat(text).isoformat()
    except ValueError:
        pass

    try:
        parsed_date = pd.to_datetime(text)
    except (ValueError, TypeError, OverflowError, pd.errors.ParserError) as e:
        raise ValueError(f"Could not parse date '{raw_date}': {e}") from e

    if pd.isna(parsed_date):
        raise ValueError(f"Could not parse date '{raw_date}'")
    return parsed_date.strftime("%Y-%m-%d")


def format_date_display(iso_date: str) -> str:
    """Format an ISO date for display (e.g., "Fri 03 May 2024").

    Returns the input unchanged if it is not a valid ISO date.
    """
    try:
        return date.fromisoformat(iso_date).strftime("%a %d %b %Y")
    except ValueError:
        return iso_date
