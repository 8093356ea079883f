"""Domain models and types for tourbook.

This package contains the functional core:
- Pure functions with no side effects
- No I/O operations
- Easy to test
- Business logic separated from infrastructure
"""

from tourbook.domain.models import (
    HOME_CURRENCY,
    Currency,
    Entry,
    EntryDraft,
    EntryType,
    ExchangeRate,
    Money,
    PrepCategory,
    PrepDraft,
    PrepItem,
    PrepStatus,
    RateTable,
    RecordKind,
    Tour,
)

__all__ = [
    "HOME_CURRENCY",
    "Currency",
    "Entry",
    "EntryDraft",
    "EntryType",
    "ExchangeRate",
    "Money",
    "PrepCategory",
    "PrepDraft",
    "PrepItem",
    "PrepStatus",
    "RateTable",
    "RecordKind",
    "Tour",
]
