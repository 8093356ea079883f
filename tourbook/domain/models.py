"""Domain type definitions for tourbook.

These types describe the ledger owned by each tour:
- Money: Amount in the home currency (TWD)
- Tour: A named, dated group owning entries and preparation items
- Entry: A single income or expense record in a source currency
- PrepItem: A budgeted preparation cost (hotel, flight, ...)
- ExchangeRate: Multiplier converting one unit of a currency into TWD

Record ids are unique only inside their owning tour, so lookups are always
scoped by (tour id, record id).
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import NewType

# Amounts already converted to the home currency
Money = NewType("Money", float)


class Currency(str, Enum):
    """Supported source currencies."""

    TWD = "TWD"
    JPY = "JPY"
    USD = "USD"


HOME_CURRENCY = Currency.TWD


class EntryType(str, Enum):
    """Direction of a ledger entry."""

    INCOME = "income"
    EXPENSE = "expense"


class PrepCategory(str, Enum):
    """Kinds of preparation items."""

    HOTEL = "hotel"
    FLIGHT = "flight"
    TRANSPORT = "transport"
    OTHER = "other"


class PrepStatus(str, Enum):
    """Completion status of a preparation item."""

    PENDING = "pending"
    COMPLETED = "completed"


class RecordKind(str, Enum):
    """Which kind of record a form submission targets."""

    ENTRY = "entry"
    PREP = "prep"


@dataclass(frozen=True)
class Entry:
    """Immutable income or expense record."""

    id: int
    description: str
    type: EntryType
    amount: float  # source currency
    currency: Currency
    date: str  # YYYY-MM-DD
    amount_home: float | None = None  # cached at write time, refreshed on repricing


@dataclass(frozen=True)
class PrepItem:
    """Immutable preparation item counted as budgeted expense."""

    id: int
    category: PrepCategory
    name: str
    status: PrepStatus
    cost: float  # source currency
    currency: Currency
    due_date: str  # YYYY-MM-DD
    notes: str = ""


@dataclass(frozen=True)
class Tour:
    """Immutable tour with its entries and preparation items.

    next_entry_id and next_prep_id are monotonic counters, so ids freed by a
    deletion are never handed out again.
    """

    id: int
    name: str
    start_date: str
    entries: list[Entry] = field(default_factory=list)
    prep_items: list[PrepItem] = field(default_factory=list)
    next_entry_id: int = 1
    next_prep_id: int = 1


@dataclass(frozen=True)
class EntryDraft:
    """Validated entry fields submitted from a form."""

    description: str
    type: EntryType
    amount: float
    currency: Currency
    date: str


@dataclass(frozen=True)
class PrepDraft:
    """Validated preparation item fields submitted from a form."""

    category: PrepCategory
    name: str
    cost: float
    currency: Currency
    due_date: str
    status: PrepStatus = PrepStatus.PENDING
    notes: str = ""


@dataclass(frozen=True)
class ExchangeRate:
    """Rate converting 1 unit of currency into the home currency."""

    currency: str
    rate: float
    last_updated: datetime


# Currency code -> rate, always replaced as a whole
RateTable = dict[str, ExchangeRate]
