"""Form boundary validation and edit tracking.

Submissions are validated here before they reach the ledger store. The
validators follow the same convention as the rest of the functional core:
they return (result, error) and never raise for bad user input, so a
rejected submission leaves the ledger untouched.
"""

import math
from dataclasses import dataclass
from enum import Enum
from typing import TypeVar

from tourbook.dates import normalize_date
from tourbook.domain.models import (
    Currency,
    EntryDraft,
    EntryType,
    PrepCategory,
    PrepDraft,
    PrepStatus,
    RecordKind,
)

E = TypeVar("E", bound=Enum)


def parse_amount(value: str | float | int | None) -> float | None:
    """Parse an amount, returning None for anything non-numeric or non-finite."""
    if value is None or isinstance(value, bool):
        return None
    try:
        amount = float(str(value).replace(",", "").strip()) if isinstance(value, str) else float(value)
    except (ValueError, OverflowError):
        return None
    if not math.isfinite(amount):
        return None
    return amount


def parse_choice(enum_cls: type[E], value: object) -> E | None:
    """Coerce arbitrary casing into a member of enum_cls, or None."""
    if isinstance(value, enum_cls):
        return value
    text = str(value).strip().lower()
    for member in enum_cls:
        if member.value.lower() == text:
            return member
    return None


def validate_entry_draft(
    description: str,
    entry_type: str | EntryType,
    amount: str | float | None,
    currency: str | Currency,
    entry_date: str,
) -> tuple[EntryDraft | None, str | None]:
    """Validate entry form fields.

    Args:
        description: Free text, must not be blank.
        entry_type: "income" or "expense".
        amount: Amount in the source currency, must be positive.
        currency: TWD, JPY or USD.
        entry_date: Date in any format normalize_date accepts.

    Returns:
        Tuple of (draft, error_message). Exactly one of them is None.
    """
    description = (description or "").strip()
    if not description:
        return None, "Description is required"

    parsed_type = parse_choice(EntryType, entry_type)
    if parsed_type is None:
        return None, f"Type must be one of: {', '.join(t.value for t in EntryType)}"

    parsed_amount = parse_amount(amount)
    if parsed_amount is None:
        return None, "Amount must be a number"
    if parsed_amount <= 0:
        return None, "Amount must be positive"

    parsed_currency = parse_choice(Currency, currency)
    if parsed_currency is None:
        return None, f"Currency must be one of: {', '.join(c.value for c in Currency)}"

    try:
        normalized_date = normalize_date(entry_date)
    except ValueError as e:
        return None, str(e)

    return (
        EntryDraft(
            description=description,
            type=parsed_type,
            amount=parsed_amount,
            currency=parsed_currency,
            date=normalized_date,
        ),
        None,
    )


def validate_prep_draft(
    category: str | PrepCategory,
    name: str,
    cost: str | float | None,
    currency: str | Currency,
    due_date: str,
    status: str | PrepStatus = PrepStatus.PENDING,
    notes: str | None = None,
) -> tuple[PrepDraft | None, str | None]:
    """Validate preparation item form fields.

    A zero cost is accepted (e.g. a transfer already included elsewhere).

    Returns:
        Tuple of (draft, error_message). Exactly one of them is None.
    """
    parsed_category = parse_choice(PrepCategory, category)
    if parsed_category is None:
        return None, f"Category must be one of: {', '.join(c.value for c in PrepCategory)}"

    name = (name or "").strip()
    if not name:
        return None, "Name is required"

    parsed_cost = parse_amount(cost)
    if parsed_cost is None:
        return None, "Cost must be a number"
    if parsed_cost < 0:
        return None, "Cost cannot be negative"

    parsed_currency = parse_choice(Currency, currency)
    if parsed_currency is None:
        return None, f"Currency must be one of: {', '.join(c.value for c in Currency)}"

    parsed_status = parse_choice(PrepStatus, status)
    if parsed_status is None:
        return None, f"Status must be one of: {', '.join(s.value for s in PrepStatus)}"

    try:
        normalized_date = normalize_date(due_date)
    except ValueError as e:
        return None, str(e)

    return (
        PrepDraft(
            category=parsed_category,
            name=name,
            cost=parsed_cost,
            currency=parsed_currency,
            due_date=normalized_date,
            status=parsed_status,
            notes=(notes or "").strip(),
        ),
        None,
    )


@dataclass
class EditState:
    """Transient state deciding whether a submission creates or updates.

    Never persisted. After a submission the caller resets it so the next
    form opens in create mode.
    """

    kind: RecordKind | None = None
    record_id: int | None = None

    @property
    def is_editing(self) -> bool:
        return self.record_id is not None

    def begin_create(self, kind: RecordKind) -> None:
        """Open the form for a new record of the given kind."""
        self.kind = kind
        self.record_id = None

    def begin_edit(self, kind: RecordKind, record_id: int) -> None:
        """Open the form pre-filled with an existing record."""
        self.kind = kind
        self.record_id = record_id

    def reset(self) -> None:
        """Close the form."""
        self.kind = None
        self.record_id = None

    def editing_id_for(self, kind: RecordKind) -> int | None:
        """Return the id being edited if the form targets this kind, else None."""
        if self.kind is kind:
            return self.record_id
        return None
