"""Pure functions for expenses: bucket mapping, dates and input validation.

This module contains the functional core for expense handling:
- No I/O operations (no database, no console, no files)
- No side effects
- Pure data transformations
- Easy to test
"""

import math
import secrets
from dataclasses import dataclass
from datetime import date, datetime

from safespend.dates import month_key_of, parse_iso_date
from safespend.domain.models import Bucket, ExpenseCategory, Money, Month

_CATEGORY_BUCKETS: dict[str, Bucket] = {
    ExpenseCategory.FIXED_EXPENSES: Bucket.FIXED_EXPENSES,
    ExpenseCategory.SAVINGS: Bucket.PLANNED_SAVINGS,
    ExpenseCategory.INVESTMENTS: Bucket.INVESTMENT_ALLOCATION,
    ExpenseCategory.LIFESTYLE: Bucket.LIFESTYLE_BALANCE,
    ExpenseCategory.OTHER: Bucket.LIFESTYLE_BALANCE,
}


@dataclass(frozen=True)
class Expense:
    """Immutable expense entry."""

    id: str
    amount: Money
    description: str
    category: ExpenseCategory
    date: str  # YYYY-MM-DD
    created_at: str  # ISO timestamp


def bucket_of(category: str) -> Bucket:
    """Map an expense category onto its budget bucket.

    Unknown categories land in the lifestyle bucket.
    """
    return _CATEGORY_BUCKETS.get(category, Bucket.LIFESTYLE_BALANCE)


def create_expense_id(now: datetime) -> str:
    """Create an opaque, unique expense ID (millisecond timestamp + random hex)."""
    return f"{int(now.timestamp() * 1000)}-{secrets.token_hex(6)}"


def effective_date(expense: Expense) -> date | None:
    """Resolve the date an expense counts against.

    The explicit date wins; if it is missing or unparseable the creation
    timestamp's date is used instead.

    Returns:
        Effective calendar date, or None if neither field parses.
    """
    # NOTE: a malformed explicit date silently falls back to created_at.
    # That may hide a caller bug; revisit if bad dates show up in storage.
    return parse_iso_date(expense.date) or parse_iso_date(expense.created_at)


def expense_month_key(expense: Expense, today: date) -> Month:
    """Month key an expense belongs to, falling back to today's month."""
    resolved = effective_date(expense)
    return month_key_of(resolved if resolved is not None else today)


def sort_by_recent(expenses: list[Expense]) -> list[Expense]:
    """Sort expenses newest first by effective date; undated expenses go last."""
    return sorted(
        expenses,
        key=lambda expense: effective_date(expense) or date.min,
        reverse=True,
    )


def validate_amount(
    raw: str,
    minimum: float = 0,
    allow_zero: bool = False,
) -> tuple[float | None, str | None]:
    """Validate a typed amount.

    Args:
        raw: Text entered by the user.
        minimum: Smallest acceptable value.
        allow_zero: Whether exactly zero is acceptable.

    Returns:
        Tuple of (value, error_message).
    """
    try:
        parsed = float(raw.strip())
    except ValueError:
        return None, "Please enter a valid number."

    if not math.isfinite(parsed):
        return None, "Please enter a valid number."

    if parsed < minimum or (not allow_zero and parsed == 0):
        return None, "Please enter a valid, positive amount."

    return parsed, None


def validate_date(raw: str) -> tuple[str | None, str | None]:
    """Validate a YYYY-MM-DD date.

    Returns:
        Tuple of (date_string, error_message).
    """
    text = raw.strip()
    if not text:
        return None, "Please select a date."

    try:
        date.fromisoformat(text)
    except ValueError:
        return None, "Please select a valid date."

    return text, None


def validate_required_text(raw: str, label: str) -> tuple[str | None, str | None]:
    """Validate non-empty text, returning it trimmed."""
    text = raw.strip()
    if not text:
        return None, f"Please add a {label}."
    return text, None


def validate_category(raw: str) -> tuple[ExpenseCategory | None, str | None]:
    """Validate a category name (case-insensitive)."""
    for category in ExpenseCategory:
        if category.value.lower() == raw.strip().lower():
            return category, None
    choices = ", ".join(category.value for category in ExpenseCategory)
    return None, f"Please choose a category: {choices}."


def build_expense(
    amount: str,
    description: str,
    category: str,
    expense_date: str,
    now: datetime,
) -> tuple[Expense | None, str | None]:
    """Validate raw expense input and build an Expense.

    Args:
        amount: Amount as typed.
        description: Description as typed.
        category: Category name as typed.
        expense_date: Transaction date (YYYY-MM-DD).
        now: Creation time stamped on the expense.

    Returns:
        Tuple of (expense, error_message). Exactly one is None.
    """
    text, error = validate_required_text(description, "short description")
    if error:
        return None, error

    value, error = validate_amount(amount)
    if error:
        return None, error

    resolved_category, error = validate_category(category)
    if error:
        return None, error

    date_text, error = validate_date(expense_date)
    if error:
        return None, error

    return (
        Expense(
            id=create_expense_id(now),
            amount=Money(value),
            description=text,
            category=resolved_category,
            date=date_text,
            created_at=now.isoformat(),
        ),
        None,
    )
