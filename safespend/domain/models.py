"""Domain type definitions for safespend.

These types provide semantic clarity and help with type checking:
- Money: Amount in rupees (fractional paise allowed)
- Month: Month in YYYY-MM format
- ExpenseCategory: Category a user picks when logging an expense
- Bucket: Budget bucket every category maps onto
"""

from enum import StrEnum
from typing import NewType

# Allocations are income x fraction, so amounts stay fractional until display
Money = NewType("Money", float)

# Month is always in YYYY-MM format (e.g., "2025-01")
Month = NewType("Month", str)


class ExpenseCategory(StrEnum):
    """Categories offered when logging an expense."""

    FIXED_EXPENSES = "Fixed Expenses"
    SAVINGS = "Savings"
    INVESTMENTS = "Investments"
    LIFESTYLE = "Lifestyle"
    OTHER = "Other"


class Bucket(StrEnum):
    """Budget buckets income is split into."""

    FIXED_EXPENSES = "fixedExpenses"
    PLANNED_SAVINGS = "plannedSavings"
    INVESTMENT_ALLOCATION = "investmentAllocation"
    LIFESTYLE_BALANCE = "lifestyleBalance"
