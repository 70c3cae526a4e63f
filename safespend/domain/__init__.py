"""Domain models and types for safespend.

This package contains the functional core:
- Pure functions with no side effects
- No I/O operations
- Easy to test
- Business logic separated from infrastructure
"""

from safespend.domain.models import Bucket, ExpenseCategory, Money, Month

__all__ = ["Bucket", "ExpenseCategory", "Money", "Month"]
