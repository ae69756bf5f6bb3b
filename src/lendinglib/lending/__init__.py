"""Book lending engine.

Provides functionality for:
- Borrowing books, or joining a waitlist when on loan
- Returning books with overdue fines
- Automatic promotion of the next waitlisted member
- Overdue reports and lending statistics
"""

from .manager import LendingManager
from .schemas import (
    BorrowResult,
    BorrowStatus,
    LendingStats,
    OverdueEntry,
    OverdueReport,
    ReturnResult,
    ReturnStatus,
)

__all__ = [
    "LendingManager",
    "BorrowResult",
    "BorrowStatus",
    "ReturnResult",
    "ReturnStatus",
    "OverdueEntry",
    "OverdueReport",
    "LendingStats",
]
