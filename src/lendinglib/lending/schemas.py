"""Pydantic schemas for lending outcomes and reports."""

from datetime import date
from enum import Enum
from typing import Optional

from pydantic import BaseModel


class BorrowStatus(str, Enum):
    """Outcome of a borrow request."""

    BORROWED = "borrowed"
    ADDED_TO_WAITLIST = "added_to_waitlist"
    MEMBER_NOT_FOUND = "member_not_found"
    BOOK_NOT_FOUND = "book_not_found"
    ALREADY_HOLDING = "already_holding"  # Member already has this book


class ReturnStatus(str, Enum):
    """Outcome of a return request."""

    RETURNED = "returned"
    BOOK_NOT_FOUND = "book_not_found"
    NOT_BORROWED_BY_MEMBER = "not_borrowed_by_member"


class BorrowResult(BaseModel):
    """Result of a borrow request."""

    status: BorrowStatus
    member_id: str
    book_id: str
    due_date: Optional[date] = None  # Set when status is BORROWED

    @property
    def ok(self) -> bool:
        """Whether the request changed lending state."""
        return self.status in (BorrowStatus.BORROWED, BorrowStatus.ADDED_TO_WAITLIST)

    @property
    def message(self) -> str:
        """Display text for the outcome."""
        if self.status == BorrowStatus.BORROWED:
            return f"Book borrowed successfully until {self.due_date.isoformat()}"
        if self.status == BorrowStatus.ADDED_TO_WAITLIST:
            return "Book is already borrowed. Added to waitlist."
        if self.status == BorrowStatus.MEMBER_NOT_FOUND:
            return "User not found!"
        if self.status == BorrowStatus.BOOK_NOT_FOUND:
            return "Book not found!"
        return "You already have this book."


class ReturnResult(BaseModel):
    """Result of a return request.

    Fine, promotion and return confirmation are separate fields so each can
    be checked on its own; ``message`` joins them for display.
    """

    status: ReturnStatus
    member_id: str
    book_id: str
    fine_charged: int = 0
    promoted_to: Optional[str] = None
    promoted_due_date: Optional[date] = None

    @property
    def ok(self) -> bool:
        return self.status == ReturnStatus.RETURNED

    @property
    def returned(self) -> bool:
        return self.status == ReturnStatus.RETURNED

    @property
    def message(self) -> str:
        """Display text for the outcome, one fact per line."""
        if self.status == ReturnStatus.BOOK_NOT_FOUND:
            return "Book not found!"
        if self.status == ReturnStatus.NOT_BORROWED_BY_MEMBER:
            return "This book was not borrowed by this user."

        lines = []
        if self.fine_charged:
            lines.append(f"Overdue! Fine Rs{self.fine_charged}")
        if self.promoted_to is not None:
            lines.append(f"Book auto-assigned to waitlisted user: {self.promoted_to}")
        lines.append("Book returned successfully.")
        return "\n".join(lines)


class OverdueEntry(BaseModel):
    """A single overdue loan."""

    book_id: str
    book_title: str
    member_id: str
    member_name: Optional[str]
    due_date: date
    days_overdue: int
    projected_fine: int  # Fine if returned today


class OverdueReport(BaseModel):
    """Report of overdue loans."""

    as_of: date
    entries: list[OverdueEntry]
    total_overdue: int
    oldest_overdue_days: int
    total_projected_fines: int


class LendingStats(BaseModel):
    """Overall lending statistics."""

    total_members: int
    total_books: int
    borrowed: int
    available: int
    overdue: int
    waitlisted: int  # Total waitlist entries across all books
    outstanding_fines: int
