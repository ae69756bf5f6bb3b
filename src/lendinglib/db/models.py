"""In-memory models for members and books.

A book's loan state is carried by a single optional ``Loan`` value, so a
book is either available (no loan) or borrowed by exactly one member until
exactly one due date.
"""

from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Optional


class BookStatus(str, Enum):
    """Lending state of a book."""

    AVAILABLE = "available"
    BORROWED = "borrowed"


@dataclass
class Member:
    """A library member and their accrued fine balance."""

    id: str
    name: str
    role: str
    fine: int = 0

    def __repr__(self) -> str:
        return f"<Member(id={self.id}, name='{self.name}', fine={self.fine})>"

    def fine_text(self) -> str:
        """Fine balance as shown in member listings."""
        return f"Rs{self.fine}"


@dataclass(frozen=True)
class Loan:
    """An active loan: who holds the book and when it is due back."""

    member_id: str
    due_date: date


@dataclass
class Book:
    """A catalogued book with its loan state and FIFO waitlist."""

    id: str
    title: str
    author: str
    loan: Optional[Loan] = None
    waitlist: list[str] = field(default_factory=list)

    def __repr__(self) -> str:
        return f"<Book(id={self.id}, title='{self.title}', status={self.status.value})>"

    @property
    def borrowed(self) -> bool:
        """Whether the book is currently on loan."""
        return self.loan is not None

    @property
    def borrowed_by(self) -> Optional[str]:
        """Member id of the current holder."""
        return self.loan.member_id if self.loan else None

    @property
    def due_date(self) -> Optional[date]:
        """Due date of the current loan."""
        return self.loan.due_date if self.loan else None

    @property
    def status(self) -> BookStatus:
        return BookStatus.BORROWED if self.loan else BookStatus.AVAILABLE

    def is_overdue(self, today: date) -> bool:
        """Check if the current loan is past its due date."""
        if not self.loan:
            return False
        return self.loan.due_date < today

    def days_overdue(self, today: date) -> int:
        """Whole days past the due date, 0 if not overdue."""
        if not self.is_overdue(today):
            return 0
        return (today - self.loan.due_date).days

    def enqueue(self, member_id: str) -> bool:
        """Append a member to the waitlist unless already waiting.

        Returns:
            True if the member was added
        """
        if member_id in self.waitlist:
            return False
        self.waitlist.append(member_id)
        return True

    def pop_waitlist(self) -> Optional[str]:
        """Remove and return the head of the waitlist."""
        if not self.waitlist:
            return None
        return self.waitlist.pop(0)

    def status_text(self) -> str:
        """Status column as shown in book listings."""
        if self.loan:
            return f"BORROWED by {self.loan.member_id} due {self.loan.due_date.isoformat()}"
        return "AVAILABLE"
