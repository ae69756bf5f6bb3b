"""Lending manager: borrow, return, fines and waitlist promotion."""

import logging
import threading
from datetime import date, timedelta
from typing import Callable, Optional

from ..config import Config, get_config
from ..db.catalog import Catalog, get_catalog
from ..db.models import Book, Loan, Member
from ..db.schemas import BookCreate, MemberCreate
from .schemas import (
    BorrowResult,
    BorrowStatus,
    LendingStats,
    OverdueEntry,
    OverdueReport,
    ReturnResult,
    ReturnStatus,
)

logger = logging.getLogger(__name__)


class LendingManager:
    """Manages book lending operations.

    Every public operation runs under one lock, so a change to the catalog
    and the flush that follows it are seen by other threads as one step.
    """

    def __init__(
        self,
        catalog: Optional[Catalog] = None,
        config: Optional[Config] = None,
        clock: Callable[[], date] = date.today,
    ):
        """Initialize lending manager.

        Args:
            catalog: Catalog to operate on
            config: Configuration providing loan period and fine rate
            clock: Returns the current date; read once per operation
        """
        self.catalog = catalog or get_catalog()
        config = config or get_config()
        self.loan_days = config.loan_days
        self.fine_per_day = config.fine_per_day
        self.clock = clock
        self._lock = threading.RLock()

    # -------------------------------------------------------------------------
    # Members and Books
    # -------------------------------------------------------------------------

    def add_member(self, data: MemberCreate) -> Member:
        """Add a new member with no fine."""
        with self._lock:
            return self.catalog.add_member(data)

    def add_book(self, data: BookCreate) -> Book:
        """Add a new, available book."""
        with self._lock:
            return self.catalog.add_book(data)

    def list_members(self) -> list[Member]:
        with self._lock:
            return self.catalog.members()

    def list_books(self) -> list[Book]:
        with self._lock:
            return self.catalog.books()

    # -------------------------------------------------------------------------
    # Borrow and Return
    # -------------------------------------------------------------------------

    def borrow(self, member_id: str, book_id: str) -> BorrowResult:
        """Borrow a book, or join its waitlist if it is on loan.

        Args:
            member_id: Borrowing member
            book_id: Requested book

        Returns:
            BorrowResult with the due date when borrowed
        """
        with self._lock:
            today = self.clock()

            def result(status: BorrowStatus, due_date: Optional[date] = None) -> BorrowResult:
                return BorrowResult(
                    status=status, member_id=member_id, book_id=book_id, due_date=due_date
                )

            if self.catalog.find_member(member_id) is None:
                return result(BorrowStatus.MEMBER_NOT_FOUND)

            book = self.catalog.find_book(book_id)
            if book is None:
                return result(BorrowStatus.BOOK_NOT_FOUND)

            if book.borrowed:
                if book.borrowed_by == member_id:
                    return result(BorrowStatus.ALREADY_HOLDING)
                with self.catalog.transaction():
                    added = book.enqueue(member_id)
                    self.catalog.flush()
                if added:
                    logger.info("Member %s joined waitlist for %s", member_id, book_id)
                return result(BorrowStatus.ADDED_TO_WAITLIST)

            due_date = today + timedelta(days=self.loan_days)
            with self.catalog.transaction():
                book.loan = Loan(member_id=member_id, due_date=due_date)
                self.catalog.flush()
            logger.info("Member %s borrowed %s until %s", member_id, book_id, due_date)
            return result(BorrowStatus.BORROWED, due_date)

    def return_book(self, member_id: str, book_id: str) -> ReturnResult:
        """Return a book, charge any overdue fine and promote the waitlist head.

        Args:
            member_id: Returning member
            book_id: Returned book

        Returns:
            ReturnResult with the fine charged and the promoted member, if any
        """
        with self._lock:
            today = self.clock()

            book = self.catalog.find_book(book_id)
            if book is None:
                return ReturnResult(
                    status=ReturnStatus.BOOK_NOT_FOUND, member_id=member_id, book_id=book_id
                )
            if book.borrowed_by != member_id:
                return ReturnResult(
                    status=ReturnStatus.NOT_BORROWED_BY_MEMBER,
                    member_id=member_id,
                    book_id=book_id,
                )

            fine_charged = 0
            days_late = book.days_overdue(today)
            member = self.catalog.find_member(member_id)
            if days_late > 0 and member is None:
                logger.warning(
                    "Book %s returned %d days late by unknown member %s; no fine charged",
                    book_id, days_late, member_id,
                )
            elif days_late > 0:
                fine_charged = days_late * self.fine_per_day

            with self.catalog.transaction():
                if fine_charged:
                    member.fine += fine_charged
                book.loan = None
                promoted_to = book.pop_waitlist()
                if promoted_to is not None:
                    book.loan = Loan(
                        member_id=promoted_to, due_date=today + timedelta(days=self.loan_days)
                    )
                self.catalog.flush()

            if fine_charged:
                logger.info("Charged member %s fine %d for %s", member_id, fine_charged, book_id)
            if promoted_to is not None:
                logger.info("Book %s auto-assigned to waitlisted member %s", book_id, promoted_to)
            logger.info("Member %s returned %s", member_id, book_id)

            return ReturnResult(
                status=ReturnStatus.RETURNED,
                member_id=member_id,
                book_id=book_id,
                fine_charged=fine_charged,
                promoted_to=promoted_to,
                promoted_due_date=book.due_date if promoted_to is not None else None,
            )

    # -------------------------------------------------------------------------
    # Statistics and Reports
    # -------------------------------------------------------------------------

    def get_member_loans(self, member_id: str) -> list[Book]:
        """Get books currently held by a member."""
        with self._lock:
            return [b for b in self.catalog.books() if b.borrowed_by == member_id]

    def get_overdue_books(self) -> OverdueReport:
        """Get report of overdue loans as of today.

        Returns:
            OverdueReport ordered by due date, oldest first
        """
        with self._lock:
            today = self.clock()
            entries = []

            for book in self.catalog.books():
                if not book.is_overdue(today):
                    continue
                member = self.catalog.find_member(book.borrowed_by)
                days = book.days_overdue(today)
                entries.append(
                    OverdueEntry(
                        book_id=book.id,
                        book_title=book.title,
                        member_id=book.borrowed_by,
                        member_name=member.name if member else None,
                        due_date=book.due_date,
                        days_overdue=days,
                        projected_fine=days * self.fine_per_day,
                    )
                )

            entries.sort(key=lambda e: e.due_date)

            return OverdueReport(
                as_of=today,
                entries=entries,
                total_overdue=len(entries),
                oldest_overdue_days=max((e.days_overdue for e in entries), default=0),
                total_projected_fines=sum(e.projected_fine for e in entries),
            )

    def get_stats(self) -> LendingStats:
        """Get overall lending statistics."""
        with self._lock:
            today = self.clock()
            members = self.catalog.members()
            books = self.catalog.books()
            borrowed = sum(1 for b in books if b.borrowed)

            return LendingStats(
                total_members=len(members),
                total_books=len(books),
                borrowed=borrowed,
                available=len(books) - borrowed,
                overdue=sum(1 for b in books if b.is_overdue(today)),
                waitlisted=sum(len(b.waitlist) for b in books),
                outstanding_fines=sum(m.fine for m in members),
            )
