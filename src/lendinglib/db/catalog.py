"""In-memory catalog of members and books.

The catalog owns both collections. They are loaded from a record store when
the catalog is created and written back after every change.
"""

import copy
import logging
from contextlib import contextmanager
from typing import Generator, Optional

from ..config import get_config
from .models import Book, Member
from .schemas import BookCreate, MemberCreate
from .store import CSVRecordStore, RecordStore, StoreError

logger = logging.getLogger(__name__)


class Catalog:
    """Member and book collections with flush-on-write persistence."""

    def __init__(self, store: RecordStore):
        """Initialize catalog and load from the store.

        Args:
            store: Record store to load from and flush to
        """
        self.store = store
        self._members: list[Member] = []
        self._books: list[Book] = []
        self.reload()

    def reload(self) -> None:
        """Replace in-memory state with the store's contents."""
        members, books = self.store.load_all()
        self._members = members
        self._books = books
        logger.debug("Catalog loaded %d members, %d books", len(members), len(books))

    def flush(self) -> None:
        """Write both collections to the store."""
        self.store.save_members(self._members)
        self.store.save_books(self._books)

    @contextmanager
    def transaction(self) -> Generator[None, None, None]:
        """Undo in-memory changes made inside the block if the store fails."""
        members = copy.deepcopy(self._members)
        books = copy.deepcopy(self._books)
        try:
            yield
        except StoreError:
            self._members = members
            self._books = books
            logger.warning("Store write failed; catalog changes rolled back")
            raise

    # ========================================================================
    # Lookups
    # ========================================================================

    def find_member(self, member_id: str) -> Optional[Member]:
        """Find a member by exact id. The first match wins."""
        return next((m for m in self._members if m.id == member_id), None)

    def find_book(self, book_id: str) -> Optional[Book]:
        """Find a book by exact id. The first match wins."""
        return next((b for b in self._books if b.id == book_id), None)

    def members(self) -> list[Member]:
        """Snapshot of all members in insertion order."""
        return copy.deepcopy(self._members)

    def books(self) -> list[Book]:
        """Snapshot of all books in insertion order."""
        return copy.deepcopy(self._books)

    # ========================================================================
    # Additions
    # ========================================================================

    def add_member(self, data: MemberCreate) -> Member:
        """Add a member with a zero fine balance and flush.

        Args:
            data: Member creation data

        Returns:
            Created member
        """
        if self.find_member(data.id):
            logger.warning("Member id %s already exists; lookups will return the first", data.id)

        member = Member(id=data.id, name=data.name, role=data.role, fine=0)
        with self.transaction():
            self._members.append(member)
            self.store.save_members(self._members)
        logger.info("Added member %s", member.id)
        return copy.deepcopy(member)

    def add_book(self, data: BookCreate) -> Book:
        """Add an available book with an empty waitlist and flush.

        Args:
            data: Book creation data

        Returns:
            Created book
        """
        if self.find_book(data.id):
            logger.warning("Book id %s already exists; lookups will return the first", data.id)

        book = Book(id=data.id, title=data.title, author=data.author)
        with self.transaction():
            self._books.append(book)
            self.store.save_books(self._books)
        logger.info("Added book %s", book.id)
        return copy.deepcopy(book)


# Global catalog instance
_catalog: Optional[Catalog] = None


def get_catalog() -> Catalog:
    """Get or create the global catalog backed by the configured CSV files."""
    global _catalog
    if _catalog is None:
        config = get_config()
        _catalog = Catalog(CSVRecordStore(config.members_path, config.books_path))
    return _catalog


def reset_catalog() -> None:
    """Reset the global catalog instance. Used for testing."""
    global _catalog
    _catalog = None
