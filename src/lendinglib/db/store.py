"""Record store: reads and writes members and books as comma-separated lines.

Member line::

    id,name,role,fine

Book line::

    id,title,author,borrowed,borrowedBy,dueDate,waitlist

There is no header and no quoting. ``borrowed`` is ``true``/``false``,
``borrowedBy`` and ``dueDate`` are empty for available books, and
``waitlist`` is a ``;``-joined list of member ids.

Loading is fail-fast: the first malformed line aborts the whole load.
"""

import copy
import csv
import logging
from abc import ABC, abstractmethod
from datetime import date
from io import StringIO
from pathlib import Path
from typing import Iterable, Optional

from .models import Book, Loan, Member

logger = logging.getLogger(__name__)

CSV_FORMAT = {
    "delimiter": ",",
    "quoting": csv.QUOTE_NONE,
    "quotechar": None,
    "lineterminator": "\n",
}

MEMBER_FIELDS = 4
BOOK_FIELDS = 7
WAITLIST_SEPARATOR = ";"


class StoreError(Exception):
    """Record store read/write error."""

    pass


class MalformedRecordError(StoreError):
    """A stored line could not be decoded."""

    def __init__(self, path: Optional[Path], line_no: int, reason: str):
        self.path = path
        self.line_no = line_no
        self.reason = reason
        where = f"{path}:{line_no}" if path else f"line {line_no}"
        super().__init__(f"Malformed record at {where}: {reason}")


# ============================================================================
# Codecs
# ============================================================================


def encode_member(member: Member) -> list[str]:
    """Encode a member as store fields."""
    return [member.id, member.name, member.role, str(member.fine)]


def decode_member(fields: list[str]) -> Member:
    """Decode store fields into a member.

    Raises:
        ValueError: If the fields do not form a valid member
    """
    if len(fields) != MEMBER_FIELDS:
        raise ValueError(f"expected {MEMBER_FIELDS} fields, got {len(fields)}")

    member_id, name, role, fine_str = fields
    if not member_id:
        raise ValueError("empty member id")
    # Plain ASCII digits only; int() alone would accept " 6", "+6" and "1_000"
    if not (fine_str.isascii() and fine_str.isdigit()):
        raise ValueError(f"invalid fine {fine_str!r}")

    return Member(id=member_id, name=name, role=role, fine=int(fine_str))


def encode_book(book: Book) -> list[str]:
    """Encode a book as store fields."""
    return [
        book.id,
        book.title,
        book.author,
        "true" if book.borrowed else "false",
        book.borrowed_by or "",
        book.due_date.isoformat() if book.due_date else "",
        WAITLIST_SEPARATOR.join(book.waitlist),
    ]


def decode_book(fields: list[str]) -> Book:
    """Decode store fields into a book.

    Raises:
        ValueError: If the fields do not form a valid book
    """
    if len(fields) != BOOK_FIELDS:
        raise ValueError(f"expected {BOOK_FIELDS} fields, got {len(fields)}")

    book_id, title, author, borrowed_str, borrowed_by, due_str, waitlist_str = fields

    if not book_id:
        raise ValueError("empty book id")
    if borrowed_str not in ("true", "false"):
        raise ValueError(f"invalid borrowed flag {borrowed_str!r}")

    due_date = None
    if due_str:
        try:
            due_date = date.fromisoformat(due_str)
        except ValueError:
            raise ValueError(f"invalid due date {due_str!r}") from None

    loan = None
    if borrowed_str == "true":
        if not borrowed_by or due_date is None:
            raise ValueError("borrowed book is missing its holder or due date")
        loan = Loan(member_id=borrowed_by, due_date=due_date)
    elif borrowed_by or due_date is not None:
        raise ValueError("available book has a holder or due date")

    waitlist = waitlist_str.split(WAITLIST_SEPARATOR) if waitlist_str else []
    if "" in waitlist:
        raise ValueError(f"empty waitlist entry in {waitlist_str!r}")
    if len(set(waitlist)) != len(waitlist):
        raise ValueError(f"duplicate waitlist entry in {waitlist_str!r}")
    if loan and loan.member_id in waitlist:
        raise ValueError(f"holder {loan.member_id} is on their own waitlist")

    return Book(id=book_id, title=title, author=author, loan=loan, waitlist=waitlist)


# ============================================================================
# Stores
# ============================================================================


class RecordStore(ABC):
    """Durable storage for the member and book collections."""

    @abstractmethod
    def load_members(self) -> list[Member]:
        """Load all members in stored order."""

    @abstractmethod
    def load_books(self) -> list[Book]:
        """Load all books in stored order."""

    @abstractmethod
    def save_members(self, members: Iterable[Member]) -> None:
        """Replace the stored members."""

    @abstractmethod
    def save_books(self, books: Iterable[Book]) -> None:
        """Replace the stored books."""

    def load_all(self) -> tuple[list[Member], list[Book]]:
        """Load both collections."""
        return self.load_members(), self.load_books()


class CSVRecordStore(RecordStore):
    """Record store backed by two comma-separated text files."""

    def __init__(self, members_path: Path, books_path: Path):
        """Initialize the store.

        Args:
            members_path: File holding member lines
            books_path: File holding book lines
        """
        self.members_path = Path(members_path)
        self.books_path = Path(books_path)

    def load_members(self) -> list[Member]:
        return self._read(self.members_path, decode_member)

    def load_books(self) -> list[Book]:
        return self._read(self.books_path, decode_book)

    def save_members(self, members: Iterable[Member]) -> None:
        self._write(self.members_path, [encode_member(m) for m in members])

    def save_books(self, books: Iterable[Book]) -> None:
        self._write(self.books_path, [encode_book(b) for b in books])

    def _read(self, path: Path, decode) -> list:
        """Read and decode every line of a file.

        A missing file is an empty collection.
        """
        if not path.exists():
            logger.debug("No store file at %s, starting empty", path)
            return []

        records = []
        try:
            with open(path, "r", encoding="utf-8", newline="") as f:
                reader = csv.reader(f, **CSV_FORMAT)
                for fields in reader:
                    if not fields:
                        continue
                    try:
                        records.append(decode(fields))
                    except ValueError as e:
                        raise MalformedRecordError(path, reader.line_num, str(e)) from e
        except OSError as e:
            raise StoreError(f"Cannot read {path}: {e}") from e
        except csv.Error as e:
            raise StoreError(f"Cannot parse {path}: {e}") from e

        logger.debug("Loaded %d records from %s", len(records), path)
        return records

    def _write(self, path: Path, rows: list[list[str]]) -> None:
        # Encode everything first so a bad record leaves the file untouched
        output = StringIO()
        try:
            csv.writer(output, **CSV_FORMAT).writerows(rows)
        except csv.Error as e:
            raise StoreError(f"Cannot encode record for {path}: {e}") from e

        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            with open(path, "w", encoding="utf-8", newline="") as f:
                f.write(output.getvalue())
        except OSError as e:
            raise StoreError(f"Cannot write {path}: {e}") from e

        logger.debug("Saved %d records to %s", len(rows), path)


class MemoryRecordStore(RecordStore):
    """Record store that keeps copies in memory. Used for testing."""

    def __init__(
        self,
        members: Optional[list[Member]] = None,
        books: Optional[list[Book]] = None,
    ):
        self._members = copy.deepcopy(members or [])
        self._books = copy.deepcopy(books or [])
        self.saves = 0

    def load_members(self) -> list[Member]:
        return copy.deepcopy(self._members)

    def load_books(self) -> list[Book]:
        return copy.deepcopy(self._books)

    def save_members(self, members: Iterable[Member]) -> None:
        self._members = copy.deepcopy(list(members))
        self.saves += 1

    def save_books(self, books: Iterable[Book]) -> None:
        self._books = copy.deepcopy(list(books))
        self.saves += 1
