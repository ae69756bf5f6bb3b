"""Data model, record store and catalog."""

from .catalog import Catalog, get_catalog, reset_catalog
from .models import Book, BookStatus, Loan, Member
from .schemas import BookCreate, MemberCreate
from .store import (
    CSVRecordStore,
    MalformedRecordError,
    MemoryRecordStore,
    RecordStore,
    StoreError,
)

__all__ = [
    "Book",
    "BookStatus",
    "Loan",
    "Member",
    "BookCreate",
    "MemberCreate",
    "Catalog",
    "get_catalog",
    "reset_catalog",
    "RecordStore",
    "CSVRecordStore",
    "MemoryRecordStore",
    "StoreError",
    "MalformedRecordError",
]
