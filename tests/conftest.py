"""Pytest configuration and shared fixtures.

This module provides fixtures for testing lendinglib, including in-memory
and file-backed record stores, a controllable clock and sample data.
"""

import os
from datetime import date, timedelta
from pathlib import Path
from typing import Generator

import pytest

from lendinglib.config import Config, reset_config
from lendinglib.db.catalog import Catalog, reset_catalog
from lendinglib.db.models import Book, Loan, Member
from lendinglib.db.schemas import BookCreate, MemberCreate
from lendinglib.db.store import CSVRecordStore, MemoryRecordStore, StoreError
from lendinglib.lending.manager import LendingManager


START_DATE = date(2025, 1, 10)


class FakeClock:
    """Callable clock whose date tests can move."""

    def __init__(self, today: date):
        self.today = today
        self.calls = 0

    def __call__(self) -> date:
        self.calls += 1
        return self.today

    def advance(self, days: int) -> None:
        self.today += timedelta(days=days)


class FailingStore(MemoryRecordStore):
    """In-memory store whose writes fail while `fail` is set."""

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.fail = False

    def save_members(self, members) -> None:
        if self.fail:
            raise StoreError("disk full")
        super().save_members(members)

    def save_books(self, books) -> None:
        if self.fail:
            raise StoreError("disk full")
        super().save_books(books)


# ============================================================================
# Configuration Fixtures
# ============================================================================


@pytest.fixture
def config(tmp_path: Path) -> Config:
    """Configuration pointing at temporary store files."""
    return Config(
        members_path=tmp_path / "users.csv",
        books_path=tmp_path / "books.csv",
        loan_days=7,
        fine_per_day=2,
        log_level="WARNING",
    )


@pytest.fixture
def store_env(tmp_path: Path) -> Generator[Path, None, None]:
    """Point the global config at temporary store files."""
    reset_config()
    reset_catalog()

    os.environ["LENDINGLIB_MEMBERS_PATH"] = str(tmp_path / "users.csv")
    os.environ["LENDINGLIB_BOOKS_PATH"] = str(tmp_path / "books.csv")

    yield tmp_path

    reset_config()
    reset_catalog()
    for key in ("LENDINGLIB_MEMBERS_PATH", "LENDINGLIB_BOOKS_PATH"):
        if key in os.environ:
            del os.environ[key]


# ============================================================================
# Store and Catalog Fixtures
# ============================================================================


@pytest.fixture
def memory_store() -> MemoryRecordStore:
    """Empty in-memory record store."""
    return MemoryRecordStore()


@pytest.fixture
def failing_store() -> FailingStore:
    """In-memory store that can be made to fail on write."""
    return FailingStore()


@pytest.fixture
def csv_store(config: Config) -> CSVRecordStore:
    """CSV record store in a temporary directory."""
    return CSVRecordStore(config.members_path, config.books_path)


@pytest.fixture
def catalog(memory_store: MemoryRecordStore) -> Catalog:
    """Catalog over an empty in-memory store."""
    return Catalog(memory_store)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock(START_DATE)


@pytest.fixture
def manager(catalog: Catalog, config: Config, clock: FakeClock) -> LendingManager:
    """Lending manager over the in-memory catalog."""
    return LendingManager(catalog=catalog, config=config, clock=clock)


# ============================================================================
# Sample Data Fixtures
# ============================================================================


@pytest.fixture
def sample_members() -> list[Member]:
    return [
        Member(id="M1", name="Asha Rao", role="student", fine=0),
        Member(id="M2", name="Ben Okafor", role="staff", fine=4),
        Member(id="M3", name="Chen Li", role="student", fine=0),
    ]


@pytest.fixture
def sample_books() -> list[Book]:
    return [
        Book(id="B1", title="Dune", author="Frank Herbert"),
        Book(
            id="B2",
            title="Emma",
            author="Jane Austen",
            loan=Loan(member_id="M2", due_date=date(2025, 1, 20)),
            waitlist=["M1", "M3"],
        ),
    ]


@pytest.fixture
def stocked(manager: LendingManager) -> LendingManager:
    """Manager with members M1-M3 and books B1-B2, all available."""
    manager.add_member(MemberCreate(id="M1", name="Asha Rao", role="student"))
    manager.add_member(MemberCreate(id="M2", name="Ben Okafor", role="staff"))
    manager.add_member(MemberCreate(id="M3", name="Chen Li", role="student"))
    manager.add_book(BookCreate(id="B1", title="Dune", author="Frank Herbert"))
    manager.add_book(BookCreate(id="B2", title="Emma", author="Jane Austen"))
    return manager
