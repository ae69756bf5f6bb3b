"""Configuration management for lendinglib.

Loads configuration from environment variables and provides defaults.
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

# Load .env file if present
load_dotenv()

DEFAULT_DATA_DIR = Path.home() / ".lendinglib"


@dataclass
class Config:
    """Application configuration."""

    # Record store
    members_path: Path
    books_path: Path

    # Lending rules
    loan_days: int
    fine_per_day: int  # currency units per late day

    # Logging
    log_level: str

    @classmethod
    def from_env(cls) -> "Config":
        """Load configuration from environment variables."""
        members_path = Path(
            os.environ.get("LENDINGLIB_MEMBERS_PATH", str(DEFAULT_DATA_DIR / "users.csv"))
        ).expanduser()
        books_path = Path(
            os.environ.get("LENDINGLIB_BOOKS_PATH", str(DEFAULT_DATA_DIR / "books.csv"))
        ).expanduser()

        return cls(
            members_path=members_path,
            books_path=books_path,
            loan_days=int(os.environ.get("LENDINGLIB_LOAN_DAYS", "7")),
            fine_per_day=int(os.environ.get("LENDINGLIB_FINE_PER_DAY", "2")),
            log_level=os.environ.get("LENDINGLIB_LOG_LEVEL", "WARNING").upper(),
        )

    def validate(self) -> list[str]:
        """Validate configuration, return list of errors."""
        errors = []

        for path in (self.members_path, self.books_path):
            if not path.parent.exists():
                try:
                    path.parent.mkdir(parents=True, exist_ok=True)
                except PermissionError:
                    errors.append(f"Cannot create data directory: {path.parent}")

        if self.loan_days <= 0:
            errors.append(f"Loan period must be positive, got {self.loan_days}")
        if self.fine_per_day < 0:
            errors.append(f"Fine per day cannot be negative, got {self.fine_per_day}")

        return errors


# Global config instance
_config: Optional[Config] = None


def get_config() -> Config:
    """Get or create the global config instance."""
    global _config
    if _config is None:
        _config = Config.from_env()
    return _config


def reset_config() -> None:
    """Reset the global config instance. Used for testing."""
    global _config
    _config = None
