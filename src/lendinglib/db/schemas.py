"""Pydantic schemas for adding members and books."""

from pydantic import BaseModel, Field, field_validator

# The record store writes fields unquoted, so these characters cannot be stored.
FIELD_FORBIDDEN = (",", "\n", "\r")
ID_FORBIDDEN = FIELD_FORBIDDEN + (";",)


def _check_chars(value: str, forbidden: tuple[str, ...]) -> str:
    bad = [c for c in forbidden if c in value]
    if bad:
        raise ValueError(f"must not contain {', '.join(repr(c) for c in bad)}")
    return value


class MemberCreate(BaseModel):
    """Schema for adding a member."""

    id: str = Field(..., min_length=1)
    name: str
    role: str

    @field_validator("id")
    @classmethod
    def check_id(cls, v: str) -> str:
        """Ids also appear in ';'-joined waitlists."""
        return _check_chars(v, ID_FORBIDDEN)

    @field_validator("name", "role")
    @classmethod
    def check_text(cls, v: str) -> str:
        return _check_chars(v, FIELD_FORBIDDEN)


class BookCreate(BaseModel):
    """Schema for adding a book."""

    id: str = Field(..., min_length=1)
    title: str
    author: str

    @field_validator("id")
    @classmethod
    def check_id(cls, v: str) -> str:
        return _check_chars(v, ID_FORBIDDEN)

    @field_validator("title", "author")
    @classmethod
    def check_text(cls, v: str) -> str:
        return _check_chars(v, FIELD_FORBIDDEN)
