"""Catalog records and caller roles."""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, field_validator

MIN_RATING = 0
MAX_RATING = 5


class Role(str, Enum):
    """Who is talking to the assistant. Fixed for the lifetime of a session."""

    STAFF = "staff"
    PATRON = "patron"


class BookStatus(str, Enum):
    """Lifecycle status of a catalog entry."""

    AVAILABLE = "available"
    CURRENTLY_READING = "currently-reading"
    READ = "read"
    WANT_TO_READ = "want-to-read"
    CHECKED_OUT = "checked-out"
    RESERVED = "reserved"

    @classmethod
    def parse(cls, value: str) -> "BookStatus":
        """Case-insensitive parse that treats spaces and underscores as hyphens."""
        normalized = "-".join(value.strip().lower().replace("_", " ").split())
        return cls(normalized)

    @property
    def label(self) -> str:
        return self.value.replace("-", " ").title()


class CatalogEntry(BaseModel):
    """A single book record, owned by the catalog collaborator."""

    title: str
    author: str
    year: int = 0
    genre: Optional[str] = None
    status: BookStatus = BookStatus.WANT_TO_READ
    rating: int = 0
    notes: str = ""

    @field_validator("status", mode="before")
    @classmethod
    def _parse_status(cls, value: object) -> object:
        if isinstance(value, str) and not isinstance(value, BookStatus):
            return BookStatus.parse(value)
        return value

    @field_validator("rating", mode="before")
    @classmethod
    def _clamp_rating(cls, value: object) -> object:
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return max(MIN_RATING, min(MAX_RATING, int(value)))
        return value

    @property
    def key(self) -> tuple[str, str]:
        """Catalog identity: title and author, case-insensitive."""
        return self.title.lower(), self.author.lower()

    def has_genre(self) -> bool:
        return bool(self.genre and self.genre.strip())
