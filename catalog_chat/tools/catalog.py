"""
Catalog view and aggregate helpers.

The catalog itself is owned by the management layer. This module gives
the conversation engine a read-only snapshot accessor over it, plus the
counting helpers every reply builder shares. An in-memory catalog is
provided for the console demo and tests; in production the same
``list()`` contract would be served by the persistence layer.
"""

import logging
import threading
from collections import Counter
from typing import Iterable, Optional, Protocol

from catalog_chat.schemas.catalog_schema import BookStatus, CatalogEntry

logger = logging.getLogger(__name__)

HIGH_RATING = 4
LOW_RATING = 2

SAMPLE_CATALOG: list[dict] = [
    {"title": "Dune", "author": "Frank Herbert", "year": 1965,
     "genre": "Science Fiction", "status": "available", "rating": 5},
    {"title": "The Hobbit", "author": "J.R.R. Tolkien", "year": 1937,
     "genre": "Fantasy", "status": "available", "rating": 5},
    {"title": "The Fellowship of the Ring", "author": "J.R.R. Tolkien", "year": 1954,
     "genre": "Fantasy", "status": "checked-out", "rating": 4},
    {"title": "Harry Potter and the Philosopher's Stone", "author": "J.K. Rowling",
     "year": 1997, "genre": "Fantasy", "status": "currently-reading", "rating": 4},
    {"title": "1984", "author": "George Orwell", "year": 1949,
     "genre": "Fiction", "status": "read", "rating": 5},
    {"title": "Animal Farm", "author": "George Orwell", "year": 1945,
     "genre": "Fiction", "status": "available", "rating": 3},
    {"title": "Sapiens", "author": "Yuval Noah Harari", "year": 2011,
     "genre": "Non-Fiction", "status": "reserved", "rating": 4},
    {"title": "The Great Gatsby", "author": "F. Scott Fitzgerald", "year": 1925,
     "genre": "Fiction", "status": "want-to-read", "rating": 0},
    {"title": "Gone Girl", "author": "Gillian Flynn", "year": 2012,
     "genre": "Mystery", "status": "available", "rating": 2},
]


class CatalogSource(Protocol):
    """Read interface the engine consumes from the catalog owner."""

    def list(self) -> list[CatalogEntry]: ...


class InMemoryCatalog:
    """Mutable list-backed catalog, safe to mutate while sessions read it."""

    def __init__(self, entries: Optional[Iterable[CatalogEntry]] = None) -> None:
        self._entries: list[CatalogEntry] = list(entries or [])
        self._lock = threading.Lock()

    @classmethod
    def from_records(cls, records: Iterable[dict]) -> "InMemoryCatalog":
        return cls(CatalogEntry(**record) for record in records)

    def list(self) -> list[CatalogEntry]:
        with self._lock:
            return list(self._entries)

    def add(self, entry: CatalogEntry) -> None:
        """Add an entry; title and author together must be unique."""
        with self._lock:
            if any(existing.key == entry.key for existing in self._entries):
                raise ValueError(f"'{entry.title}' by {entry.author} is already in the catalog")
            self._entries.append(entry)
        logger.info("Catalog entry added: %s by %s", entry.title, entry.author)

    def remove(self, title: str, author: str) -> bool:
        """Remove an entry by identity. Returns False if it was not present."""
        key = (title.lower(), author.lower())
        with self._lock:
            for index, existing in enumerate(self._entries):
                if existing.key == key:
                    del self._entries[index]
                    logger.info("Catalog entry removed: %s by %s", title, author)
                    return True
        return False


class CatalogView:
    """Read-only snapshot accessor handed to every session."""

    def __init__(self, source: CatalogSource) -> None:
        self._source = source

    def list(self) -> list[CatalogEntry]:
        """Return a snapshot; later catalog mutations do not affect it."""
        return list(self._source.list())


def with_status(entries: Iterable[CatalogEntry], status: BookStatus) -> list[CatalogEntry]:
    return [e for e in entries if e.status == status]


def count_status(entries: Iterable[CatalogEntry], status: BookStatus) -> int:
    return sum(1 for e in entries if e.status == status)


def average_rating(entries: Iterable[CatalogEntry]) -> float:
    """Mean of rated entries only; 0.0 when nothing is rated."""
    ratings = [e.rating for e in entries if e.rating > 0]
    if not ratings:
        return 0.0
    return sum(ratings) / len(ratings)


def genre_counts(entries: Iterable[CatalogEntry]) -> Counter:
    """Entries per genre, skipping entries without one. Ties keep catalog order."""
    return Counter(e.genre for e in entries if e.has_genre())


def top_rated(
    entries: Iterable[CatalogEntry],
    limit: int,
    min_rating: int = HIGH_RATING,
) -> list[CatalogEntry]:
    """Entries rated at least ``min_rating``, best first, stable within a rating."""
    rated = [e for e in entries if e.rating >= min_rating]
    rated.sort(key=lambda e: e.rating, reverse=True)
    return rated[:limit]


def top_rated_available(entries: Iterable[CatalogEntry], limit: int = 5) -> list[CatalogEntry]:
    return top_rated(with_status(entries, BookStatus.AVAILABLE), limit)


def known_authors(entries: Iterable[CatalogEntry]) -> list[str]:
    return sorted({e.author for e in entries})


def known_genres(entries: Iterable[CatalogEntry]) -> list[str]:
    """Distinct genres in first-seen catalog order."""
    seen: list[str] = []
    for e in entries:
        if e.has_genre() and e.genre not in seen:
            seen.append(e.genre)
    return seen
