"""Shared test fixtures and helpers."""

import random
from dataclasses import replace
from typing import Optional

import httpx
import pytest

from catalog_chat.config import AppConfig, settings
from catalog_chat.conversation.dialogue_session import DialogueSession
from catalog_chat.conversation.intent_classifier import IntentClassifier
from catalog_chat.conversation.reference_resolver import ReferenceResolver
from catalog_chat.conversation.response_generator import LocalResponseGenerator
from catalog_chat.schemas.catalog_schema import BookStatus, CatalogEntry, Role
from catalog_chat.tools.catalog import SAMPLE_CATALOG, InMemoryCatalog

# Never pick up a real credential from the environment in tests
OFFLINE_SETTINGS: AppConfig = replace(settings, model=replace(settings.model, api_key=""))


def make_entry(
    title: str,
    author: str = "Test Author",
    year: int = 2000,
    genre: Optional[str] = "Fiction",
    status: BookStatus = BookStatus.AVAILABLE,
    rating: int = 0,
) -> CatalogEntry:
    """Helper to create a CatalogEntry with sensible defaults."""
    return CatalogEntry(
        title=title, author=author, year=year, genre=genre, status=status, rating=rating,
    )


def completion_body(content: str) -> dict:
    """Minimal chat-completion response body."""
    return {"choices": [{"message": {"role": "assistant", "content": content}}]}


def mock_client(handler) -> httpx.Client:
    """httpx client whose requests are answered by ``handler``."""
    return httpx.Client(transport=httpx.MockTransport(handler))


@pytest.fixture
def offline_settings() -> AppConfig:
    return OFFLINE_SETTINGS


@pytest.fixture
def sample_entries() -> list[CatalogEntry]:
    return [CatalogEntry(**record) for record in SAMPLE_CATALOG]


@pytest.fixture
def catalog() -> InMemoryCatalog:
    return InMemoryCatalog.from_records(SAMPLE_CATALOG)


@pytest.fixture
def empty_catalog() -> InMemoryCatalog:
    return InMemoryCatalog()


@pytest.fixture
def rng() -> random.Random:
    return random.Random(42)


@pytest.fixture
def classifier() -> IntentClassifier:
    return IntentClassifier()


@pytest.fixture
def resolver() -> ReferenceResolver:
    return ReferenceResolver()


@pytest.fixture
def generator(resolver, classifier, rng) -> LocalResponseGenerator:
    return LocalResponseGenerator(resolver, classifier, rng, OFFLINE_SETTINGS.dialogue)


@pytest.fixture
def patron_session(catalog, rng) -> DialogueSession:
    return DialogueSession(Role.PATRON, catalog, rng=rng, config=OFFLINE_SETTINGS)


@pytest.fixture
def staff_session(catalog, rng) -> DialogueSession:
    return DialogueSession(Role.STAFF, catalog, rng=rng, config=OFFLINE_SETTINGS)
