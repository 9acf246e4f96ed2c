"""Tests for the session registry."""

import httpx
import pytest

from catalog_chat.conversation.session_registry import SessionRegistry
from catalog_chat.schemas.catalog_schema import Role
from tests.conftest import OFFLINE_SETTINGS, completion_body, mock_client


@pytest.fixture
def registry(catalog):
    return SessionRegistry(catalog, config=OFFLINE_SETTINGS)


class TestLifecycle:
    def test_create_and_get(self, registry):
        session = registry.create_session(Role.PATRON, "Sam")
        assert registry.get(session.session_id) is session
        assert session.display_name == "Sam"
        assert len(registry) == 1

    def test_explicit_id(self, registry):
        session = registry.create_session(Role.STAFF, session_id="desk-1")
        assert session.session_id == "desk-1"
        assert registry.session_ids() == ["desk-1"]

    def test_duplicate_id_rejected(self, registry):
        registry.create_session(Role.STAFF, session_id="desk-1")
        with pytest.raises(ValueError, match="already exists"):
            registry.create_session(Role.PATRON, session_id="desk-1")

    def test_unknown_id_raises(self, registry):
        registry.create_session(Role.STAFF, session_id="desk-1")
        with pytest.raises(KeyError, match="not registered"):
            registry.get("missing")

    def test_end_session(self, registry):
        session = registry.create_session(Role.PATRON)
        assert registry.end_session(session.session_id)
        assert not registry.end_session(session.session_id)
        assert len(registry) == 0

    def test_end_session_closes_client_after_downgrade(self, registry):
        client = mock_client(lambda request: httpx.Response(429))
        session = registry.create_session(Role.PATRON)
        session.configure_external_service("sk-test", client=client)
        session.handle("hello")
        assert not session.is_ai_enabled

        registry.end_session(session.session_id)
        assert client.is_closed

    def test_end_session_closes_enabled_client(self, registry):
        client = mock_client(lambda request: httpx.Response(200, json=completion_body("Hi!")))
        session = registry.create_session(Role.PATRON)
        session.configure_external_service("sk-test", client=client)
        registry.end_session(session.session_id)
        assert client.is_closed
        assert not session.is_ai_enabled

    def test_handle_routes_to_session(self, registry):
        session = registry.create_session(Role.PATRON)
        assert registry.handle(session.session_id, "how many books") == "We have 9 books in our library."
        assert len(session.transcript) == 2

    def test_sessions_share_the_catalog(self, registry, catalog):
        first = registry.create_session(Role.PATRON)
        second = registry.create_session(Role.STAFF)
        catalog.remove("Dune", "Frank Herbert")
        assert registry.handle(first.session_id, "how many books") == "We have 8 books in our library."
        assert registry.handle(second.session_id, "how many books") == "We have 8 books in our library."


class TestExternalServiceControl:
    def test_global_configure_applies_to_existing_and_new(self, registry):
        existing = registry.create_session(Role.PATRON)
        registry.configure_external_service("sk-test")
        later = registry.create_session(Role.STAFF)
        assert registry.is_ai_enabled(existing.session_id)
        assert registry.is_ai_enabled(later.session_id)

    def test_global_clear(self, registry):
        registry.configure_external_service("sk-test")
        existing = registry.create_session(Role.PATRON)
        registry.clear_external_service()
        later = registry.create_session(Role.PATRON)
        assert not registry.is_ai_enabled(existing.session_id)
        assert not registry.is_ai_enabled(later.session_id)

    def test_blank_global_credential_disables(self, registry):
        session = registry.create_session(Role.PATRON)
        registry.configure_external_service("sk-test")
        registry.configure_external_service("")
        assert not registry.is_ai_enabled(session.session_id)

    def test_per_session_configure(self, registry):
        first = registry.create_session(Role.PATRON)
        second = registry.create_session(Role.PATRON)
        registry.configure_external_service("sk-test", session_id=first.session_id)
        assert registry.is_ai_enabled(first.session_id)
        assert not registry.is_ai_enabled(second.session_id)

    def test_per_session_clear(self, registry):
        registry.configure_external_service("sk-test")
        first = registry.create_session(Role.PATRON)
        second = registry.create_session(Role.PATRON)
        registry.clear_external_service(first.session_id)
        assert not registry.is_ai_enabled(first.session_id)
        assert registry.is_ai_enabled(second.session_id)

    def test_unknown_session_configure_raises(self, registry):
        with pytest.raises(KeyError):
            registry.configure_external_service("sk-test", session_id="missing")
