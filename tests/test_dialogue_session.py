"""Tests for dialogue session orchestration and the AI fallback path."""

import logging
import random
from dataclasses import replace

import httpx
import pytest

from catalog_chat.conversation.ai_mode import AiMode
from catalog_chat.conversation.dialogue_session import DialogueSession, create_session, handle
from catalog_chat.conversation.intent_classifier import IntentClassifier
from catalog_chat.prompts.response_templates import (
    AI_STATUS_DISABLED,
    AI_STATUS_ENABLED,
    DIDNT_CATCH_THAT,
)
from catalog_chat.schemas.catalog_schema import BookStatus, Role
from catalog_chat.schemas.conversation_schema import ReplySource, Speaker
from catalog_chat.tools.catalog import InMemoryCatalog
from tests.conftest import OFFLINE_SETTINGS, completion_body, make_entry, mock_client


class ExplodingClassifier(IntentClassifier):
    def classify(self, utterance):
        raise AssertionError("classifier must not be consulted")


class CountingHandler:
    """MockTransport handler that records calls and replies with a fixed response."""

    def __init__(self, response_factory):
        self.calls = 0
        self._factory = response_factory

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.calls += 1
        return self._factory(request)


def ai_session(catalog, handler, role=Role.PATRON) -> DialogueSession:
    session = DialogueSession(role, catalog, rng=random.Random(1), config=OFFLINE_SETTINGS)
    session.configure_external_service("sk-test", client=mock_client(handler))
    return session


class TestBlankInput:
    @pytest.mark.parametrize("utterance", ["", "   ", "\n\t"])
    def test_blank_returns_fixed_message(self, catalog, utterance):
        session = DialogueSession(Role.PATRON, catalog, classifier=ExplodingClassifier(),
                                  config=OFFLINE_SETTINGS)
        assert session.handle(utterance) == DIDNT_CATCH_THAT
        assert session.transcript == []


class TestLocalTurns:
    def test_dune_scenario(self):
        catalog = InMemoryCatalog([
            make_entry("Dune", "Frank Herbert", 1965, "Science Fiction", BookStatus.AVAILABLE, 5),
        ])
        session = create_session(Role.PATRON, catalog, config=OFFLINE_SETTINGS)
        reply = handle(session, "Do you have books by Frank Herbert?")
        assert "Dune" in reply
        assert "5" in reply

    def test_fantasy_count_scenario(self):
        entries = [make_entry(f"Quest {i}", genre="Fantasy") for i in range(4)]
        entries += [make_entry(f"Case {i}", genre="Mystery") for i in range(6)]
        session = create_session(Role.PATRON, InMemoryCatalog(entries), config=OFFLINE_SETTINGS)
        assert "4" in session.handle("how many fantasy books")

    def test_empty_catalog_recommendation(self, empty_catalog):
        session = create_session(Role.PATRON, empty_catalog, config=OFFLINE_SETTINGS)
        assert "library is currently empty" in session.handle("recommend me something")

    def test_repeated_question_is_stable(self, patron_session):
        first = patron_session.handle("Do you have Dune?")
        assert patron_session.handle("Do you have Dune?") == first

    def test_catalog_changes_seen_next_turn(self, catalog, patron_session):
        assert patron_session.handle("how many books") == "We have 9 books in our library."
        catalog.add(make_entry("Emma", "Jane Austen"))
        assert patron_session.handle("how many books") == "We have 10 books in our library."

    def test_starts_in_local_mode(self, patron_session):
        assert not patron_session.is_ai_enabled
        assert patron_session.ai_status() == AI_STATUS_DISABLED


class TestTranscript:
    def test_records_both_sides(self, patron_session):
        reply = patron_session.handle("hello")
        turns = patron_session.transcript
        assert [t.speaker for t in turns] == [Speaker.USER, Speaker.ASSISTANT]
        assert turns[0].text == "hello"
        assert turns[1].text == reply
        assert turns[1].source == ReplySource.LOCAL
        assert turns[1].response_time_ms is not None
        assert [t.as_pair() for t in turns] == [("user", "hello"), ("assistant", reply)]

    def test_transcript_is_a_copy(self, patron_session):
        patron_session.handle("hello")
        patron_session.transcript.clear()
        assert len(patron_session.transcript) == 2

    def test_clear_history(self, patron_session):
        patron_session.handle("hello")
        patron_session.clear_history()
        assert patron_session.transcript == []

    def test_unbounded_by_default(self, patron_session):
        for _ in range(30):
            patron_session.handle("help")
        assert len(patron_session.transcript) == 60

    def test_bounded_ring_buffer(self, catalog):
        config = replace(OFFLINE_SETTINGS, dialogue=replace(OFFLINE_SETTINGS.dialogue, transcript_max_turns=2))
        session = DialogueSession(Role.PATRON, catalog, config=config)
        session.handle("hello")
        session.handle("how many books")
        turns = session.transcript
        assert len(turns) == 2
        assert turns[0].text == "how many books"


class TestExternalGenerator:
    def test_enabled_reply_is_marked(self, catalog):
        handler = CountingHandler(lambda r: httpx.Response(200, json=completion_body("We do!")))
        session = ai_session(catalog, handler)
        assert session.is_ai_enabled
        assert session.ai_status() == AI_STATUS_ENABLED
        assert session.handle("Do you have Dune?") == "🤖 We do!"
        assert session.transcript[-1].source == ReplySource.EXTERNAL
        assert handler.calls == 1

    def test_failure_falls_back_and_disables(self, catalog):
        handler = CountingHandler(lambda r: httpx.Response(500, text="boom"))
        session = ai_session(catalog, handler)

        reply = session.handle("Do you have Dune?")

        assert reply == 'Yes! We have "Dune" by Frank Herbert (Available, rated 5/5).'
        assert not session.is_ai_enabled
        assert session.transcript[-1].source == ReplySource.LOCAL

        session.handle("Do you have Dune?")
        assert handler.calls == 1

    def test_fallback_reply_has_ai_hint(self, catalog):
        handler = CountingHandler(lambda r: httpx.Response(429))
        session = ai_session(catalog, handler)
        assert "Enable AI" in session.handle("recommend something")

    def test_malformed_reply_falls_back(self, catalog):
        handler = CountingHandler(lambda r: httpx.Response(200, json=completion_body("")))
        session = ai_session(catalog, handler)
        assert not session.handle("hello").startswith("🤖")
        assert session.ai_mode.current_mode == AiMode.DISABLED

    def test_failure_logged(self, catalog, caplog):
        handler = CountingHandler(lambda r: httpx.Response(429))
        session = ai_session(catalog, handler)
        with caplog.at_level(logging.INFO, logger="catalog_chat.conversation.dialogue_session"):
            session.handle("hello")
        messages = [r.getMessage() for r in caplog.records]
        assert any("rate_limited" in m for m in messages)
        assert any("switched to fallback mode" in m for m in messages)
        warning = next(r for r in caplog.records if r.levelno == logging.WARNING)
        assert warning.session_id == session.session_id

    def test_reconfigure_after_failure(self, catalog):
        failing = CountingHandler(lambda r: httpx.Response(500))
        session = ai_session(catalog, failing)
        session.handle("hello")
        working = CountingHandler(lambda r: httpx.Response(200, json=completion_body("Back!")))
        session.configure_external_service("sk-new", client=mock_client(working))
        assert session.handle("hello") == "🤖 Back!"

    def test_blank_credential_disables(self, catalog):
        handler = CountingHandler(lambda r: httpx.Response(200, json=completion_body("x")))
        session = ai_session(catalog, handler)
        session.configure_external_service("  ")
        assert not session.is_ai_enabled
        session.handle("hello")
        assert handler.calls == 0

    def test_clear_external_service(self, catalog):
        handler = CountingHandler(lambda r: httpx.Response(200, json=completion_body("x")))
        session = ai_session(catalog, handler)
        session.clear_external_service()
        assert not session.is_ai_enabled
        assert session.ai_mode.get_mode_trace() == ["disabled", "enabled", "disabled"]

    def test_failure_of_replaced_generator_keeps_new_one(self, catalog):
        working = CountingHandler(lambda r: httpx.Response(200, json=completion_body("Fresh!")))
        session = DialogueSession(Role.PATRON, catalog, rng=random.Random(1), config=OFFLINE_SETTINGS)

        def swap_then_fail(request: httpx.Request) -> httpx.Response:
            session.configure_external_service("sk-new", client=mock_client(working))
            return httpx.Response(500)

        session.configure_external_service("sk-old", client=mock_client(swap_then_fail))

        reply = session.handle("Do you have Dune?")

        assert reply == 'Yes! We have "Dune" by Frank Herbert (Available, rated 5/5).'
        assert session.is_ai_enabled
        assert session.handle("hello") == "🤖 Fresh!"
        assert working.calls == 1

    def test_clear_closes_client_after_downgrade(self, catalog):
        client = mock_client(lambda r: httpx.Response(503))
        session = DialogueSession(Role.PATRON, catalog, rng=random.Random(1), config=OFFLINE_SETTINGS)
        session.configure_external_service("sk-test", client=client)
        session.handle("hello")
        session.clear_external_service()
        assert client.is_closed
