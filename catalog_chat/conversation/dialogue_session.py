"""
Dialogue session — one conversation with a fixed role.

Owns the transcript and the AI mode machine, and decides per turn which
generator answers. When AI mode is enabled the external generator is
tried first; any ``ServiceError`` disables AI mode for the rest of the
session and the same turn is answered locally.

Usage:
    session = create_session(Role.PATRON, InMemoryCatalog.from_records(SAMPLE_CATALOG))
    reply = handle(session, "Do you have Dune?")
"""

import random
import threading
import time
import uuid
from collections import deque
from typing import Optional

import httpx

from catalog_chat.config import AppConfig, settings
from catalog_chat.conversation.ai_mode import AiModeMachine, AiTrigger
from catalog_chat.conversation.intent_classifier import IntentClassifier
from catalog_chat.conversation.reference_resolver import ReferenceResolver
from catalog_chat.conversation.response_generator import LocalResponseGenerator
from catalog_chat.logging_context import get_session_logger, set_session_id
from catalog_chat.prompts.response_templates import (
    AI_STATUS_DISABLED,
    AI_STATUS_ENABLED,
    DIDNT_CATCH_THAT,
)
from catalog_chat.schemas.catalog_schema import CatalogEntry, Role
from catalog_chat.schemas.conversation_schema import ReplySource, Speaker, TranscriptTurn
from catalog_chat.tools.catalog import CatalogSource, CatalogView
from catalog_chat.tools.completion_client import ExternalGenerator, ServiceError, ServiceErrorCode

logger = get_session_logger(__name__)

AI_REPLY_MARKER = "🤖 "


def new_session_id() -> str:
    return f"SESSION-{uuid.uuid4().hex[:12]}"


class DialogueSession:
    """A single conversation: role, transcript, and generator selection."""

    def __init__(
        self,
        role: Role,
        catalog: CatalogSource,
        display_name: str = "",
        classifier: Optional[IntentClassifier] = None,
        resolver: Optional[ReferenceResolver] = None,
        generator: Optional[LocalResponseGenerator] = None,
        rng: Optional[random.Random] = None,
        session_id: Optional[str] = None,
        config: AppConfig = settings,
        external: Optional[ExternalGenerator] = None,
    ) -> None:
        self.role = Role(role)
        self.display_name = display_name
        self.session_id = session_id or new_session_id()
        self.config = config
        self.catalog = catalog if isinstance(catalog, CatalogView) else CatalogView(catalog)
        self.classifier = classifier or IntentClassifier()
        self.resolver = resolver or ReferenceResolver()
        self.generator = generator or LocalResponseGenerator(
            self.resolver, self.classifier, rng, config.dialogue
        )
        self.ai_mode = AiModeMachine()

        self._lock = threading.Lock()
        self._external: Optional[ExternalGenerator] = None
        self._transcript: deque[TranscriptTurn] = deque(
            maxlen=config.dialogue.transcript_max_turns or None
        )

        if external is not None:
            self._attach(external)
        elif config.model.api_key:
            self.configure_external_service(config.model.api_key)

    @property
    def is_ai_enabled(self) -> bool:
        return self.ai_mode.is_enabled

    def ai_status(self) -> str:
        return AI_STATUS_ENABLED if self.is_ai_enabled else AI_STATUS_DISABLED

    @property
    def transcript(self) -> list[TranscriptTurn]:
        with self._lock:
            return list(self._transcript)

    def clear_history(self) -> None:
        with self._lock:
            self._transcript.clear()

    def handle(self, utterance: str) -> str:
        """Answer one utterance and record both sides of the turn."""
        set_session_id(self.session_id)
        if not utterance or not utterance.strip():
            return DIDNT_CATCH_THAT

        started = time.monotonic()
        self._record(Speaker.USER, utterance)
        entries = self.catalog.list()

        reply: Optional[str] = None
        source = ReplySource.LOCAL
        external = self._external
        if self.ai_mode.is_enabled and external is not None:
            try:
                reply = AI_REPLY_MARKER + external.generate(
                    utterance, self.role, entries, self.display_name
                )
                source = ReplySource.EXTERNAL
            except ServiceError as e:
                self._disable_after_failure(e, external)

        if reply is None:
            reply = self._local_reply(utterance, entries)

        elapsed_ms = (time.monotonic() - started) * 1000
        self._record(Speaker.ASSISTANT, reply, source, elapsed_ms)
        logger.debug("Turn answered by %s in %.1fms", source.value, elapsed_ms)
        return reply

    def _local_reply(self, utterance: str, entries: list[CatalogEntry]) -> str:
        intent = self.classifier.classify(utterance)
        resolution = self.resolver.resolve_for(intent, utterance, entries)
        return self.generator.generate(
            intent, utterance, resolution, self.role, entries,
            ai_enabled=self.ai_mode.is_enabled,
        )

    def _disable_after_failure(self, error: ServiceError, external: ExternalGenerator) -> None:
        with self._lock:
            replaced = external is not self._external
        if replaced:
            # The failing generator was swapped out mid-turn; keep the new one
            logger.info("Stale external generator failed (%s); keeping current one", error.code.value)
            return

        was_enabled = self.ai_mode.is_enabled
        logger.warning(
            "External generator failed (%s): %s. Answering locally.",
            error.code.value, error.message,
        )
        self.ai_mode.transition(AiTrigger.SERVICE_FAILED, reason=error.code.value)
        if was_enabled and error.code == ServiceErrorCode.RATE_LIMITED:
            logger.info("Rate limit reached; session %s switched to fallback mode", self.session_id)

    def _record(
        self,
        speaker: Speaker,
        text: str,
        source: Optional[ReplySource] = None,
        response_time_ms: Optional[float] = None,
    ) -> None:
        turn = TranscriptTurn(
            speaker=speaker,
            text=text,
            timestamp=time.time(),
            source=source,
            response_time_ms=response_time_ms,
        )
        with self._lock:
            self._transcript.append(turn)

    # ------------------------------------------------------------------ #
    # External service management
    # ------------------------------------------------------------------ #

    def configure_external_service(
        self,
        credential: str,
        model: Optional[str] = None,
        client: Optional[httpx.Client] = None,
    ) -> None:
        """Enable AI mode with a credential. A blank credential disables it."""
        if not credential or not credential.strip():
            self.clear_external_service()
            return
        self._attach(ExternalGenerator(credential, model=model, config=self.config.model, client=client))

    def _attach(self, external: ExternalGenerator) -> None:
        with self._lock:
            previous, self._external = self._external, external
        self.ai_mode.transition(AiTrigger.CONFIGURED)
        if previous is not None and previous is not external:
            previous.close()
        logger.info("External generator configured (model=%s)", external.model)

    def clear_external_service(self) -> None:
        """Disable AI mode and close the external generator, whether or not it is enabled."""
        with self._lock:
            previous, self._external = self._external, None
        self.ai_mode.transition(AiTrigger.CLEARED)
        if previous is not None:
            previous.close()
            logger.info("External generator cleared")


def create_session(
    role: Role,
    catalog: CatalogSource,
    display_name: str = "",
    **kwargs,
) -> DialogueSession:
    return DialogueSession(role, catalog, display_name=display_name, **kwargs)


def handle(session: DialogueSession, utterance: str) -> str:
    return session.handle(utterance)
