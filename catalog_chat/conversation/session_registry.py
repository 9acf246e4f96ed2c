"""
Session registry — keyed store of live dialogue sessions.

Replaces per-request bookkeeping in the hosting layer: sessions are
created, looked up, and ended by id, and an external-service credential
can be applied to one session or to all of them. A credential applied
globally is remembered and given to sessions created afterwards.
"""

import logging
import threading
from typing import Any, Callable, Optional

from catalog_chat.config import AppConfig, settings
from catalog_chat.conversation.dialogue_session import DialogueSession, new_session_id
from catalog_chat.schemas.catalog_schema import Role
from catalog_chat.tools.catalog import CatalogSource, CatalogView

logger = logging.getLogger(__name__)


class SessionRegistry:
    """Thread-safe map of session id to ``DialogueSession``."""

    def __init__(
        self,
        catalog: CatalogSource,
        config: AppConfig = settings,
        session_factory: Callable[..., DialogueSession] = DialogueSession,
    ) -> None:
        self.catalog = catalog if isinstance(catalog, CatalogView) else CatalogView(catalog)
        self.config = config
        self._factory = session_factory
        self._sessions: dict[str, DialogueSession] = {}
        self._lock = threading.Lock()
        self._credential: Optional[str] = None
        self._model: Optional[str] = None

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)

    def session_ids(self) -> list[str]:
        with self._lock:
            return list(self._sessions)

    def create_session(
        self,
        role: Role,
        display_name: str = "",
        session_id: Optional[str] = None,
        **kwargs: Any,
    ) -> DialogueSession:
        """Create and register a session.

        Raises:
            ValueError: If ``session_id`` is already registered.
        """
        session_id = session_id or new_session_id()
        with self._lock:
            if session_id in self._sessions:
                raise ValueError(f"Session '{session_id}' already exists")
            credential, model = self._credential, self._model

        session = self._factory(
            role, self.catalog,
            display_name=display_name, session_id=session_id, config=self.config, **kwargs,
        )
        if credential:
            session.configure_external_service(credential, model)

        with self._lock:
            self._sessions[session_id] = session
        logger.info("Session created: %s (%s)", session_id, session.role.value)
        return session

    def get(self, session_id: str) -> DialogueSession:
        """Look up a session.

        Raises:
            KeyError: If the session id is not registered.
        """
        with self._lock:
            if session_id not in self._sessions:
                known = list(self._sessions)
                raise KeyError(f"Session '{session_id}' not registered. Available: {known}")
            return self._sessions[session_id]

    def end_session(self, session_id: str) -> bool:
        """Forget a session. Returns False if it was not registered."""
        with self._lock:
            session = self._sessions.pop(session_id, None)
        if session is None:
            return False
        session.clear_external_service()
        logger.info("Session ended: %s", session_id)
        return True

    def handle(self, session_id: str, utterance: str) -> str:
        return self.get(session_id).handle(utterance)

    def is_ai_enabled(self, session_id: str) -> bool:
        return self.get(session_id).is_ai_enabled

    def configure_external_service(
        self,
        credential: str,
        model: Optional[str] = None,
        session_id: Optional[str] = None,
    ) -> None:
        """Apply a credential to one session, or to every session when no id is given."""
        if session_id is not None:
            self.get(session_id).configure_external_service(credential, model)
            return

        with self._lock:
            blank = not credential or not credential.strip()
            self._credential = None if blank else credential.strip()
            self._model = None if blank else model
            sessions = list(self._sessions.values())

        for session in sessions:
            session.configure_external_service(credential, model)
        logger.info("External service %s for %d sessions",
                    "cleared" if blank else "configured", len(sessions))

    def clear_external_service(self, session_id: Optional[str] = None) -> None:
        if session_id is not None:
            self.get(session_id).clear_external_service()
            return
        self.configure_external_service("")
