"""
Two-state machine tracking whether a session uses the external service.

A session starts in DISABLED mode unless a credential is configured.
A failing external call moves it back to DISABLED so later turns are
answered locally until someone configures a credential again.

Usage:
    mode = AiModeMachine()
    mode.transition(AiTrigger.CONFIGURED)
    assert mode.is_enabled
    mode.transition(AiTrigger.SERVICE_FAILED)
    assert mode.current_mode == AiMode.DISABLED
"""

import logging
import threading
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Optional

logger = logging.getLogger(__name__)


class AiMode(str, Enum):
    ENABLED = "enabled"
    DISABLED = "disabled"


class AiTrigger(str, Enum):
    """Events that change the AI mode."""
    CONFIGURED = "configured"
    SERVICE_FAILED = "service_failed"
    CLEARED = "cleared"


@dataclass
class Transition:
    from_mode: AiMode
    to_mode: AiMode
    trigger: AiTrigger


@dataclass
class ModeEntry:
    """Recorded history entry for a mode change."""
    mode: AiMode
    entered_at: datetime
    trigger: Optional[AiTrigger] = None
    reason: str = ""


class InvalidTransitionError(Exception):
    """Raised when a trigger is not valid from the current mode."""


class AiModeMachine:
    """
    Thread-safe ENABLED/DISABLED switch with an auditable history.

    SERVICE_FAILED is accepted in DISABLED mode as well, so two turns
    failing at the same time both land in DISABLED without an error.
    """

    TRANSITIONS: list[Transition] = [
        Transition(AiMode.DISABLED, AiMode.ENABLED, AiTrigger.CONFIGURED),
        Transition(AiMode.ENABLED, AiMode.ENABLED, AiTrigger.CONFIGURED),
        Transition(AiMode.ENABLED, AiMode.DISABLED, AiTrigger.SERVICE_FAILED),
        Transition(AiMode.DISABLED, AiMode.DISABLED, AiTrigger.SERVICE_FAILED),
        Transition(AiMode.ENABLED, AiMode.DISABLED, AiTrigger.CLEARED),
        Transition(AiMode.DISABLED, AiMode.DISABLED, AiTrigger.CLEARED),
    ]

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._current_mode = AiMode.DISABLED
        self._history: list[ModeEntry] = [
            ModeEntry(mode=AiMode.DISABLED, entered_at=datetime.now(timezone.utc))
        ]

    @property
    def current_mode(self) -> AiMode:
        return self._current_mode

    @property
    def is_enabled(self) -> bool:
        return self._current_mode == AiMode.ENABLED

    def transition(self, trigger: AiTrigger, reason: str = "") -> AiMode:
        """
        Apply a trigger to the current mode.

        Args:
            trigger: The event causing the change.
            reason: Free text stored in the history (e.g. the failure code).

        Returns:
            The new mode.

        Raises:
            InvalidTransitionError: If no transition exists for the trigger.
        """
        with self._lock:
            for t in self.TRANSITIONS:
                if t.from_mode == self._current_mode and t.trigger == trigger:
                    old_mode = self._current_mode
                    self._current_mode = t.to_mode
                    self._history.append(ModeEntry(
                        mode=t.to_mode,
                        entered_at=datetime.now(timezone.utc),
                        trigger=trigger,
                        reason=reason,
                    ))
                    logger.debug(
                        "AI mode: %s -> %s (trigger: %s)",
                        old_mode.value, t.to_mode.value, trigger.value,
                    )
                    return self._current_mode

            valid = [t.trigger.value for t in self.TRANSITIONS if t.from_mode == self._current_mode]
            raise InvalidTransitionError(
                f"No valid transition from '{self._current_mode.value}' "
                f"with trigger '{trigger.value}'. Valid triggers: {valid}"
            )

    def get_history(self) -> list[ModeEntry]:
        with self._lock:
            return list(self._history)

    def get_mode_trace(self) -> list[str]:
        """Ordered list of mode names visited."""
        return [entry.mode.value for entry in self.get_history()]
