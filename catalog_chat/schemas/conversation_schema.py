"""Conversation transcript schemas."""

from enum import Enum
from typing import Optional

from pydantic import BaseModel


class Speaker(str, Enum):
    USER = "user"
    ASSISTANT = "assistant"


class ReplySource(str, Enum):
    """Which response strategy produced an assistant turn."""

    LOCAL = "local"
    EXTERNAL = "external"


class TranscriptTurn(BaseModel):
    """A single turn in a dialogue transcript."""

    speaker: Speaker
    text: str
    timestamp: float
    source: Optional[ReplySource] = None
    response_time_ms: Optional[float] = None

    def as_pair(self) -> tuple[str, str]:
        """The ``(speaker, text)`` pair view of this turn."""
        return self.speaker.value, self.text
