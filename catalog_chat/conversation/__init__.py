from catalog_chat.conversation.ai_mode import AiMode, AiModeMachine, AiTrigger
from catalog_chat.conversation.dialogue_session import DialogueSession, create_session, handle
from catalog_chat.conversation.intent_classifier import (
    Intent,
    IntentClassifier,
    IntentKind,
    IntentPatterns,
    QuestionKind,
)
from catalog_chat.conversation.reference_resolver import ReferenceResolver, Resolution
from catalog_chat.conversation.response_generator import LocalResponseGenerator
from catalog_chat.conversation.session_registry import SessionRegistry

__all__ = [
    "DialogueSession",
    "SessionRegistry",
    "create_session",
    "handle",
    "Intent",
    "IntentKind",
    "QuestionKind",
    "IntentPatterns",
    "IntentClassifier",
    "ReferenceResolver",
    "Resolution",
    "LocalResponseGenerator",
    "AiMode",
    "AiModeMachine",
    "AiTrigger",
]
