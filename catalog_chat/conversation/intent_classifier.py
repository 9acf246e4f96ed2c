"""
Ordered keyword classifier mapping an utterance to an intent.

Rules are evaluated in a fixed precedence and the first match wins:

    1. direct question shape  (sub-classified by trigger phrase)
    2. casual conversation markers
    3. capability / help requests
    4. keyword buckets: greeting, statistics, recommend, search,
       add-book guidance, genre, rating, status
    5. fallback

The phrase tables are an immutable ``IntentPatterns`` value built once
and injected, so tests can classify against alternative tables.

Usage:
    classifier = IntentClassifier(IntentPatterns.default())
    intent = classifier.classify("Who wrote Dune?")
    assert intent == Intent(IntentKind.DIRECT_QUESTION, QuestionKind.WHO_WROTE)
"""

import logging
import re
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from catalog_chat.utils import contains_word, normalize_utterance

logger = logging.getLogger(__name__)


class IntentKind(str, Enum):
    """Closed set of utterance purposes."""
    GREETING = "greeting"
    DIRECT_QUESTION = "direct_question"
    SEARCH = "search"
    RECOMMEND = "recommend"
    STATISTICS = "statistics"
    ADD_BOOK_GUIDANCE = "add_book_guidance"
    GENRE_INQUIRY = "genre_inquiry"
    RATING_INQUIRY = "rating_inquiry"
    STATUS_INQUIRY = "status_inquiry"
    HELP = "help"
    CASUAL_CONVERSATION = "casual_conversation"
    FALLBACK = "fallback"


class QuestionKind(str, Enum):
    """Sub-kind of a direct question."""
    DO_YOU_HAVE = "do_you_have"
    HOW_MANY = "how_many"
    WHAT_IS = "what_is"
    WHO_WROTE = "who_wrote"
    YES_NO = "yes_no"
    OPEN = "open"


@dataclass(frozen=True)
class Intent:
    kind: IntentKind
    question: Optional[QuestionKind] = None

    @classmethod
    def direct(cls, question: QuestionKind) -> "Intent":
        return cls(IntentKind.DIRECT_QUESTION, question)


@dataclass(frozen=True)
class KeywordRule:
    """One keyword bucket. ``whole_word`` rules ignore matches inside longer words."""
    intent: IntentKind
    phrases: tuple[str, ...]
    whole_word: bool = False
    required: tuple[str, ...] = ()

    def matches(self, text: str) -> bool:
        if self.required and not all(word in text for word in self.required):
            return False
        if self.whole_word:
            return any(contains_word(text, phrase) for phrase in self.phrases)
        return any(phrase in text for phrase in self.phrases)


YES_NO_PATTERN = r"\b(is|are|was|were|does|did|can|will|would)\b.*\?"


@dataclass(frozen=True)
class IntentPatterns:
    """Immutable phrase tables driving classification."""

    # (question kind, trigger phrases) in precedence order
    direct_triggers: tuple[tuple[QuestionKind, tuple[str, ...]], ...]
    direct_only_shape: tuple[str, ...]
    yes_no_pattern: re.Pattern
    casual_markers: tuple[str, ...]
    help_phrases: tuple[str, ...]
    keyword_rules: tuple[KeywordRule, ...]

    @classmethod
    def default(cls) -> "IntentPatterns":
        return cls(
            direct_triggers=(
                (QuestionKind.DO_YOU_HAVE, ("do you have",)),
                (QuestionKind.HOW_MANY, ("how many",)),
                (QuestionKind.WHAT_IS, ("what is", "what's")),
                (QuestionKind.WHO_WROTE, ("who wrote", "who is the author", "who's the author")),
            ),
            direct_only_shape=("when was",),
            yes_no_pattern=re.compile(YES_NO_PATTERN),
            casual_markers=(
                "i'm bored", "im bored", "i'm looking for", "i like", "i love",
                "what do you think", "can you", "do you have", "i need", "i want",
                "tell me about", "whats", "how about", "maybe",
            ),
            help_phrases=("help", "what can you do", "capabilities"),
            keyword_rules=(
                KeywordRule(IntentKind.GREETING, (
                    "hello", "hi", "hey", "good morning", "good afternoon", "good evening",
                ), whole_word=True),
                KeywordRule(IntentKind.STATISTICS, (
                    "stats", "statistics", "how many", "analytics",
                )),
                KeywordRule(IntentKind.RECOMMEND, (
                    "recommend", "suggest", "what should i read", "good book", "next book",
                    "similar to", "something new", "i need something", "what about",
                    "any ideas", "pick for me",
                )),
                KeywordRule(IntentKind.SEARCH, (
                    "search", "find", "show me", "list", "do you have", "books by",
                    "anything by", "look for", "got any", "where is", "looking for",
                )),
                KeywordRule(IntentKind.ADD_BOOK_GUIDANCE, ("add",), required=("book",)),
                KeywordRule(IntentKind.GENRE_INQUIRY, ("genre", "category")),
                KeywordRule(IntentKind.RATING_INQUIRY, ("rating", "rate")),
                KeywordRule(IntentKind.STATUS_INQUIRY, ("status", "available")),
            ),
        )


class IntentClassifier:
    """Stateless, pure mapping from utterance text to an ``Intent``."""

    def __init__(self, patterns: Optional[IntentPatterns] = None) -> None:
        self.patterns = patterns or IntentPatterns.default()

    def classify(self, utterance: str) -> Intent:
        text = normalize_utterance(utterance)

        question = self.direct_question_kind(text)
        if question is not None:
            intent = Intent.direct(question)
        elif any(marker in text for marker in self.patterns.casual_markers):
            intent = Intent(IntentKind.CASUAL_CONVERSATION)
        elif any(phrase in text for phrase in self.patterns.help_phrases):
            intent = Intent(IntentKind.HELP)
        else:
            intent = self.classify_keywords(text)

        logger.debug("Classified %r as %s/%s", text, intent.kind.value,
                     intent.question.value if intent.question else "-")
        return intent

    def classify_keywords(self, utterance: str) -> Intent:
        """Keyword buckets only (steps 4 and 5)."""
        text = normalize_utterance(utterance)
        for rule in self.patterns.keyword_rules:
            if rule.matches(text):
                return Intent(rule.intent)
        return Intent(IntentKind.FALLBACK)

    def direct_question_kind(self, text: str) -> Optional[QuestionKind]:
        """Sub-kind if ``text`` has a direct-question shape, else None."""
        for question, phrases in self.patterns.direct_triggers:
            if any(phrase in text for phrase in phrases):
                return question

        if self.patterns.yes_no_pattern.search(text):
            return QuestionKind.YES_NO

        if text.endswith("?") or any(p in text for p in self.patterns.direct_only_shape):
            return QuestionKind.OPEN

        return None
