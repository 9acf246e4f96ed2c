"""
Reference resolver — matches free text to catalog entries.

Two steps: extract the operand phrase from the utterance (trigger
phrases, direct recognition of catalog titles/authors, then stop-word
filtering), then match the phrase against every entry using seven
OR-ed similarity tiers:

    1. title == phrase            5. phrase in genre
    2. author == phrase           6. author's last name among phrase tokens
    3. phrase in title            7. significant title word overlaps phrase
    4. phrase in author

All comparisons are case-insensitive. Results keep catalog order; they
are not ranked.

Usage:
    resolver = ReferenceResolver()
    phrase = resolver.extract_search_term("show me books by tolkien", entries)
    matches = resolver.resolve(phrase, "show me books by tolkien", entries)
"""

import logging
import re
from dataclasses import dataclass, field
from typing import Iterable, Optional

from catalog_chat.conversation.intent_classifier import Intent, IntentKind, QuestionKind
from catalog_chat.schemas.catalog_schema import CatalogEntry
from catalog_chat.utils import (
    contains_word,
    normalize_utterance,
    strip_punctuation,
    strip_trailing_punctuation,
    tokenize,
)

logger = logging.getLogger(__name__)

AUTHOR_TRIGGERS = ("books by ", "anything by ", "written by ", "author ")
OPERAND_TRIGGERS = ("looking for ", "do you have ")
DO_YOU_HAVE_TRIGGERS = ("do you have", "have you got", "got")
WHO_WROTE_TRIGGERS = ("who wrote", "who is the author of", "who's the author of")

STOP_WORDS = frozenset({
    "find", "search", "show", "me", "books", "by", "the", "a", "an", "for",
    "library", "statistics", "stats", "analytics", "how", "many", "total",
    "do", "you", "have", "any", "got", "looking", "i'm", "im", "i", "am",
    "can", "could", "would", "please", "want", "need", "like", "love",
    "book", "novel", "story", "read", "reading", "written",
})
TITLE_FILLER_WORDS = frozenset({"the", "a", "an", "and", "of", "to", "in", "on", "at", "by"})

GENRE_VOCABULARY = (
    "fiction", "non-fiction", "mystery", "romance", "science fiction",
    "sci-fi", "fantasy", "biography", "history", "self-help", "business",
)

MIN_SIGNIFICANT_WORD = 4
MIN_LAST_NAME_LENGTH = 4

_DO_YOU_HAVE_FILLER = re.compile(r"\b(any|a|an|the|book|books|by)\b")


@dataclass
class Resolution:
    """The operand phrase an utterance refers to and the entries it matched."""
    phrase: str
    matches: list[CatalogEntry] = field(default_factory=list)


def looks_like_author_name(term: str) -> bool:
    """Two or more words, or one capitalised word longer than 3 characters."""
    words = term.split()
    if len(words) >= 2:
        return True
    return len(words) == 1 and len(words[0]) > 3 and words[0][0].isupper()


def clean_do_you_have_operand(operand: str) -> str:
    """Drop filler words and punctuation from a do-you-have operand.

    Examples:
        >>> clean_do_you_have_operand("any books by the Tolkien?")
        'tolkien'
    """
    operand = _DO_YOU_HAVE_FILLER.sub("", operand.lower())
    return " ".join(strip_punctuation(operand).split())


def extract_after_phrase(message: str, phrase: str) -> str:
    """Text following the first occurrence of ``phrase``, or ''."""
    index = message.lower().find(phrase.lower())
    if index == -1:
        return ""
    return message[index + len(phrase):].strip()


def _initials(author: str) -> list[str]:
    """Initials variants for names like 'J.K. Rowling' -> ['j.k', 'jk']."""
    first = author.lower().split()[0] if author.split() else ""
    if "." not in first:
        return []
    dotted = first.rstrip(".")
    compact = dotted.replace(".", "")
    if len(compact) < 2:
        return []
    return [dotted, compact]


class ReferenceResolver:
    """Extracts operand phrases and resolves them to catalog entries."""

    def resolve(
        self,
        search_phrase: str,
        original_utterance: str,
        catalog: Iterable[CatalogEntry],
    ) -> list[CatalogEntry]:
        phrase = search_phrase.strip().lower()
        if not phrase:
            return []
        phrase_tokens = phrase.split()
        matches = [e for e in catalog if self._matches(e, phrase, phrase_tokens)]
        logger.debug("Resolved %r from %r to %d entries", phrase, original_utterance, len(matches))
        return matches

    def _matches(self, entry: CatalogEntry, phrase: str, phrase_tokens: list[str]) -> bool:
        title = entry.title.lower()
        author = entry.author.lower()

        if title == phrase or author == phrase:
            return True
        if phrase in title or phrase in author:
            return True
        if entry.has_genre() and phrase in entry.genre.lower():
            return True

        author_tokens = author.split()
        if author_tokens and author_tokens[-1] in phrase_tokens:
            return True

        title_tokens = title.split()
        if len(title_tokens) > 1:
            return any(
                phrase in word or word in phrase
                for word in title_tokens
                if len(word) >= MIN_SIGNIFICANT_WORD
            )
        return False

    def resolve_for(
        self,
        intent: Intent,
        utterance: str,
        catalog: list[CatalogEntry],
    ) -> Optional[Resolution]:
        """Extract and resolve for intents that need a catalog lookup, else None."""
        text = normalize_utterance(utterance)
        if intent.question == QuestionKind.DO_YOU_HAVE:
            phrase = self.extract_do_you_have_term(text)
        elif intent.question in (QuestionKind.YES_NO, QuestionKind.WHAT_IS) \
                or intent.kind == IntentKind.SEARCH:
            phrase = self.extract_search_term(text, catalog)
        else:
            return None
        return Resolution(phrase=phrase, matches=self.resolve(phrase, text, catalog))

    # ------------------------------------------------------------------ #
    # Phrase extraction
    # ------------------------------------------------------------------ #

    def extract_search_term(self, message: str, catalog: list[CatalogEntry]) -> str:
        text = normalize_utterance(message)

        for trigger in AUTHOR_TRIGGERS:
            if trigger in text:
                return strip_trailing_punctuation(extract_after_phrase(text, trigger))

        title = self.find_title_in_text(text, catalog)
        if title:
            return title
        author = self.find_author_in_text(text, catalog)
        if author:
            return author

        for trigger in OPERAND_TRIGGERS:
            if trigger in text:
                return strip_trailing_punctuation(extract_after_phrase(text, trigger))

        keywords = []
        for word in tokenize(text):
            word = strip_trailing_punctuation(word)
            if word in STOP_WORDS or len(word) <= 2 or word.isdigit():
                continue
            keywords.append(word)
        return " ".join(keywords)

    def extract_do_you_have_term(self, message: str) -> str:
        text = normalize_utterance(message)
        for trigger in DO_YOU_HAVE_TRIGGERS:
            if trigger in text:
                return clean_do_you_have_operand(extract_after_phrase(text, trigger))
        return ""

    def extract_who_wrote_title(self, message: str) -> str:
        text = normalize_utterance(message)
        for trigger in WHO_WROTE_TRIGGERS:
            if trigger in text:
                operand = extract_after_phrase(text, trigger)
                operand = re.sub(r"\b(the|a|an)\b", "", operand)
                return " ".join(strip_punctuation(operand).split())
        return ""

    def find_title_in_text(self, text: str, catalog: Iterable[CatalogEntry]) -> str:
        """Catalog title the text names in full, or by its first two significant words."""
        lower = text.lower()
        for entry in catalog:
            title = entry.title.lower()
            if contains_word(lower, title):
                return entry.title
            words = title.split()
            if len(words) > 2:
                significant = [w for w in words if w not in TITLE_FILLER_WORDS]
                if len(significant) >= 2 and all(w in lower for w in significant[:2]):
                    return entry.title
        return ""

    def find_author_in_text(self, text: str, catalog: Iterable[CatalogEntry]) -> str:
        """Catalog author the text names by full name, last name, or initials."""
        lower = text.lower()
        for entry in catalog:
            author = entry.author.lower()
            if contains_word(lower, author):
                return entry.author
            parts = author.split()
            last_name = parts[-1] if len(parts) > 1 else ""
            if len(last_name) >= MIN_LAST_NAME_LENGTH and contains_word(lower, last_name):
                return entry.author
            if any(contains_word(lower, variant) for variant in _initials(entry.author)):
                return entry.author
        return ""

    def find_author_or_title(self, text: str, catalog: list[CatalogEntry]) -> str:
        """Display form of a recognised author, or quoted title, or ''."""
        author = self.find_author_in_text(text, catalog)
        if author:
            return author
        title = self.find_title_in_text(text, catalog)
        if title:
            return f'"{title}"'
        return ""

    def extract_genre(self, message: str, catalog: Iterable[CatalogEntry] = ()) -> str:
        """Genre named in the message, preferring the catalog's own genre names."""
        text = normalize_utterance(message)
        catalog_genres = {e.genre.lower() for e in catalog if e.has_genre()}
        for vocabulary in (catalog_genres, GENRE_VOCABULARY):
            for genre in sorted(vocabulary, key=len, reverse=True):
                if contains_word(text, genre):
                    return genre
        return ""
