"""Shared text and number helpers used across the catalog chat engine."""

import re

_TRAILING_PUNCTUATION = re.compile(r"[?!.,;:]+$")
_PUNCTUATION = re.compile(r"[?.,!]")


def normalize_utterance(value: str) -> str:
    """Lower-case and trim an utterance before rule matching.

    Examples:
        >>> normalize_utterance("  Do you have DUNE?  ")
        'do you have dune?'
    """
    return value.strip().lower()


def strip_trailing_punctuation(value: str) -> str:
    """Drop trailing sentence punctuation.

    Examples:
        >>> strip_trailing_punctuation("frank herbert?!")
        'frank herbert'
    """
    return _TRAILING_PUNCTUATION.sub("", value.strip()).strip()


def strip_punctuation(value: str) -> str:
    """Drop question marks, periods, commas and exclamation marks anywhere."""
    return _PUNCTUATION.sub("", value).strip()


def tokenize(value: str) -> list[str]:
    """Split on whitespace into lower-cased tokens."""
    return value.lower().split()


def contains_word(text: str, word: str) -> bool:
    """True if ``word`` appears in ``text`` as a whole word or phrase."""
    return re.search(rf"(?<!\w){re.escape(word)}(?!\w)", text) is not None


def percent(count: int, total: int) -> int:
    """Integer-truncated percentage, 0 when total is 0.

    Examples:
        >>> percent(2, 3)
        66
    """
    if total <= 0:
        return 0
    return (count * 100) // total
