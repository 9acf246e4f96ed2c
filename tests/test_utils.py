"""Tests for shared utility functions."""

from catalog_chat.utils import (
    contains_word,
    normalize_utterance,
    percent,
    strip_punctuation,
    strip_trailing_punctuation,
    tokenize,
)


class TestNormalizeUtterance:
    def test_lowercases_and_trims(self):
        assert normalize_utterance("  Do you have DUNE?  ") == "do you have dune?"

    def test_blank_becomes_empty(self):
        assert normalize_utterance("   \t ") == ""


class TestPunctuation:
    def test_strips_trailing_only(self):
        assert strip_trailing_punctuation("j.k. rowling?!") == "j.k. rowling"

    def test_trailing_leaves_clean_text(self):
        assert strip_trailing_punctuation("dune") == "dune"

    def test_strips_everywhere(self):
        assert strip_punctuation("dune, please?") == "dune please"


class TestTokenize:
    def test_splits_on_whitespace(self):
        assert tokenize("Frank  Herbert") == ["frank", "herbert"]


class TestContainsWord:
    def test_whole_word_match(self):
        assert contains_word("hi there", "hi")

    def test_no_match_inside_longer_word(self):
        assert not contains_word("this history", "hi")

    def test_phrase_match(self):
        assert contains_word("good morning!", "good morning")

    def test_punctuation_in_word_is_literal(self):
        assert contains_word("find j.k books", "j.k")
        assert not contains_word("find jxk books", "j.k")


class TestPercent:
    def test_truncates(self):
        assert percent(2, 3) == 66

    def test_zero_total(self):
        assert percent(5, 0) == 0

    def test_full(self):
        assert percent(9, 9) == 100
