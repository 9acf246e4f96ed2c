"""Tests for rule-ordered intent classification."""

from dataclasses import replace

import pytest

from catalog_chat.conversation.intent_classifier import (
    Intent,
    IntentClassifier,
    IntentKind,
    IntentPatterns,
    KeywordRule,
    QuestionKind,
)


class TestDirectQuestions:
    @pytest.mark.parametrize("utterance, question", [
        ("Do you have Dune?", QuestionKind.DO_YOU_HAVE),
        ("How many books are available?", QuestionKind.HOW_MANY),
        ("What's the rating of Dune?", QuestionKind.WHAT_IS),
        ("What is the average rating?", QuestionKind.WHAT_IS),
        ("Who wrote The Hobbit?", QuestionKind.WHO_WROTE),
        ("Who is the author of Sapiens?", QuestionKind.WHO_WROTE),
        ("Is The Hobbit available?", QuestionKind.YES_NO),
        ("Are there any mysteries?", QuestionKind.YES_NO),
        ("When was Dune published", QuestionKind.OPEN),
        ("Any good book ideas?", QuestionKind.OPEN),
    ])
    def test_sub_kind(self, classifier, utterance, question):
        assert classifier.classify(utterance) == Intent.direct(question)

    def test_first_listed_trigger_wins(self, classifier):
        intent = classifier.classify("how many fantasy books do you have?")
        assert intent.question == QuestionKind.DO_YOU_HAVE

    def test_yes_no_requires_question_mark(self, classifier):
        assert classifier.classify("is it raining").kind != IntentKind.DIRECT_QUESTION


class TestPrecedence:
    def test_casual_before_help(self, classifier):
        assert classifier.classify("can you help me").kind == IntentKind.CASUAL_CONVERSATION

    def test_help(self, classifier):
        assert classifier.classify("help").kind == IntentKind.HELP

    def test_statistics_before_search(self, classifier):
        assert classifier.classify("show me library statistics").kind == IntentKind.STATISTICS

    @pytest.mark.parametrize("utterance", ["I'm bored", "i like fantasy", "maybe later"])
    def test_casual_markers(self, classifier, utterance):
        assert classifier.classify(utterance).kind == IntentKind.CASUAL_CONVERSATION


class TestKeywordBuckets:
    @pytest.mark.parametrize("utterance, kind", [
        ("Hello there", IntentKind.GREETING),
        ("good morning", IntentKind.GREETING),
        ("recommend a mystery", IntentKind.RECOMMEND),
        ("suggest something", IntentKind.RECOMMEND),
        ("find tolkien", IntentKind.SEARCH),
        ("show me books by orwell", IntentKind.SEARCH),
        ("add a new book", IntentKind.ADD_BOOK_GUIDANCE),
        ("what genres are there", IntentKind.GENRE_INQUIRY),
        ("rate this", IntentKind.RATING_INQUIRY),
        ("check status", IntentKind.STATUS_INQUIRY),
        ("blah", IntentKind.FALLBACK),
    ])
    def test_bucket(self, classifier, utterance, kind):
        assert classifier.classify(utterance).kind == kind

    def test_greeting_ignores_hi_inside_words(self, classifier):
        assert classifier.classify("this history").kind == IntentKind.FALLBACK

    def test_add_requires_book(self, classifier):
        assert classifier.classify("add tolkien").kind == IntentKind.FALLBACK

    def test_classify_keywords_skips_question_shape(self, classifier):
        assert classifier.classify_keywords("recommend something?").kind == IntentKind.RECOMMEND


class TestDeterminism:
    def test_same_input_same_intent(self, classifier):
        assert classifier.classify("Do you have Dune?") == classifier.classify("Do you have Dune?")

    def test_case_and_whitespace_insensitive(self, classifier):
        assert classifier.classify("  RECOMMEND  ") == classifier.classify("recommend")


class TestInjectedPatterns:
    def test_custom_keyword_table(self):
        patterns = replace(
            IntentPatterns.default(),
            keyword_rules=(KeywordRule(IntentKind.RECOMMEND, ("surprise me",)),),
        )
        classifier = IntentClassifier(patterns)
        assert classifier.classify("surprise me").kind == IntentKind.RECOMMEND
        assert classifier.classify("hello").kind == IntentKind.FALLBACK

    def test_default_patterns_are_immutable(self):
        patterns = IntentPatterns.default()
        with pytest.raises(Exception):
            patterns.help_phrases = ()  # type: ignore[misc]
