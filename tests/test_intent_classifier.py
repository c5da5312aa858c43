"""Tests for worker_assignment/intelligence/intent_classifier.py"""

import pytest

from worker_assignment.intelligence.base_types import IntentType
from worker_assignment.intelligence.intent_classifier import (
    IntentClassifier,
    IntentMatcher,
    RegexIntentMatcher,
)

SCENARIO = "Who should work on Machine 1 for an urgent precision job?"


@pytest.fixture
def classifier():
    return IntentClassifier()


class TestClassification:

    def test_scenario_query(self, classifier):
        analysis = classifier.classify(SCENARIO)

        assert analysis.primary.type == IntentType.ASSIGNMENT
        assert analysis.primary.matched_pattern == "/who.*should.*work/i"
        assert [i.type for i in analysis.secondary] == [IntentType.QUALITY, IntentType.URGENCY]
        assert analysis.candidate_count == 3

    def test_classification_is_deterministic(self, classifier):
        results = {
            (classifier.classify(SCENARIO).primary.type, classifier.classify(SCENARIO).primary.confidence)
            for _ in range(20)
        }
        assert len(results) == 1

    def test_matched_confidence_in_high_band(self, classifier):
        analysis = classifier.classify("urgent rush asap status overview improve")
        for intent in [analysis.primary] + analysis.secondary:
            assert 0.8 <= intent.confidence <= 1.0
        assert len(analysis.secondary) == 2

    def test_fallback_to_general_inquiry(self, classifier):
        analysis = classifier.classify("hello there")
        assert analysis.primary.type == IntentType.GENERAL_INQUIRY
        assert analysis.primary.confidence == 0.6
        assert analysis.secondary == []

    @pytest.mark.parametrize("query", [None, "", 42])
    def test_non_text_falls_back(self, classifier, query):
        assert classifier.classify(query).primary.type == IntentType.GENERAL_INQUIRY

    @pytest.mark.parametrize("query,expected", [
        ("How is worker_a performing?", IntentType.PERFORMANCE),
        ("Give me a system overview", IntentType.ANALYTICS),
        ("Please learn from the latest jobs", IntentType.LEARNING),
        ("Recommend a worker for machine 2", IntentType.ASSIGNMENT),
    ])
    def test_primary_intents(self, classifier, query, expected):
        assert classifier.classify(query).primary.type == expected

    def test_case_insensitive(self, classifier):
        assert classifier.classify("WHO SHOULD WORK ON THIS").primary.type == IntentType.ASSIGNMENT


class TestMatchers:

    def test_longer_patterns_are_more_confident(self):
        assert RegexIntentMatcher.specificity_confidence(r"who.*should.*work") == pytest.approx(0.93)
        assert RegexIntentMatcher.specificity_confidence(r"urgent") == pytest.approx(0.86)
        assert RegexIntentMatcher.specificity_confidence("x" * 40) == 1.0

    def test_custom_matchers_can_replace_regexes(self):
        class KeywordMatcher(IntentMatcher):
            intent_type = IntentType.QUALITY
            label = "keyword:polish"

            def matches(self, text):
                return 0.95 if "polish" in text else 0.0

        classifier = IntentClassifier([KeywordMatcher()])
        analysis = classifier.classify("Polish the housing")
        assert analysis.primary.type == IntentType.QUALITY
        assert analysis.primary.matched_pattern == "keyword:polish"
