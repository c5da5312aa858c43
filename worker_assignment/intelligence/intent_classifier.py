"""
Intent Classification Engine

Maps a free-text request onto the fixed intent taxonomy. Each intent is
backed by an ordered list of matchers; every matcher that fires yields a
candidate intent, candidates are ranked by confidence and the best one
becomes the primary intent.
"""

import re
from typing import Dict, List, Optional, Sequence

from .base_types import Intent, IntentAnalysis, IntentType
from ..utils.helpers import setup_logging

logger = setup_logging()

MIN_MATCH_CONFIDENCE = 0.8
MAX_MATCH_CONFIDENCE = 1.0
# Literal length at which a pattern earns the full confidence band
SPECIFICITY_SATURATION = 20
FALLBACK_CONFIDENCE = 0.6

_REGEX_SYNTAX = re.compile(r"\\.|[.*+?()\[\]{}|^$]")


class IntentMatcher:
    """Capability interface: score how strongly a text expresses an intent.

    ``matches`` returns 0.0 when the matcher does not apply.
    """

    intent_type: IntentType
    label: str

    def matches(self, text: str) -> float:
        raise NotImplementedError


class RegexIntentMatcher(IntentMatcher):
    """Case-insensitive regex with a confidence fixed by its specificity.

    Longer literal content means a more specific pattern, so
    ``/who.*should.*work/`` outranks ``/urgent/``.
    """

    def __init__(self, intent_type: IntentType, pattern: str):
        self.intent_type = intent_type
        self.pattern = re.compile(pattern, re.IGNORECASE)
        self.label = f"/{pattern}/i"
        self.confidence = self.specificity_confidence(pattern)

    @staticmethod
    def specificity_confidence(pattern: str) -> float:
        literal = _REGEX_SYNTAX.sub("", pattern)
        specificity = min(1.0, len(literal) / SPECIFICITY_SATURATION)
        span = MAX_MATCH_CONFIDENCE - MIN_MATCH_CONFIDENCE
        return round(MIN_MATCH_CONFIDENCE + span * specificity, 3)

    def matches(self, text: str) -> float:
        return self.confidence if self.pattern.search(text) else 0.0


DEFAULT_INTENT_PATTERNS: Dict[IntentType, List[str]] = {
    IntentType.ASSIGNMENT: [
        r"who.*should.*work", r"best.*worker", r"recommend.*worker",
        r"assign.*worker", r"optimal.*assignment", r"who.*can.*handle",
        r"need.*someone.*for", r"looking.*for.*worker",
    ],
    IntentType.PERFORMANCE: [
        r"how.*performing", r"worker.*performance", r"efficiency",
        r"quality.*score", r"speed.*comparison", r"track.*record",
        r"evaluate.*worker", r"analyze.*performance",
    ],
    IntentType.URGENCY: [
        r"urgent", r"rush", r"asap", r"immediately", r"critical",
        r"deadline", r"priority", r"emergency", r"quick",
    ],
    IntentType.QUALITY: [
        r"precision", r"accurate", r"careful", r"detailed",
        r"high.*quality", r"perfect", r"exact", r"flawless",
    ],
    IntentType.LEARNING: [
        r"learn.*from", r"improve", r"feedback", r"train.*model",
        r"update.*data", r"better.*prediction", r"enhance",
    ],
    IntentType.ANALYTICS: [
        r"status", r"overview", r"analytics", r"performance.*metrics",
        r"system.*health", r"statistics", r"summary",
    ],
}


class IntentClassifier:
    """Classify requests against a table of weighted matchers."""

    def __init__(self, matchers: Optional[Sequence[IntentMatcher]] = None):
        if matchers is None:
            matchers = [
                RegexIntentMatcher(intent_type, pattern)
                for intent_type, patterns in DEFAULT_INTENT_PATTERNS.items()
                for pattern in patterns
            ]
        self.matchers = list(matchers)

    def classify(self, query: str) -> IntentAnalysis:
        """
        Classify a request

        Args:
            query: Natural language request

        Returns:
            IntentAnalysis with the primary intent and up to two secondary ones
        """
        text = query.lower() if isinstance(query, str) else ""
        candidates: List[Intent] = []

        for matcher in self.matchers:
            confidence = matcher.matches(text)
            if confidence > 0:
                candidates.append(Intent(
                    type=matcher.intent_type,
                    confidence=confidence,
                    matched_pattern=matcher.label,
                ))

        if not candidates:
            candidates.append(Intent(
                type=IntentType.GENERAL_INQUIRY,
                confidence=FALLBACK_CONFIDENCE,
                matched_pattern="fallback_analysis",
            ))

        # Stable sort keeps table order among equal confidences
        candidates.sort(key=lambda intent: intent.confidence, reverse=True)

        analysis = IntentAnalysis(
            primary=candidates[0],
            secondary=candidates[1:3],
            candidate_count=len(candidates),
        )
        logger.debug(
            f"Classified {len(candidates)} intent candidate(s); primary={analysis.primary}"
        )
        return analysis
