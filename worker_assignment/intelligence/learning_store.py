"""Bounded history of interactions, token patterns and feedback.

Purely observational: nothing here feeds back into predictions or reasoning.
"""

import threading
from collections import deque
from typing import Any, Deque, Dict, List, Optional

from .base_types import InteractionRecord
from ..utils.config import config
from ..utils.helpers import setup_logging, utc_timestamp

logger = setup_logging()

MIN_PATTERN_TOKEN_LENGTH = 4


class LearningStore:
    """Interaction buffer plus per-token intent patterns and user preferences.

    The interaction buffer grows to ``history_limit`` and is then cut back to
    the most recent ``history_trim`` entries. All writes hold one lock.
    """

    def __init__(
        self,
        history_limit: Optional[int] = None,
        history_trim: Optional[int] = None,
        pattern_limit: Optional[int] = None,
    ):
        settings = config.get_learning_config()
        self.history_limit = history_limit or settings["history_limit"]
        self.history_trim = history_trim or settings["history_trim"]
        self.pattern_limit = pattern_limit or settings["pattern_limit"]

        self._interactions: List[InteractionRecord] = []
        self._patterns: Dict[str, Deque[Dict[str, str]]] = {}
        self._preferences: Dict[str, Dict[str, Any]] = {}
        self._last_update: Optional[str] = None
        self._lock = threading.Lock()

    def __len__(self) -> int:
        return len(self._interactions)

    def record(self, interaction: InteractionRecord) -> None:
        tokens = [
            token for token in interaction.query.lower().split()
            if len(token) >= MIN_PATTERN_TOKEN_LENGTH
        ]

        with self._lock:
            self._interactions.append(interaction)
            if len(self._interactions) > self.history_limit:
                del self._interactions[: len(self._interactions) - self.history_trim]

            for token in tokens:
                history = self._patterns.setdefault(token, deque(maxlen=self.pattern_limit))
                history.append({
                    "intent": interaction.intent_type,
                    "timestamp": interaction.timestamp,
                })
            self._last_update = interaction.timestamp

    def record_feedback(self, feedback: Dict[str, Any]) -> str:
        with self._lock:
            key = f"feedback_{len(self._preferences) + 1}"
            self._preferences[key] = {
                "feedback": feedback,
                "timestamp": utc_timestamp(),
            }
            self._last_update = self._preferences[key]["timestamp"]

        logger.info(f"Recorded feedback {key}: {feedback.get('type', 'general')}")
        return key

    def interactions(self, limit: Optional[int] = None) -> List[InteractionRecord]:
        """Most recent interactions first."""
        with self._lock:
            recent = list(reversed(self._interactions))
        return recent[:limit] if limit is not None else recent

    def pattern(self, token: str) -> List[Dict[str, str]]:
        with self._lock:
            return list(self._patterns.get(token.lower(), ()))

    def effectiveness(self) -> str:
        with self._lock:
            confidences = [i.confidence for i in self._interactions]
        if not confidences:
            return "Not enough data"
        average = sum(confidences) / len(confidences)
        if average >= 0.8:
            return "High"
        if average >= 0.6:
            return "Medium"
        return "Low"

    def status(self) -> Dict[str, Any]:
        effectiveness = self.effectiveness()
        with self._lock:
            return {
                "total_interactions": len(self._interactions),
                "learned_patterns": len(self._patterns),
                "user_preferences": len(self._preferences),
                "effectiveness": effectiveness,
                "last_update": self._last_update or utc_timestamp(),
            }

    def reset(self) -> None:
        with self._lock:
            self._interactions.clear()
            self._patterns.clear()
            self._preferences.clear()
            self._last_update = None
