"""
Assignment Assistant

Facade over the request pipeline: classify -> extract -> reason -> act ->
compose. Also owns the learning store, conversation histories and the
training entry points used by the API and CLI.
"""

import threading
import uuid
from collections import OrderedDict, deque
from datetime import datetime
from typing import Any, Deque, Dict, List, Optional

import pandas as pd

from .action_executor import CAPABILITIES, ActionExecutor
from .base_types import InteractionRecord
from .context_extractor import ContextExtractor
from .intent_classifier import IntentClassifier
from .learning_store import LearningStore
from .prediction_enhancer import PredictionEnhancer
from .reasoning_engine import ReasoningEngine
from .response_composer import ResponseComposer
from ..data.sample_data import generate_sample_records
from ..models.prediction_core import PredictionCore
from ..utils.config import config
from ..utils.exceptions import (
    DomainError, InternalError, ValidationError, WorkerAssignmentError,
)
from ..utils.helpers import setup_logging, utc_timestamp

logger = setup_logging()

OPTIMIZATION_RECORD_THRESHOLD = 1500


class AssignmentAssistant:
    """Natural-language front end for worker assignment recommendations."""

    def __init__(
        self,
        core: Optional[PredictionCore] = None,
        learning_store: Optional[LearningStore] = None,
    ):
        self.core = core if core is not None else PredictionCore()
        self.learning_store = learning_store if learning_store is not None else LearningStore()

        self.classifier = IntentClassifier()
        self.extractor = ContextExtractor()
        self.reasoning_engine = ReasoningEngine()
        self.enhancer = PredictionEnhancer(self.core)
        self.executor = ActionExecutor(self.core, self.enhancer, self.learning_store)
        self.composer = ResponseComposer()

        # Least recently used conversations are dropped past MAX_CONVERSATIONS
        self.conversations: "OrderedDict[str, Deque[Dict[str, Any]]]" = OrderedDict()
        self._conversations_lock = threading.Lock()

    # ------------------------------------------------------------------
    # Request pipeline
    # ------------------------------------------------------------------

    def process_query(self, query: Any, context: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """
        Answer a natural language request

        Args:
            query: Free-text request, e.g. "urgent precision job on Machine 1"
            context: Optional caller context merged over what the query implies

        Returns:
            Response envelope, or {error, suggestion} for rejected input
        """
        try:
            self._validate_query(query)
        except ValidationError as e:
            logger.info(f"Rejected query: {e.message}")
            return e.to_dict()

        try:
            return self._run_pipeline(query, context)
        except DomainError as e:
            logger.warning(f"Domain error for query '{query}': {e.message}")
            return e.to_dict()
        except ValidationError as e:
            logger.info(f"Rejected request payload: {e.message}")
            return e.to_dict()
        except Exception as e:
            error = e if isinstance(e, WorkerAssignmentError) else InternalError("query processing", e)
            logger.exception(f"Error processing query '{query}': {error.message}")
            return {
                "error": error.message,
                "suggestion": error.suggestion,
                "natural_response": (
                    "I apologize, but I encountered an error processing your request. "
                    "Please try rephrasing or provide more specific details."
                ),
                "confidence": 0.0,
                "timestamp": utc_timestamp(),
            }

    @staticmethod
    def _validate_query(query: Any) -> None:
        if query is None:
            raise ValidationError(
                "Query is required",
                "Ask something like 'Who should work on Machine 1?'",
            )
        if not isinstance(query, str):
            raise ValidationError(
                f"Query must be text, got {type(query).__name__}",
                "Send the request as a plain sentence",
            )
        if not query.strip():
            raise ValidationError(
                "Query is empty",
                "Try rephrasing your request, e.g. 'Who is the best worker for Machine 2?'",
            )

    def _run_pipeline(self, query: str, context: Optional[Dict[str, Any]]) -> Dict[str, Any]:
        intent = self.classifier.classify(query)
        extracted = self.extractor.extract(query, context)
        reasoning = self.reasoning_engine.reason(intent, extracted)
        result = self.executor.execute(reasoning, extracted.extras)

        confidence = reasoning.confidence
        if result.get("ai_enhanced", {}).get("degraded"):
            confidence = min(confidence, config.DEGRADED_CONFIDENCE)

        envelope = self.composer.compose(
            query, intent, extracted, reasoning, result, confidence=confidence
        )

        self.learning_store.record(InteractionRecord(
            timestamp=envelope["timestamp"],
            query=query,
            intent_type=intent.primary.type.value,
            result_type=result["type"],
            confidence=intent.primary.confidence,
            session_id=extracted.extras.get("conversation_id"),
        ))

        logger.info(
            f"Processed query as {intent.primary} via {reasoning.approach.value} "
            f"(confidence {confidence:.2f})"
        )
        return envelope

    # ------------------------------------------------------------------
    # Conversations, feedback, learning
    # ------------------------------------------------------------------

    def process_conversation(
        self,
        message: Any,
        conversation_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        conversation_id = conversation_id or f"conv_{uuid.uuid4().hex[:12]}"
        history = self._conversation_history(conversation_id)

        history.append({"role": "user", "content": message, "timestamp": utc_timestamp()})

        conversation_context = dict(context or {})
        conversation_context["conversation_history"] = list(history)[-config.CONVERSATION_CONTEXT_WINDOW:]
        conversation_context["conversation_id"] = conversation_id

        response = self.process_query(message, conversation_context)

        history.append({
            "role": "assistant",
            "content": response.get("natural_response") or response.get("error", ""),
            "timestamp": utc_timestamp(),
        })

        response["conversation_id"] = conversation_id
        response["conversation_length"] = len(history)
        return response

    def _conversation_history(self, conversation_id: str) -> Deque[Dict[str, Any]]:
        with self._conversations_lock:
            history = self.conversations.get(conversation_id)
            if history is None:
                history = deque(maxlen=config.CONVERSATION_HISTORY_LIMIT)
                self.conversations[conversation_id] = history
                while len(self.conversations) > config.MAX_CONVERSATIONS:
                    evicted, _ = self.conversations.popitem(last=False)
                    logger.debug(f"Evicted conversation {evicted}")
            else:
                self.conversations.move_to_end(conversation_id)
            return history

    def process_feedback(self, feedback: Dict[str, Any]) -> Dict[str, Any]:
        if not isinstance(feedback, dict) or not feedback:
            return ValidationError(
                "Feedback must be a non-empty object",
                "Send feedback such as {'type': 'assignment', 'rating': 5}",
            ).to_dict()

        key = self.learning_store.record_feedback(feedback)
        return {
            "status": "received",
            "feedback_id": key,
            "learning_status": self.get_learning_status(),
        }

    def get_learning_status(self) -> Dict[str, Any]:
        return self.learning_store.status()

    def get_capabilities(self) -> Dict[str, Any]:
        return {
            "capabilities": CAPABILITIES,
            "learning_status": self.get_learning_status(),
            "context_awareness": {
                "active_conversations": len(self.conversations),
                "contextual_memory": len(self.learning_store),
            },
        }

    def generate_proactive_insights(self, now: Optional[datetime] = None) -> List[Dict[str, str]]:
        now = now or datetime.now()
        insights = []
        status = self.get_system_status()

        if status["ready"]:
            insights.append({
                "type": "opportunity",
                "priority": "medium",
                "message": "System is ready for predictions. Consider running some assignments to improve the model.",
            })
            if status["data"]["records"] > OPTIMIZATION_RECORD_THRESHOLD:
                insights.append({
                    "type": "optimization",
                    "priority": "low",
                    "message": "With substantial training data, you could explore advanced ML algorithms.",
                })
        if not status["data"]["records"]:
            insights.append({
                "type": "data",
                "priority": "high",
                "message": "No training data loaded. Add historical records and retrain before assigning work.",
            })

        if config.PEAK_HOURS_START <= now.hour <= config.PEAK_HOURS_END:
            insights.append({
                "type": "timing",
                "priority": "high",
                "message": "Peak hours detected. Consider preemptive worker assignments for efficiency.",
            })

        return insights

    # ------------------------------------------------------------------
    # Prediction service entry points
    # ------------------------------------------------------------------

    def add_training_data(self, records: List[Any], retrain: bool = False) -> Dict[str, Any]:
        added = self.core.add_training_data(records)
        result: Dict[str, Any] = {"records_added": added, "total_records": len(self.core.store)}
        if retrain:
            result["training"] = self.retrain()
        return result

    def retrain(self) -> Dict[str, Any]:
        return self.core.train()

    def predict_worker(self, machine_id: int, complexity: int) -> Dict[str, Any]:
        return self.core.predict(machine_id, complexity).to_dict()

    def get_worker_performance(self, worker_id: str, machine_id: Optional[int] = None) -> Dict[str, Any]:
        return self.executor.worker_performance(worker_id, machine_id)

    def get_system_status(self) -> Dict[str, Any]:
        return self.executor.system_status()

    def load_sample_data(
        self, n_records: Optional[int] = None, random_state: Optional[int] = None, train: bool = True
    ) -> int:
        """Seed the store with synthetic history."""
        df = generate_sample_records(n_records=n_records, random_state=random_state)
        added = self.core.store.add_dataframe(df)
        if train:
            self.retrain()
        return len(added)

    def load_training_csv(self, filepath: str, train: bool = True) -> int:
        logger.info(f"Loading training records from {filepath}")
        added = self.core.store.add_dataframe(pd.read_csv(filepath))
        if train:
            self.retrain()
        return len(added)

    def reset(self) -> None:
        """Forget interactions, feedback and conversations; training data is kept."""
        self.learning_store.reset()
        with self._conversations_lock:
            self.conversations.clear()
