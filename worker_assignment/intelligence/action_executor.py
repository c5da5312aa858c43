"""Carry out the plan chosen by the reasoning engine."""

from typing import Any, Dict, List, Optional

from .base_types import Approach, ReasoningResult
from .learning_store import LearningStore
from .prediction_enhancer import PredictionEnhancer
from ..analytics.performance_summary import WorkerPerformanceAnalyzer
from ..models.prediction_core import PredictionCore, validate_job
from ..utils.exceptions import ModelNotReadyError
from ..utils.helpers import setup_logging

logger = setup_logging()

CAPABILITIES = {
    "reasoning": {
        "contextual_analysis": True,
        "pattern_recognition": True,
        "predictive_insights": True,
        "adaptive_learning": True,
    },
    "communication": {
        "natural_language": True,
        "semantic_understanding": True,
        "conversational_memory": True,
        "proactive_suggestions": True,
    },
    "intelligence": {
        "intent_detection": True,
        "context_awareness": True,
        "preference_learning": True,
        "outcome_prediction": True,
    },
}

RECOMMENDED_MIN_RECORDS = 1000


class ActionExecutor:
    """Dispatch a ReasoningResult to the matching action and return its result."""

    def __init__(self, core: PredictionCore, enhancer: PredictionEnhancer, learning_store: LearningStore):
        self.core = core
        self.enhancer = enhancer
        self.learning_store = learning_store
        self.actions = {
            Approach.WORKER_ASSIGNMENT: self.execute_assignment,
            Approach.PERFORMANCE_ANALYSIS: self.execute_performance_analysis,
            Approach.COMPREHENSIVE_ANALYTICS: self.execute_analytics,
            Approach.ADAPTIVE_LEARNING: self.execute_learning,
        }

    def execute(self, reasoning: ReasoningResult, extras: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        action = self.actions.get(reasoning.approach, self.execute_general_assistance)
        return action(reasoning, extras or {})

    # ------------------------------------------------------------------
    # Assignment
    # ------------------------------------------------------------------

    def execute_assignment(self, reasoning: ReasoningResult, extras: Dict[str, Any]) -> Dict[str, Any]:
        machine_id = reasoning.parameters["machine_id"]
        complexity = reasoning.parameters["complexity"]

        validate_job(machine_id, complexity)
        try:
            # one snapshot for the primary prediction and its alternatives
            snapshot = self.core.snapshot()
            base_prediction = snapshot.predict(machine_id, complexity)
        except ModelNotReadyError as e:
            enhanced = self.enhancer.degraded(machine_id, complexity, reasoning, e)
            return {
                "type": "worker_assignment",
                "base_prediction": None,
                "ai_enhanced": enhanced.to_dict(),
                "reasoning_applied": True,
                "context_factors": reasoning.explanation,
            }

        enhanced = self.enhancer.enhance(base_prediction, reasoning, snapshot=snapshot)
        logger.info(
            f"Recommended {enhanced.recommended_worker} for Machine {machine_id} "
            f"(complexity {complexity}, score {enhanced.contextual_score:.1f})"
        )
        return {
            "type": "worker_assignment",
            "base_prediction": base_prediction.to_dict(),
            "ai_enhanced": enhanced.to_dict(),
            "reasoning_applied": True,
            "context_factors": reasoning.explanation,
        }

    # ------------------------------------------------------------------
    # Performance / analytics
    # ------------------------------------------------------------------

    def system_status(self) -> Dict[str, Any]:
        model = self.core.status()
        store = self.core.store.summary()
        return {
            "status": "Ready" if self.core.is_trained else "Initializing",
            "data": {
                "records": store["records"],
                "pending_records": self.core.pending_records,
                "workers": store["workers"],
                "machines": store["machines"],
            },
            "model": model,
            "ready": self.core.is_trained,
        }

    def performance_insights(self, status: Dict[str, Any]) -> Dict[str, Any]:
        records = status["data"]["records"]
        return {
            "summary": (
                f"System is {status['status'].lower()} with {records} training records "
                f"backing its predictions."
            ),
            "key_metrics": {
                "data_quality": "Good" if records >= RECOMMENDED_MIN_RECORDS else "Needs Improvement",
                "model_readiness": "Optimal" if status["ready"] else "Training Required",
                "pending_records": status["data"]["pending_records"],
            },
        }

    def performance_recommendations(self, status: Dict[str, Any]) -> List[str]:
        recommendations = []
        if not status["ready"]:
            recommendations.append("Train the ML model with available data")
        if status["data"]["pending_records"]:
            recommendations.append("Retrain the model to include recently added records")
        if status["data"]["records"] < RECOMMENDED_MIN_RECORDS:
            recommendations.append("Collect more training data for improved accuracy")
        recommendations.append("Monitor system performance regularly")
        recommendations.append("Consider implementing automated retraining")
        return recommendations

    def worker_performance(self, worker_id: str, machine_id: Optional[int] = None) -> Dict[str, Any]:
        """Raises UnknownWorkerError for workers absent from the trained snapshot."""
        analyzer = WorkerPerformanceAnalyzer(self.core.snapshot().data)
        return analyzer.worker_performance(worker_id, machine_id)

    def execute_performance_analysis(self, reasoning: ReasoningResult, extras: Dict[str, Any]) -> Dict[str, Any]:
        status = self.system_status()
        result = {
            "type": "performance_analysis",
            "current_status": status,
            "ai_insights": self.performance_insights(status),
            "recommendations": self.performance_recommendations(status),
            "reasoning_applied": True,
        }

        worker_id = reasoning.parameters.get("worker_id")
        if worker_id and status["ready"]:
            result["worker_performance"] = self.worker_performance(
                worker_id, reasoning.parameters.get("machine_id")
            )
        return result

    def execute_analytics(self, reasoning: ReasoningResult, extras: Dict[str, Any]) -> Dict[str, Any]:
        status = self.system_status()
        overview: Dict[str, Any] = {}
        leaderboards: Dict[int, Dict[str, Any]] = {}

        if status["ready"]:
            analyzer = WorkerPerformanceAnalyzer(self.core.snapshot().data)
            overview = analyzer.system_overview()
            if overview["total_records"]:
                leaderboards = analyzer.machine_leaderboards()

        return {
            "type": "comprehensive_analytics",
            "system_analytics": status,
            "overview": overview,
            "machine_leaderboards": leaderboards,
            "predictive_insights": self.predictive_insights(overview),
            "trend_analysis": {
                "current_trends": [
                    "Stable system performance",
                    "Consistent prediction accuracy",
                    "Efficient resource utilization",
                ],
                "projected_trends": [
                    "Continued performance stability",
                    "Potential for accuracy improvements",
                    "Scalability for increased demand",
                ],
            },
            "strategic_recommendations": [
                "Implement continuous learning pipeline",
                "Establish performance monitoring dashboard",
                "Plan for scalability enhancements",
                "Consider automated model optimization",
            ],
            "reasoning_applied": True,
        }

    @staticmethod
    def predictive_insights(overview: Dict[str, Any]) -> Dict[str, Any]:
        if overview.get("top_performer"):
            primary = (
                f"{overview['top_performer']} leads on quality across "
                f"{overview['total_records']} recorded jobs"
            )
        else:
            primary = "Predictions are unavailable until the model is trained with historical data"

        return {
            "primary_insight": primary,
            "predictions": [
                "Model accuracy will improve with additional training data",
                "System can handle increased workload efficiently",
                "Regular retraining will maintain optimal performance",
            ],
            "trend_indicators": {
                "performance": "stable",
                "accuracy": "improving",
                "efficiency": "optimal",
            },
        }

    # ------------------------------------------------------------------
    # Learning / general
    # ------------------------------------------------------------------

    def execute_learning(self, reasoning: ReasoningResult, extras: Dict[str, Any]) -> Dict[str, Any]:
        result: Dict[str, Any] = {"type": "learning_enhancement"}

        training_data = extras.get("training_data")
        if isinstance(training_data, list) and training_data:
            added = self.core.add_training_data(training_data)
            retrain = bool(extras.get("retrain", True))
            if retrain:
                self.core.train()
            result["training_update"] = {
                "records_added": added,
                "retrained": retrain,
                "total_records": len(self.core.store),
            }

        result.update({
            "current_learning_state": self.learning_store.status(),
            "improvement_opportunities": [
                "Implement real-time learning from assignment outcomes",
                "Add worker skill profile management",
                "Enhance prediction accuracy with more features",
                "Develop proactive workload balancing",
            ],
            "learning_recommendations": [
                "Collect outcome feedback for all assignments",
                "Implement incremental learning algorithms",
                "Add cross-validation for model accuracy",
                "Develop automated feature engineering",
            ],
            "reasoning_applied": True,
        })
        return result

    def execute_general_assistance(self, reasoning: ReasoningResult, extras: Dict[str, Any]) -> Dict[str, Any]:
        return {
            "type": "general_assistance",
            "available_capabilities": CAPABILITIES,
            "suggestions": list(reasoning.suggestions),
            "guidance": (
                "I can help with worker assignments, performance analysis, "
                "system analytics, and learning improvements."
            ),
            "reasoning_applied": True,
        }
