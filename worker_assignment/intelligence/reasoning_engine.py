"""
Reasoning Engine

Chooses a strategy for the primary intent, resolves the job parameters it
needs and scores how confident the plan is given the environmental
factors found in the request.
"""

import numbers
from typing import Any, Callable, Dict, Optional, Union

from .base_types import (
    Approach, ExtractedContext, Intent, IntentAnalysis, IntentType, ReasoningResult,
)
from .context_extractor import complexity_level
from ..utils.config import config
from ..utils.helpers import clamp, setup_logging

logger = setup_logging()

BASE_CONFIDENCE = {
    Approach.WORKER_ASSIGNMENT: 0.85,
    Approach.PERFORMANCE_ANALYSIS: 0.9,
    Approach.COMPREHENSIVE_ANALYTICS: 0.95,
    Approach.ADAPTIVE_LEARNING: 0.8,
    Approach.GENERAL_ASSISTANCE: 0.7,
}

URGENCY_CONFIDENCE_BOOST = 0.1
QUALITY_CONFIDENCE_BOOST = 0.1

PRECISION_MACHINE = 1
FAST_MACHINE = 3
BALANCED_MACHINE = 2
DEFAULT_COMPLEXITY = 3


def _as_int(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, numbers.Integral):
        return int(value)
    if isinstance(value, str) and value.strip().isdigit():
        return int(value.strip())
    return None


class ReasoningEngine:
    """Per-intent strategies producing a ReasoningResult."""

    def __init__(self):
        self.strategies: Dict[IntentType, Callable[[ExtractedContext], ReasoningResult]] = {
            IntentType.ASSIGNMENT: self.reason_about_assignment,
            IntentType.PERFORMANCE: self.reason_about_performance,
            IntentType.ANALYTICS: self.reason_about_analytics,
            IntentType.LEARNING: self.reason_about_learning,
        }

    def reason(self, intent: Union[IntentAnalysis, Intent], context: ExtractedContext) -> ReasoningResult:
        primary = intent.primary if isinstance(intent, IntentAnalysis) else intent
        strategy = self.strategies.get(primary.type, self.reason_about_general)

        try:
            reasoning = strategy(context)
        except Exception as e:
            logger.warning(f"Reasoning strategy for {primary.type.value} failed, using general: {e}")
            reasoning = self.reason_about_general(context)

        return self.apply_environmental_factors(reasoning, context)

    def reason_about_assignment(self, context: ExtractedContext) -> ReasoningResult:
        reasoning = ReasoningResult(
            approach=Approach.WORKER_ASSIGNMENT,
            confidence=BASE_CONFIDENCE[Approach.WORKER_ASSIGNMENT],
        )
        requirements = context.requirements

        machine_id = _as_int(requirements.get("machine_id"))
        if machine_id is None:
            machine_id = self.select_machine(context)
            reasoning.suggestions.append(
                f"Intelligently selected Machine {machine_id} based on context"
            )

        complexity = complexity_level(requirements.get("complexity"))
        if complexity is None:
            complexity = self.assess_complexity(context)
            reasoning.suggestions.append(
                f"Assessed complexity as level {complexity} based on requirements"
            )

        explanation = (
            f"For this assignment, I'm considering Machine {machine_id} "
            f"with complexity level {complexity}. "
        )

        if context.is_urgent:
            explanation += "Given the urgent nature, I'll prioritize workers with fast completion times. "
            reasoning.confidence += URGENCY_CONFIDENCE_BOOST

        if context.is_quality_focused:
            explanation += "With high quality requirements, I'll emphasize workers with excellent quality scores. "
            reasoning.confidence += QUALITY_CONFIDENCE_BOOST

        reasoning.explanation = explanation
        reasoning.action_plan = [
            f"Analyze worker performance for Machine {machine_id}",
            "Apply context-specific weighting for urgency and quality",
            "Select optimal worker with confidence scoring",
            "Provide detailed recommendation with reasoning",
        ]
        reasoning.parameters = {"machine_id": machine_id, "complexity": complexity}
        return reasoning

    def reason_about_performance(self, context: ExtractedContext) -> ReasoningResult:
        parameters = {}
        worker_id = context.requirements.get("worker_id")
        if worker_id:
            parameters["worker_id"] = str(worker_id)
        machine_id = _as_int(context.requirements.get("machine_id"))
        if machine_id is not None:
            parameters["machine_id"] = machine_id

        return ReasoningResult(
            approach=Approach.PERFORMANCE_ANALYSIS,
            confidence=BASE_CONFIDENCE[Approach.PERFORMANCE_ANALYSIS],
            explanation="I'll analyze worker performance with contextual insights and comparative analysis. ",
            suggestions=[
                "Include historical trends",
                "Compare with team averages",
                "Identify improvement opportunities",
            ],
            action_plan=[
                "Gather comprehensive performance data",
                "Apply statistical analysis",
                "Generate actionable insights",
                "Provide improvement recommendations",
            ],
            parameters=parameters,
        )

    def reason_about_analytics(self, context: ExtractedContext) -> ReasoningResult:
        return ReasoningResult(
            approach=Approach.COMPREHENSIVE_ANALYTICS,
            confidence=BASE_CONFIDENCE[Approach.COMPREHENSIVE_ANALYTICS],
            explanation="I'll provide comprehensive system analytics with predictive insights. ",
            suggestions=[
                "Real-time metrics",
                "Trend analysis",
                "Predictive modeling",
                "Actionable recommendations",
            ],
            action_plan=[
                "Collect current system metrics",
                "Analyze performance trends",
                "Generate predictive insights",
                "Provide strategic recommendations",
            ],
        )

    def reason_about_learning(self, context: ExtractedContext) -> ReasoningResult:
        parameters = {}
        training_data = context.extras.get("training_data")
        if isinstance(training_data, list):
            parameters["training_records"] = len(training_data)
            parameters["retrain"] = bool(context.extras.get("retrain", True))

        return ReasoningResult(
            approach=Approach.ADAPTIVE_LEARNING,
            confidence=BASE_CONFIDENCE[Approach.ADAPTIVE_LEARNING],
            explanation="I'll help the system learn and improve from new data and feedback. ",
            suggestions=[
                "Incremental learning",
                "Pattern recognition",
                "Model optimization",
            ],
            action_plan=[
                "Analyze new data quality",
                "Update learning models",
                "Validate improvements",
                "Provide learning insights",
            ],
            parameters=parameters,
        )

    def reason_about_general(self, context: ExtractedContext) -> ReasoningResult:
        return ReasoningResult(
            approach=Approach.GENERAL_ASSISTANCE,
            confidence=BASE_CONFIDENCE[Approach.GENERAL_ASSISTANCE],
            explanation="I'll provide helpful information and guidance based on available context. ",
            suggestions=[
                "Clarify specific needs",
                "Explore available options",
                "Provide educational information",
            ],
            action_plan=[
                "Analyze available information",
                "Provide relevant insights",
                "Suggest specific actions",
                "Offer additional assistance",
            ],
        )

    @staticmethod
    def select_machine(context: ExtractedContext) -> int:
        """Machine 1 is precision equipment, machine 3 the fastest line."""
        if context.is_quality_focused:
            return PRECISION_MACHINE
        if context.is_urgent:
            return FAST_MACHINE
        return BALANCED_MACHINE

    @staticmethod
    def assess_complexity(context: ExtractedContext) -> int:
        complexity = DEFAULT_COMPLEXITY
        if context.is_urgent:
            complexity += 1
        if context.is_quality_focused:
            complexity += 1
        return min(config.MAX_COMPLEXITY, complexity)

    @staticmethod
    def apply_environmental_factors(reasoning: ReasoningResult, context: ExtractedContext) -> ReasoningResult:
        """Scale confidence by every weighted factor, in insertion order, then clamp."""
        factors = context.environmental_factors if isinstance(context.environmental_factors, dict) else {}

        for factor_type, factor_data in factors.items():
            if not isinstance(factor_data, dict):
                continue
            weight = factor_data.get("weight")
            if isinstance(weight, bool) or not isinstance(weight, numbers.Real):
                continue
            reasoning.confidence *= float(weight)
            reasoning.explanation += (
                f"Considering {factor_type} ({factor_data.get('factor', 'unspecified')}) factor. "
            )

        reasoning.confidence = clamp(
            reasoning.confidence,
            config.MIN_REASONING_CONFIDENCE,
            config.MAX_REASONING_CONFIDENCE,
        )
        return reasoning
