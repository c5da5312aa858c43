"""Render the response envelope and its natural-language reply."""

from typing import Any, Callable, Dict, Optional

from .base_types import ExtractedContext, IntentAnalysis, ReasoningResult
from ..utils.helpers import utc_timestamp


def confidence_suffix(confidence: float) -> str:
    return f" (Confidence: {round(confidence * 100)}%)"


class ResponseComposer:
    """Build ``{understood_intent, context_analysis, reasoning, result,
    natural_response, confidence, suggestions, timestamp}`` envelopes."""

    def __init__(self):
        self.templates: Dict[str, Callable[[str, Dict[str, Any]], str]] = {
            "worker_assignment": self.assignment_response,
            "performance_analysis": self.performance_response,
            "comprehensive_analytics": self.analytics_response,
            "learning_enhancement": self.learning_response,
        }

    def compose(
        self,
        query: str,
        intent: IntentAnalysis,
        context: ExtractedContext,
        reasoning: ReasoningResult,
        result: Dict[str, Any],
        confidence: Optional[float] = None,
    ) -> Dict[str, Any]:
        confidence = reasoning.confidence if confidence is None else confidence
        return {
            "understood_intent": intent.to_dict(),
            "context_analysis": context.to_dict(),
            "reasoning": reasoning.to_dict(),
            "result": result,
            "natural_response": self.natural_response(query, result, confidence),
            "confidence": round(confidence, 3),
            "suggestions": list(reasoning.suggestions),
            "timestamp": utc_timestamp(),
        }

    def natural_response(self, query: str, result: Dict[str, Any], confidence: float) -> str:
        template = self.templates.get(result.get("type"), self.general_response)
        return template(query, result) + confidence_suffix(confidence)

    @staticmethod
    def assignment_response(query: str, result: Dict[str, Any]) -> str:
        enhanced = result.get("ai_enhanced") or {}
        if enhanced.get("degraded"):
            return (
                f'Based on your request "{query}", I can\'t make a data-backed recommendation yet. '
                f"{enhanced.get('explanation', '')}"
            ).rstrip()

        response = (
            f'Based on your request "{query}", I\'ve analyzed the situation and recommend '
            f"{enhanced.get('recommended_worker')}. {enhanced.get('explanation', '')}"
        ).rstrip()

        alternatives = enhanced.get("alternative_workers") or []
        if alternatives:
            alternative = alternatives[0]
            response += (
                f" Alternatively, you could consider {alternative['worker']} "
                f"({alternative['reason']})."
            )
        return response

    @staticmethod
    def performance_response(query: str, result: Dict[str, Any]) -> str:
        summary = result.get("ai_insights", {}).get("summary", "")
        recommendations = ", ".join(result.get("recommendations", []))
        response = f"I've analyzed the performance data you requested. {summary}"

        worker = result.get("worker_performance")
        if worker:
            response += (
                f" {worker['worker_id']} has completed {worker['total_jobs']} jobs averaging "
                f"{worker['avg_time']:.1f} minutes at {worker['avg_quality']:.1f}% quality."
            )
        return f"{response} Here are my recommendations: {recommendations}."

    @staticmethod
    def analytics_response(query: str, result: Dict[str, Any]) -> str:
        status = result.get("system_analytics", {}).get("status", "Unknown")
        insight = result.get("predictive_insights", {}).get("primary_insight", "")
        recommendations = result.get("strategic_recommendations") or ["Continue monitoring"]
        return (
            f"Here's a comprehensive analysis of your system: {status}. "
            f"Key insight: {insight}. I recommend: {recommendations[0]}."
        )

    @staticmethod
    def learning_response(query: str, result: Dict[str, Any]) -> str:
        state = result.get("current_learning_state", {}).get("effectiveness", "Unknown")
        opportunities = result.get("improvement_opportunities") or ["Continue collecting feedback"]
        response = "I can help improve the system's learning capabilities."

        update = result.get("training_update")
        if update:
            response += f" I added {update['records_added']} training records"
            response += " and retrained the model." if update["retrained"] else "; retrain to use them."

        return f"{response} Current learning state: {state}. Main opportunity: {opportunities[0]}."

    @staticmethod
    def general_response(query: str, result: Dict[str, Any]) -> str:
        guidance = result.get("guidance", "")
        return (
            f'I understand you\'re asking about "{query}". {guidance} '
            "I'm here to help with intelligent worker assignments and system optimization."
        )
