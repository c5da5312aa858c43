"""
Base Types for the request-understanding pipeline

Defines the data structures passed between the classifier, extractor,
reasoning engine, enhancer and composer.
"""

from dataclasses import dataclass, field, asdict
from enum import Enum
from typing import Any, Dict, List, Optional


# ============================================================================
# INTENTS
# ============================================================================

class IntentType(str, Enum):
    """Fixed intent taxonomy"""
    ASSIGNMENT = "assignment"
    PERFORMANCE = "performance"
    ANALYTICS = "analytics"
    LEARNING = "learning"
    URGENCY = "urgency"
    QUALITY = "quality"
    GENERAL_INQUIRY = "general_inquiry"


@dataclass
class Intent:
    """One classified purpose of a request"""
    type: IntentType
    confidence: float  # 0.0 to 1.0
    matched_pattern: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.type.value,
            "confidence": round(self.confidence, 3),
            "matched_pattern": self.matched_pattern,
        }

    def __str__(self) -> str:
        return f"{self.type.value}({self.confidence:.2f})"


@dataclass
class IntentAnalysis:
    """Primary intent plus up to two runners-up"""
    primary: Intent
    secondary: List[Intent] = field(default_factory=list)
    candidate_count: int = 1

    def to_dict(self) -> Dict[str, Any]:
        return {
            "primary": self.primary.to_dict(),
            "secondary": [intent.to_dict() for intent in self.secondary],
            "analysis": f"Detected {self.candidate_count} potential intent(s)",
        }


# ============================================================================
# CONTEXT
# ============================================================================

@dataclass
class ExtractedContext:
    """Structured requirements derived from a query and the caller's context.

    ``environmental_factors`` maps a factor type to ``{"factor", "weight"}``.
    Supplied context keys that are not one of the fields below are kept in
    ``extras`` (session ids, conversation history, training payloads).
    """
    requirements: Dict[str, Any] = field(default_factory=dict)
    environmental_factors: Dict[str, Any] = field(default_factory=dict)
    constraints: Dict[str, Any] = field(default_factory=dict)
    query_analysis: Dict[str, Any] = field(default_factory=dict)
    extras: Dict[str, Any] = field(default_factory=dict)

    @property
    def is_urgent(self) -> bool:
        urgency = self.environmental_factors.get("urgency")
        if isinstance(urgency, dict):
            return urgency.get("factor") == "high"
        return urgency == "high"

    @property
    def is_quality_focused(self) -> bool:
        return self.requirements.get("quality_focus") == "high"

    def to_dict(self) -> Dict[str, Any]:
        payload = {
            "query_analysis": self.query_analysis,
            "environmental_factors": self.environmental_factors,
            "requirements": self.requirements,
            "constraints": self.constraints,
        }
        payload.update(self.extras)
        return payload


# ============================================================================
# REASONING
# ============================================================================

class Approach(str, Enum):
    """Reasoning strategies"""
    WORKER_ASSIGNMENT = "intelligent_worker_assignment"
    PERFORMANCE_ANALYSIS = "performance_analysis"
    COMPREHENSIVE_ANALYTICS = "comprehensive_analytics"
    ADAPTIVE_LEARNING = "adaptive_learning"
    GENERAL_ASSISTANCE = "general_assistance"


@dataclass
class ReasoningResult:
    """Action plan and confidence chosen for a request"""
    approach: Approach
    confidence: float
    explanation: str = ""
    suggestions: List[str] = field(default_factory=list)
    action_plan: List[str] = field(default_factory=list)
    parameters: Dict[str, Any] = field(default_factory=dict)

    def references(self, keyword: str) -> bool:
        """Plain substring test; factor lines like "quality_context" count as "quality"."""
        return keyword in self.explanation

    def to_dict(self) -> Dict[str, Any]:
        return {
            "approach": self.approach.value,
            "confidence": round(self.confidence, 3),
            "explanation": self.explanation,
            "suggestions": list(self.suggestions),
            "action_plan": list(self.action_plan),
            "parameters": dict(self.parameters),
        }


# ============================================================================
# ENHANCED PREDICTION
# ============================================================================

class RiskLevel(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

    @classmethod
    def from_factor_count(cls, count: int) -> "RiskLevel":
        if count == 0:
            return cls.LOW
        if count == 1:
            return cls.MEDIUM
        return cls.HIGH


@dataclass
class AlternativeWorker:
    worker: str
    complexity_adjusted: int
    estimated_time: float
    reason: str


@dataclass
class RiskAssessment:
    factors: List[str] = field(default_factory=list)

    @property
    def level(self) -> RiskLevel:
        return RiskLevel.from_factor_count(len(self.factors))

    def to_dict(self) -> Dict[str, Any]:
        return {"level": self.level.value, "factors": list(self.factors)}


@dataclass
class EnhancedPrediction:
    """Raw prediction plus contextual score, alternatives and risk"""
    prediction: Dict[str, Any]
    ai_confidence: float
    contextual_score: float
    alternative_workers: List[AlternativeWorker]
    risk_assessment: RiskAssessment
    explanation: str
    degraded: bool = False

    @property
    def recommended_worker(self) -> str:
        return self.prediction["recommended_worker"]

    def to_dict(self) -> Dict[str, Any]:
        payload = dict(self.prediction)
        payload.update({
            "ai_confidence": round(self.ai_confidence, 3),
            "contextual_score": round(self.contextual_score, 2),
            "alternative_workers": [asdict(alt) for alt in self.alternative_workers],
            "risk_assessment": self.risk_assessment.to_dict(),
            "explanation": self.explanation,
            "degraded": self.degraded,
        })
        return payload


# ============================================================================
# LEARNING
# ============================================================================

@dataclass
class InteractionRecord:
    timestamp: str
    query: str
    intent_type: str
    result_type: str
    confidence: float
    session_id: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)
