"""Contextual scoring, alternatives and risk assessment for raw predictions."""

from typing import Any, Dict, List, Optional

from .base_types import (
    AlternativeWorker, EnhancedPrediction, ReasoningResult, RiskAssessment,
)
from ..models.prediction_core import ModelSnapshot, Prediction, PredictionCore
from ..utils.config import config
from ..utils.exceptions import ModelNotReadyError
from ..utils.helpers import clamp, setup_logging

logger = setup_logging()

FASTER_REASON = "Faster but less thorough"
SLOWER_REASON = "More thorough but slower"


class PredictionEnhancer:
    """Turn a Prediction into a scored, risk-assessed recommendation."""

    def __init__(self, core: PredictionCore):
        self.core = core
        self.settings = config.get_enhancement_config()

    def enhance(
        self,
        prediction: Prediction,
        reasoning: ReasoningResult,
        snapshot: Optional[ModelSnapshot] = None,
    ) -> EnhancedPrediction:
        """Enhance a prediction.

        Alternatives are computed against ``snapshot`` when given so that a
        request never mixes two model versions.
        """
        snapshot = snapshot if snapshot is not None else self.core.snapshot()

        return EnhancedPrediction(
            prediction=prediction.to_dict(),
            ai_confidence=reasoning.confidence,
            contextual_score=self.contextual_score(prediction, reasoning),
            alternative_workers=self.alternatives(prediction, snapshot),
            risk_assessment=self.assess_risk(prediction, reasoning),
            explanation=self.explain(prediction, reasoning),
        )

    def contextual_score(self, prediction: Prediction, reasoning: ReasoningResult) -> float:
        score = prediction.confidence * 100 * reasoning.confidence

        if reasoning.references("urgent") and prediction.estimated_time < self.settings["urgent_completion_minutes"]:
            score += self.settings["urgency_bonus"]

        if reasoning.references("quality") and prediction.avg_quality > self.settings["high_quality_threshold"]:
            score += self.settings["quality_bonus"]

        return clamp(score, 0.0, 100.0)

    def alternatives(self, prediction: Prediction, snapshot: ModelSnapshot) -> List[AlternativeWorker]:
        """Workers recommended at neighbouring complexity levels on the same machine."""
        alternatives: List[AlternativeWorker] = []
        seen = {prediction.recommended_worker}

        for level in range(config.MIN_COMPLEXITY, config.MAX_COMPLEXITY + 1):
            if level == prediction.complexity:
                continue
            try:
                candidate = snapshot.predict(prediction.machine_id, level)
            except ModelNotReadyError:
                continue

            if candidate.recommended_worker in seen:
                continue
            seen.add(candidate.recommended_worker)

            alternatives.append(AlternativeWorker(
                worker=candidate.recommended_worker,
                complexity_adjusted=level,
                estimated_time=candidate.estimated_time,
                reason=FASTER_REASON if level < prediction.complexity else SLOWER_REASON,
            ))
            if len(alternatives) >= self.settings["max_alternatives"]:
                break

        return alternatives

    def assess_risk(self, prediction: Prediction, reasoning: ReasoningResult) -> RiskAssessment:
        risks = []

        if prediction.confidence < self.settings["low_confidence_threshold"]:
            risks.append("Low prediction confidence - consider gathering more data")

        if prediction.estimated_time > self.settings["long_completion_minutes"]:
            risks.append("Extended completion time - monitor progress closely")

        if reasoning.references("urgent") and prediction.estimated_time > self.settings["urgent_completion_minutes"]:
            risks.append("Time constraint risk - consider alternative workers")

        return RiskAssessment(factors=risks)

    def explain(self, prediction: Prediction, reasoning: ReasoningResult) -> str:
        explanation = f"I recommend {prediction.recommended_worker} for this assignment because "

        if prediction.confidence > self.settings["high_confidence_threshold"]:
            explanation += (
                f"they have a strong track record with {prediction.confidence * 100:.0f}% confidence. "
            )

        if prediction.estimated_time < self.settings["fast_completion_minutes"]:
            explanation += (
                f"They can complete it efficiently in approximately {prediction.estimated_time:.1f} minutes. "
            )

        if prediction.avg_quality > self.settings["high_quality_threshold"]:
            explanation += (
                f"Their average quality score of {prediction.avg_quality:.1f}% ensures excellent results. "
            )

        return explanation + reasoning.explanation

    def degraded(
        self, machine_id: int, complexity: int, reasoning: ReasoningResult, error: ModelNotReadyError
    ) -> EnhancedPrediction:
        """Low-confidence default recommendation used when no data backs a prediction."""
        logger.warning(f"Serving degraded recommendation for Machine {machine_id}: {error.message}")

        prediction: Dict[str, Any] = Prediction(
            recommended_worker=config.DEFAULT_WORKER,
            estimated_time=0.0,
            confidence=0.0,
            avg_quality=0.0,
            job_count=0,
            machine_id=machine_id,
            complexity=complexity,
        ).to_dict()

        risks = RiskAssessment(factors=[
            f"Missing training data: {error.message}",
            "Low prediction confidence - consider gathering more data",
        ])

        return EnhancedPrediction(
            prediction=prediction,
            ai_confidence=reasoning.confidence,
            contextual_score=0.0,
            alternative_workers=[],
            risk_assessment=risks,
            explanation=(
                f"I can't recommend a specific worker yet: {error.message}. "
                + reasoning.explanation
            ),
            degraded=True,
        )
