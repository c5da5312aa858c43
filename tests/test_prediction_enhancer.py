"""Tests for worker_assignment/intelligence/prediction_enhancer.py"""

import pytest

from worker_assignment.intelligence.base_types import Approach, ReasoningResult, RiskLevel
from worker_assignment.intelligence.prediction_enhancer import PredictionEnhancer
from worker_assignment.models.prediction_core import Prediction, PredictionCore
from worker_assignment.utils.exceptions import ModelNotTrainedError


def make_prediction(confidence=0.9, estimated_time=15.0, avg_quality=90.0, worker="worker_a"):
    return Prediction(
        recommended_worker=worker,
        estimated_time=estimated_time,
        confidence=confidence,
        avg_quality=avg_quality,
        job_count=4,
        machine_id=1,
        complexity=3,
    )


def make_reasoning(confidence=1.0, explanation=""):
    return ReasoningResult(
        approach=Approach.WORKER_ASSIGNMENT,
        confidence=confidence,
        explanation=explanation,
        parameters={"machine_id": 1, "complexity": 3},
    )


@pytest.fixture
def enhancer():
    return PredictionEnhancer(PredictionCore())


class TestContextualScore:

    def test_base_score(self, enhancer):
        score = enhancer.contextual_score(make_prediction(confidence=0.5), make_reasoning(0.8))
        assert score == pytest.approx(40.0)

    def test_urgency_bonus_for_fast_jobs(self, enhancer):
        reasoning = make_reasoning(0.8, "Given the urgent nature, I'll prioritize fast workers. ")
        fast = enhancer.contextual_score(make_prediction(confidence=0.5, estimated_time=15), reasoning)
        slow = enhancer.contextual_score(make_prediction(confidence=0.5, estimated_time=25), reasoning)
        assert fast == pytest.approx(50.0)
        assert slow == pytest.approx(40.0)

    def test_quality_bonus_for_high_quality(self, enhancer):
        reasoning = make_reasoning(0.8, "With high quality requirements, I'll emphasize quality. ")
        assert enhancer.contextual_score(make_prediction(confidence=0.5), reasoning) == pytest.approx(55.0)

    def test_quality_context_factor_earns_quality_bonus(self, enhancer):
        reasoning = make_reasoning(0.8, "Considering quality_context (standard_quality) factor. ")
        assert enhancer.contextual_score(make_prediction(confidence=0.5), reasoning) == pytest.approx(55.0)

    def test_keyword_match_is_case_sensitive(self, enhancer):
        reasoning = make_reasoning(0.8, "Quality and Urgent are capitalised here. ")
        assert enhancer.contextual_score(make_prediction(confidence=0.5), reasoning) == pytest.approx(40.0)

    def test_score_capped_at_100(self, enhancer):
        reasoning = make_reasoning(1.0, "Given the urgent nature and high quality requirements. ")
        assert enhancer.contextual_score(make_prediction(confidence=1.0), reasoning) == 100.0


class TestRiskAssessment:

    @pytest.mark.parametrize("prediction,explanation,level,count", [
        (make_prediction(confidence=0.9, estimated_time=10), "", RiskLevel.LOW, 0),
        (make_prediction(confidence=0.6, estimated_time=10), "", RiskLevel.MEDIUM, 1),
        (make_prediction(confidence=0.6, estimated_time=35), "", RiskLevel.HIGH, 2),
        (make_prediction(confidence=0.5, estimated_time=35), "urgent job", RiskLevel.HIGH, 3),
        (make_prediction(confidence=0.9, estimated_time=25), "urgent job", RiskLevel.MEDIUM, 1),
    ])
    def test_level_follows_factor_count(self, enhancer, prediction, explanation, level, count):
        risk = enhancer.assess_risk(prediction, make_reasoning(explanation=explanation))
        assert len(risk.factors) == count
        assert risk.level == level

    @pytest.mark.parametrize("count,level", [(0, "low"), (1, "medium"), (2, "high"), (5, "high")])
    def test_level_from_count(self, count, level):
        assert RiskLevel.from_factor_count(count).value == level


class TestAlternatives:

    def test_alternatives_exclude_primary(self, sample_core):
        enhancer = PredictionEnhancer(sample_core)
        snapshot = sample_core.snapshot()
        for machine_id in range(1, 6):
            for complexity in range(1, 6):
                prediction = snapshot.predict(machine_id, complexity)
                alternatives = enhancer.alternatives(prediction, snapshot)

                workers = [alt.worker for alt in alternatives]
                assert prediction.recommended_worker not in workers
                assert len(workers) == len(set(workers)) <= 2
                for alt in alternatives:
                    expected = "Faster but less thorough" if alt.complexity_adjusted < complexity \
                        else "More thorough but slower"
                    assert alt.reason == expected

    def test_enhance_uses_given_snapshot(self, small_core):
        enhancer = PredictionEnhancer(small_core)
        snapshot = small_core.snapshot()
        prediction = snapshot.predict(1, 1)

        small_core.add_training_data(
            [{"worker_id": "worker_z", "machine_id": 1, "time_minutes": 5, "quality_score": 99, "complexity": 5}]
        )
        small_core.train()

        enhanced = enhancer.enhance(prediction, make_reasoning(), snapshot=snapshot)
        assert "worker_z" not in [alt.worker for alt in enhanced.alternative_workers]


class TestExplanationAndDegraded:

    def test_explanation_cites_strong_signals(self, enhancer):
        explanation = enhancer.explain(
            make_prediction(confidence=0.9, estimated_time=15, avg_quality=92),
            make_reasoning(explanation="Considering urgency (high) factor. "),
        )
        assert explanation.startswith("I recommend worker_a for this assignment because")
        assert "90% confidence" in explanation
        assert "15.0 minutes" in explanation
        assert "92.0%" in explanation
        assert explanation.endswith("Considering urgency (high) factor. ")

    def test_degraded_recommendation(self, enhancer):
        enhanced = enhancer.degraded(1, 3, make_reasoning(0.85), ModelNotTrainedError())
        payload = enhanced.to_dict()

        assert payload["recommended_worker"] == "unassigned"
        assert payload["confidence"] == 0.0
        assert payload["degraded"] is True
        assert payload["risk_assessment"]["level"] == "high"
        assert any("Missing training data" in f for f in payload["risk_assessment"]["factors"])
        assert payload["alternative_workers"] == []
