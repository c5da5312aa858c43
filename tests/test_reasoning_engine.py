"""Tests for worker_assignment/intelligence/reasoning_engine.py"""

import pytest

from worker_assignment.intelligence.base_types import (
    Approach, ExtractedContext, Intent, IntentType,
)
from worker_assignment.intelligence.context_extractor import ContextExtractor
from worker_assignment.intelligence.intent_classifier import IntentClassifier
from worker_assignment.intelligence.reasoning_engine import BASE_CONFIDENCE, ReasoningEngine


@pytest.fixture
def engine():
    return ReasoningEngine()


def intent(intent_type):
    return Intent(type=intent_type, confidence=0.9, matched_pattern="test")


def urgent_context(**requirements):
    return ExtractedContext(
        requirements=dict(requirements),
        environmental_factors={"urgency": {"factor": "high", "weight": 1.0}},
    )


class TestAssignmentStrategy:

    def test_scenario_raises_confidence(self, engine):
        query = "Who should work on Machine 1 for an urgent precision job?"
        reasoning = engine.reason(
            IntentClassifier().classify(query), ContextExtractor().extract(query)
        )

        assert reasoning.approach == Approach.WORKER_ASSIGNMENT
        assert reasoning.confidence > BASE_CONFIDENCE[Approach.WORKER_ASSIGNMENT]
        assert reasoning.parameters == {"machine_id": 1, "complexity": 5}
        assert reasoning.references("urgent")
        assert reasoning.references("quality")

    def test_camel_case_machine_is_honoured(self, engine):
        context = ContextExtractor().extract(
            "who should work on this job", {"requirements": {"machineId": 4}}
        )
        reasoning = engine.reason(intent(IntentType.ASSIGNMENT), context)
        assert reasoning.parameters["machine_id"] == 4
        assert not any("Intelligently selected" in s for s in reasoning.suggestions)

    def test_production_run_mentions_quality_context(self, engine):
        query = "Who should work on machine 2 for a production run?"
        reasoning = engine.reason(
            IntentClassifier().classify(query), ContextExtractor().extract(query)
        )
        assert "quality_context" in reasoning.explanation
        assert reasoning.references("quality")
        assert not reasoning.references("urgent")

    @pytest.mark.parametrize("requirements,urgent,machine_id", [
        ({"quality_focus": "high"}, True, 1),
        ({}, True, 3),
        ({}, False, 2),
    ])
    def test_default_machine(self, engine, requirements, urgent, machine_id):
        context = urgent_context(**requirements) if urgent else ExtractedContext(requirements=requirements)
        reasoning = engine.reason(intent(IntentType.ASSIGNMENT), context)

        assert reasoning.parameters["machine_id"] == machine_id
        assert f"Intelligently selected Machine {machine_id} based on context" in reasoning.suggestions

    @pytest.mark.parametrize("requirements,urgent,complexity", [
        ({}, False, 3),
        ({}, True, 4),
        ({"quality_focus": "high"}, True, 5),
    ])
    def test_assessed_complexity(self, engine, requirements, urgent, complexity):
        context = urgent_context(**requirements) if urgent else ExtractedContext(requirements=requirements)
        reasoning = engine.reason(intent(IntentType.ASSIGNMENT), context)
        assert reasoning.parameters["complexity"] == complexity

    def test_explicit_requirements_are_kept(self, engine):
        context = ExtractedContext(requirements={"machine_id": 4, "complexity": "simple"})
        reasoning = engine.reason(intent(IntentType.ASSIGNMENT), context)

        assert reasoning.parameters == {"machine_id": 4, "complexity": 1}
        assert reasoning.suggestions == []
        assert len(reasoning.action_plan) == 4


class TestEnvironmentalFactors:

    def test_weights_multiply_confidence(self, engine):
        context = ExtractedContext(environmental_factors={
            "workload_context": {"factor": "limited_availability", "weight": 0.7},
        })
        reasoning = engine.reason(intent(IntentType.PERFORMANCE), context)

        assert reasoning.confidence == pytest.approx(0.9 * 0.7)
        assert "Considering workload_context (limited_availability) factor." in reasoning.explanation

    def test_confidence_clamped_high(self, engine):
        context = ExtractedContext(environmental_factors={
            "time_context": {"factor": "fresh_start", "weight": 1.2},
        })
        assert engine.reason(intent(IntentType.ANALYTICS), context).confidence == 1.0

    def test_confidence_clamped_low(self, engine):
        context = ExtractedContext(environmental_factors={
            "custom": {"factor": "blocked", "weight": 0.01},
        })
        assert engine.reason(intent(IntentType.LEARNING), context).confidence == pytest.approx(0.1)

    def test_non_numeric_weights_skipped(self, engine):
        context = ExtractedContext(environmental_factors={
            "custom": {"factor": "odd", "weight": "heavy"},
            "urgency": "high",
        })
        reasoning = engine.reason(intent(IntentType.PERFORMANCE), context)
        assert reasoning.confidence == pytest.approx(0.9)


class TestDispatch:

    @pytest.mark.parametrize("intent_type,approach", [
        (IntentType.PERFORMANCE, Approach.PERFORMANCE_ANALYSIS),
        (IntentType.ANALYTICS, Approach.COMPREHENSIVE_ANALYTICS),
        (IntentType.LEARNING, Approach.ADAPTIVE_LEARNING),
        (IntentType.URGENCY, Approach.GENERAL_ASSISTANCE),
        (IntentType.GENERAL_INQUIRY, Approach.GENERAL_ASSISTANCE),
    ])
    def test_strategy_per_intent(self, engine, intent_type, approach):
        reasoning = engine.reason(intent(intent_type), ExtractedContext())
        assert reasoning.approach == approach
        assert reasoning.confidence == pytest.approx(BASE_CONFIDENCE[approach])

    def test_failing_strategy_falls_back_to_general(self, engine):
        def broken(context):
            raise RuntimeError("boom")

        engine.strategies[IntentType.ASSIGNMENT] = broken
        reasoning = engine.reason(intent(IntentType.ASSIGNMENT), ExtractedContext())
        assert reasoning.approach == Approach.GENERAL_ASSISTANCE

    def test_performance_parameters(self, engine):
        context = ExtractedContext(requirements={"worker_id": "worker_a", "machine_id": 2})
        reasoning = engine.reason(intent(IntentType.PERFORMANCE), context)
        assert reasoning.parameters == {"worker_id": "worker_a", "machine_id": 2}

    def test_learning_parameters(self, engine):
        context = ExtractedContext(extras={"training_data": [{}, {}], "retrain": False})
        reasoning = engine.reason(intent(IntentType.LEARNING), context)
        assert reasoning.parameters == {"training_records": 2, "retrain": False}
