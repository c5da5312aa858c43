"""Tests for worker_assignment/intelligence/assistant.py - the end-to-end pipeline."""

import math
from datetime import datetime

import pytest

from worker_assignment.data.sample_data import WORKER_PROFILES
from worker_assignment.intelligence.assistant import AssignmentAssistant
from worker_assignment.models.prediction_core import PredictionCore
from worker_assignment.utils.config import config
from worker_assignment.utils.exceptions import ValidationError

SCENARIO = "Who should work on Machine 1 for an urgent precision job?"


class TestAssignmentQueries:

    def test_scenario(self, assistant):
        response = assistant.process_query(SCENARIO)

        assert response["understood_intent"]["primary"]["type"] == "assignment"
        assert response["context_analysis"]["requirements"]["machine_id"] == 1
        assert response["context_analysis"]["requirements"]["quality_focus"] == "high"
        assert response["context_analysis"]["environmental_factors"]["urgency"]["factor"] == "high"
        assert response["reasoning"]["confidence"] > 0.85

        result = response["result"]
        assert result["type"] == "worker_assignment"
        enhanced = result["ai_enhanced"]
        assert enhanced["recommended_worker"] in WORKER_PROFILES
        assert enhanced["machine_id"] == 1
        assert enhanced["complexity"] == 5
        assert 0 <= enhanced["contextual_score"] <= 100
        assert enhanced["recommended_worker"] not in [a["worker"] for a in enhanced["alternative_workers"]]
        assert enhanced["risk_assessment"]["level"] in ("low", "medium", "high")
        assert enhanced["recommended_worker"] in response["natural_response"]
        assert 0.0 <= response["confidence"] <= 1.0

    def test_invalid_machine_is_a_domain_error(self, assistant):
        response = assistant.process_query("Who should work on machine 9?")
        assert response["error"] == "Machine 9 is not a known machine"
        assert "between 1 and 5" in response["suggestion"]

    def test_invalid_supplied_complexity(self, assistant):
        response = assistant.process_query(
            "best worker for machine 2", {"requirements": {"machine_id": 2, "complexity": 8}}
        )
        assert "Complexity 8" in response["error"]


class TestDegradedPath:

    def test_no_training_data(self, empty_assistant):
        response = empty_assistant.process_query("Who is the best worker for machine 1?")

        assert "error" not in response
        assert 0.0 <= response["confidence"] <= 0.3
        enhanced = response["result"]["ai_enhanced"]
        assert enhanced["degraded"] is True
        assert enhanced["complexity"] == 3
        assert enhanced["risk_assessment"]["level"] == "high"
        assert any("Missing training data" in f for f in enhanced["risk_assessment"]["factors"])

    def test_trained_without_machine_history(self, small_core):
        assistant = AssignmentAssistant(core=small_core)
        response = assistant.process_query("best worker for machine 5")
        assert response["result"]["ai_enhanced"]["degraded"] is True
        assert response["confidence"] <= 0.2


class TestInputValidation:

    @pytest.mark.parametrize("query", [None, "", "   ", 17, ["who"]])
    def test_rejected_queries(self, assistant, query):
        response = assistant.process_query(query)
        assert set(response) == {"error", "suggestion"}

    def test_rejected_queries_are_not_recorded(self, assistant):
        assistant.process_query("")
        assert assistant.get_learning_status()["total_interactions"] == 0

    def test_internal_errors_become_apologies(self, assistant, monkeypatch):
        def broken(query):
            raise RuntimeError("classifier exploded")

        monkeypatch.setattr(assistant.classifier, "classify", broken)
        response = assistant.process_query("anything")

        assert response["confidence"] == 0.0
        assert "classifier exploded" in response["error"]
        assert response["natural_response"].startswith("I apologize")


class TestOtherIntents:

    def test_worker_performance(self, assistant):
        response = assistant.process_query("How is worker_a performing on machine 2?")
        result = response["result"]

        assert result["type"] == "performance_analysis"
        assert result["worker_performance"]["worker_id"] == "worker_a"
        assert result["worker_performance"]["machine_specialization"]["machine_id"] == 2
        assert "worker_a has completed" in response["natural_response"]

    def test_unknown_worker(self, assistant):
        response = assistant.process_query("How is worker_zz performing?")
        assert response["error"] == "Worker worker_zz not found in the system"

    def test_performance_without_model(self, empty_assistant):
        result = empty_assistant.process_query("How is worker_a performing?")["result"]
        assert "Train the ML model with available data" in result["recommendations"]
        assert "worker_performance" not in result

    def test_analytics(self, assistant):
        result = assistant.process_query("Give me a system overview")["result"]
        assert result["type"] == "comprehensive_analytics"
        assert result["system_analytics"]["ready"] is True
        assert set(result["machine_leaderboards"]) == {1, 2, 3, 4, 5}
        assert result["overview"]["top_performer"] in WORKER_PROFILES

    def test_learning_adds_records_and_retrains(self, assistant):
        before = assistant.get_system_status()["model"]["trained_records"]
        response = assistant.process_query(
            "Please learn from these jobs",
            {"training_data": [
                {"worker_id": "w9", "machine_id": 2, "time_minutes": 30, "quality_score": 95},
            ]},
        )

        update = response["result"]["training_update"]
        assert update == {"records_added": 1, "retrained": True, "total_records": before + 1}
        assert assistant.get_system_status()["model"]["trained_records"] == before + 1

    def test_learning_without_retrain(self, assistant):
        response = assistant.process_query(
            "Please learn from these jobs",
            {"training_data": [{"worker_id": "w9", "machine_id": 2, "time_minutes": 30, "quality_score": 95}],
             "retrain": False},
        )
        assert response["result"]["training_update"]["retrained"] is False
        assert assistant.get_system_status()["data"]["pending_records"] == 1

    def test_learning_with_bad_records(self, assistant):
        response = assistant.process_query(
            "Please learn from these jobs", {"training_data": [{"worker_id": "w9"}]}
        )
        assert "missing fields" in response["error"]

    def test_general_assistance(self, assistant):
        response = assistant.process_query("hello there")
        assert response["result"]["type"] == "general_assistance"
        assert response["confidence"] == pytest.approx(0.7)
        assert response["natural_response"].startswith('I understand you\'re asking about "hello there".')


class TestLearningAndConversation:

    def test_interactions_are_recorded(self, assistant):
        assistant.process_query(SCENARIO)
        assistant.process_query("hello there")

        status = assistant.get_learning_status()
        assert status["total_interactions"] == 2
        assert status["learned_patterns"] > 0
        assert status["effectiveness"] in ("High", "Medium", "Low")

    def test_conversation_keeps_history(self, assistant):
        first = assistant.process_conversation("Who is the best worker for machine 2?")
        conversation_id = first["conversation_id"]
        assert first["conversation_length"] == 2

        second = assistant.process_conversation("And for machine 3?", conversation_id)
        assert second["conversation_id"] == conversation_id
        assert second["conversation_length"] == 4
        assert len(second["context_analysis"]["conversation_history"]) == 3

    def test_conversation_map_is_bounded(self, assistant, monkeypatch):
        monkeypatch.setattr(config, "MAX_CONVERSATIONS", 3)
        for i in range(5):
            assistant.process_conversation("hello", f"c{i}")
        assert list(assistant.conversations) == ["c2", "c3", "c4"]

        # Touching a conversation protects it from the next eviction
        assistant.process_conversation("hello again", "c2")
        assistant.process_conversation("hello", "c5")
        assert list(assistant.conversations) == ["c4", "c2", "c5"]
        assert assistant.get_capabilities()["context_awareness"]["active_conversations"] == 3

    def test_feedback(self, assistant):
        reply = assistant.process_feedback({"type": "assignment", "rating": 5})
        assert reply["status"] == "received"
        assert reply["learning_status"]["user_preferences"] == 1
        assert "error" in assistant.process_feedback({})

    def test_capabilities(self, assistant):
        capabilities = assistant.get_capabilities()
        assert capabilities["capabilities"]["reasoning"]["contextual_analysis"] is True
        assert capabilities["context_awareness"]["active_conversations"] == 0


class TestInsightsAndStatus:

    def test_peak_hours(self, assistant):
        peak = assistant.generate_proactive_insights(now=datetime(2026, 3, 2, 10, 0))
        night = assistant.generate_proactive_insights(now=datetime(2026, 3, 2, 3, 0))

        assert "timing" in [i["type"] for i in peak]
        assert "timing" not in [i["type"] for i in night]
        assert "opportunity" in [i["type"] for i in night]

    def test_no_data_warning(self, empty_assistant):
        insights = empty_assistant.generate_proactive_insights(now=datetime(2026, 3, 2, 3, 0))
        assert insights == [{
            "type": "data",
            "priority": "high",
            "message": "No training data loaded. Add historical records and retrain before assigning work.",
        }]

    def test_large_history_suggests_optimization(self):
        assistant = AssignmentAssistant(core=PredictionCore())
        assistant.load_sample_data(n_records=1600, random_state=1)
        types = [i["type"] for i in assistant.generate_proactive_insights(now=datetime(2026, 3, 2, 3, 0))]
        assert types == ["opportunity", "optimization"]

    def test_system_status(self, assistant, empty_assistant):
        assert assistant.get_system_status()["status"] == "Ready"
        assert empty_assistant.get_system_status()["status"] == "Initializing"

    def test_direct_prediction_and_performance(self, assistant):
        prediction = assistant.predict_worker(3, 2)
        assert prediction["recommended_worker"] in WORKER_PROFILES

        performance = assistant.get_worker_performance("worker_b")
        assert performance["total_jobs"] > 0

    def test_add_training_data_with_retrain(self, assistant):
        result = assistant.add_training_data(
            [{"worker_id": "w9", "machine_id": 4, "time_minutes": 20, "quality_score": 88}], retrain=True
        )
        assert result["records_added"] == 1
        assert result["training"]["n_records"] == result["total_records"]

    def test_non_finite_time_never_reaches_the_model(self, assistant):
        before = len(assistant.core.store)
        with pytest.raises(ValidationError):
            assistant.add_training_data(
                [{"worker_id": "a", "machine_id": 2, "time_minutes": float("nan"), "quality_score": 90}],
                retrain=True,
            )
        assert len(assistant.core.store) == before

        response = assistant.process_query("who should work on machine 2")
        assert math.isfinite(response["result"]["base_prediction"]["estimated_time"])
