"""Shared fixtures: deterministic histories, trained cores and assistants."""

import pytest

from worker_assignment.data.training_store import TrainingStore
from worker_assignment.intelligence.assistant import AssignmentAssistant
from worker_assignment.models.prediction_core import PredictionCore

SAMPLE_RECORDS = 300


@pytest.fixture
def small_records():
    """Hand-built history with known nearest neighbours."""
    return [
        {"worker_id": "worker_a", "machine_id": 1, "time_minutes": 10, "quality_score": 95, "complexity": 1},
        {"worker_id": "worker_b", "machine_id": 1, "time_minutes": 20, "quality_score": 80, "complexity": 3},
        {"worker_id": "worker_a", "machine_id": 1, "time_minutes": 12, "quality_score": 93, "complexity": 2},
        {"worker_id": "worker_c", "machine_id": 1, "time_minutes": 30, "quality_score": 88, "complexity": 5},
        {"worker_id": "worker_b", "machine_id": 2, "time_minutes": 40, "quality_score": 70, "complexity": 3},
        {"worker_id": "worker_b", "machine_id": 2, "time_minutes": 42, "quality_score": 72, "complexity": 3},
        {"worker_id": "worker_b", "machine_id": 2, "time_minutes": 38, "quality_score": 71, "complexity": 4},
    ]


@pytest.fixture
def small_core(small_records):
    core = PredictionCore(TrainingStore(small_records))
    core.train()
    return core


@pytest.fixture
def assistant():
    """Assistant trained on seeded synthetic history."""
    assistant = AssignmentAssistant()
    assistant.load_sample_data(n_records=SAMPLE_RECORDS, random_state=7)
    return assistant


@pytest.fixture
def sample_core(assistant):
    return assistant.core


@pytest.fixture
def empty_assistant():
    """Assistant with no training data and no trained model."""
    return AssignmentAssistant()
