"""
Pydantic models for API request/response schemas.
"""

from datetime import datetime
from typing import List, Optional, Dict, Any
from pydantic import BaseModel, ConfigDict, Field, field_validator


class HealthResponse(BaseModel):
    status: str
    timestamp: datetime
    version: str
    ready: bool = False


class ErrorResponse(BaseModel):
    error: str
    suggestion: Optional[str] = None


# Natural language requests
class QueryRequest(BaseModel):
    query: str = Field(..., description="Natural language request")
    context: Dict[str, Any] = Field(
        default_factory=dict, description="Caller context merged over derived context"
    )

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "query": "Who should work on Machine 1 for an urgent precision job?",
                "context": {"constraints": {"shift": "day"}},
            }
        }
    )


class ConversationRequest(BaseModel):
    message: str = Field(..., description="Next user message in the conversation")
    conversation_id: Optional[str] = Field(
        None, description="Existing conversation id; a new one is created when omitted"
    )
    context: Dict[str, Any] = Field(default_factory=dict)


class FeedbackRequest(BaseModel):
    type: str = Field("general", description="What the feedback refers to")
    rating: Optional[int] = Field(None, ge=1, le=5)
    comment: Optional[str] = None
    recommended_worker: Optional[str] = None
    actual_worker: Optional[str] = None


class InsightItem(BaseModel):
    type: str
    priority: str
    message: str


class InsightsResponse(BaseModel):
    insights: List[InsightItem]


class LearningStatusResponse(BaseModel):
    total_interactions: int
    learned_patterns: int
    user_preferences: int
    effectiveness: str
    last_update: str


class CapabilitiesResponse(BaseModel):
    capabilities: Dict[str, Dict[str, bool]]
    learning_status: LearningStatusResponse
    context_awareness: Dict[str, int]


# Direct prediction
class WorkerPredictionRequest(BaseModel):
    # Range checks happen in the prediction core so they surface as domain errors
    machine_id: int = Field(..., description="Machine identifier (1-5)")
    complexity: int = Field(3, description="Job complexity level (1-5)")

    model_config = ConfigDict(
        json_schema_extra={"example": {"machine_id": 1, "complexity": 4}}
    )


class NeighborRecord(BaseModel):
    worker_id: str
    time_minutes: float
    quality_score: float
    distance: float


class WorkerPredictionResponse(BaseModel):
    recommended_worker: str
    estimated_time: float = Field(..., ge=0, description="Estimated completion time in minutes")
    confidence: float = Field(..., ge=0, le=1)
    avg_quality: float = Field(..., ge=0, le=100)
    job_count: int = Field(..., ge=0)
    machine_id: int
    complexity: int
    rank: Optional[int] = None
    neighbors: List[NeighborRecord] = Field(default_factory=list)


# Training data
class TrainingRecordModel(BaseModel):
    worker_id: str = Field(..., description="Worker identifier")
    machine_id: int = Field(..., description="Machine identifier (1-5)")
    time_minutes: float = Field(..., ge=0, description="Completion time in minutes")
    quality_score: float = Field(..., ge=0, le=100, description="Quality score percentage")
    complexity: Optional[int] = Field(None, description="Explicit complexity level (1-5)")

    @field_validator("worker_id")
    @classmethod
    def worker_id_must_not_be_empty(cls, v):
        if not v.strip():
            raise ValueError("worker_id must not be empty")
        return v.strip()


class TrainingRecordsRequest(BaseModel):
    records: List[TrainingRecordModel] = Field(..., min_length=1)
    retrain: bool = Field(False, description="Retrain the model after adding records")

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "records": [
                    {"worker_id": "worker_f", "machine_id": 2, "time_minutes": 30, "quality_score": 95}
                ],
                "retrain": True,
            }
        }
    )


class TrainingResponse(BaseModel):
    n_records: int
    n_workers: int
    machines: List[int]
    algorithm: str
    trained_at: str


class TrainingRecordsResponse(BaseModel):
    records_added: int
    total_records: int
    training: Optional[TrainingResponse] = None


class WorkerPerformanceResponse(BaseModel):
    worker_id: str
    total_jobs: int
    avg_time: float
    avg_quality: float
    machines_operated: List[int]
    quality_consistency: float
    machine_specialization: Optional[Dict[str, Any]] = None


class SystemStatusResponse(BaseModel):
    status: str
    data: Dict[str, Any]
    model: Dict[str, Any]
    ready: bool
