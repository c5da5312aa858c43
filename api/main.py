"""
FastAPI application for the Worker Assignment Assistant
Provides natural language assignment queries, direct predictions, training
and status endpoints.
"""

from datetime import datetime, timezone
from typing import Any, Dict, Optional

from fastapi import Depends, FastAPI, HTTPException, Query
from fastapi.middleware.cors import CORSMiddleware
import uvicorn

from worker_assignment.intelligence.assistant import AssignmentAssistant
from worker_assignment.utils.config import config
from worker_assignment.utils.exceptions import (
    DomainError,
    ModelNotReadyError,
    UnknownWorkerError,
    ValidationError,
)
from worker_assignment.utils.helpers import setup_logging

from api.models import (
    CapabilitiesResponse,
    ConversationRequest,
    FeedbackRequest,
    HealthResponse,
    InsightsResponse,
    LearningStatusResponse,
    QueryRequest,
    SystemStatusResponse,
    TrainingRecordsRequest,
    TrainingRecordsResponse,
    TrainingResponse,
    WorkerPerformanceResponse,
    WorkerPredictionRequest,
    WorkerPredictionResponse,
)
from api.dependencies import get_assistant
from api.middleware import LoggingMiddleware

API_VERSION = "1.0.0"

# Initialize logging
logger = setup_logging(config.LOG_LEVEL)

# Create FastAPI app
app = FastAPI(
    title="Worker Assignment Assistant API",
    description="Natural language worker assignment recommendations backed by historical performance",
    version=API_VERSION,
    docs_url="/docs" if config.DEBUG else None,
    redoc_url="/redoc" if config.DEBUG else None,
)

# Add middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(LoggingMiddleware)


@app.on_event("startup")
async def startup_event():
    """Train the assistant before the first request."""
    logger.info("Starting Worker Assignment Assistant API...")
    assistant = get_assistant()
    logger.info(f"Model status: {assistant.core.status()['status']}")


@app.on_event("shutdown")
async def shutdown_event():
    logger.info("Shutting down Worker Assignment Assistant API...")


def _raise_for_error(result: Dict[str, Any]) -> Dict[str, Any]:
    """Pipeline replies carrying ``error`` map to 400 (caller) or 500 (internal)."""
    if "error" in result:
        status_code = 500 if result.get("confidence") == 0.0 else 400
        raise HTTPException(
            status_code=status_code,
            detail={"error": result["error"], "suggestion": result.get("suggestion")},
        )
    return result


# Health Check Endpoints
@app.get("/health", response_model=HealthResponse)
async def health_check(assistant: AssignmentAssistant = Depends(get_assistant)):
    """Health check endpoint for load balancers."""
    return HealthResponse(
        status="healthy",
        timestamp=datetime.now(timezone.utc),
        version=API_VERSION,
        ready=assistant.core.is_trained,
    )


# Natural language endpoints
@app.post("/ai/query")
async def ai_query(
    request: QueryRequest, assistant: AssignmentAssistant = Depends(get_assistant)
):
    """Answer a natural language request."""
    return _raise_for_error(assistant.process_query(request.query, request.context))


@app.post("/ai/conversation")
async def ai_conversation(
    request: ConversationRequest, assistant: AssignmentAssistant = Depends(get_assistant)
):
    """Continue (or start) a conversation."""
    return _raise_for_error(
        assistant.process_conversation(request.message, request.conversation_id, request.context)
    )


@app.get("/ai/capabilities", response_model=CapabilitiesResponse)
async def ai_capabilities(assistant: AssignmentAssistant = Depends(get_assistant)):
    return assistant.get_capabilities()


@app.get("/ai/insights", response_model=InsightsResponse)
async def ai_insights(assistant: AssignmentAssistant = Depends(get_assistant)):
    return {"insights": assistant.generate_proactive_insights()}


@app.get("/ai/learning-status", response_model=LearningStatusResponse)
async def ai_learning_status(assistant: AssignmentAssistant = Depends(get_assistant)):
    return assistant.get_learning_status()


@app.post("/ai/feedback")
async def ai_feedback(
    request: FeedbackRequest, assistant: AssignmentAssistant = Depends(get_assistant)
):
    return _raise_for_error(assistant.process_feedback(request.model_dump(exclude_none=True)))


# Prediction Endpoints
@app.post("/predict/worker", response_model=WorkerPredictionResponse)
async def predict_worker(
    request: WorkerPredictionRequest, assistant: AssignmentAssistant = Depends(get_assistant)
):
    """Recommend a worker for a machine and complexity level."""
    try:
        return assistant.predict_worker(request.machine_id, request.complexity)
    except DomainError as e:
        raise HTTPException(status_code=400, detail=e.to_dict())
    except ModelNotReadyError as e:
        logger.warning(f"Prediction unavailable: {e.message}")
        raise HTTPException(status_code=503, detail=e.to_dict())


@app.get("/workers/{worker_id}/performance", response_model=WorkerPerformanceResponse)
async def worker_performance(
    worker_id: str,
    machine_id: Optional[int] = Query(None, description="Include a machine-specific block"),
    assistant: AssignmentAssistant = Depends(get_assistant),
):
    try:
        return assistant.get_worker_performance(worker_id, machine_id)
    except UnknownWorkerError as e:
        raise HTTPException(status_code=404, detail=e.to_dict())
    except ModelNotReadyError as e:
        raise HTTPException(status_code=503, detail=e.to_dict())


# Training Endpoints
@app.post("/training/records", response_model=TrainingRecordsResponse)
async def add_training_records(
    request: TrainingRecordsRequest, assistant: AssignmentAssistant = Depends(get_assistant)
):
    """Add historical records; they affect predictions only after a retrain."""
    try:
        return assistant.add_training_data(
            [record.model_dump(exclude_none=True) for record in request.records],
            retrain=request.retrain,
        )
    except (ValidationError, DomainError) as e:
        raise HTTPException(status_code=400, detail=e.to_dict())


@app.post("/training/retrain", response_model=TrainingResponse)
async def retrain(assistant: AssignmentAssistant = Depends(get_assistant)):
    return assistant.retrain()


@app.get("/system/status", response_model=SystemStatusResponse)
async def system_status(assistant: AssignmentAssistant = Depends(get_assistant)):
    return assistant.get_system_status()


if __name__ == "__main__":
    uvicorn.run(
        "api.main:app",
        host=config.API_HOST,
        port=config.API_PORT,
        reload=config.DEBUG,
    )
