"""
Error taxonomy for the assignment pipeline.

Validation and domain errors are surfaced to callers as ``{error, suggestion}``
payloads; model readiness errors trigger a degraded recommendation; anything
else is wrapped in InternalError at the top of the pipeline.
"""

from typing import Any, Dict, Optional


class WorkerAssignmentError(Exception):
    """Base class for all errors raised by the assignment core."""

    def __init__(self, message: str, suggestion: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.suggestion = suggestion

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"error": self.message}
        if self.suggestion:
            payload["suggestion"] = self.suggestion
        return payload


class ValidationError(WorkerAssignmentError):
    """Missing or malformed request input."""


class DomainError(WorkerAssignmentError):
    """Input references something outside the known machines/workers."""


class InvalidMachineError(DomainError):
    def __init__(self, machine_id: Any, machine_count: int = 5):
        self.machine_id = machine_id
        super().__init__(
            f"Machine {machine_id} is not a known machine",
            f"Use a machine id between 1 and {machine_count}",
        )


class InvalidComplexityError(DomainError):
    def __init__(self, complexity: Any, min_level: int = 1, max_level: int = 5):
        self.complexity = complexity
        super().__init__(
            f"Complexity {complexity} is outside the supported range",
            f"Use a complexity level between {min_level} and {max_level}",
        )


class UnknownWorkerError(DomainError):
    def __init__(self, worker_id: str):
        self.worker_id = worker_id
        super().__init__(
            f"Worker {worker_id} not found in the system",
            "Check the worker id or add training records for this worker",
        )


class ModelNotReadyError(WorkerAssignmentError):
    """Prediction requested while no usable training data exists."""


class ModelNotTrainedError(ModelNotReadyError):
    def __init__(self):
        super().__init__(
            "Prediction model has not been trained yet",
            "Add training data and retrain the model",
        )


class NoTrainingDataError(ModelNotReadyError):
    def __init__(self, machine_id: int):
        self.machine_id = machine_id
        super().__init__(
            f"No training data available for Machine {machine_id}",
            f"Add historical records for Machine {machine_id} and retrain",
        )


class InternalError(WorkerAssignmentError):
    """Unexpected failure inside a pipeline stage."""

    def __init__(self, stage: str, cause: Exception):
        self.stage = stage
        self.cause = cause
        super().__init__(
            f"Internal error during {stage}: {cause}",
            "Please try again or rephrase your request",
        )
