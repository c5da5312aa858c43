"""
FastAPI dependency injection for the assignment assistant.
"""

import os
from typing import Optional

from worker_assignment.intelligence.assistant import AssignmentAssistant
from worker_assignment.utils.config import config
from worker_assignment.utils.helpers import setup_logging

logger = setup_logging(config.LOG_LEVEL)

# Global instance
_assistant: Optional[AssignmentAssistant] = None


def build_assistant() -> AssignmentAssistant:
    """Create an assistant seeded from TRAINING_DATA_PATH or synthetic history."""
    assistant = AssignmentAssistant()

    if config.TRAINING_DATA_PATH and os.path.exists(config.TRAINING_DATA_PATH):
        count = assistant.load_training_csv(config.TRAINING_DATA_PATH)
        logger.info(f"Assistant initialized with {count} records from {config.TRAINING_DATA_PATH}")
    else:
        if config.TRAINING_DATA_PATH:
            logger.warning(
                f"Training data file not found: {config.TRAINING_DATA_PATH}. Using synthetic history."
            )
        count = assistant.load_sample_data()
        logger.info(f"Assistant initialized with {count} synthetic records")

    return assistant


def get_assistant() -> AssignmentAssistant:
    """Get assignment assistant singleton."""
    global _assistant
    if _assistant is None:
        _assistant = build_assistant()
    return _assistant


def set_assistant(assistant: Optional[AssignmentAssistant]) -> None:
    """Replace (or clear, with None) the process-wide assistant."""
    global _assistant
    _assistant = assistant
