"""Utility helper functions for the Worker Assignment Assistant."""

import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Optional

import joblib

from .config import config


def setup_logging(log_level: str = 'INFO', log_file: Optional[str] = None) -> logging.Logger:
    """Set up logging configuration."""
    logger = logging.getLogger('worker_assignment')
    logger.setLevel(getattr(logging, log_level.upper()))

    if not logger.handlers:
        formatter = logging.Formatter(config.LOG_FORMAT)

        # Console handler
        console_handler = logging.StreamHandler()
        console_handler.setFormatter(formatter)
        logger.addHandler(console_handler)

        # File handler if specified
        if log_file:
            file_handler = logging.FileHandler(log_file)
            file_handler.setFormatter(formatter)
            logger.addHandler(file_handler)

    return logger


def clamp(value: float, lower: float, upper: float) -> float:
    """Bound value to the closed interval [lower, upper]."""
    return max(lower, min(upper, value))


def utc_timestamp() -> str:
    """ISO-8601 timestamp in UTC."""
    return datetime.now(timezone.utc).isoformat()


def save_model(model: Any, filepath: str) -> None:
    """Save model to file."""
    Path(filepath).parent.mkdir(parents=True, exist_ok=True)
    joblib.dump(model, filepath)


def load_model(filepath: str) -> Any:
    """Load model from file."""
    return joblib.load(filepath)


def minutes_to_human_readable(minutes: float) -> str:
    """Convert minutes to human readable format."""
    if minutes < 60:
        return f"{minutes:.1f} min"
    hours = int(minutes // 60)
    remainder = int(round(minutes % 60))
    return f"{hours}h {remainder}m"
