"""Configuration settings for the Worker Assignment Assistant."""

import os
from typing import Dict, Any
from dotenv import load_dotenv

load_dotenv()


class Config:
    """Application configuration class."""

    # Environment Configuration
    DEBUG = os.getenv("DEBUG", "True").lower() == "true"
    ENVIRONMENT = os.getenv("ENVIRONMENT", "development")

    # Model Storage Configuration
    MODEL_DIR = os.getenv("MODEL_DIR", "models")
    TRAINING_DATA_PATH = os.getenv("TRAINING_DATA_PATH", "")

    # Synthetic history
    MODEL_RANDOM_STATE = int(os.getenv("MODEL_RANDOM_STATE", "42"))
    SAMPLE_DATA_SIZE = int(os.getenv("SAMPLE_DATA_SIZE", "500"))

    # Domain bounds
    MACHINE_COUNT = int(os.getenv("MACHINE_COUNT", "5"))
    MIN_COMPLEXITY = 1
    MAX_COMPLEXITY = 5
    NEIGHBORHOOD_SIZE = int(os.getenv("NEIGHBORHOOD_SIZE", "3"))

    # Enhancement thresholds
    LOW_CONFIDENCE_THRESHOLD = float(os.getenv("LOW_CONFIDENCE_THRESHOLD", "0.7"))
    HIGH_CONFIDENCE_THRESHOLD = float(os.getenv("HIGH_CONFIDENCE_THRESHOLD", "0.8"))
    LONG_COMPLETION_MINUTES = float(os.getenv("LONG_COMPLETION_MINUTES", "30"))
    URGENT_COMPLETION_MINUTES = float(os.getenv("URGENT_COMPLETION_MINUTES", "20"))
    FAST_COMPLETION_MINUTES = float(os.getenv("FAST_COMPLETION_MINUTES", "20"))
    HIGH_QUALITY_THRESHOLD = float(os.getenv("HIGH_QUALITY_THRESHOLD", "85"))
    URGENCY_BONUS = float(os.getenv("URGENCY_BONUS", "10"))
    QUALITY_BONUS = float(os.getenv("QUALITY_BONUS", "15"))
    MAX_ALTERNATIVES = int(os.getenv("MAX_ALTERNATIVES", "2"))

    # Reasoning bounds
    MIN_REASONING_CONFIDENCE = 0.1
    MAX_REASONING_CONFIDENCE = 1.0

    # Learning store
    INTERACTION_HISTORY_LIMIT = int(os.getenv("INTERACTION_HISTORY_LIMIT", "1000"))
    INTERACTION_HISTORY_TRIM = int(os.getenv("INTERACTION_HISTORY_TRIM", "800"))
    PATTERN_HISTORY_LIMIT = int(os.getenv("PATTERN_HISTORY_LIMIT", "100"))
    CONVERSATION_HISTORY_LIMIT = int(os.getenv("CONVERSATION_HISTORY_LIMIT", "50"))
    CONVERSATION_CONTEXT_WINDOW = int(os.getenv("CONVERSATION_CONTEXT_WINDOW", "5"))
    MAX_CONVERSATIONS = int(os.getenv("MAX_CONVERSATIONS", "200"))

    # Degraded responses
    DEFAULT_WORKER = os.getenv("DEFAULT_WORKER", "unassigned")
    DEGRADED_CONFIDENCE = float(os.getenv("DEGRADED_CONFIDENCE", "0.2"))

    # API Configuration
    API_HOST = os.getenv("API_HOST", "0.0.0.0")
    API_PORT = int(os.getenv("API_PORT", "8000"))
    PEAK_HOURS_START = int(os.getenv("PEAK_HOURS_START", "9"))
    PEAK_HOURS_END = int(os.getenv("PEAK_HOURS_END", "17"))

    # Logging
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
    LOG_FORMAT = os.getenv(
        "LOG_FORMAT", "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )

    @classmethod
    def get_model_config(cls) -> Dict[str, Any]:
        """Get model configuration dictionary."""
        return {
            "random_state": cls.MODEL_RANDOM_STATE,
            "n_neighbors": cls.NEIGHBORHOOD_SIZE,
            "machine_count": cls.MACHINE_COUNT,
            "min_complexity": cls.MIN_COMPLEXITY,
            "max_complexity": cls.MAX_COMPLEXITY,
        }

    @classmethod
    def get_enhancement_config(cls) -> Dict[str, Any]:
        """Get prediction enhancement thresholds."""
        return {
            "low_confidence_threshold": cls.LOW_CONFIDENCE_THRESHOLD,
            "high_confidence_threshold": cls.HIGH_CONFIDENCE_THRESHOLD,
            "long_completion_minutes": cls.LONG_COMPLETION_MINUTES,
            "urgent_completion_minutes": cls.URGENT_COMPLETION_MINUTES,
            "fast_completion_minutes": cls.FAST_COMPLETION_MINUTES,
            "high_quality_threshold": cls.HIGH_QUALITY_THRESHOLD,
            "urgency_bonus": cls.URGENCY_BONUS,
            "quality_bonus": cls.QUALITY_BONUS,
            "max_alternatives": cls.MAX_ALTERNATIVES,
        }

    @classmethod
    def get_learning_config(cls) -> Dict[str, Any]:
        """Get learning store limits."""
        return {
            "history_limit": cls.INTERACTION_HISTORY_LIMIT,
            "history_trim": cls.INTERACTION_HISTORY_TRIM,
            "pattern_limit": cls.PATTERN_HISTORY_LIMIT,
        }


class DevelopmentConfig(Config):
    """Development environment configuration."""

    DEBUG = True
    LOG_LEVEL = "DEBUG"


class ProductionConfig(Config):
    """Production environment configuration."""

    DEBUG = False
    LOG_LEVEL = "WARNING"


CONFIGS = {"development": DevelopmentConfig, "production": ProductionConfig}


def get_config(environment: str = None) -> Config:
    """Configuration for an environment; unknown names get the base Config."""
    return CONFIGS.get(environment or Config.ENVIRONMENT, Config)()


config = get_config()
