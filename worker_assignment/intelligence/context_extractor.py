"""
Context extraction

Derives machine, complexity, urgency and quality requirements plus weighted
environmental factors from the request text, then merges the caller's
context on top.
"""

import re
from typing import Any, Dict, List, Optional, Tuple

from .base_types import ExtractedContext
from ..utils.helpers import setup_logging

logger = setup_logging()

MACHINE_PATTERN = re.compile(r"machine\s*(\d+)", re.IGNORECASE)
WORKER_PATTERN = re.compile(r"\b(worker[_-][a-z0-9_]+)\b", re.IGNORECASE)

# Evaluated in order; the first bucket with a hit wins
COMPLEXITY_BUCKETS: List[Tuple[str, List[str]]] = [
    ("simple", ["simple", "easy", "basic", "straightforward"]),
    ("medium", ["medium", "standard", "normal", "regular"]),
    ("complex", ["complex", "difficult", "challenging", "advanced", "intricate"]),
    ("critical", ["critical", "precision", "perfect", "exact", "flawless"]),
]

COMPLEXITY_LEVELS = {"simple": 1, "medium": 3, "complex": 4, "critical": 5}

URGENCY_KEYWORDS = ("urgent", "rush", "asap")
QUALITY_KEYWORDS = ("quality", "precision", "careful")

# factor type -> ordered (pattern, weight, factor) entries
ENVIRONMENTAL_FACTORS: Dict[str, List[Tuple[str, float, str]]] = {
    "time_context": [
        (r"morning", 1.2, "fresh_start"),
        (r"afternoon", 1.0, "steady_pace"),
        (r"evening", 0.9, "fatigue_consideration"),
        (r"end.*of.*day", 0.8, "rushing_risk"),
    ],
    "workload_context": [
        (r"heavy.*workload", 0.8, "capacity_concern"),
        (r"light.*load", 1.2, "available_capacity"),
        (r"busy", 0.7, "limited_availability"),
        (r"free", 1.3, "full_availability"),
    ],
    "quality_context": [
        (r"prototype", 1.5, "experimental_work"),
        (r"production", 1.3, "standard_quality"),
        (r"customer.*facing", 1.6, "high_stakes"),
        (r"internal.*use", 1.0, "standard_quality"),
    ],
}

# Top-level keys of a supplied context that replace the derived section
CONTEXT_SECTIONS = ("requirements", "environmental_factors", "constraints", "query_analysis")

# camelCase requirement keys accepted from callers
REQUIREMENT_ALIASES = {
    "machineId": "machine_id",
    "workerId": "worker_id",
    "qualityFocus": "quality_focus",
    "timeConstraint": "time_constraint",
}


def complexity_level(label: Optional[Any]) -> Optional[int]:
    """Map a complexity bucket (or an explicit level) to 1..5."""
    if label is None or isinstance(label, bool):
        return None
    if isinstance(label, int):
        return label
    if isinstance(label, str):
        text = label.strip().lower()
        if text.isdigit():
            return int(text)
        if text in COMPLEXITY_LEVELS:
            return COMPLEXITY_LEVELS[text]
        for bucket, keywords in COMPLEXITY_BUCKETS:
            if text in keywords:
                return COMPLEXITY_LEVELS[bucket]
    return None


class ContextExtractor:
    """Turn a request plus caller context into an ExtractedContext."""

    def __init__(self):
        self.environmental_factors = {
            factor_type: [
                (re.compile(pattern, re.IGNORECASE), weight, factor)
                for pattern, weight, factor in entries
            ]
            for factor_type, entries in ENVIRONMENTAL_FACTORS.items()
        }

    def extract(self, query: str, supplied_context: Optional[Dict[str, Any]] = None) -> ExtractedContext:
        """Derive context from the query, then apply supplied keys on top.

        Supplied top-level keys replace derived ones wholesale; nested
        sections are not merged.
        """
        text = query if isinstance(query, str) else ""
        lowered = text.lower()
        context = ExtractedContext()

        self._extract_machine(text, context)
        self._extract_worker(text, context)
        self._extract_complexity(lowered, context)
        self._extract_urgency(lowered, context)
        self._extract_quality_focus(lowered, context)
        self._apply_environmental_factors(text, context)

        context.query_analysis = {
            "length": len(text),
            "token_count": len(text.split()),
            "detected_requirements": sorted(context.requirements),
        }

        return self.merge(context, supplied_context or {})

    def _extract_machine(self, text: str, context: ExtractedContext):
        match = MACHINE_PATTERN.search(text)
        if match:
            context.requirements["machine_id"] = int(match.group(1))

    def _extract_worker(self, text: str, context: ExtractedContext):
        match = WORKER_PATTERN.search(text)
        if match:
            context.requirements["worker_id"] = match.group(1).lower()

    def _extract_complexity(self, lowered: str, context: ExtractedContext):
        for bucket, keywords in COMPLEXITY_BUCKETS:
            if any(keyword in lowered for keyword in keywords):
                context.requirements["complexity"] = bucket
                break

    def _extract_urgency(self, lowered: str, context: ExtractedContext):
        if any(keyword in lowered for keyword in URGENCY_KEYWORDS):
            context.environmental_factors["urgency"] = {"factor": "high", "weight": 1.0}
            context.requirements["time_constraint"] = "urgent"

    def _extract_quality_focus(self, lowered: str, context: ExtractedContext):
        if any(keyword in lowered for keyword in QUALITY_KEYWORDS):
            context.requirements["quality_focus"] = "high"

    def _apply_environmental_factors(self, text: str, context: ExtractedContext):
        for factor_type, entries in self.environmental_factors.items():
            for pattern, weight, factor in entries:
                if pattern.search(text):
                    # last match within a category wins
                    context.environmental_factors[factor_type] = {
                        "factor": factor,
                        "weight": weight,
                    }

    @staticmethod
    def merge(context: ExtractedContext, supplied: Dict[str, Any]) -> ExtractedContext:
        """Shallow merge: supplied context wins at the top level."""
        if not isinstance(supplied, dict):
            logger.debug(f"Ignoring non-mapping context of type {type(supplied).__name__}")
            return context

        for key, value in supplied.items():
            if key == "requirements" and isinstance(value, dict):
                context.requirements = {
                    REQUIREMENT_ALIASES.get(name, name): item for name, item in value.items()
                }
            elif key in CONTEXT_SECTIONS and isinstance(value, dict):
                setattr(context, key, dict(value))
            elif key in CONTEXT_SECTIONS:
                logger.debug(f"Ignoring malformed '{key}' section in supplied context")
            else:
                context.extras[key] = value

        return context
