"""In-memory store of historical worker performance records."""

import math
import threading
from dataclasses import dataclass, asdict
from typing import Any, Dict, Iterable, List, Optional

import pandas as pd

from ..utils.config import config
from ..utils.exceptions import InvalidMachineError, ValidationError
from ..utils.helpers import setup_logging

logger = setup_logging()

RECORD_COLUMNS = [
    "worker_id",
    "machine_id",
    "time_minutes",
    "quality_score",
    "complexity",
    "sequence",
]

# Accept the camelCase payloads produced by older clients
_FIELD_ALIASES = {
    "workerId": "worker_id",
    "machineId": "machine_id",
    "timeMinutes": "time_minutes",
    "qualityScore": "quality_score",
}


def _as_int(value: Any, name: str) -> int:
    """Convert an identifier-like value, refusing to truncate fractional numbers."""
    if isinstance(value, float) and not value.is_integer():
        raise ValidationError(
            f"{name} must be a whole number, got {value}",
            f"Send {name} as an integer",
        )
    return int(value)


@dataclass(frozen=True)
class TrainingRecord:
    """One historical (worker, machine, time, quality) observation."""

    worker_id: str
    machine_id: int
    time_minutes: float
    quality_score: float
    complexity: Optional[int] = None

    def __post_init__(self):
        if not isinstance(self.worker_id, str) or not self.worker_id.strip():
            raise ValidationError(
                "Training record requires a non-empty worker_id",
                "Provide worker_id as a string, e.g. 'worker_a'",
            )
        if not 1 <= self.machine_id <= config.MACHINE_COUNT:
            raise InvalidMachineError(self.machine_id, config.MACHINE_COUNT)
        if not math.isfinite(self.time_minutes) or self.time_minutes < 0:
            raise ValidationError(
                f"time_minutes must be >= 0, got {self.time_minutes}",
                "Completion times are expressed in minutes",
            )
        if not math.isfinite(self.quality_score) or not 0 <= self.quality_score <= 100:
            raise ValidationError(
                f"quality_score must be within [0, 100], got {self.quality_score}",
                "Quality scores are percentages",
            )
        if self.complexity is not None and not (
            config.MIN_COMPLEXITY <= self.complexity <= config.MAX_COMPLEXITY
        ):
            raise ValidationError(
                f"complexity must be within [{config.MIN_COMPLEXITY}, {config.MAX_COMPLEXITY}]",
                "Omit complexity to let it be derived from completion time",
            )

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TrainingRecord":
        """Build a record from a snake_case or camelCase mapping."""
        if not isinstance(data, dict):
            raise ValidationError(
                f"Training record must be an object, got {type(data).__name__}",
                "Send records as {worker_id, machine_id, time_minutes, quality_score}",
            )
        normalized = {_FIELD_ALIASES.get(key, key): value for key, value in data.items()}
        missing = [
            name
            for name in ("worker_id", "machine_id", "time_minutes", "quality_score")
            if normalized.get(name) is None
        ]
        if missing:
            raise ValidationError(
                f"Training record is missing fields: {', '.join(missing)}",
                "Send records as {worker_id, machine_id, time_minutes, quality_score}",
            )

        complexity = normalized.get("complexity")
        try:
            return cls(
                worker_id=normalized["worker_id"],
                machine_id=_as_int(normalized["machine_id"], "machine_id"),
                time_minutes=float(normalized["time_minutes"]),
                quality_score=float(normalized["quality_score"]),
                complexity=_as_int(complexity, "complexity") if complexity is not None else None,
            )
        except (TypeError, ValueError) as e:
            raise ValidationError(
                f"Training record has a malformed value: {e}",
                "machine_id and complexity must be integers, times and scores numbers",
            ) from e

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


class TrainingStore:
    """Append-only collection of training records.

    Records are immutable once stored. Each gets a monotonically increasing
    sequence number that PredictionCore uses to prefer recent history when
    neighbours are equally close.
    """

    def __init__(self, records: Optional[Iterable[Any]] = None):
        self._records: List[TrainingRecord] = []
        self._sequences: List[int] = []
        self._next_sequence = 0
        self._lock = threading.Lock()

        if records:
            self.add_records(records)

    def __len__(self) -> int:
        return len(self._records)

    def add_record(self, record: Any) -> TrainingRecord:
        """Add a single record (TrainingRecord or mapping)."""
        return self.add_records([record])[0]

    def add_records(self, records: Iterable[Any]) -> List[TrainingRecord]:
        """Validate and append records; nothing is stored if any record is invalid."""
        parsed = [
            r if isinstance(r, TrainingRecord) else TrainingRecord.from_dict(r)
            for r in records
        ]

        with self._lock:
            for record in parsed:
                self._records.append(record)
                self._sequences.append(self._next_sequence)
                self._next_sequence += 1

        logger.info(f"Added {len(parsed)} training records (total: {len(self._records)})")
        return parsed

    @property
    def records(self) -> List[TrainingRecord]:
        with self._lock:
            return list(self._records)

    def workers(self) -> List[str]:
        return sorted({r.worker_id for r in self.records})

    def to_dataframe(self) -> pd.DataFrame:
        """Snapshot of the store as a DataFrame with RECORD_COLUMNS."""
        with self._lock:
            rows = [
                {**record.to_dict(), "sequence": sequence}
                for record, sequence in zip(self._records, self._sequences)
            ]

        if not rows:
            return pd.DataFrame(columns=RECORD_COLUMNS)
        return pd.DataFrame(rows, columns=RECORD_COLUMNS)

    def add_dataframe(self, df: pd.DataFrame) -> List[TrainingRecord]:
        """Append the rows of a DataFrame (e.g. loaded from CSV)."""
        records = []
        for row in df.to_dict("records"):
            complexity = row.get("complexity")
            if complexity is not None and pd.isna(complexity):
                row.pop("complexity")
            row.pop("sequence", None)
            records.append(row)
        return self.add_records(records)

    @classmethod
    def from_dataframe(cls, df: pd.DataFrame) -> "TrainingStore":
        store = cls()
        store.add_dataframe(df)
        return store

    def summary(self) -> Dict[str, Any]:
        """Basic counts for status reporting."""
        records = self.records
        return {
            "records": len(records),
            "workers": len({r.worker_id for r in records}),
            "machines": sorted({r.machine_id for r in records}),
        }
