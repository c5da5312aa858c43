"""Nearest-neighbour worker recommendation model."""

import threading
from dataclasses import dataclass, asdict, field
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Optional

import numpy as np
import pandas as pd
from sklearn.preprocessing import MinMaxScaler

from ..data.training_store import RECORD_COLUMNS, TrainingStore
from ..utils.config import config
from ..utils.exceptions import (
    InvalidComplexityError,
    InvalidMachineError,
    ModelNotTrainedError,
    NoTrainingDataError,
)
from ..utils.helpers import clamp, load_model, save_model, setup_logging

logger = setup_logging()


@dataclass
class Prediction:
    """Raw recommendation produced by the nearest-neighbour model."""

    recommended_worker: str
    estimated_time: float
    confidence: float
    avg_quality: float
    job_count: int
    machine_id: int
    complexity: int
    rank: Optional[int] = None
    neighbors: List[Dict[str, Any]] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def validate_job(machine_id: Any, complexity: Any) -> None:
    """Raise a DomainError if the job lies outside the known machines/levels."""
    if isinstance(machine_id, bool) or not isinstance(machine_id, (int, np.integer)):
        raise InvalidMachineError(machine_id, config.MACHINE_COUNT)
    if not 1 <= machine_id <= config.MACHINE_COUNT:
        raise InvalidMachineError(machine_id, config.MACHINE_COUNT)

    if isinstance(complexity, bool) or not isinstance(complexity, (int, np.integer)):
        raise InvalidComplexityError(complexity, config.MIN_COMPLEXITY, config.MAX_COMPLEXITY)
    if not config.MIN_COMPLEXITY <= complexity <= config.MAX_COMPLEXITY:
        raise InvalidComplexityError(complexity, config.MIN_COMPLEXITY, config.MAX_COMPLEXITY)


class ModelSnapshot:
    """Immutable trained state; predictions only ever read one snapshot."""

    def __init__(self, df: pd.DataFrame, n_neighbors: int = 3):
        self.n_neighbors = n_neighbors
        self.trained_at = datetime.now(timezone.utc)
        self.data = self._derive_complexity(df)
        self.n_records = len(self.data)
        self.workers = sorted(self.data["worker_id"].unique().tolist())
        self.machines = sorted(int(m) for m in self.data["machine_id"].unique())

        if self.n_records:
            self.job_counts = (
                self.data.groupby(["machine_id", "worker_id"]).size().to_dict()
            )
            self.quality_ranks = self._rank_workers_by_quality()
        else:
            self.job_counts = {}
            self.quality_ranks = {}

    def _derive_complexity(self, df: pd.DataFrame) -> pd.DataFrame:
        """Fill the complexity signal for records that did not carry one.

        Completion time is min-max scaled into the complexity range within
        each machine, so the longest job on a machine reads as level 5.
        """
        data = df.reindex(columns=RECORD_COLUMNS).copy()
        data["derived_complexity"] = pd.to_numeric(data["complexity"], errors="coerce").astype(float)

        for machine_id, group in data.groupby("machine_id"):
            missing = group["derived_complexity"].isna()
            if not missing.any():
                continue

            times = group["time_minutes"].astype(float).to_numpy().reshape(-1, 1)
            if np.ptp(times) == 0:
                midpoint = (config.MIN_COMPLEXITY + config.MAX_COMPLEXITY) / 2
                scaled = np.full(len(group), midpoint)
            else:
                scaler = MinMaxScaler(
                    feature_range=(config.MIN_COMPLEXITY, config.MAX_COMPLEXITY)
                )
                scaled = scaler.fit_transform(times).ravel()

            derived = pd.Series(scaled, index=group.index)
            fill_index = missing[missing].index
            data.loc[fill_index, "derived_complexity"] = derived.loc[fill_index]

        return data

    def _rank_workers_by_quality(self) -> Dict[tuple, int]:
        averages = (
            self.data.groupby(["machine_id", "worker_id"])["quality_score"].mean().reset_index()
        )
        averages["rank"] = (
            averages.groupby("machine_id")["quality_score"]
            .rank(method="min", ascending=False)
            .astype(int)
        )
        return {
            (int(row.machine_id), row.worker_id): int(row.rank)
            for row in averages.itertuples(index=False)
        }

    def nearest_records(self, machine_id: int, complexity: int) -> pd.DataFrame:
        """The k records on this machine closest in complexity, most recent first on ties."""
        machine_data = self.data[self.data["machine_id"] == machine_id]
        if machine_data.empty:
            raise NoTrainingDataError(machine_id)

        distance = (machine_data["derived_complexity"] - complexity).abs().to_numpy()
        recency = -machine_data["sequence"].to_numpy()
        # lexsort orders by the last key first
        order = np.lexsort((recency, distance))[: self.n_neighbors]

        neighbors = machine_data.iloc[order].copy()
        neighbors["distance"] = distance[order]
        neighbors["position"] = range(len(neighbors))
        return neighbors

    def predict(self, machine_id: int, complexity: int) -> Prediction:
        validate_job(machine_id, complexity)
        neighbors = self.nearest_records(machine_id, complexity)

        worker = self._select_worker(neighbors)
        confidence = self._neighbor_confidence(neighbors, worker)

        return Prediction(
            recommended_worker=worker,
            estimated_time=round(float(neighbors["time_minutes"].mean()), 2),
            confidence=confidence,
            avg_quality=round(float(neighbors["quality_score"].mean()), 2),
            job_count=int(self.job_counts.get((machine_id, worker), 0)),
            machine_id=int(machine_id),
            complexity=int(complexity),
            rank=self.quality_ranks.get((machine_id, worker)),
            neighbors=[
                {
                    "worker_id": row.worker_id,
                    "time_minutes": float(row.time_minutes),
                    "quality_score": float(row.quality_score),
                    "distance": round(float(row.distance), 3),
                }
                for row in neighbors.itertuples(index=False)
            ],
        )

    @staticmethod
    def _select_worker(neighbors: pd.DataFrame) -> str:
        """Best combined rank of speed (ascending time) and quality (descending)."""
        stats = neighbors.groupby("worker_id", sort=False).agg(
            avg_time=("time_minutes", "mean"),
            avg_quality=("quality_score", "mean"),
            first_seen=("position", "min"),
        )
        stats["time_rank"] = stats["avg_time"].rank(method="min")
        stats["quality_rank"] = stats["avg_quality"].rank(method="min", ascending=False)
        stats["combined_rank"] = stats["time_rank"] + stats["quality_rank"]

        ranked = stats.sort_values(
            ["combined_rank", "avg_quality", "first_seen"],
            ascending=[True, False, True],
        )
        return str(ranked.index[0])

    def _neighbor_confidence(self, neighbors: pd.DataFrame, worker: str) -> float:
        """Agreement or tight clustering among neighbours, scaled by neighbourhood support."""
        n = len(neighbors)
        agreement = float((neighbors["worker_id"] == worker).sum()) / n

        times = neighbors["time_minutes"].to_numpy(dtype=float)
        qualities = neighbors["quality_score"].to_numpy(dtype=float)
        time_cv = float(times.std() / times.mean()) if times.mean() > 0 else 0.0
        tightness = clamp(1.0 - time_cv - float(qualities.std()) / 50.0, 0.0, 1.0)

        support = min(1.0, n / self.n_neighbors)
        return round(clamp(max(agreement, tightness) * support, 0.0, 1.0), 3)


class PredictionCore:
    """Owns the training store and the currently served model snapshot.

    Training builds a new ModelSnapshot off to the side and swaps it in with a
    single reference assignment, so in-flight predictions keep the snapshot
    they started with.
    """

    def __init__(self, store: Optional[TrainingStore] = None, n_neighbors: Optional[int] = None):
        self.store = store if store is not None else TrainingStore()
        self.n_neighbors = n_neighbors or config.get_model_config()["n_neighbors"]
        self._snapshot: Optional[ModelSnapshot] = None
        self._train_lock = threading.Lock()

    @property
    def is_trained(self) -> bool:
        return self._snapshot is not None

    def snapshot(self) -> ModelSnapshot:
        snapshot = self._snapshot
        if snapshot is None:
            raise ModelNotTrainedError()
        return snapshot

    def add_training_data(self, records: Iterable[Any]) -> int:
        """Store new records; they are not visible to predictions until train()."""
        added = self.store.add_records(records)
        return len(added)

    def train(self) -> Dict[str, Any]:
        """Rebuild the snapshot from the full store and swap it in."""
        with self._train_lock:
            df = self.store.to_dataframe()
            logger.info(f"Training nearest-neighbour model on {len(df)} records...")

            snapshot = ModelSnapshot(df, n_neighbors=self.n_neighbors)
            self._snapshot = snapshot

        results = {
            "n_records": snapshot.n_records,
            "n_workers": len(snapshot.workers),
            "machines": snapshot.machines,
            "algorithm": self.algorithm,
            "trained_at": snapshot.trained_at.isoformat(),
        }
        logger.info(f"Model training complete: {results}")
        return results

    retrain = train

    @property
    def algorithm(self) -> str:
        return f"K-Nearest Neighbors (k={self.n_neighbors})"

    def predict(self, machine_id: int, complexity: int) -> Prediction:
        validate_job(machine_id, complexity)
        return self.snapshot().predict(machine_id, complexity)

    @property
    def pending_records(self) -> int:
        """Records stored since the last training pass."""
        trained = self._snapshot.n_records if self._snapshot is not None else 0
        return max(0, len(self.store) - trained)

    def status(self) -> Dict[str, Any]:
        snapshot = self._snapshot
        if snapshot is None:
            return {
                "status": "Not trained",
                "algorithm": self.algorithm,
                "trained_records": 0,
                "workers": [],
                "machines": list(range(1, config.MACHINE_COUNT + 1)),
                "last_trained": None,
            }
        return {
            "status": "Trained",
            "algorithm": self.algorithm,
            "trained_records": snapshot.n_records,
            "workers": snapshot.workers,
            "machines": list(range(1, config.MACHINE_COUNT + 1)),
            "last_trained": snapshot.trained_at.isoformat(),
        }

    def save(self, filepath: str) -> None:
        """Persist the trained snapshot with joblib."""
        save_model(self.snapshot(), filepath)
        logger.info(f"Model snapshot saved to {filepath}")

    def load(self, filepath: str) -> None:
        snapshot = load_model(filepath)
        if not isinstance(snapshot, ModelSnapshot):
            raise TypeError(f"{filepath} does not contain a model snapshot")
        self._snapshot = snapshot
        logger.info(f"Model snapshot loaded from {filepath} ({snapshot.n_records} records)")
