"""Worker performance analysis over the trained history."""

import pandas as pd
from typing import Dict, Optional, Any

from ..utils.config import config
from ..utils.exceptions import UnknownWorkerError
from ..utils.helpers import setup_logging

logger = setup_logging()


class WorkerPerformanceAnalyzer:
    """Aggregate views of worker and machine performance."""

    def __init__(self, data: pd.DataFrame):
        """Initialize analyzer with a trained snapshot's records."""
        self.data = data

    def worker_performance(
        self, worker_id: str, machine_id: Optional[int] = None
    ) -> Dict[str, Any]:
        """Overall statistics for a worker, plus a machine block when requested."""
        worker_data = self.data[self.data["worker_id"] == worker_id]
        if worker_data.empty:
            raise UnknownWorkerError(worker_id)

        logger.info(f"Calculating performance metrics for {worker_id}...")

        performance = {
            "worker_id": worker_id,
            "total_jobs": int(len(worker_data)),
            "avg_time": round(float(worker_data["time_minutes"].mean()), 2),
            "avg_quality": round(float(worker_data["quality_score"].mean()), 2),
            "machines_operated": sorted(int(m) for m in worker_data["machine_id"].unique()),
            "quality_consistency": round(
                float(1 / (1 + worker_data["quality_score"].std(ddof=0))), 3
            ),
        }

        if machine_id is not None:
            machine_data = worker_data[worker_data["machine_id"] == machine_id]
            if not machine_data.empty:
                performance["machine_specialization"] = {
                    "machine_id": int(machine_id),
                    "jobs": int(len(machine_data)),
                    "avg_time": round(float(machine_data["time_minutes"].mean()), 2),
                    "avg_quality": round(float(machine_data["quality_score"].mean()), 2),
                }
            else:
                performance["machine_specialization"] = {
                    "machine_id": int(machine_id),
                    "jobs": 0,
                }

        return performance

    def machine_leaderboards(self) -> Dict[int, Dict[str, Any]]:
        """Best-quality and fastest worker per machine."""
        logger.info("Building machine leaderboards...")

        stats = (
            self.data.groupby(["machine_id", "worker_id"])
            .agg(
                avg_time=("time_minutes", "mean"),
                avg_quality=("quality_score", "mean"),
                jobs=("worker_id", "size"),
            )
            .reset_index()
        )

        leaderboards = {}
        for machine_id, group in stats.groupby("machine_id"):
            best_quality = group.loc[group["avg_quality"].idxmax()]
            fastest = group.loc[group["avg_time"].idxmin()]
            leaderboards[int(machine_id)] = {
                "total_jobs": int(group["jobs"].sum()),
                "best_quality_worker": best_quality["worker_id"],
                "best_quality_score": round(float(best_quality["avg_quality"]), 2),
                "fastest_worker": fastest["worker_id"],
                "fastest_time": round(float(fastest["avg_time"]), 2),
            }

        return leaderboards

    def system_overview(self) -> Dict[str, Any]:
        """Fleet-wide averages and the top performer."""
        if self.data.empty:
            return {
                "total_records": 0,
                "total_workers": 0,
                "avg_time": None,
                "avg_quality": None,
                "top_performer": None,
            }

        worker_quality = self.data.groupby("worker_id")["quality_score"].mean()
        return {
            "total_records": int(len(self.data)),
            "total_workers": int(self.data["worker_id"].nunique()),
            "avg_time": round(float(self.data["time_minutes"].mean()), 2),
            "avg_quality": round(float(self.data["quality_score"].mean()), 2),
            "top_performer": str(worker_quality.idxmax()),
            "high_quality_jobs": int(
                (self.data["quality_score"] > config.HIGH_QUALITY_THRESHOLD).sum()
            ),
        }
