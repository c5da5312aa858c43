"""Seeded synthetic performance history for demos and local development."""

from typing import Dict, List, Optional

import numpy as np
import pandas as pd

from ..utils.config import config

# speed < 1 means faster than average; quality is the worker's baseline score
WORKER_PROFILES: Dict[str, Dict[str, float]] = {
    "worker_a": {"speed": 1.15, "quality": 94.0},
    "worker_b": {"speed": 0.80, "quality": 82.0},
    "worker_c": {"speed": 0.95, "quality": 89.0},
    "worker_d": {"speed": 1.05, "quality": 91.0},
    "worker_e": {"speed": 0.90, "quality": 78.0},
}

# Machine 1 is precision equipment, machine 3 the fastest line
MACHINE_FACTORS: Dict[int, float] = {1: 1.25, 2: 1.0, 3: 0.75, 4: 1.1, 5: 0.9}


def generate_sample_records(
    n_records: Optional[int] = None,
    random_state: Optional[int] = None,
    include_complexity: bool = True,
) -> pd.DataFrame:
    """Generate a reproducible history of jobs across all machines."""
    n_records = n_records if n_records is not None else config.SAMPLE_DATA_SIZE
    random_state = random_state if random_state is not None else config.MODEL_RANDOM_STATE
    rng = np.random.RandomState(random_state)

    workers = list(WORKER_PROFILES)
    machines = rng.randint(1, config.MACHINE_COUNT + 1, size=n_records)
    complexities = rng.randint(config.MIN_COMPLEXITY, config.MAX_COMPLEXITY + 1, size=n_records)
    assigned = rng.choice(workers, size=n_records)

    rows: List[Dict] = []
    for machine_id, complexity, worker_id in zip(machines, complexities, assigned):
        profile = WORKER_PROFILES[worker_id]
        base_time = 8.0 + 6.0 * complexity
        time_minutes = base_time * profile["speed"] * MACHINE_FACTORS.get(int(machine_id), 1.0)
        time_minutes += rng.normal(0, 2.0)

        quality = profile["quality"] - 1.5 * (complexity - 1) + rng.normal(0, 3.0)

        row = {
            "worker_id": str(worker_id),
            "machine_id": int(machine_id),
            "time_minutes": round(float(max(time_minutes, 1.0)), 1),
            "quality_score": round(float(np.clip(quality, 0, 100)), 1),
        }
        if include_complexity:
            row["complexity"] = int(complexity)
        rows.append(row)

    return pd.DataFrame(rows)
