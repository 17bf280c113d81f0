from __future__ import annotations
import time
from contextlib import contextmanager
from typing import Dict, List
import numpy as np


def summarise_seconds(samples):
    """
    Summarise a list of durations in seconds.
    Returns ms stats: mean, p50, p95, max, plus the throughput the mean allows.
    """
    arr = np.array(samples, dtype=np.float64)
    if arr.size == 0:
        return {
            "n": 0,
            "mean_ms": None,
            "p50_ms": None,
            "p95_ms": None,
            "max_ms": None,
            "fps": None,
        }

    mean = float(arr.mean())
    return {
        "n": int(arr.size),
        "mean_ms": mean * 1000.0,
        "p50_ms": float(np.percentile(arr, 50) * 1000.0),
        "p95_ms": float(np.percentile(arr, 95) * 1000.0),
        "max_ms": float(arr.max() * 1000.0),
        "fps": (1.0 / mean) if mean > 0 else None,
    }


class StageTimer:
    """Collects per-stage durations across frames."""
    def __init__(self):
        self.samples: Dict[str, List[float]] = {}

    @contextmanager
    def time(self, stage: str):
        t0 = time.perf_counter()
        try:
            yield
        finally:
            self.samples.setdefault(stage, []).append(time.perf_counter() - t0)

    def summary(self):
        return {stage: summarise_seconds(s) for stage, s in self.samples.items()}
