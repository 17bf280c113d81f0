import os
import json
import math
from glob import glob
from typing import Dict, Any, List

import matplotlib.pyplot as plt


STAGES = ("detect", "project", "total")


def _load_json(path: str) -> Dict[str, Any]:
    with open(path, "r") as f:
        return json.load(f)


def _safe_float(x, default=0.0):
    if isinstance(x, (int, float)) and not (isinstance(x, float) and (math.isnan(x) or math.isinf(x))):
        return float(x)
    return default


def _stage_stat(run: Dict[str, Any], stage: str, key: str) -> float:
    return _safe_float((run.get(stage) or {}).get(key))


def plot_latency_from_dir(
    results_dir: str = "results",
    out_dir: str = "results",
    show: bool = False,
) -> Dict[str, str]:
    """
    Reads results/latency_*.json (written by save_benchmark) and plots
    mean and p95 per stage for every detector run.

    Returns a dict {plot_name: filepath}.
    """
    os.makedirs(out_dir, exist_ok=True)
    runs: List[Dict[str, Any]] = [_load_json(p) for p in sorted(glob(os.path.join(results_dir, "latency_*.json")))]
    outputs: Dict[str, str] = {}
    if not runs:
        return outputs

    labels = [r.get("detector", "?") for r in runs]
    x = list(range(len(labels)))
    width = 0.8 / len(STAGES)

    for stat, title in (("mean_ms", "Mean"), ("p95_ms", "p95")):
        plt.figure()
        for i, stage in enumerate(STAGES):
            values = [_stage_stat(r, stage, stat) for r in runs]
            plt.bar([xi + (i - 1) * width for xi in x], values, width=width, label=stage)
        plt.xticks(x, labels, rotation=30, ha="right")
        plt.ylabel("Latency (ms)")
        plt.title(f"{title} per-frame latency by stage")
        plt.legend()
        plt.tight_layout()
        path = os.path.join(out_dir, f"latency_{stat}.png")
        plt.savefig(path, dpi=200)
        if show:
            plt.show()
        plt.close()
        outputs[f"latency_{stat}"] = path

    return outputs


if __name__ == "__main__":
    for name, path in plot_latency_from_dir().items():
        print(f"[saved] {name}: {path}")
