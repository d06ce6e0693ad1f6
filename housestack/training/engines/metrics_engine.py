# housestack/training/engines/metrics_engine.py
from __future__ import annotations

from typing import Dict

import numpy as np
from sklearn.metrics import mean_absolute_error, mean_squared_error, r2_score

from housestack.utils.errors import UserInputError

# metric -> lower is better
METRIC_LOWER_IS_BETTER: Dict[str, bool] = {
    "rmse": True,
    "mse": True,
    "mae": True,
    "rmsle": True,
    "mean_residual_deviance": True,
    "r2": False,
}

METRICS = tuple(METRIC_LOWER_IS_BETTER)


def sort_ascending(metric: str) -> bool:
    if metric not in METRIC_LOWER_IS_BETTER:
        raise UserInputError(
            f"Unknown metric '{metric}'. Available: {', '.join(METRICS)}"
        )
    return METRIC_LOWER_IS_BETTER[metric]


def is_better(metric: str, candidate: float, incumbent: float) -> bool:
    if np.isnan(candidate):
        return False
    if np.isnan(incumbent):
        return True
    return candidate < incumbent if sort_ascending(metric) else candidate > incumbent


def regression_metrics(y_true, y_pred) -> Dict[str, float]:
    """
    Pure regression metrics, no side effects.
    rmsle is NaN when any value <= -1.
    """
    y_true = np.asarray(y_true, dtype=float)
    y_pred = np.asarray(y_pred, dtype=float)

    if len(y_true) == 0:
        raise ValueError("[Metrics] empty input")
    if len(y_true) != len(y_pred):
        raise ValueError(f"[Metrics] length mismatch {len(y_true)} != {len(y_pred)}")

    mse = float(mean_squared_error(y_true, y_pred))

    if (y_true <= -1).any() or (y_pred <= -1).any():
        rmsle = float("nan")
    else:
        rmsle = float(np.sqrt(np.mean((np.log1p(y_pred) - np.log1p(y_true)) ** 2)))

    r2 = float(r2_score(y_true, y_pred)) if len(y_true) > 1 else float("nan")

    return {
        "rmse": float(np.sqrt(mse)),
        "mse": mse,
        "mae": float(mean_absolute_error(y_true, y_pred)),
        "rmsle": rmsle,
        "r2": r2,
        "mean_residual_deviance": mse,
    }
