# housestack/training/engines/train_result.py
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import numpy as np
import pandas as pd

from housestack.pipeline.model_artifact import ModelSpec


@dataclass(frozen=True)
class CVResult:
    """
    CVResult（FINAL / FROZEN）

    - holdout_predictions[i] is the prediction for row i by the model that did NOT see row i
    - fold_ids[i] is the fold of row i
    - metrics are computed on the combined holdout predictions
    """
    holdout_predictions: np.ndarray
    fold_ids: np.ndarray
    fold_metrics: List[Dict[str, float]]
    metrics: Dict[str, float]

    @property
    def n_folds(self) -> int:
        return len(self.fold_metrics)

    def summary(self) -> pd.DataFrame:
        """mean / sd of every metric across folds"""
        df = pd.DataFrame(self.fold_metrics)
        return pd.DataFrame({"mean": df.mean(), "sd": df.std(ddof=1)})


@dataclass
class TrainedModel:
    """
    TrainedModel

    One fitted estimator (trained on all rows) plus its cross-validation record.
    """
    model_id: str
    spec: ModelSpec
    estimator: Any
    params: Dict[str, Any]
    feature_names: List[str]
    cv: Optional[CVResult] = None
    training_time_secs: float = 0.0
    tags: Dict[str, Any] = field(default_factory=dict)

    @property
    def algo(self) -> str:
        return self.spec.family

    @property
    def metrics(self) -> Dict[str, float]:
        return dict(self.cv.metrics) if self.cv is not None else {}

    @property
    def holdout_predictions(self) -> Optional[np.ndarray]:
        return self.cv.holdout_predictions if self.cv is not None else None

    def predict(self, X: pd.DataFrame) -> np.ndarray:
        return np.asarray(self.estimator.predict(X[self.feature_names]), dtype=float)
