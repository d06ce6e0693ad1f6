# housestack/training/engines/cv_engine.py
from __future__ import annotations

from time import perf_counter
from typing import Any, Dict, List, Optional

import numpy as np
import pandas as pd

from housestack.training.engines.metrics_engine import regression_metrics
from housestack.training.engines.model_train_engine import ModelTrainEngine
from housestack.training.engines.train_result import CVResult, TrainedModel
from housestack.utils.errors import UserInputError


class FoldAssigner:
    """
    FoldAssigner（FINAL / FROZEN）

    Schemes:
    - modulo : row i -> i % k (deterministic, shared across models)
    - random : seeded permutation, then modulo (balanced fold sizes)
    - auto   : random
    """

    def __init__(self, n_folds: int = 5, scheme: str = "modulo", seed: int = 42):
        if n_folds < 2:
            raise UserInputError(f"[CV] n_folds must be >= 2, got {n_folds}")
        if scheme not in ("modulo", "random", "auto"):
            raise UserInputError(f"[CV] unknown fold assignment: {scheme}")
        self.n_folds = n_folds
        self.scheme = scheme
        self.seed = seed

    def assign(self, n_rows: int) -> np.ndarray:
        if self.n_folds > n_rows:
            raise UserInputError(
                f"[CV] n_folds={self.n_folds} exceeds number of rows={n_rows}"
            )

        positions = np.arange(n_rows)
        if self.scheme == "modulo":
            return positions % self.n_folds

        rng = np.random.default_rng(self.seed)
        return rng.permutation(n_rows) % self.n_folds


class CrossValidationEngine:
    """
    CrossValidationEngine（FINAL / FROZEN）

    Responsibility:
    - one model per fold, holdout predictions kept row-aligned
    - per-fold metrics + metrics on the combined holdout predictions
    - final model fitted on all rows

    Contract:
    - every row receives exactly one holdout prediction
    - X / y are positionally aligned (index is ignored)
    """

    def run(
        self,
        *,
        engine: ModelTrainEngine,
        X: pd.DataFrame,
        y: pd.Series,
        fold_ids: np.ndarray,
        params: Optional[Dict[str, Any]] = None,
        model_id: str,
    ) -> TrainedModel:
        fold_ids = np.asarray(fold_ids)
        if len(fold_ids) != len(X) or len(X) != len(y):
            raise ValueError(
                f"[CV] length mismatch X={len(X)} y={len(y)} folds={len(fold_ids)}"
            )

        y_values = np.asarray(y, dtype=float)
        holdout = np.full(len(X), np.nan)
        fold_metrics: List[Dict[str, float]] = []

        start = perf_counter()
        for fold in np.unique(fold_ids):
            valid = fold_ids == fold
            fold_model = engine.fit(X.iloc[~valid], y.iloc[~valid], params)

            preds = np.asarray(fold_model.predict(X.iloc[valid]), dtype=float)
            holdout[valid] = preds
            fold_metrics.append(regression_metrics(y_values[valid], preds))

        final = engine.fit(X, y, params)

        cv = CVResult(
            holdout_predictions=holdout,
            fold_ids=fold_ids.copy(),
            fold_metrics=fold_metrics,
            metrics=regression_metrics(y_values, holdout),
        )

        return TrainedModel(
            model_id=model_id,
            spec=engine.spec,
            estimator=final,
            params=engine.resolve_params(params),
            feature_names=list(X.columns),
            cv=cv,
            training_time_secs=perf_counter() - start,
        )
