# housestack/training/engines/stacked_ensemble_engine.py
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import numpy as np
import pandas as pd
from sklearn.ensemble import GradientBoostingRegressor, RandomForestRegressor
from sklearn.linear_model import LinearRegression, Ridge

from housestack import logs
from housestack.pipeline.model_artifact import ModelSpec
from housestack.training.engines.cv_engine import CrossValidationEngine
from housestack.training.engines.model_train_engine import ModelTrainEngine
from housestack.training.engines.train_result import CVResult, TrainedModel
from housestack.utils.errors import StackingError


class MetalearnerTrainEngine(ModelTrainEngine):
    """
    Metalearner fitted on the level-one frame (one column per base model).

    glm   : non-negative least squares (default)
    ridge : L2-penalized linear
    rf/gbm: tree metalearners
    """

    family = "metalearner"

    _ESTIMATORS = {
        "glm": (LinearRegression, {"positive": True}),
        "ridge": (Ridge, {"alpha": 1.0}),
        "rf": (RandomForestRegressor, {"n_estimators": 100}),
        "gbm": (GradientBoostingRegressor, {"n_estimators": 100, "max_depth": 2}),
    }

    def __init__(self, algorithm: str = "glm", params: Optional[Dict[str, Any]] = None, platform=None):
        if algorithm not in self._ESTIMATORS:
            raise StackingError(
                f"[StackedEnsemble] unknown metalearner '{algorithm}'. "
                f"Available: {', '.join(self._ESTIMATORS)}"
            )
        super().__init__(cfg=None, platform=platform)
        self.algorithm = algorithm
        self.estimator_cls, self.default_params = self._ESTIMATORS[algorithm]
        self.extra_params = dict(params or {})

    def resolve_params(self, params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        return {**self.default_params, **self.extra_params, **(params or {})}


@dataclass
class StackedEnsemble:
    """
    StackedEnsemble

    predict(X) = metalearner(base_1(X), ..., base_k(X))
    metrics    = metalearner CV metrics on the level-one frame
    """
    model_id: str
    base_models: List[TrainedModel]
    metalearner: TrainedModel
    spec: ModelSpec = field(default_factory=lambda: ModelSpec(family="stackedensemble"))
    tags: Dict[str, Any] = field(default_factory=dict)

    @property
    def algo(self) -> str:
        return self.spec.family

    @property
    def cv(self) -> Optional[CVResult]:
        return self.metalearner.cv

    @property
    def metrics(self) -> Dict[str, float]:
        return self.metalearner.metrics

    @property
    def holdout_predictions(self) -> Optional[np.ndarray]:
        return self.metalearner.holdout_predictions

    @property
    def base_model_ids(self) -> List[str]:
        return [m.model_id for m in self.base_models]

    @property
    def feature_names(self) -> List[str]:
        names: List[str] = []
        for m in self.base_models:
            names.extend(c for c in m.feature_names if c not in names)
        return names

    def level_one(self, X: pd.DataFrame) -> pd.DataFrame:
        return pd.DataFrame(
            {m.model_id: m.predict(X) for m in self.base_models},
            index=X.index,
        )

    def predict(self, X: pd.DataFrame) -> np.ndarray:
        return self.metalearner.predict(self.level_one(X))

    def metalearner_weights(self) -> pd.Series:
        """
        Linear metalearner -> coefficients; tree metalearner -> importances.
        """
        est = self.metalearner.estimator
        if hasattr(est, "coef_"):
            values = np.ravel(est.coef_)
        elif hasattr(est, "feature_importances_"):
            values = est.feature_importances_
        else:
            raise StackingError(f"[StackedEnsemble] {type(est).__name__} exposes no weights")
        return pd.Series(values, index=self.base_model_ids, name="weight")


class StackedEnsembleEngine:
    """
    StackedEnsembleEngine（FINAL）

    Level-one frame = base models' holdout predictions (column per model id).

    Preconditions (StackingError):
    - >= 2 base models
    - every base model carries holdout predictions
    - holdout predictions share length and fold assignment
    """

    def __init__(self, cv_engine: CrossValidationEngine | None = None):
        self.cv_engine = cv_engine or CrossValidationEngine()

    def train(
        self,
        *,
        ensemble_id: str,
        base_models: List[TrainedModel],
        y: pd.Series,
        metalearner: str = "glm",
        metalearner_params: Optional[Dict[str, Any]] = None,
        platform=None,
    ) -> StackedEnsemble:
        self._validate(base_models, n_rows=len(y))

        level_one = pd.DataFrame(
            {m.model_id: m.holdout_predictions for m in base_models}
        )
        fold_ids = base_models[0].cv.fold_ids

        engine = MetalearnerTrainEngine(metalearner, metalearner_params, platform)
        meta = self.cv_engine.run(
            engine=engine,
            X=level_one,
            y=pd.Series(np.asarray(y, dtype=float)),
            fold_ids=fold_ids,
            model_id=f"{ensemble_id}_metalearner",
        )

        ensemble = StackedEnsemble(
            model_id=ensemble_id,
            base_models=list(base_models),
            metalearner=meta,
        )
        logs.info(
            f"[StackedEnsemble] {ensemble_id}: bases={ensemble.base_model_ids} "
            f"metalearner={metalearner} rmse={meta.metrics['rmse']:.6f}"
        )
        return ensemble

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------
    @staticmethod
    def _validate(base_models: List[TrainedModel], *, n_rows: int) -> None:
        if len(base_models) < 2:
            raise StackingError(
                f"[StackedEnsemble] need at least 2 base models, got {len(base_models)}"
            )

        ids = [m.model_id for m in base_models]
        if len(set(ids)) != len(ids):
            raise StackingError(f"[StackedEnsemble] duplicate base model ids: {ids}")

        reference: Optional[np.ndarray] = None
        for m in base_models:
            if m.cv is None or m.holdout_predictions is None:
                raise StackingError(
                    f"[StackedEnsemble] {m.model_id} has no cross-validation holdout predictions"
                )
            if len(m.holdout_predictions) != n_rows:
                raise StackingError(
                    f"[StackedEnsemble] {m.model_id} holdout length "
                    f"{len(m.holdout_predictions)} != {n_rows}"
                )
            if reference is None:
                reference = m.cv.fold_ids
            elif not np.array_equal(reference, m.cv.fold_ids):
                raise StackingError(
                    f"[StackedEnsemble] {m.model_id} uses a different fold assignment"
                )
