# housestack/training/engines/importance_engine.py
from __future__ import annotations

from typing import Any, Optional

import numpy as np
import pandas as pd
from sklearn.inspection import permutation_importance

from housestack import logs
from housestack.training.engines.train_result import TrainedModel


class VariableImportanceEngine:
    """
    VariableImportanceEngine（FINAL）

    - tree models   : impurity importances
    - linear models : |coefficient| (predictors are normalized by the recipe)
    - otherwise     : permutation importance on (X, y), rmse scoring
    - StackedEnsemble : not available (returns None)

    Output: Series indexed by feature, scaled to sum 1, descending.
    """

    def __init__(self, n_repeats: int = 5, seed: int = 42):
        self.n_repeats = n_repeats
        self.seed = seed

    def compute(
        self,
        model: Any,
        X: Optional[pd.DataFrame] = None,
        y: Optional[pd.Series] = None,
    ) -> Optional[pd.Series]:
        if not isinstance(model, TrainedModel):
            logs.info(f"[VarImp] {model.model_id}: variable importance not available for {model.algo}")
            return None

        est = model.estimator
        names = model.feature_names

        if hasattr(est, "feature_importances_"):
            values = np.asarray(est.feature_importances_, dtype=float)
        elif hasattr(est, "coef_"):
            values = np.abs(np.ravel(est.coef_))
        elif X is not None and y is not None:
            result = permutation_importance(
                est,
                X[names],
                y,
                n_repeats=self.n_repeats,
                random_state=self.seed,
                scoring="neg_root_mean_squared_error",
            )
            values = np.clip(result.importances_mean, 0.0, None)
        else:
            logs.info(f"[VarImp] {model.model_id}: needs X / y for permutation importance")
            return None

        imp = pd.Series(values, index=names, name="importance")
        total = imp.sum()
        if total > 0:
            imp = imp / total
        return imp.sort_values(ascending=False)
