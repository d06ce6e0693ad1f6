# housestack/training/engines/grid_search_engine.py
from __future__ import annotations

from dataclasses import dataclass
from time import perf_counter
from typing import Any, Dict, List

import numpy as np
import pandas as pd
from sklearn.model_selection import ParameterGrid, ParameterSampler

from housestack import logs
from housestack.config.training_config import SearchCriteria
from housestack.observability.instrumentation import NoOpInstrumentation
from housestack.training.engines.cv_engine import CrossValidationEngine
from housestack.training.engines.metrics_engine import is_better, sort_ascending
from housestack.training.engines.model_train_engine import ModelTrainEngine
from housestack.training.engines.train_result import TrainedModel
from housestack.utils.errors import UserInputError


@dataclass
class GridResult:
    """
    grid_id : grid name
    models  : model_id -> TrainedModel (every model of the grid)
    table   : one row per model, hyper-parameters + CV metrics, best first
    """
    grid_id: str
    models: Dict[str, TrainedModel]
    table: pd.DataFrame
    sort_by: str

    @property
    def best_model(self) -> TrainedModel:
        return self.models[self.table.iloc[0]["model_id"]]


def expand_grid(hyper_params: Dict[str, List[Any]]) -> List[Dict[str, Any]]:
    """Cartesian product (ParameterGrid order: sorted keys, last key varies fastest)."""
    return list(ParameterGrid(hyper_params))


def sample_grid(hyper_params: Dict[str, List[Any]], n: int | None = None, seed: int = 42) -> List[Dict[str, Any]]:
    """
    Seeded sample of `n` distinct combinations (all of them when n is None).
    """
    size = len(ParameterGrid(hyper_params))
    n = size if n is None else min(n, size)
    if n <= 0:
        return []
    return list(ParameterSampler(hyper_params, n_iter=n, random_state=seed))


class GridSearchEngine:
    """
    GridSearchEngine（FINAL）

    Strategies:
    - cartesian       : every combination (sklearn ParameterGrid)
    - random_discrete : seeded sample without replacement (sklearn ParameterSampler)

    Stops on (whichever first):
    - max_models
    - max_runtime_secs (checked before each model, >= 1 model always trained)
    - early stopping: best metric of the last `stopping_rounds` models did not
      improve the earlier best by a relative `stopping_tolerance`
    """

    def __init__(self, cv_engine: CrossValidationEngine | None = None, inst=None):
        self.cv_engine = cv_engine or CrossValidationEngine()
        self.inst = inst if inst is not None else NoOpInstrumentation()

    def search(
        self,
        *,
        grid_id: str,
        engine: ModelTrainEngine,
        X: pd.DataFrame,
        y: pd.Series,
        fold_ids: np.ndarray,
        hyper_params: Dict[str, List[Any]],
        criteria: SearchCriteria | None = None,
        sort_by: str = "rmse",
    ) -> GridResult:
        criteria = criteria or SearchCriteria()
        ascending = sort_ascending(sort_by)
        sort_ascending(criteria.stopping_metric)

        if not hyper_params or any(len(v) == 0 for v in hyper_params.values()):
            raise UserInputError(f"[GridSearch] {grid_id}: empty hyper-parameter grid")

        if criteria.strategy == "random_discrete":
            combos = sample_grid(hyper_params, criteria.max_models, seed=criteria.seed)
        else:
            combos = expand_grid(hyper_params)
            if criteria.max_models is not None:
                combos = combos[: criteria.max_models]

        logs.info(
            f"[GridSearch] {grid_id}: family={engine.family} "
            f"strategy={criteria.strategy} candidates={len(combos)}"
        )

        models: Dict[str, TrainedModel] = {}
        history: List[float] = []
        start = perf_counter()

        for i, params in enumerate(combos, start=1):
            if (
                criteria.max_runtime_secs is not None
                and models
                and perf_counter() - start >= criteria.max_runtime_secs
            ):
                logs.info(f"[GridSearch] {grid_id}: runtime budget reached after {len(models)} models")
                break

            model_id = f"{grid_id}_model_{i}"
            with self.inst.timer(model_id):
                model = self.cv_engine.run(
                    engine=engine, X=X, y=y, fold_ids=fold_ids, params=params, model_id=model_id
                )
            model.tags["grid_id"] = grid_id
            model.tags["grid_params"] = dict(params)
            models[model_id] = model
            history.append(model.metrics[criteria.stopping_metric])

            logs.info(f"[GridSearch] {model_id} {params} {sort_by}={model.metrics[sort_by]:.6f}")

            if self._should_stop(history, criteria):
                logs.info(f"[GridSearch] {grid_id}: early stopping after {len(models)} models")
                break

        table = self._table(models, hyper_params, sort_by, ascending)
        return GridResult(grid_id=grid_id, models=models, table=table, sort_by=sort_by)

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------
    @staticmethod
    def _should_stop(history: List[float], criteria: SearchCriteria) -> bool:
        k = criteria.stopping_rounds
        if k <= 0 or len(history) <= k:
            return False

        metric = criteria.stopping_metric
        earlier = history[:-k]
        recent = history[-k:]

        best_earlier = earlier[0]
        for v in earlier[1:]:
            if is_better(metric, v, best_earlier):
                best_earlier = v
        best_recent = recent[0]
        for v in recent[1:]:
            if is_better(metric, v, best_recent):
                best_recent = v

        if np.isnan(best_earlier) or best_earlier == 0:
            return False

        if sort_ascending(metric):
            improvement = (best_earlier - best_recent) / abs(best_earlier)
        else:
            improvement = (best_recent - best_earlier) / abs(best_earlier)
        return improvement < criteria.stopping_tolerance

    @staticmethod
    def _table(
        models: Dict[str, TrainedModel],
        hyper_params: Dict[str, List[Any]],
        sort_by: str,
        ascending: bool,
    ) -> pd.DataFrame:
        rows = []
        for model_id, model in models.items():
            row = {"model_id": model_id}
            row.update({k: model.tags["grid_params"][k] for k in hyper_params})
            row.update(model.metrics)
            rows.append(row)

        df = pd.DataFrame(rows)
        return df.sort_values(sort_by, ascending=ascending, kind="mergesort").reset_index(drop=True)

