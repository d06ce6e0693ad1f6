# housestack/training/engines/model_train_engine.py
from __future__ import annotations

from abc import ABC
from time import perf_counter
from typing import Any, Dict, Optional

import pandas as pd

from housestack.config.model_config import ModelFamilyConfig
from housestack.config.platform_config import PlatformConfig
from housestack.pipeline.model_artifact import ModelSpec
from housestack.training.engines.train_result import TrainedModel


class ModelTrainEngine(ABC):
    """
    Abstract ModelTrainEngine (FINAL)

    Subclasses declare:
    - estimator_cls  : scikit-learn regressor class
    - default_params : engine defaults (overridden by config, then by call params)

    Platform settings (seed / n_jobs) are injected into every estimator
    that accepts them, unless set explicitly.
    """

    family: str = ""
    estimator_cls: Any = None
    default_params: Dict[str, Any] = {}

    def __init__(
        self,
        cfg: Optional[ModelFamilyConfig] = None,
        platform: Optional[PlatformConfig] = None,
        version: str = "v1",
    ):
        self.cfg = cfg or ModelFamilyConfig()
        self.platform = platform or PlatformConfig()
        self.spec = ModelSpec(family=self.family, task="regression", version=version)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------
    def resolve_params(self, params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        return {**self.default_params, **self.cfg.params, **(params or {})}

    def build(self, params: Optional[Dict[str, Any]] = None) -> Any:
        merged = self.resolve_params(params)
        estimator = self.estimator_cls(**merged)

        accepted = estimator.get_params()
        platform_params = {}
        if "random_state" in accepted and "random_state" not in merged:
            platform_params["random_state"] = self.platform.seed
        if "n_jobs" in accepted and "n_jobs" not in merged:
            platform_params["n_jobs"] = self.platform.n_jobs
        if platform_params:
            estimator.set_params(**platform_params)

        return estimator

    def fit(self, X: pd.DataFrame, y: pd.Series, params: Optional[Dict[str, Any]] = None) -> Any:
        estimator = self.build(params)
        estimator.fit(X, y)
        return estimator

    def train(
        self,
        *,
        X: pd.DataFrame,
        y: pd.Series,
        params: Optional[Dict[str, Any]] = None,
        model_id: Optional[str] = None,
    ) -> TrainedModel:
        """
        Full-data fit, no cross-validation.
        """
        start = perf_counter()
        estimator = self.fit(X, y, params)

        return TrainedModel(
            model_id=model_id or f"{self.family}_1",
            spec=self.spec,
            estimator=estimator,
            params=self.resolve_params(params),
            feature_names=list(X.columns),
            training_time_secs=perf_counter() - start,
        )
