# housestack/training/engines/model/gbm_train_engine.py
from __future__ import annotations

from sklearn.ensemble import GradientBoostingRegressor, HistGradientBoostingRegressor

from housestack.training.engines.model_train_engine import ModelTrainEngine


class GBMTrainEngine(ModelTrainEngine):
    """Gradient boosting machine (squared error)."""

    family = "gbm"
    estimator_cls = GradientBoostingRegressor
    default_params = {"n_estimators": 200, "learning_rate": 0.05, "max_depth": 3}


class HistGBMTrainEngine(ModelTrainEngine):
    """Histogram gradient boosting (xgboost-style binned splits)."""

    family = "hgb"
    estimator_cls = HistGradientBoostingRegressor
    default_params = {"max_iter": 200, "learning_rate": 0.1}
