# housestack/training/engines/model/rf_train_engine.py
from __future__ import annotations

from sklearn.ensemble import RandomForestRegressor

from housestack.training.engines.model_train_engine import ModelTrainEngine


class RandomForestTrainEngine(ModelTrainEngine):
    """Distributed-random-forest equivalent: bagged regression trees."""

    family = "rf"
    estimator_cls = RandomForestRegressor
    default_params = {"n_estimators": 100, "max_features": 1.0}
