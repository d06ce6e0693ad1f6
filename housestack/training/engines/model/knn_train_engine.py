# housestack/training/engines/model/knn_train_engine.py
from __future__ import annotations

from sklearn.neighbors import KNeighborsRegressor

from housestack.training.engines.model_train_engine import ModelTrainEngine


class KNNTrainEngine(ModelTrainEngine):
    """
    k-nearest-neighbour regression.
    Distances are only meaningful on normalized predictors (recipe `normalize`).
    """

    family = "knn"
    estimator_cls = KNeighborsRegressor
    default_params = {"n_neighbors": 10}
