# housestack/training/engines/model/glm_train_engine.py
from __future__ import annotations

from sklearn.linear_model import ElasticNet

from housestack.training.engines.model_train_engine import ModelTrainEngine


class GLMTrainEngine(ModelTrainEngine):
    """
    Penalized gaussian GLM (elastic net)

    alpha    : overall penalty strength
    l1_ratio : 0 -> ridge, 1 -> lasso
    """

    family = "glm"
    estimator_cls = ElasticNet
    default_params = {"alpha": 0.001, "l1_ratio": 0.5, "max_iter": 5000}
