# tests/training/test_model_engines.py
import numpy as np
import pytest
from sklearn.ensemble import RandomForestRegressor
from sklearn.linear_model import ElasticNet

from housestack.config.model_config import ModelFamilyConfig
from housestack.config.platform_config import PlatformConfig
from housestack.pipeline.model_artifact import ModelSpec
from housestack.training.engines.registry import FAMILIES, resolve_model_train_engine


@pytest.mark.parametrize("family", FAMILIES)
def test_every_family_resolves(family):
    engine = resolve_model_train_engine(spec=ModelSpec(family=family))
    assert engine.family == family
    assert engine.spec == ModelSpec(family=family, task="regression", version="v1")


def test_unknown_engine():
    with pytest.raises(ValueError, match="No ModelTrainEngine"):
        resolve_model_train_engine(spec=ModelSpec(family="deeplearning"))
    with pytest.raises(ValueError):
        resolve_model_train_engine(spec=ModelSpec(family="glm", version="v9"))


def test_param_precedence():
    engine = resolve_model_train_engine(
        spec=ModelSpec(family="glm"),
        cfg=ModelFamilyConfig(params={"alpha": 0.5, "l1_ratio": 0.1}),
    )
    params = engine.resolve_params({"alpha": 0.9})

    assert params["alpha"] == 0.9       # call
    assert params["l1_ratio"] == 0.1    # config
    assert params["max_iter"] == 5000   # engine default
    assert isinstance(engine.build(), ElasticNet)


def test_platform_injection():
    engine = resolve_model_train_engine(
        spec=ModelSpec(family="rf"),
        platform=PlatformConfig(n_jobs=2, seed=11),
    )
    est = engine.build({"n_estimators": 5})

    assert isinstance(est, RandomForestRegressor)
    assert est.random_state == 11
    assert est.n_jobs == 2

    explicit = engine.build({"random_state": 3})
    assert explicit.random_state == 3


def test_train_without_cv(prepped):
    _, X, y, _, _ = prepped
    engine = resolve_model_train_engine(spec=ModelSpec(family="knn"))

    model = engine.train(X=X, y=y, params={"n_neighbors": 3})

    assert model.model_id == "knn_1"
    assert model.cv is None
    assert model.metrics == {}
    assert model.predict(X).shape == (len(X),)
    assert model.feature_names == list(X.columns)
