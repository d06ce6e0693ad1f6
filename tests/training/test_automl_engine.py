# tests/training/test_automl_engine.py
import pytest

from housestack.config.platform_config import PlatformConfig
from housestack.config.training_config import AutoMLConfig
from housestack.training.engines.automl_engine import AutoMLEngine
from housestack.utils.errors import UserInputError

_SPACE = {
    "glm": {"alpha": [0.001, 0.01, 0.1]},
    "rf": {"n_estimators": [10, 20]},
    "gbm": {"n_estimators": [20, 30], "max_depth": [2]},
    "hgb": {"max_iter": [20]},
    "knn": {"n_neighbors": [3, 5, 7]},
}


def _automl(**kwargs) -> AutoMLEngine:
    cfg = AutoMLConfig(enabled=True, search_space=_SPACE, **kwargs)
    return AutoMLEngine(cfg=cfg, platform=PlatformConfig(n_jobs=1))


def test_families_include_exclude():
    assert _automl(include_algos=["knn", "glm"]).families() == ["glm", "knn"]
    assert _automl(exclude_algos=["rf", "gbm", "hgb"]).families() == ["glm", "knn"]
    assert _automl().families() == ["glm", "rf", "gbm", "hgb", "knn"]


@pytest.mark.parametrize(
    "kwargs",
    [
        {"include_algos": ["glm"], "exclude_algos": ["rf"]},
        {"include_algos": ["xgboost"]},
        {"include_algos": []},
    ],
)
def test_families_invalid(kwargs):
    with pytest.raises(UserInputError):
        _automl(**kwargs).families()


def test_automl_run(prepped, fold_ids):
    _, X, y, _, _ = prepped
    engine = _automl(include_algos=["glm", "knn"], max_models=4)

    result = engine.run(X=X, y=y, fold_ids=fold_ids)
    ids = list(result.models)

    # defaults first, then grid models round-robin
    assert ids[:4] == [
        "GLM_1_AutoML",
        "KNN_1_AutoML",
        "GLM_grid_1_AutoML_model_1",
        "KNN_grid_1_AutoML_model_1",
    ]
    assert "StackedEnsemble_AllModels_AutoML" in result.models
    assert "StackedEnsemble_BestOfFamily_AutoML" in result.models

    # budget counts base models only
    base = [m for m in result.models.values() if m.algo != "stackedensemble"]
    assert len(base) == 4

    board = result.leaderboard
    assert len(board) == 6
    assert board.table["rmse"].is_monotonic_increasing
    assert result.leader is board.leader

    best_of_family = result.models["StackedEnsemble_BestOfFamily_AutoML"]
    assert sorted(m.algo for m in best_of_family.base_models) == ["glm", "knn"]


def test_automl_single_family_skips_best_of_family(prepped, fold_ids):
    _, X, y, _, _ = prepped
    result = _automl(include_algos=["glm"], max_models=3).run(X=X, y=y, fold_ids=fold_ids)

    assert "StackedEnsemble_AllModels_AutoML" in result.models
    assert "StackedEnsemble_BestOfFamily_AutoML" not in result.models


def test_automl_without_ensembles(prepped, fold_ids):
    _, X, y, _, _ = prepped
    result = _automl(include_algos=["glm"], max_models=2, build_ensembles=False).run(
        X=X, y=y, fold_ids=fold_ids
    )
    assert list(result.models) == ["GLM_1_AutoML", "GLM_grid_1_AutoML_model_1"]


def test_automl_runtime_budget_trains_at_least_one(prepped, fold_ids):
    _, X, y, _, _ = prepped
    result = _automl(include_algos=["glm", "knn"], max_models=None, max_runtime_secs=0.0).run(
        X=X, y=y, fold_ids=fold_ids
    )
    assert list(result.models) == ["GLM_1_AutoML"]


def test_automl_grid_exhausted(prepped, fold_ids):
    _, X, y, _, _ = prepped
    result = _automl(include_algos=["knn"], max_models=100, build_ensembles=False).run(
        X=X, y=y, fold_ids=fold_ids
    )
    # 1 default + 3 grid candidates
    assert len(result.models) == 4
