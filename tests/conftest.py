# tests/conftest.py
from __future__ import annotations

import os

os.environ.setdefault("MPLBACKEND", "Agg")

import matplotlib

matplotlib.use("Agg")

import numpy as np
import pandas as pd
import pytest
from loguru import logger

from housestack.config.app_config import AppConfig
from housestack.config.training_config import GridSpecConfig, SearchCriteria
from housestack.recipe import Recipe
from housestack.training.engines.cv_engine import FoldAssigner
from housestack.training.engines.dataset_load_engine import make_synthetic_housing
from housestack.training.engines.dataset_split_engine import DatasetSplitEngine
from housestack.utils.path import PathManager


@pytest.fixture(autouse=True)
def disable_file_logger():
    logger.remove()
    logger.add(lambda msg: None)  # or sys.stderr
    yield


@pytest.fixture(autouse=True)
def isolated_root(tmp_path):
    """Every test writes runs/ under its own tmp_path."""
    PathManager.set_root(tmp_path)
    PathManager.set_run_root("runs")
    yield tmp_path
    PathManager.set_root(None)
    PathManager.set_run_root("runs")


# ============================================================
# data
# ============================================================
@pytest.fixture(scope="session")
def housing_df() -> pd.DataFrame:
    return make_synthetic_housing(n_rows=200, seed=7)


@pytest.fixture(scope="session")
def base_cfg() -> AppConfig:
    return AppConfig.load()


@pytest.fixture(scope="session")
def prepped(housing_df, base_cfg):
    """
    (recipe, train_X, train_y, test_X, test_y) with the default recipe.
    """
    train, test = DatasetSplitEngine().split(housing_df, target="Sale_Price", seed=123)
    recipe = Recipe.from_config(base_cfg.recipe, outcome="Sale_Price").prep(train)
    train_X, train_y = recipe.split_xy(recipe.juice())
    test_X, test_y = recipe.split_xy(recipe.bake(test))
    return recipe, train_X, train_y, test_X, test_y


@pytest.fixture(scope="session")
def fold_ids(prepped) -> np.ndarray:
    return FoldAssigner(n_folds=3, scheme="modulo").assign(len(prepped[1]))


# ============================================================
# config
# ============================================================
def build_small_cfg() -> AppConfig:
    """
    Default config with small estimators / folds so that a full run stays fast.
    """
    cfg = AppConfig.load()
    cfg.data.synthetic_rows = 160
    cfg.platform.n_jobs = 1
    cfg.cv.n_folds = 3

    families = cfg.model.families
    families["rf"].params = {"n_estimators": 15, "min_samples_leaf": 2}
    families["gbm"].params = {"n_estimators": 30, "learning_rate": 0.1, "max_depth": 2}
    families["knn"].params = {"n_neighbors": 5}

    cfg.grid.grids = [
        GridSpecConfig(
            grid_id="gbm_grid",
            family="gbm",
            hyper_params={"learning_rate": [0.05, 0.1], "max_depth": [2, 3]},
            criteria=SearchCriteria(strategy="random_discrete", max_models=3, seed=7),
        )
    ]

    cfg.automl.max_models = 4
    cfg.automl.search_space = {
        "glm": {"alpha": [0.001, 0.01]},
        "rf": {"n_estimators": [10, 20]},
        "gbm": {"n_estimators": [20, 40], "max_depth": [2]},
        "hgb": {"max_iter": [20, 40]},
        "knn": {"n_neighbors": [3, 7]},
    }
    cfg.report.importance_repeats = 2
    return cfg


@pytest.fixture
def small_cfg() -> AppConfig:
    return build_small_cfg()


@pytest.fixture(scope="session")
def small_cfg_factory():
    return build_small_cfg
