# housestack/config/training_config.py
from __future__ import annotations

from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, Field


class CVConfig(BaseModel):
    n_folds: int = 5
    # modulo: row i -> fold i % k (shared by every base model, required for stacking)
    fold_assignment: Literal["modulo", "random", "auto"] = "modulo"
    seed: int = 42


class SearchCriteria(BaseModel):
    strategy: Literal["cartesian", "random_discrete"] = "cartesian"
    max_models: Optional[int] = None
    max_runtime_secs: Optional[float] = None
    stopping_rounds: int = 0
    stopping_metric: str = "rmse"
    stopping_tolerance: float = 0.001
    seed: int = 42


class GridSpecConfig(BaseModel):
    grid_id: str
    family: str
    version: str = "v1"
    hyper_params: Dict[str, List[Any]]
    criteria: SearchCriteria = Field(default_factory=SearchCriteria)
    sort_by: str = "rmse"


class GridConfig(BaseModel):
    enabled: bool = True
    grids: List[GridSpecConfig] = Field(default_factory=list)


class StackingConfig(BaseModel):
    enabled: bool = True
    ensemble_id: str = "stacked_ensemble"
    # None -> every trained base model
    base_models: Optional[List[str]] = None
    metalearner: Literal["glm", "ridge", "rf", "gbm"] = "glm"
    metalearner_params: Dict[str, Any] = Field(default_factory=dict)


def _default_search_space() -> Dict[str, Dict[str, List[Any]]]:
    return {
        "glm": {"alpha": [0.0001, 0.001, 0.01, 0.1], "l1_ratio": [0.0, 0.25, 0.5, 0.75, 1.0]},
        "rf": {"n_estimators": [50, 100, 200], "max_features": [0.33, 0.5, 1.0], "min_samples_leaf": [1, 2, 5]},
        "gbm": {
            "n_estimators": [100, 200, 400],
            "learning_rate": [0.01, 0.05, 0.1],
            "max_depth": [2, 3, 5],
            "subsample": [0.7, 1.0],
        },
        "hgb": {"max_iter": [100, 200], "learning_rate": [0.05, 0.1], "max_leaf_nodes": [15, 31]},
        "knn": {"n_neighbors": [5, 10, 20], "weights": ["uniform", "distance"]},
    }


class AutoMLConfig(BaseModel):
    enabled: bool = False
    max_models: Optional[int] = 10
    max_runtime_secs: Optional[float] = None
    include_algos: Optional[List[str]] = None
    exclude_algos: Optional[List[str]] = None
    sort_metric: str = "rmse"
    build_ensembles: bool = True
    seed: int = 1
    search_space: Dict[str, Dict[str, List[Any]]] = Field(default_factory=_default_search_space)


class ReportConfig(BaseModel):
    enabled: bool = True
    top_n: int = 10
    importance_repeats: int = 5
