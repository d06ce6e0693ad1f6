#!filepath: housestack/config/model_config.py
from typing import Any, Dict, Literal

from pydantic import BaseModel, Field


class ModelFamilyConfig(BaseModel):
    enabled: bool = True
    version: str = "v1"
    params: Dict[str, Any] = Field(default_factory=dict)


def _default_families() -> Dict[str, ModelFamilyConfig]:
    return {
        "glm": ModelFamilyConfig(params={"alpha": 0.001, "l1_ratio": 0.5}),
        "rf": ModelFamilyConfig(params={"n_estimators": 100}),
        "gbm": ModelFamilyConfig(params={"n_estimators": 200, "learning_rate": 0.05}),
        "hgb": ModelFamilyConfig(enabled=False),
        "knn": ModelFamilyConfig(params={"n_neighbors": 10}),
    }


class ModelConfig(BaseModel):
    task_type: Literal["regression"] = "regression"
    families: Dict[str, ModelFamilyConfig] = Field(default_factory=_default_families)
    sort_metric: str = "rmse"
