#!filepath: housestack/config/recipe_config.py
from __future__ import annotations

from typing import Any, Dict, List, Literal, Union

from pydantic import BaseModel, Field

RecipeStepKind = Literal[
    "log",
    "impute_median",
    "impute_mode",
    "other",
    "novel",
    "dummy",
    "zv",
    "nzv",
    "center",
    "scale",
    "normalize",
    "yeo_johnson",
    "interact",
]


class RecipeStepConfig(BaseModel):
    kind: RecipeStepKind
    # selector name (all_numeric / all_nominal / all_predictors) or explicit columns
    columns: Union[str, List[str]] = "all_predictors"
    options: Dict[str, Any] = Field(default_factory=dict)


class RecipeConfig(BaseModel):
    steps: List[RecipeStepConfig] = Field(default_factory=list)
