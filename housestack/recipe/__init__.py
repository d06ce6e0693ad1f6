"""
Recipe: declarative preprocessing (feature engineering) fitted on training data.
"""
from .recipe import Recipe
from .steps import (
    DummyStep,
    ImputeMedianStep,
    ImputeModeStep,
    InteractStep,
    LogStep,
    NearZeroVarianceStep,
    NormalizeStep,
    NovelStep,
    OtherStep,
    RecipeStep,
    YeoJohnsonStep,
    ZeroVarianceStep,
)

__all__ = [
    "Recipe",
    "RecipeStep",
    "LogStep",
    "YeoJohnsonStep",
    "NormalizeStep",
    "InteractStep",
    "ImputeMedianStep",
    "ImputeModeStep",
    "OtherStep",
    "NovelStep",
    "DummyStep",
    "ZeroVarianceStep",
    "NearZeroVarianceStep",
]
