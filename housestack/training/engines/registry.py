# housestack/training/engines/registry.py
from typing import Callable, Dict, Optional, Tuple

from housestack.config.model_config import ModelFamilyConfig
from housestack.config.platform_config import PlatformConfig
from housestack.pipeline.model_artifact import ModelSpec
from housestack.training.engines.model_train_engine import ModelTrainEngine
from housestack.training.engines.model.glm_train_engine import GLMTrainEngine
from housestack.training.engines.model.rf_train_engine import RandomForestTrainEngine
from housestack.training.engines.model.gbm_train_engine import GBMTrainEngine, HistGBMTrainEngine
from housestack.training.engines.model.knn_train_engine import KNNTrainEngine

EngineFactory = Callable[[Optional[ModelFamilyConfig], Optional[PlatformConfig]], ModelTrainEngine]

_ENGINE_REGISTRY: Dict[Tuple[str, str, str], EngineFactory] = {
    ("glm", "regression", "v1"): lambda cfg, platform: GLMTrainEngine(cfg, platform, "v1"),
    ("rf", "regression", "v1"): lambda cfg, platform: RandomForestTrainEngine(cfg, platform, "v1"),
    ("gbm", "regression", "v1"): lambda cfg, platform: GBMTrainEngine(cfg, platform, "v1"),
    ("hgb", "regression", "v1"): lambda cfg, platform: HistGBMTrainEngine(cfg, platform, "v1"),
    ("knn", "regression", "v1"): lambda cfg, platform: KNNTrainEngine(cfg, platform, "v1"),
}

# AutoML / leaderboard ordering
FAMILIES = ("glm", "rf", "gbm", "hgb", "knn")


def resolve_model_train_engine(
        *,
        spec: ModelSpec,
        cfg: Optional[ModelFamilyConfig] = None,
        platform: Optional[PlatformConfig] = None,
) -> ModelTrainEngine:
    key = (spec.family, spec.task, spec.version)

    if key not in _ENGINE_REGISTRY:
        available = ", ".join(str(k) for k in _ENGINE_REGISTRY)
        raise ValueError(
            f"No ModelTrainEngine for {key}. Available: {available}"
        )

    return _ENGINE_REGISTRY[key](cfg, platform)
