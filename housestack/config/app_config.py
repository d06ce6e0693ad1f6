#!filepath: housestack/config/app_config.py
import os

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, Field, ValidationError

from housestack import logs
from housestack.utils.errors import UserInputError
from housestack.utils.path import PathManager
from .log_config import LogConfig
from .platform_config import PlatformConfig
from .data_config import DataConfig
from .recipe_config import RecipeConfig
from .model_config import ModelConfig
from .training_config import (
    AutoMLConfig,
    CVConfig,
    GridConfig,
    ReportConfig,
    StackingConfig,
)


def project_root() -> str:
    """
    housestack/config/app_config.py -> housestack/config -> housestack -> project_root
    """
    return os.path.abspath(os.path.join(os.path.dirname(__file__), "../../"))


# env var -> (section, key)
_ENV_OVERRIDES = {
    "HOUSESTACK_DATA_PATH": ("data", "path"),
    "HOUSESTACK_RUN_ROOT": ("platform", "run_root"),
    "HOUSESTACK_N_JOBS": ("platform", "n_jobs"),
    "HOUSESTACK_LOG_LEVEL": ("log", "level"),
}


class AppConfig(BaseModel):
    log: LogConfig = Field(default_factory=LogConfig)
    platform: PlatformConfig = Field(default_factory=PlatformConfig)
    data: DataConfig = Field(default_factory=DataConfig)
    recipe: RecipeConfig = Field(default_factory=RecipeConfig)
    model: ModelConfig = Field(default_factory=ModelConfig)
    cv: CVConfig = Field(default_factory=CVConfig)
    grid: GridConfig = Field(default_factory=GridConfig)
    stacking: StackingConfig = Field(default_factory=StackingConfig)
    automl: AutoMLConfig = Field(default_factory=AutoMLConfig)
    report: ReportConfig = Field(default_factory=ReportConfig)

    @property
    def outcome(self) -> str:
        return self.data.outcome

    @classmethod
    def load(cls, path: str | None = None) -> "AppConfig":
        """
        YAML config + .env
        - default: <root>/config/base.yml if present, else the packaged housestack/config/base.yml
        - the override is looked up under PathManager.root()
        """
        root = project_root()

        # 1) .env at project root (silently ignored when absent)
        load_dotenv(os.path.join(root, ".env"))

        # 2) resolve config path
        if path is None:
            path = str(PathManager.config_file("base.yml"))

        if not os.path.exists(path):
            raise UserInputError(f"[AppConfig] config file not found: {path}")

        # 3) read YAML
        with open(path, "r", encoding="utf-8") as f:
            try:
                raw = yaml.safe_load(f) or {}
            except yaml.YAMLError as e:
                raise UserInputError(f"[AppConfig] invalid YAML in {path}: {e}") from e

        if not isinstance(raw, dict):
            raise UserInputError(f"[AppConfig] {path} must contain a mapping of sections")

        # 4) env overrides
        for env_key, (section, key) in _ENV_OVERRIDES.items():
            value = os.getenv(env_key)
            if value:
                raw.setdefault(section, {})[key] = value
                logs.debug(f"[AppConfig] {section}.{key} <- ${env_key}")

        try:
            return cls(**raw)
        except ValidationError as e:
            raise UserInputError(f"[AppConfig] invalid config {path}:\n{e}") from e
