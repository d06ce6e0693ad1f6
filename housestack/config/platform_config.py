#!filepath: housestack/config/platform_config.py
from pydantic import BaseModel


class PlatformConfig(BaseModel):
    """
    Estimator-wide settings, injected into every estimator that accepts them.
    n_jobs=-1 -> all cores
    """
    n_jobs: int = -1
    seed: int = 42
    run_root: str = "runs"
