# housestack/training/context.py
from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

import numpy as np
import pandas as pd


@dataclass
class TrainingContext:
    """
    TrainingContext（FINAL）

    Semantics:
    - One context == one training run
    - run_id is immutable and mandatory
    - steps communicate ONLY through this object
    """

    # -------------------------
    # Identity (FROZEN)
    # -------------------------
    run_id: str

    # -------------------------
    # Static bindings
    # -------------------------
    cfg: Any
    inst: Any
    model_dir: Path

    # -------------------------
    # Data
    # -------------------------
    raw_df: Optional[pd.DataFrame] = None
    train_df: Optional[pd.DataFrame] = None
    test_df: Optional[pd.DataFrame] = None

    recipe: Optional[Any] = None
    train_X: Optional[pd.DataFrame] = None
    train_y: Optional[pd.Series] = None
    test_X: Optional[pd.DataFrame] = None
    test_y: Optional[pd.Series] = None
    fold_ids: Optional[np.ndarray] = None

    # -------------------------
    # Models
    # -------------------------
    # model_id -> TrainedModel | StackedEnsemble
    models: Dict[str, Any] = field(default_factory=dict)
    grids: Dict[str, Any] = field(default_factory=dict)
    ensembles: Dict[str, Any] = field(default_factory=dict)
    automl: Optional[Any] = None
    leaderboard: Optional[Any] = None

    # -------------------------
    # Results
    # -------------------------
    metrics: Dict[str, Any] = field(default_factory=dict)
    model_artifact: Optional[Any] = None

    # -------- runtime flags --------
    abort_pipeline: bool = False
    abort_reason: Optional[str] = None

    @property
    def leader(self) -> Optional[Any]:
        return self.leaderboard.leader if self.leaderboard is not None else None

    def base_models(self) -> Dict[str, Any]:
        """Models with their own estimator (ensembles excluded)."""
        return {k: m for k, m in self.models.items() if k not in self.ensembles and m.algo != "stackedensemble"}
