# housestack/recipe/recipe.py
from __future__ import annotations

from typing import List, Optional, Tuple

import numpy as np
import pandas as pd
from sklearn.base import BaseEstimator, TransformerMixin

from housestack import logs
from housestack.config.recipe_config import RecipeConfig
from housestack.recipe.steps import STEP_REGISTRY, LogStep, RecipeStep
from housestack.utils.errors import RecipeNotPreppedError, UserInputError


class Recipe(BaseEstimator, TransformerMixin):
    """
    Recipe（FINAL）

    Semantics:
    - ordered list of RecipeSteps
    - prep(train)  : fit every step on the output of the previous one
    - bake(df)     : apply the trained steps to any table
    - juice()      : baked training data captured at prep time

    Invariants:
    - statistics come from the prep data only
    - bake() output columns == prepped columns, in prepped order
      (the outcome is dropped from that set when absent from df)
    """

    def __init__(self, outcome: str, steps: Optional[List[Tuple[str, RecipeStep]]] = None):
        self.outcome = outcome
        self.steps = steps if steps is not None else []

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------
    @classmethod
    def from_config(cls, cfg: RecipeConfig, outcome: str) -> "Recipe":
        steps: List[Tuple[str, RecipeStep]] = []
        for step_cfg in cfg.steps:
            if step_cfg.kind not in STEP_REGISTRY:
                raise UserInputError(f"[Recipe] unknown step kind: {step_cfg.kind}")

            step_cls, fixed = STEP_REGISTRY[step_cfg.kind]
            step = step_cls(
                columns=step_cfg.columns,
                outcome=outcome,
                **{**step_cfg.options, **fixed},
            )
            steps.append((step_cfg.kind, step))

        return cls(outcome=outcome, steps=steps)

    def add_step(self, kind: str, step: RecipeStep) -> "Recipe":
        step.outcome = self.outcome
        self.steps.append((kind, step))
        return self

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------
    def prep(self, train: pd.DataFrame) -> "Recipe":
        data = train.copy()
        for kind, step in self.steps:
            step.fit(data)
            data = step.transform(data)
            logs.debug(f"[Recipe] {kind} -> {data.shape[1]} columns")

        self.template_ = data
        self.columns_ = list(data.columns)
        logs.info(
            f"[Recipe] prepped {len(self.steps)} steps on {len(train)} rows: "
            f"{train.shape[1]} -> {len(self.columns_)} columns"
        )
        return self

    def bake(self, df: pd.DataFrame) -> pd.DataFrame:
        if not self.is_prepped:
            raise RecipeNotPreppedError("[Recipe] bake() called before prep()")

        data = df.copy()
        for _, step in self.steps:
            data = step.transform(data)

        columns = [c for c in self.columns_ if c != self.outcome or c in data.columns]
        # dummy levels absent from df -> 0
        return data.reindex(columns=columns, fill_value=0.0)

    def juice(self) -> pd.DataFrame:
        if not self.is_prepped:
            raise RecipeNotPreppedError("[Recipe] juice() called before prep()")
        return self.template_.copy()

    def summary(self) -> pd.DataFrame:
        rows = []
        for i, (kind, step) in enumerate(self.steps, start=1):
            rows.append(
                {
                    "number": i,
                    "kind": kind,
                    "columns": ", ".join(step.columns_) if step.is_trained else str(step.columns),
                    "trained": step.is_trained,
                }
            )
        return pd.DataFrame(rows, columns=["number", "kind", "columns", "trained"])

    def inverse_outcome(self, values: np.ndarray) -> np.ndarray:
        """
        Undo `log` steps applied to the outcome (last applied, first undone).
        """
        out = np.asarray(values, dtype=float)
        for _, step in reversed(self.steps):
            if isinstance(step, LogStep) and step.is_trained and self.outcome in step.columns_:
                out = step.inverse(out)
        return out

    def split_xy(self, baked: pd.DataFrame) -> Tuple[pd.DataFrame, Optional[pd.Series]]:
        if self.outcome in baked.columns:
            return baked.drop(columns=[self.outcome]), baked[self.outcome]
        return baked, None

    # ------------------------------------------------------------------
    # sklearn contract
    # ------------------------------------------------------------------
    def fit(self, X: pd.DataFrame, y=None):
        return self.prep(X)

    def transform(self, X: pd.DataFrame) -> pd.DataFrame:
        return self.bake(X)

    @property
    def is_prepped(self) -> bool:
        return hasattr(self, "columns_")

    @property
    def feature_names(self) -> List[str]:
        if not self.is_prepped:
            raise RecipeNotPreppedError("[Recipe] not prepped")
        return [c for c in self.columns_ if c != self.outcome]
