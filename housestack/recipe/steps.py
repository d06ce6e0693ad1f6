# housestack/recipe/steps.py
"""
Recipe steps (scikit-learn transformers, DataFrame in -> DataFrame out)

Each step:
- resolves its selector against the data it is fitted on (columns_)
- learns its statistics from training data only
- never touches the outcome unless the outcome is selected explicitly
"""
from __future__ import annotations

import re
from typing import Dict, List, Optional

import numpy as np
import pandas as pd
from sklearn.base import BaseEstimator, TransformerMixin
from sklearn.preprocessing import PowerTransformer

from housestack.recipe.selectors import Selector, is_numeric, resolve_selector
from housestack.utils.errors import RecipeNotPreppedError, UserInputError


class RecipeStep(BaseEstimator, TransformerMixin):
    kind: str = ""

    def __init__(self, columns: Selector = "all_predictors", outcome: Optional[str] = None):
        self.columns = columns
        self.outcome = outcome

    # --------------------------------------------------
    # sklearn contract
    # --------------------------------------------------
    def fit(self, X: pd.DataFrame, y=None):
        self.columns_ = resolve_selector(X, self.columns, self.outcome)
        self._fit(X)
        return self

    def transform(self, X: pd.DataFrame) -> pd.DataFrame:
        if not self.is_trained:
            raise RecipeNotPreppedError(f"[{self.kind}] step is not trained")
        return self._transform(X.copy())

    # --------------------------------------------------
    # hooks
    # --------------------------------------------------
    def _fit(self, X: pd.DataFrame) -> None:
        pass

    def _transform(self, X: pd.DataFrame) -> pd.DataFrame:
        raise NotImplementedError

    # --------------------------------------------------
    @property
    def is_trained(self) -> bool:
        return hasattr(self, "columns_")

    def _present(self, X: pd.DataFrame) -> List[str]:
        """
        Trained columns present in X. Only the outcome may be absent (new data).
        """
        cols = []
        for c in self.columns_:
            if c in X.columns:
                cols.append(c)
            elif c != self.outcome:
                raise UserInputError(f"[{self.kind}] column missing at bake: {c}")
        return cols

    def _require_numeric(self, X: pd.DataFrame) -> None:
        bad = [c for c in self.columns_ if not is_numeric(X[c])]
        if bad:
            raise UserInputError(f"[{self.kind}] non-numeric columns selected: {bad}")


# ======================================================================
# Transformations
# ======================================================================
class LogStep(RecipeStep):
    kind = "log"

    def __init__(self, columns: Selector = "all_numeric", outcome=None, base: float = float(np.e), offset: float = 0.0):
        super().__init__(columns, outcome)
        self.base = base
        self.offset = offset

    def _fit(self, X):
        self._require_numeric(X)
        if (X[self.columns_] + self.offset <= 0).any().any():
            raise UserInputError(f"[log] non-positive values in {self.columns_} (offset={self.offset})")

    def _transform(self, X):
        for c in self._present(X):
            X[c] = np.log(X[c].astype(float) + self.offset) / np.log(self.base)
        return X

    def inverse(self, values: np.ndarray) -> np.ndarray:
        return np.power(self.base, values) - self.offset


class YeoJohnsonStep(RecipeStep):
    kind = "yeo_johnson"

    def __init__(self, columns: Selector = "all_numeric", outcome=None):
        super().__init__(columns, outcome)

    def _fit(self, X):
        self._require_numeric(X)
        self.transformer_ = None
        if self.columns_:
            self.transformer_ = PowerTransformer(method="yeo-johnson", standardize=False)
            self.transformer_.fit(X[self.columns_].astype(float))

    def _transform(self, X):
        if self.transformer_ is not None:
            cols = self._present(X)
            X[cols] = self.transformer_.transform(X[cols].astype(float))
        return X


class NormalizeStep(RecipeStep):
    """center / scale / normalize (= center + scale)"""

    kind = "normalize"

    def __init__(self, columns: Selector = "all_numeric", outcome=None, center: bool = True, scale: bool = True):
        super().__init__(columns, outcome)
        self.center = center
        self.scale = scale

    def _fit(self, X):
        self._require_numeric(X)
        data = X[self.columns_].astype(float)
        self.means_: Dict[str, float] = data.mean().to_dict()
        sds = data.std(ddof=1).fillna(0.0)
        # constant columns keep their scale
        self.sds_: Dict[str, float] = sds.where(sds > 0, 1.0).to_dict()

    def _transform(self, X):
        for c in self._present(X):
            v = X[c].astype(float)
            if self.center:
                v = v - self.means_[c]
            if self.scale:
                v = v / self.sds_[c]
            X[c] = v
        return X


class InteractStep(RecipeStep):
    kind = "interact"

    def __init__(self, columns: Selector = "all_predictors", outcome=None, pairs=None, sep: str = "_x_"):
        super().__init__(columns, outcome)
        self.pairs = pairs
        self.sep = sep

    def fit(self, X, y=None):
        if not self.pairs:
            raise UserInputError("[interact] `pairs` is required")
        flat = sorted({c for pair in self.pairs for c in pair})
        self.columns_ = resolve_selector(X, flat, self.outcome)
        self._require_numeric(X)
        self.terms_ = [(a, b, f"{a}{self.sep}{b}") for a, b in self.pairs]
        return self

    def _transform(self, X):
        self._present(X)
        for a, b, name in self.terms_:
            X[name] = X[a].astype(float) * X[b].astype(float)
        return X


# ======================================================================
# Imputation
# ======================================================================
class ImputeMedianStep(RecipeStep):
    kind = "impute_median"

    def __init__(self, columns: Selector = "all_numeric", outcome=None):
        super().__init__(columns, outcome)

    def _fit(self, X):
        self._require_numeric(X)
        self.medians_ = X[self.columns_].median().to_dict()

    def _transform(self, X):
        for c in self._present(X):
            X[c] = X[c].fillna(self.medians_[c])
        return X


class ImputeModeStep(RecipeStep):
    kind = "impute_mode"

    def __init__(self, columns: Selector = "all_nominal", outcome=None):
        super().__init__(columns, outcome)

    def _fit(self, X):
        self.modes_ = {}
        for c in self.columns_:
            mode = X[c].mode(dropna=True)
            self.modes_[c] = mode.iloc[0] if len(mode) else None

    def _transform(self, X):
        for c in self._present(X):
            if self.modes_[c] is not None:
                X[c] = X[c].fillna(self.modes_[c])
        return X


# ======================================================================
# Nominal levels
# ======================================================================
class OtherStep(RecipeStep):
    """
    Lump infrequent levels into `other`.
    threshold < 1 -> minimum share of non-missing rows
    threshold >= 1 -> minimum count
    """

    kind = "other"

    def __init__(self, columns: Selector = "all_nominal", outcome=None, threshold: float = 0.05, other: str = "other"):
        super().__init__(columns, outcome)
        self.threshold = threshold
        self.other = other

    def _fit(self, X):
        self.keep_levels_: Dict[str, set] = {}
        for c in self.columns_:
            counts = X[c].value_counts(dropna=True)
            if self.threshold < 1:
                cutoff = self.threshold * counts.sum()
            else:
                cutoff = self.threshold
            self.keep_levels_[c] = set(counts[counts >= cutoff].index)

    def _transform(self, X):
        for c in self._present(X):
            keep = self.keep_levels_[c]
            s = X[c].astype(object)
            lump = s.notna() & ~s.isin(keep)
            X[c] = s.where(~lump, self.other)
        return X


class NovelStep(RecipeStep):
    """Levels unseen at prep time become `new`."""

    kind = "novel"

    def __init__(self, columns: Selector = "all_nominal", outcome=None, new_level: str = "new"):
        super().__init__(columns, outcome)
        self.new_level = new_level

    def _fit(self, X):
        self.levels_ = {c: set(X[c].dropna().unique()) for c in self.columns_}

    def _transform(self, X):
        for c in self._present(X):
            s = X[c].astype(object)
            unseen = s.notna() & ~s.isin(self.levels_[c])
            X[c] = s.where(~unseen, self.new_level)
        return X


class DummyStep(RecipeStep):
    """
    Indicator columns `<col>_<level>`.
    one_hot=False drops the first (sorted) level, as in a treatment contrast.
    Levels that sanitize to the same name get a numeric suffix (`c_A_B`, `c_A_B_2`).
    """

    kind = "dummy"

    def __init__(self, columns: Selector = "all_nominal", outcome=None, one_hot: bool = False):
        super().__init__(columns, outcome)
        self.one_hot = one_hot

    def _fit(self, X):
        self.levels_: Dict[str, List[str]] = {}
        for c in self.columns_:
            levels = sorted(str(v) for v in X[c].dropna().unique())
            self.levels_[c] = levels if self.one_hot else levels[1:]

        self.names_: Dict[str, List[str]] = {}
        for c, levels in self.levels_.items():
            names: List[str] = []
            for level in levels:
                base = name = self._name(c, level)
                n = 1
                while name in names:
                    n += 1
                    name = f"{base}_{n}"
                names.append(name)
            self.names_[c] = names

    @staticmethod
    def _name(col: str, level: str) -> str:
        return f"{col}_{re.sub(r'[^0-9A-Za-z]+', '_', level).strip('_')}"

    def _transform(self, X):
        for c in self._present(X):
            s = X[c].astype(object).where(X[c].notna(), None)
            s = s.map(lambda v: None if v is None else str(v))
            dummies = {
                name: (s == level).astype(float)
                for name, level in zip(self.names_[c], self.levels_[c])
            }
            X = X.drop(columns=[c])
            X = pd.concat([X, pd.DataFrame(dummies, index=X.index)], axis=1)
        return X


# ======================================================================
# Filters
# ======================================================================
class ZeroVarianceStep(RecipeStep):
    kind = "zv"

    def _fit(self, X):
        self.removed_ = [c for c in self.columns_ if X[c].nunique(dropna=False) <= 1]

    def _transform(self, X):
        return X.drop(columns=[c for c in self.removed_ if c in X.columns])


class NearZeroVarianceStep(RecipeStep):
    """
    Remove a column when
      most_common / second_most_common > freq_cut  and
      100 * n_unique / n_rows <= unique_cut
    (single-valued columns are always removed)
    """

    kind = "nzv"

    def __init__(self, columns: Selector = "all_predictors", outcome=None, freq_cut: float = 95 / 5, unique_cut: float = 10):
        super().__init__(columns, outcome)
        self.freq_cut = freq_cut
        self.unique_cut = unique_cut

    def _fit(self, X):
        n_rows = max(len(X), 1)
        self.removed_ = []
        for c in self.columns_:
            counts = X[c].value_counts(dropna=True)
            if len(counts) <= 1:
                self.removed_.append(c)
                continue
            freq_ratio = counts.iloc[0] / counts.iloc[1]
            pct_unique = 100.0 * len(counts) / n_rows
            if freq_ratio > self.freq_cut and pct_unique <= self.unique_cut:
                self.removed_.append(c)

    def _transform(self, X):
        return X.drop(columns=[c for c in self.removed_ if c in X.columns])


STEP_REGISTRY = {
    "log": (LogStep, {}),
    "yeo_johnson": (YeoJohnsonStep, {}),
    "center": (NormalizeStep, {"center": True, "scale": False}),
    "scale": (NormalizeStep, {"center": False, "scale": True}),
    "normalize": (NormalizeStep, {"center": True, "scale": True}),
    "interact": (InteractStep, {}),
    "impute_median": (ImputeMedianStep, {}),
    "impute_mode": (ImputeModeStep, {}),
    "other": (OtherStep, {}),
    "novel": (NovelStep, {}),
    "dummy": (DummyStep, {}),
    "zv": (ZeroVarianceStep, {}),
    "nzv": (NearZeroVarianceStep, {}),
}
