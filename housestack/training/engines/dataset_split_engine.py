# housestack/training/engines/dataset_split_engine.py
from __future__ import annotations

import math
from typing import Optional, Tuple

import pandas as pd
from sklearn.model_selection import train_test_split

from housestack import logs
from housestack.utils.errors import UserInputError


class DatasetSplitEngine:
    """
    DatasetSplitEngine（FINAL / FROZEN）

    Responsibility:
    - stratified random train / test split on the binned outcome

    Contract:
    - train ∩ test == ∅, train ∪ test == input (index preserved)
    - same seed -> same split
    - too few distinct outcome values -> fewer bins -> no stratification
    """

    def split(
        self,
        df: pd.DataFrame,
        *,
        target: str,
        train_fraction: float = 0.7,
        strata_bins: int = 4,
        seed: int = 123,
    ) -> Tuple[pd.DataFrame, pd.DataFrame]:
        if not 0.0 < train_fraction < 1.0:
            raise UserInputError(f"[DatasetSplit] train_fraction must be in (0, 1), got {train_fraction}")

        n = len(df)
        if n < 2:
            raise UserInputError(f"[DatasetSplit] need at least 2 rows, got {n}")

        n_train = math.floor(train_fraction * n)
        if n_train == 0 or n_train == n:
            raise UserInputError(
                f"[DatasetSplit] train_fraction={train_fraction} leaves an empty side for n={n}"
            )

        strata = self._strata(df[target], strata_bins, n_train=n_train, n_test=n - n_train)

        train, test = train_test_split(
            df,
            train_size=n_train,
            stratify=strata,
            random_state=seed,
        )

        logs.info(
            f"[DatasetSplit] train={len(train)} test={len(test)} "
            f"stratified={'yes' if strata is not None else 'no'}"
        )
        return train, test

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------
    @staticmethod
    def _strata(y: pd.Series, bins: int, *, n_train: int, n_test: int) -> Optional[pd.Series]:
        """
        Largest usable number of quantile bins:
        - every bin holds >= 2 rows
        - both sides can receive one row per bin
        """
        for b in range(bins, 1, -1):
            try:
                labels = pd.qcut(y, q=b, labels=False, duplicates="drop")
            except ValueError:
                continue
            counts = labels.value_counts()
            if len(counts) < 2:
                continue
            if counts.min() >= 2 and min(n_train, n_test) >= len(counts):
                return labels
        return None
