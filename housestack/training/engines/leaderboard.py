# housestack/training/engines/leaderboard.py
from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, Iterable, Optional

import pandas as pd

from housestack.training.engines.metrics_engine import METRICS, regression_metrics, sort_ascending


class Leaderboard:
    """
    Leaderboard（FINAL / FROZEN）

    Semantics:
    - one row per model: model_id, algo, CV metrics (+ optional test_<metric>)
    - sorted best-first by sort_metric on CV metrics
    - ties keep insertion order (stable sort)

    Models are duck-typed: model_id / algo / metrics / predict(X).
    """

    def __init__(self, table: pd.DataFrame, models: Dict[str, Any], sort_metric: str):
        self.table = table
        self.models = models
        self.sort_metric = sort_metric

    @classmethod
    def from_models(cls, models: Iterable[Any], sort_metric: str = "rmse") -> "Leaderboard":
        ascending = sort_ascending(sort_metric)

        by_id: Dict[str, Any] = {}
        rows = []
        for m in models:
            by_id[m.model_id] = m
            row = {"model_id": m.model_id, "algo": m.algo}
            row.update({k: m.metrics.get(k, float("nan")) for k in METRICS})
            rows.append(row)

        if not rows:
            raise ValueError("[Leaderboard] no models")

        table = (
            pd.DataFrame(rows, columns=["model_id", "algo", *METRICS])
            .sort_values(sort_metric, ascending=ascending, kind="mergesort", na_position="last")
            .reset_index(drop=True)
        )
        return cls(table, by_id, sort_metric)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------
    @property
    def leader(self) -> Any:
        return self.models[self.table.iloc[0]["model_id"]]

    @property
    def leader_id(self) -> str:
        return str(self.table.iloc[0]["model_id"])

    def head(self, n: int = 10) -> pd.DataFrame:
        return self.table.head(n).copy()

    def with_test_performance(self, X_test: pd.DataFrame, y_test: pd.Series) -> "Leaderboard":
        """
        Adds test_<metric> columns; order stays on CV metrics.
        """
        test_rows = {
            model_id: regression_metrics(y_test, self.models[model_id].predict(X_test))
            for model_id in self.table["model_id"]
        }
        table = self.table.copy()
        for k in METRICS:
            table[f"test_{k}"] = table["model_id"].map(lambda mid: test_rows[mid][k])
        return Leaderboard(table, self.models, self.sort_metric)

    def to_csv(self, path: Path | str) -> Path:
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        self.table.to_csv(path, index=False)
        return path

    def __len__(self) -> int:
        return len(self.table)

    def __repr__(self) -> str:
        return f"Leaderboard(sort_metric={self.sort_metric!r}, models={len(self)})"


def read_leaderboard(path: Path | str, sort_metric: Optional[str] = None) -> pd.DataFrame:
    """Stored leaderboard.csv -> DataFrame (re-sorted when sort_metric is given)."""
    df = pd.read_csv(path)
    if sort_metric is not None:
        df = df.sort_values(sort_metric, ascending=sort_ascending(sort_metric), kind="mergesort")
    return df.reset_index(drop=True)
