# housestack/training/engines/model_report_engine.py
from __future__ import annotations

from pathlib import Path

import numpy as np
import pandas as pd
import matplotlib.pyplot as plt


class ModelReportEngine:
    """
    ModelReportEngine（FINAL / FROZEN）

    Responsibility:
    - Persist report figures (PNG) and their raw tables (CSV)
    - No ctx, no model training
    """

    def write_csv(self, df: pd.DataFrame, out_dir: Path, name: str, index: bool = False) -> Path:
        out_dir.mkdir(parents=True, exist_ok=True)
        path = out_dir / name
        df.to_csv(path, index=index)
        return path

    def plot_variable_importance(
        self,
        importance: pd.Series,
        out_dir: Path,
        *,
        model_id: str,
        top_n: int = 10,
    ) -> Path:
        out_dir.mkdir(parents=True, exist_ok=True)
        path = out_dir / "variable_importance.png"

        top = importance.head(top_n)[::-1]

        plt.figure(figsize=(8, max(3, 0.4 * len(top))))
        plt.barh(top.index.astype(str), top.values)
        plt.title(f"Variable Importance: {model_id}")
        plt.xlabel("Scaled importance")
        plt.tight_layout()
        plt.savefig(path)
        plt.close()

        return path

    def plot_predicted_vs_actual(
        self,
        y_true: np.ndarray,
        y_pred: np.ndarray,
        out_dir: Path,
        *,
        model_id: str,
    ) -> Path:
        out_dir.mkdir(parents=True, exist_ok=True)
        path = out_dir / "predicted_vs_actual.png"

        lo = float(min(np.min(y_true), np.min(y_pred)))
        hi = float(max(np.max(y_true), np.max(y_pred)))

        plt.figure(figsize=(6, 6))
        plt.scatter(y_true, y_pred, s=10, alpha=0.6)
        plt.plot([lo, hi], [lo, hi], linestyle="--", linewidth=1)
        plt.title(f"Predicted vs Actual (test): {model_id}")
        plt.xlabel("Actual")
        plt.ylabel("Predicted")
        plt.grid(True)
        plt.tight_layout()
        plt.savefig(path)
        plt.close()

        return path

    def plot_leaderboard(
        self,
        table: pd.DataFrame,
        metric: str,
        out_dir: Path,
        *,
        top_n: int = 10,
    ) -> Path:
        out_dir.mkdir(parents=True, exist_ok=True)
        path = out_dir / "leaderboard.png"

        top = table.head(top_n)[::-1]

        plt.figure(figsize=(8, max(3, 0.4 * len(top))))
        plt.barh(top["model_id"].astype(str), top[metric])
        plt.title(f"Leaderboard ({metric}, cross-validated)")
        plt.xlabel(metric)
        plt.tight_layout()
        plt.savefig(path)
        plt.close()

        return path

    def plot_grid(self, table: pd.DataFrame, grid_id: str, metric: str, out_dir: Path) -> Path:
        out_dir.mkdir(parents=True, exist_ok=True)
        path = out_dir / f"grid_{grid_id}.png"

        plt.figure(figsize=(10, 4))
        plt.plot(np.arange(1, len(table) + 1), table[metric], marker="o")
        plt.title(f"Grid {grid_id}: {metric} by rank")
        plt.xlabel("Rank")
        plt.ylabel(metric)
        plt.grid(True)
        plt.tight_layout()
        plt.savefig(path)
        plt.close()

        return path

    def plot_stack_weights(self, weights: pd.Series, out_dir: Path, *, ensemble_id: str) -> Path:
        out_dir.mkdir(parents=True, exist_ok=True)
        path = out_dir / f"stack_weights_{ensemble_id}.png"

        plt.figure(figsize=(8, max(3, 0.4 * len(weights))))
        plt.barh(weights.index.astype(str), weights.values)
        plt.axvline(0.0, linestyle="--", linewidth=1)
        plt.title(f"Metalearner weights: {ensemble_id}")
        plt.tight_layout()
        plt.savefig(path)
        plt.close()

        return path
