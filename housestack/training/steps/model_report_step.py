# housestack/training/steps/model_report_step.py
from __future__ import annotations

import json
from datetime import datetime, timezone
from pathlib import Path

import numpy as np

from housestack import logs
from housestack.pipeline.step import PipelineStep
from housestack.training.context import TrainingContext
from housestack.training.engines.importance_engine import VariableImportanceEngine
from housestack.training.engines.model_report_engine import ModelReportEngine


class ModelReportStep(PipelineStep):
    """
    ModelReportStep（FINAL）

    Responsibility:
    - leaderboard / grid / stack-weight / importance / predicted-vs-actual figures
    - leader metrics -> metrics/leader.json
    - Does NOT modify models

    Every report with missing inputs is skipped with a warning.
    """

    stage = "model_report"

    def __init__(
        self,
        *,
        inst=None,
        engine: ModelReportEngine | None = None,
        importance: VariableImportanceEngine | None = None,
    ):
        super().__init__(inst)
        self.engine = engine or ModelReportEngine()
        self.importance = importance

    def run(self, ctx: TrainingContext) -> TrainingContext:
        if ctx.leaderboard is None:
            logs.warning("[ModelReportStep] skip reports (no leaderboard)")
            return ctx

        cfg = ctx.cfg.report
        out_dir = Path(ctx.model_dir) / "reports"
        metric = ctx.leaderboard.sort_metric

        with self.timed():
            with self.inst.timer("report_leaderboard"):
                self.engine.plot_leaderboard(ctx.leaderboard.table, metric, out_dir, top_n=cfg.top_n)

            self._grid_reports(ctx, out_dir)
            self._stack_reports(ctx, out_dir)
            self._leader_reports(ctx, out_dir)
            self._persist_metrics(ctx)

        logs.info(f"[ModelReportStep] reports saved: {out_dir}")
        return ctx

    # --------------------------------------------------
    # Individual reports
    # --------------------------------------------------
    def _grid_reports(self, ctx: TrainingContext, out_dir: Path) -> None:
        for grid_id, result in ctx.grids.items():
            if result.table.empty:
                logs.warning(f"[ModelReportStep] grid {grid_id} is empty, skip")
                continue
            with self.inst.timer(f"report_grid_{grid_id}"):
                self.engine.write_csv(result.table, out_dir, f"grid_{grid_id}.csv")
                self.engine.plot_grid(result.table, grid_id, result.sort_by, out_dir)

    def _stack_reports(self, ctx: TrainingContext, out_dir: Path) -> None:
        for ensemble_id, ensemble in ctx.ensembles.items():
            weights = ensemble.metalearner_weights()
            if weights is None or weights.empty:
                logs.warning(f"[ModelReportStep] {ensemble_id}: no metalearner weights, skip")
                continue
            with self.inst.timer(f"report_stack_{ensemble_id}"):
                self.engine.write_csv(
                    weights.rename("weight").reset_index().rename(columns={"index": "model_id"}),
                    out_dir,
                    f"stack_weights_{ensemble_id}.csv",
                )
                self.engine.plot_stack_weights(weights, out_dir, ensemble_id=ensemble_id)

    def _leader_reports(self, ctx: TrainingContext, out_dir: Path) -> None:
        leader = ctx.leader

        importance_engine = self.importance or VariableImportanceEngine(
            n_repeats=ctx.cfg.report.importance_repeats,
            seed=ctx.cfg.platform.seed,
        )

        # stacked leader -> importance of its best base model
        target = leader
        if leader.algo == "stackedensemble":
            base_ids = set(leader.base_model_ids)
            ranked = [mid for mid in ctx.leaderboard.table["model_id"] if mid in base_ids]
            target = ctx.models[ranked[0]] if ranked else None

        if target is None:
            logs.warning("[ModelReportStep] no model for variable importance, skip")
        else:
            importance = importance_engine.compute(target, ctx.test_X, ctx.test_y)
            if importance is None:
                logs.warning(f"[ModelReportStep] {target.model_id}: no variable importance, skip")
            else:
                with self.inst.timer("report_varimp"):
                    self.engine.write_csv(
                        importance.reset_index().rename(columns={"index": "feature"}),
                        out_dir,
                        "variable_importance.csv",
                    )
                    self.engine.plot_variable_importance(
                        importance, out_dir, model_id=target.model_id, top_n=ctx.cfg.report.top_n
                    )

        if ctx.test_X is None or ctx.test_y is None or len(ctx.test_y) == 0:
            logs.warning("[ModelReportStep] no test set, skip predicted_vs_actual")
            return

        y_pred = np.asarray(leader.predict(ctx.test_X), dtype=float)
        with self.inst.timer("report_pred_vs_actual"):
            self.engine.plot_predicted_vs_actual(
                ctx.test_y.to_numpy(dtype=float), y_pred, out_dir, model_id=leader.model_id
            )

    def _persist_metrics(self, ctx: TrainingContext) -> None:
        row = ctx.leaderboard.table.iloc[0]
        record = {
            "run_id": ctx.run_id,
            "leader_id": ctx.leaderboard.leader_id,
            "sort_metric": ctx.leaderboard.sort_metric,
            "metrics": {k: _as_float(v) for k, v in row.items() if k not in ("model_id", "algo")},
            "created_at": datetime.now(timezone.utc).isoformat(),
        }

        out_dir = Path(ctx.model_dir) / "metrics"
        out_dir.mkdir(parents=True, exist_ok=True)
        out_file = out_dir / "leader.json"
        out_file.write_text(json.dumps(record, indent=2, ensure_ascii=False))
        logs.info(f"[ModelReportStep] metrics saved: {out_file}")


def _as_float(value):
    value = float(value)
    return None if np.isnan(value) else value
