# housestack/training/steps/leaderboard_step.py
from __future__ import annotations

from housestack import logs
from housestack.pipeline.step import PipelineStep
from housestack.training.context import TrainingContext
from housestack.training.engines.leaderboard import Leaderboard


class LeaderboardStep(PipelineStep):
    """
    LeaderboardStep（FINAL）

    - ranks every model in ctx.models on CV metrics
    - adds test_<metric> columns when a test set exists
    """

    stage = "leaderboard"

    def run(self, ctx: TrainingContext) -> TrainingContext:
        if not ctx.models:
            logs.warning("[LeaderboardStep] no models trained, skip")
            return ctx

        sort_metric = ctx.cfg.model.sort_metric
        with self.timed():
            board = Leaderboard.from_models(ctx.models.values(), sort_metric)
            if ctx.test_X is not None and ctx.test_y is not None:
                board = board.with_test_performance(ctx.test_X, ctx.test_y)

        ctx.leaderboard = board
        leader_row = board.table.iloc[0]
        ctx.metrics["leader_id"] = board.leader_id
        ctx.metrics[f"leader_cv_{sort_metric}"] = float(leader_row[sort_metric])
        if f"test_{sort_metric}" in board.table.columns:
            ctx.metrics[f"leader_test_{sort_metric}"] = float(leader_row[f"test_{sort_metric}"])

        self.inst.metrics.record("n_models", len(board))
        logs.info(f"[LeaderboardStep] leader={board.leader_id} {sort_metric}={leader_row[sort_metric]:.6f}")
        return ctx
