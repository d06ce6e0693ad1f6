# housestack/training/steps/fold_assign_step.py
from __future__ import annotations

from housestack import logs
from housestack.pipeline.step import PipelineStep
from housestack.training.context import TrainingContext
from housestack.training.engines.cv_engine import FoldAssigner
from housestack.utils.errors import PipelineAbort


class FoldAssignStep(PipelineStep):
    """
    FoldAssignStep（FINAL / FROZEN）

    One fold assignment per run, shared by every model,
    so that holdout predictions can be stacked.
    """

    stage = "fold_assign"

    def run(self, ctx: TrainingContext) -> TrainingContext:
        if ctx.train_X is None:
            raise PipelineAbort("no training matrix to assign folds on")

        cfg = ctx.cfg.cv
        assigner = FoldAssigner(n_folds=cfg.n_folds, scheme=cfg.fold_assignment, seed=cfg.seed)
        ctx.fold_ids = assigner.assign(len(ctx.train_X))

        logs.info(f"[FoldAssignStep] n_folds={cfg.n_folds} scheme={cfg.fold_assignment}")
        return ctx
