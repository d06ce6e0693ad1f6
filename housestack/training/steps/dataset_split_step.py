# housestack/training/steps/dataset_split_step.py
from __future__ import annotations

from housestack.pipeline.step import PipelineStep
from housestack.training.context import TrainingContext
from housestack.training.engines.dataset_split_engine import DatasetSplitEngine
from housestack.utils.errors import PipelineAbort


class DatasetSplitStep(PipelineStep):
    """
    DatasetSplitStep（FINAL）

    Contract:
    - consumes ctx.raw_df
    - produces ctx.train_df / ctx.test_df
    """

    stage = "dataset_split"

    def __init__(self, engine: DatasetSplitEngine | None = None, inst=None):
        super().__init__(inst)
        self.engine = engine or DatasetSplitEngine()

    def run(self, ctx: TrainingContext) -> TrainingContext:
        if ctx.raw_df is None:
            raise PipelineAbort("no raw data loaded")

        cfg = ctx.cfg.data
        with self.timed():
            ctx.train_df, ctx.test_df = self.engine.split(
                ctx.raw_df,
                target=cfg.outcome,
                train_fraction=cfg.train_fraction,
                strata_bins=cfg.strata_bins,
                seed=cfg.seed,
            )
        return ctx
