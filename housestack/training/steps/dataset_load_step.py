# housestack/training/steps/dataset_load_step.py
from __future__ import annotations

from housestack import logs
from housestack.pipeline.step import PipelineStep
from housestack.training.context import TrainingContext
from housestack.training.engines.dataset_load_engine import DatasetLoadEngine


class DatasetLoadStep(PipelineStep):
    """
    DatasetLoadStep（FINAL）

    Contract:
    - produces ctx.raw_df (outcome present, no missing outcome)
    """

    stage = "dataset_load"

    def __init__(self, engine: DatasetLoadEngine | None = None, inst=None):
        super().__init__(inst)
        self.engine = engine or DatasetLoadEngine()

    def run(self, ctx: TrainingContext) -> TrainingContext:
        cfg = ctx.cfg.data

        with self.timed():
            with self.inst.timer("dataset_load"):
                df = self.engine.load(
                    path=cfg.path,
                    outcome=cfg.outcome,
                    drop_columns=cfg.drop_columns,
                    synthetic_rows=cfg.synthetic_rows,
                    seed=ctx.cfg.platform.seed,
                )

        ctx.raw_df = df
        self.inst.metrics.record("rows", len(df))
        logs.info(f"[DatasetLoadStep] rows={len(df)} cols={df.shape[1]}")
        return ctx
