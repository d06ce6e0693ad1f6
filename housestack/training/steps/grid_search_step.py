# housestack/training/steps/grid_search_step.py
from __future__ import annotations

from housestack import logs
from housestack.pipeline.model_artifact import ModelSpec
from housestack.pipeline.step import PipelineStep
from housestack.training.context import TrainingContext
from housestack.training.engines.grid_search_engine import GridSearchEngine
from housestack.training.engines.registry import resolve_model_train_engine
from housestack.utils.errors import PipelineAbort


class GridSearchStep(PipelineStep):
    """
    GridSearchStep（FINAL）

    Contract:
    - one GridResult per configured grid -> ctx.grids[grid_id]
    - every grid model is registered in ctx.models
    """

    stage = "grid_search"

    def __init__(self, engine: GridSearchEngine | None = None, inst=None):
        super().__init__(inst)
        self.engine = engine or GridSearchEngine(inst=self.inst)

    def run(self, ctx: TrainingContext) -> TrainingContext:
        grids = ctx.cfg.grid.grids
        if not grids:
            logs.info("[GridSearchStep] no grid configured, skip")
            return ctx

        if ctx.train_X is None or ctx.fold_ids is None:
            raise PipelineAbort("training matrix / folds not prepared")

        model_cfg = ctx.cfg.model
        with self.timed():
            for grid in grids:
                engine = resolve_model_train_engine(
                    spec=ModelSpec(family=grid.family, task=model_cfg.task_type, version=grid.version),
                    cfg=model_cfg.families.get(grid.family),
                    platform=ctx.cfg.platform,
                )
                result = self.engine.search(
                    grid_id=grid.grid_id,
                    engine=engine,
                    X=ctx.train_X,
                    y=ctx.train_y,
                    fold_ids=ctx.fold_ids,
                    hyper_params=grid.hyper_params,
                    criteria=grid.criteria,
                    sort_by=grid.sort_by,
                )

                ctx.grids[grid.grid_id] = result
                ctx.models.update(result.models)
                self.inst.metrics.increment("models_trained", len(result.models))
                logs.info(
                    f"[GridSearchStep] {grid.grid_id}: models={len(result.models)} "
                    f"best={result.best_model.model_id}"
                )

        return ctx
