# housestack/training/steps/automl_step.py
from __future__ import annotations

from housestack import logs
from housestack.pipeline.step import PipelineStep
from housestack.training.context import TrainingContext
from housestack.training.engines.automl_engine import AutoMLEngine
from housestack.utils.errors import PipelineAbort


class AutoMLStep(PipelineStep):
    """
    AutoMLStep（FINAL）

    Contract:
    - produces ctx.automl (AutoMLResult, with its own leaderboard)
    - AutoML models (ids carry an _AutoML tag, e.g. GLM_1_AutoML,
      GLM_grid_1_AutoML_model_1, StackedEnsemble_AllModels_AutoML) are registered in ctx.models
    """

    stage = "automl"

    def run(self, ctx: TrainingContext) -> TrainingContext:
        if ctx.train_X is None or ctx.fold_ids is None:
            raise PipelineAbort("training matrix / folds not prepared")

        engine = AutoMLEngine(
            cfg=ctx.cfg.automl,
            model_cfg=ctx.cfg.model,
            platform=ctx.cfg.platform,
            inst=self.inst,
        )

        with self.timed():
            result = engine.run(X=ctx.train_X, y=ctx.train_y, fold_ids=ctx.fold_ids)

        ctx.automl = result
        self.inst.metrics.increment(
            "models_trained", sum(1 for m in result.models.values() if m.algo != "stackedensemble")
        )
        for model_id, model in result.models.items():
            ctx.models[model_id] = model
            if model.algo == "stackedensemble":
                ctx.ensembles[model_id] = model

        logs.info(f"[AutoMLStep] leader={result.leaderboard.leader_id}")
        return ctx
