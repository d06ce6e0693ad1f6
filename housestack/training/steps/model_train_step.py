# housestack/training/steps/model_train_step.py
from __future__ import annotations

from housestack import logs
from housestack.pipeline.model_artifact import ModelSpec
from housestack.pipeline.step import PipelineStep
from housestack.training.context import TrainingContext
from housestack.training.engines.cv_engine import CrossValidationEngine
from housestack.training.engines.registry import resolve_model_train_engine
from housestack.utils.errors import PipelineAbort


class ModelTrainStep(PipelineStep):
    """
    ModelTrainStep（FINAL）

    Contract:
    - consumes ctx.train_X / ctx.train_y / ctx.fold_ids
    - one cross-validated model per enabled family, id "<family>_1"
    - produces ctx.models[model_id]
    """

    stage = "model_train"

    def __init__(self, cv_engine: CrossValidationEngine | None = None, inst=None):
        super().__init__(inst)
        self.cv_engine = cv_engine or CrossValidationEngine()

    def run(self, ctx: TrainingContext) -> TrainingContext:
        if ctx.train_X is None or ctx.fold_ids is None:
            raise PipelineAbort("training matrix / folds not prepared")

        model_cfg = ctx.cfg.model
        enabled = [f for f, c in model_cfg.families.items() if c.enabled]
        if not enabled:
            logs.warning("[ModelTrainStep] no model family enabled, skip")
            return ctx

        self.inst.progress.start("base models", len(enabled), "models")
        with self.timed():
            for i, family in enumerate(enabled, start=1):
                family_cfg = model_cfg.families[family]
                engine = resolve_model_train_engine(
                    spec=ModelSpec(family=family, task=model_cfg.task_type, version=family_cfg.version),
                    cfg=family_cfg,
                    platform=ctx.cfg.platform,
                )

                model_id = f"{family}_1"
                self.inst.progress.update("base models", i, len(enabled))
                with self.inst.timer(model_id):
                    model = self.cv_engine.run(
                        engine=engine,
                        X=ctx.train_X,
                        y=ctx.train_y,
                        fold_ids=ctx.fold_ids,
                        model_id=model_id,
                    )

                ctx.models[model_id] = model
                self.inst.metrics.increment("models_trained")
                logs.info(
                    f"[ModelTrainStep] {model_id} cv_rmse={model.metrics['rmse']:.6f} "
                    f"cv_r2={model.metrics['r2']:.4f}"
                )

        self.inst.progress.done("base models")

        return ctx
