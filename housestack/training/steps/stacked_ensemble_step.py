# housestack/training/steps/stacked_ensemble_step.py
from __future__ import annotations

from housestack import logs
from housestack.pipeline.step import PipelineStep
from housestack.training.context import TrainingContext
from housestack.training.engines.stacked_ensemble_engine import StackedEnsembleEngine
from housestack.utils.errors import UserInputError


class StackedEnsembleStep(PipelineStep):
    """
    StackedEnsembleStep（FINAL）

    Contract:
    - base models = cfg.stacking.base_models, or every non-ensemble model in ctx.models
    - produces ctx.ensembles[ensemble_id] and ctx.models[ensemble_id]
    """

    stage = "stacked_ensemble"

    def __init__(self, engine: StackedEnsembleEngine | None = None, inst=None):
        super().__init__(inst)
        self.engine = engine or StackedEnsembleEngine()

    def run(self, ctx: TrainingContext) -> TrainingContext:
        cfg = ctx.cfg.stacking
        candidates = ctx.base_models()

        if cfg.base_models is not None:
            unknown = [m for m in cfg.base_models if m not in candidates]
            if unknown:
                raise UserInputError(f"[StackedEnsembleStep] unknown base models: {unknown}")
            bases = [candidates[m] for m in cfg.base_models]
        else:
            bases = list(candidates.values())

        if len(bases) < 2:
            logs.warning(
                f"[StackedEnsembleStep] {len(bases)} base model(s), ensemble skipped"
            )
            return ctx

        with self.timed():
            with self.inst.timer(cfg.ensemble_id):
                ensemble = self.engine.train(
                    ensemble_id=cfg.ensemble_id,
                    base_models=bases,
                    y=ctx.train_y,
                    metalearner=cfg.metalearner,
                    metalearner_params=cfg.metalearner_params,
                    platform=ctx.cfg.platform,
                )

        ctx.ensembles[ensemble.model_id] = ensemble
        ctx.models[ensemble.model_id] = ensemble
        return ctx
