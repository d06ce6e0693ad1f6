# housestack/training/pipeline.py
from __future__ import annotations

from pathlib import Path
from typing import List

from housestack import logs
from housestack.utils.path import PathManager
from housestack.utils.errors import PipelineAbort
from housestack.observability.instrumentation import Instrumentation
from housestack.pipeline.step import PipelineStep
from housestack.training.context import TrainingContext


class TrainingPipeline:
    """
    TrainingPipeline（FINAL）

    Semantics:
    - Pipeline owns the context and the step order
    - Steps execute semantics
    - A step stops the run by setting ctx.abort_pipeline or raising PipelineAbort
    """

    def __init__(
            self,
            *,
            steps: List[PipelineStep],
            pm: PathManager,
            inst: Instrumentation,
            cfg,
    ):
        self.steps = steps
        self.pm = pm
        self.inst = inst
        self.cfg = cfg

    def run(self, run_id: str) -> TrainingContext:
        logs.info(f"[TrainingPipeline] START run_id={run_id}")

        ctx = TrainingContext(
            run_id=run_id,
            cfg=self.cfg,
            inst=self.inst,
            model_dir=self.pm.train_run_dir(run_id),
        )

        self.inst.context.set("run_id", run_id)
        for step in self.steps:
            with self.inst.context.scope(step=step.step_name):
                try:
                    ctx = step.run(ctx)
                except PipelineAbort as e:
                    ctx.abort_pipeline = True
                    ctx.abort_reason = str(e)

                if ctx.abort_pipeline:
                    logs.warning(
                        f"[TrainingPipeline] ABORT {self.inst.context.describe()}: {ctx.abort_reason}"
                    )
                    break

        self.inst.generate_timeline_report(run_id)
        self.inst.metrics.dump(Path(ctx.model_dir) / "metrics" / "run_metrics.json")

        logs.info(f"[TrainingPipeline] DONE run_id={run_id} models={len(ctx.models)}")
        return ctx
