# tests/training/test_pipeline.py
from __future__ import annotations

import json

from housestack.observability.instrumentation import Instrumentation
from housestack.pipeline.step import PipelineStep
from housestack.training.pipeline import TrainingPipeline
from housestack.utils.errors import PipelineAbort
from housestack.utils.path import PathManager


class RecordStep(PipelineStep):
    def __init__(self, name, calls, inst=None):
        super().__init__(inst)
        self.name = name
        self.calls = calls

    def run(self, ctx):
        self.calls.append(self.name)
        with self.inst.timer(self.name):
            pass
        return ctx


class AbortStep(PipelineStep):
    def run(self, ctx):
        raise PipelineAbort("nothing to do")


class FlagStep(PipelineStep):
    def run(self, ctx):
        ctx.abort_pipeline = True
        ctx.abort_reason = "flagged"
        return ctx


def _pipeline(steps, inst):
    return TrainingPipeline(steps=steps, pm=PathManager(), inst=inst, cfg=None)


def test_steps_run_in_order(tmp_path):
    calls = []
    inst = Instrumentation(enabled=True)
    steps = [RecordStep("a", calls, inst), RecordStep("b", calls, inst)]

    ctx = _pipeline(steps, inst).run("r1")

    assert calls == ["a", "b"]
    assert ctx.run_id == "r1"
    assert ctx.model_dir == tmp_path.resolve() / "runs" / "r1"
    assert list(inst.timeline) == ["a", "b"]
    assert not ctx.abort_pipeline


def test_pipeline_abort_stops_remaining_steps():
    calls = []
    inst = Instrumentation(enabled=False)
    steps = [RecordStep("a", calls), AbortStep(), RecordStep("b", calls)]

    ctx = _pipeline(steps, inst).run("r2")

    assert calls == ["a"]
    assert ctx.abort_pipeline
    assert ctx.abort_reason == "nothing to do"


def test_abort_flag_stops_remaining_steps():
    calls = []
    steps = [FlagStep(), RecordStep("a", calls)]

    ctx = _pipeline(steps, Instrumentation(enabled=False)).run("r3")

    assert calls == []
    assert ctx.abort_reason == "flagged"


def test_step_name():
    assert AbortStep().step_name == "AbortStep"


class MetricStep(PipelineStep):
    def run(self, ctx):
        self.inst.metrics.record("rows", 10)
        self.inst.metrics.increment("models_trained", 2)
        return ctx


def test_run_metrics_are_dumped():
    inst = Instrumentation(enabled=True)

    ctx = _pipeline([MetricStep(inst)], inst).run("r4")

    path = ctx.model_dir / "metrics" / "run_metrics.json"
    assert json.loads(path.read_text(encoding="utf-8")) == {"rows": 10, "models_trained": 2}


def test_step_scope_is_cleared_after_run():
    inst = Instrumentation(enabled=True)

    _pipeline([RecordStep("a", [], inst)], inst).run("r5")

    assert inst.context.get("step") is None
    assert inst.context.get("run_id") == "r5"
