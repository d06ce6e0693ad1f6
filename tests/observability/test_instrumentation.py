#!filepath: tests/observability/test_instrumentation.py

import time

from loguru import logger

from housestack.observability.instrumentation import Instrumentation, NoOpInstrumentation


def test_instrumentation_timer():
    inst = Instrumentation(enabled=True)

    with inst.timer("glm_1"):
        time.sleep(0.01)

    assert "glm_1" in inst.timeline
    assert inst.timeline["glm_1"] > 0


def test_parent_scope_is_not_recorded():
    inst = Instrumentation(enabled=True)

    with inst.timer("ModelTrainStep", record=False):
        with inst.timer("rf_1"):
            pass

    assert list(inst.timeline) == ["rf_1"]


def test_disabled_instrumentation_records_nothing():
    inst = Instrumentation(enabled=False)

    with inst.timer("rf_1"):
        pass
    inst.metrics.record("rows", 1)

    assert inst.timeline == {}
    assert inst.metrics.metrics == {}


def test_noop_instrumentation():
    inst = NoOpInstrumentation()

    with inst.timer("anything"):
        pass
    inst.progress.update("Task", 1, 2)
    inst.metrics.record("rows", 1)
    inst.generate_timeline_report("run")

    assert inst.timeline == {}
    assert inst.metrics.metrics == {}


def test_generate_timeline_report():
    inst = Instrumentation(enabled=True)

    with inst.timer("gbm_1"):
        time.sleep(0.005)

    captured = []
    sink_id = logger.add(lambda msg: captured.append(str(msg)))
    inst.generate_timeline_report("train_001")
    logger.remove(sink_id)

    output = "\n".join(captured)

    assert "gbm_1" in output
    assert "Training timeline for train_001" in output


def test_repeated_leaf_accumulates():
    inst = Instrumentation(enabled=True)

    with inst.timer("rf_1"):
        time.sleep(0.005)
    first = inst.timeline["rf_1"]
    with inst.timer("rf_1"):
        time.sleep(0.005)

    assert list(inst.timeline) == ["rf_1"]
    assert inst.timeline["rf_1"] > first
