#!filepath: tests/observability/test_context.py

from housestack.observability.context import InstrumentationContext


def test_context_set_get():
    ctx = InstrumentationContext()

    ctx.set("step", "GridSearchStep")
    ctx.set("model_id", "gbm_grid_model_1")

    assert ctx.get("step") == "GridSearchStep"
    assert ctx.get("model_id") == "gbm_grid_model_1"
    assert ctx.get("missing", "default") == "default"


def test_scope_restores_previous_values():
    ctx = InstrumentationContext()
    ctx.set("run_id", "train_001")
    ctx.set("step", "FoldAssignStep")

    with ctx.scope(step="ModelTrainStep", model_id="rf_1"):
        assert ctx.get("step") == "ModelTrainStep"
        assert ctx.get("model_id") == "rf_1"

    assert ctx.get("step") == "FoldAssignStep"
    assert ctx.get("model_id") is None
    assert ctx.get("run_id") == "train_001"


def test_scope_restores_on_error():
    ctx = InstrumentationContext()

    try:
        with ctx.scope(step="GridSearchStep"):
            raise RuntimeError("boom")
    except RuntimeError:
        pass

    assert "step" not in ctx.state


def test_describe():
    ctx = InstrumentationContext()
    ctx.set("run_id", "train_001")
    ctx.set("step", "LeaderboardStep")

    assert ctx.describe() == "run_id=train_001 step=LeaderboardStep"
