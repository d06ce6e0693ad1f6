#!filepath: tests/observability/test_metrics.py

import json

from housestack.observability.metrics import MetricRecorder


def test_metric_record():
    m = MetricRecorder(enabled=True)
    m.record("n_models", 7)

    assert m.metrics["n_models"] == 7


def test_metric_disabled():
    m = MetricRecorder(enabled=False)
    m.record("x", 1)

    assert m.metrics == {}


def test_metric_increment():
    m = MetricRecorder(enabled=True)
    m.increment("models_trained")
    m.increment("models_trained", 3)

    assert m.snapshot() == {"models_trained": 4}


def test_snapshot_is_a_copy():
    m = MetricRecorder(enabled=True)
    m.record("rows", 10)

    snap = m.snapshot()
    snap["rows"] = 0

    assert m.metrics["rows"] == 10


def test_dump_writes_json(tmp_path):
    m = MetricRecorder(enabled=True)
    m.record("rows", 160)
    m.increment("models_trained", 2)

    path = m.dump(tmp_path / "metrics" / "run_metrics.json")

    assert path.exists()
    assert json.loads(path.read_text(encoding="utf-8")) == {"rows": 160, "models_trained": 2}


def test_dump_skips_empty_or_disabled(tmp_path):
    assert MetricRecorder(enabled=True).dump(tmp_path / "a.json") is None

    disabled = MetricRecorder(enabled=False)
    disabled.increment("x")
    assert disabled.dump(tmp_path / "b.json") is None
    assert not (tmp_path / "b.json").exists()
