#!filepath: tests/observability/test_timer.py

import time

import pytest

from housestack.observability.timer import Timer


def test_timer_basic():
    t = Timer(enabled=True)
    t.start("task")
    time.sleep(0.01)
    elapsed = t.end("task")

    assert elapsed > 0
    assert isinstance(elapsed, float)


def test_timer_disabled():
    t = Timer(enabled=False)
    t.start("task")

    assert t.end("task") == 0.0


def test_timer_end_without_start():
    assert Timer(enabled=True).end("never") == 0.0


def test_timer_totals_accumulate():
    t = Timer(enabled=True)

    t.start("fit")
    first = t.end("fit")
    t.start("fit")
    second = t.end("fit")

    assert t.totals["fit"] == pytest.approx(first + second)
