#!filepath: housestack/observability/instrumentation.py
from __future__ import annotations

from dataclasses import dataclass
from contextlib import contextmanager
from collections import OrderedDict
from typing import Dict

from housestack.observability.progress import ProgressReporter
from housestack.observability.timer import Timer
from housestack.observability.metrics import MetricRecorder
from housestack.observability.context import InstrumentationContext
from housestack.observability.timeline_reporter import TimelineReporter


@dataclass
class Instrumentation:
    """
    Instrumentation（Leaf-only accounting + Parent scope）

    Rules:
    1. timeline only records leaf timers (record=True), e.g. one model fit
    2. step-level timers are scope boundaries only (record=False)
    3. record=False timers have no side effects
    """

    enabled: bool = True

    def __post_init__(self):
        self.progress = ProgressReporter(enabled=self.enabled)
        self._timer = Timer(enabled=self.enabled)
        self.metrics = MetricRecorder(enabled=self.enabled)
        self.context = InstrumentationContext()

        # timeline: OrderedDict[leaf_name, elapsed_seconds]
        self.timeline: Dict[str, float] = OrderedDict()

    # ---------------------------------------------------------
    # Context Manager Timer
    # ---------------------------------------------------------
    def timer(self, name: str, *, record: bool = True):
        inst = self

        @contextmanager
        def _ctx():
            if not inst.enabled:
                yield
                return

            inst._timer.start(name)
            try:
                yield
            finally:
                inst._timer.end(name)
                if record:
                    # repeated leaf names accumulate
                    inst.timeline[name] = inst._timer.totals[name]

        return _ctx()

    def generate_timeline_report(self, run_id: str):
        TimelineReporter(self.timeline, run_id).print()


# -------------------------------------------------------------
# No-op Instrumentation
# -------------------------------------------------------------
class NoOpInstrumentation:
    """Used when a step is built without Instrumentation."""

    def __init__(self):
        self.progress = ProgressReporter(enabled=False)
        self.metrics = MetricRecorder(enabled=False)
        self.context = InstrumentationContext()
        self.timeline: Dict[str, float] = OrderedDict()

    def timer(self, name: str, *, record: bool = True):
        return _NoOpTimer()

    def generate_timeline_report(self, run_id: str):
        pass


class _NoOpTimer:
    def __enter__(self):
        pass

    def __exit__(self, exc_type, exc, tb):
        pass
