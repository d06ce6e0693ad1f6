#!filepath: housestack/pipeline/step.py
from __future__ import annotations

from typing import Any

from housestack.observability.instrumentation import (
    Instrumentation,
    NoOpInstrumentation,
)


class PipelineStep:
    """
    Pipeline Step base class

    Responsibilities:
      1. orchestration only (read ctx -> call engine -> write ctx)
      2. step-level time scope (parent scope, not recorded)

    Rules:
      - Steps never enter the timeline themselves
      - Leaf timers (one model fit, one plot) live inside the step
      - Instrumentation is optional; behaviour never depends on it
    """

    stage: str = ""

    def __init__(self, inst: Instrumentation | None = None):
        self.inst: Instrumentation | NoOpInstrumentation = (
            inst if inst is not None else NoOpInstrumentation()
        )

    # --------------------------------------------------
    # Step identity
    # --------------------------------------------------
    @property
    def step_name(self) -> str:
        return self.__class__.__name__

    def timed(self):
        """
        Step-level wall-time scope (record=False, no timeline entry).
        """
        return self.inst.timer(self.step_name, record=False)

    # --------------------------------------------------
    # Contract
    # --------------------------------------------------
    def run(self, ctx: Any) -> Any:
        raise NotImplementedError
