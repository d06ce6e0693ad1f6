#!filepath: housestack/observability/timer.py
import time
from typing import Dict


class Timer:
    """
    Named wall-clock timers.
    - start(name) / end(name) -> elapsed seconds (0.0 when disabled or never started)
    - totals[name] accumulates every end() of that name (repeated fits)
    """

    def __init__(self, enabled: bool = True):
        self.enabled = enabled
        self._start: Dict[str, float] = {}
        self.totals: Dict[str, float] = {}

    def start(self, name: str):
        if not self.enabled:
            return
        self._start[name] = time.perf_counter()

    def end(self, name: str) -> float:
        if not self.enabled or name not in self._start:
            return 0.0
        elapsed = time.perf_counter() - self._start.pop(name)
        self.totals[name] = self.totals.get(name, 0.0) + elapsed
        return elapsed
