#!filepath: housestack/observability/progress.py
from time import perf_counter
from typing import Dict

from housestack import logs


class ProgressReporter:
    """
    Log-only progress for model loops (no tqdm / rich, stays quiet under pytest)

    [Progress] base models: 2/4 (50%) 3.1s
    """

    def __init__(self, enabled: bool = True):
        self.enabled = enabled
        self._started: Dict[str, float] = {}

    def start(self, task: str, total: int, unit: str = ""):
        if not self.enabled:
            return
        self._started[task] = perf_counter()
        logs.info(f"[Progress] {task} started total={total} {unit}".rstrip())

    def update(self, task: str, current: int, total: int, unit: str = ""):
        if not self.enabled:
            return
        started = self._started.setdefault(task, perf_counter())
        pct = 100.0 * current / total if total else 100.0
        logs.info(
            f"[Progress] {task}: {current}/{total} {unit}".rstrip()
            + f" ({pct:.0f}%) {perf_counter() - started:.1f}s"
        )

    def done(self, task: str):
        if not self.enabled:
            return
        started = self._started.pop(task, None)
        elapsed = f" in {perf_counter() - started:.1f}s" if started is not None else ""
        logs.info(f"[Progress] {task} done{elapsed}")
