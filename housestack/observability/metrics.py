#!filepath: housestack/observability/metrics.py
import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

from housestack import logs


@dataclass
class MetricRecorder:
    """
    Run-level scalar metrics (rows, n_models, models_trained ...).

    dump() persists them next to the run as metrics/run_metrics.json.
    """

    enabled: bool = True
    metrics: Dict[str, Any] = field(default_factory=dict)

    def record(self, name: str, value: Any):
        if not self.enabled:
            return
        self.metrics[name] = value
        logs.info(f"[Metric] {name} = {value}")

    def increment(self, name: str, by: int = 1):
        if not self.enabled:
            return
        self.metrics[name] = self.metrics.get(name, 0) + by

    def snapshot(self) -> Dict[str, Any]:
        return dict(self.metrics)

    def dump(self, path: Path | str) -> Optional[Path]:
        if not self.enabled or not self.metrics:
            return None
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(self.metrics, indent=2, default=str), encoding="utf-8")
        logs.debug(f"[Metric] saved {len(self.metrics)} metrics -> {path}")
        return path
