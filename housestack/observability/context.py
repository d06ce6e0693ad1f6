#!filepath: housestack/observability/context.py
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any, Dict


@dataclass
class InstrumentationContext:
    """
    Where the run currently is: run_id, step, model_id.
    Attached to abort / error logs.
    """

    state: Dict[str, Any] = field(default_factory=dict)

    def set(self, key: str, value: Any):
        self.state[key] = value

    def get(self, key: str, default=None):
        return self.state.get(key, default)

    @contextmanager
    def scope(self, **values: Any):
        """Temporarily bind values, restoring the previous ones on exit."""
        previous = {k: self.state.get(k) for k in values}
        self.state.update(values)
        try:
            yield self
        finally:
            for k, v in previous.items():
                if v is None:
                    self.state.pop(k, None)
                else:
                    self.state[k] = v

    def describe(self) -> str:
        return " ".join(f"{k}={v}" for k, v in self.state.items())
