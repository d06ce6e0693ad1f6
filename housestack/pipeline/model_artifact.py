# housestack/pipeline/model_artifact.py
from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from datetime import datetime
from typing import Any, Tuple

import joblib
import numpy as np
import pandas as pd

from housestack import logs
from housestack.utils.errors import ArtifactError


# ============================================================
# Model Spec (FROZEN)
# ============================================================
@dataclass(frozen=True)
class ModelSpec:
    family: str                 # glm / rf / gbm / hgb / knn / stackedensemble
    task: str = "regression"
    version: str = "v1"

    def to_dict(self) -> dict:
        return {"family": self.family, "task": self.task, "version": self.version}


# ============================================================
# Model Artifact (RUN-SCOPED)
# ============================================================
@dataclass(frozen=True)
class ModelArtifact:
    """
    ModelArtifact（FINAL）

    Semantics:
    - path always points to an artifact ROOT directory (a train run dir)
    - NEVER points to a single file
    """
    path: Path
    spec: ModelSpec
    model_id: str
    run_id: str | None = None
    outcome: str | None = None
    metrics: dict[str, Any] | None = None
    created_at: datetime | None = None
    feature_names: list[str] | None = None

    @property
    def model_file(self) -> Path:
        return self.path / "model.joblib"


def resolve_model_artifact_from_dir(artifact_dir: Path | str) -> ModelArtifact:
    """
    Resolve a ModelArtifact from its run directory.

    Hard rules:
    - artifact.json MUST exist
    - model.joblib is NOT loaded here
    """
    artifact_dir = Path(artifact_dir)
    meta_path = artifact_dir / "artifact.json"
    if not meta_path.exists():
        raise ArtifactError(
            f"[ModelArtifact] artifact.json not found in {artifact_dir}"
        )

    meta = json.loads(meta_path.read_text(encoding="utf-8"))

    spec = ModelSpec(
        family=meta["spec"]["family"],
        task=meta["spec"]["task"],
        version=meta["spec"]["version"],
    )

    return ModelArtifact(
        path=artifact_dir,
        spec=spec,
        model_id=meta["model_id"],
        run_id=meta.get("run_id"),
        outcome=meta.get("outcome"),
        metrics=meta.get("metrics"),
        created_at=datetime.fromisoformat(meta["created_at"]),
        feature_names=meta.get("feature_names"),
    )


def load_model_artifact(artifact_dir: Path | str) -> Tuple[ModelArtifact, dict]:
    """
    Returns (artifact, bundle); bundle = {"model", "recipe", "feature_names", "outcome"}
    """
    artifact = resolve_model_artifact_from_dir(artifact_dir)

    if not artifact.model_file.exists():
        raise ArtifactError(
            f"[ModelArtifact] model.joblib not found in {artifact.path}"
        )

    bundle = joblib.load(artifact.model_file)
    logs.info(
        f"[ModelArtifact] loaded {artifact.model_id} "
        f"({artifact.spec.family}) from {artifact.path}"
    )
    return artifact, bundle


@logs.catch(msg="prediction from artifact failed", log_time=False)
def predict_from_artifact(artifact_dir: Path | str, df: pd.DataFrame) -> np.ndarray:
    """
    Raw table -> recipe.bake -> leader.predict -> outcome scale.
    """
    artifact, bundle = load_model_artifact(artifact_dir)

    recipe = bundle["recipe"]
    model = bundle["model"]
    feature_names = bundle["feature_names"]

    baked = recipe.bake(df)
    missing = [c for c in feature_names if c not in baked.columns]
    if missing:
        raise ArtifactError(
            f"[ModelArtifact] baked data lacks features: {missing}"
        )

    preds = model.predict(baked[feature_names])
    return recipe.inverse_outcome(np.asarray(preds, dtype=float))
