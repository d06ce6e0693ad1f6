# housestack/training/steps/artifact_persist_step.py
from __future__ import annotations

import json
from datetime import datetime, timezone
from pathlib import Path

import joblib

from housestack import logs
from housestack.pipeline.model_artifact import ModelArtifact, ModelSpec
from housestack.pipeline.step import PipelineStep
from housestack.training.context import TrainingContext
from housestack.utils.errors import PipelineAbort
from housestack.utils.filesystem import FileSystem


class ArtifactPersistStep(PipelineStep):
    """
    ArtifactPersistStep（FINAL / FROZEN）

    Semantics:
    - Persist the run-scoped leader (model + prepped recipe + feature names)
    - DOES NOT publish
    - Produces ModelArtifact bound to the train run
    """

    stage = "training_finalize"

    def run(self, ctx: TrainingContext) -> TrainingContext:
        if ctx.leaderboard is None:
            raise PipelineAbort("no leaderboard / leader to persist")

        leader = ctx.leader

        # -----------------------------
        # Resolve artifact root (run-scoped)
        # -----------------------------
        artifact_dir = FileSystem.ensure_dir(Path(ctx.model_dir))

        spec = ModelSpec(
            family=leader.algo,
            task=ctx.cfg.model.task_type,
            version=leader.spec.version,
        )
        feature_names = list(leader.feature_names)
        created_at = datetime.now(timezone.utc)
        metrics = {k: v for k, v in ctx.metrics.items()}
        metrics.update({f"cv_{k}": float(v) for k, v in leader.metrics.items()})

        # -----------------------------
        # Persist model bundle
        # -----------------------------
        bundle = {
            "model": leader,
            "recipe": ctx.recipe,
            "feature_names": feature_names,
            "outcome": ctx.cfg.outcome,
        }
        joblib.dump(bundle, artifact_dir / "model.joblib")

        # -----------------------------
        # Persist metadata
        # -----------------------------
        artifact_meta = {
            "model_id": leader.model_id,
            "run_id": ctx.run_id,
            "outcome": ctx.cfg.outcome,
            "created_at": created_at.isoformat(),
            "spec": spec.to_dict(),
            "metrics": metrics,
            "feature_names": feature_names,
        }
        FileSystem.safe_write(
            artifact_dir / "artifact.json",
            json.dumps(artifact_meta, indent=2, default=float).encode("utf-8"),
        )

        ctx.leaderboard.to_csv(artifact_dir / "leaderboard.csv")

        ctx.model_artifact = ModelArtifact(
            path=artifact_dir,
            spec=spec,
            model_id=leader.model_id,
            run_id=ctx.run_id,
            outcome=ctx.cfg.outcome,
            metrics=metrics,
            created_at=created_at,
            feature_names=feature_names,
        )
        logs.info(f"[ArtifactPersistStep] model_artifact={ctx.model_artifact.model_id} -> {artifact_dir}")

        return ctx
