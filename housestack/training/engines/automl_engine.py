# housestack/training/engines/automl_engine.py
from __future__ import annotations

from dataclasses import dataclass
from time import perf_counter
from typing import Dict, List, Optional

import numpy as np
import pandas as pd

from housestack import logs
from housestack.config.model_config import ModelConfig
from housestack.config.platform_config import PlatformConfig
from housestack.config.training_config import AutoMLConfig
from housestack.observability.instrumentation import NoOpInstrumentation
from housestack.pipeline.model_artifact import ModelSpec
from housestack.training.engines.cv_engine import CrossValidationEngine
from housestack.training.engines.grid_search_engine import sample_grid
from housestack.training.engines.leaderboard import Leaderboard
from housestack.training.engines.metrics_engine import is_better, sort_ascending
from housestack.training.engines.registry import FAMILIES, resolve_model_train_engine
from housestack.training.engines.stacked_ensemble_engine import StackedEnsembleEngine
from housestack.training.engines.train_result import TrainedModel
from housestack.utils.errors import UserInputError


@dataclass
class AutoMLResult:
    leaderboard: Leaderboard
    models: Dict[str, object]

    @property
    def leader(self):
        return self.leaderboard.leader


class AutoMLEngine:
    """
    AutoMLEngine（FINAL）

    Phases:
    1. one default model per enabled family
    2. random-grid models, round-robin over families
    3. StackedEnsemble_AllModels / StackedEnsemble_BestOfFamily

    Budget:
    - max_models counts base models only (ensembles excluded)
    - max_runtime_secs is checked before each base model; >= 1 model is always trained
    """

    def __init__(
        self,
        *,
        cfg: AutoMLConfig,
        model_cfg: Optional[ModelConfig] = None,
        platform: Optional[PlatformConfig] = None,
        cv_engine: Optional[CrossValidationEngine] = None,
        inst=None,
    ):
        self.cfg = cfg
        self.model_cfg = model_cfg or ModelConfig()
        self.platform = platform or PlatformConfig()
        self.cv_engine = cv_engine or CrossValidationEngine()
        self.inst = inst if inst is not None else NoOpInstrumentation()

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------
    def families(self) -> List[str]:
        include = self.cfg.include_algos
        exclude = self.cfg.exclude_algos

        if include is not None and exclude is not None:
            raise UserInputError("[AutoML] set include_algos OR exclude_algos, not both")

        known = set(FAMILIES)
        for name in (include or []) + (exclude or []):
            if name not in known:
                raise UserInputError(f"[AutoML] unknown algo '{name}'. Available: {', '.join(FAMILIES)}")

        if include is not None:
            families = [f for f in FAMILIES if f in include]
        else:
            families = [f for f in FAMILIES if f not in (exclude or [])]

        if not families:
            raise UserInputError("[AutoML] no algorithms left to train")
        return families

    def run(self, *, X: pd.DataFrame, y: pd.Series, fold_ids: np.ndarray) -> AutoMLResult:
        sort_ascending(self.cfg.sort_metric)
        families = self.families()

        start = perf_counter()
        models: Dict[str, TrainedModel] = {}

        def budget_left() -> bool:
            if self.cfg.max_models is not None and len(models) >= self.cfg.max_models:
                return False
            if (
                self.cfg.max_runtime_secs is not None
                and models
                and perf_counter() - start >= self.cfg.max_runtime_secs
            ):
                return False
            return True

        logs.info(
            f"[AutoML] START families={families} max_models={self.cfg.max_models} "
            f"max_runtime_secs={self.cfg.max_runtime_secs}"
        )

        # --------------------------------------------------
        # Phase 1: defaults
        # --------------------------------------------------
        for family in families:
            if not budget_left():
                break
            model_id = f"{family.upper()}_1_AutoML"
            models[model_id] = self._train(family, model_id, X, y, fold_ids, params=None)

        # --------------------------------------------------
        # Phase 2: random grid, round-robin
        # --------------------------------------------------
        queues = self._candidate_queues(families)
        counters = {f: 0 for f in families}
        while budget_left() and any(queues.values()):
            for family in families:
                if not budget_left():
                    break
                if not queues[family]:
                    continue
                params = queues[family].pop(0)
                counters[family] += 1
                model_id = f"{family.upper()}_grid_1_AutoML_model_{counters[family]}"
                model = self._train(family, model_id, X, y, fold_ids, params=params)
                model.tags["grid_params"] = dict(params)
                models[model_id] = model

        # --------------------------------------------------
        # Phase 3: ensembles
        # --------------------------------------------------
        all_models: Dict[str, object] = dict(models)
        if self.cfg.build_ensembles:
            all_models.update(self._ensembles(models, y))

        leaderboard = Leaderboard.from_models(all_models.values(), self.cfg.sort_metric)
        logs.info(
            f"[AutoML] DONE models={len(all_models)} leader={leaderboard.leader_id} "
            f"elapsed={perf_counter() - start:.2f}s"
        )
        return AutoMLResult(leaderboard=leaderboard, models=all_models)

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------
    def _train(self, family, model_id, X, y, fold_ids, *, params) -> TrainedModel:
        family_cfg = self.model_cfg.families.get(family)
        version = family_cfg.version if family_cfg is not None else "v1"
        engine = resolve_model_train_engine(
            spec=ModelSpec(family=family, task=self.model_cfg.task_type, version=version),
            cfg=family_cfg,
            platform=self.platform,
        )
        with self.inst.timer(model_id):
            model = self.cv_engine.run(
                engine=engine, X=X, y=y, fold_ids=fold_ids, params=params, model_id=model_id
            )
        model.tags["automl"] = True
        logs.info(f"[AutoML] {model_id} {self.cfg.sort_metric}={model.metrics[self.cfg.sort_metric]:.6f}")
        return model

    def _candidate_queues(self, families: List[str]) -> Dict[str, List[dict]]:
        queues: Dict[str, List[dict]] = {}
        for family in families:
            space = self.cfg.search_space.get(family) or {}
            queues[family] = sample_grid(space, seed=self.cfg.seed) if space else []
        return queues

    def _ensembles(self, models: Dict[str, TrainedModel], y: pd.Series) -> Dict[str, object]:
        engine = StackedEnsembleEngine(self.cv_engine)
        out: Dict[str, object] = {}

        bases = list(models.values())
        if len(bases) < 2:
            logs.warning("[AutoML] fewer than 2 base models, ensembles skipped")
            return out

        ensemble_id = "StackedEnsemble_AllModels_AutoML"
        with self.inst.timer(ensemble_id):
            out[ensemble_id] = engine.train(
                ensemble_id=ensemble_id, base_models=bases, y=y, platform=self.platform
            )

        best: Dict[str, TrainedModel] = {}
        metric = self.cfg.sort_metric
        for m in bases:
            incumbent = best.get(m.algo)
            if incumbent is None or is_better(metric, m.metrics[metric], incumbent.metrics[metric]):
                best[m.algo] = m

        if len(best) < 2:
            logs.info("[AutoML] single family, StackedEnsemble_BestOfFamily skipped")
            return out

        ensemble_id = "StackedEnsemble_BestOfFamily_AutoML"
        with self.inst.timer(ensemble_id):
            out[ensemble_id] = engine.train(
                ensemble_id=ensemble_id, base_models=list(best.values()), y=y, platform=self.platform
            )
        return out
