# housestack/workflows/stacking_workflow.py
from __future__ import annotations

from datetime import datetime

from housestack.config.app_config import AppConfig
from housestack.observability.instrumentation import Instrumentation
from housestack.utils.path import PathManager
from housestack.training.pipeline import TrainingPipeline

from housestack.training.steps.dataset_load_step import DatasetLoadStep
from housestack.training.steps.dataset_split_step import DatasetSplitStep
from housestack.training.steps.recipe_prep_step import RecipePrepStep
from housestack.training.steps.fold_assign_step import FoldAssignStep
from housestack.training.steps.model_train_step import ModelTrainStep
from housestack.training.steps.grid_search_step import GridSearchStep
from housestack.training.steps.stacked_ensemble_step import StackedEnsembleStep
from housestack.training.steps.automl_step import AutoMLStep
from housestack.training.steps.leaderboard_step import LeaderboardStep
from housestack.training.steps.model_report_step import ModelReportStep
from housestack.training.steps.artifact_persist_step import ArtifactPersistStep


def new_run_id(prefix: str = "train") -> str:
    return f"{prefix}_{datetime.now():%Y%m%d_%H%M%S}"


def build_stacking_workflow(cfg: AppConfig | None = None, inst: Instrumentation | None = None) -> TrainingPipeline:
    """
    Stacking Workflow (FINAL)

    load -> split -> recipe -> folds -> base models -> grids -> stacked ensemble
         -> [automl] -> leaderboard -> [reports] -> artifact
    """

    if cfg is None:
        cfg = AppConfig.load()
    PathManager.set_run_root(cfg.platform.run_root)
    pm = PathManager()
    inst = inst or Instrumentation()

    steps = [
        DatasetLoadStep(inst=inst),
        DatasetSplitStep(inst=inst),
        RecipePrepStep(inst=inst),
        FoldAssignStep(inst=inst),
        ModelTrainStep(inst=inst),
    ]
    if cfg.grid.enabled and cfg.grid.grids:
        steps.append(GridSearchStep(inst=inst))
    if cfg.stacking.enabled:
        steps.append(StackedEnsembleStep(inst=inst))
    if cfg.automl.enabled:
        steps.append(AutoMLStep(inst=inst))

    steps.append(LeaderboardStep(inst=inst))
    if cfg.report.enabled:
        steps.append(ModelReportStep(inst=inst))
    steps.append(ArtifactPersistStep(inst=inst))

    return TrainingPipeline(steps=steps, pm=pm, inst=inst, cfg=cfg)


def build_automl_workflow(cfg: AppConfig | None = None, inst: Instrumentation | None = None) -> TrainingPipeline:
    """
    AutoML Workflow (FINAL)

    load -> split -> recipe -> folds -> automl -> leaderboard -> [reports] -> artifact
    """

    if cfg is None:
        cfg = AppConfig.load()
    PathManager.set_run_root(cfg.platform.run_root)
    pm = PathManager()
    inst = inst or Instrumentation()

    steps = [
        DatasetLoadStep(inst=inst),
        DatasetSplitStep(inst=inst),
        RecipePrepStep(inst=inst),
        FoldAssignStep(inst=inst),
        AutoMLStep(inst=inst),
        LeaderboardStep(inst=inst),
    ]
    if cfg.report.enabled:
        steps.append(ModelReportStep(inst=inst))
    steps.append(ArtifactPersistStep(inst=inst))

    return TrainingPipeline(steps=steps, pm=pm, inst=inst, cfg=cfg)
