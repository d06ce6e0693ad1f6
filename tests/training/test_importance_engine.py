# tests/training/test_importance_engine.py
import pytest

from housestack.config.model_config import ModelFamilyConfig
from housestack.pipeline.model_artifact import ModelSpec
from housestack.training.engines.importance_engine import VariableImportanceEngine
from housestack.training.engines.registry import resolve_model_train_engine
from housestack.training.engines.stacked_ensemble_engine import StackedEnsemble


def _train(prepped, family, params):
    _, X, y, _, _ = prepped
    engine = resolve_model_train_engine(spec=ModelSpec(family=family), cfg=ModelFamilyConfig(params=params))
    return engine.train(X=X, y=y, model_id=f"{family}_1")


@pytest.mark.parametrize(
    "family, params",
    [
        ("rf", {"n_estimators": 15}),
        ("glm", {}),
        ("knn", {"n_neighbors": 5}),
    ],
)
def test_importance_is_normalized_and_sorted(prepped, family, params):
    _, _, _, X_test, y_test = prepped
    model = _train(prepped, family, params)

    imp = VariableImportanceEngine(n_repeats=2).compute(model, X_test, y_test)

    assert set(imp.index) == set(model.feature_names)
    assert imp.sum() == pytest.approx(1.0)
    assert imp.is_monotonic_decreasing
    assert (imp >= 0).all()


def test_quality_drives_tree_importance(prepped):
    model = _train(prepped, "rf", {"n_estimators": 30})
    imp = VariableImportanceEngine().compute(model)

    top = list(imp.index[:5])
    assert any(c.startswith(("Gr_Liv_Area", "Overall_Qual", "Year_Built")) for c in top)


def test_permutation_needs_data(prepped):
    model = _train(prepped, "knn", {"n_neighbors": 5})
    assert VariableImportanceEngine().compute(model) is None


def test_stacked_ensemble_has_no_importance(prepped):
    glm = _train(prepped, "glm", {})
    ensemble = StackedEnsemble(model_id="se", base_models=[glm, glm], metalearner=glm)
    assert VariableImportanceEngine().compute(ensemble) is None
