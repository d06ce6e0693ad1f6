# tests/training/test_metrics_engine.py
import math

import numpy as np
import pytest

from housestack.training.engines.metrics_engine import (
    METRICS,
    is_better,
    regression_metrics,
    sort_ascending,
)
from housestack.utils.errors import UserInputError


def test_perfect_prediction():
    m = regression_metrics([1.0, 2.0, 3.0], [1.0, 2.0, 3.0])

    assert m["rmse"] == 0.0
    assert m["mae"] == 0.0
    assert m["r2"] == 1.0
    assert set(m) == set(METRICS)


def test_known_values():
    m = regression_metrics([0.0, 0.0], [1.0, -1.0])

    assert m["mse"] == pytest.approx(1.0)
    assert m["rmse"] == pytest.approx(1.0)
    assert m["mae"] == pytest.approx(1.0)
    assert m["mean_residual_deviance"] == m["mse"]


def test_rmsle_nan_below_minus_one():
    m = regression_metrics([1.0, 2.0], [-2.0, 2.0])
    assert math.isnan(m["rmsle"])
    assert not math.isnan(m["rmse"])


def test_invalid_input():
    with pytest.raises(ValueError):
        regression_metrics([], [])
    with pytest.raises(ValueError):
        regression_metrics([1.0], [1.0, 2.0])


def test_sort_direction():
    assert sort_ascending("rmse") is True
    assert sort_ascending("r2") is False
    with pytest.raises(UserInputError):
        sort_ascending("auc")


def test_is_better():
    assert is_better("rmse", 0.1, 0.2)
    assert not is_better("rmse", 0.3, 0.2)
    assert is_better("r2", 0.9, 0.8)
    assert is_better("rmse", 0.5, np.nan)
    assert not is_better("rmse", np.nan, 0.5)
