# tests/training/test_dataset_engines.py
import numpy as np
import pandas as pd
import pytest

from housestack.training.engines.dataset_load_engine import (
    DatasetLoadEngine,
    load_housing,
    make_synthetic_housing,
)
from housestack.training.engines.dataset_split_engine import DatasetSplitEngine
from housestack.utils.errors import UserInputError

Y = "Sale_Price"


# ============================================================
# load
# ============================================================
def test_synthetic_is_deterministic():
    a = make_synthetic_housing(n_rows=50, seed=1)
    b = make_synthetic_housing(n_rows=50, seed=1)
    pd.testing.assert_frame_equal(a, b)


def test_synthetic_shape(housing_df):
    assert len(housing_df) == 200
    assert (housing_df[Y] > 0).all()
    assert housing_df["Lot_Area"].isna().any()
    assert housing_df["Utilities"].nunique() == 1


def test_synthetic_too_small():
    with pytest.raises(UserInputError):
        make_synthetic_housing(n_rows=5)


def test_load_csv_and_parquet(tmp_path, housing_df):
    csv = tmp_path / "ames.csv"
    pq = tmp_path / "ames.parquet"
    housing_df.to_csv(csv, index=False)
    housing_df.to_parquet(pq, index=False)

    assert load_housing(csv).shape == housing_df.shape
    assert load_housing(pq).shape == housing_df.shape


def test_load_errors(tmp_path):
    with pytest.raises(UserInputError, match="not found"):
        load_housing(tmp_path / "missing.csv")

    txt = tmp_path / "ames.txt"
    txt.write_text("a,b\n1,2\n")
    with pytest.raises(UserInputError, match="unsupported"):
        load_housing(txt)


def test_engine_drops_rows_without_outcome(tmp_path):
    df = pd.DataFrame({Y: [1.0, np.nan, 3.0], "Lot_Area": [1, 2, 3], "Id": [1, 2, 3]})
    path = tmp_path / "d.csv"
    df.to_csv(path, index=False)

    out = DatasetLoadEngine().load(path=str(path), outcome=Y, drop_columns=["Id", "Nope"])

    assert list(out.columns) == [Y, "Lot_Area"]
    assert out[Y].tolist() == [1.0, 3.0]
    assert list(out.index) == [0, 1]


def test_engine_missing_outcome(tmp_path):
    with pytest.raises(UserInputError, match="outcome"):
        DatasetLoadEngine().load(path=None, outcome="Price", synthetic_rows=20)


# ============================================================
# split
# ============================================================
def test_split_partition(housing_df):
    train, test = DatasetSplitEngine().split(housing_df, target=Y, train_fraction=0.7, seed=123)

    assert len(train) == 140
    assert len(test) == 60
    assert set(train.index).isdisjoint(test.index)
    assert set(train.index) | set(test.index) == set(housing_df.index)


def test_split_is_reproducible(housing_df):
    a, _ = DatasetSplitEngine().split(housing_df, target=Y, seed=5)
    b, _ = DatasetSplitEngine().split(housing_df, target=Y, seed=5)
    c, _ = DatasetSplitEngine().split(housing_df, target=Y, seed=6)

    assert list(a.index) == list(b.index)
    assert list(a.index) != list(c.index)


def test_split_is_stratified(housing_df):
    train, test = DatasetSplitEngine().split(housing_df, target=Y, seed=1)
    # quartile shares of the outcome survive the split
    q = housing_df[Y].quantile([0.25, 0.5, 0.75]).to_numpy()
    share = lambda s: np.histogram(s, bins=[-np.inf, *q, np.inf])[0] / len(s)
    assert np.abs(share(train[Y]) - share(test[Y])).max() < 0.1


@pytest.mark.parametrize("fraction", [0.0, 1.0, 1.5])
def test_split_rejects_bad_fraction(housing_df, fraction):
    with pytest.raises(UserInputError):
        DatasetSplitEngine().split(housing_df, target=Y, train_fraction=fraction)


def test_split_empty_side():
    df = pd.DataFrame({Y: [1.0, 2.0, 3.0]})
    with pytest.raises(UserInputError):
        DatasetSplitEngine().split(df, target=Y, train_fraction=0.3)


def test_split_constant_outcome_falls_back_to_random():
    df = pd.DataFrame({Y: [1.0] * 10, "x": range(10)})
    train, test = DatasetSplitEngine().split(df, target=Y, train_fraction=0.5)
    assert len(train) == len(test) == 5
