# tests/test_cli.py
from __future__ import annotations

import pandas as pd
import pytest
import yaml
from typer.testing import CliRunner

from housestack import __version__
from housestack.cli import app
from housestack.training.engines.dataset_load_engine import make_synthetic_housing

runner = CliRunner()


@pytest.fixture
def cli_env(tmp_path, monkeypatch, small_cfg):
    """cwd=tmp_path, small YAML config, logs under tmp_path/logs"""
    monkeypatch.chdir(tmp_path)
    small_cfg.grid.grids = small_cfg.grid.grids[:1]
    small_cfg.grid.grids[0].criteria.max_models = 2

    config = tmp_path / "small.yml"
    config.write_text(yaml.safe_dump(small_cfg.model_dump()), encoding="utf-8")
    return config


def test_version():
    result = runner.invoke(app, ["version"])
    assert result.exit_code == 0
    assert __version__ in result.output


def test_train_predict_leaderboard(cli_env, tmp_path):
    data = tmp_path / "ames.csv"
    make_synthetic_housing(n_rows=150, seed=3).to_csv(data, index=False)

    result = runner.invoke(app, ["train", "--config", str(cli_env), "--data", str(data), "--run-id", "cli_run"])
    assert result.exit_code == 0, result.output

    run_dir = tmp_path / "runs" / "cli_run"
    assert (run_dir / "artifact.json").exists()

    new = tmp_path / "new.csv"
    make_synthetic_housing(n_rows=12, seed=4).drop(columns=["Sale_Price"]).to_csv(new, index=False)
    out = tmp_path / "preds.csv"

    result = runner.invoke(app, ["predict", str(run_dir), str(new), "--output", str(out)])
    assert result.exit_code == 0, result.output
    preds = pd.read_csv(out)
    assert list(preds.columns) == ["predict"]
    assert len(preds) == 12

    result = runner.invoke(app, ["leaderboard", str(run_dir)])
    assert result.exit_code == 0, result.output
    assert "Leaderboard" in result.output


def test_train_missing_data_exits_2(cli_env, tmp_path):
    result = runner.invoke(app, ["train", "--config", str(cli_env), "--data", str(tmp_path / "none.csv")])

    assert result.exit_code == 2
    assert "file not found" in result.output
    assert "Traceback" not in result.output


def test_train_missing_config_exits_2(tmp_path):
    result = runner.invoke(app, ["train", "--config", str(tmp_path / "nope.yml")])

    assert result.exit_code == 2
    assert "config file not found" in result.output
    assert "Traceback" not in result.output


def test_train_invalid_config_exits_2(tmp_path):
    bad = tmp_path / "bad.yml"
    bad.write_text(yaml.safe_dump({"recipe": {"steps": [{"kind": "bogus"}]}}), encoding="utf-8")

    result = runner.invoke(app, ["train", "--config", str(bad)])

    assert result.exit_code == 2
    assert "invalid config" in result.output


def test_predict_without_artifact_exits_2(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    data = tmp_path / "new.csv"
    make_synthetic_housing(n_rows=12).to_csv(data, index=False)

    result = runner.invoke(app, ["predict", str(tmp_path), str(data)])
    assert result.exit_code == 2


def test_leaderboard_missing_exits_2(tmp_path):
    result = runner.invoke(app, ["leaderboard", str(tmp_path)])
    assert result.exit_code == 2
    assert "leaderboard.csv" in result.output


def test_automl_command(cli_env, tmp_path):
    result = runner.invoke(
        app, ["automl", "--config", str(cli_env), "--max-models", "2", "--run-id", "auto_run"]
    )
    assert result.exit_code == 0, result.output

    board = pd.read_csv(tmp_path / "runs" / "auto_run" / "leaderboard.csv")
    base = board[board["algo"] != "stackedensemble"]
    assert len(base) == 2
