#!filepath: housestack/cli.py
from __future__ import annotations

from functools import wraps
from pathlib import Path
from typing import Optional

import pandas as pd
import typer
from rich import print
from rich.markup import escape
from rich.table import Table
from rich.console import Console

from housestack import __version__, logs
from housestack.config.app_config import AppConfig
from housestack.utils.errors import UserInputError

app = typer.Typer(help="HouseStack: recipe -> CV models -> stacked ensemble / AutoML")


def _user_errors(func):
    """UserInputError -> message without traceback, exit code 2."""

    @wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except UserInputError as e:
            print(f"[red]Error:[/red] {escape(str(e))}")
            raise typer.Exit(code=2)

    return wrapper


def _load_config(config: Optional[Path], data: Optional[Path]) -> AppConfig:
    cfg = AppConfig.load(str(config) if config is not None else None)
    if data is not None:
        cfg.data.path = str(data)
    logs.reconfigure(
        log_dir=cfg.log.dir,
        rotation=cfg.log.rotation,
        retention=cfg.log.retention,
        level=cfg.log.level,
    )
    return cfg


def _print_leaderboard(table: pd.DataFrame, title: str, top_n: int = 10) -> None:
    columns = [c for c in ("model_id", "algo", "rmse", "mae", "r2", "test_rmse", "test_r2") if c in table.columns]

    out = Table(title=title)
    for c in columns:
        out.add_column(c, justify="left" if c in ("model_id", "algo") else "right")
    for _, row in table.head(top_n).iterrows():
        out.add_row(*[row[c] if isinstance(row[c], str) else f"{row[c]:.5f}" for c in columns])

    Console().print(out)


def _finish(ctx) -> None:
    if ctx.abort_pipeline:
        print(f"[red]Run {ctx.run_id} aborted:[/red] {escape(str(ctx.abort_reason))}")
        raise typer.Exit(code=1)

    if ctx.leaderboard is not None:
        _print_leaderboard(ctx.leaderboard.table, f"Leaderboard ({ctx.run_id})")
    if ctx.model_artifact is not None:
        print(f"[green]Leader {ctx.model_artifact.model_id} saved to {ctx.model_artifact.path}[/green]")


@app.command()
def version():
    print(f"v{__version__}")


@app.command()
@_user_errors
def train(
    config: Optional[Path] = typer.Option(None, "--config", "-c", help="YAML config (default: built-in base.yml)"),
    data: Optional[Path] = typer.Option(None, "--data", "-d", help="CSV / parquet housing table"),
    run_id: Optional[str] = typer.Option(None, "--run-id", help="run directory name"),
):
    """
    Base models + grid search + stacked ensemble
    """
    from housestack.workflows.stacking_workflow import build_stacking_workflow, new_run_id

    cfg = _load_config(config, data)
    run_id = run_id or new_run_id("train")

    print(f"[green]Running stacking workflow: {run_id}[/green]")
    ctx = build_stacking_workflow(cfg).run(run_id)
    _finish(ctx)


@app.command()
@_user_errors
def automl(
    config: Optional[Path] = typer.Option(None, "--config", "-c"),
    data: Optional[Path] = typer.Option(None, "--data", "-d"),
    max_models: Optional[int] = typer.Option(None, "--max-models", help="base model budget"),
    max_runtime_secs: Optional[float] = typer.Option(None, "--max-runtime-secs"),
    run_id: Optional[str] = typer.Option(None, "--run-id"),
):
    """
    AutoML: defaults, random grids, AllModels / BestOfFamily ensembles
    """
    from housestack.workflows.stacking_workflow import build_automl_workflow, new_run_id

    cfg = _load_config(config, data)
    cfg.automl.enabled = True
    if max_models is not None:
        cfg.automl.max_models = max_models
    if max_runtime_secs is not None:
        cfg.automl.max_runtime_secs = max_runtime_secs
    run_id = run_id or new_run_id("automl")

    print(f"[blue]Running AutoML workflow: {run_id}[/blue]")
    ctx = build_automl_workflow(cfg).run(run_id)
    _finish(ctx)


@app.command()
@_user_errors
def predict(
    artifact_dir: Path = typer.Argument(..., help="train run directory"),
    data_path: Path = typer.Argument(..., help="CSV / parquet table to score"),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="write predictions CSV"),
):
    """
    Score new data with a persisted leader (original outcome scale)
    """
    from housestack.pipeline.model_artifact import predict_from_artifact
    from housestack.training.engines.dataset_load_engine import load_housing
    from housestack.utils.errors import ArtifactError

    df = load_housing(data_path)
    try:
        preds = predict_from_artifact(artifact_dir, df)
    except ArtifactError as e:
        raise UserInputError(str(e)) from e

    result = pd.DataFrame({"predict": preds})
    if output is not None:
        output.parent.mkdir(parents=True, exist_ok=True)
        result.to_csv(output, index=False)
        print(f"[green]{len(result)} predictions -> {output}[/green]")
    else:
        print(result.head(20).to_string())


@app.command()
@_user_errors
def leaderboard(
    run_dir: Path = typer.Argument(..., help="train run directory"),
    top_n: int = typer.Option(10, "--top", "-n"),
):
    """
    Print the stored leaderboard of a run
    """
    from housestack.training.engines.leaderboard import read_leaderboard

    path = run_dir / "leaderboard.csv"
    if not path.exists():
        raise UserInputError(f"leaderboard.csv not found in {run_dir}")

    _print_leaderboard(read_leaderboard(path), f"Leaderboard ({run_dir.name})", top_n=top_n)


if __name__ == "__main__":
    app()

# python -m housestack.cli train --data data/ames.csv
