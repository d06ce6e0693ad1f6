#!filepath: tests/base_test/test_path.py
from pathlib import Path

from housestack.utils.path import PathManager


def test_root_follows_set_root(tmp_path):
    PathManager.set_root(tmp_path)
    assert PathManager.root() == tmp_path.resolve()


def test_run_layout(tmp_path):
    PathManager.set_root(tmp_path)

    run_dir = PathManager.train_run_dir("r1")
    assert run_dir == tmp_path.resolve() / "runs" / "r1"


def test_run_root_relative_and_absolute(tmp_path):
    PathManager.set_root(tmp_path)

    PathManager.set_run_root("experiments")
    assert PathManager.run_root() == tmp_path.resolve() / "experiments"

    absolute = tmp_path / "elsewhere"
    PathManager.set_run_root(absolute)
    assert PathManager.run_root() == absolute


def test_config_file_prefers_project_override(tmp_path):
    PathManager.set_root(tmp_path)

    packaged = PathManager.config_file("base.yml")
    assert packaged == PathManager.project_config_dir() / "base.yml"
    assert packaged.exists()

    (tmp_path / "config").mkdir()
    override = tmp_path / "config" / "base.yml"
    override.write_text("log: {}\n")
    assert Path(PathManager.config_file("base.yml")) == override.resolve()
