#!filepath: housestack/utils/path.py
from pathlib import Path
from typing import Optional

from housestack import logs


class PathManager:
    """
    Run directory layout:

    <root>/
     ├── runs/
     │     └── <run_id>/
     │           ├── model.joblib
     │           ├── artifact.json
     │           ├── leaderboard.csv
     │           ├── metrics/
     │           └── reports/
     └── config/base.yml   (optional project override)

    root defaults to the current working directory and can be moved
    with set_root() (tests).
    """

    _root: Optional[Path] = None
    _run_root_name: str = "runs"

    # ---------------------------------------------------------
    # root detection
    # ---------------------------------------------------------
    @classmethod
    def detect_root(cls) -> Path:
        root = Path.cwd().resolve()
        logs.debug(f"[PathManager] detect_root = {root}")
        return root

    @classmethod
    def root(cls) -> Path:
        if cls._root is None:
            cls._root = cls.detect_root()
        return cls._root

    @classmethod
    def set_root(cls, new_root: Path | str | None):
        if new_root is None:
            cls._root = None
        else:
            cls._root = Path(new_root).resolve()
        logs.debug(f"[PathManager] set_root = {cls._root}")

    @classmethod
    def set_run_root(cls, name: str | Path):
        """
        Relative names live under root(); absolute paths are used as-is.
        """
        cls._run_root_name = str(name)

    # ---------------------------------------------------------
    # Top-level dirs
    # ---------------------------------------------------------
    @classmethod
    def run_root(cls) -> Path:
        p = Path(cls._run_root_name)
        return p if p.is_absolute() else cls.root() / p

    # ---------------------------------------------------------
    # runs/<run_id>/
    # ---------------------------------------------------------
    @classmethod
    def train_run_dir(cls, run_id: str) -> Path:
        return cls.run_root() / run_id

    # ---------------------------------------------------------
    # config
    # ---------------------------------------------------------
    @classmethod
    def project_config_dir(cls) -> Path:
        """Package-internal config: housestack/config/"""
        return Path(__file__).resolve().parents[1] / "config"

    @classmethod
    def config_file(cls, name: str) -> Path:
        """
        Priority:
            1) <root>/config/<name>
            2) housestack/config/<name>
        """
        p1 = cls.root() / "config" / name
        if p1.exists():
            return p1

        return cls.project_config_dir() / name
