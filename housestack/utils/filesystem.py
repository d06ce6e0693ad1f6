#!filepath: housestack/utils/filesystem.py
from pathlib import Path

from housestack import logs


class FileSystem:
    """
    统一文件系统工具
    - create directories
    - atomic write (tmp file -> rename)
    """

    @staticmethod
    def ensure_dir(path: str | Path) -> Path:
        p = Path(path)
        if not p.exists():
            p.mkdir(parents=True, exist_ok=True)
            logs.debug(f"[FS] created dir: {p}")
        return p

    @staticmethod
    def safe_write(path: str | Path, data: bytes) -> None:
        """
        Atomic write:
            1) write <name>.tmp
            2) rename -> <name>
        """
        path = Path(path)
        FileSystem.ensure_dir(path.parent)

        tmp_path = path.with_suffix(path.suffix + ".tmp")

        with open(tmp_path, "wb") as f:
            f.write(data)

        tmp_path.replace(path)
        logs.debug(f"[FS] atomic write done: {path}")

