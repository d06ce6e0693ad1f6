#!filepath: tests/base_test/test_filesystem.py
from housestack.utils.filesystem import FileSystem


def test_ensure_dir(tmp_path):
    """ensure_dir 能正确创建多级目录"""
    new_dir = tmp_path / "a" / "b"
    assert not new_dir.exists()

    FileSystem.ensure_dir(new_dir)
    assert new_dir.is_dir()


def test_safe_write(tmp_path):
    """safe_write 原子写入并不残留 tmp 文件"""
    file_path = tmp_path / "run" / "artifact.json"

    FileSystem.safe_write(file_path, b"{}")

    assert file_path.read_bytes() == b"{}"
    assert not file_path.with_suffix(".json.tmp").exists()

