"""Unit tests for the filesystem capability (appseed.filesystem).

The same behaviour is checked against ``LocalFileSystem`` (under tmp_path)
and ``MemoryFileSystem`` so the in-memory double stays faithful to the disk.
"""

from __future__ import annotations

from pathlib import Path

import pytest

from appseed.filesystem import (
    FileSystem,
    FileSystemError,
    LocalFileSystem,
    MemoryFileSystem,
)


pytestmark = pytest.mark.unit


@pytest.fixture(params=["local", "memory"])
def fs_root(request, tmp_path: Path) -> tuple[FileSystem, Path]:
    """A filesystem plus an existing, empty directory to work in."""
    if request.param == "local":
        return LocalFileSystem(), tmp_path
    fs = MemoryFileSystem()
    root = Path("/work")
    fs.make_dirs(root)
    return fs, root


class TestFileSystemParity:
    def test_implements_protocol(self, fs_root):
        fs, _ = fs_root
        assert isinstance(fs, FileSystem)

    def test_write_and_read(self, fs_root):
        fs, root = fs_root
        fs.write_bytes(root / "a.txt", b"hello", 0o640)
        assert fs.read_bytes(root / "a.txt") == b"hello"
        entry = fs.stat(root / "a.txt")
        assert not entry.is_dir
        assert entry.mode == 0o640
        assert entry.name == "a.txt"

    def test_make_dirs_creates_ancestors(self, fs_root):
        fs, root = fs_root
        fs.make_dirs(root / "a" / "b" / "c", 0o700)
        assert fs.stat(root / "a").is_dir
        assert fs.stat(root / "a" / "b" / "c").mode == 0o700

    def test_make_dirs_existing_is_ok(self, fs_root):
        fs, root = fs_root
        fs.make_dirs(root / "d")
        fs.make_dirs(root / "d", 0o750)
        assert fs.stat(root / "d").mode == 0o750

    def test_list_dir_sorted(self, fs_root):
        fs, root = fs_root
        for name in ("b", "a", "c"):
            fs.write_bytes(root / name, b"")
        fs.make_dirs(root / "sub")
        fs.write_bytes(root / "sub" / "nested", b"")
        names = [entry.name for entry in fs.list_dir(root)]
        assert names == ["a", "b", "c", "sub"]

    def test_exists_and_remove(self, fs_root):
        fs, root = fs_root
        fs.write_bytes(root / "x", b"1")
        assert fs.exists(root / "x")
        fs.remove(root / "x")
        assert not fs.exists(root / "x")

    def test_exclusive_write_fails_when_present(self, fs_root):
        fs, root = fs_root
        fs.write_bytes(root / "x", b"1")
        with pytest.raises(FileSystemError) as exc_info:
            fs.write_bytes(root / "x", b"2", exclusive=True)
        assert exc_info.value.operation == "write"
        assert exc_info.value.path == str(root / "x")
        assert fs.read_bytes(root / "x") == b"1"

    def test_write_overwrites(self, fs_root):
        fs, root = fs_root
        fs.write_bytes(root / "x", b"1")
        fs.write_bytes(root / "x", b"22")
        assert fs.read_bytes(root / "x") == b"22"

    def test_write_without_parent_fails(self, fs_root):
        fs, root = fs_root
        with pytest.raises(FileSystemError):
            fs.write_bytes(root / "missing" / "x", b"1")

    def test_missing_path_errors(self, fs_root):
        fs, root = fs_root
        with pytest.raises(FileSystemError):
            fs.stat(root / "nope")
        with pytest.raises(FileSystemError):
            fs.read_bytes(root / "nope")
        with pytest.raises(FileSystemError):
            fs.list_dir(root / "nope")

    def test_error_is_oserror(self, fs_root):
        fs, root = fs_root
        with pytest.raises(OSError):
            fs.read_bytes(root / "nope")


class TestMemoryFileSystem:
    def test_root_exists(self):
        fs = MemoryFileSystem()
        assert fs.exists("/")
        assert fs.stat("/").is_dir

    def test_paths_normalised(self):
        fs = MemoryFileSystem()
        fs.make_dirs("/a/b/")
        fs.write_bytes("/a/./b/../b/f", b"x")
        assert fs.read_bytes("/a/b/f") == b"x"

    def test_relative_paths(self):
        fs = MemoryFileSystem()
        fs.make_dirs("myapp")
        fs.write_bytes("myapp/file", b"x")
        assert [e.name for e in fs.list_dir("myapp")] == ["file"]

    def test_make_dirs_through_file_fails(self):
        fs = MemoryFileSystem()
        fs.write_bytes("/f", b"x")
        with pytest.raises(FileSystemError, match="not a directory"):
            fs.make_dirs("/f/sub")

    def test_read_directory_fails(self):
        fs = MemoryFileSystem()
        fs.make_dirs("/d")
        with pytest.raises(FileSystemError, match="is a directory"):
            fs.read_bytes("/d")


class TestLocalFileSystem:
    def test_symlink_loop_refused(self, tmp_path: Path):
        (tmp_path / "tree" / "sub").mkdir(parents=True)
        (tmp_path / "tree" / "sub" / "back").symlink_to(tmp_path / "tree")

        with pytest.raises(FileSystemError, match="symlink loop") as exc_info:
            LocalFileSystem().list_dir(tmp_path / "tree" / "sub")
        assert exc_info.value.path == str(tmp_path / "tree" / "sub" / "back")

    def test_symlink_to_sibling_dir_listed(self, tmp_path: Path):
        (tmp_path / "shared").mkdir()
        (tmp_path / "tree").mkdir()
        (tmp_path / "tree" / "linked").symlink_to(tmp_path / "shared")

        entries = LocalFileSystem().list_dir(tmp_path / "tree")
        assert [(e.name, e.is_dir) for e in entries] == [("linked", True)]
