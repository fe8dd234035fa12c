"""Filesystem capability used by the scaffolder.

Every component that reads the template tree or writes the generated project
receives a ``FileSystem`` explicitly instead of touching the disk directly.
Two implementations are provided:

* ``LocalFileSystem`` -- the real disk, via :mod:`pathlib` and :mod:`os`.
* ``MemoryFileSystem`` -- a dictionary-backed tree, used by the test suite
  and handy for previewing a scaffold without writing anything.

Failures are reported as ``FileSystemError`` carrying the operation name and
the offending path.
"""

from __future__ import annotations

import os
import posixpath
import stat
from dataclasses import dataclass, field
from pathlib import Path, PurePath, PurePosixPath
from typing import Protocol, runtime_checkable


DEFAULT_DIR_MODE = 0o755
DEFAULT_FILE_MODE = 0o644


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class FileSystemError(OSError):
    """Raised when a create/read/write/permission operation fails."""

    def __init__(self, operation: str, path: str | PurePath, reason: str) -> None:
        self.operation = operation
        self.path = str(path)
        self.reason = reason
        super().__init__(f"{operation} failed for {self.path}: {reason}")


# ---------------------------------------------------------------------------
# Entries
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class TreeEntry:
    """A single node of a directory tree as seen by the scaffolder."""

    path: PurePath
    is_dir: bool
    mode: int

    @property
    def name(self) -> str:
        return self.path.name


# ---------------------------------------------------------------------------
# Protocol
# ---------------------------------------------------------------------------


@runtime_checkable
class FileSystem(Protocol):
    """Storage operations needed to read a template tree and write a project."""

    def stat(self, path: str | PurePath) -> TreeEntry:
        """Return the entry at *path*."""

    def list_dir(self, path: str | PurePath) -> list[TreeEntry]:
        """Return the children of directory *path*, sorted by name."""

    def exists(self, path: str | PurePath) -> bool:
        """Return whether anything exists at *path*."""

    def make_dirs(self, path: str | PurePath, mode: int = DEFAULT_DIR_MODE) -> None:
        """Create *path* and any missing ancestors; *mode* applies to *path*."""

    def read_bytes(self, path: str | PurePath) -> bytes:
        """Return the full content of file *path*."""

    def write_bytes(
        self,
        path: str | PurePath,
        data: bytes,
        mode: int = DEFAULT_FILE_MODE,
        *,
        exclusive: bool = False,
    ) -> None:
        """Write *data* to *path*, failing if it exists when *exclusive*."""

    def remove(self, path: str | PurePath) -> None:
        """Delete file *path*."""


# ---------------------------------------------------------------------------
# Local disk
# ---------------------------------------------------------------------------


class LocalFileSystem:
    """``FileSystem`` backed by the real disk."""

    def stat(self, path: str | PurePath) -> TreeEntry:
        p = Path(path)
        try:
            st = p.stat()
        except OSError as exc:
            raise FileSystemError("stat", p, exc.strerror or str(exc)) from exc
        return TreeEntry(path=p, is_dir=stat.S_ISDIR(st.st_mode), mode=stat.S_IMODE(st.st_mode))

    def list_dir(self, path: str | PurePath) -> list[TreeEntry]:
        p = Path(path)
        try:
            children = sorted(p.iterdir())
            real = p.resolve()
        except OSError as exc:
            raise FileSystemError("list", p, exc.strerror or str(exc)) from exc
        for child in children:
            # a link back to this directory or an ancestor would never end
            if child.is_symlink() and child.is_dir():
                target = child.resolve()
                if target == real or target in real.parents:
                    raise FileSystemError("list", child, "symlink loop")
        return [self.stat(child) for child in children]

    def exists(self, path: str | PurePath) -> bool:
        return Path(path).exists()

    def make_dirs(self, path: str | PurePath, mode: int = DEFAULT_DIR_MODE) -> None:
        p = Path(path)
        try:
            p.mkdir(parents=True, exist_ok=True)
            # mkdir honours the umask; the requested bits must survive it
            os.chmod(p, mode)
        except OSError as exc:
            raise FileSystemError("mkdir", p, exc.strerror or str(exc)) from exc

    def read_bytes(self, path: str | PurePath) -> bytes:
        p = Path(path)
        try:
            return p.read_bytes()
        except OSError as exc:
            raise FileSystemError("read", p, exc.strerror or str(exc)) from exc

    def write_bytes(
        self,
        path: str | PurePath,
        data: bytes,
        mode: int = DEFAULT_FILE_MODE,
        *,
        exclusive: bool = False,
    ) -> None:
        p = Path(path)
        try:
            with open(p, "xb" if exclusive else "wb") as fh:
                fh.write(data)
            os.chmod(p, mode)
        except OSError as exc:
            raise FileSystemError("write", p, exc.strerror or str(exc)) from exc

    def remove(self, path: str | PurePath) -> None:
        p = Path(path)
        try:
            p.unlink()
        except OSError as exc:
            raise FileSystemError("remove", p, exc.strerror or str(exc)) from exc


# ---------------------------------------------------------------------------
# In-memory
# ---------------------------------------------------------------------------


@dataclass
class _Node:
    is_dir: bool
    mode: int
    data: bytes = field(default=b"", repr=False)


def _key(path: str | PurePath) -> PurePosixPath:
    return PurePosixPath(posixpath.normpath(str(path)))


class MemoryFileSystem:
    """``FileSystem`` that keeps the whole tree in a dictionary.

    The filesystem root (``/``) and the current directory (``.``) always
    exist.  Writing a file requires its parent directory to exist, the same
    as on disk.
    """

    def __init__(self) -> None:
        self._nodes: dict[PurePosixPath, _Node] = {
            PurePosixPath("/"): _Node(is_dir=True, mode=DEFAULT_DIR_MODE),
            PurePosixPath("."): _Node(is_dir=True, mode=DEFAULT_DIR_MODE),
        }

    def _get(self, operation: str, path: str | PurePath) -> tuple[PurePosixPath, _Node]:
        key = _key(path)
        node = self._nodes.get(key)
        if node is None:
            raise FileSystemError(operation, key, "no such file or directory")
        return key, node

    def stat(self, path: str | PurePath) -> TreeEntry:
        key, node = self._get("stat", path)
        return TreeEntry(path=key, is_dir=node.is_dir, mode=node.mode)

    def list_dir(self, path: str | PurePath) -> list[TreeEntry]:
        key, node = self._get("list", path)
        if not node.is_dir:
            raise FileSystemError("list", key, "not a directory")
        children = sorted(
            candidate
            for candidate in self._nodes
            if candidate != key and candidate.parent == key
        )
        return [self.stat(child) for child in children]

    def exists(self, path: str | PurePath) -> bool:
        return _key(path) in self._nodes

    def make_dirs(self, path: str | PurePath, mode: int = DEFAULT_DIR_MODE) -> None:
        key = _key(path)
        for ancestor in reversed(key.parents):
            node = self._nodes.get(ancestor)
            if node is None:
                self._nodes[ancestor] = _Node(is_dir=True, mode=DEFAULT_DIR_MODE)
            elif not node.is_dir:
                raise FileSystemError("mkdir", key, f"{ancestor} is not a directory")
        node = self._nodes.get(key)
        if node is not None and not node.is_dir:
            raise FileSystemError("mkdir", key, "file exists")
        self._nodes[key] = _Node(is_dir=True, mode=mode)

    def read_bytes(self, path: str | PurePath) -> bytes:
        key, node = self._get("read", path)
        if node.is_dir:
            raise FileSystemError("read", key, "is a directory")
        return node.data

    def write_bytes(
        self,
        path: str | PurePath,
        data: bytes,
        mode: int = DEFAULT_FILE_MODE,
        *,
        exclusive: bool = False,
    ) -> None:
        key = _key(path)
        parent = self._nodes.get(key.parent)
        if parent is None or not parent.is_dir:
            raise FileSystemError("write", key, "parent directory does not exist")
        existing = self._nodes.get(key)
        if existing is not None:
            if existing.is_dir:
                raise FileSystemError("write", key, "is a directory")
            if exclusive:
                raise FileSystemError("write", key, "file exists")
        self._nodes[key] = _Node(is_dir=False, mode=mode, data=bytes(data))

    def remove(self, path: str | PurePath) -> None:
        key, node = self._get("remove", path)
        if node.is_dir:
            raise FileSystemError("remove", key, "is a directory")
        del self._nodes[key]
