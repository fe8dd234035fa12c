"""Shared pytest fixtures for the appseed test suite.

Provides reusable fixtures for:
- In-memory and on-disk filesystems
- Project configurations
- Sample template trees covering every skip rule
"""

from __future__ import annotations

from pathlib import Path

import pytest

from appseed.config import ProjectConfig
from appseed.filesystem import LocalFileSystem, MemoryFileSystem


# ---------------------------------------------------------------------------
# Sample template tree
# ---------------------------------------------------------------------------

# Relative path -> content.  Directories are implied by the file paths.
SAMPLE_TREE: dict[str, bytes] = {
    "README.md.tmpl": b"# {{ app_name }}\n",
    ".gitignore": b"/{{ app_name }}\n",
    "cnf.toml.tmpl": b'[dev]\nbind = ":4000"\nname = "{{ app_name }}"\n',
    "main.go.tmpl": b"package main\n\nimport \"{{ import_path }}/app\"\n",
    "app/app.go.tmpl": b"package app\n",
    "app/sessions.go.tmpl": b"package app\n\n// sessions for {{ app_name }}\n",
    "assets/css/bootstrap.css": b"/* bootstrap */\n",
    "assets/css/bootstrap-grid.css": b"/* grid */\n",
    "assets/css/bootstrap-reboot.css": b"/* reboot */\n",
    "assets/css/font-awesome.min.css": b"/* fa */\n",
    "assets/fonts/font-awesome/fontawesome-webfont.woff": b"\x00\x01\x02",
    "assets/js/bootstrap.js": b"// bootstrap js\n",
    "assets/js/app.js": b"// app\n",
    "i18n/en.toml": b'hello = "hello"\n',
}
SAMPLE_DIRS = ["db/migrations"]


def build_tree(fs, root: str | Path) -> None:
    """Write ``SAMPLE_TREE`` (plus empty ``SAMPLE_DIRS``) under *root*."""
    root = Path(root)
    fs.make_dirs(root)
    for rel in SAMPLE_DIRS:
        fs.make_dirs(root / rel)
    for rel, content in SAMPLE_TREE.items():
        target = root / rel
        if not fs.exists(target.parent):
            fs.make_dirs(target.parent)
        fs.write_bytes(target, content, 0o644)


# ---------------------------------------------------------------------------
# Filesystems
# ---------------------------------------------------------------------------


@pytest.fixture
def memory_fs() -> MemoryFileSystem:
    return MemoryFileSystem()


@pytest.fixture
def local_fs() -> LocalFileSystem:
    return LocalFileSystem()


@pytest.fixture
def memory_tree(memory_fs: MemoryFileSystem) -> MemoryFileSystem:
    """In-memory filesystem holding the sample tree at ``/templates``."""
    build_tree(memory_fs, "/templates")
    return memory_fs


@pytest.fixture
def local_tree(tmp_path: Path, local_fs: LocalFileSystem) -> Path:
    """The sample tree written to disk; returns its root."""
    root = tmp_path / "templates"
    build_tree(local_fs, root)
    return root


# ---------------------------------------------------------------------------
# Configurations
# ---------------------------------------------------------------------------


@pytest.fixture
def app_config() -> ProjectConfig:
    """Config for ``/my/app`` with every feature enabled."""
    return ProjectConfig(
        app_path=Path("/my/app"),
        app_name="app",
        import_path="github.com/me/app",
        silent=True,
    )


@pytest.fixture
def minimal_config() -> ProjectConfig:
    """Config for ``/my/app`` with every optional feature disabled."""
    return ProjectConfig(
        app_path=Path("/my/app"),
        app_name="app",
        no_readme=True,
        no_git_ignore=True,
        no_config=True,
        no_font_awesome=True,
        no_bootstrap_js=True,
        no_sessions=True,
        bootstrap="none",
        silent=True,
    )
